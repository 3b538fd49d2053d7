"""Exception types shared by the registry, resolver and stores."""


class ShortLinkError(Exception):
    """Base class for all short-link errors."""


class ValidationError(ShortLinkError):
    """Input failed validation. The message is safe to show to the user."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class SlugTakenError(ShortLinkError):
    """The short code is already in use."""

    message = "This custom slug is already taken"

    def __init__(self, short_code: str = ""):
        super().__init__(self.message)
        # Kept for logs only, never rendered to callers
        self.short_code = short_code


class UnauthorizedError(ShortLinkError):
    """No authenticated owner for the request."""

    message = "Unauthorized"


class NotFoundOrUnauthorizedError(ShortLinkError):
    """The link does not exist or belongs to someone else."""

    message = "Link not found or unauthorized"


class InvalidStoredUrlError(ShortLinkError):
    """A stored destination URL failed re-validation."""

    message = "Invalid redirect URL"


class StorageError(ShortLinkError):
    """Unexpected failure reported by the storage backend."""


class DuplicateShortCodeError(StorageError):
    """The store rejected a write because the short code already exists."""

    def __init__(self, short_code: str):
        super().__init__(f"Short code '{short_code}' already exists")
        self.short_code = short_code
