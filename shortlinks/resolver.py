"""Redirect resolution for public short links."""

import enum
import logging
from dataclasses import dataclass
from typing import Optional

from .common.validators import is_redirect_safe_scheme, looks_like_short_code, parse_absolute_url
from .database.base import LinkStoreBase


class ResolveOutcome(str, enum.Enum):
    REDIRECT = "redirect"
    NOT_FOUND = "not_found"
    INVALID_STORED_URL = "invalid_stored_url"


@dataclass(frozen=True)
class Resolution:
    """Result of resolving a short code."""
    
    outcome: ResolveOutcome
    status_code: int
    url: Optional[str] = None
    
    @property
    def is_redirect(self) -> bool:
        return self.outcome is ResolveOutcome.REDIRECT


NOT_FOUND = Resolution(ResolveOutcome.NOT_FOUND, 404)
INVALID_STORED_URL = Resolution(ResolveOutcome.INVALID_STORED_URL, 400)


class RedirectResolver:
    """Read-only lookup of a short code into a safe redirect.
    
    The stored URL is parsed again on every resolve and only http and https
    targets are ever redirected to, whatever was accepted at write time.
    """
    
    REDIRECT_STATUS = 301
    
    def __init__(self, store: LinkStoreBase, logger: Optional[logging.Logger] = None):
        self.store = store
        self.logger = logger or logging.getLogger(__name__)
    
    async def resolve(self, short_code: str) -> Resolution:
        """Resolve a short code.
        
        Args:
            short_code: The code from the request path
            
        Returns:
            A redirect to the exact stored URL, NOT_FOUND or INVALID_STORED_URL
            
        Raises:
            StorageError: If the store lookup fails
        """
        if not looks_like_short_code(short_code):
            self.logger.debug(f"Rejected malformed short code: {short_code!r}")
            return NOT_FOUND
        
        link = await self.store.find_by_short_code(short_code)
        if link is None:
            self.logger.info(f"Short code not found: {short_code}")
            return NOT_FOUND
        
        try:
            parsed = parse_absolute_url(link.original_url)
        except ValueError as e:
            self.logger.warning(f"Stored URL for {short_code} (link {link.id}) failed to parse: {e}")
            return INVALID_STORED_URL
        
        if not is_redirect_safe_scheme(parsed):
            self.logger.warning(
                f"Stored URL for {short_code} (link {link.id}) has disallowed scheme {parsed.scheme!r}"
            )
            return INVALID_STORED_URL
        
        self.logger.debug(f"Resolved {short_code} -> {link.original_url}")
        return Resolution(ResolveOutcome.REDIRECT, self.REDIRECT_STATUS, link.original_url)
