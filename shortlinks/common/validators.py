"""Validation utilities for links and short codes."""

import re
from typing import Optional, Tuple
from urllib.parse import SplitResult, urlsplit


MAX_URL_LENGTH = 2048
MIN_SLUG_LENGTH = 3
MAX_SLUG_LENGTH = 20

SHORT_CODE_PATTERN = re.compile(r"^[a-zA-Z0-9_-]{3,20}$")
SLUG_CHARS_PATTERN = re.compile(r"^[a-zA-Z0-9_-]*$")

# RFC 3986: scheme = ALPHA *( ALPHA / DIGIT / "+" / "-" / "." )
_SCHEME_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*$")
_CONTROL_CHARS_PATTERN = re.compile(r"[\x00-\x1f\x7f]")

# Schemes that are meaningless without an authority component
HOST_REQUIRED_SCHEMES = {"http", "https", "ws", "wss", "ftp"}
REDIRECT_SCHEMES = {"http", "https"}

INVALID_URL_MESSAGE = "Please enter a valid URL"
URL_TOO_LONG_MESSAGE = f"URL must be at most {MAX_URL_LENGTH} characters"
URL_SCHEME_MESSAGE = "URL must use http or https protocol"
SLUG_CHARS_MESSAGE = "Only letters, numbers, hyphens, and underscores allowed"
SLUG_TOO_SHORT_MESSAGE = f"Custom slug must be at least {MIN_SLUG_LENGTH} characters"
SLUG_TOO_LONG_MESSAGE = f"Custom slug must be at most {MAX_SLUG_LENGTH} characters"


def parse_absolute_url(url: str) -> SplitResult:
    """Parse a string as an absolute URL.
    
    Rejects whitespace and control characters anywhere in the string, so a
    value that parses can be placed in a ``Location`` header verbatim.
    
    Args:
        url: The URL to parse
        
    Returns:
        The split URL
        
    Raises:
        ValueError: If the string is not a syntactically valid absolute URL
    """
    if not url or not isinstance(url, str):
        raise ValueError("URL is empty")
    
    if _CONTROL_CHARS_PATTERN.search(url) or any(ch.isspace() for ch in url):
        raise ValueError("URL contains whitespace or control characters")
    
    scheme, separator, remainder = url.partition(":")
    if not separator or not remainder or not _SCHEME_PATTERN.fullmatch(scheme):
        raise ValueError("URL has no valid scheme")
    
    # urlsplit raises ValueError for malformed IPv6 hosts
    parsed = urlsplit(url)
    
    if parsed.scheme.lower() in HOST_REQUIRED_SCHEMES and not parsed.hostname:
        raise ValueError("URL has no host")

    # Accessing port raises ValueError for non-numeric or out-of-range ports
    parsed.port
    
    return parsed


def is_redirect_safe_scheme(parsed: SplitResult) -> bool:
    """Check whether a parsed URL may be used as a redirect target."""
    return parsed.scheme.lower() in REDIRECT_SCHEMES


def is_valid_url(url: str, require_http: bool = False) -> Tuple[bool, str]:
    """Validate a destination URL.
    
    Args:
        url: The URL to validate
        require_http: Also reject schemes other than http and https
        
    Returns:
        Tuple of (is_valid, error_message)
    """
    try:
        parsed = parse_absolute_url(url)
    except ValueError:
        return False, INVALID_URL_MESSAGE
    
    if len(url) > MAX_URL_LENGTH:
        return False, URL_TOO_LONG_MESSAGE
    
    if require_http and not is_redirect_safe_scheme(parsed):
        return False, URL_SCHEME_MESSAGE
    
    return True, ""


def is_valid_short_code(short_code: str) -> Tuple[bool, str]:
    """Validate a custom short code.
    
    Constraints are checked in a fixed order and the first failure wins.
    
    Args:
        short_code: The short code to validate
        
    Returns:
        Tuple of (is_valid, error_message)
    """
    if not isinstance(short_code, str):
        return False, SLUG_CHARS_MESSAGE
    
    if not SLUG_CHARS_PATTERN.fullmatch(short_code):
        return False, SLUG_CHARS_MESSAGE
    
    if len(short_code) < MIN_SLUG_LENGTH:
        return False, SLUG_TOO_SHORT_MESSAGE
    
    if len(short_code) > MAX_SLUG_LENGTH:
        return False, SLUG_TOO_LONG_MESSAGE
    
    return True, ""


def normalize_slug(custom_slug: Optional[str]) -> Optional[str]:
    """Strip a user-supplied slug, mapping blank input to None."""
    if custom_slug is None:
        return None
    stripped = custom_slug.strip()
    return stripped or None


def looks_like_short_code(value: str) -> bool:
    """Cheap check used before a lookup; anything else cannot be stored."""
    return bool(value) and SHORT_CODE_PATTERN.fullmatch(value) is not None
