"""Header parsing utilities."""

from typing import Dict, Optional


def _first_value(value: Optional[str]) -> Optional[str]:
    """First entry of a comma-separated header added to by each proxy hop."""
    if not value:
        return None
    first = value.split(",")[0].strip()
    return first or None


def extract_forwarded_headers(headers: Dict[str, str]) -> Dict[str, Optional[str]]:
    """Extract X-Forwarded-* headers from request.
    
    Proto and host keep only the entry set by the outermost proxy.
    
    Args:
        headers: Request headers dictionary
        
    Returns:
        Dictionary with forwarded_proto, forwarded_host, forwarded_for
    """
    # Convert headers to lowercase for case-insensitive lookup
    headers_lower = {k.lower(): v for k, v in headers.items()}
    
    return {
        "forwarded_proto": _first_value(headers_lower.get("x-forwarded-proto")),
        "forwarded_host": _first_value(headers_lower.get("x-forwarded-host")),
        "forwarded_for": headers_lower.get("x-forwarded-for"),
    }


def build_base_url(
    headers: Dict[str, str],
    fallback_base_url: str,
    request_scheme: Optional[str] = None,
    request_host: Optional[str] = None,
) -> str:
    """Build the base URL used in short URLs handed back to owners.
    
    Priority:
    1. X-Forwarded-Proto + X-Forwarded-Host
    2. Request scheme + host
    3. Fallback base URL from config
    
    Returns:
        Base URL without a trailing slash (e.g., https://sho.rt)
    """
    forwarded = extract_forwarded_headers(headers)
    
    # Try X-Forwarded headers first (from proxy)
    if forwarded["forwarded_proto"] and forwarded["forwarded_host"]:
        return f"{forwarded['forwarded_proto']}://{forwarded['forwarded_host']}"
    
    # Try request scheme and host
    if request_scheme and request_host:
        return f"{request_scheme}://{request_host}"
    
    # Fall back to configured base URL
    return fallback_base_url.rstrip("/")


def get_header(headers: Dict[str, str], name: str) -> Optional[str]:
    """Case-insensitive header lookup returning a stripped, non-empty value."""
    key = name.lower()
    for k, v in headers.items():
        if k.lower() == key and v and v.strip():
            return v.strip()
    return None
