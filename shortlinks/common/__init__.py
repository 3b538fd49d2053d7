"""Common utilities for the short-link service."""

from .validators import (
    is_valid_url,
    is_valid_short_code,
    parse_absolute_url,
    is_redirect_safe_scheme,
    normalize_slug,
)
from .headers import extract_forwarded_headers, build_base_url, get_header
from .url_builder import build_short_url, normalize_path_prefix
from .logging_config import setup_logging

__all__ = [
    "is_valid_url",
    "is_valid_short_code",
    "parse_absolute_url",
    "is_redirect_safe_scheme",
    "normalize_slug",
    "extract_forwarded_headers",
    "build_base_url",
    "get_header",
    "build_short_url",
    "normalize_path_prefix",
    "setup_logging",
]
