"""Core business logic for the short-link service."""

from .shortcode import ShortCodeGenerator
from .registry import LinkRegistry
from .resolver import RedirectResolver, Resolution, ResolveOutcome
from .actions import LinkActions, ActionResult

__all__ = [
    "ShortCodeGenerator",
    "LinkRegistry",
    "RedirectResolver",
    "Resolution",
    "ResolveOutcome",
    "LinkActions",
    "ActionResult",
]
