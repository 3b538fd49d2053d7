"""Database layer for the short-link service."""

from .base import LinkStoreBase, UPDATABLE_FIELDS
from .memory import MemoryLinkStore
from .postgres import PostgresLinkStore
from .models import Link, NewLink

__all__ = [
    "LinkStoreBase",
    "UPDATABLE_FIELDS",
    "MemoryLinkStore",
    "PostgresLinkStore",
    "Link",
    "NewLink",
]
