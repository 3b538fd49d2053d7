"""Data models for the short-link store."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict


@dataclass(frozen=True)
class Link:
    """A stored short-code to URL mapping."""
    
    id: int
    owner_id: str
    original_url: str
    short_code: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Link":
        """Create from a database row (asyncpg Record or mapping)."""
        return cls(
            id=record["id"],
            owner_id=record["user_id"],
            original_url=record["original_url"],
            short_code=record["short_code"],
            created_at=record["created_at"],
            updated_at=record["updated_at"],
        )


@dataclass(frozen=True)
class NewLink:
    """Insert payload for a link; the store assigns id and timestamps."""
    
    owner_id: str
    original_url: str
    short_code: str
