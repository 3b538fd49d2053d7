"""In-process link store for tests and local development."""

import asyncio
import itertools
import logging
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from ..errors import DuplicateShortCodeError
from .base import LinkStoreBase
from .models import Link, NewLink


class MemoryLinkStore(LinkStoreBase):
    """Dictionary-backed store with the same uniqueness rules as PostgreSQL.
    
    Every mutation runs under one lock, which plays the role of the database's
    row locking and unique index.
    """
    
    def __init__(self, db_config: str = "memory://", logger: Optional[logging.Logger] = None):
        super().__init__(db_config)
        self.logger = logger or logging.getLogger(__name__)
        self._links: Dict[int, Link] = {}
        self._ids_by_code: Dict[str, int] = {}
        self._id_sequence = itertools.count(1)
        self._lock = asyncio.Lock()
        self._last_timestamp: Optional[datetime] = None
    
    def _now(self) -> datetime:
        """Current UTC time, strictly after the previous timestamp handed out."""
        now = datetime.now(timezone.utc)
        if self._last_timestamp is not None and now <= self._last_timestamp:
            now = self._last_timestamp + timedelta(microseconds=1)
        self._last_timestamp = now
        return now
    
    async def find_by_short_code(self, short_code: str) -> Optional[Link]:
        link_id = self._ids_by_code.get(short_code)
        if link_id is None:
            return None
        return self._links.get(link_id)
    
    async def find_by_id(self, link_id: int) -> Optional[Link]:
        return self._links.get(link_id)
    
    async def find_all_by_owner(self, owner_id: str) -> List[Link]:
        owned = [link for link in self._links.values() if link.owner_id == owner_id]
        return sorted(owned, key=lambda link: (link.updated_at, link.id), reverse=True)
    
    async def insert(self, new_link: NewLink) -> Link:
        async with self._lock:
            if new_link.short_code in self._ids_by_code:
                raise DuplicateShortCodeError(new_link.short_code)
            
            now = self._now()
            link = Link(
                id=next(self._id_sequence),
                owner_id=new_link.owner_id,
                original_url=new_link.original_url,
                short_code=new_link.short_code,
                created_at=now,
                updated_at=now,
            )
            self._links[link.id] = link
            self._ids_by_code[link.short_code] = link.id
        
        self.logger.debug(f"Inserted link {link.id}: {link.short_code}")
        return link
    
    async def update_by_id(
        self,
        link_id: int,
        fields: Dict[str, Any],
        owner_id: Optional[str] = None,
    ) -> Optional[Link]:
        fields = self._check_fields(fields)
        
        async with self._lock:
            current = self._links.get(link_id)
            if current is None or (owner_id is not None and current.owner_id != owner_id):
                return None
            
            new_code = fields.get("short_code", current.short_code)
            if new_code != current.short_code and new_code in self._ids_by_code:
                raise DuplicateShortCodeError(new_code)
            
            updated = replace(current, **fields, updated_at=self._now())
            self._links[link_id] = updated
            if new_code != current.short_code:
                del self._ids_by_code[current.short_code]
                self._ids_by_code[new_code] = link_id
        
        return updated
    
    async def delete_by_id(self, link_id: int, owner_id: Optional[str] = None) -> bool:
        async with self._lock:
            current = self._links.get(link_id)
            if current is None or (owner_id is not None and current.owner_id != owner_id):
                return False
            del self._links[link_id]
            del self._ids_by_code[current.short_code]
        
        return True
    
    async def health_check(self) -> bool:
        return True
    
    async def close(self) -> None:
        self._links.clear()
        self._ids_by_code.clear()
