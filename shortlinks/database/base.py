"""Abstract base class for link store implementations."""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from .models import Link, NewLink


# Columns a caller may change through update_by_id
UPDATABLE_FIELDS = frozenset({"original_url", "short_code"})


class LinkStoreBase(ABC):
    """Abstract base class for link storage operations.
    
    Implementations enforce short code uniqueness themselves, so racing
    writers cannot both claim a code. Unexpected backend failures are raised
    as ``StorageError``.
    """
    
    def __init__(self, db_config: str):
        """Initialize store.
        
        Args:
            db_config: Database connection string
        """
        self.db_config = db_config
    
    @abstractmethod
    async def find_by_short_code(self, short_code: str) -> Optional[Link]:
        """Get the link with exactly this short code.
        
        Args:
            short_code: The short code to lookup
            
        Returns:
            The link if found, None otherwise
        """
        pass
    
    @abstractmethod
    async def find_by_id(self, link_id: int) -> Optional[Link]:
        """Get a link by its id.
        
        Args:
            link_id: The link id
            
        Returns:
            The link if found, None otherwise
        """
        pass
    
    @abstractmethod
    async def find_all_by_owner(self, owner_id: str) -> List[Link]:
        """List an owner's links, most recently updated first.
        
        Args:
            owner_id: The owner to filter on
            
        Returns:
            Links ordered by updated_at descending, then id descending
        """
        pass
    
    @abstractmethod
    async def insert(self, new_link: NewLink) -> Link:
        """Insert a new link.
        
        Args:
            new_link: The link to insert
            
        Returns:
            The stored link with id and timestamps populated
            
        Raises:
            DuplicateShortCodeError: If the short code is already taken
        """
        pass
    
    @abstractmethod
    async def update_by_id(
        self,
        link_id: int,
        fields: Dict[str, Any],
        owner_id: Optional[str] = None,
    ) -> Optional[Link]:
        """Update a link in a single write and refresh its updated_at.
        
        Args:
            link_id: The link to update
            fields: New values, keys limited to UPDATABLE_FIELDS
            owner_id: When given, only a link owned by this id is updated
            
        Returns:
            The updated link, or None if no row matched
            
        Raises:
            DuplicateShortCodeError: If the new short code is already taken
        """
        pass
    
    @abstractmethod
    async def delete_by_id(self, link_id: int, owner_id: Optional[str] = None) -> bool:
        """Delete a link in a single write.
        
        Args:
            link_id: The link to delete
            owner_id: When given, only a link owned by this id is deleted
            
        Returns:
            True if a row was deleted, False otherwise
        """
        pass
    
    async def ensure_schema(self) -> None:
        """Create tables if the backend needs them."""
        return None
    
    @abstractmethod
    async def health_check(self) -> bool:
        """Check if the store is reachable.
        
        Returns:
            True if healthy, False otherwise
        """
        pass
    
    @abstractmethod
    async def close(self) -> None:
        """Release store resources."""
        pass
    
    @staticmethod
    def _check_fields(fields: Dict[str, Any]) -> Dict[str, Any]:
        """Reject unknown update fields."""
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update fields: {', '.join(sorted(unknown))}")
        return dict(fields)
