"""Link registry: creation, update and deletion of owned short links."""

import logging
from typing import List, Optional

from .common.validators import is_valid_short_code, is_valid_url, normalize_slug
from .database.base import LinkStoreBase
from .database.models import Link, NewLink
from .errors import (
    DuplicateShortCodeError,
    NotFoundOrUnauthorizedError,
    SlugTakenError,
    ValidationError,
)
from .shortcode import ShortCodeGenerator


class LinkRegistry:
    """Service layer for link ownership and short code allocation.
    
    All coordination is left to the store: inserts rely on its uniqueness
    constraint, and updates and deletes are scoped by both id and owner in a
    single statement.
    """
    
    def __init__(
        self,
        store: LinkStoreBase,
        short_code_generator: Optional[ShortCodeGenerator] = None,
        logger: Optional[logging.Logger] = None,
        max_collision_retries: int = 5,
        enforce_scheme_on_write: bool = False,
    ):
        """Initialize link registry.
        
        Args:
            store: Link store instance
            short_code_generator: Optional short code generator
            logger: Optional logger
            max_collision_retries: Attempts at inserting a generated code
            enforce_scheme_on_write: Reject non-http(s) URLs at write time too
        """
        if max_collision_retries < 1:
            raise ValueError("max_collision_retries must be at least 1")
        
        self.store = store
        self.generator = short_code_generator or ShortCodeGenerator()
        self.logger = logger or logging.getLogger(__name__)
        self.max_collision_retries = max_collision_retries
        self.enforce_scheme_on_write = enforce_scheme_on_write
    
    async def create(
        self,
        owner_id: str,
        url: str,
        custom_slug: Optional[str] = None,
    ) -> Link:
        """Create a new link for an owner.
        
        Args:
            owner_id: The authenticated owner
            url: Destination URL
            custom_slug: Optional short code chosen by the owner
            
        Returns:
            The stored link
            
        Raises:
            ValidationError: If the URL or slug is malformed
            SlugTakenError: If the slug is taken, or generated codes kept colliding
        """
        self._validate_url(url)
        slug = self._validate_slug(custom_slug)
        
        if slug is not None:
            try:
                link = await self.store.insert(NewLink(owner_id, url, slug))
            except DuplicateShortCodeError:
                self.logger.info(f"Custom short code already taken: {slug}")
                raise SlugTakenError(slug)
        else:
            link = await self._insert_with_generated_code(owner_id, url)
        
        self.logger.info(f"Created link {link.id}: {link.short_code} -> {link.original_url}")
        return link
    
    async def update(
        self,
        link_id: int,
        owner_id: str,
        url: str,
        custom_slug: Optional[str] = None,
    ) -> Link:
        """Update the URL and optionally the short code of an owned link.
        
        Raises:
            ValidationError: If the URL or slug is malformed
            SlugTakenError: If the new slug belongs to another link
            NotFoundOrUnauthorizedError: If no link with this id is owned by owner_id
        """
        self._validate_url(url)
        slug = self._validate_slug(custom_slug)
        
        fields = {"original_url": url}
        if slug is not None:
            fields["short_code"] = slug
        
        try:
            link = await self.store.update_by_id(link_id, fields, owner_id=owner_id)
        except DuplicateShortCodeError:
            self.logger.info(f"Short code already taken on update: {slug}")
            raise SlugTakenError(slug or "")
        
        if link is None:
            self.logger.info(f"Update refused for link {link_id}: not found or not owned")
            raise NotFoundOrUnauthorizedError()
        
        self.logger.info(f"Updated link {link.id}: {link.short_code} -> {link.original_url}")
        return link
    
    async def delete(self, link_id: int, owner_id: str) -> bool:
        """Delete an owned link.
        
        Returns:
            True if deleted; False if it does not exist or is not owned by owner_id
        """
        deleted = await self.store.delete_by_id(link_id, owner_id=owner_id)
        if deleted:
            self.logger.info(f"Deleted link {link_id}")
        else:
            self.logger.debug(f"Nothing deleted for link {link_id}")
        return deleted
    
    async def list_by_owner(self, owner_id: str) -> List[Link]:
        """List an owner's links, most recently updated first."""
        return await self.store.find_all_by_owner(owner_id)
    
    async def _insert_with_generated_code(self, owner_id: str, url: str) -> Link:
        """Insert with random codes, retrying on collision a bounded number of times."""
        for attempt in range(1, self.max_collision_retries + 1):
            code = self.generator.generate_random()
            try:
                return await self.store.insert(NewLink(owner_id, url, code))
            except DuplicateShortCodeError:
                self.logger.warning(
                    f"Generated short code collided (attempt {attempt}/{self.max_collision_retries})"
                )
        
        self.logger.error(
            f"Unable to allocate a short code after {self.max_collision_retries} attempts"
        )
        raise SlugTakenError()
    
    def _validate_url(self, url: str) -> None:
        is_valid, error = is_valid_url(url, require_http=self.enforce_scheme_on_write)
        if not is_valid:
            raise ValidationError(error)
    
    @staticmethod
    def _validate_slug(custom_slug: Optional[str]) -> Optional[str]:
        slug = normalize_slug(custom_slug)
        if slug is None:
            return None
        is_valid, error = is_valid_short_code(slug)
        if not is_valid:
            raise ValidationError(error)
        return slug
