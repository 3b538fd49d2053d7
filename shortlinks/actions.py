"""Mutation entry points returning user-facing result objects.

These are what the dashboard calls. Every failure is reduced to a short
message that is safe to render; internal detail only reaches the logs.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from .database.models import Link
from .errors import (
    NotFoundOrUnauthorizedError,
    SlugTakenError,
    UnauthorizedError,
    ValidationError,
)
from .registry import LinkRegistry


@dataclass
class ActionResult:
    """Outcome of a create, update or delete request."""
    
    success: bool = False
    error: Optional[str] = None
    short_code: Optional[str] = None
    link_id: Optional[int] = None
    status_code: int = 200
    
    @classmethod
    def failure(cls, error: str, status_code: int) -> "ActionResult":
        return cls(success=False, error=error, status_code=status_code)


@dataclass
class ListResult:
    """Outcome of listing the caller's links."""
    
    success: bool = False
    error: Optional[str] = None
    links: List[Link] = field(default_factory=list)
    status_code: int = 200


class LinkActions:
    """Authenticated create/update/delete/list with error mapping."""
    
    def __init__(
        self,
        registry: LinkRegistry,
        environment: str = "development",
        logger: Optional[logging.Logger] = None,
    ):
        self.registry = registry
        self.environment = environment
        self.logger = logger or logging.getLogger(__name__)
    
    @property
    def log_error_details(self) -> bool:
        return self.environment.lower() != "production"
    
    async def create_link(
        self,
        owner_id: Optional[str],
        url: str,
        custom_slug: Optional[str] = None,
    ) -> ActionResult:
        """Create a link for the authenticated owner."""
        try:
            self._require_owner(owner_id)
            link = await self.registry.create(owner_id, url, custom_slug)
            return ActionResult(
                success=True,
                short_code=link.short_code,
                link_id=link.id,
                status_code=201,
            )
        except UnauthorizedError as e:
            return ActionResult.failure(e.message, 401)
        except ValidationError as e:
            return ActionResult.failure(e.message, 400)
        except SlugTakenError as e:
            return ActionResult.failure(e.message, 409)
        except Exception:
            self._log_failure("creating link")
            return ActionResult.failure("Failed to create link. Please try again.", 500)
    
    async def update_link(
        self,
        owner_id: Optional[str],
        link_id: int,
        url: str,
        custom_slug: Optional[str] = None,
    ) -> ActionResult:
        """Update a link owned by the authenticated owner."""
        try:
            self._require_owner(owner_id)
            link = await self.registry.update(link_id, owner_id, url, custom_slug)
            return ActionResult(success=True, short_code=link.short_code, link_id=link.id)
        except UnauthorizedError as e:
            return ActionResult.failure(e.message, 401)
        except ValidationError as e:
            return ActionResult.failure(e.message, 400)
        except SlugTakenError as e:
            return ActionResult.failure(e.message, 409)
        except NotFoundOrUnauthorizedError as e:
            return ActionResult.failure(e.message, 404)
        except Exception:
            self._log_failure("updating link")
            return ActionResult.failure("Failed to update link. Please try again.", 500)
    
    async def delete_link(self, owner_id: Optional[str], link_id: int) -> ActionResult:
        """Delete a link owned by the authenticated owner."""
        try:
            self._require_owner(owner_id)
            if not await self.registry.delete(link_id, owner_id):
                raise NotFoundOrUnauthorizedError()
            return ActionResult(success=True, link_id=link_id)
        except UnauthorizedError as e:
            return ActionResult.failure(e.message, 401)
        except NotFoundOrUnauthorizedError as e:
            return ActionResult.failure(e.message, 404)
        except Exception:
            self._log_failure("deleting link")
            return ActionResult.failure("Failed to delete link. Please try again.", 500)
    
    async def list_links(self, owner_id: Optional[str]) -> ListResult:
        """List the authenticated owner's links, most recently updated first."""
        try:
            self._require_owner(owner_id)
            links = await self.registry.list_by_owner(owner_id)
            return ListResult(success=True, links=links)
        except UnauthorizedError as e:
            return ListResult(error=e.message, status_code=401)
        except Exception:
            self._log_failure("listing links")
            return ListResult(error="Failed to load links. Please try again.", status_code=500)
    
    @staticmethod
    def _require_owner(owner_id: Optional[str]) -> None:
        if not owner_id:
            raise UnauthorizedError(UnauthorizedError.message)
    
    def _log_failure(self, action: str) -> None:
        if self.log_error_details:
            self.logger.exception(f"Error {action}")
        else:
            self.logger.error(f"Error {action}")
