"""Pydantic schemas for API requests and responses."""

from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime


class LinkRequest(BaseModel):
    """Request to create or update a link.
    
    Field constraints are checked by the registry so that the first failing
    constraint's message is returned verbatim.
    """
    
    url: str = Field(..., description="Destination URL (absolute, at most 2048 characters)")
    custom_slug: Optional[str] = Field(
        None,
        description="Optional short code: 3-20 letters, digits, hyphens or underscores",
    )
    
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "url": "https://example.com/very/long/path/to/resource",
                    "custom_slug": None
                },
                {
                    "url": "https://github.com/user/repo",
                    "custom_slug": "my-repo"
                }
            ]
        }
    }


class ActionResponse(BaseModel):
    """Result of a create, update or delete request."""
    
    success: bool = Field(False, description="True when the operation succeeded")
    error: Optional[str] = Field(None, description="User-facing error message")
    short_code: Optional[str] = Field(None, description="Short code of the affected link")
    link_id: Optional[int] = Field(None, description="Id of the affected link")
    short_url: Optional[str] = Field(None, description="The complete short URL")
    
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "success": True,
                    "short_code": "my-repo",
                    "link_id": 42,
                    "short_url": "https://short.link/l/my-repo"
                },
                {
                    "success": False,
                    "error": "This custom slug is already taken"
                }
            ]
        }
    }


class LinkResponse(BaseModel):
    """A stored link."""
    
    id: int
    original_url: str
    short_code: str
    short_url: str
    created_at: datetime
    updated_at: datetime


class LinkListResponse(BaseModel):
    """The caller's links, most recently updated first."""
    
    success: bool = True
    error: Optional[str] = None
    links: List[LinkResponse] = Field(default_factory=list)


class HealthResponse(BaseModel):
    """Health check response."""
    
    status: str = Field(..., description="Overall status")
    database: str = Field(..., description="Store status")
    timestamp: datetime = Field(..., description="Check timestamp")


class ErrorResponse(BaseModel):
    """Error response."""
    
    error: str = Field(..., description="Error message")
