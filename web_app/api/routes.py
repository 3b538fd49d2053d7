"""API routes implementation."""

from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from shortlinks.actions import ActionResult
from shortlinks.common.headers import build_base_url
from shortlinks.common.url_builder import build_short_url
from ..auth import get_owner_id
from .schemas import (
    ActionResponse,
    ErrorResponse,
    HealthResponse,
    LinkListResponse,
    LinkRequest,
    LinkResponse,
)

router = APIRouter()

ACTION_RESPONSES = {
    400: {"model": ActionResponse, "description": "Invalid URL or slug"},
    401: {"model": ActionResponse, "description": "No authenticated owner"},
    404: {"model": ActionResponse, "description": "Link not found or unauthorized"},
    409: {"model": ActionResponse, "description": "Custom slug already taken"},
    500: {"model": ActionResponse, "description": "Internal server error"},
}


def _base_url(request: Request) -> str:
    config = request.app.state.config
    return build_base_url(
        headers=dict(request.headers),
        fallback_base_url=config.base_url,
        request_scheme=request.url.scheme,
        request_host=request.headers.get("host"),
    )


def _action_response(request: Request, result: ActionResult) -> JSONResponse:
    """Serialize an ActionResult with its status code."""
    short_url = None
    if result.success and result.short_code:
        short_url = build_short_url(
            short_code=result.short_code,
            base_url=_base_url(request),
            path_prefix=request.app.state.config.path_prefix,
        )
    
    body = ActionResponse(
        success=result.success,
        error=result.error,
        short_code=result.short_code,
        link_id=result.link_id,
        short_url=short_url,
    )
    return JSONResponse(
        status_code=result.status_code,
        content=body.model_dump(mode="json", exclude_none=True),
    )


@router.post(
    "/links",
    status_code=201,
    response_model=ActionResponse,
    responses=ACTION_RESPONSES,
    summary="Create link",
    description="Create a short link. Optionally provide a custom slug.",
)
async def create_link(
    request: Request,
    body: LinkRequest,
    owner_id: Optional[str] = Depends(get_owner_id),
):
    """Create a short link for the authenticated owner."""
    actions = request.app.state.actions
    result = await actions.create_link(owner_id, body.url, body.custom_slug)
    return _action_response(request, result)


@router.put(
    "/links/{link_id}",
    response_model=ActionResponse,
    responses=ACTION_RESPONSES,
    summary="Update link",
    description="Change the destination URL and optionally the short code of an owned link.",
)
async def update_link(
    request: Request,
    link_id: int,
    body: LinkRequest,
    owner_id: Optional[str] = Depends(get_owner_id),
):
    """Update a link owned by the authenticated owner."""
    actions = request.app.state.actions
    result = await actions.update_link(owner_id, link_id, body.url, body.custom_slug)
    return _action_response(request, result)


@router.delete(
    "/links/{link_id}",
    response_model=ActionResponse,
    responses=ACTION_RESPONSES,
    summary="Delete link",
)
async def delete_link(
    request: Request,
    link_id: int,
    owner_id: Optional[str] = Depends(get_owner_id),
):
    """Delete a link owned by the authenticated owner."""
    actions = request.app.state.actions
    result = await actions.delete_link(owner_id, link_id)
    return _action_response(request, result)


@router.get(
    "/links",
    response_model=LinkListResponse,
    responses={401: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    summary="List links",
    description="List the caller's links, most recently updated first.",
)
async def list_links(
    request: Request,
    owner_id: Optional[str] = Depends(get_owner_id),
):
    """List links owned by the authenticated owner."""
    actions = request.app.state.actions
    config = request.app.state.config
    
    result = await actions.list_links(owner_id)
    if not result.success:
        return JSONResponse(status_code=result.status_code, content={"error": result.error})
    
    base_url = _base_url(request)
    return LinkListResponse(
        links=[
            LinkResponse(
                id=link.id,
                original_url=link.original_url,
                short_code=link.short_code,
                short_url=build_short_url(link.short_code, base_url, config.path_prefix),
                created_at=link.created_at,
                updated_at=link.updated_at,
            )
            for link in result.links
        ]
    )


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Check if the service and its store are healthy.",
)
async def health_check(request: Request):
    """Health check endpoint for load balancers and monitoring."""
    store = request.app.state.store
    
    healthy = await store.health_check()
    
    return HealthResponse(
        status="healthy" if healthy else "unhealthy",
        database="healthy" if healthy else "unhealthy",
        timestamp=datetime.now(timezone.utc),
    )
