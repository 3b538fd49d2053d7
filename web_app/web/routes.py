"""Public redirect and health routes."""

from urllib.parse import quote

from fastapi import APIRouter, HTTPException, Request, Response, status
from fastapi.responses import JSONResponse

from shortlinks.common.logging_config import get_logger
from shortlinks.errors import InvalidStoredUrlError
from shortlinks.resolver import ResolveOutcome

logger = get_logger("web")

redirect_router = APIRouter()
health_router = APIRouter()

NO_STORE_HEADERS = {"Cache-Control": "no-store"}

# Same characters Starlette's RedirectResponse leaves unescaped
_LOCATION_SAFE_CHARS = ":/%#?=@[]!$&'()*+,;~"

ERROR_MESSAGES = {
    ResolveOutcome.NOT_FOUND: "Link not found",
    ResolveOutcome.INVALID_STORED_URL: InvalidStoredUrlError.message,
}


def _location_header(url: str) -> str:
    """The stored URL as-is; only non-ASCII characters are percent-encoded."""
    if url.isascii():
        return url
    return quote(url, safe=_LOCATION_SAFE_CHARS)


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": message},
        headers=NO_STORE_HEADERS,
    )


@redirect_router.get(
    "/{short_code}",
    responses={
        301: {"description": "Redirect to the stored URL"},
        400: {"description": "Stored URL is malformed or uses a disallowed scheme"},
        404: {"description": "Short code not found"},
    },
    summary="Follow short link",
)
async def redirect_to_url(request: Request, short_code: str):
    """Redirect to the original URL."""
    resolver = request.app.state.resolver
    
    try:
        resolution = await resolver.resolve(short_code)
    except Exception:
        # Tracebacks stay out of production logs
        if request.app.state.config.environment.lower() == "production":
            logger.error(f"Error resolving short code {short_code!r}")
        else:
            logger.exception(f"Error resolving short code {short_code!r}")
        return _error("Internal server error", status.HTTP_500_INTERNAL_SERVER_ERROR)
    
    if not resolution.is_redirect:
        return _error(ERROR_MESSAGES[resolution.outcome], resolution.status_code)
    
    return Response(
        status_code=resolution.status_code,
        headers={"Location": _location_header(resolution.url)},
    )


@health_router.get("/health", include_in_schema=False)
async def health_check_web(request: Request):
    """Health check endpoint (simple version for load balancers)."""
    store = request.app.state.store
    
    if await store.health_check():
        return {"status": "healthy"}
    raise HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail="Service unhealthy",
    )
