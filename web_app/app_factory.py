"""FastAPI application factory."""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from shortlinks.common.url_builder import normalize_path_prefix
from .api import api_router
from .web import health_router, redirect_router
from .middleware.logging import LoggingMiddleware


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed request bodies as a failed action with the first error message."""
    errors = exc.errors()
    message = errors[0]["msg"] if errors else "Invalid request"
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"success": False, "error": message},
    )


def create_app(
    store,
    registry,
    resolver,
    actions,
    config,
) -> FastAPI:
    """Create and configure FastAPI application.
    
    Args:
        store: Link store instance
        registry: LinkRegistry instance
        resolver: RedirectResolver instance
        actions: LinkActions instance
        config: Configuration instance
        
    Returns:
        Configured FastAPI app
    """
    app = FastAPI(
        title="Short Links",
        description="URL shortening service with safe public redirects",
        version="1.0.0",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )
    
    # Store instances in app state for access in routes
    app.state.store = store
    app.state.registry = registry
    app.state.resolver = resolver
    app.state.actions = actions
    app.state.config = config
    
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure appropriately for production
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(LoggingMiddleware)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    
    app.include_router(api_router, prefix="/api", tags=["API"])
    app.include_router(health_router, tags=["Health"])
    # Redirect route last: with an empty prefix it matches every single-segment path
    app.include_router(
        redirect_router,
        prefix=normalize_path_prefix(config.path_prefix),
        tags=["Redirect"],
    )
    
    return app
