"""Public routes: short link redirects and health."""

from .routes import health_router, redirect_router

__all__ = ["health_router", "redirect_router"]
