"""HTML routes and the short-link redirect."""

from .routes import redirect_router, router as web_router

__all__ = ["web_router", "redirect_router"]
