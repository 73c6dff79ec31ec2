"""Web application for linkstash."""

from .app_factory import create_app

__all__ = ["create_app"]
