"""Middleware for linkstash web app."""

from .logging import LoggingMiddleware

__all__ = ["LoggingMiddleware"]
