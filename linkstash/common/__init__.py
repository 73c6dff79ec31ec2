"""Common utilities for linkstash."""

from .validators import is_valid_url, validate_page_request
from .url_builder import build_short_url, page_to_offset, total_pages
from .logging_config import setup_logging, get_logger
from .user_agent import parse_client_metadata

__all__ = [
    "is_valid_url",
    "validate_page_request",
    "build_short_url",
    "page_to_offset",
    "total_pages",
    "setup_logging",
    "get_logger",
    "parse_client_metadata",
]
