"""Validation utilities for linkstash."""

from urllib.parse import urlparse
from typing import Tuple

MAX_URL_LENGTH = 2048


def is_valid_url(url: str) -> Tuple[bool, str]:
    """Validate a URL submitted for shortening.

    Args:
        url: The URL to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not url or not isinstance(url, str):
        return False, "URL is required"

    if len(url) > MAX_URL_LENGTH:
        return False, f"URL is too long (max {MAX_URL_LENGTH} characters)"

    try:
        result = urlparse(url)
    except ValueError as e:
        return False, f"Invalid URL format: {e}"

    if result.scheme not in ("http", "https"):
        return False, "URL must use http or https protocol"

    if not result.netloc:
        return False, "URL must have a valid domain"

    return True, ""


def validate_page_request(page: int, page_size: int, max_page_size: int) -> Tuple[bool, str]:
    """Validate 1-based page parameters from the admin dashboard."""
    if page < 1:
        return False, "page must be at least 1"
    if page_size < 1:
        return False, "pageSize must be at least 1"
    if page_size > max_page_size:
        return False, f"pageSize must be at most {max_page_size}"
    return True, ""
