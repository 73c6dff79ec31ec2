"""URL building utilities for linkstash."""

import math


def build_short_url(
    identifier: str,
    base_url: str,
    path_prefix: str = "/s",
) -> str:
    """Build the public URL for a short identifier.

    Args:
        identifier: The short identifier
        base_url: Base URL (e.g., https://example.com)
        path_prefix: Path the redirect route is mounted on (e.g., /s)

    Returns:
        Complete short URL
    """
    base = base_url.rstrip("/")
    prefix = path_prefix.strip("/")

    if prefix:
        return f"{base}/{prefix}/{identifier}"
    return f"{base}/{identifier}"


def page_to_offset(page: int, page_size: int) -> int:
    """Offset of the first entry on a 1-based page."""
    return (page - 1) * page_size


def total_pages(total_count: int, page_size: int) -> int:
    """Number of pages needed for ``total_count`` entries (at least 1)."""
    return max(1, math.ceil(total_count / page_size))
