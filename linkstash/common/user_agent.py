"""User-Agent parsing for visit analytics."""

from typing import Optional

from user_agents import parse

from ..database.models import ClientMetadata

UNKNOWN = "Other"


def parse_client_metadata(user_agent: Optional[str]) -> ClientMetadata:
    """Reduce a User-Agent header to OS family and browser family.

    Args:
        user_agent: Raw User-Agent header value (may be empty or missing)

    Returns:
        ClientMetadata with ``"Other"`` for anything the parser does not know
    """
    ua = parse(user_agent or "")
    return ClientMetadata(
        os=ua.os.family or UNKNOWN,
        agent=ua.browser.family or UNKNOWN,
    )
