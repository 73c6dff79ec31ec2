"""Session check in front of administrative operations."""

import inspect
from datetime import timedelta
from typing import Any, Callable, Optional

from .errors import UnauthorizedError
from .sessions import SessionRegistry


class AccessGate:
    """Run an operation only for callers holding a valid session.

    Each successful check renews the caller's session for another ``ttl``.
    """

    def __init__(self, registry: SessionRegistry, ttl: timedelta):
        self.registry = registry
        self.ttl = ttl

    def check(self, token: Optional[str]) -> None:
        """Validate and renew ``token``.

        Raises:
            UnauthorizedError: If the token is missing, unknown, revoked or expired
        """
        if not token or not self.registry.validate_and_renew(token, self.ttl):
            raise UnauthorizedError("Session is missing or expired")

    async def call(self, token: Optional[str], operation: Callable[..., Any], *args, **kwargs) -> Any:
        """Check ``token``, then run ``operation`` and return its result unchanged.

        ``operation`` may be a plain function or a coroutine function. It is
        not invoked when the check fails.
        """
        self.check(token)
        result = operation(*args, **kwargs)
        if inspect.isawaitable(result):
            result = await result
        return result
