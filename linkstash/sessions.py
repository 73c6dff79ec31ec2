"""In-memory admin session registry with sliding expiry."""

import secrets
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Optional

from .errors import RandomSourceError

Clock = Callable[[], datetime]

TOKEN_BYTES = 32


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Session:
    """A freshly created session."""

    token: str
    expires_at: datetime


class SessionRegistry:
    """Table of active session tokens and their expiry instants.

    A session is valid while ``now < expiry``. Every successful
    ``validate_and_renew`` slides the expiry to ``now + ttl``, so an idle
    session expires exactly ``ttl`` after its last use. Expired entries are
    never swept in the background; they stop validating and are dropped the
    next time a session is created.

    All operations take one lock for the whole table and do no I/O while
    holding it.
    """

    def __init__(self, clock: Optional[Clock] = None):
        """Initialize registry.

        Args:
            clock: Returns the current time as an aware datetime (UTC by default)
        """
        self._clock = clock or utc_now
        self._sessions: Dict[str, datetime] = {}
        self._lock = threading.Lock()

    def create(self, ttl: timedelta) -> Session:
        """Start a session valid for ``ttl``.

        Raises:
            RandomSourceError: If the OS entropy source is unavailable
        """
        try:
            token = secrets.token_urlsafe(TOKEN_BYTES)
        except (OSError, NotImplementedError) as e:
            raise RandomSourceError(f"Could not read secure random bytes: {e}") from e

        with self._lock:
            now = self._clock()
            self._purge_expired_locked(now)
            expires_at = now + ttl
            self._sessions[token] = expires_at
        return Session(token=token, expires_at=expires_at)

    def validate_and_renew(self, token: str, ttl: timedelta) -> bool:
        """Check a token and, when valid, push its expiry to ``now + ttl``.

        An unknown or expired token returns False and changes nothing.
        """
        with self._lock:
            now = self._clock()
            expiry = self._sessions.get(token)
            if expiry is None or expiry <= now:
                return False
            self._sessions[token] = now + ttl
            return True

    def is_active(self, token: str) -> bool:
        """Check a token without renewing it."""
        with self._lock:
            expiry = self._sessions.get(token)
            return expiry is not None and self._clock() < expiry

    def expires_at(self, token: str) -> Optional[datetime]:
        with self._lock:
            return self._sessions.get(token)

    def revoke(self, token: str) -> None:
        """Remove a token. Unknown tokens are ignored."""
        with self._lock:
            self._sessions.pop(token, None)

    def purge_expired(self) -> int:
        """Drop expired entries and return how many were removed."""
        with self._lock:
            return self._purge_expired_locked(self._clock())

    def _purge_expired_locked(self, now: datetime) -> int:
        expired = [token for token, expiry in self._sessions.items() if expiry <= now]
        for token in expired:
            del self._sessions[token]
        return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
