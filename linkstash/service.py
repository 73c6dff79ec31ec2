"""Business logic service for linkstash."""

import logging
import secrets
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Dict, Optional

from .access import AccessGate
from .common.logging_config import get_logger
from .common.user_agent import parse_client_metadata
from .common.validators import is_valid_url
from .database.base import MappingStoreBase
from .database.models import MappingPage
from .errors import InvalidCredentialsError, MappingNotFoundError
from .mock_data import MockDataReport, generate_mock_data
from .sessions import Session, SessionRegistry


@dataclass(frozen=True)
class ShortenResult:
    identifier: str
    original_url: str


class LinkService:
    """Service layer tying the mapping store to the admin session gate."""

    def __init__(
        self,
        store: MappingStoreBase,
        registry: Optional[SessionRegistry] = None,
        admin_username: str = "admin",
        admin_password: str = "password",
        session_ttl: timedelta = timedelta(minutes=10),
        max_mock_data_count: int = 1000,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize link service.

        Args:
            store: Mapping store
            registry: Session registry (a fresh in-memory one by default)
            admin_username: The single admin user name
            admin_password: The single admin password
            session_ttl: Sliding session lifetime
            max_mock_data_count: Largest mock data batch accepted
            logger: Optional logger
        """
        self.store = store
        self.registry = registry if registry is not None else SessionRegistry()
        self.gate = AccessGate(self.registry, session_ttl)
        self.admin_username = admin_username
        self.admin_password = admin_password
        self.session_ttl = session_ttl
        self.max_mock_data_count = max_mock_data_count
        self.logger = logger or get_logger("service")

    async def shorten(self, url: str) -> ShortenResult:
        """Create the short identifier for a URL.

        Args:
            url: The original long URL

        Returns:
            ShortenResult with the identifier and the URL

        Raises:
            ValueError: If the URL is not a valid http(s) URL
            StorageError: If the store write fails
        """
        is_valid, error = is_valid_url(url)
        if not is_valid:
            raise ValueError(f"Invalid URL: {error}")

        identifier = await self.store.create(url)
        self.logger.info(f"Created short URL: {identifier} -> {url}")
        return ShortenResult(identifier=identifier, original_url=url)

    async def resolve(self, identifier: str, user_agent: Optional[str] = None) -> str:
        """Record a visit from ``user_agent`` and return the original URL.

        Raises:
            MappingNotFoundError: If the identifier is unknown
            StorageError: If the store fails
        """
        client = parse_client_metadata(user_agent)
        try:
            original_url = await self.store.resolve(identifier, client)
        except MappingNotFoundError:
            self.logger.warning(f"Short identifier not found: {identifier}")
            raise
        self.logger.debug(f"Resolved {identifier} -> {original_url} ({client.os}/{client.agent})")
        return original_url

    def login(self, username: str, password: str) -> Session:
        """Start an admin session.

        Raises:
            InvalidCredentialsError: If the credentials do not match
            RandomSourceError: If no secure token could be generated
        """
        user_ok = secrets.compare_digest(username.encode(), self.admin_username.encode())
        password_ok = secrets.compare_digest(password.encode(), self.admin_password.encode())
        if not (user_ok and password_ok):
            self.logger.warning(f"Failed admin login for user '{username}'")
            raise InvalidCredentialsError("Invalid username or password")

        session = self.registry.create(self.session_ttl)
        self.logger.info(f"Admin login, session valid until {session.expires_at.isoformat()}")
        return session

    def logout(self, token: Optional[str]) -> None:
        if token:
            self.registry.revoke(token)
            self.logger.info("Admin logout")

    def is_authenticated(self, token: Optional[str]) -> bool:
        """Whether ``token`` is a live session (does not renew it)."""
        return bool(token) and self.registry.is_active(token)

    async def list_mappings(self, token: Optional[str], offset: int, limit: int) -> MappingPage:
        """List one page of mappings for an authenticated admin.

        Raises:
            UnauthorizedError: If the session is not valid
            StorageError: If the scan fails
        """
        return await self.gate.call(token, self.store.list_page, offset, limit)

    async def count_mappings(self, token: Optional[str]) -> int:
        return await self.gate.call(token, self.store.count)

    async def generate_mock_data(self, token: Optional[str], count: int) -> MockDataReport:
        """Inject ``count`` synthetic mappings for an authenticated admin.

        Raises:
            ValueError: If count is outside 1..max_mock_data_count
            UnauthorizedError: If the session is not valid
        """
        report = await self.gate.call(token, self._generate_mock_data, count)
        self.logger.info(
            f"Mock data batch: {len(report.created)} created, {len(report.failed)} failed "
            f"of {report.requested} requested"
        )
        for failure in report.failed:
            self.logger.error(f"Mock data item failed: {failure['url']}: {failure['error']}")
        return report

    async def _generate_mock_data(self, count: int) -> MockDataReport:
        if count < 1 or count > self.max_mock_data_count:
            raise ValueError(f"count must be between 1 and {self.max_mock_data_count}")
        return await generate_mock_data(self.store, count)

    async def health_check(self) -> Dict[str, Any]:
        """Perform health check.

        Returns:
            Dictionary with database status and tracked session count
        """
        db_healthy = await self.store.health_check()
        return {
            "database": db_healthy,
            "tracked_sessions": len(self.registry),
            "overall": db_healthy,
        }

    async def close(self) -> None:
        """Close store connections."""
        await self.store.close()
