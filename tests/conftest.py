"""Pytest configuration and fixtures."""

from datetime import datetime, timedelta, timezone

import pytest
from httpx import ASGITransport, AsyncClient

from config import Config
from linkstash.common.logging_config import setup_logging
from linkstash.database.sqlite import SQLiteMappingStore
from linkstash.service import LinkService
from linkstash.sessions import SessionRegistry
from web_app import create_app


class FakeClock:
    """Manually advanced clock for session tests."""

    def __init__(self, start: datetime = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def logger():
    """Create test logger."""
    return setup_logging(level="DEBUG")


@pytest.fixture
def db_url(tmp_path):
    return f"sqlite:///{tmp_path / 'linkstash.sqlite3'}"


@pytest.fixture
async def store(db_url):
    """Create a store on a fresh SQLite file."""
    store = SQLiteMappingStore(db_url)
    yield store
    await store.close()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def registry(clock):
    return SessionRegistry(clock=clock)


@pytest.fixture
def service(store, registry, logger):
    """Create service instance."""
    return LinkService(
        store=store,
        registry=registry,
        admin_username="admin",
        admin_password="s3cret",
        session_ttl=timedelta(minutes=10),
        max_mock_data_count=50,
        logger=logger,
    )


@pytest.fixture
def config(db_url):
    return Config(
        db_url=db_url,
        base_url="http://testserver",
        admin_username="admin",
        admin_password="s3cret",
        max_mock_data_count=50,
    )


@pytest.fixture
def app(service, config):
    """Create test FastAPI app."""
    return create_app(service_instance=service, config=config)


@pytest.fixture
async def client(app):
    """Create test client."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as ac:
        yield ac


@pytest.fixture
def sample_urls():
    """Sample URLs for testing."""
    return [
        "https://example.com/test",
        "https://github.com/user/repo",
        "https://stackoverflow.com/questions/123456",
    ]
