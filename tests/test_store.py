"""Tests for the SQLite mapping store."""

import asyncio
import sqlite3

import pytest

from linkstash.database import open_store
from linkstash.database.models import ClientMetadata
from linkstash.database.sqlite import SQLiteMappingStore, sqlite_path_from_url
from linkstash.errors import MappingNotFoundError, StorageError
from linkstash.identifier import IdentifierGenerator

CURL_ON_LINUX = ClientMetadata(os="Linux", agent="curl")


class ConstantGenerator(IdentifierGenerator):
    """Maps every URL to one identifier, to force a collision."""

    def generate(self, content: str) -> str:
        return "deadbeef"


@pytest.mark.asyncio
class TestCreate:
    """Test mapping creation."""

    async def test_create_returns_identifier(self, store):
        url = "https://example.com/a"
        identifier = await store.create(url)

        assert identifier == IdentifierGenerator().generate(url)
        record = await store.get(identifier)
        assert record.original_url == url
        assert record.count == 0

    async def test_create_is_idempotent(self, store):
        """Shortening the same URL twice keeps one mapping."""
        first = await store.create("https://example.com/a")
        second = await store.create("https://example.com/a")

        assert first == second
        assert await store.count() == 1

    async def test_create_resets_analytics(self, store):
        """Re-shortening overwrites the record, count included."""
        identifier = await store.create("https://example.com/a")
        await store.resolve(identifier, CURL_ON_LINUX)

        await store.create("https://example.com/a")
        record = await store.get(identifier)
        assert record.count == 0
        assert record.os is None

    async def test_create_accepts_any_non_empty_string(self, store):
        """URL checks belong to the service; the store keeps any value."""
        identifier = await store.create("ftp://example.com/file")
        assert (await store.get(identifier)).original_url == "ftp://example.com/file"

    async def test_create_empty_url(self, store):
        with pytest.raises(ValueError):
            await store.create("")

    async def test_collision_last_write_wins(self, tmp_path):
        """Two URLs sharing an identifier leave only the later one stored."""
        store = SQLiteMappingStore(str(tmp_path / "collide.sqlite3"), generator=ConstantGenerator())

        assert await store.create("https://first.example.com") == "deadbeef"
        assert await store.create("https://second.example.com") == "deadbeef"

        assert await store.count() == 1
        assert (await store.get("deadbeef")).original_url == "https://second.example.com"


@pytest.mark.asyncio
class TestResolve:
    """Test visit recording."""

    async def test_resolve_records_visit(self, store):
        url = "https://example.com/tracked"
        identifier = await store.create(url)

        assert await store.resolve(identifier, CURL_ON_LINUX) == url

        record = await store.get(identifier)
        assert record.count == 1
        assert record.os == "Linux"
        assert record.device == "curl"

    async def test_resolve_keeps_last_client(self, store):
        identifier = await store.create("https://example.com/tracked")
        await store.resolve(identifier, CURL_ON_LINUX)
        await store.resolve(identifier, ClientMetadata(os="Windows", agent="Chrome"))

        record = await store.get(identifier)
        assert record.count == 2
        assert record.os == "Windows"
        assert record.device == "Chrome"

    async def test_resolve_unknown(self, store):
        with pytest.raises(MappingNotFoundError) as exc_info:
            await store.resolve("00000001", CURL_ON_LINUX)
        assert exc_info.value.identifier == "00000001"
        assert await store.count() == 0

    async def test_get_unknown(self, store):
        with pytest.raises(MappingNotFoundError):
            await store.get("00000001")

    async def test_resolve_legacy_value(self, store):
        """A bare URL value resolves and is rewritten as a record."""
        with sqlite3.connect(store.path) as conn:
            conn.execute("INSERT INTO mappings (key, value) VALUES (?, ?)", ("1egacy00", "https://legacy.example.com"))

        assert await store.resolve("1egacy00", CURL_ON_LINUX) == "https://legacy.example.com"

        record = await store.get("1egacy00")
        assert record.original_url == "https://legacy.example.com"
        assert record.count == 1
        assert record.device == "curl"

    async def test_concurrent_resolves_are_all_counted(self, store):
        """N simultaneous visits raise the count by exactly N."""
        identifier = await store.create("https://example.com/popular")
        visits = 30

        results = await asyncio.gather(
            *[store.resolve(identifier, CURL_ON_LINUX) for _ in range(visits)]
        )

        assert all(url == "https://example.com/popular" for url in results)
        assert (await store.get(identifier)).count == visits


@pytest.mark.asyncio
class TestListPage:
    """Test paging and counting."""

    async def test_pages_partition_all_entries(self, store):
        """Two pages of 10 over 15 mappings return 10 and 5, no overlap."""
        for i in range(15):
            await store.create(f"https://example.com/page/{i}")

        first = await store.list_page(offset=0, limit=10)
        second = await store.list_page(offset=10, limit=10)

        assert len(first.entries) == 10
        assert len(second.entries) == 5
        assert first.total_count == 15
        assert second.total_count == 15

        first_ids = [e.identifier for e in first.entries]
        second_ids = [e.identifier for e in second.entries]
        assert not set(first_ids) & set(second_ids)

        all_ids = first_ids + second_ids
        assert all_ids == sorted(all_ids)

    async def test_page_past_end(self, store):
        await store.create("https://example.com/only")

        page = await store.list_page(offset=5, limit=10)
        assert page.entries == []
        assert page.total_count == 1

    async def test_page_carries_records(self, store):
        identifier = await store.create("https://example.com/one")
        await store.resolve(identifier, CURL_ON_LINUX)

        page = await store.list_page()
        assert len(page.entries) == 1
        assert page.entries[0].identifier == identifier
        assert page.entries[0].record.count == 1

    async def test_empty_store(self, store):
        page = await store.list_page()
        assert page.entries == []
        assert page.total_count == 0
        assert await store.count() == 0

    @pytest.mark.parametrize("offset,limit", [(-1, 10), (0, 0), (0, -5)])
    async def test_invalid_arguments(self, store, offset, limit):
        with pytest.raises(ValueError):
            await store.list_page(offset=offset, limit=limit)


@pytest.mark.asyncio
class TestStoreLifecycle:
    """Test opening, health and failures."""

    async def test_data_survives_reopen(self, db_url):
        store = SQLiteMappingStore(db_url)
        identifier = await store.create("https://example.com/durable")
        await store.close()

        reopened = SQLiteMappingStore(db_url)
        assert (await reopened.get(identifier)).original_url == "https://example.com/durable"

    async def test_health_check(self, store):
        assert await store.health_check() is True

    async def test_unopenable_path(self, tmp_path):
        """A directory is not a database file."""
        with pytest.raises(StorageError):
            SQLiteMappingStore(str(tmp_path))

    async def test_open_store_defaults_to_sqlite(self, db_url):
        store = open_store(db_url)
        assert isinstance(store, SQLiteMappingStore)


def test_sqlite_path_from_url():
    assert sqlite_path_from_url("sqlite:///data/links.sqlite3") == "data/links.sqlite3"
    assert sqlite_path_from_url("sqlite:////var/lib/links.sqlite3") == "/var/lib/links.sqlite3"
    assert sqlite_path_from_url("/tmp/links.sqlite3") == "/tmp/links.sqlite3"
    with pytest.raises(ValueError):
        sqlite_path_from_url("sqlite:///:memory:")
