"""SQLite implementation of the link store.

SQLite gives a local, crash-durable, key-ordered store: the ``mappings`` table
is a WITHOUT ROWID table clustered on its TEXT primary key, compared with the
BINARY collation (raw UTF-8 byte order). The database runs in WAL mode so
readers proceed while a writer holds the lock.

Every operation opens its own connection and runs in a worker thread through
``asyncio.to_thread``. Writes use ``BEGIN IMMEDIATE``, which takes the database
write lock up front, so read-modify-write transactions never interleave.
Waiting for the lock is bounded by ``timeout_seconds``; running out of time
raises ``StorageError``.
"""

import asyncio
import functools
import os
import sqlite3
from contextlib import contextmanager
from typing import Any, Callable, Iterator, List, Optional, Tuple, TypeVar

from ..errors import MappingNotFoundError, StorageError
from ..identifier import IdentifierGenerator
from .base import MappingStoreBase, Mutation

F = TypeVar("F", bound=Callable[..., Any])

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS mappings (
    key TEXT PRIMARY KEY NOT NULL,
    value TEXT NOT NULL
) WITHOUT ROWID;
"""

SQLITE_URL_PREFIX = "sqlite:///"


def sqlite_path_from_url(db_config: str) -> str:
    """Turn ``sqlite:///relative/path`` or ``sqlite:////abs/path`` into a path.

    A value without the ``sqlite:///`` prefix is taken as a filesystem path.
    """
    if db_config.startswith(SQLITE_URL_PREFIX):
        path = db_config[len(SQLITE_URL_PREFIX):]
    else:
        path = db_config
    if not path or path == ":memory:":
        raise ValueError("SQLite store needs a database file path")
    return path


def handle_sqlite_error(method: F) -> F:
    """Raise StorageError for any sqlite3/OS failure inside a store method."""

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except (sqlite3.Error, OSError) as e:
            raise StorageError(f"SQLite store at {self.path} failed: {e}") from e

    return wrapper


def _text(value: Any) -> str:
    if isinstance(value, bytes):
        return value.decode("utf-8")
    return value


class SQLiteMappingStore(MappingStoreBase):
    """SQLite-backed mapping store."""

    def __init__(
        self,
        db_config: str,
        timeout_seconds: float = 5.0,
        generator: Optional[IdentifierGenerator] = None,
    ):
        """Initialize SQLite store and create the schema if needed.

        Args:
            db_config: ``sqlite:///path/to/file.sqlite3`` or a file path
            timeout_seconds: How long to wait for the write lock
            generator: Identifier generator

        Raises:
            StorageError: If the database file cannot be opened or initialized
        """
        super().__init__(db_config, generator)
        self.path = sqlite_path_from_url(db_config)
        self.timeout_seconds = timeout_seconds
        self._ensure_db()

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        # isolation_level=None: no implicit transactions, BEGIN/COMMIT are explicit
        conn = sqlite3.connect(self.path, timeout=self.timeout_seconds, isolation_level=None)
        try:
            yield conn
        finally:
            conn.close()

    @handle_sqlite_error
    def _ensure_db(self) -> None:
        directory = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(directory, exist_ok=True)
        with self._connect() as conn:
            conn.execute("PRAGMA journal_mode=WAL")
            conn.executescript(SCHEMA_SQL)

    @handle_sqlite_error
    def _put_sync(self, key: str, value: str) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO mappings (key, value) VALUES (?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value
                """,
                (key, value),
            )

    @handle_sqlite_error
    def _get_sync(self, key: str) -> Optional[str]:
        with self._connect() as conn:
            row = conn.execute("SELECT value FROM mappings WHERE key = ?", (key,)).fetchone()
        return _text(row[0]) if row else None

    @handle_sqlite_error
    def _mutate_sync(self, key: str, mutation: Mutation):
        with self._connect() as conn:
            conn.execute("BEGIN IMMEDIATE")
            try:
                row = conn.execute("SELECT value FROM mappings WHERE key = ?", (key,)).fetchone()
                if row is None:
                    raise MappingNotFoundError(key)
                new_value, result = mutation(_text(row[0]))
                conn.execute("UPDATE mappings SET value = ? WHERE key = ?", (new_value, key))
                conn.execute("COMMIT")
            except BaseException:
                if conn.in_transaction:
                    conn.execute("ROLLBACK")
                raise
        return result

    @handle_sqlite_error
    def _count_sync(self) -> int:
        with self._connect() as conn:
            return conn.execute("SELECT COUNT(*) FROM mappings").fetchone()[0]

    @handle_sqlite_error
    def _scan_page_sync(self, offset: int, limit: int) -> Tuple[int, List[Tuple[str, str]]]:
        with self._connect() as conn:
            # One read transaction: both passes see the same WAL snapshot
            conn.execute("BEGIN")
            try:
                total = conn.execute("SELECT COUNT(*) FROM mappings").fetchone()[0]
                rows = conn.execute(
                    "SELECT key, value FROM mappings ORDER BY key LIMIT ? OFFSET ?",
                    (limit, offset),
                ).fetchall()
                conn.execute("COMMIT")
            except BaseException:
                if conn.in_transaction:
                    conn.execute("ROLLBACK")
                raise
        return total, [(_text(k), _text(v)) for k, v in rows]

    async def _put(self, key: str, value: str) -> None:
        await asyncio.to_thread(self._put_sync, key, value)

    async def _get(self, key: str) -> Optional[str]:
        return await asyncio.to_thread(self._get_sync, key)

    async def _mutate(self, key: str, mutation: Mutation):
        return await asyncio.to_thread(self._mutate_sync, key, mutation)

    async def _count(self) -> int:
        return await asyncio.to_thread(self._count_sync)

    async def _scan_page(self, offset: int, limit: int) -> Tuple[int, List[Tuple[str, str]]]:
        return await asyncio.to_thread(self._scan_page_sync, offset, limit)

    async def health_check(self) -> bool:
        """Check that the database file answers a trivial query."""
        try:
            await self._count()
            return True
        except StorageError:
            return False

    async def close(self) -> None:
        """Nothing to release: connections live for one operation."""
        return None
