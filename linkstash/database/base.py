"""Abstract base class for link store implementations."""

from abc import ABC, abstractmethod
from typing import Callable, List, Optional, Tuple, TypeVar

from ..errors import MappingNotFoundError
from ..identifier import IdentifierGenerator
from .models import ClientMetadata, MappingEntry, MappingPage, MappingRecord

T = TypeVar("T")

# A read-modify-write step: takes the stored value, returns (new value, result).
Mutation = Callable[[str], Tuple[str, T]]


class MappingStoreBase(ABC):
    """Durable key to record store keyed by short identifier.

    Subclasses provide the backend primitives (single-key upsert, single-key
    read-modify-write transaction, count, ordered page scan). The mapping
    semantics live here so every backend behaves the same way.

    Backend failures surface as ``StorageError``. Nothing is retried and
    nothing is logged at this level.
    """

    def __init__(self, db_config: str, generator: Optional[IdentifierGenerator] = None):
        """Initialize store.

        Args:
            db_config: Backend connection string
            generator: Identifier generator (8-character default)
        """
        self.db_config = db_config
        self.generator = generator or IdentifierGenerator()

    async def create(self, url: str) -> str:
        """Create (or overwrite) the mapping for a URL.

        Args:
            url: The original long URL

        Returns:
            The short identifier the URL maps to

        Raises:
            ValueError: If url is empty
            StorageError: If the write fails
        """
        if not url:
            raise ValueError("URL must not be empty")

        identifier = self.generator.generate(url)
        await self._put(identifier, MappingRecord(original_url=url).encode())
        return identifier

    async def resolve(self, identifier: str, client: ClientMetadata) -> str:
        """Record a visit and return the original URL.

        The read, the update of count/os/device and the write happen in one
        backend transaction, so concurrent visits to the same identifier are
        all counted.

        Args:
            identifier: Short identifier
            client: Parsed client metadata of the visitor

        Returns:
            The original URL as read at the start of the transaction

        Raises:
            MappingNotFoundError: If the identifier is not stored
            StorageError: If the backend fails
        """
        def visit(raw: str) -> Tuple[str, str]:
            record = MappingRecord.decode(raw)
            return record.visited(client).encode(), record.original_url

        return await self._mutate(identifier, visit)

    async def get(self, identifier: str) -> MappingRecord:
        """Read a record without recording a visit."""
        raw = await self._get(identifier)
        if raw is None:
            raise MappingNotFoundError(identifier)
        return MappingRecord.decode(raw)

    async def list_page(self, offset: int = 0, limit: int = 100) -> MappingPage:
        """List one page of mappings in key order.

        Args:
            offset: Number of entries to skip (>= 0)
            limit: Maximum number of entries to return (> 0)

        Returns:
            MappingPage with the entries and the total number of mappings
        """
        if offset < 0:
            raise ValueError("offset must be >= 0")
        if limit <= 0:
            raise ValueError("limit must be > 0")

        total, rows = await self._scan_page(offset, limit)
        entries = [
            MappingEntry(identifier=key, record=MappingRecord.decode(raw))
            for key, raw in rows
        ]
        return MappingPage(entries=entries, total_count=total, offset=offset, limit=limit)

    async def count(self) -> int:
        """Count all stored mappings."""
        return await self._count()

    @abstractmethod
    async def _put(self, key: str, value: str) -> None:
        """Write one key in a single atomic transaction (insert or replace)."""
        pass

    @abstractmethod
    async def _get(self, key: str) -> Optional[str]:
        """Read one key, None when absent."""
        pass

    @abstractmethod
    async def _mutate(self, key: str, mutation: Mutation) -> T:
        """Apply ``mutation`` to one key inside a serialized write transaction.

        Raises MappingNotFoundError (and writes nothing) when the key is absent.
        """
        pass

    @abstractmethod
    async def _count(self) -> int:
        pass

    @abstractmethod
    async def _scan_page(self, offset: int, limit: int) -> Tuple[int, List[Tuple[str, str]]]:
        """Return (total count, rows) with rows in raw key byte order."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        pass

    @abstractmethod
    async def close(self) -> None:
        pass
