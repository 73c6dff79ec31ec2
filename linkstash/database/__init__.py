"""Storage layer for linkstash."""

from typing import Optional

from ..identifier import IdentifierGenerator
from .base import MappingStoreBase
from .models import ClientMetadata, MappingEntry, MappingPage, MappingRecord
from .sqlite import SQLiteMappingStore


def open_store(
    db_url: str,
    timeout_seconds: float = 5.0,
    generator: Optional[IdentifierGenerator] = None,
) -> MappingStoreBase:
    """Open the mapping store named by a database URL.

    ``postgres://`` and ``postgresql://`` URLs open a PostgresMappingStore;
    anything else (``sqlite:///...`` or a file path) opens a SQLiteMappingStore.
    """
    if db_url.startswith(("postgres://", "postgresql://")):
        from .postgres import PostgresMappingStore

        return PostgresMappingStore(
            db_url,
            connection_timeout_seconds=timeout_seconds,
            generator=generator,
        )
    return SQLiteMappingStore(db_url, timeout_seconds=timeout_seconds, generator=generator)


__all__ = [
    "ClientMetadata",
    "MappingEntry",
    "MappingPage",
    "MappingRecord",
    "MappingStoreBase",
    "SQLiteMappingStore",
    "open_store",
]
