"""Data models for the link store."""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class ClientMetadata:
    """Parsed details about the client that followed a short link."""

    os: str = ""
    agent: str = ""


@dataclass
class MappingRecord:
    """Represents the stored value for one short identifier.

    Persisted as a JSON object ``{"original_url", "count", "device"?, "os"?}``.
    ``device`` holds the client agent (browser) family.
    """

    original_url: str
    count: int = 0
    os: Optional[str] = None
    device: Optional[str] = None

    def visited(self, client: ClientMetadata) -> "MappingRecord":
        """Return the record after one more visit from ``client``."""
        return MappingRecord(
            original_url=self.original_url,
            count=self.count + 1,
            os=client.os,
            device=client.agent,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary, leaving out unset client fields."""
        data: Dict[str, Any] = {
            "original_url": self.original_url,
            "count": self.count,
        }
        if self.device is not None:
            data["device"] = self.device
        if self.os is not None:
            data["os"] = self.os
        return data

    def encode(self) -> str:
        return json.dumps(self.to_dict(), separators=(",", ":"))

    @classmethod
    def decode(cls, raw: str) -> "MappingRecord":
        """Create from a stored value.

        Values written before records carried an envelope are a bare URL
        string. Anything that does not decode to a JSON object with an
        ``original_url`` is read that way, with a count of 0 and no client
        metadata.

        Args:
            raw: The stored value

        Returns:
            The decoded record
        """
        try:
            data = json.loads(raw)
        except ValueError:
            return cls(original_url=raw)

        if not isinstance(data, dict) or "original_url" not in data:
            return cls(original_url=raw)

        return cls(
            original_url=data["original_url"],
            count=int(data.get("count") or 0),
            os=data.get("os"),
            device=data.get("device"),
        )


@dataclass
class MappingEntry:
    """A short identifier together with its record."""

    identifier: str
    record: MappingRecord


@dataclass
class MappingPage:
    """One page of a full scan in key order."""

    entries: List[MappingEntry] = field(default_factory=list)
    total_count: int = 0
    offset: int = 0
    limit: int = 0
