"""Synthetic mapping generation for demos and load testing."""

import random
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from .database.base import MappingStoreBase
from .database.models import ClientMetadata
from .errors import StorageError

MOCK_URL_BASE = "https://mock.linkstash.invalid"

MOCK_PATHS = [
    "blog/posts",
    "docs/reference",
    "products/catalog",
    "news/articles",
    "users/profiles",
    "search/results",
]

MOCK_CLIENTS = [
    ClientMetadata(os="Windows", agent="Chrome"),
    ClientMetadata(os="Windows", agent="Edge"),
    ClientMetadata(os="Mac OS X", agent="Safari"),
    ClientMetadata(os="Mac OS X", agent="Firefox"),
    ClientMetadata(os="Linux", agent="Firefox"),
    ClientMetadata(os="Linux", agent="curl"),
    ClientMetadata(os="iOS", agent="Mobile Safari"),
    ClientMetadata(os="Android", agent="Chrome Mobile"),
]


@dataclass
class MockDataReport:
    """Outcome of one mock data batch."""

    requested: int
    created: List[str] = field(default_factory=list)
    failed: List[Dict[str, str]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "requested": self.requested,
            "created": list(self.created),
            "failed": list(self.failed),
        }


def mock_url(rng: random.Random) -> str:
    """Build a unique-looking URL under the reserved ``.invalid`` domain."""
    token = uuid.UUID(int=rng.getrandbits(128), version=4).hex
    return f"{MOCK_URL_BASE}/{rng.choice(MOCK_PATHS)}/{token}"


async def generate_mock_data(
    store: MappingStoreBase,
    count: int,
    visits_per_link: Tuple[int, int] = (0, 5),
    rng: Optional[random.Random] = None,
    stop_on_error: bool = False,
) -> MockDataReport:
    """Create ``count`` synthetic mappings and simulate visits to them.

    A storage failure on one item is recorded in the report and the batch
    moves on to the next item, unless ``stop_on_error`` is set, in which case
    the batch ends after recording the failure.

    Args:
        store: Mapping store to write to
        count: Number of mappings to create
        visits_per_link: Inclusive range of simulated visits per mapping
        rng: Random source (seed it for reproducible batches)
        stop_on_error: End the batch at the first failed item

    Returns:
        MockDataReport listing created identifiers and failed URLs
    """
    if count < 0:
        raise ValueError("count must be >= 0")

    rng = rng or random.Random()
    low, high = visits_per_link
    report = MockDataReport(requested=count)

    for _ in range(count):
        url = mock_url(rng)
        try:
            identifier = await store.create(url)
            for _ in range(rng.randint(low, high)):
                await store.resolve(identifier, rng.choice(MOCK_CLIENTS))
        except StorageError as e:
            report.failed.append({"url": url, "error": str(e)})
            if stop_on_error:
                break
            continue
        report.created.append(identifier)

    return report
