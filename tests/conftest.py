from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from core.cache import IncidentCache
from core.registry import StatusPageRegistry
from core.resolver import IncidentResolver
from core.service import IncidentService
from models.incident import Impact, Incident, StatusPage
from store.memory import InMemoryIncidentStore

INDEXED_URL = "https://status.example.com"
UNINDEXED_URL = "https://new.example"
EMPTY_URL = "https://quiet.example"
UNKNOWN_URL = "https://nope.example"

T0 = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


def make_incident(
    n: int,
    impact: Impact = Impact.MINOR,
    page_url: str = INDEXED_URL,
    start: datetime | None = None,
) -> Incident:
    return Incident(
        title=f"Incident {n}",
        start_time=start or T0 + timedelta(hours=n),
        deep_link=f"{page_url}/incidents/{n}",
        impact=impact,
        status_page_url=page_url,
    )


class FakeClock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class CountingStore(InMemoryIncidentStore):
    """In-memory store that records how often each read is made."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.incident_fetches = 0
        self.page_fetches = 0

    async def get_incidents(self, page_url):
        self.incident_fetches += 1
        return await super().get_incidents(page_url)

    async def get_status_page(self, page_url):
        self.page_fetches += 1
        return await super().get_status_page(page_url)


@pytest.fixture
def incidents():
    """Three incidents with t1 < t2 < t3: critical, minor, major."""
    return [
        make_incident(1, Impact.CRITICAL),
        make_incident(2, Impact.MINOR),
        make_incident(3, Impact.MAJOR),
    ]


@pytest.fixture
def pages():
    return [
        StatusPage(name="Example", url=INDEXED_URL, is_indexed=True),
        StatusPage(name="New", url=UNINDEXED_URL, is_indexed=False),
        StatusPage(name="Quiet", url=EMPTY_URL, is_indexed=True),
    ]


@pytest.fixture
def store(pages, incidents):
    return CountingStore(pages=pages, incidents=incidents)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return IncidentCache(ttl_seconds=60, clock=clock)


@pytest.fixture
def registry(pages):
    return StatusPageRegistry(pages)


@pytest.fixture
def resolver(cache, store):
    return IncidentResolver(cache, store)


@pytest.fixture
def service(registry, resolver):
    return IncidentService(registry, resolver)
