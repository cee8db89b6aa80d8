from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import AbstractSet

from core.cache import IncidentCache
from core.errors import CastOrIntegrityError, PageGoneError, UpstreamError
from core.query import filter_by_impact
from models.incident import Impact, Incident
from store.base import IncidentStore

log = logging.getLogger(__name__)

SOURCE_CACHE = "cache"
SOURCE_STORE = "store"


@dataclass(frozen=True)
class Resolution:
    """Impact-filtered incidents of a page and where they were served from."""

    incidents: tuple[Incident, ...]
    source: str


class IncidentResolver:
    """Read-through resolution of a page's incidents.

    Only call ``resolve()`` for pages the registry reports as indexed.

    On a cache miss the store is queried and the *unfiltered* result is
    cached before the impact filter is applied, so one entry serves every
    filter combination.  An empty store result is ambiguous, so page
    existence is re-verified against the store: the page may have been
    removed after the registry gate let the request through.
    """

    def __init__(self, cache: IncidentCache, store: IncidentStore) -> None:
        self._cache = cache
        self._store = store

    async def resolve(
        self, page_url: str, impacts: AbstractSet[Impact] = frozenset()
    ) -> Resolution:
        cached = self._cache.get(page_url)
        if cached is not None:
            log.debug("Cache hit for %s (%d incident(s))", page_url, len(cached))
            return Resolution(
                incidents=tuple(filter_by_impact(cached, impacts)),
                source=SOURCE_CACHE,
            )

        incidents = await self._fetch(page_url)
        self._cache.set(page_url, incidents)
        log.debug("Cached %d incident(s) for %s", len(incidents), page_url)

        return Resolution(
            incidents=tuple(filter_by_impact(incidents, impacts)),
            source=SOURCE_STORE,
        )

    async def _fetch(self, page_url: str) -> list[Incident]:
        """Fetch from the store, raising ``PageGoneError`` if the page vanished."""
        try:
            incidents = await self._store.get_incidents(page_url)
        except (UpstreamError, CastOrIntegrityError):
            raise
        except Exception as exc:
            raise UpstreamError("fetch incidents", page_url, str(exc)) from exc

        if incidents:
            return incidents

        try:
            page = await self._store.get_status_page(page_url)
        except (UpstreamError, CastOrIntegrityError):
            raise
        except Exception as exc:
            raise UpstreamError("verify status page", page_url, str(exc)) from exc

        if page is None:
            log.info("Status page %s disappeared before its incidents were fetched", page_url)
            raise PageGoneError(page_url)
        return []
