from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, MutableMapping, Sequence

from config import DEFAULT_CACHE_TTL_SECONDS
from core.errors import CastOrIntegrityError
from models.incident import Incident

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class CachedIncidents:
    """Cache value: the complete, unfiltered incident list of one page."""

    incidents: tuple[Incident, ...]
    expires_at: float


class IncidentCache:
    """In-memory read-through cache of incident lists keyed by status page URL.

    Entries always hold the full incident list of their page so that
    requests with different impact filters share one entry.  Writes are
    plain mapping assignments: two requests racing to populate the same
    page both succeed and the last one wins.

    The backing mapping can be injected so several resolvers (or process
    versions) share one store of entries; anything found there that is not
    a ``CachedIncidents`` is reported as ``CastOrIntegrityError``.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
        entries: MutableMapping[str, Any] | None = None,
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self._ttl = ttl_seconds
        self._clock = clock
        self._entries: MutableMapping[str, Any] = {} if entries is None else entries

    def get(self, page_url: str) -> tuple[Incident, ...] | None:
        """Return the cached incidents for a page, or None on miss/expiry."""
        entry = self._entries.get(page_url)
        if entry is None:
            return None

        if not isinstance(entry, CachedIncidents) or not all(
            isinstance(i, Incident) for i in entry.incidents
        ):
            log.error(
                "Malformed cache entry for %s: %s", page_url, type(entry).__name__
            )
            raise CastOrIntegrityError(
                f"cache entry for {page_url} is not an incident list"
            )

        if entry.expires_at <= self._clock():
            # Another request may have repopulated the key meanwhile.
            if self._entries.get(page_url) is entry:
                del self._entries[page_url]
            return None

        return entry.incidents

    def set(self, page_url: str, incidents: Sequence[Incident]) -> None:
        """Store the full incident list for a page with the standard TTL."""
        self._entries[page_url] = CachedIncidents(
            incidents=tuple(incidents),
            expires_at=self._clock() + self._ttl,
        )

    def purge_expired(self) -> int:
        """Drop every expired entry and return how many were removed."""
        now = self._clock()
        expired = [
            url
            for url, entry in list(self._entries.items())
            if isinstance(entry, CachedIncidents) and entry.expires_at <= now
        ]
        for url in expired:
            self._entries.pop(url, None)
        return len(expired)

    @property
    def size(self) -> int:
        return len(self._entries)
