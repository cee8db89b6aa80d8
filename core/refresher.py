from __future__ import annotations

import asyncio
import logging

from config import DEFAULT_REFRESH_INTERVAL_SECONDS
from core.cache import IncidentCache
from core.registry import StatusPageRegistry
from store.base import IncidentStore

log = logging.getLogger(__name__)


class RegistryRefresher:
    """Background worker that keeps the registry snapshot current.

    Each cycle:
    1. load every status page from the store
    2. swap the snapshot into the registry
    3. purge expired cache entries
    4. sleep for ``interval_seconds``

    A failed load keeps the previous snapshot; the loop carries on.
    """

    def __init__(
        self,
        store: IncidentStore,
        registry: StatusPageRegistry,
        cache: IncidentCache | None = None,
        interval_seconds: float = DEFAULT_REFRESH_INTERVAL_SECONDS,
    ) -> None:
        self._store = store
        self._registry = registry
        self._cache = cache
        self._interval = interval_seconds

    async def refresh_once(self) -> int:
        """Reload the registry from the store. Returns the number of pages."""
        pages = await self._store.list_status_pages()
        self._registry.replace(pages)
        indexed = sum(1 for p in pages if p.is_indexed)
        log.info(
            "Registry refreshed from %s: %d page(s), %d indexed",
            self._store.name,
            len(pages),
            indexed,
        )
        return len(pages)

    async def run(self) -> None:
        log.info("Registry refresher started (interval=%ss)", self._interval)
        while True:
            try:
                await self.refresh_once()
            except Exception:
                log.exception(
                    "Registry refresh failed, keeping %d known page(s)",
                    self._registry.size,
                )

            if self._cache is not None:
                purged = self._cache.purge_expired()
                if purged:
                    log.debug("Purged %d expired cache entr(ies)", purged)

            await asyncio.sleep(self._interval)
