"""Status page incidents service -- entry point.

Assembles the request path:

    FastAPI handler
        -> IncidentService (param validation, registry gate)
        -> IncidentResolver (read-through cache, store fallback)
        -> IncidentStore (remote over HTTP, or in-memory)

A shared httpx.AsyncClient is injected into the HTTP store.
A RegistryRefresher task keeps the status page registry current and
purges expired cache entries.
"""
from __future__ import annotations

import asyncio
import logging

import httpx
import uvicorn

from api.app import create_app
from config import Settings
from core.cache import IncidentCache
from core.refresher import RegistryRefresher
from core.registry import StatusPageRegistry
from core.resolver import IncidentResolver
from core.service import IncidentService
from store.base import IncidentStore
from store.http_store import HttpIncidentStore
from store.memory import InMemoryIncidentStore

log = logging.getLogger(__name__)


def build_store(settings: Settings, client: httpx.AsyncClient) -> IncidentStore:
    if settings.store_url:
        return HttpIncidentStore(client=client, base_url=settings.store_url)
    if settings.store_seed_path:
        return InMemoryIncidentStore.from_file(settings.store_seed_path)
    log.warning("No store configured, serving from an empty in-memory store")
    return InMemoryIncidentStore()


async def run(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    async with httpx.AsyncClient(timeout=settings.http_timeout_seconds) as client:
        store = build_store(settings, client)

        registry = StatusPageRegistry()
        cache = IncidentCache(ttl_seconds=settings.cache_ttl_seconds)
        service = IncidentService(registry, IncidentResolver(cache, store))

        refresher = RegistryRefresher(
            store=store,
            registry=registry,
            cache=cache,
            interval_seconds=settings.refresh_interval_seconds,
        )
        # Initial load; an unreachable store aborts startup.
        await refresher.refresh_once()

        app = create_app(
            service,
            health=lambda: {"statusPages": registry.size, "cachedPages": cache.size},
        )
        server = uvicorn.Server(
            uvicorn.Config(
                app,
                host=settings.host,
                port=settings.port,
                log_level=settings.log_level.lower(),
            )
        )

        refresh_task = asyncio.create_task(refresher.run(), name="registry-refresher")
        try:
            await server.serve()
        finally:
            refresh_task.cancel()
            await asyncio.gather(refresh_task, return_exceptions=True)


def main() -> None:
    try:
        asyncio.run(run(Settings.from_env()))
    except KeyboardInterrupt:
        print("\nShutting down.")


if __name__ == "__main__":
    main()
