"""Tests for the registry refresher worker."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from config import DEFAULT_REFRESH_INTERVAL_SECONDS
from conftest import INDEXED_URL, UNKNOWN_URL
from core.errors import UpstreamError
from core.refresher import RegistryRefresher
from core.registry import PageLookup, StatusPageRegistry
from models.incident import StatusPage


class TestRegistryRefresher:

    def test_default_interval_comes_from_settings(self, store, registry):
        refresher = RegistryRefresher(store=store, registry=registry)
        assert refresher._interval == DEFAULT_REFRESH_INTERVAL_SECONDS

    @pytest.mark.asyncio
    async def test_refresh_once_loads_store_pages(self, store):
        registry = StatusPageRegistry()
        refresher = RegistryRefresher(store=store, registry=registry)

        assert await refresher.refresh_once() == 3
        assert registry.lookup(INDEXED_URL) is PageLookup.KNOWN_INDEXED

    @pytest.mark.asyncio
    async def test_refresh_picks_up_new_and_removed_pages(self, store, registry):
        store.add_status_page(StatusPage(name="Late", url=UNKNOWN_URL, is_indexed=False))
        store.remove_status_page(INDEXED_URL)

        await RegistryRefresher(store=store, registry=registry).refresh_once()

        assert registry.lookup(UNKNOWN_URL) is PageLookup.KNOWN_NOT_INDEXED
        assert registry.lookup(INDEXED_URL) is PageLookup.NOT_FOUND

    @pytest.mark.asyncio
    async def test_failed_refresh_keeps_previous_snapshot(self, registry, cache, clock, incidents):
        store = AsyncMock()
        store.name = "mock"
        store.list_status_pages.side_effect = UpstreamError("list status pages")
        cache.set(INDEXED_URL, incidents)
        clock.advance(61)
        refresher = RegistryRefresher(
            store=store, registry=registry, cache=cache, interval_seconds=3600
        )

        task = asyncio.create_task(refresher.run())
        await asyncio.sleep(0.01)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert store.list_status_pages.await_count == 1
        assert registry.lookup(INDEXED_URL) is PageLookup.KNOWN_INDEXED
        assert cache.size == 0
