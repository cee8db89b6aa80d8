"""End-to-end request scenarios through IncidentService."""

from unittest.mock import AsyncMock

import pytest

from conftest import EMPTY_URL, INDEXED_URL, UNINDEXED_URL, UNKNOWN_URL
from core.errors import CastOrIntegrityError, NotFoundError, UpstreamError, ValidationError
from core.registry import StatusPageRegistry
from core.resolver import IncidentResolver
from core.service import IncidentService
from models.incident import Impact


class TestScenarios:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("impact,limit", [(None, None), ("critical", "1")])
    async def test_unknown_page_is_not_found(self, service, store, impact, limit):
        with pytest.raises(NotFoundError):
            await service.get_incidents(UNKNOWN_URL, impact=impact, limit=limit)
        assert store.incident_fetches == 0

    @pytest.mark.asyncio
    async def test_unindexed_page_is_empty_success(self, service, store):
        response = await service.get_incidents(UNINDEXED_URL)

        assert response.incidents == ()
        assert response.is_indexed is False
        assert response.to_dict() == {"incidents": [], "isIndexed": False}
        assert store.incident_fetches == 0

    @pytest.mark.asyncio
    async def test_miss_then_filtered_sorted_response(self, service, store):
        response = await service.get_incidents(INDEXED_URL, impact="critical,major")

        assert response.is_indexed is True
        assert [i.impact for i in response.incidents] == [Impact.MAJOR, Impact.CRITICAL]
        assert [i.title for i in response.incidents] == ["Incident 3", "Incident 1"]
        assert store.incident_fetches == 1

    @pytest.mark.asyncio
    async def test_second_request_with_limit_served_from_cache(self, service, store):
        await service.get_incidents(INDEXED_URL, impact="critical,major")
        response = await service.get_incidents(INDEXED_URL, limit="1")

        assert [i.title for i in response.incidents] == ["Incident 3"]
        assert store.incident_fetches == 1

    @pytest.mark.asyncio
    async def test_indexed_page_without_incidents(self, service):
        response = await service.get_incidents(EMPTY_URL)

        assert response.incidents == ()
        assert response.is_indexed is True

    @pytest.mark.asyncio
    async def test_bogus_impact_touches_nothing(self, cache, store):
        registry = StatusPageRegistry()
        registry.lookup = lambda url: pytest.fail("registry consulted")
        service = IncidentService(registry, IncidentResolver(cache, store))

        with pytest.raises(ValidationError):
            await service.get_incidents(INDEXED_URL, impact="bogus")
        assert store.incident_fetches == 0
        assert cache.size == 0


class TestValidation:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("url", [None, ""])
    async def test_status_page_url_required(self, service, url):
        with pytest.raises(ValidationError):
            await service.get_incidents(url)

    @pytest.mark.asyncio
    async def test_limit_must_be_integer(self, service):
        with pytest.raises(ValidationError):
            await service.get_incidents(INDEXED_URL, limit="ten")

    @pytest.mark.asyncio
    async def test_limit_zero_returns_empty_list(self, service):
        response = await service.get_incidents(INDEXED_URL, limit="0")
        assert response.incidents == ()
        assert response.is_indexed is True


class TestFailures:

    @pytest.mark.asyncio
    async def test_page_gone_is_not_found(self, service, store):
        store.remove_status_page(INDEXED_URL)
        with pytest.raises(NotFoundError):
            await service.get_incidents(INDEXED_URL)

    @pytest.mark.asyncio
    async def test_corrupted_registry_is_not_a_miss(self, cache, store):
        registry = StatusPageRegistry()
        registry._pages = {INDEXED_URL: "garbage"}
        service = IncidentService(registry, IncidentResolver(cache, store))

        with pytest.raises(CastOrIntegrityError):
            await service.get_incidents(INDEXED_URL)

    @pytest.mark.asyncio
    async def test_store_failure_never_becomes_empty_success(self, registry, cache):
        store = AsyncMock()
        store.get_incidents.side_effect = RuntimeError("boom")
        service = IncidentService(registry, IncidentResolver(cache, store))

        with pytest.raises(UpstreamError):
            await service.get_incidents(INDEXED_URL)
