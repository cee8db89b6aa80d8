from __future__ import annotations

import logging

from core.errors import NotFoundError, ValidationError
from core.query import apply_limit, parse_impacts, parse_limit, sort_descending
from core.registry import PageLookup, StatusPageRegistry
from core.resolver import IncidentResolver
from models.incident import IncidentsResponse

log = logging.getLogger(__name__)


class IncidentService:
    """Answers "which incidents has status page X reported?".

    Per request:

        validate params -> registry gate -> resolver (cache or store)
            -> sort newest first -> limit -> envelope

    Parameters are validated before the registry, cache or store is
    touched.  Unknown pages raise ``NotFoundError``; known pages that have
    never been indexed get an empty list with ``is_indexed=False``.
    """

    def __init__(self, registry: StatusPageRegistry, resolver: IncidentResolver) -> None:
        self._registry = registry
        self._resolver = resolver

    async def get_incidents(
        self,
        status_page_url: str | None,
        impact: str | None = None,
        limit: str | None = None,
    ) -> IncidentsResponse:
        if not status_page_url:
            raise ValidationError("statusPageUrl is required")
        impacts = parse_impacts(impact)
        max_items = parse_limit(limit)

        lookup = self._registry.lookup(status_page_url)
        if lookup is PageLookup.NOT_FOUND:
            raise NotFoundError(status_page_url)
        if lookup is PageLookup.KNOWN_NOT_INDEXED:
            return IncidentsResponse(incidents=(), is_indexed=False)

        resolution = await self._resolver.resolve(status_page_url, impacts)
        incidents = apply_limit(sort_descending(resolution.incidents), max_items)
        log.info(
            "Served %d incident(s) for %s from %s",
            len(incidents),
            status_page_url,
            resolution.source,
        )
        return IncidentsResponse(incidents=tuple(incidents), is_indexed=True)
