from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterable

from core.errors import CastOrIntegrityError
from models.incident import Incident, StatusPage
from store.base import IncidentStore

log = logging.getLogger(__name__)


class InMemoryIncidentStore(IncidentStore):
    """Dict-backed store, seeded from a JSON document or built in code.

    Document layout::

        {"statusPages": [{...}], "incidents": [{...}]}
    """

    def __init__(
        self,
        pages: Iterable[StatusPage] = (),
        incidents: Iterable[Incident] = (),
    ) -> None:
        self._pages: dict[str, StatusPage] = {}
        self._incidents: dict[str, list[Incident]] = {}
        for page in pages:
            self.add_status_page(page)
        for incident in incidents:
            self.add_incident(incident)

    @classmethod
    def from_document(cls, document: Any) -> InMemoryIncidentStore:
        if not isinstance(document, dict):
            raise CastOrIntegrityError("store document must be an object")
        try:
            pages = [StatusPage.from_dict(p) for p in document.get("statusPages", [])]
            incidents = [Incident.from_dict(i) for i in document.get("incidents", [])]
        except (ValueError, TypeError) as exc:
            raise CastOrIntegrityError(f"invalid store document: {exc}") from exc
        return cls(pages=pages, incidents=incidents)

    @classmethod
    def from_file(cls, path: str | Path) -> InMemoryIncidentStore:
        with open(path, "r", encoding="utf-8") as f:
            document = json.load(f)
        store = cls.from_document(document)
        log.info(
            "Loaded %d status page(s) and %d incident(s) from %s",
            len(store._pages),
            sum(len(v) for v in store._incidents.values()),
            path,
        )
        return store

    def add_status_page(self, page: StatusPage) -> None:
        self._pages[page.url] = page

    def remove_status_page(self, page_url: str) -> None:
        self._pages.pop(page_url, None)
        self._incidents.pop(page_url, None)

    def add_incident(self, incident: Incident) -> None:
        self._incidents.setdefault(incident.status_page_url, []).append(incident)

    @property
    def name(self) -> str:
        return "memory"

    async def get_incidents(self, page_url: str) -> list[Incident]:
        return list(self._incidents.get(page_url, []))

    async def get_status_page(self, page_url: str) -> StatusPage | None:
        return self._pages.get(page_url)

    async def list_status_pages(self) -> list[StatusPage]:
        return list(self._pages.values())
