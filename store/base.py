from __future__ import annotations

from abc import ABC, abstractmethod

from models.incident import Incident, StatusPage


class IncidentStore(ABC):
    """Read interface onto the durable incident store and page registry.

    Implementations raise ``UpstreamError`` when the backing store fails
    and ``CastOrIntegrityError`` when it returns data of the wrong shape.
    They never turn a failure into an empty result.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Short backend name used in log lines (e.g. 'memory')."""

    @abstractmethod
    async def get_incidents(self, page_url: str) -> list[Incident]:
        """Return every incident recorded for the page, in store order."""

    @abstractmethod
    async def get_status_page(self, page_url: str) -> StatusPage | None:
        """Return the page metadata, or None if the page does not exist."""

    @abstractmethod
    async def list_status_pages(self) -> list[StatusPage]:
        """Return every known status page. Used to refresh the registry."""
