from __future__ import annotations

import logging
from typing import Any, Callable, TypeVar

import httpx

from core.errors import CastOrIntegrityError, UpstreamError
from models.incident import Incident, StatusPage
from store.base import IncidentStore

log = logging.getLogger(__name__)

T = TypeVar("T")


class HttpIncidentStore(IncidentStore):
    """Store adapter for a remote incident store exposed over HTTP.

    A shared ``httpx.AsyncClient`` is injected at construction time; its
    timeout configuration is the only timeout applied to store calls.
    """

    def __init__(self, client: httpx.AsyncClient, base_url: str) -> None:
        self._client = client
        self._base_url = base_url.rstrip("/")

    @property
    def name(self) -> str:
        return "http"

    async def get_incidents(self, page_url: str) -> list[Incident]:
        operation = "fetch incidents"
        resp = await self._get(operation, "/incidents", {"statusPageUrl": page_url}, page_url)
        self._raise_for_status(operation, resp, page_url)
        payload = self._json(operation, resp, page_url)
        return self._decode_list(operation, payload, "incidents", Incident.from_dict, page_url)

    async def get_status_page(self, page_url: str) -> StatusPage | None:
        operation = "fetch status page"
        resp = await self._get(operation, "/status-pages/lookup", {"url": page_url}, page_url)
        if resp.status_code == 404:
            return None
        self._raise_for_status(operation, resp, page_url)
        payload = self._json(operation, resp, page_url)
        try:
            return StatusPage.from_dict(payload)
        except ValueError as exc:
            raise CastOrIntegrityError(f"{operation} for {page_url}: {exc}") from exc

    async def list_status_pages(self) -> list[StatusPage]:
        operation = "list status pages"
        resp = await self._get(operation, "/status-pages", None, None)
        self._raise_for_status(operation, resp, None)
        payload = self._json(operation, resp, None)
        return self._decode_list(operation, payload, "statusPages", StatusPage.from_dict, None)

    async def _get(
        self,
        operation: str,
        path: str,
        params: dict[str, str] | None,
        page_url: str | None,
    ) -> httpx.Response:
        try:
            return await self._client.get(self._base_url + path, params=params)
        except httpx.HTTPError as exc:
            log.error("[%s] %s: HTTP error: %s", self.name, operation, exc)
            raise UpstreamError(operation, page_url, str(exc)) from exc

    def _raise_for_status(
        self, operation: str, resp: httpx.Response, page_url: str | None
    ) -> None:
        if resp.status_code != 200:
            log.warning(
                "[%s] %s: unexpected status %d", self.name, operation, resp.status_code
            )
            raise UpstreamError(operation, page_url, f"status {resp.status_code}")

    @staticmethod
    def _json(operation: str, resp: httpx.Response, page_url: str | None) -> Any:
        try:
            return resp.json()
        except ValueError as exc:
            target = f" for {page_url}" if page_url else ""
            raise CastOrIntegrityError(f"{operation}{target}: response is not JSON") from exc

    @staticmethod
    def _decode_list(
        operation: str,
        payload: Any,
        key: str,
        decode: Callable[[Any], T],
        page_url: str | None,
    ) -> list[T]:
        items = payload.get(key) if isinstance(payload, dict) else None
        if not isinstance(items, list):
            raise CastOrIntegrityError(f"{operation}: expected a list under {key!r}")
        try:
            return [decode(item) for item in items]
        except ValueError as exc:
            target = f" for {page_url}" if page_url else ""
            raise CastOrIntegrityError(f"{operation}{target}: {exc}") from exc
