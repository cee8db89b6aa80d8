from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Iterable, Mapping

from core.errors import CastOrIntegrityError
from models.incident import StatusPage

log = logging.getLogger(__name__)


class PageLookup(Enum):
    NOT_FOUND = "not_found"
    KNOWN_NOT_INDEXED = "known_not_indexed"
    KNOWN_INDEXED = "known_indexed"


class StatusPageRegistry:
    """In-memory snapshot of the status pages known to the system.

    The snapshot is replaced wholesale by ``replace()`` (see
    ``core.refresher``); lookups never mutate it.  Page URLs are matched
    by exact string comparison.
    """

    def __init__(self, pages: Iterable[StatusPage] = ()) -> None:
        self._pages: Mapping[str, Any] = {p.url: p for p in pages}

    def lookup(self, page_url: str) -> PageLookup:
        page = self.get(page_url)
        if page is None:
            return PageLookup.NOT_FOUND
        if not page.is_indexed:
            return PageLookup.KNOWN_NOT_INDEXED
        return PageLookup.KNOWN_INDEXED

    def get(self, page_url: str) -> StatusPage | None:
        """Return the page metadata, or None if the URL is unknown.

        Raises ``CastOrIntegrityError`` for a corrupted entry rather than
        reporting the page as unknown.
        """
        page = self._pages.get(page_url)
        if page is None:
            return None
        if not isinstance(page, StatusPage) or page.url != page_url:
            log.error("Corrupted registry entry for %s: %r", page_url, page)
            raise CastOrIntegrityError(f"registry entry for {page_url} is corrupted")
        return page

    def replace(self, pages: Iterable[StatusPage]) -> None:
        """Swap in a new snapshot in a single assignment."""
        self._pages = {p.url: p for p in pages}

    @property
    def size(self) -> int:
        return len(self._pages)
