from __future__ import annotations


class IncidentServiceError(Exception):
    """Base class for every error raised by the incident query core."""


class ValidationError(IncidentServiceError):
    """A request parameter is missing or malformed. Caused by the caller."""


class NotFoundError(IncidentServiceError):
    """The status page is not known."""

    def __init__(self, page_url: str, message: str = "status page not known") -> None:
        super().__init__(f"{message}: {page_url}")
        self.page_url = page_url


class PageGoneError(NotFoundError):
    """The page passed the registry gate but no longer exists in the store."""

    def __init__(self, page_url: str) -> None:
        super().__init__(page_url, "status page no longer exists")


class CastOrIntegrityError(IncidentServiceError):
    """A cached, registry or fetched value does not have the expected shape."""


class UpstreamError(IncidentServiceError):
    """The durable store or the registry source failed.

    ``operation`` and ``page_url`` identify what was being attempted; the
    original exception is chained as ``__cause__``.
    """

    def __init__(self, operation: str, page_url: str | None = None, detail: str = "") -> None:
        target = f" for {page_url}" if page_url else ""
        suffix = f": {detail}" if detail else ""
        super().__init__(f"{operation} failed{target}{suffix}")
        self.operation = operation
        self.page_url = page_url
