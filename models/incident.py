from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class Impact(str, Enum):
    """Severity classification reported by a status page."""

    CRITICAL = "critical"
    MAJOR = "major"
    MINOR = "minor"
    NONE = "none"
    MAINTENANCE = "maintenance"

    @classmethod
    def parse(cls, raw: str) -> Impact:
        """Parse a single impact name. Matching is exact after trimming."""
        try:
            return cls(raw.strip())
        except ValueError:
            raise ValueError(f"unknown impact {raw!r}") from None


_FRACTION_RE = re.compile(r"(T\d{2}:\d{2}:\d{2})\.(\d+)", re.ASCII)


def _parse_timestamp(raw: Any) -> datetime:
    """Parse ISO 8601 timestamps that may include fractional seconds.

    Fractions of any length (RFC 3339 allows 1 to 9 digits) are padded or
    truncated to microseconds before parsing.
    """
    if isinstance(raw, datetime):
        ts = raw
    elif isinstance(raw, str):
        cleaned = _FRACTION_RE.sub(
            lambda m: f"{m.group(1)}.{m.group(2)[:6].ljust(6, '0')}",
            raw.replace("Z", "+00:00"),
            count=1,
        )
        ts = datetime.fromisoformat(cleaned)
    else:
        raise ValueError(f"expected ISO 8601 timestamp, got {type(raw).__name__}")
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


def _format_timestamp(ts: datetime) -> str:
    return ts.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def _require_str(data: dict[str, Any], key: str, default: str | None = None) -> str:
    value = data.get(key, default)
    if not isinstance(value, str):
        raise ValueError(f"field {key!r} must be a string")
    return value


@dataclass(frozen=True)
class IncidentEvent:
    """A single update posted on an incident (e.g. 'Investigating')."""

    title: str
    description: str
    time: datetime

    @classmethod
    def from_dict(cls, data: Any) -> IncidentEvent:
        if not isinstance(data, dict):
            raise ValueError("incident event must be an object")
        return cls(
            title=_require_str(data, "title", ""),
            description=_require_str(data, "description", ""),
            time=_parse_timestamp(data.get("time")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "time": _format_timestamp(self.time),
        }


@dataclass(frozen=True)
class Incident:
    """Canonical incident record as held by the durable store.

    Fields:
        title:           Incident headline.
        components:      Affected components, as named by the status page.
        events:          Updates posted on the incident, oldest first.
        start_time:      When the incident began (UTC). Ordering key.
        end_time:        When it was resolved, ``None`` while ongoing.
        description:     Free text body.
        deep_link:       Link to the incident on its status page. Unique
                         identifier of the incident.
        impact:          Severity classification.
        status_page_url: URL of the status page that reported it.
    """

    title: str
    start_time: datetime
    deep_link: str
    impact: Impact
    status_page_url: str
    components: tuple[str, ...] = ()
    events: tuple[IncidentEvent, ...] = ()
    end_time: datetime | None = None
    description: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> Incident:
        """Build an incident from its JSON form.

        Raises ``ValueError`` when the payload does not have the expected
        shape; callers decide how to classify that.
        """
        if not isinstance(data, dict):
            raise ValueError("incident must be an object")

        components = data.get("components")
        if components is None:
            components = []
        if not isinstance(components, list) or not all(
            isinstance(c, str) for c in components
        ):
            raise ValueError("field 'components' must be a list of strings")

        events = data.get("events")
        if events is None:
            events = []
        if not isinstance(events, list):
            raise ValueError("field 'events' must be a list")

        raw_end = data.get("endTime")
        return cls(
            title=_require_str(data, "title"),
            components=tuple(components),
            events=tuple(IncidentEvent.from_dict(e) for e in events),
            start_time=_parse_timestamp(data.get("startTime")),
            end_time=_parse_timestamp(raw_end) if raw_end else None,
            description=_require_str(data, "description", ""),
            deep_link=_require_str(data, "deepLink"),
            impact=Impact.parse(_require_str(data, "impact")),
            status_page_url=_require_str(data, "statusPageUrl"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "components": list(self.components),
            "events": [e.to_dict() for e in self.events],
            "startTime": _format_timestamp(self.start_time),
            "endTime": _format_timestamp(self.end_time) if self.end_time else None,
            "description": self.description,
            "deepLink": self.deep_link,
            "impact": self.impact.value,
            "statusPageUrl": self.status_page_url,
        }


@dataclass(frozen=True)
class StatusPage:
    """Registry metadata for one status page.

    ``url`` is compared by exact string match. ``is_indexed`` is True once
    the page's incidents have been ingested at least once.
    """

    name: str
    url: str
    is_indexed: bool = False

    @classmethod
    def from_dict(cls, data: Any) -> StatusPage:
        if not isinstance(data, dict):
            raise ValueError("status page must be an object")
        is_indexed = data.get("isIndexed", False)
        if not isinstance(is_indexed, bool):
            raise ValueError("field 'isIndexed' must be a boolean")
        return cls(
            name=_require_str(data, "name", ""),
            url=_require_str(data, "url"),
            is_indexed=is_indexed,
        )

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "url": self.url, "isIndexed": self.is_indexed}


@dataclass(frozen=True)
class IncidentsResponse:
    """Envelope returned for an incidents query."""

    incidents: tuple[Incident, ...] = field(default_factory=tuple)
    is_indexed: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "incidents": [i.to_dict() for i in self.incidents],
            "isIndexed": self.is_indexed,
        }
