"""Filtering, ordering and limiting of incident lists.

These helpers are applied identically whether the incidents came from the
cache or from the durable store.
"""
from __future__ import annotations

import re
from typing import AbstractSet, Iterable, Sequence

from core.errors import ValidationError
from models.incident import Impact, Incident

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")


def filter_by_impact(
    incidents: Iterable[Incident], impacts: AbstractSet[Impact]
) -> list[Incident]:
    """Keep incidents whose impact is in ``impacts``; all of them if empty."""
    if not impacts:
        return list(incidents)
    return [i for i in incidents if i.impact in impacts]


def sort_descending(incidents: Iterable[Incident]) -> list[Incident]:
    """Most recent first. Ties keep their original relative order."""
    return sorted(incidents, key=lambda i: i.start_time, reverse=True)


def apply_limit(incidents: Sequence[Incident], limit: int | None) -> list[Incident]:
    if limit is None or len(incidents) <= limit:
        return list(incidents)
    return list(incidents[:limit])


def parse_impacts(raw: str | None) -> frozenset[Impact]:
    """Parse a comma separated impact list such as ``critical,major``."""
    if not raw:
        return frozenset()
    impacts = set()
    for token in raw.split(","):
        try:
            impacts.add(Impact.parse(token))
        except ValueError:
            raise ValidationError(f"invalid impact {token!r}") from None
    return frozenset(impacts)


def parse_limit(raw: str | None) -> int | None:
    if raw is None or raw == "":
        return None
    if not _INTEGER_RE.fullmatch(raw):
        raise ValidationError("limit must be an integer")
    limit = int(raw)
    if limit < 0:
        raise ValidationError("limit must not be negative")
    return limit
