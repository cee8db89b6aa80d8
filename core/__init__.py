from core.errors import (
    CastOrIntegrityError,
    IncidentServiceError,
    NotFoundError,
    PageGoneError,
    UpstreamError,
    ValidationError,
)
from core.cache import IncidentCache
from core.registry import PageLookup, StatusPageRegistry
from core.resolver import IncidentResolver, Resolution
from core.service import IncidentService
from core.refresher import RegistryRefresher

__all__ = [
    "CastOrIntegrityError",
    "IncidentCache",
    "IncidentResolver",
    "IncidentService",
    "IncidentServiceError",
    "NotFoundError",
    "PageGoneError",
    "PageLookup",
    "RegistryRefresher",
    "Resolution",
    "StatusPageRegistry",
    "UpstreamError",
    "ValidationError",
]
