from store.base import IncidentStore
from store.http_store import HttpIncidentStore
from store.memory import InMemoryIncidentStore

__all__ = ["IncidentStore", "HttpIncidentStore", "InMemoryIncidentStore"]
