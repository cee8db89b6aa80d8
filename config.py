"""Runtime settings, read from ``INCIDENTS_*`` environment variables."""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

DEFAULT_CACHE_TTL_SECONDS = 60.0
DEFAULT_REFRESH_INTERVAL_SECONDS = 60.0
DEFAULT_HTTP_TIMEOUT_SECONDS = 30.0
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8080
DEFAULT_LOG_LEVEL = "INFO"


@dataclass(frozen=True)
class Settings:
    """Fields:
        store_url:          Base URL of the remote incident store. When unset
                            the in-memory store is used.
        store_seed_path:    JSON document used to seed the in-memory store.
        cache_ttl_seconds:  Lifetime of an incident cache entry.
        refresh_interval_seconds: Registry refresh cadence.
        http_timeout_seconds: Timeout of the shared HTTP client.
    """

    store_url: str | None = None
    store_seed_path: str | None = None
    cache_ttl_seconds: float = DEFAULT_CACHE_TTL_SECONDS
    refresh_interval_seconds: float = DEFAULT_REFRESH_INTERVAL_SECONDS
    http_timeout_seconds: float = DEFAULT_HTTP_TIMEOUT_SECONDS
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        env = os.environ if environ is None else environ
        return cls(
            store_url=env.get("INCIDENTS_STORE_URL") or None,
            store_seed_path=env.get("INCIDENTS_STORE_SEED") or None,
            cache_ttl_seconds=_positive_float(
                env, "INCIDENTS_CACHE_TTL_SECONDS", DEFAULT_CACHE_TTL_SECONDS
            ),
            refresh_interval_seconds=_positive_float(
                env, "INCIDENTS_REFRESH_INTERVAL_SECONDS", DEFAULT_REFRESH_INTERVAL_SECONDS
            ),
            http_timeout_seconds=_positive_float(
                env, "INCIDENTS_HTTP_TIMEOUT_SECONDS", DEFAULT_HTTP_TIMEOUT_SECONDS
            ),
            host=env.get("INCIDENTS_HOST", DEFAULT_HOST),
            port=int(env.get("INCIDENTS_PORT", DEFAULT_PORT)),
            log_level=env.get("INCIDENTS_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
        )


def _positive_float(env: Mapping[str, str], key: str, default: float) -> float:
    raw = env.get(key)
    if raw is None or raw == "":
        return default
    value = float(raw)
    if value <= 0:
        raise ValueError(f"{key} must be positive, got {raw!r}")
    return value
