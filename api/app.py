from __future__ import annotations

import logging
from typing import Callable, Optional

from fastapi import APIRouter, FastAPI, Query, Request
from fastapi.responses import JSONResponse

from core.errors import (
    CastOrIntegrityError,
    NotFoundError,
    UpstreamError,
    ValidationError,
)
from core.service import IncidentService

log = logging.getLogger(__name__)


def create_app(
    service: IncidentService,
    health: Optional[Callable[[], dict]] = None,
) -> FastAPI:
    """Build the HTTP app around an ``IncidentService``.

    ``health`` supplies extra fields for the health endpoint (registry and
    cache sizes in production).
    """
    app = FastAPI(title="Status page incidents", version="0.1.0")
    router = APIRouter(prefix="/api/v1", tags=["incidents"])

    @router.get("/incidents")
    async def incidents(
        status_page_url: Optional[str] = Query(None, alias="statusPageUrl"),
        impact: Optional[str] = Query(None),
        limit: Optional[str] = Query(None),
    ):
        """Incidents of one status page, newest first.

        ``impact`` is a comma separated list, e.g. ``critical,major,minor,none``
        to exclude maintenance.
        """
        response = await service.get_incidents(status_page_url, impact=impact, limit=limit)
        return response.to_dict()

    @router.get("/health")
    async def health_check():
        body = {"status": "ok"}
        if health is not None:
            body.update(health())
        return body

    app.include_router(router)

    @app.exception_handler(ValidationError)
    async def _validation_error(request: Request, exc: ValidationError):
        return JSONResponse(status_code=400, content={"error": str(exc)})

    @app.exception_handler(NotFoundError)
    async def _not_found(request: Request, exc: NotFoundError):
        return JSONResponse(
            status_code=404, content={"error": "status page not known"}
        )

    @app.exception_handler(CastOrIntegrityError)
    async def _integrity_error(request: Request, exc: CastOrIntegrityError):
        log.error("Integrity failure serving %s: %s", request.url.path, exc)
        return JSONResponse(status_code=500, content={"error": "internal error"})

    @app.exception_handler(UpstreamError)
    async def _upstream_error(request: Request, exc: UpstreamError):
        log.error(
            "Upstream failure serving %s: %s (cause: %r)",
            request.url.path,
            exc,
            exc.__cause__,
        )
        return JSONResponse(status_code=500, content={"error": "internal error"})

    return app
