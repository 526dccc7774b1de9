"""
Notes API — Health Check Route
================================

What:  Health check endpoint for monitoring and container probes.
Why:   A service that can't reach its note store is effectively down; the
       probe should say so instead of only proving the process is running.
How:   Asks the NoteStorage whether its backing file is reachable.

Status levels:
    - healthy:   note store reachable (HTTP 200)
    - unhealthy: note store unreachable (HTTP 503)
"""

import logging
import time

from fastapi import APIRouter, Depends, Response

from notes_api import __version__
from notes_api.routes.notes import get_note_service
from notes_api.schemas.note import HealthResponse
from notes_api.services.note_service import NoteService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

# Initialized once when the module loads
_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "Note store unreachable", "model": HealthResponse}},
    summary="Service health check",
)
async def health_check(
    response: Response,
    service: NoteService = Depends(get_note_service),
) -> HealthResponse:
    storage_ok = await service.storage.health_check()
    if not storage_ok:
        logger.warning("Health check: note store unreachable")
        response.status_code = 503

    return HealthResponse(
        status="healthy" if storage_ok else "unhealthy",
        version=__version__,
        storage="available" if storage_ok else "unavailable",
        uptime_seconds=round(time.time() - _start_time, 2),
    )
