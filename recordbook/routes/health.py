"""
Recordbook — Health Check Route
=================================

What:  Health check endpoint for monitoring and container liveness checks.
How:   Checks that the data file can be read (or created) and reports the
       current record count.

Status levels:
    - healthy:   data file readable and well-formed (HTTP 200)
    - unhealthy: data file unreadable or corrupt (HTTP 503)
"""

import logging
import time

from fastapi import APIRouter, Depends, Response

from recordbook import __version__
from recordbook.schemas.record import HealthResponse
from recordbook.storage import RecordStore, get_record_store

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

# Set once when the module loads
_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(
    response: Response,
    store: RecordStore = Depends(get_record_store),
) -> HealthResponse:
    available = await store.health_check()
    records = len(await store.load()) if available else 0

    if not available:
        response.status_code = 503

    return HealthResponse(
        status="healthy" if available else "unhealthy",
        version=__version__,
        storage="available" if available else "unavailable",
        records=records,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
