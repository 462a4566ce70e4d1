"""
Happy Thoughts API: Health Check Route
======================================

What:  GET /health for load balancers and container health checks.
How:   Runs `SELECT 1` against the engine; the service is "healthy" only if
       the database answers.
"""

import logging
import time

from fastapi import APIRouter, Response
from sqlalchemy import text

from happythoughts import __version__
from happythoughts.database import engine
from happythoughts.schemas.common import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "Database unreachable", "model": HealthResponse}},
    summary="Service health check",
)
async def health_check(response: Response) -> HealthResponse:
    db_status = "connected"
    overall = "healthy"

    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        db_status = "disconnected"
        overall = "unhealthy"
        response.status_code = 503
        logger.warning("Health check: database unreachable: %s", str(e))

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
