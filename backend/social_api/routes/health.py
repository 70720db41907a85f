"""
Social API Backend — Health Check Route
=========================================

What:  GET /health for Docker health checks and load balancer probes.
How:   Runs SELECT 1 against the database; the service is only useful when
       the database is reachable, so a failed probe means "unhealthy" and
       HTTP 503.
"""

import logging
import time

from fastapi import APIRouter, Response
from sqlalchemy import text

from social_api import __version__
from social_api.database import engine
from social_api.schemas.common import HealthResponse

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
