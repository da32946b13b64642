"""
Blog API - Health Check Route
=============================

What:  Health check endpoint for monitoring and load balancer probes.
How:   Runs SELECT 1 against the credential store and the content store.
Who:   Docker health checks, load balancers, monitoring.

Status levels:
    healthy:   both stores reachable (HTTP 200)
    unhealthy: at least one store unreachable (HTTP 503)
"""

import logging
import time

from fastapi import APIRouter, Response, status

from blogapi import __version__
from blogapi.database import content_engine, engine, ping
from blogapi.schemas.common import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


async def _probe(name: str, target) -> str:
    try:
        await ping(target)
    except Exception as e:
        logger.warning("Health check: %s unreachable: %s", name, str(e))
        return "disconnected"
    return "connected"


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "A store is unreachable", "model": HealthResponse}},
    summary="Service health check",
)
async def health_check(response: Response) -> HealthResponse:
    credential_status = await _probe("credential store", engine)
    content_status = await _probe("content store", content_engine)

    overall = "healthy"
    if "disconnected" in (credential_status, content_status):
        overall = "unhealthy"
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return HealthResponse(
        status=overall,
        version=__version__,
        credential_store=credential_status,
        content_store=content_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
