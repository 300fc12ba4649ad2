"""
DualStore API - Health Check Route
===================================

What:  Health check endpoint for container and load balancer probes.
How:   Pings both backends through their store adapters and reports each
       one plus an aggregate status.
Who:   Called by Docker health checks and monitoring systems.

Status levels:
    - healthy:   both backends answered (HTTP 200)
    - unhealthy: at least one backend did not answer (HTTP 503)
Both backends are critical: every route depends on exactly one of them and
there is no fallback between them.
"""

import logging
import time

from fastapi import APIRouter, Response, status

from dualstore import __version__
from dualstore.schemas.resource import HealthResponse
from dualstore.stores.base import ResourceStore

logger = logging.getLogger(__name__)

# Process start, for uptime reporting
_start_time = time.time()


def create_router(pg_store: ResourceStore, mongo_store: ResourceStore) -> APIRouter:
    """Build the health route around the two stores it probes."""
    router = APIRouter(tags=["Health"])

    @router.get(
        "/health",
        response_model=HealthResponse,
        responses={503: {"description": "A backend is unreachable", "model": HealthResponse}},
        summary="Service health check",
    )
    async def health_check(response: Response) -> HealthResponse:
        """
        Probe both backends.

        Checks:
            PostgreSQL: SELECT 1
            MongoDB: ping command
        """
        postgres_ok = await pg_store.ping()
        mongo_ok = await mongo_store.ping()

        overall = "healthy" if postgres_ok and mongo_ok else "unhealthy"
        if overall == "unhealthy":
            logger.warning(
                "Health check failed: postgres=%s mongo=%s", postgres_ok, mongo_ok
            )
            response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

        return HealthResponse(
            status=overall,
            version=__version__,
            postgres="connected" if postgres_ok else "disconnected",
            mongo="connected" if mongo_ok else "disconnected",
            uptime_seconds=round(time.time() - _start_time, 2),
        )

    return router
