"""
DualStore API - Request Logging Middleware
===========================================

What:  One access-log line per HTTP request, tagged with the backend that
       served it and the resource id it addressed.
How:   Times the downstream call, then reads the backend from the URL
       namespace and the id from the path parameters the router matched.
Who:   Applied to every request via Starlette middleware, inside
       RequestIDMiddleware so the request ID is already set.

Log line:
    PUT /api/pg/resources/7 200 3.1ms backend=postgres id=7 [a1b2c3d4] from 172.18.0.1

What we log vs what we don't:
    Logged: method, path, status, duration, backend, resource id, client IP,
            request ID
    Not logged: request bodies (resource contents)
"""

import logging
import time
from typing import Optional, Tuple

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from dualstore.middleware.request_id import request_id_var

logger = logging.getLogger("dualstore.access")

# URL namespace → backend name used in log lines
BACKEND_PREFIXES = {
    "/api/pg/": "postgres",
    "/api/mongo/": "mongo",
}

SKIP_PATHS = frozenset({"/health"})


def backend_for_path(path: str) -> Optional[str]:
    """The backend serving `path`, or None outside the resource namespaces."""
    for prefix, backend in BACKEND_PREFIXES.items():
        if path.startswith(prefix):
            return backend
    return None


def describe_target(request: Request) -> Tuple[str, str]:
    """
    (backend, resource_id) for the access line; "-" where not applicable.

    Must be called after the route ran: the router fills in `path_params`
    on the shared scope while matching.
    """
    backend = backend_for_path(request.url.path) or "-"
    resource_id = request.scope.get("path_params", {}).get("resource_id")
    return backend, str(resource_id) if resource_id is not None else "-"


def level_for_status(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs method, path, status, duration, backend and resource id of each
    request. Health probes are not logged.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in SKIP_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start_time) * 1000

        backend, resource_id = describe_target(request)
        client_ip = request.client.host if request.client else "unknown"
        rid = request_id_var.get("")
        status = response.status_code

        logger.log(
            level_for_status(status),
            "%s %s %d %.1fms backend=%s id=%s [%s] from %s",
            request.method,
            request.url.path,
            status,
            duration_ms,
            backend,
            resource_id,
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "backend": backend,
                "resource_id": resource_id,
                "status": status,
                "duration_ms": round(duration_ms, 2),
            },
        )
        return response
