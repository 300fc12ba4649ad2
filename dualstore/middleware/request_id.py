"""
DualStore API - Request ID Middleware
======================================

What:  Assigns a correlation ID to each incoming request and echoes it back.
How:   Uses the client's X-Request-ID header when it is a plain token,
       otherwise a short generated id; stores it in a ContextVar and in
       request.state, and sets it on the response.
Who:   Applied to every request via Starlette middleware. Read by the access
       log middleware and by the exception handlers in main.py.

The id ends up in log lines and response headers, so a client-supplied
value is only accepted when it matches REQUEST_ID_PATTERN (letters, digits,
`.`, `_`, `-`; at most 64 characters). Anything else is replaced.
"""

import re
import uuid
from contextvars import ContextVar
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"
REQUEST_ID_PATTERN = re.compile(r"[A-Za-z0-9._-]{1,64}")

# Coroutine-local storage for the current request ID.
# Left set after the response: the catch-all 500 handler runs outside this
# middleware and still reads it.
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def resolve_request_id(header_value: Optional[str]) -> str:
    """The client's id when it is a plain token, else a fresh 8-char id."""
    if header_value and REQUEST_ID_PATTERN.fullmatch(header_value):
        return header_value
    return uuid.uuid4().hex[:8]


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Middleware that assigns a unique ID to each request for tracing.

    Behavior:
        1. Accept the client's X-Request-ID header if it is a plain token
        2. Otherwise generate the first 8 hex characters of a UUID4
        3. Store in ContextVar (loggers, handlers) and request.state
        4. Add to response headers
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = rid
        return response
