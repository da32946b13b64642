"""
Blog API - Request Logging Middleware
=====================================

What:  One access log line per HTTP request.
How:   Measures the time spent in the rest of the stack and logs method,
       path, status, duration, request id and client address.

Example:
    2024-01-15T12:00:00 [WARNING] blogapi.access: PUT /api/posts/3f2a... 403 4.2ms [a1b2c3d4] from 127.0.0.1

Request bodies and the Authorization header are never logged.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from blogapi.middleware.request_id import request_id_var

logger = logging.getLogger("blogapi.access")

# Probed every few seconds by orchestrators
_SKIP_PATHS = frozenset({"/health"})


def level_for_status(status: int) -> int:
    """5xx → ERROR, 4xx → WARNING, everything else → INFO."""
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs one line per HTTP request once the response is ready.

    Logged information:
        - Request: method, path, client IP
        - Response: status code, duration in milliseconds
        - Correlation: request ID set by RequestIDMiddleware

    Duration covers everything below this middleware: body validation,
    the JWT check, queries on both stores and serialization.

    Typical durations:
        - GET /api/posts/{id}: 5-20ms (two lookups, one per store)
        - GET /api/posts?search=...: 10-50ms (ILIKE scan plus count)
        - POST /api/auth/login: 200-400ms (bcrypt verify dominates)

    The `extra` fields mirror the message so a JSON formatter can index them.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        # Health checks are passed straight through, unlogged
        path = request.url.path
        if path in _SKIP_PATHS:
            return await call_next(request)

        # perf_counter: monotonic, unaffected by wall-clock changes
        start_time = time.perf_counter()

        # request.client is None under the in-process test transport
        client_ip = request.client.host if request.client else "unknown"

        # Already set: RequestIDMiddleware wraps this one
        rid = request_id_var.get("")

        response = await call_next(request)

        # Time to response headers; streamed bodies are not included
        duration_ms = (time.perf_counter() - start_time) * 1000

        # 5xx → ERROR, 4xx → WARNING (401/403/404 are routine), else INFO
        status = response.status_code
        logger.log(
            level_for_status(status),
            "%s %s %d %.1fms [%s] from %s",
            request.method,
            path,
            status,
            duration_ms,
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "method": request.method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )
        return response
