"""
Blog API - Request ID Middleware
================================

What:  Gives every request a correlation id and echoes it as X-Request-ID.
How:   Reuses a well-formed client X-Request-ID, otherwise generates a short
       uuid4 prefix. The id lives in a ContextVar so loggers and exception
       handlers can include it without passing it around.
"""

import re
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"

# Coroutine-local: concurrent requests on one event loop each see their own id
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

# Client ids end up in log lines, so only plain tokens are accepted
_VALID_REQUEST_ID = re.compile(r"^[A-Za-z0-9._-]{1,64}$")


def new_request_id() -> str:
    # First 8 hex chars of a uuid4
    return uuid.uuid4().hex[:8]


def resolve_request_id(header_value: str) -> str:
    """Returns the client's id when it is a plain token, else a fresh one."""
    if header_value and _VALID_REQUEST_ID.match(header_value):
        return header_value
    return new_request_id()


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Assigns the request id before anything else runs.

    Registered last in create_app(), so it is the outermost middleware and
    the access log line, service logs and error handlers all see the id.

    Flow:
        1. Read X-Request-ID; keep it if it is a plain token, else generate one
        2. Store it in request_id_var and on request.state
        3. Call the rest of the stack
        4. Copy the id onto the response, BlogError envelopes included
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        # A missing header resolves to a fresh id
        rid = resolve_request_id(request.headers.get(REQUEST_ID_HEADER, ""))

        # ContextVar for loggers, request.state for route handlers
        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)

        # Unhandled 500s are rendered outside this middleware and carry no id
        response.headers[REQUEST_ID_HEADER] = rid
        return response
