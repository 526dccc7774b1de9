"""
Notes API — Request ID Middleware
===================================

What:  Assigns an ID to each incoming request and returns it in X-Request-ID.
Why:   Lets every log line of one request, and the client's error report, be
       correlated without matching timestamps.
How:   Uses the client's X-Request-ID if sent, otherwise a short UUID; stores it
       in a ContextVar for loggers and in request.state for handlers.
When:  Outermost custom middleware, so the ID exists before logging runs.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local: concurrent requests on one event loop each see their own ID
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Middleware that assigns a unique ID to each request for tracing."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        # 8 hex chars are enough to correlate log lines and stay readable
        rid = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:8]

        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)
        response.headers["X-Request-ID"] = rid
        return response
