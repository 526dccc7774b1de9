"""
Notes API — Request Logging Middleware
========================================

What:  One log line per HTTP request: method, url, status, duration, request ID.
Why:   Access log with request ID correlation and timing, which uvicorn's own
       access log doesn't give us.
When:  Inside RequestIDMiddleware, so the request ID is already set.

Example line:
    GET /notes?page=2&search=meeting 200 3.4ms [1f0c9a2b] from 127.0.0.1

What we log vs what we DON'T log:
    Log: method, url (with query), status, duration, client IP, request ID
    Don't log: request bodies (note contents are user data)
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from notes_api.middleware.request_id import request_id_var

logger = logging.getLogger("notes_api.access")

# Probes and the docs UI poll often and say nothing about note traffic
QUIET_PATHS = frozenset({"/health", "/api-docs", "/redoc", "/openapi.json"})


def level_for_status(status: int) -> int:
    """5xx → ERROR, 4xx → WARNING, anything else → INFO."""
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs every non-quiet request once its response is ready."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in QUIET_PATHS:
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        url = request.url.path
        if request.url.query:
            url = f"{url}?{request.url.query}"
        client = request.client.host if request.client else "unknown"
        rid = request_id_var.get("")

        logger.log(
            level_for_status(response.status_code),
            "%s %s %d %.1fms [%s] from %s",
            request.method,
            url,
            response.status_code,
            elapsed_ms,
            rid,
            client,
            extra={
                "request_id": rid,
                "status": response.status_code,
                "duration_ms": round(elapsed_ms, 2),
            },
        )
        return response
