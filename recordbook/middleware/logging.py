"""
Recordbook — Request Logging Middleware
=========================================

What:  One access log line for every HTTP request.
How:   Times the request, then logs method, path, status, duration, request
       id and client address at a level chosen from the status class.
When:  Inside RequestIDMiddleware, so the request id is already set.

Example line:
    2024-01-15T12:00:00 [INFO] recordbook.access: POST /save 200 3.4ms [a1b2c3d4] from 127.0.0.1

Request bodies are never logged. An exception escaping the app is logged as
a 500 before it propagates to the server error handler.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from recordbook.middleware.request_id import request_id_var

logger = logging.getLogger("recordbook.access")

# Polled by health checkers every few seconds
QUIET_PATHS = frozenset({"/health"})


def level_for_status(status: int) -> int:
    """5xx → ERROR, 4xx → WARNING, everything else → INFO."""
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs method, path, status and duration of each request."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in QUIET_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        status = 500
        try:
            response = await call_next(request)
            status = response.status_code
            return response
        finally:
            duration_ms = (time.perf_counter() - start_time) * 1000
            rid = request_id_var.get("")
            client_ip = request.client.host if request.client else "unknown"
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
                    "status": status,
                    "duration_ms": round(duration_ms, 2),
                },
            )
