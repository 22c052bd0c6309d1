"""
BizTime Backend — Access Log Middleware
=========================================

What:  One log line per HTTP request on the `biztime.access` logger.
How:   Times the downstream call and logs method, path, status, duration,
       request ID and client IP. Level follows the status class:
       5xx → ERROR, 4xx → WARNING, everything else → INFO.

Example line:
    2024-01-15T12:00:00 [INFO] biztime.access: PUT /invoices/2 200 4.2ms [a1b2c3d4] from 10.0.0.7

Request bodies are never logged.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from biztime.middleware.request_id import request_id_var

logger = logging.getLogger("biztime.access")

QUIET_PATHS = {"/health"}


def level_for_status(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Access logging for every route except health probes."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in QUIET_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start_time) * 1000

        client_ip = request.client.host if request.client else "unknown"
        rid = request_id_var.get("")
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
