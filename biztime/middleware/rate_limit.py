"""
BizTime Backend — Rate Limiting Middleware
============================================

What:  Per-IP sliding window limiter.
How:   Keeps the request timestamps of each client IP seen within the last
       `rate_limit_window` seconds. A request arriving when the list already
       holds `rate_limit_requests` entries is answered with 429 and a
       Retry-After header counting down to the oldest entry's expiry.

State is in-process memory: each worker process enforces its own limit.
"""

import logging
import time
from collections import defaultdict
from typing import Dict, List

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from biztime.config import settings
from biztime.exceptions import RateLimitExceededError
from biztime.middleware.request_id import request_id_var

logger = logging.getLogger(__name__)


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    In-memory sliding window rate limiter.

    Limits are read from settings on every request, so tests and operators
    can change them without rebuilding the app.
    """

    EXCLUDED_PATHS = {"/health", "/docs", "/openapi.json", "/redoc"}

    # Sweep idle IPs every this many admitted requests
    CLEANUP_EVERY = 1000

    def __init__(self, app, **kwargs):
        super().__init__(app, **kwargs)
        self._requests: Dict[str, List[float]] = defaultdict(list)
        self._admitted = 0

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in self.EXCLUDED_PATHS:
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"
        now = time.time()
        window = settings.rate_limit_window
        window_start = now - window

        recent = [ts for ts in self._requests[client_ip] if ts > window_start]
        self._requests[client_ip] = recent

        if len(recent) >= settings.rate_limit_requests:
            retry_after = int(recent[0] + window - now) + 1
            logger.warning(
                "Rate limit exceeded for IP %s: %d requests in %ds window",
                client_ip,
                len(recent),
                window,
            )
            return self._reject(RateLimitExceededError(retry_after=retry_after))

        recent.append(now)
        self._admitted += 1
        if self._admitted % self.CLEANUP_EVERY == 0:
            self._cleanup_inactive_ips(window_start)

        return await call_next(request)

    @staticmethod
    def _reject(exc: RateLimitExceededError) -> JSONResponse:
        # Raised exceptions would bypass the app's handlers from here, so the
        # 429 body is built directly in the shared error shape.
        return JSONResponse(
            status_code=429,
            content={
                "error": "rate_limit_exceeded",
                "message": exc.message,
                "details": exc.context,
                "request_id": request_id_var.get("") or None,
            },
            headers={"Retry-After": str(exc.retry_after)},
        )

    def _cleanup_inactive_ips(self, window_start: float) -> None:
        """Drop IPs with no request inside the current window."""
        inactive_ips = [
            ip for ip, timestamps in self._requests.items()
            if not timestamps or timestamps[-1] <= window_start
        ]
        for ip in inactive_ips:
            del self._requests[ip]

        if inactive_ips:
            logger.debug("Cleaned up %d inactive IP entries", len(inactive_ips))
