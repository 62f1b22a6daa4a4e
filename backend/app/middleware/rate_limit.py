"""
PromptShelf Backend — Rate Limiting Middleware
===============================================

What:  Per-IP sliding window limiter in front of every API route.
How:   ``SlidingWindowLimiter`` keeps the timestamps of each client's recent
       requests; the middleware consults it and answers 429 with a
       ``Retry-After`` header once a client has used up its window.

State lives in process memory, so each uvicorn worker counts separately.
A shared limiter (Redis INCR with TTL) is the upgrade for multi-worker
deployments.
"""

import logging
import time
from collections import defaultdict
from typing import Dict, List, Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from app.config import settings
from app.exceptions import RateLimitExceededError
from app.middleware.request_id import request_id_var

logger = logging.getLogger(__name__)


class SlidingWindowLimiter:
    """
    Counts requests per key over the last ``window`` seconds.

    ``hit`` returns ``None`` when the request is allowed (and records it),
    or the number of seconds until the oldest recorded request leaves the
    window.
    """

    # Forget idle clients every this many recorded hits
    SWEEP_EVERY = 1000

    def __init__(self, limit: int, window: int):
        self.limit = limit
        self.window = window
        self._hits: Dict[str, List[float]] = defaultdict(list)
        self._recorded = 0

    def hit(self, key: str, now: Optional[float] = None) -> Optional[int]:
        now = time.time() if now is None else now
        window_start = now - self.window

        recent = [ts for ts in self._hits[key] if ts > window_start]
        if len(recent) >= self.limit:
            self._hits[key] = recent
            return int(recent[0] + self.window - now) + 1

        recent.append(now)
        self._hits[key] = recent
        self._recorded += 1
        if self._recorded % self.SWEEP_EVERY == 0:
            self._sweep(window_start)
        return None

    def _sweep(self, window_start: float) -> None:
        idle = [
            key for key, stamps in self._hits.items()
            if not stamps or stamps[-1] <= window_start
        ]
        for key in idle:
            del self._hits[key]
        if idle:
            logger.debug("Rate limiter dropped %d idle clients", len(idle))


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    Limits come from ``RATE_LIMIT_REQUESTS`` per ``RATE_LIMIT_WINDOW``
    seconds. Health checks and the API docs are never limited.
    """

    EXCLUDED_PATHS = {"/health", "/docs", "/openapi.json", "/redoc"}

    def __init__(self, app, limiter: Optional[SlidingWindowLimiter] = None, **kwargs):
        super().__init__(app, **kwargs)
        self.limiter = limiter or SlidingWindowLimiter(
            settings.rate_limit_requests, settings.rate_limit_window,
        )

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in self.EXCLUDED_PATHS:
            return await call_next(request)

        # Behind a proxy this is the proxy's address
        client_ip = request.client.host if request.client else "unknown"

        retry_after = self.limiter.hit(client_ip)
        if retry_after is None:
            return await call_next(request)

        # Raised errors inside middleware bypass the app's exception
        # handlers, so the 429 body is rendered here.
        exc = RateLimitExceededError(retry_after=retry_after)
        logger.warning(
            "Rate limit exceeded for %s: %d requests in %ds",
            client_ip, self.limiter.limit, self.limiter.window,
        )
        return JSONResponse(
            status_code=429,
            content={
                "error": "rate_limit_exceeded",
                "message": exc.message,
                "details": exc.context,
                "request_id": request_id_var.get(""),
            },
            headers={"Retry-After": str(exc.retry_after)},
        )
