# lexrelay/limits.py
# Per-client-IP fixed-window rate limiting for the /api/ routes.

from __future__ import annotations
import logging
import time
from typing import Dict, Optional, Tuple

from fastapi import Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

RATE_LIMITED_MESSAGE = "Too many requests from this IP, please try again later."


class FixedWindowRateLimiter:
    def __init__(self, window_s: float = 60.0, max_requests: int = 20):
        self.window_s = window_s
        self.max_requests = max_requests
        self._windows: Dict[str, Tuple[float, int]] = {}  # key -> (window start, count)

    def hit(self, key: str, now: Optional[float] = None) -> Tuple[bool, int]:
        """Count one request; returns (allowed, seconds until the window resets)."""
        now = time.monotonic() if now is None else now
        start, count = self._windows.get(key, (now, 0))
        if now - start >= self.window_s:
            start, count = now, 0
        retry_after = int(max(0.0, self.window_s - (now - start))) + 1
        if count >= self.max_requests:
            return False, retry_after
        self._windows[key] = (start, count + 1)
        if len(self._windows) > 10_000:
            self._prune(now)
        return True, retry_after

    def _prune(self, now: float) -> None:
        stale = [k for k, (start, _) in self._windows.items() if now - start >= self.window_s]
        for k in stale:
            del self._windows[k]

    def reset(self) -> None:
        self._windows.clear()


async def rate_limit_mw(request: Request, call_next):
    limiter: Optional[FixedWindowRateLimiter] = getattr(request.app.state, "rate_limiter", None)
    if limiter is None or not request.url.path.startswith("/api/"):
        return await call_next(request)

    ident = request.client.host if request.client else "unknown"
    allowed, retry_after = limiter.hit(ident)
    if not allowed:
        logger.info("Rate limit exceeded for %s on %s", ident, request.url.path)
        resp = JSONResponse({"error": RATE_LIMITED_MESSAGE}, status_code=429)
        resp.headers["Retry-After"] = str(retry_after)
        return resp
    return await call_next(request)
