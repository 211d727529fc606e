from __future__ import annotations

import logging
import math
import time
from collections import defaultdict, deque
from typing import Any

from fastapi import Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

WINDOW_SECONDS = 60.0


class RateLimiter:
    """Sliding one-minute window of lookups per client.

    Each outbound scrape hits a third-party site, so a single client hammering
    the endpoint is throttled here rather than upstream. State is per process;
    ``requests_per_minute=0`` disables the limiter.
    """

    def __init__(self, requests_per_minute: int = 60, trust_forwarded: bool = False) -> None:
        self.rpm = requests_per_minute
        self.trust_forwarded = trust_forwarded
        self._windows: dict[str, deque[float]] = defaultdict(deque)
        self._enabled = requests_per_minute > 0
        self._last_sweep = 0.0

    def client_key(self, request: Request) -> str:
        if self.trust_forwarded:
            forwarded = request.headers.get("X-Forwarded-For", "")
            first = forwarded.split(",")[0].strip()
            if first:
                return first
        return request.client.host if request.client else "unknown"

    def retry_after(self, key: str, now: float | None = None) -> int:
        window = self._windows.get(key)
        if not window:
            return 0
        now = time.monotonic() if now is None else now
        return max(1, math.ceil(window[0] + WINDOW_SECONDS - now))

    def check(self, key: str, now: float | None = None) -> bool:
        if not self._enabled:
            return True
        now = time.monotonic() if now is None else now
        if now - self._last_sweep >= WINDOW_SECONDS:
            self._sweep(now)
        window = self._windows[key]
        while window and window[0] <= now - WINDOW_SECONDS:
            window.popleft()
        if len(window) >= self.rpm:
            return False
        window.append(now)
        return True

    def _sweep(self, now: float) -> None:
        """Forget clients whose newest request has left the window."""
        cutoff = now - WINDOW_SECONDS
        stale = [key for key, window in self._windows.items() if not window or window[-1] <= cutoff]
        for key in stale:
            del self._windows[key]
        self._last_sweep = now

    @property
    def tracked_clients(self) -> int:
        return len(self._windows)

    async def middleware(self, request: Request, call_next: Any) -> Any:
        if not self._enabled:
            return await call_next(request)

        key = self.client_key(request)
        if not self.check(key):
            logger.warning("Rate limit exceeded for %s", key)
            return JSONResponse(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                content={"detail": "Rate limit exceeded"},
                headers={"Retry-After": str(self.retry_after(key))},
            )
        return await call_next(request)
