"""In-memory fixed-window rate limiting for expensive endpoints."""
from __future__ import annotations

from dataclasses import dataclass
from threading import Lock
from time import monotonic
from typing import Dict, Optional

from planscope.core.config import settings


@dataclass
class _Window:
    count: int
    reset_at: float


class FixedWindowRateLimiter:
    """Allow at most ``max_requests`` hits per key inside each window.

    State is process-local; a multi-worker deployment gets one budget per worker.
    """

    def __init__(self, max_requests: int, window_seconds: float) -> None:
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._hits: Dict[str, _Window] = {}
        self._lock = Lock()

    def allow(self, key: str, now: Optional[float] = None) -> bool:
        """Record a hit for ``key`` and return whether it is within the limit."""
        current = monotonic() if now is None else now
        with self._lock:
            self._prune(current)
            window = self._hits.get(key)
            if window is None:
                self._hits[key] = _Window(count=1, reset_at=current + self.window_seconds)
                return True
            window.count += 1
            return window.count <= self.max_requests

    def reset(self) -> None:
        with self._lock:
            self._hits.clear()

    def _prune(self, current: float) -> None:
        expired = [key for key, window in self._hits.items() if current > window.reset_at]
        for key in expired:
            del self._hits[key]


plan_rate_limiter = FixedWindowRateLimiter(
    max_requests=settings.plan_rate_limit_max_requests,
    window_seconds=settings.plan_rate_limit_window_seconds,
)
