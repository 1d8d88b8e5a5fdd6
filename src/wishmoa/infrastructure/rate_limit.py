"""In-process fixed-window rate limiting.

Counters live in this process only. With several workers each one enforces
its own window, so the effective limit is per worker.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Dict

PURGE_INTERVAL_SECONDS = 60.0


@dataclass(frozen=True)
class RateLimitOptions:
    window_seconds: float
    max_requests: int


@dataclass(frozen=True)
class RateLimitResult:
    success: bool
    remaining: int
    reset_at: float


@dataclass
class _Window:
    count: int
    reset_at: float


RATE_LIMITS: Dict[str, RateLimitOptions] = {
    "general_api": RateLimitOptions(window_seconds=60.0, max_requests=60),
}


class FixedWindowRateLimiter:
    """Counts requests per identifier (client IP or user id) in fixed windows.

    Expired windows are dropped from within `check()` at most once per
    `purge_interval` seconds.
    """

    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        purge_interval: float = PURGE_INTERVAL_SECONDS,
    ):
        self._clock = clock
        self._purge_interval = purge_interval
        self._windows: Dict[str, _Window] = {}
        self._last_purge = clock()

    def check(self, identifier: str, options: RateLimitOptions) -> RateLimitResult:
        now = self._clock()
        if now - self._last_purge >= self._purge_interval:
            self.purge_expired()

        window = self._windows.get(identifier)

        if window is None or now > window.reset_at:
            window = _Window(count=1, reset_at=now + options.window_seconds)
            self._windows[identifier] = window
            return RateLimitResult(
                success=True,
                remaining=options.max_requests - 1,
                reset_at=window.reset_at,
            )

        if window.count >= options.max_requests:
            return RateLimitResult(success=False, remaining=0, reset_at=window.reset_at)

        window.count += 1
        return RateLimitResult(
            success=True,
            remaining=options.max_requests - window.count,
            reset_at=window.reset_at,
        )

    def purge_expired(self) -> int:
        """Drop windows that have already reset. Returns how many were removed."""
        now = self._clock()
        self._last_purge = now
        expired = [key for key, w in self._windows.items() if now > w.reset_at]
        for key in expired:
            del self._windows[key]
        return len(expired)

    def __len__(self) -> int:
        return len(self._windows)
