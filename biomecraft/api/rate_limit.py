"""
Fixed-window rate limiting keyed by client address.

State is in-memory and per-process. Each client gets a counter and a reset
time; once the window passes, the next request starts a fresh window.
Expired entries are purged opportunistically during checks.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable

from biomecraft.config import get_rate_limit_max, get_rate_limit_window

logger = logging.getLogger(__name__)


@dataclass
class RateLimitEntry:
    count: int
    reset_time: float


class FixedWindowRateLimiter:
    """Allows ``max_requests`` per ``window_seconds`` for each key."""

    def __init__(
        self,
        max_requests: int = 10,
        window_seconds: float = 60,
        cleanup_interval: float = 300,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.cleanup_interval = cleanup_interval
        self._clock = clock
        self._entries: dict[str, RateLimitEntry] = {}
        self._next_cleanup = clock() + cleanup_interval

    def is_rate_limited(self, key: str) -> bool:
        """Record a request for ``key`` and report whether it must be refused."""
        now = self._clock()
        if now >= self._next_cleanup:
            self.cleanup()

        entry = self._entries.get(key)
        if entry is None or now > entry.reset_time:
            self._entries[key] = RateLimitEntry(count=1, reset_time=now + self.window_seconds)
            return False

        if entry.count >= self.max_requests:
            logger.warning(f"Rate limit exceeded for {key} ({entry.count} requests)")
            return True

        entry.count += 1
        return False

    def cleanup(self) -> int:
        """Drop expired entries. Returns how many were removed."""
        now = self._clock()
        expired = [key for key, entry in self._entries.items() if now > entry.reset_time]
        for key in expired:
            del self._entries[key]
        self._next_cleanup = now + self.cleanup_interval
        if expired:
            logger.debug(f"Rate limiter cleanup removed {len(expired)} entries")
        return len(expired)

    def __len__(self) -> int:
        return len(self._entries)


def create_default_limiter() -> FixedWindowRateLimiter:
    """Limiter configured from the environment"""
    return FixedWindowRateLimiter(
        max_requests=get_rate_limit_max(),
        window_seconds=get_rate_limit_window(),
    )
