"""In-memory fixed-window rate limiter.

Notes:
- Per-process only: running multiple workers multiplies the effective limit,
  and a restart resets every client's budget.
- Each client's window opens with its first request, not on a shared clock
  boundary.
- Memory is bounded: expired entries are swept and the least recently seen
  clients are evicted once ``max_keys`` is exceeded.
"""

from __future__ import annotations

import logging
import math
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable

from vrf_api.adapters.rate_limit.base import AbstractRateLimiter, RateLimitResult

logger = logging.getLogger(__name__)


@dataclass
class RateLimitEntry:
    """Request count of one client within its current window."""

    count: int
    reset_at: float


class InMemoryFixedWindowRateLimiter(AbstractRateLimiter):
    """Rate limiter using a fixed time window per key.

    A key's first request (or its first request after ``reset_at``) opens a
    new window with a count of one. Later requests are counted until the
    count reaches ``limit``; from then on they are rejected without being
    counted until the window expires.
    """

    def __init__(
        self,
        *,
        limit: int,
        window_seconds: int = 60,
        max_keys: int | None = 10000,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the in-memory rate limiter.

        Args:
            limit: Maximum number of requests per window.
            window_seconds: Size of the fixed window in seconds.
            max_keys: Maximum tracked clients (None for unbounded).
            clock: Time source function returning UNIX time in seconds.

        Raises:
            ValueError: If limit, window_seconds or max_keys are invalid.
        """
        if limit < 1:
            raise ValueError("limit must be >= 1")
        if window_seconds < 1:
            raise ValueError("window_seconds must be >= 1")
        if max_keys is not None and max_keys < 1:
            raise ValueError("max_keys must be >= 1")

        self._limit = limit
        self._window_seconds = window_seconds
        self._max_keys = max_keys
        self._clock = clock
        self._lock = threading.RLock()
        self._entries: OrderedDict[str, RateLimitEntry] = OrderedDict()

    @property
    def limit(self) -> int:
        return self._limit

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def consume(self, key: str) -> RateLimitResult:
        """Count one request for ``key``.

        Raises:
            ValueError: If key is empty.
        """
        if not key:
            raise ValueError("key must be a non-empty string")

        now = self._clock()

        with self._lock:
            entry = self._entries.get(key)

            if entry is None or now > entry.reset_at:
                entry = RateLimitEntry(count=1, reset_at=now + self._window_seconds)
                self._entries[key] = entry
                self._entries.move_to_end(key)
                self._enforce_capacity_locked(now)
                return self._allowed(entry)

            self._entries.move_to_end(key)

            if entry.count >= self._limit:
                return self._blocked(entry, now)

            entry.count += 1
            return self._allowed(entry)

    def sweep_expired(self) -> int:
        """Drop every entry whose window has elapsed.

        Returns:
            Number of entries removed.
        """
        with self._lock:
            return self._sweep_expired_locked(self._clock())

    def _sweep_expired_locked(self, now: float) -> int:
        expired = [k for k, entry in self._entries.items() if now > entry.reset_at]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def _enforce_capacity_locked(self, now: float) -> None:
        if self._max_keys is None or len(self._entries) <= self._max_keys:
            return

        swept = self._sweep_expired_locked(now)
        evicted = 0
        while len(self._entries) > self._max_keys:
            # Least recently seen client goes first
            self._entries.popitem(last=False)
            evicted += 1

        logger.debug(
            "rate_limit.capacity_enforced",
            extra={
                "swept": swept,
                "evicted": evicted,
                "entries": len(self._entries),
            },
        )

    def _allowed(self, entry: RateLimitEntry) -> RateLimitResult:
        return RateLimitResult(
            allowed=True,
            limit=self._limit,
            remaining=max(0, self._limit - entry.count),
            reset_at=int(math.ceil(entry.reset_at)),
            retry_after_seconds=None,
        )

    def _blocked(self, entry: RateLimitEntry, now: float) -> RateLimitResult:
        return RateLimitResult(
            allowed=False,
            limit=self._limit,
            remaining=0,
            reset_at=int(math.ceil(entry.reset_at)),
            retry_after_seconds=max(1, int(math.ceil(entry.reset_at - now))),
        )
