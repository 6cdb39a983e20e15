"""In-memory fixed-window rate limiter.

Notes:
- Per-process only: running multiple workers multiplies the effective limit,
  and a restart resets every counter.
- Thread-safe: check-and-increment runs under a lock.
- Fixed window: a window opens on the first request for a key and lasts
  window_seconds. Up to 2 * max_requests requests can pass in a short span
  straddling the end of one window and the start of the next.
"""

from __future__ import annotations

import math
import threading
import time
from dataclasses import dataclass
from typing import Callable

from event_signup.adapters.rate_limit.base import AbstractRateLimiter, RateLimitResult


@dataclass
class _WindowRecord:
    window_start: float
    window_seconds: float
    count: int

    def is_expired(self, now: float) -> bool:
        return now - self.window_start > self.window_seconds

    @property
    def reset_at(self) -> float:
        return self.window_start + self.window_seconds


class InMemoryFixedWindowRateLimiter(AbstractRateLimiter):
    """Rate limiter using a fixed time window per key.

    Each record remembers the window it was created with, so keys governed
    by different policies (15 minutes vs 1 hour) expire independently and
    sweep() never drops a record whose own window is still open.
    """

    def __init__(self, *, clock: Callable[[], float] = time.time) -> None:
        """Initialize the in-memory rate limiter.

        Args:
            clock: Time source function returning UNIX time in seconds.
        """
        self._clock = clock
        self._lock = threading.RLock()
        self._records: dict[str, _WindowRecord] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._records

    def consume(self, key: str, max_requests: int, window_seconds: float) -> RateLimitResult:
        """Count one request for key within its current window.

        A missing or expired record is replaced by a fresh one with count 1.
        A record already at max_requests blocks without being mutated.

        Raises:
            ValueError: If key is empty or the limits are invalid.
        """
        if not key:
            raise ValueError("key must be a non-empty string")
        if max_requests < 1:
            raise ValueError("max_requests must be >= 1")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be > 0")

        now = self._clock()

        with self._lock:
            record = self._records.get(key)

            if record is None or record.is_expired(now):
                record = _WindowRecord(window_start=now, window_seconds=window_seconds, count=1)
                self._records[key] = record
                return self._allowed(record, max_requests)

            if record.count >= max_requests:
                return self._blocked(record, max_requests, now)

            record.count += 1
            return self._allowed(record, max_requests)

    def sweep(self) -> int:
        """Remove records whose own window has expired.

        The record map is copied under the lock and filtered outside it, so a
        large map never blocks consume() for the whole sweep. Candidates are
        re-checked before deletion because a key may have been refreshed in
        the meantime.
        """
        now = self._clock()
        with self._lock:
            snapshot = list(self._records.items())

        expired = [key for key, record in snapshot if record.is_expired(now)]

        removed = 0
        with self._lock:
            for key in expired:
                record = self._records.get(key)
                if record is not None and record.is_expired(now):
                    del self._records[key]
                    removed += 1
        return removed

    def _allowed(self, record: _WindowRecord, max_requests: int) -> RateLimitResult:
        return RateLimitResult(
            allowed=True,
            limit=max_requests,
            remaining=max(0, max_requests - record.count),
            reset_at=int(math.ceil(record.reset_at)),
            retry_after_seconds=None,
        )

    def _blocked(self, record: _WindowRecord, max_requests: int, now: float) -> RateLimitResult:
        retry_after = max(1, int(math.ceil(record.reset_at - now)))
        return RateLimitResult(
            allowed=False,
            limit=max_requests,
            remaining=0,
            reset_at=int(math.ceil(record.reset_at)),
            retry_after_seconds=retry_after,
        )
