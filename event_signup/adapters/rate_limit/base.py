"""Rate limiter interfaces.

The API should depend on this abstraction (not the concrete implementation)
so we can swap storage backends later (e.g., Redis) with minimal changes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class RateLimitResult:
    """Result of a rate limit check/consume operation.

    Attributes:
        allowed: Whether the request is allowed to proceed.
        limit: Max requests per window.
        remaining: Remaining requests in the current window (0 when blocked).
        reset_at: UNIX epoch seconds when the current window expires.
        retry_after_seconds: Suggested wait time in seconds when blocked.
    """

    allowed: bool
    limit: int
    remaining: int
    reset_at: int
    retry_after_seconds: int | None


class AbstractRateLimiter(ABC):
    """Interface for rate limiters.

    Limits are supplied per call so one limiter instance can serve every
    endpoint policy.
    """

    @abstractmethod
    def consume(self, key: str, max_requests: int, window_seconds: float) -> RateLimitResult:
        """Count one request for key and decide whether it may proceed.

        Args:
            key: Unique identifier (e.g., action name plus client IP).
            max_requests: Max requests allowed per window for this key.
            window_seconds: Window length in seconds.

        Returns:
            RateLimitResult describing whether it was allowed.
        """
        raise NotImplementedError

    @abstractmethod
    def sweep(self) -> int:
        """Drop expired records.

        Returns:
            Number of records removed.
        """
        raise NotImplementedError

    def is_allowed(self, key: str, max_requests: int, window_seconds: float) -> bool:
        """Boolean shortcut over consume()."""
        return self.consume(key, max_requests, window_seconds).allowed
