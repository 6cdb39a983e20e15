"""Rate limiting dependency for FastAPI routes.

This module wires the rate limiting adapter into the HTTP layer.

Design goals:
- Minimal coupling: API routes depend on a dependency function only.
- Swap-friendly: storage backend can be replaced (e.g., Redis) behind an
  abstract interface.
- Owned state: the limiter lives on ``app.state`` and is built by the app
  factory, so every app instance (and every test) gets its own counters.

Rate limiting strategy:
- Fixed window per action and client IP (key ``"<action>_<ip>"``).
- Limits come from the per-action policy table below, not from the limiter.
"""

from __future__ import annotations

import asyncio
import hashlib
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable

from fastapi import Request

from event_signup.adapters.rate_limit.base import AbstractRateLimiter
from event_signup.core.config import settings
from event_signup.core.errors import RateLimitAppError

logger = logging.getLogger(__name__)

HOUR = 60 * 60


@dataclass(frozen=True)
class RateLimitPolicy:
    """Request budget for one action.

    Attributes:
        action: Action name, also the limiter key prefix.
        max_requests: Requests allowed per window and client.
        window_seconds: Window length.
        message: Error message returned when the budget is exhausted.
    """

    action: str
    max_requests: int
    window_seconds: int
    message: str


PARTICIPANT_REGISTRATION = RateLimitPolicy(
    action="participant",
    max_requests=5,
    window_seconds=HOUR,
    message="Too many registration attempts. Please try again later.",
)
VOLUNTEER_REGISTRATION = RateLimitPolicy(
    action="volunteer",
    max_requests=3,
    window_seconds=HOUR,
    message="Too many registration attempts. Please try again later.",
)
SPONSOR_CREATION = RateLimitPolicy(
    action="sponsor",
    max_requests=5,
    window_seconds=HOUR,
    message="Too many sponsor creation attempts. Please try again later.",
)
CONTENT_CREATION = RateLimitPolicy(
    action="content",
    max_requests=5,
    window_seconds=HOUR,
    message="Too many content creation attempts. Please try again later.",
)
SETTINGS_UPDATE = RateLimitPolicy(
    action="settings",
    max_requests=10,
    window_seconds=HOUR,
    message="Too many settings update attempts. Please try again later.",
)
ADMIN_LOGIN = RateLimitPolicy(
    action="admin_login",
    max_requests=5,
    window_seconds=15 * 60,
    message="Too many login attempts. Please try again later.",
)


def get_rate_limiter(request: Request) -> AbstractRateLimiter:
    """Return the limiter owned by the running application."""
    return request.app.state.rate_limiter


def get_client_ip(request: Request) -> str:
    """Resolve the client IP used in rate limit keys.

    By default only the socket peer counts. With APP_TRUST_PROXY_HEADERS the
    order is: the X-Forwarded-For entry appended by the outermost trusted
    proxy, X-Real-IP, socket peer, "unknown". Entries left of the trusted
    hops are client-supplied and never used.
    """
    if settings.app.trust_proxy_headers:
        forwarded_for = request.headers.get("x-forwarded-for")
        if forwarded_for:
            hops = [entry.strip() for entry in forwarded_for.split(",")]
            index = max(0, len(hops) - settings.app.trusted_proxy_hops)
            if hops[index]:
                return hops[index]
        real_ip = request.headers.get("x-real-ip")
        if real_ip:
            return real_ip.strip()

    if request.client and request.client.host:
        return request.client.host
    return "unknown"


def build_rate_limit_key(policy: RateLimitPolicy, client_ip: str) -> str:
    return f"{policy.action}_{client_ip}"


def _hash_limiter_key(key: str) -> str:
    """Hash the rate limit key for logging without exposing client IPs."""
    return hashlib.sha256(key.encode()).hexdigest()[:16]


def enforce_rate_limit(policy: RateLimitPolicy) -> Callable[[Request], Awaitable[None]]:
    """Build a FastAPI dependency enforcing ``policy`` for the calling client.

    Usage:
        @router.post("/participants", dependencies=[Depends(enforce_rate_limit(PARTICIPANT_REGISTRATION))])

    Raises:
        RateLimitAppError: 429 Too Many Requests when the budget is exhausted.
    """

    async def _enforce(request: Request) -> None:
        if not settings.app.rate_limit_enabled:
            return

        limiter = get_rate_limiter(request)
        key = build_rate_limit_key(policy, get_client_ip(request))
        key_hash = _hash_limiter_key(key)

        result = limiter.consume(key, policy.max_requests, policy.window_seconds)
        if result.allowed:
            logger.debug(
                "rate_limit.allowed",
                extra={
                    "action": policy.action,
                    "key_hash": key_hash,
                    "limit": result.limit,
                    "remaining": result.remaining,
                    "window_s": policy.window_seconds,
                },
            )
            return

        retry_after = result.retry_after_seconds or 0
        logger.warning(
            "rate_limit.exceeded",
            extra={
                "action": policy.action,
                "key_hash": key_hash,
                "limit": result.limit,
                "window_s": policy.window_seconds,
                "retry_after_s": retry_after,
            },
        )

        headers: dict[str, str] = {}
        if settings.app.rate_limit_include_headers:
            headers["Retry-After"] = str(retry_after)
            headers["X-RateLimit-Limit"] = str(result.limit)
            headers["X-RateLimit-Remaining"] = str(result.remaining)
            headers["X-RateLimit-Reset"] = str(result.reset_at)

        raise RateLimitAppError(
            code="rate_limited",
            message=policy.message,
            details={"limit": result.limit, "retry_after": retry_after},
            headers=headers or None,
        )

    return _enforce


async def run_periodic_sweep(limiter: AbstractRateLimiter, interval_seconds: float) -> None:
    """Sweep expired limiter records every ``interval_seconds`` until cancelled."""
    while True:
        await asyncio.sleep(interval_seconds)
        removed = limiter.sweep()
        if removed:
            logger.debug("rate_limit.swept", extra={"removed": removed})
