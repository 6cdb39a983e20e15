"""Tests for the rate limiting dependency and client IP resolution."""

import asyncio
import time
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient
from starlette.requests import Request

from event_signup.adapters.rate_limit.in_memory import InMemoryFixedWindowRateLimiter
from event_signup.core.app_factory import create_app
from event_signup.core.config import settings
from event_signup.core.rate_limit import (
    ADMIN_LOGIN,
    PARTICIPANT_REGISTRATION,
    build_rate_limit_key,
    get_client_ip,
    run_periodic_sweep,
)
from event_signup.db.database import Database


def _request(headers: dict[str, str] | None = None, client: tuple[str, int] | None = ("10.0.0.9", 5000)) -> Request:
    scope = {
        "type": "http",
        "method": "POST",
        "path": "/",
        "headers": [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()],
        "client": client,
    }
    return Request(scope)


class TestClientIp:
    def test_socket_peer_by_default(self):
        request = _request({"X-Forwarded-For": "203.0.113.7", "X-Real-IP": "198.51.100.1"})

        assert get_client_ip(request) == "10.0.0.9"

    def test_unknown_when_nothing_available(self):
        assert get_client_ip(_request(client=None)) == "unknown"

    def test_trusted_proxy_entry_is_right_most(self):
        # The left entry is whatever the client sent; the proxy appended the right one
        request = _request({"X-Forwarded-For": "1.1.1.1, 203.0.113.7", "X-Real-IP": "198.51.100.1"})

        with patch.object(settings.app, "trust_proxy_headers", True):
            assert get_client_ip(request) == "203.0.113.7"

    def test_trusted_hops_select_entry_from_the_right(self):
        request = _request({"X-Forwarded-For": "1.1.1.1, 203.0.113.7, 10.0.0.1"})

        with patch.object(settings.app, "trust_proxy_headers", True), patch.object(
            settings.app, "trusted_proxy_hops", 2
        ):
            assert get_client_ip(request) == "203.0.113.7"

    def test_hops_beyond_header_length_use_left_most(self):
        request = _request({"X-Forwarded-For": "203.0.113.7"})

        with patch.object(settings.app, "trust_proxy_headers", True), patch.object(
            settings.app, "trusted_proxy_hops", 3
        ):
            assert get_client_ip(request) == "203.0.113.7"

    def test_real_ip_when_no_forwarded_for(self):
        with patch.object(settings.app, "trust_proxy_headers", True):
            assert get_client_ip(_request({"X-Real-IP": "198.51.100.1"})) == "198.51.100.1"

    def test_socket_peer_when_trusted_but_no_headers(self):
        with patch.object(settings.app, "trust_proxy_headers", True):
            assert get_client_ip(_request()) == "10.0.0.9"


def test_key_combines_action_and_ip():
    assert build_rate_limit_key(PARTICIPANT_REGISTRATION, "1.2.3.4") == "participant_1.2.3.4"
    assert build_rate_limit_key(ADMIN_LOGIN, "1.2.3.4") == "admin_login_1.2.3.4"


class FakeClock:
    def __init__(self, now: float = 1_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def limiter(clock: FakeClock) -> InMemoryFixedWindowRateLimiter:
    return InMemoryFixedWindowRateLimiter(clock=clock)


@pytest.fixture
def timed_client(limiter: InMemoryFixedWindowRateLimiter) -> TestClient:
    return TestClient(create_app(database=Database("sqlite://"), rate_limiter=limiter))


def _login(client: TestClient):
    return client.post("/api/admin/auth", json={"username": "admin", "password": "guess"})


def test_blocked_response_reports_window(timed_client: TestClient):
    for _ in range(5):
        _login(timed_client)

    response = _login(timed_client)

    assert response.status_code == 429
    assert response.headers["Retry-After"] == "900"
    assert response.headers["X-RateLimit-Reset"] == "1900"
    assert response.json()["details"] == {"limit": 5, "retry_after": 900}


def test_requests_allowed_again_after_window(timed_client: TestClient, clock: FakeClock):
    for _ in range(6):
        _login(timed_client)

    clock.now += 15 * 60 + 1

    assert _login(timed_client).status_code == 401


def test_limiter_keyed_by_action_and_client(
    timed_client: TestClient, limiter: InMemoryFixedWindowRateLimiter
):
    _login(timed_client)

    assert "admin_login_testclient" in limiter


def test_disabled_rate_limiting_never_blocks(timed_client: TestClient):
    with patch.object(settings.app, "rate_limit_enabled", False):
        responses = [_login(timed_client) for _ in range(8)]

    assert all(r.status_code == 401 for r in responses)


def test_headers_omitted_when_disabled(timed_client: TestClient):
    with patch.object(settings.app, "rate_limit_include_headers", False):
        for _ in range(5):
            _login(timed_client)
        response = _login(timed_client)

    assert response.status_code == 429
    assert "Retry-After" not in response.headers
    assert response.json()["details"]["retry_after"] == 900


def test_periodic_sweep_removes_expired_keys(limiter: InMemoryFixedWindowRateLimiter, clock: FakeClock):
    limiter.consume("participant_10.0.0.1", 5, 60)
    limiter.consume("admin_login_10.0.0.1", 5, 900)
    clock.now += 120

    async def _run_one_cycle() -> None:
        sweeper = asyncio.create_task(run_periodic_sweep(limiter, 0.01))
        await asyncio.sleep(0.1)
        sweeper.cancel()
        with pytest.raises(asyncio.CancelledError):
            await sweeper

    asyncio.run(_run_one_cycle())

    assert "participant_10.0.0.1" not in limiter
    assert "admin_login_10.0.0.1" in limiter


class TestLifespanSweeper:
    def test_sweeper_runs_while_serving(self, limiter: InMemoryFixedWindowRateLimiter, clock: FakeClock):
        app = create_app(database=Database("sqlite://"), rate_limiter=limiter)

        with patch.object(settings.app, "rate_limit_sweep_interval_seconds", 0.01):
            with TestClient(app) as client:
                _login(client)
                assert "admin_login_testclient" in limiter

                clock.now += 15 * 60 + 1
                time.sleep(0.2)

                assert "admin_login_testclient" not in limiter

    def test_sweeper_cancelled_on_shutdown(self, limiter: InMemoryFixedWindowRateLimiter):
        app = create_app(database=Database("sqlite://"), rate_limiter=limiter)

        with TestClient(app) as client:
            assert client.get("/health").status_code == 200
            sweeper = app.state.rate_limit_sweeper
            assert not sweeper.done()

        assert sweeper.cancelled()
