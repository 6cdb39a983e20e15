"""Tests for global exception handlers.

Validates that all exception types are handled consistently with
proper HTTP status codes, error format, and no information leakage.
"""

import asyncio
import json
from typing import Any
from unittest.mock import AsyncMock

import pytest
from fastapi import Body, FastAPI
from fastapi.testclient import TestClient

from event_signup.core.errors import (
    AppError,
    AuthenticationAppError,
    AuthorizationAppError,
    DuplicateRecordAppError,
    InvalidInputError,
    NotFoundAppError,
    PersistenceAppError,
    RateLimitAppError,
    ValidationAppError,
)
from event_signup.core.exception_handlers import (
    general_exception_handler,
    setup_exception_handlers,
    status_for_error,
)


@pytest.fixture
def app_with_handlers() -> FastAPI:
    """Create FastAPI app with exception handlers registered."""
    app = FastAPI()
    setup_exception_handlers(app)
    return app


@pytest.fixture
def client(app_with_handlers: FastAPI) -> TestClient:
    return TestClient(app_with_handlers, raise_server_exceptions=False)


def _raise_from(app: FastAPI, path: str, exc: Exception) -> None:
    @app.get(path)
    async def _endpoint():
        raise exc


class TestStatusMapping:
    @pytest.mark.parametrize(
        "exc, status",
        [
            (ValidationAppError(code="v", message="m"), 400),
            (InvalidInputError("Invalid email format"), 400),
            (DuplicateRecordAppError(code="duplicate_email", message="m"), 400),
            (AuthenticationAppError(code="a", message="m"), 401),
            (AuthorizationAppError(code="a", message="m"), 403),
            (NotFoundAppError(code="n", message="m"), 404),
            (RateLimitAppError(code="rate_limited", message="m"), 429),
            (PersistenceAppError(code="p", message="m"), 500),
            (AppError(code="other", message="m"), 400),
        ],
    )
    def test_status_for_error(self, exc: AppError, status: int) -> None:
        assert status_for_error(exc) == status


class TestAppErrorHandler:
    """Test handler for AppError and subclasses."""

    def test_validation_error_body(self, client: TestClient, app_with_handlers: FastAPI):
        _raise_from(
            app_with_handlers,
            "/test-validation",
            InvalidInputError("Invalid email format", field="email"),
        )

        response = client.get("/test-validation")

        assert response.status_code == 400
        data = response.json()
        assert data["error"] == "Invalid email format"
        assert data["code"] == "invalid_input"
        assert data["details"] == {"field": "email"}
        assert "request_id" in data

    def test_error_without_details_omits_key(self, client: TestClient, app_with_handlers: FastAPI):
        _raise_from(app_with_handlers, "/test-plain", ValidationAppError(code="test", message="test"))

        data = client.get("/test-plain").json()

        assert set(data) == {"error", "code", "request_id"}

    def test_authentication_error_returns_401(self, client: TestClient, app_with_handlers: FastAPI):
        _raise_from(
            app_with_handlers,
            "/test-auth",
            AuthenticationAppError(code="invalid_credentials", message="Invalid credentials"),
        )

        response = client.get("/test-auth")

        assert response.status_code == 401
        assert response.json()["error"] == "Invalid credentials"

    def test_authorization_error_returns_403(self, client: TestClient, app_with_handlers: FastAPI):
        _raise_from(
            app_with_handlers,
            "/test-admin",
            AuthorizationAppError(code="invalid_admin_key", message="Invalid admin key"),
        )

        response = client.get("/test-admin")

        assert response.status_code == 403
        assert response.json()["code"] == "invalid_admin_key"

    def test_rate_limit_error_carries_headers(self, client: TestClient, app_with_handlers: FastAPI):
        _raise_from(
            app_with_handlers,
            "/test-limited",
            RateLimitAppError(
                code="rate_limited",
                message="Too many registration attempts. Please try again later.",
                details={"limit": 5, "retry_after": 30},
                headers={"Retry-After": "30"},
            ),
        )

        response = client.get("/test-limited")

        assert response.status_code == 429
        assert response.headers["Retry-After"] == "30"
        assert response.json()["details"] == {"limit": 5, "retry_after": 30}

    def test_persistence_error_hides_details(self, client: TestClient, app_with_handlers: FastAPI):
        _raise_from(
            app_with_handlers,
            "/test-store",
            PersistenceAppError(
                code="participant_create_failed",
                message="Failed to create participant",
                details={"context": {"sql": "INSERT INTO participants ..."}},
            ),
        )

        response = client.get("/test-store")

        assert response.status_code == 500
        data = response.json()
        assert data["error"] == "Failed to create participant"
        assert "details" not in data
        assert "INSERT" not in response.text


class TestRequestValidationHandler:
    @pytest.fixture
    def body_client(self, app_with_handlers: FastAPI) -> TestClient:
        @app_with_handlers.post("/test-body")
        def _endpoint(payload: dict[str, Any] = Body(...)):
            return payload

        return TestClient(app_with_handlers)

    def test_malformed_json_returns_400(self, body_client: TestClient):
        response = body_client.post(
            "/test-body",
            content="{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid request body"
        assert response.json()["code"] == "invalid_request_body"

    def test_non_object_body_returns_400(self, body_client: TestClient):
        response = body_client.post("/test-body", json=[1, 2, 3])

        assert response.status_code == 400


class TestGeneralExceptionHandler:
    """Test fallback handler for unexpected exceptions."""

    def test_general_exception_handler_logic(self):
        request = AsyncMock()
        request.url.path = "/test"
        request.method = "GET"

        exc = RuntimeError("Unexpected error: database connection failed")
        response = asyncio.run(general_exception_handler(request, exc))

        data = json.loads(bytes(response.body).decode())
        assert response.status_code == 500
        assert data["code"] == "internal_server_error"
        assert data["error"] == "An unexpected error occurred. Please try again later."
        assert "database connection" not in data["error"]

    def test_unexpected_exception_never_leaks_stack_trace(
        self, client: TestClient, app_with_handlers: FastAPI
    ):
        _raise_from(app_with_handlers, "/test-boom", ValueError("secret internals"))

        response = client.get("/test-boom")

        assert response.status_code == 500
        assert "Traceback" not in response.text
        assert "secret internals" not in response.text
        assert "ValueError" not in response.text


def test_setup_exception_handlers_registers_handlers(app_with_handlers: FastAPI):
    assert AppError in app_with_handlers.exception_handlers
    assert Exception in app_with_handlers.exception_handlers
