"""Global exception handlers for consistent error responses.

Every error leaves the API as ``{"error": <message>, "code": ..., "request_id": ...}``
so clients can always read ``body["error"]`` as a human-readable string.

Design:
- AppError subclasses → status from ``status_for_error`` (400/401/403/404/429/500)
- Malformed request bodies → 400
- Unexpected Exception → generic 500 (safety net, no internal detail)
"""

import logging
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from event_signup.core.errors import (
    AppError,
    AuthenticationAppError,
    AuthorizationAppError,
    DuplicateRecordAppError,
    NotFoundAppError,
    PersistenceAppError,
    RateLimitAppError,
)
from event_signup.core.logging import get_request_id

logger = logging.getLogger(__name__)


def status_for_error(exc: AppError) -> int:
    """Map a domain error to its HTTP status code."""
    # Duplicate before Persistence: it is a subclass
    if isinstance(exc, DuplicateRecordAppError):
        return 400
    if isinstance(exc, PersistenceAppError):
        return 500
    if isinstance(exc, AuthenticationAppError):
        return 401
    if isinstance(exc, AuthorizationAppError):
        return 403
    if isinstance(exc, NotFoundAppError):
        return 404
    if isinstance(exc, RateLimitAppError):
        return 429
    return 400


def _error_body(message: str, code: str, details: Any = None) -> dict[str, Any]:
    body: dict[str, Any] = {
        "error": message,
        "code": code,
        "request_id": get_request_id(),
    }
    if details:
        body["details"] = details
    return body


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Render a domain error with its mapped status code.

    Persistence failures are logged by the service that raised them with
    the underlying detail; the client only ever sees ``exc.message``.
    """
    status_code = status_for_error(exc)

    log = logger.error if status_code >= 500 else logger.warning
    log(
        "app_error_handled",
        extra={
            "error_code": exc.code,
            "error_message": exc.message,
            "status_code": status_code,
            "request_path": request.url.path,
        },
    )

    # Server-side failures never echo details back
    details = exc.details if status_code < 500 else None
    headers = exc.headers if isinstance(exc, RateLimitAppError) else None

    return JSONResponse(
        status_code=status_code,
        content=_error_body(exc.message, exc.code, details),
        headers=headers,
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Reject bodies FastAPI could not parse (non-JSON, wrong top-level type)."""
    logger.warning(
        "request_body_rejected",
        extra={
            "request_path": request.url.path,
            "error_count": len(exc.errors()),
        },
    )
    return JSONResponse(
        status_code=400,
        content=_error_body("Invalid request body", "invalid_request_body"),
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Fallback handler for unexpected errors.

    Logs the failure in detail while returning a generic message so no
    stack trace or internal state reaches the client.
    """
    logger.error(
        "unhandled_exception",
        extra={
            "error_type": type(exc).__name__,
            "error_msg": str(exc),
            "request_path": request.url.path,
            "request_method": request.method,
        },
    )

    return JSONResponse(
        status_code=500,
        content=_error_body(
            "An unexpected error occurred. Please try again later.",
            "internal_server_error",
        ),
    )


def setup_exception_handlers(app) -> None:
    """Register all exception handlers with the FastAPI app."""
    app.exception_handler(AppError)(app_error_handler)
    app.exception_handler(RequestValidationError)(request_validation_handler)
    app.exception_handler(Exception)(general_exception_handler)
