"""Application-level exception types.

This module defines domain errors used across services/adapters, enabling
consistent error handling, logging, and API responses.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, NotRequired, TypedDict


class ErrorDetails(TypedDict, total=False):
    """Structured error context for observability and clients.

    Fields are optional to keep shapes flexible while encouraging
    consistent keys across the codebase.
    """

    code: str
    message: str
    hint: str
    field: str
    entity: str
    record_id: str
    limit: int
    retry_after: int
    request_id: str
    context: NotRequired[dict[str, Any]]


@dataclass
class AppError(Exception):
    """Base error for application/domain failures.

    Attributes:
        code: Stable, machine-readable error code.
        message: Human-readable error message.
        details: Optional structured details for debugging/observability.
    """

    code: str
    message: str
    details: ErrorDetails | None = None

    def __post_init__(self) -> None:
        # Populate Exception args so str(error) is useful in logs/tracebacks.
        super().__init__(self.message)


class ValidationAppError(AppError):
    """Raised when input/config validation fails."""


class InvalidInputError(ValidationAppError):
    """Raised by input validators when a field value is rejected."""

    def __init__(self, message: str, *, field: str | None = None) -> None:
        super().__init__(
            code="invalid_input",
            message=message,
            details={"field": field} if field else None,
        )


class AuthenticationAppError(AppError):
    """Raised when credentials are rejected."""


class AuthorizationAppError(AppError):
    """Raised when an admin-only route is called without a valid key."""


class NotFoundAppError(AppError):
    """Raised when a record addressed by id or key does not exist."""


@dataclass
class RateLimitAppError(AppError):
    """Raised when a caller exceeds its request budget.

    Attributes:
        headers: Response headers describing the limit (Retry-After, ...).
    """

    headers: dict[str, str] | None = None


class PersistenceAppError(AppError):
    """Raised when the relational store rejects or fails an operation."""


class DuplicateRecordAppError(PersistenceAppError):
    """Raised when a unique column (email, content key) already holds the value."""
