"""Admin authentication helpers.

Two static checks, both configured through environment variables:
- ``check_admin_credentials``: username/password pair for the admin login
  endpoint. Failures are deliberately generic so callers cannot tell which
  half was wrong.
- ``verify_admin_key``: FastAPI dependency guarding admin-only routes with
  the ``X-Admin-Key`` header.
"""

from __future__ import annotations

import hashlib
import hmac
import logging
from typing import Annotated

from fastapi import Header

from event_signup.core.config import settings
from event_signup.core.errors import AuthenticationAppError, AuthorizationAppError

logger = logging.getLogger(__name__)

ADMIN_KEY_HEADER = "X-Admin-Key"


def parse_api_keys(keys_string: str | None) -> set[str]:
    """Parse comma-separated keys into a set.

    Examples:
        >>> parse_api_keys("key1, key2 , key3 ")
        {'key1', 'key2', 'key3'}
        >>> parse_api_keys(None)
        set()
    """
    if not keys_string:
        return set()
    return {key.strip() for key in keys_string.split(",") if key.strip()}


def _hash_for_log(value: str) -> str:
    return hashlib.sha256(value.encode()).hexdigest()[:16]


def _constant_time_equals(provided: str, expected: str) -> bool:
    return hmac.compare_digest(provided.encode(), expected.encode())


def check_admin_credentials(username: object, password: object) -> None:
    """Validate an admin username/password pair.

    Raises:
        AuthenticationAppError: "Invalid credentials" for any failure,
            including a server without configured credentials.
    """
    expected_username = settings.app.admin_username
    expected_password = settings.app.admin_password

    if not expected_username or not expected_password:
        logger.error(
            "admin_login_failed",
            extra={"reason": "admin_credentials_not_configured"},
        )
        raise AuthenticationAppError(code="invalid_credentials", message="Invalid credentials")

    if not isinstance(username, str) or not isinstance(password, str):
        raise AuthenticationAppError(code="invalid_credentials", message="Invalid credentials")

    # Evaluate both comparisons so timing does not reveal which one failed
    username_ok = _constant_time_equals(username, expected_username)
    password_ok = _constant_time_equals(password, expected_password)
    if not (username_ok and password_ok):
        logger.warning("admin_login_failed", extra={"reason": "credentials_mismatch"})
        raise AuthenticationAppError(code="invalid_credentials", message="Invalid credentials")

    logger.info("admin_login_succeeded")


def validate_admin_key(provided_key: str | None) -> None:
    """Validate an admin key against the configured set.

    Pure validation logic without FastAPI dependencies for easy testing.

    Raises:
        AuthorizationAppError: If the key is missing, unknown, or no keys
            are configured while the check is required.
    """
    if not settings.app.admin_key_required:
        return

    if not provided_key:
        logger.warning("admin_key_validation_failed", extra={"reason": "missing_admin_key"})
        raise AuthorizationAppError(
            code="missing_admin_key",
            message=f"Missing admin key. Provide the {ADMIN_KEY_HEADER} header.",
        )

    valid_keys = parse_api_keys(settings.app.admin_api_keys)
    if not valid_keys:
        logger.error(
            "admin_key_validation_failed",
            extra={"reason": "admin_keys_not_configured"},
        )
        raise AuthorizationAppError(
            code="admin_keys_not_configured",
            message="Admin access is not configured",
            details={"hint": "Set APP_ADMIN_API_KEYS or disable the check with APP_ADMIN_KEY_REQUIRED=false"},
        )

    if not any(_constant_time_equals(provided_key, key) for key in valid_keys):
        logger.warning(
            "admin_key_validation_failed",
            extra={"reason": "invalid_admin_key", "admin_key_hash": _hash_for_log(provided_key)},
        )
        raise AuthorizationAppError(code="invalid_admin_key", message="Invalid admin key")


async def verify_admin_key(
    x_admin_key: Annotated[str | None, Header(alias=ADMIN_KEY_HEADER)] = None,
) -> None:
    """FastAPI dependency for admin-only routes.

    Usage:
        @router.get("/participants", dependencies=[Depends(verify_admin_key)])
    """
    validate_admin_key(x_admin_key)
