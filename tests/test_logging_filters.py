"""Tests for sensitive data filtering in logs."""

from __future__ import annotations

import json
import logging
from io import StringIO

import pytest

from event_signup.core.logging import (
    JsonFormatter,
    RequestIdFilter,
    SensitiveDataFilter,
    clear_request_id,
    set_request_id,
)


@pytest.fixture
def log_capture():
    """Logger wired like the app's root handler, writing to a buffer."""
    logger = logging.getLogger("test_redaction")
    logger.setLevel(logging.INFO)
    logger.propagate = False
    logger.handlers.clear()

    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.addFilter(RequestIdFilter())
    handler.addFilter(SensitiveDataFilter())
    handler.setFormatter(JsonFormatter())
    logger.addHandler(handler)

    yield logger, stream

    logger.handlers.clear()
    clear_request_id()


def test_sensitive_filter_redacts_admin_secrets(log_capture):
    logger, stream = log_capture

    logger.info(
        "test_event",
        extra={
            "admin_password": "hunter2-pass",
            "x-admin-key": "another-secret",
            "safe_field": "visible",
        },
    )

    output = stream.getvalue()
    assert "hunter2-pass" not in output
    assert "another-secret" not in output
    assert "[REDACTED]" in output
    assert "visible" in output


def test_sensitive_filter_redacts_registrant_contact_data(log_capture):
    logger, stream = log_capture

    logger.info(
        "volunteer_event",
        extra={
            "email": "jane@example.com",
            "phone": "555-123-4567",
            "emergency_phone": "555-987-6543",
            "skill_level": "beginner",
        },
    )

    payload = json.loads(stream.getvalue())
    assert payload["email"] == "[REDACTED]"
    assert payload["phone"] == "[REDACTED]"
    assert payload["emergency_phone"] == "[REDACTED]"
    assert payload["skill_level"] == "beginner"


def test_sensitive_filter_allows_safe_fields(log_capture):
    logger, stream = log_capture

    logger.info(
        "safe_event",
        extra={
            "route": "/api/participants",
            "status": 201,
            "duration_ms": 150.5,
        },
    )

    output = stream.getvalue()
    assert "/api/participants" in output
    assert "201" in output
    assert "[REDACTED]" not in output


def test_sensitive_filter_redacts_nested_dicts(log_capture):
    logger, stream = log_capture

    logger.info(
        "nested_event",
        extra={
            "headers": {
                "X-Admin-Key": "secret-key",
                "user-agent": "pytest",
            },
            "records": [{"email": "a@b.co", "id": "p-1"}],
        },
    )

    payload = json.loads(stream.getvalue())
    assert payload["headers"]["X-Admin-Key"] == "[REDACTED]"
    assert payload["headers"]["user-agent"] == "pytest"
    assert payload["records"][0]["email"] == "[REDACTED]"
    assert payload["records"][0]["id"] == "p-1"


def test_request_id_from_context_is_attached(log_capture):
    logger, stream = log_capture
    set_request_id("req-abc")

    logger.info("correlated_event")

    payload = json.loads(stream.getvalue())
    assert payload["request_id"] == "req-abc"
    assert payload["message"] == "correlated_event"
    assert payload["level"] == "info"
