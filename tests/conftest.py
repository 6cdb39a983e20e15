"""Pytest configuration and fixtures shared across all test modules.

This file is automatically loaded by pytest before running any tests.
Environment variables are set here, before anything imports
``event_signup.core.config``, so the global settings object sees them.
"""

import os

# CRITICAL: Set these before any imports that might load settings
os.environ["APP_ENV"] = "testing"
os.environ.setdefault("DB_URL", "sqlite://")
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("APP_ADMIN_USERNAME", "admin")
os.environ.setdefault("APP_ADMIN_PASSWORD", "test-password-123")
os.environ.setdefault("APP_ADMIN_KEY_REQUIRED", "true")
os.environ.setdefault("APP_ADMIN_API_KEYS", "test-admin-key-123,test-admin-key-456")

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from event_signup.core.app_factory import create_app
from event_signup.db.database import Database


@pytest.fixture
def app() -> FastAPI:
    """Fresh application with its own in-memory database and rate limiter."""
    return create_app(database=Database("sqlite://"))


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)


@pytest.fixture
def admin_headers() -> dict[str, str]:
    """Headers accepted by admin-only routes."""
    return {"X-Admin-Key": "test-admin-key-123"}


@pytest.fixture
def participant_payload() -> dict:
    return {
        "first_name": "Jane",
        "last_name": "O'Neil",
        "email": "Jane.ONeil@Example.com",
        "phone": "(555) 123-4567",
        "skill_level": "Intermediate",
        "dietary_restrictions": "vegetarian",
    }


@pytest.fixture
def volunteer_payload() -> dict:
    return {
        "first_name": "Sam",
        "last_name": "Rivera",
        "email": "sam@example.org",
        "phone": "555-987-6543",
        "availability": ["morning", "evening"],
        "roles": ["check-in", "<b>scorekeeper</b>"],
        "emergency_contact": "Alex Rivera",
        "emergency_phone": "555 111 2222",
    }
