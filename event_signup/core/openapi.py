"""OpenAPI metadata and customization utilities.

Enriches the generated OpenAPI schema with:
- Tags metadata
- The ``X-Admin-Key`` security scheme, attached only to admin operations

This keeps documentation concerns decoupled from the app factory.
"""

from __future__ import annotations

from typing import Any, Dict

from fastapi import FastAPI
from fastapi.routing import APIRoute

from event_signup.core.auth import ADMIN_KEY_HEADER, verify_admin_key

TAGS_METADATA = [
    {"name": "Participants", "description": "Tournament registration."},
    {"name": "Volunteers", "description": "Volunteer sign-up."},
    {"name": "Sponsors", "description": "Sponsor listing and management."},
    {"name": "Content", "description": "Editable page content blocks."},
    {"name": "Settings", "description": "Event date, venue and registration settings."},
    {"name": "Admin", "description": "Admin login."},
    {"name": "Health", "description": "Liveness check."},
]


def _admin_operations(app: FastAPI) -> set[tuple[str, str]]:
    """Collect (path, method) pairs whose route depends on verify_admin_key."""
    operations: set[tuple[str, str]] = set()
    for route in app.routes:
        if not isinstance(route, APIRoute):
            continue
        calls = {dep.call for dep in route.dependant.dependencies}
        if verify_admin_key in calls:
            for method in route.methods:
                operations.add((route.path_format, method.lower()))
    return operations


def apply_openapi_customizations(app: FastAPI) -> None:
    """Patch FastAPI's OpenAPI generation to add tags and admin security."""

    original_openapi = app.openapi

    def custom_openapi() -> Dict[str, Any]:
        if app.openapi_schema:
            return app.openapi_schema

        schema = original_openapi()

        components = schema.setdefault("components", {})
        security_schemes = components.setdefault("securitySchemes", {})
        security_schemes.setdefault(
            "AdminKeyAuth",
            {
                "type": "apiKey",
                "in": "header",
                "name": ADMIN_KEY_HEADER,
                "description": "Admin routes require a configured admin key.",
            },
        )

        tags = schema.setdefault("tags", [])
        existing_tag_names = {t.get("name") for t in tags}
        tags.extend(t for t in TAGS_METADATA if t["name"] not in existing_tag_names)

        admin_ops = _admin_operations(app)
        for path, methods in schema.get("paths", {}).items():
            for method, operation in methods.items():
                if isinstance(operation, dict) and (path, method) in admin_ops:
                    operation["security"] = [{"AdminKeyAuth": []}]

        app.openapi_schema = schema
        return schema

    app.openapi = custom_openapi  # type: ignore[assignment]
