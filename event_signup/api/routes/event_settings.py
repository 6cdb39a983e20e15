"""Event settings endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends
from sqlalchemy.orm import Session

from event_signup.core.auth import verify_admin_key
from event_signup.core.rate_limit import SETTINGS_UPDATE, enforce_rate_limit
from event_signup.db.database import get_db_session
from event_signup.schemas.event_settings import EventSettingsResponse
from event_signup.services.settings_service import get_or_create_settings, update_settings

router = APIRouter(tags=["Settings"])


@router.get("/settings", response_model=EventSettingsResponse)
def get_settings(session: Session = Depends(get_db_session)) -> EventSettingsResponse:
    return EventSettingsResponse.model_validate(get_or_create_settings(session))


@router.put(
    "/settings",
    response_model=EventSettingsResponse,
    dependencies=[Depends(verify_admin_key), Depends(enforce_rate_limit(SETTINGS_UPDATE))],
)
def put_settings(
    payload: dict[str, Any] = Body(...),
    session: Session = Depends(get_db_session),
) -> EventSettingsResponse:
    """Update any subset of the event settings."""
    return EventSettingsResponse.model_validate(update_settings(session, payload))
