"""Pydantic schemas for event settings."""

from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict


class EventSettingsResponse(BaseModel):
    """Current event configuration shown on the public pages."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    event_date: date
    event_time: str
    venue: str
    acs_link: str
    venmo_handle: str
    max_participants: int
    registration_open: bool
    updated_at: datetime
