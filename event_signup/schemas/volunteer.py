"""Pydantic schemas for volunteers."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class VolunteerResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    first_name: str
    last_name: str
    email: str
    phone: str
    availability: list[str] = Field(default_factory=list)
    roles: list[str] = Field(default_factory=list)
    experience: str | None = None
    emergency_contact: str
    emergency_phone: str
    additional_info: str | None = None
    registration_date: datetime
