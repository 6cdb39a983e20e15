"""Pydantic schemas for tournament participants."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class ParticipantResponse(BaseModel):
    """A registered tournament participant."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    first_name: str
    last_name: str
    email: str
    phone: str
    skill_level: str = Field(
        ...,
        description="One of beginner, intermediate, advanced, expert, first-time.",
    )
    dietary_restrictions: str | None = None
    donation_completed: bool = Field(
        False,
        description="Set by an admin once the registration donation is confirmed.",
    )
    registration_date: datetime
