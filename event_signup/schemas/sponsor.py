"""Pydantic schemas for sponsors."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class SponsorResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    website: str | None = None
    tier: Literal["GOLD", "PLATINUM"]
    logo_url: str | None = None
    description: str | None = None
    sort_order: int = 0
    is_active: bool = Field(
        True,
        description="False once the sponsor has been deleted (soft delete).",
    )
    created_at: datetime
