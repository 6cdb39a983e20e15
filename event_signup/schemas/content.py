"""Pydantic schemas for editable content blocks."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class ContentBlockResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    key: str = Field(..., description="Unique key the page uses to look the block up.")
    title: str
    content: str
    content_type: str = Field("html", description="html, text or markdown.")
    sort_order: int = 0
    is_active: bool = True
    created_at: datetime
    updated_at: datetime
