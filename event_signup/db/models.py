from __future__ import annotations

import uuid
from datetime import date, datetime, timezone
from typing import Optional

from sqlalchemy import JSON, Boolean, Date, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from event_signup.db.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


class Participant(Base):
    """Tournament registrant."""

    __tablename__ = "participants"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    first_name: Mapped[str] = mapped_column(String(50))
    last_name: Mapped[str] = mapped_column(String(50))
    email: Mapped[str] = mapped_column(String(100), unique=True, index=True)
    phone: Mapped[str] = mapped_column(String(20))
    skill_level: Mapped[str] = mapped_column(String(20))
    dietary_restrictions: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    donation_completed: Mapped[bool] = mapped_column(Boolean, default=False)
    registration_date: Mapped[datetime] = mapped_column(DateTime, default=_utcnow, index=True)


class Volunteer(Base):
    __tablename__ = "volunteers"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    first_name: Mapped[str] = mapped_column(String(50))
    last_name: Mapped[str] = mapped_column(String(50))
    email: Mapped[str] = mapped_column(String(100), unique=True, index=True)
    phone: Mapped[str] = mapped_column(String(20))
    availability: Mapped[list[str]] = mapped_column(JSON, default=list)
    roles: Mapped[list[str]] = mapped_column(JSON, default=list)
    experience: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    emergency_contact: Mapped[str] = mapped_column(String(50))
    emergency_phone: Mapped[str] = mapped_column(String(20))
    additional_info: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    registration_date: Mapped[datetime] = mapped_column(DateTime, default=_utcnow, index=True)


class Sponsor(Base):
    """Sponsor shown on the public page; deleted sponsors are only deactivated."""

    __tablename__ = "sponsors"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(String(100))
    website: Mapped[Optional[str]] = mapped_column(String(2083), nullable=True)
    tier: Mapped[str] = mapped_column(String(16), index=True)  # GOLD | PLATINUM
    logo_url: Mapped[Optional[str]] = mapped_column(String(2083), nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    sort_order: Mapped[int] = mapped_column(Integer, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=_utcnow, onupdate=_utcnow)


class ContentBlock(Base):
    __tablename__ = "content_blocks"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    key: Mapped[str] = mapped_column(String(100), unique=True, index=True)
    title: Mapped[str] = mapped_column(String(200))
    content: Mapped[str] = mapped_column(Text)
    content_type: Mapped[str] = mapped_column(String(16), default="html")
    sort_order: Mapped[int] = mapped_column(Integer, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=_utcnow, onupdate=_utcnow)


class EventSettings(Base):
    """Single-row table holding the event configuration."""

    __tablename__ = "event_settings"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    event_date: Mapped[date] = mapped_column(Date)
    event_time: Mapped[str] = mapped_column(String(100))
    venue: Mapped[str] = mapped_column(String(200))
    acs_link: Mapped[str] = mapped_column(String(2083))
    venmo_handle: Mapped[str] = mapped_column(String(50))
    max_participants: Mapped[int] = mapped_column(Integer, default=64)
    registration_open: Mapped[bool] = mapped_column(Boolean, default=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=_utcnow, onupdate=_utcnow)
