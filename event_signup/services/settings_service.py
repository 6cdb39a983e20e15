"""Event settings: a single row, created with defaults on first access."""

from __future__ import annotations

import logging
from datetime import date
from functools import partial
from typing import Any, Mapping

from sqlalchemy import select
from sqlalchemy.orm import Session

from event_signup.core.errors import InvalidInputError
from event_signup.core.validation import (
    validate_boolean,
    validate_date,
    validate_number,
    validate_url,
)
from event_signup.db.models import EventSettings
from event_signup.services.crud import translate_persistence_errors
from event_signup.services.fields import FieldRule, clean_payload, text

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS: dict[str, Any] = {
    "event_date": date(2024, 9, 27),
    "event_time": "5:00 PM - 10:00 PM",
    "venue": "Pickleball HQ, New Jersey",
    "acs_link": "https://www.cancer.org/involved/donate.html",
    "venmo_handle": "@EventOrganizer",
    "max_participants": 64,
    "registration_open": True,
}

SETTINGS_FIELDS: dict[str, FieldRule] = {
    "event_date": FieldRule(validate_date),
    "event_time": FieldRule(text(100)),
    "venue": FieldRule(text(200)),
    "acs_link": FieldRule(validate_url),
    "venmo_handle": FieldRule(text(50)),
    "max_participants": FieldRule(partial(validate_number, minimum=1, maximum=10_000)),
    "registration_open": FieldRule(validate_boolean),
}


def _current_settings(session: Session) -> EventSettings | None:
    stmt = select(EventSettings).order_by(EventSettings.updated_at.desc()).limit(1)
    return session.scalars(stmt).first()


def get_or_create_settings(session: Session) -> EventSettings:
    """Return the current settings row, inserting the defaults when none exists."""
    with translate_persistence_errors(session, entity="settings", action="fetch"):
        current = _current_settings(session)
        if current is None:
            current = EventSettings(**DEFAULT_SETTINGS)
            session.add(current)
            session.flush()
            logger.info("settings.defaults_created", extra={"record_id": current.id})
    return current


def update_settings(session: Session, payload: Mapping[str, Any]) -> EventSettings:
    """Apply the fields present in payload to the settings row."""
    fields = clean_payload(payload, SETTINGS_FIELDS, partial=True)
    if not fields:
        raise InvalidInputError("No updatable fields provided")

    if "event_date" in fields:
        fields["event_date"] = date.fromisoformat(fields["event_date"])
    if "max_participants" in fields:
        fields["max_participants"] = int(fields["max_participants"])

    current = get_or_create_settings(session)
    with translate_persistence_errors(session, entity="settings", action="update"):
        for column, value in fields.items():
            setattr(current, column, value)
        session.flush()

    logger.info("settings.updated", extra={"columns": sorted(fields)})
    return current
