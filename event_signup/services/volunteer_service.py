"""Volunteer sign-up and administration."""

from __future__ import annotations

from functools import partial

from sqlalchemy import select
from sqlalchemy.orm import Session

from event_signup.core.validation import (
    validate_array,
    validate_email,
    validate_name,
    validate_phone,
)
from event_signup.db.models import Volunteer
from event_signup.services.crud import RecordService, translate_persistence_errors
from event_signup.services.fields import FieldRule, text

VOLUNTEER_FIELDS: dict[str, FieldRule] = {
    "first_name": FieldRule(validate_name),
    "last_name": FieldRule(validate_name),
    "email": FieldRule(validate_email),
    "phone": FieldRule(validate_phone),
    "availability": FieldRule(partial(validate_array, max_items=10)),
    "roles": FieldRule(partial(validate_array, max_items=10)),
    "experience": FieldRule(text(1000), required=False),
    "emergency_contact": FieldRule(validate_name),
    "emergency_phone": FieldRule(validate_phone),
    "additional_info": FieldRule(text(1000), required=False),
}

volunteers = RecordService(
    Volunteer,
    entity="volunteer",
    create_rules=VOLUNTEER_FIELDS,
    unique_messages={"email": "Email already registered"},
)


def list_volunteers(session: Session) -> list[Volunteer]:
    """Return every volunteer, most recent registration first."""
    with translate_persistence_errors(session, entity="volunteers", action="fetch"):
        stmt = select(Volunteer).order_by(Volunteer.registration_date.desc())
        return list(session.scalars(stmt))
