"""Tournament participant registration and administration."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from event_signup.core.validation import (
    validate_boolean,
    validate_email,
    validate_name,
    validate_phone,
    validate_skill_level,
)
from event_signup.db.models import Participant
from event_signup.services.crud import RecordService, translate_persistence_errors
from event_signup.services.fields import FieldRule, text

REGISTRATION_FIELDS: dict[str, FieldRule] = {
    "first_name": FieldRule(validate_name),
    "last_name": FieldRule(validate_name),
    "email": FieldRule(validate_email),
    "phone": FieldRule(validate_phone),
    "skill_level": FieldRule(validate_skill_level),
    "dietary_restrictions": FieldRule(text(500), required=False),
}

# Donation status is only ever set by an admin
UPDATE_FIELDS: dict[str, FieldRule] = {
    **REGISTRATION_FIELDS,
    "donation_completed": FieldRule(validate_boolean),
}

participants = RecordService(
    Participant,
    entity="participant",
    create_rules=REGISTRATION_FIELDS,
    update_rules=UPDATE_FIELDS,
    unique_messages={"email": "Email already registered"},
)


def list_participants(session: Session) -> list[Participant]:
    """Return every participant, most recent registration first."""
    with translate_persistence_errors(session, entity="participants", action="fetch"):
        stmt = select(Participant).order_by(Participant.registration_date.desc())
        return list(session.scalars(stmt))
