"""Sponsor management.

Sponsors are never physically deleted: deleting one clears ``is_active`` so
it disappears from the public page while staying available to admins.
"""

from __future__ import annotations

import logging
from functools import partial
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from event_signup.core.validation import (
    validate_boolean,
    validate_number,
    validate_sponsor_tier,
    validate_url,
)
from event_signup.db.models import Sponsor
from event_signup.services.crud import RecordService, translate_persistence_errors
from event_signup.services.fields import FieldRule, require_record_id, text

logger = logging.getLogger(__name__)

SPONSOR_FIELDS: dict[str, FieldRule] = {
    "name": FieldRule(text(100)),
    "website": FieldRule(validate_url, required=False),
    "tier": FieldRule(validate_sponsor_tier),
    "logo_url": FieldRule(validate_url, required=False),
    "description": FieldRule(text(500), required=False),
    "sort_order": FieldRule(partial(validate_number, minimum=0, maximum=1000), required=False, default=0),
}

UPDATE_FIELDS: dict[str, FieldRule] = {
    **SPONSOR_FIELDS,
    "is_active": FieldRule(validate_boolean),
}


class SponsorService(RecordService[Sponsor]):
    """Stores tiers upper-case and soft-deletes."""

    def to_columns(self, fields: dict[str, Any]) -> dict[str, Any]:
        if "tier" in fields:
            fields["tier"] = fields["tier"].upper()
        if "sort_order" in fields:
            fields["sort_order"] = int(fields["sort_order"])
        return fields

    def delete(self, session: Session, record_id: Any) -> None:
        record_id = require_record_id(record_id)
        record = self.get(session, record_id)
        with translate_persistence_errors(session, entity=self.entity, action="delete"):
            record.is_active = False
            session.flush()

        logger.info("sponsor.deactivated", extra={"record_id": record_id})


sponsors = SponsorService(
    Sponsor,
    entity="sponsor",
    create_rules=SPONSOR_FIELDS,
    update_rules=UPDATE_FIELDS,
)


def list_active_sponsors(session: Session) -> list[Sponsor]:
    """Return active sponsors: PLATINUM before GOLD, then sort_order, then age."""
    with translate_persistence_errors(session, entity="sponsors", action="fetch"):
        stmt = (
            select(Sponsor)
            .where(Sponsor.is_active.is_(True))
            .order_by(Sponsor.tier.desc(), Sponsor.sort_order.asc(), Sponsor.created_at.asc())
        )
        return list(session.scalars(stmt))
