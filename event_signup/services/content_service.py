"""Editable page content blocks."""

from __future__ import annotations

from functools import partial
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from event_signup.core.errors import InvalidInputError, NotFoundAppError
from event_signup.core.validation import sanitize_string, validate_boolean, validate_number
from event_signup.db.models import ContentBlock
from event_signup.services.crud import RecordService, translate_persistence_errors
from event_signup.services.fields import FieldRule, text

CONTENT_TYPES = frozenset({"html", "text", "markdown"})


def validate_content_type(value: Any) -> str:
    content_type = sanitize_string(value, 20).lower()
    if content_type not in CONTENT_TYPES:
        raise InvalidInputError("Invalid content type")
    return content_type


CONTENT_FIELDS: dict[str, FieldRule] = {
    "key": FieldRule(text(100)),
    "title": FieldRule(text(200)),
    "content": FieldRule(text(10_000)),
    "content_type": FieldRule(validate_content_type, required=False, default="html"),
    "sort_order": FieldRule(partial(validate_number, minimum=0, maximum=1000), required=False, default=0),
}

UPDATE_FIELDS: dict[str, FieldRule] = {
    **CONTENT_FIELDS,
    "is_active": FieldRule(validate_boolean),
}


class ContentService(RecordService[ContentBlock]):
    def to_columns(self, fields: dict[str, Any]) -> dict[str, Any]:
        if "sort_order" in fields:
            fields["sort_order"] = int(fields["sort_order"])
        return fields


content_blocks = ContentService(
    ContentBlock,
    entity="content",
    create_rules=CONTENT_FIELDS,
    update_rules=UPDATE_FIELDS,
    unique_messages={"key": "Content key already exists"},
)


def list_active_content(session: Session) -> list[ContentBlock]:
    with translate_persistence_errors(session, entity="content", action="fetch"):
        stmt = (
            select(ContentBlock)
            .where(ContentBlock.is_active.is_(True))
            .order_by(ContentBlock.sort_order.asc(), ContentBlock.created_at.asc())
        )
        return list(session.scalars(stmt))


def get_content_by_key(session: Session, key: Any) -> ContentBlock:
    """Look a block up by its unique key.

    Raises:
        InvalidInputError: If key is not a usable string.
        NotFoundAppError: If no block has this key.
    """
    clean_key = sanitize_string(key, 100)
    if not clean_key:
        raise InvalidInputError("key is required", field="key")

    with translate_persistence_errors(session, entity="content", action="fetch"):
        block = session.scalars(select(ContentBlock).where(ContentBlock.key == clean_key)).first()
    if block is None:
        raise NotFoundAppError(
            code="content_not_found",
            message="Content not found",
            details={"entity": "content"},
        )
    return block
