"""Generic create/update/delete over one ORM model.

The relational store is a collaborator: this module only sequences
validation, persistence calls and the translation of SQLAlchemy failures into
domain errors. Detailed failure information is logged here and never passed
on to the client.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Generic, Iterator, Mapping, TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from event_signup.core.errors import (
    DuplicateRecordAppError,
    InvalidInputError,
    NotFoundAppError,
    PersistenceAppError,
)
from event_signup.db.database import Base
from event_signup.services.fields import FieldRule, clean_payload, require_record_id

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)


@contextmanager
def translate_persistence_errors(
    session: Session,
    *,
    entity: str,
    action: str,
    unique_messages: Mapping[str, str] | None = None,
) -> Iterator[None]:
    """Turn SQLAlchemy failures inside the block into domain errors.

    Args:
        session: Session to roll back on failure.
        entity: Entity name used in messages ("participant").
        action: Verb used in messages ("create").
        unique_messages: Unique column name to client message, for
            constraint violations that the caller can fix.

    Raises:
        DuplicateRecordAppError: A listed unique column was violated.
        PersistenceAppError: Any other store failure ("Failed to <action> <entity>").
    """
    try:
        yield
    except IntegrityError as exc:
        session.rollback()
        violation = str(exc.orig)
        for column, message in (unique_messages or {}).items():
            if column in violation:
                logger.warning(
                    "persistence.duplicate",
                    extra={"entity": entity, "action": action, "column": column},
                )
                raise DuplicateRecordAppError(
                    code=f"duplicate_{column}",
                    message=message,
                    details={"field": column},
                ) from exc
        _log_failure(entity, action, exc)
        raise PersistenceAppError(
            code=f"{entity}_{action}_failed",
            message=f"Failed to {action} {entity}",
        ) from exc
    except SQLAlchemyError as exc:
        session.rollback()
        _log_failure(entity, action, exc)
        raise PersistenceAppError(
            code=f"{entity}_{action}_failed",
            message=f"Failed to {action} {entity}",
        ) from exc


def _log_failure(entity: str, action: str, exc: Exception) -> None:
    logger.error(
        "persistence.failed",
        extra={
            "entity": entity,
            "action": action,
            "error_type": type(exc).__name__,
            "error_msg": str(exc),
        },
    )


class RecordService(Generic[ModelT]):
    """CRUD operations for one model, fed by validated payloads.

    Attributes:
        model: ORM model class.
        entity: Singular entity name for messages and log events.
        create_rules: Field rules applied on create (all fields).
        update_rules: Field rules applied on update (present fields only).
        unique_messages: Unique column to client message.
    """

    def __init__(
        self,
        model: type[ModelT],
        *,
        entity: str,
        create_rules: Mapping[str, FieldRule],
        update_rules: Mapping[str, FieldRule] | None = None,
        unique_messages: Mapping[str, str] | None = None,
    ) -> None:
        self.model = model
        self.entity = entity
        self.create_rules = create_rules
        self.update_rules = update_rules if update_rules is not None else create_rules
        self.unique_messages = unique_messages or {}

    def to_columns(self, fields: dict[str, Any]) -> dict[str, Any]:
        """Map cleaned fields to column values (hook for subclasses)."""
        return fields

    def get(self, session: Session, record_id: str) -> ModelT:
        with translate_persistence_errors(session, entity=self.entity, action="fetch"):
            record = session.get(self.model, record_id)
        if record is None:
            raise NotFoundAppError(
                code=f"{self.entity}_not_found",
                message=f"{self.entity.capitalize()} not found",
                details={"entity": self.entity, "record_id": record_id},
            )
        return record

    def create(self, session: Session, payload: Mapping[str, Any]) -> ModelT:
        fields = self.to_columns(clean_payload(payload, self.create_rules))
        record = self.model(**fields)

        with translate_persistence_errors(
            session,
            entity=self.entity,
            action="create",
            unique_messages=self.unique_messages,
        ):
            session.add(record)
            session.flush()

        logger.info(f"{self.entity}.created", extra={"record_id": record.id})
        return record

    def update(self, session: Session, payload: Mapping[str, Any]) -> ModelT:
        record_id = require_record_id(payload.get("id"))
        fields = self.to_columns(clean_payload(payload, self.update_rules, partial=True))
        if not fields:
            raise InvalidInputError("No updatable fields provided")

        record = self.get(session, record_id)
        with translate_persistence_errors(
            session,
            entity=self.entity,
            action="update",
            unique_messages=self.unique_messages,
        ):
            for column, value in fields.items():
                setattr(record, column, value)
            session.flush()

        logger.info(
            f"{self.entity}.updated",
            extra={"record_id": record_id, "columns": sorted(fields)},
        )
        return record

    def delete(self, session: Session, record_id: Any) -> None:
        record_id = require_record_id(record_id)
        record = self.get(session, record_id)
        with translate_persistence_errors(session, entity=self.entity, action="delete"):
            session.delete(record)
            session.flush()

        logger.info(f"{self.entity}.deleted", extra={"record_id": record_id})
