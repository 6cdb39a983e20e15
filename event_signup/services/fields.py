"""Request payload cleaning built on the field validators.

Each entity declares a table of ``FieldRule`` entries; ``clean_payload``
applies the matching validator to every declared field and drops anything
undeclared, so only sanitized values ever reach the ORM.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import partial
from typing import Any, Callable, Mapping

from event_signup.core.errors import InvalidInputError
from event_signup.core.validation import sanitize_string


@dataclass(frozen=True)
class FieldRule:
    """How one payload field is validated.

    Attributes:
        validate: Validator returning the sanitized value.
        required: Whether the field must be present and non-empty.
        default: Value stored when an optional field is absent or empty.
    """

    validate: Callable[[Any], Any]
    required: bool = True
    default: Any = None


def text(max_length: int) -> Callable[[Any], str]:
    """Validator for free text of at most ``max_length`` characters."""
    return partial(sanitize_string, max_length=max_length)


def _is_empty(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def clean_payload(
    payload: Mapping[str, Any],
    rules: Mapping[str, FieldRule],
    *,
    partial: bool = False,
) -> dict[str, Any]:
    """Validate ``payload`` against ``rules``.

    Args:
        payload: Decoded JSON body.
        rules: Field name to rule mapping.
        partial: Only validate fields present in payload (updates).

    Returns:
        Mapping of field name to sanitized value.

    Raises:
        InvalidInputError: On the first rejected field; ``details.field``
            names it.
    """
    cleaned: dict[str, Any] = {}
    for field, rule in rules.items():
        if partial and field not in payload:
            continue

        value = payload.get(field)
        if _is_empty(value):
            if rule.required:
                raise InvalidInputError(f"{field} is required", field=field)
            cleaned[field] = rule.default
            continue

        try:
            result = rule.validate(value)
        except InvalidInputError as exc:
            raise InvalidInputError(exc.message, field=field) from exc

        # Sanitizing can empty a string ("<>" -> "")
        if rule.required and _is_empty(result):
            raise InvalidInputError(f"{field} is required", field=field)
        cleaned[field] = result if not _is_empty(result) else rule.default

    return cleaned


def require_record_id(value: Any) -> str:
    """Validate a record id taken from a body or query string."""
    if _is_empty(value):
        raise InvalidInputError("ID required", field="id")
    try:
        record_id = sanitize_string(value, 64)
    except InvalidInputError as exc:
        raise InvalidInputError("ID required", field="id") from exc
    if not record_id:
        raise InvalidInputError("ID required", field="id")
    return record_id
