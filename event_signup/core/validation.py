"""Field-level validation and sanitization for untrusted request input.

Every mutating endpoint runs each incoming field through one of these rules
before the value reaches persistence. Rules are pure functions: they return
the sanitized value or raise InvalidInputError with a human-readable reason.

Values stored here are later rendered verbatim in admin views, so string
rules strip script blocks and angle brackets before anything else happens.
"""

from __future__ import annotations

import math
import re
from datetime import date
from typing import Any

from pydantic import AnyHttpUrl, TypeAdapter, ValidationError

from event_signup.core.errors import InvalidInputError

DEFAULT_MAX_LENGTH = 255
MAX_SAFE_INTEGER = 2**53 - 1

SKILL_LEVELS = frozenset({"beginner", "intermediate", "advanced", "expert", "first-time"})
SPONSOR_TIERS = frozenset({"gold", "platinum"})

_SCRIPT_BLOCK_RE = re.compile(
    r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>",
    re.IGNORECASE,
)
_ANGLE_BRACKETS_RE = re.compile(r"[<>]")
_EMAIL_RE = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
_PHONE_RE = re.compile(r"[0-9\s\-()+]+")
_NAME_RE = re.compile(r"[a-zA-Z\s\-']+")
_DATE_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")

_http_url_adapter: TypeAdapter[AnyHttpUrl] = TypeAdapter(AnyHttpUrl)


def sanitize_string(value: Any, max_length: int = DEFAULT_MAX_LENGTH) -> str:
    """Strip markup, truncate and trim an untrusted string.

    Args:
        value: Raw input value.
        max_length: Maximum length of the returned string.

    Returns:
        The sanitized string (never longer than max_length).

    Raises:
        InvalidInputError: If value is not a string.
    """
    if not isinstance(value, str):
        raise InvalidInputError("Input must be a string")

    cleaned = _SCRIPT_BLOCK_RE.sub("", value)
    cleaned = _ANGLE_BRACKETS_RE.sub("", cleaned)
    return cleaned[:max_length].strip()


def validate_email(value: Any) -> str:
    """Return a lower-cased email address or raise InvalidInputError."""
    if not isinstance(value, str):
        raise InvalidInputError("Email must be a string")

    email = sanitize_string(value, 100).lower()
    if not _EMAIL_RE.fullmatch(email):
        raise InvalidInputError("Invalid email format")
    return email


def validate_phone(value: Any) -> str:
    """Return the sanitized phone number, unformatted.

    Only digits, whitespace, hyphens, parentheses and '+' are accepted, and
    at least 10 characters must remain after sanitization.
    """
    if not isinstance(value, str):
        raise InvalidInputError("Phone must be a string")

    phone = sanitize_string(value, 20)
    if not _PHONE_RE.fullmatch(phone) or len(phone) < 10:
        raise InvalidInputError("Invalid phone format")
    return phone


def validate_name(value: Any) -> str:
    """Return a person name made of letters, spaces, hyphens and apostrophes."""
    if not isinstance(value, str):
        raise InvalidInputError("Name must be a string")

    name = sanitize_string(value, 50)
    if not name or not _NAME_RE.fullmatch(name):
        raise InvalidInputError("Invalid name format")
    return name


def validate_array(value: Any, max_items: int = 10) -> list[str]:
    """Validate a list of short strings.

    Args:
        value: Raw input value, expected to be a JSON array.
        max_items: Maximum number of elements accepted.

    Returns:
        A new list with every element sanitized to at most 100 characters.

    Raises:
        InvalidInputError: If value is not a list, is too long, or holds
            a non-string element.
    """
    if not isinstance(value, (list, tuple)):
        raise InvalidInputError("Input must be an array")
    if len(value) > max_items:
        raise InvalidInputError(f"Array cannot exceed {max_items} items")

    return [sanitize_string(item, 100) for item in value]


def validate_skill_level(value: Any) -> str:
    skill_level = sanitize_string(value, 20).lower()
    if skill_level not in SKILL_LEVELS:
        raise InvalidInputError("Invalid skill level")
    return skill_level


def validate_sponsor_tier(value: Any) -> str:
    tier = sanitize_string(value, 20).lower()
    if tier not in SPONSOR_TIERS:
        raise InvalidInputError("Invalid sponsor tier")
    return tier


def validate_url(value: Any) -> str:
    """Return the canonical form of an absolute http(s) URL.

    Parsing is delegated to pydantic's URL type, which lower-cases scheme
    and host and adds the root path when it is missing.
    """
    if not isinstance(value, str):
        raise InvalidInputError("URL must be a string")

    try:
        url = _http_url_adapter.validate_python(value)
    except ValidationError as exc:
        raise InvalidInputError("Invalid URL format") from exc

    if url.scheme not in ("http", "https"):
        raise InvalidInputError("Invalid URL format")
    return str(url)


def validate_date(value: Any) -> str:
    """Return a YYYY-MM-DD string that names a real calendar date."""
    if not isinstance(value, str):
        raise InvalidInputError("Date must be a string")
    if not _DATE_RE.fullmatch(value):
        raise InvalidInputError("Invalid date format. Use YYYY-MM-DD")

    try:
        date.fromisoformat(value)
    except ValueError as exc:
        raise InvalidInputError("Invalid date") from exc
    return value


def validate_boolean(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.lower()
        if lowered == "true":
            return True
        if lowered == "false":
            return False
    raise InvalidInputError("Invalid boolean value")


def validate_number(
    value: Any,
    minimum: int | float = 0,
    maximum: int | float = MAX_SAFE_INTEGER,
) -> int | float:
    """Parse a number (or numeric string) and check it lies in [minimum, maximum].

    Integral values are returned as int; everything else as float.

    Raises:
        InvalidInputError: If value is not numeric, not finite, or out of range.
    """
    number = _parse_number(value)

    if isinstance(number, float) and not math.isfinite(number):
        raise InvalidInputError("Invalid number")
    if number < minimum or number > maximum:
        raise InvalidInputError(f"Number must be between {minimum} and {maximum}")

    if isinstance(number, float) and number.is_integer():
        return int(number)
    return number


def _parse_number(value: Any) -> int | float:
    # bool is an int subclass; "true" is not a number here
    if isinstance(value, bool):
        raise InvalidInputError("Invalid number")
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return int(text)
        except ValueError:
            pass
        try:
            return float(text)
        except ValueError as exc:
            raise InvalidInputError("Invalid number") from exc
    raise InvalidInputError("Invalid number")
