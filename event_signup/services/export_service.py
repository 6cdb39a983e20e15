"""CSV exports of registrations for the admin dashboard."""

from __future__ import annotations

import csv
import io
from datetime import datetime
from typing import Iterable, Sequence

from event_signup.db.models import Participant, Volunteer

PARTICIPANT_HEADER = ("Name", "Email", "Phone", "Skill Level", "Registration Date", "Donation Status")
VOLUNTEER_HEADER = ("Name", "Email", "Phone", "Availability", "Roles", "Registration Date")

# Spreadsheet applications evaluate cells starting with these as formulas
_FORMULA_PREFIXES = ("=", "+", "-", "@")


def _cell(value: object) -> str:
    if isinstance(value, datetime):
        text = value.isoformat()
    else:
        text = "" if value is None else str(value)
    if text.startswith(_FORMULA_PREFIXES):
        return "'" + text
    return text


def _render(header: Sequence[str], rows: Iterable[Sequence[object]]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(header)
    for row in rows:
        writer.writerow([_cell(value) for value in row])
    return buffer.getvalue()


def participants_to_csv(participants: Iterable[Participant]) -> str:
    return _render(
        PARTICIPANT_HEADER,
        (
            (
                f"{p.first_name} {p.last_name}",
                p.email,
                p.phone,
                p.skill_level,
                p.registration_date,
                "Completed" if p.donation_completed else "Pending",
            )
            for p in participants
        ),
    )


def volunteers_to_csv(volunteers: Iterable[Volunteer]) -> str:
    return _render(
        VOLUNTEER_HEADER,
        (
            (
                f"{v.first_name} {v.last_name}",
                v.email,
                v.phone,
                "; ".join(v.availability or []),
                "; ".join(v.roles or []),
                v.registration_date,
            )
            for v in volunteers
        ),
    )
