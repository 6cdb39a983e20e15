"""Tests for CSV rendering of registrations."""

import csv
import io
from datetime import datetime, timezone

from event_signup.db.models import Participant, Volunteer
from event_signup.services.export_service import participants_to_csv, volunteers_to_csv

REGISTERED = datetime(2024, 9, 1, 18, 30, tzinfo=timezone.utc)


def _rows(text: str) -> list[list[str]]:
    return list(csv.reader(io.StringIO(text)))


def _participant(**overrides) -> Participant:
    fields = {
        "first_name": "Jane",
        "last_name": "Doe",
        "email": "jane@example.com",
        "phone": "555-123-4567",
        "skill_level": "beginner",
        "donation_completed": False,
        "registration_date": REGISTERED,
    }
    fields.update(overrides)
    return Participant(**fields)


def test_empty_export_has_header_only():
    assert _rows(participants_to_csv([])) == [
        ["Name", "Email", "Phone", "Skill Level", "Registration Date", "Donation Status"]
    ]


def test_participant_row():
    rows = _rows(participants_to_csv([_participant(), _participant(donation_completed=True)]))

    assert rows[1] == [
        "Jane Doe",
        "jane@example.com",
        "555-123-4567",
        "beginner",
        "2024-09-01T18:30:00+00:00",
        "Pending",
    ]
    assert rows[2][-1] == "Completed"


def test_values_with_commas_and_quotes_are_quoted():
    text = participants_to_csv([_participant(last_name='Doe, "JJ"')])

    assert _rows(text)[1][0] == 'Jane Doe, "JJ"'


def test_formula_like_cells_are_neutralized():
    rows = _rows(participants_to_csv([_participant(phone="+1 555 123 4567", first_name="=cmd")]))

    assert rows[1][0] == "'=cmd Doe"
    assert rows[1][2] == "'+1 555 123 4567"


def test_volunteer_lists_joined():
    volunteer = Volunteer(
        first_name="Sam",
        last_name="Rivera",
        email="sam@example.org",
        phone="555-987-6543",
        availability=["morning", "evening"],
        roles=[],
        emergency_contact="Alex Rivera",
        emergency_phone="555 111 2222",
        registration_date=REGISTERED,
    )

    rows = _rows(volunteers_to_csv([volunteer]))

    assert rows[0] == ["Name", "Email", "Phone", "Availability", "Roles", "Registration Date"]
    assert rows[1][3] == "morning; evening"
    assert rows[1][4] == ""
