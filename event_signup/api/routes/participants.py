"""Tournament registration endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, Query, Response
from sqlalchemy.orm import Session

from event_signup.core.auth import verify_admin_key
from event_signup.core.rate_limit import PARTICIPANT_REGISTRATION, enforce_rate_limit
from event_signup.db.database import get_db_session
from event_signup.schemas.common import SuccessResponse
from event_signup.schemas.participant import ParticipantResponse
from event_signup.services.export_service import participants_to_csv
from event_signup.services.participant_service import list_participants, participants

router = APIRouter(tags=["Participants"])


@router.get(
    "/participants",
    response_model=list[ParticipantResponse],
    dependencies=[Depends(verify_admin_key)],
)
def get_participants(session: Session = Depends(get_db_session)) -> list[ParticipantResponse]:
    """List all participants, newest registration first."""
    return [ParticipantResponse.model_validate(p) for p in list_participants(session)]


@router.post(
    "/participants",
    response_model=ParticipantResponse,
    status_code=201,
    dependencies=[Depends(enforce_rate_limit(PARTICIPANT_REGISTRATION))],
)
def register_participant(
    payload: dict[str, Any] = Body(...),
    session: Session = Depends(get_db_session),
) -> ParticipantResponse:
    """Register a participant for the tournament.

    Raises:
        InvalidInputError: 400 when a field is rejected.
        DuplicateRecordAppError: 400 "Email already registered".
        RateLimitAppError: 429 after 5 registrations per hour from one client.
    """
    participant = participants.create(session, payload)
    return ParticipantResponse.model_validate(participant)


@router.put(
    "/participants",
    response_model=ParticipantResponse,
    dependencies=[Depends(verify_admin_key)],
)
def update_participant(
    payload: dict[str, Any] = Body(...),
    session: Session = Depends(get_db_session),
) -> ParticipantResponse:
    participant = participants.update(session, payload)
    return ParticipantResponse.model_validate(participant)


@router.delete(
    "/participants",
    response_model=SuccessResponse,
    dependencies=[Depends(verify_admin_key)],
)
def delete_participant(
    record_id: str | None = Query(None, alias="id"),
    session: Session = Depends(get_db_session),
) -> SuccessResponse:
    participants.delete(session, record_id)
    return SuccessResponse()


@router.get(
    "/participants/export",
    response_class=Response,
    dependencies=[Depends(verify_admin_key)],
)
def export_participants(session: Session = Depends(get_db_session)) -> Response:
    """Download all participants as CSV."""
    return Response(
        content=participants_to_csv(list_participants(session)),
        media_type="text/csv",
        headers={"Content-Disposition": "attachment; filename=tournament_participants.csv"},
    )
