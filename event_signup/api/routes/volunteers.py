"""Volunteer sign-up endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, Query, Response
from sqlalchemy.orm import Session

from event_signup.core.auth import verify_admin_key
from event_signup.core.rate_limit import VOLUNTEER_REGISTRATION, enforce_rate_limit
from event_signup.db.database import get_db_session
from event_signup.schemas.common import SuccessResponse
from event_signup.schemas.volunteer import VolunteerResponse
from event_signup.services.export_service import volunteers_to_csv
from event_signup.services.volunteer_service import list_volunteers, volunteers

router = APIRouter(tags=["Volunteers"])


@router.get(
    "/volunteers",
    response_model=list[VolunteerResponse],
    dependencies=[Depends(verify_admin_key)],
)
def get_volunteers(session: Session = Depends(get_db_session)) -> list[VolunteerResponse]:
    return [VolunteerResponse.model_validate(v) for v in list_volunteers(session)]


@router.post(
    "/volunteers",
    response_model=VolunteerResponse,
    status_code=201,
    dependencies=[Depends(enforce_rate_limit(VOLUNTEER_REGISTRATION))],
)
def register_volunteer(
    payload: dict[str, Any] = Body(...),
    session: Session = Depends(get_db_session),
) -> VolunteerResponse:
    """Sign a volunteer up (3 sign-ups per hour per client)."""
    volunteer = volunteers.create(session, payload)
    return VolunteerResponse.model_validate(volunteer)


@router.put(
    "/volunteers",
    response_model=VolunteerResponse,
    dependencies=[Depends(verify_admin_key)],
)
def update_volunteer(
    payload: dict[str, Any] = Body(...),
    session: Session = Depends(get_db_session),
) -> VolunteerResponse:
    volunteer = volunteers.update(session, payload)
    return VolunteerResponse.model_validate(volunteer)


@router.delete(
    "/volunteers",
    response_model=SuccessResponse,
    dependencies=[Depends(verify_admin_key)],
)
def delete_volunteer(
    record_id: str | None = Query(None, alias="id"),
    session: Session = Depends(get_db_session),
) -> SuccessResponse:
    volunteers.delete(session, record_id)
    return SuccessResponse()


@router.get(
    "/volunteers/export",
    response_class=Response,
    dependencies=[Depends(verify_admin_key)],
)
def export_volunteers(session: Session = Depends(get_db_session)) -> Response:
    return Response(
        content=volunteers_to_csv(list_volunteers(session)),
        media_type="text/csv",
        headers={"Content-Disposition": "attachment; filename=tournament_volunteers.csv"},
    )
