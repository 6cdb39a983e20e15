"""Sponsor endpoints: public listing, admin management."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.orm import Session

from event_signup.core.auth import verify_admin_key
from event_signup.core.rate_limit import SPONSOR_CREATION, enforce_rate_limit
from event_signup.db.database import get_db_session
from event_signup.schemas.common import SuccessResponse
from event_signup.schemas.sponsor import SponsorResponse
from event_signup.services.sponsor_service import list_active_sponsors, sponsors

router = APIRouter(tags=["Sponsors"])


@router.get("/sponsors", response_model=list[SponsorResponse])
def get_sponsors(session: Session = Depends(get_db_session)) -> list[SponsorResponse]:
    """List active sponsors, platinum tier first."""
    return [SponsorResponse.model_validate(s) for s in list_active_sponsors(session)]


@router.post(
    "/sponsors",
    response_model=SponsorResponse,
    status_code=201,
    dependencies=[Depends(verify_admin_key), Depends(enforce_rate_limit(SPONSOR_CREATION))],
)
def create_sponsor(
    payload: dict[str, Any] = Body(...),
    session: Session = Depends(get_db_session),
) -> SponsorResponse:
    sponsor = sponsors.create(session, payload)
    return SponsorResponse.model_validate(sponsor)


@router.put(
    "/sponsors",
    response_model=SponsorResponse,
    dependencies=[Depends(verify_admin_key)],
)
def update_sponsor(
    payload: dict[str, Any] = Body(...),
    session: Session = Depends(get_db_session),
) -> SponsorResponse:
    sponsor = sponsors.update(session, payload)
    return SponsorResponse.model_validate(sponsor)


@router.delete(
    "/sponsors",
    response_model=SuccessResponse,
    dependencies=[Depends(verify_admin_key)],
)
def delete_sponsor(
    record_id: str | None = Query(None, alias="id"),
    session: Session = Depends(get_db_session),
) -> SuccessResponse:
    """Deactivate a sponsor; the row is kept."""
    sponsors.delete(session, record_id)
    return SuccessResponse()
