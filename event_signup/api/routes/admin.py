"""Admin login endpoint."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends

from event_signup.core.auth import check_admin_credentials
from event_signup.core.rate_limit import ADMIN_LOGIN, enforce_rate_limit
from event_signup.schemas.common import SuccessResponse

router = APIRouter(tags=["Admin"])


@router.post(
    "/admin/auth",
    response_model=SuccessResponse,
    dependencies=[Depends(enforce_rate_limit(ADMIN_LOGIN))],
)
def admin_login(payload: dict[str, Any] = Body(...)) -> SuccessResponse:
    """Check the static admin credentials.

    Any failure answers 401 "Invalid credentials"; five attempts per
    15 minutes per client are allowed.
    """
    check_admin_credentials(payload.get("username"), payload.get("password"))
    return SuccessResponse()
