"""Content block endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.orm import Session

from event_signup.core.auth import verify_admin_key
from event_signup.core.rate_limit import CONTENT_CREATION, enforce_rate_limit
from event_signup.db.database import get_db_session
from event_signup.schemas.common import SuccessResponse
from event_signup.schemas.content import ContentBlockResponse
from event_signup.services.content_service import (
    content_blocks,
    get_content_by_key,
    list_active_content,
)

router = APIRouter(tags=["Content"])


@router.get("/content", response_model=ContentBlockResponse | list[ContentBlockResponse])
def get_content(
    key: str | None = Query(None),
    session: Session = Depends(get_db_session),
) -> ContentBlockResponse | list[ContentBlockResponse]:
    """Return one block by ``key``, or every active block when no key is given."""
    if key:
        return ContentBlockResponse.model_validate(get_content_by_key(session, key))
    return [ContentBlockResponse.model_validate(c) for c in list_active_content(session)]


@router.post(
    "/content",
    response_model=ContentBlockResponse,
    status_code=201,
    dependencies=[Depends(verify_admin_key), Depends(enforce_rate_limit(CONTENT_CREATION))],
)
def create_content(
    payload: dict[str, Any] = Body(...),
    session: Session = Depends(get_db_session),
) -> ContentBlockResponse:
    block = content_blocks.create(session, payload)
    return ContentBlockResponse.model_validate(block)


@router.put(
    "/content",
    response_model=ContentBlockResponse,
    dependencies=[Depends(verify_admin_key)],
)
def update_content(
    payload: dict[str, Any] = Body(...),
    session: Session = Depends(get_db_session),
) -> ContentBlockResponse:
    block = content_blocks.update(session, payload)
    return ContentBlockResponse.model_validate(block)


@router.delete(
    "/content",
    response_model=SuccessResponse,
    dependencies=[Depends(verify_admin_key)],
)
def delete_content(
    record_id: str | None = Query(None, alias="id"),
    session: Session = Depends(get_db_session),
) -> SuccessResponse:
    content_blocks.delete(session, record_id)
    return SuccessResponse()
