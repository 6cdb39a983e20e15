from __future__ import annotations

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

router = APIRouter(tags=["Health"])

logger = logging.getLogger(__name__)


@router.get("/health")
def health_check(request: Request) -> JSONResponse:
    """Liveness check that also pings the relational store.

    Returns:
        200 ``{"status": "ok", "database": "ok"}`` or 503 with
        ``"database": "unavailable"`` when the store cannot be reached.
    """

    try:
        with request.app.state.db.engine.connect() as connection:
            connection.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        logger.error("health.database_unavailable", extra={"error_type": type(exc).__name__})
        return JSONResponse(status_code=503, content={"status": "degraded", "database": "unavailable"})

    return JSONResponse(content={"status": "ok", "database": "ok"})
