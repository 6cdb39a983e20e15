from __future__ import annotations

from event_signup.api.routes.admin import router as admin_router
from event_signup.api.routes.content import router as content_router
from event_signup.api.routes.event_settings import router as settings_router
from event_signup.api.routes.health import router as health_router
from event_signup.api.routes.participants import router as participants_router
from event_signup.api.routes.sponsors import router as sponsors_router
from event_signup.api.routes.volunteers import router as volunteers_router

__all__ = [
    "admin_router",
    "content_router",
    "health_router",
    "participants_router",
    "settings_router",
    "sponsors_router",
    "volunteers_router",
]
