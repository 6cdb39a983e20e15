import uvicorn

from event_signup.core.app_factory import create_app
from event_signup.core.config import settings

app = create_app()


def run() -> None:
    """Serve the API with uvicorn (``event-signup-api`` console script)."""
    uvicorn.run(
        "event_signup.main:app",
        host=settings.app.host,
        port=settings.app.port,
        log_level=settings.log.level.lower(),
        access_log=False,
    )


if __name__ == "__main__":
    run()
