# presant/main.py
from contextlib import asynccontextmanager

from fastapi import FastAPI

from presant.api.routes import (
    attendance,
    event_instances,
    health,
    master_events,
    participants,
    reports,
)
from presant.core.config import get_settings
from presant.core.logging import configure_logging
from presant.db.session import init_db_for_startup


@asynccontextmanager
async def lifespan(app: FastAPI):  # pragma: no cover
    await init_db_for_startup()
    yield


def create_app() -> FastAPI:
    """
    Application factory for the attendance service.
    """
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title=settings.APP_NAME,
        description=(
            "Attendance management backend: master events, dated and recurring\n"
            "event instances, participant registration, attendance recording and\n"
            "attendance-rate reports per event and per participant."
        ),
        version="0.1.0",
        lifespan=lifespan,
    )

    # Routers
    app.include_router(health.router)
    app.include_router(master_events.router)
    app.include_router(participants.router)
    app.include_router(event_instances.router)
    app.include_router(attendance.router)
    app.include_router(reports.router)

    return app


app = create_app()
