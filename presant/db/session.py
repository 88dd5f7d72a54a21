# presant/db/session.py
import logging
import os
from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from presant.core.config import get_settings
from presant.db.base import Base

# Registers every table on Base.metadata
from presant.models.master_event import MasterEvent  # noqa: F401
from presant.models.participant import Participant  # noqa: F401
from presant.models.event_instance import EventInstance, EventRegistration  # noqa: F401
from presant.models.attendance import Attendance  # noqa: F401

logger = logging.getLogger(__name__)

settings = get_settings()

IS_TEST = "PYTEST_CURRENT_TEST" in os.environ or settings.APP_ENV == "test"

# TestClient and pytest-asyncio run on different event loops; a pooled
# aiosqlite connection must not outlive the loop that opened it.
engine = create_async_engine(
    settings.DB_URL,
    echo=False,
    poolclass=NullPool if IS_TEST else None,
)

AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    autoflush=False,
    expire_on_commit=False,
    class_=AsyncSession,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """One session per request; repositories resolved in the same request share it."""
    async with AsyncSessionLocal() as session:
        yield session


async def init_db_for_startup() -> None:
    """Create missing attendance tables; existing data is left alone."""
    logger.info("Ensuring database schema exists")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def init_db() -> None:
    """
    Drop and recreate every table.

    Used by the test suite to start each case from empty tables.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
