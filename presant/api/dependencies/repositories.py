# presant/api/dependencies/repositories.py
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from presant.db.session import get_db
from presant.repositories.sql import (
    SqlAttendanceRepository,
    SqlEventInstanceRepository,
    SqlParticipantRepository,
)


async def get_event_repository(
    db: AsyncSession = Depends(get_db),
) -> SqlEventInstanceRepository:
    return SqlEventInstanceRepository(db)


async def get_participant_repository(
    db: AsyncSession = Depends(get_db),
) -> SqlParticipantRepository:
    return SqlParticipantRepository(db)


async def get_attendance_repository(
    db: AsyncSession = Depends(get_db),
) -> SqlAttendanceRepository:
    """
    Repositories resolved within one request share the same session, since
    FastAPI caches `get_db` per request.
    """
    return SqlAttendanceRepository(db)
