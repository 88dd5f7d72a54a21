# presant/repositories/sql.py
from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional, Sequence

from sqlalchemy import delete, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from presant.models.attendance import Attendance
from presant.models.event_instance import EventInstance, EventRegistration
from presant.models.participant import Participant
from presant.repositories.interfaces import AttendanceWrite
from presant.schemas.attendance import AttendanceEntry, AttendanceStatus

# Dialects with INSERT ... ON CONFLICT DO UPDATE
_CONFLICT_INSERTS = {
    "sqlite": sqlite.insert,
    "postgresql": postgresql.insert,
}

logger = logging.getLogger(__name__)


def _to_entry(row: Attendance) -> AttendanceEntry:
    return AttendanceEntry(
        participant_id=row.participant_id,
        occurrence_id=row.event_instance_id,
        status=AttendanceStatus.from_stored(row.status),
        timestamp=row.timestamp,
    )


class SqlParticipantRepository:
    def __init__(self, db: AsyncSession):
        self._db = db

    async def get(self, participant_id: int) -> Optional[Participant]:
        result = await self._db.execute(
            select(Participant).where(Participant.id == participant_id)
        )
        return result.scalar_one_or_none()


class SqlEventInstanceRepository:
    def __init__(self, db: AsyncSession):
        self._db = db

    async def get(self, event_id: int) -> Optional[EventInstance]:
        # populate_existing refreshes the registrations collection after writes
        stmt = (
            select(EventInstance)
            .where(EventInstance.id == event_id)
            .execution_options(populate_existing=True)
        )
        result = await self._db.execute(stmt)
        return result.scalar_one_or_none()

    async def list(self, *, master_event_id: Optional[int] = None) -> Sequence[EventInstance]:
        stmt = select(EventInstance).execution_options(populate_existing=True)
        if master_event_id is not None:
            stmt = stmt.where(EventInstance.master_event_id == master_event_id)
        stmt = stmt.order_by(EventInstance.start_date.asc(), EventInstance.id.asc())

        result = await self._db.execute(stmt)
        return list(result.scalars().all())

    async def list_for_participant(self, participant_id: int) -> Sequence[EventInstance]:
        stmt = (
            select(EventInstance)
            .join(EventRegistration, EventRegistration.event_instance_id == EventInstance.id)
            .where(EventRegistration.participant_id == participant_id)
            .order_by(EventInstance.start_date.desc(), EventInstance.id.desc())
        )
        result = await self._db.execute(stmt)
        return list(result.scalars().all())

    async def registered_participants(self, event_id: int) -> Sequence[Participant]:
        stmt = (
            select(Participant)
            .join(EventRegistration, EventRegistration.participant_id == Participant.id)
            .where(EventRegistration.event_instance_id == event_id)
            .order_by(Participant.name.asc(), Participant.id.asc())
        )
        result = await self._db.execute(stmt)
        return list(result.scalars().all())

    async def register(self, event_id: int, participant_id: int) -> bool:
        existing = await self._db.execute(
            select(EventRegistration.id).where(
                EventRegistration.event_instance_id == event_id,
                EventRegistration.participant_id == participant_id,
            )
        )
        if existing.scalar_one_or_none() is not None:
            return False

        self._db.add(
            EventRegistration(event_instance_id=event_id, participant_id=participant_id)
        )
        try:
            await self._db.commit()
        except IntegrityError:
            # A concurrent request registered the same pair first
            await self._db.rollback()
            logger.info(
                "Participant %s already registered to event %s", participant_id, event_id
            )
            return False
        return True

    async def unregister(self, event_id: int, participant_id: int) -> bool:
        result = await self._db.execute(
            delete(EventRegistration).where(
                EventRegistration.event_instance_id == event_id,
                EventRegistration.participant_id == participant_id,
            )
        )
        await self._db.commit()
        return bool(result.rowcount)


class SqlAttendanceRepository:
    def __init__(self, db: AsyncSession):
        self._db = db

    async def list_for_event(self, event_id: int) -> Sequence[AttendanceEntry]:
        stmt = (
            select(Attendance)
            .where(Attendance.event_instance_id == event_id)
            .order_by(Attendance.timestamp.asc(), Attendance.id.asc())
        )
        result = await self._db.execute(stmt)
        return [_to_entry(row) for row in result.scalars().all()]

    async def list_for_participant(self, participant_id: int) -> Sequence[AttendanceEntry]:
        stmt = (
            select(Attendance)
            .where(Attendance.participant_id == participant_id)
            .order_by(Attendance.timestamp.asc(), Attendance.id.asc())
        )
        result = await self._db.execute(stmt)
        return [_to_entry(row) for row in result.scalars().all()]

    async def upsert(
        self,
        *,
        participant_id: int,
        event_id: int,
        status: AttendanceStatus,
        timestamp: datetime,
        notes: Optional[str] = None,
    ) -> Attendance:
        records = await self.upsert_many(
            [AttendanceWrite(participant_id, event_id, status, timestamp, notes)]
        )
        return records[0]

    async def upsert_many(self, rows: Sequence[AttendanceWrite]) -> list[Attendance]:
        """
        Write every row with a single-statement upsert and commit once.

        The unique (participant, event instance) constraint is the conflict
        target, so concurrent first submissions for one pair end up as one
        row. On any database error the whole batch is rolled back.
        """
        dialect = self._db.get_bind().dialect.name
        insert = _CONFLICT_INSERTS.get(dialect)
        if insert is None:
            raise NotImplementedError(f"Attendance upsert is not supported on {dialect!r}")

        try:
            for row in rows:
                stmt = insert(Attendance).values(
                    participant_id=row.participant_id,
                    event_instance_id=row.event_id,
                    status=row.status.value,
                    timestamp=row.timestamp,
                    notes=row.notes,
                )
                stmt = stmt.on_conflict_do_update(
                    index_elements=[Attendance.participant_id, Attendance.event_instance_id],
                    set_={
                        "status": stmt.excluded.status,
                        "timestamp": stmt.excluded.timestamp,
                        "notes": stmt.excluded.notes,
                    },
                )
                await self._db.execute(stmt)
            await self._db.commit()
        except SQLAlchemyError:
            await self._db.rollback()
            logger.warning("Attendance batch of %d rows rolled back", len(rows))
            raise

        records: list[Attendance] = []
        for row in rows:
            result = await self._db.execute(
                select(Attendance)
                .where(
                    Attendance.participant_id == row.participant_id,
                    Attendance.event_instance_id == row.event_id,
                )
                .execution_options(populate_existing=True)
            )
            records.append(result.scalar_one())
        return records
