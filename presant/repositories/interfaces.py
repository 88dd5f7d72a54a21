from __future__ import annotations

from datetime import datetime
from typing import NamedTuple, Optional, Protocol, Sequence

from presant.models.attendance import Attendance
from presant.models.event_instance import EventInstance
from presant.models.participant import Participant
from presant.schemas.attendance import AttendanceEntry, AttendanceStatus


class AttendanceWrite(NamedTuple):
    participant_id: int
    event_id: int
    status: AttendanceStatus
    timestamp: datetime
    notes: Optional[str] = None


class ParticipantRepository(Protocol):
    async def get(self, participant_id: int) -> Optional[Participant]: ...


class EventInstanceRepository(Protocol):
    async def get(self, event_id: int) -> Optional[EventInstance]: ...

    async def list(self, *, master_event_id: Optional[int] = None) -> Sequence[EventInstance]: ...

    async def list_for_participant(self, participant_id: int) -> Sequence[EventInstance]: ...

    async def registered_participants(self, event_id: int) -> Sequence[Participant]: ...

    async def register(self, event_id: int, participant_id: int) -> bool:
        """Add the participant; return False if they were already registered."""
        ...

    async def unregister(self, event_id: int, participant_id: int) -> bool:
        """Remove the participant; return False if they were not registered."""
        ...


class AttendanceRepository(Protocol):
    async def list_for_event(self, event_id: int) -> Sequence[AttendanceEntry]: ...

    async def list_for_participant(self, participant_id: int) -> Sequence[AttendanceEntry]: ...

    async def upsert(
        self,
        *,
        participant_id: int,
        event_id: int,
        status: AttendanceStatus,
        timestamp: datetime,
        notes: Optional[str] = None,
    ) -> Attendance:
        """Create the (participant, event) record or overwrite the existing one."""
        ...

    async def upsert_many(self, rows: Sequence[AttendanceWrite]) -> list[Attendance]:
        """Upsert every row in one transaction; nothing is stored if any row fails."""
        ...
