# presant/services/attendance_service.py
from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Tuple

from presant.core.dates import as_utc, utc_now
from presant.models.attendance import Attendance
from presant.repositories.interfaces import (
    AttendanceRepository,
    AttendanceWrite,
    EventInstanceRepository,
    ParticipantRepository,
)
from presant.schemas.attendance import (
    AttendanceStatus,
    AttendanceSubmission,
    ParticipantAttendanceRead,
)
from presant.schemas.participant import ParticipantRead
from presant.services.attendance_aggregator import AttendanceAggregator

logger = logging.getLogger(__name__)


async def record_attendance(
    events: EventInstanceRepository,
    participants: ParticipantRepository,
    attendance: AttendanceRepository,
    submission: AttendanceSubmission,
) -> Attendance:
    """
    Create or update the attendance entry for (participant, event instance).

    The first submission creates the entry; later ones overwrite status,
    timestamp and notes. Raises LookupError if the event instance or the
    participant does not exist.
    """
    if await events.get(submission.event_id) is None:
        raise LookupError(f"Event instance with id={submission.event_id} not found")
    if await participants.get(submission.participant_id) is None:
        raise LookupError(f"Participant with id={submission.participant_id} not found")

    timestamp = as_utc(submission.timestamp) if submission.timestamp else utc_now()

    record = await attendance.upsert(
        participant_id=submission.participant_id,
        event_id=submission.event_id,
        status=submission.status,
        timestamp=timestamp,
        notes=submission.notes,
    )
    logger.info(
        "Recorded %s for participant %s at event %s",
        submission.status.value,
        submission.participant_id,
        submission.event_id,
    )
    return record


async def submit_bulk_attendance(
    events: EventInstanceRepository,
    participants: ParticipantRepository,
    attendance: AttendanceRepository,
    submissions: Iterable[AttendanceSubmission],
) -> List[Attendance]:
    """
    Record many submissions at once.

    Submissions for the same (participant, event instance) pair are reduced
    first: the one appearing last in the payload wins. All referenced records
    are validated before anything is written, and the rows are stored in a
    single transaction.
    """
    reduced: Dict[Tuple[int, int], AttendanceSubmission] = {}
    for submission in submissions:
        reduced[(submission.participant_id, submission.event_id)] = submission

    for event_id in {event_id for _, event_id in reduced}:
        if await events.get(event_id) is None:
            raise LookupError(f"Event instance with id={event_id} not found")
    for participant_id in {participant_id for participant_id, _ in reduced}:
        if await participants.get(participant_id) is None:
            raise LookupError(f"Participant with id={participant_id} not found")

    rows = [
        AttendanceWrite(
            participant_id=submission.participant_id,
            event_id=submission.event_id,
            status=submission.status,
            timestamp=as_utc(submission.timestamp) if submission.timestamp else utc_now(),
            notes=submission.notes,
        )
        for submission in reduced.values()
    ]
    records = await attendance.upsert_many(rows)

    logger.info("Bulk attendance submission wrote %d records", len(records))
    return records


async def get_event_roster(
    events: EventInstanceRepository,
    attendance: AttendanceRepository,
    event_id: int,
    status: AttendanceStatus | None = None,
    query: str | None = None,
) -> List[ParticipantAttendanceRead]:
    """
    List the registered participants of an event instance with their
    effective status (`absent` when nothing was recorded).

    Optional filters
    ----------------
    status:
        Keep only participants whose effective status equals it.
    query:
        Case-insensitive match on name, or substring match on phone number.
    """
    if await events.get(event_id) is None:
        raise LookupError(f"Event instance with id={event_id} not found")

    registered = await events.registered_participants(event_id)
    latest = AttendanceAggregator.latest_by_participant(
        await attendance.list_for_event(event_id)
    )

    roster: List[ParticipantAttendanceRead] = []
    for participant in registered:
        entry = latest.get(participant.id)
        roster.append(
            ParticipantAttendanceRead(
                participant=ParticipantRead.model_validate(participant),
                status=entry.status if entry else AttendanceStatus.ABSENT,
                recorded=entry is not None,
                timestamp=entry.timestamp if entry else None,
            )
        )

    if status is not None:
        roster = [row for row in roster if row.status == status]

    if query:
        needle = query.strip().lower()
        roster = [
            row
            for row in roster
            if needle in row.participant.name.lower()
            or query.strip() in row.participant.phone_number
        ]

    return roster
