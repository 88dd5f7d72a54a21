# presant/services/reporting.py
from __future__ import annotations

import logging
from collections import defaultdict
from typing import Dict, List, Optional, Tuple

from presant.models.event_instance import EventInstance
from presant.repositories.interfaces import (
    AttendanceRepository,
    EventInstanceRepository,
    ParticipantRepository,
)
from presant.schemas.attendance import (
    AttendanceStatus,
    ParticipantAttendanceRead,
)
from presant.schemas.participant import ParticipantRead
from presant.schemas.recurrence import RecurrenceType
from presant.schemas.report import (
    EventAttendanceDetail,
    EventAttendanceSummary,
    MonthlyAttendancePoint,
    ParticipantAttendanceReport,
    ParticipantEventAttendance,
)
from presant.services.attendance_aggregator import AttendanceAggregator, attendance_rate

logger = logging.getLogger(__name__)


def _summary_fields(instance: EventInstance) -> dict:
    try:
        recurrence = RecurrenceType(instance.recurrence_type or RecurrenceType.NONE)
    except ValueError:
        recurrence = RecurrenceType.NONE
    return {
        "event_id": instance.id,
        "master_event_id": instance.master_event_id,
        "title": instance.title,
        "start_date": instance.start_date,
        "recurrence_type": recurrence,
        "location": instance.location,
    }


async def _aggregate_event(
    events: EventInstanceRepository,
    attendance: AttendanceRepository,
    event_id: int,
):
    registered = await events.registered_participants(event_id)
    entries = await attendance.list_for_event(event_id)
    report = AttendanceAggregator.aggregate([p.id for p in registered], entries)
    return registered, entries, report


async def compute_events_overview(
    events: EventInstanceRepository,
    attendance: AttendanceRepository,
    master_event_id: Optional[int] = None,
) -> List[EventAttendanceSummary]:
    """
    Compute an attendance summary for every event instance.

    Steps
    -----
    1) Fetch event instances (optionally of one master event).
    2) For each instance, fetch registered participants and attendance entries.
    3) Aggregate: only `present` counts towards attendance_rate.
    """
    instances = await events.list(master_event_id=master_event_id)

    summaries: List[EventAttendanceSummary] = []
    for instance in instances:
        _, _, report = await _aggregate_event(events, attendance, instance.id)
        summaries.append(EventAttendanceSummary(**_summary_fields(instance), report=report))

    logger.debug("Computed attendance overview for %d event instances", len(summaries))
    return summaries


async def compute_event_report(
    events: EventInstanceRepository,
    attendance: AttendanceRepository,
    event_id: int,
) -> EventAttendanceDetail:
    """
    Attendance report for one event instance, including every registered
    participant with their effective status.

    Raises LookupError if the event instance does not exist.
    """
    instance = await events.get(event_id)
    if instance is None:
        raise LookupError(f"Event instance with id={event_id} not found")

    registered, entries, report = await _aggregate_event(events, attendance, event_id)
    latest = AttendanceAggregator.latest_by_participant(entries)

    participants = [
        ParticipantAttendanceRead(
            participant=ParticipantRead.model_validate(participant),
            status=report.statuses[participant.id],
            recorded=participant.id in latest,
            timestamp=latest[participant.id].timestamp if participant.id in latest else None,
        )
        for participant in registered
    ]

    return EventAttendanceDetail(
        **_summary_fields(instance),
        report=report,
        participants=participants,
    )


async def compute_participant_report(
    events: EventInstanceRepository,
    participants: ParticipantRepository,
    attendance: AttendanceRepository,
    participant_id: int,
) -> ParticipantAttendanceReport:
    """
    Attendance history of one participant across the event instances they
    are registered to.

    Steps
    -----
    1) Fetch registered event instances, most recent start_date first.
    2) Resolve the effective status per instance (`absent` if unrecorded).
    3) Totals: present_count / total_events * 100 (0 when there are none).
    4) Monthly breakdown: group instances by title and by the calendar month
       of their start_date, and compute the same rate per group.

    Raises LookupError if the participant does not exist.
    """
    participant = await participants.get(participant_id)
    if participant is None:
        raise LookupError(f"Participant with id={participant_id} not found")

    instances = await events.list_for_participant(participant_id)
    entries = await attendance.list_for_participant(participant_id)

    entries_by_event: Dict[int, list] = defaultdict(list)
    for entry in entries:
        entries_by_event[entry.occurrence_id].append(entry)

    rows: List[ParticipantEventAttendance] = []
    for instance in instances:
        status = AttendanceAggregator.effective_status(
            participant_id, entries_by_event.get(instance.id, [])
        )
        rows.append(
            ParticipantEventAttendance(
                event_id=instance.id,
                title=instance.title,
                start_date=instance.start_date,
                status=status,
                is_present=status == AttendanceStatus.PRESENT,
            )
        )

    rows.sort(key=lambda row: (row.start_date, row.event_id), reverse=True)

    present = sum(1 for row in rows if row.is_present)
    _, pct = attendance_rate(present, len(rows))

    return ParticipantAttendanceReport(
        participant=ParticipantRead.model_validate(participant),
        total_events=len(rows),
        present_count=present,
        attendance_rate=pct,
        events=rows,
        monthly=_monthly_breakdown(rows),
    )


def _monthly_breakdown(rows: List[ParticipantEventAttendance]) -> List[MonthlyAttendancePoint]:
    buckets: Dict[Tuple[str, int, int], List[int]] = defaultdict(lambda: [0, 0])
    for row in rows:
        key = (row.title, row.start_date.year, row.start_date.month)
        buckets[key][0] += 1
        if row.is_present:
            buckets[key][1] += 1

    points: List[MonthlyAttendancePoint] = []
    for (title, year, month), (total, present) in sorted(buckets.items()):
        _, pct = attendance_rate(present, total)
        points.append(
            MonthlyAttendancePoint(
                event_title=title,
                year=year,
                month=month,
                total_instances=total,
                present_count=present,
                attendance_rate=pct,
            )
        )
    return points
