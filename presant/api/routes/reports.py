# presant/api/routes/reports.py
from http import HTTPStatus

from fastapi import APIRouter, Depends, HTTPException, Path, Query

from presant.api.dependencies.repositories import (
    get_attendance_repository,
    get_event_repository,
    get_participant_repository,
)
from presant.repositories.sql import (
    SqlAttendanceRepository,
    SqlEventInstanceRepository,
    SqlParticipantRepository,
)
from presant.schemas.report import (
    EventAttendanceDetail,
    EventAttendanceSummary,
    ParticipantAttendanceReport,
)
from presant.services.reporting import (
    compute_event_report,
    compute_events_overview,
    compute_participant_report,
)

router = APIRouter(
    prefix="/reports",
    tags=["Reports"],
)


@router.get(
    "/events",
    response_model=list[EventAttendanceSummary],
    status_code=HTTPStatus.OK,
    summary="Attendance summary for all event instances",
    description=(
        "Return an attendance summary per event instance.\n\n"
        "For each instance the report includes:\n"
        "- Number of registered participants\n"
        "- Number of participants with status `present`\n"
        "- Attendance rate = present / registered * 100 (one decimal, 0 when "
        "nobody is registered)\n"
        "- Count per effective status\n\n"
        "Only `present` counts as attended. `excused` and `sick` are listed in "
        "`status_counts` but do not raise the rate."
    ),
    responses={
        200: {
            "description": "Summaries successfully computed.",
            "content": {
                "application/json": {
                    "example": [
                        {
                            "event_id": 3,
                            "master_event_id": 1,
                            "title": "Choir Practice - January",
                            "start_date": "2024-01-01",
                            "recurrence_type": "weekly",
                            "location": "Main Hall",
                            "report": {
                                "total_registered": 3,
                                "present_count": 1,
                                "recorded_count": 2,
                                "attendance_ratio": 0.3333333333333333,
                                "attendance_rate": 33.3,
                                "status_counts": {
                                    "present": 1,
                                    "excused": 0,
                                    "sick": 1,
                                    "absent": 1,
                                },
                                "statuses": {"1": "present", "2": "sick", "3": "absent"},
                            },
                        }
                    ]
                }
            },
        },
    },
)
async def get_events_report(
    master_event_id: int | None = Query(
        default=None,
        description="Only include instances of this master event.",
        examples=[1],
    ),
    events: SqlEventInstanceRepository = Depends(get_event_repository),
    attendance: SqlAttendanceRepository = Depends(get_attendance_repository),
) -> list[EventAttendanceSummary]:
    return await compute_events_overview(events, attendance, master_event_id=master_event_id)


@router.get(
    "/events/{event_id}",
    response_model=EventAttendanceDetail,
    summary="Attendance report for one event instance",
    responses={404: {"description": "No event instance exists with the given ID."}},
)
async def get_event_report(
    event_id: int = Path(..., ge=1, description="Event instance identifier."),
    events: SqlEventInstanceRepository = Depends(get_event_repository),
    attendance: SqlAttendanceRepository = Depends(get_attendance_repository),
) -> EventAttendanceDetail:
    """
    Aggregated figures plus the effective status of every registered participant.
    """
    try:
        return await compute_event_report(events, attendance, event_id)
    except LookupError as exc:
        raise HTTPException(status_code=HTTPStatus.NOT_FOUND, detail=str(exc))


@router.get(
    "/participants/{participant_id}",
    response_model=ParticipantAttendanceReport,
    summary="Attendance report for one participant",
    description=(
        "Return the participant's status at every event instance they are "
        "registered to (most recent first), their overall attendance rate, and "
        "a per-title, per-month breakdown suitable for charts."
    ),
    responses={404: {"description": "No participant exists with the given ID."}},
)
async def get_participant_report(
    participant_id: int = Path(..., ge=1, description="Participant identifier."),
    events: SqlEventInstanceRepository = Depends(get_event_repository),
    participants: SqlParticipantRepository = Depends(get_participant_repository),
    attendance: SqlAttendanceRepository = Depends(get_attendance_repository),
) -> ParticipantAttendanceReport:
    try:
        return await compute_participant_report(events, participants, attendance, participant_id)
    except LookupError as exc:
        raise HTTPException(status_code=HTTPStatus.NOT_FOUND, detail=str(exc))
