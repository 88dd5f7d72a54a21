# presant/api/routes/attendance.py
from http import HTTPStatus

from fastapi import APIRouter, Depends, HTTPException, Query

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
from presant.schemas.attendance import (
    AttendanceRead,
    AttendanceStatus,
    AttendanceSubmission,
    ParticipantAttendanceRead,
)
from presant.services.attendance_service import (
    get_event_roster,
    record_attendance,
    submit_bulk_attendance,
)

router = APIRouter(prefix="/attendance", tags=["Attendance"])


@router.get(
    "",
    response_model=list[ParticipantAttendanceRead],
    summary="Attendance roster of an event instance",
    description=(
        "Return every participant registered to the event instance with their "
        "effective attendance status.\n\n"
        "Participants without a recorded entry are reported as `absent` with "
        "`recorded: false`.\n\n"
        "- `status` keeps only participants with that effective status.\n"
        "- `q` searches participant name (case-insensitive) and phone number."
    ),
    responses={404: {"description": "No event instance exists with the given ID."}},
)
async def get_attendance_roster(
    event_id: int = Query(..., ge=1, description="Event instance identifier.", examples=[3]),
    status: AttendanceStatus | None = Query(
        default=None,
        description="Optional effective-status filter.",
        examples=["present"],
    ),
    q: str | None = Query(default=None, description="Optional search text."),
    events: SqlEventInstanceRepository = Depends(get_event_repository),
    attendance: SqlAttendanceRepository = Depends(get_attendance_repository),
) -> list[ParticipantAttendanceRead]:
    try:
        return await get_event_roster(events, attendance, event_id, status=status, query=q)
    except LookupError as exc:
        raise HTTPException(status_code=HTTPStatus.NOT_FOUND, detail=str(exc))


@router.post(
    "",
    response_model=AttendanceRead,
    status_code=HTTPStatus.OK,
    summary="Record or update one attendance status",
    description=(
        "Upsert the attendance status of a participant at an event instance. "
        "The first submission creates the entry; later submissions overwrite it."
    ),
    responses={
        404: {"description": "Unknown event instance or participant."},
        422: {"description": "Validation error (e.g. unknown status)."},
    },
)
async def submit_attendance(
    payload: AttendanceSubmission,
    events: SqlEventInstanceRepository = Depends(get_event_repository),
    participants: SqlParticipantRepository = Depends(get_participant_repository),
    attendance: SqlAttendanceRepository = Depends(get_attendance_repository),
) -> AttendanceRead:
    try:
        record = await record_attendance(events, participants, attendance, payload)
    except LookupError as exc:
        raise HTTPException(status_code=HTTPStatus.NOT_FOUND, detail=str(exc))
    return AttendanceRead.model_validate(record)


@router.post(
    "/bulk",
    response_model=list[AttendanceRead],
    status_code=HTTPStatus.CREATED,
    summary="Record many attendance statuses at once",
    description=(
        "Upsert a batch of submissions. When the batch contains several "
        "submissions for the same participant and event instance, the last one "
        "in the payload wins. Nothing is written if any id is unknown."
    ),
)
async def submit_attendance_bulk(
    payload: list[AttendanceSubmission],
    events: SqlEventInstanceRepository = Depends(get_event_repository),
    participants: SqlParticipantRepository = Depends(get_participant_repository),
    attendance: SqlAttendanceRepository = Depends(get_attendance_repository),
) -> list[AttendanceRead]:
    try:
        records = await submit_bulk_attendance(events, participants, attendance, payload)
    except LookupError as exc:
        raise HTTPException(status_code=HTTPStatus.NOT_FOUND, detail=str(exc))
    return [AttendanceRead.model_validate(r) for r in records]
