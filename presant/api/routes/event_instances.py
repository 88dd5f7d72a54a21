# presant/api/routes/event_instances.py
import logging
from datetime import date as date_type
from http import HTTPStatus

from fastapi import APIRouter, Depends, HTTPException, Path, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from presant.api.dependencies.repositories import (
    get_event_repository,
    get_participant_repository,
)
from presant.db.session import get_db
from presant.models.event_instance import EventInstance, EventRegistration
from presant.models.master_event import MasterEvent
from presant.models.participant import Participant
from presant.repositories.sql import SqlEventInstanceRepository, SqlParticipantRepository
from presant.schemas.event_instance import (
    EventInstanceCreate,
    EventInstanceRead,
    RegistrationResult,
)
from presant.schemas.participant import ParticipantRead
from presant.services.event_schedule import list_active_event_instances
from presant.services.registration import register_participant, unregister_participant

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/event-instances", tags=["Event Instances"])


@router.post(
    "",
    response_model=EventInstanceRead,
    status_code=HTTPStatus.CREATED,
    summary="Create an event instance from a master event",
    description=(
        "Create a dated, optionally recurring occurrence of a master event.\n\n"
        "- `recurrence_type` is one of `none`, `daily`, `weekly`, `monthly`.\n"
        "- `recurrence_end_date` bounds recurring instances (inclusive). It is "
        "not validated against `start_date`; an end before the start simply "
        "makes the instance never active.\n"
        "- `registered_participants` registers participants right away."
    ),
    responses={
        400: {
            "description": "Unknown master event or participant id.",
            "content": {
                "application/json": {
                    "example": {"detail": "Master event with id 9 does not exist."}
                }
            },
        },
    },
)
async def create_event_instance(
    payload: EventInstanceCreate,
    db: AsyncSession = Depends(get_db),
    events: SqlEventInstanceRepository = Depends(get_event_repository),
) -> EventInstanceRead:
    master_result = await db.execute(
        select(MasterEvent).where(MasterEvent.id == payload.master_event_id)
    )
    master_event = master_result.scalar_one_or_none()
    if master_event is None:
        raise HTTPException(
            status_code=HTTPStatus.BAD_REQUEST,
            detail=f"Master event with id {payload.master_event_id} does not exist.",
        )

    participant_ids = list(dict.fromkeys(payload.registered_participants))
    if participant_ids:
        found = await db.execute(
            select(Participant.id).where(Participant.id.in_(participant_ids))
        )
        missing = sorted(set(participant_ids) - set(found.scalars().all()))
        if missing:
            raise HTTPException(
                status_code=HTTPStatus.BAD_REQUEST,
                detail=f"Participants with ids {missing} do not exist.",
            )

    data = payload.model_dump(exclude={"registered_participants"})
    data["title"] = payload.title or master_event.title
    data["recurrence_type"] = payload.recurrence_type.value
    data["status"] = payload.status.value

    instance = EventInstance(**data)
    instance.registrations = [
        EventRegistration(participant_id=participant_id) for participant_id in participant_ids
    ]
    db.add(instance)
    await db.commit()

    logger.info(
        "Created event instance %s (%s, recurrence=%s) with %d participants",
        instance.id,
        instance.title,
        instance.recurrence_type,
        len(participant_ids),
    )

    created = await events.get(instance.id)
    return EventInstanceRead.model_validate(created)


@router.get(
    "",
    response_model=list[EventInstanceRead],
    summary="List event instances",
    description="Return all event instances ordered by start date, optionally of one master event.",
)
async def list_event_instances(
    master_event_id: int | None = Query(
        default=None,
        description="Only return instances generated from this master event.",
        examples=[1],
    ),
    events: SqlEventInstanceRepository = Depends(get_event_repository),
) -> list[EventInstanceRead]:
    instances = await events.list(master_event_id=master_event_id)
    return [EventInstanceRead.model_validate(i) for i in instances]


@router.get(
    "/active",
    response_model=list[EventInstanceRead],
    summary="List event instances active on a date",
    description=(
        "Return the event instances whose recurrence makes them active on `on`.\n\n"
        "- `none`: only on the start date\n"
        "- `daily`: every day from start date to recurrence end date\n"
        "- `weekly`: same weekday as the start date\n"
        "- `monthly`: same day of month as the start date (day 31 never matches "
        "in shorter months)\n\n"
        "When `on` is omitted, today's date in the configured `APP_TIMEZONE` is used."
    ),
)
async def list_active_instances(
    on: date_type | None = Query(
        default=None,
        description="Calendar date to evaluate (YYYY-MM-DD). Defaults to today.",
        examples=["2024-01-08"],
    ),
    events: SqlEventInstanceRepository = Depends(get_event_repository),
) -> list[EventInstanceRead]:
    active = await list_active_event_instances(events, on_date=on)
    return [EventInstanceRead.model_validate(i) for i in active]


@router.get(
    "/{event_id}",
    response_model=EventInstanceRead,
    summary="Get event instance details by ID",
    responses={404: {"description": "No event instance exists with the given ID."}},
)
async def get_event_instance(
    event_id: int = Path(..., ge=1, description="Numeric ID of the event instance."),
    events: SqlEventInstanceRepository = Depends(get_event_repository),
) -> EventInstanceRead:
    instance = await events.get(event_id)
    if instance is None:
        raise HTTPException(
            status_code=HTTPStatus.NOT_FOUND,
            detail=f"Event instance with id {event_id} not found.",
        )
    return EventInstanceRead.model_validate(instance)


@router.get(
    "/{event_id}/participants",
    response_model=list[ParticipantRead],
    summary="List participants registered to an event instance",
)
async def list_registered_participants(
    event_id: int = Path(..., ge=1),
    events: SqlEventInstanceRepository = Depends(get_event_repository),
) -> list[ParticipantRead]:
    if await events.get(event_id) is None:
        raise HTTPException(
            status_code=HTTPStatus.NOT_FOUND,
            detail=f"Event instance with id {event_id} not found.",
        )
    participants = await events.registered_participants(event_id)
    return [ParticipantRead.model_validate(p) for p in participants]


@router.post(
    "/{event_id}/participants/{participant_id}",
    response_model=RegistrationResult,
    summary="Register a participant to an event instance",
    description="Idempotent: registering an already registered participant returns `changed: false`.",
)
async def register(
    event_id: int = Path(..., ge=1),
    participant_id: int = Path(..., ge=1),
    events: SqlEventInstanceRepository = Depends(get_event_repository),
    participants: SqlParticipantRepository = Depends(get_participant_repository),
) -> RegistrationResult:
    try:
        return await register_participant(events, participants, event_id, participant_id)
    except LookupError as exc:
        raise HTTPException(status_code=HTTPStatus.NOT_FOUND, detail=str(exc))


@router.delete(
    "/{event_id}/participants/{participant_id}",
    response_model=RegistrationResult,
    summary="Unregister a participant from an event instance",
    description=(
        "Idempotent: unregistering a participant who is not registered returns "
        "`changed: false`. Recorded attendance is kept."
    ),
)
async def unregister(
    event_id: int = Path(..., ge=1),
    participant_id: int = Path(..., ge=1),
    events: SqlEventInstanceRepository = Depends(get_event_repository),
) -> RegistrationResult:
    try:
        return await unregister_participant(events, event_id, participant_id)
    except LookupError as exc:
        raise HTTPException(status_code=HTTPStatus.NOT_FOUND, detail=str(exc))
