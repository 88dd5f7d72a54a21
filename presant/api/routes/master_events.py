# presant/api/routes/master_events.py
import logging
from http import HTTPStatus

from fastapi import APIRouter, Depends, HTTPException, Path
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from presant.db.session import get_db
from presant.models.master_event import MasterEvent
from presant.schemas.master_event import MasterEventCreate, MasterEventRead

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/master-events", tags=["Master Events"])


@router.post(
    "",
    response_model=MasterEventRead,
    status_code=HTTPStatus.CREATED,
    summary="Create a new master event",
    description=(
        "Register a reusable event template. Dated event instances are then "
        "generated from it via `POST /event-instances`."
    ),
    responses={
        201: {
            "description": "Master event successfully created.",
            "content": {
                "application/json": {
                    "example": {
                        "id": 1,
                        "title": "Weekly Choir Practice",
                        "description": None,
                        "location": "Main Hall",
                        "estimated_duration": 90,
                        "max_participants": 40,
                        "requirements": ["Sheet music"],
                    }
                }
            },
        },
    },
)
async def create_master_event(
    payload: MasterEventCreate,
    db: AsyncSession = Depends(get_db),
) -> MasterEventRead:
    master_event = MasterEvent(**payload.model_dump())
    db.add(master_event)
    await db.commit()
    await db.refresh(master_event)

    logger.info("Created master event %s (%s)", master_event.id, master_event.title)
    return MasterEventRead.model_validate(master_event)


@router.get(
    "",
    response_model=list[MasterEventRead],
    summary="List all master events",
)
async def list_master_events(
    db: AsyncSession = Depends(get_db),
) -> list[MasterEventRead]:
    result = await db.execute(select(MasterEvent).order_by(MasterEvent.id.asc()))
    return [MasterEventRead.model_validate(m) for m in result.scalars().all()]


@router.get(
    "/{master_event_id}",
    response_model=MasterEventRead,
    summary="Get master event details by ID",
    responses={
        404: {
            "description": "No master event exists with the given ID.",
            "content": {
                "application/json": {
                    "example": {"detail": "Master event with id 42 not found."}
                }
            },
        },
    },
)
async def get_master_event(
    master_event_id: int = Path(
        ...,
        description="Numeric ID of the master event to retrieve.",
        ge=1,
        examples=[1],
    ),
    db: AsyncSession = Depends(get_db),
) -> MasterEventRead:
    result = await db.execute(select(MasterEvent).where(MasterEvent.id == master_event_id))
    master_event = result.scalar_one_or_none()

    if master_event is None:
        raise HTTPException(
            status_code=HTTPStatus.NOT_FOUND,
            detail=f"Master event with id {master_event_id} not found.",
        )

    return MasterEventRead.model_validate(master_event)
