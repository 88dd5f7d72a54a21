# presant/api/routes/participants.py
import logging
from http import HTTPStatus

from fastapi import APIRouter, Depends, HTTPException, Path, Query
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from presant.db.session import get_db
from presant.models.participant import Participant
from presant.schemas.participant import ParticipantCreate, ParticipantRead

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/participants", tags=["Participants"])


@router.post(
    "",
    response_model=ParticipantRead,
    status_code=HTTPStatus.CREATED,
    summary="Create a new participant",
)
async def create_participant(
    payload: ParticipantCreate,
    db: AsyncSession = Depends(get_db),
) -> ParticipantRead:
    participant = Participant(
        name=payload.name,
        phone_number=payload.phone_number,
        gender=payload.gender.value,
        age=payload.age,
    )
    db.add(participant)
    await db.commit()
    await db.refresh(participant)

    logger.info("Created participant %s", participant.id)
    return ParticipantRead.model_validate(participant)


@router.get(
    "",
    response_model=list[ParticipantRead],
    summary="List participants",
    description=(
        "Return all participants ordered by name. `q` narrows the list to names "
        "containing the text (case-insensitive) or phone numbers containing it."
    ),
)
async def list_participants(
    q: str | None = Query(
        default=None,
        description="Optional search text matched against name and phone number.",
        examples=["budi"],
    ),
    db: AsyncSession = Depends(get_db),
) -> list[ParticipantRead]:
    stmt = select(Participant)
    if q:
        stmt = stmt.where(
            or_(
                Participant.name.ilike(f"%{q}%"),
                Participant.phone_number.contains(q),
            )
        )

    result = await db.execute(stmt.order_by(Participant.name.asc(), Participant.id.asc()))
    return [ParticipantRead.model_validate(p) for p in result.scalars().all()]


@router.get(
    "/{participant_id}",
    response_model=ParticipantRead,
    summary="Get participant details by ID",
    responses={404: {"description": "No participant exists with the given ID."}},
)
async def get_participant(
    participant_id: int = Path(..., ge=1, description="Numeric ID of the participant."),
    db: AsyncSession = Depends(get_db),
) -> ParticipantRead:
    result = await db.execute(select(Participant).where(Participant.id == participant_id))
    participant = result.scalar_one_or_none()

    if participant is None:
        raise HTTPException(
            status_code=HTTPStatus.NOT_FOUND,
            detail=f"Participant with id {participant_id} not found.",
        )

    return ParticipantRead.model_validate(participant)
