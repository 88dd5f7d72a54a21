# presant/schemas/participant.py

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Gender(str, Enum):
    MALE = "L"
    FEMALE = "P"


class ParticipantBase(BaseModel):
    """
    Shared fields used by ParticipantCreate and ParticipantRead.
    """

    name: str = Field(
        ...,
        min_length=1,
        description="Full name of the participant.",
        examples=["Budi Santoso"],
    )
    phone_number: str = Field(
        ...,
        description="Contact phone number.",
        examples=["081234567890"],
    )
    gender: Gender = Field(
        ...,
        description="`L` (male) or `P` (female).",
        examples=["L"],
    )
    age: int = Field(
        ...,
        ge=0,
        description="Age in years.",
        examples=[27],
    )


class ParticipantCreate(ParticipantBase):
    """
    Schema for registering a new participant record.
    """
    pass


class ParticipantRead(ParticipantBase):
    """
    Response schema for reading a participant.
    """

    id: int = Field(..., description="Auto-incremented participant ID.", examples=[7])
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)
