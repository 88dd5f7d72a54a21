# presant/schemas/master_event.py

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


# --------------------------------------------------------------------------
# Base schema shared by create/read
# --------------------------------------------------------------------------

class MasterEventBase(BaseModel):
    """
    A reusable event template, not tied to any date.
    """

    title: str = Field(
        ...,
        min_length=1,
        description="Title of the event template.",
        examples=["Weekly Choir Practice"],
    )
    description: str | None = Field(
        None,
        description="Longer free-text description.",
    )
    location: str | None = Field(
        None,
        description="Default location for instances of this event.",
        examples=["Main Hall"],
    )
    estimated_duration: int | None = Field(
        None,
        ge=0,
        description="Estimated duration in minutes.",
        examples=[90],
    )
    max_participants: int | None = Field(
        None,
        ge=1,
        description="Suggested maximum number of participants.",
    )
    requirements: list[str] | None = Field(
        None,
        description="Things participants should bring or prepare.",
        examples=[["Sheet music", "Water bottle"]],
    )


# --------------------------------------------------------------------------
# Create schema (POST /master-events)
# --------------------------------------------------------------------------

class MasterEventCreate(MasterEventBase):
    pass


# --------------------------------------------------------------------------
# Read schema (GET /master-events, GET /master-events/{id})
# --------------------------------------------------------------------------

class MasterEventRead(MasterEventBase):
    """
    Response schema for reading a master event, including DB-generated fields.
    """

    id: int = Field(..., description="Auto-incremented master event ID.", examples=[1])
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)
