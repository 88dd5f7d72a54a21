# presant/schemas/event_instance.py

from __future__ import annotations

from datetime import date, datetime, time
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from presant.schemas.master_event import MasterEventRead
from presant.schemas.recurrence import RecurrenceType


class EventInstanceStatus(str, Enum):
    """
    Lifecycle of an event instance. Purely informational; it does not affect
    whether the instance is active on a given day.
    """

    DRAFT = "draft"
    PUBLISHED = "published"
    ONGOING = "ongoing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class EventInstanceBase(BaseModel):
    """
    Fields shared by EventInstanceCreate and EventInstanceRead.
    """

    master_event_id: int = Field(
        ...,
        ge=1,
        description="Master event this instance was generated from.",
        examples=[1],
    )
    title: str | None = Field(
        None,
        description="Instance title. Defaults to the master event title when omitted.",
        examples=["Choir Practice - January"],
    )
    description: str | None = None
    location: str | None = Field(None, examples=["Main Hall"])

    start_date: date = Field(
        ...,
        description="First date on which the instance takes place.",
        examples=["2024-01-01"],
    )
    end_date: date | None = Field(
        None,
        description="Informational end date of a multi-day instance.",
    )
    start_time: time | None = Field(None, examples=["19:00:00"])
    end_time: time | None = Field(None, examples=["21:00:00"])

    recurrence_type: RecurrenceType = Field(
        RecurrenceType.NONE,
        description="Repeat pattern: none, daily, weekly or monthly.",
        examples=["weekly"],
    )
    recurrence_end_date: date | None = Field(
        None,
        description="Last date (inclusive) on which a recurring instance may be active.",
        examples=["2024-01-31"],
    )

    max_participants: int | None = Field(None, ge=1)
    status: EventInstanceStatus = Field(
        EventInstanceStatus.DRAFT,
        description="Lifecycle status of the instance.",
    )

    @field_validator("recurrence_type", mode="before")
    @classmethod
    def _default_recurrence(cls, value):
        if value is None or value == "":
            return RecurrenceType.NONE
        return value


# --------------------------------------------------------------------------
# Create schema (POST /event-instances)
# --------------------------------------------------------------------------

class EventInstanceCreate(EventInstanceBase):
    """
    Schema for creating an event instance.

    `registered_participants` optionally registers participants in the same
    request; duplicates are ignored.
    """

    registered_participants: list[int] = Field(
        default_factory=list,
        description="Participant ids to register immediately.",
        examples=[[1, 2, 3]],
    )


# --------------------------------------------------------------------------
# Read schema
# --------------------------------------------------------------------------

class EventInstanceRead(EventInstanceBase):
    """
    Response schema for an event instance, including its master event and
    the ids of registered participants.
    """

    id: int = Field(..., description="Auto-incremented event instance ID.", examples=[3])
    title: str
    master_event: MasterEventRead | None = None
    registered_participants: list[int] = Field(
        default_factory=list,
        validation_alias="registered_participant_ids",
        description="Ids of participants registered to this instance.",
    )
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class RegistrationResult(BaseModel):
    """
    Outcome of a register/unregister call. `changed` is False when the call
    had no effect (already registered, or not registered).
    """

    event_id: int
    participant_id: int
    registered: bool
    changed: bool
