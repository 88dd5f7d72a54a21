# presant/schemas/recurrence.py
from datetime import date
from enum import Enum

from pydantic import BaseModel, Field, field_validator


class RecurrenceType(str, Enum):
    """
    How an event instance repeats after its start date.

    NONE is the explicit "single occurrence" variant; missing values are
    normalised to it rather than left as None or an empty string.
    """

    NONE = "none"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class EventOccurrence(BaseModel):
    """
    Minimal view of an event instance needed to decide on which calendar
    days it is active.
    """

    id: int | None = Field(
        None,
        description="Identifier of the event instance, if the occurrence is persisted.",
        examples=[1],
    )
    start_date: date = Field(
        ...,
        description="First calendar date on which the occurrence is valid.",
        examples=["2024-01-01"],
    )
    recurrence_type: RecurrenceType = Field(
        RecurrenceType.NONE,
        description="Repeat pattern. `none` means the occurrence happens on start_date only.",
        examples=["weekly"],
    )
    recurrence_end_date: date | None = Field(
        None,
        description="Optional last calendar date (inclusive) on which the occurrence may be active.",
        examples=["2024-01-31"],
    )

    @field_validator("recurrence_type", mode="before")
    @classmethod
    def _default_to_none(cls, value):
        if value is None or value == "":
            return RecurrenceType.NONE
        return value
