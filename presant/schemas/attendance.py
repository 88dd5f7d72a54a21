# presant/schemas/attendance.py
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from presant.schemas.participant import ParticipantRead


class AttendanceStatus(str, Enum):
    """
    Status recorded for one participant at one event instance.

    Only PRESENT counts towards the attendance rate. EXCUSED and SICK are
    shown in reports but are not attendance.
    """

    PRESENT = "present"
    EXCUSED = "excused"
    SICK = "sick"
    ABSENT = "absent"

    @classmethod
    def from_stored(cls, value: str | None) -> "AttendanceStatus":
        """Map a stored string to a status; unknown values read back as ABSENT."""
        try:
            return cls(value)
        except ValueError:
            return cls.ABSENT


class AttendanceEntry(BaseModel):
    """
    A recorded status for one (participant, occurrence) pair.
    """

    participant_id: int = Field(..., description="Participant identifier.", examples=[7])
    occurrence_id: int = Field(..., description="Event instance identifier.", examples=[3])
    status: AttendanceStatus = Field(..., description="Recorded status.", examples=["present"])
    timestamp: datetime = Field(
        ...,
        description="When the status was recorded or last updated.",
        examples=["2024-01-08T09:15:00Z"],
    )


class AggregatedReport(BaseModel):
    """
    Attendance figures for a single event instance, derived from its
    registrations and attendance entries. Never stored.
    """

    total_registered: int = Field(
        ...,
        description="Number of participants registered to the event instance.",
        examples=[3],
    )
    present_count: int = Field(
        ...,
        description="Registered participants whose effective status is exactly `present`.",
        examples=[1],
    )
    recorded_count: int = Field(
        0,
        description="Registered participants that have a stored attendance entry.",
        examples=[2],
    )
    attendance_ratio: float = Field(
        ...,
        description="Unrounded present_count / total_registered (0.0 when nobody is registered).",
        examples=[0.3333333333],
    )
    attendance_rate: float = Field(
        ...,
        description=(
            "Attendance percentage rounded to one decimal: "
            "present_count / total_registered * 100, or 0.0 when total_registered is 0."
        ),
        examples=[33.3],
    )
    status_counts: dict[AttendanceStatus, int] = Field(
        default_factory=dict,
        description="Histogram of effective statuses over registered participants.",
    )
    statuses: dict[int, AttendanceStatus] = Field(
        default_factory=dict,
        description="Effective status per registered participant id.",
    )


# --------------------------------------------------------------------------
# Write payloads (POST /attendance, POST /attendance/bulk)
# --------------------------------------------------------------------------

class AttendanceSubmission(BaseModel):
    """
    A single status submission for a participant at an event instance.
    """

    participant_id: int = Field(..., ge=1, examples=[7])
    event_id: int = Field(..., ge=1, description="Event instance identifier.", examples=[3])
    status: AttendanceStatus = Field(..., examples=["present"])
    timestamp: datetime | None = Field(
        None,
        description="Time of the observation. Defaults to the server's current UTC time.",
    )
    notes: str | None = Field(None, description="Optional free-text note.")


class AttendanceRead(BaseModel):
    """
    Public representation of a stored attendance record.
    """

    id: int
    participant_id: int
    event_id: int = Field(..., validation_alias="event_instance_id")
    status: AttendanceStatus
    timestamp: datetime
    notes: str | None = None

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class ParticipantAttendanceRead(BaseModel):
    """
    A registered participant together with their effective status at one
    event instance. `recorded` is False when no entry exists and the status
    defaulted to `absent`.
    """

    participant: ParticipantRead
    status: AttendanceStatus
    recorded: bool = Field(
        ...,
        description="Whether an attendance entry is stored for this participant.",
    )
    timestamp: datetime | None = Field(
        None,
        description="When the stored entry was last written, if any.",
    )
