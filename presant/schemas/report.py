# presant/schemas/report.py
from datetime import date

from pydantic import BaseModel, Field

from presant.schemas.attendance import (
    AggregatedReport,
    AttendanceStatus,
    ParticipantAttendanceRead,
)
from presant.schemas.participant import ParticipantRead
from presant.schemas.recurrence import RecurrenceType


class EventAttendanceSummary(BaseModel):
    """
    Per-event-instance attendance summary, as listed on the events report.
    """

    event_id: int = Field(..., description="Event instance identifier.", examples=[3])
    master_event_id: int = Field(..., examples=[1])
    title: str = Field(..., examples=["Choir Practice - January"])
    start_date: date = Field(..., examples=["2024-01-01"])
    recurrence_type: RecurrenceType = Field(RecurrenceType.NONE, examples=["weekly"])
    location: str | None = None

    report: AggregatedReport = Field(
        ...,
        description=(
            "Aggregated figures. Only `present` counts towards attendance_rate; "
            "`excused` and `sick` appear in status_counts only."
        ),
    )


class EventAttendanceDetail(EventAttendanceSummary):
    """
    Event report including every registered participant with their
    effective status.
    """

    participants: list[ParticipantAttendanceRead] = Field(
        ...,
        description="Registered participants, ordered by name.",
    )


class ParticipantEventAttendance(BaseModel):
    """
    One event instance a participant is registered to, with their status.
    """

    event_id: int
    title: str
    start_date: date
    status: AttendanceStatus = Field(
        ...,
        description="Effective status; `absent` when nothing was recorded.",
    )
    is_present: bool


class MonthlyAttendancePoint(BaseModel):
    """
    Attendance of one participant in one calendar month for event instances
    sharing a title.
    """

    event_title: str = Field(..., examples=["Choir Practice"])
    year: int = Field(..., examples=[2024])
    month: int = Field(..., ge=1, le=12, examples=[1])
    total_instances: int = Field(..., examples=[4])
    present_count: int = Field(..., examples=[3])
    attendance_rate: float = Field(
        ...,
        description="present_count / total_instances * 100, rounded to one decimal.",
        examples=[75.0],
    )


class ParticipantAttendanceReport(BaseModel):
    """
    Attendance history of a single participant across all event instances
    they are registered to.
    """

    participant: ParticipantRead
    total_events: int = Field(..., description="Number of registered event instances.")
    present_count: int = Field(..., description="Instances with status exactly `present`.")
    attendance_rate: float = Field(
        ...,
        description="present_count / total_events * 100 rounded to one decimal; 0.0 when total_events is 0.",
    )
    events: list[ParticipantEventAttendance] = Field(
        ...,
        description="Registered event instances, most recent start_date first.",
    )
    monthly: list[MonthlyAttendancePoint] = Field(
        ...,
        description="Per event title, per calendar month breakdown ordered chronologically.",
    )
