# presant/models/attendance.py
from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)

from presant.core.dates import utc_now
from presant.db.base import Base


class Attendance(Base):
    """
    Recorded attendance status of one participant at one event instance.

    At most one row exists per (participant, event instance); later
    submissions update it in place.
    """

    __tablename__ = "attendance"

    id = Column(Integer, primary_key=True, index=True)

    participant_id = Column(
        Integer,
        ForeignKey("participants.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    event_instance_id = Column(
        Integer,
        ForeignKey("event_instances.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    status = Column(String(16), nullable=False, default="absent")
    timestamp = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    notes = Column(Text, nullable=True)

    __table_args__ = (
        UniqueConstraint(
            "participant_id",
            "event_instance_id",
            name="uq_attendance_participant_event",
        ),
    )

    def __repr__(self) -> str:
        return (
            f"<Attendance id={self.id} participant_id={self.participant_id} "
            f"event_instance_id={self.event_instance_id} status={self.status}>"
        )
