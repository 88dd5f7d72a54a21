# presant/models/event_instance.py
from sqlalchemy import (
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    Time,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from presant.core.dates import utc_now
from presant.db.base import Base
from presant.models.master_event import MasterEvent
from presant.models.participant import Participant


class EventInstance(Base):
    """
    A concrete, dated event generated from a master event, optionally
    repeating daily, weekly or monthly until `recurrence_end_date`.
    """

    __tablename__ = "event_instances"

    id = Column(Integer, primary_key=True, index=True)

    master_event_id = Column(
        Integer,
        ForeignKey("master_events.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    location = Column(String(255), nullable=True)

    start_date = Column(Date, nullable=False, index=True)
    end_date = Column(Date, nullable=True)
    start_time = Column(Time, nullable=True)
    end_time = Column(Time, nullable=True)

    # Stored as plain text; the recurrence evaluator treats unknown values as inactive.
    recurrence_type = Column(String(16), nullable=False, default="none")
    recurrence_end_date = Column(Date, nullable=True)

    max_participants = Column(Integer, nullable=True)
    status = Column(String(16), nullable=False, default="draft")

    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        onupdate=utc_now,
    )

    master_event = relationship(MasterEvent, lazy="selectin")
    registrations = relationship(
        "EventRegistration",
        back_populates="event_instance",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="EventRegistration.participant_id",
    )

    @property
    def registered_participant_ids(self) -> list[int]:
        return [reg.participant_id for reg in self.registrations]

    def __repr__(self) -> str:
        return (
            f"<EventInstance id={self.id} title={self.title!r} "
            f"start={self.start_date} recurrence={self.recurrence_type}>"
        )


class EventRegistration(Base):
    """
    Membership of one participant in one event instance.
    """

    __tablename__ = "event_registrations"

    id = Column(Integer, primary_key=True, index=True)

    event_instance_id = Column(
        Integer,
        ForeignKey("event_instances.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    participant_id = Column(
        Integer,
        ForeignKey("participants.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)

    event_instance = relationship(EventInstance, back_populates="registrations")
    participant = relationship(Participant, lazy="selectin")

    __table_args__ = (
        UniqueConstraint(
            "event_instance_id",
            "participant_id",
            name="uq_event_registrations_event_participant",
        ),
    )
