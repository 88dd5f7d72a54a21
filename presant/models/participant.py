# presant/models/participant.py
from sqlalchemy import Column, DateTime, Integer, String

from presant.core.dates import utc_now
from presant.db.base import Base


class Participant(Base):
    """
    A person who can be registered to event instances.
    """

    __tablename__ = "participants"

    id = Column(Integer, primary_key=True, index=True)

    name = Column(String(255), nullable=False, index=True)
    phone_number = Column(String(32), nullable=False)
    gender = Column(String(1), nullable=False)
    age = Column(Integer, nullable=False)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        onupdate=utc_now,
    )

    def __repr__(self) -> str:
        return f"<Participant id={self.id} name={self.name!r}>"
