# presant/models/master_event.py
from sqlalchemy import JSON, Column, DateTime, Integer, String, Text

from presant.core.dates import utc_now
from presant.db.base import Base


class MasterEvent(Base):
    """
    Reusable event template (title, description, location). Event instances
    are generated from it.
    """

    __tablename__ = "master_events"

    id = Column(Integer, primary_key=True, index=True)

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    location = Column(String(255), nullable=True)

    estimated_duration = Column(Integer, nullable=True)
    max_participants = Column(Integer, nullable=True)
    requirements = Column(JSON, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        onupdate=utc_now,
    )

    def __repr__(self) -> str:
        return f"<MasterEvent id={self.id} title={self.title!r}>"
