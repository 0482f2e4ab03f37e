"""SystemEvent model - alert log shown on the dashboard."""
from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from ..database import Base


class SystemEvent(Base):
    """Alert or informational event."""

    __tablename__ = "system_events"

    id = Column(Integer, primary_key=True, autoincrement=True)
    site_id = Column(String, ForeignKey("sites.id"), nullable=True)
    event_type = Column(String, nullable=False, default="alert")
    severity = Column(String, nullable=False)  # critical for probe alerts
    description = Column(String, nullable=False)
    # "metadata" is reserved on declarative classes
    event_metadata = Column("metadata", String, nullable=True)  # JSON
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationship
    site = relationship("Site", back_populates="events")
