"""HealthCheck model - one observation per site per pass."""
from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship

from ..database import Base


class HealthCheck(Base):
    """Probe observation. Written once, never updated."""

    __tablename__ = "health_checks"
    __table_args__ = (
        Index("ix_health_checks_site_checked", "site_id", "checked_at"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    site_id = Column(String, ForeignKey("sites.id"), nullable=False)
    status = Column(String, nullable=False)  # healthy, degraded, warning, critical
    response_time_ms = Column(Integer, nullable=False, default=0)
    status_code = Column(Integer, nullable=False, default=0)  # 0 = unreachable
    checked_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    site = relationship("Site", back_populates="health_checks")
