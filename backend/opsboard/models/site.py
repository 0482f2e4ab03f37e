"""Site model - web properties registered for monitoring."""
import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import relationship

from ..database import Base


# Lifecycle statuses that are probed and shown on the dashboard
ACTIVE_LIFECYCLE_STATUSES = ("production", "development", "staging")


class Site(Base):
    """A registered web property. Owned by the registry, read-only here."""

    __tablename__ = "sites"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String, nullable=False)  # Display name
    domain = Column(String, nullable=False)  # Probed as https://<domain>
    bu_name = Column(String, nullable=True)  # Business unit
    status = Column(String, nullable=False, default="production")  # production, development, staging, inactive
    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships (observations are kept when a site is deleted)
    health_checks = relationship("HealthCheck", back_populates="site", passive_deletes=True)
    events = relationship("SystemEvent", back_populates="site")
