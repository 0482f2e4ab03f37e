"""Database models."""
from .site import Site, ACTIVE_LIFECYCLE_STATUSES
from .health_check import HealthCheck
from .system_event import SystemEvent

__all__ = ["Site", "HealthCheck", "SystemEvent", "ACTIVE_LIFECYCLE_STATUSES"]
