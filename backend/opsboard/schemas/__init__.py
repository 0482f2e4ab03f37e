"""Pydantic schemas for API request/response models."""
from .health import (
    CheckResultItem,
    HealthCheckRunResponse,
    SiteHealth,
    HealthResponse,
)
from .uptime import (
    SiteUptime,
    UptimeResponse,
)
from .events import (
    SystemEventResponse,
    EventsResponse,
)

__all__ = [
    "CheckResultItem",
    "HealthCheckRunResponse",
    "SiteHealth",
    "HealthResponse",
    "SiteUptime",
    "UptimeResponse",
    "SystemEventResponse",
    "EventsResponse",
]
