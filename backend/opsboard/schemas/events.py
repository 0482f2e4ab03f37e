"""System event schemas."""
from datetime import datetime
from typing import Any, List, Optional
from pydantic import BaseModel


class SystemEventResponse(BaseModel):
    id: int
    site_id: Optional[str] = None
    event_type: str
    severity: str
    description: str
    metadata: Optional[Any] = None
    created_at: datetime
    time_ago: str


class EventsResponse(BaseModel):
    data: List[SystemEventResponse]
