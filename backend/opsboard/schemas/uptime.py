"""Uptime schemas for the dashboard."""
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel


class SiteUptime(BaseModel):
    """Windowed uptime for one site. uptime_percentage is None without data."""
    site_id: str
    site_name: str
    domain: str
    uptime_percentage: Optional[float] = None
    total_checks: int
    healthy_checks: int
    avg_response_time: Optional[int] = None
    checks_in_window: int  # Same as total_checks; window is in the response period
    last_check: Optional[datetime] = None
    status_badge: str


class UptimeResponse(BaseModel):
    success: bool = True
    data: List[SiteUptime]
    period: str
