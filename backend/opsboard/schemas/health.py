"""Health check schemas - pass results and latest site status."""
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel


class CheckResultItem(BaseModel):
    """One site's line in a pass summary."""
    site: str
    domain: str
    status: str  # healthy, degraded, warning, critical
    response_time_ms: int
    status_code: int  # 0 when unreachable


class HealthCheckRunResponse(BaseModel):
    """Response of the cron trigger."""
    message: str
    timestamp: Optional[datetime] = None
    checks: int
    results: List[CheckResultItem] = []


class SiteHealth(BaseModel):
    """Latest observation for a site."""
    site_id: str
    site_name: str
    domain: str
    bu_name: Optional[str] = None
    site_status: str
    health_status: str  # tier of the latest check, or unknown
    response_time_ms: Optional[int] = None
    status_code: Optional[int] = None
    last_check: Optional[datetime] = None
    status_badge: str


class HealthResponse(BaseModel):
    data: List[SiteHealth]
