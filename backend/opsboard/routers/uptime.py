"""Uptime API - windowed availability per site."""
import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ..config import settings
from ..dependencies import get_aggregator
from ..errors import RegistryUnavailableError
from ..schemas.uptime import SiteUptime, UptimeResponse
from ..services.aggregator import UptimeAggregator

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/uptime", tags=["uptime"])


@router.get("", response_model=UptimeResponse)
async def get_uptime(aggregator: UptimeAggregator = Depends(get_aggregator)):
    """Uptime, healthy latency and badge for every active site."""
    window_hours = settings.uptime_window_hours
    try:
        uptimes = await aggregator.aggregate_all(window_hours)
    except RegistryUnavailableError as e:
        logger.error(f"Uptime calculation failed: {e}")
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "error": "Failed to calculate uptime",
                "message": str(e),
            },
        )

    data = [
        SiteUptime(
            site_id=uptime.site.id,
            site_name=uptime.site.name,
            domain=uptime.site.domain,
            uptime_percentage=uptime.result.uptime_percentage,
            total_checks=uptime.result.total_checks,
            healthy_checks=uptime.result.healthy_checks,
            avg_response_time=uptime.result.avg_response_time,
            checks_in_window=uptime.result.total_checks,
            last_check=uptime.result.last_check,
            status_badge=uptime.result.status_badge,
        )
        for uptime in uptimes
    ]
    return UptimeResponse(data=data, period=f"last_{window_hours}_hours")
