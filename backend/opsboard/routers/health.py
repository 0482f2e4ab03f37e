"""Health API - latest observation per active site."""
import logging

from fastapi import APIRouter, Depends, HTTPException

from ..dependencies import get_aggregator
from ..errors import RegistryUnavailableError
from ..schemas.health import HealthResponse, SiteHealth
from ..services.aggregator import UNKNOWN_BADGE, UptimeAggregator, status_badge

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/health", tags=["health"])


@router.get("", response_model=HealthResponse)
async def get_site_health(aggregator: UptimeAggregator = Depends(get_aggregator)):
    """Latest tier and badge for every active site."""
    try:
        sites = await aggregator.registry.list_active_sites()
    except RegistryUnavailableError as e:
        raise HTTPException(status_code=500, detail=str(e))

    data = []
    for site in sites:
        try:
            latest = await aggregator.latest_observation(site.id)
        except Exception as e:
            logger.error(f"Error fetching latest check for {site.name}: {e}")
            latest = None
        data.append(SiteHealth(
            site_id=site.id,
            site_name=site.name,
            domain=site.domain,
            bu_name=site.bu_name,
            site_status=site.status,
            health_status=latest.status if latest else UNKNOWN_BADGE,
            response_time_ms=latest.response_time_ms if latest else None,
            status_code=latest.status_code if latest else None,
            last_check=latest.checked_at if latest else None,
            status_badge=status_badge(latest.status if latest else None),
        ))
    return HealthResponse(data=data)
