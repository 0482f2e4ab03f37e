"""Cron trigger API - runs one health check pass."""
import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ..dependencies import get_coordinator, verify_cron_secret
from ..errors import RegistryUnavailableError
from ..schemas.health import CheckResultItem, HealthCheckRunResponse
from ..services.coordinator import PassCoordinator

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/cron", tags=["cron"])


@router.get(
    "/health-check",
    response_model=HealthCheckRunResponse,
    dependencies=[Depends(verify_cron_secret)],
)
async def run_health_check(coordinator: PassCoordinator = Depends(get_coordinator)):
    """Probe every active site once and record the results.

    Meant to be called by a scheduler every few minutes with
    "Authorization: Bearer <CRON_SECRET>".
    """
    try:
        summary = await coordinator.run_pass()
    except RegistryUnavailableError as e:
        logger.error(f"Health check cron failed: {e}")
        return JSONResponse(
            status_code=500,
            content={"error": "Health check failed", "message": str(e)},
        )

    if not summary.results:
        return HealthCheckRunResponse(message=summary.message, checks=0)

    return HealthCheckRunResponse(
        message=summary.message,
        timestamp=summary.timestamp,
        checks=summary.checks,
        results=[
            CheckResultItem(
                site=result.site,
                domain=result.domain,
                status=result.status.value,
                response_time_ms=result.response_time_ms,
                status_code=result.status_code,
            )
            for result in summary.results
        ],
    )
