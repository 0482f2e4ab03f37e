"""FastAPI dependencies wiring the pipeline services to configuration."""
import hmac
from typing import Optional

from fastapi import Depends, Header, HTTPException
from sqlalchemy.ext.asyncio import async_sessionmaker

from .config import settings, HealthCheckConfig
from .database import get_session_factory
from .services.aggregator import UptimeAggregator
from .services.coordinator import PassCoordinator
from .services.recorder import RecorderService
from .services.registry import SiteRegistry


def get_health_check_config() -> HealthCheckConfig:
    return settings.health_check_config()


def get_cron_secret() -> Optional[str]:
    return settings.cron_secret


def get_coordinator(
    session_factory: async_sessionmaker = Depends(get_session_factory),
    config: HealthCheckConfig = Depends(get_health_check_config),
) -> PassCoordinator:
    return PassCoordinator(
        config=config,
        registry=SiteRegistry(session_factory),
        recorder=RecorderService(session_factory),
    )


def get_aggregator(
    session_factory: async_sessionmaker = Depends(get_session_factory),
) -> UptimeAggregator:
    return UptimeAggregator(session_factory)


async def verify_cron_secret(
    authorization: Optional[str] = Header(None),
    cron_secret: Optional[str] = Depends(get_cron_secret),
):
    """Reject trigger requests that do not carry the shared secret.

    With no secret configured every request is rejected.
    """
    if not cron_secret or not authorization:
        raise HTTPException(status_code=401, detail="Unauthorized")

    expected = f"Bearer {cron_secret}"
    if not hmac.compare_digest(authorization.encode(), expected.encode()):
        raise HTTPException(status_code=401, detail="Unauthorized")
