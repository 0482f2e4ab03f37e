"""Recorder service - persists observations and critical alerts."""
import json
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from sqlalchemy.ext.asyncio import async_sessionmaker

from ..database import async_session
from ..models import HealthCheck, SystemEvent
from .classifier import Tier
from .prober import ProbeOutcome
from .registry import SiteInfo

logger = logging.getLogger(__name__)

ALERT_EVENT_TYPE = "alert"
ALERT_SEVERITY = "critical"


@dataclass(frozen=True)
class RecordResult:
    """Which writes made it to storage."""
    observation_written: bool
    alert_written: bool = False


def alert_description(site: SiteInfo) -> str:
    return f"{site.name} is DOWN ({site.domain})"


class RecorderService:
    """Writes one observation per probe, plus an alert event when critical.

    Each write runs in its own session and transaction, so a failed alert
    never rolls back the observation. Failures are logged and reported in
    the result, never raised.
    """

    def __init__(self, session_factory: Optional[async_sessionmaker] = None):
        self.session_factory = session_factory or async_session

    async def record(
        self,
        site: SiteInfo,
        tier: Tier,
        outcome: ProbeOutcome,
        checked_at: Optional[datetime] = None,
    ) -> RecordResult:
        checked_at = checked_at or datetime.utcnow()

        observation_written = await self._write_observation(site, tier, outcome, checked_at)

        alert_written = False
        if tier == Tier.CRITICAL:
            alert_written = await self._write_alert(site, outcome, checked_at)

        return RecordResult(observation_written=observation_written, alert_written=alert_written)

    async def _write_observation(
        self,
        site: SiteInfo,
        tier: Tier,
        outcome: ProbeOutcome,
        checked_at: datetime,
    ) -> bool:
        try:
            async with self.session_factory() as session:
                session.add(HealthCheck(
                    site_id=site.id,
                    status=tier.value,
                    response_time_ms=outcome.elapsed_ms,
                    status_code=outcome.status_code if outcome.reached else 0,
                    checked_at=checked_at,
                ))
                await session.commit()
            return True
        except Exception as e:
            logger.error(f"Failed to insert health check for {site.domain}: {e}")
            return False

    async def _write_alert(
        self,
        site: SiteInfo,
        outcome: ProbeOutcome,
        checked_at: datetime,
    ) -> bool:
        metadata = {
            "status_code": outcome.status_code if outcome.reached else 0,
            "response_time_ms": outcome.elapsed_ms,
        }
        try:
            async with self.session_factory() as session:
                session.add(SystemEvent(
                    site_id=site.id,
                    event_type=ALERT_EVENT_TYPE,
                    severity=ALERT_SEVERITY,
                    description=alert_description(site),
                    event_metadata=json.dumps(metadata),
                    created_at=checked_at,
                ))
                await session.commit()
            return True
        except Exception as e:
            logger.error(f"Failed to insert alert event for {site.domain}: {e}")
            return False
