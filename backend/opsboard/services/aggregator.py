"""Uptime aggregator - turns windowed observations into uptime figures.

Healthy and degraded observations both count as available. Average latency
only uses healthy observations, since slow and failed probes would skew it.
An empty window yields a no-data result (uptime None), which is not the same
as a site that was checked and always down (uptime 0.0).
"""
import logging
import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import List, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import async_sessionmaker

from ..database import async_session
from ..models import HealthCheck
from .classifier import AVAILABLE_TIERS, Tier
from .registry import SiteInfo, SiteRegistry

logger = logging.getLogger(__name__)

DEFAULT_WINDOW_HOURS = 24

# Badge shown when there is nothing to go on
UNKNOWN_BADGE = "unknown"

_AVAILABLE_VALUES = frozenset(tier.value for tier in AVAILABLE_TIERS)


@dataclass(frozen=True)
class Observation:
    """Read-only view of a stored health check."""
    site_id: str
    status: str
    response_time_ms: int
    status_code: int
    checked_at: datetime

    @classmethod
    def from_model(cls, check: HealthCheck) -> "Observation":
        return cls(
            site_id=check.site_id,
            status=check.status,
            response_time_ms=check.response_time_ms or 0,
            status_code=check.status_code or 0,
            checked_at=check.checked_at,
        )


@dataclass(frozen=True)
class AggregateResult:
    """Uptime figures for one site over one window."""
    site_id: str
    total_checks: int = 0
    healthy_checks: int = 0
    uptime_percentage: Optional[float] = None
    avg_response_time: Optional[int] = None
    most_recent: Optional[Observation] = None

    @classmethod
    def no_data(cls, site_id: str) -> "AggregateResult":
        return cls(site_id=site_id)

    @property
    def has_data(self) -> bool:
        return self.total_checks > 0

    @property
    def last_check(self) -> Optional[datetime]:
        return self.most_recent.checked_at if self.most_recent else None

    @property
    def status_badge(self) -> str:
        return status_badge(self.most_recent.status if self.most_recent else None)


@dataclass(frozen=True)
class SiteUptime:
    """Aggregate plus the registry fields the dashboard displays."""
    site: SiteInfo
    result: AggregateResult


def status_badge(status: Optional[str]) -> str:
    """Badge for a stored tier; anything unrecognised is unknown."""
    if status in {tier.value for tier in Tier}:
        return status
    return UNKNOWN_BADGE


def summarize(site_id: str, observations: Sequence[Observation]) -> AggregateResult:
    """Compute uptime figures from observations already filtered to a window."""
    if not observations:
        return AggregateResult.no_data(site_id)

    total = len(observations)
    available = sum(1 for o in observations if o.status in _AVAILABLE_VALUES)
    uptime = round(available / total * 100, 2)

    healthy_latencies = [o.response_time_ms for o in observations if o.status == Tier.HEALTHY.value]
    avg_latency = None
    if healthy_latencies:
        # Round half up to whole milliseconds
        avg_latency = math.floor(sum(healthy_latencies) / len(healthy_latencies) + 0.5)

    most_recent = max(observations, key=lambda o: o.checked_at)

    return AggregateResult(
        site_id=site_id,
        total_checks=total,
        healthy_checks=available,
        uptime_percentage=uptime,
        avg_response_time=avg_latency,
        most_recent=most_recent,
    )


class UptimeAggregator:
    """Reads observation history and aggregates it on demand."""

    def __init__(
        self,
        session_factory: Optional[async_sessionmaker] = None,
        registry: Optional[SiteRegistry] = None,
    ):
        self.session_factory = session_factory or async_session
        self.registry = registry or SiteRegistry(self.session_factory)

    async def list_observations(self, site_id: str, since: datetime) -> List[Observation]:
        """Observations for a site at or after `since`, most recent first."""
        async with self.session_factory() as session:
            result = await session.execute(
                select(HealthCheck)
                .where(
                    HealthCheck.site_id == site_id,
                    HealthCheck.checked_at >= since,
                )
                .order_by(HealthCheck.checked_at.desc())
            )
            return [Observation.from_model(check) for check in result.scalars().all()]

    async def latest_observation(self, site_id: str) -> Optional[Observation]:
        """Most recent observation for a site, regardless of age."""
        async with self.session_factory() as session:
            result = await session.execute(
                select(HealthCheck)
                .where(HealthCheck.site_id == site_id)
                .order_by(HealthCheck.checked_at.desc())
                .limit(1)
            )
            check = result.scalar_one_or_none()
            return Observation.from_model(check) if check else None

    async def aggregate(
        self,
        site: SiteInfo,
        window_hours: int = DEFAULT_WINDOW_HOURS,
        now: Optional[datetime] = None,
    ) -> AggregateResult:
        """Uptime for one site over the trailing window."""
        now = now or datetime.utcnow()
        since = now - timedelta(hours=window_hours)
        observations = await self.list_observations(site.id, since)
        return summarize(site.id, observations)

    async def aggregate_all(
        self,
        window_hours: int = DEFAULT_WINDOW_HOURS,
        now: Optional[datetime] = None,
    ) -> List[SiteUptime]:
        """Uptime for every active site.

        A site whose history cannot be read is logged and left out.

        Raises:
            RegistryUnavailableError: if the active site list cannot be read
        """
        now = now or datetime.utcnow()
        sites = await self.registry.list_active_sites()

        uptimes = []
        for site in sites:
            try:
                result = await self.aggregate(site, window_hours, now)
            except Exception as e:
                logger.error(f"Error fetching checks for {site.name}: {e}")
                continue
            uptimes.append(SiteUptime(site=site, result=result))
        return uptimes
