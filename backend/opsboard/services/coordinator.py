"""Pass coordinator - runs one health check pass over every active site.

Concurrency Design:
- All active sites are probed in parallel, capped by a semaphore sized from
  HealthCheckConfig.max_concurrency to bound outbound connection bursts
- Each probe enforces its own timeout, so a pass takes roughly one timeout
  per max_concurrency sites rather than one timeout per site
- Every site runs probe -> classify -> record inside its own error boundary;
  one site's failure never aborts the pass or touches other sites
- An optional pass deadline shortens or skips probes that would outlive it;
  those sites are recorded as critical/unreached like any other timeout

Passes are not serialized here. Whatever triggers them must not start a new
pass while one is still running.
"""
import asyncio
import logging
import time
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

import httpx

from ..config import HealthCheckConfig
from .classifier import Tier, classify
from .prober import ProberService, ProbeOutcome
from .recorder import RecorderService
from .registry import SiteInfo, SiteRegistry

logger = logging.getLogger(__name__)

NO_SITES_MESSAGE = "No active sites to check"
COMPLETED_MESSAGE = "Health checks completed"


@dataclass(frozen=True)
class SiteCheckResult:
    """Summary line for one site in a pass."""
    site_id: str
    site: str  # Display name
    domain: str
    status: Tier
    response_time_ms: int
    status_code: int
    recorded: bool = True


@dataclass
class PassSummary:
    """Outcome of one pass."""
    timestamp: datetime
    message: str
    results: List[SiteCheckResult] = field(default_factory=list)

    @property
    def checks(self) -> int:
        return len(self.results)

    def tier_counts(self) -> Dict[str, int]:
        counts = Counter(result.status.value for result in self.results)
        return {tier.value: counts.get(tier.value, 0) for tier in Tier}


class PassCoordinator:
    """Fans the active site list out to prober, classifier and recorder."""

    def __init__(
        self,
        config: Optional[HealthCheckConfig] = None,
        registry: Optional[SiteRegistry] = None,
        prober: Optional[ProberService] = None,
        recorder: Optional[RecorderService] = None,
    ):
        self.config = config or HealthCheckConfig()
        self.registry = registry or SiteRegistry()
        self.prober = prober or ProberService(
            timeout_ms=self.config.timeout_ms,
            user_agent=self.config.user_agent,
            max_connections=self.config.max_concurrency,
        )
        self.recorder = recorder or RecorderService()

    async def run_pass(self) -> PassSummary:
        """Probe, classify and record every active site once.

        Raises:
            RegistryUnavailableError: if the active site list cannot be read;
                nothing is probed or written in that case
        """
        sites = await self.registry.list_active_sites()

        if not sites:
            logger.info(NO_SITES_MESSAGE)
            return PassSummary(timestamp=datetime.utcnow(), message=NO_SITES_MESSAGE)

        logger.info(
            f"Starting health check pass for {len(sites)} sites "
            f"(max_concurrent={self.config.max_concurrency})"
        )

        loop = asyncio.get_running_loop()
        deadline = None
        if self.config.pass_deadline_ms is not None:
            deadline = loop.time() + self.config.pass_deadline_ms / 1000

        # Use semaphore to limit concurrent probes
        semaphore = asyncio.Semaphore(self.config.max_concurrency)

        async with self.prober.client() as client:

            async def check_with_limit(site: SiteInfo) -> SiteCheckResult:
                async with semaphore:
                    return await self._check_site(client, site, deadline)

            results = await asyncio.gather(*[check_with_limit(site) for site in sites])

        summary = PassSummary(
            timestamp=datetime.utcnow(),
            message=COMPLETED_MESSAGE,
            results=list(results),
        )
        logger.info(f"Health check pass finished: {summary.tier_counts()}")
        return summary

    async def _check_site(
        self,
        client: httpx.AsyncClient,
        site: SiteInfo,
        deadline: Optional[float],
    ) -> SiteCheckResult:
        """Probe, classify and record a single site. Never raises."""
        start = time.monotonic()
        try:
            outcome = await self._probe(client, site, deadline)
        except Exception as e:
            logger.error(f"Probe failed for {site.domain}: {e}")
            outcome = ProbeOutcome.unreached(int((time.monotonic() - start) * 1000), str(e))

        tier = classify(outcome, self.config.degraded_threshold_ms)

        try:
            record = await self.recorder.record(site, tier, outcome)
            recorded = record.observation_written
        except Exception as e:
            logger.error(f"Recording failed for {site.domain}: {e}")
            recorded = False

        status_code = outcome.status_code if outcome.reached else 0
        if not recorded:
            # Nothing stored for this site, so report it like an unreachable one
            tier = Tier.CRITICAL
            status_code = 0

        if outcome.error:
            logger.debug(f"{site.domain}: {tier.value} ({outcome.error})")
        else:
            logger.debug(f"{site.domain}: {tier.value} in {outcome.elapsed_ms}ms")

        return SiteCheckResult(
            site_id=site.id,
            site=site.name,
            domain=site.domain,
            status=tier,
            response_time_ms=outcome.elapsed_ms,
            status_code=status_code,
            recorded=recorded,
        )

    async def _probe(
        self,
        client: httpx.AsyncClient,
        site: SiteInfo,
        deadline: Optional[float],
    ) -> ProbeOutcome:
        if deadline is None:
            return await self.prober.probe(client, site.domain)

        remaining_ms = int((deadline - asyncio.get_running_loop().time()) * 1000)
        if remaining_ms <= 0:
            return ProbeOutcome.unreached(0, "Pass deadline exceeded")

        return await self.prober.probe(
            client,
            site.domain,
            timeout_ms=min(self.config.timeout_ms, remaining_ms),
        )
