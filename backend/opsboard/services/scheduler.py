"""Scheduler service - optional in-process trigger for health check passes.

The pipeline never schedules itself; normally an external cron calls
/api/cron/health-check. When SCHEDULER_ENABLED is set the app hosts that
trigger instead. max_instances=1 keeps passes from overlapping.
"""
import logging
from typing import Callable, Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from ..errors import RegistryUnavailableError
from .coordinator import PassCoordinator

logger = logging.getLogger(__name__)


class SchedulerService:
    """Runs a health check pass on a fixed interval."""

    def __init__(
        self,
        coordinator_factory: Callable[[], PassCoordinator],
        interval_minutes: int = 5,
    ):
        self.coordinator_factory = coordinator_factory
        self.interval_minutes = interval_minutes
        self.scheduler: Optional[AsyncIOScheduler] = None
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    def start(self):
        """Start the scheduler."""
        if self._running:
            return

        self.scheduler = AsyncIOScheduler()
        self.scheduler.add_job(
            self.run_pass,
            trigger=IntervalTrigger(minutes=self.interval_minutes),
            id="health_check_pass",
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
        self.scheduler.start()
        self._running = True
        logger.info(f"Scheduler started (interval={self.interval_minutes}m)")

    def stop(self):
        """Stop the scheduler."""
        if self.scheduler and self._running:
            self.scheduler.shutdown(wait=False)
            self._running = False
            logger.info("Scheduler stopped")

    async def run_pass(self):
        """Job body: one pass, with failures logged rather than raised."""
        try:
            summary = await self.coordinator_factory().run_pass()
            logger.info(f"Scheduled pass completed: {summary.checks} checks")
        except RegistryUnavailableError as e:
            logger.error(f"Scheduled pass aborted: {e}")
        except Exception as e:
            logger.error(f"Error running scheduled pass: {e}")
