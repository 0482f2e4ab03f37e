"""Services for probing, classifying, recording and aggregating site health."""
from .prober import ProberService, ProbeOutcome
from .classifier import Tier, classify
from .recorder import RecorderService
from .registry import SiteRegistry, SiteInfo
from .coordinator import PassCoordinator, PassSummary
from .aggregator import UptimeAggregator, AggregateResult
from .scheduler import SchedulerService

__all__ = [
    "ProberService",
    "ProbeOutcome",
    "Tier",
    "classify",
    "RecorderService",
    "SiteRegistry",
    "SiteInfo",
    "PassCoordinator",
    "PassSummary",
    "UptimeAggregator",
    "AggregateResult",
    "SchedulerService",
]
