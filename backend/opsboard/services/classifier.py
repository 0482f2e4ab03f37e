"""Classifier - maps a raw probe outcome to a severity tier.

Rules, first match wins:
- not reached = critical
- 5xx = critical
- 2xx/3xx slower than the degraded threshold = degraded
- 2xx/3xx = healthy
- anything else (1xx, 4xx) = warning
"""
from enum import Enum

from .prober import ProbeOutcome


# Latency above this (strictly) marks a working site as degraded
DEGRADED_LATENCY_THRESHOLD_MS = 3000

# Status codes at or above this are server errors
SERVER_ERROR_STATUS = 500

# Success/redirect range, inclusive
SUCCESS_STATUS_MIN = 200
SUCCESS_STATUS_MAX = 399


class Tier(str, Enum):
    """Severity tier of a single observation."""
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    WARNING = "warning"
    CRITICAL = "critical"


# Tiers that count as "up" for availability
AVAILABLE_TIERS = frozenset({Tier.HEALTHY, Tier.DEGRADED})


def is_success_status(status_code: int) -> bool:
    return SUCCESS_STATUS_MIN <= status_code <= SUCCESS_STATUS_MAX


def classify(
    outcome: ProbeOutcome,
    degraded_threshold_ms: int = DEGRADED_LATENCY_THRESHOLD_MS,
) -> Tier:
    """Classify a probe outcome. Pure and total."""
    if not outcome.reached:
        return Tier.CRITICAL

    if outcome.status_code >= SERVER_ERROR_STATUS:
        return Tier.CRITICAL

    if is_success_status(outcome.status_code):
        if outcome.elapsed_ms > degraded_threshold_ms:
            return Tier.DEGRADED
        return Tier.HEALTHY

    return Tier.WARNING
