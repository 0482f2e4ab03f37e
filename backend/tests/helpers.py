"""Test doubles for the pass pipeline."""
from typing import Optional

from opsboard.errors import RegistryUnavailableError
from opsboard.services.prober import ProberService, ProbeOutcome
from opsboard.services.registry import SiteRegistry


class StubProber(ProberService):
    """Prober returning canned outcomes per domain instead of touching the network."""

    def __init__(self, outcomes: dict, errors: Optional[dict] = None):
        super().__init__()
        self.outcomes = outcomes
        self.errors = errors or {}
        self.calls = []

    async def probe(self, client, domain, timeout_ms=None):
        self.calls.append(domain)
        if domain in self.errors:
            raise self.errors[domain]
        return self.outcomes.get(domain, ProbeOutcome(reached=True, status_code=200, elapsed_ms=100))


class FailingRegistry(SiteRegistry):
    """Registry whose backing store is unreachable."""

    async def list_active_sites(self):
        raise RegistryUnavailableError("Failed to fetch sites: connection refused")
