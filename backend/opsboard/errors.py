"""Exceptions raised by the health check pipeline."""


class OpsboardError(Exception):
    """Base class for pipeline errors."""


class RegistryUnavailableError(OpsboardError):
    """The active site list could not be read. Fatal to a pass."""
