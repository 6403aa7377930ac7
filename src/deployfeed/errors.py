"""Exception types raised by deployfeed."""

from __future__ import annotations


class DeployFeedError(RuntimeError):
    """Base class for deployfeed failures."""


class ConfigError(DeployFeedError):
    """Raised when top-level run inputs are missing or malformed."""


class ImageLookupError(DeployFeedError):
    """Raised when the deployed image for an environment cannot be resolved."""


class UnknownEnvironmentError(DeployFeedError):
    """Raised when a gate is evaluated for an environment with no policy."""

    def __init__(self, environment: str) -> None:
        super().__init__(f"No promotion policy configured for environment `{environment}`")
        self.environment = environment
