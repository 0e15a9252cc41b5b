"""Exceptions raised by the GalaxyData deployer."""

from typing import Sequence


class MissingConfigurationError(ValueError):
    """One or more required environment variables are not set."""

    def __init__(self, missing: Sequence[str]):
        self.missing = list(missing)
        super().__init__(f"Missing required configuration: {', '.join(self.missing)}")


class ArtifactError(ValueError):
    """A compiled contract artifact is absent or malformed."""


class DeploymentError(Exception):
    """A deployment transaction reverted or left the proxy in an unexpected state."""
