"""Data models for the GalaxyData deployer."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Protocol

from galaxydata.exceptions import MissingConfigurationError


@dataclass(frozen=True)
class DeployConfig:
    """Deployment configuration read from the environment."""
    network: Optional[str]
    private_key: Optional[str] = field(default=None, repr=False)
    public_key: Optional[str] = None

    def missing(self) -> List[str]:
        """Names of the environment variables that are not set."""
        values = {
            "NETWORK": self.network,
            "PRIVATE_KEY": self.private_key,
            "PUBLIC_KEY": self.public_key,
        }
        return [name for name, value in values.items() if not value]

    def validate(self) -> None:
        missing = self.missing()
        if missing:
            raise MissingConfigurationError(missing)


class DeploymentStatus(Enum):
    DEPLOYED = "deployed"
    SKIPPED = "skipped"
    FAILED = "failed"


class FailureReason(Enum):
    MISSING_CONFIGURATION = "missing_configuration"
    CONNECTION = "connection"
    ARTIFACT = "artifact"
    DEPLOYMENT = "deployment"


@dataclass
class DeploymentResult:
    """Outcome of a single deployment run."""
    status: DeploymentStatus
    network: Optional[str]
    address: Optional[str] = None
    reason: Optional[FailureReason] = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.status is DeploymentStatus.DEPLOYED


@dataclass
class ContractArtifact:
    """Compiled contract: ABI plus creation bytecode."""
    name: str
    abi: List[Dict[str, Any]]
    bytecode: str


class GalaxyDataClient(Protocol):
    """Anything that can deploy GalaxyData behind an upgradeable proxy."""

    async def deploy_upgradeable(self, owner: str, init_address: str) -> str: ...
