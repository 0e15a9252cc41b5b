"""Deploy GalaxyData behind an upgradeable proxy on the local network."""

import traceback
from typing import Callable

from galaxydata import config, utils
from galaxydata.client import GalaxyData
from galaxydata.exceptions import ArtifactError, MissingConfigurationError
from galaxydata.models import (
    DeployConfig,
    DeploymentResult,
    DeploymentStatus,
    FailureReason,
    GalaxyDataClient,
)

ClientFactory = Callable[[str, str, str], GalaxyDataClient]


def classify_failure(exc: BaseException) -> FailureReason:
    """Map an exception raised during deployment to a failure reason."""
    if isinstance(exc, MissingConfigurationError):
        return FailureReason.MISSING_CONFIGURATION
    if isinstance(exc, ArtifactError):
        return FailureReason.ARTIFACT
    # ConnectionError, TimeoutError and aiohttp connector errors subclass OSError
    if isinstance(exc, OSError):
        return FailureReason.CONNECTION
    return FailureReason.DEPLOYMENT


async def deploy_galaxydata(
    deploy_config: DeployConfig,
    client_factory: ClientFactory = GalaxyData,
) -> DeploymentResult:
    """
    Run a single GalaxyData deployment.

    Nothing touches the chain unless the configured network is the
    deployment network. Every error is printed and returned as a failed
    result; none is raised.

    Args:
        deploy_config: Network and deployer keys
        client_factory: Builds the client from (network, private key, public key)

    Returns:
        DeploymentResult describing what happened
    """
    network = deploy_config.network
    if network != config.DEPLOY_NETWORK:
        utils.info("wrong network")
        return DeploymentResult(status=DeploymentStatus.SKIPPED, network=network)

    try:
        deploy_config.validate()
        galaxy = client_factory(network, deploy_config.private_key, deploy_config.public_key)
        address = await galaxy.deploy_upgradeable(
            deploy_config.public_key,
            config.GALAXY_INIT_ADDRESS,
        )
    except Exception as e:
        reason = classify_failure(e)
        utils.error(f"Deployment failed ({reason.value}): {type(e).__name__}: {e}")
        print("".join(traceback.format_exception(type(e), e, e.__traceback__)))
        return DeploymentResult(
            status=DeploymentStatus.FAILED,
            network=network,
            reason=reason,
            error=e,
        )

    utils.success(f"{network} GalaxyData address: {address}")
    return DeploymentResult(status=DeploymentStatus.DEPLOYED, network=network, address=address)
