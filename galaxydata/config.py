#!/usr/bin/env python3
"""
Configuration module for the GalaxyData deployer.
Stores the deployment target, RPC endpoints and the fixed initializer address.
Supports environment variables with fallback to defaults.
"""

import os
from pathlib import Path
from typing import Dict, Mapping, Optional, Tuple
from dotenv import load_dotenv

from galaxydata.models import DeployConfig

# Load environment variables from .env file if it exists
load_dotenv()


def get_env(key: str, default: str) -> str:
    """Get environment variable with fallback to default."""
    return os.getenv(key, default)


# The only network deployments are allowed to run against
DEPLOY_NETWORK = "local"

# Passed as the second initializer argument on every deployment
GALAXY_INIT_ADDRESS = "0x46C02B9113DcA70a8C2e878Df0B24Dc895836b75"

REQUIRED_ENV_VARS = ("NETWORK", "PRIVATE_KEY", "PUBLIC_KEY")


# RPC endpoints: network -> (environment variable, default URL)
# The variable is read on every lookup so a later --env-file still applies.
RPC_ENDPOINTS: Dict[str, Tuple[str, str]] = {
    "local": ("LOCAL_RPC", "http://127.0.0.1:8545"),
}


def get_rpc_endpoint(network: str) -> Optional[str]:
    """
    Get RPC endpoint for a given network.

    Args:
        network: Network name (e.g., "local")

    Returns:
        RPC endpoint URL as string, or None if not found
    """
    endpoint = RPC_ENDPOINTS.get(network)
    if endpoint is None:
        return None
    env_key, default = endpoint
    return get_env(env_key, default)


def get_artifacts_dir() -> Path:
    """Directory holding compiled contract artifacts (Hardhat layout)."""
    return Path(get_env("ARTIFACTS_DIR", "artifacts"))


def load_deploy_config(environ: Optional[Mapping[str, str]] = None) -> DeployConfig:
    """
    Read the deployment configuration once from the environment.

    Values are not validated here: the network guard runs first and
    required fields are checked only when a deployment will happen.

    Args:
        environ: Mapping to read from (defaults to os.environ)

    Returns:
        DeployConfig with unset or empty values as None
    """
    if environ is None:
        environ = os.environ

    network, private_key, public_key = (
        environ.get(key) or None for key in REQUIRED_ENV_VARS
    )
    return DeployConfig(
        network=network,
        private_key=private_key,
        public_key=public_key,
    )
