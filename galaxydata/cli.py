"""Command line entry point for the GalaxyData deployer."""

from __future__ import annotations

import argparse
import asyncio
import os
from typing import List, Optional
from dotenv import load_dotenv

from galaxydata import config, utils
from galaxydata.deploy import deploy_galaxydata


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Deploy GalaxyData behind an upgradeable proxy"
    )
    parser.add_argument(
        "--env-file",
        help="Load NETWORK, PRIVATE_KEY and PUBLIC_KEY from this dotenv file",
    )
    parser.add_argument(
        "--artifacts-dir",
        help="Directory with compiled contract artifacts (default: $ARTIFACTS_DIR or ./artifacts)",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run one deployment.

    Always returns 0: a skipped or failed deployment is reported on the
    console and in the returned result, not through the exit code.
    """
    args = build_parser().parse_args(argv)

    if args.env_file:
        if not load_dotenv(args.env_file, override=True):
            utils.warn(f"No variables loaded from {args.env_file}")
    if args.artifacts_dir:
        os.environ["ARTIFACTS_DIR"] = args.artifacts_dir

    deploy_config = config.load_deploy_config()

    # A skipped run prints nothing but the guard's own line
    if deploy_config.network == config.DEPLOY_NETWORK:
        utils.section_header("Deploy GalaxyData")
        print(f"{utils.bold('Network:')} {deploy_config.network}")
        print(f"{utils.bold('RPC Endpoint:')} {config.get_rpc_endpoint(deploy_config.network)}")
        print()

    asyncio.run(deploy_galaxydata(deploy_config))
    return 0
