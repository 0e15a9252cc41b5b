"""Tests for the command line entry point."""

import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import functools

import pytest

from galaxydata import cli
from galaxydata.client import GalaxyData
from galaxydata.deploy import deploy_galaxydata

PRIVATE_KEY = "0x4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318"
PUBLIC_KEY = "0x2c7536E3605D9C16a7a3D7b1898e529396a65c23"


class StubGalaxyData:
    def __init__(self, network, private_key, public_key):
        self.network = network

    async def deploy_upgradeable(self, owner, init_address):
        return "0xABC"


class FailingGalaxyData(StubGalaxyData):
    async def deploy_upgradeable(self, owner, init_address):
        raise RuntimeError("RPC timeout")


@pytest.fixture
def deploy_env(monkeypatch):
    # Registered so monkeypatch restores them after dotenv overrides
    monkeypatch.setenv("NETWORK", "local")
    monkeypatch.setenv("PRIVATE_KEY", PRIVATE_KEY)
    monkeypatch.setenv("PUBLIC_KEY", PUBLIC_KEY)
    monkeypatch.setenv("ARTIFACTS_DIR", "artifacts")
    monkeypatch.setenv("LOCAL_RPC", "http://127.0.0.1:8545")
    return monkeypatch


def use_client(monkeypatch, client_class):
    monkeypatch.setattr(
        cli,
        "deploy_galaxydata",
        functools.partial(deploy_galaxydata, client_factory=client_class),
    )


def test_wrong_network_exits_cleanly(deploy_env, capsys):
    deploy_env.setenv("NETWORK", "mainnet")
    use_client(deploy_env, StubGalaxyData)

    assert cli.main([]) == 0

    out = capsys.readouterr().out.strip()
    # Only the guard line, no banner
    assert len(out.splitlines()) == 1
    assert out.endswith("wrong network")


def test_successful_deployment(deploy_env, capsys):
    use_client(deploy_env, StubGalaxyData)

    assert cli.main([]) == 0
    assert "local GalaxyData address: 0xABC" in capsys.readouterr().out


def test_failed_deployment_still_exits_zero(deploy_env, capsys):
    use_client(deploy_env, FailingGalaxyData)

    assert cli.main([]) == 0
    assert "RPC timeout" in capsys.readouterr().out


def test_env_file_overrides_environment(deploy_env, tmp_path, capsys):
    env_file = tmp_path / "mainnet.env"
    env_file.write_text("NETWORK=mainnet\n")
    use_client(deploy_env, StubGalaxyData)

    assert cli.main(["--env-file", str(env_file)]) == 0
    assert "wrong network" in capsys.readouterr().out


def test_missing_env_file_warns(deploy_env, tmp_path, capsys):
    use_client(deploy_env, StubGalaxyData)

    assert cli.main(["--env-file", str(tmp_path / "absent.env")]) == 0
    out = capsys.readouterr().out
    assert "No variables loaded" in out
    assert "local GalaxyData address: 0xABC" in out


def test_artifacts_dir_is_exported(deploy_env, tmp_path):
    use_client(deploy_env, StubGalaxyData)

    cli.main(["--artifacts-dir", str(tmp_path)])

    assert os.environ["ARTIFACTS_DIR"] == str(tmp_path)


def test_env_file_sets_rpc_endpoint(deploy_env, tmp_path, capsys):
    endpoints = []

    class RecordingGalaxyData(GalaxyData):
        async def deploy_upgradeable(self, owner, init_address):
            endpoints.append(self.rpc_endpoint)
            return "0xABC"

    env_file = tmp_path / "local.env"
    env_file.write_text("LOCAL_RPC=http://10.9.9.9:9999\n")
    use_client(deploy_env, RecordingGalaxyData)

    assert cli.main(["--env-file", str(env_file)]) == 0

    assert endpoints == ["http://10.9.9.9:9999"]
    assert "http://10.9.9.9:9999" in capsys.readouterr().out
