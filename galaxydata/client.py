"""GalaxyData contract client: upgradeable deployment over web3."""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Union
from eth_account import Account
from eth_keys import keys
from web3 import AsyncHTTPProvider, AsyncWeb3, Web3

from galaxydata import config, utils
from galaxydata.exceptions import ArtifactError, DeploymentError
from galaxydata.models import ContractArtifact

EIP1967_IMPLEMENTATION_SLOT = int(
    "0x360894a13ba1a3210667c828492db98dca3e2076cc3735a920a3ca505d382bbc", 16
)

LOGIC_CONTRACT = "GalaxyData"
PROXY_CONTRACT = "ERC1967Proxy"
INITIALIZER = "initialize"

RECEIPT_TIMEOUT = 120


def derive_address_from_private_key(privkey_str: str) -> Dict[str, str]:
    """Derive address from EVM private key."""
    # Remove 0x prefix if present
    if privkey_str.startswith("0x"):
        privkey_str = privkey_str[2:]

    try:
        private_key_bytes = bytes.fromhex(privkey_str)
    except ValueError:
        raise ValueError("Private key must be hex encoded.")

    if len(private_key_bytes) != 32:
        raise ValueError("Private key must be 32 bytes (64 hex characters).")

    private_key_obj = keys.PrivateKey(private_key_bytes)
    public_key_obj = private_key_obj.public_key
    account = Account.from_key(private_key_bytes)

    return {
        "private_key": privkey_str,
        "public_key": public_key_obj.to_hex(),
        "address": account.address,
    }


def load_artifact(artifacts_dir: Union[str, Path], name: str) -> ContractArtifact:
    """
    Load a compiled contract artifact by contract name.

    Hardhat writes artifacts to artifacts/contracts/<File>.sol/<Name>.json,
    so the whole tree is searched. Debug files (<Name>.dbg.json) are skipped
    by the exact filename match.

    Args:
        artifacts_dir: Root directory of compiled artifacts
        name: Contract name

    Returns:
        ContractArtifact with ABI and creation bytecode

    Raises:
        ArtifactError: If the artifact is missing, unreadable or incomplete
    """
    root = Path(artifacts_dir)
    candidates = sorted(root.rglob(f"{name}.json")) if root.is_dir() else []
    if not candidates:
        raise ArtifactError(f"Artifact for {name} not found under {root}")

    filepath = candidates[0]
    try:
        with open(filepath, "r") as file:
            data = json.load(file)
    except (OSError, json.JSONDecodeError) as e:
        raise ArtifactError(f"Failed to read artifact {filepath}: {e}")

    abi = data.get("abi")
    bytecode = data.get("bytecode")
    # solc standard JSON nests the bytecode object
    if isinstance(bytecode, dict):
        bytecode = bytecode.get("object")

    if not isinstance(abi, list):
        raise ArtifactError(f"Artifact {filepath} has no ABI")
    if not bytecode or bytecode in ("0x", "0x0"):
        raise ArtifactError(f"Artifact {filepath} has no bytecode (abstract contract or interface?)")

    if not bytecode.startswith("0x"):
        bytecode = "0x" + bytecode

    return ContractArtifact(name=data.get("contractName", name), abi=abi, bytecode=bytecode)


class GalaxyData:
    """GalaxyData contract client bound to one network and one signing key."""

    def __init__(
        self,
        network: str,
        private_key: str,
        public_key: str,
        artifacts_dir: Optional[Union[str, Path]] = None,
    ):
        """
        Initialize the client. No connection is made until a call needs one.

        Args:
            network: Network name (e.g., "local")
            private_key: Hex private key of the deployer, with or without 0x
            public_key: Deployer address; must match the private key
            artifacts_dir: Compiled artifacts root (defaults to config)
        """
        self.network = network.lower()

        rpc_endpoint = config.get_rpc_endpoint(self.network)
        if not rpc_endpoint:
            raise ValueError(f"RPC endpoint not found for {self.network}")
        self.rpc_endpoint = rpc_endpoint

        key_info = derive_address_from_private_key(private_key)
        self.address = Web3.to_checksum_address(public_key)
        if key_info["address"] != self.address:
            raise ValueError(
                f"Public key {self.address} does not match the address "
                f"derived from the private key ({key_info['address']})."
            )
        self._private_key_bytes = bytes.fromhex(key_info["private_key"])

        self.artifacts_dir = Path(artifacts_dir) if artifacts_dir else config.get_artifacts_dir()
        self.w3 = AsyncWeb3(AsyncHTTPProvider(self.rpc_endpoint))

    async def _ensure_connected(self) -> None:
        """Raise if the RPC endpoint is unreachable."""
        if not await self.w3.is_connected():
            raise ConnectionError(f"Failed to connect to RPC endpoint: {self.rpc_endpoint}")

    async def deploy_upgradeable(self, owner: str, init_address: str) -> str:
        """
        Deploy GalaxyData behind an ERC-1967 proxy.

        The logic contract is deployed first, then the proxy pointing at it
        with initialize(owner, init_address) as construction calldata.

        Args:
            owner: Address that will own the proxied contract
            init_address: Second initializer argument, forwarded as-is

        Returns:
            Checksummed proxy address

        Raises:
            ConnectionError: If unable to connect to RPC endpoint
            ArtifactError: If compiled artifacts are missing
            DeploymentError: If a deployment reverts or the proxy is inconsistent
        """
        await self._ensure_connected()

        logic = load_artifact(self.artifacts_dir, LOGIC_CONTRACT)
        proxy = load_artifact(self.artifacts_dir, PROXY_CONTRACT)

        owner_address = Web3.to_checksum_address(owner)
        init_checksum = Web3.to_checksum_address(init_address)

        utils.info(f"Deploying {logic.name} implementation from {self.address}")
        logic_address = await self._deploy_contract(logic, [])
        utils.info(f"  Implementation: {logic_address}")

        init_data = self.w3.eth.contract(abi=logic.abi).encode_abi(
            INITIALIZER, args=[owner_address, init_checksum]
        )

        utils.info(f"Deploying {proxy.name}")
        proxy_address = await self._deploy_contract(proxy, [logic_address, init_data])

        implementation = await self.implementation_address(proxy_address)
        if implementation != logic_address:
            raise DeploymentError(
                f"Proxy {proxy_address} points at {implementation}, expected {logic_address}"
            )

        return proxy_address

    async def implementation_address(self, proxy_address: str) -> Optional[str]:
        """Resolve the implementation (logic) contract behind an ERC-1967 proxy."""
        slot_value = await self.w3.eth.get_storage_at(
            Web3.to_checksum_address(proxy_address),
            EIP1967_IMPLEMENTATION_SLOT,
        )

        if slot_value and any(slot_value[-20:]):
            implementation_hex = "0x" + slot_value[-20:].hex()
            return Web3.to_checksum_address(implementation_hex)
        return None

    async def _deploy_contract(self, artifact: ContractArtifact, args: List[Any]) -> str:
        """Build, sign and send a contract creation transaction; return the new address."""
        factory = self.w3.eth.contract(abi=artifact.abi, bytecode=artifact.bytecode)
        constructor = factory.constructor(*args)

        try:
            gas_estimate = await constructor.estimate_gas({"from": self.address})
            chain_id = await self.w3.eth.chain_id

            tx_params = {
                "from": self.address,
                "nonce": await self.w3.eth.get_transaction_count(self.address),
                "gas": int(gas_estimate * 1.2),
                "chainId": chain_id,
                "gasPrice": await self.w3.eth.gas_price,
            }
            transaction = await constructor.build_transaction(tx_params)
        except Exception as e:
            raise DeploymentError(f"Failed to build {artifact.name} deployment: {e}") from e

        signed_txn = self.w3.eth.account.sign_transaction(transaction, self._private_key_bytes)
        tx_hash = await self.w3.eth.send_raw_transaction(signed_txn.raw_transaction)
        utils.info(f"  Transaction Hash: {Web3.to_hex(tx_hash)}")

        receipt = await self.w3.eth.wait_for_transaction_receipt(tx_hash, timeout=RECEIPT_TIMEOUT)
        if receipt["status"] != 1:
            raise DeploymentError(f"{artifact.name} deployment reverted in transaction {Web3.to_hex(tx_hash)}")

        return Web3.to_checksum_address(receipt["contractAddress"])
