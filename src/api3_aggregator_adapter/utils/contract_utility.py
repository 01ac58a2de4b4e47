import json
from pathlib import Path
from typing import Any

from eth_account import Account
from eth_account.signers.local import LocalAccount
from hexbytes import HexBytes
from web3 import Web3
from web3.middleware import SignAndSendRawMiddlewareBuilder

from ..errors import ArtifactNotFoundError

ARTIFACTS_DIR: Path = Path(__file__).resolve().parent.parent / "contracts"


class ContractUtility:
    """
    Utility for the web3 connection and compiled contract artifacts.

    Can be used in two modes:
    1. Signing mode: Initialize with RPC URL and secret for sending deployment transactions
    2. Read-only mode: Initialize with RPC URL only for adapter reads and address checks
    """

    def __init__(self, rpc_url: str, secret: str = "", request_timeout: int = 30) -> None:
        """
        Initialize the ContractUtility.

        Args:
            rpc_url: RPC URL for the network (required)
            secret: Private key for signing transactions (optional - if not provided, read-only mode)
            request_timeout: HTTP request timeout in seconds
        """
        if not rpc_url:
            raise ValueError("RPC URL is required")

        self.rpc_url = rpc_url

        self.w3 = Web3(Web3.HTTPProvider(
            self.rpc_url,
            request_kwargs={'timeout': request_timeout}
        ))

        if secret:
            self._add_signing_middleware(secret)

    def _add_signing_middleware(self, secret: str) -> None:
        """
        Add signing middleware to the existing Web3 instance.

        Args:
            secret: Private key for signing transactions
        """
        if not secret:
            raise ValueError("Private key is required for signing transactions")

        account: LocalAccount = Account.from_key(secret)
        self.w3.middleware_onion.add(SignAndSendRawMiddlewareBuilder.build(account))
        self.w3.eth.default_account = account.address

    @staticmethod
    def get_artifact_path(contract_name: str) -> Path:
        """Default location of a compiled contract artifact, shipped as package data."""
        return ARTIFACTS_DIR / f"{contract_name}.json"

    @staticmethod
    def get_contract_artifact(
        contract_name: str,
        artifact_path: str | Path | None = None
    ) -> dict[str, Any]:
        """Loads the Hardhat artifact of the given contract.

        Args:
            contract_name: Name of the contract (without .json extension)
            artifact_path: Explicit artifact file, overriding the contracts folder

        Returns:
            Artifact dictionary with at least "abi" and "bytecode" keys

        Raises:
            ArtifactNotFoundError: If the artifact file doesn't exist
            json.JSONDecodeError: If the artifact file is invalid JSON
        """
        path: Path = Path(artifact_path) if artifact_path else ContractUtility.get_artifact_path(contract_name)

        try:
            with path.open() as file:
                artifact: dict[str, Any] = json.load(file)
        except FileNotFoundError as e:
            raise ArtifactNotFoundError(contract_name, str(path)) from e

        return artifact

    @staticmethod
    def get_contract_bytecode(
        contract_name: str,
        artifact_path: str | Path | None = None
    ) -> HexBytes:
        """Fetches the creation bytecode of the given contract from its artifact.

        Raises:
            ValueError: If the artifact carries no bytecode (e.g. an interface)
        """
        bytecode: str = ContractUtility.get_contract_artifact(contract_name, artifact_path).get("bytecode", "")
        if not bytecode or bytecode == "0x":
            raise ValueError(f"Artifact of {contract_name} has no creation bytecode")
        return HexBytes(bytecode)
