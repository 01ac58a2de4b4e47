#!/usr/bin/env python3
"""Deterministic deployment address resolution.

The adapter is deployed through the deterministic deployment proxy
(https://github.com/Arachnid/deterministic-deployment-proxy) with a zero
salt, so its address only depends on the wrapped Api3 proxy address and can
be computed without touching the network.
"""

import logging
import os
from pathlib import Path

from eth_abi import encode
from hexbytes import HexBytes
from web3 import Web3

from .utils.contract_utility import ContractUtility

logger = logging.getLogger(__name__)

CREATE2_FACTORY_ADDRESS: str = "0x4e59b44847b379578588920cA78FbF26c0B4956C"
SALT: HexBytes = HexBytes(b"\x00" * 32)

ADAPTER_CONTRACT_NAME: str = "Api3PartialAggregatorV2V3Interface"


def load_adapter_bytecode(artifact_path: str | Path | None = None) -> HexBytes:
    """Load the adapter's creation bytecode from its compiled artifact.

    The artifact is looked up at `artifact_path`, then at ARTIFACT_PATH, then
    in the package's contracts folder.

    Raises:
        ArtifactNotFoundError: If no artifact exists at the resolved location
    """
    artifact_path = artifact_path or os.environ.get("ARTIFACT_PATH") or None
    return ContractUtility.get_contract_bytecode(ADAPTER_CONTRACT_NAME, artifact_path)


def get_create2_address(deployer: str, salt: bytes, init_code_hash: bytes) -> str:
    """Calculate the CREATE2 address of a contract (EIP-1014).

    Args:
        deployer: Address of the contract executing CREATE2
        salt: 32-byte salt
        init_code_hash: keccak256 of the init code

    Returns:
        Checksummed contract address
    """
    salt = HexBytes(salt)
    if len(salt) != 32:
        raise ValueError(f"Salt must be 32 bytes, got {len(salt)}")

    digest = Web3.keccak(
        HexBytes("0xff") + HexBytes(deployer) + salt + HexBytes(init_code_hash)
    )
    return Web3.to_checksum_address(digest[12:])


def get_init_code(proxy_address: str, bytecode: bytes | None = None) -> HexBytes:
    """Creation bytecode of the adapter followed by its ABI-encoded constructor argument.

    Args:
        proxy_address: Api3 proxy the adapter will wrap
        bytecode: Adapter creation bytecode (loaded from the artifact if omitted)

    Raises:
        ValueError: If proxy_address is not a valid address
    """
    if not Web3.is_address(proxy_address):
        raise ValueError(f"Invalid proxy address: {proxy_address}")

    if bytecode is None:
        bytecode = load_adapter_bytecode()

    encoded_args = encode(["address"], [Web3.to_checksum_address(proxy_address)])
    return HexBytes(HexBytes(bytecode) + encoded_args)


def get_deployment_calldata(proxy_address: str, bytecode: bytes | None = None) -> HexBytes:
    """Payload of the transaction sent to the factory: salt followed by init code."""
    return HexBytes(SALT + get_init_code(proxy_address, bytecode))


def get_deterministic_deployment_address(proxy_address: str, bytecode: bytes | None = None) -> str:
    """Address the adapter for `proxy_address` is (or will be) deployed at."""
    init_code = get_init_code(proxy_address, bytecode)
    address = get_create2_address(CREATE2_FACTORY_ADDRESS, SALT, Web3.keccak(init_code))
    logger.debug(f"Deterministic deployment address for {proxy_address}: {address}")
    return address
