#!/usr/bin/env python3
"""Deterministic deployment of adapters through the CREATE2 factory.

Deployment is idempotent: if the predicted address already has code, no
transaction is sent.
"""

import asyncio
import logging
from typing import TYPE_CHECKING

from hexbytes import HexBytes
from web3 import Web3
from web3.types import TxParams, TxReceipt

from .abis import AGGREGATOR_V2V3_ABI
from .deploy import (
    CREATE2_FACTORY_ADDRESS,
    get_deployment_calldata,
    get_deterministic_deployment_address,
)
from .errors import DeploymentFailedError, FactoryNotDeployedError
from .models import DeploymentResult

if TYPE_CHECKING:
    from .utils.contract_utility import ContractUtility

logger = logging.getLogger(__name__)

NETWORK_NAMES: dict[int, str] = {
    1: "ethereum",
    10: "optimism",
    56: "bsc",
    100: "gnosis",
    137: "polygon",
    8453: "base",
    31337: "hardhat",
    42161: "arbitrum",
    43114: "avalanche",
    11155111: "ethereum-sepolia-testnet",
}


class DeterministicDeployer:
    """Deploys Api3PartialAggregatorV2V3Interface instances at their CREATE2 addresses."""

    def __init__(
        self,
        contract_util: "ContractUtility",
        bytecode: bytes,
        receipt_timeout: int = 120
    ) -> None:
        """
        Initialize the DeterministicDeployer.

        Args:
            contract_util: Utility holding the (signing) web3 connection
            bytecode: Creation bytecode of the adapter contract
            receipt_timeout: Seconds to wait for a deployment receipt
        """
        self.contract_util: ContractUtility = contract_util
        self.bytecode: HexBytes = HexBytes(bytecode)
        self.receipt_timeout: int = receipt_timeout
        self._locks: dict[str, asyncio.Lock] = {}

    @property
    def w3(self) -> Web3:
        return self.contract_util.w3

    def network_name(self) -> str:
        """Name of the connected network, falling back to its chain ID."""
        chain_id = self.w3.eth.chain_id
        return NETWORK_NAMES.get(chain_id, f"chain-{chain_id}")

    def is_deployed(self, address: str) -> bool:
        """Whether `address` has non-empty code."""
        return len(self.w3.eth.get_code(Web3.to_checksum_address(address))) > 0

    def _lock_for(self, address: str) -> asyncio.Lock:
        return self._locks.setdefault(address, asyncio.Lock())

    def _sender(self) -> str:
        if sender := self.w3.eth.default_account:
            return sender
        # No local key: let the node sign with its first unlocked account
        return self.w3.eth.accounts[0]

    def _verify_deployment(self, proxy_address: str, adapter_address: str) -> None:
        if not self.is_deployed(adapter_address):
            raise DeploymentFailedError(
                f"No code at {adapter_address} after deployment of adapter for {proxy_address}"
            )

        adapter = self.w3.eth.contract(address=adapter_address, abi=AGGREGATOR_V2V3_ABI)
        if (wrapped := adapter.functions.api3Proxy().call()) != proxy_address:
            raise DeploymentFailedError(
                f"Contract at {adapter_address} wraps {wrapped}, expected {proxy_address}"
            )

    async def deploy(self, proxy_address: str) -> DeploymentResult:
        """
        Deploy the adapter for `proxy_address` unless it is already deployed.

        Args:
            proxy_address: Api3 proxy the adapter wraps

        Returns:
            DeploymentResult describing what happened

        Raises:
            FactoryNotDeployedError: If the CREATE2 factory has no code on this chain
            DeploymentFailedError: If the transaction reverted or left no adapter behind
        """
        proxy_address = Web3.to_checksum_address(proxy_address)
        adapter_address = get_deterministic_deployment_address(proxy_address, self.bytecode)
        # Blocking web3 calls run in worker threads so that other callers wait on the lock
        network = await asyncio.to_thread(self.network_name)

        async with self._lock_for(adapter_address):
            if not await asyncio.to_thread(self.is_deployed, CREATE2_FACTORY_ADDRESS):
                raise FactoryNotDeployedError(CREATE2_FACTORY_ADDRESS, network)

            if await asyncio.to_thread(self.is_deployed, adapter_address):
                result = DeploymentResult(
                    proxy_address=proxy_address,
                    adapter_address=adapter_address,
                    network=network,
                    deployed=False
                )
                logger.info(str(result))
                return result

            tx_params: TxParams = {
                'from': await asyncio.to_thread(self._sender),
                'to': CREATE2_FACTORY_ADDRESS,
                'data': Web3.to_hex(get_deployment_calldata(proxy_address, self.bytecode)),
            }
            logger.info(f"Deploying adapter for {proxy_address} to {adapter_address} on {network}")

            tx_hash: HexBytes = await asyncio.to_thread(self.w3.eth.send_transaction, tx_params)
            logger.info(f"Transaction submitted: {Web3.to_hex(tx_hash)}")

            receipt: TxReceipt = await asyncio.to_thread(
                self.w3.eth.wait_for_transaction_receipt, tx_hash, timeout=self.receipt_timeout
            )
            if (status := receipt.get('status', 0)) != 1:
                logger.error(f"✗ Deployment transaction failed with status={status}")
                raise DeploymentFailedError(
                    f"Deployment transaction {Web3.to_hex(tx_hash)} failed with status={status}"
                )

            # A successful receipt alone does not prove the adapter exists
            await asyncio.to_thread(self._verify_deployment, proxy_address, adapter_address)

            result = DeploymentResult(
                proxy_address=proxy_address,
                adapter_address=adapter_address,
                network=network,
                deployed=True,
                transaction_hash=Web3.to_hex(tx_hash)
            )
            logger.info(f"✓ {result}")
            return result
