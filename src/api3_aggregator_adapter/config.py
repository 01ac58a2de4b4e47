#!/usr/bin/env python3
"""Configuration management for the Api3 aggregator adapter tooling.

This module provides type-safe configuration dataclasses with validation.
Configuration is loaded from environment variables with sensible defaults
where appropriate.
"""

import logging
import os
from dataclasses import dataclass
from urllib.parse import urlparse

from web3 import Web3

# Get logger for this module
logger = logging.getLogger(__name__)


def _load_proxy_address() -> str:
    proxy_address = os.environ.get("PROXY_ADDRESS", "")
    if not proxy_address:
        raise ValueError("Environment variable PROXY_ADDRESS is not defined")
    return proxy_address


def _checksummed(address: str, name: str, env_var: str) -> str:
    if not address:
        raise ValueError(f"{name} is required ({env_var})")

    if not Web3.is_address(address):
        raise ValueError(f"Invalid {name.lower()}: {address}")

    return Web3.to_checksum_address(address)


@dataclass(frozen=True, slots=True)
class ChainConfig:
    """Configuration for the chain the proxy and adapter live on.

    Attributes:
        rpc_url: HTTP(S) RPC endpoint
        request_timeout: HTTP request timeout in seconds
    """

    rpc_url: str
    request_timeout: int = 30

    def __post_init__(self) -> None:
        """Validate chain configuration."""
        if not self.rpc_url:
            raise ValueError("RPC URL is required (RPC_URL)")

        parsed = urlparse(self.rpc_url)
        if parsed.scheme not in ('http', 'https', 'ws', 'wss'):
            raise ValueError(
                f"Invalid RPC URL scheme: {parsed.scheme}. "
                "Expected http, https, ws, or wss"
            )

        if self.request_timeout <= 0:
            raise ValueError(f"Request timeout must be positive, got {self.request_timeout}")
        if self.request_timeout > 120:
            raise ValueError(f"Request timeout too long (max 120s), got {self.request_timeout}")

    @classmethod
    def from_env(cls) -> "ChainConfig":
        """Load chain configuration from RPC_URL and REQUEST_TIMEOUT."""
        return cls(
            rpc_url=os.environ.get("RPC_URL", "http://127.0.0.1:8545"),
            request_timeout=int(os.environ.get("REQUEST_TIMEOUT", "30"))
        )


@dataclass(frozen=True, slots=True)
class ReaderConfig:
    """Configuration for reading a proxy through the adapter.

    Attributes:
        proxy_address: Checksummed address of the Api3 proxy
        chain: Chain connection settings
    """

    proxy_address: str
    chain: ChainConfig

    def __post_init__(self) -> None:
        """Validate and checksum the proxy address."""
        checksummed = _checksummed(self.proxy_address, "Proxy address", "PROXY_ADDRESS")
        if checksummed != self.proxy_address:
            # Use object.__setattr__ since dataclass is frozen
            object.__setattr__(self, 'proxy_address', checksummed)

    @classmethod
    def from_env(cls) -> "ReaderConfig":
        """Load reader configuration from environment variables.

        Raises:
            ValueError: If required environment variables are missing or invalid
        """
        return cls(proxy_address=_load_proxy_address(), chain=ChainConfig.from_env())


@dataclass(frozen=True, slots=True)
class DeployConfig:
    """Configuration for deterministic adapter deployments.

    Attributes:
        proxy_address: Checksummed address of the Api3 proxy to wrap
        chain: Chain connection settings
        private_key: Key of the account sending the deployment transaction
        artifact_path: Compiled adapter artifact (defaults to the contracts folder)
        receipt_timeout: Seconds to wait for the deployment receipt
    """

    proxy_address: str
    chain: ChainConfig
    private_key: str | None = None
    artifact_path: str | None = None
    receipt_timeout: int = 120

    def __post_init__(self) -> None:
        """Validate deployment configuration."""
        checksummed = _checksummed(self.proxy_address, "Proxy address", "PROXY_ADDRESS")
        if checksummed != self.proxy_address:
            object.__setattr__(self, 'proxy_address', checksummed)

        if self.private_key:
            # Should be 64 hex chars, optionally with 0x prefix
            key = self.private_key.removeprefix('0x')

            if len(key) != 64:
                raise ValueError(
                    f"Invalid private key length. Expected 64 hex characters, got {len(key)}"
                )

            try:
                int(key, 16)
            except ValueError:
                raise ValueError(
                    "Invalid private key format. Must be hexadecimal"
                ) from None

        if self.receipt_timeout <= 0:
            raise ValueError(f"Receipt timeout must be positive, got {self.receipt_timeout}")

    @classmethod
    def from_env(cls) -> "DeployConfig":
        """Load deployment configuration from environment variables.

        Returns:
            DeployConfig instance with loaded values

        Raises:
            ValueError: If required environment variables are missing or invalid
        """
        return cls(
            proxy_address=_load_proxy_address(),
            chain=ChainConfig.from_env(),
            private_key=os.environ.get("DEPLOYER_PRIVATE_KEY") or None,
            artifact_path=os.environ.get("ARTIFACT_PATH") or None,
            receipt_timeout=int(os.environ.get("RECEIPT_TIMEOUT", "120"))
        )

    def log_config(self) -> None:
        """Log the configuration in a readable format for debugging."""
        logger.info("=" * 60)
        logger.info("Deterministic Deployment Configuration")
        logger.info("=" * 60)
        logger.info(f"  Proxy: {self.proxy_address}")
        logger.info(f"  RPC URL: {self.chain.rpc_url}")
        logger.info(f"  Request Timeout: {self.chain.request_timeout} seconds")
        logger.info(f"  Receipt Timeout: {self.receipt_timeout} seconds")
        logger.info(f"  Artifact: {self.artifact_path or '[DEFAULT]'}")
        logger.info(f"  Deployer Key: {'[CONFIGURED]' if self.private_key else '[NODE ACCOUNT]'}")
        logger.info("=" * 60)
