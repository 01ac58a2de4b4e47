#!/usr/bin/env python3
"""Command line entry point for the Api3 aggregator adapter tooling.

Commands:
    print-address  Print the deterministic adapter address for PROXY_ADDRESS
    deploy         Deploy the adapter for PROXY_ADDRESS unless already deployed
    read           Print the legacy round data served for PROXY_ADDRESS
"""

import argparse
import asyncio
import json
import logging
import os
import sys

from web3 import Web3

from .aggregator_adapter import Api3AggregatorAdapter
from .config import DeployConfig, ReaderConfig
from .deploy import get_deterministic_deployment_address, load_adapter_bytecode
from .deployer import DeterministicDeployer
from .utils.contract_utility import ContractUtility

logger = logging.getLogger(__name__)


def setup_logging(level: str = "INFO") -> None:
    """Configure logging for the application.

    Args:
        level: Logging level as string (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    log_level: int = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        stream=sys.stdout
    )


def build_parser() -> argparse.ArgumentParser:
    parser: argparse.ArgumentParser = argparse.ArgumentParser(
        description="Api3 proxy to AggregatorV2V3Interface adapter tooling",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""Environment Variables:
  PROXY_ADDRESS         - Api3 proxy the adapter wraps (required)
  RPC_URL               - RPC endpoint (default: http://127.0.0.1:8545)
  REQUEST_TIMEOUT       - HTTP request timeout (default: 30)
  DEPLOYER_PRIVATE_KEY  - Key of the deploying account (default: node account)
  ARTIFACT_PATH         - Compiled Api3PartialAggregatorV2V3Interface artifact
  RECEIPT_TIMEOUT       - Seconds to wait for the deployment receipt (default: 120)
  LOG_LEVEL             - Logging level (can be overridden with --log-level)
        """
    )
    parser.add_argument(
        "--log-level",
        default=os.environ.get("LOG_LEVEL", "INFO"),
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Set the logging level (default: INFO)"
    )
    parser.add_argument(
        "command",
        choices=["print-address", "deploy", "read"],
        help="Action to perform for PROXY_ADDRESS"
    )
    return parser


def print_address() -> None:
    proxy_address = os.environ.get("PROXY_ADDRESS")
    if not proxy_address:
        raise ValueError("Environment variable PROXY_ADDRESS is not defined")

    if not Web3.is_address(proxy_address):
        raise ValueError(f"Invalid proxy address: {proxy_address}")

    bytecode = load_adapter_bytecode()
    adapter_address = get_deterministic_deployment_address(proxy_address, bytecode)
    print(
        f"Api3PartialAggregatorV2V3Interface for {proxy_address} "
        f"is expected to be deployed at {adapter_address}"
    )


async def deploy() -> None:
    config: DeployConfig = DeployConfig.from_env()
    config.log_config()

    contract_util = ContractUtility(
        config.chain.rpc_url,
        config.private_key or "",
        request_timeout=config.chain.request_timeout
    )
    deployer = DeterministicDeployer(
        contract_util=contract_util,
        bytecode=load_adapter_bytecode(config.artifact_path),
        receipt_timeout=config.receipt_timeout
    )
    result = await deployer.deploy(config.proxy_address)
    print(result)


def read() -> None:
    config: ReaderConfig = ReaderConfig.from_env()
    contract_util = ContractUtility(config.chain.rpc_url, request_timeout=config.chain.request_timeout)
    adapter = Api3AggregatorAdapter(config.proxy_address, contract_util.w3)
    print(json.dumps(adapter.to_dict(), indent=2))


async def main(argv: list[str] | None = None) -> int:
    """Run one command and return the process exit status.

    Any error is logged and turned into exit status 1.
    """
    args: argparse.Namespace = build_parser().parse_args(argv)
    setup_logging(args.log_level)

    try:
        match args.command:
            case "print-address":
                print_address()
            case "deploy":
                await deploy()
            case "read":
                read()
    except Exception as e:
        logger.error(f"{type(e).__name__}: {e}", exc_info=logger.isEnabledFor(logging.DEBUG))
        return 1

    return 0


def run() -> None:
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
