#!/usr/bin/env python3
"""Legacy aggregator interface over an Api3 proxy.

Api3 proxies only expose `read()`, returning the latest value and timestamp.
This module answers the round-based queries of the legacy
AggregatorV2V3Interface with that reading, approximating round IDs with the
current block number. Historical rounds are not available: any round ID
other than the current block number is rejected.
"""

import logging
from typing import Any

from web3 import Web3
from web3.contract import Contract
from web3.types import BlockIdentifier

from .abis import API3_PROXY_ABI
from .errors import (
    BlockNumberNotCastableError,
    ProxyAddressIsZeroError,
    RoundIdIsNotCurrentError,
)
from .models import FeedReading, RoundData

logger = logging.getLogger(__name__)

ZERO_ADDRESS: str = "0x0000000000000000000000000000000000000000"
UINT80_MAX: int = 2**80 - 1


class Api3AggregatorAdapter:
    """Read-only AggregatorV2V3Interface view of a single Api3 proxy.

    The proxy address is fixed at construction. Every query reads the proxy
    again; nothing is cached. Queries that take a round ID validate it
    against the current block number and then read the proxy at that same
    block, so the answer always belongs to the round that was checked.
    """

    DECIMALS: int = 18
    DESCRIPTION: str = ""
    VERSION: int = 4913

    __slots__ = ("_api3_proxy", "_w3", "_proxy")

    def __init__(self, api3_proxy: str, w3: Web3) -> None:
        """
        Initialize the adapter.

        Args:
            api3_proxy: Address of the Api3 proxy to wrap
            w3: Web3 instance connected to the proxy's chain

        Raises:
            ProxyAddressIsZeroError: If api3_proxy is the zero address
            ValueError: If api3_proxy is not a valid address
        """
        if not Web3.is_address(api3_proxy):
            raise ValueError(f"Invalid Api3 proxy address: {api3_proxy}")

        checksummed = Web3.to_checksum_address(api3_proxy)
        if checksummed == ZERO_ADDRESS:
            raise ProxyAddressIsZeroError()

        self._api3_proxy: str = checksummed
        self._w3: Web3 = w3
        self._proxy: Contract = w3.eth.contract(address=checksummed, abi=API3_PROXY_ABI)

    @property
    def api3_proxy(self) -> str:
        """Address of the wrapped Api3 proxy."""
        return self._api3_proxy

    def __repr__(self) -> str:
        return f"Api3AggregatorAdapter(api3_proxy={self._api3_proxy})"

    def _read(self, block_identifier: BlockIdentifier = "latest") -> FeedReading:
        # Upstream errors (reverts, connection failures) propagate as is
        value, timestamp = self._proxy.functions.read().call(block_identifier=block_identifier)
        logger.debug(f"Read {self._api3_proxy} at {block_identifier}: value={value}, timestamp={timestamp}")
        return FeedReading(value=value, timestamp=timestamp)

    def _block_number(self) -> int:
        return self._w3.eth.block_number

    def _current_round_id(self) -> int:
        block_number = self._block_number()
        if not 0 <= block_number <= UINT80_MAX:
            raise BlockNumberNotCastableError(block_number)
        return block_number

    def _require_current(self, round_id: int, uint80: bool = False) -> int:
        # getRoundData takes a uint80 round ID, getAnswer and getTimestamp a uint256
        block_number = self._current_round_id() if uint80 else self._block_number()
        if round_id != block_number:
            raise RoundIdIsNotCurrentError(round_id, block_number)
        return block_number

    def latest_answer(self) -> int:
        """Value of the Api3 proxy."""
        return self._read().value

    def latest_timestamp(self) -> int:
        """Timestamp of the Api3 proxy."""
        return self._read().timestamp

    def latest_round(self) -> int:
        """Current block number, standing in for the latest round ID."""
        return self._current_round_id()

    def get_answer(self, round_id: int) -> int:
        """Value of the Api3 proxy, if `round_id` is the current block number."""
        block_number = self._require_current(round_id)
        return self._read(block_number).value

    def get_timestamp(self, round_id: int) -> int:
        """Timestamp of the Api3 proxy, if `round_id` is the current block number."""
        block_number = self._require_current(round_id)
        return self._read(block_number).timestamp

    def decimals(self) -> int:
        """Always 18. Values are not rescaled to match the proxy."""
        return self.DECIMALS

    def description(self) -> str:
        return self.DESCRIPTION

    def version(self) -> int:
        return self.VERSION

    def get_round_data(self, round_id: int) -> RoundData:
        """Approximated round data, if `round_id` is the current block number.

        Raises:
            RoundIdIsNotCurrentError: If round_id is not the current block number
            BlockNumberNotCastableError: If the block number does not fit in uint80
        """
        block_number = self._require_current(round_id, uint80=True)
        return RoundData.from_reading(block_number, self._read(block_number))

    def latest_round_data(self) -> RoundData:
        """Approximated round data of the current block.

        Raises:
            BlockNumberNotCastableError: If the block number does not fit in uint80
        """
        round_id = self._current_round_id()
        return RoundData.from_reading(round_id, self._read(round_id))

    def to_dict(self) -> dict[str, Any]:
        """Snapshot of the legacy interface for logging and the CLI."""
        data = self.latest_round_data()
        return {
            "api3Proxy": self._api3_proxy,
            "decimals": self.DECIMALS,
            "description": self.DESCRIPTION,
            "version": self.VERSION,
            **data.to_dict()
        }
