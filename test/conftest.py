"""Shared fixtures for adapter and deployment tests."""

from unittest.mock import MagicMock

import pytest
from hexbytes import HexBytes
from web3 import Web3

PROXY_ADDRESS = "0x85BfE05492aFC3D04Ff3B2ca6771ACF6f853d90d"
OTHER_PROXY_ADDRESS = Web3.to_checksum_address("0x5c00128d4d1c2f4f652c267d7bcdd7ac99c16e16")
# Stand-in for the compiled adapter creation bytecode
ADAPTER_BYTECODE = HexBytes("0x608060405234801561001057600080fd5b50")


@pytest.fixture
def mock_w3():
    """Web3 mock on block 100 whose proxy reads (123, 456)."""
    w3 = MagicMock()
    w3.eth.block_number = 100
    w3.eth.contract.return_value.functions.read.return_value.call.return_value = (123, 456)
    return w3


@pytest.fixture
def proxy_call(mock_w3):
    """The mocked `read().call` of the proxy contract."""
    return mock_w3.eth.contract.return_value.functions.read.return_value.call
