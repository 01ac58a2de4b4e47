#!/usr/bin/env python3
"""Tests for the command line entry point."""

import json
import os
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from web3 import Web3

from api3_aggregator_adapter.cli import build_parser, main, run
from api3_aggregator_adapter.deploy import get_deterministic_deployment_address
from api3_aggregator_adapter.models import DeploymentResult

from conftest import ADAPTER_BYTECODE, PROXY_ADDRESS


@pytest.fixture
def adapter_bytecode():
    with patch(
        "api3_aggregator_adapter.cli.load_adapter_bytecode",
        return_value=ADAPTER_BYTECODE
    ) as mock_load:
        yield mock_load


def test_parser_rejects_unknown_command():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["unknown"])


def test_console_script_exits_with_command_status():
    """Test the `api3-aggregator-adapter` entry point that main.py points users to."""
    with patch("sys.argv", ["api3-aggregator-adapter", "print-address"]), \
            patch.dict(os.environ, {}, clear=True):
        with pytest.raises(SystemExit) as exc_info:
            run()

    assert exc_info.value.code == 1


class TestPrintAddress:
    """Tests for the print-address command."""

    @pytest.mark.asyncio
    async def test_prints_expected_address(self, adapter_bytecode, capsys):
        with patch.dict(os.environ, {"PROXY_ADDRESS": PROXY_ADDRESS}, clear=True):
            status = await main(["print-address"])

        expected = get_deterministic_deployment_address(PROXY_ADDRESS, ADAPTER_BYTECODE)
        assert status == 0
        assert capsys.readouterr().out.strip().endswith(
            f"Api3PartialAggregatorV2V3Interface for {PROXY_ADDRESS} "
            f"is expected to be deployed at {expected}"
        )
        adapter_bytecode.assert_called_once_with()

    @pytest.mark.asyncio
    async def test_uses_artifact_path(self, tmp_path, capsys):
        artifact = tmp_path / "artifact.json"
        artifact.write_text(json.dumps({"abi": [], "bytecode": Web3.to_hex(ADAPTER_BYTECODE)}))
        env = {"PROXY_ADDRESS": PROXY_ADDRESS, "ARTIFACT_PATH": str(artifact)}

        with patch.dict(os.environ, env, clear=True):
            assert await main(["print-address"]) == 0

        expected = get_deterministic_deployment_address(PROXY_ADDRESS, ADAPTER_BYTECODE)
        assert expected in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_missing_artifact_names_artifact_path(self, tmp_path, caplog):
        env = {"PROXY_ADDRESS": PROXY_ADDRESS, "ARTIFACT_PATH": str(tmp_path / "missing.json")}

        with patch.dict(os.environ, env, clear=True):
            assert await main(["print-address"]) == 1

        assert "ArtifactNotFoundError" in caplog.text
        assert "ARTIFACT_PATH" in caplog.text

    @pytest.mark.asyncio
    async def test_missing_proxy_address(self, adapter_bytecode):
        with patch.dict(os.environ, {}, clear=True):
            assert await main(["print-address"]) == 1

        adapter_bytecode.assert_not_called()

    @pytest.mark.asyncio
    async def test_invalid_proxy_address(self, adapter_bytecode):
        with patch.dict(os.environ, {"PROXY_ADDRESS": "0x1234"}, clear=True):
            assert await main(["print-address"]) == 1

        adapter_bytecode.assert_not_called()


class TestDeploy:
    """Tests for the deploy command."""

    @pytest.mark.asyncio
    async def test_deploy(self, adapter_bytecode, capsys):
        result = DeploymentResult(
            proxy_address=PROXY_ADDRESS,
            adapter_address="0x5c00128D4d1c2f4f652C267d7bcdd7aC99C16E16",
            network="hardhat",
            deployed=True,
            transaction_hash="0x" + "12" * 32
        )
        env = {"PROXY_ADDRESS": PROXY_ADDRESS, "RPC_URL": "https://test.rpc"}

        with patch.dict(os.environ, env, clear=True), \
                patch("api3_aggregator_adapter.cli.ContractUtility") as mock_util, \
                patch("api3_aggregator_adapter.cli.DeterministicDeployer") as mock_deployer:
            mock_deployer.return_value.deploy = AsyncMock(return_value=result)
            status = await main(["deploy"])

        assert status == 0
        mock_util.assert_called_once_with("https://test.rpc", "", request_timeout=30)
        mock_deployer.assert_called_once_with(
            contract_util=mock_util.return_value,
            bytecode=ADAPTER_BYTECODE,
            receipt_timeout=120
        )
        mock_deployer.return_value.deploy.assert_awaited_once_with(PROXY_ADDRESS)
        assert str(result) in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_deploy_failure_exits_with_1(self, adapter_bytecode):
        env = {"PROXY_ADDRESS": PROXY_ADDRESS, "RPC_URL": "https://test.rpc"}

        with patch.dict(os.environ, env, clear=True), \
                patch("api3_aggregator_adapter.cli.ContractUtility"), \
                patch("api3_aggregator_adapter.cli.DeterministicDeployer") as mock_deployer:
            mock_deployer.return_value.deploy = AsyncMock(side_effect=ConnectionError("refused"))
            assert await main(["deploy"]) == 1


class TestRead:
    """Tests for the read command."""

    @pytest.mark.asyncio
    async def test_read(self, mock_w3, capsys):
        env = {"PROXY_ADDRESS": PROXY_ADDRESS}

        with patch.dict(os.environ, env, clear=True), \
                patch("api3_aggregator_adapter.cli.ContractUtility") as mock_util:
            mock_util.return_value = MagicMock(w3=mock_w3)
            status = await main(["read"])

        assert status == 0
        output = json.loads(capsys.readouterr().out)
        assert output["roundId"] == 100
        assert output["answer"] == 123
        assert output["updatedAt"] == 456
        assert output["decimals"] == 18
