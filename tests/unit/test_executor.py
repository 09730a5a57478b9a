"""Tests for the approve -> encode -> execute orchestration."""

import dataclasses
from unittest.mock import Mock

import pytest

from arbitrage_encoder.chain_client import ChainClient
from arbitrage_encoder.codec import encode, encode_hex
from arbitrage_encoder.config_loader import ExecutorConfig
from arbitrage_encoder.exceptions import ExecutionError, ValueOutOfRange
from arbitrage_encoder.executor import ArbitrageExecutor
from arbitrage_encoder.types import ArbitrageRequest, Hop, PoolKind, SellSide

ARB = "0x5FbDB2315678afecb367f032d93F642f64180aa3"
WETH = "0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2"
USDC = "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48"
OWNER = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"


@pytest.fixture
def config():
    request = ArbitrageRequest(
        10**18,
        10**15,
        (
            Hop.from_address(
                PoolKind.UNISWAP_V2,
                SellSide.TOKEN1,
                "0xB4e16d0168e52d35CaCD2c6185b44281Ec28C9Dc",
            ),
            Hop.from_address(
                PoolKind.UNISWAP_V3,
                SellSide.TOKEN0,
                "0x88e6A0c2dDD26FEEb64F039a2c41296FcB3f5640",
            ),
        ),
    )
    return ExecutorConfig(
        network="ethereum",
        rpc_url="http://127.0.0.1:8545",
        private_key=None,
        arbitrage_address=ARB,
        weth_address=WETH,
        usdc_address=USDC,
        owner_address=None,
        approval_amount=10**18,
        approval_multiplier=2,
        step_delay_sec=2.0,
        gas_limit=500_000,
        receipt_timeout_sec=120,
        request=request,
    )


@pytest.fixture
def client():
    client = Mock(spec=ChainClient)
    client.paper_mode = False
    client.address = OWNER
    client.approve.side_effect = lambda token, spender, amount: f"0xapprove-{token[-4:]}"
    client.allowance.return_value = 2 * 10**18
    client.balance_of.side_effect = [10**18, 0, 10**18 + 10**16, 0]
    client.execute_arbitrage.return_value = "0xexec"
    return client


def test_run_sequence(config, client):
    sleep = Mock()
    executor = ArbitrageExecutor(config, client=client, sleep=sleep)

    result = executor.run()

    call_names = [c[0] for c in client.mock_calls]
    assert call_names == [
        "approve",
        "approve",
        "allowance",
        "allowance",
        "balance_of",
        "balance_of",
        "execute_arbitrage",
        "balance_of",
        "balance_of",
    ]
    client.approve.assert_any_call(WETH, ARB, 2 * 10**18)
    client.approve.assert_any_call(USDC, ARB, 2 * 10**18)
    client.execute_arbitrage.assert_called_once_with(encode(config.request))
    assert sleep.call_count == 3
    sleep.assert_called_with(2.0)

    assert result["mode"] == "live"
    assert result["transaction_hash"] == "0xexec"
    assert result["payload"] == encode_hex(config.request)
    assert result["approvals"] == {"weth": "0xapprove-6Cc2", "usdc": "0xapprove-eB48"}
    assert result["allowances"] == {"weth": 2 * 10**18, "usdc": 2 * 10**18}
    assert result["initial_balances"] == {"weth": 10**18, "usdc": 0}
    assert result["final_balances"] == {"weth": 10**18 + 10**16, "usdc": 0}


def test_owner_address_overrides_signer(config, client):
    config = dataclasses.replace(config, owner_address=ARB)
    executor = ArbitrageExecutor(config, client=client, sleep=Mock())
    executor.run()

    for call in client.balance_of.call_args_list:
        assert call.args[1] == ARB


def test_zero_delay_skips_sleep(config, client):
    config = dataclasses.replace(config, step_delay_sec=0)
    sleep = Mock()
    ArbitrageExecutor(config, client=client, sleep=sleep).run()
    sleep.assert_not_called()


def test_unencodable_request_is_never_executed(config, client):
    config = dataclasses.replace(config, request=ArbitrageRequest(2**128, 0))
    executor = ArbitrageExecutor(config, client=client, sleep=Mock())

    with pytest.raises(ValueOutOfRange):
        executor.run()
    call_names = [c[0] for c in client.mock_calls]
    assert call_names == [
        "approve",
        "approve",
        "allowance",
        "allowance",
        "balance_of",
        "balance_of",
    ]
    client.execute_arbitrage.assert_not_called()


def test_execution_error_propagates(config, client):
    client.execute_arbitrage.side_effect = ExecutionError("reverted", tx_hash="0xdead")
    executor = ArbitrageExecutor(config, client=client, sleep=Mock())

    with pytest.raises(ExecutionError):
        executor.run()


def test_paper_mode_end_to_end(config):
    config = dataclasses.replace(config, step_delay_sec=0)
    executor = ArbitrageExecutor(config, paper_mode=True)

    result = executor.run()

    assert result["mode"] == "paper_trading"
    assert result["transaction_hash"].startswith("0x")
    assert result["initial_balances"] == {"weth": 0, "usdc": 0}
