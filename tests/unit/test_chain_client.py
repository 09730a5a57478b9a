"""
Unit tests for the web3 chain client.

Live-mode behaviour is exercised against a mocked Web3 instance; no RPC
endpoint is contacted.
"""

from unittest.mock import MagicMock, Mock, patch

import pytest
import requests
from web3.exceptions import ContractLogicError, TimeExhausted

from arbitrage_encoder.chain_client import ChainClient
from arbitrage_encoder.codec import encode
from arbitrage_encoder.config_loader import ExecutorConfig
from arbitrage_encoder.exceptions import ConfigurationError, ExecutionError, NetworkError
from arbitrage_encoder.types import ArbitrageRequest, Hop

ARB = "0x5FbDB2315678afecb367f032d93F642f64180aa3"
WETH = "0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2"
USDC = "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48"
OWNER = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"
TX_HASH = b"\xab" * 32


def make_config(private_key="0x" + "11" * 32, owner=None) -> ExecutorConfig:
    return ExecutorConfig(
        network="ethereum",
        rpc_url="http://127.0.0.1:8545",
        private_key=private_key,
        arbitrage_address=ARB,
        weth_address=WETH,
        usdc_address=USDC,
        owner_address=owner,
        approval_amount=10**18,
        approval_multiplier=2,
        step_delay_sec=0,
        gas_limit=500_000,
        receipt_timeout_sec=5,
        request=ArbitrageRequest(10**18, 10**15, (Hop(0, 1, b"\x01" * 20),)),
    )


@pytest.fixture
def live_client():
    """Client switched to live mode with mocked web3 and account."""
    client = ChainClient(make_config(), paper_mode=True)
    client.paper_mode = False
    client.address = OWNER
    client.w3 = MagicMock()
    client.w3.eth.get_transaction_count.return_value = 7
    client.w3.eth.send_raw_transaction.return_value = TX_HASH
    client.w3.eth.wait_for_transaction_receipt.return_value = {
        "status": 1,
        "gasUsed": 123456,
    }
    client.account = Mock()
    client.account.sign_transaction.return_value = Mock(raw_transaction=b"\x02signed")
    return client


class TestPaperMode:
    def test_no_connection(self):
        client = ChainClient(make_config(private_key=None), paper_mode=True)
        assert client.w3 is None
        assert client.account is None

    def test_reads_return_zero(self):
        client = ChainClient(make_config(), paper_mode=True)
        assert client.balance_of(WETH, OWNER) == 0
        assert client.allowance(WETH, OWNER, ARB) == 0

    def test_execute_returns_deterministic_hash(self):
        client = ChainClient(make_config(), paper_mode=True)
        payload = encode(client.config.request)

        first = client.execute_arbitrage(payload)
        assert first == client.execute_arbitrage(payload)
        assert first.startswith("0x") and len(first) == 66
        assert first != client.approve(WETH, ARB, 1)

    def test_address_defaults_to_owner(self):
        client = ChainClient(make_config(owner=OWNER), paper_mode=True)
        assert client.address == OWNER


class TestLiveConstruction:
    @patch("arbitrage_encoder.chain_client.Web3")
    def test_connection_failure(self, mock_web3):
        mock_web3.return_value.is_connected.return_value = False
        with pytest.raises(NetworkError) as exc_info:
            ChainClient(make_config())
        assert exc_info.value.endpoint == "http://127.0.0.1:8545"

    @patch("arbitrage_encoder.chain_client.Web3")
    def test_missing_private_key(self, mock_web3):
        mock_web3.return_value.is_connected.return_value = True
        with pytest.raises(ConfigurationError):
            ChainClient(make_config(private_key=None))

    @patch("arbitrage_encoder.chain_client.Web3")
    def test_loads_account(self, mock_web3):
        mock_web3.return_value.is_connected.return_value = True
        client = ChainClient(make_config(private_key="0x" + "11" * 32))
        assert client.address == client.account.address
        assert client.address.startswith("0x")


class TestLiveTransactions:
    def test_execute_arbitrage_sends_payload(self, live_client):
        payload = encode(live_client.config.request)
        contract = live_client.w3.eth.contract.return_value
        contract.functions.executeArbitrage.return_value.build_transaction.return_value = {
            "to": ARB
        }

        tx_hash = live_client.execute_arbitrage(payload)

        assert tx_hash == "0x" + "ab" * 32
        contract.functions.executeArbitrage.assert_called_once_with(payload)
        build = contract.functions.executeArbitrage.return_value.build_transaction
        build.assert_called_once_with({"from": OWNER, "nonce": 7, "gas": 500_000})
        live_client.account.sign_transaction.assert_called_once_with({"to": ARB})
        live_client.w3.eth.send_raw_transaction.assert_called_once_with(b"\x02signed")
        live_client.w3.eth.wait_for_transaction_receipt.assert_called_once_with(
            tx_hash, timeout=5
        )

    def test_approve(self, live_client):
        contract = live_client.w3.eth.contract.return_value

        tx_hash = live_client.approve(WETH, ARB, 2 * 10**18)

        assert tx_hash == "0x" + "ab" * 32
        contract.functions.approve.assert_called_once_with(ARB, 2 * 10**18)

    def test_reverted_receipt(self, live_client):
        live_client.w3.eth.wait_for_transaction_receipt.return_value = {
            "status": 0,
            "gasUsed": 30000,
        }
        with pytest.raises(ExecutionError) as exc_info:
            live_client.execute_arbitrage(b"\x00" * 32)
        assert exc_info.value.tx_hash == "0x" + "ab" * 32
        assert exc_info.value.details["gas_used"] == 30000

    def test_contract_logic_error(self, live_client):
        live_client.w3.eth.send_raw_transaction.side_effect = ContractLogicError(
            "execution reverted"
        )
        with pytest.raises(ExecutionError):
            live_client.execute_arbitrage(b"\x00" * 32)

    def test_receipt_timeout(self, live_client):
        live_client.w3.eth.wait_for_transaction_receipt.side_effect = TimeExhausted()
        with pytest.raises(ExecutionError, match="Timed out"):
            live_client.approve(USDC, ARB, 1)

    def test_transport_error(self, live_client):
        live_client.w3.eth.get_transaction_count.side_effect = requests.ConnectionError(
            "refused"
        )
        with pytest.raises(NetworkError):
            live_client.execute_arbitrage(b"\x00" * 32)

    def test_balance_and_allowance_reads(self, live_client):
        functions = live_client.w3.eth.contract.return_value.functions
        functions.balanceOf.return_value.call.return_value = 5 * 10**17
        functions.allowance.return_value.call.return_value = 2 * 10**18

        assert live_client.balance_of(WETH, OWNER) == 5 * 10**17
        assert live_client.allowance(WETH, OWNER, ARB) == 2 * 10**18
        functions.allowance.assert_called_once_with(OWNER, ARB)
