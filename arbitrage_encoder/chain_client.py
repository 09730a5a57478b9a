"""
Chain client for submitting encoded arbitrage requests using web3.

Wraps ERC-20 approvals, allowance/balance reads and the arbitrage contract's
``executeArbitrage(bytes)`` entry point. In paper mode no connection is made
and transactions are only logged.
"""

import logging
from typing import Any, Callable, Dict

import requests
from eth_account import Account
from web3 import Web3
from web3.exceptions import ContractLogicError, TimeExhausted, Web3Exception

from .config_loader import ExecutorConfig
from .exceptions import ConfigurationError, ExecutionError, NetworkError

logger = logging.getLogger(__name__)

# ERC20 ABI (minimal)
ERC20_ABI = [
    {
        "constant": True,
        "inputs": [{"name": "_owner", "type": "address"}],
        "name": "balanceOf",
        "outputs": [{"name": "balance", "type": "uint256"}],
        "type": "function",
    },
    {
        "constant": True,
        "inputs": [
            {"name": "_owner", "type": "address"},
            {"name": "_spender", "type": "address"},
        ],
        "name": "allowance",
        "outputs": [{"name": "", "type": "uint256"}],
        "type": "function",
    },
    {
        "constant": False,
        "inputs": [
            {"name": "_spender", "type": "address"},
            {"name": "_value", "type": "uint256"},
        ],
        "name": "approve",
        "outputs": [{"name": "", "type": "bool"}],
        "type": "function",
    },
]

# Arbitrage executor ABI (minimal)
ARBITRAGE_ABI = [
    {
        "inputs": [{"name": "data", "type": "bytes"}],
        "name": "executeArbitrage",
        "outputs": [],
        "stateMutability": "nonpayable",
        "type": "function",
    },
]


class ChainClient:
    """Client for the arbitrage contract and its input tokens via web3."""

    def __init__(self, config: ExecutorConfig, paper_mode: bool = False):
        """Initialize chain client with configuration."""
        self.config = config
        self.paper_mode = paper_mode

        if not paper_mode:
            self.w3 = Web3(Web3.HTTPProvider(config.rpc_url))
            if not self.w3.is_connected():
                raise NetworkError(
                    f"Failed to connect to RPC at {config.rpc_url}",
                    endpoint=config.rpc_url,
                )

            if not config.private_key:
                raise ConfigurationError(
                    "Private key not set - live execution requires a signing key"
                )
            self.account = Account.from_key(config.private_key)
            logger.info(f"Loaded account: {self.account.address}")
            self.address = self.account.address
        else:
            self.w3 = None
            self.account = None
            self.address = config.owner_address or "0x" + "00" * 20
            logger.info("Chain client initialized in PAPER MODE - no transactions sent")

        logger.info(f"Chain client initialized for network {config.network}")

    # Read calls

    def balance_of(self, token: str, owner: str) -> int:
        """Get ERC-20 balance in raw token units."""
        if self.paper_mode:
            logger.debug(f"PAPER: balanceOf token={token} owner={owner}")
            return 0
        contract = self._contract(token, ERC20_ABI)
        return self._call(
            lambda: contract.functions.balanceOf(Web3.to_checksum_address(owner)).call()
        )

    def allowance(self, token: str, owner: str, spender: str) -> int:
        """Get ERC-20 allowance granted by ``owner`` to ``spender``."""
        if self.paper_mode:
            logger.debug(
                f"PAPER: allowance token={token} owner={owner} spender={spender}"
            )
            return 0
        contract = self._contract(token, ERC20_ABI)
        return self._call(
            lambda: contract.functions.allowance(
                Web3.to_checksum_address(owner), Web3.to_checksum_address(spender)
            ).call()
        )

    # Transactions

    def approve(self, token: str, spender: str, amount: int) -> str:
        """Approve ``spender`` for ``amount`` of ``token`` and wait for the receipt."""
        if self.paper_mode:
            logger.info(f"PAPER: approve token={token} spender={spender} amount={amount}")
            return self._paper_hash(f"approve:{token}:{spender}:{amount}".encode())
        contract = self._contract(token, ERC20_ABI)
        function = contract.functions.approve(Web3.to_checksum_address(spender), amount)
        return self._transact(function, "approve")

    def execute_arbitrage(self, payload: bytes) -> str:
        """Submit an encoded request to ``executeArbitrage`` and wait for the receipt."""
        if self.paper_mode:
            logger.info(
                f"PAPER: executeArbitrage on {self.config.arbitrage_address} "
                f"payload=0x{bytes(payload).hex()}"
            )
            return self._paper_hash(bytes(payload))
        contract = self._contract(self.config.arbitrage_address, ARBITRAGE_ABI)
        function = contract.functions.executeArbitrage(bytes(payload))
        return self._transact(function, "executeArbitrage")

    # Internals

    def _contract(self, address: str, abi):
        return self.w3.eth.contract(address=Web3.to_checksum_address(address), abi=abi)

    def _call(self, fn: Callable[[], Any]) -> Any:
        try:
            return fn()
        except ContractLogicError as e:
            raise ExecutionError(f"Contract call reverted: {e}") from e
        except (Web3Exception, requests.RequestException) as e:
            raise NetworkError(
                f"RPC call failed: {e}", endpoint=self.config.rpc_url
            ) from e

    def _transact(self, function, label: str) -> str:
        """Build, sign, send and confirm a contract transaction."""

        def send() -> Any:
            tx_params: Dict[str, Any] = {
                "from": self.address,
                "nonce": self.w3.eth.get_transaction_count(self.address),
                "gas": self.config.gas_limit,
            }
            tx = function.build_transaction(tx_params)
            signed = self.account.sign_transaction(tx)
            return self.w3.eth.send_raw_transaction(signed.raw_transaction)

        tx_hash = Web3.to_hex(self._call(send))
        logger.info(f"Transaction submitted: {label} tx={tx_hash}")

        try:
            receipt = self.w3.eth.wait_for_transaction_receipt(
                tx_hash, timeout=self.config.receipt_timeout_sec
            )
        except TimeExhausted as e:
            raise ExecutionError(
                f"Timed out waiting for {label} receipt", tx_hash=tx_hash
            ) from e
        except (Web3Exception, requests.RequestException) as e:
            raise NetworkError(
                f"Failed to fetch {label} receipt: {e}", endpoint=self.config.rpc_url
            ) from e

        if receipt["status"] != 1:
            raise ExecutionError(
                f"{label} transaction reverted",
                tx_hash=tx_hash,
                details={"gas_used": receipt.get("gasUsed")},
            )

        logger.info(
            f"Transaction confirmed: {label} tx={tx_hash} gas_used={receipt.get('gasUsed')}"
        )
        return tx_hash

    @staticmethod
    def _paper_hash(data: bytes) -> str:
        return Web3.to_hex(Web3.keccak(data))
