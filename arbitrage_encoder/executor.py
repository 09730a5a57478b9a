"""
Arbitrage executor: approves the input tokens, encodes the configured request
and submits it to the on-chain arbitrage contract.
"""

import logging
import time
from typing import Callable, Dict, Optional

from .chain_client import ChainClient
from .codec import encode
from .config_loader import ExecutorConfig
from .utils import format_wei

logger = logging.getLogger(__name__)


class ArbitrageExecutor:
    """Runs the approve -> encode -> execute sequence for one request."""

    def __init__(
        self,
        config: ExecutorConfig,
        client: Optional[ChainClient] = None,
        paper_mode: bool = False,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.config = config
        self.client = client or ChainClient(config, paper_mode=paper_mode)
        self.paper_mode = self.client.paper_mode
        self._sleep = sleep

    @property
    def owner(self) -> str:
        return self.config.owner_address or self.client.address

    def _wait(self) -> None:
        if self.config.step_delay_sec > 0:
            self._sleep(self.config.step_delay_sec)

    def _balances(self) -> Dict[str, int]:
        return {
            "weth": self.client.balance_of(self.config.weth_address, self.owner),
            "usdc": self.client.balance_of(self.config.usdc_address, self.owner),
        }

    def approve_tokens(self) -> Dict[str, str]:
        """Approve the arbitrage contract to spend WETH and USDC."""
        spender = self.config.arbitrage_address
        amount = self.config.total_approval
        tx_hashes = {}

        for name, token in (
            ("weth", self.config.weth_address),
            ("usdc", self.config.usdc_address),
        ):
            tx_hashes[name] = self.client.approve(token, spender, amount)
            logger.info(f"Approval confirmed: {name.upper()} tx={tx_hashes[name]}")
            # Let node state catch up before the next read
            self._wait()

        return tx_hashes

    def report_allowances(self) -> Dict[str, int]:
        spender = self.config.arbitrage_address
        allowances = {
            "weth": self.client.allowance(self.config.weth_address, self.owner, spender),
            "usdc": self.client.allowance(self.config.usdc_address, self.owner, spender),
        }
        logger.info(f"ALLOWANCES: spender={spender} {allowances}")
        return allowances

    def run(self) -> Dict:
        """
        Execute the configured arbitrage request.

        Returns:
            Summary dict with approval and execution tx hashes, the encoded
            payload and before/after balances.

        Raises:
            CodecError: If the configured request cannot be encoded
            NetworkError: If an RPC call fails
            ExecutionError: If a transaction reverts
        """
        mode = "paper_trading" if self.paper_mode else "live"
        request = self.config.request

        approvals = self.approve_tokens()
        allowances = self.report_allowances()

        initial = self._balances()
        logger.info(
            f"INITIAL_BALANCES: owner={self.owner} "
            f"weth={format_wei(initial['weth'])} usdc={format_wei(initial['usdc'], 6)}"
        )

        payload = encode(request)
        payload_hex = "0x" + payload.hex()

        execution_log = {
            "action": "EXECUTE_ARBITRAGE",
            "mode": mode,
            "contract": self.config.arbitrage_address,
            "input_amount": request.input_amount,
            "min_profit": request.min_profit,
            "hops": len(request.hops),
            "payload": payload_hex,
        }
        logger.info(f"EXECUTION_START: {execution_log}")

        tx_hash = self.client.execute_arbitrage(payload)
        logger.info(f"EXECUTION_RESULT: {{'status': 'confirmed', 'tx_hash': '{tx_hash}'}}")

        self._wait()

        final = self._balances()
        logger.info(
            f"FINAL_BALANCES: owner={self.owner} "
            f"weth={format_wei(final['weth'])} usdc={format_wei(final['usdc'], 6)}"
        )

        return {
            "mode": mode,
            "approvals": approvals,
            "allowances": allowances,
            "payload": payload_hex,
            "transaction_hash": tx_hash,
            "initial_balances": initial,
            "final_balances": final,
        }
