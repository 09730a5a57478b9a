"""
Core data types for arbitrage execution requests.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Tuple

from eth_utils import is_hex_address, to_canonical_address, to_checksum_address

from .exceptions import InvalidAddress, InvalidHopFlag

ADDRESS_SIZE = 20


class PoolKind(IntEnum):
    """AMM implementation family of a hop's pool. Stored in header bit 1."""

    UNISWAP_V2 = 0
    UNISWAP_V3 = 1

    @property
    def label(self) -> str:
        return "UniswapV2" if self is PoolKind.UNISWAP_V2 else "UniswapV3"


class SellSide(IntEnum):
    """Which of the pool's reserve tokens is sold. Stored in header bit 0."""

    TOKEN0 = 0
    TOKEN1 = 1

    @property
    def label(self) -> str:
        return "Selling token0" if self is SellSide.TOKEN0 else "Selling token1"


def _flag(enum_cls, field_name: str, value):
    if not isinstance(value, int):
        raise InvalidHopFlag(
            f"{field_name} must be an int or bool, got {type(value).__name__}",
            field=field_name,
            value=value,
        )
    try:
        return enum_cls(int(value))
    except ValueError as e:
        raise InvalidHopFlag(
            f"{field_name} must be 0 or 1, got {value}", field=field_name, value=value
        ) from e


@dataclass(frozen=True)
class Hop:
    """
    One step of a multi-pool swap route.

    Attributes:
        pool_kind: Pool implementation family (v2 constant-product or v3)
        sell_side: Reserve token sold into the pool
        pool_address: Raw 20-byte pool contract address
    """

    pool_kind: PoolKind
    sell_side: SellSide
    pool_address: bytes

    def __post_init__(self):
        # Normalise plain ints/bools and bytes-like values so equality is by value
        object.__setattr__(self, "pool_kind", _flag(PoolKind, "pool_kind", self.pool_kind))
        object.__setattr__(self, "sell_side", _flag(SellSide, "sell_side", self.sell_side))
        if not isinstance(self.pool_address, (bytes, bytearray, memoryview)):
            raise InvalidAddress(
                f"pool_address must be bytes, got {type(self.pool_address).__name__}"
            )
        address = bytes(self.pool_address)
        if len(address) != ADDRESS_SIZE:
            raise InvalidAddress(
                f"pool_address must be {ADDRESS_SIZE} bytes, got {len(address)}",
                {"length": len(address)},
            )
        object.__setattr__(self, "pool_address", address)

    @classmethod
    def from_address(cls, pool_kind: PoolKind, sell_side: SellSide, address: str) -> "Hop":
        """Build a hop from a 0x-prefixed hex address string."""
        if not isinstance(address, str) or not is_hex_address(address):
            raise InvalidAddress(f"Invalid pool address: {address!r}")
        return cls(pool_kind, sell_side, to_canonical_address(address))

    @property
    def checksum_address(self) -> str:
        return to_checksum_address(self.pool_address)


@dataclass(frozen=True)
class ArbitrageRequest:
    """
    Arbitrage execution request consumed by the on-chain executor.

    Amounts are in the smallest unit of the input token (wei for WETH).
    Range checks happen at encode time.
    """

    input_amount: int
    min_profit: int
    hops: Tuple[Hop, ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, "hops", tuple(self.hops))


Request = ArbitrageRequest
