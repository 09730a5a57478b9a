"""
Arbitrage Request Encoder.

Compact binary codec for on-chain arbitrage execution requests: an input
amount, a minimum profit and an ordered route of Uniswap V2/V3 pool hops,
plus the web3 client and executor that submit the encoded payload.
"""

PROJECT_NAME = "arbitrage-request-encoder"

from arbitrage_encoder.version import __version__ as VERSION
from arbitrage_encoder.types import ArbitrageRequest, Hop, PoolKind, Request, SellSide
from arbitrage_encoder.codec import (
    decode,
    decode_hex,
    describe,
    encode,
    encode_hex,
    encoded_length,
)
from arbitrage_encoder.exceptions import (
    EncoderError,
    CodecError,
    ValueOutOfRange,
    InvalidHexEncoding,
    MalformedLength,
    InvalidHopHeader,
    InvalidAddress,
    InvalidHopFlag,
)

__all__ = [
    "PROJECT_NAME",
    "VERSION",
    "ArbitrageRequest",
    "Request",
    "Hop",
    "PoolKind",
    "SellSide",
    "encode",
    "encode_hex",
    "decode",
    "decode_hex",
    "describe",
    "encoded_length",
    "EncoderError",
    "CodecError",
    "ValueOutOfRange",
    "InvalidHexEncoding",
    "MalformedLength",
    "InvalidHopHeader",
    "InvalidAddress",
    "InvalidHopFlag",
]
