"""
Binary codec for arbitrage execution requests.

Wire layout (big-endian):
    [16B input_amount][16B min_profit] then per hop [1B header][20B pool address]

The hop header packs pool kind into bit 1 and sell side into bit 0; bits 2-7
are reserved and always written as zero. There are no separators, length
prefixes or checksums, so the total size is 32 + 21 * hop_count bytes.
"""

from typing import List, Union

from .exceptions import (
    InvalidHexEncoding,
    InvalidHopHeader,
    MalformedLength,
    ValueOutOfRange,
)
from .types import ADDRESS_SIZE, ArbitrageRequest, Hop, PoolKind, SellSide

AMOUNT_SIZE = 16
HEADER_SIZE = 2 * AMOUNT_SIZE
HOP_SIZE = 1 + ADDRESS_SIZE
MAX_AMOUNT = (1 << (8 * AMOUNT_SIZE)) - 1

POOL_KIND_SHIFT = 1
SELL_SIDE_SHIFT = 0
RESERVED_BITS = 0xFC

BytesLike = Union[bytes, bytearray, memoryview]


def encoded_length(hop_count: int) -> int:
    """Size in bytes of an encoded request with ``hop_count`` hops."""
    return HEADER_SIZE + HOP_SIZE * hop_count


def pack_hop_header(hop: Hop) -> int:
    return (int(hop.pool_kind) << POOL_KIND_SHIFT) | (int(hop.sell_side) << SELL_SIDE_SHIFT)


def unpack_hop_header(header: int):
    return (
        PoolKind((header >> POOL_KIND_SHIFT) & 1),
        SellSide((header >> SELL_SIDE_SHIFT) & 1),
    )


def _check_amount(name: str, value: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueOutOfRange(
            f"{name} must be an integer, got {type(value).__name__}",
            field=name,
        )
    if value < 0 or value > MAX_AMOUNT:
        raise ValueOutOfRange(
            f"{name}={value} does not fit in {AMOUNT_SIZE * 8} unsigned bits",
            field=name,
            value=value,
        )


def encode(request: ArbitrageRequest) -> bytes:
    """
    Encode a request into its on-chain wire form.

    Args:
        request: Fully constructed arbitrage request

    Returns:
        Exactly ``encoded_length(len(request.hops))`` bytes

    Raises:
        ValueOutOfRange: If either amount is negative or wider than 128 bits
    """
    _check_amount("input_amount", request.input_amount)
    _check_amount("min_profit", request.min_profit)

    buf = bytearray(encoded_length(len(request.hops)))
    buf[0:AMOUNT_SIZE] = request.input_amount.to_bytes(AMOUNT_SIZE, "big")
    buf[AMOUNT_SIZE:HEADER_SIZE] = request.min_profit.to_bytes(AMOUNT_SIZE, "big")

    offset = HEADER_SIZE
    for hop in request.hops:
        buf[offset] = pack_hop_header(hop)
        buf[offset + 1 : offset + HOP_SIZE] = hop.pool_address
        offset += HOP_SIZE

    return bytes(buf)


def encode_hex(request: ArbitrageRequest) -> str:
    """Encode a request and render it as 0x-prefixed lowercase hex."""
    return "0x" + encode(request).hex()


def decode(data: Union[BytesLike, str], strict: bool = False) -> ArbitrageRequest:
    """
    Decode a wire payload back into an ArbitrageRequest.

    Args:
        data: Raw payload bytes, or 0x-prefixed hex text
        strict: Reject hop headers with reserved bits set

    Raises:
        MalformedLength: Payload shorter than the header or not hop-aligned
        InvalidHopHeader: Reserved header bit set while ``strict`` is on
        InvalidHexEncoding: ``data`` is text that is not valid hex
    """
    if isinstance(data, str):
        return decode_hex(data, strict=strict)
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise TypeError(f"Cannot decode payload of type {type(data).__name__}")

    view = memoryview(bytes(data))
    length = len(view)
    if length < HEADER_SIZE or (length - HEADER_SIZE) % HOP_SIZE:
        raise MalformedLength(
            f"Payload length {length} is not {HEADER_SIZE} + {HOP_SIZE} * n",
            length=length,
        )

    input_amount = int.from_bytes(view[0:AMOUNT_SIZE], "big")
    min_profit = int.from_bytes(view[AMOUNT_SIZE:HEADER_SIZE], "big")

    hops: List[Hop] = []
    for offset in range(HEADER_SIZE, length, HOP_SIZE):
        header = view[offset]
        if strict and header & RESERVED_BITS:
            raise InvalidHopHeader(
                f"Hop header 0x{header:02x} at offset {offset} sets reserved bits",
                offset=offset,
                header=header,
            )
        pool_kind, sell_side = unpack_hop_header(header)
        hops.append(
            Hop(pool_kind, sell_side, view[offset + 1 : offset + HOP_SIZE].tobytes())
        )

    return ArbitrageRequest(input_amount, min_profit, tuple(hops))


def decode_hex(
    text: str, strict: bool = False, require_prefix: bool = True
) -> ArbitrageRequest:
    """
    Decode a hex-rendered payload such as the output of ``encode_hex``.

    Raises:
        InvalidHexEncoding: Missing 0x prefix (when required), odd digit count
            or non-hex characters
    """
    text = text.strip()
    if text[:2] in ("0x", "0X"):
        body = text[2:]
    elif require_prefix:
        raise InvalidHexEncoding("Hex payload must start with '0x'")
    else:
        body = text

    try:
        data = bytes.fromhex(body)
    except ValueError as e:
        raise InvalidHexEncoding(f"Invalid hex payload: {e}") from e
    if len(body) != 2 * len(data):
        # bytes.fromhex tolerates embedded whitespace
        raise InvalidHexEncoding("Hex payload contains whitespace")

    return decode(data, strict=strict)


def describe(request: ArbitrageRequest) -> List[str]:
    """Human-readable lines describing a request, one per field and hop."""
    lines = [
        f"Input Amount (WETH): {request.input_amount}",
        f"Minimum Profit (WETH): {request.min_profit}",
    ]
    for i, hop in enumerate(request.hops):
        lines.append(
            f"Hop {i + 1}: Pool Type: {hop.pool_kind.label}, "
            f"Direction: {hop.sell_side.label}, "
            f"Pool Address: {hop.checksum_address}"
        )
    return lines
