"""
Exception hierarchy for the arbitrage request encoder.

Codec errors are raised synchronously from the pure encode/decode functions.
Configuration, network and execution errors come from the collaborators that
load settings and submit the encoded payload on-chain.
"""

from typing import Optional, Dict, Any


class EncoderError(Exception):
    """Base exception for all arbitrage encoder related errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.details = details or {}


class CodecError(EncoderError):
    """Raised when a request cannot be encoded or a payload cannot be decoded."""

    pass


class ValueOutOfRange(CodecError):
    """Raised when an amount does not fit in the unsigned 128-bit wire field."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, details)
        self.field = field
        self.value = value


class InvalidHexEncoding(CodecError):
    """Raised when textual input is not valid 0x-prefixed hexadecimal."""

    pass


class MalformedLength(CodecError):
    """Raised when a payload is shorter than the header or not hop-aligned."""

    def __init__(
        self,
        message: str,
        length: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, details)
        self.length = length


class InvalidHopHeader(CodecError):
    """Raised in strict mode when a hop header byte sets a reserved bit."""

    def __init__(
        self,
        message: str,
        offset: Optional[int] = None,
        header: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, details)
        self.offset = offset
        self.header = header


class InvalidHopFlag(CodecError):
    """Raised when a pool kind or sell side is not one of the defined values."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Any = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, details)
        self.field = field
        self.value = value


class InvalidAddress(CodecError):
    """Raised when a pool address is not a 20-byte value."""

    pass


class ConfigurationError(EncoderError):
    """Raised when there are configuration-related issues."""

    pass


class NetworkError(EncoderError):
    """Raised when the RPC endpoint is unreachable or a call fails in transport."""

    def __init__(
        self,
        message: str,
        endpoint: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, details)
        self.endpoint = endpoint


class ExecutionError(EncoderError):
    """Raised when a submitted transaction reverts or cannot be built."""

    def __init__(
        self,
        message: str,
        tx_hash: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, details)
        self.tx_hash = tx_hash
