"""
Common helpers for the arbitrage encoder: structured logging and unit formatting.
"""

import logging
from decimal import Decimal
from typing import Union


# Logging utilities
def get_logger(
    name: str,
    level: Union[str, int] = logging.INFO,
    minimal: bool = False,
) -> logging.Logger:
    """
    Get a structured logger with consistent formatting.

    Args:
        name: Logger name (typically __name__)
        level: Logging level
        minimal: If True, use simplified format (time + message only)

    Returns:
        Configured logger with structured output
    """
    logger = logging.getLogger(name)

    if logger.level == logging.NOTSET:
        logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler()

        if minimal:
            format_str = "%(asctime)s | %(message)s"
        else:
            format_str = (
                "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | " "%(message)s"
            )

        formatter = logging.Formatter(format_str, datefmt="%H:%M:%S")
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        # Own handler attached; avoid a second copy via the root logger
        logger.propagate = False

    return logger


def format_wei(amount: int, decimals: int = 18) -> str:
    """
    Format an integer token amount in its natural unit.

    Examples:
        >>> format_wei(10**18)
        '1'
        >>> format_wei(10**15)
        '0.001'
        >>> format_wei(2_500_000, decimals=6)
        '2.5'
    """
    value = Decimal(amount) / (Decimal(10) ** decimals)
    return format(value.normalize(), "f")
