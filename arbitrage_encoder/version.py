"""Version information for the arbitrage request encoder."""

__version__ = "0.1.0"
