# amm_arbitrage/exceptions.py
"""
Exception types raised by the arbitrage engine.

Quote, liquidity and volatility lookups never raise: they degrade to
NoQuote / zero / NEUTRAL. The types below only surface at startup or
from the settlement collaborator.
"""


class ArbitrageError(Exception):
    """Base class for engine errors."""


class ConfigurationError(ArbitrageError, ValueError):
    """Incomplete or inconsistent configuration. Fatal at startup."""


class ConnectivityError(ArbitrageError, ConnectionError):
    """RPC node or venue contracts unreachable during the startup check."""


class ExecutionError(ArbitrageError):
    """Settlement contract refused or failed a flash-loan request."""
