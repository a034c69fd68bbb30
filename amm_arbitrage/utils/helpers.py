# amm_arbitrage/utils/helpers.py
"""
Helper functions for the arbitrage engine.

Provides utility functions for:
- Address and private key validation
- Display formatting

Usage:
    from amm_arbitrage.utils.helpers import truncate_address, validate_address

    short = truncate_address("0x82aF49447D8a07e3bd95BD0d56f35241523fBab1")  # "0x82aF...Bab1"
"""

import re
from decimal import getcontext
from typing import Optional

from web3 import Web3

# Set high precision for decimal calculations
getcontext().prec = 50

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


def validate_address(address: Optional[str]) -> bool:
    """
    Validate an EVM address format.

    Args:
        address: Address to validate

    Returns:
        True if valid address format
    """
    if not address:
        return False

    if not re.match(r'^0x[a-fA-F0-9]{40}$', address):
        return False

    try:
        return Web3.is_address(address)
    except Exception:
        return False


def is_zero_address(address: Optional[str]) -> bool:
    """True for None, empty strings and the zero address."""
    if not address:
        return True
    return int(address, 16) == 0


def validate_private_key(private_key: Optional[str]) -> bool:
    """64 hex characters, optional 0x prefix."""
    if not private_key:
        return False

    key = private_key[2:] if private_key.startswith('0x') else private_key
    return re.fullmatch(r'[a-fA-F0-9]{64}', key) is not None


def truncate_address(address: str, start_chars: int = 6, end_chars: int = 4) -> str:
    """
    Truncate address for display (0x1234...5678)
    """
    if len(address) <= start_chars + end_chars:
        return address
    return f"{address[:start_chars]}...{address[-end_chars:]}"


def format_duration(seconds: float) -> str:
    """Format a runtime as '3h 12m' (or '45s' below one minute)."""
    seconds = max(0, int(seconds))
    if seconds < 60:
        return f"{seconds}s"

    hours, remainder = divmod(seconds, 3600)
    minutes = remainder // 60
    return f"{hours}h {minutes}m"
