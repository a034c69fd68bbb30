# amm_arbitrage/utils/__init__.py
"""
Utility package for the arbitrage engine.

This package provides:
- Colored logging system (logger.py)
- TTL cache (cache.py)
- Helper functions (helpers.py)
- NDJSON journals (journal.py)
- Notification system (notifications.py)

Usage:
    from amm_arbitrage.utils.logger import get_logger
    from amm_arbitrage.utils.cache import TTLCache
"""

from .logger import get_logger, setup_logger
from .cache import TTLCache

__all__ = [
    "get_logger",
    "setup_logger",
    "TTLCache",
]
