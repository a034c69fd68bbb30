# amm_arbitrage/utils/cache.py
"""
Short-lived memoization for volatility scores and trend labels.

Entries expire lazily on read. There is no background sweep; the map is
pruned on write once it grows past max_entries: expired entries first,
then the live entries closest to expiry.
"""

import time
from typing import Any, Callable, Dict, Hashable, Optional, Tuple

from .logger import get_logger

logger = get_logger(__name__)


class TTLCache:
    """Key -> (value, expiry) map with per-entry time-to-live in seconds."""

    def __init__(self, default_ttl: float = 30.0, max_entries: int = 1000,
                 clock: Callable[[], float] = time.monotonic):
        self.default_ttl = default_ttl
        self.max_entries = max_entries
        self._clock = clock
        self._entries: Dict[Hashable, Tuple[Any, float]] = {}
        self.hits = 0
        self.misses = 0

    def get(self, key: Hashable, default: Any = None) -> Any:
        entry = self._entries.get(key)
        if entry is None:
            self.misses += 1
            return default

        value, expires_at = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            self.misses += 1
            return default

        self.hits += 1
        return value

    def set(self, key: Hashable, value: Any, ttl: Optional[float] = None) -> None:
        ttl = self.default_ttl if ttl is None else ttl
        self._entries[key] = (value, self._clock() + ttl)

        if len(self._entries) > self.max_entries:
            self.purge_expired()
        if len(self._entries) > self.max_entries:
            self._evict_soonest(len(self._entries) - self.max_entries)

    def _evict_soonest(self, count: int) -> None:
        """Drop the count live entries closest to expiry"""
        soonest = sorted(self._entries, key=lambda k: self._entries[k][1])[:count]
        for key in soonest:
            del self._entries[key]
        logger.debug(f"🧹 Evicted {len(soonest)} live cache entries over capacity")

    def delete(self, key: Hashable) -> None:
        self._entries.pop(key, None)

    def purge_expired(self) -> int:
        """Drop every expired entry and return how many were removed."""
        now = self._clock()
        expired = [key for key, (_, expires_at) in self._entries.items() if now >= expires_at]
        for key in expired:
            del self._entries[key]

        if expired:
            logger.debug(f"🧹 Cleaned {len(expired)} expired cache entries")
        return len(expired)

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, key: Hashable) -> bool:
        entry = self._entries.get(key)
        return entry is not None and self._clock() < entry[1]

    def __len__(self) -> int:
        return len(self._entries)

    def stats(self) -> Dict[str, Any]:
        total = self.hits + self.misses
        return {
            'entries': len(self._entries),
            'hits': self.hits,
            'misses': self.misses,
            'hit_rate': (self.hits / total * 100) if total else 0.0,
        }
