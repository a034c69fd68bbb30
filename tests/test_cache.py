# TTL cache tests
# tests/test_cache.py

import pytest

from amm_arbitrage.utils.cache import TTLCache
from amm_arbitrage.utils.logger import get_logger

logger = get_logger(__name__)


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


class TestTTLCache:
    """Test suite for lazy-expiry caching"""

    @pytest.fixture
    def clock(self):
        return FakeClock()

    @pytest.fixture
    def cache(self, clock):
        return TTLCache(default_ttl=30.0, clock=clock)

    def test_hit_before_expiry(self, cache, clock):
        cache.set("volatility:0xabc", 12.5)
        clock.advance(29.9)

        assert cache.get("volatility:0xabc") == 12.5
        assert cache.hits == 1
        logger.info("✅ Entry served before expiry")

    def test_lazy_expiry_on_read(self, cache, clock):
        cache.set("trend:0xabc", "BULLISH", ttl=60)
        clock.advance(60)

        assert len(cache) == 1
        assert cache.get("trend:0xabc") is None
        assert len(cache) == 0
        assert cache.misses == 1
        logger.info("✅ Expired entry evicted on read")

    def test_default_returned_on_miss(self, cache):
        assert cache.get("missing", default=0.0) == 0.0

    def test_overwrite_resets_expiry(self, cache, clock):
        cache.set("k", 1)
        clock.advance(20)
        cache.set("k", 2)
        clock.advance(20)

        assert cache.get("k") == 2

    def test_contains_respects_expiry(self, cache, clock):
        cache.set("k", 1, ttl=5)
        assert "k" in cache
        clock.advance(5)
        assert "k" not in cache

    def test_purge_when_over_capacity(self, clock):
        cache = TTLCache(default_ttl=10, max_entries=2, clock=clock)
        cache.set("a", 1)
        cache.set("b", 2)
        clock.advance(11)
        cache.set("c", 3)

        assert len(cache) == 1
        assert cache.get("c") == 3

    def test_live_entries_capped(self, clock):
        cache = TTLCache(default_ttl=30, max_entries=2, clock=clock)
        cache.set("score:WIF", 12.0, ttl=10)
        cache.set("trend:WIF", "BULLISH", ttl=60)
        cache.set("score:PEPE", 40.0, ttl=30)

        assert len(cache) == 2
        assert "score:WIF" not in cache
        assert cache.get("trend:WIF") == "BULLISH"
        assert cache.get("score:PEPE") == 40.0
        logger.info("✅ Soonest-expiring entry evicted at capacity")

    def test_delete_and_clear(self, cache):
        cache.set("a", 1)
        cache.set("b", 2)
        cache.delete("a")
        cache.delete("not-there")
        assert len(cache) == 1

        cache.clear()
        assert len(cache) == 0

    def test_stats(self, cache):
        cache.set("a", 1)
        cache.get("a")
        cache.get("b")

        stats = cache.stats()
        assert stats['entries'] == 1
        assert stats['hit_rate'] == pytest.approx(50.0)
