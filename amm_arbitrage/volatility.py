# amm_arbitrage/volatility.py
"""
Volatility & Trend Monitor

Short-window price sampling used as a safety gate and as an annotation on
long-tail opportunities. Every failure degrades to 0.0 / NEUTRAL.
"""

import asyncio
import math
import statistics
from typing import Awaitable, Callable, List, Optional

from .models import Asset, PoolQuote, Trend
from .pricing import ReferencePricer
from .utils.cache import TTLCache
from .utils.logger import get_logger
from .venues import VenueAdapter

logger = get_logger(__name__)


class VolatilityMonitor:
    """
    Two kinds of volatility and one trend label:

    - volatility(): spread between two identical quotes taken
      sample_delay seconds apart, in percent
    - volatility_score(): standard deviation of returns over N reference
      prices, scaled to 0-100 and cached
    - trend(): reference price change across trend_window seconds,
      labelled against +/- trend_threshold percent and cached
    """

    def __init__(self,
                 cache: TTLCache,
                 pricer: Optional[ReferencePricer] = None,
                 sample_delay: float = 1.0,
                 trend_window: float = 5.0,
                 trend_threshold: float = 2.0,
                 score_samples: int = 5,
                 score_ttl: float = 30.0,
                 trend_ttl: float = 60.0,
                 sleep: Callable[[float], Awaitable[None]] = asyncio.sleep):
        self.cache = cache
        self.pricer = pricer
        self.sample_delay = sample_delay
        self.trend_window = trend_window
        self.trend_threshold = trend_threshold
        self.score_samples = score_samples
        self.score_ttl = score_ttl
        self.trend_ttl = trend_ttl
        self._sleep = sleep

    @classmethod
    def from_config(cls, monitor, cache: TTLCache, pricer: Optional[ReferencePricer] = None) -> "VolatilityMonitor":
        return cls(
            cache=cache,
            pricer=pricer,
            sample_delay=monitor.volatility_sample_delay,
            trend_window=monitor.trend_window,
            trend_threshold=monitor.trend_threshold_percentage,
            score_samples=monitor.volatility_score_samples,
            score_ttl=monitor.volatility_score_ttl,
            trend_ttl=monitor.trend_ttl,
        )

    async def volatility(self, adapter: VenueAdapter, asset_in: Asset, asset_out: Asset,
                         amount_in: int, fee_tier: Optional[int] = None) -> float:
        """Percent spread between two samples of the same quote."""
        try:
            first = await adapter.quote(asset_in, asset_out, amount_in, fee_tier)
            if not isinstance(first, PoolQuote):
                return 0.0

            await self._sleep(self.sample_delay)

            second = await adapter.quote(asset_in, asset_out, amount_in, fee_tier)
            if not isinstance(second, PoolQuote):
                return 0.0
        except Exception as e:
            logger.debug(f"Volatility sampling failed on {adapter.name}: {e}")
            return 0.0

        # Same amount_in on both samples, so the price ratio reduces to the outputs
        return abs(second.amount_out - first.amount_out) / first.amount_out * 100

    async def volatility_score(self, asset: Asset) -> float:
        """0-100 score from the standard deviation of consecutive returns."""
        cache_key = f"volatility:{asset.address.lower()}"
        cached = self.cache.get(cache_key)
        if cached is not None:
            return cached

        prices = await self._sample_prices(asset)
        score = self.score_from_prices(prices)

        self.cache.set(cache_key, score, self.score_ttl)
        logger.debug(f"Volatility score {asset.symbol}: {score:.2f} ({len(prices)} samples)")
        return score

    @staticmethod
    def score_from_prices(prices: List[int]) -> float:
        if len(prices) < 2:
            return 0.0

        returns = [(current - previous) / previous for previous, current in zip(prices, prices[1:])]
        deviation = statistics.pstdev(returns) * math.sqrt(len(returns))
        return min(100.0, deviation * 1000)

    async def _sample_prices(self, asset: Asset) -> List[int]:
        prices = []
        if self.pricer is None:
            return prices

        for index in range(self.score_samples):
            try:
                price = await self.pricer.price(asset, self.pricer.usd_asset)
            except Exception as e:
                logger.debug(f"Price sample {index} failed for {asset.symbol}: {e}")
                price = None

            if price:
                prices.append(price)
            if index < self.score_samples - 1:
                await self._sleep(self.sample_delay)

        return prices

    async def trend(self, asset: Asset) -> Trend:
        cache_key = f"trend:{asset.address.lower()}"
        cached = self.cache.get(cache_key)
        if cached is not None:
            return cached

        label = await self._measure_trend(asset)
        self.cache.set(cache_key, label, self.trend_ttl)
        return label

    async def _measure_trend(self, asset: Asset) -> Trend:
        if self.pricer is None:
            return Trend.NEUTRAL

        try:
            start = await self.pricer.price(asset, self.pricer.usd_asset)
            if not start:
                return Trend.NEUTRAL

            await self._sleep(self.trend_window)

            end = await self.pricer.price(asset, self.pricer.usd_asset)
            if not end:
                return Trend.NEUTRAL
        except Exception as e:
            logger.debug(f"Trend sampling failed for {asset.symbol}: {e}")
            return Trend.NEUTRAL

        return self.classify(start, end, self.trend_threshold)

    @staticmethod
    def classify(start: int, end: int, threshold: float = 2.0) -> Trend:
        change = (end - start) / start * 100
        if change > threshold:
            return Trend.BULLISH
        if change < -threshold:
            return Trend.BEARISH
        return Trend.NEUTRAL
