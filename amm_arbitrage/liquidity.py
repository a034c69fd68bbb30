# amm_arbitrage/liquidity.py
"""
Liquidity Assessor - USD depth of a venue's pool for an asset pair.

Depth is the USD value of both reserves. Stable sides count at face value,
the other side is priced through the reference venue at call time. Pairs
touching a long-tail asset get a flat discount. Any failure reads as zero
depth, which the execution gate treats as too thin.
"""

from decimal import Decimal
from typing import Optional

from .models import Asset
from .pricing import ReferencePricer
from .utils.logger import get_logger
from .venues import VenueAdapter

logger = get_logger(__name__)

ZERO = Decimal(0)


class LiquidityAssessor:

    def __init__(self, pricer: ReferencePricer, long_tail_discount: Decimal = Decimal("0.10")):
        self.pricer = pricer
        self.long_tail_discount = Decimal(str(long_tail_discount))

    async def assess(self, adapter: VenueAdapter, asset_a: Asset, asset_b: Asset,
                     fee_tier: Optional[int] = None) -> Decimal:
        """USD depth of the (asset_a, asset_b) pool on the adapter's venue."""
        try:
            reserves = await adapter.pool_reserves(asset_a, asset_b, fee_tier)
        except Exception as e:
            logger.debug(f"Reserve lookup failed on {adapter.name} for {asset_a.symbol}/{asset_b.symbol}: {e}")
            return ZERO

        if reserves is None:
            logger.debug(f"No {asset_a.symbol}/{asset_b.symbol} pool on {adapter.name}")
            return ZERO

        value_a = await self._side_value(asset_a, reserves.reserve_a)
        value_b = await self._side_value(asset_b, reserves.reserve_b)
        depth = value_a + value_b

        if asset_a.is_long_tail or asset_b.is_long_tail:
            depth = depth * (1 - self.long_tail_discount)

        return depth

    async def _side_value(self, asset: Asset, reserve: int) -> Decimal:
        if reserve <= 0:
            return ZERO

        try:
            value = await self.pricer.usd_value(asset, reserve)
        except Exception as e:
            logger.debug(f"USD pricing failed for {asset.symbol}: {e}")
            return ZERO

        if value is None:
            # An unpriceable side adds nothing rather than a guess
            logger.debug(f"No USD price for {asset.symbol}, counting its reserve as zero")
            return ZERO
        return value
