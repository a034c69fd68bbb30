# amm_arbitrage/pricing.py
"""
Reference prices from a single designated venue.

Used to convert gas into the trade asset, pool reserves into USD, and to
sample prices for volatility scores and trend labels. Prices are fetched
fresh on every call.
"""

from decimal import Decimal
from typing import Optional

from .models import Asset, PoolQuote
from .venues import VenueAdapter


class ReferencePricer:
    """Prices one whole unit of an asset through the reference venue."""

    def __init__(self, adapter: VenueAdapter, usd_asset: Asset):
        self.adapter = adapter
        self.usd_asset = usd_asset

    async def price(self, asset: Asset, quote_asset: Asset) -> Optional[int]:
        """quote_asset base units received for one whole asset, or None."""
        if asset.same_as(quote_asset.address):
            return quote_asset.unit

        result = await self.adapter.quote(asset, quote_asset, asset.unit)
        if isinstance(result, PoolQuote) and result.amount_out > 0:
            return result.amount_out
        return None

    async def usd_price(self, asset: Asset) -> Optional[Decimal]:
        if asset.is_stable:
            return Decimal(1)

        raw = await self.price(asset, self.usd_asset)
        if raw is None:
            return None
        return self.usd_asset.from_base_units(raw)

    async def usd_value(self, asset: Asset, amount: int) -> Optional[Decimal]:
        """USD value of a base-unit amount, None when the asset cannot be priced."""
        price = await self.usd_price(asset)
        if price is None:
            return None
        return asset.from_base_units(amount) * price
