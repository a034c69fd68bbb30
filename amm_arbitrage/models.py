# amm_arbitrage/models.py
"""
Core data model for the opportunity evaluation engine.

All on-chain amounts are plain ints in the asset's base units. Decimal is
used for USD figures and human-readable conversions; float only appears
in reported percentages.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Union


class VenueKind(Enum):
    """Protocol family of a liquidity venue."""
    CONSTANT_PRODUCT = "constant-product"
    CONCENTRATED_LIQUIDITY = "concentrated-liquidity"


class Trend(str, Enum):
    BULLISH = "BULLISH"
    BEARISH = "BEARISH"
    NEUTRAL = "NEUTRAL"


@dataclass(frozen=True)
class Asset:
    """A fungible token loaded from static configuration."""
    address: str
    symbol: str
    decimals: int
    is_stable: bool = False
    is_major: bool = True

    @property
    def is_long_tail(self) -> bool:
        return not self.is_major

    @property
    def unit(self) -> int:
        """One whole token in base units."""
        return 10 ** self.decimals

    def to_base_units(self, amount: Union[Decimal, int, str]) -> int:
        return int(Decimal(str(amount)) * self.unit)

    def from_base_units(self, amount: int) -> Decimal:
        return Decimal(amount) / Decimal(self.unit)

    def same_as(self, address: str) -> bool:
        return self.address.lower() == address.lower()


@dataclass(frozen=True)
class Venue:
    """
    A liquidity source.

    Constant-product venues need a router (and a factory for reserve
    reads and liquidity); concentrated-liquidity venues need a quoter,
    a factory and at least one fee tier.
    """
    name: str
    kind: VenueKind
    router: Optional[str] = None
    factory: Optional[str] = None
    quoter: Optional[str] = None
    fee_tiers: Tuple[int, ...] = ()
    quote_via: str = "router"  # "router" or "reserves", constant-product only
    fee_numerator: int = 997
    fee_denominator: int = 1000

    @property
    def is_concentrated(self) -> bool:
        return self.kind is VenueKind.CONCENTRATED_LIQUIDITY


@dataclass(frozen=True)
class TradingCombination:
    """Buy asset_out with asset_in on buy_venue, sell it back on sell_venue."""
    asset_in: Asset
    asset_out: Asset
    buy_venue: Venue
    sell_venue: Venue

    @property
    def pair(self) -> str:
        return f"{self.asset_in.symbol}/{self.asset_out.symbol}"

    @property
    def label(self) -> str:
        return f"{self.pair} {self.buy_venue.name}->{self.sell_venue.name}"

    @property
    def involves_long_tail(self) -> bool:
        return self.asset_in.is_long_tail or self.asset_out.is_long_tail

    @property
    def long_tail_asset(self) -> Optional[Asset]:
        """The asset whose trend gets tracked, preferring the bought side."""
        if self.asset_out.is_long_tail:
            return self.asset_out
        if self.asset_in.is_long_tail:
            return self.asset_in
        return None


@dataclass(frozen=True)
class PoolQuote:
    """Point-in-time output of one venue for one (asset_in, asset_out, amount_in)."""
    venue: str
    asset_in: Asset
    asset_out: Asset
    amount_in: int
    amount_out: int
    fee_tier: Optional[int] = None
    source: str = "router"


@dataclass(frozen=True)
class NoQuote:
    """Sentinel for a failed, reverted or empty quote. Falsy."""
    venue: str
    reason: str

    def __bool__(self) -> bool:
        return False


QuoteResult = Union[PoolQuote, NoQuote]


@dataclass(frozen=True)
class PoolReserves:
    """Pool balances oriented to the (asset_a, asset_b) order of the query."""
    pool_address: str
    reserve_a: int
    reserve_b: int


@dataclass(frozen=True)
class Opportunity:
    """Evaluated outcome of one trading combination at one notional amount."""
    combination: TradingCombination
    amount_in: int
    amount_intermediate: int
    amount_back: int
    min_amount_out: int
    gas_cost: int
    flash_loan_fee: int
    net_profit: int
    profit_percentage: float
    liquidity_buy_usd: Decimal
    liquidity_sell_usd: Decimal
    gas_price_wei: int
    gas_units: int
    volatility: float
    trend: Optional[Trend] = None
    buy_fee_tier: Optional[int] = None
    sell_fee_tier: Optional[int] = None
    volatility_score: Optional[float] = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def asset_in(self) -> Asset:
        return self.combination.asset_in

    @property
    def asset_out(self) -> Asset:
        return self.combination.asset_out

    @property
    def gas_price_gwei(self) -> Decimal:
        return Decimal(self.gas_price_wei) / Decimal(10 ** 9)

    @property
    def is_profitable(self) -> bool:
        return self.net_profit > 0

    @property
    def net_profit_human(self) -> Decimal:
        return self.asset_in.from_base_units(self.net_profit)

    def to_record(self) -> Dict[str, Any]:
        """Flat, JSON-serializable view in human units."""
        asset_in = self.asset_in
        asset_out = self.asset_out
        return {
            'timestamp': self.timestamp.isoformat(),
            'asset_in': asset_in.symbol,
            'asset_out': asset_out.symbol,
            'buy_venue': self.combination.buy_venue.name,
            'sell_venue': self.combination.sell_venue.name,
            'amount_in': float(asset_in.from_base_units(self.amount_in)),
            'amount_intermediate': float(asset_out.from_base_units(self.amount_intermediate)),
            'amount_back': float(asset_in.from_base_units(self.amount_back)),
            'min_amount_out': float(asset_in.from_base_units(self.min_amount_out)),
            'gas_cost': float(asset_in.from_base_units(self.gas_cost)),
            'flash_loan_fee': float(asset_in.from_base_units(self.flash_loan_fee)),
            'net_profit': float(asset_in.from_base_units(self.net_profit)),
            'profit_percentage': self.profit_percentage,
            'liquidity_buy_usd': float(self.liquidity_buy_usd),
            'liquidity_sell_usd': float(self.liquidity_sell_usd),
            'gas_price_gwei': float(self.gas_price_gwei),
            'gas_units': self.gas_units,
            'volatility': self.volatility,
            'volatility_score': self.volatility_score,
            'trend': self.trend.value if self.trend else None,
            'buy_fee_tier': self.buy_fee_tier,
            'sell_fee_tier': self.sell_fee_tier,
        }
