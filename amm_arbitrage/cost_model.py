# amm_arbitrage/cost_model.py
"""
Cost Model - flash-loan fee, gas and slippage in the trade's input asset

Every amount is an int in base units. Rates arrive as Decimal and are
turned into exact integer fractions before they touch an amount; the
only float produced here is the reported profit percentage.
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_FLOOR
from typing import Optional, Tuple, Union

from .models import Asset
from .utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_FLASH_LOAN_FEE_RATE = Decimal("0.0009")  # 9 / 10000
DEFAULT_GAS_UNITS = 500000
DEFAULT_GAS_SAFETY_MARGIN = Decimal("1.2")  # 120 / 100
SLIPPAGE_SCALE = 1000


def _fraction(rate: Union[Decimal, str, int]) -> Tuple[int, int]:
    return Decimal(str(rate)).as_integer_ratio()


def flash_loan_fee(amount_in: int, fee_rate: Union[Decimal, str] = DEFAULT_FLASH_LOAN_FEE_RATE) -> int:
    """amount_in * fee_rate, floored."""
    numerator, denominator = _fraction(fee_rate)
    return amount_in * numerator // denominator


def apply_slippage(amount: int, tolerance: Union[Decimal, str]) -> int:
    """
    Minimum acceptable output for a raw output and a slippage tolerance.

    The tolerance is truncated to thousandths first:
    amount * (1000 - floor(1000 * t)) // 1000
    """
    thousandths = int((Decimal(str(tolerance)) * SLIPPAGE_SCALE).to_integral_value(rounding=ROUND_FLOOR))
    return amount * (SLIPPAGE_SCALE - thousandths) // SLIPPAGE_SCALE


def gas_units_with_margin(estimate: int, margin: Union[Decimal, str] = DEFAULT_GAS_SAFETY_MARGIN) -> int:
    numerator, denominator = _fraction(margin)
    return estimate * numerator // denominator


def gas_cost_in_asset(gas_price_wei: int, gas_units: int, native_price_in_asset: int,
                      native_decimals: int = 18) -> int:
    """
    Gas cost converted from native wei into asset_in base units.

    native_price_in_asset is the asset_in base-unit amount one whole
    native token is worth.
    """
    return gas_price_wei * gas_units * native_price_in_asset // (10 ** native_decimals)


def net_profit(min_amount_out: int, amount_in: int, gas_cost: int, fee: int) -> int:
    return min_amount_out - amount_in - gas_cost - fee


def profit_percentage(profit: int, amount_in: int) -> float:
    """Profit relative to the input amount, in percent. Reporting boundary."""
    if amount_in <= 0:
        return 0.0
    return profit / amount_in * 100


@dataclass(frozen=True)
class CostBreakdown:
    amount_in: int
    raw_amount_out: int
    min_amount_out: int
    gas_price_wei: int
    gas_units: int
    gas_cost: int
    flash_loan_fee: int
    net_profit: int
    profit_percentage: float

    @property
    def total_cost(self) -> int:
        return self.gas_cost + self.flash_loan_fee


class CostModel:
    """
    Prices a round trip: slippage haircut, flash-loan fee and gas.

    The settlement collaborator (optional) supplies raw gas estimates for
    requestFlashLoan; without it, or when estimation fails, the fixed
    fallback gas figure is used. The reference pricer (optional) prices
    one whole gas-asset token in asset_in.
    """

    def __init__(self,
                 flash_loan_fee_rate: Decimal = DEFAULT_FLASH_LOAN_FEE_RATE,
                 fallback_gas_units: int = DEFAULT_GAS_UNITS,
                 gas_safety_margin: Decimal = DEFAULT_GAS_SAFETY_MARGIN,
                 settlement=None,
                 pricer=None,
                 gas_asset: Optional[Asset] = None,
                 gas_asset_fallback_price_usd: Optional[Decimal] = None,
                 native_decimals: int = 18):
        self.flash_loan_fee_rate = Decimal(str(flash_loan_fee_rate))
        self.fallback_gas_units = fallback_gas_units
        self.gas_safety_margin = Decimal(str(gas_safety_margin))
        self.settlement = settlement
        self.pricer = pricer
        self.gas_asset = gas_asset
        self.gas_asset_fallback_price_usd = gas_asset_fallback_price_usd
        self.native_decimals = native_decimals

    @classmethod
    def from_config(cls, trading, settlement=None, pricer=None,
                    gas_asset: Optional[Asset] = None, native_decimals: int = 18) -> "CostModel":
        return cls(
            flash_loan_fee_rate=trading.flash_loan_fee_rate,
            fallback_gas_units=trading.fallback_gas_units,
            gas_safety_margin=trading.gas_safety_margin,
            settlement=settlement,
            pricer=pricer,
            gas_asset=gas_asset,
            gas_asset_fallback_price_usd=trading.gas_asset_fallback_price_usd,
            native_decimals=native_decimals,
        )

    def cost(self, amount_in: int, gas_price_wei: int, gas_units: int, native_price_in_asset: int,
             fee_rate: Optional[Decimal] = None) -> int:
        """Total cost in asset_in base units: gas plus flash-loan fee."""
        rate = self.flash_loan_fee_rate if fee_rate is None else fee_rate
        gas = gas_cost_in_asset(gas_price_wei, gas_units, native_price_in_asset, self.native_decimals)
        return gas + flash_loan_fee(amount_in, rate)

    def evaluate(self, amount_in: int, raw_amount_out: int, slippage_tolerance: Decimal,
                 gas_price_wei: int, gas_units: int, native_price_in_asset: int) -> CostBreakdown:
        min_amount_out = apply_slippage(raw_amount_out, slippage_tolerance)
        gas_cost = gas_cost_in_asset(gas_price_wei, gas_units, native_price_in_asset, self.native_decimals)
        fee = flash_loan_fee(amount_in, self.flash_loan_fee_rate)
        profit = net_profit(min_amount_out, amount_in, gas_cost, fee)

        return CostBreakdown(
            amount_in=amount_in,
            raw_amount_out=raw_amount_out,
            min_amount_out=min_amount_out,
            gas_price_wei=gas_price_wei,
            gas_units=gas_units,
            gas_cost=gas_cost,
            flash_loan_fee=fee,
            net_profit=profit,
            profit_percentage=profit_percentage(profit, amount_in),
        )

    def estimate_gas_units(self, asset_in: Asset, amount_in: int) -> int:
        """Settlement gas estimate plus safety margin, or the fixed fallback."""
        if self.settlement is None:
            return self.fallback_gas_units

        try:
            estimate = self.settlement.estimate_flash_loan_gas(asset_in.address, amount_in)
        except Exception as e:
            logger.debug(f"Gas estimation failed for {asset_in.symbol}, using fallback: {e}")
            return self.fallback_gas_units

        if not estimate or estimate <= 0:
            return self.fallback_gas_units

        return gas_units_with_margin(int(estimate), self.gas_safety_margin)

    async def gas_asset_price(self, asset_in: Asset) -> Optional[int]:
        """
        asset_in base units per one whole gas-asset token.

        Returns None when no price can be established; the caller skips
        the combination rather than guessing.
        """
        if self.gas_asset is None:
            return None

        if asset_in.same_as(self.gas_asset.address):
            return asset_in.unit

        if self.pricer is not None:
            price = await self.pricer.price(self.gas_asset, asset_in)
            if price is not None:
                return price

        if asset_in.is_stable and self.gas_asset_fallback_price_usd:
            logger.warning(
                f"⚠️ Reference price for {self.gas_asset.symbol}->{asset_in.symbol} unavailable, "
                f"using fallback ${self.gas_asset_fallback_price_usd}"
            )
            return int(self.gas_asset_fallback_price_usd * asset_in.unit)

        logger.debug(f"No gas-asset price for {asset_in.symbol}")
        return None
