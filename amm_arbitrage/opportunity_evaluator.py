# Cross-venue opportunity evaluation
# amm_arbitrage/opportunity_evaluator.py
"""
Opportunity Evaluator

Walks every configured trading combination at every notional amount,
quotes both legs, prices the round trip through the cost model and
annotates the result with liquidity, volatility and trend. Combinations
and amounts are evaluated in configuration order, one query at a time.
"""

from decimal import Decimal
from typing import Dict, List, Optional

from web3 import Web3

from config.settings import Settings
from .cost_model import CostModel
from .engine_state import EngineState
from .liquidity import LiquidityAssessor
from .models import NoQuote, Opportunity, Trend, TradingCombination
from .utils.logger import get_logger
from .venues import VenueAdapter
from .volatility import VolatilityMonitor

logger = get_logger(__name__)


class OpportunityEvaluator:
    """
    Produces profitable Opportunity records for one tick.

    Each combination is short-circuited at the first failed leg,
    excessive volatility, missing gas pricing or a loss beyond the
    configured ceiling. Only records with positive net profit are
    returned; ranking is left to the caller.
    """

    def __init__(self,
                 settings: Settings,
                 w3: Web3,
                 adapters: Dict[str, VenueAdapter],
                 cost_model: CostModel,
                 liquidity: LiquidityAssessor,
                 volatility: VolatilityMonitor):
        self.settings = settings
        self.w3 = w3
        self.adapters = adapters
        self.cost_model = cost_model
        self.liquidity = liquidity
        self.volatility = volatility

        self.trading = settings.trading
        self.monitor = settings.monitor

        logger.info(f"OpportunityEvaluator initialized: {len(settings.combinations)} combinations x "
                    f"{len(self.trading.notional_amounts)} amounts")

    async def tick(self, state: EngineState) -> List[Opportunity]:
        """One full evaluation pass over every combination and amount."""
        check_number = state.record_check()
        opportunities = []

        for combination in self.settings.combinations:
            for amount in self.trading.notional_amounts:
                opportunity = await self.evaluate_combination(combination, amount)
                if opportunity is not None:
                    opportunities.append(opportunity)

        state.record_opportunities(len(opportunities))

        if opportunities:
            logger.info(f"🎯 Check #{check_number}: {len(opportunities)} profitable opportunities")
        else:
            logger.debug(f"Check #{check_number}: no opportunities")

        return opportunities

    async def evaluate_combination(self, combination: TradingCombination,
                                   amount: Decimal) -> Optional[Opportunity]:
        """
        Evaluate one combination at one notional amount.

        Args:
            combination: Asset pair and venue pair
            amount: Notional in human units of the input asset

        Returns:
            A profitable Opportunity, or None when the combination is skipped
        """
        asset_in = combination.asset_in
        asset_out = combination.asset_out
        long_tail = combination.involves_long_tail
        amount_in = asset_in.to_base_units(amount)
        label = f"{combination.label} @ {amount} {asset_in.symbol}"

        buy_adapter = self.adapters.get(combination.buy_venue.name)
        sell_adapter = self.adapters.get(combination.sell_venue.name)
        if buy_adapter is None or sell_adapter is None:
            logger.warning(f"⚠️ No adapter for {combination.label}, skipping")
            return None

        # 1. Buy leg
        buy_quote = await buy_adapter.quote(asset_in, asset_out, amount_in)
        if isinstance(buy_quote, NoQuote):
            logger.debug(f"{label}: buy leg unavailable ({buy_quote.reason})")
            return None

        # 2. Sell leg
        sell_quote = await sell_adapter.quote(asset_out, asset_in, buy_quote.amount_out)
        if isinstance(sell_quote, NoQuote):
            logger.debug(f"{label}: sell leg unavailable ({sell_quote.reason})")
            return None

        # 3. Volatility on the buy leg
        volatility = await self.volatility.volatility(
            buy_adapter, asset_in, asset_out, amount_in, buy_quote.fee_tier
        )
        if Decimal(str(volatility)) > self.trading.max_volatility_percentage:
            logger.warning(f"⚠️ {label}: volatility {volatility:.2f}% above "
                           f"{self.trading.max_volatility_percentage}%, skipping")
            return None

        # 4. Costs
        gas_price_wei = self._gas_price()
        if gas_price_wei is None:
            logger.debug(f"{label}: gas price unavailable")
            return None

        native_price = await self.cost_model.gas_asset_price(asset_in)
        if native_price is None:
            logger.debug(f"{label}: gas asset cannot be priced in {asset_in.symbol}")
            return None

        gas_units = self.cost_model.estimate_gas_units(asset_in, amount_in)
        costs = self.cost_model.evaluate(
            amount_in=amount_in,
            raw_amount_out=sell_quote.amount_out,
            slippage_tolerance=self.trading.slippage_for(long_tail),
            gas_price_wei=gas_price_wei,
            gas_units=gas_units,
            native_price_in_asset=native_price,
        )

        # 5. Loss ceiling
        if costs.profit_percentage < -float(self.trading.max_loss_percentage):
            logger.debug(f"{label}: loss {costs.profit_percentage:.4f}% beyond "
                         f"-{self.trading.max_loss_percentage}%")
            return None

        # 6. Annotations
        liquidity_buy = await self.liquidity.assess(buy_adapter, asset_in, asset_out, buy_quote.fee_tier)
        liquidity_sell = await self.liquidity.assess(sell_adapter, asset_out, asset_in, sell_quote.fee_tier)

        trend: Optional[Trend] = None
        volatility_score: Optional[float] = None
        if long_tail:
            tracked = combination.long_tail_asset
            trend = await self.volatility.trend(tracked)
            if self.monitor.score_long_tail_volatility:
                volatility_score = await self.volatility.volatility_score(tracked)

        # 7. Assemble
        opportunity = Opportunity(
            combination=combination,
            amount_in=amount_in,
            amount_intermediate=buy_quote.amount_out,
            amount_back=sell_quote.amount_out,
            min_amount_out=costs.min_amount_out,
            gas_cost=costs.gas_cost,
            flash_loan_fee=costs.flash_loan_fee,
            net_profit=costs.net_profit,
            profit_percentage=costs.profit_percentage,
            liquidity_buy_usd=liquidity_buy,
            liquidity_sell_usd=liquidity_sell,
            gas_price_wei=gas_price_wei,
            gas_units=gas_units,
            volatility=volatility,
            trend=trend,
            buy_fee_tier=buy_quote.fee_tier,
            sell_fee_tier=sell_quote.fee_tier,
            volatility_score=volatility_score,
        )

        if not opportunity.is_profitable:
            logger.debug(f"{label}: net {opportunity.net_profit_human} {asset_in.symbol}, not profitable")
            return None

        logger.info(f"💰 {label}: +{opportunity.net_profit_human:.6f} {asset_in.symbol} "
                    f"({opportunity.profit_percentage:.4f}%)")
        return opportunity

    def _gas_price(self) -> Optional[int]:
        try:
            return int(self.w3.eth.gas_price)
        except Exception as e:
            logger.warning(f"⚠️ Failed to read gas price: {e}")
            return None
