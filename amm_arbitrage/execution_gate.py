# amm_arbitrage/execution_gate.py
"""
Execution Gate - operator safety thresholds for auto-execution

A single-shot predicate per opportunity. Every check is conjunctive: one
failing threshold (or auto-execute switched off) keeps the opportunity in
report-only territory.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import List

from .models import Opportunity
from .utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class GateDecision:
    """Outcome of the gate for one opportunity"""
    approved: bool
    blockers: List[str] = field(default_factory=list)

    def __bool__(self) -> bool:
        return self.approved


class ExecutionGate:
    """
    Applies the five execution thresholds:

    - auto-execute enabled
    - profit % at or above the minimum (long-tail minimum for long-tail pairs)
    - liquidity at both venues at or above the minimum
    - current gas price at or below the maximum
    - volatility at or below the ceiling
    """

    def __init__(self, execution_config, trading_config):
        self.execution = execution_config
        self.trading = trading_config

    def evaluate(self, opportunity: Opportunity) -> GateDecision:
        blockers = []
        long_tail = opportunity.combination.involves_long_tail

        if not self.execution.auto_execute:
            blockers.append("Auto-execute disabled")

        min_profit = self.trading.min_profit_for(long_tail)
        if Decimal(str(opportunity.profit_percentage)) < min_profit:
            blockers.append(f"Profit {opportunity.profit_percentage:.4f}% below minimum {min_profit}%")

        min_liquidity = self.trading.min_liquidity_for(long_tail)
        for side, depth in (("buy", opportunity.liquidity_buy_usd), ("sell", opportunity.liquidity_sell_usd)):
            if depth < min_liquidity:
                blockers.append(f"{side.capitalize()} liquidity ${depth:,.0f} below minimum ${min_liquidity:,.0f}")

        if opportunity.gas_price_gwei > self.execution.max_gas_price_gwei:
            blockers.append(f"Gas {opportunity.gas_price_gwei:.4f} gwei above maximum "
                            f"{self.execution.max_gas_price_gwei} gwei")

        if Decimal(str(opportunity.volatility)) > self.trading.max_volatility_percentage:
            blockers.append(f"Volatility {opportunity.volatility:.2f}% above ceiling "
                            f"{self.trading.max_volatility_percentage}%")

        if blockers:
            logger.debug(f"Gate rejected {opportunity.combination.label}: {'; '.join(blockers)}")

        return GateDecision(approved=not blockers, blockers=blockers)

    def should_auto_execute(self, opportunity: Opportunity) -> bool:
        return self.evaluate(opportunity).approved


def should_auto_execute(opportunity: Opportunity, execution_config, trading_config) -> bool:
    """Functional form of ExecutionGate.should_auto_execute"""
    return ExecutionGate(execution_config, trading_config).should_auto_execute(opportunity)
