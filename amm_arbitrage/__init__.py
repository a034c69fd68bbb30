# amm_arbitrage/__init__.py
"""
AMM Arbitrage Engine Package

Core components for cross-venue AMM arbitrage evaluation:
- venues.py: constant-product and concentrated-liquidity quoting
- cost_model.py: flash-loan fee, gas and slippage in the input asset
- liquidity.py: USD pool depth
- volatility.py: volatility scores and trend labels
- opportunity_evaluator.py: per-tick evaluation of every combination
- execution_gate.py: auto-execution thresholds
- arbitrage_bot.py: scheduling, execution and the CLI

The evaluator, the contract interface and the bot read config.settings and
are imported from their modules directly.
"""

__version__ = "1.0.0"

from .cost_model import CostBreakdown, CostModel
from .engine_state import EngineState
from .exceptions import ArbitrageError, ConfigurationError, ConnectivityError, ExecutionError
from .execution_gate import ExecutionGate, GateDecision, should_auto_execute
from .liquidity import LiquidityAssessor
from .models import (
    Asset,
    NoQuote,
    Opportunity,
    PoolQuote,
    PoolReserves,
    TradingCombination,
    Trend,
    Venue,
    VenueKind,
)
from .pricing import ReferencePricer
from .utils.cache import TTLCache
from .venues import ConcentratedLiquidityAdapter, ConstantProductAdapter, VenueAdapter, build_adapter
from .volatility import VolatilityMonitor

__all__ = [
    # Data model
    "Asset",
    "Venue",
    "VenueKind",
    "TradingCombination",
    "PoolQuote",
    "PoolReserves",
    "NoQuote",
    "Opportunity",
    "Trend",

    # Engine components
    "VenueAdapter",
    "ConstantProductAdapter",
    "ConcentratedLiquidityAdapter",
    "build_adapter",
    "CostModel",
    "CostBreakdown",
    "ReferencePricer",
    "LiquidityAssessor",
    "VolatilityMonitor",
    "ExecutionGate",
    "GateDecision",
    "should_auto_execute",
    "EngineState",
    "TTLCache",

    # Errors
    "ArbitrageError",
    "ConfigurationError",
    "ConnectivityError",
    "ExecutionError",

    "__version__",
]
