# amm_arbitrage/engine_state.py
"""
Engine state shared by every tick.

Built once at startup and handed to each evaluation pass. Counters only
ever grow; nothing here is reset short of building a new state.
"""

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict

from .models import Opportunity
from .utils.cache import TTLCache


@dataclass
class EngineState:
    """Running counters and the shared TTL cache"""
    cache: TTLCache = field(default_factory=TTLCache)
    checks_performed: int = 0
    opportunities_found: int = 0
    trades_executed: int = 0
    trades_simulated: int = 0
    ticks_skipped: int = 0
    total_profit: Dict[str, Decimal] = field(default_factory=lambda: defaultdict(Decimal))
    start_time: datetime = field(default_factory=datetime.now)

    def record_check(self) -> int:
        self.checks_performed += 1
        return self.checks_performed

    def record_opportunities(self, count: int) -> None:
        self.opportunities_found += count

    def record_skipped_tick(self) -> None:
        self.ticks_skipped += 1

    def record_simulation(self) -> None:
        self.trades_simulated += 1

    def record_trade(self, opportunity: Opportunity) -> None:
        self.trades_executed += 1
        self.total_profit[opportunity.asset_in.symbol] += opportunity.net_profit_human

    @property
    def runtime_seconds(self) -> float:
        return (datetime.now() - self.start_time).total_seconds()

    @property
    def success_rate(self) -> float:
        """Opportunities per check, in percent"""
        if self.checks_performed == 0:
            return 0.0
        return self.opportunities_found / self.checks_performed * 100

    def to_dict(self) -> Dict[str, Any]:
        return {
            'checks_performed': self.checks_performed,
            'opportunities_found': self.opportunities_found,
            'trades_executed': self.trades_executed,
            'trades_simulated': self.trades_simulated,
            'ticks_skipped': self.ticks_skipped,
            'total_profit': {symbol: str(amount) for symbol, amount in self.total_profit.items()},
            'success_rate': self.success_rate,
            'runtime_seconds': self.runtime_seconds,
            'start_time': self.start_time.isoformat(),
            'cache': self.cache.stats(),
        }
