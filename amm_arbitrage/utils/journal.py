# amm_arbitrage/utils/journal.py
"""
Append-only newline-delimited JSON journals.

Three files live under the log directory:
- opportunities.log: every reported opportunity
- trades.log: every submitted flash-loan trade
- simulations.log: dry-run and advanced-simulation outcomes
"""

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterator, Optional, Union

from .logger import get_logger

logger = get_logger(__name__)


class OpportunityJournal:

    OPPORTUNITIES = "opportunities.log"
    TRADES = "trades.log"
    SIMULATIONS = "simulations.log"

    def __init__(self, log_dir: Union[str, Path] = "logs"):
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)

    @property
    def opportunities_path(self) -> Path:
        return self.log_dir / self.OPPORTUNITIES

    @property
    def trades_path(self) -> Path:
        return self.log_dir / self.TRADES

    @property
    def simulations_path(self) -> Path:
        return self.log_dir / self.SIMULATIONS

    def record_opportunity(self, opportunity) -> Dict[str, Any]:
        record = opportunity.to_record()
        self._append(self.opportunities_path, record)
        return record

    def record_trade(self, opportunity, tx_hash: Optional[str], success: bool,
                     gas_used: Optional[int] = None, error: Optional[str] = None) -> Dict[str, Any]:
        record = {
            **opportunity.to_record(),
            'timestamp': datetime.now().isoformat(),
            'tx_hash': tx_hash,
            'success': success,
            'gas_used': gas_used,
            'error': error,
        }
        self._append(self.trades_path, record)
        return record

    def record_simulation(self, opportunity, status: str, min_profit_percentage) -> Dict[str, Any]:
        """status is 'profitable', 'unprofitable' or 'dry_run'"""
        record = {
            **opportunity.to_record(),
            'timestamp': datetime.now().isoformat(),
            'status': status,
            'min_profit_percentage': float(min_profit_percentage),
        }
        self._append(self.simulations_path, record)
        return record

    def _append(self, path: Path, record: Dict[str, Any]) -> None:
        try:
            with open(path, 'a', encoding='utf-8') as f:
                f.write(json.dumps(record, default=str) + "\n")
        except OSError as e:
            logger.error(f"Failed to write {path.name}: {e}")

    def read(self, path: Path) -> Iterator[Dict[str, Any]]:
        """Yield records from a journal, skipping malformed lines"""
        if not path.exists():
            return

        with open(path, 'r', encoding='utf-8') as f:
            for line_number, line in enumerate(f, 1):
                line = line.strip()
                if not line:
                    continue
                try:
                    yield json.loads(line)
                except json.JSONDecodeError:
                    logger.debug(f"Skipping malformed line {line_number} in {path.name}")

    def summarize(self) -> Dict[str, Any]:
        """
        Totals over the opportunities journal for the detailed report.

        Profit figures are denominated in each record's asset_in, so they
        are grouped by that symbol and never added across assets.
        """
        total = 0
        by_asset: Dict[str, Dict[str, Any]] = {}

        for record in self.read(self.opportunities_path):
            total += 1
            symbol = record.get('asset_in') or 'UNKNOWN'
            stats = by_asset.setdefault(symbol, {
                'opportunities': 0,
                'profitable': 0,
                'total_profit': 0.0,
                'roi_sum': 0.0,
            })
            stats['opportunities'] += 1

            profit = float(record.get('net_profit', 0) or 0)
            if profit > 0:
                stats['profitable'] += 1
                stats['total_profit'] += profit
                stats['roi_sum'] += float(record.get('profit_percentage', 0) or 0)

        for stats in by_asset.values():
            profitable = stats['profitable']
            roi_sum = stats.pop('roi_sum')
            stats['average_profit'] = stats['total_profit'] / profitable if profitable else 0.0
            stats['average_roi'] = roi_sum / profitable if profitable else 0.0

        return {
            'total_opportunities': total,
            'profitable_opportunities': sum(stats['profitable'] for stats in by_asset.values()),
            'by_asset': by_asset,
        }
