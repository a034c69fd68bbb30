# Pool discovery
# scripts/discover_pairs.py

"""
Pair Discovery Script
Finds which configured asset pairs have pools on which venues, with USD depth,
and prints trading combinations for pairs listed on two or more venues
"""

import asyncio
import itertools
import sys
from decimal import Decimal
from pathlib import Path
from typing import Dict, List, Tuple

# Add project root to path
sys.path.append(str(Path(__file__).parent.parent))

from web3 import Web3

from amm_arbitrage.exceptions import ConfigurationError
from amm_arbitrage.liquidity import LiquidityAssessor
from amm_arbitrage.models import Asset
from amm_arbitrage.pricing import ReferencePricer
from amm_arbitrage.utils.helpers import truncate_address
from amm_arbitrage.utils.logger import get_logger
from amm_arbitrage.venues import VenueAdapter, build_adapters
from config.settings import Settings, load_settings

logger = get_logger('discover_pairs')

PairKey = Tuple[str, str]


async def discover(settings: Settings, adapters: Dict[str, VenueAdapter],
                   liquidity: LiquidityAssessor) -> Dict[PairKey, Dict[str, Decimal]]:
    """Pair -> {venue: USD depth} for every pair with at least one pool"""
    found: Dict[PairKey, Dict[str, Decimal]] = {}
    assets: List[Asset] = list(settings.assets.values())

    for asset_a, asset_b in itertools.combinations(assets, 2):
        key = (asset_a.symbol, asset_b.symbol)
        for name, adapter in adapters.items():
            pool = await adapter.pool_address(asset_a, asset_b)
            if pool is None:
                continue

            depth = await liquidity.assess(adapter, asset_a, asset_b)
            found.setdefault(key, {})[name] = depth
            logger.info(f"✅ {asset_a.symbol}/{asset_b.symbol} on {name}: "
                        f"{truncate_address(pool)} (${depth:,.0f})")

    return found


def candidate_combinations(found: Dict[PairKey, Dict[str, Decimal]]) -> List[str]:
    """IN:OUT:BUY:SELL entries for pairs present on two or more venues"""
    entries = []
    for (symbol_a, symbol_b), venues in found.items():
        if len(venues) < 2:
            continue
        for buy, sell in itertools.permutations(sorted(venues), 2):
            entries.append(f"{symbol_a}:{symbol_b}:{buy}:{sell}")
    return entries


async def main() -> int:
    try:
        settings = load_settings()
    except ConfigurationError as e:
        logger.error(f"❌ {e}")
        return 2

    w3 = Web3(Web3.HTTPProvider(settings.network.rpc_url))
    adapters = build_adapters(settings.venues.values(), w3)
    pricer = ReferencePricer(adapters[settings.trading.reference_venue], settings.usd_reference_asset)
    liquidity = LiquidityAssessor(pricer, settings.trading.long_tail_liquidity_discount)

    logger.info(f"🔍 Scanning {len(settings.assets)} assets across {len(adapters)} venues...")
    found = await discover(settings, adapters, liquidity)

    entries = candidate_combinations(found)
    if not entries:
        logger.warning("⚠️ No pair is listed on more than one venue")
        return 0

    logger.info(f"🎯 {len(entries)} candidate combinations:")
    print(f"TRADING_COMBINATIONS={','.join(entries)}")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
