# amm_arbitrage/arbitrage_bot.py
"""
Main AMM Arbitrage Engine
Orchestrates evaluation ticks, the execution gate, journals and alerts
"""

import argparse
import asyncio
import contextlib
import sys
from decimal import Decimal
from typing import Any, Dict, List, Optional

from web3 import Web3

from config.settings import Settings, load_settings
from .contract_interface import ContractInterface, TradeResult
from .cost_model import CostModel
from .engine_state import EngineState
from .exceptions import ConfigurationError, ConnectivityError, ExecutionError
from .execution_gate import ExecutionGate
from .liquidity import LiquidityAssessor
from .models import NoQuote, Opportunity
from .opportunity_evaluator import OpportunityEvaluator
from .pricing import ReferencePricer
from .utils.cache import TTLCache
from .utils.helpers import format_duration, truncate_address
from .utils.journal import OpportunityJournal
from .utils.logger import enable_file_logging, get_logger, set_log_level
from .utils.notifications import NotificationConfig, NotificationManager
from .venues import ERC20_ABI, build_adapters
from .volatility import VolatilityMonitor

logger = get_logger(__name__)


class ArbitrageBot:
    """
    Main AMM Arbitrage Engine

    Features:
    - Single-pass check and continuous monitoring
    - Single-flight tick scheduling on a fixed cadence
    - Execution gate with dry-run simulation
    - NDJSON journals and Discord/Telegram alerts
    """

    def __init__(self, settings: Settings, w3: Optional[Web3] = None, state: Optional[EngineState] = None):
        self.settings = settings
        self.running = False
        self._tick_task: Optional[asyncio.Task] = None

        self.w3 = w3 or Web3(Web3.HTTPProvider(settings.network.rpc_url))
        self.state = state or EngineState(cache=TTLCache(default_ttl=settings.monitor.volatility_score_ttl))

        # Components
        self.adapters = build_adapters(settings.venues.values(), self.w3)
        self.contract_interface = ContractInterface(settings, self.w3)
        self.pricer = ReferencePricer(self.adapters[settings.trading.reference_venue], settings.usd_reference_asset)
        self.cost_model = CostModel.from_config(
            settings.trading,
            settlement=self.contract_interface if self.contract_interface.contract is not None else None,
            pricer=self.pricer,
            gas_asset=settings.gas_asset,
            native_decimals=settings.network.native_decimals,
        )
        self.liquidity = LiquidityAssessor(self.pricer, settings.trading.long_tail_liquidity_discount)
        self.volatility = VolatilityMonitor.from_config(settings.monitor, self.state.cache, self.pricer)
        self.evaluator = OpportunityEvaluator(
            settings, self.w3, self.adapters, self.cost_model, self.liquidity, self.volatility
        )
        self.gate = ExecutionGate(settings.execution, settings.trading)
        self.journal = OpportunityJournal(settings.monitoring.log_dir)
        self.notification_manager = NotificationManager(
            NotificationConfig.from_monitoring(settings.monitoring, dry_run=settings.execution.dry_run)
        )

        logger.info("AMM Arbitrage Engine initialized successfully")

    @property
    def tick_in_flight(self) -> bool:
        return self._tick_task is not None and not self._tick_task.done()

    # Lifecycle
    async def test_connectivity(self) -> Dict[str, Any]:
        """
        Verify the RPC node, every venue and the settlement contract.

        Raises:
            ConnectivityError: node unreachable or no venue returns a quote
            ConfigurationError: a token's on-chain decimals differ from the registry
        """
        logger.info("🔌 Testing connectivity...")
        results: Dict[str, Any] = {'venues': {}}

        try:
            results['block_number'] = self.w3.eth.block_number
        except Exception as e:
            raise ConnectivityError(f"RPC node unreachable: {e}") from e
        logger.info(f"✅ Connected to {self.settings.network.name} at block {results['block_number']}")

        gas_asset = self.settings.gas_asset
        usd_asset = self.settings.usd_reference_asset
        for name, adapter in self.adapters.items():
            quote = await adapter.quote(gas_asset, usd_asset, gas_asset.unit)
            if isinstance(quote, NoQuote):
                logger.warning(f"❌ {name}: {quote.reason}")
                results['venues'][name] = None
            else:
                price = usd_asset.from_base_units(quote.amount_out)
                logger.info(f"✅ {name}: 1 {gas_asset.symbol} = {price:.2f} {usd_asset.symbol}")
                results['venues'][name] = price

        if not any(price is not None for price in results['venues'].values()):
            raise ConnectivityError("No venue returned a quote")

        results['tokens'] = self.verify_tokens()

        if self.contract_interface.contract is not None:
            owner = self.contract_interface.owner()
            results['settlement_owner'] = owner
            results['is_owner'] = self.contract_interface.is_owner()
            results['settlement_balance'] = self.contract_interface.get_balance(gas_asset.address)
            if owner is None:
                logger.warning("⚠️ Settlement contract did not answer owner()")
            elif not results['is_owner']:
                logger.warning(f"⚠️ Account is not the settlement owner ({truncate_address(owner)})")
            else:
                logger.info(f"✅ Settlement contract owned by {truncate_address(owner)}")

        if self.contract_interface.account is not None:
            balance = self.contract_interface.get_native_balance()
            results['account_balance'] = balance
            logger.info(f"💳 Signer balance: {self.w3.from_wei(balance, 'ether')} "
                        f"{self.settings.network.currency_symbol}")

        return results

    def verify_tokens(self) -> Dict[str, Optional[int]]:
        """
        Compare on-chain ERC20 decimals() and symbol() with the registry.

        Returns:
            Symbol -> on-chain decimals, None where the token did not answer

        Raises:
            ConfigurationError: a token's on-chain decimals differ from the registry
        """
        assets = {self.settings.gas_asset.symbol: self.settings.gas_asset,
                  self.settings.usd_reference_asset.symbol: self.settings.usd_reference_asset}
        for combination in self.settings.combinations:
            assets[combination.asset_in.symbol] = combination.asset_in
            assets[combination.asset_out.symbol] = combination.asset_out

        verified: Dict[str, Optional[int]] = {}
        mismatches = []
        for symbol, asset in assets.items():
            token = self.w3.eth.contract(address=Web3.to_checksum_address(asset.address), abi=ERC20_ABI)
            try:
                decimals = int(token.functions.decimals().call())
                onchain_symbol = token.functions.symbol().call()
            except Exception as e:
                logger.warning(f"⚠️ Could not verify {symbol} at {truncate_address(asset.address)}: {e}")
                verified[symbol] = None
                continue

            verified[symbol] = decimals
            if decimals != asset.decimals:
                mismatches.append(f"{symbol} has {decimals} decimals on-chain, {asset.decimals} configured")
                continue
            if onchain_symbol != symbol:
                logger.warning(f"⚠️ {symbol} reports symbol {onchain_symbol!r} on-chain")
            logger.info(f"✅ {symbol}: {decimals} decimals")

        if mismatches:
            raise ConfigurationError(f"Token registry mismatch: {'; '.join(mismatches)}")
        return verified

    async def check_once(self) -> List[Opportunity]:
        """Connectivity test, one evaluation pass and a detailed report"""
        await self.test_connectivity()

        opportunities = await self.evaluator.tick(self.state)
        await self._handle_opportunities(opportunities)

        if not opportunities:
            logger.info("No profitable opportunities this pass")
        self.display_detailed_report()
        return opportunities

    async def start(self):
        """Start continuous monitoring"""
        if self.running:
            logger.warning("Engine is already running")
            return

        self.running = True
        self._display_banner()

        try:
            await self.test_connectivity()
        except (ConnectivityError, ConfigurationError) as e:
            logger.error(f"❌ Startup check failed: {e}")
            await self.notification_manager.send_error_alert("Startup failed", str(e))
            self.running = False
            await self.notification_manager.close()
            raise

        await self.notification_manager.send_status_alert(
            "Engine Started",
            f"Monitoring {len(self.settings.combinations)} combinations every {self.settings.tick_interval():g}s"
        )

        try:
            await self._monitoring_loop()
        finally:
            await self.stop()

    async def stop(self):
        """Stop monitoring, cancel the in-flight tick and send the session report"""
        was_running = self.running
        self.running = False

        if self.tick_in_flight:
            self._tick_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._tick_task

        if was_running:
            logger.info("Stopping AMM Arbitrage Engine...")
            self.display_stats()
            await self._send_session_report()

        try:
            await self.notification_manager.close()
        except Exception as e:
            logger.warning(f"Error closing HTTP sessions: {e}")

    # Scheduling
    async def _monitoring_loop(self):
        """Fixed wall-clock cadence; a tick still running causes the next one to be skipped"""
        interval = self.settings.tick_interval()
        loop = asyncio.get_running_loop()
        next_tick = loop.time()

        logger.info(f"🔄 Monitoring every {interval:g}s")

        while self.running:
            self.schedule_tick()
            next_tick += interval
            await asyncio.sleep(max(0.0, next_tick - loop.time()))

    def schedule_tick(self) -> bool:
        """Start a tick unless one is still in flight"""
        if self.tick_in_flight:
            self.state.record_skipped_tick()
            logger.warning(f"⏭️ Previous tick still running, skipped ({self.state.ticks_skipped} total)")
            return False

        self._tick_task = asyncio.create_task(self._run_tick())
        return True

    async def _run_tick(self):
        try:
            opportunities = await self.evaluator.tick(self.state)
            await self._handle_opportunities(opportunities)
        except Exception as e:
            logger.error(f"❌ Tick failed: {e}")
            await self.notification_manager.send_error_alert("Tick failed", str(e))

        self._report_progress()

    def _report_progress(self):
        checks = self.state.checks_performed
        monitoring = self.settings.monitoring

        if checks and checks % monitoring.report_every == 0:
            self.display_detailed_report()
        elif checks and checks % monitoring.stats_every == 0:
            self.display_stats()
        elif checks and checks % monitoring.heartbeat_every == 0:
            logger.info(f"💓 Check #{checks}: {self.state.opportunities_found} opportunities so far")

    # Opportunity handling
    async def _handle_opportunities(self, opportunities: List[Opportunity]):
        for opportunity in opportunities:
            self.display_opportunity(opportunity)
            self.journal.record_opportunity(opportunity)
            await self.notification_manager.send_opportunity_alert(opportunity)

            if self.settings.execution.advanced_simulation:
                self.simulate(opportunity)

            decision = self.gate.evaluate(opportunity)
            if decision.approved:
                await self.execute(opportunity)
            elif self.settings.execution.auto_execute:
                logger.info(f"🛡️ Not executing {opportunity.combination.label}: {'; '.join(decision.blockers)}")

    def simulate(self, opportunity: Opportunity) -> str:
        """Re-check against the applicable minimum profit and journal the outcome"""
        min_profit = self.settings.trading.min_profit_for(opportunity.combination.involves_long_tail)
        profitable = Decimal(str(opportunity.profit_percentage)) >= min_profit
        status = 'profitable' if profitable else 'unprofitable'

        self.journal.record_simulation(opportunity, status, min_profit)
        logger.info(f"🧪 Simulation {opportunity.combination.label}: {status} "
                    f"({opportunity.profit_percentage:.4f}% vs {min_profit}%)")
        return status

    async def execute(self, opportunity: Opportunity) -> Optional[TradeResult]:
        """Hand a gate-approved opportunity to the settlement contract"""
        label = opportunity.combination.label
        asset_in = opportunity.asset_in

        if self.settings.execution.dry_run:
            min_profit = self.settings.trading.min_profit_for(opportunity.combination.involves_long_tail)
            self.journal.record_simulation(opportunity, 'dry_run', min_profit)
            self.state.record_simulation()
            logger.info(f"DRY RUN: Would execute {label} for "
                        f"{opportunity.net_profit_human:.6f} {asset_in.symbol}")
            return None

        try:
            self.contract_interface.ensure_executable()
        except ExecutionError as e:
            logger.warning(f"⚠️ Not executing {label}: {e}")
            return None

        logger.info(f"🚀 Executing {label}...")
        result = self.contract_interface.request_flash_loan(asset_in.address, opportunity.amount_in)

        self.journal.record_trade(opportunity, result.tx_hash, result.success, result.gas_used, result.error)
        if result.success:
            self.state.record_trade(opportunity)
            logger.info(f"✅ Trade confirmed: {result.tx_hash}")
        else:
            logger.error(f"❌ Trade failed: {result.error}")

        await self.notification_manager.send_trade_alert(opportunity, result.tx_hash, result.success)
        return result

    # Display
    def _display_banner(self):
        execution = self.settings.execution
        logger.info("=" * 60)
        logger.info("🤖 AMM ARBITRAGE ENGINE")
        logger.info(f"   Network: {self.settings.network.name}")
        logger.info(f"   Venues: {', '.join(self.adapters)}")
        logger.info(f"   Combinations: {len(self.settings.combinations)}")
        logger.info(f"   Mode: {'DRY RUN' if execution.dry_run else 'LIVE'}"
                    f" / auto-execute {'ON' if execution.auto_execute else 'OFF'}")
        logger.info("=" * 60)

    def display_opportunity(self, opportunity: Opportunity):
        asset_in = opportunity.asset_in
        asset_out = opportunity.asset_out
        combination = opportunity.combination

        logger.info("🎯 OPPORTUNITY FOUND!")
        logger.info(f"   Route: {combination.pair} {combination.buy_venue.name} -> {combination.sell_venue.name}")
        logger.info(f"   Amount: {asset_in.from_base_units(opportunity.amount_in)} {asset_in.symbol}")
        logger.info(f"   Intermediate: {asset_out.from_base_units(opportunity.amount_intermediate):.6f} "
                    f"{asset_out.symbol}")
        logger.info(f"   Back: {asset_in.from_base_units(opportunity.amount_back):.6f} {asset_in.symbol}")
        logger.info(f"   Costs: gas {asset_in.from_base_units(opportunity.gas_cost):.6f}, "
                    f"fee {asset_in.from_base_units(opportunity.flash_loan_fee):.6f} {asset_in.symbol}")
        logger.info(f"   💰 Net Profit: {opportunity.net_profit_human:.6f} {asset_in.symbol} "
                    f"({opportunity.profit_percentage:.4f}%)")
        logger.info(f"   Liquidity: ${opportunity.liquidity_buy_usd:,.0f} / ${opportunity.liquidity_sell_usd:,.0f}")
        logger.info(f"   Gas: {opportunity.gas_price_gwei:.4f} gwei, volatility {opportunity.volatility:.2f}%")
        if opportunity.trend is not None:
            logger.info(f"   Trend: {opportunity.trend.value}")

    def display_stats(self):
        state = self.state
        logger.info("📊 STATISTICS")
        logger.info(f"   Runtime: {format_duration(state.runtime_seconds)}")
        logger.info(f"   Checks: {state.checks_performed} ({state.ticks_skipped} skipped)")
        logger.info(f"   Opportunities: {state.opportunities_found} ({state.success_rate:.2f}% of checks)")
        logger.info(f"   Trades: {state.trades_executed} executed, {state.trades_simulated} simulated")
        for symbol, amount in state.total_profit.items():
            logger.info(f"   Total Profit: {amount:.6f} {symbol}")

    def display_detailed_report(self):
        self.display_stats()
        summary = self.journal.summarize()
        cache = self.state.cache.stats()
        logger.info("📈 DETAILED REPORT")
        logger.info(f"   Journaled opportunities: {summary['total_opportunities']} "
                    f"({summary['profitable_opportunities']} profitable)")
        for symbol, stats in summary['by_asset'].items():
            logger.info(f"   {symbol}: average profit {stats['average_profit']:.6f} {symbol}, "
                        f"total {stats['total_profit']:.6f} {symbol}, average ROI {stats['average_roi']:.4f}%")
        logger.info(f"   Cache: {cache['entries']} entries, {cache['hit_rate']:.1f}% hit rate")

    async def _send_session_report(self):
        state = self.state
        profit = ", ".join(f"{amount:.6f} {symbol}" for symbol, amount in state.total_profit.items()) or "none"
        report = (
            f"**Session Duration:** {format_duration(state.runtime_seconds)}\n"
            f"**Checks:** {state.checks_performed} ({state.ticks_skipped} skipped)\n"
            f"**Opportunities Found:** {state.opportunities_found}\n"
            f"**Trades:** {state.trades_executed} executed, {state.trades_simulated} simulated\n"
            f"**Total Profit:** {profit}"
        )
        await self.notification_manager.send_status_alert("Session Report", report)

    def get_status(self) -> Dict[str, Any]:
        """Get current engine status"""
        return {
            'running': self.running,
            'tick_in_flight': self.tick_in_flight,
            'dry_run': self.settings.execution.dry_run,
            'auto_execute': self.settings.execution.auto_execute,
            'report_only': self.settings.report_only,
            'tick_interval': self.settings.tick_interval(),
            **self.state.to_dict(),
        }


# Async Context Manager Support
class ArbitrageBotManager:
    """Async context manager for the engine"""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.bot = None

    async def __aenter__(self) -> ArbitrageBot:
        self.bot = ArbitrageBot(self.settings)
        return self.bot

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if self.bot:
            await self.bot.stop()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='AMM cross-venue arbitrage engine')
    parser.add_argument('--check', action='store_true', help='Run a single evaluation pass and exit')
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument('--dry-run', action='store_true', help='Simulate accepted trades (default)')
    mode.add_argument('--live', action='store_true', help='Submit accepted trades to the settlement contract')
    parser.add_argument('--auto-execute', action='store_true', help='Enable the execution gate')
    parser.add_argument('--log-level', default=None, help='Log level (default from LOG_LEVEL)')
    return parser


async def main(argv: Optional[List[str]] = None) -> int:
    """
    Main execution function

    Returns:
        0 on normal termination, 1 on connectivity failure, 2 on configuration error
    """
    args = build_parser().parse_args(argv)

    try:
        settings = load_settings()
    except ConfigurationError as e:
        logger.error(f"❌ {e}")
        return 2

    if args.dry_run:
        settings.execution.dry_run = True
    if args.live:
        settings.execution.dry_run = False
    if args.auto_execute:
        settings.execution.auto_execute = True

    enable_file_logging(settings.monitoring.log_file_path)
    set_log_level(args.log_level or settings.monitoring.log_level)

    if settings.execution.dry_run:
        logger.info("Running in DRY RUN mode - no real trades will be executed")
    elif settings.report_only:
        logger.warning("⚠️ LIVE mode requested without key and contract - report-only")

    try:
        async with ArbitrageBotManager(settings) as bot:
            if args.check:
                await bot.check_once()
            else:
                await bot.start()
    except ConnectivityError as e:
        logger.error(f"❌ Connectivity failure: {e}")
        return 1
    except ConfigurationError as e:
        logger.error(f"❌ {e}")
        return 2

    return 0


def run():
    """Console script entry point"""
    try:
        exit_code = asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Engine stopped by user")
        exit_code = 0
    sys.exit(exit_code)


if __name__ == "__main__":
    run()
