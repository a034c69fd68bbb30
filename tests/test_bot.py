# Bot logic tests
# tests/test_bot.py
"""
Arbitrage Engine Tests
Tick scheduling, opportunity handling, execution paths, connectivity and the CLI entry point
"""

import asyncio
import json
from decimal import Decimal
from unittest.mock import AsyncMock, Mock, PropertyMock, patch

import pytest
from web3 import Web3

from amm_arbitrage.arbitrage_bot import ArbitrageBot, build_parser, main
from amm_arbitrage.contract_interface import TradeResult
from amm_arbitrage.exceptions import ConfigurationError, ConnectivityError, ExecutionError
from amm_arbitrage.models import NoQuote
from amm_arbitrage.utils.logger import get_logger

from conftest import FakeAdapter

logger = get_logger(__name__)


def notifier():
    manager = Mock()
    manager.send_opportunity_alert = AsyncMock(return_value=[])
    manager.send_trade_alert = AsyncMock(return_value=[])
    manager.send_error_alert = AsyncMock(return_value=[])
    manager.send_status_alert = AsyncMock(return_value=[])
    manager.close = AsyncMock()
    return manager


def read_lines(path):
    return [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]


def erc20(decimals, symbol):
    token = Mock()
    token.functions.decimals.return_value.call.return_value = decimals
    token.functions.symbol.return_value.call.return_value = symbol
    return token


def serve_tokens(w3, settings, **overrides):
    """Answer w3.eth.contract(address=...) with registry-matching ERC20 mocks"""
    tokens = {
        Web3.to_checksum_address(asset.address): overrides.get(symbol, erc20(asset.decimals, symbol))
        for symbol, asset in settings.assets.items()
    }
    w3.eth.contract.side_effect = lambda address, abi: tokens[address]
    return tokens


@pytest.fixture
def w3():
    w3 = Mock()
    w3.eth.block_number = 123_456
    w3.eth.gas_price = 100_000_000
    return w3


@pytest.fixture
def bot(settings, w3):
    bot = ArbitrageBot(settings, w3=w3)
    bot.notification_manager = notifier()
    bot.evaluator = Mock()
    bot.evaluator.tick = AsyncMock(return_value=[])
    return bot


class TestTickScheduling:
    """Test suite for single-flight ticks"""

    @pytest.mark.asyncio
    async def test_overlapping_tick_is_skipped(self, bot):
        release = asyncio.Event()

        async def slow_tick(state):
            await release.wait()
            return []

        bot.evaluator.tick.side_effect = slow_tick

        assert bot.schedule_tick() is True
        await asyncio.sleep(0)
        assert bot.tick_in_flight

        assert bot.schedule_tick() is False
        assert bot.state.ticks_skipped == 1
        assert bot.evaluator.tick.await_count == 1

        release.set()
        await bot._tick_task
        assert not bot.tick_in_flight
        assert bot.schedule_tick() is True
        await bot._tick_task
        logger.info("✅ Overlapping tick skipped and counted")

    @pytest.mark.asyncio
    async def test_tick_error_is_caught(self, bot):
        bot.evaluator.tick.side_effect = Exception("rpc exploded")

        await bot._run_tick()

        bot.notification_manager.send_error_alert.assert_awaited_once_with("Tick failed", "rpc exploded")

    @pytest.mark.asyncio
    async def test_stop_cancels_in_flight_tick(self, bot):
        async def hung_tick(state):
            await asyncio.Event().wait()

        bot.evaluator.tick.side_effect = hung_tick
        bot.running = True
        bot.schedule_tick()
        await asyncio.sleep(0)
        task = bot._tick_task

        await bot.stop()

        assert task.cancelled()
        assert not bot.running
        bot.notification_manager.send_status_alert.assert_awaited_once()
        bot.notification_manager.close.assert_awaited_once()
        logger.info("✅ Stop cancels the in-flight tick")

    @pytest.mark.asyncio
    async def test_start_runs_loop_until_stopped(self, bot, settings):
        settings.execution.tick_interval = 0.01
        settings.execution.long_tail_tick_interval = 0.01
        bot.test_connectivity = AsyncMock(return_value={})

        ticked = asyncio.Event()

        async def tick(state):
            ticked.set()
            return []

        bot.evaluator.tick.side_effect = tick

        runner = asyncio.create_task(bot.start())
        await asyncio.wait_for(ticked.wait(), timeout=2)
        await bot.stop()
        await asyncio.wait_for(runner, timeout=2)

        assert bot.evaluator.tick.await_count >= 1
        titles = [call.args[0] for call in bot.notification_manager.send_status_alert.await_args_list]
        assert titles == ["Engine Started", "Session Report"]

    @pytest.mark.asyncio
    async def test_start_connectivity_failure(self, bot):
        bot.test_connectivity = AsyncMock(side_effect=ConnectivityError("no venues"))

        with pytest.raises(ConnectivityError):
            await bot.start()

        assert not bot.running
        bot.notification_manager.send_error_alert.assert_awaited_once()


class TestOpportunityHandling:
    """Test suite for journaling, simulation and execution"""

    @pytest.mark.asyncio
    async def test_report_only_journals_and_simulates(self, bot, make_opportunity):
        await bot._handle_opportunities([make_opportunity()])

        assert len(read_lines(bot.journal.opportunities_path)) == 1
        simulations = read_lines(bot.journal.simulations_path)
        assert [s['status'] for s in simulations] == ["profitable"]
        assert bot.state.trades_simulated == 0
        bot.notification_manager.send_opportunity_alert.assert_awaited_once()
        logger.info("✅ Opportunity journaled without execution")

    def test_simulate_unprofitable(self, bot, make_opportunity):
        assert bot.simulate(make_opportunity(profit_percentage=0.1)) == "unprofitable"

    @pytest.mark.asyncio
    async def test_dry_run_execution(self, bot, settings, make_opportunity):
        settings.execution.auto_execute = True
        settings.execution.advanced_simulation = False

        await bot._handle_opportunities([make_opportunity()])

        assert bot.state.trades_simulated == 1
        assert bot.state.trades_executed == 0
        assert read_lines(bot.journal.simulations_path)[0]['status'] == "dry_run"
        logger.info("✅ Dry run counts a simulated trade")

    @pytest.mark.asyncio
    async def test_gate_blocks_execution(self, bot, settings, make_opportunity):
        settings.execution.auto_execute = True
        bot.execute = AsyncMock()

        await bot._handle_opportunities([make_opportunity(volatility=7.5)])

        bot.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_live_execution(self, bot, settings, make_opportunity):
        settings.execution.dry_run = False
        bot.contract_interface = Mock()
        bot.contract_interface.request_flash_loan.return_value = TradeResult(
            success=True, tx_hash="0xfeed", gas_used=412_000, block_number=99
        )
        opportunity = make_opportunity()

        result = await bot.execute(opportunity)

        assert result.success
        bot.contract_interface.request_flash_loan.assert_called_once_with(
            opportunity.asset_in.address, 1_000_000_000
        )
        assert bot.state.trades_executed == 1
        assert bot.state.total_profit["USDC"] == Decimal("13.85")
        assert read_lines(bot.journal.trades_path)[0]['tx_hash'] == "0xfeed"
        bot.notification_manager.send_trade_alert.assert_awaited_once_with(opportunity, "0xfeed", True)

    @pytest.mark.asyncio
    async def test_live_execution_requires_ownership(self, bot, settings, make_opportunity):
        settings.execution.dry_run = False
        bot.contract_interface = Mock()
        bot.contract_interface.ensure_executable.side_effect = ExecutionError("not the settlement owner")

        assert await bot.execute(make_opportunity()) is None
        bot.contract_interface.request_flash_loan.assert_not_called()

    @pytest.mark.asyncio
    async def test_live_execution_report_only(self, bot, settings, make_opportunity):
        settings.execution.dry_run = False
        assert await bot.execute(make_opportunity()) is None
        assert bot.state.trades_executed == 0


class TestConnectivity:
    """Test suite for startup checks"""

    @pytest.fixture
    def venues(self):
        return {
            "camelot": FakeAdapter("camelot", {("WETH", "USDC"): 3_000 * 10 ** 6}),
            "sushi": FakeAdapter("sushi", {("WETH", "USDC"): NoQuote("sushi", "execution reverted")}),
            "uniswap": FakeAdapter("uniswap", {("WETH", "USDC"): 3_001 * 10 ** 6}),
        }

    @pytest.mark.asyncio
    async def test_reports_each_venue(self, bot, venues):
        bot.adapters = venues

        results = await bot.test_connectivity()

        assert results['block_number'] == 123_456
        assert results['venues']['camelot'] == Decimal("3000")
        assert results['venues']['sushi'] is None
        assert 'settlement_owner' not in results
        logger.info("✅ Connectivity checked per venue")

    @pytest.mark.asyncio
    async def test_rpc_unreachable(self, bot, w3):
        type(w3.eth).block_number = PropertyMock(side_effect=Exception("connection refused"))

        with pytest.raises(ConnectivityError, match="RPC node unreachable"):
            await bot.test_connectivity()

    @pytest.mark.asyncio
    async def test_no_venue_answers(self, bot):
        bot.adapters = {"camelot": FakeAdapter("camelot"), "sushi": FakeAdapter("sushi")}

        with pytest.raises(ConnectivityError, match="No venue"):
            await bot.test_connectivity()

    def test_verify_tokens_matches_registry(self, bot, settings, w3):
        serve_tokens(w3, settings)

        verified = bot.verify_tokens()

        assert verified == {"WETH": 18, "USDC": 6, "WIF": 18}
        logger.info("✅ Token decimals match the registry")

    def test_decimals_mismatch_is_configuration_error(self, bot, settings, w3):
        serve_tokens(w3, settings, USDC=erc20(18, "USDC"))

        with pytest.raises(ConfigurationError, match="USDC has 18 decimals on-chain, 6 configured"):
            bot.verify_tokens()

    def test_symbol_mismatch_only_warns(self, bot, settings, w3):
        serve_tokens(w3, settings, USDC=erc20(6, "USDC.e"))
        assert bot.verify_tokens()["USDC"] == 6

    def test_unreadable_token_is_skipped(self, bot, settings, w3):
        silent = erc20(18, "WIF")
        silent.functions.decimals.return_value.call.side_effect = Exception("execution reverted")
        serve_tokens(w3, settings, WIF=silent)

        verified = bot.verify_tokens()

        assert verified["WIF"] is None
        assert verified["WETH"] == 18

    @pytest.mark.asyncio
    async def test_connectivity_checks_tokens(self, bot, settings, w3, venues):
        bot.adapters = venues
        serve_tokens(w3, settings, WETH=erc20(8, "WETH"))

        with pytest.raises(ConfigurationError, match="WETH has 8 decimals"):
            await bot.test_connectivity()

    @pytest.mark.asyncio
    async def test_check_once(self, bot, venues, make_opportunity):
        bot.adapters = venues
        bot.evaluator.tick.return_value = [make_opportunity()]

        opportunities = await bot.check_once()

        assert len(opportunities) == 1
        assert len(read_lines(bot.journal.opportunities_path)) == 1

    def test_get_status(self, bot):
        status = bot.get_status()

        assert status['running'] is False
        assert status['report_only'] is True
        assert status['tick_interval'] == 5.0
        assert status['checks_performed'] == 0


class TestMain:
    """Test suite for the command-line entry point"""

    @pytest.mark.asyncio
    async def test_configuration_error_exit_code(self):
        with patch("amm_arbitrage.arbitrage_bot.load_settings", side_effect=ConfigurationError("RPC_URL is required")):
            assert await main(["--check"]) == 2

    @pytest.mark.asyncio
    async def test_connectivity_error_exit_code(self, settings):
        with patch("amm_arbitrage.arbitrage_bot.load_settings", return_value=settings), \
                patch("amm_arbitrage.arbitrage_bot.enable_file_logging"), \
                patch.object(ArbitrageBot, "check_once", AsyncMock(side_effect=ConnectivityError("down"))):
            assert await main(["--check"]) == 1

    @pytest.mark.asyncio
    async def test_token_registry_mismatch_exit_code(self, settings):
        mismatch = ConfigurationError("Token registry mismatch: USDC has 18 decimals on-chain, 6 configured")
        with patch("amm_arbitrage.arbitrage_bot.load_settings", return_value=settings), \
                patch("amm_arbitrage.arbitrage_bot.enable_file_logging"), \
                patch.object(ArbitrageBot, "check_once", AsyncMock(side_effect=mismatch)):
            assert await main(["--check"]) == 2

    @pytest.mark.asyncio
    async def test_check_and_mode_overrides(self, settings):
        check_once = AsyncMock(return_value=[])
        with patch("amm_arbitrage.arbitrage_bot.load_settings", return_value=settings), \
                patch("amm_arbitrage.arbitrage_bot.enable_file_logging"), \
                patch.object(ArbitrageBot, "check_once", check_once):
            assert await main(["--check", "--live", "--auto-execute", "--log-level", "DEBUG"]) == 0

        check_once.assert_awaited_once()
        assert settings.execution.dry_run is False
        assert settings.execution.auto_execute is True
        logger.info("✅ CLI overrides applied")

    def test_dry_run_and_live_are_exclusive(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--dry-run", "--live"])
