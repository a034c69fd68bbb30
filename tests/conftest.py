# tests/conftest.py
"""
Shared fixtures: registry assets and venues, fake venue adapters,
opportunity builders and an environment-backed Settings instance
"""

from decimal import Decimal
from typing import Callable, Dict, List, Optional, Tuple, Union

import pytest

from amm_arbitrage.models import (
    Asset, NoQuote, Opportunity, PoolQuote, PoolReserves, TradingCombination, Venue, VenueKind
)
from config import addresses

ScriptedQuote = Union[int, NoQuote, Exception, Callable[[int], int]]


class FakeAdapter:
    """
    Stands in for a VenueAdapter at the quote() seam.

    quotes maps (symbol_in, symbol_out) to an output amount, a NoQuote, an
    exception to raise, a callable of amount_in, or a list consumed one
    entry per call.
    """

    def __init__(self, name: str,
                 quotes: Optional[Dict[Tuple[str, str], Union[ScriptedQuote, List[ScriptedQuote]]]] = None,
                 reserves: Optional[PoolReserves] = None, fee_tier: Optional[int] = None):
        self.name = name
        self.quotes = quotes or {}
        self.reserves = reserves
        self.fee_tier = fee_tier
        self.calls: List[Tuple[str, str, int]] = []

    async def quote(self, asset_in, asset_out, amount_in, fee_tier=None):
        self.calls.append((asset_in.symbol, asset_out.symbol, amount_in))
        scripted = self.quotes.get((asset_in.symbol, asset_out.symbol))
        if isinstance(scripted, list):
            scripted = scripted.pop(0)

        if scripted is None:
            return NoQuote(venue=self.name, reason="no pool")
        if isinstance(scripted, NoQuote):
            return scripted
        if isinstance(scripted, Exception):
            raise scripted
        amount_out = scripted(amount_in) if callable(scripted) else scripted
        return PoolQuote(self.name, asset_in, asset_out, amount_in, amount_out, fee_tier=self.fee_tier)

    async def pool_address(self, asset_a, asset_b, fee_tier=None):
        return self.reserves.pool_address if self.reserves else None

    async def pool_reserves(self, asset_a, asset_b, fee_tier=None):
        return self.reserves


@pytest.fixture
def usdc():
    return Asset(addresses.ARBITRUM_TOKENS["USDC"], "USDC", 6, is_stable=True, is_major=True)


@pytest.fixture
def weth():
    return Asset(addresses.ARBITRUM_TOKENS["WETH"], "WETH", 18, is_stable=False, is_major=True)


@pytest.fixture
def wif():
    return Asset(addresses.ARBITRUM_TOKENS["WIF"], "WIF", 18, is_stable=False, is_major=False)


@pytest.fixture
def camelot():
    config = addresses.VENUES["camelot"]
    return Venue("camelot", VenueKind.CONSTANT_PRODUCT, router=config["router"], factory=config["factory"])


@pytest.fixture
def sushi():
    config = addresses.VENUES["sushi"]
    return Venue("sushi", VenueKind.CONSTANT_PRODUCT, router=config["router"], factory=config["factory"])


@pytest.fixture
def uniswap():
    config = addresses.VENUES["uniswap"]
    return Venue("uniswap", VenueKind.CONCENTRATED_LIQUIDITY, router=config["router"],
                 factory=config["factory"], quoter=config["quoter"], fee_tiers=(500, 3000, 10000))


@pytest.fixture
def usdc_weth(usdc, weth, camelot, sushi):
    return TradingCombination(usdc, weth, camelot, sushi)


@pytest.fixture
def weth_wif(weth, wif, sushi):
    return TradingCombination(weth, wif, sushi, sushi)


@pytest.fixture
def make_opportunity(usdc_weth):
    """Builder for a USDC/WETH opportunity that passes every default threshold"""

    def _make(**overrides) -> Opportunity:
        fields = dict(
            combination=usdc_weth,
            amount_in=1_000_000_000,
            amount_intermediate=500_000_000_000_000_000,
            amount_back=1_020_000_000,
            min_amount_out=1_014_900_000,
            gas_cost=150_000,
            flash_loan_fee=900_000,
            net_profit=13_850_000,
            profit_percentage=1.385,
            liquidity_buy_usd=Decimal("250000"),
            liquidity_sell_usd=Decimal("180000"),
            gas_price_wei=100_000_000,  # 0.1 gwei
            gas_units=500_000,
            volatility=0.4,
        )
        fields.update(overrides)
        return Opportunity(**fields)

    return _make


@pytest.fixture
def env(monkeypatch, tmp_path):
    """Minimal valid environment; tests adjust it with monkeypatch"""
    for name in ("PRIVATE_KEY", "FLASHLOAN_CONTRACT_ADDRESS", "TRADING_COMBINATIONS", "ENABLED_VENUES",
                 "FLASH_LOAN_AMOUNTS", "AUTO_EXECUTE", "DRY_RUN", "NETWORK", "ARBITRUM_RPC_URL",
                 "DISCORD_WEBHOOK_URL", "TELEGRAM_BOT_TOKEN", "TELEGRAM_CHAT_ID", "REFERENCE_VENUE",
                 "UNISWAP_FEE_TIERS", "SUSHI_QUOTE_VIA", "CHECK_INTERVAL", "LONG_TAIL_CHECK_INTERVAL"):
        monkeypatch.delenv(name, raising=False)

    monkeypatch.setenv("RPC_URL", "http://127.0.0.1:8545")
    monkeypatch.setenv("LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.setenv("ENABLE_NOTIFICATIONS", "false")
    return monkeypatch


@pytest.fixture
def settings(env):
    from config.settings import Settings
    return Settings()
