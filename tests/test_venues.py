# Venue adapter tests
# tests/test_venues.py
"""
Venue Adapter Tests
Constant-product math, router/reserve quoting and per-tier concentrated-liquidity quoting
"""

import pytest
from unittest.mock import Mock

from amm_arbitrage.models import NoQuote, PoolQuote, VenueKind
from amm_arbitrage.utils.helpers import ZERO_ADDRESS
from amm_arbitrage.utils.logger import get_logger
from amm_arbitrage.venues import (
    ADAPTER_TYPES,
    ConcentratedLiquidityAdapter,
    ConstantProductAdapter,
    VenueAdapter,
    build_adapter,
    build_adapters,
    get_amount_out,
)

logger = get_logger(__name__)

PAIR_ADDRESS = "0x905dfCD5649217c42684f23958568e533C711Aa3"


def _call(value=None, error=None):
    """Contract function stub whose .call() returns value or raises error"""
    function = Mock()
    if error is not None:
        function.call.side_effect = error
    else:
        function.call.return_value = value
    return function


@pytest.fixture
def contract():
    return Mock()


@pytest.fixture
def w3(contract):
    w3 = Mock()
    w3.eth.contract.return_value = contract
    return w3


class TestConstantProductMath:
    """Test suite for the reserve formula"""

    def test_reference_scenario(self):
        """reserves (1,000,000, 500), amount 1,000"""
        expected = (1000 * 997 * 500) // (1_000_000 * 1000 + 1000 * 997)
        assert get_amount_out(1000, 1_000_000, 500) == expected
        logger.info("✅ Reference reserve scenario matches")

    def test_output_below_reserve_and_monotonic(self):
        reserve_in, reserve_out = 5_000_000 * 10 ** 6, 2_000 * 10 ** 18
        previous = 0

        for amount_in in (1, 10 ** 6, 10 ** 9, 10 ** 12, 10 ** 15, 10 ** 18, 10 ** 24):
            amount_out = get_amount_out(amount_in, reserve_in, reserve_out)
            assert amount_out < reserve_out
            assert amount_out >= previous
            previous = amount_out

        logger.info("✅ Output bounded by reserve and non-decreasing")

    @pytest.mark.parametrize("amount_in,reserve_in,reserve_out", [
        (0, 100, 100),
        (-5, 100, 100),
        (10, 0, 100),
        (10, 100, 0),
    ])
    def test_invalid_inputs_yield_zero(self, amount_in, reserve_in, reserve_out):
        assert get_amount_out(amount_in, reserve_in, reserve_out) == 0

    def test_custom_fee(self):
        no_fee = get_amount_out(1000, 10 ** 6, 10 ** 6, fee_numerator=1000, fee_denominator=1000)
        with_fee = get_amount_out(1000, 10 ** 6, 10 ** 6)
        assert no_fee > with_fee


class TestConstantProductAdapter:
    """Test suite for router and reserve quoting"""

    @pytest.fixture
    def adapter(self, camelot, w3):
        return ConstantProductAdapter(camelot, w3)

    @pytest.mark.asyncio
    async def test_router_quote(self, adapter, contract, usdc, weth):
        contract.functions.getAmountsOut.return_value = _call([1_000_000_000, 333 * 10 ** 15])

        quote = await adapter.quote(usdc, weth, 1_000_000_000)

        assert isinstance(quote, PoolQuote)
        assert quote.amount_out == 333 * 10 ** 15
        assert quote.source == "router"
        assert quote.fee_tier is None
        logger.info("✅ Router quote returned")

    @pytest.mark.asyncio
    async def test_router_failure_falls_back_to_reserves(self, adapter, contract, usdc, weth):
        contract.functions.getAmountsOut.return_value = _call(error=Exception("execution reverted"))
        contract.functions.getPair.return_value = _call(PAIR_ADDRESS)
        # token0 is WETH, so reserve0 belongs to asset_out
        contract.functions.getReserves.return_value = _call([500 * 10 ** 18, 1_000_000 * 10 ** 6, 0])
        contract.functions.token0.return_value = _call(weth.address)

        quote = await adapter.quote(usdc, weth, 1_000 * 10 ** 6)

        expected = get_amount_out(1_000 * 10 ** 6, 1_000_000 * 10 ** 6, 500 * 10 ** 18)
        assert isinstance(quote, PoolQuote)
        assert quote.source == "reserves"
        assert quote.amount_out == expected
        logger.info("✅ Reserve fallback oriented by token0")

    @pytest.mark.asyncio
    async def test_reserve_mode_skips_router(self, camelot, w3, contract, usdc, weth):
        from dataclasses import replace
        adapter = ConstantProductAdapter(replace(camelot, quote_via="reserves"), w3)
        contract.functions.getPair.return_value = _call(PAIR_ADDRESS)
        contract.functions.getReserves.return_value = _call([1_000_000 * 10 ** 6, 500 * 10 ** 18, 0])
        contract.functions.token0.return_value = _call(usdc.address)

        quote = await adapter.quote(usdc, weth, 1_000 * 10 ** 6)

        assert quote.source == "reserves"
        contract.functions.getAmountsOut.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_pool_is_no_quote(self, adapter, contract, usdc, weth):
        contract.functions.getAmountsOut.return_value = _call(error=Exception("revert"))
        contract.functions.getPair.return_value = _call(ZERO_ADDRESS)

        quote = await adapter.quote(usdc, weth, 10 ** 6)

        assert isinstance(quote, NoQuote)
        assert not quote
        assert quote.venue == "camelot"
        logger.info("✅ Zero-address pair maps to NoQuote")

    @pytest.mark.asyncio
    async def test_zero_liquidity_is_no_quote(self, adapter, contract, usdc, weth):
        contract.functions.getAmountsOut.return_value = _call(error=Exception("revert"))
        contract.functions.getPair.return_value = _call(PAIR_ADDRESS)
        contract.functions.getReserves.return_value = _call([0, 0, 0])
        contract.functions.token0.return_value = _call(usdc.address)

        quote = await adapter.quote(usdc, weth, 10 ** 6)

        assert isinstance(quote, NoQuote)
        assert "liquidity" in quote.reason

    @pytest.mark.asyncio
    async def test_zero_router_output_without_factory(self, camelot, w3, contract, usdc, weth):
        from dataclasses import replace
        adapter = ConstantProductAdapter(replace(camelot, factory=None), w3)
        contract.functions.getAmountsOut.return_value = _call([10 ** 6, 0])

        quote = await adapter.quote(usdc, weth, 10 ** 6)

        assert isinstance(quote, NoQuote)

    @pytest.mark.asyncio
    async def test_non_positive_amount(self, adapter, usdc, weth):
        assert isinstance(await adapter.quote(usdc, weth, 0), NoQuote)

    @pytest.mark.asyncio
    async def test_pool_reserves_orientation(self, adapter, contract, usdc, weth):
        contract.functions.getPair.return_value = _call(PAIR_ADDRESS)
        contract.functions.getReserves.return_value = _call([111, 222, 0])
        contract.functions.token0.return_value = _call(weth.address.lower())

        reserves = await adapter.pool_reserves(usdc, weth)

        assert reserves.reserve_a == 222
        assert reserves.reserve_b == 111
        assert reserves.pool_address == PAIR_ADDRESS


class TestConcentratedLiquidityAdapter:
    """Test suite for per-tier quoting"""

    @pytest.fixture
    def adapter(self, uniswap, w3):
        return ConcentratedLiquidityAdapter(uniswap, w3)

    @staticmethod
    def _tiers(outputs):
        """quoteExactInputSingle stub: outputs maps tier -> amount or exception"""

        def quote_exact_input_single(token_in, token_out, tier, amount_in, limit):
            result = outputs[tier]
            if isinstance(result, Exception):
                return _call(error=result)
            return _call(result)

        return quote_exact_input_single

    @pytest.mark.asyncio
    async def test_best_tier_wins(self, adapter, contract, usdc, weth):
        contract.functions.quoteExactInputSingle.side_effect = self._tiers({500: 100, 3000: 180, 10000: 150})

        quote = await adapter.quote(usdc, weth, 10 ** 6)

        assert quote.amount_out == 180
        assert quote.fee_tier == 3000
        assert quote.source == "quoter"
        logger.info("✅ Highest output tier selected")

    @pytest.mark.asyncio
    async def test_failing_tier_does_not_invalidate_others(self, adapter, contract, usdc, weth):
        contract.functions.quoteExactInputSingle.side_effect = self._tiers({
            500: Exception("execution reverted"),
            3000: Exception("execution reverted"),
            10000: 42,
        })

        quote = await adapter.quote(usdc, weth, 10 ** 6)

        assert quote.amount_out == 42
        assert quote.fee_tier == 10000
        logger.info("✅ Per-tier failures tolerated")

    @pytest.mark.asyncio
    async def test_all_tiers_failing_is_no_quote(self, adapter, contract, usdc, weth):
        contract.functions.quoteExactInputSingle.side_effect = self._tiers({
            500: Exception("revert"), 3000: 0, 10000: Exception("revert"),
        })

        quote = await adapter.quote(usdc, weth, 10 ** 6)

        assert isinstance(quote, NoQuote)

    @pytest.mark.asyncio
    async def test_tie_keeps_first_tier(self, adapter, contract, usdc, weth):
        contract.functions.quoteExactInputSingle.side_effect = self._tiers({500: 77, 3000: 77, 10000: 10})

        quote = await adapter.quote(usdc, weth, 10 ** 6)

        assert quote.fee_tier == 500

    @pytest.mark.asyncio
    async def test_requested_tier_only(self, adapter, contract, usdc, weth):
        contract.functions.quoteExactInputSingle.side_effect = self._tiers({500: 1, 3000: 999, 10000: 2})

        quote = await adapter.quote(usdc, weth, 10 ** 6, fee_tier=10000)

        assert quote.fee_tier == 10000
        assert quote.amount_out == 2

    @pytest.mark.asyncio
    async def test_pool_reserves_from_balances(self, adapter, contract, usdc, weth):
        contract.functions.getPool.return_value = _call(PAIR_ADDRESS)
        contract.functions.balanceOf.side_effect = [_call(5_000 * 10 ** 6), _call(2 * 10 ** 18)]

        reserves = await adapter.pool_reserves(usdc, weth, fee_tier=500)

        assert reserves.reserve_a == 5_000 * 10 ** 6
        assert reserves.reserve_b == 2 * 10 ** 18


class TestAdapterDispatch:
    """Test suite for kind-based adapter selection"""

    def test_dispatch_by_kind(self, camelot, uniswap, w3):
        assert set(ADAPTER_TYPES) == set(VenueKind)
        assert isinstance(build_adapter(camelot, w3), ConstantProductAdapter)
        assert isinstance(build_adapter(uniswap, w3), ConcentratedLiquidityAdapter)

    def test_kind_mismatch_rejected(self, uniswap, w3):
        with pytest.raises(ValueError):
            ConstantProductAdapter(uniswap, w3)

    def test_build_adapters_keyed_by_name(self, camelot, sushi, uniswap, w3):
        adapters = build_adapters([camelot, sushi, uniswap], w3)
        assert list(adapters) == ["camelot", "sushi", "uniswap"]
        logger.info("✅ Adapters built from venue registry")

    def test_interface_is_abstract(self, camelot, w3):
        class QuoteOnly(VenueAdapter):
            kind = VenueKind.CONSTANT_PRODUCT

            async def quote(self, asset_in, asset_out, amount_in, fee_tier=None):
                return NoQuote(self.name, "unused")

        with pytest.raises(TypeError):
            VenueAdapter(camelot, w3)
        with pytest.raises(TypeError, match="pool_address"):
            QuoteOnly(camelot, w3)
