# amm_arbitrage/venues.py
"""
Venue Adapters - one quoting interface per AMM protocol family

Constant-product venues (Uniswap V2 forks such as Camelot and SushiSwap)
quote through the router's getAmountsOut or directly from pair reserves.
Concentrated-liquidity venues (Uniswap V3) quote once per fee tier through
the quoter and keep the best tier.

quote() never raises: every failure becomes a NoQuote sentinel and the
caller moves on to the next combination.
"""

from abc import ABC, abstractmethod
from typing import Dict, Iterable, Optional, Tuple, Type

from web3 import Web3
from web3.contract import Contract

from .models import Asset, NoQuote, PoolQuote, PoolReserves, QuoteResult, Venue, VenueKind
from .utils.helpers import is_zero_address
from .utils.logger import get_logger

logger = get_logger(__name__)

# =============================================================================
# ABIs (minimal, read-only)
# =============================================================================

ROUTER_V2_ABI = [
    {
        "name": "getAmountsOut",
        "type": "function",
        "stateMutability": "view",
        "inputs": [
            {"name": "amountIn", "type": "uint256"},
            {"name": "path", "type": "address[]"},
        ],
        "outputs": [{"name": "amounts", "type": "uint256[]"}],
    },
]

FACTORY_V2_ABI = [
    {
        "name": "getPair",
        "type": "function",
        "stateMutability": "view",
        "inputs": [
            {"name": "tokenA", "type": "address"},
            {"name": "tokenB", "type": "address"},
        ],
        "outputs": [{"name": "pair", "type": "address"}],
    },
]

PAIR_V2_ABI = [
    {
        "name": "getReserves",
        "type": "function",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [
            {"name": "reserve0", "type": "uint112"},
            {"name": "reserve1", "type": "uint112"},
            {"name": "blockTimestampLast", "type": "uint32"},
        ],
    },
    {
        "name": "token0",
        "type": "function",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "address"}],
    },
]

QUOTER_V3_ABI = [
    {
        "name": "quoteExactInputSingle",
        "type": "function",
        "stateMutability": "nonpayable",
        "inputs": [
            {"name": "tokenIn", "type": "address"},
            {"name": "tokenOut", "type": "address"},
            {"name": "fee", "type": "uint24"},
            {"name": "amountIn", "type": "uint256"},
            {"name": "sqrtPriceLimitX96", "type": "uint160"},
        ],
        "outputs": [{"name": "amountOut", "type": "uint256"}],
    },
]

FACTORY_V3_ABI = [
    {
        "name": "getPool",
        "type": "function",
        "stateMutability": "view",
        "inputs": [
            {"name": "tokenA", "type": "address"},
            {"name": "tokenB", "type": "address"},
            {"name": "fee", "type": "uint24"},
        ],
        "outputs": [{"name": "pool", "type": "address"}],
    },
]

POOL_V3_ABI = [
    {
        "name": "liquidity",
        "type": "function",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "uint128"}],
    },
]

ERC20_ABI = [
    {
        "name": "balanceOf",
        "type": "function",
        "stateMutability": "view",
        "inputs": [{"name": "account", "type": "address"}],
        "outputs": [{"name": "", "type": "uint256"}],
    },
    {
        "name": "decimals",
        "type": "function",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "uint8"}],
    },
    {
        "name": "symbol",
        "type": "function",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "string"}],
    },
]


def get_amount_out(amount_in: int, reserve_in: int, reserve_out: int,
                   fee_numerator: int = 997, fee_denominator: int = 1000) -> int:
    """
    Constant-product output for an exact input, floored.

    amountOut = amountIn*997*reserveOut / (reserveIn*1000 + amountIn*997)
    """
    if amount_in <= 0 or reserve_in <= 0 or reserve_out <= 0:
        return 0

    amount_in_with_fee = amount_in * fee_numerator
    numerator = amount_in_with_fee * reserve_out
    denominator = reserve_in * fee_denominator + amount_in_with_fee
    return numerator // denominator


class VenueAdapter(ABC):
    """Shared plumbing: contract cache and the abstract quote/reserves interface."""

    kind: VenueKind

    def __init__(self, venue: Venue, w3: Web3):
        if venue.kind is not self.kind:
            raise ValueError(f"{type(self).__name__} cannot serve {venue.kind.value} venue {venue.name}")

        self.venue = venue
        self.w3 = w3
        self._contracts: Dict[Tuple[str, str], Contract] = {}

    @property
    def name(self) -> str:
        return self.venue.name

    def _contract(self, address: str, abi: list, label: str) -> Contract:
        key = (address.lower(), label)
        if key not in self._contracts:
            self._contracts[key] = self.w3.eth.contract(
                address=Web3.to_checksum_address(address), abi=abi
            )
        return self._contracts[key]

    @abstractmethod
    async def quote(self, asset_in: Asset, asset_out: Asset, amount_in: int,
                    fee_tier: Optional[int] = None) -> QuoteResult:
        raise NotImplementedError

    @abstractmethod
    async def pool_address(self, asset_a: Asset, asset_b: Asset,
                           fee_tier: Optional[int] = None) -> Optional[str]:
        raise NotImplementedError

    @abstractmethod
    async def pool_reserves(self, asset_a: Asset, asset_b: Asset,
                            fee_tier: Optional[int] = None) -> Optional[PoolReserves]:
        raise NotImplementedError

    def _no_quote(self, asset_in: Asset, asset_out: Asset, reason: str) -> NoQuote:
        logger.debug(f"{self.name} no quote {asset_in.symbol}->{asset_out.symbol}: {reason}")
        return NoQuote(venue=self.name, reason=reason)

    def __str__(self) -> str:
        return f"{type(self).__name__}({self.name})"


class ConstantProductAdapter(VenueAdapter):
    """Uniswap V2 style venue: router quotes with a reserve-math fallback."""

    kind = VenueKind.CONSTANT_PRODUCT

    async def quote(self, asset_in: Asset, asset_out: Asset, amount_in: int,
                    fee_tier: Optional[int] = None) -> QuoteResult:
        if amount_in <= 0:
            return self._no_quote(asset_in, asset_out, "non-positive input")

        if self.venue.quote_via == "reserves" or not self.venue.router:
            return await self.quote_from_reserves(asset_in, asset_out, amount_in)

        result = await self.quote_from_router(asset_in, asset_out, amount_in)
        if isinstance(result, NoQuote) and self.venue.factory:
            # Router reverts on some pools that still hold readable reserves
            return await self.quote_from_reserves(asset_in, asset_out, amount_in)
        return result

    async def quote_from_router(self, asset_in: Asset, asset_out: Asset, amount_in: int) -> QuoteResult:
        try:
            router = self._contract(self.venue.router, ROUTER_V2_ABI, "router")
            path = [Web3.to_checksum_address(asset_in.address), Web3.to_checksum_address(asset_out.address)]
            amounts = router.functions.getAmountsOut(amount_in, path).call()
            amount_out = int(amounts[-1])
        except Exception as e:
            return self._no_quote(asset_in, asset_out, f"router call failed: {e}")

        if amount_out <= 0:
            return self._no_quote(asset_in, asset_out, "zero output")

        return PoolQuote(
            venue=self.name,
            asset_in=asset_in,
            asset_out=asset_out,
            amount_in=amount_in,
            amount_out=amount_out,
            source="router",
        )

    async def quote_from_reserves(self, asset_in: Asset, asset_out: Asset, amount_in: int) -> QuoteResult:
        reserves = await self.pool_reserves(asset_in, asset_out)
        if reserves is None:
            return self._no_quote(asset_in, asset_out, "pool does not exist")

        if reserves.reserve_a == 0 or reserves.reserve_b == 0:
            return self._no_quote(asset_in, asset_out, "zero liquidity")

        amount_out = get_amount_out(
            amount_in,
            reserves.reserve_a,
            reserves.reserve_b,
            self.venue.fee_numerator,
            self.venue.fee_denominator,
        )
        if amount_out <= 0:
            return self._no_quote(asset_in, asset_out, "zero output")

        return PoolQuote(
            venue=self.name,
            asset_in=asset_in,
            asset_out=asset_out,
            amount_in=amount_in,
            amount_out=amount_out,
            source="reserves",
        )

    async def pool_address(self, asset_a: Asset, asset_b: Asset,
                           fee_tier: Optional[int] = None) -> Optional[str]:
        if not self.venue.factory:
            return None

        try:
            factory = self._contract(self.venue.factory, FACTORY_V2_ABI, "factory")
            pair = factory.functions.getPair(
                Web3.to_checksum_address(asset_a.address),
                Web3.to_checksum_address(asset_b.address),
            ).call()
        except Exception as e:
            logger.debug(f"{self.name} getPair failed for {asset_a.symbol}/{asset_b.symbol}: {e}")
            return None

        return None if is_zero_address(pair) else pair

    async def pool_reserves(self, asset_a: Asset, asset_b: Asset,
                            fee_tier: Optional[int] = None) -> Optional[PoolReserves]:
        pair_address = await self.pool_address(asset_a, asset_b)
        if pair_address is None:
            return None

        try:
            pair = self._contract(pair_address, PAIR_V2_ABI, "pair")
            reserve0, reserve1, _ = pair.functions.getReserves().call()
            token0 = pair.functions.token0().call()
        except Exception as e:
            logger.debug(f"{self.name} getReserves failed for {asset_a.symbol}/{asset_b.symbol}: {e}")
            return None

        if asset_a.same_as(token0):
            return PoolReserves(pool_address=pair_address, reserve_a=int(reserve0), reserve_b=int(reserve1))
        return PoolReserves(pool_address=pair_address, reserve_a=int(reserve1), reserve_b=int(reserve0))


class ConcentratedLiquidityAdapter(VenueAdapter):
    """Uniswap V3 style venue: one quoter call per fee tier, best output wins."""

    kind = VenueKind.CONCENTRATED_LIQUIDITY

    async def quote(self, asset_in: Asset, asset_out: Asset, amount_in: int,
                    fee_tier: Optional[int] = None) -> QuoteResult:
        if amount_in <= 0:
            return self._no_quote(asset_in, asset_out, "non-positive input")
        if not self.venue.quoter:
            return self._no_quote(asset_in, asset_out, "no quoter configured")

        tiers = (fee_tier,) if fee_tier is not None else self.venue.fee_tiers
        best_tier = None
        best_out = 0

        for tier in tiers:
            amount_out = self._quote_tier(asset_in, asset_out, amount_in, tier)
            if amount_out > best_out:
                best_tier, best_out = tier, amount_out

        if best_tier is None:
            return self._no_quote(asset_in, asset_out, f"no fee tier quoted ({', '.join(map(str, tiers))})")

        return PoolQuote(
            venue=self.name,
            asset_in=asset_in,
            asset_out=asset_out,
            amount_in=amount_in,
            amount_out=best_out,
            fee_tier=best_tier,
            source="quoter",
        )

    def _quote_tier(self, asset_in: Asset, asset_out: Asset, amount_in: int, tier: int) -> int:
        """Output for one tier, 0 when that tier reverts or has no pool."""
        try:
            quoter = self._contract(self.venue.quoter, QUOTER_V3_ABI, "quoter")
            amount_out = quoter.functions.quoteExactInputSingle(
                Web3.to_checksum_address(asset_in.address),
                Web3.to_checksum_address(asset_out.address),
                tier,
                amount_in,
                0,
            ).call()
            return max(int(amount_out), 0)
        except Exception as e:
            logger.debug(f"{self.name} tier {tier} failed for {asset_in.symbol}->{asset_out.symbol}: {e}")
            return 0

    async def pool_address(self, asset_a: Asset, asset_b: Asset,
                           fee_tier: Optional[int] = None) -> Optional[str]:
        if not self.venue.factory:
            return None

        tiers = (fee_tier,) if fee_tier is not None else self.venue.fee_tiers
        best_pool = None
        best_liquidity = -1

        for tier in tiers:
            pool = self._pool_for_tier(asset_a, asset_b, tier)
            if pool is None:
                continue
            if fee_tier is not None:
                return pool

            liquidity = self._pool_liquidity(pool)
            if liquidity > best_liquidity:
                best_pool, best_liquidity = pool, liquidity

        return best_pool

    def _pool_for_tier(self, asset_a: Asset, asset_b: Asset, tier: int) -> Optional[str]:
        try:
            factory = self._contract(self.venue.factory, FACTORY_V3_ABI, "factory")
            pool = factory.functions.getPool(
                Web3.to_checksum_address(asset_a.address),
                Web3.to_checksum_address(asset_b.address),
                tier,
            ).call()
        except Exception as e:
            logger.debug(f"{self.name} getPool({tier}) failed for {asset_a.symbol}/{asset_b.symbol}: {e}")
            return None

        return None if is_zero_address(pool) else pool

    def _pool_liquidity(self, pool_address: str) -> int:
        try:
            pool = self._contract(pool_address, POOL_V3_ABI, "pool")
            return int(pool.functions.liquidity().call())
        except Exception as e:
            logger.debug(f"{self.name} liquidity() failed for {pool_address}: {e}")
            return 0

    async def pool_reserves(self, asset_a: Asset, asset_b: Asset,
                            fee_tier: Optional[int] = None) -> Optional[PoolReserves]:
        """Token balances held by the pool contract for each side."""
        pool_address = await self.pool_address(asset_a, asset_b, fee_tier)
        if pool_address is None:
            return None

        try:
            pool = Web3.to_checksum_address(pool_address)
            balance_a = self._contract(asset_a.address, ERC20_ABI, "erc20").functions.balanceOf(pool).call()
            balance_b = self._contract(asset_b.address, ERC20_ABI, "erc20").functions.balanceOf(pool).call()
        except Exception as e:
            logger.debug(f"{self.name} balanceOf failed for pool {pool_address}: {e}")
            return None

        return PoolReserves(pool_address=pool_address, reserve_a=int(balance_a), reserve_b=int(balance_b))


ADAPTER_TYPES: Dict[VenueKind, Type[VenueAdapter]] = {
    VenueKind.CONSTANT_PRODUCT: ConstantProductAdapter,
    VenueKind.CONCENTRATED_LIQUIDITY: ConcentratedLiquidityAdapter,
}


def build_adapter(venue: Venue, w3: Web3) -> VenueAdapter:
    """Pick the adapter class from the venue's kind tag."""
    return ADAPTER_TYPES[venue.kind](venue, w3)


def build_adapters(venues: Iterable[Venue], w3: Web3) -> Dict[str, VenueAdapter]:
    adapters = {venue.name: build_adapter(venue, w3) for venue in venues}
    logger.info(f"✅ Venue adapters ready: {', '.join(str(adapter) for adapter in adapters.values())}")
    return adapters
