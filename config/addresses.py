# config/addresses.py
"""
Arbitrum One Contract Addresses
Static registry of tokens, AMM venues and default trading combinations
"""

from typing import Dict, Optional

# =============================================================================
# TOKEN ADDRESSES (Arbitrum One)
# =============================================================================

ARBITRUM_TOKENS = {
    # Stablecoins / reference assets
    "USDC": "0xFF970A61A04b1cA14834A43f5dE4533eBDDB5CC8",  # Bridged USD Coin (USDC.e)

    # Native & wrapped
    "WETH": "0x82aF49447D8a07e3bd95BD0d56f35241523fBab1",  # Wrapped Ether, pays for gas

    # Long-tail (memecoins)
    "WIF": "0x12b535631ae4431c909e775e610e7391e16a09e7",  # Dogwifhat
    "PEPE": "0x25d887Ce7a35172C62Eb276F767BC7624C9505a6",  # Pepe
    "SHIB": "0x8f6F63e05408D3e38F2E3768DD41582707803F1D",  # Shiba Inu
    "FLOKI": "0x9f6175901d5700467D017732Be484592315894E4",  # Floki Inu
    "BONK": "0x1FD11856871b33050c7806f0e354C31B15519416",  # Bonk
}

# Decimals assumed for bridged memecoins; verify with scripts/discover_pairs.py
TOKEN_DECIMALS = {
    "USDC": 6,
    "WETH": 18,
    "WIF": 18,
    "PEPE": 18,
    "SHIB": 18,
    "FLOKI": 18,
    "BONK": 18,
}

STABLECOINS = ["USDC"]

# Everything else is treated as long-tail: stricter liquidity discount,
# wider slippage, trend tracking
MAJOR_TOKENS = ["USDC", "WETH"]

WRAPPED_NATIVE = "WETH"

# =============================================================================
# VENUE ADDRESSES
# =============================================================================

# Uniswap V3 fee tiers: 0.05%, 0.3%, 1%
UNISWAP_V3_FEE_TIERS = [500, 3000, 10000]

VENUES = {
    # Camelot (Uniswap V2 fork)
    "camelot": {
        "kind": "constant-product",
        "router": "0xc873fEcbd354f5A56E00E710B90EF4201db2448d",
        "factory": "0x6EcCab422D763aC031210895C81787E87B43A652",
    },

    # SushiSwap (Uniswap V2 fork)
    "sushi": {
        "kind": "constant-product",
        "router": "0x1b02dA8Cb0d097eB8D57A175b88c7D8b47997506",
        "factory": "0xc35DADB65012eC5796536bD9864eD8773aBc74C4",
    },

    # Uniswap V3
    "uniswap": {
        "kind": "concentrated-liquidity",
        "router": "0xE592427A0AEce92De3Edee1F18E0157C05861564",
        "quoter": "0xb27308f9F90D607463bb33eA1BeBb41C27CE5AB6",
        "factory": "0x1F98431c8aD98523631AE4a59f267346ea31F984",
        "fee_tiers": UNISWAP_V3_FEE_TIERS,
    },
}

# =============================================================================
# DEFAULT TRADING COMBINATIONS (asset_in, asset_out, buy venue, sell venue)
# =============================================================================

TRADING_COMBINATIONS = [
    {"asset_in": "USDC", "asset_out": "WETH", "buy": "camelot", "sell": "sushi"},
    {"asset_in": "USDC", "asset_out": "WETH", "buy": "sushi", "sell": "camelot"},
    {"asset_in": "USDC", "asset_out": "WETH", "buy": "camelot", "sell": "uniswap"},
    {"asset_in": "USDC", "asset_out": "WETH", "buy": "uniswap", "sell": "camelot"},
    {"asset_in": "USDC", "asset_out": "WETH", "buy": "sushi", "sell": "uniswap"},
    {"asset_in": "USDC", "asset_out": "WETH", "buy": "uniswap", "sell": "sushi"},
    {"asset_in": "WETH", "asset_out": "WIF", "buy": "sushi", "sell": "sushi"},
]

# Flash-loan notional amounts, in human units of asset_in
DEFAULT_NOTIONAL_AMOUNTS = ["1000", "5000", "10000"]


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================


def get_token_symbol(address: str) -> str:
    """Get token symbol from address"""
    for symbol, token_address in ARBITRUM_TOKENS.items():
        if token_address.lower() == address.lower():
            return symbol
    return "UNKNOWN"


def get_token_decimals(symbol: str, default: int = 18) -> int:
    return TOKEN_DECIMALS.get(symbol.upper(), default)


def is_stablecoin(symbol: str) -> bool:
    return symbol.upper() in STABLECOINS


def is_major_token(symbol: str) -> bool:
    return symbol.upper() in MAJOR_TOKENS


def get_venue_config(name: str) -> Optional[Dict]:
    return VENUES.get(name.lower())
