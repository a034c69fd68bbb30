# -*- coding: utf-8 -*-
# Configuration management
# config/settings.py

"""
Configuration Management System for the AMM Arbitrage Engine
Handles environment variables, validation, and the asset/venue registries
"""

import math
import os
from pathlib import Path
from typing import Optional, Dict, Any, List
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
import logging

from dotenv import load_dotenv

from amm_arbitrage.exceptions import ConfigurationError
from amm_arbitrage.models import Asset, TradingCombination, Venue, VenueKind
from amm_arbitrage.utils.helpers import validate_address, validate_private_key
from config import addresses

project_root = Path(__file__).parent.parent

logger = logging.getLogger('settings')

# Load environment variables
env_path = project_root / 'config' / '.env'
if env_path.exists():
    load_dotenv(env_path)
    logger.info(f"[SUCCESS] Loaded environment from {env_path}")
else:
    logger.warning(f"[WARNING] No .env file found at {env_path}")


@dataclass
class NetworkConfig:
    """Network-specific configuration"""
    name: str
    rpc_url: str
    chain_id: int
    currency_symbol: str
    wrapped_native_symbol: str = "WETH"
    native_decimals: int = 18
    block_explorer: str = ""


@dataclass
class TradingConfig:
    """Evaluation thresholds and cost-model parameters"""
    notional_amounts: List[Decimal] = field(default_factory=lambda: [Decimal("1000"), Decimal("5000"), Decimal("10000")])
    min_profit_percentage: Decimal = Decimal("0.3")
    long_tail_min_profit_percentage: Decimal = Decimal("0.5")
    min_liquidity_usd: Decimal = Decimal("10000")
    long_tail_min_liquidity_usd: Decimal = Decimal("5000")
    max_loss_percentage: Decimal = Decimal("1.0")
    max_volatility_percentage: Decimal = Decimal("5.0")
    slippage_tolerance: Decimal = Decimal("0.005")  # 0.5%
    long_tail_slippage_tolerance: Decimal = Decimal("0.03")  # 3%
    flash_loan_fee_rate: Decimal = Decimal("0.0009")  # 0.09%
    fallback_gas_units: int = 500000
    gas_safety_margin: Decimal = Decimal("1.2")
    long_tail_liquidity_discount: Decimal = Decimal("0.10")
    gas_asset_fallback_price_usd: Decimal = Decimal("3000")
    usd_reference_symbol: str = "USDC"
    reference_venue: str = "camelot"

    def min_profit_for(self, long_tail: bool) -> Decimal:
        return self.long_tail_min_profit_percentage if long_tail else self.min_profit_percentage

    def min_liquidity_for(self, long_tail: bool) -> Decimal:
        return self.long_tail_min_liquidity_usd if long_tail else self.min_liquidity_usd

    def slippage_for(self, long_tail: bool) -> Decimal:
        return self.long_tail_slippage_tolerance if long_tail else self.slippage_tolerance


@dataclass
class MonitorConfig:
    """Volatility and trend sampling"""
    volatility_sample_delay: float = 1.0
    trend_window: float = 5.0
    trend_threshold_percentage: float = 2.0
    volatility_score_samples: int = 5
    volatility_score_ttl: float = 30.0
    trend_ttl: float = 60.0
    score_long_tail_volatility: bool = True


@dataclass
class ExecutionConfig:
    """Execution gate and settlement configuration"""
    auto_execute: bool = False
    dry_run: bool = True
    advanced_simulation: bool = True
    max_gas_price_gwei: Decimal = Decimal("1.0")
    private_key: Optional[str] = None
    settlement_contract_address: Optional[str] = None
    tick_interval: float = 10.0
    long_tail_tick_interval: float = 5.0
    execution_gas_limit_fallback: int = 1000000
    receipt_timeout: int = 300


@dataclass
class MonitoringConfig:
    """Logging, journals and alerting"""
    log_level: str = "INFO"
    log_dir: str = "logs"
    log_file_name: str = "arbitrage_engine.log"
    telegram_bot_token: Optional[str] = None
    telegram_chat_id: Optional[str] = None
    discord_webhook_url: Optional[str] = None
    discord_username: str = "AMM Arbitrage Engine"
    discord_avatar_url: Optional[str] = None
    enable_notifications: bool = True
    dry_run_notifications: bool = False
    max_alerts_per_hour: int = 20
    heartbeat_every: int = 10
    stats_every: int = 100
    report_every: int = 1000

    @property
    def log_file_path(self) -> Path:
        return Path(self.log_dir) / self.log_file_name


class Settings:
    """
    Main settings class that loads and validates all configuration
    """

    def __init__(self):
        self.project_root = project_root
        self.config_dir = project_root / 'config'
        self._errors: List[str] = []

        # Load all configuration sections
        self.network = self._load_network_config()
        self.trading = self._load_trading_config()
        self.monitor = self._load_monitor_config()
        self.execution = self._load_execution_config()
        self.monitoring = self._load_monitoring_config()

        # Registries
        self.assets = self._load_assets()
        self.venues = self._load_venues()
        self.combinations = self._load_combinations()

        # Validate configuration
        self._validate_configuration()

        logger.info("[CONFIG] Configuration loaded successfully")
        self._log_configuration_summary()

    def _load_network_config(self) -> NetworkConfig:
        """Load network configuration"""
        network_name = os.getenv('NETWORK', 'arbitrum').lower()
        rpc_url = os.getenv('RPC_URL') or os.getenv('ARBITRUM_RPC_URL', '')

        networks = {
            'arbitrum': NetworkConfig(
                name='Arbitrum One',
                rpc_url=rpc_url,
                chain_id=42161,
                currency_symbol='ETH',
                wrapped_native_symbol=addresses.WRAPPED_NATIVE,
                block_explorer='https://arbiscan.io'
            ),
            'local': NetworkConfig(
                name='Local Arbitrum Fork',
                rpc_url=rpc_url or 'http://127.0.0.1:8545',
                chain_id=42161,
                currency_symbol='ETH',
                wrapped_native_symbol=addresses.WRAPPED_NATIVE,
                block_explorer=''
            ),
        }

        if network_name not in networks:
            logger.warning(f"[WARNING] Unknown network {network_name}, defaulting to arbitrum")
            network_name = 'arbitrum'

        return networks[network_name]

    def _load_trading_config(self) -> TradingConfig:
        """Load trading configuration"""
        amounts = os.getenv('FLASH_LOAN_AMOUNTS', ','.join(addresses.DEFAULT_NOTIONAL_AMOUNTS))

        return TradingConfig(
            notional_amounts=[self._decimal('FLASH_LOAN_AMOUNTS', a.strip()) for a in amounts.split(',') if a.strip()],
            min_profit_percentage=self._decimal('MIN_PROFIT_PERCENTAGE', os.getenv('MIN_PROFIT_PERCENTAGE', '0.3')),
            long_tail_min_profit_percentage=self._decimal(
                'LONG_TAIL_MIN_PROFIT_PERCENTAGE', os.getenv('LONG_TAIL_MIN_PROFIT_PERCENTAGE', '0.5')),
            min_liquidity_usd=self._decimal('MIN_LIQUIDITY_USD', os.getenv('MIN_LIQUIDITY_USD', '10000')),
            long_tail_min_liquidity_usd=self._decimal(
                'LONG_TAIL_MIN_LIQUIDITY_USD', os.getenv('LONG_TAIL_MIN_LIQUIDITY_USD', '5000')),
            max_loss_percentage=self._decimal('MAX_LOSS_PERCENTAGE', os.getenv('MAX_LOSS_PERCENTAGE', '1.0')),
            max_volatility_percentage=self._decimal(
                'MAX_VOLATILITY_PERCENTAGE', os.getenv('MAX_VOLATILITY_PERCENTAGE', '5.0')),
            slippage_tolerance=self._decimal('SLIPPAGE_TOLERANCE', os.getenv('SLIPPAGE_TOLERANCE', '0.005')),
            long_tail_slippage_tolerance=self._decimal(
                'LONG_TAIL_SLIPPAGE_TOLERANCE', os.getenv('LONG_TAIL_SLIPPAGE_TOLERANCE', '0.03')),
            flash_loan_fee_rate=self._decimal('FLASH_LOAN_FEE_RATE', os.getenv('FLASH_LOAN_FEE_RATE', '0.0009')),
            fallback_gas_units=self._int('FALLBACK_GAS_UNITS', os.getenv('FALLBACK_GAS_UNITS', '500000')),
            gas_safety_margin=self._decimal('GAS_SAFETY_MARGIN', os.getenv('GAS_SAFETY_MARGIN', '1.2')),
            long_tail_liquidity_discount=self._decimal(
                'LONG_TAIL_LIQUIDITY_DISCOUNT', os.getenv('LONG_TAIL_LIQUIDITY_DISCOUNT', '0.10')),
            gas_asset_fallback_price_usd=self._decimal(
                'GAS_ASSET_FALLBACK_PRICE_USD', os.getenv('GAS_ASSET_FALLBACK_PRICE_USD', '3000')),
            usd_reference_symbol=os.getenv('USD_REFERENCE_SYMBOL', 'USDC').upper(),
            reference_venue=os.getenv('REFERENCE_VENUE', 'camelot').lower()
        )

    def _load_monitor_config(self) -> MonitorConfig:
        """Load volatility and trend configuration"""
        return MonitorConfig(
            volatility_sample_delay=self._float('VOLATILITY_SAMPLE_DELAY', os.getenv('VOLATILITY_SAMPLE_DELAY', '1.0')),
            trend_window=self._float('TREND_WINDOW', os.getenv('TREND_WINDOW', '5.0')),
            trend_threshold_percentage=self._float(
                'TREND_THRESHOLD_PERCENTAGE', os.getenv('TREND_THRESHOLD_PERCENTAGE', '2.0')),
            volatility_score_samples=self._int('VOLATILITY_SCORE_SAMPLES', os.getenv('VOLATILITY_SCORE_SAMPLES', '5')),
            volatility_score_ttl=self._float('VOLATILITY_SCORE_TTL', os.getenv('VOLATILITY_SCORE_TTL', '30')),
            trend_ttl=self._float('TREND_TTL', os.getenv('TREND_TTL', '60')),
            score_long_tail_volatility=os.getenv('SCORE_LONG_TAIL_VOLATILITY', 'true').lower() == 'true'
        )

    def _load_execution_config(self) -> ExecutionConfig:
        """Load execution configuration"""
        return ExecutionConfig(
            auto_execute=os.getenv('AUTO_EXECUTE', 'false').lower() == 'true',
            dry_run=os.getenv('DRY_RUN', 'true').lower() == 'true',
            advanced_simulation=os.getenv('ADVANCED_SIMULATION', 'true').lower() == 'true',
            max_gas_price_gwei=self._decimal('MAX_GAS_PRICE_GWEI', os.getenv('MAX_GAS_PRICE_GWEI', '1.0')),
            private_key=os.getenv('PRIVATE_KEY') or None,
            settlement_contract_address=os.getenv('FLASHLOAN_CONTRACT_ADDRESS') or None,
            tick_interval=self._float('CHECK_INTERVAL', os.getenv('CHECK_INTERVAL', '10')),
            long_tail_tick_interval=self._float('LONG_TAIL_CHECK_INTERVAL', os.getenv('LONG_TAIL_CHECK_INTERVAL', '5')),
            execution_gas_limit_fallback=self._int(
                'EXECUTION_GAS_LIMIT_FALLBACK', os.getenv('EXECUTION_GAS_LIMIT_FALLBACK', '1000000')),
            receipt_timeout=self._int('RECEIPT_TIMEOUT', os.getenv('RECEIPT_TIMEOUT', '300'))
        )

    def _load_monitoring_config(self) -> MonitoringConfig:
        """Load monitoring configuration"""
        return MonitoringConfig(
            log_level=os.getenv('LOG_LEVEL', 'INFO'),
            log_dir=os.getenv('LOG_DIR', 'logs'),
            telegram_bot_token=os.getenv('TELEGRAM_BOT_TOKEN'),
            telegram_chat_id=os.getenv('TELEGRAM_CHAT_ID'),
            discord_webhook_url=os.getenv('DISCORD_WEBHOOK_URL'),
            discord_username=os.getenv("DISCORD_USERNAME", "AMM Arbitrage Engine"),
            discord_avatar_url=os.getenv("DISCORD_AVATAR_URL"),
            enable_notifications=os.getenv('ENABLE_NOTIFICATIONS', 'true').lower() == 'true',
            dry_run_notifications=os.getenv('DRY_RUN_NOTIFICATIONS', 'false').lower() == 'true',
            max_alerts_per_hour=self._int('MAX_ALERTS_PER_HOUR', os.getenv('MAX_ALERTS_PER_HOUR', '20'))
        )

    def _load_assets(self) -> Dict[str, Asset]:
        """Build the asset registry from config/addresses.py"""
        return {
            symbol: Asset(
                address=address,
                symbol=symbol,
                decimals=addresses.get_token_decimals(symbol),
                is_stable=addresses.is_stablecoin(symbol),
                is_major=addresses.is_major_token(symbol),
            )
            for symbol, address in addresses.ARBITRUM_TOKENS.items()
        }

    def _load_venues(self) -> Dict[str, Venue]:
        """Build enabled venues; endpoint checks happen in validation"""
        enabled_str = os.getenv('ENABLED_VENUES', ','.join(addresses.VENUES))
        enabled = [name.strip().lower() for name in enabled_str.split(',') if name.strip()]

        venues = {}
        for name in enabled:
            venue_config = addresses.get_venue_config(name)
            if venue_config is None:
                self._errors.append(f"Unknown venue '{name}' in ENABLED_VENUES")
                continue

            try:
                kind = VenueKind(venue_config['kind'])
            except ValueError:
                self._errors.append(f"Venue '{name}' has unknown kind {venue_config['kind']!r}")
                continue

            fee_tiers = venue_config.get('fee_tiers', [])
            tiers_override = os.getenv(f'{name.upper()}_FEE_TIERS')
            if tiers_override:
                fee_tiers = [self._int(f'{name.upper()}_FEE_TIERS', tier.strip())
                             for tier in tiers_override.split(',') if tier.strip()]

            venues[name] = Venue(
                name=name,
                kind=kind,
                router=venue_config.get('router'),
                factory=venue_config.get('factory'),
                quoter=venue_config.get('quoter'),
                fee_tiers=tuple(fee_tiers),
                quote_via=os.getenv(f'{name.upper()}_QUOTE_VIA', 'router').lower(),
            )

        return venues

    def _load_combinations(self) -> List[TradingCombination]:
        """Resolve configured combinations against the registries"""
        raw = os.getenv('TRADING_COMBINATIONS')
        if raw:
            entries = []
            for item in raw.split(','):
                parts = [part.strip() for part in item.split(':')]
                if len(parts) != 4:
                    self._errors.append(f"Malformed trading combination '{item}' (expected IN:OUT:BUY:SELL)")
                    continue
                entries.append({"asset_in": parts[0], "asset_out": parts[1], "buy": parts[2], "sell": parts[3]})
        else:
            entries = addresses.TRADING_COMBINATIONS

        combinations = []
        for entry in entries:
            asset_in = self.assets.get(entry['asset_in'].upper())
            asset_out = self.assets.get(entry['asset_out'].upper())
            buy_venue = self.venues.get(entry['buy'].lower())
            sell_venue = self.venues.get(entry['sell'].lower())

            missing = [
                label for label, value in (
                    (f"asset {entry['asset_in']}", asset_in),
                    (f"asset {entry['asset_out']}", asset_out),
                    (f"venue {entry['buy']}", buy_venue),
                    (f"venue {entry['sell']}", sell_venue),
                ) if value is None
            ]
            if missing:
                self._errors.append(f"Trading combination {entry} references unknown {', '.join(missing)}")
                continue

            combinations.append(TradingCombination(asset_in, asset_out, buy_venue, sell_venue))

        return combinations

    def _decimal(self, name: str, value: str) -> Decimal:
        try:
            number = Decimal(value)
        except InvalidOperation:
            self._errors.append(f"{name} must be a number, got {value!r}")
            return Decimal(0)
        if not number.is_finite():
            self._errors.append(f"{name} must be a finite number, got {value!r}")
            return Decimal(0)
        return number

    def _int(self, name: str, value: str) -> int:
        try:
            return int(value)
        except ValueError:
            self._errors.append(f"{name} must be an integer, got {value!r}")
            return 0

    def _float(self, name: str, value: str) -> float:
        try:
            number = float(value)
        except ValueError:
            self._errors.append(f"{name} must be a number, got {value!r}")
            return 0.0
        if not math.isfinite(number):
            self._errors.append(f"{name} must be a finite number, got {value!r}")
            return 0.0
        return number

    def _validate_configuration(self):
        """Validate configuration for critical issues"""
        errors = list(self._errors)
        warnings = []

        # Network validation
        if not self.network.rpc_url:
            errors.append("RPC_URL is required")

        # Registry validation
        for venue in self.venues.values():
            errors.extend(self._venue_errors(venue))

        for symbol in (self.trading.usd_reference_symbol, self.network.wrapped_native_symbol):
            if symbol not in self.assets:
                errors.append(f"Asset {symbol} is required but not configured")

        if self.trading.reference_venue not in self.venues:
            errors.append(f"REFERENCE_VENUE '{self.trading.reference_venue}' is not an enabled venue")

        if not self.combinations and not self._errors:
            errors.append("At least one trading combination is required")

        # Trading validation
        if not self.trading.notional_amounts or any(a <= 0 for a in self.trading.notional_amounts):
            errors.append("FLASH_LOAN_AMOUNTS must be a non-empty list of positive amounts")

        for name, value in (("SLIPPAGE_TOLERANCE", self.trading.slippage_tolerance),
                            ("LONG_TAIL_SLIPPAGE_TOLERANCE", self.trading.long_tail_slippage_tolerance),
                            ("FLASH_LOAN_FEE_RATE", self.trading.flash_loan_fee_rate),
                            ("LONG_TAIL_LIQUIDITY_DISCOUNT", self.trading.long_tail_liquidity_discount)):
            if value < 0 or value >= 1:
                errors.append(f"{name} must be between 0 and 1")

        if self.trading.gas_safety_margin < 1:
            errors.append("GAS_SAFETY_MARGIN must be at least 1")

        if self.execution.tick_interval <= 0:
            errors.append("CHECK_INTERVAL must be positive")

        for name, value in (("FALLBACK_GAS_UNITS", self.trading.fallback_gas_units),
                            ("EXECUTION_GAS_LIMIT_FALLBACK", self.execution.execution_gas_limit_fallback),
                            ("RECEIPT_TIMEOUT", self.execution.receipt_timeout),
                            ("VOLATILITY_SCORE_SAMPLES", self.monitor.volatility_score_samples),
                            ("LONG_TAIL_CHECK_INTERVAL", self.execution.long_tail_tick_interval)):
            if value <= 0:
                errors.append(f"{name} must be positive")

        if self.trading.max_loss_percentage < 0:
            errors.append("MAX_LOSS_PERCENTAGE must not be negative")

        if any(tier <= 0 for venue in self.venues.values() for tier in venue.fee_tiers):
            errors.append("Fee tiers must be positive integers")

        # Security validation
        if self.execution.private_key and not validate_private_key(self.execution.private_key):
            errors.append("PRIVATE_KEY must be 64 hex characters (32 bytes)")

        if self.execution.settlement_contract_address and \
                not validate_address(self.execution.settlement_contract_address):
            errors.append("FLASHLOAN_CONTRACT_ADDRESS is not a valid address")

        if not self.execution.private_key:
            warnings.append("PRIVATE_KEY not set - report-only mode")
        if not self.execution.settlement_contract_address:
            warnings.append("FLASHLOAN_CONTRACT_ADDRESS not set - report-only mode")
        if self.execution.auto_execute and self.execution.dry_run:
            warnings.append("AUTO_EXECUTE enabled in dry run - accepted trades are simulated only")

        # Monitoring validation
        if self.monitoring.enable_notifications:
            if not self.monitoring.telegram_bot_token and not self.monitoring.discord_webhook_url:
                warnings.append("Notifications enabled but no Telegram or Discord configured")

        # Log results
        if errors:
            logger.error(f"[ERROR] Configuration errors: {', '.join(errors)}")
            raise ConfigurationError(f"Configuration validation failed: {', '.join(errors)}")

        for warning in warnings:
            logger.warning(f"[WARNING] {warning}")

    @staticmethod
    def _venue_errors(venue: Venue) -> List[str]:
        errors = []
        if venue.kind is VenueKind.CONSTANT_PRODUCT:
            if venue.quote_via not in ("router", "reserves"):
                errors.append(f"Venue {venue.name}: quote_via must be 'router' or 'reserves'")
            if venue.quote_via == "router" and not venue.router:
                errors.append(f"Venue {venue.name}: router address is required")
            if venue.quote_via == "reserves" and not venue.factory:
                errors.append(f"Venue {venue.name}: factory address is required for reserve quotes")
        else:
            if not venue.quoter:
                errors.append(f"Venue {venue.name}: quoter address is required")
            if not venue.fee_tiers:
                errors.append(f"Venue {venue.name}: at least one fee tier is required")

        for label, address in (("router", venue.router), ("factory", venue.factory), ("quoter", venue.quoter)):
            if address and not validate_address(address):
                errors.append(f"Venue {venue.name}: invalid {label} address {address}")
        return errors

    def _log_configuration_summary(self):
        """Log configuration summary"""
        logger.info("[CONFIG] Configuration Summary:")
        logger.info(f"  [NETWORK] Network: {self.network.name} (chain {self.network.chain_id})")
        logger.info(f"  [AMOUNTS] Notional: {', '.join(str(a) for a in self.trading.notional_amounts)}")
        logger.info(f"  [PROFIT] Min Profit: {self.trading.min_profit_percentage}% "
                    f"(long-tail {self.trading.long_tail_min_profit_percentage}%)")
        logger.info(f"  [LOSS] Max Loss: {self.trading.max_loss_percentage}%")
        logger.info(f"  [TARGET] Slippage: {self.trading.slippage_tolerance:.2%}")
        logger.info(f"  [GAS] Max Gas: {self.execution.max_gas_price_gwei} gwei")
        logger.info(f"  [VENUES] Venues: {', '.join(self.venues)}")
        logger.info(f"  [PAIRS] Combinations: {len(self.combinations)}")
        logger.info(f"  [RISK] Mode: {'DRY RUN' if self.execution.dry_run else 'LIVE'}"
                    f" / auto-execute {'ON' if self.execution.auto_execute else 'OFF'}")

        if self.report_only:
            logger.warning("[SAFE] REPORT-ONLY MODE - opportunities are logged, never executed")

    @property
    def report_only(self) -> bool:
        return not (self.execution.private_key and self.execution.settlement_contract_address)

    @property
    def usd_reference_asset(self) -> Asset:
        return self.assets[self.trading.usd_reference_symbol]

    @property
    def gas_asset(self) -> Asset:
        return self.assets[self.network.wrapped_native_symbol]

    def get_asset(self, symbol: str) -> Asset:
        try:
            return self.assets[symbol.upper()]
        except KeyError:
            raise ConfigurationError(f"Unknown asset symbol {symbol}") from None

    def get_venue(self, name: str) -> Venue:
        try:
            return self.venues[name.lower()]
        except KeyError:
            raise ConfigurationError(f"Unknown venue {name}") from None

    def tick_interval(self) -> float:
        """Shorter cadence when any combination involves a long-tail asset"""
        if any(c.involves_long_tail for c in self.combinations):
            return min(self.execution.tick_interval, self.execution.long_tail_tick_interval)
        return self.execution.tick_interval

    def to_dict(self) -> Dict[str, Any]:
        """Convert settings to dictionary (excluding sensitive data)"""
        return {
            'network': {
                'name': self.network.name,
                'chain_id': self.network.chain_id,
            },
            'trading': {
                'notional_amounts': [str(a) for a in self.trading.notional_amounts],
                'min_profit_percentage': str(self.trading.min_profit_percentage),
                'max_loss_percentage': str(self.trading.max_loss_percentage),
                'slippage_tolerance': str(self.trading.slippage_tolerance),
            },
            'execution': {
                'auto_execute': self.execution.auto_execute,
                'dry_run': self.execution.dry_run,
                'has_private_key': bool(self.execution.private_key),
                'settlement_contract': self.execution.settlement_contract_address,
            },
            'venues': list(self.venues),
            'combinations': [c.label for c in self.combinations],
        }


# Global settings instance
_settings_instance: Optional[Settings] = None


def load_settings() -> Settings:
    """Load and return global settings instance"""
    global _settings_instance

    if _settings_instance is None:
        _settings_instance = Settings()

    return _settings_instance


def reload_settings() -> Settings:
    """Reload settings from environment"""
    global _settings_instance
    _settings_instance = None
    return load_settings()


# Export main classes and functions
__all__ = [
    'Settings', 'NetworkConfig', 'TradingConfig', 'MonitorConfig',
    'ExecutionConfig', 'MonitoringConfig', 'load_settings', 'reload_settings'
]
