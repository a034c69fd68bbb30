# amm_arbitrage/utils/notifications.py
"""
Notification system for the arbitrage engine.

Supports two channels:
- Discord webhooks
- Telegram bot messages

Alerts are rate limited per type and per hour, and suppressed in dry-run
mode unless explicitly enabled. Delivery failures are logged, never raised.

Usage:
    from amm_arbitrage.utils.notifications import NotificationConfig, NotificationManager

    notifier = NotificationManager(NotificationConfig.from_monitoring(settings.monitoring, dry_run=True))
    await notifier.send_status_alert("Started", "Monitoring 7 combinations")
"""

import asyncio
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import aiohttp

from .logger import get_logger

logger = get_logger(__name__)

REQUEST_TIMEOUT = aiohttp.ClientTimeout(total=10)


@dataclass
class NotificationConfig:
    """Configuration for notification channels."""

    # Discord
    discord_webhook_url: Optional[str] = None
    discord_username: str = "AMM Arbitrage Engine"
    discord_avatar_url: Optional[str] = None

    # Telegram
    telegram_bot_token: Optional[str] = None
    telegram_chat_id: Optional[str] = None

    enabled: bool = True
    max_alerts_per_hour: int = 20

    # Dry-run controls
    dry_run: bool = False
    dry_run_notifications: bool = False

    @classmethod
    def from_monitoring(cls, monitoring, dry_run: bool = False) -> "NotificationConfig":
        """Build from the MonitoringConfig settings section."""
        return cls(
            discord_webhook_url=monitoring.discord_webhook_url,
            discord_username=monitoring.discord_username,
            discord_avatar_url=monitoring.discord_avatar_url,
            telegram_bot_token=monitoring.telegram_bot_token,
            telegram_chat_id=monitoring.telegram_chat_id,
            enabled=monitoring.enable_notifications,
            max_alerts_per_hour=monitoring.max_alerts_per_hour,
            dry_run=dry_run,
            dry_run_notifications=monitoring.dry_run_notifications,
        )

    @property
    def has_channels(self) -> bool:
        return bool(self.discord_webhook_url or (self.telegram_bot_token and self.telegram_chat_id))


class AlertRateLimiter:
    """Per-type minimum intervals plus an hourly cap."""

    def __init__(self, config: NotificationConfig):
        self.config = config
        self.max_per_hour = config.max_alerts_per_hour
        self.alerts_sent: List[datetime] = []
        self.last_alert_times: Dict[str, float] = {}
        self.rate_limited_until = 0.0

        # Minimum intervals between same type of alerts (seconds)
        self.min_intervals = {
            'trade': 30,
            'opportunity': 60,
            'error': 10,
            'status': 30,
            'general': 15
        }

    def can_send_alert(self, alert_type: str = "general") -> bool:
        if not self.config.enabled:
            return False

        if self.config.dry_run and not self.config.dry_run_notifications:
            logger.debug(f"Skipping {alert_type} notification - dry run mode")
            return False

        # Errors bypass the limits
        if alert_type == 'error':
            return True

        now = datetime.now()
        current_time = now.timestamp()

        if current_time < self.rate_limited_until:
            logger.debug(f"Skipping {alert_type} alert - Discord rate limited")
            return False

        self.alerts_sent = [
            alert_time for alert_time in self.alerts_sent
            if (now - alert_time).total_seconds() < 3600
        ]

        if len(self.alerts_sent) >= self.max_per_hour:
            logger.debug(f"Hourly alert limit reached ({self.max_per_hour})")
            return False

        min_interval = self.min_intervals.get(alert_type, 15)
        last_alert_time = self.last_alert_times.get(alert_type, 0)

        if current_time - last_alert_time < min_interval:
            logger.debug(f"Skipping {alert_type} alert - too frequent")
            return False

        self.alerts_sent.append(now)
        self.last_alert_times[alert_type] = current_time
        return True

    def set_rate_limited(self, retry_after: float = 60):
        self.rate_limited_until = datetime.now().timestamp() + retry_after
        logger.warning(f"Rate limited for {retry_after} seconds")

    def is_rate_limited(self) -> bool:
        return datetime.now().timestamp() < self.rate_limited_until


class NotificationManager:
    """Sends engine alerts to every configured channel."""

    def __init__(self, config: NotificationConfig):
        self.config = config
        self.rate_limiter = AlertRateLimiter(config)
        self.session: Optional[aiohttp.ClientSession] = None

    async def _get_session(self) -> aiohttp.ClientSession:
        if self.session is None:
            self.session = aiohttp.ClientSession(timeout=REQUEST_TIMEOUT)
        return self.session

    async def close(self):
        if self.session:
            await self.session.close()
            self.session = None

    async def send_opportunity_alert(self, opportunity) -> List[Any]:
        if not self.rate_limiter.can_send_alert("opportunity"):
            return []

        combination = opportunity.combination
        asset_in = opportunity.asset_in
        title = "Arbitrage Opportunity"
        message = (
            f"**Pair:** {combination.pair}\n"
            f"**Route:** {combination.buy_venue.name} -> {combination.sell_venue.name}\n"
            f"**Amount:** {asset_in.from_base_units(opportunity.amount_in)} {asset_in.symbol}\n"
            f"**Net Profit:** {opportunity.net_profit_human:.6f} {asset_in.symbol} "
            f"({opportunity.profit_percentage:.4f}%)\n"
            f"**Liquidity:** ${opportunity.liquidity_buy_usd:,.0f} / ${opportunity.liquidity_sell_usd:,.0f}"
        )
        if opportunity.trend is not None:
            message += f"\n**Trend:** {opportunity.trend.value}"

        return await self._send_to_all_channels(title, message, color=0xFFFF00)

    async def send_trade_alert(self, opportunity, tx_hash: Optional[str] = None,
                               success: bool = True) -> List[Any]:
        if not self.rate_limiter.can_send_alert("trade"):
            return []

        asset_in = opportunity.asset_in
        title = "Arbitrage Executed" if success else "Arbitrage Failed"
        message = (
            f"**Pair:** {opportunity.combination.label}\n"
            f"**Expected Profit:** {opportunity.net_profit_human:.6f} {asset_in.symbol} "
            f"({opportunity.profit_percentage:.4f}%)"
        )
        if tx_hash:
            message += f"\n**Transaction:** `{tx_hash}`"

        return await self._send_to_all_channels(title, message, color=0x00FF00 if success else 0xFF0000)

    async def send_error_alert(self, error_message: str, additional_info: Optional[str] = None) -> List[Any]:
        if not self.rate_limiter.can_send_alert("error"):
            return []

        title = "Engine Error"
        message = f"**Error:** {error_message}"
        if additional_info:
            message += f"\n**Details:** {additional_info}"

        return await self._send_to_all_channels(title, message, color=0xFF0000)

    async def send_status_alert(self, status: str, details: Optional[str] = None) -> List[Any]:
        if not self.rate_limiter.can_send_alert("status"):
            return []

        title = "Engine Status"
        message = f"**Status:** {status}"
        if details:
            message += f"\n**Details:** {details}"

        return await self._send_to_all_channels(title, message, color=0x0000FF)

    async def _send_to_all_channels(self, title: str, message: str, color: int = 0x0080FF) -> List[Any]:
        tasks = []

        if self.config.discord_webhook_url:
            tasks.append(self._send_discord(title, message, color))

        if self.config.telegram_bot_token and self.config.telegram_chat_id:
            tasks.append(self._send_telegram(title, message))

        if not tasks:
            return []

        return await asyncio.gather(*tasks, return_exceptions=True)

    async def _send_discord(self, title: str, message: str, color: int) -> bool:
        try:
            if self.rate_limiter.is_rate_limited():
                logger.debug("Discord rate limited - skipping notification")
                return False

            embed = {
                "title": title,
                "description": message,
                "color": color,
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "footer": {"text": self.config.discord_username}
            }
            payload = {
                "username": self.config.discord_username,
                "embeds": [embed]
            }
            if self.config.discord_avatar_url and self.config.discord_avatar_url.startswith(("http://", "https://")):
                payload["avatar_url"] = self.config.discord_avatar_url

            session = await self._get_session()
            async with session.post(self.config.discord_webhook_url, json=payload) as response:
                if response.status == 204:
                    logger.debug("Discord notification sent successfully")
                    return True

                if response.status == 429:
                    try:
                        response_data = await response.json()
                        retry_after = float(response_data.get('retry_after', 60))
                    except (aiohttp.ContentTypeError, ValueError):
                        retry_after = 60.0
                    self.rate_limiter.set_rate_limited(retry_after)
                    return False

                response_text = await response.text()
                logger.error(f"Discord notification failed: {response.status} - {response_text}")
                return False

        except Exception as e:
            logger.error(f"Discord notification error: {e}")
            return False

    async def _send_telegram(self, title: str, message: str) -> bool:
        try:
            url = f"https://api.telegram.org/bot{self.config.telegram_bot_token}/sendMessage"
            payload = {
                "chat_id": self.config.telegram_chat_id,
                "text": f"*{title}*\n\n{message}",
                "parse_mode": "Markdown"
            }

            session = await self._get_session()
            async with session.post(url, json=payload) as response:
                if response.status == 200:
                    logger.debug("Telegram notification sent successfully")
                    return True

                if response.status == 429:
                    logger.warning("Telegram rate limited")
                    return False

                response_text = await response.text()
                logger.error(f"Telegram notification failed: {response.status} - {response_text}")
                return False

        except Exception as e:
            logger.error(f"Telegram notification error: {e}")
            return False
