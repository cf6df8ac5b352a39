"""
Discord Webhook Logging Service

Entry point for application code. ``DiscordLogger`` ties together:
- the configuration store that routes categories to webhook URLs
- the formatter that renders a log record as Discord markdown
- the webhook client that delivers it and retries on rate limits

Every send is independent and always completes with a boolean; delivery
failures are logged locally and never raised to the caller.
"""

import logging
from typing import Awaitable, Callable, Mapping, Optional

from ..core.config import LoggerConfig
from ..core.exceptions import ConfigurationError
from ..types.models import CategoryKey, LogRecord, Severity
from ..utils.device_info import UNKNOWN_PLATFORM, get_device_info
from ..utils.webhook_logging.config import ConfigurationStore, WebhookRegistry, WebhookSettings
from ..utils.webhook_logging.message_formatter import MessageFormatter
from ..utils.webhook_logging.webhook_manager import WebhookClient

logger = logging.getLogger("dislogger.service")

DeviceInfoProvider = Callable[[], Awaitable[str]]


class DiscordLogger:
    """
    Sends log events to Discord webhooks.

    Example:
        >>> discord_logger = DiscordLogger()
        >>> discord_logger.configure({
        ...     "auth": "https://discord.com/api/webhooks/123/abc",
        ...     "home": "https://discord.com/api/webhooks/456/def",
        ... })
        >>> await discord_logger.error("Login failed", user="alice", category="auth")
    """

    def __init__(
        self,
        store: Optional[ConfigurationStore] = None,
        client: Optional[WebhookClient] = None,
        formatter: Optional[MessageFormatter] = None,
        device_info: DeviceInfoProvider = get_device_info,
        settings: Optional[WebhookSettings] = None
    ):
        """
        Initialize the logger.

        Args:
            store: Webhook configuration store; an unconfigured one is created if omitted
            client: Webhook client used for delivery
            formatter: Message formatter
            device_info: Coroutine function describing the current device
            settings: Delivery settings used for any collaborator created here
        """
        self.settings = settings or WebhookSettings()
        self.store = store or ConfigurationStore()
        self.client = client or WebhookClient(self.settings)
        self.formatter = formatter or MessageFormatter(self.settings.max_message_length)
        self._device_info = device_info

    @classmethod
    def from_config(cls, config: LoggerConfig, **kwargs) -> "DiscordLogger":
        """
        Build a logger from environment configuration.

        The store is configured only when the configuration holds at least one
        webhook URL.
        """
        store = ConfigurationStore(config.webhook_urls or None)
        return cls(store=store, settings=config.settings, **kwargs)

    def configure(self, webhook_urls: Mapping[CategoryKey, str]) -> WebhookRegistry:
        """
        Configure the logger with Discord webhook URLs for different categories.

        Replaces any earlier configuration. The first URL is used for log
        calls without a category or with an unknown one.
        """
        return self.store.configure(webhook_urls)

    async def send_log(
        self,
        content: str,
        user: str = "N/A",
        category: Optional[CategoryKey] = None,
        extra_fields: Optional[Mapping[str, str]] = None
    ) -> bool:
        """
        Send a log message to the configured Discord webhook.

        Args:
            content: The main content of the log message
            user: User identifier
            category: Category used to pick the webhook
            extra_fields: Additional ``key: value`` fields, shown in the given order

        Returns:
            bool: True if Discord accepted the message, False otherwise
        """
        try:
            webhook_url = self.store.resolve(category)
        except ConfigurationError as e:
            logger.error(e.message)
            return False

        record = LogRecord(
            content=content,
            user=user,
            category=category,
            extra_fields=dict(extra_fields or {})
        )
        message = self.formatter.format_record(record, await self._get_device_info())

        return await self.client.send_message(webhook_url, message)

    async def error(self, content: str, user: str = "N/A", category: Optional[CategoryKey] = None) -> bool:
        """Send an error log."""
        return await self.send_log(content, user, category, {'Severity': Severity.ERROR.value})

    async def info(self, content: str, user: str = "N/A", category: Optional[CategoryKey] = None) -> bool:
        """Send an info log."""
        return await self.send_log(content, user, category, {'Severity': Severity.INFO.value})

    async def warning(self, content: str, user: str = "N/A", category: Optional[CategoryKey] = None) -> bool:
        """Send a warning log."""
        return await self.send_log(content, user, category, {'Severity': Severity.WARNING.value})

    async def _get_device_info(self) -> str:
        """Ask the device provider for a description, falling back to a placeholder."""
        try:
            return await self._device_info()
        except Exception as e:
            logger.warning(f"Could not read device info, using placeholder: {e!r}")
            return UNKNOWN_PLATFORM

    async def close(self) -> None:
        """Release the HTTP session."""
        await self.client.close()

    async def __aenter__(self) -> "DiscordLogger":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
