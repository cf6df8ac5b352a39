"""
dislogger - forward application log events to Discord webhooks.

Typical use:

    from dislogger import DiscordLogger

    async with DiscordLogger() as discord_logger:
        discord_logger.configure({"auth": AUTH_WEBHOOK_URL, "home": HOME_WEBHOOK_URL})
        await discord_logger.warning("Token refresh failed", user="alice", category="auth")
"""

from .core.config import LoggerConfig, load_config
from .core.exceptions import ConfigurationError, DeliveryError, DisLoggerError, RateLimitError
from .services.webhook_logging import DiscordLogger
from .types.models import DeliveryAttempt, DeliveryState, LogRecord, Severity
from .utils.device_info import get_device_info
from .utils.logging import configure_logging
from .utils.webhook_logging import (
    ConfigurationStore,
    MessageFormatter,
    WebhookClient,
    WebhookMessage,
    WebhookRegistry,
    WebhookSettings,
)

__version__ = "1.0.0"

__all__ = [
    'DiscordLogger',
    'LoggerConfig',
    'load_config',
    'configure_logging',
    'get_device_info',
    'ConfigurationStore',
    'MessageFormatter',
    'WebhookClient',
    'WebhookMessage',
    'WebhookRegistry',
    'WebhookSettings',
    'DeliveryAttempt',
    'DeliveryState',
    'LogRecord',
    'Severity',
    'DisLoggerError',
    'ConfigurationError',
    'DeliveryError',
    'RateLimitError',
]
