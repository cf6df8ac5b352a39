"""
Discord Webhook Logging System.

This module provides the building blocks for forwarding log events to
Discord channels:

- Category based webhook routing with a first-registered fallback
- Plain-text message formatting sized to Discord's content limit
- Delivery with retry on Discord rate limits (HTTP 429)
"""

from .config import (
    ConfigurationStore,
    WebhookRegistry,
    WebhookSettings,
    mask_webhook_url,
)
from .message_formatter import MessageFormatter, WebhookMessage
from .webhook_manager import WebhookClient

__all__ = [
    'ConfigurationStore',
    'WebhookRegistry',
    'WebhookSettings',
    'mask_webhook_url',
    'MessageFormatter',
    'WebhookMessage',
    'WebhookClient',
]
