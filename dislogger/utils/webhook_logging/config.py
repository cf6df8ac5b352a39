"""
Webhook configuration management.

This module holds the category to webhook URL registry, the delivery
settings, and the configuration store that publishes a registry once at
startup and resolves destinations for every log call afterwards.
"""

import re
import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping, Optional

from ...core.exceptions import ConfigurationError
from ...types.models import CategoryKey, category_name

logger = logging.getLogger("dislogger.config")

# Discord rejects message content longer than this
DISCORD_MESSAGE_LIMIT = 2000


@dataclass
class WebhookSettings:
    """Delivery settings for the webhook logger."""

    # Retry settings
    max_attempts: int = 5
    base_delay: float = 1.0
    request_timeout_seconds: float = 10.0

    # Message formatting
    max_message_length: int = DISCORD_MESSAGE_LIMIT

    def validate(self) -> List[str]:
        """
        Validate the settings.

        Returns:
            List[str]: List of validation errors, empty if valid.
        """
        errors = []

        if self.max_attempts <= 0:
            errors.append(f"Invalid max_attempts: {self.max_attempts}. Must be > 0.")

        if self.base_delay < 0:
            errors.append(f"Invalid base_delay: {self.base_delay}. Must be >= 0.")

        if self.request_timeout_seconds <= 0:
            errors.append(f"Invalid request_timeout_seconds: {self.request_timeout_seconds}. Must be > 0.")

        if self.max_message_length <= 0 or self.max_message_length > DISCORD_MESSAGE_LIMIT:
            errors.append(
                f"Invalid max_message_length: {self.max_message_length}. "
                f"Must be > 0 and <= {DISCORD_MESSAGE_LIMIT}."
            )

        return errors


class WebhookRegistry(Mapping[str, str]):
    """
    Immutable mapping from category name to webhook URL.

    The first registered URL is the fallback for unknown or missing
    categories. Enum category keys are stored under their member name.
    """

    def __init__(self, webhook_urls: Mapping[CategoryKey, str]):
        if not webhook_urls:
            raise ConfigurationError("At least one webhook URL is required.")

        urls: Dict[str, str] = {}
        for key, url in webhook_urls.items():
            urls[category_name(key)] = url

        self._urls = MappingProxyType(urls)
        self._default_url = next(iter(urls.values()))

    def __getitem__(self, key: str) -> str:
        return self._urls[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._urls)

    def __len__(self) -> int:
        return len(self._urls)

    def __repr__(self) -> str:
        masked = {key: mask_webhook_url(url) for key, url in self._urls.items()}
        return f"WebhookRegistry({masked})"

    @property
    def default_url(self) -> str:
        return self._default_url

    def resolve(self, category: Optional[CategoryKey] = None) -> str:
        """
        Get the webhook URL for a category.

        Args:
            category: Category key, or None for the default destination.

        Returns:
            str: The registered URL, or the first registered URL when the
            category is missing or unknown.
        """
        name = category_name(category)
        if name is None:
            return self._default_url
        return self._urls.get(name, self._default_url)

    def validate(self) -> List[str]:
        """
        Check that every URL looks like a Discord webhook.

        Returns:
            List[str]: List of validation warnings, empty if all URLs are valid.
        """
        return [
            f"Invalid webhook URL for {name}: {mask_webhook_url(url)}"
            for name, url in self._urls.items()
            if not _is_valid_webhook_url(url)
        ]


class ConfigurationStore:
    """
    Holds the active webhook registry.

    ``configure()`` is expected once at startup, before log calls start.
    Each call swaps in a new immutable registry, so readers never see a
    partially built mapping.
    """

    def __init__(self, webhook_urls: Optional[Mapping[CategoryKey, str]] = None):
        self._registry: Optional[WebhookRegistry] = None
        if webhook_urls is not None:
            self.configure(webhook_urls)

    def configure(self, webhook_urls: Mapping[CategoryKey, str]) -> WebhookRegistry:
        """
        Replace the webhook mapping.

        Args:
            webhook_urls: Category to webhook URL mapping. Order matters: the
                first entry is the fallback destination.

        Returns:
            WebhookRegistry: The published registry.

        Raises:
            ConfigurationError: If the mapping is empty.
        """
        registry = WebhookRegistry(webhook_urls)

        for warning in registry.validate():
            logger.warning(f"Webhook configuration warning: {warning}")

        self._registry = registry
        logger.debug(f"Configured {len(registry)} webhook(s): {registry!r}")
        return registry

    @property
    def is_configured(self) -> bool:
        return self._registry is not None

    @property
    def registry(self) -> WebhookRegistry:
        if self._registry is None:
            raise ConfigurationError("Webhook logger not configured. Call configure() first.")
        return self._registry

    def resolve(self, category: Optional[CategoryKey] = None) -> str:
        """
        Resolve the destination URL for a category.

        Raises:
            ConfigurationError: If ``configure()`` has not been called.
        """
        return self.registry.resolve(category)


def _is_valid_webhook_url(url: str) -> bool:
    """
    Validate a Discord webhook URL.

    Args:
        url: The webhook URL to validate.

    Returns:
        bool: True if the URL is valid, False otherwise.
    """
    pattern = r'^https://(?:ptb\.|canary\.)?discord(?:app)?\.com/api/webhooks/\d+/[\w-]+$'
    return bool(re.match(pattern, url))


def mask_webhook_url(url: str) -> str:
    """Hide the token part of a webhook URL for local log output."""
    parts = url.rstrip('/').split('/')
    if len(parts) >= 2 and 'webhooks' in parts[:-1]:
        return '/'.join(parts[:-1] + ['***'])
    return "***masked***"
