"""
Environment-based configuration loading.

This module reads webhook URLs and delivery settings from environment
variables, optionally loaded from a ``.env`` file, and validates them with
clear error messages.

Recognized variables:
    DISLOGGER_WEBHOOK_URL: Webhook for the ``default`` category
    DISLOGGER_WEBHOOK_<CATEGORY>_URL: Webhook for ``<category>`` (lower-cased)
    DISLOGGER_MAX_ATTEMPTS, DISLOGGER_BASE_DELAY, DISLOGGER_REQUEST_TIMEOUT,
    DISLOGGER_MAX_MESSAGE_LENGTH, DISLOGGER_LOG_LEVEL
"""

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from dotenv import dotenv_values, load_dotenv

from .exceptions import ConfigurationError
from ..utils.webhook_logging.config import WebhookSettings

logger = logging.getLogger("dislogger.config")

ENV_PREFIX = "DISLOGGER_"
DEFAULT_WEBHOOK_VAR = "DISLOGGER_WEBHOOK_URL"
CATEGORY_WEBHOOK_PATTERN = re.compile(r'^DISLOGGER_WEBHOOK_(?P<category>\w+?)_URL$')

# Environment variable -> (settings field, type)
SETTINGS_VARS: Dict[str, Tuple[str, Callable[[str], Any]]] = {
    'DISLOGGER_MAX_ATTEMPTS': ('max_attempts', int),
    'DISLOGGER_BASE_DELAY': ('base_delay', float),
    'DISLOGGER_REQUEST_TIMEOUT': ('request_timeout_seconds', float),
    'DISLOGGER_MAX_MESSAGE_LENGTH': ('max_message_length', int),
}

LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')


@dataclass
class LoggerConfig:
    """Everything needed to build a ``DiscordLogger`` from the environment."""
    webhook_urls: Dict[str, str] = field(default_factory=dict)
    settings: WebhookSettings = field(default_factory=WebhookSettings)
    log_level: str = 'INFO'


def load_config(
    env_file_path: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None
) -> LoggerConfig:
    """
    Load and validate configuration from environment variables.

    Args:
        env_file_path: Optional path to a ``.env`` file. Values already in the
            environment take precedence over the file.
        environ: Environment mapping to read, defaults to ``os.environ``.
            When given, the file is layered beneath it and ``os.environ`` is
            left untouched.

    Returns:
        LoggerConfig: Validated configuration

    Raises:
        ConfigurationError: If any value cannot be parsed or is out of range
    """
    if env_file_path:
        env_path = Path(env_file_path)
        if not env_path.exists():
            logger.warning(f"Environment file not found at {env_path}")
        elif environ is None:
            load_dotenv(dotenv_path=env_path)
        else:
            file_values = {
                name: value for name, value in dotenv_values(env_path).items()
                if value is not None
            }
            environ = {**file_values, **environ}

    if environ is None:
        environ = os.environ

    settings_values: Dict[str, Any] = {}
    invalid_values: Dict[str, Any] = {}

    for env_var, (field_name, convert) in SETTINGS_VARS.items():
        raw = environ.get(env_var)
        if raw is None or raw == '':
            continue
        try:
            settings_values[field_name] = convert(raw)
        except ValueError:
            invalid_values[env_var] = raw

    log_level = environ.get('DISLOGGER_LOG_LEVEL', 'INFO').upper()
    if log_level not in LOG_LEVELS:
        invalid_values['DISLOGGER_LOG_LEVEL'] = log_level

    if invalid_values:
        raise ConfigurationError(
            f"Invalid environment variable values: {', '.join(invalid_values)}",
            invalid_values=invalid_values,
            env_file_path=env_file_path
        )

    settings = WebhookSettings(**settings_values)
    errors = settings.validate()
    if errors:
        raise ConfigurationError(
            f"Invalid webhook settings: {'; '.join(errors)}",
            env_file_path=env_file_path
        )

    return LoggerConfig(
        webhook_urls=_extract_webhook_urls(environ),
        settings=settings,
        log_level=log_level
    )


def _extract_webhook_urls(environ: Mapping[str, str]) -> Dict[str, str]:
    """
    Collect webhook URLs in registration order.

    The ``default`` webhook comes first so it acts as the fallback; the
    remaining categories follow in environment order.
    """
    webhook_urls: Dict[str, str] = {}

    default_url = environ.get(DEFAULT_WEBHOOK_VAR)
    if default_url:
        webhook_urls['default'] = default_url

    for name, value in environ.items():
        match = CATEGORY_WEBHOOK_PATTERN.match(name)
        if match and value:
            webhook_urls.setdefault(match.group('category').lower(), value)

    if not webhook_urls:
        logger.warning("No webhook URLs found in environment; logger stays unconfigured")

    return webhook_urls
