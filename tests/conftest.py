"""
Pytest Configuration and Fixtures.

This module provides test fixtures for the dislogger test suite: mocked
aiohttp sessions and responses, a recording sleep function, and
preconfigured webhook clients and loggers.
"""

import os
import pytest
from unittest.mock import AsyncMock

from dislogger.services.webhook_logging import DiscordLogger
from dislogger.utils.webhook_logging.config import ConfigurationStore, WebhookSettings
from dislogger.utils.webhook_logging.webhook_manager import WebhookClient
from tests.mocks import TEST_DEVICE, TEST_WEBHOOKS, make_session


@pytest.fixture
def webhook_urls():
    """Category to webhook URL mapping used across tests."""
    return dict(TEST_WEBHOOKS)


@pytest.fixture
def fake_sleep():
    """Sleep replacement that records delays without waiting."""
    return AsyncMock(return_value=None)


@pytest.fixture
def settings():
    """Default delivery settings."""
    return WebhookSettings()


@pytest.fixture
def device_info():
    """Device provider returning a fixed description."""
    return AsyncMock(return_value=TEST_DEVICE)


@pytest.fixture
def make_logger(webhook_urls, fake_sleep, device_info, settings):
    """
    Factory for a configured ``DiscordLogger`` over a mock session.

    Usage:
        discord_logger, session = make_logger(204)
    """
    def factory(*statuses, headers=None, configured=True):
        session = make_session(*statuses, headers=headers)
        client = WebhookClient(settings, session=session, sleep=fake_sleep)
        store = ConfigurationStore(webhook_urls if configured else None)
        discord_logger = DiscordLogger(
            store=store,
            client=client,
            device_info=device_info,
            settings=settings
        )
        return discord_logger, session

    return factory


# Pytest markers
def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )


# Test collection hooks
def pytest_collection_modifyitems(config, items):
    """Modify test collection to add markers."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)


@pytest.fixture(autouse=True)
def cleanup_environment():
    """Automatically clean up environment after each test."""
    original_env = dict(os.environ)

    yield

    # Restore original environment
    os.environ.clear()
    os.environ.update(original_env)
