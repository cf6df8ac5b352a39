"""
Unit tests for webhook routing and delivery.
"""

import asyncio
import pytest
from enum import Enum
from unittest.mock import AsyncMock, MagicMock, call, patch

import aiohttp

from dislogger.core.exceptions import ConfigurationError
from dislogger.types.models import DeliveryState
from dislogger.utils.webhook_logging.config import (
    ConfigurationStore,
    WebhookRegistry,
    WebhookSettings,
    mask_webhook_url,
)
from dislogger.utils.webhook_logging.message_formatter import WebhookMessage
from dislogger.utils.webhook_logging.webhook_manager import WebhookClient
from tests.mocks import AUTH_URL, HOME_URL, INIT_URL, make_response, make_session


class LogType(Enum):
    auth = 1
    home = 2


class TestWebhookRegistry:
    """Tests for WebhookRegistry."""

    def test_resolve_registered_categories(self, webhook_urls):
        """Test each registered category resolves to its own URL."""
        registry = WebhookRegistry(webhook_urls)

        for category, url in webhook_urls.items():
            assert registry.resolve(category) == url

    def test_resolve_falls_back_to_first_registered(self, webhook_urls):
        """Test missing and unknown categories use the first URL."""
        registry = WebhookRegistry(webhook_urls)

        assert registry.resolve() == AUTH_URL
        assert registry.resolve(None) == AUTH_URL
        assert registry.resolve("unknown") == AUTH_URL

    def test_keys_are_case_sensitive(self):
        """Test lookups do not fold case."""
        registry = WebhookRegistry({"home": HOME_URL, "Auth": AUTH_URL})

        assert registry.resolve("Auth") == AUTH_URL
        assert registry.resolve("auth") == HOME_URL

    def test_enum_categories(self):
        """Test Enum keys are stored and resolved by member name."""
        registry = WebhookRegistry({LogType.home: HOME_URL, LogType.auth: AUTH_URL})

        assert list(registry) == ["home", "auth"]
        assert registry.resolve(LogType.auth) == AUTH_URL
        assert registry.resolve("auth") == AUTH_URL

    def test_empty_mapping_rejected(self):
        """Test a registry needs at least one URL."""
        with pytest.raises(ConfigurationError):
            WebhookRegistry({})

    def test_registry_is_read_only(self, webhook_urls):
        """Test the registry cannot be changed after creation."""
        registry = WebhookRegistry(webhook_urls)
        webhook_urls["auth"] = "https://discord.com/api/webhooks/999/changed"

        assert registry["auth"] == AUTH_URL
        with pytest.raises(TypeError):
            registry["auth"] = HOME_URL

    def test_validate(self):
        """Test invalid webhook URLs are reported."""
        registry = WebhookRegistry({
            "good": AUTH_URL,
            "bad": "https://example.com/not-a-webhook",
        })

        warnings = registry.validate()
        assert len(warnings) == 1
        assert "bad" in warnings[0]

    def test_repr_masks_tokens(self, webhook_urls):
        """Test webhook tokens do not show up in repr."""
        text = repr(WebhookRegistry(webhook_urls))

        assert "auth-token" not in text
        assert "111111111" in text


class TestMaskWebhookUrl:
    """Tests for mask_webhook_url."""

    def test_masks_token(self):
        assert mask_webhook_url(AUTH_URL) == "https://discord.com/api/webhooks/111111111/***"

    def test_unrecognized_url(self):
        assert mask_webhook_url("not a url") == "***masked***"


class TestConfigurationStore:
    """Tests for ConfigurationStore."""

    def test_unconfigured_store(self):
        """Test resolving before configure() raises."""
        store = ConfigurationStore()

        assert store.is_configured is False
        with pytest.raises(ConfigurationError):
            store.resolve("auth")

    def test_configure_replaces_previous_mapping(self, webhook_urls):
        """Test the last configure() call wins without merging."""
        store = ConfigurationStore(webhook_urls)
        store.configure({"init": INIT_URL})

        assert store.is_configured is True
        assert list(store.registry) == ["init"]
        assert store.resolve("auth") == INIT_URL

    def test_configure_empty_mapping(self, webhook_urls):
        """Test an empty mapping keeps the previous registry."""
        store = ConfigurationStore(webhook_urls)

        with pytest.raises(ConfigurationError):
            store.configure({})
        assert store.resolve("home") == HOME_URL


class TestWebhookSettings:
    """Tests for WebhookSettings."""

    def test_defaults_are_valid(self):
        settings = WebhookSettings()

        assert settings.max_attempts == 5
        assert settings.base_delay == 1.0
        assert settings.validate() == []

    def test_invalid_values(self):
        settings = WebhookSettings(max_attempts=0, max_message_length=5000)

        errors = settings.validate()
        assert any("max_attempts" in error for error in errors)
        assert any("max_message_length" in error for error in errors)


@pytest.mark.asyncio
class TestWebhookClient:
    """Tests for WebhookClient."""

    async def test_send_message_success(self, fake_sleep):
        """Test 204 on the first attempt succeeds after one request."""
        session = make_session(204)
        client = WebhookClient(session=session, sleep=fake_sleep)

        result = await client.send_message(AUTH_URL, WebhookMessage(content="Test message"))

        assert result is True
        session.post.assert_called_once_with(
            AUTH_URL,
            json={"content": "Test message"},
            headers={"Content-Type": "application/json"}
        )
        fake_sleep.assert_not_awaited()

    async def test_send_message_ok_status(self, fake_sleep):
        """Test 200 is also accepted."""
        client = WebhookClient(session=make_session(200), sleep=fake_sleep)

        assert await client.send_message(AUTH_URL, WebhookMessage(content="Test")) is True

    async def test_rate_limit_then_success(self, fake_sleep):
        """Test four 429 responses with retry-after 2 followed by 204."""
        session = make_session(429, 429, 429, 429, 204, headers={"retry-after": "2"})
        client = WebhookClient(session=session, sleep=fake_sleep)

        attempt = await client.deliver(AUTH_URL, WebhookMessage(content="Test"))

        assert attempt.state is DeliveryState.SUCCEEDED
        assert attempt.attempts == 5
        assert session.post.call_count == 5
        assert fake_sleep.await_args_list == [call(2.0)] * 4
        assert attempt.delays == [2.0] * 4

    async def test_rate_limit_exhausted(self, fake_sleep):
        """Test permanent 429 without retry-after gives up after five attempts."""
        session = make_session(*[429] * 10)
        client = WebhookClient(session=session, sleep=fake_sleep)

        attempt = await client.deliver(AUTH_URL, WebhookMessage(content="Test"))

        assert attempt.state is DeliveryState.FAILED_EXHAUSTED
        assert bool(attempt) is False
        assert session.post.call_count == 5
        assert fake_sleep.await_args_list == [call(1.0)] * 5

    async def test_unparseable_retry_after(self, fake_sleep):
        """Test an invalid retry-after falls back to the base delay."""
        session = make_session(429, 204, headers={"Retry-After": "soon"})
        client = WebhookClient(session=session, sleep=fake_sleep)

        assert await client.send_message(AUTH_URL, WebhookMessage(content="Test")) is True
        fake_sleep.assert_awaited_once_with(1.0)

    async def test_custom_max_attempts(self, fake_sleep):
        """Test max_attempts comes from the settings."""
        session = make_session(*[429] * 5)
        client = WebhookClient(WebhookSettings(max_attempts=2), session=session, sleep=fake_sleep)

        assert await client.send_message(AUTH_URL, WebhookMessage(content="Test")) is False
        assert session.post.call_count == 2

    async def test_server_error_not_retried(self, fake_sleep):
        """Test 500 fails immediately without retry."""
        session = make_session(500, 204)
        client = WebhookClient(session=session, sleep=fake_sleep)

        attempt = await client.deliver(AUTH_URL, WebhookMessage(content="Test"))

        assert attempt.state is DeliveryState.FAILED_PERMANENT
        assert attempt.last_status == 500
        session.post.assert_called_once()
        fake_sleep.assert_not_awaited()

    async def test_error_body_read_leniently(self, fake_sleep, caplog):
        """Test the error body is decoded with replacement and logged with a masked URL."""
        session = MagicMock()
        session.post.side_effect = [make_response(400, text="bad \ufffd payload")]
        client = WebhookClient(session=session, sleep=fake_sleep)

        with caplog.at_level("ERROR", logger="dislogger.webhook"):
            attempt = await client.deliver(AUTH_URL, WebhookMessage(content="Test"))

        assert attempt.state is DeliveryState.FAILED_PERMANENT
        assert "bad \ufffd payload" in caplog.text
        assert mask_webhook_url(AUTH_URL) in caplog.text
        assert "auth-token" not in caplog.text

    async def test_undecodable_error_body(self, fake_sleep):
        """Test a body that cannot be decoded is a permanent failure, not an exception."""
        context = make_response(502)
        context.__aenter__.return_value.text.side_effect = UnicodeDecodeError(
            "utf-8", b"\xff\xfe", 0, 1, "invalid start byte"
        )
        session = MagicMock()
        session.post.side_effect = [context]
        client = WebhookClient(session=session, sleep=fake_sleep)

        attempt = await client.deliver(AUTH_URL, WebhookMessage(content="Test"))

        assert attempt.state is DeliveryState.FAILED_PERMANENT
        assert attempt.last_status == 502
        context.__aenter__.return_value.text.assert_awaited_once_with(errors="replace")

    async def test_client_error_not_retried(self, fake_sleep):
        """Test a 4xx other than 429 fails immediately."""
        session = MagicMock()
        session.post.side_effect = [make_response(404, text="Unknown Webhook")]
        client = WebhookClient(session=session, sleep=fake_sleep)

        assert await client.send_message(AUTH_URL, WebhookMessage(content="Test")) is False
        session.post.assert_called_once()

    async def test_unexpected_success_status_is_failure(self, fake_sleep):
        """Test statuses other than 200 and 204 are not treated as delivered."""
        client = WebhookClient(session=make_session(201), sleep=fake_sleep)

        assert await client.send_message(AUTH_URL, WebhookMessage(content="Test")) is False

    async def test_network_error(self, fake_sleep):
        """Test transport failures return False without retry."""
        session = MagicMock()
        session.post.side_effect = aiohttp.ClientConnectionError("unreachable")
        client = WebhookClient(session=session, sleep=fake_sleep)

        attempt = await client.deliver(AUTH_URL, WebhookMessage(content="Test"))

        assert attempt.state is DeliveryState.FAILED_PERMANENT
        assert attempt.last_status is None
        session.post.assert_called_once()

    async def test_timeout(self, fake_sleep):
        """Test request timeouts return False."""
        session = MagicMock()
        session.post.side_effect = asyncio.TimeoutError()
        client = WebhookClient(session=session, sleep=fake_sleep)

        assert await client.send_message(AUTH_URL, WebhookMessage(content="Test")) is False

    async def test_concurrent_sends_back_off_independently(self, fake_sleep):
        """Test concurrent sends each run their own retry loop."""
        session = make_session(429, 429, 204, 204, headers={"Retry-After": "3"})
        client = WebhookClient(session=session, sleep=fake_sleep)

        results = await asyncio.gather(
            client.send_message(AUTH_URL, WebhookMessage(content="one")),
            client.send_message(AUTH_URL, WebhookMessage(content="two")),
        )

        assert results == [True, True]
        assert session.post.call_count == 4
        assert fake_sleep.await_count == 2

    async def test_borrowed_session_not_closed(self, fake_sleep):
        """Test close() leaves an injected session open."""
        session = make_session(204)
        session.close = AsyncMock()
        client = WebhookClient(session=session, sleep=fake_sleep)

        await client.close()

        session.close.assert_not_awaited()

    async def test_owned_session_closed(self):
        """Test close() releases a session the client created."""
        client = WebhookClient()
        session = client._get_session()

        assert client.created_session is True
        await client.close()
        assert session.closed is True
        assert client.session is None

    async def test_send_after_close_creates_new_session(self, fake_sleep):
        """Test a send after close() gets a fresh session instead of the closed one."""
        first, second = make_session(204), make_session(204)
        first.close = AsyncMock()
        client = WebhookClient(sleep=fake_sleep)

        with patch("dislogger.utils.webhook_logging.webhook_manager.aiohttp.ClientSession",
                   side_effect=[first, second]):
            assert await client.send_message(AUTH_URL, WebhookMessage(content="first")) is True
            await client.close()
            assert await client.send_message(AUTH_URL, WebhookMessage(content="second")) is True

        first.close.assert_awaited_once()
        assert first.post.call_count == 1
        assert second.post.call_count == 1
        assert client.session is second
        assert client.created_session is True
