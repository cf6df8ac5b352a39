"""
Webhook delivery for Discord webhook logging.

This module posts formatted messages to Discord webhooks. Rate-limited
requests (HTTP 429) are retried after the delay Discord asks for; any other
failure ends the send immediately.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

import aiohttp

from .config import WebhookSettings, mask_webhook_url
from .message_formatter import WebhookMessage
from ..error_handling.backoff import retry_after_from_headers
from ...core.exceptions import DeliveryError, RateLimitError
from ...types.models import DeliveryAttempt, DeliveryState

logger = logging.getLogger("dislogger.webhook")

SUCCESS_STATUSES = (200, 204)
RATE_LIMIT_STATUS = 429

SleepFunc = Callable[[float], Awaitable[None]]


class WebhookClient:
    """
    Client that delivers messages to Discord webhook URLs.

    Every send runs its own retry loop. Sends share nothing but the HTTP
    session, so concurrent sends to the same URL back off independently.
    A per-destination token bucket would be the place to coordinate them.
    """

    def __init__(
        self,
        settings: Optional[WebhookSettings] = None,
        session: Optional[aiohttp.ClientSession] = None,
        sleep: SleepFunc = asyncio.sleep
    ):
        """
        Initialize webhook client.

        Args:
            settings: Delivery settings
            session: Optional aiohttp session to use; it is not closed by the client
            sleep: Coroutine function used for back-off delays
        """
        self.settings = settings or WebhookSettings()
        self.session = session
        self.created_session = False
        self._sleep = sleep

    def _get_session(self) -> aiohttp.ClientSession:
        """Return the HTTP session, creating one on first use."""
        if self.session is None or (self.created_session and self.session.closed):
            self.session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.settings.request_timeout_seconds)
            )
            self.created_session = True
        return self.session

    async def send_message(self, webhook_url: str, message: WebhookMessage) -> bool:
        """
        Send a message to a webhook.

        Args:
            webhook_url: Discord webhook URL
            message: The webhook message to send

        Returns:
            bool: True if Discord accepted the message, False otherwise
        """
        attempt = await self.deliver(webhook_url, message)
        return attempt.succeeded

    async def deliver(self, webhook_url: str, message: WebhookMessage) -> DeliveryAttempt:
        """
        Run the delivery loop for one message.

        Args:
            webhook_url: Discord webhook URL
            message: The webhook message to send

        Returns:
            DeliveryAttempt: Terminal state of the delivery
        """
        attempt = DeliveryAttempt(max_attempts=self.settings.max_attempts)
        masked_url = mask_webhook_url(webhook_url)

        while not attempt.state.is_terminal:
            attempt.start()
            try:
                status = await self._post(webhook_url, message)

            except RateLimitError as e:
                logger.warning(
                    f"Rate limit exceeded. Retrying in {e.retry_after:g} seconds... "
                    f"(Attempt {attempt.attempts})"
                )
                await self._sleep(e.retry_after)
                attempt.back_off(RATE_LIMIT_STATUS, e.retry_after)

            except DeliveryError as e:
                logger.error(f"Failed to send log to Discord webhook: {e}")
                attempt.fail(e.status_code)

            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                logger.error(f"Failed to send log to Discord webhook {masked_url}: {e!r}")
                attempt.fail()

            else:
                logger.info("Log sent successfully to Discord.")
                attempt.succeed(status)

        if attempt.state is DeliveryState.FAILED_EXHAUSTED:
            logger.error(
                f"Exceeded max retries ({attempt.max_attempts}). "
                f"Failed to send log to Discord webhook {masked_url}."
            )

        return attempt

    async def _post(self, webhook_url: str, message: WebhookMessage) -> int:
        """
        Make a single webhook request.

        Returns:
            int: The success status code

        Raises:
            RateLimitError: On HTTP 429
            DeliveryError: On any other non-success status
        """
        session = self._get_session()
        async with session.post(
            webhook_url,
            json=message.to_payload(),
            headers={"Content-Type": "application/json"}
        ) as response:
            if response.status in SUCCESS_STATUSES:
                return response.status

            if response.status == RATE_LIMIT_STATUS:
                retry_after = retry_after_from_headers(response.headers, self.settings.base_delay)
                raise RateLimitError("Rate limited by Discord", retry_after=retry_after)

            error_text = await self._read_error_body(response)
            raise DeliveryError(
                f"Discord returned status code {response.status}: {error_text[:200]}",
                status_code=response.status,
                webhook_url=mask_webhook_url(webhook_url)
            )

    @staticmethod
    async def _read_error_body(response: aiohttp.ClientResponse) -> str:
        """Read an error response body for the log line, tolerating bad encodings."""
        try:
            return await response.text(errors="replace")
        except (UnicodeDecodeError, LookupError) as e:
            return f"<undecodable body: {e}>"

    async def close(self):
        """Close the webhook client and clean up resources."""
        if self.created_session and self.session is not None:
            if not self.session.closed:
                await self.session.close()
            self.session = None
        self.created_session = False
