"""
Message formatting for Discord webhooks.

This module renders a log record into the plain-text body posted to a
webhook. The layout uses Discord markdown: a header, a metadata block with
a Discord timestamp, optional extra fields, and the log content inside a
code block.
"""

import time
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from .config import DISCORD_MESSAGE_LIMIT
from ...types.models import LogRecord

SEPARATOR = "--------------------------------"
TRUNCATION_MARKER = "..."


@dataclass
class WebhookMessage:
    """Represents a formatted webhook message."""

    content: str

    def to_payload(self) -> Dict[str, Any]:
        """
        Convert to Discord webhook payload.

        Returns:
            Dict: Discord webhook API payload
        """
        return {"content": self.content}


class MessageFormatter:
    """
    Formats log records for Discord webhook delivery.

    Output always fits in ``max_message_length`` characters. When it would
    not, only the content inside the details block is shortened.
    """

    HEADER_TEMPLATE = (
        "**📌 System Log**\n"
        "{separator}\n"
        "\n"
        "⏰ **Timestamp:** <t:{timestamp}:F>\n"
        "\n"
        "👤 **User:** `{user}`\n"
        "🔍 **Type:** `{category}`\n"
        "📱 **Device:** `{device}`"
    )
    DETAILS_OPEN = "\n📋 **Details:**\n```\n"
    DETAILS_CLOSE = "\n```\n \n{separator}\n"

    def __init__(self, max_message_length: int = DISCORD_MESSAGE_LIMIT):
        self.max_message_length = max_message_length

    def format(
        self,
        content: str,
        user: str = "N/A",
        category: Optional[str] = None,
        extra_fields: Optional[Mapping[str, str]] = None,
        device_info: str = "Unknown Platform",
        timestamp: Optional[float] = None
    ) -> str:
        """
        Render a log message.

        Args:
            content: Log content, placed in the details code block
            user: User identifier
            category: Category label, ``default`` when None
            extra_fields: Extra ``key: value`` lines, kept in insertion order
            device_info: Device description
            timestamp: Unix time in seconds, defaults to now

        Returns:
            str: Formatted message text
        """
        if timestamp is None:
            timestamp = time.time()

        head = self.HEADER_TEMPLATE.format(
            separator=SEPARATOR,
            timestamp=round(timestamp),
            user=user,
            category=category or "default",
            device=device_info,
        )
        head += self._format_extra_fields(extra_fields) + self.DETAILS_OPEN
        tail = self.DETAILS_CLOSE.format(separator=SEPARATOR)

        return self._fit(head, content, tail)

    def format_record(
        self,
        record: LogRecord,
        device_info: str,
        timestamp: Optional[float] = None
    ) -> WebhookMessage:
        """Format a ``LogRecord`` into a webhook message."""
        return WebhookMessage(content=self.format(
            record.content,
            user=record.user,
            category=record.category_label,
            extra_fields=record.extra_fields,
            device_info=device_info,
            timestamp=timestamp,
        ))

    def _format_extra_fields(self, extra_fields: Optional[Mapping[str, str]]) -> str:
        """
        Format extra fields as a bullet list.

        Args:
            extra_fields: Field mapping

        Returns:
            str: Formatted block, empty when there are no fields
        """
        if not extra_fields:
            return ""

        text = "\n**Additional Info:**\n"
        for key, value in extra_fields.items():
            text += f"• **{key}:** `{value}`\n"

        return text

    def _fit(self, head: str, content: str, tail: str) -> str:
        """Join the message parts, shortening the content if needed."""
        message = head + content + tail
        if len(message) <= self.max_message_length:
            return message

        room = self.max_message_length - len(head) - len(tail)
        if room >= len(TRUNCATION_MARKER):
            kept = room - len(TRUNCATION_MARKER)
            return head + content[:kept] + TRUNCATION_MARKER + tail

        # Not even the frame fits, cut the whole message
        return self._truncate_text(message)

    def _truncate_text(self, text: str, max_length: Optional[int] = None) -> str:
        """
        Truncate text to maximum length.

        Args:
            text: Text to truncate
            max_length: Maximum length (defaults to max_message_length)

        Returns:
            str: Truncated text
        """
        if max_length is None:
            max_length = self.max_message_length

        if len(text) <= max_length:
            return text

        return text[:max_length - len(TRUNCATION_MARKER)] + TRUNCATION_MARKER
