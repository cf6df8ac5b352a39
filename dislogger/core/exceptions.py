"""
Custom exception classes for webhook log delivery.

This module defines the exception hierarchy used across dislogger. Each
exception carries contextual information so that the delivery code can log
a useful diagnostic before turning the failure into a boolean result.
Webhook URLs are only ever stored masked.
"""

from typing import Optional, Any, Dict


class DisLoggerError(Exception):
    """
    Base exception class for all dislogger errors.

    Attributes:
        message (str): Human-readable error message
        error_code (str): Machine-readable error code for categorization
        context (Dict[str, Any]): Additional context information
        retryable (bool): Whether the delivery loop tries the request again
    """

    retryable = False

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__.upper()
        self.context = context or {}

    @property
    def webhook_url(self) -> Optional[str]:
        """Masked URL of the webhook involved, if any."""
        return self.context.get('webhook_url')

    def __str__(self) -> str:
        if self.webhook_url:
            return f"[{self.error_code}] {self.message} (webhook {self.webhook_url})"
        return f"[{self.error_code}] {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging."""
        return {
            'error_type': self.__class__.__name__,
            'error_code': self.error_code,
            'message': self.message,
            'retryable': self.retryable,
            'context': self.context
        }


class ConfigurationError(DisLoggerError):
    """
    Raised when the webhook registry or settings are missing or invalid.

    This covers sending before ``configure()`` was called, an empty webhook
    mapping, and environment variables that cannot be parsed.
    """

    def __init__(
        self,
        message: str,
        invalid_values: Optional[Dict[str, Any]] = None,
        env_file_path: Optional[str] = None
    ):
        context = {}
        if invalid_values:
            context['invalid_values'] = invalid_values
        if env_file_path:
            context['env_file_path'] = env_file_path

        super().__init__(message, "CONFIG_ERROR", context)
        self.invalid_values = invalid_values or {}
        self.env_file_path = env_file_path


class RateLimitError(DisLoggerError):
    """
    Raised when Discord answers a webhook POST with HTTP 429.

    Attributes:
        retry_after (float): Seconds to wait before the next attempt
    """

    retryable = True

    def __init__(self, message: str, retry_after: float):
        super().__init__(message, "RATE_LIMITED", {'retry_after': retry_after})
        self.retry_after = retry_after


class DeliveryError(DisLoggerError):
    """Raised when a webhook POST fails in a way that is not retried."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        webhook_url: Optional[str] = None
    ):
        context: Dict[str, Any] = {}
        if status_code is not None:
            context['status_code'] = status_code
        if webhook_url:
            context['webhook_url'] = webhook_url
        super().__init__(message, "DELIVERY_ERROR", context)
        self.status_code = status_code
