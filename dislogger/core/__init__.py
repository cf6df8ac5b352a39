"""
Core module for dislogger.

This module contains the core infrastructure components:
- Custom exception classes for error categorization
- Environment-based configuration loading (``dislogger.core.config``)
"""

from .exceptions import (
    DisLoggerError,
    ConfigurationError,
    RateLimitError,
    DeliveryError
)

__all__ = [
    'DisLoggerError',
    'ConfigurationError',
    'RateLimitError',
    'DeliveryError'
]
