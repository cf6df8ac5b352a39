"""
Error handling utilities for dislogger.

This module provides the back-off helpers used when Discord rate-limits a
webhook request.
"""

from .backoff import parse_retry_after, retry_after_from_headers, RETRY_AFTER_HEADER

__all__ = [
    'parse_retry_after',
    'retry_after_from_headers',
    'RETRY_AFTER_HEADER'
]
