"""
Type definitions and data models for dislogger.

This module provides the data structures that flow through a single log
call, from the record being sent to the state of its delivery.
"""

from .models import (
    # Record types
    CategoryKey,
    LogRecord,
    Severity,
    category_name,

    # Delivery types
    DeliveryAttempt,
    DeliveryState,
)

__all__ = [
    'CategoryKey',
    'LogRecord',
    'Severity',
    'category_name',
    'DeliveryAttempt',
    'DeliveryState',
]
