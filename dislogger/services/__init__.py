"""
Services for dislogger.

This package provides the ``DiscordLogger`` facade used by applications.
"""

from .webhook_logging import DiscordLogger

__all__ = ['DiscordLogger']
