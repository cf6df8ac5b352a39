"""
Utility modules for dislogger.

This package provides:
- Webhook registry, message formatting and delivery
- Rate-limit back-off helpers
- Local logging setup
- Host device description
"""
