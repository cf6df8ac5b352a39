"""
Back-off helpers for rate-limited webhook requests.

Discord signals rate limiting with HTTP 429 and a ``Retry-After`` header
holding the number of whole seconds to wait. These helpers turn that header
into the delay used by the delivery loop.
"""

from typing import Mapping, Optional

RETRY_AFTER_HEADER = "Retry-After"


def parse_retry_after(value: Optional[str], base_delay: float = 1.0) -> float:
    """
    Parse a ``Retry-After`` header value.

    Args:
        value: Raw header value, or None when the header is missing
        base_delay: Delay in seconds used when the value is missing or invalid

    Returns:
        float: Delay in seconds
    """
    if value is None:
        return base_delay

    try:
        delay = int(value.strip())
    except (AttributeError, ValueError):
        return base_delay

    # Negative values fall back to the base delay
    if delay < 0:
        return base_delay

    return float(delay)


def retry_after_from_headers(headers: Mapping[str, str], base_delay: float = 1.0) -> float:
    """
    Read the back-off delay from response headers.

    aiohttp exposes headers as a case-insensitive multidict, so ``retry-after``
    and ``Retry-After`` both match.

    Args:
        headers: Response headers
        base_delay: Fallback delay in seconds

    Returns:
        float: Delay in seconds
    """
    return parse_retry_after(headers.get(RETRY_AFTER_HEADER), base_delay)
