"""
Data models shared by the webhook logging components.

These dataclasses describe the short-lived objects that flow through a single
log call: the record being sent and the state of its delivery.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Union

# Categories can be plain strings or members of any caller-defined Enum
CategoryKey = Union[str, Enum]


def category_name(category: Optional[CategoryKey]) -> Optional[str]:
    """Return the stable string form of a category key."""
    if category is None:
        return None
    if isinstance(category, Enum):
        return category.name
    return str(category)


class Severity(Enum):
    """Severity tags added by the convenience logging methods."""
    ERROR = "ERROR"
    INFO = "INFO"
    WARNING = "WARNING"


class DeliveryState(Enum):
    """States of a single webhook delivery."""
    ATTEMPTING = "attempting"
    SUCCEEDED = "succeeded"
    FAILED_PERMANENT = "failed_permanent"
    FAILED_EXHAUSTED = "failed_exhausted"

    @property
    def is_terminal(self) -> bool:
        return self is not DeliveryState.ATTEMPTING


@dataclass
class LogRecord:
    """A single log event, created per call and never stored."""
    content: str
    user: str = "N/A"
    category: Optional[CategoryKey] = None
    extra_fields: Dict[str, str] = field(default_factory=dict)

    @property
    def category_label(self) -> str:
        """Category name for display, ``default`` when none was given."""
        return category_name(self.category) or "default"


@dataclass
class DeliveryAttempt:
    """
    Transient state of one send's retry loop.

    Attributes:
        max_attempts: Number of POSTs allowed before giving up
        attempts: Number of POSTs made so far
        state: Current delivery state
        last_status: HTTP status of the most recent response, if any
        delays: Back-off delays slept between attempts, in seconds
    """
    max_attempts: int
    attempts: int = 0
    state: DeliveryState = DeliveryState.ATTEMPTING
    last_status: Optional[int] = None
    delays: List[float] = field(default_factory=list)

    def start(self) -> None:
        """Count a POST about to be made."""
        self.attempts += 1

    def succeed(self, status: int) -> None:
        self.last_status = status
        self.state = DeliveryState.SUCCEEDED

    def fail(self, status: Optional[int] = None) -> None:
        self.last_status = status
        self.state = DeliveryState.FAILED_PERMANENT

    def back_off(self, status: int, delay: float) -> None:
        """Record a rate-limited attempt and move to the next one or give up."""
        self.last_status = status
        self.delays.append(delay)
        if self.attempts >= self.max_attempts:
            self.state = DeliveryState.FAILED_EXHAUSTED

    @property
    def succeeded(self) -> bool:
        return self.state is DeliveryState.SUCCEEDED

    def __bool__(self) -> bool:
        return self.succeeded
