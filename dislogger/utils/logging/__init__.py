"""
Local console logging for dislogger.

Diagnostics from the delivery code go through the standard ``logging``
module under the ``dislogger`` logger. Library modules never install
handlers themselves; applications call ``configure_logging`` if they want
console output.
"""

import logging
from typing import Union

LOGGER_NAME = "dislogger"
LOG_FORMAT = '[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def configure_logging(level: Union[int, str] = logging.INFO) -> logging.Logger:
    """
    Send dislogger diagnostics to the console.

    Args:
        level: Log level name or number

    Returns:
        logging.Logger: The configured ``dislogger`` logger

    Raises:
        ValueError: If an invalid log level name is provided
    """
    if isinstance(level, str):
        level_value = logging.getLevelName(level.upper())
        if not isinstance(level_value, int):
            raise ValueError(f"Invalid log level: {level}")
        level = level_value

    root = logging.getLogger(LOGGER_NAME)
    root.setLevel(level)

    # Remove any existing handlers
    for handler in root.handlers[:]:
        root.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    root.addHandler(console_handler)

    return root


__all__ = [
    'configure_logging',
    'LOGGER_NAME'
]
