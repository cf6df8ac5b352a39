"""
Host device description for log messages.

Produces the one-line device string embedded in every webhook message,
built from the ``platform`` module and system metrics from ``psutil``.
"""

import asyncio
import platform

import psutil

UNKNOWN_PLATFORM = "Unknown Platform"


def describe_device() -> str:
    """
    Describe the current host.

    Returns:
        str: e.g. ``Linux 6.1.0 (x86_64) - Python 3.12.1 - 8 CPUs, 15.5 GiB RAM``,
        or ``Unknown Platform`` when the OS cannot be identified
    """
    system = platform.system()
    if not system:
        return UNKNOWN_PLATFORM

    description = f"{system} {platform.release()} ({platform.machine() or 'unknown'})"
    description += f" - Python {platform.python_version()}"

    cpu_count = psutil.cpu_count(logical=True)
    memory_gib = psutil.virtual_memory().total / (1024 ** 3)
    if cpu_count:
        description += f" - {cpu_count} CPUs, {memory_gib:.1f} GiB RAM"
    else:
        description += f" - {memory_gib:.1f} GiB RAM"

    return description


async def get_device_info() -> str:
    """Describe the current host without blocking the event loop."""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, describe_device)
