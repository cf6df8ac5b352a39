"""
Example script demonstrating how to use dislogger.

This script loads webhook URLs from the environment, sends a few log
messages to Discord and prints whether each one was delivered.

Usage:
    python examples/webhook_logging_example.py [path/to/.env]

Environment Variables:
    DISLOGGER_WEBHOOK_URL: Webhook for logs without a category
    DISLOGGER_WEBHOOK_AUTH_URL: Webhook for the ``auth`` category
    DISLOGGER_WEBHOOK_HOME_URL: Webhook for the ``home`` category
"""

import asyncio
import logging
import sys
from enum import Enum

from dislogger import ConfigurationError, DiscordLogger, configure_logging, load_config

logger = logging.getLogger("dislogger.example")


class LogType(Enum):
    auth = "auth"
    home = "home"


async def main(env_file_path=None):
    """Main example function."""
    try:
        config = load_config(env_file_path)
    except ConfigurationError as e:
        print(f"Configuration error: {e}")
        return 1

    configure_logging(config.log_level)

    if not config.webhook_urls:
        logger.error("Please set at least DISLOGGER_WEBHOOK_URL")
        return 1

    async with DiscordLogger.from_config(config) as discord_logger:
        # Example 1: plain info log to the default webhook
        delivered = await discord_logger.info("Example application started")
        logger.info(f"Info log delivered: {delivered}")

        # Example 2: routed by Enum category with a user
        delivered = await discord_logger.warning(
            "Password reset requested twice within a minute",
            user="alice",
            category=LogType.auth
        )
        logger.info(f"Warning log delivered: {delivered}")

        # Example 3: generic send with extra fields
        delivered = await discord_logger.send_log(
            "Dashboard loaded slowly",
            user="bob",
            category=LogType.home,
            extra_fields={"Load Time": "3.2s", "Screen": "dashboard"}
        )
        logger.info(f"Custom log delivered: {delivered}")

        # Example 4: a burst of fire-and-forget logs
        tasks = [
            asyncio.create_task(discord_logger.error(f"Burst error #{i}", category=LogType.home))
            for i in range(5)
        ]
        results = await asyncio.gather(*tasks)
        logger.info(f"Burst delivered {sum(results)}/{len(results)} messages")

    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main(sys.argv[1] if len(sys.argv) > 1 else None)))
