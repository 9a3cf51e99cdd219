#!/usr/bin/env python3
"""
UAS Bot Entry Point
===================

Admin, moderation and utility bot for the casino community server.

Features:
- Giveaways, shifts and sleep mode
- Casino session control (/casino, /casino-admin)
- Economy admin, premium subscriptions and shop admin
- Suggestions, bug reports and audit logging
- Graceful error handling
"""

import asyncio
import sys

from dotenv import load_dotenv

load_dotenv()

from src.core.logger import logger
from src.core.config import ConfigValidationError, get_config, validate_and_log_config
from src.utils.error_handler import ErrorHandler


async def main() -> None:
    """
    Main entry point.

    Handles the complete bot lifecycle:
    1. Loads and validates environment configuration
    2. Initializes the bot instance
    3. Connects to Discord
    4. Shuts down gracefully on interruption

    Raises:
        SystemExit: If configuration is invalid or the bot fails to start
    """
    try:
        config = get_config()
    except ConfigValidationError as e:
        logger.error("Configuration Invalid", [("Error", str(e))])
        sys.exit(1)

    validate_and_log_config()
    logger.set_webhook(config.error_webhook_url)

    from src.bot import UASBot

    logger.tree("UAS STARTING", [
        ("Developer", str(config.developer_id)),
        ("Casino API", config.casino_base_url),
    ], emoji="🎰")

    bot = UASBot()
    try:
        async with bot:
            await bot.start(config.discord_token)
    except Exception as e:
        ErrorHandler.handle(
            e,
            location="main.main",
            critical=True,
            token_present=bool(config.discord_token),
        )
        sys.exit(1)


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("🛑 Bot stopped by user (Ctrl+C)")
    except Exception as e:
        ErrorHandler.handle(
            e,
            location="main.__main__",
            critical=True,
        )
        sys.exit(1)
