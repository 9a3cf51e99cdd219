"""
UAS Bot - Error Handler
=======================

Error categorization, recovery hints and critical error dumps.

Categories:
- discord: Forbidden / NotFound / HTTPException from the gateway or REST API
- api: network and casino API failures
- database: sqlite3 errors
- general: everything else
"""

import json
import sqlite3
import sys
import traceback
from datetime import datetime
from pathlib import Path
from typing import Any, Dict

import aiohttp
import discord

from src.core.logger import logger


ERRORS_DIR = Path("logs/errors")


class ErrorContext:
    """Captures and formats detailed error context."""

    @staticmethod
    def get_full_context(e: Exception, location: str, **kwargs) -> Dict[str, Any]:
        """
        Build a serializable context dict for an exception.

        Args:
            e: The exception
            location: Where the error occurred
            **kwargs: Additional context (interaction, member, etc.)
        """
        context = {
            'timestamp': datetime.now().isoformat(),
            'location': location,
            'error_type': type(e).__name__,
            'error_message': str(e),
            'traceback': ''.join(traceback.format_exception(type(e), e, e.__traceback__)),
            'python_version': sys.version,
            'additional_context': {k: str(v)[:200] for k, v in kwargs.items()},
        }

        interaction = kwargs.get('interaction')
        if isinstance(interaction, discord.Interaction):
            context['discord_context'] = {
                'guild': interaction.guild.name if interaction.guild else 'DM',
                'channel_id': interaction.channel_id,
                'user': str(interaction.user),
                'user_id': interaction.user.id,
                'command': interaction.command.qualified_name if interaction.command else None,
            }

        return context


class ErrorHandler:
    """Error handling with categorization and recovery hints."""

    ERROR_CATEGORIES = {
        'discord': (discord.Forbidden, discord.NotFound, discord.HTTPException),
        'api': (aiohttp.ClientError, ConnectionError, TimeoutError),
        'database': (sqlite3.Error,),
    }

    RECOVERY_SUGGESTIONS = {
        'discord': {
            discord.Forbidden: "Check bot permissions in server settings",
            discord.NotFound: "Resource not found - check IDs and channels",
            discord.HTTPException: "Discord API issue - retry the command",
        },
        'api': {
            aiohttp.ClientError: "Casino API unreachable - check ATIVE_CASINO_BASE_URL",
            TimeoutError: "Request timed out - the casino bot may be overloaded",
            ConnectionError: "Network connection issue - check connectivity",
        },
        'database': {
            sqlite3.OperationalError: "Database locked or schema mismatch - retry shortly",
            sqlite3.IntegrityError: "Database constraint violation - check data validity",
            sqlite3.Error: "General database error - check the database file",
        },
    }

    @classmethod
    def categorize_error(cls, e: Exception) -> str:
        """Return the category name for an exception."""
        for category, error_types in cls.ERROR_CATEGORIES.items():
            if isinstance(e, error_types):
                return category
        return 'general'

    @classmethod
    def get_recovery_suggestion(cls, e: Exception, category: str) -> str:
        for error_type, suggestion in cls.RECOVERY_SUGGESTIONS.get(category, {}).items():
            if isinstance(e, error_type):
                return suggestion
        return "Unexpected error - check logs for details"

    @classmethod
    def handle(cls, e: Exception, location: str, critical: bool = False, **context) -> str:
        """
        Log an error with its category and recovery hint.

        Critical errors are additionally dumped to logs/errors/*.json.

        Returns:
            The error category.
        """
        category = cls.categorize_error(e)
        suggestion = cls.get_recovery_suggestion(e, category)
        full_context = ErrorContext.get_full_context(e, location, **context)

        details = [
            ("Category", category.upper()),
            ("Location", location),
            ("Error Type", full_context['error_type']),
            ("Error", full_context['error_message'][:200]),
            ("Recovery", suggestion),
        ]

        if critical:
            logger.critical("Critical Error", details)
            cls._store_critical_error(full_context)
        else:
            logger.warning("Handled Error", details)

        return category

    @staticmethod
    def _store_critical_error(context: Dict[str, Any]) -> None:
        """Write the full context of a critical error to disk."""
        try:
            ERRORS_DIR.mkdir(exist_ok=True, parents=True)

            timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
            error_file = ERRORS_DIR / f"error_{timestamp}.json"

            with open(error_file, 'w', encoding='utf-8') as f:
                json.dump(context, f, indent=2, default=str)

            logger.info(f"Critical error saved to {error_file}")
        except OSError as save_error:
            logger.warning(f"Failed to save error details: {save_error}")


__all__ = ["ErrorContext", "ErrorHandler"]
