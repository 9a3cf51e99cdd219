"""
UAS Bot - State Operations Mixin
================================

Bot state key/value store and per-guild server config (sleep mode).
"""

import json
import time
from typing import TYPE_CHECKING, Any, Set

from src.core.logger import logger

if TYPE_CHECKING:
    from .manager import DatabaseManager


class StateMixin:
    """Mixin for bot state and server config operations."""

    # =========================================================================
    # Bot State Operations
    # =========================================================================

    def get_bot_state(self: "DatabaseManager", key: str, default: Any = None) -> Any:
        """
        Get a bot state value.

        Args:
            key: State key to retrieve
            default: Default value if key not found

        Returns:
            Stored value or default
        """
        row = self.fetchone("SELECT value FROM bot_state WHERE key = ?", (key,))
        if row:
            try:
                return json.loads(row["value"])
            except json.JSONDecodeError:
                return row["value"]
        return default

    def set_bot_state(self: "DatabaseManager", key: str, value: Any) -> None:
        """Set a bot state value (JSON encoded unless already a string)."""
        value_str = json.dumps(value) if not isinstance(value, str) else value
        self.execute(
            "INSERT OR REPLACE INTO bot_state (key, value, updated_at) VALUES (?, ?, ?)",
            (key, value_str, time.time())
        )

    # =========================================================================
    # Sleep Mode
    # =========================================================================

    def is_sleep_mode(self: "DatabaseManager", guild_id: int) -> bool:
        row = self.fetchone(
            "SELECT sleep_mode FROM server_config WHERE guild_id = ?",
            (guild_id,)
        )
        return bool(row["sleep_mode"]) if row else False

    def set_sleep_mode(self: "DatabaseManager", guild_id: int, enabled: bool) -> None:
        """Persist a guild's sleep mode flag."""
        self.execute(
            """INSERT INTO server_config (guild_id, sleep_mode, updated_at)
               VALUES (?, ?, ?)
               ON CONFLICT(guild_id) DO UPDATE SET
                   sleep_mode = excluded.sleep_mode,
                   updated_at = excluded.updated_at""",
            (guild_id, 1 if enabled else 0, time.time())
        )
        logger.tree("Sleep Mode Changed", [
            ("Guild ID", str(guild_id)),
            ("Enabled", str(enabled)),
        ], emoji="😴" if enabled else "👁️")

    def get_sleep_mode_guilds(self: "DatabaseManager") -> Set[int]:
        rows = self.fetchall("SELECT guild_id FROM server_config WHERE sleep_mode = 1")
        return {row["guild_id"] for row in rows}


__all__ = ["StateMixin"]
