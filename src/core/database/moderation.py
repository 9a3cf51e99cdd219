"""
UAS Bot - Moderation Operations Mixin
=====================================

Warnings, the moderation action log and pending temporary-ban expiries.
"""

import time
from typing import Optional, List, TYPE_CHECKING

from src.core.logger import logger
from src.core.database.models import ModerationLogRecord, TempBanRecord, WarningRecord

if TYPE_CHECKING:
    from src.core.database.manager import DatabaseManager


class ModerationMixin:
    """Mixin for warning and moderation log operations."""

    # =========================================================================
    # Warnings
    # =========================================================================

    def add_warning(
        self: "DatabaseManager",
        user_id: int,
        guild_id: int,
        moderator_id: int,
        reason: Optional[str] = None,
    ) -> int:
        """
        Add a warning to the database.

        Returns:
            Row ID of the warning record.
        """
        cursor = self.execute(
            """INSERT INTO warnings (user_id, guild_id, moderator_id, reason, created_at)
               VALUES (?, ?, ?, ?, ?)""",
            (user_id, guild_id, moderator_id, reason, time.time())
        )

        logger.tree("Warning Added", [
            ("User ID", str(user_id)),
            ("Moderator ID", str(moderator_id)),
            ("Reason", (reason or "None")[:50]),
        ], emoji="⚠️")

        return cursor.lastrowid

    def get_user_warn_count(self: "DatabaseManager", user_id: int, guild_id: int) -> int:
        """Get the all-time warning count for a user in a guild."""
        row = self.fetchone(
            "SELECT COUNT(*) as count FROM warnings WHERE user_id = ? AND guild_id = ?",
            (user_id, guild_id)
        )
        return row["count"] if row else 0

    def get_user_warnings(self: "DatabaseManager", user_id: int, guild_id: int, limit: int = 10) -> List[WarningRecord]:
        rows = self.fetchall(
            """SELECT * FROM warnings WHERE user_id = ? AND guild_id = ?
               ORDER BY created_at DESC LIMIT ?""",
            (user_id, guild_id, limit)
        )
        return [dict(r) for r in rows]

    # =========================================================================
    # Moderation Log
    # =========================================================================

    def log_moderation_action(
        self: "DatabaseManager",
        guild_id: int,
        moderator_id: int,
        action: str,
        target_id: Optional[int] = None,
        reason: Optional[str] = None,
    ) -> int:
        cursor = self.execute(
            """INSERT INTO moderation_log (guild_id, moderator_id, target_id, action, reason, created_at)
               VALUES (?, ?, ?, ?, ?, ?)""",
            (guild_id, moderator_id, target_id, action, reason, time.time())
        )
        return cursor.lastrowid

    def get_moderation_log(self: "DatabaseManager", guild_id: int, limit: int = 25) -> List[ModerationLogRecord]:
        rows = self.fetchall(
            "SELECT * FROM moderation_log WHERE guild_id = ? ORDER BY created_at DESC LIMIT ?",
            (guild_id, limit)
        )
        return [dict(r) for r in rows]


    # =========================================================================
    # Temporary Bans
    # =========================================================================

    def add_temp_ban(
        self: "DatabaseManager",
        guild_id: int,
        user_id: int,
        moderator_id: int,
        expires_at: float,
        reason: Optional[str] = None,
    ) -> None:
        """Schedule an unban. Banning the same user again replaces the schedule."""
        self.execute(
            """INSERT OR REPLACE INTO temp_bans
               (guild_id, user_id, moderator_id, reason, banned_at, expires_at)
               VALUES (?, ?, ?, ?, ?, ?)""",
            (guild_id, user_id, moderator_id, reason, time.time(), expires_at)
        )

    def remove_temp_ban(self: "DatabaseManager", guild_id: int, user_id: int) -> bool:
        cursor = self.execute(
            "DELETE FROM temp_bans WHERE guild_id = ? AND user_id = ?",
            (guild_id, user_id)
        )
        return cursor.rowcount > 0

    def get_expired_temp_bans(self: "DatabaseManager", now: Optional[float] = None) -> List[TempBanRecord]:
        rows = self.fetchall(
            "SELECT * FROM temp_bans WHERE expires_at <= ? ORDER BY expires_at",
            (now if now is not None else time.time(),)
        )
        return [dict(r) for r in rows]

    def get_temp_ban(self: "DatabaseManager", guild_id: int, user_id: int) -> Optional[TempBanRecord]:
        row = self.fetchone(
            "SELECT * FROM temp_bans WHERE guild_id = ? AND user_id = ?",
            (guild_id, user_id)
        )
        return dict(row) if row else None


__all__ = ["ModerationMixin"]
