"""
UAS Bot - Giveaway Operations Mixin
===================================

Giveaway rows and their persisted entries.
"""

import json
import sqlite3
import time
from typing import TYPE_CHECKING, Iterable, List, Optional

from src.core.logger import logger
from src.core.database.models import GiveawayRecord

if TYPE_CHECKING:
    from src.core.database.manager import DatabaseManager


class GiveawaysMixin:
    """Mixin for giveaway operations."""

    # =========================================================================
    # Giveaway Rows
    # =========================================================================

    def create_giveaway(
        self: "DatabaseManager",
        message_id: int,
        channel_id: int,
        guild_id: int,
        creator_id: Optional[int],
        prize: str,
        end_time: float,
        winner_count: int = 1,
        status: str = "active",
    ) -> Optional[int]:
        """
        Insert a giveaway row.

        Returns:
            Row ID, or None if a row with this message_id already exists.
        """
        try:
            cursor = self.execute(
                """INSERT INTO giveaways
                   (message_id, channel_id, guild_id, creator_id, prize,
                    winner_count, end_time, status, created_at)
                   VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                (message_id, channel_id, guild_id, creator_id, prize,
                 winner_count, end_time, status, time.time())
            )
        except sqlite3.IntegrityError:
            return None
        return cursor.lastrowid

    def get_giveaway(self: "DatabaseManager", message_id: int) -> Optional[GiveawayRecord]:
        """Get a giveaway by its message ID."""
        row = self.fetchone(
            "SELECT * FROM giveaways WHERE message_id = ?",
            (message_id,)
        )
        return dict(row) if row else None

    def get_active_giveaways(self: "DatabaseManager", guild_id: Optional[int] = None) -> List[GiveawayRecord]:
        """Get active giveaways, optionally limited to one guild."""
        if guild_id is None:
            rows = self.fetchall(
                "SELECT * FROM giveaways WHERE status = 'active' ORDER BY end_time ASC"
            )
        else:
            rows = self.fetchall(
                "SELECT * FROM giveaways WHERE status = 'active' AND guild_id = ? ORDER BY end_time ASC",
                (guild_id,)
            )
        return [dict(r) for r in rows]

    def get_guild_giveaways(self: "DatabaseManager", guild_id: int, limit: int = 25) -> List[GiveawayRecord]:
        """Get the most recent giveaways of a guild, any status."""
        rows = self.fetchall(
            "SELECT * FROM giveaways WHERE guild_id = ? ORDER BY created_at DESC LIMIT ?",
            (guild_id, limit)
        )
        return [dict(r) for r in rows]

    def finish_giveaway(
        self: "DatabaseManager",
        message_id: int,
        winner_ids: Iterable[int],
        status: str = "ended",
    ) -> None:
        """Mark a giveaway ended (or cancelled) with its winners."""
        self.execute(
            "UPDATE giveaways SET status = ?, winner_ids = ?, ended_at = ? WHERE message_id = ?",
            (status, json.dumps([int(w) for w in winner_ids]), time.time(), message_id)
        )
        logger.tree("Giveaway Row Closed", [
            ("Message ID", str(message_id)),
            ("Status", status),
        ], emoji="🏁")

    def set_giveaway_winners(self: "DatabaseManager", message_id: int, winner_ids: Iterable[int]) -> None:
        """Replace the stored winners (used by reroll)."""
        self.execute(
            "UPDATE giveaways SET winner_ids = ? WHERE message_id = ?",
            (json.dumps([int(w) for w in winner_ids]), message_id)
        )

    # =========================================================================
    # Entries
    # =========================================================================

    def add_giveaway_entry(self: "DatabaseManager", giveaway_id: int, user_id: int) -> bool:
        """
        Add an entry.

        Returns:
            True if added, False if the user was already entered.
        """
        cursor = self.execute(
            "INSERT OR IGNORE INTO giveaway_entries (giveaway_id, user_id, entered_at) VALUES (?, ?, ?)",
            (giveaway_id, user_id, time.time())
        )
        return cursor.rowcount > 0

    def add_giveaway_entries(self: "DatabaseManager", giveaway_id: int, user_ids: Iterable[int]) -> None:
        """Bulk-add entries, ignoring duplicates."""
        now = time.time()
        self.executemany(
            "INSERT OR IGNORE INTO giveaway_entries (giveaway_id, user_id, entered_at) VALUES (?, ?, ?)",
            [(giveaway_id, uid, now) for uid in user_ids]
        )

    def remove_giveaway_entry(self: "DatabaseManager", giveaway_id: int, user_id: int) -> bool:
        """Remove an entry. Returns True if a row was deleted."""
        cursor = self.execute(
            "DELETE FROM giveaway_entries WHERE giveaway_id = ? AND user_id = ?",
            (giveaway_id, user_id)
        )
        return cursor.rowcount > 0

    def get_giveaway_entries(self: "DatabaseManager", giveaway_id: int) -> List[int]:
        """Get entrant user IDs in entry order."""
        rows = self.fetchall(
            "SELECT user_id FROM giveaway_entries WHERE giveaway_id = ? ORDER BY entered_at ASC",
            (giveaway_id,)
        )
        return [row["user_id"] for row in rows]

    def count_giveaway_entries(self: "DatabaseManager", giveaway_id: int) -> int:
        row = self.fetchone(
            "SELECT COUNT(*) as count FROM giveaway_entries WHERE giveaway_id = ?",
            (giveaway_id,)
        )
        return row["count"] if row else 0


__all__ = ["GiveawaysMixin"]
