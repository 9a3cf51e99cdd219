"""
UAS Bot - Suggestion Operations Mixin
=====================================

Suggestion rows and per-user votes.
"""

import time
from typing import TYPE_CHECKING, Optional, Tuple

from src.core.logger import logger
from src.core.database.models import SuggestionRecord

if TYPE_CHECKING:
    from src.core.database.manager import DatabaseManager


VOTE_TYPES = ("upvote", "downvote")


class SuggestionsMixin:
    """Mixin for suggestion operations."""

    def create_suggestion(
        self: "DatabaseManager",
        suggestion_id: str,
        user_id: int,
        guild_id: int,
        username: str,
        title: str,
        description: str,
    ) -> SuggestionRecord:
        now = time.time()
        self.execute(
            """INSERT INTO suggestions
               (suggestion_id, user_id, guild_id, username, title, description,
                status, upvotes, downvotes, created_at, updated_at)
               VALUES (?, ?, ?, ?, ?, ?, 'pending', 0, 0, ?, ?)""",
            (suggestion_id, user_id, guild_id, username, title, description, now, now)
        )
        logger.tree("Suggestion Stored", [
            ("ID", suggestion_id),
            ("User ID", str(user_id)),
            ("Title", title[:50]),
        ], emoji="📋")
        return self.get_suggestion(suggestion_id)

    def get_suggestion(self: "DatabaseManager", suggestion_id: str) -> Optional[SuggestionRecord]:
        row = self.fetchone(
            "SELECT * FROM suggestions WHERE suggestion_id = ?",
            (suggestion_id,)
        )
        return dict(row) if row else None

    def set_suggestion_message(
        self: "DatabaseManager",
        suggestion_id: str,
        message_id: int,
        channel_id: int,
        thread_id: Optional[int] = None,
    ) -> None:
        """Record where the suggestion embed and thread were posted."""
        self.execute(
            """UPDATE suggestions SET message_id = ?, channel_id = ?, thread_id = ?, updated_at = ?
               WHERE suggestion_id = ?""",
            (message_id, channel_id, thread_id, time.time(), suggestion_id)
        )

    def update_suggestion_status(
        self: "DatabaseManager",
        suggestion_id: str,
        status: str,
        reviewed_by: int,
        admin_notes: Optional[str] = None,
    ) -> None:
        self.execute(
            """UPDATE suggestions SET status = ?, reviewed_by = ?,
                   admin_notes = COALESCE(?, admin_notes), updated_at = ?
               WHERE suggestion_id = ?""",
            (status, reviewed_by, admin_notes, time.time(), suggestion_id)
        )
        logger.tree("Suggestion Status Updated", [
            ("ID", suggestion_id),
            ("Status", status),
            ("Reviewed By", str(reviewed_by)),
        ], emoji="🏷️")

    def record_suggestion_vote(
        self: "DatabaseManager",
        suggestion_id: str,
        user_id: int,
        vote_type: str,
    ) -> Tuple[str, int, int]:
        """
        Record a vote, replacing the user's previous one.

        Returns:
            Tuple of (outcome, upvotes, downvotes) where outcome is
            "added", "switched" or "duplicate".

        Raises:
            ValueError: If vote_type is not upvote or downvote.
        """
        if vote_type not in VOTE_TYPES:
            raise ValueError(f"Invalid vote type: {vote_type}")

        with self.transaction() as tx:
            tx.execute(
                "SELECT vote_type FROM suggestion_votes WHERE suggestion_id = ? AND user_id = ?",
                (suggestion_id, user_id)
            )
            existing = tx.fetchone()

            if existing and existing["vote_type"] == vote_type:
                outcome = "duplicate"
            else:
                outcome = "switched" if existing else "added"
                tx.execute(
                    """INSERT INTO suggestion_votes (suggestion_id, user_id, vote_type, voted_at)
                       VALUES (?, ?, ?, ?)
                       ON CONFLICT(suggestion_id, user_id) DO UPDATE SET
                           vote_type = excluded.vote_type,
                           voted_at = excluded.voted_at""",
                    (suggestion_id, user_id, vote_type, time.time())
                )

            tx.execute(
                """SELECT
                       SUM(CASE WHEN vote_type = 'upvote' THEN 1 ELSE 0 END) AS up,
                       SUM(CASE WHEN vote_type = 'downvote' THEN 1 ELSE 0 END) AS down
                   FROM suggestion_votes WHERE suggestion_id = ?""",
                (suggestion_id,)
            )
            counts = tx.fetchone()
            upvotes = counts["up"] or 0
            downvotes = counts["down"] or 0

            tx.execute(
                "UPDATE suggestions SET upvotes = ?, downvotes = ?, updated_at = ? WHERE suggestion_id = ?",
                (upvotes, downvotes, time.time(), suggestion_id)
            )

        return outcome, upvotes, downvotes


__all__ = ["SuggestionsMixin", "VOTE_TYPES"]
