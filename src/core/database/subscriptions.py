"""
UAS Bot - Subscription Operations Mixin
=======================================

Premium subscription rows. Each user has at most one row; granting
again overwrites it.
"""

import time
from typing import TYPE_CHECKING, List, Optional

from src.core.logger import logger
from src.core.constants import SECONDS_PER_DAY
from src.core.database.models import SubscriptionRecord

if TYPE_CHECKING:
    from src.core.database.manager import DatabaseManager


class SubscriptionsMixin:
    """Mixin for premium subscription operations."""

    def upsert_subscription(
        self: "DatabaseManager",
        user_id: int,
        tier: str,
        role_id: Optional[int],
        granted_by: int,
        duration_days: int,
    ) -> SubscriptionRecord:
        """
        Grant or replace a user's subscription.

        Returns:
            The stored subscription record.
        """
        now = time.time()
        expires_at = now + duration_days * SECONDS_PER_DAY

        self.execute(
            """INSERT INTO user_subscriptions
               (user_id, tier, role_id, active, granted_by, started_at, expires_at)
               VALUES (?, ?, ?, 1, ?, ?, ?)
               ON CONFLICT(user_id) DO UPDATE SET
                   tier = excluded.tier,
                   role_id = excluded.role_id,
                   active = 1,
                   granted_by = excluded.granted_by,
                   started_at = excluded.started_at,
                   expires_at = excluded.expires_at""",
            (user_id, tier, role_id, granted_by, now, expires_at)
        )

        logger.tree("Subscription Granted", [
            ("User ID", str(user_id)),
            ("Tier", tier),
            ("Days", str(duration_days)),
            ("Granted By", str(granted_by)),
        ], emoji="💎")

        return self.get_subscription(user_id)

    def get_subscription(self: "DatabaseManager", user_id: int) -> Optional[SubscriptionRecord]:
        """Get a user's subscription row."""
        row = self.fetchone(
            "SELECT * FROM user_subscriptions WHERE user_id = ?",
            (user_id,)
        )
        return dict(row) if row else None

    def get_expired_subscriptions(self: "DatabaseManager", now: Optional[float] = None) -> List[SubscriptionRecord]:
        """Get active subscriptions whose expiry has passed."""
        now = now if now is not None else time.time()
        rows = self.fetchall(
            "SELECT * FROM user_subscriptions WHERE active = 1 AND expires_at <= ?",
            (now,)
        )
        return [dict(r) for r in rows]

    def deactivate_subscription(self: "DatabaseManager", user_id: int) -> None:
        """Mark a subscription inactive."""
        self.execute(
            "UPDATE user_subscriptions SET active = 0 WHERE user_id = ?",
            (user_id,)
        )


__all__ = ["SubscriptionsMixin"]
