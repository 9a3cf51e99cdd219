"""
UAS Bot - Shift Operations Mixin
================================

Staff shift rows: clock in, clock out, breaks and activity.
"""

import time
from typing import TYPE_CHECKING, List, Optional

from src.core.logger import logger
from src.core.database.models import ShiftRecord

if TYPE_CHECKING:
    from src.core.database.manager import DatabaseManager


class ShiftsMixin:
    """Mixin for staff shift operations."""

    def create_shift(
        self: "DatabaseManager",
        user_id: int,
        guild_id: int,
        role: str,
        pay_rate: int,
        clock_in: Optional[float] = None,
    ) -> int:
        """
        Insert an active shift.

        Raises:
            sqlite3.IntegrityError: If the user already has an active shift.

        Returns:
            Row ID of the new shift.
        """
        now = clock_in if clock_in is not None else time.time()
        cursor = self.execute(
            """INSERT INTO shifts
               (user_id, guild_id, role, pay_rate, clock_in, last_activity, status)
               VALUES (?, ?, ?, ?, ?, ?, 'active')""",
            (user_id, guild_id, role, pay_rate, now, now)
        )
        return cursor.lastrowid

    def complete_shift_and_pay(
        self: "DatabaseManager",
        shift_id: int,
        user_id: int,
        guild_id: int,
        clock_out: float,
        break_minutes: float,
        hours_worked: float,
        earnings: int,
        reason: Optional[str] = None,
    ) -> None:
        """
        Close an active shift and credit its earnings to the wallet.

        Both writes commit together or not at all.
        """
        with self.transaction() as tx:
            tx.execute(
                """UPDATE shifts
                   SET clock_out = ?, break_minutes = ?, break_started = NULL,
                       hours_worked = ?, earnings = ?, status = 'completed', end_reason = ?
                   WHERE id = ? AND status = 'active'""",
                (clock_out, break_minutes, hours_worked, earnings, reason, shift_id)
            )
            if earnings > 0:
                tx.execute(
                    """INSERT OR IGNORE INTO user_balances
                       (user_id, guild_id, wallet, bank, off_economy, created_at, updated_at)
                       VALUES (?, ?, ?, 0, 0, ?, ?)""",
                    (user_id, guild_id, self.default_wallet, clock_out, clock_out)
                )
                tx.execute(
                    """UPDATE user_balances SET wallet = wallet + ?, updated_at = ?
                       WHERE user_id = ? AND guild_id = ?""",
                    (int(earnings), clock_out, user_id, guild_id)
                )

        logger.tree("Shift Paid", [
            ("Shift ID", str(shift_id)),
            ("User ID", str(user_id)),
            ("Hours", f"{hours_worked:.2f}"),
            ("Earnings", f"${earnings:,}"),
        ], emoji="🕐")

    def get_active_shift(self: "DatabaseManager", user_id: int) -> Optional[ShiftRecord]:
        row = self.fetchone(
            "SELECT * FROM shifts WHERE user_id = ? AND status = 'active'",
            (user_id,)
        )
        return dict(row) if row else None

    def get_active_shifts(self: "DatabaseManager", guild_id: Optional[int] = None) -> List[ShiftRecord]:
        """Get every active shift, optionally for one guild."""
        if guild_id is None:
            rows = self.fetchall("SELECT * FROM shifts WHERE status = 'active'")
        else:
            rows = self.fetchall(
                "SELECT * FROM shifts WHERE status = 'active' AND guild_id = ?",
                (guild_id,)
            )
        return [dict(r) for r in rows]

    def update_shift_activity(self: "DatabaseManager", shift_id: int, timestamp: Optional[float] = None) -> None:
        self.execute(
            "UPDATE shifts SET last_activity = ? WHERE id = ?",
            (timestamp if timestamp is not None else time.time(), shift_id)
        )

    def update_shift_break(
        self: "DatabaseManager",
        shift_id: int,
        break_minutes: float,
        break_started: Optional[float] = None,
    ) -> None:
        """Store accumulated break time and the open break's start, if any."""
        self.execute(
            "UPDATE shifts SET break_minutes = ?, break_started = ? WHERE id = ?",
            (break_minutes, break_started, shift_id)
        )

    def get_completed_shifts(
        self: "DatabaseManager",
        user_id: int,
        guild_id: int,
        since: float,
    ) -> List[ShiftRecord]:
        """Get completed shifts that started at or after `since`."""
        rows = self.fetchall(
            """SELECT * FROM shifts
               WHERE user_id = ? AND guild_id = ? AND status = 'completed' AND clock_in >= ?
               ORDER BY clock_in DESC""",
            (user_id, guild_id, since)
        )
        return [dict(r) for r in rows]

    def get_user_shifts(
        self: "DatabaseManager",
        user_id: int,
        guild_id: int,
        since: float,
    ) -> List[ShiftRecord]:
        """Get shifts of any status that started at or after `since`, newest first."""
        rows = self.fetchall(
            """SELECT * FROM shifts
               WHERE user_id = ? AND guild_id = ? AND clock_in >= ?
               ORDER BY clock_in DESC""",
            (user_id, guild_id, since)
        )
        return [dict(r) for r in rows]

    def get_timesheet_summary(self: "DatabaseManager", guild_id: int, since: float) -> List[dict]:
        """
        Per-staff totals of completed shifts in a guild.

        Returns:
            Rows of user_id, shift_count, total_hours, total_earnings and
            total_break_minutes, most hours first.
        """
        rows = self.fetchall(
            """SELECT user_id,
                      COUNT(*) AS shift_count,
                      COALESCE(SUM(hours_worked), 0) AS total_hours,
                      COALESCE(SUM(earnings), 0) AS total_earnings,
                      COALESCE(SUM(break_minutes), 0) AS total_break_minutes
               FROM shifts
               WHERE guild_id = ? AND status = 'completed' AND clock_in >= ?
               GROUP BY user_id
               ORDER BY total_hours DESC""",
            (guild_id, since)
        )
        return [dict(r) for r in rows]


__all__ = ["ShiftsMixin"]
