"""
UAS Bot - Bug Report Operations Mixin
=====================================

Bug report rows.
"""

import time
from typing import TYPE_CHECKING, Optional

from src.core.logger import logger
from src.core.database.models import BugReportRecord

if TYPE_CHECKING:
    from src.core.database.manager import DatabaseManager


class BugReportsMixin:
    """Mixin for bug report operations."""

    def create_bug_report(
        self: "DatabaseManager",
        report_id: str,
        user_id: int,
        guild_id: int,
        username: str,
        title: str,
        description: str,
        steps: Optional[str],
        priority: str,
    ) -> BugReportRecord:
        now = time.time()
        self.execute(
            """INSERT INTO bug_reports
               (report_id, user_id, guild_id, username, title, description, steps,
                priority, status, created_at, updated_at)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?, 'pending', ?, ?)""",
            (report_id, user_id, guild_id, username, title, description, steps,
             priority, now, now)
        )
        logger.tree("Bug Report Stored", [
            ("ID", report_id),
            ("Priority", priority),
            ("Title", title[:50]),
        ], emoji="🐛")
        return self.get_bug_report(report_id)

    def get_bug_report(self: "DatabaseManager", report_id: str) -> Optional[BugReportRecord]:
        row = self.fetchone(
            "SELECT * FROM bug_reports WHERE report_id = ?",
            (report_id,)
        )
        return dict(row) if row else None

    def set_bug_report_message(
        self: "DatabaseManager",
        report_id: str,
        message_id: int,
        channel_id: int,
        thread_id: Optional[int] = None,
    ) -> None:
        self.execute(
            """UPDATE bug_reports SET message_id = ?, channel_id = ?, thread_id = ?, updated_at = ?
               WHERE report_id = ?""",
            (message_id, channel_id, thread_id, time.time(), report_id)
        )

    def update_bug_report_status(self: "DatabaseManager", report_id: str, status: str, updated_by: int) -> None:
        self.execute(
            "UPDATE bug_reports SET status = ?, updated_by = ?, updated_at = ? WHERE report_id = ?",
            (status, updated_by, time.time(), report_id)
        )
        logger.tree("Bug Report Status Updated", [
            ("ID", report_id),
            ("Status", status),
            ("Updated By", str(updated_by)),
        ], emoji="🐛")


__all__ = ["BugReportsMixin"]
