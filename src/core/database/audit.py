"""
UAS Bot - Audit Operations Mixin
================================

Persisted audit events and per-guild audit settings.
"""

import time
from typing import TYPE_CHECKING, List, Optional

from src.core.database.models import AuditEventRecord, AuditSettingsRecord

if TYPE_CHECKING:
    from src.core.database.manager import DatabaseManager


class AuditMixin:
    """Mixin for audit log operations."""

    def add_audit_event(
        self: "DatabaseManager",
        guild_id: int,
        category: str,
        event_type: str,
        content: str,
        actor_id: Optional[int] = None,
        target_id: Optional[int] = None,
        created_at: Optional[float] = None,
    ) -> int:
        cursor = self.execute(
            """INSERT INTO audit_log
               (guild_id, category, event_type, content, actor_id, target_id, created_at)
               VALUES (?, ?, ?, ?, ?, ?, ?)""",
            (guild_id, category, event_type, content, actor_id, target_id,
             created_at if created_at is not None else time.time())
        )
        return cursor.lastrowid

    def get_recent_audit_events(self: "DatabaseManager", guild_id: int, limit: int = 20) -> List[AuditEventRecord]:
        rows = self.fetchall(
            "SELECT * FROM audit_log WHERE guild_id = ? ORDER BY created_at DESC LIMIT ?",
            (guild_id, limit)
        )
        return [dict(r) for r in rows]

    def count_audit_events(self: "DatabaseManager", guild_id: int, since: float = 0) -> int:
        row = self.fetchone(
            "SELECT COUNT(*) as count FROM audit_log WHERE guild_id = ? AND created_at >= ?",
            (guild_id, since)
        )
        return row["count"] if row else 0

    # =========================================================================
    # Settings
    # =========================================================================

    def get_audit_settings(self: "DatabaseManager", guild_id: int) -> AuditSettingsRecord:
        """Get a guild's audit settings, defaulting to disabled."""
        row = self.fetchone(
            "SELECT * FROM audit_settings WHERE guild_id = ?",
            (guild_id,)
        )
        if row:
            return dict(row)
        return {"guild_id": guild_id, "enabled": 0, "channel_id": None, "updated_at": 0.0}

    def save_audit_settings(
        self: "DatabaseManager",
        guild_id: int,
        enabled: Optional[bool] = None,
        channel_id: Optional[int] = None,
    ) -> AuditSettingsRecord:
        """Update the given settings, leaving unspecified ones as they are."""
        current = self.get_audit_settings(guild_id)
        new_enabled = current["enabled"] if enabled is None else (1 if enabled else 0)
        new_channel = current["channel_id"] if channel_id is None else channel_id

        self.execute(
            """INSERT INTO audit_settings (guild_id, enabled, channel_id, updated_at)
               VALUES (?, ?, ?, ?)
               ON CONFLICT(guild_id) DO UPDATE SET
                   enabled = excluded.enabled,
                   channel_id = excluded.channel_id,
                   updated_at = excluded.updated_at""",
            (guild_id, new_enabled, new_channel, time.time())
        )
        return self.get_audit_settings(guild_id)


__all__ = ["AuditMixin"]
