"""
UAS Bot - Database Schema Module
================================

Table definitions and indexes.
"""

import sqlite3
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from src.core.database.manager import DatabaseManager


class SchemaMixin:
    """Mixin for database schema initialization."""

    def _init_tables(self: "DatabaseManager") -> None:
        """
        Initialize all database tables.

        DESIGN: Tables are created if not exist, allowing safe restarts.
        Indexes added for frequently queried columns.
        """
        conn = self._ensure_connection()
        cursor = conn.cursor()

        # -----------------------------------------------------------------
        # Bot State Table
        # DESIGN: Key-value store for small pieces of runtime state
        # -----------------------------------------------------------------
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS bot_state (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                updated_at REAL NOT NULL
            )
        """)

        # -----------------------------------------------------------------
        # User Balances Table
        # DESIGN: Shared with the casino bot; off_economy hides a user
        # from leaderboards and analysis without touching balances
        # -----------------------------------------------------------------
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS user_balances (
                user_id INTEGER NOT NULL,
                guild_id INTEGER NOT NULL,
                wallet INTEGER NOT NULL DEFAULT 1000,
                bank INTEGER NOT NULL DEFAULT 0,
                off_economy INTEGER NOT NULL DEFAULT 0,
                created_at REAL NOT NULL,
                updated_at REAL NOT NULL,
                PRIMARY KEY (user_id, guild_id)
            )
        """)
        cursor.execute(
            "CREATE INDEX IF NOT EXISTS idx_balances_guild ON user_balances(guild_id, off_economy)"
        )

        # -----------------------------------------------------------------
        # User Subscriptions Table
        # DESIGN: One row per user; re-granting overwrites the row
        # -----------------------------------------------------------------
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS user_subscriptions (
                user_id INTEGER PRIMARY KEY,
                tier TEXT NOT NULL,
                role_id INTEGER,
                active INTEGER NOT NULL DEFAULT 1,
                granted_by INTEGER,
                started_at REAL NOT NULL,
                expires_at REAL NOT NULL
            )
        """)
        cursor.execute(
            "CREATE INDEX IF NOT EXISTS idx_subscriptions_expiry ON user_subscriptions(active, expires_at)"
        )

        # -----------------------------------------------------------------
        # Giveaways Table
        # DESIGN: message_id is unique so recovery cannot duplicate rows
        # -----------------------------------------------------------------
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS giveaways (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                message_id INTEGER NOT NULL UNIQUE,
                channel_id INTEGER NOT NULL,
                guild_id INTEGER NOT NULL,
                creator_id INTEGER,
                prize TEXT NOT NULL,
                winner_count INTEGER NOT NULL DEFAULT 1,
                end_time REAL NOT NULL,
                status TEXT NOT NULL DEFAULT 'active',
                winner_ids TEXT,
                created_at REAL NOT NULL,
                ended_at REAL
            )
        """)
        cursor.execute(
            "CREATE INDEX IF NOT EXISTS idx_giveaways_status ON giveaways(status, end_time)"
        )
        cursor.execute(
            "CREATE INDEX IF NOT EXISTS idx_giveaways_guild ON giveaways(guild_id, status)"
        )

        # -----------------------------------------------------------------
        # Giveaway Entries Table
        # DESIGN: Persisted so reroll works after the giveaway left memory
        # -----------------------------------------------------------------
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS giveaway_entries (
                giveaway_id INTEGER NOT NULL,
                user_id INTEGER NOT NULL,
                entered_at REAL NOT NULL,
                UNIQUE(giveaway_id, user_id),
                FOREIGN KEY (giveaway_id) REFERENCES giveaways(id) ON DELETE CASCADE
            )
        """)

        # -----------------------------------------------------------------
        # Shifts Table
        # DESIGN: At most one active shift per user, enforced by index
        # -----------------------------------------------------------------
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS shifts (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id INTEGER NOT NULL,
                guild_id INTEGER NOT NULL,
                role TEXT NOT NULL,
                pay_rate INTEGER NOT NULL,
                clock_in REAL NOT NULL,
                clock_out REAL,
                break_minutes REAL NOT NULL DEFAULT 0,
                break_started REAL,
                hours_worked REAL NOT NULL DEFAULT 0,
                earnings INTEGER NOT NULL DEFAULT 0,
                last_activity REAL NOT NULL,
                status TEXT NOT NULL DEFAULT 'active',
                end_reason TEXT
            )
        """)
        try:
            cursor.execute("ALTER TABLE shifts ADD COLUMN break_started REAL")
        except sqlite3.OperationalError:
            pass
        cursor.execute(
            "CREATE UNIQUE INDEX IF NOT EXISTS idx_shifts_one_active ON shifts(user_id) WHERE status = 'active'"
        )
        cursor.execute(
            "CREATE INDEX IF NOT EXISTS idx_shifts_user_time ON shifts(user_id, guild_id, clock_in DESC)"
        )

        # -----------------------------------------------------------------
        # Suggestions Tables
        # -----------------------------------------------------------------
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS suggestions (
                suggestion_id TEXT PRIMARY KEY,
                user_id INTEGER NOT NULL,
                guild_id INTEGER NOT NULL,
                username TEXT,
                title TEXT NOT NULL,
                description TEXT NOT NULL,
                status TEXT NOT NULL DEFAULT 'pending',
                upvotes INTEGER NOT NULL DEFAULT 0,
                downvotes INTEGER NOT NULL DEFAULT 0,
                message_id INTEGER,
                channel_id INTEGER,
                thread_id INTEGER,
                admin_notes TEXT,
                reviewed_by INTEGER,
                created_at REAL NOT NULL,
                updated_at REAL NOT NULL
            )
        """)
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS suggestion_votes (
                suggestion_id TEXT NOT NULL,
                user_id INTEGER NOT NULL,
                vote_type TEXT NOT NULL,
                voted_at REAL NOT NULL,
                PRIMARY KEY (suggestion_id, user_id)
            )
        """)

        # -----------------------------------------------------------------
        # Bug Reports Table
        # -----------------------------------------------------------------
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS bug_reports (
                report_id TEXT PRIMARY KEY,
                user_id INTEGER NOT NULL,
                guild_id INTEGER NOT NULL,
                username TEXT,
                title TEXT NOT NULL,
                description TEXT NOT NULL,
                steps TEXT,
                priority TEXT NOT NULL DEFAULT 'medium',
                status TEXT NOT NULL DEFAULT 'pending',
                message_id INTEGER,
                channel_id INTEGER,
                thread_id INTEGER,
                updated_by INTEGER,
                created_at REAL NOT NULL,
                updated_at REAL NOT NULL
            )
        """)

        # -----------------------------------------------------------------
        # Audit Tables
        # DESIGN: Every queued event is also persisted for history
        # -----------------------------------------------------------------
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS audit_log (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                guild_id INTEGER NOT NULL,
                category TEXT NOT NULL,
                event_type TEXT NOT NULL,
                content TEXT,
                actor_id INTEGER,
                target_id INTEGER,
                created_at REAL NOT NULL
            )
        """)
        cursor.execute(
            "CREATE INDEX IF NOT EXISTS idx_audit_guild_time ON audit_log(guild_id, created_at DESC)"
        )
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS audit_settings (
                guild_id INTEGER PRIMARY KEY,
                enabled INTEGER NOT NULL DEFAULT 0,
                channel_id INTEGER,
                updated_at REAL NOT NULL
            )
        """)

        # -----------------------------------------------------------------
        # Server Config Table
        # DESIGN: Per-guild flags (sleep mode) that survive restarts
        # -----------------------------------------------------------------
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS server_config (
                guild_id INTEGER PRIMARY KEY,
                sleep_mode INTEGER NOT NULL DEFAULT 0,
                updated_at REAL NOT NULL
            )
        """)

        # -----------------------------------------------------------------
        # Moderation Tables
        # -----------------------------------------------------------------
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS warnings (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id INTEGER NOT NULL,
                guild_id INTEGER NOT NULL,
                moderator_id INTEGER NOT NULL,
                reason TEXT,
                created_at REAL NOT NULL
            )
        """)
        cursor.execute(
            "CREATE INDEX IF NOT EXISTS idx_warnings_user ON warnings(user_id, guild_id)"
        )
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS moderation_log (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                guild_id INTEGER NOT NULL,
                moderator_id INTEGER NOT NULL,
                target_id INTEGER,
                action TEXT NOT NULL,
                reason TEXT,
                created_at REAL NOT NULL
            )
        """)
        cursor.execute(
            "CREATE INDEX IF NOT EXISTS idx_modlog_guild_time ON moderation_log(guild_id, created_at DESC)"
        )
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS temp_bans (
                guild_id INTEGER NOT NULL,
                user_id INTEGER NOT NULL,
                moderator_id INTEGER NOT NULL,
                reason TEXT,
                banned_at REAL NOT NULL,
                expires_at REAL NOT NULL,
                PRIMARY KEY (guild_id, user_id)
            )
        """)
        cursor.execute(
            "CREATE INDEX IF NOT EXISTS idx_temp_bans_expiry ON temp_bans(expires_at)"
        )

        # -----------------------------------------------------------------
        # Shop Tables
        # -----------------------------------------------------------------
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS shop_items (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT NOT NULL,
                category TEXT NOT NULL DEFAULT 'general',
                price INTEGER NOT NULL,
                role_id INTEGER,
                duration_days INTEGER,
                active INTEGER NOT NULL DEFAULT 1,
                created_at REAL NOT NULL
            )
        """)
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS user_shop_purchases (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id INTEGER NOT NULL,
                guild_id INTEGER NOT NULL,
                item_id INTEGER NOT NULL,
                price_paid INTEGER NOT NULL,
                active INTEGER NOT NULL DEFAULT 1,
                purchased_at REAL NOT NULL,
                expires_at REAL,
                FOREIGN KEY (item_id) REFERENCES shop_items(id)
            )
        """)
        cursor.execute(
            "CREATE INDEX IF NOT EXISTS idx_purchases_expiry ON user_shop_purchases(active, expires_at)"
        )

        conn.commit()


__all__ = ["SchemaMixin"]
