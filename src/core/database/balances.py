"""
UAS Bot - Balance Operations Mixin
==================================

Wallet, bank and off-economy flag operations on the shared
user_balances table.
"""

import time
from typing import TYPE_CHECKING, List, Optional, Tuple

from src.core.logger import logger
from src.core.database.models import BalanceRecord

if TYPE_CHECKING:
    from src.core.database.manager import DatabaseManager


VALID_ACCOUNTS = ("wallet", "bank")


class BalancesMixin:
    """Mixin for balance operations."""

    # Starting wallet for new rows; the bot overrides it from config
    default_wallet: int = 1000

    def ensure_balance(self: "DatabaseManager", user_id: int, guild_id: int) -> BalanceRecord:
        """
        Get a user's balance row, creating it with defaults if missing.

        Returns:
            The balance record.
        """
        row = self.fetchone(
            "SELECT * FROM user_balances WHERE user_id = ? AND guild_id = ?",
            (user_id, guild_id)
        )
        if row:
            return dict(row)

        now = time.time()
        self.execute(
            """INSERT OR IGNORE INTO user_balances
               (user_id, guild_id, wallet, bank, off_economy, created_at, updated_at)
               VALUES (?, ?, ?, 0, 0, ?, ?)""",
            (user_id, guild_id, self.default_wallet, now, now)
        )
        row = self.fetchone(
            "SELECT * FROM user_balances WHERE user_id = ? AND guild_id = ?",
            (user_id, guild_id)
        )
        return dict(row)

    def get_balance(self: "DatabaseManager", user_id: int, guild_id: int) -> Optional[BalanceRecord]:
        """Get a user's balance row without creating one."""
        row = self.fetchone(
            "SELECT * FROM user_balances WHERE user_id = ? AND guild_id = ?",
            (user_id, guild_id)
        )
        return dict(row) if row else None

    def set_off_economy(
        self: "DatabaseManager",
        user_id: int,
        guild_id: int,
        off_economy: bool,
    ) -> Tuple[bool, BalanceRecord]:
        """
        Set the off-economy flag. Wallet and bank are never touched.

        Returns:
            Tuple of (previous flag, updated record).
        """
        current = self.ensure_balance(user_id, guild_id)
        previous = bool(current["off_economy"])

        self.execute(
            "UPDATE user_balances SET off_economy = ?, updated_at = ? WHERE user_id = ? AND guild_id = ?",
            (1 if off_economy else 0, time.time(), user_id, guild_id)
        )

        logger.tree("Economy Status Changed", [
            ("User ID", str(user_id)),
            ("Previous", "Off" if previous else "On"),
            ("Now", "Off" if off_economy else "On"),
        ], emoji="🔴" if off_economy else "🟢")

        return previous, self.ensure_balance(user_id, guild_id)

    def adjust_balance(
        self: "DatabaseManager",
        user_id: int,
        guild_id: int,
        amount: int,
        account: str = "wallet",
    ) -> Tuple[BalanceRecord, BalanceRecord]:
        """
        Add a (possibly negative) amount to the wallet or bank.

        Returns:
            Tuple of (record before, record after).

        Raises:
            ValueError: If account is not wallet or bank.
        """
        if account not in VALID_ACCOUNTS:
            raise ValueError(f"Invalid account: {account}")

        before = self.ensure_balance(user_id, guild_id)
        # Column name is whitelisted above
        self.execute(
            f"UPDATE user_balances SET {account} = {account} + ?, updated_at = ? WHERE user_id = ? AND guild_id = ?",
            (int(amount), time.time(), user_id, guild_id)
        )
        after = self.ensure_balance(user_id, guild_id)

        logger.tree("Balance Adjusted", [
            ("User ID", str(user_id)),
            ("Account", account),
            ("Amount", f"{amount:+,}"),
            ("New Value", f"{after[account]:,}"),
        ], emoji="💰")

        return before, after

    def add_to_wallet(self: "DatabaseManager", user_id: int, guild_id: int, amount: int) -> BalanceRecord:
        """Credit the wallet and return the updated record."""
        _, after = self.adjust_balance(user_id, guild_id, amount, "wallet")
        return after

    def get_guild_balances(
        self: "DatabaseManager",
        guild_id: int,
        include_off_economy: bool = False,
    ) -> List[BalanceRecord]:
        """Get every balance row for a guild."""
        if include_off_economy:
            rows = self.fetchall(
                "SELECT * FROM user_balances WHERE guild_id = ?",
                (guild_id,)
            )
        else:
            rows = self.fetchall(
                "SELECT * FROM user_balances WHERE guild_id = ? AND off_economy = 0",
                (guild_id,)
            )
        return [dict(r) for r in rows]


__all__ = ["BalancesMixin", "VALID_ACCOUNTS"]
