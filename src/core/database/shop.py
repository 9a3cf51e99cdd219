"""
UAS Bot - Shop Operations Mixin
===============================

Read-mostly access to the casino shop tables for admin reporting
and expired purchase cleanup.
"""

import time
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from src.core.constants import SECONDS_PER_DAY
from src.core.database.models import ShopItemRecord, ShopPurchaseRecord

if TYPE_CHECKING:
    from src.core.database.manager import DatabaseManager


class ShopMixin:
    """Mixin for shop admin operations."""

    def add_shop_item(
        self: "DatabaseManager",
        name: str,
        price: int,
        category: str = "general",
        role_id: Optional[int] = None,
        duration_days: Optional[int] = None,
    ) -> int:
        cursor = self.execute(
            """INSERT INTO shop_items (name, category, price, role_id, duration_days, active, created_at)
               VALUES (?, ?, ?, ?, ?, 1, ?)""",
            (name, category, price, role_id, duration_days, time.time())
        )
        return cursor.lastrowid

    def get_shop_items(self: "DatabaseManager", include_inactive: bool = False) -> List[ShopItemRecord]:
        if include_inactive:
            rows = self.fetchall("SELECT * FROM shop_items ORDER BY category, price")
        else:
            rows = self.fetchall("SELECT * FROM shop_items WHERE active = 1 ORDER BY category, price")
        return [dict(r) for r in rows]

    def record_shop_purchase(
        self: "DatabaseManager",
        user_id: int,
        guild_id: int,
        item_id: int,
        price_paid: int,
        duration_days: Optional[int] = None,
    ) -> int:
        now = time.time()
        expires_at = now + duration_days * SECONDS_PER_DAY if duration_days else None
        cursor = self.execute(
            """INSERT INTO user_shop_purchases
               (user_id, guild_id, item_id, price_paid, active, purchased_at, expires_at)
               VALUES (?, ?, ?, ?, 1, ?, ?)""",
            (user_id, guild_id, item_id, price_paid, now, expires_at)
        )
        return cursor.lastrowid

    def get_shop_stats(self: "DatabaseManager", guild_id: int) -> Dict[str, Any]:
        """
        Aggregate shop statistics for a guild.

        Returns:
            Dict with total_items, total_purchases, active_purchases,
            total_revenue and a per-category list.
        """
        items_row = self.fetchone("SELECT COUNT(*) as count FROM shop_items WHERE active = 1")
        totals = self.fetchone(
            """SELECT COUNT(*) as purchases,
                      COALESCE(SUM(price_paid), 0) as revenue,
                      COALESCE(SUM(CASE WHEN active = 1 THEN 1 ELSE 0 END), 0) as active
               FROM user_shop_purchases WHERE guild_id = ?""",
            (guild_id,)
        )
        categories = self.fetchall(
            """SELECT i.category as category,
                      COUNT(p.id) as purchases,
                      COALESCE(SUM(p.price_paid), 0) as revenue
               FROM shop_items i
               LEFT JOIN user_shop_purchases p ON p.item_id = i.id AND p.guild_id = ?
               GROUP BY i.category
               ORDER BY revenue DESC""",
            (guild_id,)
        )
        return {
            "total_items": items_row["count"] if items_row else 0,
            "total_purchases": totals["purchases"] if totals else 0,
            "active_purchases": totals["active"] if totals else 0,
            "total_revenue": totals["revenue"] if totals else 0,
            "categories": [dict(r) for r in categories],
        }

    def get_expired_purchases(self: "DatabaseManager", now: Optional[float] = None) -> List[Dict[str, Any]]:
        """Get active purchases past expiry, joined with their item's role."""
        now = now if now is not None else time.time()
        rows = self.fetchall(
            """SELECT p.*, i.name as item_name, i.role_id as role_id
               FROM user_shop_purchases p
               JOIN shop_items i ON i.id = p.item_id
               WHERE p.active = 1 AND p.expires_at IS NOT NULL AND p.expires_at <= ?""",
            (now,)
        )
        return [dict(r) for r in rows]

    def deactivate_purchase(self: "DatabaseManager", purchase_id: int) -> None:
        self.execute(
            "UPDATE user_shop_purchases SET active = 0 WHERE id = ?",
            (purchase_id,)
        )


__all__ = ["ShopMixin"]
