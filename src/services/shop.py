"""
UAS Bot - Shop Cleanup Service
==============================

Expires timed shop purchases and removes the roles they granted.
"""

from dataclasses import dataclass
from typing import Optional

import discord

from src.core.logger import logger
from src.core.database import get_db


@dataclass
class CleanupResult:
    expired: int = 0
    roles_removed: int = 0
    role_failures: int = 0


async def cleanup_expired_purchases(guild: discord.Guild, now: Optional[float] = None) -> CleanupResult:
    """
    Deactivate expired purchases in a guild and strip their roles.

    Purchases are deactivated even when the role cannot be removed;
    failures are counted in the result.
    """
    db = get_db()
    result = CleanupResult()

    for purchase in db.get_expired_purchases(now):
        if purchase["guild_id"] != guild.id:
            continue

        db.deactivate_purchase(purchase["id"])
        result.expired += 1

        role_id = purchase.get("role_id")
        if not role_id:
            continue
        role = guild.get_role(role_id)
        member = guild.get_member(purchase["user_id"])
        if role is None or member is None or role not in member.roles:
            continue

        try:
            await member.remove_roles(role, reason=f"Shop item expired: {purchase['item_name']}")
            result.roles_removed += 1
        except discord.HTTPException as e:
            result.role_failures += 1
            logger.warning("Shop Role Removal Failed", [
                ("User ID", str(purchase["user_id"])),
                ("Item", purchase["item_name"]),
                ("Error", str(e)[:100]),
            ])

    if result.expired:
        logger.tree("Shop Purchases Expired", [
            ("Guild", guild.name),
            ("Expired", str(result.expired)),
            ("Roles Removed", str(result.roles_removed)),
        ], emoji="🧹")

    return result


__all__ = ["cleanup_expired_purchases", "CleanupResult"]
