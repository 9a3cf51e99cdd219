"""
UAS Bot - Subscription Service
==============================

Premium tier grants and the expiry sweep.

DESIGN:
    One subscription row per user. Granting again overwrites tier and
    expiry and swaps the tier roles. A background loop (every 10 min)
    deactivates expired rows and removes their role from the member.
"""

import asyncio
from typing import TYPE_CHECKING, Dict, List, Optional, Tuple

import discord

from src.core.logger import logger
from src.core.config import get_config
from src.core.database import get_db, SubscriptionRecord
from src.core.constants import SUBSCRIPTION_DEFAULT_DAYS, SUBSCRIPTION_TIERS

if TYPE_CHECKING:
    from src.bot import UASBot


TIER_LABELS: Dict[str, str] = {
    "ruby_subscription": "🔴 Ruby Premium",
    "diamond": "💎 Diamond VIP",
}


class SubscriptionService:
    """
    Grants premium tiers and expires them.

    Attributes:
        bot: Main bot instance.
        config: Bot configuration.
        db: Database manager.
        task: Expiry loop task.
        running: Whether the expiry loop is active.
    """

    def __init__(self, bot: "UASBot") -> None:
        self.bot = bot
        self.config = get_config()
        self.db = get_db()
        self.task: Optional[asyncio.Task] = None
        self.running: bool = False

    def role_id_for(self, tier: str) -> Optional[int]:
        return {
            "ruby_subscription": self.config.ruby_role_id,
            "diamond": self.config.diamond_role_id,
        }.get(tier)

    # =========================================================================
    # Lifecycle Management
    # =========================================================================

    async def start(self) -> None:
        if self.task and not self.task.done():
            self.task.cancel()

        self.running = True
        self.task = asyncio.create_task(self._expiry_loop())

        logger.tree("Subscription Expiry Started", [
            ("Check Interval", f"{self.config.subscription_check_interval}s"),
        ], emoji="💎")

    async def stop(self) -> None:
        self.running = False

        if self.task and not self.task.done():
            self.task.cancel()
            try:
                await self.task
            except asyncio.CancelledError:
                pass

        logger.info("Subscription Expiry Stopped")

    async def _expiry_loop(self) -> None:
        await self.bot.wait_until_ready()

        while self.running:
            try:
                await self.process_expired()
                await asyncio.sleep(self.config.subscription_check_interval)
            except asyncio.CancelledError:
                break
            except Exception as e:
                logger.error("Subscription Expiry Error", [
                    ("Error Type", type(e).__name__),
                    ("Error", str(e)[:100]),
                ])
                await asyncio.sleep(self.config.subscription_check_interval)

    # =========================================================================
    # Grant
    # =========================================================================

    async def grant(
        self,
        member: discord.Member,
        tier: str,
        granted_by: int,
        duration_days: int = SUBSCRIPTION_DEFAULT_DAYS,
    ) -> Tuple[SubscriptionRecord, bool]:
        """
        Grant a tier and swap tier roles.

        Returns:
            Tuple of (stored record, whether the tier role was applied).

        Raises:
            ValueError: Unknown tier.
        """
        if tier not in SUBSCRIPTION_TIERS:
            raise ValueError(f"Unknown tier: {tier}")

        role_id = self.role_id_for(tier)
        record = self.db.upsert_subscription(member.id, tier, role_id, granted_by, duration_days)

        to_remove = []
        for other in SUBSCRIPTION_TIERS:
            if other == tier:
                continue
            other_role = member.guild.get_role(self.role_id_for(other) or 0)
            if other_role is not None and other_role in member.roles:
                to_remove.append(other_role)

        role = member.guild.get_role(role_id or 0)
        try:
            if to_remove:
                await member.remove_roles(*to_remove, reason=f"Premium tier changed to {tier}")
            if role is not None:
                await member.add_roles(role, reason=f"Premium {tier} granted by {granted_by}")
        except discord.HTTPException as e:
            logger.warning("Premium Role Update Failed", [
                ("User ID", str(member.id)),
                ("Tier", tier),
                ("Error", str(e)[:100]),
            ])
            return record, False

        return record, role is not None

    # =========================================================================
    # Expiry
    # =========================================================================

    async def process_expired(self) -> List[SubscriptionRecord]:
        """Deactivate expired subscriptions and remove their roles."""
        expired = self.db.get_expired_subscriptions()
        if not expired:
            return []

        for sub in expired:
            self.db.deactivate_subscription(sub["user_id"])
            await self._remove_role(sub)

        logger.tree("Subscriptions Expired", [
            ("Count", str(len(expired))),
            ("Users", ", ".join(str(s["user_id"]) for s in expired)[:100]),
        ], emoji="⌛")
        return expired

    async def _remove_role(self, sub: SubscriptionRecord) -> None:
        role_id = sub.get("role_id")
        if not role_id:
            return

        for guild in self.bot.guilds:
            role = guild.get_role(role_id)
            if role is None:
                continue
            member = guild.get_member(sub["user_id"])
            if member is None or role not in member.roles:
                continue
            try:
                await member.remove_roles(role, reason="Premium subscription expired")
            except discord.HTTPException as e:
                logger.warning("Expired Role Removal Failed", [
                    ("User ID", str(sub["user_id"])),
                    ("Guild", guild.name),
                    ("Error", str(e)[:100]),
                ])


__all__ = ["SubscriptionService", "TIER_LABELS"]
