"""
UAS Bot - Premium Cog
=====================

/givepremium: developer-only manual grant of a premium tier.
"""

from datetime import datetime, timezone
from typing import TYPE_CHECKING, Literal

import discord
from discord import app_commands
from discord.ext import commands

from src.core.logger import logger
from src.core.config import EmbedColors, check_developer_permission
from src.core.constants import SUBSCRIPTION_DEFAULT_DAYS
from src.core.database import get_db
from src.services.subscriptions import TIER_LABELS
from src.utils.async_utils import gather_with_logging
from src.utils.footer import set_footer
from src.utils.interaction import safe_defer, safe_respond

if TYPE_CHECKING:
    from src.bot import UASBot


TIER_BENEFITS = {
    "ruby_subscription": (
        "• 💰 1,200,000 weekly coins\n"
        "• 💎 12,000,000 monthly coins\n"
        "• 🛍️ 10% purchase bonus\n"
        "• 🔴 Ruby exclusive channels"
    ),
    "diamond": (
        "• 💰 1,000,000 weekly coins\n"
        "• 💎 10,000,000 monthly coins\n"
        "• 🛍️ 5% purchase bonus\n"
        "• 💎 Diamond exclusive channels"
    ),
}


def _expiry_text(expires_at: float) -> str:
    return f"<t:{int(expires_at)}:D>"


class PremiumCog(commands.Cog):
    """Manual premium grants."""

    def __init__(self, bot: "UASBot") -> None:
        self.bot = bot
        self.db = get_db()

    @app_commands.command(name="givepremium", description="DEV ONLY: Manually grant a premium subscription")
    @app_commands.describe(
        member="The member to grant premium to",
        tier="Subscription tier to grant",
        duration="Duration in days",
    )
    async def givepremium(
        self,
        interaction: discord.Interaction,
        member: discord.Member,
        tier: Literal["ruby_subscription", "diamond"],
        duration: app_commands.Range[int, 1, 365] = SUBSCRIPTION_DEFAULT_DAYS,
    ) -> None:
        if not await check_developer_permission(
            interaction, "This command is restricted to **developers only**."
        ):
            return

        if member.bot:
            await safe_respond(interaction, "❌ Cannot grant premium subscription to bots.")
            return

        await safe_defer(interaction, ephemeral=False)

        existing = self.db.get_subscription(member.id)
        was_active = bool(existing and existing["active"])

        try:
            record, role_applied = await self.bot.subscription_service.grant(
                member, tier, interaction.user.id, duration,
            )
        except Exception as e:
            logger.error("Premium Grant Failed", [
                ("Target", f"{member.name} ({member.id})"),
                ("Tier", tier),
                ("Error Type", type(e).__name__),
                ("Error", str(e)[:100]),
            ])
            await safe_respond(
                interaction,
                "❌ An error occurred while granting premium subscription. Check console logs for details.",
                ephemeral=False,
            )
            return

        embed = self._build_grant_embed(member, tier, duration, record["expires_at"], existing if was_active else None)
        await safe_respond(interaction, embed=embed, ephemeral=False)

        if not role_applied:
            notice = discord.Embed(
                title="⚠️ Role Assignment Notice",
                description="Premium subscription was granted successfully, but Discord role assignment failed.",
                color=0xFFAA00,
                timestamp=datetime.now(timezone.utc),
            )
            notice.add_field(name="🔍 Expected Role", value=TIER_LABELS[tier], inline=True)
            notice.add_field(
                name="🛠️ Manual Action Required",
                value="Please manually assign the appropriate premium role to the user.",
                inline=True,
            )
            await safe_respond(interaction, embed=notice)

        self.db.log_moderation_action(
            interaction.guild_id, interaction.user.id, "givepremium", member.id,
            f"{tier} for {duration} days",
        )
        await gather_with_logging(
            ("Premium DM", self._dm_member(member, tier, record["expires_at"])),
            context="Give Premium",
        )

    def _build_grant_embed(self, member, tier, duration, expires_at, previous) -> discord.Embed:
        if previous:
            embed = discord.Embed(
                title="🔄 Premium Subscription Updated",
                description=f"Updated existing subscription for **{member.display_name}**",
                color=EmbedColors.SUCCESS,
                timestamp=datetime.now(timezone.utc),
            )
            embed.add_field(name="👤 User", value=f"{member.mention} ({member})", inline=True)
            embed.add_field(
                name="🎭 Previous Tier",
                value=TIER_LABELS.get(previous["tier"], previous["tier"]),
                inline=True,
            )
            embed.add_field(name="🎭 New Tier", value=TIER_LABELS[tier], inline=True)
            embed.add_field(name="⏰ Duration", value=f"{duration} days", inline=True)
            embed.add_field(name="📅 Expires", value=_expiry_text(expires_at), inline=True)
            embed.add_field(name="🔧 Action Type", value="Manual Override (DEV)", inline=True)
        else:
            embed = discord.Embed(
                title="✅ Premium Subscription Granted",
                description=f"Successfully granted premium subscription to **{member.display_name}**",
                color=EmbedColors.SUCCESS,
                timestamp=datetime.now(timezone.utc),
            )
            embed.add_field(name="👤 User", value=f"{member.mention} ({member})", inline=True)
            embed.add_field(name="🎭 Subscription Tier", value=TIER_LABELS[tier], inline=True)
            embed.add_field(name="⏰ Duration", value=f"{duration} days", inline=True)
            embed.add_field(name="📅 Expires", value=_expiry_text(expires_at), inline=True)
            embed.add_field(name="🎁 Premium Benefits", value=TIER_BENEFITS[tier], inline=True)
        set_footer(embed, text="🔧 Developer Manual Grant")
        return embed

    async def _dm_member(self, member: discord.Member, tier: str, expires_at: float) -> None:
        embed = discord.Embed(
            title="🎉 Premium Subscription Granted!",
            description=f"You've been granted a **{TIER_LABELS[tier]}** subscription!",
            color=EmbedColors.SUCCESS,
            timestamp=datetime.now(timezone.utc),
        )
        embed.add_field(name="🎁 Your Benefits", value=TIER_BENEFITS[tier], inline=False)
        embed.add_field(name="⏰ Valid Until", value=_expiry_text(expires_at), inline=False)
        set_footer(embed, text="💎 Welcome to Premium!")
        try:
            await member.send(embed=embed)
        except (discord.Forbidden, discord.HTTPException):
            logger.debug(f"Premium DM not delivered to {member.id}")


__all__ = ["PremiumCog", "TIER_BENEFITS"]
