"""
UAS Bot - Economy Admin Cog
===========================

/moveoffeco, /editmoney and /give.

Balances live in the shared user_balances table that the casino bot
also reads, so every change here is visible to games immediately.
"""

from datetime import datetime, timezone
from typing import TYPE_CHECKING, Literal, Optional

import discord
from discord import app_commands
from discord.ext import commands

from src.core.logger import logger
from src.core.config import (
    EmbedColors,
    check_admin_permission,
    check_developer_permission,
    is_developer,
)
from src.core.constants import GIVE_MAX_ADMIN, GIVE_MAX_DEVELOPER
from src.core.database import get_db
from src.utils.async_utils import gather_with_logging
from src.utils.embeds import build_error_embed
from src.utils.footer import set_footer
from src.utils.interaction import safe_defer, safe_respond
from src.utils.money import format_money, format_money_full, parse_signed_amount

if TYPE_CHECKING:
    from src.bot import UASBot


OFF_ECONOMY_EFFECTS = (
    "• Will appear in separate Off Economy leaderboards\n"
    "• Games will show \"OFF ECO\" badge\n"
    "• Competes only with other Off Economy players\n"
    "• Money and gameplay remain unchanged"
)
ON_ECONOMY_EFFECTS = (
    "• Will appear in regular leaderboards\n"
    "• No special badges in games\n"
    "• Competes with all players normally\n"
    "• Full economy participation restored"
)


def resolve_off_economy(action: str, current: bool) -> bool:
    """Target flag for a /moveoffeco action."""
    if action == "off":
        return True
    if action == "on":
        return False
    return not current


class EconomyCog(commands.Cog):
    """Admin economy commands."""

    def __init__(self, bot: "UASBot") -> None:
        self.bot = bot
        self.db = get_db()

    def _touch_shift(self, user_id: int) -> None:
        shift_manager = getattr(self.bot, "shift_manager", None)
        if shift_manager:
            shift_manager.update_activity(user_id)

    # =========================================================================
    # /moveoffeco
    # =========================================================================

    @app_commands.command(name="moveoffeco", description="Move a user on/off the economy system (Admin only)")
    @app_commands.describe(user="User to toggle off/on economy", action="Action to perform")
    @app_commands.choices(action=[
        app_commands.Choice(name="Move Off Economy", value="off"),
        app_commands.Choice(name="Move On Economy", value="on"),
        app_commands.Choice(name="Toggle Status", value="toggle"),
    ])
    async def moveoffeco(
        self,
        interaction: discord.Interaction,
        user: discord.User,
        action: Optional[str] = "toggle",
    ) -> None:
        if not await check_admin_permission(
            interaction, "You need Administrator permissions to use this command."
        ):
            return

        await safe_defer(interaction, ephemeral=False)
        try:
            current = self.db.ensure_balance(user.id, interaction.guild_id)
            new_status = resolve_off_economy(action or "toggle", bool(current["off_economy"]))
            previous, record = self.db.set_off_economy(user.id, interaction.guild_id, new_status)
        except Exception as e:
            logger.error("Move Off Economy Failed", [
                ("Target", f"{user.name} ({user.id})"),
                ("Error Type", type(e).__name__),
                ("Error", str(e)[:100]),
            ])
            await safe_respond(
                interaction,
                embed=build_error_embed("❌ Error", "Failed to change economy status. Please try again."),
                ephemeral=False,
            )
            return

        status_text = "OFF ECONOMY" if new_status else "ON ECONOMY"
        embed = discord.Embed(
            title=f"{'🔴' if new_status else '🟢'} Economy Status Changed",
            description=f"**{user.display_name}** has been moved **{status_text}**",
            color=0xFF6B6B if new_status else 0x4ECDC4,
            timestamp=datetime.now(timezone.utc),
        )
        embed.set_thumbnail(url=user.display_avatar.url)
        embed.add_field(name="👤 User", value=f"{user.display_name}\n({user.mention})", inline=True)
        embed.add_field(
            name="📊 Status Change",
            value=f"{'🔴 OFF' if previous else '🟢 ON'} ➜ {'🔴 OFF' if new_status else '🟢 ON'}",
            inline=True,
        )
        embed.add_field(
            name="💰 Current Balance",
            value=(
                f"**Total:** {format_money(record['wallet'] + record['bank'])}\n"
                f"**Wallet:** {format_money(record['wallet'])}\n"
                f"**Bank:** {format_money(record['bank'])}"
            ),
            inline=True,
        )
        embed.add_field(
            name="🎮 Off Economy Effects" if new_status else "🎮 Back to Regular Economy",
            value=OFF_ECONOMY_EFFECTS if new_status else ON_ECONOMY_EFFECTS,
            inline=False,
        )
        set_footer(
            embed,
            text="🔴 This user will now compete in Off Economy leaderboards" if new_status
            else "🟢 This user will now compete in regular economy leaderboards",
        )
        await safe_respond(interaction, embed=embed, ephemeral=False)
        self._touch_shift(interaction.user.id)

    # =========================================================================
    # /editmoney
    # =========================================================================

    @app_commands.command(name="editmoney", description="Add or remove money from a user's account (Developer only)")
    @app_commands.describe(
        user="User to edit money for",
        amount="Amount to add/remove (use - for remove, supports K/M/B/T/Q suffixes)",
        account="Which account to modify",
        reason="Reason for the transaction",
    )
    async def editmoney(
        self,
        interaction: discord.Interaction,
        user: discord.User,
        amount: str,
        account: Literal["wallet", "bank"],
        reason: Optional[str] = None,
    ) -> None:
        if not await check_developer_permission(
            interaction, "This command is restricted to developers only."
        ):
            return

        value = parse_signed_amount(amount)
        if value is None:
            await safe_respond(
                interaction,
                embed=build_error_embed(
                    "❌ Invalid Amount",
                    "Invalid amount format. Use numbers with optional K/M/B/T/Q suffixes.",
                ),
            )
            return

        reason = reason or "Admin adjustment"
        await safe_defer(interaction, ephemeral=False)
        try:
            before, after = self.db.adjust_balance(user.id, interaction.guild_id, value, account)
        except Exception as e:
            logger.error("Edit Money Failed", [
                ("Target", f"{user.name} ({user.id})"),
                ("Error Type", type(e).__name__),
                ("Error", str(e)[:100]),
            ])
            embed = build_error_embed(
                "🔴 SYSTEM ERROR",
                "An unexpected error occurred while processing the transaction.",
            )
            embed.add_field(name="❌ Error Details", value=f"```{str(e)[:1000]}```", inline=False)
            await safe_respond(interaction, embed=embed, ephemeral=False)
            return

        verb, direction = ("added", "to") if value >= 0 else ("removed", "from")
        embed = discord.Embed(
            title="💰 Admin Money Transaction",
            description=(
                f"Successfully {verb} {format_money_full(abs(value))} {direction} "
                f"{user.display_name}'s {account}."
            ),
            color=0x2ECC71,
            timestamp=datetime.now(timezone.utc),
        )
        embed.add_field(name="👤 User", value=user.display_name, inline=True)
        embed.add_field(name="💳 Account", value=account.capitalize(), inline=True)
        embed.add_field(name="💵 Change", value=f"{'+' if value >= 0 else ''}{format_money_full(value)}", inline=True)
        embed.add_field(
            name="💰 Previous Balance",
            value=f"Wallet: {format_money_full(before['wallet'])}\nBank: {format_money_full(before['bank'])}",
            inline=True,
        )
        embed.add_field(
            name="💰 New Balance",
            value=f"Wallet: {format_money_full(after['wallet'])}\nBank: {format_money_full(after['bank'])}",
            inline=True,
        )
        embed.add_field(name="📝 Reason", value=reason[:1024], inline=True)
        set_footer(
            embed,
            text=f"Admin Transaction • Added by {interaction.user.display_name}",
            avatar_url=interaction.user.display_avatar.url,
        )
        await safe_respond(interaction, embed=embed, ephemeral=False)

        self.db.log_moderation_action(
            interaction.guild_id, interaction.user.id, "editmoney", user.id,
            f"{value:+,} {account}: {reason}",
        )

    # =========================================================================
    # /give
    # =========================================================================

    @app_commands.command(name="give", description="Give coins to a user (Admin/Dev only)")
    @app_commands.describe(
        user="The user to give coins to",
        amount="Amount of coins to give",
        reason="Reason for giving coins",
    )
    async def give(
        self,
        interaction: discord.Interaction,
        user: discord.User,
        amount: app_commands.Range[int, 1],
        reason: Optional[str] = None,
    ) -> None:
        if not await check_admin_permission(
            interaction, "This command is restricted to administrators only."
        ):
            return

        max_give = GIVE_MAX_DEVELOPER if is_developer(interaction.user.id) else GIVE_MAX_ADMIN
        if amount > max_give:
            await safe_respond(
                interaction,
                embed=build_error_embed("❌ Amount Too High", f"Maximum amount you can give is ${max_give:,}."),
            )
            return

        reason = reason or "Admin gift"
        await safe_defer(interaction, ephemeral=False)
        try:
            before, after = self.db.adjust_balance(user.id, interaction.guild_id, amount, "wallet")
        except Exception as e:
            logger.error("Give Failed", [
                ("Target", f"{user.name} ({user.id})"),
                ("Error Type", type(e).__name__),
                ("Error", str(e)[:100]),
            ])
            await safe_respond(
                interaction,
                embed=build_error_embed("❌ Transaction Failed", "Failed to give coins. Please try again."),
                ephemeral=False,
            )
            return

        logger.tree("Coins Given", [
            ("By", f"{interaction.user.name} ({interaction.user.id})"),
            ("To", f"{user.name} ({user.id})"),
            ("Amount", f"${amount:,}"),
            ("Reason", reason[:50]),
        ], emoji="💰")

        embed = discord.Embed(
            title="💰 Coins Given",
            description=f"Successfully gave **${amount:,}** to {user.mention}",
            color=EmbedColors.SUCCESS,
            timestamp=datetime.now(timezone.utc),
        )
        embed.set_thumbnail(url=user.display_avatar.url)
        embed.add_field(name="Recipient", value=f"{user.mention} ({user.id})", inline=False)
        embed.add_field(name="Amount", value=f"${amount:,}", inline=True)
        embed.add_field(name="Reason", value=reason[:1024], inline=True)
        embed.add_field(name="Previous Balance", value=f"${before['wallet']:,}", inline=True)
        embed.add_field(name="New Balance", value=f"${after['wallet']:,}", inline=True)
        embed.add_field(name="Given by", value=interaction.user.mention, inline=True)
        set_footer(embed)
        await safe_respond(interaction, embed=embed, ephemeral=False)

        await gather_with_logging(
            ("Give DM", self._dm_recipient(user, interaction.guild, amount, reason, after["wallet"])),
            context="Give",
        )
        self._touch_shift(interaction.user.id)

    async def _dm_recipient(
        self,
        user: discord.abc.User,
        guild: Optional[discord.Guild],
        amount: int,
        reason: str,
        new_wallet: int,
    ) -> None:
        embed = discord.Embed(
            title="💰 You Received Coins!",
            description=(
                f"You received **${amount:,}** from an administrator in "
                f"**{guild.name if guild else 'the server'}**"
            ),
            color=EmbedColors.SUCCESS,
            timestamp=datetime.now(timezone.utc),
        )
        embed.add_field(name="Amount", value=f"${amount:,}", inline=True)
        embed.add_field(name="Reason", value=reason[:1024], inline=True)
        embed.add_field(name="Your New Balance", value=f"${new_wallet:,}", inline=True)
        set_footer(embed)
        try:
            await user.send(embed=embed)
        except (discord.Forbidden, discord.HTTPException):
            logger.warning("Give DM Failed", [
                ("User", f"{user.name} ({user.id})"),
            ])


__all__ = ["EconomyCog", "resolve_off_economy"]
