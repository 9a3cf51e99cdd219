"""
UAS Bot - Shop Admin Cog
========================

/admin-shop stats|cleanup|items (admin only).
"""

from datetime import datetime, timezone
from typing import TYPE_CHECKING

import discord
from discord import app_commands
from discord.ext import commands

from src.core.logger import logger
from src.core.config import EmbedColors, check_admin_permission
from src.core.database import get_db
from src.services.shop import cleanup_expired_purchases
from src.utils.footer import set_footer
from src.utils.interaction import safe_defer, safe_respond
from src.utils.money import format_money

if TYPE_CHECKING:
    from src.bot import UASBot


SHOP_COLOR = 0x9B59B6
MAX_LISTED_ITEMS = 20


def _shop_embed(title: str, color: int = SHOP_COLOR) -> discord.Embed:
    embed = discord.Embed(title=title, color=color, timestamp=datetime.now(timezone.utc))
    set_footer(embed, text="Shop Administration")
    return embed


class ShopAdminCog(commands.Cog):
    """Shop administration."""

    admin_shop = app_commands.Group(name="admin-shop", description="Shop administration")

    def __init__(self, bot: "UASBot") -> None:
        self.bot = bot
        self.db = get_db()

    @admin_shop.command(name="stats", description="Show shop statistics")
    async def shop_stats(self, interaction: discord.Interaction) -> None:
        if not await check_admin_permission(interaction):
            return

        stats = self.db.get_shop_stats(interaction.guild_id)
        embed = _shop_embed("🛠️ Shop Statistics")
        embed.add_field(
            name="📊 Overview",
            value=(
                f"**Total Items:** {stats['total_items']}\n"
                f"**Purchases:** {stats['total_purchases']}\n"
                f"**Active Purchases:** {stats['active_purchases']}\n"
                f"**Total Revenue:** {format_money(stats['total_revenue'])}"
            ),
            inline=False,
        )

        categories = stats["categories"]
        breakdown = "\n".join(
            f"**{c['category']}:** {c['purchases']} sales, {format_money(c['revenue'])}"
            for c in categories
        )
        embed.add_field(name="💰 Revenue by Category", value=breakdown[:1024] or "No revenue data", inline=False)
        await safe_respond(interaction, embed=embed)

    @admin_shop.command(name="cleanup", description="Expire timed purchases and remove their roles")
    async def shop_cleanup(self, interaction: discord.Interaction) -> None:
        if not await check_admin_permission(interaction):
            return
        if interaction.guild is None:
            await safe_respond(interaction, "❌ This command can only be used in a server.")
            return

        await safe_defer(interaction)
        result = await cleanup_expired_purchases(interaction.guild)

        embed = _shop_embed(
            "🧹 Shop Cleanup Complete",
            EmbedColors.SUCCESS if not result.role_failures else EmbedColors.WARNING,
        )
        embed.add_field(name="Expired Purchases", value=str(result.expired), inline=True)
        embed.add_field(name="Roles Removed", value=str(result.roles_removed), inline=True)
        if result.role_failures:
            embed.add_field(name="⚠️ Role Failures", value=str(result.role_failures), inline=True)
        await safe_respond(interaction, embed=embed)

        logger.info("Shop Cleanup Run", [
            ("By", f"{interaction.user.name} ({interaction.user.id})"),
            ("Expired", str(result.expired)),
        ])

    @admin_shop.command(name="items", description="List shop items")
    async def shop_items(self, interaction: discord.Interaction) -> None:
        if not await check_admin_permission(interaction):
            return

        items = self.db.get_shop_items(include_inactive=True)
        embed = _shop_embed(f"📦 Shop Items ({len(items)})")
        if not items:
            embed.description = "The shop has no items."
        else:
            lines = []
            for item in items[:MAX_LISTED_ITEMS]:
                status = "" if item.get("active") else " *(inactive)*"
                duration = f", {item['duration_days']}d" if item.get("duration_days") else ""
                lines.append(
                    f"`#{item['id']}` **{item['name']}** [{item['category']}] "
                    f"{format_money(item['price'])}{duration}{status}"
                )
            if len(items) > MAX_LISTED_ITEMS:
                lines.append(f"...and {len(items) - MAX_LISTED_ITEMS} more")
            embed.description = "\n".join(lines)[:4096]
        await safe_respond(interaction, embed=embed)


__all__ = ["ShopAdminCog"]
