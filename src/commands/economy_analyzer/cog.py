"""
UAS Bot - Economy Analyzer Cog
==============================

/economyanalyzer status|analyze (admin only).
"""

from datetime import datetime, timezone
from typing import TYPE_CHECKING, Optional

import discord
from discord import app_commands
from discord.ext import commands

from src.core.logger import logger
from src.core.config import EmbedColors, check_admin_permission
from src.services.economy_analyzer import BUCKETS, HEALTH_EMOJIS, EconomyAnalysis
from src.utils.footer import set_footer
from src.utils.interaction import safe_defer, safe_respond
from src.utils.money import format_money

if TYPE_CHECKING:
    from src.bot import UASBot


HEALTH_COLORS = {
    "EXCELLENT": EmbedColors.GREEN,
    "GOOD": EmbedColors.GREEN,
    "FAIR": 0xFFFF00,
    "POOR": EmbedColors.ORANGE,
    "CRITICAL": EmbedColors.RED,
}

RECOMMENDATION_EMOJIS = {"CRITICAL": "🚨", "WARNING": "⚠️"}


def build_analysis_embed(analysis: EconomyAnalysis) -> discord.Embed:
    """Full analysis report."""
    emoji = HEALTH_EMOJIS.get(analysis.health, "⚪")
    embed = discord.Embed(
        title="📊 Economy Analysis Complete",
        color=HEALTH_COLORS.get(analysis.health, EmbedColors.GRAY),
        timestamp=datetime.fromtimestamp(analysis.timestamp, tz=timezone.utc),
    )
    embed.add_field(
        name="🏥 Health",
        value=f"{emoji} **{analysis.health}** ({analysis.health_score}/100)",
        inline=True,
    )
    embed.add_field(name="👥 Users", value=str(analysis.total_users), inline=True)
    embed.add_field(name="📐 Gini", value=f"{analysis.gini:.3f}", inline=True)
    embed.add_field(
        name="💰 Wealth",
        value=(
            f"**Total:** {format_money(analysis.total_wealth)}\n"
            f"**Average:** {format_money(analysis.average_balance)}\n"
            f"**Median:** {format_money(analysis.median_balance)}"
        ),
        inline=False,
    )

    lines = []
    for bucket in BUCKETS:
        share = analysis.distribution.get(bucket)
        if share is None:
            continue
        lines.append(f"**{bucket.title()}:** {share.count} ({share.percentage:.1f}%)")
    embed.add_field(name="📈 Distribution", value="\n".join(lines) or "No data", inline=False)

    if analysis.recommendations:
        text = "\n".join(
            f"{RECOMMENDATION_EMOJIS.get(r.type, '•')} **{r.action}**: {r.message}"
            for r in analysis.recommendations[:5]
        )
        embed.add_field(
            name=f"💡 Recommendations ({len(analysis.recommendations)})",
            value=text[:1024],
            inline=False,
        )

    set_footer(embed, text="Economy Analyzer")
    return embed


class EconomyAnalyzerCog(commands.Cog):
    """Economy health reports."""

    economyanalyzer = app_commands.Group(
        name="economyanalyzer",
        description="Economy analysis and health reports",
    )

    def __init__(self, bot: "UASBot") -> None:
        self.bot = bot

    @property
    def analyzer(self):
        return self.bot.economy_analyzer

    @economyanalyzer.command(name="status", description="Show the last economy analysis")
    async def analyzer_status(self, interaction: discord.Interaction) -> None:
        if not await check_admin_permission(interaction):
            return

        cached: Optional[EconomyAnalysis] = self.analyzer.get_cached(interaction.guild_id)
        embed = discord.Embed(
            title="📊 Economy Analyzer Status",
            color=EmbedColors.GREEN if cached else EmbedColors.GRAY,
            timestamp=datetime.now(timezone.utc),
        )
        if cached is None:
            embed.description = "No analysis has been run yet. Use `/economyanalyzer analyze`."
        else:
            embed.add_field(
                name="🏥 Health",
                value=f"{HEALTH_EMOJIS.get(cached.health, '⚪')} {cached.health} ({cached.health_score}/100)",
                inline=True,
            )
            embed.add_field(name="⏰ Last Run", value=f"<t:{int(cached.timestamp)}:R>", inline=True)
            embed.add_field(name="🚨 Critical Issues", value=str(cached.critical_count), inline=True)
        set_footer(embed, text="Economy Analyzer")
        await safe_respond(interaction, embed=embed)

    @economyanalyzer.command(name="analyze", description="Run an economy analysis now")
    async def analyzer_analyze(self, interaction: discord.Interaction) -> None:
        if not await check_admin_permission(interaction):
            return

        await safe_defer(interaction)
        try:
            analysis = self.analyzer.analyze(interaction.guild_id, use_cache=False)
        except Exception as e:
            logger.error("Economy Analysis Failed", [
                ("Guild ID", str(interaction.guild_id)),
                ("Error Type", type(e).__name__),
                ("Error", str(e)[:100]),
            ])
            await safe_respond(interaction, "❌ Economy analysis failed. Check the logs for details.")
            return

        await safe_respond(interaction, embed=build_analysis_embed(analysis))


__all__ = ["EconomyAnalyzerCog", "build_analysis_embed"]
