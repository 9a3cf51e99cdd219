"""
UAS Bot - Bug Report Cog
========================

/bugreport posts a report to the bug channel, opens a discussion
thread and pings the reporter.
"""

import time
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Literal, Optional

import discord
from discord import app_commands
from discord.ext import commands

from src.core.logger import logger
from src.core.config import EmbedColors, get_config
from src.core.constants import SUGGESTION_DESCRIPTION_MAX, SUGGESTION_TITLE_MAX
from src.core.database import get_db
from src.utils.channels import resolve_channel
from src.utils.footer import set_footer
from src.utils.interaction import safe_defer, safe_respond

from .views import PRIORITY_INFO, build_report_embed, build_report_view

if TYPE_CHECKING:
    from src.bot import UASBot


_BASE36 = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"


def to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def generate_report_id(now_ms: Optional[int] = None) -> str:
    """BUG- followed by the millisecond timestamp in upper-case base 36."""
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return f"BUG-{to_base36(now_ms)}"


class BugReportCog(commands.Cog):
    """Bug reports for the development team."""

    def __init__(self, bot: "UASBot") -> None:
        self.bot = bot
        self.config = get_config()
        self.db = get_db()

    @app_commands.command(name="bugreport", description="Submit a bug report to the development team")
    @app_commands.describe(
        title="Brief title describing the bug",
        description="Detailed description of the bug",
        steps="Steps to reproduce the bug",
        priority="Priority level of this bug",
    )
    async def bugreport(
        self,
        interaction: discord.Interaction,
        title: app_commands.Range[str, 1, SUGGESTION_TITLE_MAX],
        description: app_commands.Range[str, 1, SUGGESTION_DESCRIPTION_MAX],
        steps: Optional[app_commands.Range[str, 1, SUGGESTION_DESCRIPTION_MAX]] = None,
        priority: Literal["low", "medium", "high", "critical"] = "medium",
    ) -> None:
        await safe_defer(interaction)

        channel = await resolve_channel(self.bot, self.config.bug_reports_channel_id)
        if channel is None:
            await safe_respond(interaction, "❌ Bug reports channel not found. Please contact an administrator.")
            return

        user = interaction.user
        report_id = generate_report_id()

        try:
            record = self.db.create_bug_report(
                report_id, user.id, interaction.guild_id, user.name,
                title, description, steps, priority,
            )
            message = await channel.send(
                f"{user.mention} 📸 **Please provide screenshots if possible to help us reproduce this bug.**",
                embed=build_report_embed(record, avatar_url=user.display_avatar.url),
                view=build_report_view(report_id),
                allowed_mentions=discord.AllowedMentions(users=[user], roles=False, everyone=False),
            )
            thread = await message.create_thread(
                name=f"🐛 {title}"[:100],
                auto_archive_duration=10080,
                reason=f"Discussion thread for bug report: {title}"[:512],
            )
            self.db.set_bug_report_message(report_id, message.id, channel.id, thread.id)
            await thread.send(
                f"**Bug Report Discussion: {title}**\n\n{description}\n\n"
                "**📸 Screenshots/Evidence:** Please attach any screenshots, error messages, "
                "or additional details that could help developers reproduce and fix this bug.\n\n"
                "*Developers can update the status using the admin details button.*",
                allowed_mentions=discord.AllowedMentions.none(),
            )
        except Exception as e:
            logger.error("Bug Report Creation Failed", [
                ("User", f"{user.name} ({user.id})"),
                ("ID", report_id),
                ("Error Type", type(e).__name__),
                ("Error", str(e)[:100]),
            ])
            await safe_respond(interaction, "❌ Failed to create bug report. Please try again later.")
            return

        p_emoji, p_name, _ = PRIORITY_INFO[priority]
        embed = discord.Embed(
            title="✅ Bug Report Submitted!",
            description=f"Your bug report has been posted in {channel.mention} and the developers have been notified.",
            color=EmbedColors.SUCCESS,
            timestamp=datetime.now(timezone.utc),
        )
        embed.add_field(name="🐛 Title", value=title, inline=False)
        embed.add_field(name="⚡ Priority", value=f"{p_emoji} {p_name}", inline=True)
        embed.add_field(name="🆔 Report ID", value=report_id, inline=True)
        embed.add_field(name="💬 Discussion", value=f"Discussion thread created: {thread.mention}", inline=False)
        embed.add_field(
            name="📸 Next Steps",
            value="Please provide screenshots in the discussion thread if possible!",
            inline=False,
        )
        set_footer(embed)
        await safe_respond(interaction, embed=embed)

        logger.tree("Bug Report Submitted", [
            ("User", f"{user.name} ({user.id})"),
            ("Title", title[:50]),
            ("ID", report_id),
            ("Priority", priority),
        ], emoji="🐛")


__all__ = ["BugReportCog", "generate_report_id", "to_base36"]
