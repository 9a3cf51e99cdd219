"""
UAS Bot - Suggestion Cog
========================

/suggestion posts a voteable suggestion with a discussion thread.
"""

import time
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Optional

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

from .views import build_suggestion_embed, build_suggestion_view

if TYPE_CHECKING:
    from src.bot import UASBot


THREAD_ARCHIVE_MINUTES = 10080


def generate_suggestion_id(user_id: int, now_ms: Optional[int] = None) -> str:
    """Millisecond timestamp followed by the last four digits of the user ID."""
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return f"{now_ms}{str(user_id)[-4:]}"


class SuggestionCog(commands.Cog):
    """Community suggestions."""

    def __init__(self, bot: "UASBot") -> None:
        self.bot = bot
        self.config = get_config()
        self.db = get_db()

    @app_commands.command(name="suggestion", description="Submit a new suggestion for the server")
    @app_commands.describe(
        title="Brief title for your suggestion",
        description="Detailed description of your suggestion",
    )
    async def suggestion(
        self,
        interaction: discord.Interaction,
        title: app_commands.Range[str, 1, SUGGESTION_TITLE_MAX],
        description: app_commands.Range[str, 1, SUGGESTION_DESCRIPTION_MAX],
    ) -> None:
        await safe_defer(interaction)

        channel = await resolve_channel(self.bot, self.config.suggestions_channel_id)
        if channel is None:
            await safe_respond(interaction, "❌ Suggestions channel not found. Please contact an administrator.")
            return

        user = interaction.user
        suggestion_id = generate_suggestion_id(user.id)

        try:
            record = self.db.create_suggestion(
                suggestion_id, user.id, interaction.guild_id, user.name, title, description,
            )
            message = await channel.send(
                embed=build_suggestion_embed(record, avatar_url=user.display_avatar.url),
                view=build_suggestion_view(suggestion_id),
            )
            thread = await message.create_thread(
                name=f"💡 {title}"[:100],
                auto_archive_duration=THREAD_ARCHIVE_MINUTES,
                reason=f"Discussion thread for suggestion: {title}"[:512],
            )
            self.db.set_suggestion_message(suggestion_id, message.id, channel.id, thread.id)
            await thread.send(
                f"**Suggestion Discussion: {title}**\n\n{description}\n\n"
                "*Use this thread to discuss this suggestion. "
                "Admins can update the status using the details button.*",
                allowed_mentions=discord.AllowedMentions.none(),
            )
        except Exception as e:
            logger.error("Suggestion Creation Failed", [
                ("User", f"{user.name} ({user.id})"),
                ("ID", suggestion_id),
                ("Error Type", type(e).__name__),
                ("Error", str(e)[:100]),
            ])
            await safe_respond(interaction, "❌ Failed to create suggestion. Please try again later.")
            return

        embed = discord.Embed(
            title="✅ Suggestion Submitted!",
            description=f"Your suggestion has been posted in {channel.mention}",
            color=EmbedColors.SUCCESS,
            timestamp=datetime.now(timezone.utc),
        )
        embed.add_field(name="📋 Title", value=title, inline=False)
        embed.add_field(name="🆔 Suggestion ID", value=suggestion_id, inline=True)
        embed.add_field(name="💬 Discussion", value=f"Discussion thread created: {thread.mention}", inline=False)
        set_footer(embed)
        await safe_respond(interaction, embed=embed)

        logger.tree("Suggestion Submitted", [
            ("User", f"{user.name} ({user.id})"),
            ("Title", title[:50]),
            ("ID", suggestion_id),
        ], emoji="📋")


__all__ = ["SuggestionCog", "generate_suggestion_id"]
