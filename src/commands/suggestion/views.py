"""
UAS Bot - Suggestion Components
===============================

Suggestion embed plus the persistent buttons and status select.

DESIGN:
    Custom IDs carry the suggestion ID so the DynamicItem templates can
    route clicks after a restart without any in-memory view state:
        suggestion:<action>:<id>     upvote | downvote | discuss | details
        suggestion_status:<id>       admin status select
"""

import re
from datetime import datetime, timezone
from typing import Optional

import discord

from src.core.logger import logger
from src.core.config import EmbedColors, is_admin
from src.core.database import get_db, SuggestionRecord
from src.utils.async_utils import gather_with_logging
from src.utils.channels import fetch_message, resolve_channel
from src.utils.footer import set_footer


# =============================================================================
# Status Display
# =============================================================================

STATUS_INFO = {
    "pending": ("⏳", "Pending", "\u001b[33m", 0xFFFF00, "Waiting for review"),
    "in_review": ("🔍", "In Review", "\u001b[34m", 0x0099FF, "Currently being reviewed"),
    "approved": ("✅", "Approved", "\u001b[32m", 0x00FF00, "Approved for implementation"),
    "rejected": ("❌", "Rejected", "\u001b[31m", 0xFF0000, "Rejected - will not implement"),
    "implemented": ("🎉", "Implemented", "\u001b[32m", 0x00FF00, "Successfully implemented"),
}

NEW_SUGGESTION_COLOR = 0xFF8C00


def status_block(status: str) -> str:
    """ANSI code block showing a colored status word."""
    _, label, ansi, _, _ = STATUS_INFO.get(status, STATUS_INFO["pending"])
    return f"```ansi\n{ansi}{label}\u001b[0m\n```"


def build_suggestion_embed(record: SuggestionRecord, avatar_url: Optional[str] = None) -> discord.Embed:
    """Public suggestion embed for the suggestions channel."""
    status = record.get("status") or "pending"
    color = NEW_SUGGESTION_COLOR if status == "pending" else STATUS_INFO.get(status, STATUS_INFO["pending"])[3]

    embed = discord.Embed(
        title="📋 New Suggestion",
        color=color,
        timestamp=datetime.now(timezone.utc),
    )
    embed.add_field(name="Suggestion:", value=record["title"], inline=False)
    embed.add_field(name="Details", value=record["description"][:1024], inline=False)
    embed.add_field(name="⏳ Status", value=status_block(status), inline=True)
    embed.add_field(name="📅 Submitted", value=f"<t:{int(record['created_at'])}:D>", inline=True)
    embed.add_field(
        name="📊 Votes",
        value=f"👍 {record.get('upvotes', 0)} | 👎 {record.get('downvotes', 0)}",
        inline=True,
    )
    set_footer(
        embed,
        text=f"Suggested by {record.get('username')} | ID: {record['suggestion_id']}",
        avatar_url=avatar_url,
    )
    return embed


def build_details_embed(record: SuggestionRecord) -> discord.Embed:
    """Admin-only detail view of a suggestion."""
    embed = discord.Embed(
        title="🔧 ADMIN ACTIONS - Suggestion",
        color=EmbedColors.INFO,
        timestamp=datetime.now(timezone.utc),
    )
    embed.add_field(name="📋 Title", value=record["title"], inline=False)
    embed.add_field(name="📝 Description", value=(record.get("description") or "No description")[:1024], inline=False)
    embed.add_field(
        name="👤 Submitted by",
        value=f"<@{record['user_id']}> ({record.get('username')})",
        inline=True,
    )
    embed.add_field(
        name="📊 Votes",
        value=f"👍 {record.get('upvotes', 0)} | 👎 {record.get('downvotes', 0)}",
        inline=True,
    )
    embed.add_field(name="📅 Submitted", value=f"<t:{int(record['created_at'])}:F>", inline=False)
    embed.add_field(name="🆔 Suggestion ID", value=record["suggestion_id"], inline=True)
    embed.add_field(
        name="🏷️ Current Status",
        value=STATUS_INFO.get(record["status"], STATUS_INFO["pending"])[1],
        inline=True,
    )
    if record.get("admin_notes"):
        embed.add_field(name="📝 Admin Notes", value=record["admin_notes"][:1024], inline=False)
    set_footer(embed)
    return embed


# =============================================================================
# Buttons
# =============================================================================

_BUTTON_STYLES = {
    "upvote": ("Upvote", "✅", discord.ButtonStyle.success),
    "downvote": ("Downvote", "👎", discord.ButtonStyle.danger),
    "discuss": ("Discuss", "💬", discord.ButtonStyle.secondary),
    "details": ("Details", "📄", discord.ButtonStyle.primary),
}


class SuggestionButton(
    discord.ui.DynamicItem[discord.ui.Button],
    template=r"suggestion:(?P<action>upvote|downvote|discuss|details):(?P<id>\d+)",
):
    """One of the four buttons under a suggestion."""

    def __init__(self, action: str, suggestion_id: str, count: Optional[int] = None) -> None:
        label, emoji, style = _BUTTON_STYLES[action]
        if count is not None:
            label = f"{label} ({count})"
        super().__init__(
            discord.ui.Button(
                label=label,
                emoji=emoji,
                style=style,
                custom_id=f"suggestion:{action}:{suggestion_id}",
            )
        )
        self.action = action
        self.suggestion_id = suggestion_id

    @classmethod
    async def from_custom_id(
        cls,
        interaction: discord.Interaction,
        item: discord.ui.Button,
        match: re.Match[str],
    ) -> "SuggestionButton":
        return cls(match.group("action"), match.group("id"))

    async def callback(self, interaction: discord.Interaction) -> None:
        if self.action in ("upvote", "downvote"):
            await handle_vote(interaction, self.suggestion_id, self.action)
        elif self.action == "discuss":
            await handle_discuss(interaction, self.suggestion_id)
        else:
            await handle_details(interaction, self.suggestion_id)


def build_suggestion_view(suggestion_id: str, upvotes: int = 0, downvotes: int = 0) -> discord.ui.View:
    view = discord.ui.View(timeout=None)
    view.add_item(SuggestionButton("upvote", suggestion_id, upvotes))
    view.add_item(SuggestionButton("downvote", suggestion_id, downvotes))
    view.add_item(SuggestionButton("discuss", suggestion_id))
    view.add_item(SuggestionButton("details", suggestion_id))
    return view


# =============================================================================
# Status Select
# =============================================================================

class SuggestionStatusSelect(
    discord.ui.DynamicItem[discord.ui.Select],
    template=r"suggestion_status:(?P<id>\d+)",
):
    """Admin status picker shown in the details reply."""

    def __init__(self, suggestion_id: str) -> None:
        options = [
            discord.SelectOption(label=label, value=value, description=desc, emoji=emoji)
            for value, (emoji, label, _, _, desc) in STATUS_INFO.items()
        ]
        super().__init__(
            discord.ui.Select(
                placeholder="Update suggestion status...",
                options=options,
                custom_id=f"suggestion_status:{suggestion_id}",
            )
        )
        self.suggestion_id = suggestion_id

    @classmethod
    async def from_custom_id(
        cls,
        interaction: discord.Interaction,
        item: discord.ui.Select,
        match: re.Match[str],
    ) -> "SuggestionStatusSelect":
        return cls(match.group("id"))

    async def callback(self, interaction: discord.Interaction) -> None:
        await handle_status_update(interaction, self.suggestion_id, self.item.values[0])


# =============================================================================
# Handlers
# =============================================================================

async def handle_vote(interaction: discord.Interaction, suggestion_id: str, vote_type: str) -> None:
    """Record a vote and refresh the suggestion message."""
    db = get_db()
    if db.get_suggestion(suggestion_id) is None:
        await interaction.response.send_message("❌ Suggestion not found.", ephemeral=True)
        return

    await interaction.response.defer(ephemeral=True)
    try:
        outcome, upvotes, downvotes = db.record_suggestion_vote(suggestion_id, interaction.user.id, vote_type)
    except Exception as e:
        logger.error("Suggestion Vote Failed", [
            ("ID", suggestion_id),
            ("User", f"{interaction.user.name} ({interaction.user.id})"),
            ("Error Type", type(e).__name__),
            ("Error", str(e)[:100]),
        ])
        await interaction.followup.send("❌ Failed to record your vote. Please try again.", ephemeral=True)
        return

    if outcome == "duplicate":
        await interaction.followup.send(f"❌ You have already {vote_type}d this suggestion.", ephemeral=True)
        return

    record = db.get_suggestion(suggestion_id)
    if interaction.message is not None:
        try:
            avatar = interaction.message.embeds[0].footer.icon_url if interaction.message.embeds else None
            await interaction.message.edit(
                embed=build_suggestion_embed(record, avatar_url=avatar),
                view=build_suggestion_view(suggestion_id, upvotes, downvotes),
            )
        except discord.HTTPException as e:
            logger.warning("Suggestion Message Update Failed", [
                ("ID", suggestion_id),
                ("Error", str(e)[:100]),
            ])

    await interaction.followup.send(f"✅ Your {vote_type} has been recorded!", ephemeral=True)
    logger.info("Suggestion Vote Recorded", [
        ("ID", suggestion_id),
        ("User", f"{interaction.user.name} ({interaction.user.id})"),
        ("Vote", vote_type),
        ("Outcome", outcome),
    ])


async def handle_discuss(interaction: discord.Interaction, suggestion_id: str) -> None:
    record = get_db().get_suggestion(suggestion_id)
    if record is None:
        await interaction.response.send_message("❌ Suggestion not found.", ephemeral=True)
        return
    if not record.get("thread_id"):
        await interaction.response.send_message("❌ Discussion thread not found.", ephemeral=True)
        return
    await interaction.response.send_message(
        f"💬 Join the discussion for **{record['title']}** in <#{record['thread_id']}>",
        ephemeral=True,
    )


async def handle_details(interaction: discord.Interaction, suggestion_id: str) -> None:
    if not is_admin(interaction.user):
        await interaction.response.send_message(
            "❌ Only administrators can access suggestion details.",
            ephemeral=True,
        )
        return

    record = get_db().get_suggestion(suggestion_id)
    if record is None:
        await interaction.response.send_message("❌ Suggestion not found.", ephemeral=True)
        return

    view = discord.ui.View(timeout=None)
    view.add_item(SuggestionStatusSelect(suggestion_id))
    await interaction.response.send_message(
        embed=build_details_embed(record),
        view=view,
        ephemeral=True,
    )


async def handle_status_update(interaction: discord.Interaction, suggestion_id: str, new_status: str) -> None:
    """Apply an admin status change to the row, the public embed and the thread."""
    if not is_admin(interaction.user):
        await interaction.response.send_message(
            "❌ Only administrators can update suggestion status.",
            ephemeral=True,
        )
        return

    db = get_db()
    if db.get_suggestion(suggestion_id) is None:
        await interaction.response.send_message("❌ Suggestion not found.", ephemeral=True)
        return

    await interaction.response.defer(ephemeral=True)
    db.update_suggestion_status(suggestion_id, new_status, interaction.user.id)
    record = db.get_suggestion(suggestion_id)

    await gather_with_logging(
        ("Update Suggestion Embed", _refresh_public_message(interaction.client, record)),
        ("Notify Suggestion Thread", _notify_thread(interaction, record, new_status)),
        context="Suggestion Status",
    )

    await interaction.followup.send(
        f"✅ Suggestion status updated to **{new_status.replace('_', ' ')}**",
        ephemeral=True,
    )


async def _refresh_public_message(client: discord.Client, record: SuggestionRecord) -> None:
    message = await fetch_message(client, record.get("channel_id"), record.get("message_id"))
    if message is None:
        return
    avatar = message.embeds[0].footer.icon_url if message.embeds else None
    await message.edit(embed=build_suggestion_embed(record, avatar_url=avatar))


async def _notify_thread(interaction: discord.Interaction, record: SuggestionRecord, new_status: str) -> None:
    thread = await resolve_channel(interaction.client, record.get("thread_id"))
    if thread is None:
        return

    emoji, _, _, color, _ = STATUS_INFO.get(new_status, STATUS_INFO["pending"])
    embed = discord.Embed(
        title=f"{emoji} Status Updated",
        description=f"This suggestion has been marked as **{new_status.replace('_', ' ').upper()}**",
        color=color,
        timestamp=datetime.now(timezone.utc),
    )
    embed.add_field(name="👤 Updated by", value=interaction.user.mention, inline=True)
    embed.add_field(name="🕒 Updated at", value=f"<t:{int(datetime.now(timezone.utc).timestamp())}:F>", inline=True)
    await thread.send(embed=embed)


__all__ = [
    "STATUS_INFO",
    "SuggestionButton",
    "SuggestionStatusSelect",
    "build_suggestion_embed",
    "build_details_embed",
    "build_suggestion_view",
    "handle_vote",
    "handle_status_update",
]
