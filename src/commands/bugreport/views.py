"""
UAS Bot - Bug Report Components
===============================

Bug report embed, persistent Details/Discuss buttons and the
developer-only status select.

Custom IDs:
    bugreport:<action>:<report id>     details | discuss
    bugreport_status:<report id>
"""

import re
from datetime import datetime, timezone
from typing import Optional

import discord

from src.core.logger import logger
from src.core.config import is_developer
from src.core.database import get_db, BugReportRecord
from src.utils.async_utils import gather_with_logging
from src.utils.channels import fetch_message, resolve_channel
from src.utils.footer import set_footer


PRIORITY_INFO = {
    "low": ("🟢", "Low", 0x00FF00),
    "medium": ("🟡", "Medium", 0xFFFF00),
    "high": ("🟠", "High", 0xFF8C00),
    "critical": ("🔴", "Critical", 0xFF0000),
}

STATUS_INFO = {
    "pending": ("⏳", "Pending", "\u001b[31m", "Awaiting review"),
    "investigating": ("🔍", "Investigating", "\u001b[33m", "Looking into the issue"),
    "in_progress": ("⚙️", "In Progress", "\u001b[34m", "Working on fix"),
    "resolved": ("✅", "Resolved", "\u001b[32m", "Issue has been fixed"),
    "closed": ("🔒", "Closed", "\u001b[37m", "Report closed without fix"),
    "duplicate": ("📋", "Duplicate", "\u001b[35m", "Duplicate of existing report"),
}

_REPORT_ID = r"BUG-[0-9A-Z]+"


def build_report_embed(record: BugReportRecord, avatar_url: Optional[str] = None) -> discord.Embed:
    """Public bug report embed; colored by priority."""
    p_emoji, p_name, p_color = PRIORITY_INFO.get(record["priority"], PRIORITY_INFO["medium"])
    _, s_label, s_ansi, _ = STATUS_INFO.get(record["status"], STATUS_INFO["pending"])

    embed = discord.Embed(
        title="🐛 Bug Report",
        color=p_color,
        timestamp=datetime.now(timezone.utc),
    )
    embed.add_field(name="Bug Report:", value=record["title"], inline=False)
    embed.add_field(name="Description", value=record["description"][:1024], inline=False)
    if record.get("steps"):
        embed.add_field(name="🔍 Steps to Reproduce", value=record["steps"][:1024], inline=False)
    embed.add_field(name="⚡ Priority", value=f"{p_emoji} **{p_name}**", inline=True)
    embed.add_field(name="⏳ Status", value=f"```ansi\n{s_ansi}{s_label}\u001b[0m\n```", inline=True)
    embed.add_field(name="📅 Reported", value=f"<t:{int(record['created_at'])}:D>", inline=True)
    set_footer(
        embed,
        text=f"Reported by {record.get('username')} | ID: {record['report_id']}",
        avatar_url=avatar_url,
    )
    return embed


def build_details_embed(record: BugReportRecord) -> discord.Embed:
    embed = discord.Embed(
        title=f"🔧 ADMIN ACTIONS - Bug Report {record['report_id']}",
        color=0x3498DB,
        timestamp=datetime.now(timezone.utc),
    )
    description = record["description"]
    if len(description) > 1024:
        description = description[:1021] + "..."
    embed.add_field(name="🐛 Title", value=record["title"], inline=False)
    embed.add_field(name="📝 Description", value=description, inline=False)
    embed.add_field(name="👤 Reporter", value=f"<@{record['user_id']}> ({record.get('username')})", inline=True)
    embed.add_field(name="⚡ Priority", value=record["priority"].capitalize(), inline=True)
    embed.add_field(name="📅 Reported", value=f"<t:{int(record['created_at'])}:F>", inline=False)
    embed.add_field(name="🆔 Report ID", value=record["report_id"], inline=True)
    embed.add_field(
        name="🏷️ Current Status",
        value=STATUS_INFO.get(record["status"], STATUS_INFO["pending"])[1],
        inline=True,
    )
    set_footer(embed)
    return embed


# =============================================================================
# Components
# =============================================================================

class BugReportButton(
    discord.ui.DynamicItem[discord.ui.Button],
    template=rf"bugreport:(?P<action>details|discuss):(?P<id>{_REPORT_ID})",
):
    """Admin Details or Discuss button under a bug report."""

    def __init__(self, action: str, report_id: str) -> None:
        if action == "details":
            button = discord.ui.Button(
                label="Admin Details",
                emoji="🔧",
                style=discord.ButtonStyle.primary,
                custom_id=f"bugreport:details:{report_id}",
            )
        else:
            button = discord.ui.Button(
                label="Discuss",
                emoji="💬",
                style=discord.ButtonStyle.secondary,
                custom_id=f"bugreport:discuss:{report_id}",
            )
        super().__init__(button)
        self.action = action
        self.report_id = report_id

    @classmethod
    async def from_custom_id(
        cls,
        interaction: discord.Interaction,
        item: discord.ui.Button,
        match: re.Match[str],
    ) -> "BugReportButton":
        return cls(match.group("action"), match.group("id"))

    async def callback(self, interaction: discord.Interaction) -> None:
        record = get_db().get_bug_report(self.report_id)
        if record is None:
            await interaction.response.send_message("❌ Bug report not found.", ephemeral=True)
            return

        if self.action == "discuss":
            if not record.get("thread_id"):
                await interaction.response.send_message("❌ Discussion thread not found.", ephemeral=True)
                return
            await interaction.response.send_message(
                f"💬 Join the discussion for **{record['title']}** in <#{record['thread_id']}>",
                ephemeral=True,
            )
            return

        if not is_developer(interaction.user.id):
            await interaction.response.send_message(
                "❌ Only developers can access bug report details.",
                ephemeral=True,
            )
            return

        view = discord.ui.View(timeout=None)
        view.add_item(BugReportStatusSelect(self.report_id))
        await interaction.response.send_message(
            embed=build_details_embed(record),
            view=view,
            ephemeral=True,
        )


def build_report_view(report_id: str) -> discord.ui.View:
    view = discord.ui.View(timeout=None)
    view.add_item(BugReportButton("details", report_id))
    view.add_item(BugReportButton("discuss", report_id))
    return view


class BugReportStatusSelect(
    discord.ui.DynamicItem[discord.ui.Select],
    template=rf"bugreport_status:(?P<id>{_REPORT_ID})",
):
    """Developer status picker."""

    def __init__(self, report_id: str) -> None:
        options = [
            discord.SelectOption(label=label, value=value, description=desc, emoji=emoji)
            for value, (emoji, label, _, desc) in STATUS_INFO.items()
        ]
        super().__init__(
            discord.ui.Select(
                placeholder="Update bug report status...",
                options=options,
                custom_id=f"bugreport_status:{report_id}",
            )
        )
        self.report_id = report_id

    @classmethod
    async def from_custom_id(
        cls,
        interaction: discord.Interaction,
        item: discord.ui.Select,
        match: re.Match[str],
    ) -> "BugReportStatusSelect":
        return cls(match.group("id"))

    async def callback(self, interaction: discord.Interaction) -> None:
        await handle_status_update(interaction, self.report_id, self.item.values[0])


# =============================================================================
# Status Update
# =============================================================================

async def handle_status_update(interaction: discord.Interaction, report_id: str, new_status: str) -> None:
    if not is_developer(interaction.user.id):
        await interaction.response.send_message(
            "❌ Only developers can update bug report status.",
            ephemeral=True,
        )
        return

    db = get_db()
    if db.get_bug_report(report_id) is None:
        await interaction.response.send_message("❌ Bug report not found.", ephemeral=True)
        return

    await interaction.response.defer(ephemeral=True)
    db.update_bug_report_status(report_id, new_status, interaction.user.id)
    record = db.get_bug_report(report_id)

    await gather_with_logging(
        ("Update Bug Report Embed", _refresh_public_message(interaction.client, record)),
        ("Update Bug Report Thread", _update_thread(interaction, record, new_status)),
        context="Bug Report Status",
    )

    await interaction.followup.send(
        f"✅ Bug report status updated to **{new_status.replace('_', ' ')}**",
        ephemeral=True,
    )
    logger.info("Bug Report Status Changed", [
        ("ID", report_id),
        ("Status", new_status),
        ("By", f"{interaction.user.name} ({interaction.user.id})"),
    ])


async def _refresh_public_message(client: discord.Client, record: BugReportRecord) -> None:
    message = await fetch_message(client, record.get("channel_id"), record.get("message_id"))
    if message is None:
        return
    avatar = message.embeds[0].footer.icon_url if message.embeds else None
    await message.edit(embed=build_report_embed(record, avatar_url=avatar))


async def _update_thread(interaction: discord.Interaction, record: BugReportRecord, new_status: str) -> None:
    thread = await resolve_channel(interaction.client, record.get("thread_id"))
    if not isinstance(thread, discord.Thread):
        return

    emoji = STATUS_INFO.get(new_status, STATUS_INFO["pending"])[0]
    await thread.edit(name=f"{emoji} {record['title']}"[:100])
    await thread.send(
        f"🔧 **Status Updated:** {new_status.replace('_', ' ').upper()} by {interaction.user.name}",
        allowed_mentions=discord.AllowedMentions.none(),
    )


__all__ = [
    "PRIORITY_INFO",
    "STATUS_INFO",
    "BugReportButton",
    "BugReportStatusSelect",
    "build_report_embed",
    "build_details_embed",
    "build_report_view",
    "handle_status_update",
]
