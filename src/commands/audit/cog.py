"""
UAS Bot - Audit Cog
===================

/audit status|enable|disable|channel|test (admin only).
"""

from datetime import datetime, timezone
from typing import TYPE_CHECKING, Optional

import discord
from discord import app_commands
from discord.ext import commands

from src.core.logger import logger
from src.core.config import EmbedColors, check_admin_permission
from src.utils.footer import set_footer
from src.utils.interaction import safe_respond

if TYPE_CHECKING:
    from src.bot import UASBot


TRACKED_EVENTS = (
    "• Message edit/delete\n"
    "• Member join/leave\n"
    "• Role changes\n"
    "• Channel create/delete\n"
    "• Voice joins/leaves/moves\n"
    "• Bans/unbans\n"
    "• Moderation actions\n"
    "• Command executions"
)


def _embed(title: str, color: int, description: Optional[str] = None) -> discord.Embed:
    embed = discord.Embed(
        title=title,
        description=description,
        color=color,
        timestamp=datetime.now(timezone.utc),
    )
    set_footer(embed)
    return embed


class AuditCog(commands.Cog):
    """Audit log settings."""

    audit = app_commands.Group(name="audit", description="Manage audit logging system")

    def __init__(self, bot: "UASBot") -> None:
        self.bot = bot

    @property
    def audit_logger(self):
        return self.bot.audit_logger

    @audit.command(name="status", description="View audit logging status and statistics")
    async def audit_status(self, interaction: discord.Interaction) -> None:
        if not await check_admin_permission(interaction):
            return

        settings = self.audit_logger.get_settings(interaction.guild_id)
        enabled = bool(settings.get("enabled"))
        channel_id = settings.get("channel_id")

        embed = _embed("📋 Audit Logging Status", EmbedColors.GREEN if enabled else EmbedColors.RED)
        embed.add_field(
            name="System Status",
            value=(
                f"**Enabled:** {'✅ Yes' if enabled else '❌ No'}\n"
                f"**Queue Size:** {self.audit_logger.get_queue_size()} events\n"
                f"**Sent:** {self.audit_logger.sent_count} | **Dropped:** {self.audit_logger.dropped_count}"
            ),
            inline=True,
        )
        embed.add_field(
            name="Audit Channel",
            value=f"<#{channel_id}>" if channel_id else "❌ Not set",
            inline=True,
        )
        embed.add_field(name="Tracked Events", value=TRACKED_EVENTS, inline=False)
        await safe_respond(interaction, embed=embed)

    @audit.command(name="enable", description="Enable audit logging")
    async def audit_enable(self, interaction: discord.Interaction) -> None:
        if not await check_admin_permission(interaction):
            return

        settings = self.audit_logger.enable(interaction.guild_id)
        embed = _embed(
            "✅ Audit Logging Enabled",
            EmbedColors.SUCCESS,
            "All server events will now be logged to the audit channel.",
        )
        if not settings.get("channel_id"):
            embed.add_field(
                name="⚠️ No Channel",
                value="Set one with `/audit channel` before events can be posted.",
                inline=False,
            )
        await safe_respond(interaction, embed=embed)

    @audit.command(name="disable", description="Disable audit logging")
    async def audit_disable(self, interaction: discord.Interaction) -> None:
        if not await check_admin_permission(interaction):
            return

        self.audit_logger.disable(interaction.guild_id)
        embed = _embed(
            "❌ Audit Logging Disabled",
            EmbedColors.ERROR,
            "⚠️ **WARNING:** Server events will no longer be logged to the audit channel.",
        )
        embed.add_field(name="Disabled by", value=str(interaction.user), inline=True)
        await safe_respond(interaction, embed=embed, ephemeral=False)
        logger.warning("Audit Logging Disabled", [
            ("By", f"{interaction.user.name} ({interaction.user.id})"),
            ("Guild ID", str(interaction.guild_id)),
        ])

    @audit.command(name="channel", description="Set or view the audit logging channel")
    @app_commands.describe(target="Channel to send audit logs to")
    async def audit_channel(
        self,
        interaction: discord.Interaction,
        target: Optional[discord.TextChannel] = None,
    ) -> None:
        if not await check_admin_permission(interaction):
            return

        if target is None:
            channel_id = self.audit_logger.get_settings(interaction.guild_id).get("channel_id")
            description = (
                f"Audit logs are currently sent to <#{channel_id}>" if channel_id
                else "No audit channel is configured."
            )
            await safe_respond(interaction, embed=_embed("📍 Current Audit Channel", EmbedColors.INFO, description))
            return

        me = interaction.guild.me if interaction.guild else None
        if me is not None:
            perms = target.permissions_for(me)
            if not (perms.view_channel and perms.send_messages and perms.embed_links):
                await safe_respond(
                    interaction,
                    "❌ I don't have the required permissions in that channel. "
                    "I need: `View Channel`, `Send Messages`, and `Embed Links`.",
                )
                return

        self.audit_logger.set_channel(interaction.guild_id, target.id)
        embed = _embed(
            "📍 Audit Channel Updated",
            EmbedColors.SUCCESS,
            f"Audit logs will now be sent to {target.mention}",
        )
        embed.add_field(name="Updated by", value=str(interaction.user), inline=True)
        await safe_respond(interaction, embed=embed)

        self.audit_logger.log(
            interaction.guild_id, "server", "audit_channel_changed", "🔧 Audit Channel Changed",
            f"Audit logging channel changed to {target.mention} by {interaction.user}",
            actor_id=interaction.user.id,
            thumbnail=interaction.user.display_avatar.url,
        )

    @audit.command(name="test", description="Send a test audit log message")
    async def audit_test(self, interaction: discord.Interaction) -> None:
        if not await check_admin_permission(interaction):
            return

        event = self.audit_logger.log(
            interaction.guild_id, "server", "audit_test", "🧪 Test Audit Log",
            f"This is a test audit log message initiated by {interaction.user}",
            [
                ("Test Type", "Manual Test", True),
                ("Timestamp", f"<t:{int(datetime.now(timezone.utc).timestamp())}:F>", True),
            ],
            actor_id=interaction.user.id,
            thumbnail=interaction.user.display_avatar.url,
            force=True,
        )

        if event is None:
            await safe_respond(interaction, "❌ The audit queue is full. Try again shortly.")
            return

        await safe_respond(
            interaction,
            "✅ Test audit log queued! Check the audit channel in a few seconds.",
        )


__all__ = ["AuditCog"]
