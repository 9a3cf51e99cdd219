"""
UAS Bot - Casino Cog
====================

/casino status|stop|release|stats|test and the admin-only
/casino-admin bulk-stop|emergency-cleanup|health-check|config.

DESIGN:
    All calls go through bot.casino_client, which never raises for
    transport failures; every result is a dict with a "success" flag
    and an "error" string, so handlers branch on the flag instead of
    catching exceptions.
"""

from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Dict, List, Optional

import discord
from discord import app_commands
from discord.ext import commands

from src.core.logger import logger
from src.core.config import (
    EmbedColors,
    check_admin_permission,
    check_developer_permission,
    deny_access,
    is_admin,
)
from src.core.constants import (
    CASINO_BULK_STOP_LIMIT,
    CASINO_EMERGENCY_CONFIRM_TEXT,
    CASINO_HIGH_LOAD_THRESHOLD,
)
from src.utils.embeds import build_error_embed
from src.utils.footer import set_casino_footer
from src.utils.interaction import safe_defer, safe_respond

if TYPE_CHECKING:
    from src.bot import UASBot


# =============================================================================
# Helpers
# =============================================================================

def parse_user_ids(raw: str) -> List[int]:
    """Comma-separated snowflakes; blanks and non-digits are dropped."""
    ids: List[int] = []
    for part in raw.split(","):
        part = part.strip().strip("<@!>")
        if part.isdigit() and int(part) not in ids:
            ids.append(int(part))
    return ids


def _casino_embed(title: str, color: int, description: Optional[str] = None) -> discord.Embed:
    return discord.Embed(
        title=title,
        description=description,
        color=color,
        timestamp=datetime.now(timezone.utc),
    )


def _casino_error(title: str, description: str) -> discord.Embed:
    embed = build_error_embed(title, description)
    return set_casino_footer(embed)


def build_cleanup_embed(
    target_name: str,
    result: Dict[str, Any],
    operation: str,
) -> discord.Embed:
    """
    Result embed shared by stop and release.

    Args:
        operation: "stop" or "release".
    """
    cleaned = int(result.get("sessionsCleaned") or 0)
    refunded = int(result.get("totalRefunded") or 0)

    if operation == "stop":
        title = f"🛑 {target_name}'s Casino Sessions Stopped"
        heading, label = "Stop Operation Complete", "Sessions Stopped"
        none_text = "No active sessions were found to stop."
        done_text = "All casino sessions have been stopped successfully."
    else:
        title = f"🧹 {target_name}'s Casino Sessions Released"
        heading, label = "Release Operation Complete", "Sessions Released"
        none_text = "No stuck sessions were found to release."
        done_text = "All stuck casino sessions have been released successfully."

    description = f"**{heading}**\n\n🧹 **{label}**: {cleaned}\n"
    if refunded > 0:
        description += f"💰 **Total Refunded**: ${refunded:,}\n"
    description += f"\n✅ {done_text if cleaned else none_text}"

    embed = _casino_embed(
        title,
        EmbedColors.GREEN if cleaned > 0 else EmbedColors.BLUE,
        description,
    )
    return set_casino_footer(embed)


def health_label(active_sessions: int) -> str:
    if active_sessions == 0:
        return "🟢 Healthy"
    if active_sessions < CASINO_HIGH_LOAD_THRESHOLD:
        return "🟡 Normal Load"
    return "🔴 High Load"


# =============================================================================
# Emergency Modal
# =============================================================================

class EmergencyCleanupModal(discord.ui.Modal, title="🚨 Emergency Casino Cleanup"):
    """Typed confirmation before wiping every casino session."""

    confirmation = discord.ui.TextInput(
        label=f"Type {CASINO_EMERGENCY_CONFIRM_TEXT} to confirm",
        placeholder=CASINO_EMERGENCY_CONFIRM_TEXT,
        max_length=len(CASINO_EMERGENCY_CONFIRM_TEXT),
        required=True,
    )
    reason = discord.ui.TextInput(
        label="Reason for emergency cleanup",
        style=discord.TextStyle.paragraph,
        placeholder="Describe why every session must be cleared...",
        max_length=500,
        required=True,
    )

    def __init__(self, cog: "CasinoCog") -> None:
        super().__init__(timeout=300)
        self.cog = cog

    async def on_submit(self, interaction: discord.Interaction) -> None:
        await self.cog.run_emergency_cleanup(
            interaction,
            confirmation=self.confirmation.value,
            reason=self.reason.value,
        )


# =============================================================================
# Cog
# =============================================================================

class CasinoCog(commands.Cog):
    """Casino session control through the casino bot's REST API."""

    casino = app_commands.Group(name="casino", description="Control ATIVE Casino Bot sessions")
    casino_admin = app_commands.Group(
        name="casino-admin",
        description="Advanced casino administration tools",
    )

    def __init__(self, bot: "UASBot") -> None:
        self.bot = bot

    @property
    def client(self):
        return self.bot.casino_client

    # =========================================================================
    # /casino status
    # =========================================================================

    @casino.command(name="status", description="Check a user's casino game sessions")
    @app_commands.describe(user="User to check (leave empty for yourself)")
    async def casino_status(
        self,
        interaction: discord.Interaction,
        user: Optional[discord.User] = None,
    ) -> None:
        target = user or interaction.user
        if target.id != interaction.user.id and not is_admin(interaction.user):
            await deny_access(
                interaction,
                "You can only check your own casino sessions. Admins can check other users.",
            )
            return

        await safe_defer(interaction, ephemeral=target.id != interaction.user.id)
        result = await self.client.get_user_sessions(target.id)

        if not result.get("success"):
            await safe_respond(
                interaction,
                embed=_casino_error("❌ Connection Error", f"Failed to get sessions: {result.get('error')}"),
            )
            return

        has_active = bool(result.get("hasActiveSessions"))
        embed = _casino_embed(
            f"🎰 {target.display_name}'s Casino Sessions",
            EmbedColors.ORANGE if has_active else EmbedColors.GREEN,
        )
        if has_active:
            info = self.client.format_session_info(result.get("sessions"))
            embed.description = f"**Active Sessions ({result.get('count') or 0}):**\n{info}"
            embed.add_field(
                name="⚠️ Session Status",
                value="User has active casino sessions. Use `/casino stop` or `/casino release` if needed.",
                inline=False,
            )
        else:
            embed.description = "✅ No active casino sessions found"
            embed.add_field(
                name="🎮 Status",
                value="User can start new casino games freely.",
                inline=False,
            )
        set_casino_footer(embed)
        await safe_respond(interaction, embed=embed)

    # =========================================================================
    # /casino stop & release
    # =========================================================================

    @casino.command(name="stop", description="Stop a user's casino game sessions with refunds")
    @app_commands.describe(user="User whose sessions to stop")
    async def casino_stop(self, interaction: discord.Interaction, user: discord.User) -> None:
        await self._cleanup(interaction, user, "stop")

    @casino.command(name="release", description="Release a user's stuck casino sessions")
    @app_commands.describe(user="User whose sessions to release")
    async def casino_release(self, interaction: discord.Interaction, user: discord.User) -> None:
        await self._cleanup(interaction, user, "release")

    async def _cleanup(self, interaction: discord.Interaction, target: discord.abc.User, operation: str) -> None:
        verb = "stop" if operation == "stop" else "release"
        if target.id != interaction.user.id and not is_admin(interaction.user):
            await deny_access(
                interaction,
                f"You can only {verb} your own casino sessions. Admins can {verb} other users' sessions.",
            )
            return

        await safe_defer(interaction, ephemeral=False)
        requested_by = f"{interaction.user} via UAS"
        if operation == "stop":
            result = await self.client.stop_user_sessions(target.id, interaction.guild_id, requested_by)
        else:
            result = await self.client.release_user_sessions(target.id, interaction.guild_id, requested_by)

        if not result.get("success"):
            title = "❌ Stop Failed" if operation == "stop" else "❌ Release Failed"
            await safe_respond(
                interaction,
                embed=_casino_error(title, f"Failed to {verb} sessions: {result.get('error')}"),
                ephemeral=False,
            )
            return

        await safe_respond(
            interaction,
            embed=build_cleanup_embed(target.display_name, result, operation),
            ephemeral=False,
        )
        logger.info(f"Casino {verb.title()} Command", [
            ("By", f"{interaction.user.name} ({interaction.user.id})"),
            ("Target", f"{target.name} ({target.id})"),
            ("Sessions", str(int(result.get("sessionsCleaned") or 0))),
        ])

    # =========================================================================
    # /casino stats & test
    # =========================================================================

    @casino.command(name="stats", description="Show ATIVE Casino Bot system statistics")
    async def casino_stats(self, interaction: discord.Interaction) -> None:
        if not await check_admin_permission(
            interaction, "Administrator permissions required to view system statistics."
        ):
            return

        await safe_defer(interaction)
        result = await self.client.get_system_stats()
        if not result.get("success"):
            await safe_respond(
                interaction,
                embed=_casino_error("❌ Connection Error", f"Failed to get stats: {result.get('error')}"),
            )
            return

        stats = result.get("stats") or {}
        active = int(stats.get("activeSessions", 0))
        status = f"🟡 {active} active sessions" if active > 0 else "🟢 All clear"
        embed = _casino_embed(
            "📊 ATIVE Casino Bot Statistics",
            EmbedColors.BLUE,
            "**System Status:**\n"
            f"• **Active Sessions**: {active}\n"
            f"• **Active Users**: {stats.get('uniqueUsers', 0)}\n"
            f"• **Session Locks**: {stats.get('locks', 0)}\n"
            f"• **Status**: {status}\n",
        )
        embed.add_field(
            name="🔗 Connection",
            value=f"✅ Connected to ATIVE Casino Bot\n📡 Base URL: {self.client.base_url}",
            inline=False,
        )
        set_casino_footer(embed, "Admin View")
        await safe_respond(interaction, embed=embed)

    @casino.command(name="test", description="Test the connection to ATIVE Casino Bot")
    async def casino_test(self, interaction: discord.Interaction) -> None:
        if not await check_admin_permission(
            interaction, "Administrator permissions required to test connection."
        ):
            return

        await safe_defer(interaction)
        result = await self.client.test_connection()
        embed = _casino_embed(
            "🔧 ATIVE Casino Bot Connection Test",
            EmbedColors.GREEN if result.get("success") else EmbedColors.RED,
        )

        if result.get("success"):
            config = self.client.get_client_config()
            description = (
                "✅ **Connection Successful**\n\n"
                "**Configuration:**\n"
                f"• Base URL: {config['base_url']}\n"
                f"• API Key: {'✅ Configured' if config['has_api_key'] else '❌ Missing'}\n"
                f"• Bot ID: {config['bot_id']}\n"
                f"• Timeout: {config['timeout']}s\n\n"
            )
            stats = result.get("stats")
            if stats:
                description += (
                    "**Current Stats:**\n"
                    f"• Active Sessions: {stats.get('activeSessions', 0)}\n"
                    f"• Active Users: {stats.get('uniqueUsers', 0)}\n"
                )
            embed.description = description
        else:
            embed.description = f"❌ **Connection Failed**\n\nError: {result.get('error')}"
            embed.add_field(
                name="🔧 Troubleshooting",
                value="• Check if ATIVE Casino Bot is running\n• Verify API key and bot ID\n• Check network connectivity",
                inline=False,
            )

        set_casino_footer(embed, "Connection Test")
        await safe_respond(interaction, embed=embed)

    # =========================================================================
    # /casino-admin bulk-stop
    # =========================================================================

    @casino_admin.command(name="bulk-stop", description="Stop casino sessions for several users at once")
    @app_commands.describe(
        users="User IDs separated by commas",
        reason="Reason for the bulk stop",
    )
    async def admin_bulk_stop(
        self,
        interaction: discord.Interaction,
        users: str,
        reason: Optional[str] = None,
    ) -> None:
        if not await check_admin_permission(interaction):
            return

        user_ids = parse_user_ids(users)
        if not user_ids:
            await safe_respond(
                interaction,
                embed=_casino_error("❌ Invalid Input", "Please provide valid user IDs separated by commas."),
            )
            return
        if len(user_ids) > CASINO_BULK_STOP_LIMIT:
            await safe_respond(
                interaction,
                embed=_casino_error(
                    "❌ Too Many Users",
                    f"Bulk operations are limited to {CASINO_BULK_STOP_LIMIT} users at once.",
                ),
            )
            return

        await safe_defer(interaction)
        requested_by = f"{interaction.user} via UAS Bulk"
        if reason:
            requested_by = f"{requested_by}: {reason}"
        result = await self.client.bulk_stop_sessions(user_ids, interaction.guild_id, requested_by)
        await safe_respond(interaction, embed=self.build_bulk_embed(result))

    @staticmethod
    def build_bulk_embed(result: Dict[str, Any]) -> discord.Embed:
        processed = result.get("processed", 0)
        successful = result.get("successful", 0)
        failed = processed - successful

        description = (
            "**Bulk Operation Results**\n\n"
            f"👥 **Users Processed**: {processed}\n"
            f"✅ **Successful**: {successful}\n"
            f"❌ **Failed**: {failed}\n"
            f"🧹 **Total Sessions Stopped**: {result.get('total_sessions_cleaned', 0)}\n"
        )
        refunded = result.get("total_refunded", 0)
        if refunded > 0:
            description += f"💰 **Total Refunded**: ${refunded:,}\n"

        embed = _casino_embed(
            "🔄 Bulk Stop Casino Sessions",
            EmbedColors.GREEN if successful > 0 else EmbedColors.ORANGE,
            description,
        )

        failures = [r for r in result.get("results", []) if not r.get("success")]
        if 0 < len(failures) <= 10:
            embed.add_field(
                name="❌ Failed Operations",
                value="\n".join(f"• <@{r['user_id']}>: {r.get('error')}" for r in failures)[:1024],
                inline=False,
            )

        return set_casino_footer(embed, "Admin Tools")

    # =========================================================================
    # /casino-admin emergency-cleanup
    # =========================================================================

    @casino_admin.command(name="emergency-cleanup", description="Clear every casino session (developer only)")
    async def admin_emergency_cleanup(self, interaction: discord.Interaction) -> None:
        if not await check_developer_permission(
            interaction, "Emergency cleanup is restricted to the bot developer."
        ):
            return
        await interaction.response.send_modal(EmergencyCleanupModal(self))

    async def run_emergency_cleanup(
        self,
        interaction: discord.Interaction,
        confirmation: str,
        reason: str,
    ) -> None:
        """Handle the submitted emergency modal."""
        if confirmation.strip() != CASINO_EMERGENCY_CONFIRM_TEXT:
            await safe_respond(
                interaction,
                embed=_casino_error(
                    "❌ Invalid Confirmation",
                    f'You must type "{CASINO_EMERGENCY_CONFIRM_TEXT}" exactly to confirm.',
                ),
            )
            return

        await safe_defer(interaction)
        result = await self.client.emergency_cleanup_all(f"{interaction.user}: {reason}")

        success = bool(result.get("success"))
        embed = _casino_embed(
            "🚨 Emergency Casino Cleanup Complete",
            EmbedColors.EMERGENCY if success else EmbedColors.RED,
        )
        if success:
            cleaned = int(result.get("sessionsCleaned") or 0)
            embed.description = (
                "**Emergency Operation Executed**\n\n"
                f"👤 **Requested By**: {interaction.user.mention}\n"
                f"📝 **Reason**: {reason}\n"
                f"🧹 **Sessions Cleaned**: {cleaned}\n"
                "⚠️ **Impact**: All users' casino sessions have been terminated\n"
            )
            embed.add_field(
                name="📋 Action Taken",
                value=(
                    "• All active casino sessions cleared\n"
                    "• All session locks released\n"
                    "• Users can start new games immediately"
                ),
                inline=False,
            )
            logger.warning("Casino Emergency Cleanup Executed", [
                ("By", f"{interaction.user.name} ({interaction.user.id})"),
                ("Reason", reason[:100]),
                ("Sessions", str(cleaned)),
            ])
        else:
            embed.description = f"❌ **Emergency Cleanup Failed**\n\nError: {result.get('error')}"

        set_casino_footer(embed, "Emergency Tools")
        await safe_respond(interaction, embed=embed)

    # =========================================================================
    # /casino-admin health-check
    # =========================================================================

    @casino_admin.command(name="health-check", description="Check the casino integration's health")
    async def admin_health_check(self, interaction: discord.Interaction) -> None:
        if not await check_admin_permission(interaction):
            return

        await safe_defer(interaction)
        config = self.client.get_client_config()
        connection = await self.client.test_connection()
        stats_result = await self.client.get_system_stats()
        connected = bool(connection.get("success"))

        embed = _casino_embed(
            "🏥 Casino Integration Health Check",
            EmbedColors.GREEN if connected else EmbedColors.RED,
        )
        embed.add_field(
            name="🔗 Connection Status",
            value="✅ Connected" if connected else f"❌ Failed: {connection.get('error')}",
            inline=False,
        )
        embed.add_field(
            name="⚙️ Configuration",
            value=(
                f"**Base URL**: {config['base_url']}\n"
                f"**API Key**: {'✅ Set' if config['has_api_key'] else '❌ Missing'}\n"
                f"**Bot ID**: {config['bot_id']}\n"
                f"**Timeout**: {config['timeout']}s"
            ),
            inline=False,
        )

        recommendations = []
        if stats_result.get("success"):
            stats = stats_result.get("stats") or {}
            active = int(stats.get("activeSessions", 0))
            embed.add_field(
                name="📊 System Status",
                value=(
                    f"**Active Sessions**: {active}\n"
                    f"**Active Users**: {stats.get('uniqueUsers', 0)}\n"
                    f"**Session Locks**: {stats.get('locks', 0)}\n"
                    f"**Health**: {health_label(active)}"
                ),
                inline=False,
            )
            if active >= CASINO_HIGH_LOAD_THRESHOLD:
                recommendations.append("• High session count, consider `/casino-admin bulk-stop` for idle users")
        if not connected:
            recommendations.append("• Check that the casino bot is running and reachable")
        if not config["has_api_key"]:
            recommendations.append("• Set ATIVE_CASINO_API_KEY in the environment")

        if recommendations:
            embed.add_field(name="💡 Recommendations", value="\n".join(recommendations), inline=False)

        set_casino_footer(embed, "Health Check")
        await safe_respond(interaction, embed=embed)

    # =========================================================================
    # /casino-admin config
    # =========================================================================

    @casino_admin.command(name="config", description="Show the casino integration configuration")
    async def admin_config(self, interaction: discord.Interaction) -> None:
        if not await check_admin_permission(interaction):
            return

        config = self.client.get_client_config()
        embed = _casino_embed(
            "⚙️ UAS-ATIVE Casino Integration Config",
            EmbedColors.BLUE,
            (
                f"**Base URL**: {config['base_url']}\n"
                f"**API Key**: {'✅ Configured' if config['has_api_key'] else '❌ Missing'}\n"
                f"**Bot ID**: {config['bot_id']}\n"
                f"**Timeout**: {config['timeout']}s\n\n"
                "**Endpoints:**\n"
                "• `GET /uas/sessions/user/:id`\n"
                "• `POST /uas/sessions/stop`\n"
                "• `POST /uas/sessions/release`\n"
                "• `POST /uas/sessions/can-start`\n"
                "• `GET /uas/sessions/stats`\n"
                "• `POST /uas/sessions/emergency-cleanup`"
            ),
        )
        embed.add_field(
            name="🔧 Environment Variables",
            value="`ATIVE_CASINO_BASE_URL`\n`ATIVE_CASINO_API_KEY`\n`UAS_BOT_ID`\n`ATIVE_CASINO_TIMEOUT`",
            inline=False,
        )
        embed.add_field(
            name="📋 Available Commands",
            value=(
                "`/casino status|stop|release|stats|test`\n"
                "`/casino-admin bulk-stop|emergency-cleanup|health-check|config`"
            ),
            inline=False,
        )
        set_casino_footer(embed, "Admin Tools")
        await safe_respond(interaction, embed=embed)


__all__ = ["CasinoCog", "EmergencyCleanupModal", "parse_user_ids", "build_cleanup_embed", "health_label"]
