"""
UAS Bot - Shift Cog
===================

Staff shift commands: /clockin, /clockout, /clockoutall, /shift,
/timesheet and /sleepmode.
"""

from datetime import datetime, timezone
from typing import TYPE_CHECKING, Literal, Optional

import discord
from discord import app_commands
from discord.ext import commands

from src.core.logger import logger
from src.core.config import (
    NY_TZ,
    EmbedColors,
    check_admin_permission,
    check_staff_permission,
    get_config,
    get_staff_role,
)
from src.core.database import get_db
from src.core.constants import (
    SHIFT_REPORT_MAX_DAYS,
    SHIFT_REPORT_MIN_DAYS,
    TIMESHEET_LIST_LIMIT,
    TIMESHEET_MAX_DAYS,
)
from src.services.shifts import ShiftError, work_pattern
from src.utils.async_utils import gather_with_logging
from src.utils.embeds import build_error_embed
from src.utils.footer import set_footer
from src.utils.interaction import safe_defer, safe_respond

if TYPE_CHECKING:
    from src.bot import UASBot


def _embed(title: str, description: Optional[str], color: int) -> discord.Embed:
    embed = discord.Embed(
        title=title,
        description=description,
        color=color,
        timestamp=datetime.now(timezone.utc),
    )
    set_footer(embed)
    return embed


class ShiftCog(commands.Cog):
    """Clock in/out, breaks, reports and sleep mode."""

    shift = app_commands.Group(name="shift", description="Shift status, breaks and reports")
    timesheet = app_commands.Group(name="timesheet", description="Staff hours and pay (Admin only)")

    def __init__(self, bot: "UASBot") -> None:
        self.bot = bot
        self.config = get_config()
        self.db = get_db()

    @property
    def manager(self):
        return self.bot.shift_manager

    # =========================================================================
    # /clockin
    # =========================================================================

    @app_commands.command(name="clockin", description="Clock in to start your work shift")
    async def clockin(self, interaction: discord.Interaction) -> None:
        if interaction.guild is None:
            await safe_respond(interaction, "❌ This command can only be used in a server.")
            return
        if not await check_staff_permission(
            interaction, "Only administrators and moderators can clock in for shifts.",
        ):
            return

        role = get_staff_role(interaction.user)
        try:
            shift = self.manager.clock_in(interaction.user.id, interaction.guild.id, role)
        except ShiftError as e:
            await safe_respond(interaction, embed=build_error_embed("❌ Clock In Failed", str(e)))
            return
        except Exception as e:
            logger.error("Clock In Failed", [
                ("User", f"{interaction.user.name} ({interaction.user.id})"),
                ("Error Type", type(e).__name__),
                ("Error", str(e)[:100]),
            ])
            await safe_respond(interaction, embed=build_error_embed(
                "❌ Clock In Failed", "An error occurred while processing your clock in request.",
            ))
            return

        embed = _embed(
            "✅ Clocked In",
            f"Successfully clocked in as {shift.role}! Your shift has started.",
            EmbedColors.SUCCESS,
        )
        embed.add_field(name="Role", value=shift.role.title(), inline=True)
        embed.add_field(name="Pay Rate", value=f"${shift.pay_rate:,}/hour", inline=True)
        embed.add_field(name="Shift ID", value=f"#{shift.shift_id}", inline=True)
        await safe_respond(interaction, embed=embed)

    # =========================================================================
    # /clockout
    # =========================================================================

    async def _post_clockout_log(self, user: discord.abc.User, hours: float, earnings: int, reason: str) -> None:
        if not self.config.clockout_channel_id:
            return
        channel = self.bot.get_channel(self.config.clockout_channel_id)
        if channel is None:
            return
        embed = _embed(
            "🕐 Staff Clocked Out",
            f"**{user.display_name}** ({user.mention}) ended their shift.",
            EmbedColors.INFO,
        )
        embed.add_field(name="Hours Worked", value=f"{hours:.2f} hours", inline=True)
        embed.add_field(name="Earnings", value=f"${earnings:,}", inline=True)
        embed.add_field(name="Reason", value=reason, inline=False)
        await channel.send(embed=embed)

    @app_commands.command(name="clockout", description="Clock out to end your work shift")
    async def clockout(self, interaction: discord.Interaction) -> None:
        try:
            result = self.manager.clock_out(interaction.user.id, "Manual clock out")
        except ShiftError as e:
            await safe_respond(interaction, embed=build_error_embed("❌ Clock Out Failed", str(e)))
            return
        except Exception as e:
            logger.error("Clock Out Failed", [
                ("User", f"{interaction.user.name} ({interaction.user.id})"),
                ("Error Type", type(e).__name__),
                ("Error", str(e)[:100]),
            ])
            await safe_respond(interaction, embed=build_error_embed(
                "❌ Clock Out Failed", "An error occurred while processing your clock out request.",
            ))
            return

        embed = _embed(
            "✅ Clocked Out",
            f"Successfully clocked out! You worked {result.hours_worked:.2f} hours "
            f"and earned ${result.earnings:,}.",
            EmbedColors.SUCCESS,
        )
        embed.add_field(name="Hours Worked", value=f"{result.hours_worked:.2f} hours", inline=True)
        embed.add_field(name="Earnings", value=f"${result.earnings:,}", inline=True)
        embed.add_field(name="Payment", value="Added to your wallet", inline=True)
        await safe_respond(interaction, embed=embed)

        await gather_with_logging(
            ("Post Clock-Out Log", self._post_clockout_log(
                interaction.user, result.hours_worked, result.earnings, result.reason,
            )),
            context="Clock Out",
        )

    # =========================================================================
    # /clockoutall
    # =========================================================================

    @app_commands.command(name="clockoutall", description="Clock out all active staff members (Admin only)")
    @app_commands.describe(reason="Reason for clocking out all users")
    async def clockoutall(
        self,
        interaction: discord.Interaction,
        reason: Optional[str] = "Admin clock out all",
    ) -> None:
        if not await check_admin_permission(interaction):
            return

        reason = reason or "Admin clock out all"
        if not self.manager.get_clocked_in(interaction.guild_id):
            await safe_respond(interaction, "📊 No active shifts to clock out.")
            return

        await safe_defer(interaction, ephemeral=False)
        results = self.manager.clock_out_all(reason, guild_id=interaction.guild_id)

        embed = _embed(
            "🕐 All Staff Clocked Out",
            f"Successfully clocked out {len(results)} staff members",
            EmbedColors.WARNING,
        )
        embed.add_field(name="Reason", value=reason, inline=False)
        staff_list = "\n".join(
            f"<@{r.user_id}> - {r.hours_worked:.2f}h - ${r.earnings:,}" for r in results
        )
        embed.add_field(name="Clocked Out Staff", value=staff_list[:1024] or "None", inline=False)
        embed.add_field(name="Total Paid Out", value=f"${sum(r.earnings for r in results):,}", inline=True)
        await safe_respond(interaction, embed=embed, ephemeral=False)

        logger.tree("Clock Out All", [
            ("By", f"{interaction.user.name} ({interaction.user.id})"),
            ("Count", str(len(results))),
            ("Reason", reason),
        ], emoji="📊")

    # =========================================================================
    # /shift status
    # =========================================================================

    @shift.command(name="status", description="Check your current shift")
    async def shift_status(self, interaction: discord.Interaction) -> None:
        try:
            status = self.manager.get_status(interaction.user.id)
        except ShiftError as e:
            await safe_respond(interaction, embed=build_error_embed("❌ Not Clocked In", str(e)))
            return

        embed = _embed("📊 Shift Status", None, EmbedColors.INFO)
        embed.add_field(name="Role", value=status.role.title(), inline=True)
        embed.add_field(name="Clock In Time", value=f"<t:{int(status.clock_in)}:F>", inline=False)
        embed.add_field(name="Hours Worked", value=f"{status.hours_worked:.2f} hours", inline=True)
        embed.add_field(name="Estimated Earnings", value=f"${status.estimated_earnings:,}", inline=True)
        embed.add_field(
            name="Status",
            value="🟢 Active" if status.status == "active" else "🟡 On Break",
            inline=True,
        )
        embed.add_field(name="Pay Rate", value=f"${status.pay_rate:,}/hour", inline=True)
        if status.dnd:
            embed.add_field(name="🔕 DND", value="Enabled", inline=True)
        await safe_respond(interaction, embed=embed)

    # =========================================================================
    # /shift break
    # =========================================================================

    @shift.command(name="break", description="Start or end a break")
    async def shift_break(self, interaction: discord.Interaction) -> None:
        try:
            message = self.manager.toggle_break(interaction.user.id)
        except ShiftError as e:
            await safe_respond(interaction, embed=build_error_embed("❌ Break Action Failed", str(e)))
            return
        await safe_respond(interaction, embed=_embed("✅ Break Status Updated", message, EmbedColors.SUCCESS))

    # =========================================================================
    # /shift dnd
    # =========================================================================

    @shift.command(name="dnd", description="Toggle Do Not Disturb for your shift")
    @app_commands.describe(enabled="Enable or disable DND")
    async def shift_dnd(self, interaction: discord.Interaction, enabled: bool) -> None:
        try:
            message = self.manager.set_dnd(interaction.user.id, enabled)
        except ShiftError as e:
            await safe_respond(interaction, embed=build_error_embed("❌ DND Action Failed", str(e)))
            return

        embed = _embed("✅ DND Mode Updated", message, EmbedColors.SUCCESS)
        if enabled:
            embed.add_field(
                name="ℹ️ DND Mode",
                value="Users tagging you will be redirected to available staff.",
                inline=False,
            )
        await safe_respond(interaction, embed=embed)

    # =========================================================================
    # /shift report
    # =========================================================================

    @shift.command(name="report", description="Generate your shift earnings report")
    @app_commands.describe(days="Number of days to include (1-30)")
    async def shift_report(
        self,
        interaction: discord.Interaction,
        days: app_commands.Range[int, SHIFT_REPORT_MIN_DAYS, SHIFT_REPORT_MAX_DAYS] = 7,
    ) -> None:
        if interaction.guild is None:
            await safe_respond(interaction, "❌ This command can only be used in a server.")
            return

        try:
            report = self.manager.generate_report(interaction.user.id, interaction.guild.id, days)
        except Exception as e:
            logger.error("Shift Report Failed", [
                ("User", f"{interaction.user.name} ({interaction.user.id})"),
                ("Error Type", type(e).__name__),
                ("Error", str(e)[:100]),
            ])
            await safe_respond(interaction, embed=build_error_embed(
                "❌ Report Generation Failed", "Failed to generate shift report.",
            ))
            return

        per_hour = int(report.total_earnings / report.total_hours) if report.total_hours else 0
        embed = _embed(f"📈 Shift Report (Last {report.days} days)", None, EmbedColors.INFO)
        embed.add_field(name="Total Shifts", value=str(report.total_shifts), inline=True)
        embed.add_field(name="Total Hours", value=f"{report.total_hours:.2f} hours", inline=True)
        embed.add_field(name="Total Earnings", value=f"${report.total_earnings:,}", inline=True)
        embed.add_field(name="Average Hours/Shift", value=f"{report.average_hours:.2f} hours", inline=True)
        embed.add_field(name="Average Earnings/Hour", value=f"${per_hour:,}", inline=True)

        if report.shifts:
            recent = "\n".join(
                f"<t:{int(s['clock_in'])}:d>: {float(s['hours_worked'] or 0):.1f}h - ${int(s['earnings'] or 0):,}"
                for s in report.shifts[:5]
            )
            embed.add_field(name="Recent Shifts", value=recent, inline=False)
        await safe_respond(interaction, embed=embed)

    # =========================================================================
    # /shift help
    # =========================================================================

    @shift.command(name="help", description="How the shift system works")
    async def shift_help(self, interaction: discord.Interaction) -> None:
        embed = _embed(
            "📋 Shift Commands Help",
            "Complete guide to using the shift system:",
            EmbedColors.INFO,
        )
        embed.add_field(
            name="🕐 Clock Management",
            value="`/clockin` - Start your shift\n`/clockout` - End your shift\n`/shift status` - Check current shift status",
            inline=False,
        )
        embed.add_field(
            name="☕ Break Management",
            value="`/shift break` - Start or end a break\n*Note: Break time is automatically deducted from pay*",
            inline=False,
        )
        embed.add_field(
            name="🔕 Do Not Disturb",
            value="`/shift dnd true` - Enable DND mode\n`/shift dnd false` - Disable DND mode",
            inline=False,
        )
        embed.add_field(
            name="📊 Reports & History",
            value="`/shift report` - Generate earnings report (7 days)\n`/shift report days:30` - Custom time period",
            inline=False,
        )
        embed.add_field(
            name="💰 Pay Rates",
            value=(
                f"**Administrators:** ${self.config.admin_pay_rate:,}/hour\n"
                f"**Moderators:** ${self.config.mod_pay_rate:,}/hour\n"
                "*Pay is automatically added to your wallet*"
            ),
            inline=False,
        )
        embed.add_field(
            name="⚠️ Important Notes",
            value=(
                f"• Warning at {self.config.shift_inactive_warning_hours} hours of inactivity\n"
                f"• Auto clock-out after {self.config.shift_auto_clockout_hours} hours of inactivity\n"
                "• Break time is tracked and deducted from pay\n"
                "• All actions are logged for transparency"
            ),
            inline=False,
        )
        await safe_respond(interaction, embed=embed)

    # =========================================================================
    # /timesheet summary
    # =========================================================================

    @timesheet.command(name="summary", description="View summary of all staff hours")
    @app_commands.describe(days="Number of days to include (default: 7)")
    async def timesheet_summary(
        self,
        interaction: discord.Interaction,
        days: app_commands.Range[int, 1, TIMESHEET_MAX_DAYS] = 7,
    ) -> None:
        if not await check_admin_permission(interaction):
            return
        await safe_defer(interaction)

        entries = self.manager.timesheet_summary(interaction.guild_id, days)
        if not entries:
            await safe_respond(interaction, embed=_embed(
                "📊 Staff Timesheet Summary",
                f"No shift data found for the last {days} days.",
                EmbedColors.WARNING,
            ))
            return

        total_hours = sum(e.total_hours for e in entries)
        total_paid = sum(e.total_earnings for e in entries)
        total_shifts = sum(e.shift_count for e in entries)

        embed = _embed(f"📊 Staff Timesheet Summary (Last {days} days)", None, EmbedColors.INFO)
        embed.add_field(name="👥 Total Staff", value=str(len(entries)), inline=True)
        embed.add_field(name="⏱️ Total Hours", value=f"{total_hours:.2f}", inline=True)
        embed.add_field(name="💰 Total Paid", value=f"${total_paid:,}", inline=True)
        embed.add_field(name="📋 Total Shifts", value=str(total_shifts), inline=True)
        embed.add_field(
            name="📊 Avg Hours/Shift",
            value=f"{total_hours / total_shifts:.2f}" if total_shifts else "0",
            inline=True,
        )
        embed.add_field(name="💵 Avg Pay/Staff", value=f"${total_paid // len(entries):,}", inline=True)

        medals = ["🥇", "🥈", "🥉"]
        top = "\n".join(
            f"{medals[i] if i < len(medals) else '🏅'} <@{e.user_id}>: "
            f"{e.total_hours:.2f}h | ${e.total_earnings:,} | {e.shift_count} shifts"
            for i, e in enumerate(entries[:5])
        )
        embed.add_field(name="🌟 Top Performers", value=top, inline=False)

        breakdown = "\n\n".join(
            f"<@{e.user_id}>\n"
            f"├ Hours: {e.total_hours:.2f}h ({e.average_hours:.2f}h avg)\n"
            f"├ Earnings: ${e.total_earnings:,}\n"
            f"├ Shifts: {e.shift_count}\n"
            f"└ Break Time: {e.break_hours:.2f}h"
            for e in entries[:TIMESHEET_LIST_LIMIT]
        )
        embed.add_field(name="📋 Detailed Breakdown", value=breakdown[:1024], inline=False)
        embed.set_footer(
            text=f"Showing {min(TIMESHEET_LIST_LIMIT, len(entries))} of {len(entries)} staff members"
        )
        await safe_respond(interaction, embed=embed)

    # =========================================================================
    # /timesheet user
    # =========================================================================

    @timesheet.command(name="user", description="View detailed timesheet for a specific staff member")
    @app_commands.describe(staff="The staff member to view", days="Number of days to include (default: 30)")
    async def timesheet_user(
        self,
        interaction: discord.Interaction,
        staff: discord.User,
        days: app_commands.Range[int, 1, TIMESHEET_MAX_DAYS] = 30,
    ) -> None:
        if not await check_admin_permission(interaction):
            return
        await safe_defer(interaction)

        report = self.manager.user_timesheet(staff.id, interaction.guild_id, days)
        embed = _embed(
            f"📋 Timesheet for {staff.name}",
            f"Shift history for the last {days} days",
            EmbedColors.INFO,
        )
        embed.set_thumbnail(url=staff.display_avatar.url)

        if not report.shifts:
            embed.add_field(name="❌ No Data", value="No shift data found for this user.", inline=False)
            await safe_respond(interaction, embed=embed)
            return

        embed.add_field(name="📊 Total Shifts", value=str(report.total_shifts), inline=True)
        embed.add_field(name="⏱️ Total Hours", value=f"{report.total_hours:.2f}h", inline=True)
        embed.add_field(name="💰 Total Earnings", value=f"${report.total_earnings:,}", inline=True)
        embed.add_field(name="📈 Avg Hours/Shift", value=f"{report.average_hours:.2f}h", inline=True)
        embed.add_field(
            name="☕ Break Time",
            value=f"{sum(float(s['break_minutes'] or 0) for s in report.shifts) / 60:.2f}h",
            inline=True,
        )

        lines = []
        for s in report.shifts[:TIMESHEET_LIST_LIMIT]:
            icon = {"completed": "✅", "active": "🟢"}.get(s["status"], "🔴")
            clock_out = f"<t:{int(s['clock_out'])}:t>" if s["clock_out"] else "Active"
            lines.append(
                f"{icon} <t:{int(s['clock_in'])}:d> | <t:{int(s['clock_in'])}:t> - {clock_out} | "
                f"{float(s['hours_worked'] or 0):.2f}h | ${int(s['earnings'] or 0):,}"
            )
        embed.add_field(name="📅 Recent Shifts", value="\n".join(lines)[:1024], inline=False)

        pattern = work_pattern(report.shifts, NY_TZ)
        if pattern:
            embed.add_field(name="📊 Work Pattern", value=pattern, inline=False)
        await safe_respond(interaction, embed=embed)

    # =========================================================================
    # /timesheet active
    # =========================================================================

    @timesheet.command(name="active", description="View currently clocked-in staff")
    async def timesheet_active(self, interaction: discord.Interaction) -> None:
        if not await check_admin_permission(interaction):
            return
        await safe_defer(interaction)

        active = self.manager.active_statuses(interaction.guild_id)
        embed = _embed("🟢 Currently Active Staff", None, EmbedColors.SUCCESS)
        if not active:
            embed.description = "No staff members are currently clocked in."
            await safe_respond(interaction, embed=embed)
            return

        embed.description = f"**{len(active)}** staff members currently clocked in"
        blocks = []
        for shift, status in active:
            if status.status == "break":
                label = "☕ On Break"
            elif status.dnd:
                label = "🔕 DND"
            else:
                label = "🟢 Active"
            blocks.append(
                f"<@{shift.user_id}> ({shift.role})\n"
                f"├ Status: {label}\n"
                f"├ Clocked in: <t:{int(shift.clock_in)}:R>\n"
                f"├ Hours: {status.hours_worked:.2f}h\n"
                f"└ Earnings: ${status.estimated_earnings:,}"
            )
        embed.add_field(name="Active Staff", value="\n\n".join(blocks)[:1024], inline=False)
        embed.add_field(name="👥 Total Active", value=str(len(active)), inline=True)
        embed.add_field(
            name="⏱️ Combined Hours",
            value=f"{sum(status.hours_worked for _, status in active):.2f}h",
            inline=True,
        )
        embed.add_field(
            name="☕ On Break",
            value=str(sum(1 for _, status in active if status.status == "break")),
            inline=True,
        )
        embed.add_field(name="🔕 DND Mode", value=str(sum(1 for _, status in active if status.dnd)), inline=True)
        await safe_respond(interaction, embed=embed)

    # =========================================================================
    # /sleepmode
    # =========================================================================

    async def _announce_sleep_mode(self, user: discord.abc.User, enable: bool, reason: str) -> None:
        if not self.config.sleep_mode_channel_id:
            return
        channel = self.bot.get_channel(self.config.sleep_mode_channel_id)
        if channel is None:
            return
        emoji = "😴" if enable else "👁️"
        action = "activated" if enable else "deactivated"
        await channel.send(f"{emoji} **{user.name}** has {action} Sleep Mode. Reason: {reason}")

    @app_commands.command(name="sleepmode", description="Toggle sleep mode (pauses inactivity clock-outs)")
    @app_commands.describe(action="Enable, disable or show sleep mode", reason="Reason for the change")
    async def sleepmode(
        self,
        interaction: discord.Interaction,
        action: Literal["enable", "disable", "status"],
        reason: Optional[str] = "No reason provided",
    ) -> None:
        if not await check_admin_permission(interaction):
            return

        guild_id = interaction.guild_id
        if action == "status":
            enabled = self.manager.is_sleep_mode(guild_id)
            if enabled:
                text = (
                    "😴 **Sleep Mode Status:** ENABLED\n\n"
                    "😴 Staff DND mode is active. Inactivity clock-outs are paused."
                )
            else:
                text = "👁️ **Sleep Mode Status:** DISABLED\n\n👁️ Normal staff monitoring is active."
            await safe_respond(interaction, text, ephemeral=False)
            return

        enable = action == "enable"
        reason = reason or "No reason provided"
        if enable:
            self.manager.enable_sleep_mode(guild_id)
            description = (
                "😴 **Staff DND Mode Active**\n\n"
                "• Inactivity clock-outs paused\n"
                "• Staff can rest without penalties\n\n"
                "Use `/sleepmode disable` to resume normal operations."
            )
        else:
            self.manager.disable_sleep_mode(guild_id)
            description = (
                "👁️ **Normal Operations Resumed**\n\n"
                "• Activity monitoring enabled\n"
                "• Staff are expected to be active during shifts"
            )

        self.db.log_moderation_action(
            guild_id, interaction.user.id,
            "sleepmode_enable" if enable else "sleepmode_disable",
            None, reason,
        )

        status = "ENABLED" if enable else "DISABLED"
        emoji = "😴" if enable else "👁️"
        await safe_respond(
            interaction,
            f"{emoji} **Sleep Mode {status}**\n\n{description}\n\n**Reason:** {reason}",
            ephemeral=False,
        )

        await gather_with_logging(
            ("Announce Sleep Mode", self._announce_sleep_mode(interaction.user, enable, reason)),
            context="Sleep Mode",
        )


__all__ = ["ShiftCog"]
