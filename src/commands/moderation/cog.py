"""
UAS Bot - Moderation Cog
========================

/mute, /unmute, /warn, /kick, /ban, /purge, /slowmode, /lockdown and
/unlock.

DESIGN:
    Mutes use the platform timeout API, so expiry is handled by Discord
    and nothing has to be rescheduled after a restart. Temporary bans
    are stored in temp_bans and lifted by TempBanService. Every action
    is written to moderation_log, queued on the audit logger and counts
    as shift activity for the moderator.
"""

import time
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, List, Literal, Optional

import discord
from discord import app_commands
from discord.ext import commands

from src.core.logger import logger
from src.core.config import (
    EmbedColors,
    check_admin_permission,
    check_staff_permission,
    get_config,
    is_admin,
)
from src.core.constants import (
    AUTOCOMPLETE_LIMIT,
    BAN_DELETE_MAX_DAYS,
    MAX_SLOWMODE_SECONDS,
    MAX_TIMEOUT_SECONDS,
    PURGE_MAX_AGE,
    PURGE_MAX_MESSAGES,
    SECONDS_PER_DAY,
)
from src.core.database import get_db
from src.utils.async_utils import gather_with_logging
from src.utils.duration import DURATION_SUGGESTIONS, format_duration, parse_duration
from src.utils.embeds import build_error_embed
from src.utils.footer import set_footer
from src.utils.interaction import safe_defer, safe_respond

if TYPE_CHECKING:
    from src.bot import UASBot


DEFAULT_MUTE_DURATION = "10m"
DEFAULT_REASON = "No reason provided"
LOCK_PERMISSIONS = ("send_messages", "add_reactions", "create_public_threads", "create_private_threads")


def can_moderate(guild: discord.Guild, member: discord.Member, permission: str = "moderate_members") -> bool:
    """Whether the bot can act on this member with the given guild permission."""
    me = guild.me
    if me is None or member.id == guild.owner_id:
        return False
    if not getattr(me.guild_permissions, permission):
        return False
    if member.guild_permissions.administrator:
        return False
    return me.top_role > member.top_role


class ModerationCog(commands.Cog):
    """Staff moderation commands."""

    def __init__(self, bot: "UASBot") -> None:
        self.bot = bot
        self.config = get_config()
        self.db = get_db()

    # =========================================================================
    # Helpers
    # =========================================================================

    async def _resolve_member(self, interaction: discord.Interaction, user: discord.abc.User) -> Optional[discord.Member]:
        if isinstance(user, discord.Member):
            return user
        if interaction.guild is None:
            return None
        member = interaction.guild.get_member(user.id)
        if member is not None:
            return member
        try:
            return await interaction.guild.fetch_member(user.id)
        except discord.HTTPException:
            return None

    def _record(
        self,
        interaction: discord.Interaction,
        action: str,
        target: discord.abc.Snowflake,
        reason: str,
        extra=(),
        moderator: Optional[discord.abc.User] = None,
    ) -> None:
        """moderation_log row, audit event and shift activity."""
        moderator = moderator or interaction.user
        self.db.log_moderation_action(interaction.guild_id, moderator.id, action, target.id, reason)

        audit_logger = getattr(self.bot, "audit_logger", None)
        if audit_logger:
            audit_logger.log_moderation(interaction.guild_id, action, moderator, target, reason, extra)

        shift_manager = getattr(self.bot, "shift_manager", None)
        if shift_manager:
            shift_manager.update_activity(interaction.user.id)

    async def duration_autocomplete(
        self,
        interaction: discord.Interaction,
        current: str,
    ) -> List[app_commands.Choice[str]]:
        choices = []
        current_lower = current.lower().strip()

        if current:
            parsed = parse_duration(current)
            if parsed is not None and parsed <= MAX_TIMEOUT_SECONDS:
                choices.append(app_commands.Choice(name=format_duration(parsed), value=current))

        for label, value in DURATION_SUGGESTIONS:
            if current_lower == value:
                continue
            if not current_lower or current_lower in label.lower() or current_lower in value:
                choices.append(app_commands.Choice(name=label, value=value))

        return choices[:AUTOCOMPLETE_LIMIT]

    # =========================================================================
    # /mute
    # =========================================================================

    @app_commands.command(name="mute", description="Mute a member with a timeout")
    @app_commands.describe(
        user="The user to mute",
        duration="Duration of the mute (e.g., 10m, 1h, 1d)",
        reason="Reason for the mute",
    )
    @app_commands.autocomplete(duration=duration_autocomplete)
    async def mute(
        self,
        interaction: discord.Interaction,
        user: discord.User,
        duration: Optional[str] = None,
        reason: Optional[str] = None,
    ) -> None:
        if not await check_staff_permission(interaction):
            return

        duration = duration or DEFAULT_MUTE_DURATION
        reason = reason or DEFAULT_REASON

        member = await self._resolve_member(interaction, user)
        if member is None:
            await safe_respond(interaction, "❌ That user is not a member of this server.")
            return
        if not can_moderate(interaction.guild, member):
            await safe_respond(interaction, "❌ I cannot mute this user. They may have higher permissions than me.")
            return

        seconds = parse_duration(duration)
        if seconds is None or seconds > MAX_TIMEOUT_SECONDS:
            await safe_respond(
                interaction,
                "❌ Invalid duration. Please use a valid duration (max 28 days). Examples: 10m, 1h, 2d",
            )
            return

        until = datetime.now(timezone.utc) + timedelta(seconds=seconds)
        try:
            await member.timeout(timedelta(seconds=seconds), reason=f"{interaction.user}: {reason}"[:512])
        except discord.HTTPException as e:
            logger.error("Mute Failed", [
                ("Target", f"{member.name} ({member.id})"),
                ("Error Type", type(e).__name__),
                ("Error", str(e)[:100]),
            ])
            await safe_respond(interaction, "❌ An error occurred while trying to mute the user.")
            return

        self._record(interaction, "mute", member, reason, [("Duration", format_duration(seconds), True)])
        await safe_respond(
            interaction,
            f"✅ **{member.name}** has been muted for **{duration}**.\n"
            f"**Reason:** {reason}\n"
            f"**Expires:** <t:{int(until.timestamp())}:F>",
            ephemeral=False,
        )
        logger.tree("User Muted", [
            ("Target", f"{member.name} ({member.id})"),
            ("Moderator", f"{interaction.user.name} ({interaction.user.id})"),
            ("Duration", format_duration(seconds)),
            ("Reason", reason[:50]),
        ], emoji="🔇")

    # =========================================================================
    # /unmute
    # =========================================================================

    @app_commands.command(name="unmute", description="Remove a member's timeout")
    @app_commands.describe(user="The user to unmute", reason="Reason for the unmute")
    async def unmute(
        self,
        interaction: discord.Interaction,
        user: discord.User,
        reason: Optional[str] = None,
    ) -> None:
        if not await check_staff_permission(interaction):
            return

        reason = reason or DEFAULT_REASON
        member = await self._resolve_member(interaction, user)
        if member is None or not member.is_timed_out():
            await safe_respond(interaction, "❌ This user is not currently muted.")
            return

        try:
            await member.timeout(None, reason=f"{interaction.user}: {reason}"[:512])
        except discord.HTTPException as e:
            logger.error("Unmute Failed", [
                ("Target", f"{member.name} ({member.id})"),
                ("Error Type", type(e).__name__),
                ("Error", str(e)[:100]),
            ])
            await safe_respond(interaction, "❌ An error occurred while trying to unmute the user.")
            return

        self._record(interaction, "unmute", member, reason)
        await safe_respond(
            interaction,
            f"✅ **{member.name}** has been unmuted.\n**Reason:** {reason}",
            ephemeral=False,
        )
        logger.tree("User Unmuted", [
            ("Target", f"{member.name} ({member.id})"),
            ("Moderator", f"{interaction.user.name} ({interaction.user.id})"),
        ], emoji="🔊")

    # =========================================================================
    # /warn
    # =========================================================================

    @app_commands.command(name="warn", description="Issue a warning to a user")
    @app_commands.describe(user="The user to warn", reason="Reason for the warning")
    async def warn(
        self,
        interaction: discord.Interaction,
        user: discord.User,
        reason: str,
    ) -> None:
        if not await check_staff_permission(interaction):
            return

        member = await self._resolve_member(interaction, user)
        if is_admin(member or user):
            await safe_respond(
                interaction,
                embed=build_error_embed("❌ Cannot Warn", "You cannot warn administrators or developers."),
            )
            return

        await safe_defer(interaction, ephemeral=False)

        threshold = self.config.warn_mute_threshold
        self.db.add_warning(user.id, interaction.guild_id, interaction.user.id, reason)
        count = self.db.get_user_warn_count(user.id, interaction.guild_id)
        self._record(interaction, "warn", user, reason, [("Warning Count", f"{count}/{threshold}", True)])

        embed = discord.Embed(
            title="⚠️ User Warned",
            description=f"Successfully warned **{user}**",
            color=0xFFAA00,
            timestamp=datetime.now(timezone.utc),
        )
        embed.set_thumbnail(url=user.display_avatar.url)
        embed.add_field(name="User", value=f"{user.mention} ({user.id})", inline=False)
        embed.add_field(name="Reason", value=reason[:1024], inline=False)
        embed.add_field(name="Warning Count", value=f"{count}/{threshold}", inline=True)
        embed.add_field(name="Moderator", value=interaction.user.mention, inline=True)

        auto_muted = False
        if count >= threshold:
            auto_muted = await self._auto_mute(interaction, member, user)
            if auto_muted:
                embed.color = EmbedColors.ERROR
                embed.add_field(
                    name="🔇 Auto-Mute Applied",
                    value=f"User has reached {threshold} warnings and has been automatically "
                          f"muted for {format_duration(self.config.warn_mute_seconds)}.",
                    inline=False,
                )
            else:
                embed.add_field(
                    name="⚠️ Auto-Mute Failed",
                    value=f"User reached {threshold} warnings but auto-mute failed. Please mute manually.",
                    inline=False,
                )
        else:
            embed.add_field(
                name="ℹ️ Next Action",
                value=f"User will be auto-muted for {format_duration(self.config.warn_mute_seconds)} "
                      f"after {threshold - count} more warning(s).",
                inline=False,
            )

        set_footer(embed)
        await safe_respond(interaction, embed=embed, ephemeral=False)

        await gather_with_logging(
            ("Warn DM", self._dm_warning(interaction, user, reason, count, auto_muted)),
            context="Warn",
        )

    async def _auto_mute(
        self,
        interaction: discord.Interaction,
        member: Optional[discord.Member],
        user: discord.abc.User,
    ) -> bool:
        if member is None or not can_moderate(interaction.guild, member):
            return False

        seconds = self.config.warn_mute_seconds
        reason = f"{self.config.warn_mute_threshold} warnings reached - automatic mute"
        try:
            await member.timeout(timedelta(seconds=seconds), reason=reason)
        except discord.HTTPException as e:
            logger.error("Auto-Mute Failed", [
                ("Target", f"{user.name} ({user.id})"),
                ("Error Type", type(e).__name__),
                ("Error", str(e)[:100]),
            ])
            return False

        self._record(
            interaction, "mute", member, reason,
            [("Duration", format_duration(seconds), True)],
            moderator=self.bot.user or interaction.user,
        )
        logger.tree("Auto-Mute Applied", [
            ("Target", f"{user.name} ({user.id})"),
            ("Duration", format_duration(seconds)),
        ], emoji="🔇")
        return True

    async def _dm_warning(
        self,
        interaction: discord.Interaction,
        user: discord.abc.User,
        reason: str,
        count: int,
        auto_muted: bool,
    ) -> None:
        threshold = self.config.warn_mute_threshold
        mute_text = format_duration(self.config.warn_mute_seconds)
        guild_name = interaction.guild.name if interaction.guild else "the server"

        embed = discord.Embed(
            title="⚠️ You received a warning",
            description=f"You received a warning in **{guild_name}**",
            color=EmbedColors.ERROR if auto_muted else 0xFFAA00,
            timestamp=datetime.now(timezone.utc),
        )
        embed.add_field(name="Reason", value=reason[:1024], inline=False)
        embed.add_field(name="Warning Count", value=f"{count}/{threshold}", inline=True)
        embed.add_field(name="Moderator", value=str(interaction.user), inline=True)
        if auto_muted:
            embed.add_field(
                name="🔇 Auto-Mute Applied",
                value=f"You have reached {threshold} warnings and have been automatically muted for {mute_text}.",
                inline=False,
            )
        elif count < threshold:
            embed.add_field(
                name="ℹ️ Warning",
                value=f"You will be automatically muted for {mute_text} if you receive "
                      f"{threshold - count} more warning(s).",
                inline=False,
            )
        set_footer(embed)

        try:
            await user.send(embed=embed)
        except (discord.Forbidden, discord.HTTPException):
            logger.warning("Warn DM Failed", [("User", f"{user.name} ({user.id})")])

    # =========================================================================
    # /kick
    # =========================================================================

    @app_commands.command(name="kick", description="Kick a member from the server")
    @app_commands.describe(user="The user to kick", reason="Reason for the kick")
    async def kick(
        self,
        interaction: discord.Interaction,
        user: discord.User,
        reason: Optional[str] = None,
    ) -> None:
        if not await check_admin_permission(interaction, "This command is restricted to administrators only."):
            return

        reason = reason or DEFAULT_REASON
        member = await self._resolve_member(interaction, user)
        if member is None:
            await safe_respond(interaction, "❌ That user is not a member of this server.")
            return
        if not can_moderate(interaction.guild, member, "kick_members"):
            await safe_respond(interaction, "❌ I cannot kick this user. They may have higher permissions than me.")
            return

        try:
            await member.kick(reason=f"{interaction.user}: {reason}"[:512])
        except discord.HTTPException as e:
            logger.error("Kick Failed", [
                ("Target", f"{member.name} ({member.id})"),
                ("Error Type", type(e).__name__),
                ("Error", str(e)[:100]),
            ])
            await safe_respond(interaction, "❌ An error occurred while trying to kick the user.")
            return

        self._record(interaction, "kick", member, reason)
        await safe_respond(
            interaction,
            f"✅ **{member.name}** has been kicked.\n**Reason:** {reason}",
            ephemeral=False,
        )
        logger.tree("User Kicked", [
            ("Target", f"{member.name} ({member.id})"),
            ("Moderator", f"{interaction.user.name} ({interaction.user.id})"),
            ("Reason", reason[:50]),
        ], emoji="👢")

    # =========================================================================
    # /ban
    # =========================================================================

    @app_commands.command(name="ban", description="Ban a user from the server")
    @app_commands.describe(
        user="The user to ban",
        reason="Reason for the ban",
        duration="Duration of the ban (e.g., 1d, 1w, permanent)",
        delete_days="Delete message history (days)",
    )
    @app_commands.autocomplete(duration=duration_autocomplete)
    async def ban(
        self,
        interaction: discord.Interaction,
        user: discord.User,
        reason: Optional[str] = None,
        duration: Optional[str] = None,
        delete_days: app_commands.Range[int, 0, BAN_DELETE_MAX_DAYS] = 0,
    ) -> None:
        if not await check_admin_permission(interaction, "This command is restricted to administrators only."):
            return

        reason = reason or DEFAULT_REASON
        member = await self._resolve_member(interaction, user)
        if member is not None:
            if is_admin(member):
                await safe_respond(
                    interaction,
                    embed=build_error_embed("❌ Cannot Ban", "You cannot ban administrators or developers."),
                )
                return
            if not can_moderate(interaction.guild, member, "ban_members"):
                await safe_respond(interaction, "❌ I cannot ban this user. They may have higher permissions than me.")
                return

        seconds = None
        if duration and duration.strip().lower() != "permanent":
            seconds = parse_duration(duration)
            if seconds is None:
                await safe_respond(interaction, embed=build_error_embed(
                    "❌ Invalid Duration",
                    'Invalid duration format. Use formats like "1d", "1w", "1h", etc.',
                ))
                return
        duration_text = format_duration(seconds)

        await safe_defer(interaction, ephemeral=False)
        # Must DM first; a banned user shares no guild with the bot
        await self._dm_ban(interaction, user, reason, duration_text)

        try:
            await interaction.guild.ban(
                user,
                reason=f"{interaction.user}: {reason}"[:512],
                delete_message_seconds=delete_days * SECONDS_PER_DAY,
            )
        except discord.HTTPException as e:
            logger.error("Ban Failed", [
                ("Target", f"{user.name} ({user.id})"),
                ("Error Type", type(e).__name__),
                ("Error", str(e)[:100]),
            ])
            await safe_respond(interaction, embed=build_error_embed(
                "❌ Ban Failed",
                "An error occurred while trying to ban the user. Please check my permissions and try again.",
            ))
            return

        if seconds:
            self.db.add_temp_ban(interaction.guild_id, user.id, interaction.user.id, time.time() + seconds, reason)
        else:
            self.db.remove_temp_ban(interaction.guild_id, user.id)
        self._record(interaction, "ban", user, reason, [("Duration", duration_text, True)])

        embed = discord.Embed(
            title="🔨 User Banned",
            description=f"Successfully banned **{user}**",
            color=EmbedColors.ERROR,
            timestamp=datetime.now(timezone.utc),
        )
        embed.set_thumbnail(url=user.display_avatar.url)
        embed.add_field(name="User", value=f"{user.mention} ({user.id})", inline=False)
        embed.add_field(name="Reason", value=reason[:1024], inline=False)
        embed.add_field(name="Duration", value=duration_text, inline=True)
        if seconds:
            embed.add_field(name="Expires", value=f"<t:{int(time.time() + seconds)}:F>", inline=True)
        embed.add_field(name="Messages Deleted", value=f"{delete_days} days", inline=True)
        embed.add_field(name="Moderator", value=interaction.user.mention, inline=True)
        set_footer(embed)
        await safe_respond(interaction, embed=embed, ephemeral=False)

        logger.tree("User Banned", [
            ("Target", f"{user.name} ({user.id})"),
            ("Moderator", f"{interaction.user.name} ({interaction.user.id})"),
            ("Duration", duration_text),
            ("Reason", reason[:50]),
        ], emoji="🔨")

    async def _dm_ban(
        self,
        interaction: discord.Interaction,
        user: discord.abc.User,
        reason: str,
        duration_text: str,
    ) -> None:
        guild_name = interaction.guild.name if interaction.guild else "the server"
        embed = discord.Embed(
            title="🔨 You have been banned",
            description=f"You have been banned from **{guild_name}**",
            color=EmbedColors.ERROR,
            timestamp=datetime.now(timezone.utc),
        )
        embed.add_field(name="Reason", value=reason[:1024], inline=False)
        embed.add_field(name="Duration", value=duration_text, inline=True)
        embed.add_field(name="Moderator", value=str(interaction.user), inline=True)
        set_footer(embed)

        try:
            await user.send(embed=embed)
        except (discord.Forbidden, discord.HTTPException):
            logger.warning("Ban DM Failed", [("User", f"{user.name} ({user.id})")])

    # =========================================================================
    # /purge
    # =========================================================================

    @app_commands.command(name="purge", description="Delete a specified number of messages")
    @app_commands.describe(
        amount="Number of messages to delete (1-100)",
        user="Only delete messages from this user",
    )
    async def purge(
        self,
        interaction: discord.Interaction,
        amount: app_commands.Range[int, 1, PURGE_MAX_MESSAGES],
        user: Optional[discord.User] = None,
    ) -> None:
        if not await check_staff_permission(interaction):
            return

        channel = interaction.channel
        await safe_defer(interaction)

        matched = 0

        def check(message: discord.Message) -> bool:
            nonlocal matched
            if matched >= amount:
                return False
            if user is not None and message.author.id != user.id:
                return False
            matched += 1
            return True

        cutoff = datetime.now(timezone.utc) - timedelta(seconds=PURGE_MAX_AGE)
        try:
            deleted = await channel.purge(
                limit=PURGE_MAX_MESSAGES if user is not None else amount,
                check=check,
                after=cutoff,
                oldest_first=False,
                reason=f"Purge by {interaction.user}",
            )
        except discord.HTTPException as e:
            logger.error("Purge Failed", [
                ("Channel", f"#{channel.name} ({channel.id})"),
                ("Error Type", type(e).__name__),
                ("Error", str(e)[:100]),
            ])
            await safe_respond(interaction, "❌ An error occurred while trying to delete messages.")
            return

        if not deleted:
            await safe_respond(
                interaction,
                "❌ No messages found to delete (messages must be less than 14 days old).",
            )
            return

        self._record(
            interaction, "purge", user or channel,
            f"Deleted {len(deleted)} messages in #{channel.name}",
            [("Channel", channel.mention, True)],
        )
        from_text = f" from **{user.name}**" if user is not None else ""
        await safe_respond(interaction, f"✅ Successfully deleted **{len(deleted)}** messages{from_text}.")

        logger.tree("Messages Purged", [
            ("Channel", f"#{channel.name} ({channel.id})"),
            ("By", f"{interaction.user.name} ({interaction.user.id})"),
            ("Deleted", str(len(deleted))),
            ("From", user.name if user is not None else "Anyone"),
        ], emoji="🧹")

    # =========================================================================
    # /slowmode
    # =========================================================================

    @app_commands.command(name="slowmode", description="Set slowmode for a channel")
    @app_commands.describe(
        seconds="Slowmode duration in seconds (0-21600, 0 to disable)",
        channel="The channel to set slowmode in (current channel if not specified)",
        reason="Reason for setting slowmode",
    )
    async def slowmode(
        self,
        interaction: discord.Interaction,
        seconds: app_commands.Range[int, 0, MAX_SLOWMODE_SECONDS],
        channel: Optional[discord.TextChannel] = None,
        reason: Optional[str] = None,
    ) -> None:
        if not await check_staff_permission(interaction):
            return

        target = channel or interaction.channel
        reason = reason or "Slowmode adjustment"
        try:
            await target.edit(slowmode_delay=seconds, reason=f"{interaction.user}: {reason}"[:512])
        except discord.HTTPException as e:
            logger.error("Slowmode Failed", [
                ("Channel", f"#{target.name} ({target.id})"),
                ("Error Type", type(e).__name__),
                ("Error", str(e)[:100]),
            ])
            await safe_respond(interaction, "❌ I cannot manage this channel. Please check my permissions.")
            return

        self._record(interaction, "slowmode", target, f"Set slowmode to {seconds} seconds: {reason}")
        if seconds == 0:
            message = f"✅ Slowmode **disabled** in {target.mention}."
        else:
            message = f"✅ Slowmode set to **{seconds} seconds** in {target.mention}."
        await safe_respond(interaction, f"{message}\n**Reason:** {reason}", ephemeral=False)

    # =========================================================================
    # /lockdown & /unlock
    # =========================================================================

    @staticmethod
    async def _set_locked(channel: discord.abc.GuildChannel, locked: bool, reason: str) -> None:
        """Deny (or reset) @everyone's chat permissions in one channel."""
        everyone = channel.guild.default_role
        overwrite = channel.overwrites_for(everyone)
        overwrite.update(**{name: (False if locked else None) for name in LOCK_PERMISSIONS})
        await channel.set_permissions(everyone, overwrite=overwrite, reason=reason[:512])

    async def _lock(self, interaction: discord.Interaction, scope: str, reason: str, locked: bool) -> None:
        verb = "lockdown" if locked else "unlock"
        await safe_defer(interaction, ephemeral=False)

        if scope == "channel":
            channel = interaction.channel
            try:
                await self._set_locked(channel, locked, reason)
            except discord.HTTPException as e:
                logger.error(f"{verb.title()} Failed", [
                    ("Channel", f"#{channel.name} ({channel.id})"),
                    ("Error Type", type(e).__name__),
                    ("Error", str(e)[:100]),
                ])
                await safe_respond(interaction, f"❌ An error occurred during {verb}.")
                return

            self._record(interaction, f"{verb}_channel", channel, reason)
            if locked:
                text = (
                    f"🔒 **Channel Locked Down**\n\n{channel.mention} has been locked.\n"
                    f"**Reason:** {reason}\n\nUse `/unlock` to restore normal permissions."
                )
            else:
                text = f"🔓 **Channel Unlocked**\n\n{channel.mention} has been unlocked.\n**Reason:** {reason}"
            await safe_respond(interaction, text, ephemeral=False)
            count = 1
        else:
            count = 0
            prefix = "Server lockdown" if locked else "Server unlock"
            for channel in interaction.guild.text_channels:
                try:
                    await self._set_locked(channel, locked, f"{prefix}: {reason}")
                    count += 1
                except discord.HTTPException as e:
                    logger.warning(f"Could Not {verb.title()} Channel", [
                        ("Channel", f"#{channel.name} ({channel.id})"),
                        ("Error", str(e)[:100]),
                    ])

            action_text = "Locked" if locked else "Unlocked"
            self._record(
                interaction, f"{verb}_server", interaction.guild,
                f"{action_text} {count} channels: {reason}",
            )
            if locked:
                text = (
                    f"🔒 **SERVER LOCKDOWN ACTIVATED**\n\n**{count}** channels have been locked.\n"
                    f"**Reason:** {reason}\n\n⚠️ **Only administrators can send messages.**\n"
                    "Use `/unlock server` to restore normal permissions."
                )
            else:
                text = (
                    f"🔓 **SERVER UNLOCKED**\n\n**{count}** channels have been unlocked.\n"
                    f"**Reason:** {reason}\n\n✅ Normal chat permissions restored."
                )
            await safe_respond(interaction, text, ephemeral=False)

        logger.tree("Server Locked" if locked else "Server Unlocked", [
            ("Scope", scope),
            ("Channels", str(count)),
            ("By", f"{interaction.user.name} ({interaction.user.id})"),
            ("Reason", reason[:50]),
        ], emoji="🔒" if locked else "🔓")

    @app_commands.command(name="lockdown", description="Lock down a channel or the entire server")
    @app_commands.describe(scope="Lockdown scope", reason="Reason for lockdown")
    async def lockdown(
        self,
        interaction: discord.Interaction,
        scope: Literal["channel", "server"],
        reason: Optional[str] = None,
    ) -> None:
        if not await check_staff_permission(interaction):
            return
        await self._lock(interaction, scope, reason or "Emergency lockdown", locked=True)

    @app_commands.command(name="unlock", description="Unlock a channel or the entire server")
    @app_commands.describe(scope="Unlock scope", reason="Reason for unlock")
    async def unlock(
        self,
        interaction: discord.Interaction,
        scope: Literal["channel", "server"],
        reason: Optional[str] = None,
    ) -> None:
        if not await check_staff_permission(interaction):
            return
        await self._lock(interaction, scope, reason or "Lockdown lifted", locked=False)


__all__ = ["ModerationCog", "can_moderate"]
