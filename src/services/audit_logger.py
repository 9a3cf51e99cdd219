"""
UAS Bot - Audit Logger Service
==============================

Queue-based server audit log.

DESIGN:
    Events are built by the log_* helpers, written to the audit_log
    table immediately and queued for posting. A background loop drains
    up to `audit_batch_size` events per `audit_flush_interval` into the
    guild's configured audit channel, with a short pause between sends
    to stay clear of rate limits.

    Per-guild settings (enabled, channel) live in audit_settings and are
    cached in memory; events for disabled guilds are dropped.
"""

import asyncio
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Dict, List, Optional, Sequence, Tuple

import discord

from src.core.logger import logger
from src.core.config import get_config
from src.core.database import get_db, AuditSettingsRecord
from src.core.constants import (
    AUDIT_CONTENT_PREVIEW,
    AUDIT_QUEUE_MAX_SIZE,
    EMBED_FIELD_VALUE_LIMIT,
    SECONDS_PER_DAY,
)

if TYPE_CHECKING:
    from src.bot import UASBot


CATEGORY_COLORS: Dict[str, int] = {
    "message": 0x3498DB,
    "user": 0x2ECC71,
    "role": 0xE74C3C,
    "channel": 0xF39C12,
    "voice": 0x9B59B6,
    "moderation": 0xE91E63,
    "server": 0x34495E,
    "security": 0xFF0000,
    "default": 0x95A5A6,
}

SEND_PAUSE = 0.1

Field = Tuple[str, str, bool]


def _clip(text: Optional[str], limit: int = EMBED_FIELD_VALUE_LIMIT) -> str:
    if not text:
        return "*No text content*"
    return text if len(text) <= limit else text[:limit - 3] + "..."


@dataclass
class AuditEvent:
    """One queued audit entry."""

    guild_id: int
    category: str
    event_type: str
    title: str
    description: str
    fields: List[Field] = field(default_factory=list)
    actor_id: Optional[int] = None
    target_id: Optional[int] = None
    thumbnail: Optional[str] = None
    created_at: float = field(default_factory=time.time)

    def to_embed(self) -> discord.Embed:
        embed = discord.Embed(
            title=self.title,
            description=self.description,
            color=CATEGORY_COLORS.get(self.category, CATEGORY_COLORS["default"]),
            timestamp=datetime.fromtimestamp(self.created_at, tz=timezone.utc),
        )
        for name, value, inline in self.fields:
            embed.add_field(name=name, value=_clip(value), inline=inline)
        if self.thumbnail:
            embed.set_thumbnail(url=self.thumbnail)
        embed.set_footer(text=f"Event: {self.category}")
        return embed


class AuditLogger:
    """
    Queues audit events and posts them to each guild's audit channel.

    Attributes:
        bot: Main bot instance.
        config: Bot configuration.
        db: Database manager.
        queue: Pending events.
        settings: Cached per-guild settings.
        task: Drain loop task.
        running: Whether the drain loop is active.
    """

    def __init__(self, bot: "UASBot") -> None:
        self.bot = bot
        self.config = get_config()
        self.db = get_db()
        self.queue: asyncio.Queue = asyncio.Queue(maxsize=AUDIT_QUEUE_MAX_SIZE)
        self.settings: Dict[int, AuditSettingsRecord] = {}
        self.task: Optional[asyncio.Task] = None
        self.running: bool = False
        self.sent_count: int = 0
        self.dropped_count: int = 0

    # =========================================================================
    # Lifecycle Management
    # =========================================================================

    async def start(self) -> None:
        if self.task and not self.task.done():
            self.task.cancel()

        self.running = True
        self.task = asyncio.create_task(self._drain_loop())

        logger.tree("Audit Logger Started", [
            ("Flush Interval", f"{self.config.audit_flush_interval}s"),
            ("Batch Size", str(self.config.audit_batch_size)),
        ], emoji="📜")

    async def stop(self) -> None:
        self.running = False

        if self.task and not self.task.done():
            self.task.cancel()
            try:
                await self.task
            except asyncio.CancelledError:
                pass

        logger.info("Audit Logger Stopped", [
            ("Sent", str(self.sent_count)),
            ("Pending", str(self.queue.qsize())),
        ])

    async def _drain_loop(self) -> None:
        await self.bot.wait_until_ready()

        while self.running:
            try:
                await self.flush()
                await asyncio.sleep(self.config.audit_flush_interval)
            except asyncio.CancelledError:
                break
            except Exception as e:
                logger.error("Audit Drain Error", [
                    ("Error Type", type(e).__name__),
                    ("Error", str(e)[:100]),
                ])
                await asyncio.sleep(self.config.audit_flush_interval)

    async def flush(self) -> int:
        """Post up to one batch of queued events. Returns events posted."""
        sent = 0
        for _ in range(self.config.audit_batch_size):
            try:
                event = self.queue.get_nowait()
            except asyncio.QueueEmpty:
                break
            if await self._send(event):
                sent += 1
            if not self.queue.empty():
                await asyncio.sleep(SEND_PAUSE)
        self.sent_count += sent
        return sent

    async def _send(self, event: AuditEvent) -> bool:
        settings = self.get_settings(event.guild_id)
        channel_id = settings.get("channel_id")
        if not channel_id:
            return False

        channel = self.bot.get_channel(channel_id)
        if channel is None:
            logger.warning("Audit Channel Not Found", [
                ("Guild ID", str(event.guild_id)),
                ("Channel ID", str(channel_id)),
            ])
            return False

        try:
            await channel.send(embed=event.to_embed())
            return True
        except discord.HTTPException as e:
            logger.error("Audit Send Failed", [
                ("Event", event.event_type),
                ("Error Type", type(e).__name__),
                ("Error", str(e)[:100]),
            ])
            return False

    # =========================================================================
    # Settings
    # =========================================================================

    def get_settings(self, guild_id: int) -> AuditSettingsRecord:
        if guild_id not in self.settings:
            self.settings[guild_id] = self.db.get_audit_settings(guild_id)
        return self.settings[guild_id]

    def is_enabled(self, guild_id: int) -> bool:
        settings = self.get_settings(guild_id)
        return bool(settings.get("enabled")) and bool(settings.get("channel_id"))

    def enable(self, guild_id: int) -> AuditSettingsRecord:
        self.settings[guild_id] = self.db.save_audit_settings(guild_id, enabled=True)
        logger.tree("Audit Logging Enabled", [("Guild ID", str(guild_id))], emoji="📜")
        return self.settings[guild_id]

    def disable(self, guild_id: int) -> AuditSettingsRecord:
        self.settings[guild_id] = self.db.save_audit_settings(guild_id, enabled=False)
        logger.tree("Audit Logging Disabled", [("Guild ID", str(guild_id))], emoji="📜")
        return self.settings[guild_id]

    def set_channel(self, guild_id: int, channel_id: int) -> AuditSettingsRecord:
        self.settings[guild_id] = self.db.save_audit_settings(guild_id, channel_id=channel_id)
        logger.tree("Audit Channel Set", [
            ("Guild ID", str(guild_id)),
            ("Channel ID", str(channel_id)),
        ], emoji="📜")
        return self.settings[guild_id]

    def get_queue_size(self) -> int:
        return self.queue.qsize()

    # =========================================================================
    # Core Logging
    # =========================================================================

    def log(
        self,
        guild_id: int,
        category: str,
        event_type: str,
        title: str,
        description: str,
        fields: Sequence[Field] = (),
        actor_id: Optional[int] = None,
        target_id: Optional[int] = None,
        thumbnail: Optional[str] = None,
        force: bool = False,
    ) -> Optional[AuditEvent]:
        """
        Persist an event and queue it for posting.

        Returns:
            The queued event, or None if audit logging is off for the guild.
        """
        if not force and not self.is_enabled(guild_id):
            return None

        event = AuditEvent(
            guild_id=guild_id,
            category=category,
            event_type=event_type,
            title=title,
            description=description,
            fields=list(fields),
            actor_id=actor_id,
            target_id=target_id,
            thumbnail=thumbnail,
        )

        content = description
        if event.fields:
            content += "\n" + "\n".join(f"{n}: {v}" for n, v, _ in event.fields)
        self.db.add_audit_event(
            guild_id, category, event_type, content[:AUDIT_CONTENT_PREVIEW],
            actor_id=actor_id, target_id=target_id, created_at=event.created_at,
        )

        try:
            self.queue.put_nowait(event)
        except asyncio.QueueFull:
            self.dropped_count += 1
            logger.warning("Audit Queue Full", [
                ("Event", event_type),
                ("Dropped Total", str(self.dropped_count)),
            ])
            return None
        return event

    # =========================================================================
    # Message Events
    # =========================================================================

    def log_message_delete(self, message: discord.Message) -> Optional[AuditEvent]:
        if message.guild is None or message.author.bot:
            return None
        attachments = ", ".join(a.filename for a in message.attachments) or "None"
        return self.log(
            message.guild.id, "message", "message_delete", "🗑️ Message Deleted",
            f"**Author:** {message.author} ({message.author.id})\n"
            f"**Channel:** {message.channel.mention}\n"
            f"**Message ID:** {message.id}",
            [("Content", _clip(message.content), False), ("Attachments", attachments, True)],
            target_id=message.author.id,
            thumbnail=message.author.display_avatar.url,
        )

    def log_message_edit(self, before: discord.Message, after: discord.Message) -> Optional[AuditEvent]:
        if after.guild is None or after.author.bot or before.content == after.content:
            return None
        return self.log(
            after.guild.id, "message", "message_edit", "✏️ Message Edited",
            f"**Author:** {after.author} ({after.author.id})\n"
            f"**Channel:** {after.channel.mention}\n"
            f"**Message ID:** {after.id}",
            [
                ("Before", _clip(before.content, 512), False),
                ("After", _clip(after.content, 512), False),
                ("Link", f"[Jump to Message]({after.jump_url})", True),
            ],
            target_id=after.author.id,
            thumbnail=after.author.display_avatar.url,
        )

    # =========================================================================
    # Member Events
    # =========================================================================

    def log_member_join(self, member: discord.Member) -> Optional[AuditEvent]:
        age_days = int((time.time() - member.created_at.timestamp()) // SECONDS_PER_DAY)
        return self.log(
            member.guild.id, "user", "member_join", "📥 Member Joined",
            f"**User:** {member} ({member.id})\n"
            f"**Account Created:** <t:{int(member.created_at.timestamp())}:R>",
            [
                ("Account Age", f"{age_days} days", True),
                ("Join Position", f"#{member.guild.member_count}", True),
                ("Is Bot", "Yes" if member.bot else "No", True),
            ],
            target_id=member.id,
            thumbnail=member.display_avatar.url,
        )

    def log_member_leave(self, member: discord.Member) -> Optional[AuditEvent]:
        if member.joined_at:
            joined = f"<t:{int(member.joined_at.timestamp())}:R>"
            days = f"{int((time.time() - member.joined_at.timestamp()) // SECONDS_PER_DAY)} days"
        else:
            joined = days = "Unknown"
        roles = [r.name for r in member.roles if not r.is_default()]
        roles_text = ", ".join(roles[:5]) + ("..." if len(roles) > 5 else "") if roles else "None"
        return self.log(
            member.guild.id, "user", "member_leave", "📤 Member Left",
            f"**User:** {member} ({member.id})\n**Joined:** {joined}",
            [("Time in Server", days, True), ("Roles", roles_text, True)],
            target_id=member.id,
            thumbnail=member.display_avatar.url,
        )

    def log_member_update(self, before: discord.Member, after: discord.Member) -> Optional[AuditEvent]:
        changes = []
        if before.nick != after.nick:
            changes.append(f"**Nickname:** {before.nick or 'None'} → {after.nick or 'None'}")

        before_roles = set(before.roles)
        after_roles = set(after.roles)
        added = [r.name for r in after.roles if r not in before_roles]
        removed = [r.name for r in before.roles if r not in after_roles]
        if added:
            changes.append(f"**Roles Added:** {', '.join(added)}")
        if removed:
            changes.append(f"**Roles Removed:** {', '.join(removed)}")

        if not changes:
            return None
        category = "role" if added or removed else "user"
        return self.log(
            after.guild.id, category, "member_update", "👤 Member Updated",
            f"**Member:** {after} ({after.id})",
            [("Changes", "\n".join(changes), False)],
            target_id=after.id,
            thumbnail=after.display_avatar.url,
        )

    # =========================================================================
    # Channel Events
    # =========================================================================

    def log_channel_create(self, channel: discord.abc.GuildChannel) -> Optional[AuditEvent]:
        return self.log(
            channel.guild.id, "channel", "channel_create", "📝 Channel Created",
            f"**Channel:** {channel.name} ({channel.id})\n**Type:** {channel.type}",
            [
                ("Category", channel.category.name if channel.category else "None", True),
                ("Position", str(channel.position), True),
            ],
        )

    def log_channel_delete(self, channel: discord.abc.GuildChannel) -> Optional[AuditEvent]:
        return self.log(
            channel.guild.id, "channel", "channel_delete", "🗑️ Channel Deleted",
            f"**Channel:** {channel.name} ({channel.id})\n**Type:** {channel.type}",
            [("Category", channel.category.name if channel.category else "None", True)],
        )

    # =========================================================================
    # Moderation Events
    # =========================================================================

    def log_ban(
        self,
        guild: discord.Guild,
        user: discord.abc.User,
        moderator: Optional[str] = None,
        reason: Optional[str] = None,
    ) -> Optional[AuditEvent]:
        return self.log(
            guild.id, "moderation", "member_ban", "🔨 Member Banned",
            f"**User:** {user} ({user.id})\n**Moderator:** {moderator or 'Unknown'}",
            [("Reason", reason or "No reason provided", False)],
            target_id=user.id,
            thumbnail=user.display_avatar.url,
        )

    def log_unban(
        self,
        guild: discord.Guild,
        user: discord.abc.User,
        moderator: Optional[str] = None,
        reason: Optional[str] = None,
    ) -> Optional[AuditEvent]:
        return self.log(
            guild.id, "moderation", "member_unban", "🔓 Member Unbanned",
            f"**User:** {user} ({user.id})\n**Moderator:** {moderator or 'Unknown'}",
            [("Reason", reason or "No reason provided", False)],
            target_id=user.id,
            thumbnail=user.display_avatar.url,
        )

    def log_moderation(
        self,
        guild_id: int,
        action: str,
        moderator: discord.abc.User,
        target: discord.abc.Snowflake,
        reason: str,
        extra: Sequence[Field] = (),
    ) -> Optional[AuditEvent]:
        """Bot-issued moderation action. The target may be a user, a channel or the guild."""
        return self.log(
            guild_id, "moderation", action, f"🛡️ {action.replace('_', ' ').title()}",
            f"**Target:** {target} ({target.id})\n**Moderator:** {moderator} ({moderator.id})",
            [("Reason", reason, False), *extra],
            actor_id=moderator.id,
            target_id=target.id,
        )

    # =========================================================================
    # Voice Events
    # =========================================================================

    def log_voice_state(
        self,
        member: discord.Member,
        before: discord.VoiceState,
        after: discord.VoiceState,
    ) -> Optional[AuditEvent]:
        description = f"**Member:** {member} ({member.id})"
        if before.channel is None and after.channel is not None:
            title, event_type = "🔊 Voice Channel Joined", "voice_join"
            description += f"\n**Channel:** {after.channel.name}"
        elif before.channel is not None and after.channel is None:
            title, event_type = "🔇 Voice Channel Left", "voice_leave"
            description += f"\n**Channel:** {before.channel.name}"
        elif before.channel is not None and after.channel is not None and before.channel.id != after.channel.id:
            title, event_type = "🔄 Voice Channel Moved", "voice_move"
            description += f"\n**From:** {before.channel.name}\n**To:** {after.channel.name}"
        else:
            return None

        return self.log(
            member.guild.id, "voice", event_type, title, description,
            target_id=member.id,
            thumbnail=member.display_avatar.url,
        )

    # =========================================================================
    # Command Events
    # =========================================================================

    def log_command(self, interaction: discord.Interaction) -> Optional[AuditEvent]:
        if interaction.guild is None or interaction.command is None:
            return None

        options = interaction.data.get("options", []) if interaction.data else []
        options_text = "\n".join(
            f"{opt.get('name')}: {opt.get('value')}" for opt in options if "value" in opt
        ) or "None"
        channel = interaction.channel.mention if interaction.channel else "Unknown"

        return self.log(
            interaction.guild.id, "message", "command", "⚡ Command Executed",
            f"**User:** {interaction.user} ({interaction.user.id})\n"
            f"**Command:** /{interaction.command.qualified_name}\n"
            f"**Channel:** {channel}",
            [("Options", options_text, False)],
            actor_id=interaction.user.id,
            thumbnail=interaction.user.display_avatar.url,
        )


__all__ = ["AuditLogger", "AuditEvent", "CATEGORY_COLORS"]
