"""
UAS Bot - Member Events
=======================

Member join, leave, update and ban events routed to the audit logger.
"""

from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Optional, Tuple

import discord
from discord.ext import commands

from src.core.logger import logger

if TYPE_CHECKING:
    from src.bot import UASBot


# Audit log entries older than this are not matched to a ban/unban
AUDIT_ENTRY_MAX_AGE = timedelta(seconds=15)


async def find_audit_entry(
    guild: discord.Guild,
    action: discord.AuditLogAction,
    target_id: int,
) -> Tuple[Optional[str], Optional[str]]:
    """
    Look up who performed a recent action on a user.

    Returns:
        (moderator, reason), both None when unavailable.
    """
    try:
        async for entry in guild.audit_logs(limit=5, action=action):
            if entry.target is None or entry.target.id != target_id:
                continue
            if datetime.now(timezone.utc) - entry.created_at > AUDIT_ENTRY_MAX_AGE:
                continue
            return (str(entry.user) if entry.user else None, entry.reason)
    except discord.Forbidden:
        logger.debug(f"No audit log access in {guild.name}")
    except discord.HTTPException as e:
        logger.warning("Audit Log Fetch Failed", [
            ("Guild", guild.name),
            ("Error", str(e)[:100]),
        ])
    return None, None


class MemberEvents(commands.Cog):
    """Member event handlers."""

    def __init__(self, bot: "UASBot") -> None:
        self.bot = bot

    @commands.Cog.listener()
    async def on_member_join(self, member: discord.Member) -> None:
        if self.bot.audit_logger:
            self.bot.audit_logger.log_member_join(member)

    @commands.Cog.listener()
    async def on_member_remove(self, member: discord.Member) -> None:
        if self.bot.audit_logger:
            self.bot.audit_logger.log_member_leave(member)

    @commands.Cog.listener()
    async def on_member_update(self, before: discord.Member, after: discord.Member) -> None:
        if self.bot.audit_logger:
            self.bot.audit_logger.log_member_update(before, after)

    @commands.Cog.listener()
    async def on_member_ban(self, guild: discord.Guild, user: discord.User) -> None:
        if not self.bot.audit_logger or not self.bot.audit_logger.is_enabled(guild.id):
            return
        moderator, reason = await find_audit_entry(guild, discord.AuditLogAction.ban, user.id)
        self.bot.audit_logger.log_ban(guild, user, moderator, reason)

    @commands.Cog.listener()
    async def on_member_unban(self, guild: discord.Guild, user: discord.User) -> None:
        if not self.bot.audit_logger or not self.bot.audit_logger.is_enabled(guild.id):
            return
        moderator, reason = await find_audit_entry(guild, discord.AuditLogAction.unban, user.id)
        self.bot.audit_logger.log_unban(guild, user, moderator, reason)


async def setup(bot: "UASBot") -> None:
    await bot.add_cog(MemberEvents(bot))
