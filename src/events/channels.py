"""
UAS Bot - Channel Events
========================

Channel create/delete and voice state changes.
"""

from typing import TYPE_CHECKING

import discord
from discord.ext import commands

if TYPE_CHECKING:
    from src.bot import UASBot


class ChannelEvents(commands.Cog):
    """Channel and voice event handlers."""

    def __init__(self, bot: "UASBot") -> None:
        self.bot = bot

    @commands.Cog.listener()
    async def on_guild_channel_create(self, channel: discord.abc.GuildChannel) -> None:
        if self.bot.audit_logger:
            self.bot.audit_logger.log_channel_create(channel)

    @commands.Cog.listener()
    async def on_guild_channel_delete(self, channel: discord.abc.GuildChannel) -> None:
        if self.bot.audit_logger:
            self.bot.audit_logger.log_channel_delete(channel)

    @commands.Cog.listener()
    async def on_voice_state_update(
        self,
        member: discord.Member,
        before: discord.VoiceState,
        after: discord.VoiceState,
    ) -> None:
        if member.bot or not self.bot.audit_logger:
            return
        self.bot.audit_logger.log_voice_state(member, before, after)


async def setup(bot: "UASBot") -> None:
    await bot.add_cog(ChannelEvents(bot))
