"""
UAS Bot - Message Events
========================

Staff activity on message create; audit entries for deletes and edits.
"""

from typing import TYPE_CHECKING

import discord
from discord.ext import commands

if TYPE_CHECKING:
    from src.bot import UASBot


class MessageEvents(commands.Cog):
    """Message event handlers."""

    def __init__(self, bot: "UASBot") -> None:
        self.bot = bot

    @commands.Cog.listener()
    async def on_message(self, message: discord.Message) -> None:
        if message.author.bot or message.guild is None:
            return
        if self.bot.shift_manager:
            self.bot.shift_manager.update_activity(message.author.id)

    @commands.Cog.listener()
    async def on_message_delete(self, message: discord.Message) -> None:
        if self.bot.audit_logger:
            self.bot.audit_logger.log_message_delete(message)

    @commands.Cog.listener()
    async def on_message_edit(self, before: discord.Message, after: discord.Message) -> None:
        if self.bot.audit_logger:
            self.bot.audit_logger.log_message_edit(before, after)


async def setup(bot: "UASBot") -> None:
    await bot.add_cog(MessageEvents(bot))
