"""
UAS Bot - Interaction Events
============================

Slash command usage is audited and counts as staff activity.
"""

from typing import TYPE_CHECKING, Union

import discord
from discord import app_commands
from discord.ext import commands

from src.core.logger import logger

if TYPE_CHECKING:
    from src.bot import UASBot


class InteractionEvents(commands.Cog):
    """Interaction event handlers."""

    def __init__(self, bot: "UASBot") -> None:
        self.bot = bot

    @commands.Cog.listener()
    async def on_interaction(self, interaction: discord.Interaction) -> None:
        if self.bot.shift_manager and interaction.guild is not None:
            self.bot.shift_manager.update_activity(interaction.user.id)

    @commands.Cog.listener()
    async def on_app_command_completion(
        self,
        interaction: discord.Interaction,
        command: Union[app_commands.Command, app_commands.ContextMenu],
    ) -> None:
        logger.debug(f"/{command.qualified_name} used by {interaction.user} ({interaction.user.id})")
        if self.bot.audit_logger:
            self.bot.audit_logger.log_command(interaction)


async def setup(bot: "UASBot") -> None:
    await bot.add_cog(InteractionEvents(bot))
