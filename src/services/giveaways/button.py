"""
UAS Bot - Giveaway Enter Button
===============================

Persistent "Enter Giveaway" button. Uses the DynamicItem pattern so
buttons keep working across restarts; the giveaway is identified by
the message the button sits on.

Custom IDs are giveaway_enter:<ms>; buttons posted by the previous
bot use giveaway_enter_<ms> and are accepted too.
"""

import re
import time
from typing import Optional

import discord

from src.core.logger import logger
from src.core.constants import GIVEAWAY_BUTTON_PREFIX


class GiveawayEnterButton(
    discord.ui.DynamicItem[discord.ui.Button],
    template=rf"{GIVEAWAY_BUTTON_PREFIX}(?P<sep>[:_])(?P<token>\d+)",
):
    """Toggle the clicking user's entry in the giveaway."""

    def __init__(self, token: Optional[int] = None, sep: str = ":") -> None:
        token = token if token is not None else int(time.time() * 1000)
        super().__init__(
            discord.ui.Button(
                label="Enter Giveaway",
                emoji="🎁",
                style=discord.ButtonStyle.primary,
                custom_id=f"{GIVEAWAY_BUTTON_PREFIX}{sep}{token}",
            )
        )
        self.token = token

    @classmethod
    async def from_custom_id(
        cls,
        interaction: discord.Interaction,
        item: discord.ui.Button,
        match: re.Match[str],
    ) -> "GiveawayEnterButton":
        return cls(int(match.group("token")), match.group("sep"))

    async def callback(self, interaction: discord.Interaction) -> None:
        manager = getattr(interaction.client, "giveaway_manager", None)
        message = interaction.message

        if manager is None or message is None:
            await interaction.response.send_message(
                "❌ This giveaway has ended or is no longer valid.",
                ephemeral=True,
            )
            return

        try:
            outcome = await manager.toggle_entry(message.id, interaction.user.id, message=message)
        except Exception as e:
            logger.error("Giveaway Entry Failed", [
                ("User", f"{interaction.user.name} ({interaction.user.id})"),
                ("Message ID", str(message.id)),
                ("Error Type", type(e).__name__),
                ("Error", str(e)[:100]),
            ])
            await interaction.response.send_message(
                "❌ Failed to process your entry. Please try again.",
                ephemeral=True,
            )
            return

        if outcome == "entered":
            content = "✅ You have entered the giveaway! Good luck!"
        elif outcome == "left":
            content = "➖ You have been removed from the giveaway!"
        else:
            content = "❌ This giveaway has ended or is no longer valid."

        await interaction.response.send_message(content, ephemeral=True)


def build_enter_view() -> discord.ui.View:
    """Persistent view holding a fresh enter button."""
    view = discord.ui.View(timeout=None)
    view.add_item(GiveawayEnterButton())
    return view


__all__ = ["GiveawayEnterButton", "build_enter_view"]
