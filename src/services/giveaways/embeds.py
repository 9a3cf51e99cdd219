"""
UAS Bot - Giveaway Embeds
=========================

Embeds for running, ended and rerolled giveaways.
"""

from datetime import datetime, timezone
from typing import List

import discord

from src.core.config import EmbedColors
from src.utils.footer import set_footer


def _mentions(user_ids: List[int]) -> str:
    return ", ".join(f"<@{uid}>" for uid in user_ids)


def build_giveaway_embed(prize: str, end_time: float, participants: int, winner_count: int = 1) -> discord.Embed:
    """Embed for a running giveaway."""
    ts = int(end_time)
    description = (
        f"**Prize:** {prize}\n\n"
        f"**How to Enter:**\n"
        f"🎁 Click the button below to enter\n"
        f"📝 Admins can manually add participants\n\n"
        f"**Ends:** <t:{ts}:F>\n"
        f"**Ends in:** <t:{ts}:R>\n\n"
    )
    if winner_count > 1:
        description += f"**Winners:** {winner_count}\n"
    description += f"**Participants:** {participants}"

    embed = discord.Embed(
        title="🎉 GIVEAWAY 🎉",
        description=description,
        color=EmbedColors.GREEN,
        timestamp=datetime.now(timezone.utc),
    )
    set_footer(embed, text="Good luck to everyone!")
    return embed


def build_result_embed(prize: str, winners: List[int], participants: int) -> discord.Embed:
    """Embed replacing the giveaway once it concludes."""
    if not winners:
        embed = discord.Embed(
            title="🎉 GIVEAWAY ENDED 🎉",
            description=f"**Prize:** {prize}\n\n😢 **No participants!**\n\nBetter luck next time!",
            color=EmbedColors.RED,
            timestamp=datetime.now(timezone.utc),
        )
    else:
        label = "Winner" if len(winners) == 1 else "Winners"
        embed = discord.Embed(
            title="🎉 GIVEAWAY ENDED 🎉",
            description=(
                f"**Prize:** {prize}\n\n"
                f"🎊 **{label}:** {_mentions(winners)}\n\n"
                f"*Congratulations! Please contact an administrator to claim your prize.*\n\n"
                f"**Total Participants:** {participants}"
            ),
            color=EmbedColors.GOLD,
            timestamp=datetime.now(timezone.utc),
        )
    set_footer(embed, text="Giveaway ended")
    return embed


def build_reroll_embed(prize: str, winners: List[int]) -> discord.Embed:
    label = "New Winner" if len(winners) == 1 else "New Winners"
    embed = discord.Embed(
        title="🎉 GIVEAWAY REROLL 🎉",
        description=(
            f"**Prize:** {prize}\n\n"
            f"🎊 **{label}:** {_mentions(winners)}\n\n"
            f"*Congratulations! Please contact an administrator to claim your prize.*"
        ),
        color=EmbedColors.GOLD,
        timestamp=datetime.now(timezone.utc),
    )
    set_footer(embed, text="Rerolled by administrator")
    return embed


__all__ = ["build_giveaway_embed", "build_result_embed", "build_reroll_embed"]
