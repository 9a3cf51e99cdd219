"""
UAS Bot - Giveaway Command Package
==================================

Giveaway creation, ending, reroll, recovery and entrant listing.
"""

from typing import TYPE_CHECKING

from src.core.logger import logger

from .cog import GiveawayCog

if TYPE_CHECKING:
    from src.bot import UASBot


async def setup(bot: "UASBot") -> None:
    """Load the Giveaway cog."""
    await bot.add_cog(GiveawayCog(bot))
    logger.tree("Giveaway Cog Loaded", [
        ("Commands", "/giveaway, /giveawayrecover, /giveawayshowentrants"),
    ], emoji="🎉")


__all__ = ["GiveawayCog", "setup"]
