"""
UAS Bot - Economy Command Package
=================================

Admin balance tools: off-economy flag, balance edits and gifts.
"""

from typing import TYPE_CHECKING

from src.core.logger import logger

from .cog import EconomyCog

if TYPE_CHECKING:
    from src.bot import UASBot


async def setup(bot: "UASBot") -> None:
    """Load the Economy cog."""
    await bot.add_cog(EconomyCog(bot))
    logger.tree("Economy Cog Loaded", [
        ("Commands", "/moveoffeco, /editmoney, /give"),
    ], emoji="💰")


__all__ = ["EconomyCog", "setup"]
