"""
UAS Bot - Casino Command Package
================================

Casino session control and admin tools.
"""

from typing import TYPE_CHECKING

from src.core.logger import logger

from .cog import CasinoCog, EmergencyCleanupModal

if TYPE_CHECKING:
    from src.bot import UASBot


async def setup(bot: "UASBot") -> None:
    """Load the Casino cog."""
    await bot.add_cog(CasinoCog(bot))
    logger.tree("Casino Cog Loaded", [
        ("Commands", "/casino, /casino-admin"),
        ("API", bot.casino_client.base_url),
    ], emoji="🎰")


__all__ = ["CasinoCog", "EmergencyCleanupModal", "setup"]
