"""
UAS Bot - Premium Command Package
=================================

Developer-only premium subscription grants.
"""

from typing import TYPE_CHECKING

from src.core.logger import logger

from .cog import PremiumCog

if TYPE_CHECKING:
    from src.bot import UASBot


async def setup(bot: "UASBot") -> None:
    """Load the Premium cog."""
    await bot.add_cog(PremiumCog(bot))
    logger.tree("Premium Cog Loaded", [
        ("Commands", "/givepremium"),
    ], emoji="💎")


__all__ = ["PremiumCog", "setup"]
