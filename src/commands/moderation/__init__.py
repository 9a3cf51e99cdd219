"""
UAS Bot - Moderation Command Package
====================================

Timeout-based mute/unmute and warnings with automatic mute.
"""

from typing import TYPE_CHECKING

from src.core.logger import logger

from .cog import ModerationCog

if TYPE_CHECKING:
    from src.bot import UASBot


async def setup(bot: "UASBot") -> None:
    """Load the Moderation cog."""
    await bot.add_cog(ModerationCog(bot))
    logger.tree("Moderation Cog Loaded", [
        ("Commands", "/mute, /unmute, /warn"),
    ], emoji="🛡️")


__all__ = ["ModerationCog", "setup"]
