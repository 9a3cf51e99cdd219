"""
UAS Bot - Shift Command Package
===============================

Staff shift tracking and sleep mode commands.
"""

from typing import TYPE_CHECKING

from src.core.logger import logger

from .cog import ShiftCog

if TYPE_CHECKING:
    from src.bot import UASBot


async def setup(bot: "UASBot") -> None:
    """Load the Shift cog."""
    await bot.add_cog(ShiftCog(bot))
    logger.tree("Shift Cog Loaded", [
        ("Commands", "/clockin, /clockout, /clockoutall, /shift, /sleepmode"),
    ], emoji="🕐")


__all__ = ["ShiftCog", "setup"]
