"""
UAS Bot - Audit Command Package
===============================

Per-guild audit log settings.
"""

from typing import TYPE_CHECKING

from src.core.logger import logger

from .cog import AuditCog

if TYPE_CHECKING:
    from src.bot import UASBot


async def setup(bot: "UASBot") -> None:
    """Load the Audit cog."""
    await bot.add_cog(AuditCog(bot))
    logger.tree("Audit Cog Loaded", [
        ("Commands", "/audit status|enable|disable|channel|test"),
    ], emoji="📜")


__all__ = ["AuditCog", "setup"]
