"""
UAS Bot - Shop Admin Command Package
====================================
"""

from typing import TYPE_CHECKING

from src.core.logger import logger

from .cog import ShopAdminCog

if TYPE_CHECKING:
    from src.bot import UASBot


async def setup(bot: "UASBot") -> None:
    await bot.add_cog(ShopAdminCog(bot))
    logger.tree("Shop Admin Cog Loaded", [
        ("Commands", "/admin-shop stats, cleanup, items"),
    ], emoji="🛠️")


__all__ = ["ShopAdminCog", "setup"]
