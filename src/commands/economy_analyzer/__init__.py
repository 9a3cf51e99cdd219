"""
UAS Bot - Economy Analyzer Command Package
==========================================
"""

from typing import TYPE_CHECKING

from src.core.logger import logger

from .cog import EconomyAnalyzerCog

if TYPE_CHECKING:
    from src.bot import UASBot


async def setup(bot: "UASBot") -> None:
    await bot.add_cog(EconomyAnalyzerCog(bot))
    logger.tree("Economy Analyzer Cog Loaded", [
        ("Commands", "/economyanalyzer status, analyze"),
    ], emoji="📊")


__all__ = ["EconomyAnalyzerCog", "setup"]
