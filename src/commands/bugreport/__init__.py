"""
UAS Bot - Bug Report Command Package
====================================

/bugreport and its persistent developer controls.
"""

from typing import TYPE_CHECKING

from src.core.logger import logger

from .cog import BugReportCog, generate_report_id
from .views import BugReportButton, BugReportStatusSelect

if TYPE_CHECKING:
    from src.bot import UASBot


async def setup(bot: "UASBot") -> None:
    """Load the Bug Report cog and register its persistent components."""
    bot.add_dynamic_items(BugReportButton, BugReportStatusSelect)
    await bot.add_cog(BugReportCog(bot))
    logger.tree("Bug Report Cog Loaded", [
        ("Commands", "/bugreport"),
        ("Dynamic Items", "BugReportButton, BugReportStatusSelect"),
    ], emoji="🐛")


__all__ = ["BugReportCog", "generate_report_id", "setup"]
