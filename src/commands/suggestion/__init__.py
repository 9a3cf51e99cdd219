"""
UAS Bot - Suggestion Command Package
====================================

/suggestion and its persistent vote/discuss/details buttons.
"""

from typing import TYPE_CHECKING

from src.core.logger import logger

from .cog import SuggestionCog, generate_suggestion_id
from .views import SuggestionButton, SuggestionStatusSelect

if TYPE_CHECKING:
    from src.bot import UASBot


async def setup(bot: "UASBot") -> None:
    """Load the Suggestion cog and register its persistent components."""
    bot.add_dynamic_items(SuggestionButton, SuggestionStatusSelect)
    await bot.add_cog(SuggestionCog(bot))
    logger.tree("Suggestion Cog Loaded", [
        ("Commands", "/suggestion"),
        ("Dynamic Items", "SuggestionButton, SuggestionStatusSelect"),
    ], emoji="📋")


__all__ = ["SuggestionCog", "generate_suggestion_id", "setup"]
