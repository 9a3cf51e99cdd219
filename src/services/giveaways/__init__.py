"""
UAS Bot - Giveaway Service
==========================

Timed giveaways with a persistent Enter button, stored entries for
reroll, and recovery of giveaway messages missing from the database.
"""

from typing import TYPE_CHECKING

from .button import GiveawayEnterButton, build_enter_view
from .embeds import build_giveaway_embed, build_result_embed, build_reroll_embed
from .manager import GiveawayError, GiveawayManager, GiveawayState, RecoveredGiveaway
from .parsing import (
    INVALID_DATETIME_MESSAGE,
    PAST_DATETIME_MESSAGE,
    extract_end_timestamp,
    extract_prize,
    parse_end_datetime,
    parse_mentions,
    pick_winners,
)

if TYPE_CHECKING:
    from src.bot import UASBot


def setup_giveaways(bot: "UASBot") -> None:
    """Register giveaway dynamic items."""
    bot.add_dynamic_items(GiveawayEnterButton)


__all__ = [
    # Setup
    "setup_giveaways",
    # Manager
    "GiveawayManager",
    "GiveawayState",
    "GiveawayError",
    "RecoveredGiveaway",
    # Button
    "GiveawayEnterButton",
    "build_enter_view",
    # Embeds
    "build_giveaway_embed",
    "build_result_embed",
    "build_reroll_embed",
    # Parsing
    "INVALID_DATETIME_MESSAGE",
    "PAST_DATETIME_MESSAGE",
    "parse_end_datetime",
    "parse_mentions",
    "extract_prize",
    "extract_end_timestamp",
    "pick_winners",
]
