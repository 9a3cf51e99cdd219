"""
UAS Bot - Embed Footer Utility
==============================

Centralized footer for all embeds. The bot's avatar is cached once
after ready.
"""

from typing import Optional

import discord

from src.core.logger import logger


# =============================================================================
# Constants
# =============================================================================

FOOTER_TEXT = "UAS • Utility Admin System"
"""Default footer text; replaced from config by init_footer()."""

CASINO_FOOTER_TEXT = "UAS • ATIVE Casino Integration"
"""Footer used on casino integration embeds."""


# =============================================================================
# Module State
# =============================================================================

_footer_text: str = FOOTER_TEXT
_cached_avatar_url: Optional[str] = None


# =============================================================================
# Initialization
# =============================================================================

async def init_footer(bot: discord.Client, text: Optional[str] = None) -> None:
    """
    Cache the footer text and avatar.

    Should be called once at bot startup after ready.
    """
    global _footer_text, _cached_avatar_url

    if text:
        _footer_text = text

    if bot.user is not None:
        _cached_avatar_url = bot.user.display_avatar.url

    logger.tree("Footer Initialized", [
        ("Text", _footer_text),
        ("Avatar Cached", "Yes" if _cached_avatar_url else "No"),
    ], emoji="📝")


# =============================================================================
# Footer Setter
# =============================================================================

def set_footer(
    embed: discord.Embed,
    text: Optional[str] = None,
    avatar_url: Optional[str] = None,
) -> discord.Embed:
    """
    Set the standard footer on an embed.

    Args:
        embed: The embed to add footer to.
        text: Optional footer text override.
        avatar_url: Optional icon override (uses cached if not provided).

    Returns:
        The embed with footer set.
    """
    url = avatar_url if avatar_url is not None else _cached_avatar_url
    embed.set_footer(text=text or _footer_text, icon_url=url)
    return embed


def set_casino_footer(embed: discord.Embed, suffix: Optional[str] = None) -> discord.Embed:
    """Set the casino integration footer, optionally with a suffix."""
    text = f"{CASINO_FOOTER_TEXT} • {suffix}" if suffix else CASINO_FOOTER_TEXT
    return set_footer(embed, text=text)


# =============================================================================
# Module Export
# =============================================================================

__all__ = [
    "FOOTER_TEXT",
    "CASINO_FOOTER_TEXT",
    "init_footer",
    "set_footer",
    "set_casino_footer",
]
