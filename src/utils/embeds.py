"""
UAS Bot - Embed Builders
========================

Small constructors for the embeds every cog sends.
"""

from datetime import datetime, timezone
from typing import Optional

import discord

from src.core.config import EmbedColors
from src.utils.footer import set_footer


def build_embed(
    title: str,
    description: Optional[str] = None,
    color: int = EmbedColors.INFO,
    footer: Optional[str] = None,
) -> discord.Embed:
    """Build a timestamped embed with the standard footer."""
    embed = discord.Embed(
        title=title,
        description=description,
        color=color,
        timestamp=datetime.now(timezone.utc),
    )
    set_footer(embed, text=footer)
    return embed


def build_error_embed(title: str, description: str, footer: Optional[str] = None) -> discord.Embed:
    """Red error embed used for failures and access denials."""
    return build_embed(title, description, EmbedColors.ERROR, footer)


def build_success_embed(title: str, description: Optional[str] = None, footer: Optional[str] = None) -> discord.Embed:
    return build_embed(title, description, EmbedColors.SUCCESS, footer)


__all__ = ["build_embed", "build_error_embed", "build_success_embed"]
