"""
UAS Bot - Interaction Utilities
===============================

Shared helpers for replying to Discord interactions.

safe_respond() picks the initial response or a followup depending on
whether the interaction was already answered or deferred.
"""

from typing import Any, Optional, Union

import discord

from src.core.logger import logger


async def safe_respond(
    interaction: discord.Interaction,
    content: Optional[str] = None,
    *,
    embed: Optional[discord.Embed] = None,
    embeds: Optional[list[discord.Embed]] = None,
    view: Optional[discord.ui.View] = None,
    ephemeral: bool = True,
    allowed_mentions: Optional[discord.AllowedMentions] = None,
) -> Optional[Union[discord.InteractionMessage, discord.WebhookMessage]]:
    """
    Respond to an interaction whether or not it was already answered.

    Expired interactions are logged at debug level and swallowed.

    Returns:
        The sent message if available, None otherwise.
    """
    kwargs: dict[str, Any] = {"ephemeral": ephemeral}

    if content is not None:
        kwargs["content"] = content
    if embed is not None:
        kwargs["embed"] = embed
    if embeds is not None:
        kwargs["embeds"] = embeds
    if view is not None:
        kwargs["view"] = view
    if allowed_mentions is not None:
        kwargs["allowed_mentions"] = allowed_mentions

    try:
        response_done = interaction.response.is_done()
    except discord.HTTPException:
        response_done = True

    try:
        if not response_done:
            await interaction.response.send_message(**kwargs)
            try:
                return await interaction.original_response()
            except discord.HTTPException:
                return None
        return await interaction.followup.send(**kwargs)

    except discord.HTTPException as e:
        logger.debug(f"safe_respond failed: {e.status} - {str(e)[:50]}")
        return None


async def safe_defer(
    interaction: discord.Interaction,
    *,
    ephemeral: bool = True,
    thinking: bool = False,
) -> bool:
    """
    Defer an interaction response.

    Returns:
        True if deferred, False if already responded or the call failed.
    """
    try:
        if interaction.response.is_done():
            return False
        await interaction.response.defer(ephemeral=ephemeral, thinking=thinking)
        return True
    except discord.HTTPException:
        return False


# =============================================================================
# Module Export
# =============================================================================

__all__ = ["safe_respond", "safe_defer"]
