"""
UAS Bot - Channel Lookup Helpers
================================

Cache-first channel and message resolution for records that store
channel_id/message_id pairs (giveaways, suggestions, bug reports).
"""

from typing import Optional

import discord


async def resolve_channel(client: discord.Client, channel_id: Optional[int]) -> Optional[discord.abc.Messageable]:
    """Get a channel or thread from cache, falling back to the API."""
    if not channel_id:
        return None

    channel = client.get_channel(channel_id)
    if channel is not None:
        return channel
    try:
        return await client.fetch_channel(channel_id)
    except discord.HTTPException:
        return None


async def fetch_message(
    client: discord.Client,
    channel_id: Optional[int],
    message_id: Optional[int],
) -> Optional[discord.Message]:
    """Fetch a stored message, or None if the channel or message is gone."""
    if not message_id:
        return None

    channel = await resolve_channel(client, channel_id)
    if channel is None:
        return None
    try:
        return await channel.fetch_message(message_id)
    except discord.HTTPException:
        return None


__all__ = ["resolve_channel", "fetch_message"]
