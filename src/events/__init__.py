"""
UAS Bot - Events Package
========================

Listener Cogs feeding the audit logger and shift activity tracking.

DESIGN:
    Event routing:
    - messages.py: Message create/delete/edit
    - members.py: Member join/leave/update, bans
    - channels.py: Channel create/delete, voice state
    - interactions.py: Slash command usage
"""

# =============================================================================
# Event Cog Registry
# =============================================================================

EVENT_COGS = [
    "src.events.messages",
    "src.events.members",
    "src.events.channels",
    "src.events.interactions",
]


__all__ = [
    "EVENT_COGS",
]
