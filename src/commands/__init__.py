"""
UAS Bot - Commands Package
==========================

Slash command Cogs, one package per feature.

DESIGN:
    Each package exposes async setup(bot), which adds its Cog and
    registers any persistent components. The bot calls
    load_extension() for every entry in COMMAND_COGS.

Available Commands:
    /giveaway, /giveawayrecover, /giveawayentrants: Giveaways (admin)
    /clockin, /clockout, /shiftstatus, /sleepmode: Shifts (staff)
    /casino, /casino-admin: Casino sessions
    /moveoffeco, /editmoney, /give: Economy admin
    /givepremium: Premium subscriptions (developer)
    /suggestion, /bugreport: Community feedback
    /audit: Audit log settings (admin)
    /mute, /unmute, /warn: Moderation (staff)
    /economyanalyzer, /admin-shop: Economy health and shop (admin)
"""

# =============================================================================
# Command Cog Registry
# =============================================================================

COMMAND_COGS = [
    "src.commands.giveaway",
    "src.commands.shift",
    "src.commands.casino",
    "src.commands.economy",
    "src.commands.premium",
    "src.commands.suggestion",
    "src.commands.bugreport",
    "src.commands.audit",
    "src.commands.moderation",
    "src.commands.economy_analyzer",
    "src.commands.shop_admin",
]


__all__ = [
    "COMMAND_COGS",
]
