"""
UAS Bot - Source Package
========================

Package Structure:
- bot.py: UASBot client, service wiring and lifecycle
- commands/: Slash command Cogs, one package per feature
- core/: Configuration, logging, constants and the SQLite layer
- events/: Listener Cogs for audit logging and shift activity
- services/: Giveaways, shifts, casino client, subscriptions, audit
  logger, economy analyzer and shop cleanup
- utils/: Interaction, embed, money, duration and channel helpers

Version: v1.0.0
"""
