"""
UAS Bot - Services Package
==========================

Stateful services owned by the bot instance.

DESIGN:
    Services hold the bot's runtime state (timers, queues, in-memory
    shifts) and are created once in UASBot.setup_hook. Background
    services expose start()/stop(); the bot stops them before closing
    the HTTP session and the database.

Available Services:
    GiveawayManager: Timed giveaways, reroll and recovery
    ShiftManager: Staff shifts, pay and inactivity monitoring
    CasinoClient: REST client for the casino bot's session API
    SubscriptionService: Premium grants and expiry
    TempBanService: Automatic unban when a temporary ban expires
    AuditLogger: Queue-based server audit log
    EconomyAnalyzer: Wealth statistics and health rating
"""

from .giveaways import GiveawayManager, setup_giveaways
from .shifts import ShiftManager
from .casino_client import CasinoClient
from .subscriptions import SubscriptionService
from .tempbans import TempBanService
from .audit_logger import AuditLogger
from .economy_analyzer import EconomyAnalyzer
from .shop import cleanup_expired_purchases


__all__ = [
    "GiveawayManager",
    "setup_giveaways",
    "ShiftManager",
    "CasinoClient",
    "SubscriptionService",
    "TempBanService",
    "AuditLogger",
    "EconomyAnalyzer",
    "cleanup_expired_purchases",
]
