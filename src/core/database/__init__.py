"""
UAS Bot - Database Module
=========================

SQLite persistence for the UAS bot, composed from one mixin per concern.
"""

from src.core.database.manager import (
    DatabaseManager,
    get_db,
    DATA_DIR,
    DB_PATH,
)

from src.core.database.models import (
    BalanceRecord,
    SubscriptionRecord,
    GiveawayRecord,
    ShiftRecord,
    SuggestionRecord,
    BugReportRecord,
    AuditEventRecord,
    AuditSettingsRecord,
    WarningRecord,
    ModerationLogRecord,
    TempBanRecord,
    ShopItemRecord,
    ShopPurchaseRecord,
)

__all__ = [
    # Main interface
    "DatabaseManager",
    "get_db",
    "DATA_DIR",
    "DB_PATH",

    # Type definitions
    "BalanceRecord",
    "SubscriptionRecord",
    "GiveawayRecord",
    "ShiftRecord",
    "SuggestionRecord",
    "BugReportRecord",
    "AuditEventRecord",
    "AuditSettingsRecord",
    "WarningRecord",
    "ModerationLogRecord",
    "TempBanRecord",
    "ShopItemRecord",
    "ShopPurchaseRecord",
]
