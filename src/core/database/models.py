"""
UAS Bot - Database Type Definitions
===================================

TypedDict definitions for database records.
"""

from typing import Optional, TypedDict


class BalanceRecord(TypedDict, total=False):
    """Type for user balance rows."""
    user_id: int
    guild_id: int
    wallet: int
    bank: int
    off_economy: int
    created_at: float
    updated_at: float


class SubscriptionRecord(TypedDict, total=False):
    """Type for premium subscription rows (one per user)."""
    user_id: int
    tier: str
    role_id: Optional[int]
    active: int
    granted_by: int
    started_at: float
    expires_at: float


class GiveawayRecord(TypedDict, total=False):
    """Type for giveaway rows."""
    id: int
    message_id: int
    channel_id: int
    guild_id: int
    creator_id: int
    prize: str
    winner_count: int
    end_time: float
    status: str
    winner_ids: str
    created_at: float
    ended_at: Optional[float]


class ShiftRecord(TypedDict, total=False):
    """Type for staff shift rows."""
    id: int
    user_id: int
    guild_id: int
    role: str
    pay_rate: int
    clock_in: float
    clock_out: Optional[float]
    break_minutes: float
    break_started: Optional[float]
    hours_worked: float
    earnings: int
    last_activity: float
    status: str
    end_reason: Optional[str]


class SuggestionRecord(TypedDict, total=False):
    """Type for suggestion rows."""
    suggestion_id: str
    user_id: int
    guild_id: int
    username: str
    title: str
    description: str
    status: str
    upvotes: int
    downvotes: int
    message_id: Optional[int]
    channel_id: Optional[int]
    thread_id: Optional[int]
    admin_notes: Optional[str]
    reviewed_by: Optional[int]
    created_at: float
    updated_at: float


class BugReportRecord(TypedDict, total=False):
    """Type for bug report rows."""
    report_id: str
    user_id: int
    guild_id: int
    username: str
    title: str
    description: str
    steps: Optional[str]
    priority: str
    status: str
    message_id: Optional[int]
    channel_id: Optional[int]
    thread_id: Optional[int]
    updated_by: Optional[int]
    created_at: float
    updated_at: float


class AuditEventRecord(TypedDict, total=False):
    """Type for persisted audit log events."""
    id: int
    guild_id: int
    category: str
    event_type: str
    content: str
    actor_id: Optional[int]
    target_id: Optional[int]
    created_at: float


class AuditSettingsRecord(TypedDict, total=False):
    """Type for per-guild audit settings."""
    guild_id: int
    enabled: int
    channel_id: Optional[int]
    updated_at: float


class WarningRecord(TypedDict, total=False):
    """Type for warning rows."""
    id: int
    user_id: int
    guild_id: int
    moderator_id: int
    reason: Optional[str]
    created_at: float


class ModerationLogRecord(TypedDict, total=False):
    """Type for moderation log rows."""
    id: int
    guild_id: int
    moderator_id: int
    target_id: Optional[int]
    action: str
    reason: Optional[str]
    created_at: float


class TempBanRecord(TypedDict, total=False):
    """Type for temporary ban rows."""
    guild_id: int
    user_id: int
    moderator_id: int
    reason: Optional[str]
    banned_at: float
    expires_at: float


class ShopItemRecord(TypedDict, total=False):
    """Type for shop item rows."""
    id: int
    name: str
    category: str
    price: int
    role_id: Optional[int]
    duration_days: Optional[int]
    active: int
    created_at: float


class ShopPurchaseRecord(TypedDict, total=False):
    """Type for shop purchase rows."""
    id: int
    user_id: int
    guild_id: int
    item_id: int
    price_paid: int
    active: int
    purchased_at: float
    expires_at: Optional[float]


__all__ = [
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
