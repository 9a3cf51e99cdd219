"""
UAS Bot - Centralized Constants
===============================

All magic numbers and constants are defined here for maintainability.
Import from this module instead of hardcoding values.
"""

# =============================================================================
# Time Constants (in seconds)
# =============================================================================

SECONDS_PER_MINUTE = 60
SECONDS_PER_HOUR = 3600
SECONDS_PER_DAY = 86400

MS_PER_SECOND = 1000

# =============================================================================
# Database Constants
# =============================================================================

DB_CONNECTION_TIMEOUT = 30.0          # sqlite3.connect timeout
SQLITE_BUSY_TIMEOUT = 5000            # PRAGMA busy_timeout (ms)

# =============================================================================
# Giveaway Constants
# =============================================================================

GIVEAWAY_ENTRANTS_PER_PAGE = 25
GIVEAWAY_LIST_MAX_CHARS = 4000
GIVEAWAY_PRIZE_AUTOCOMPLETE_LEN = 50
GIVEAWAY_BUTTON_PREFIX = "giveaway_enter"

# =============================================================================
# Shift Constants
# =============================================================================

SHIFT_WARNING_CHECK_INTERVAL = 15 * SECONDS_PER_MINUTE
SHIFT_CLOCKOUT_CHECK_INTERVAL = 30 * SECONDS_PER_MINUTE
SHIFT_SYNC_INTERVAL = 5 * SECONDS_PER_MINUTE
SHIFT_REPORT_MIN_DAYS = 1
SHIFT_REPORT_MAX_DAYS = 30
TIMESHEET_MAX_DAYS = 90
TIMESHEET_LIST_LIMIT = 10

# =============================================================================
# Casino API Constants
# =============================================================================

CASINO_DEFAULT_BASE_URL = "http://localhost:25565"
CASINO_DEFAULT_API_KEY = "default_uas_key"
CASINO_DEFAULT_BOT_ID = "1404027373048823838"
CASINO_EMERGENCY_CONFIRMATION_CODE = "EMERGENCY_CLEANUP_CONFIRM"
CASINO_EMERGENCY_CONFIRM_TEXT = "EMERGENCY CLEANUP"
CASINO_BULK_STOP_LIMIT = 50
CASINO_HIGH_LOAD_THRESHOLD = 10

# =============================================================================
# Economy Admin Constants
# =============================================================================

GIVE_MAX_ADMIN = 1_000_000
GIVE_MAX_DEVELOPER = 10_000_000

# =============================================================================
# Subscription Constants
# =============================================================================

SUBSCRIPTION_DEFAULT_DAYS = 30
SUBSCRIPTION_TIERS = ("ruby_subscription", "diamond")

# =============================================================================
# Moderation Constants
# =============================================================================

MAX_TIMEOUT_SECONDS = 28 * SECONDS_PER_DAY  # Discord timeout ceiling
MAX_SLOWMODE_SECONDS = 6 * SECONDS_PER_HOUR
BAN_DELETE_MAX_DAYS = 7
PURGE_MAX_MESSAGES = 100
PURGE_MAX_AGE = 14 * SECONDS_PER_DAY  # bulk delete only reaches 14 days back
TEMPBAN_CHECK_INTERVAL = SECONDS_PER_MINUTE

# =============================================================================
# Audit Log Constants
# =============================================================================

AUDIT_QUEUE_MAX_SIZE = 1000
AUDIT_CONTENT_PREVIEW = 1000

# =============================================================================
# Economy Analyzer Constants
# =============================================================================

WEALTH_POOR_MAX = 50_000
WEALTH_MIDDLE_MAX = 500_000
WEALTH_RICH_MAX = 2_000_000
WEALTH_WEALTHY_MAX = 10_000_000
ANALYSIS_CACHE_TTL = 5 * SECONDS_PER_MINUTE

# =============================================================================
# Suggestion / Bug Report Constants
# =============================================================================

SUGGESTION_TITLE_MAX = 100
SUGGESTION_DESCRIPTION_MAX = 1000
SUGGESTION_STATUSES = ("pending", "in_review", "approved", "rejected", "implemented")
BUG_REPORT_STATUSES = ("pending", "investigating", "in_progress", "resolved", "closed", "duplicate")
BUG_REPORT_PRIORITIES = ("low", "medium", "high", "critical")

# =============================================================================
# Discord Limits
# =============================================================================

EMBED_DESCRIPTION_LIMIT = 4096
EMBED_FIELD_VALUE_LIMIT = 1024
AUTOCOMPLETE_LIMIT = 25
