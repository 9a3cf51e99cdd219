"""
UAS Bot - Configuration Module
==============================

Centralized configuration management with environment variable validation.

DESIGN:
    A single source of truth for all configuration, loaded from
    environment variables at startup into a dataclass.

    Key patterns:
    - Singleton via get_config() ensures one Config instance
    - Validation happens once at load time, not on every access
    - Permission helpers centralize authorization logic
"""

import os
from dataclasses import dataclass, field
from typing import Optional, Set
from zoneinfo import ZoneInfo


# =============================================================================
# Timezone Configuration
# =============================================================================

NY_TZ = ZoneInfo("America/New_York")
"""Eastern timezone used for log timestamps and report headers."""


# =============================================================================
# Configuration Dataclass
# =============================================================================

@dataclass
class Config:
    """
    Bot configuration loaded from environment variables.

    Attributes:
        discord_token: Discord bot authentication token.
        developer_id: User ID of the primary bot developer.
        developer_ids: Additional developer user IDs.
        admin_role_id: Role ID granting admin access.
        mod_role_id: Role ID granting moderator access.
        casino_base_url: Base URL of the casino bot's session API.
    """

    # -------------------------------------------------------------------------
    # Required: Discord
    # -------------------------------------------------------------------------

    discord_token: str
    developer_id: int

    # -------------------------------------------------------------------------
    # Optional: Permissions
    # -------------------------------------------------------------------------

    developer_ids: Set[int] = field(default_factory=set)
    admin_role_id: Optional[int] = None
    mod_role_id: Optional[int] = None

    # -------------------------------------------------------------------------
    # Optional: Channels
    # -------------------------------------------------------------------------

    suggestions_channel_id: Optional[int] = None
    bug_reports_channel_id: Optional[int] = None
    clockout_channel_id: Optional[int] = None
    sleep_mode_channel_id: Optional[int] = None

    # -------------------------------------------------------------------------
    # Optional: Subscription Roles
    # -------------------------------------------------------------------------

    ruby_role_id: Optional[int] = None
    diamond_role_id: Optional[int] = None

    # -------------------------------------------------------------------------
    # Optional: Casino Bot API
    # -------------------------------------------------------------------------

    casino_base_url: str = "http://localhost:25565"
    casino_api_key: Optional[str] = None
    uas_bot_id: Optional[str] = None
    casino_timeout: int = 10

    # -------------------------------------------------------------------------
    # Optional: Shifts
    # -------------------------------------------------------------------------

    admin_pay_rate: int = 8000
    mod_pay_rate: int = 4200
    shift_inactive_warning_hours: int = 2
    shift_auto_clockout_hours: int = 4

    # -------------------------------------------------------------------------
    # Optional: Economy
    # -------------------------------------------------------------------------

    default_wallet: int = 1000

    # -------------------------------------------------------------------------
    # Optional: Moderation
    # -------------------------------------------------------------------------

    warn_mute_threshold: int = 3
    warn_mute_seconds: int = 3600

    # -------------------------------------------------------------------------
    # Optional: Scheduler Intervals (seconds)
    # -------------------------------------------------------------------------

    shift_warning_interval: int = 900       # Inactivity warnings
    shift_clockout_interval: int = 1800     # Inactivity auto clock-out
    shift_sync_interval: int = 300          # Memory/DB reconciliation
    subscription_check_interval: int = 600  # Expired subscription sweep
    audit_flush_interval: float = 1.0       # Audit queue drain
    audit_batch_size: int = 5

    # -------------------------------------------------------------------------
    # Optional: Display
    # -------------------------------------------------------------------------

    bot_name: str = "UAS"
    footer_text: str = "UAS • Utility Admin System"

    # -------------------------------------------------------------------------
    # Optional: Webhooks
    # -------------------------------------------------------------------------

    error_webhook_url: Optional[str] = None

    @property
    def all_developer_ids(self) -> Set[int]:
        return {self.developer_id} | set(self.developer_ids or ())


# =============================================================================
# Embed Colors
# =============================================================================

class EmbedColors:
    """Standardized color palette for Discord embeds."""

    GREEN = 0x00FF00
    GOLD = 0xFFD700
    RED = 0xFF0000
    BLUE = 0x0099FF
    ORANGE = 0xFFA500
    DEEP_ORANGE = 0xFF6600
    PURPLE = 0x9B59B6
    GRAY = 0x95A5A6

    # Semantic aliases
    SUCCESS = GREEN
    ERROR = RED
    WARNING = ORANGE
    INFO = BLUE
    GIVEAWAY = GOLD
    EMERGENCY = DEEP_ORANGE


# =============================================================================
# Validation
# =============================================================================

class ConfigValidationError(Exception):
    """Raised when required configuration is missing or invalid."""

    pass


def _parse_int(value: Optional[str], name: str) -> int:
    """
    Parse string to integer with descriptive error handling.

    Raises:
        ConfigValidationError: If value is missing or not a valid integer.
    """
    if not value:
        raise ConfigValidationError(f"Missing required: {name}")
    try:
        return int(value)
    except ValueError:
        raise ConfigValidationError(f"Invalid integer for {name}: {value}")


def _parse_int_optional(value: Optional[str]) -> Optional[int]:
    """Parse optional string to integer, returning None on failure."""
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def _parse_int_set(value: Optional[str]) -> Set[int]:
    """Parse comma-separated string to a set of integers."""
    if not value:
        return set()
    result = set()
    for part in value.split(","):
        part = part.strip()
        if part:
            try:
                result.add(int(part))
            except ValueError:
                pass  # Skip invalid entries silently
    return result


def _parse_int_with_default(value: Optional[str], default: int, name: str, min_val: int = None, max_val: int = None) -> int:
    """
    Parse optional integer with default and range validation.

    Values outside [min_val, max_val] are clamped with a warning.
    """
    if not value:
        return default
    try:
        parsed = int(value)
        if min_val is not None and parsed < min_val:
            from src.core.logger import logger
            logger.warning(f"Config {name}={parsed} below min {min_val}, using {min_val}")
            return min_val
        if max_val is not None and parsed > max_val:
            from src.core.logger import logger
            logger.warning(f"Config {name}={parsed} above max {max_val}, using {max_val}")
            return max_val
        return parsed
    except ValueError:
        from src.core.logger import logger
        logger.warning(f"Config {name}='{value}' invalid, using default {default}")
        return default


def _validate_url(value: Optional[str], name: str) -> Optional[str]:
    """Return the URL if it looks like http(s), otherwise None."""
    if not value:
        return None
    if not value.startswith(("https://", "http://")):
        from src.core.logger import logger
        logger.warning(f"Config {name} invalid URL format, ignoring")
        return None
    return value.rstrip("/")


# =============================================================================
# Configuration Loading
# =============================================================================

def load_config() -> Config:
    """
    Load and validate configuration from environment variables.

    Returns:
        Validated Config object with all settings.

    Raises:
        ConfigValidationError: If any required variable is missing or invalid.
    """
    missing = []

    discord_token = os.getenv("DISCORD_TOKEN")
    if not discord_token:
        missing.append("DISCORD_TOKEN")

    developer_id_str = os.getenv("DEVELOPER_ID")
    if not developer_id_str:
        missing.append("DEVELOPER_ID")

    if missing:
        raise ConfigValidationError(
            f"Missing required environment variables: {', '.join(missing)}"
        )

    developer_id = _parse_int(developer_id_str, "DEVELOPER_ID")

    return Config(
        discord_token=discord_token,
        developer_id=developer_id,
        developer_ids=_parse_int_set(os.getenv("DEVELOPER_IDS")),
        admin_role_id=_parse_int_optional(os.getenv("ADMIN_ROLE_ID")),
        mod_role_id=_parse_int_optional(os.getenv("MOD_ROLE_ID")),
        suggestions_channel_id=_parse_int_optional(os.getenv("SUGGESTIONS_CHANNEL_ID")),
        bug_reports_channel_id=_parse_int_optional(os.getenv("BUG_REPORTS_CHANNEL_ID")),
        clockout_channel_id=_parse_int_optional(os.getenv("CLOCKOUT_CHANNEL_ID")),
        sleep_mode_channel_id=_parse_int_optional(os.getenv("SLEEP_MODE_CHANNEL_ID")),
        ruby_role_id=_parse_int_optional(os.getenv("RUBY_ROLE_ID")),
        diamond_role_id=_parse_int_optional(os.getenv("DIAMOND_ROLE_ID")),
        casino_base_url=_validate_url(
            os.getenv("ATIVE_CASINO_BASE_URL"), "ATIVE_CASINO_BASE_URL"
        ) or "http://localhost:25565",
        casino_api_key=os.getenv("ATIVE_CASINO_API_KEY") or None,
        uas_bot_id=os.getenv("UAS_BOT_ID") or None,
        casino_timeout=_parse_int_with_default(
            os.getenv("ATIVE_CASINO_TIMEOUT"), 10, "ATIVE_CASINO_TIMEOUT", min_val=1, max_val=60
        ),
        admin_pay_rate=_parse_int_with_default(
            os.getenv("ADMIN_PAY_RATE"), 8000, "ADMIN_PAY_RATE", min_val=0
        ),
        mod_pay_rate=_parse_int_with_default(
            os.getenv("MOD_PAY_RATE"), 4200, "MOD_PAY_RATE", min_val=0
        ),
        shift_inactive_warning_hours=_parse_int_with_default(
            os.getenv("SHIFT_INACTIVE_WARNING_HOURS"), 2, "SHIFT_INACTIVE_WARNING_HOURS", min_val=1, max_val=24
        ),
        shift_auto_clockout_hours=_parse_int_with_default(
            os.getenv("SHIFT_AUTO_CLOCKOUT_HOURS"), 4, "SHIFT_AUTO_CLOCKOUT_HOURS", min_val=1, max_val=48
        ),
        default_wallet=_parse_int_with_default(
            os.getenv("DEFAULT_WALLET"), 1000, "DEFAULT_WALLET", min_val=0
        ),
        warn_mute_threshold=_parse_int_with_default(
            os.getenv("WARN_MUTE_THRESHOLD"), 3, "WARN_MUTE_THRESHOLD", min_val=1, max_val=20
        ),
        shift_sync_interval=_parse_int_with_default(
            os.getenv("SHIFT_SYNC_INTERVAL"), 300, "SHIFT_SYNC_INTERVAL", min_val=30, max_val=3600
        ),
        subscription_check_interval=_parse_int_with_default(
            os.getenv("SUBSCRIPTION_CHECK_INTERVAL"), 600, "SUBSCRIPTION_CHECK_INTERVAL", min_val=60, max_val=86400
        ),
        bot_name=os.getenv("BOT_NAME", "UAS"),
        footer_text=os.getenv("FOOTER_TEXT", "UAS • Utility Admin System"),
        error_webhook_url=_validate_url(os.getenv("ERROR_WEBHOOK_URL"), "ERROR_WEBHOOK_URL"),
    )


# =============================================================================
# Global Config Instance
# =============================================================================

_config: Optional[Config] = None


def get_config() -> Config:
    """
    Get the global configuration instance, loading if needed.

    Raises:
        ConfigValidationError: On first call if config is invalid.
    """
    global _config
    if _config is None:
        _config = load_config()
    return _config


def validate_and_log_config() -> None:
    """Load the config (triggering validation) and log a summary tree."""
    from src.core.logger import logger

    config = get_config()

    optional_features = []
    if config.suggestions_channel_id:
        optional_features.append("Suggestions")
    if config.bug_reports_channel_id:
        optional_features.append("Bug Reports")
    if config.casino_api_key:
        optional_features.append("Casino API")
    if config.ruby_role_id or config.diamond_role_id:
        optional_features.append("Premium Roles")

    for var, value in (
        ("ADMIN_ROLE_ID", config.admin_role_id),
        ("MOD_ROLE_ID", config.mod_role_id),
        ("ATIVE_CASINO_API_KEY", config.casino_api_key),
    ):
        if not value:
            logger.info(f"Optional config not set: {var}")

    logger.tree("Configuration Validated", [
        ("Required", "✅ All required variables set"),
        ("Optional Features", ", ".join(optional_features) if optional_features else "None"),
        ("Developers", str(len(config.all_developer_ids))),
        ("Casino API", config.casino_base_url),
    ], emoji="⚙️")


# =============================================================================
# Permission Helpers
# =============================================================================

def is_developer(user_id: int) -> bool:
    """Check if user is one of the bot developers."""
    return user_id in get_config().all_developer_ids


def _has_role(member, role_id: Optional[int]) -> bool:
    if not role_id:
        return False
    return any(role.id == role_id for role in getattr(member, "roles", []) or [])


def is_admin(member) -> bool:
    """
    Check if a member counts as an admin.

    Developers, holders of the admin role, and members with the
    Administrator permission all qualify.
    """
    if member is None:
        return False

    if is_developer(member.id):
        return True

    permissions = getattr(member, "guild_permissions", None)
    if permissions is not None and permissions.administrator:
        return True

    return _has_role(member, get_config().admin_role_id)


def is_moderator(member) -> bool:
    """Check if a member holds the moderator role."""
    if member is None:
        return False
    return _has_role(member, get_config().mod_role_id)


def is_staff(member) -> bool:
    """Check if a member is an admin or a moderator."""
    return is_admin(member) or is_moderator(member)


def get_staff_role(member) -> Optional[str]:
    """
    Resolve a member's shift role.

    Returns:
        "admin", "mod", or None for non-staff.
    """
    if is_admin(member):
        return "admin"
    if is_moderator(member):
        return "mod"
    return None


async def deny_access(interaction, description: str) -> None:
    """Reply with the red Access Denied embed."""
    from src.utils.embeds import build_error_embed
    from src.utils.interaction import safe_respond

    await safe_respond(
        interaction,
        embed=build_error_embed("❌ Access Denied", description),
        ephemeral=True,
    )


async def check_admin_permission(
    interaction,
    description: str = "Administrator permissions required for this command.",
) -> bool:
    """
    Check admin permission and send the denial embed if not authorized.

    Returns:
        True if authorized, False if not (denial already sent).
    """
    if not is_admin(interaction.user):
        await deny_access(interaction, description)
        return False
    return True


async def check_staff_permission(
    interaction,
    description: str = "This command is restricted to administrators and moderators only.",
) -> bool:
    """Check admin-or-mod permission, denying with an embed on failure."""
    if not is_staff(interaction.user):
        await deny_access(interaction, description)
        return False
    return True


async def check_developer_permission(
    interaction,
    description: str = "Developer permissions required for this command.",
) -> bool:
    """Check developer permission, denying with an embed on failure."""
    if not is_developer(interaction.user.id):
        await deny_access(interaction, description)
        return False
    return True


__all__ = [
    "Config",
    "ConfigValidationError",
    "EmbedColors",
    "NY_TZ",
    "get_config",
    "load_config",
    "validate_and_log_config",
    "is_developer",
    "is_admin",
    "is_moderator",
    "is_staff",
    "get_staff_role",
    "deny_access",
    "check_admin_permission",
    "check_staff_permission",
    "check_developer_permission",
]
