"""
UAS Bot - Core Package
======================

Core components shared by every cog and service: configuration,
database management and logging.

DESIGN:
    Core modules are singletons or global instances so state stays
    consistent across the application:
    - get_config() returns the same Config instance
    - get_db() returns the same DatabaseManager instance
    - logger is a global TreeLogger instance
"""

# =============================================================================
# Core Imports
# =============================================================================

from .config import (
    Config,
    ConfigValidationError,
    EmbedColors,
    NY_TZ,
    get_config,
    is_developer,
    is_admin,
    is_moderator,
    is_staff,
)

from .database import DatabaseManager, get_db

from .logger import logger, TreeLogger


# =============================================================================
# Module Export
# =============================================================================

__all__ = [
    # Config
    "Config",
    "ConfigValidationError",
    "EmbedColors",
    "NY_TZ",
    "get_config",
    "is_developer",
    "is_admin",
    "is_moderator",
    "is_staff",
    # Database
    "DatabaseManager",
    "get_db",
    # Logger
    "logger",
    "TreeLogger",
]
