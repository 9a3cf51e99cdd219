"""
UAS Bot - Test Fixtures
=======================

Shared fixtures for all tests.
"""

import os
import sys
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

# Set up test environment before importing modules
os.environ["TESTING"] = "1"
os.environ.setdefault("DISCORD_TOKEN", "test-token")
os.environ.setdefault("DEVELOPER_ID", "1000")
os.environ.setdefault("UAS_LOGS_DIR", str(Path(__file__).parent / ".logs"))

DEVELOPER_ID = int(os.environ["DEVELOPER_ID"])
GUILD_ID = 987654321


# =============================================================================
# Database
# =============================================================================

@pytest.fixture
def temp_db_path(tmp_path):
    """Create a temporary database path for testing."""
    return tmp_path / "test_uas.db"


@pytest.fixture
def test_db(temp_db_path, monkeypatch):
    """Create a fresh test database instance."""
    from src.core.database import manager as db_module

    # Reset singleton
    db_module.DatabaseManager._instance = None

    # Patch the DB path
    monkeypatch.setattr(db_module, "DB_PATH", temp_db_path)
    monkeypatch.setattr(db_module, "DATA_DIR", temp_db_path.parent)

    db = db_module.DatabaseManager()

    yield db

    db.close()
    db_module.DatabaseManager._instance = None


# =============================================================================
# Discord Objects
# =============================================================================

def make_member(user_id=123456789, name="testuser", administrator=False, roles=None):
    """Create a mock guild member."""
    member = MagicMock()
    member.id = user_id
    member.name = name
    member.display_name = name.title()
    member.mention = f"<@{user_id}>"
    member.bot = False
    member.display_avatar.url = "https://example.com/avatar.png"
    member.guild_permissions.administrator = administrator
    member.roles = roles or []
    member.send = AsyncMock()
    member.__str__ = MagicMock(return_value=name)
    return member


@pytest.fixture
def mock_discord_member():
    return make_member()


@pytest.fixture
def mock_developer():
    return make_member(user_id=DEVELOPER_ID, name="developer")


@pytest.fixture
def mock_admin():
    return make_member(user_id=222333444, name="adminuser", administrator=True)


@pytest.fixture
def mock_discord_guild():
    guild = MagicMock()
    guild.id = GUILD_ID
    guild.name = "Test Casino"
    guild.member_count = 100
    return guild


def make_interaction(user, guild=None):
    """Create a mock interaction whose response has not been sent yet."""
    interaction = MagicMock()
    interaction.user = user
    interaction.guild = guild
    interaction.guild_id = guild.id if guild is not None else None
    interaction.response.is_done = MagicMock(return_value=False)
    interaction.response.send_message = AsyncMock()
    interaction.response.defer = AsyncMock()
    interaction.response.send_modal = AsyncMock()
    interaction.original_response = AsyncMock(return_value=MagicMock())
    interaction.followup.send = AsyncMock()
    return interaction


@pytest.fixture
def mock_interaction(mock_discord_member, mock_discord_guild):
    return make_interaction(mock_discord_member, mock_discord_guild)


@pytest.fixture
def mock_bot():
    """Create a mock bot instance."""
    bot = MagicMock()
    bot.user.id = 999888777
    bot.get_channel = MagicMock(return_value=None)
    bot.fetch_channel = AsyncMock(return_value=None)
    bot.get_user = MagicMock(return_value=None)
    bot.fetch_user = AsyncMock()
    bot.wait_until_ready = AsyncMock()
    return bot


def sent_embed(interaction):
    """The embed passed to the first response or followup."""
    for call in (interaction.response.send_message, interaction.followup.send):
        if call.await_args is not None:
            return call.await_args.kwargs.get("embed")
    return None


def sent_content(interaction):
    """The text passed to the first response or followup."""
    for call in (interaction.response.send_message, interaction.followup.send):
        if call.await_args is not None:
            args = call.await_args
            return args.kwargs.get("content", args.args[0] if args.args else None)
    return None
