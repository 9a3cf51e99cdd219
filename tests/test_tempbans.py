"""
UAS Bot - Temporary Ban Tests
=============================
"""

import time
from unittest.mock import AsyncMock, MagicMock

import discord
import pytest

from src.services.tempbans import UNBAN_REASON, TempBanService
from tests.conftest import GUILD_ID


@pytest.fixture
def guild():
    guild = MagicMock()
    guild.id = GUILD_ID
    guild.name = "Test Casino"
    guild.unban = AsyncMock()
    return guild


@pytest.fixture
def service(test_db, mock_bot, guild):
    mock_bot.get_guild = MagicMock(side_effect=lambda gid: guild if gid == GUILD_ID else None)
    return TempBanService(mock_bot)


class TestTempBanStorage:
    """Tests for the temp_bans table."""

    def test_rebanning_replaces_schedule(self, test_db):
        test_db.add_temp_ban(GUILD_ID, 5, 1, expires_at=100.0, reason="first")
        test_db.add_temp_ban(GUILD_ID, 5, 1, expires_at=200.0, reason="second")

        ban = test_db.get_temp_ban(GUILD_ID, 5)
        assert ban["expires_at"] == 200.0
        assert ban["reason"] == "second"

    def test_expired_only(self, test_db):
        test_db.add_temp_ban(GUILD_ID, 5, 1, expires_at=100.0)
        test_db.add_temp_ban(GUILD_ID, 6, 1, expires_at=time.time() + 3600)

        assert [b["user_id"] for b in test_db.get_expired_temp_bans()] == [5]


class TestProcessExpired:
    """Tests for the automatic unban pass."""

    @pytest.mark.asyncio
    async def test_unbans_and_removes_row(self, service, test_db, guild):
        test_db.add_temp_ban(GUILD_ID, 5, 1, expires_at=100.0)

        lifted = await service.process_expired()

        assert [b["user_id"] for b in lifted] == [5]
        guild.unban.assert_awaited_once()
        assert guild.unban.await_args.args[0].id == 5
        assert guild.unban.await_args.kwargs["reason"] == UNBAN_REASON
        assert test_db.get_temp_ban(GUILD_ID, 5) is None
        log = test_db.get_moderation_log(GUILD_ID)
        assert log[0]["action"] == "unban"
        assert log[0]["target_id"] == 5

    @pytest.mark.asyncio
    async def test_not_yet_expired_untouched(self, service, test_db, guild):
        test_db.add_temp_ban(GUILD_ID, 5, 1, expires_at=time.time() + 3600)

        assert await service.process_expired() == []
        guild.unban.assert_not_awaited()
        assert test_db.get_temp_ban(GUILD_ID, 5) is not None

    @pytest.mark.asyncio
    async def test_already_unbanned_is_cleared(self, service, test_db, guild):
        guild.unban.side_effect = discord.NotFound(MagicMock(status=404), "Unknown Ban")
        test_db.add_temp_ban(GUILD_ID, 5, 1, expires_at=100.0)

        assert len(await service.process_expired()) == 1
        assert test_db.get_temp_ban(GUILD_ID, 5) is None

    @pytest.mark.asyncio
    async def test_failed_unban_is_retried(self, service, test_db, guild):
        guild.unban.side_effect = discord.Forbidden(MagicMock(status=403), "Missing Permissions")
        test_db.add_temp_ban(GUILD_ID, 5, 1, expires_at=100.0)

        assert await service.process_expired() == []
        assert test_db.get_temp_ban(GUILD_ID, 5) is not None

        guild.unban.side_effect = None
        assert len(await service.process_expired()) == 1
        assert test_db.get_temp_ban(GUILD_ID, 5) is None

    @pytest.mark.asyncio
    async def test_unknown_guild_kept(self, service, test_db):
        test_db.add_temp_ban(GUILD_ID + 1, 5, 1, expires_at=100.0)

        assert await service.process_expired() == []
        assert test_db.get_temp_ban(GUILD_ID + 1, 5) is not None
