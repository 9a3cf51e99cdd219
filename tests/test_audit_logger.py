"""
UAS Bot - Audit Logger Tests
============================

Settings gating, persistence and queue draining.
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.services.audit_logger import CATEGORY_COLORS, AuditLogger
from tests.conftest import GUILD_ID, make_member

AUDIT_CHANNEL = 4242


@pytest.fixture
def audit(test_db, mock_bot):
    return AuditLogger(mock_bot)


@pytest.fixture
def enabled_audit(audit):
    audit.set_channel(GUILD_ID, AUDIT_CHANNEL)
    audit.enable(GUILD_ID)
    return audit


class TestGating:
    """Tests for per-guild enable/channel gating."""

    def test_disabled_by_default(self, audit, test_db):
        assert audit.log(GUILD_ID, "server", "test", "Title", "Body") is None
        assert audit.get_queue_size() == 0
        assert test_db.count_audit_events(GUILD_ID) == 0

    def test_enabled_without_channel_is_off(self, audit):
        audit.enable(GUILD_ID)
        assert not audit.is_enabled(GUILD_ID)

    def test_force_bypasses_settings(self, audit):
        assert audit.log(GUILD_ID, "server", "audit_test", "Test", "Body", force=True) is not None
        assert audit.get_queue_size() == 1

    def test_disable(self, enabled_audit):
        enabled_audit.disable(GUILD_ID)
        assert enabled_audit.log(GUILD_ID, "server", "test", "Title", "Body") is None


class TestLogging:
    """Tests for event persistence and queueing."""

    def test_event_persisted_and_queued(self, enabled_audit, test_db):
        event = enabled_audit.log(
            GUILD_ID, "moderation", "warn", "Warn", "Body",
            [("Reason", "spam", False)], actor_id=1, target_id=2,
        )

        assert event is not None
        assert enabled_audit.get_queue_size() == 1
        stored = test_db.get_recent_audit_events(GUILD_ID)
        assert stored[0]["event_type"] == "warn"

    def test_queue_full_drops(self, enabled_audit):
        enabled_audit.queue = asyncio.Queue(maxsize=1)
        enabled_audit.log(GUILD_ID, "server", "a", "A", "Body")

        assert enabled_audit.log(GUILD_ID, "server", "b", "B", "Body") is None
        assert enabled_audit.dropped_count == 1

    def test_embed(self, enabled_audit):
        event = enabled_audit.log(GUILD_ID, "voice", "voice_join", "Joined", "Body", [("Empty", "", True)])
        embed = event.to_embed()
        assert embed.color.value == CATEGORY_COLORS["voice"]
        assert embed.fields[0].value == "*No text content*"
        assert embed.footer.text == "Event: voice"

    def test_moderation_helper(self, enabled_audit):
        moderator = make_member(user_id=1, name="mod")
        target = make_member(user_id=2, name="player")

        event = enabled_audit.log_moderation(GUILD_ID, "mute", moderator, target, "spam", [("Duration", "10m", True)])

        assert event.title == "🛡️ Mute"
        assert [f[0] for f in event.fields] == ["Reason", "Duration"]
        assert event.actor_id == 1

    def test_voice_state_without_change_ignored(self, enabled_audit):
        member = make_member()
        member.guild.id = GUILD_ID
        state = MagicMock()
        state.channel = None
        assert enabled_audit.log_voice_state(member, state, state) is None


class TestFlush:
    """Tests for draining the queue into the audit channel."""

    @pytest.mark.asyncio
    async def test_flush_sends_to_channel(self, enabled_audit, mock_bot):
        channel = MagicMock()
        channel.send = AsyncMock()
        mock_bot.get_channel = MagicMock(return_value=channel)
        enabled_audit.log(GUILD_ID, "server", "test", "Title", "Body")

        assert await enabled_audit.flush() == 1
        assert enabled_audit.sent_count == 1
        assert channel.send.await_args.kwargs["embed"].title == "Title"
        mock_bot.get_channel.assert_called_with(AUDIT_CHANNEL)

    @pytest.mark.asyncio
    async def test_flush_respects_batch_size(self, enabled_audit, mock_bot, monkeypatch):
        monkeypatch.setattr("src.services.audit_logger.SEND_PAUSE", 0)
        monkeypatch.setattr(enabled_audit.config, "audit_batch_size", 2)
        channel = MagicMock()
        channel.send = AsyncMock()
        mock_bot.get_channel = MagicMock(return_value=channel)
        for i in range(3):
            enabled_audit.log(GUILD_ID, "server", f"e{i}", "Title", "Body")

        assert await enabled_audit.flush() == 2
        assert enabled_audit.get_queue_size() == 1

    @pytest.mark.asyncio
    async def test_missing_channel(self, enabled_audit):
        enabled_audit.log(GUILD_ID, "server", "test", "Title", "Body")
        assert await enabled_audit.flush() == 0
