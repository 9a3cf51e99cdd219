"""
UAS Bot - Suggestion & Bug Report Tests
=======================================

ID generation, vote handling and developer-only status changes.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from src.commands.bugreport.cog import generate_report_id, to_base36
from src.commands.bugreport.views import build_report_embed
from src.commands.bugreport.views import handle_status_update as update_bug_status
from src.commands.suggestion.cog import generate_suggestion_id
from src.commands.suggestion.views import build_suggestion_embed, handle_vote
from tests.conftest import GUILD_ID, make_interaction, make_member, sent_content


# =============================================================================
# IDs
# =============================================================================

class TestIds:
    """Tests for suggestion and bug report IDs."""

    def test_suggestion_id(self):
        assert generate_suggestion_id(123456789, now_ms=1700000000000) == "17000000000006789"

    def test_suggestion_id_short_user(self):
        assert generate_suggestion_id(42, now_ms=5) == "542"

    def test_base36(self):
        assert to_base36(0) == "0"
        assert to_base36(35) == "Z"
        assert to_base36(36) == "10"

    def test_report_id(self):
        assert generate_report_id(now_ms=1295) == "BUG-ZZ"
        assert generate_report_id().startswith("BUG-")


# =============================================================================
# Embeds
# =============================================================================

class TestEmbeds:
    """Tests for public feedback embeds."""

    def test_suggestion_votes_field(self, test_db):
        record = test_db.create_suggestion("S1", 1, GUILD_ID, "player", "More slots", "Please")
        embed = build_suggestion_embed(record)
        votes = next(f for f in embed.fields if f.name == "📊 Votes")
        assert votes.value == "👍 0 | 👎 0"
        assert embed.footer.text == "Suggested by player | ID: S1"

    def test_bug_report_priority_color(self, test_db):
        record = test_db.create_bug_report("BUG-1", 1, GUILD_ID, "player", "Crash", "It broke", None, "critical")
        embed = build_report_embed(record)
        assert embed.color.value == 0xFF0000
        assert not any(f.name == "🔍 Steps to Reproduce" for f in embed.fields)


# =============================================================================
# Votes
# =============================================================================

class TestVoting:
    """Tests for suggestion vote buttons."""

    @pytest.fixture
    def suggestion(self, test_db):
        return test_db.create_suggestion("111", 1, GUILD_ID, "player", "Title", "Body")

    def _vote_interaction(self):
        interaction = make_interaction(make_member(user_id=2), MagicMock(id=GUILD_ID))
        interaction.message.embeds = []
        interaction.message.edit = AsyncMock()
        return interaction

    @pytest.mark.asyncio
    async def test_vote_updates_message(self, suggestion, test_db):
        interaction = self._vote_interaction()

        await handle_vote(interaction, "111", "upvote")

        interaction.message.edit.assert_awaited_once()
        assert test_db.get_suggestion("111")["upvotes"] == 1
        assert interaction.followup.send.await_args.args[0] == "✅ Your upvote has been recorded!"

    @pytest.mark.asyncio
    async def test_duplicate_vote_rejected(self, suggestion):
        await handle_vote(self._vote_interaction(), "111", "upvote")
        interaction = self._vote_interaction()

        await handle_vote(interaction, "111", "upvote")

        interaction.message.edit.assert_not_awaited()
        assert interaction.followup.send.await_args.args[0] == "❌ You have already upvoted this suggestion."

    @pytest.mark.asyncio
    async def test_unknown_suggestion(self, test_db):
        interaction = self._vote_interaction()
        await handle_vote(interaction, "999", "downvote")
        assert sent_content(interaction) == "❌ Suggestion not found."


# =============================================================================
# Bug Report Status
# =============================================================================

class TestBugStatus:
    """Tests for bug report status changes."""

    @pytest.mark.asyncio
    async def test_non_developer_denied(self, test_db, mock_admin):
        test_db.create_bug_report("BUG-1", 1, GUILD_ID, "player", "Crash", "It broke", None, "low")
        interaction = make_interaction(mock_admin)

        await update_bug_status(interaction, "BUG-1", "resolved")

        assert sent_content(interaction) == "❌ Only developers can update bug report status."
        assert test_db.get_bug_report("BUG-1")["status"] == "pending"

    @pytest.mark.asyncio
    async def test_developer_updates_status(self, test_db, mock_developer):
        test_db.create_bug_report("BUG-1", 1, GUILD_ID, "player", "Crash", "It broke", None, "low")
        interaction = make_interaction(mock_developer)
        interaction.client.get_channel = MagicMock(return_value=None)
        interaction.client.fetch_channel = AsyncMock(return_value=None)

        await update_bug_status(interaction, "BUG-1", "in_progress")

        record = test_db.get_bug_report("BUG-1")
        assert record["status"] == "in_progress"
        assert record["updated_by"] == mock_developer.id
        assert interaction.followup.send.await_args.args[0] == "✅ Bug report status updated to **in progress**"
