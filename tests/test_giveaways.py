"""
UAS Bot - Giveaway Tests
========================

Parsing helpers and the GiveawayManager lifecycle against a real
SQLite database with mocked Discord channels.
"""

import json
import random
import time
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import discord
import pytest

from src.services.giveaways import (
    GiveawayError,
    GiveawayEnterButton,
    GiveawayManager,
    extract_end_timestamp,
    extract_prize,
    parse_end_datetime,
    parse_mentions,
    pick_winners,
)
from tests.conftest import GUILD_ID


def make_channel(channel_id=555, message_id=777):
    channel = MagicMock()
    channel.id = channel_id
    channel.name = "giveaways"
    channel.guild.id = GUILD_ID
    message = MagicMock()
    message.id = message_id
    message.edit = AsyncMock()
    message.channel.send = AsyncMock()
    channel.send = AsyncMock(return_value=message)
    channel.fetch_message = AsyncMock(return_value=message)
    return channel, message


# =============================================================================
# Parsing
# =============================================================================

class TestParseEndDatetime:
    """Tests for /giveaway create date parsing."""

    def test_valid_date_and_time(self):
        parsed = parse_end_datetime("2030-01-15", "18:30")
        assert parsed == datetime(2030, 1, 15, 18, 30, tzinfo=timezone.utc)

    def test_rejects_bad_formats(self):
        assert parse_end_datetime("15-01-2030", "18:30") is None
        assert parse_end_datetime("2030-01-15", "6:30pm") is None
        assert parse_end_datetime("2030-02-30", "10:00") is None
        assert parse_end_datetime(None, "10:00") is None


class TestParseMentions:
    """Tests for initial participant mentions."""

    def test_extracts_unique_ids_in_order(self):
        assert parse_mentions("<@12> and <@!34> then <@12>") == [12, 34]

    def test_empty_input(self):
        assert parse_mentions("") == []
        assert parse_mentions(None) == []


class TestRecoveryExtraction:
    """Tests for prize and end time extraction."""

    def test_extract_prize(self):
        description = "🎁 **Prize:** 1M Chips\n👥 Entries: 4"
        assert extract_prize(description) == "1M Chips"
        assert extract_prize("no prize here") is None

    def test_end_timestamp_prefers_ends_field(self):
        embed = discord.Embed(description="Started <t:100:R>")
        embed.add_field(name="⏰ Ends", value="<t:1900000000:F>")
        assert extract_end_timestamp(embed) == 1900000000

    def test_end_timestamp_falls_back_to_description(self):
        embed = discord.Embed(description="Ends <t:1800000000:R>")
        assert extract_end_timestamp(embed) == 1800000000

    def test_end_timestamp_missing(self):
        assert extract_end_timestamp(discord.Embed(description="nothing")) is None


class TestPickWinners:
    """Tests for winner selection."""

    def test_no_participants(self):
        assert pick_winners([], 3) == []

    def test_count_capped_by_pool(self):
        winners = pick_winners([1, 2], 5)
        assert sorted(winners) == [1, 2]

    def test_distinct_winners(self):
        winners = pick_winners(range(50), 10, rng=random.Random(7))
        assert len(set(winners)) == 10


# =============================================================================
# Manager
# =============================================================================

class TestGiveawayManager:
    """Tests for GiveawayManager lifecycle."""

    @pytest.mark.asyncio
    async def test_create_rejects_past_end(self, test_db, mock_bot):
        manager = GiveawayManager(mock_bot)
        channel, _ = make_channel()
        with pytest.raises(GiveawayError):
            await manager.create(channel, 1, "Chips", time.time() - 10)

    @pytest.mark.asyncio
    async def test_toggle_entry(self, test_db, mock_bot):
        manager = GiveawayManager(mock_bot)
        channel, message = make_channel()
        state = await manager.create(channel, 1, "Chips", time.time() + 3600)

        try:
            assert await manager.toggle_entry(message.id, 42) == "entered"
            assert test_db.get_giveaway_entries(state.giveaway_id) == [42]

            assert await manager.toggle_entry(message.id, 42) == "left"
            assert test_db.get_giveaway_entries(state.giveaway_id) == []

            assert await manager.toggle_entry(123, 42) == "not_found"
        finally:
            await manager.stop()

    @pytest.mark.asyncio
    async def test_conclude_with_no_participants(self, test_db, mock_bot):
        channel, message = make_channel()
        mock_bot.get_channel = MagicMock(return_value=channel)
        manager = GiveawayManager(mock_bot)
        await manager.create(channel, 1, "Chips", time.time() + 3600)

        winners = await manager.conclude(message.id)

        assert winners == []
        assert message.id not in manager.active
        assert test_db.get_giveaway(message.id)["status"] == "ended"
        message.channel.send.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_reroll_draws_from_stored_entries(self, test_db, mock_bot):
        channel, message = make_channel()
        mock_bot.get_channel = MagicMock(return_value=channel)
        manager = GiveawayManager(mock_bot)
        await manager.create(channel, 1, "Chips", time.time() + 3600, initial_participants=[7, 8, 9])
        await manager.conclude(message.id)

        winners = await manager.reroll(message.id)

        assert len(winners) == 1
        assert winners[0] in {7, 8, 9}

    @pytest.mark.asyncio
    async def test_reroll_running_giveaway_refused(self, test_db, mock_bot):
        manager = GiveawayManager(mock_bot)
        channel, message = make_channel()
        await manager.create(channel, 1, "Chips", time.time() + 3600)
        try:
            with pytest.raises(GiveawayError):
                await manager.reroll(message.id)
        finally:
            await manager.stop()

    @pytest.mark.asyncio
    async def test_recover_refuses_duplicate_row(self, test_db, mock_bot):
        channel, message = make_channel(message_id=4242)
        message.author.id = mock_bot.user.id
        embed = discord.Embed(title="🎉 GIVEAWAY 🎉", description="**Prize:** Car\nEnds <t:1900000000:R>")
        message.embeds = [embed]
        test_db.create_giveaway(4242, channel.id, GUILD_ID, None, "Car", 1900000000.0)

        manager = GiveawayManager(mock_bot)
        with pytest.raises(GiveawayError, match="already in the database"):
            await manager.recover(channel, 4242)

    @pytest.mark.asyncio
    async def test_recover_ended_giveaway(self, test_db, mock_bot):
        channel, message = make_channel(message_id=5151)
        message.author.id = mock_bot.user.id
        message.embeds = [discord.Embed(title="GIVEAWAY", description="**Prize:** Car\nEnded <t:1000:R>")]

        manager = GiveawayManager(mock_bot)
        result = await manager.recover(channel, 5151)

        assert result.is_active is False
        assert result.prize == "Car"
        assert test_db.get_giveaway(5151)["status"] == "ended"

    @pytest.mark.asyncio
    async def test_recover_rejects_foreign_message(self, test_db, mock_bot):
        channel, message = make_channel()
        message.author.id = 1
        manager = GiveawayManager(mock_bot)
        with pytest.raises(GiveawayError, match="not from the bot"):
            await manager.recover(channel, message.id)

    def test_get_entrants_pagination(self, test_db, mock_bot):
        giveaway_id = test_db.create_giveaway(1, 2, GUILD_ID, None, "Chips", time.time() + 60)
        test_db.add_giveaway_entries(giveaway_id, range(1, 31))

        manager = GiveawayManager(mock_bot)
        page, pages, total = manager.get_entrants(1, page=1)

        assert total == 30
        assert pages == 2
        assert len(page) == 25

    @pytest.mark.asyncio
    async def test_toggle_entry_on_ended_giveaway(self, test_db, mock_bot):
        channel, message = make_channel()
        mock_bot.get_channel = MagicMock(return_value=channel)
        manager = GiveawayManager(mock_bot)
        await manager.create(channel, 1, "Chips", time.time() + 3600)
        await manager.conclude(message.id)

        assert await manager.toggle_entry(message.id, 42) == "not_found"


class TestLoadActive:
    """Tests for restoring giveaways after a restart."""

    @pytest.mark.asyncio
    async def test_rearms_running_and_concludes_overdue(self, test_db, mock_bot):
        channel, message = make_channel()
        mock_bot.get_channel = MagicMock(return_value=channel)
        running_id = test_db.create_giveaway(901, channel.id, GUILD_ID, 1, "Car", time.time() + 3600)
        test_db.add_giveaway_entries(running_id, [5, 6])
        overdue_id = test_db.create_giveaway(900, channel.id, GUILD_ID, 1, "Chips", time.time() - 60)
        test_db.add_giveaway_entries(overdue_id, [7])

        manager = GiveawayManager(mock_bot)
        try:
            assert await manager.load_active() == 2

            assert manager.active[901].participants == {5, 6}
            assert not manager.timers[901].done()

            assert 900 not in manager.active
            row = test_db.get_giveaway(900)
            assert row["status"] == "ended"
            assert json.loads(row["winner_ids"]) == [7]
            message.edit.assert_awaited()
        finally:
            await manager.stop()

    @pytest.mark.asyncio
    async def test_nothing_to_restore(self, test_db, mock_bot):
        manager = GiveawayManager(mock_bot)
        assert await manager.load_active() == 0
        assert manager.active == {}


class TestEnterButton:
    """Tests for the persistent Enter button custom IDs."""

    @pytest.mark.asyncio
    async def test_accepts_both_id_styles(self):
        template = GiveawayEnterButton.__discord_ui_compiled_template__

        for custom_id in ("giveaway_enter:1700000000000", "giveaway_enter_1700000000000"):
            match = template.fullmatch(custom_id)
            assert match is not None
            button = await GiveawayEnterButton.from_custom_id(MagicMock(), MagicMock(), match)
            assert button.item.custom_id == custom_id
            assert button.token == 1700000000000

    def test_rejects_other_ids(self):
        template = GiveawayEnterButton.__discord_ui_compiled_template__
        assert template.fullmatch("giveaway_enter-17") is None
        assert template.fullmatch("suggestion:upvote:1") is None
