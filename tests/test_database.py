"""
UAS Bot - Database Tests
========================

Tests for the SQLite mixins against a temporary database.
"""

import time

import pytest

from tests.conftest import GUILD_ID


# =============================================================================
# Balances
# =============================================================================

class TestBalances:
    """Tests for wallet, bank and off-economy operations."""

    def test_ensure_balance_uses_default_wallet(self, test_db):
        test_db.default_wallet = 2500
        record = test_db.ensure_balance(1, GUILD_ID)
        assert record["wallet"] == 2500
        assert record["bank"] == 0
        assert record["off_economy"] == 0

    def test_off_economy_keeps_wallet_and_bank(self, test_db):
        test_db.ensure_balance(1, GUILD_ID)
        test_db.adjust_balance(1, GUILD_ID, 700, "bank")
        before = test_db.get_balance(1, GUILD_ID)

        previous, after = test_db.set_off_economy(1, GUILD_ID, True)

        assert previous is False
        assert after["off_economy"] == 1
        assert after["wallet"] == before["wallet"]
        assert after["bank"] == before["bank"]

    def test_off_economy_reports_previous_flag(self, test_db):
        test_db.set_off_economy(1, GUILD_ID, True)
        previous, _ = test_db.set_off_economy(1, GUILD_ID, True)
        assert previous is True

    def test_adjust_balance_rejects_unknown_account(self, test_db):
        with pytest.raises(ValueError):
            test_db.adjust_balance(1, GUILD_ID, 10, "savings")

    def test_add_to_wallet(self, test_db):
        start = test_db.ensure_balance(1, GUILD_ID)["wallet"]
        after = test_db.add_to_wallet(1, GUILD_ID, 4200)
        assert after["wallet"] == start + 4200

    def test_guild_balances_skip_off_economy(self, test_db):
        test_db.ensure_balance(1, GUILD_ID)
        test_db.ensure_balance(2, GUILD_ID)
        test_db.set_off_economy(2, GUILD_ID, True)

        ids = {r["user_id"] for r in test_db.get_guild_balances(GUILD_ID)}
        assert ids == {1}
        assert len(test_db.get_guild_balances(GUILD_ID, include_off_economy=True)) == 2


# =============================================================================
# Subscriptions
# =============================================================================

class TestSubscriptions:
    """Tests for subscription rows."""

    def test_upsert_replaces_existing(self, test_db):
        test_db.upsert_subscription(5, "basic", 111, 1000, 30)
        record = test_db.upsert_subscription(5, "premium", 222, 1000, 7)

        assert record["tier"] == "premium"
        assert record["role_id"] == 222
        assert record["active"] == 1
        assert record["expires_at"] == pytest.approx(time.time() + 7 * 86400, abs=60)

    def test_expired_and_deactivate(self, test_db):
        test_db.upsert_subscription(5, "basic", 111, 1000, 1)
        assert test_db.get_expired_subscriptions(now=time.time()) == []

        expired = test_db.get_expired_subscriptions(now=time.time() + 2 * 86400)
        assert [r["user_id"] for r in expired] == [5]

        test_db.deactivate_subscription(5)
        assert test_db.get_expired_subscriptions(now=time.time() + 2 * 86400) == []


# =============================================================================
# Giveaways
# =============================================================================

class TestGiveawayRows:
    """Tests for giveaway rows and entries."""

    def test_duplicate_message_id_returns_none(self, test_db):
        end = time.time() + 3600
        assert test_db.create_giveaway(10, 20, GUILD_ID, 1, "Prize", end) is not None
        assert test_db.create_giveaway(10, 20, GUILD_ID, 1, "Prize", end) is None

    def test_entries_are_unique(self, test_db):
        row_id = test_db.create_giveaway(10, 20, GUILD_ID, 1, "Prize", time.time() + 60)
        assert test_db.add_giveaway_entry(row_id, 7) is True
        assert test_db.add_giveaway_entry(row_id, 7) is False
        assert test_db.count_giveaway_entries(row_id) == 1
        assert test_db.remove_giveaway_entry(row_id, 7) is True
        assert test_db.get_giveaway_entries(row_id) == []


# =============================================================================
# Suggestions
# =============================================================================

class TestSuggestionVotes:
    """Tests for suggestion vote recording."""

    def _create(self, db):
        return db.create_suggestion("S1", 1, GUILD_ID, "user", "Title", "Body")

    def test_vote_outcomes(self, test_db):
        self._create(test_db)

        assert test_db.record_suggestion_vote("S1", 2, "upvote") == ("added", 1, 0)
        assert test_db.record_suggestion_vote("S1", 2, "upvote") == ("duplicate", 1, 0)
        assert test_db.record_suggestion_vote("S1", 2, "downvote") == ("switched", 0, 1)
        assert test_db.record_suggestion_vote("S1", 3, "downvote") == ("added", 0, 2)

        record = test_db.get_suggestion("S1")
        assert record["upvotes"] == 0
        assert record["downvotes"] == 2

    def test_invalid_vote_type(self, test_db):
        self._create(test_db)
        with pytest.raises(ValueError):
            test_db.record_suggestion_vote("S1", 2, "sideways")


# =============================================================================
# Moderation, Audit and State
# =============================================================================

class TestModeration:
    """Tests for warnings and the moderation log."""

    def test_warn_count(self, test_db):
        test_db.add_warning(1, GUILD_ID, 1000, "spam")
        test_db.add_warning(1, GUILD_ID, 1000, None)
        test_db.add_warning(1, GUILD_ID + 1, 1000, "other guild")
        assert test_db.get_user_warn_count(1, GUILD_ID) == 2

    def test_moderation_log(self, test_db):
        test_db.log_moderation_action(GUILD_ID, 1000, "mute", 1, "spam")
        entries = test_db.get_moderation_log(GUILD_ID)
        assert entries[0]["action"] == "mute"
        assert entries[0]["target_id"] == 1


class TestAuditSettings:
    """Tests for audit settings persistence."""

    def test_defaults_to_disabled(self, test_db):
        settings = test_db.get_audit_settings(GUILD_ID)
        assert settings["enabled"] == 0
        assert settings["channel_id"] is None

    def test_partial_updates_keep_other_fields(self, test_db):
        test_db.save_audit_settings(GUILD_ID, channel_id=555)
        settings = test_db.save_audit_settings(GUILD_ID, enabled=True)
        assert settings["enabled"] == 1
        assert settings["channel_id"] == 555


class TestState:
    """Tests for sleep mode and bot state."""

    def test_sleep_mode(self, test_db):
        assert test_db.is_sleep_mode(GUILD_ID) is False
        test_db.set_sleep_mode(GUILD_ID, True)
        assert test_db.get_sleep_mode_guilds() == {GUILD_ID}
        test_db.set_sleep_mode(GUILD_ID, False)
        assert test_db.get_sleep_mode_guilds() == set()

    def test_bot_state_round_trip(self, test_db):
        test_db.set_bot_state("counts", {"a": 1})
        assert test_db.get_bot_state("counts") == {"a": 1}
        assert test_db.get_bot_state("missing", 5) == 5


# =============================================================================
# Shop
# =============================================================================

class TestShop:
    """Tests for shop statistics and expiry."""

    def test_stats(self, test_db):
        vip = test_db.add_shop_item("VIP", 5000, "roles", role_id=77, duration_days=7)
        test_db.add_shop_item("Badge", 100, "cosmetic")
        test_db.record_shop_purchase(1, GUILD_ID, vip, 5000, 7)
        test_db.record_shop_purchase(2, GUILD_ID, vip, 4500, 7)

        stats = test_db.get_shop_stats(GUILD_ID)
        assert stats["total_items"] == 2
        assert stats["total_purchases"] == 2
        assert stats["active_purchases"] == 2
        assert stats["total_revenue"] == 9500
        assert stats["categories"][0]["category"] == "roles"

    def test_expired_purchases(self, test_db):
        vip = test_db.add_shop_item("VIP", 5000, "roles", role_id=77, duration_days=1)
        permanent = test_db.add_shop_item("Title", 10, "cosmetic")
        purchase = test_db.record_shop_purchase(1, GUILD_ID, vip, 5000, 1)
        test_db.record_shop_purchase(1, GUILD_ID, permanent, 10)

        later = time.time() + 2 * 86400
        expired = test_db.get_expired_purchases(now=later)
        assert [(p["id"], p["role_id"]) for p in expired] == [(purchase, 77)]

        test_db.deactivate_purchase(purchase)
        assert test_db.get_expired_purchases(now=later) == []
