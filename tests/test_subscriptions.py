"""
UAS Bot - Subscription Service Tests
====================================
"""

from unittest.mock import AsyncMock, MagicMock

import discord
import pytest

from src.services.subscriptions import SubscriptionService
from tests.conftest import make_member

RUBY_ROLE = 501
DIAMOND_ROLE = 502


def make_role(role_id):
    role = MagicMock()
    role.id = role_id
    return role


@pytest.fixture
def roles():
    return {RUBY_ROLE: make_role(RUBY_ROLE), DIAMOND_ROLE: make_role(DIAMOND_ROLE)}


@pytest.fixture
def guild(roles):
    guild = MagicMock()
    guild.name = "Test Casino"
    guild.get_role = MagicMock(side_effect=lambda role_id: roles.get(role_id))
    return guild


@pytest.fixture
def service(test_db, mock_bot, monkeypatch):
    service = SubscriptionService(mock_bot)
    monkeypatch.setattr(service.config, "ruby_role_id", RUBY_ROLE)
    monkeypatch.setattr(service.config, "diamond_role_id", DIAMOND_ROLE)
    return service


def premium_member(guild, roles=None):
    member = make_member(user_id=77, roles=roles)
    member.guild = guild
    member.add_roles = AsyncMock()
    member.remove_roles = AsyncMock()
    return member


class TestGrant:
    """Tests for granting premium tiers."""

    @pytest.mark.asyncio
    async def test_grant_adds_role(self, service, guild, roles):
        member = premium_member(guild)

        record, applied = await service.grant(member, "diamond", granted_by=1000, duration_days=7)

        assert applied is True
        assert record["tier"] == "diamond"
        assert record["role_id"] == DIAMOND_ROLE
        member.add_roles.assert_awaited_once()
        assert member.add_roles.await_args.args[0] is roles[DIAMOND_ROLE]
        member.remove_roles.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_switching_tier_removes_old_role(self, service, guild, roles):
        member = premium_member(guild, roles=[roles[RUBY_ROLE]])

        await service.grant(member, "diamond", granted_by=1000)

        assert member.remove_roles.await_args.args == (roles[RUBY_ROLE],)

    @pytest.mark.asyncio
    async def test_unknown_tier(self, service, guild):
        with pytest.raises(ValueError):
            await service.grant(premium_member(guild), "gold", granted_by=1000)

    @pytest.mark.asyncio
    async def test_role_failure_keeps_record(self, service, guild, test_db):
        member = premium_member(guild)
        member.add_roles.side_effect = discord.Forbidden(MagicMock(status=403), "Missing Permissions")

        record, applied = await service.grant(member, "ruby_subscription", granted_by=1000)

        assert applied is False
        assert test_db.get_subscription(77)["tier"] == "ruby_subscription"


class TestExpiry:
    """Tests for the expiry sweep."""

    @pytest.mark.asyncio
    async def test_expired_role_removed(self, service, guild, roles, test_db, mock_bot):
        test_db.upsert_subscription(77, "ruby_subscription", RUBY_ROLE, 1000, 0)
        member = premium_member(guild, roles=[roles[RUBY_ROLE]])
        guild.get_member = MagicMock(return_value=member)
        mock_bot.guilds = [guild]

        expired = await service.process_expired()

        assert [s["user_id"] for s in expired] == [77]
        assert test_db.get_subscription(77)["active"] == 0
        member.remove_roles.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_nothing_expired(self, service, test_db):
        test_db.upsert_subscription(77, "diamond", DIAMOND_ROLE, 1000, 30)
        assert await service.process_expired() == []
