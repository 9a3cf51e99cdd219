"""
UAS Bot - Command Tests
=======================

Command helpers and callbacks invoked directly with mock interactions.
"""

import time
from unittest.mock import AsyncMock, MagicMock

import discord
import pytest

from src.commands.casino.cog import CasinoCog, health_label, parse_user_ids
from src.commands.economy.cog import EconomyCog, resolve_off_economy
from src.commands.giveaway.cog import GiveawayCog
from src.commands.moderation.cog import ModerationCog, can_moderate
from src.commands.shift.cog import ShiftCog
from src.services.giveaways import GiveawayManager
from src.services.shifts import ShiftManager
from tests.conftest import GUILD_ID, make_interaction, make_member, sent_content, sent_embed


def moderation_guild(target):
    guild = MagicMock()
    guild.id = GUILD_ID
    guild.name = "Test Casino"
    guild.owner_id = 1
    guild.me.guild_permissions.moderate_members = True
    guild.me.top_role = 10
    guild.get_member = MagicMock(return_value=target)
    return guild


def moderatable(user_id=555):
    member = make_member(user_id=user_id, name="player")
    member.top_role = 1
    member.timeout = AsyncMock()
    return member


# =============================================================================
# Helpers
# =============================================================================

class TestHelpers:
    """Tests for pure command helpers."""

    @pytest.mark.parametrize("action,current,expected", [
        ("off", False, True),
        ("off", True, True),
        ("on", True, False),
        ("toggle", False, True),
        ("toggle", True, False),
    ])
    def test_resolve_off_economy(self, action, current, expected):
        assert resolve_off_economy(action, current) is expected

    def test_parse_user_ids(self):
        assert parse_user_ids("1, <@2>, x, , <@!3>, 1") == [1, 2, 3]
        assert parse_user_ids("") == []

    def test_casino_health(self):
        assert health_label(0) == "🟢 Healthy"
        assert health_label(3) == "🟡 Normal Load"
        assert health_label(10) == "🔴 High Load"


class TestCanModerate:
    """Tests for the bot-can-timeout check."""

    def test_regular_member(self):
        target = moderatable()
        assert can_moderate(moderation_guild(target), target)

    def test_owner(self):
        target = moderatable(user_id=1)
        assert not can_moderate(moderation_guild(target), target)

    def test_higher_role(self):
        target = moderatable()
        target.top_role = 20
        assert not can_moderate(moderation_guild(target), target)

    def test_missing_permission(self):
        target = moderatable()
        guild = moderation_guild(target)
        guild.me.guild_permissions.moderate_members = False
        assert not can_moderate(guild, target)

    def test_administrator(self):
        target = moderatable()
        target.guild_permissions.administrator = True
        assert not can_moderate(moderation_guild(target), target)


# =============================================================================
# /warn
# =============================================================================

class TestWarn:
    """Tests for the /warn command."""

    @pytest.fixture
    def cog(self, test_db, mock_bot):
        return ModerationCog(mock_bot)

    @pytest.mark.asyncio
    async def test_non_staff_denied(self, cog, mock_discord_member):
        target = moderatable()
        interaction = make_interaction(mock_discord_member, moderation_guild(target))

        await ModerationCog.warn.callback(cog, interaction, target, "spam")

        assert sent_embed(interaction).title == "❌ Access Denied"

    @pytest.mark.asyncio
    async def test_admin_cannot_be_warned(self, cog, mock_developer, mock_admin, test_db):
        interaction = make_interaction(mock_developer, moderation_guild(mock_admin))

        await ModerationCog.warn.callback(cog, interaction, mock_admin, "spam")

        assert sent_embed(interaction).title == "❌ Cannot Warn"
        assert test_db.get_user_warn_count(mock_admin.id, GUILD_ID) == 0

    @pytest.mark.asyncio
    async def test_warning_recorded(self, cog, mock_developer, test_db, mock_bot):
        target = moderatable()
        interaction = make_interaction(mock_developer, moderation_guild(target))

        await ModerationCog.warn.callback(cog, interaction, target, "spam")

        embed = sent_embed(interaction)
        assert embed.title == "⚠️ User Warned"
        fields = {f.name: f.value for f in embed.fields}
        assert fields["Warning Count"] == "1/3"
        assert "ℹ️ Next Action" in fields
        assert test_db.get_moderation_log(GUILD_ID)[0]["action"] == "warn"
        mock_bot.audit_logger.log_moderation.assert_called_once()
        target.send.assert_awaited_once()
        target.timeout.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_threshold_auto_mutes(self, cog, mock_developer, test_db):
        target = moderatable()
        test_db.add_warning(target.id, GUILD_ID, mock_developer.id, "one")
        test_db.add_warning(target.id, GUILD_ID, mock_developer.id, "two")
        interaction = make_interaction(mock_developer, moderation_guild(target))

        await ModerationCog.warn.callback(cog, interaction, target, "three")

        target.timeout.assert_awaited_once()
        assert target.timeout.await_args.args[0].total_seconds() == 3600
        assert any(f.name == "🔇 Auto-Mute Applied" for f in sent_embed(interaction).fields)
        actions = [row["action"] for row in test_db.get_moderation_log(GUILD_ID)]
        assert sorted(actions) == ["mute", "warn"]


# =============================================================================
# /kick, /ban
# =============================================================================

def text_channel(channel_id=4242, overwrite=None, messages=()):
    """A text channel whose purge honours limit and check like discord.py."""
    channel = MagicMock()
    channel.id = channel_id
    channel.name = f"chan-{channel_id}"
    channel.mention = f"<#{channel_id}>"
    channel.overwrites_for = MagicMock(return_value=overwrite or discord.PermissionOverwrite())
    channel.set_permissions = AsyncMock()
    channel.edit = AsyncMock()

    async def purge(*, limit, check, **kwargs):
        return [m for m in list(messages)[:limit] if check(m)]

    channel.purge = AsyncMock(side_effect=purge)
    return channel


def message_from(author_id):
    message = MagicMock()
    message.author.id = author_id
    return message


class TestKick:
    """Tests for the /kick command."""

    @pytest.fixture
    def cog(self, test_db, mock_bot):
        return ModerationCog(mock_bot)

    @pytest.mark.asyncio
    async def test_non_admin_denied(self, cog, mock_discord_member):
        target = moderatable()
        target.kick = AsyncMock()
        interaction = make_interaction(mock_discord_member, moderation_guild(target))

        await ModerationCog.kick.callback(cog, interaction, target, None)

        assert sent_embed(interaction).title == "❌ Access Denied"
        target.kick.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_kick_logged(self, cog, mock_admin, test_db, mock_bot):
        target = moderatable()
        target.kick = AsyncMock()
        interaction = make_interaction(mock_admin, moderation_guild(target))

        await ModerationCog.kick.callback(cog, interaction, target, "spam")

        target.kick.assert_awaited_once()
        assert sent_content(interaction) == "✅ **player** has been kicked.\n**Reason:** spam"
        assert test_db.get_moderation_log(GUILD_ID)[0]["action"] == "kick"
        mock_bot.audit_logger.log_moderation.assert_called_once()

    @pytest.mark.asyncio
    async def test_higher_member_not_kicked(self, cog, mock_admin):
        target = moderatable()
        target.top_role = 50
        target.kick = AsyncMock()
        interaction = make_interaction(mock_admin, moderation_guild(target))

        await ModerationCog.kick.callback(cog, interaction, target, None)

        assert sent_content(interaction).startswith("❌ I cannot kick this user")
        target.kick.assert_not_awaited()


class TestBan:
    """Tests for the /ban command."""

    @pytest.fixture
    def cog(self, test_db, mock_bot):
        return ModerationCog(mock_bot)

    @pytest.fixture
    def target(self):
        return moderatable()

    @pytest.fixture
    def guild(self, target):
        guild = moderation_guild(target)
        guild.ban = AsyncMock()
        return guild

    @pytest.mark.asyncio
    async def test_temporary_ban_scheduled(self, cog, mock_admin, target, guild, test_db):
        interaction = make_interaction(mock_admin, guild)

        await ModerationCog.ban.callback(cog, interaction, target, "scam", "1d", 1)

        guild.ban.assert_awaited_once()
        assert guild.ban.await_args.kwargs["delete_message_seconds"] == 86400
        target.send.assert_awaited_once()
        assert sent_embed(interaction).title == "🔨 User Banned"
        fields = {f.name: f.value for f in sent_embed(interaction).fields}
        assert fields["Duration"] == "1d"
        ban = test_db.get_temp_ban(GUILD_ID, target.id)
        assert ban["expires_at"] == pytest.approx(time.time() + 86400, abs=5)
        assert test_db.get_moderation_log(GUILD_ID)[0]["action"] == "ban"

    @pytest.mark.asyncio
    async def test_permanent_ban_clears_schedule(self, cog, mock_admin, target, guild, test_db):
        test_db.add_temp_ban(GUILD_ID, target.id, mock_admin.id, expires_at=time.time() + 60)
        interaction = make_interaction(mock_admin, guild)

        await ModerationCog.ban.callback(cog, interaction, target, None, "permanent", 0)

        guild.ban.assert_awaited_once()
        assert test_db.get_temp_ban(GUILD_ID, target.id) is None
        fields = {f.name: f.value for f in sent_embed(interaction).fields}
        assert fields["Duration"] == "Permanent"

    @pytest.mark.asyncio
    async def test_invalid_duration(self, cog, mock_admin, target, guild):
        interaction = make_interaction(mock_admin, guild)

        await ModerationCog.ban.callback(cog, interaction, target, None, "soon", 0)

        assert sent_embed(interaction).title == "❌ Invalid Duration"
        guild.ban.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_admin_cannot_be_banned(self, cog, mock_developer, mock_admin):
        guild = moderation_guild(mock_admin)
        guild.ban = AsyncMock()
        interaction = make_interaction(mock_developer, guild)

        await ModerationCog.ban.callback(cog, interaction, mock_admin, None, None, 0)

        assert sent_embed(interaction).title == "❌ Cannot Ban"
        guild.ban.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_non_admin_denied(self, cog, mock_discord_member, target, guild):
        interaction = make_interaction(mock_discord_member, guild)

        await ModerationCog.ban.callback(cog, interaction, target, None, None, 0)

        assert sent_embed(interaction).title == "❌ Access Denied"
        guild.ban.assert_not_awaited()


# =============================================================================
# /purge, /slowmode
# =============================================================================

class TestPurge:
    """Tests for the /purge command."""

    @pytest.fixture
    def cog(self, test_db, mock_bot):
        return ModerationCog(mock_bot)

    @pytest.mark.asyncio
    async def test_only_target_messages(self, cog, mock_admin, test_db):
        target = moderatable()
        channel = text_channel(messages=[message_from(555), message_from(1), message_from(555), message_from(555)])
        interaction = make_interaction(mock_admin, moderation_guild(target))
        interaction.channel = channel

        await ModerationCog.purge.callback(cog, interaction, 2, target)

        kwargs = channel.purge.await_args.kwargs
        assert kwargs["limit"] == 100
        assert kwargs["oldest_first"] is False
        assert sent_content(interaction) == "✅ Successfully deleted **2** messages from **player**."
        log = test_db.get_moderation_log(GUILD_ID)[0]
        assert log["action"] == "purge"
        assert log["target_id"] == 555

    @pytest.mark.asyncio
    async def test_without_user_targets_channel(self, cog, mock_admin, test_db):
        channel = text_channel(messages=[message_from(1), message_from(2), message_from(3)])
        interaction = make_interaction(mock_admin, moderation_guild(None))
        interaction.channel = channel

        await ModerationCog.purge.callback(cog, interaction, 2, None)

        assert channel.purge.await_args.kwargs["limit"] == 2
        assert sent_content(interaction) == "✅ Successfully deleted **2** messages."
        assert test_db.get_moderation_log(GUILD_ID)[0]["target_id"] == 4242

    @pytest.mark.asyncio
    async def test_nothing_to_delete(self, cog, mock_admin, test_db):
        interaction = make_interaction(mock_admin, moderation_guild(None))
        interaction.channel = text_channel()

        await ModerationCog.purge.callback(cog, interaction, 5, None)

        assert sent_content(interaction).startswith("❌ No messages found to delete")
        assert test_db.get_moderation_log(GUILD_ID) == []

    @pytest.mark.asyncio
    async def test_non_staff_denied(self, cog, mock_interaction):
        mock_interaction.channel = text_channel()

        await ModerationCog.purge.callback(cog, mock_interaction, 5, None)

        assert sent_embed(mock_interaction).title == "❌ Access Denied"
        mock_interaction.channel.purge.assert_not_awaited()


class TestSlowmode:
    """Tests for the /slowmode command."""

    @pytest.fixture
    def cog(self, test_db, mock_bot):
        return ModerationCog(mock_bot)

    @pytest.mark.asyncio
    async def test_sets_delay_on_current_channel(self, cog, mock_admin, test_db):
        interaction = make_interaction(mock_admin, moderation_guild(None))
        interaction.channel = text_channel()

        await ModerationCog.slowmode.callback(cog, interaction, 30, None, None)

        assert interaction.channel.edit.await_args.kwargs["slowmode_delay"] == 30
        assert sent_content(interaction) == (
            "✅ Slowmode set to **30 seconds** in <#4242>.\n**Reason:** Slowmode adjustment"
        )
        assert test_db.get_moderation_log(GUILD_ID)[0]["action"] == "slowmode"

    @pytest.mark.asyncio
    async def test_disable_on_other_channel(self, cog, mock_admin):
        other = text_channel(channel_id=77)
        interaction = make_interaction(mock_admin, moderation_guild(None))
        interaction.channel = text_channel()

        await ModerationCog.slowmode.callback(cog, interaction, 0, other, "calm")

        other.edit.assert_awaited_once()
        interaction.channel.edit.assert_not_awaited()
        assert sent_content(interaction) == "✅ Slowmode **disabled** in <#77>.\n**Reason:** calm"

    @pytest.mark.asyncio
    async def test_missing_permission(self, cog, mock_admin, test_db):
        interaction = make_interaction(mock_admin, moderation_guild(None))
        interaction.channel = text_channel()
        interaction.channel.edit.side_effect = discord.Forbidden(MagicMock(status=403), "Missing Permissions")

        await ModerationCog.slowmode.callback(cog, interaction, 30, None, None)

        assert sent_content(interaction) == "❌ I cannot manage this channel. Please check my permissions."
        assert test_db.get_moderation_log(GUILD_ID) == []


# =============================================================================
# /lockdown, /unlock
# =============================================================================

class TestLockdown:
    """Tests for /lockdown and /unlock."""

    @pytest.fixture
    def cog(self, test_db, mock_bot):
        return ModerationCog(mock_bot)

    @pytest.mark.asyncio
    async def test_lock_and_unlock_channel(self, cog, mock_admin, test_db):
        overwrite = discord.PermissionOverwrite()
        interaction = make_interaction(mock_admin, moderation_guild(None))
        interaction.channel = text_channel(overwrite=overwrite)

        await ModerationCog.lockdown.callback(cog, interaction, "channel", None)

        assert overwrite.send_messages is False
        assert overwrite.add_reactions is False
        assert sent_content(interaction).startswith("🔒 **Channel Locked Down**")

        interaction = make_interaction(mock_admin, moderation_guild(None))
        interaction.channel = text_channel(overwrite=overwrite)

        await ModerationCog.unlock.callback(cog, interaction, "channel", None)

        assert overwrite.send_messages is None
        assert overwrite.create_public_threads is None
        assert sent_content(interaction).startswith("🔓 **Channel Unlocked**")
        actions = [row["action"] for row in test_db.get_moderation_log(GUILD_ID)]
        assert sorted(actions) == ["lockdown_channel", "unlock_channel"]

    @pytest.mark.asyncio
    async def test_server_lockdown_counts_locked_channels(self, cog, mock_admin, test_db):
        failing = text_channel(channel_id=2)
        failing.set_permissions.side_effect = discord.Forbidden(MagicMock(status=403), "Missing Permissions")
        guild = moderation_guild(None)
        guild.text_channels = [text_channel(channel_id=1), failing, text_channel(channel_id=3)]
        interaction = make_interaction(mock_admin, guild)

        await ModerationCog.lockdown.callback(cog, interaction, "server", "raid")

        content = sent_content(interaction)
        assert content.startswith("🔒 **SERVER LOCKDOWN ACTIVATED**")
        assert "**2** channels have been locked." in content
        log = test_db.get_moderation_log(GUILD_ID)[0]
        assert log["action"] == "lockdown_server"
        assert log["reason"] == "Locked 2 channels: raid"

    @pytest.mark.asyncio
    async def test_non_staff_denied(self, cog, mock_interaction):
        mock_interaction.channel = text_channel()

        await ModerationCog.lockdown.callback(cog, mock_interaction, "channel", None)

        assert sent_embed(mock_interaction).title == "❌ Access Denied"
        mock_interaction.channel.set_permissions.assert_not_awaited()


# =============================================================================
# /moveoffeco
# =============================================================================

class TestMoveOffEconomy:
    """Tests for the /moveoffeco command."""

    @pytest.mark.asyncio
    async def test_move_off_keeps_balance(self, test_db, mock_bot, mock_admin, mock_discord_guild):
        cog = EconomyCog(mock_bot)
        target = make_member(user_id=321, name="player")
        start = test_db.ensure_balance(321, GUILD_ID)
        interaction = make_interaction(mock_admin, mock_discord_guild)

        await EconomyCog.moveoffeco.callback(cog, interaction, target, "off")

        record = test_db.get_balance(321, GUILD_ID)
        assert record["off_economy"] == 1
        assert record["wallet"] == start["wallet"]
        assert sent_embed(interaction).title == "🔴 Economy Status Changed"

    @pytest.mark.asyncio
    async def test_non_admin_denied(self, test_db, mock_bot, mock_interaction):
        cog = EconomyCog(mock_bot)

        await EconomyCog.moveoffeco.callback(cog, mock_interaction, make_member(user_id=321), "off")

        assert sent_embed(mock_interaction).title == "❌ Access Denied"
        assert test_db.get_balance(321, GUILD_ID) is None


# =============================================================================
# /casino
# =============================================================================

class TestCasinoTargeting:
    """Tests for who may act on whose casino sessions."""

    @pytest.fixture
    def cog(self, mock_bot):
        mock_bot.casino_client.get_user_sessions = AsyncMock(
            return_value={"success": True, "hasActiveSessions": False, "count": 0},
        )
        mock_bot.casino_client.stop_user_sessions = AsyncMock()
        mock_bot.casino_client.release_user_sessions = AsyncMock()
        return CasinoCog(mock_bot)

    @pytest.mark.asyncio
    async def test_status_of_other_user_denied(self, cog, mock_bot, mock_interaction):
        await CasinoCog.casino_status.callback(cog, mock_interaction, make_member(user_id=321))

        assert sent_embed(mock_interaction).title == "❌ Access Denied"
        mock_bot.casino_client.get_user_sessions.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_status_of_self_allowed(self, cog, mock_bot, mock_interaction):
        await CasinoCog.casino_status.callback(cog, mock_interaction, None)

        mock_bot.casino_client.get_user_sessions.assert_awaited_once_with(mock_interaction.user.id)

    @pytest.mark.asyncio
    async def test_stop_and_release_of_other_user_denied(self, cog, mock_bot, mock_discord_member, mock_discord_guild):
        for command in (CasinoCog.casino_stop, CasinoCog.casino_release):
            interaction = make_interaction(mock_discord_member, mock_discord_guild)

            await command.callback(cog, interaction, make_member(user_id=321))

            assert sent_embed(interaction).title == "❌ Access Denied"
        mock_bot.casino_client.stop_user_sessions.assert_not_awaited()
        mock_bot.casino_client.release_user_sessions.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_admin_may_stop_other_user(self, cog, mock_bot, mock_admin, mock_discord_guild):
        mock_bot.casino_client.stop_user_sessions.return_value = {
            "success": True, "sessionsCleaned": 1, "totalRefunded": None,
        }
        interaction = make_interaction(mock_admin, mock_discord_guild)

        await CasinoCog.casino_stop.callback(cog, interaction, make_member(user_id=321))

        mock_bot.casino_client.stop_user_sessions.assert_awaited_once()
        assert sent_embed(interaction).title == "🛑 Testuser's Casino Sessions Stopped"


# =============================================================================
# Shifts
# =============================================================================

class TestShiftCommands:
    """Tests for shift command gates."""

    @pytest.fixture
    def cog(self, test_db, mock_bot):
        mock_bot.shift_manager = ShiftManager(mock_bot)
        return ShiftCog(mock_bot)

    @pytest.mark.asyncio
    async def test_clockin_non_staff_denied(self, cog, mock_bot, mock_interaction, test_db):
        await ShiftCog.clockin.callback(cog, mock_interaction)

        assert sent_embed(mock_interaction).title == "❌ Access Denied"
        assert not mock_bot.shift_manager.is_clocked_in(mock_interaction.user.id)
        assert test_db.get_active_shift(mock_interaction.user.id) is None

    @pytest.mark.asyncio
    async def test_clockin_admin(self, cog, mock_bot, mock_admin, mock_discord_guild):
        interaction = make_interaction(mock_admin, mock_discord_guild)

        await ShiftCog.clockin.callback(cog, interaction)

        assert sent_embed(interaction).title == "✅ Clocked In"
        assert mock_bot.shift_manager.is_clocked_in(mock_admin.id)

    @pytest.mark.asyncio
    async def test_clockoutall_with_no_shifts(self, cog, mock_admin, mock_discord_guild):
        interaction = make_interaction(mock_admin, mock_discord_guild)

        await ShiftCog.clockoutall.callback(cog, interaction, None)

        assert sent_content(interaction) == "📊 No active shifts to clock out."

    @pytest.mark.asyncio
    async def test_clockoutall_non_admin_denied(self, cog, mock_bot, mock_interaction):
        mock_bot.shift_manager.clock_in(5, GUILD_ID, "mod")

        await ShiftCog.clockoutall.callback(cog, mock_interaction, None)

        assert sent_embed(mock_interaction).title == "❌ Access Denied"
        assert mock_bot.shift_manager.is_clocked_in(5)


class TestTimesheetCommands:
    """Tests for the /timesheet group."""

    @pytest.fixture
    def cog(self, test_db, mock_bot):
        mock_bot.shift_manager = ShiftManager(mock_bot)
        return ShiftCog(mock_bot)

    @staticmethod
    def add_completed_shift(db, user_id, hours, earnings):
        started = time.time() - 86400
        db.execute(
            """INSERT INTO shifts
               (user_id, guild_id, role, pay_rate, clock_in, clock_out,
                hours_worked, earnings, last_activity, status)
               VALUES (?, ?, 'mod', 4200, ?, ?, ?, ?, ?, 'completed')""",
            (user_id, GUILD_ID, started, started + hours * 3600, hours, earnings, started)
        )

    @pytest.mark.asyncio
    async def test_non_admin_denied(self, cog, mock_interaction):
        await ShiftCog.timesheet_summary.callback(cog, mock_interaction, 7)

        assert sent_embed(mock_interaction).title == "❌ Access Denied"

    @pytest.mark.asyncio
    async def test_summary_without_data(self, cog, mock_admin, mock_discord_guild):
        interaction = make_interaction(mock_admin, mock_discord_guild)

        await ShiftCog.timesheet_summary.callback(cog, interaction, 7)

        embed = sent_embed(interaction)
        assert embed.title == "📊 Staff Timesheet Summary"
        assert embed.description == "No shift data found for the last 7 days."

    @pytest.mark.asyncio
    async def test_summary_totals(self, cog, mock_admin, mock_discord_guild, test_db):
        self.add_completed_shift(test_db, 1, 1.0, 4200)
        self.add_completed_shift(test_db, 2, 2.0, 8200)
        interaction = make_interaction(mock_admin, mock_discord_guild)

        await ShiftCog.timesheet_summary.callback(cog, interaction, 7)

        embed = sent_embed(interaction)
        assert embed.title == "📊 Staff Timesheet Summary (Last 7 days)"
        fields = {f.name: f.value for f in embed.fields}
        assert fields["👥 Total Staff"] == "2"
        assert fields["💰 Total Paid"] == "$12,400"
        assert fields["💵 Avg Pay/Staff"] == "$6,200"
        assert fields["🌟 Top Performers"].startswith("🥇 <@2>: 2.00h")

    @pytest.mark.asyncio
    async def test_user_history(self, cog, mock_admin, mock_discord_guild, test_db):
        self.add_completed_shift(test_db, 1, 1.5, 6300)
        staff = make_member(user_id=1, name="staffer")
        interaction = make_interaction(mock_admin, mock_discord_guild)

        await ShiftCog.timesheet_user.callback(cog, interaction, staff, 30)

        embed = sent_embed(interaction)
        assert embed.title == "📋 Timesheet for staffer"
        fields = {f.name: f.value for f in embed.fields}
        assert fields["⏱️ Total Hours"] == "1.50h"
        assert fields["📅 Recent Shifts"].startswith("✅ ")
        assert "📊 Work Pattern" in fields

    @pytest.mark.asyncio
    async def test_user_without_shifts(self, cog, mock_admin, mock_discord_guild):
        interaction = make_interaction(mock_admin, mock_discord_guild)

        await ShiftCog.timesheet_user.callback(cog, interaction, make_member(user_id=1), 30)

        assert sent_embed(interaction).fields[0].name == "❌ No Data"

    @pytest.mark.asyncio
    async def test_active_staff(self, cog, mock_bot, mock_admin, mock_discord_guild):
        mock_bot.shift_manager.clock_in(1, GUILD_ID, "admin")
        mock_bot.shift_manager.clock_in(2, GUILD_ID, "mod")
        mock_bot.shift_manager.start_break(2)
        interaction = make_interaction(mock_admin, mock_discord_guild)

        await ShiftCog.timesheet_active.callback(cog, interaction)

        embed = sent_embed(interaction)
        assert embed.description == "**2** staff members currently clocked in"
        fields = {f.name: f.value for f in embed.fields}
        assert fields["☕ On Break"] == "1"
        assert "(mod)\n├ Status: ☕ On Break" in fields["Active Staff"]

    @pytest.mark.asyncio
    async def test_no_active_staff(self, cog, mock_admin, mock_discord_guild):
        interaction = make_interaction(mock_admin, mock_discord_guild)

        await ShiftCog.timesheet_active.callback(cog, interaction)

        assert sent_embed(interaction).description == "No staff members are currently clocked in."


# =============================================================================
# /giveaway
# =============================================================================

class TestGiveawayCommands:
    """Tests for giveaway command replies."""

    @pytest.fixture
    def cog(self, test_db, mock_bot):
        mock_bot.giveaway_manager = GiveawayManager(mock_bot)
        return GiveawayCog(mock_bot)

    @pytest.mark.asyncio
    async def test_end_unknown_giveaway(self, cog, mock_admin, mock_discord_guild):
        interaction = make_interaction(mock_admin, mock_discord_guild)

        await GiveawayCog.giveaway_end.callback(cog, interaction, "123456")

        assert sent_content(interaction) == "❌ Giveaway not found or already ended."

    @pytest.mark.asyncio
    async def test_end_non_admin_denied(self, cog, mock_interaction):
        await GiveawayCog.giveaway_end.callback(cog, mock_interaction, "123456")

        assert sent_embed(mock_interaction).title == "❌ Access Denied"
