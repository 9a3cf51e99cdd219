"""
UAS Bot - Shift Manager Tests
=============================

Clock-in rules, pay calculation, breaks and inactivity handling.
"""

import time
from datetime import timezone

import pytest

from src.services.shifts import (
    ShiftError,
    ShiftManager,
    calculate_earnings,
    calculate_hours,
    work_pattern,
)
from tests.conftest import GUILD_ID, make_member


@pytest.fixture
def shifts(test_db, mock_bot):
    mock_bot.fetch_user.return_value = make_member()
    return ShiftManager(mock_bot)


def backdate(manager, user_id, hours, idle_hours=None):
    """Move a shift's clock-in (and last activity) into the past."""
    shift = manager.active_shifts[user_id]
    now = time.time()
    shift.clock_in = now - hours * 3600
    shift.last_activity = now - (idle_hours if idle_hours is not None else hours) * 3600
    manager.db.update_shift_activity(shift.shift_id, shift.last_activity)
    return shift


# =============================================================================
# Pure Helpers
# =============================================================================

class TestPayCalculation:
    """Tests for hours and earnings helpers."""

    def test_hours_exclude_breaks(self):
        assert calculate_hours(0, 3 * 3600, break_minutes=30) == pytest.approx(2.5)

    def test_hours_never_negative(self):
        assert calculate_hours(0, 600, break_minutes=60) == 0.0

    def test_earnings_floor(self):
        assert calculate_earnings(1.5, 4200) == 6300
        assert calculate_earnings(0.33333, 8000) == 2666


# =============================================================================
# Clock In / Out
# =============================================================================

class TestClockIn:
    """Tests for clock-in rules."""

    def test_second_clock_in_rejected(self, shifts):
        shifts.clock_in(1, GUILD_ID, "admin")
        with pytest.raises(ShiftError):
            shifts.clock_in(1, GUILD_ID, "admin")

    def test_non_staff_rejected(self, shifts):
        with pytest.raises(ShiftError):
            shifts.clock_in(1, GUILD_ID, None)

    def test_pay_rate_by_role(self, shifts):
        assert shifts.clock_in(1, GUILD_ID, "admin").pay_rate == 8000
        assert shifts.clock_in(2, GUILD_ID, "mod").pay_rate == 4200

    def test_clock_out_without_shift(self, shifts):
        with pytest.raises(ShiftError):
            shifts.clock_out(1)


class TestClockOut:
    """Tests for clock-out and payment."""

    def test_pays_wallet(self, shifts, test_db):
        start = test_db.ensure_balance(1, GUILD_ID)["wallet"]
        shifts.clock_in(1, GUILD_ID, "mod")
        backdate(shifts, 1, hours=2)

        result = shifts.clock_out(1)

        assert result.hours_worked == pytest.approx(2.0, abs=0.01)
        assert result.earnings == calculate_earnings(result.hours_worked, 4200)
        assert test_db.get_balance(1, GUILD_ID)["wallet"] == start + result.earnings
        assert not shifts.is_clocked_in(1)
        assert test_db.get_active_shift(1) is None

    def test_clock_in_again_after_clock_out(self, shifts):
        shifts.clock_in(1, GUILD_ID, "mod")
        shifts.clock_out(1)
        assert shifts.clock_in(1, GUILD_ID, "mod").user_id == 1

    def test_failed_credit_keeps_shift_active(self, shifts, test_db):
        start = test_db.ensure_balance(7, GUILD_ID)["wallet"]
        shifts.clock_in(7, GUILD_ID, "admin")
        backdate(shifts, 7, hours=1)
        test_db.execute(
            "CREATE TRIGGER block_wallet BEFORE UPDATE ON user_balances "
            "BEGIN SELECT RAISE(ABORT, 'wallet locked'); END"
        )

        with pytest.raises(ShiftError):
            shifts.clock_out(7)

        row = test_db.get_active_shift(7)
        assert row["status"] == "active"
        assert row["earnings"] == 0
        assert test_db.get_balance(7, GUILD_ID)["wallet"] == start
        shifts.sync_from_db()
        assert shifts.is_clocked_in(7)

        test_db.execute("DROP TRIGGER block_wallet")
        result = shifts.clock_out(7)

        assert result.earnings > 0
        assert test_db.get_balance(7, GUILD_ID)["wallet"] == start + result.earnings

    def test_clock_out_all_by_guild(self, shifts):
        shifts.clock_in(1, GUILD_ID, "mod")
        shifts.clock_in(2, GUILD_ID + 1, "mod")

        results = shifts.clock_out_all("Sleep mode", guild_id=GUILD_ID)

        assert [r.user_id for r in results] == [1]
        assert shifts.is_clocked_in(2)


# =============================================================================
# Breaks
# =============================================================================

class TestBreaks:
    """Tests for breaks and DND."""

    def test_toggle(self, shifts):
        shifts.clock_in(1, GUILD_ID, "admin")

        assert shifts.toggle_break(1).startswith("Break started")
        assert shifts.get_status(1).status == "break"
        assert shifts.toggle_break(1).startswith("Break ended")
        assert shifts.get_status(1).status == "active"

    def test_double_break_rejected(self, shifts):
        shifts.clock_in(1, GUILD_ID, "admin")
        shifts.start_break(1)
        with pytest.raises(ShiftError):
            shifts.start_break(1)

    def test_end_break_without_break(self, shifts):
        shifts.clock_in(1, GUILD_ID, "admin")
        with pytest.raises(ShiftError):
            shifts.end_break(1)

    def test_break_time_not_paid(self, shifts):
        shift = shifts.clock_in(1, GUILD_ID, "admin")
        backdate(shifts, 1, hours=2)
        shift.break_minutes = 60

        assert shifts.clock_out(1).hours_worked == pytest.approx(1.0, abs=0.01)

    def test_open_break_survives_restart(self, shifts, test_db, mock_bot):
        shifts.clock_in(1, GUILD_ID, "admin")
        shifts.start_break(1)

        fresh = ShiftManager(mock_bot)
        fresh.sync_from_db()

        assert fresh.active_shifts[1].on_break
        assert fresh.get_status(1).status == "break"

        fresh.end_break(1)
        assert test_db.get_active_shift(1)["break_started"] is None

    def test_dnd(self, shifts):
        shifts.clock_in(1, GUILD_ID, "admin")
        shifts.set_dnd(1, True)
        assert shifts.is_dnd(1)
        assert shifts.get_status(1).dnd is True


# =============================================================================
# Inactivity
# =============================================================================

class TestInactivity:
    """Tests for inactivity warnings and auto clock-out."""

    @pytest.mark.asyncio
    async def test_warns_once(self, shifts, mock_bot):
        shifts.clock_in(1, GUILD_ID, "mod")
        backdate(shifts, 1, hours=3)

        assert await shifts.check_inactive_staff() == [1]
        assert await shifts.check_inactive_staff() == []
        mock_bot.get_user.assert_called_with(1)

    @pytest.mark.asyncio
    async def test_activity_resets_warning(self, shifts):
        shifts.clock_in(1, GUILD_ID, "mod")
        backdate(shifts, 1, hours=3)
        await shifts.check_inactive_staff()

        shifts.update_activity(1)

        assert shifts.active_shifts[1].warned is False
        assert await shifts.check_inactive_staff() == []

    @pytest.mark.asyncio
    async def test_break_is_not_inactivity(self, shifts):
        shifts.clock_in(1, GUILD_ID, "mod")
        backdate(shifts, 1, hours=5)
        shifts.start_break(1)

        assert await shifts.check_inactive_staff() == []
        assert await shifts.auto_clock_out_inactive() == []

    @pytest.mark.asyncio
    async def test_auto_clock_out(self, shifts):
        shifts.clock_in(1, GUILD_ID, "mod")
        shifts.clock_in(2, GUILD_ID, "mod")
        backdate(shifts, 1, hours=5)

        results = await shifts.auto_clock_out_inactive()

        assert [r.user_id for r in results] == [1]
        assert "inactivity" in results[0].reason
        assert shifts.is_clocked_in(2)

    @pytest.mark.asyncio
    async def test_sleep_mode_skips_auto_clock_out(self, shifts, test_db):
        shifts.clock_in(1, GUILD_ID, "mod")
        backdate(shifts, 1, hours=5)
        shifts.enable_sleep_mode(GUILD_ID)

        assert await shifts.auto_clock_out_inactive() == []
        assert test_db.is_sleep_mode(GUILD_ID)

        shifts.disable_sleep_mode(GUILD_ID)
        assert len(await shifts.auto_clock_out_inactive()) == 1


# =============================================================================
# Sync & Reports
# =============================================================================

class TestSync:
    """Tests for database sync and reports."""

    def test_restores_from_database(self, shifts, test_db, mock_bot):
        shifts.clock_in(1, GUILD_ID, "admin")

        fresh = ShiftManager(mock_bot)
        fresh.sync_from_db()

        assert fresh.active_shifts[1].role == "admin"

    def test_report(self, shifts):
        shifts.clock_in(1, GUILD_ID, "mod")
        backdate(shifts, 1, hours=1)
        shifts.clock_out(1)

        report = shifts.generate_report(1, GUILD_ID, days=7)

        assert report.total_shifts == 1
        assert report.total_hours == pytest.approx(1.0, abs=0.01)
        assert report.average_hours == pytest.approx(report.total_hours)


# =============================================================================
# Timesheets
# =============================================================================

def add_completed_shift(db, user_id, hours, earnings, guild_id=GUILD_ID, started=None, break_minutes=0):
    started = started if started is not None else time.time() - 86400
    db.execute(
        """INSERT INTO shifts
           (user_id, guild_id, role, pay_rate, clock_in, clock_out, break_minutes,
            hours_worked, earnings, last_activity, status)
           VALUES (?, ?, 'mod', 4200, ?, ?, ?, ?, ?, ?, 'completed')""",
        (user_id, guild_id, started, started + hours * 3600, break_minutes, hours, earnings, started)
    )


class TestTimesheet:
    """Tests for guild-wide timesheets."""

    def test_summary_groups_completed_shifts(self, shifts, test_db):
        add_completed_shift(test_db, 1, 2.0, 8400, break_minutes=30)
        add_completed_shift(test_db, 1, 1.0, 4200)
        add_completed_shift(test_db, 2, 5.0, 40000)
        add_completed_shift(test_db, 3, 9.0, 1, guild_id=GUILD_ID + 1)
        shifts.clock_in(4, GUILD_ID, "mod")

        entries = shifts.timesheet_summary(GUILD_ID, days=7)

        assert [e.user_id for e in entries] == [2, 1]
        assert entries[1].shift_count == 2
        assert entries[1].total_hours == pytest.approx(3.0)
        assert entries[1].total_earnings == 12600
        assert entries[1].break_hours == pytest.approx(0.5)
        assert entries[1].average_hours == pytest.approx(1.5)

    def test_summary_respects_window(self, shifts, test_db):
        add_completed_shift(test_db, 1, 2.0, 8400, started=time.time() - 10 * 86400)
        assert shifts.timesheet_summary(GUILD_ID, days=7) == []
        assert len(shifts.timesheet_summary(GUILD_ID, days=30)) == 1

    def test_user_timesheet_lists_active_shift(self, shifts, test_db):
        add_completed_shift(test_db, 1, 2.0, 8400)
        shifts.clock_in(1, GUILD_ID, "mod")

        report = shifts.user_timesheet(1, GUILD_ID, days=30)

        assert report.total_shifts == 2
        assert report.shifts[0]["status"] == "active"
        assert report.total_hours == pytest.approx(2.0)
        assert report.average_hours == pytest.approx(2.0)

    def test_active_statuses_do_not_count_as_activity(self, shifts):
        shifts.clock_in(1, GUILD_ID, "admin")
        shifts.clock_in(2, GUILD_ID, "mod")
        backdate(shifts, 2, hours=3)
        shifts.start_break(1)
        idle_since = shifts.active_shifts[2].last_activity

        statuses = shifts.active_statuses(GUILD_ID)

        assert [shift.user_id for shift, _ in statuses] == [2, 1]
        assert statuses[1][1].status == "break"
        assert shifts.active_shifts[2].last_activity == idle_since

    def test_work_pattern(self):
        monday_evening = 1704139200      # 2024-01-01 20:00 UTC
        tuesday_morning = 1704186000     # 2024-01-02 09:00 UTC
        next_monday_night = 1704747600   # 2024-01-08 21:00 UTC
        rows = [{"clock_in": t} for t in (monday_evening, tuesday_morning, next_monday_night)]

        assert work_pattern(rows, timezone.utc) == (
            "Most active on **Monday** (2 shifts)\n"
            "Prefers **Evening** shifts (2 times)"
        )

    def test_work_pattern_without_shifts(self):
        assert work_pattern([]) is None
