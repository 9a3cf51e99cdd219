"""
UAS Bot - Shift Manager Service
===============================

Staff clock-in/clock-out with hourly pay, breaks, inactivity
monitoring and per-guild sleep mode.

DESIGN:
    Active shifts are held in memory keyed by user ID and mirrored in the
    shifts table. Three background loops run in the scheduler style:

    - Inactivity warning (every 15 min): DM staff idle for 2+ hours
    - Auto clock-out (every 30 min): clock out staff idle for 4+ hours,
      skipping guilds in sleep mode
    - Sync (every 5 min): reconcile memory with the database

    Staff on break are never warned or auto clocked out. Pay is credited
    to the wallet on clock-out: floor(hours * rate), where hours excludes
    break time.
"""

import asyncio
import math
import sqlite3
import time
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Awaitable, Callable, Dict, List, Optional, Set, Tuple

import discord

from src.core.logger import logger
from src.core.config import get_config
from src.core.database import get_db
from src.core.constants import SECONDS_PER_DAY, SECONDS_PER_HOUR

if TYPE_CHECKING:
    from src.bot import UASBot


# =============================================================================
# Types
# =============================================================================

class ShiftError(Exception):
    """User-facing shift failure. str(e) is the reply text."""

    pass


@dataclass
class ActiveShift:
    """An in-progress shift."""

    shift_id: int
    user_id: int
    guild_id: int
    role: str
    pay_rate: int
    clock_in: float
    last_activity: float
    break_minutes: float = 0.0
    break_started: Optional[float] = None
    dnd: bool = False
    warned: bool = False

    @property
    def on_break(self) -> bool:
        return self.break_started is not None

    @property
    def status(self) -> str:
        return "break" if self.on_break else "active"


@dataclass
class ClockOutResult:
    user_id: int
    guild_id: int
    shift_id: int
    role: str
    hours_worked: float
    earnings: int
    reason: str


@dataclass
class ShiftStatus:
    role: str
    clock_in: float
    hours_worked: float
    estimated_earnings: int
    pay_rate: int
    status: str
    break_minutes: float
    dnd: bool


@dataclass
class ShiftReport:
    days: int
    total_shifts: int
    total_hours: float
    total_earnings: int
    average_hours: float
    shifts: List[dict] = field(default_factory=list)


@dataclass
class TimesheetEntry:
    """One staff member's completed-shift totals."""

    user_id: int
    shift_count: int
    total_hours: float
    total_earnings: int
    break_hours: float

    @property
    def average_hours(self) -> float:
        return self.total_hours / self.shift_count if self.shift_count else 0.0


def calculate_hours(clock_in: float, clock_out: float, break_minutes: float = 0.0) -> float:
    """Hours worked between two timestamps, minus breaks, never negative."""
    total_hours = (clock_out - clock_in) / SECONDS_PER_HOUR
    return max(0.0, total_hours - break_minutes / 60)


def calculate_earnings(hours: float, pay_rate: int) -> int:
    return int(math.floor(hours * pay_rate))


def part_of_day(hour: int) -> str:
    if 6 <= hour < 12:
        return "Morning"
    if 12 <= hour < 18:
        return "Afternoon"
    if 18 <= hour < 24:
        return "Evening"
    return "Night"


def work_pattern(shifts: List[dict], tz=None) -> Optional[str]:
    """
    Describe when a staff member usually works.

    Counts clock-ins by weekday and by part of day in `tz` and reports
    the most common of each.
    """
    days: Counter = Counter()
    parts: Counter = Counter()
    for shift in shifts:
        if not shift.get("clock_in"):
            continue
        started = datetime.fromtimestamp(shift["clock_in"], tz)
        days[started.strftime("%A")] += 1
        parts[part_of_day(started.hour)] += 1

    if not days:
        return None

    day, day_count = days.most_common(1)[0]
    part, part_count = parts.most_common(1)[0]
    return (
        f"Most active on **{day}** ({day_count} shifts)\n"
        f"Prefers **{part}** shifts ({part_count} times)"
    )


# =============================================================================
# Shift Manager
# =============================================================================

class ShiftManager:
    """
    Tracks staff shifts and pays staff on clock-out.

    Attributes:
        bot: Main bot instance.
        config: Bot configuration.
        db: Database manager.
        active_shifts: In-progress shifts by user ID.
        sleep_mode_guilds: Guilds where auto clock-out is paused.
        tasks: Background loop tasks.
        running: Whether the loops are active.
    """

    def __init__(self, bot: "UASBot") -> None:
        self.bot = bot
        self.config = get_config()
        self.db = get_db()
        self.active_shifts: Dict[int, ActiveShift] = {}
        self.sleep_mode_guilds: Set[int] = set()
        self.tasks: List[asyncio.Task] = []
        self.running: bool = False

    @property
    def pay_rates(self) -> Dict[str, int]:
        return {
            "admin": self.config.admin_pay_rate,
            "mod": self.config.mod_pay_rate,
        }

    # =========================================================================
    # Lifecycle Management
    # =========================================================================

    async def start(self) -> None:
        """Load state and start the monitoring loops."""
        for task in self.tasks:
            if not task.done():
                task.cancel()
        self.tasks = []

        self.sleep_mode_guilds = self.db.get_sleep_mode_guilds()
        self.sync_from_db()

        self.running = True
        self.tasks = [
            asyncio.create_task(self._loop(
                "Inactivity Warning", self.config.shift_warning_interval, self.check_inactive_staff,
            )),
            asyncio.create_task(self._loop(
                "Auto Clock-Out", self.config.shift_clockout_interval, self.auto_clock_out_inactive,
            )),
            asyncio.create_task(self._loop(
                "Shift Sync", self.config.shift_sync_interval, self._sync_async,
            )),
        ]

        logger.tree("Shift Manager Started", [
            ("Active Shifts", str(len(self.active_shifts))),
            ("Sleep Mode Guilds", str(len(self.sleep_mode_guilds))),
            ("Warning Check", f"{self.config.shift_warning_interval}s"),
            ("Clock-Out Check", f"{self.config.shift_clockout_interval}s"),
            ("Sync", f"{self.config.shift_sync_interval}s"),
        ], emoji="🕐")

    async def stop(self) -> None:
        self.running = False

        for task in self.tasks:
            if not task.done():
                task.cancel()
        for task in self.tasks:
            try:
                await task
            except asyncio.CancelledError:
                pass
        self.tasks = []

        logger.info("Shift Manager Stopped")

    async def _loop(self, name: str, interval: float, func: Callable[[], Awaitable[object]]) -> None:
        await self.bot.wait_until_ready()

        while self.running:
            try:
                await asyncio.sleep(interval)
                await func()
            except asyncio.CancelledError:
                break
            except Exception as e:
                logger.error(f"{name} Loop Error", [
                    ("Error Type", type(e).__name__),
                    ("Error", str(e)[:100]),
                ])

    async def _sync_async(self) -> None:
        self.sync_from_db()

    # =========================================================================
    # Clock In / Out
    # =========================================================================

    def clock_in(self, user_id: int, guild_id: int, role: Optional[str]) -> ActiveShift:
        """
        Start a shift.

        Raises:
            ShiftError: Already clocked in, or role is not admin/mod.
        """
        if user_id in self.active_shifts or self.db.get_active_shift(user_id):
            raise ShiftError("You already have an active shift. Please clock out first.")

        if role not in self.pay_rates:
            raise ShiftError("Only admins and moderators can clock in for shifts.")

        pay_rate = self.pay_rates[role]
        now = time.time()
        try:
            shift_id = self.db.create_shift(user_id, guild_id, role, pay_rate, clock_in=now)
        except sqlite3.IntegrityError:
            raise ShiftError("You already have an active shift. Please clock out first.")

        shift = ActiveShift(
            shift_id=shift_id,
            user_id=user_id,
            guild_id=guild_id,
            role=role,
            pay_rate=pay_rate,
            clock_in=now,
            last_activity=now,
        )
        self.active_shifts[user_id] = shift

        logger.tree("Staff Clocked In", [
            ("User ID", str(user_id)),
            ("Role", role),
            ("Pay Rate", f"${pay_rate:,}/h"),
            ("Shift ID", str(shift_id)),
        ], emoji="🟢")

        return shift

    def clock_out(self, user_id: int, reason: str = "Manual clock out") -> ClockOutResult:
        """
        End a shift and pay the wallet.

        The shift stays active when the database write fails.

        Raises:
            ShiftError: Not clocked in, or the payout could not be saved.
        """
        shift = self.active_shifts.get(user_id)
        if shift is None:
            raise ShiftError("You are not currently clocked in.")

        now = time.time()
        break_minutes = shift.break_minutes
        if shift.on_break:
            break_minutes += (now - shift.break_started) / 60

        hours = calculate_hours(shift.clock_in, now, break_minutes)
        earnings = calculate_earnings(hours, shift.pay_rate)

        try:
            self.db.complete_shift_and_pay(
                shift.shift_id, user_id, shift.guild_id,
                now, break_minutes, hours, earnings, reason,
            )
        except sqlite3.Error as e:
            logger.error("Shift Payout Failed", [
                ("User ID", str(user_id)),
                ("Shift ID", str(shift.shift_id)),
                ("Earnings", f"${earnings:,}"),
                ("Error Type", type(e).__name__),
                ("Error", str(e)[:100]),
            ])
            raise ShiftError("Failed to clock out. Your shift is still active, please try again.")

        shift.break_minutes = break_minutes
        shift.break_started = None
        self.active_shifts.pop(user_id, None)

        logger.tree("Staff Clocked Out", [
            ("User ID", str(user_id)),
            ("Hours", f"{hours:.2f}"),
            ("Earnings", f"${earnings:,}"),
            ("Reason", reason),
        ], emoji="🔴")

        return ClockOutResult(
            user_id=user_id,
            guild_id=shift.guild_id,
            shift_id=shift.shift_id,
            role=shift.role,
            hours_worked=hours,
            earnings=earnings,
            reason=reason,
        )

    def clock_out_all(self, reason: str = "System shutdown", guild_id: Optional[int] = None) -> List[ClockOutResult]:
        """Clock out every active shift, optionally only in one guild."""
        results = []
        for user_id, shift in list(self.active_shifts.items()):
            if guild_id is not None and shift.guild_id != guild_id:
                continue
            try:
                results.append(self.clock_out(user_id, reason))
            except Exception as e:
                logger.error("Bulk Clock-Out Failed", [
                    ("User ID", str(user_id)),
                    ("Error Type", type(e).__name__),
                    ("Error", str(e)[:100]),
                ])

        if results:
            logger.tree("All Staff Clocked Out", [
                ("Count", str(len(results))),
                ("Total Paid", f"${sum(r.earnings for r in results):,}"),
                ("Reason", reason),
            ], emoji="📊")
        return results

    # =========================================================================
    # Breaks & DND
    # =========================================================================

    def _require_shift(self, user_id: int) -> ActiveShift:
        shift = self.active_shifts.get(user_id)
        if shift is None:
            raise ShiftError("You are not currently clocked in.")
        return shift

    def start_break(self, user_id: int) -> str:
        shift = self._require_shift(user_id)
        if shift.on_break:
            raise ShiftError("You are already on break.")

        now = time.time()
        self.db.update_shift_break(shift.shift_id, shift.break_minutes, break_started=now)
        shift.break_started = now
        logger.debug("Break Started", [("User ID", str(user_id))])
        return "Break started! Use `/shift break` again to end your break."

    def end_break(self, user_id: int) -> str:
        shift = self._require_shift(user_id)
        if not shift.on_break:
            raise ShiftError("You are not currently on break.")

        now = time.time()
        duration = (now - shift.break_started) / 60
        shift.break_minutes += duration
        shift.break_started = None
        shift.last_activity = now
        shift.warned = False
        self.db.update_shift_break(shift.shift_id, shift.break_minutes)

        logger.debug("Break Ended", [
            ("User ID", str(user_id)),
            ("Duration", f"{duration:.1f}m"),
        ])
        return f"Break ended! Break duration: {duration:.1f} minutes."

    def toggle_break(self, user_id: int) -> str:
        """Start a break, or end the current one."""
        shift = self._require_shift(user_id)
        return self.end_break(user_id) if shift.on_break else self.start_break(user_id)

    def set_dnd(self, user_id: int, enabled: bool) -> str:
        shift = self._require_shift(user_id)
        shift.dnd = enabled
        return f"Do Not Disturb mode {'enabled' if enabled else 'disabled'}."

    def is_dnd(self, user_id: int) -> bool:
        shift = self.active_shifts.get(user_id)
        return shift.dnd if shift else False

    # =========================================================================
    # Status & Activity
    # =========================================================================

    def get_status(self, user_id: int) -> ShiftStatus:
        """Current hours and estimated pay. Counts as activity."""
        if user_id not in self.active_shifts:
            self.sync_from_db()
        shift = self._require_shift(user_id)
        status = self._snapshot(shift, time.time())
        self.update_activity(user_id)
        return status

    def active_statuses(self, guild_id: int) -> List[Tuple[ActiveShift, ShiftStatus]]:
        """Every clocked-in shift in a guild with its live totals, most hours first."""
        self.sync_from_db()
        now = time.time()
        statuses = [(s, self._snapshot(s, now)) for s in self.get_clocked_in(guild_id)]
        statuses.sort(key=lambda pair: pair[1].hours_worked, reverse=True)
        return statuses

    @staticmethod
    def _snapshot(shift: ActiveShift, now: float) -> ShiftStatus:
        break_minutes = shift.break_minutes
        if shift.on_break:
            break_minutes += (now - shift.break_started) / 60

        hours = calculate_hours(shift.clock_in, now, break_minutes)
        return ShiftStatus(
            role=shift.role,
            clock_in=shift.clock_in,
            hours_worked=hours,
            estimated_earnings=calculate_earnings(hours, shift.pay_rate),
            pay_rate=shift.pay_rate,
            status=shift.status,
            break_minutes=break_minutes,
            dnd=shift.dnd,
        )

    def update_activity(self, user_id: int) -> None:
        """Mark a clocked-in staff member as active. No-op otherwise."""
        shift = self.active_shifts.get(user_id)
        if shift is None:
            return

        now = time.time()
        shift.last_activity = now
        shift.warned = False
        try:
            self.db.update_shift_activity(shift.shift_id, now)
        except sqlite3.Error as e:
            logger.error("Shift Activity Update Failed", [
                ("User ID", str(user_id)),
                ("Error", str(e)[:100]),
            ])

    def is_clocked_in(self, user_id: int) -> bool:
        return user_id in self.active_shifts

    def get_clocked_in(self, guild_id: int) -> List[ActiveShift]:
        return [s for s in self.active_shifts.values() if s.guild_id == guild_id]

    # =========================================================================
    # Reports
    # =========================================================================

    def generate_report(self, user_id: int, guild_id: int, days: int = 7) -> ShiftReport:
        since = time.time() - days * SECONDS_PER_DAY
        shifts = self.db.get_completed_shifts(user_id, guild_id, since)

        total_hours = sum(float(s["hours_worked"] or 0) for s in shifts)
        total_earnings = sum(int(s["earnings"] or 0) for s in shifts)

        return ShiftReport(
            days=days,
            total_shifts=len(shifts),
            total_hours=total_hours,
            total_earnings=total_earnings,
            average_hours=total_hours / len(shifts) if shifts else 0.0,
            shifts=shifts,
        )

    def timesheet_summary(self, guild_id: int, days: int = 7) -> List[TimesheetEntry]:
        """Completed-shift totals per staff member, most hours first."""
        since = time.time() - days * SECONDS_PER_DAY
        return [
            TimesheetEntry(
                user_id=row["user_id"],
                shift_count=int(row["shift_count"]),
                total_hours=float(row["total_hours"]),
                total_earnings=int(row["total_earnings"]),
                break_hours=float(row["total_break_minutes"]) / 60,
            )
            for row in self.db.get_timesheet_summary(guild_id, since)
        ]

    def user_timesheet(self, user_id: int, guild_id: int, days: int = 30) -> ShiftReport:
        """Like generate_report, but the shift list keeps active shifts too."""
        since = time.time() - days * SECONDS_PER_DAY
        shifts = self.db.get_user_shifts(user_id, guild_id, since)
        completed = [s for s in shifts if s["status"] == "completed"]

        total_hours = sum(float(s["hours_worked"] or 0) for s in completed)
        return ShiftReport(
            days=days,
            total_shifts=len(shifts),
            total_hours=total_hours,
            total_earnings=sum(int(s["earnings"] or 0) for s in completed),
            average_hours=total_hours / len(completed) if completed else 0.0,
            shifts=shifts,
        )

    # =========================================================================
    # Database Sync
    # =========================================================================

    def sync_from_db(self) -> None:
        """
        Reconcile memory with the database.

        Adds DB-active shifts missing from memory and drops in-memory
        shifts the database no longer has as active.
        """
        rows = self.db.get_active_shifts()
        db_users = {row["user_id"] for row in rows}
        added = 0

        for row in rows:
            if row["user_id"] in self.active_shifts:
                continue
            self.active_shifts[row["user_id"]] = ActiveShift(
                shift_id=row["id"],
                user_id=row["user_id"],
                guild_id=row["guild_id"],
                role=row["role"],
                pay_rate=row["pay_rate"],
                clock_in=row["clock_in"],
                last_activity=row["last_activity"] or row["clock_in"],
                break_minutes=float(row["break_minutes"] or 0),
                break_started=row.get("break_started"),
            )
            added += 1

        stale = [uid for uid in self.active_shifts if uid not in db_users]
        for user_id in stale:
            del self.active_shifts[user_id]

        if added or stale:
            logger.tree("Shifts Synced", [
                ("Added", str(added)),
                ("Dropped", str(len(stale))),
                ("Active", str(len(self.active_shifts))),
            ], emoji="🔄")

    # =========================================================================
    # Inactivity Monitoring
    # =========================================================================

    async def _dm(self, user_id: int, content: str) -> None:
        try:
            user = self.bot.get_user(user_id) or await self.bot.fetch_user(user_id)
            await user.send(content)
        except discord.HTTPException as e:
            logger.debug("Shift DM Failed", [
                ("User ID", str(user_id)),
                ("Error", str(e)[:50]),
            ])

    async def check_inactive_staff(self) -> List[int]:
        """DM a warning to staff idle past the warning threshold."""
        self.sync_from_db()
        cutoff = time.time() - self.config.shift_inactive_warning_hours * SECONDS_PER_HOUR
        warned = []

        for shift in list(self.active_shifts.values()):
            if shift.on_break or shift.warned or shift.last_activity >= cutoff:
                continue
            shift.warned = True
            warned.append(shift.user_id)
            await self._dm(
                shift.user_id,
                f"⚠️ You have been inactive for over {self.config.shift_inactive_warning_hours} hours. "
                "You will be automatically clocked out soon if no activity is detected.",
            )

        if warned:
            logger.tree("Inactive Staff Warned", [
                ("Count", str(len(warned))),
            ], emoji="⚠️")
        return warned

    async def auto_clock_out_inactive(self) -> List[ClockOutResult]:
        """Clock out staff idle past the auto clock-out threshold."""
        self.sync_from_db()
        cutoff = time.time() - self.config.shift_auto_clockout_hours * SECONDS_PER_HOUR
        results = []

        for shift in list(self.active_shifts.values()):
            if self.is_sleep_mode(shift.guild_id):
                continue
            if shift.on_break or shift.last_activity >= cutoff:
                continue

            try:
                result = self.clock_out(
                    shift.user_id,
                    f"Auto clock-out due to inactivity ({self.config.shift_auto_clockout_hours}+ hours)",
                )
            except ShiftError:
                continue
            results.append(result)
            await self._dm(
                shift.user_id,
                f"🕐 You have been automatically clocked out due to inactivity. "
                f"You worked {result.hours_worked:.2f} hours and earned ${result.earnings:,}.",
            )

        if results:
            logger.tree("Inactive Staff Clocked Out", [
                ("Count", str(len(results))),
            ], emoji="🕐")
        return results

    # =========================================================================
    # Sleep Mode
    # =========================================================================

    def enable_sleep_mode(self, guild_id: int) -> None:
        self.sleep_mode_guilds.add(guild_id)
        self.db.set_sleep_mode(guild_id, True)

    def disable_sleep_mode(self, guild_id: int) -> None:
        self.sleep_mode_guilds.discard(guild_id)
        self.db.set_sleep_mode(guild_id, False)

    def is_sleep_mode(self, guild_id: int) -> bool:
        return guild_id in self.sleep_mode_guilds


__all__ = [
    "ShiftManager",
    "ShiftError",
    "ActiveShift",
    "ClockOutResult",
    "ShiftStatus",
    "ShiftReport",
    "calculate_hours",
    "calculate_earnings",
]
