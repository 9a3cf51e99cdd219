"""
UAS Bot - Giveaway Manager
==========================

Runs giveaways from creation to winner announcement.

DESIGN:
    Each running giveaway lives in `active` keyed by message ID and has a
    one-shot asyncio timer in `timers`. The database mirrors both the
    giveaway row and every entry, so a restart reloads participants and
    a reroll draws from stored entries after the giveaway left memory.

    Operations that fail for a user-facing reason raise GiveawayError
    carrying the reply text; cogs show it as-is.
"""

import asyncio
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, Iterable, List, Optional, Set, Tuple

import discord

from src.core.logger import logger
from src.core.database import get_db
from src.core.constants import (
    GIVEAWAY_ENTRANTS_PER_PAGE,
    GIVEAWAY_LIST_MAX_CHARS,
)
from src.utils.channels import fetch_message, resolve_channel
from src.services.giveaways.button import build_enter_view
from src.services.giveaways.embeds import (
    build_giveaway_embed,
    build_result_embed,
    build_reroll_embed,
)
from src.services.giveaways.parsing import (
    PAST_DATETIME_MESSAGE,
    extract_end_timestamp,
    extract_prize,
    parse_end_datetime,
    pick_winners,
)

if TYPE_CHECKING:
    from src.bot import UASBot


# =============================================================================
# Types
# =============================================================================

class GiveawayError(Exception):
    """User-facing giveaway failure. str(e) is the reply text."""

    pass


@dataclass
class GiveawayState:
    """In-memory state of a running giveaway."""

    giveaway_id: int
    message_id: int
    channel_id: int
    guild_id: int
    prize: str
    end_time: float
    winner_count: int = 1
    creator_id: Optional[int] = None
    participants: Set[int] = field(default_factory=set)


@dataclass
class RecoveredGiveaway:
    """Result of a successful recovery."""

    giveaway_id: int
    message_id: int
    prize: str
    end_time: float
    is_active: bool


# =============================================================================
# Giveaway Manager
# =============================================================================

class GiveawayManager:
    """
    Owns running giveaways and their timers.

    Attributes:
        bot: Main bot instance.
        db: Database manager.
        active: Running giveaways by message ID.
        timers: One-shot end timers by message ID.
    """

    def __init__(self, bot: "UASBot") -> None:
        self.bot = bot
        self.db = get_db()
        self.active: Dict[int, GiveawayState] = {}
        self.timers: Dict[int, asyncio.Task] = {}

    # =========================================================================
    # Helpers
    # =========================================================================

    async def _resolve_channel(self, channel_id: int) -> Optional[discord.abc.Messageable]:
        return await resolve_channel(self.bot, channel_id)

    async def _fetch_message(self, channel_id: int, message_id: int) -> Optional[discord.Message]:
        return await fetch_message(self.bot, channel_id, message_id)

    def _arm_timer(self, message_id: int, end_time: float) -> None:
        existing = self.timers.pop(message_id, None)
        if existing and not existing.done():
            existing.cancel()
        delay = max(0.0, end_time - time.time())
        self.timers[message_id] = asyncio.create_task(self._timer(message_id, delay))

    async def _timer(self, message_id: int, delay: float) -> None:
        try:
            await asyncio.sleep(delay)
            await self.conclude(message_id)
        except asyncio.CancelledError:
            pass
        except Exception as e:
            logger.error("Giveaway Timer Failed", [
                ("Message ID", str(message_id)),
                ("Error Type", type(e).__name__),
                ("Error", str(e)[:100]),
            ])

    # =========================================================================
    # Create
    # =========================================================================

    async def create(
        self,
        channel: discord.TextChannel,
        creator_id: int,
        prize: str,
        end_time: float,
        winner_count: int = 1,
        initial_participants: Iterable[int] = (),
    ) -> GiveawayState:
        """
        Post a giveaway and start its timer.

        Raises:
            GiveawayError: If end_time is not in the future.
        """
        if end_time <= time.time():
            raise GiveawayError(PAST_DATETIME_MESSAGE)

        participants = set(initial_participants)
        winner_count = max(1, winner_count)

        message = await channel.send(
            embed=build_giveaway_embed(prize, end_time, len(participants), winner_count),
            view=build_enter_view(),
        )

        giveaway_id = self.db.create_giveaway(
            message_id=message.id,
            channel_id=channel.id,
            guild_id=channel.guild.id,
            creator_id=creator_id,
            prize=prize,
            end_time=end_time,
            winner_count=winner_count,
        )
        if giveaway_id is None:
            raise GiveawayError("❌ This giveaway is already in the database.")
        if participants:
            self.db.add_giveaway_entries(giveaway_id, participants)

        state = GiveawayState(
            giveaway_id=giveaway_id,
            message_id=message.id,
            channel_id=channel.id,
            guild_id=channel.guild.id,
            prize=prize,
            end_time=end_time,
            winner_count=winner_count,
            creator_id=creator_id,
            participants=participants,
        )
        self.active[message.id] = state
        self._arm_timer(message.id, end_time)

        logger.tree("Giveaway Created", [
            ("Prize", prize[:50]),
            ("Channel", f"#{channel.name}"),
            ("Ends", f"<t:{int(end_time)}:F>"),
            ("Winners", str(winner_count)),
            ("Initial Participants", str(len(participants))),
        ], emoji="🎉")

        return state

    # =========================================================================
    # Entries
    # =========================================================================

    async def toggle_entry(
        self,
        message_id: int,
        user_id: int,
        message: Optional[discord.Message] = None,
    ) -> str:
        """
        Enter or leave a running giveaway.

        Returns:
            "entered", "left", or "not_found" for unknown/ended giveaways.
        """
        state = self.active.get(message_id)
        if state is None:
            return "not_found"

        if user_id in state.participants:
            state.participants.discard(user_id)
            self.db.remove_giveaway_entry(state.giveaway_id, user_id)
            outcome = "left"
        else:
            state.participants.add(user_id)
            self.db.add_giveaway_entry(state.giveaway_id, user_id)
            outcome = "entered"

        if message is not None:
            try:
                await message.edit(embed=build_giveaway_embed(
                    state.prize, state.end_time, len(state.participants), state.winner_count,
                ))
            except discord.HTTPException as e:
                logger.warning("Giveaway Embed Update Failed", [
                    ("Message ID", str(message_id)),
                    ("Error", str(e)[:100]),
                ])

        logger.debug("Giveaway Entry Toggled", [
            ("Message ID", str(message_id)),
            ("User ID", str(user_id)),
            ("Outcome", outcome),
            ("Participants", str(len(state.participants))),
        ])
        return outcome

    def get_entrants(self, message_id: int, page: int = 1) -> Tuple[List[int], int, int]:
        """
        Page through stored entrants of any giveaway.

        Returns:
            (user IDs on this page, total pages, total entrants).

        Raises:
            GiveawayError: If the giveaway is unknown.
        """
        row = self.db.get_giveaway(message_id)
        if row is None:
            raise GiveawayError("❌ Giveaway not found.")

        entrants = self.db.get_giveaway_entries(row["id"])
        total = len(entrants)
        pages = max(1, -(-total // GIVEAWAY_ENTRANTS_PER_PAGE))
        page = min(max(1, page), pages)
        start = (page - 1) * GIVEAWAY_ENTRANTS_PER_PAGE
        return entrants[start:start + GIVEAWAY_ENTRANTS_PER_PAGE], pages, total

    # =========================================================================
    # Conclusion
    # =========================================================================

    async def conclude(self, message_id: int) -> Optional[List[int]]:
        """
        Draw winners, announce them and close the giveaway.

        Returns:
            Winner IDs, or None if the giveaway was not running.
        """
        state = self.active.pop(message_id, None)
        if state is None:
            return None

        timer = self.timers.pop(message_id, None)
        if timer is not None and timer is not asyncio.current_task() and not timer.done():
            timer.cancel()

        winners = pick_winners(state.participants, state.winner_count)
        self.db.finish_giveaway(message_id, winners)

        message = await self._fetch_message(state.channel_id, message_id)
        if message is not None:
            try:
                await message.edit(
                    embed=build_result_embed(state.prize, winners, len(state.participants)),
                    view=None,
                )
                if winners:
                    await message.channel.send(" ".join(f"🎉 <@{w}>" for w in winners))
            except discord.HTTPException as e:
                logger.warning("Giveaway Announcement Failed", [
                    ("Message ID", str(message_id)),
                    ("Error", str(e)[:100]),
                ])
        else:
            logger.warning("Giveaway Message Missing", [
                ("Message ID", str(message_id)),
                ("Channel ID", str(state.channel_id)),
            ])

        logger.tree("Giveaway Concluded", [
            ("Prize", state.prize[:50]),
            ("Participants", str(len(state.participants))),
            ("Winners", ", ".join(str(w) for w in winners) or "None"),
        ], emoji="🎊")

        return winners

    async def end_early(self, message_id: int) -> List[int]:
        """Conclude a running giveaway now."""
        if message_id not in self.active:
            raise GiveawayError("❌ Giveaway not found or already ended.")
        return await self.conclude(message_id) or []

    async def reroll(self, message_id: int, count: Optional[int] = None) -> List[int]:
        """
        Draw new winners for an ended giveaway from its stored entries.

        Raises:
            GiveawayError: Unknown or still-running giveaway, or no entries.
        """
        row = self.db.get_giveaway(message_id)
        if row is None or row["status"] != "ended":
            raise GiveawayError("❌ Giveaway not found or not yet ended.")

        entrants = self.db.get_giveaway_entries(row["id"])
        if not entrants:
            raise GiveawayError("❌ No participants to reroll from.")

        winners = pick_winners(entrants, count or row["winner_count"] or 1)
        self.db.set_giveaway_winners(message_id, winners)

        channel = await self._resolve_channel(row["channel_id"])
        if channel is not None:
            try:
                await channel.send(
                    content=" ".join(f"🎉 <@{w}>" for w in winners),
                    embed=build_reroll_embed(row["prize"], winners),
                )
            except discord.HTTPException as e:
                logger.warning("Giveaway Reroll Announcement Failed", [
                    ("Message ID", str(message_id)),
                    ("Error", str(e)[:100]),
                ])

        logger.tree("Giveaway Rerolled", [
            ("Prize", row["prize"][:50]),
            ("Pool", str(len(entrants))),
            ("New Winners", ", ".join(str(w) for w in winners)),
        ], emoji="🔄")

        return winners

    # =========================================================================
    # Listing
    # =========================================================================

    def list_active(self, guild_id: int) -> str:
        states = sorted(
            (s for s in self.active.values() if s.guild_id == guild_id),
            key=lambda s: s.end_time,
        )
        if not states:
            return "📭 No active giveaways found."

        text = "📋 **Active Giveaways:**\n\n"
        for state in states:
            text += (
                f"🎁 **{state.prize}**\n"
                f"📍 Channel: <#{state.channel_id}>\n"
                f"⏰ Ends: <t:{int(state.end_time)}:R>\n"
                f"👥 Participants: {len(state.participants)}\n"
                f"🆔 ID: {state.message_id}\n\n"
            )

        if len(text) > GIVEAWAY_LIST_MAX_CHARS:
            text = text[:GIVEAWAY_LIST_MAX_CHARS - 100] + "...\n\n*List truncated due to length*"
        return text

    # =========================================================================
    # Startup & Recovery
    # =========================================================================

    async def load_active(self) -> int:
        """
        Restore running giveaways from the database.

        Giveaways whose end passed while offline are concluded now.

        Returns:
            Number of giveaways restored.
        """
        rows = self.db.get_active_giveaways()
        now = time.time()
        overdue: List[int] = []

        for row in rows:
            state = GiveawayState(
                giveaway_id=row["id"],
                message_id=row["message_id"],
                channel_id=row["channel_id"],
                guild_id=row["guild_id"],
                prize=row["prize"],
                end_time=row["end_time"],
                winner_count=row["winner_count"] or 1,
                creator_id=row["creator_id"],
                participants=set(self.db.get_giveaway_entries(row["id"])),
            )
            self.active[state.message_id] = state
            if state.end_time <= now:
                overdue.append(state.message_id)
            else:
                self._arm_timer(state.message_id, state.end_time)

        for message_id in overdue:
            try:
                await self.conclude(message_id)
            except Exception as e:
                logger.error("Overdue Giveaway Conclusion Failed", [
                    ("Message ID", str(message_id)),
                    ("Error Type", type(e).__name__),
                    ("Error", str(e)[:100]),
                ])

        if rows:
            logger.tree("Giveaways Loaded", [
                ("Restored", str(len(rows))),
                ("Concluded On Load", str(len(overdue))),
            ], emoji="🎉")
        return len(rows)

    async def recover(
        self,
        channel: discord.TextChannel,
        message_id: int,
        end_date: Optional[str] = None,
        end_time: Optional[str] = None,
    ) -> "RecoveredGiveaway":
        """
        Re-register a giveaway message that is missing from the database.

        Participants cannot be recovered; the entry set starts empty.

        Raises:
            GiveawayError: With the reason recovery was refused.
        """
        try:
            message = await channel.fetch_message(message_id)
        except discord.HTTPException:
            raise GiveawayError(
                "❌ Could not find the message. Make sure the message ID and channel are correct."
            )

        if self.bot.user is None or message.author.id != self.bot.user.id:
            raise GiveawayError(
                "❌ This message is not from the bot. Recovery only works for bot giveaway messages."
            )

        embed = message.embeds[0] if message.embeds else None
        if embed is None or not embed.title or "GIVEAWAY" not in embed.title:
            raise GiveawayError(
                "❌ This message does not appear to be a giveaway. Recovery only works for giveaway messages."
            )

        prize = extract_prize(embed.description) or "Unknown Prize"

        end_ts: Optional[float] = extract_end_timestamp(embed)
        if end_ts is None:
            parsed = parse_end_datetime(end_date, end_time)
            if parsed is not None:
                end_ts = parsed.timestamp()
        if end_ts is None:
            raise GiveawayError(
                "❌ Could not determine giveaway end time. Please provide end_date and end_time parameters."
            )

        if self.db.get_giveaway(message_id) is not None:
            raise GiveawayError("❌ This giveaway is already in the database.")

        is_active = end_ts > time.time()
        giveaway_id = self.db.create_giveaway(
            message_id=message_id,
            channel_id=channel.id,
            guild_id=channel.guild.id,
            creator_id=None,
            prize=prize,
            end_time=end_ts,
            status="active" if is_active else "ended",
        )
        if giveaway_id is None:
            raise GiveawayError("❌ This giveaway is already in the database.")

        if is_active:
            self.active[message_id] = GiveawayState(
                giveaway_id=giveaway_id,
                message_id=message_id,
                channel_id=channel.id,
                guild_id=channel.guild.id,
                prize=prize,
                end_time=end_ts,
            )
            self._arm_timer(message_id, end_ts)
        else:
            self.db.finish_giveaway(message_id, [])

        logger.tree("Giveaway Recovered", [
            ("Prize", prize[:50]),
            ("Message ID", str(message_id)),
            ("Status", "Active" if is_active else "Ended"),
        ], emoji="♻️")

        return RecoveredGiveaway(
            giveaway_id=giveaway_id,
            message_id=message_id,
            prize=prize,
            end_time=end_ts,
            is_active=is_active,
        )

    # =========================================================================
    # Shutdown
    # =========================================================================

    async def stop(self) -> None:
        """Cancel all timers."""
        timers = list(self.timers.values())
        self.timers.clear()
        for task in timers:
            if not task.done():
                task.cancel()
        for task in timers:
            try:
                await task
            except asyncio.CancelledError:
                pass

        logger.info("Giveaway Timers Stopped", [("Cancelled", str(len(timers)))])


__all__ = ["GiveawayManager", "GiveawayState", "GiveawayError", "RecoveredGiveaway"]
