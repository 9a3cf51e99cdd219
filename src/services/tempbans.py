"""
UAS Bot - Temporary Ban Service
===============================

Lifts temporary bans when they expire.

DESIGN:
    /ban with a duration stores a temp_bans row. A background loop
    (every minute) unbans each expired row and deletes it, so pending
    unbans survive restarts. A row whose unban fails for any reason
    other than "not banned" is kept and retried on the next pass.
"""

import asyncio
from typing import TYPE_CHECKING, List, Optional

import discord

from src.core.logger import logger
from src.core.database import get_db, TempBanRecord
from src.core.constants import TEMPBAN_CHECK_INTERVAL

if TYPE_CHECKING:
    from src.bot import UASBot


UNBAN_REASON = "Temporary ban expired (automatic)"


class TempBanService:
    """
    Unbans users whose temporary ban has run out.

    Attributes:
        bot: Main bot instance.
        db: Database manager.
        task: Expiry loop task.
        running: Whether the expiry loop is active.
    """

    def __init__(self, bot: "UASBot") -> None:
        self.bot = bot
        self.db = get_db()
        self.task: Optional[asyncio.Task] = None
        self.running: bool = False

    # =========================================================================
    # Lifecycle Management
    # =========================================================================

    async def start(self) -> None:
        if self.task and not self.task.done():
            self.task.cancel()

        self.running = True
        self.task = asyncio.create_task(self._expiry_loop())

        logger.tree("Temp Ban Expiry Started", [
            ("Check Interval", f"{TEMPBAN_CHECK_INTERVAL}s"),
        ], emoji="🔨")

    async def stop(self) -> None:
        self.running = False

        if self.task and not self.task.done():
            self.task.cancel()
            try:
                await self.task
            except asyncio.CancelledError:
                pass

        logger.info("Temp Ban Expiry Stopped")

    async def _expiry_loop(self) -> None:
        await self.bot.wait_until_ready()

        while self.running:
            try:
                await self.process_expired()
                await asyncio.sleep(TEMPBAN_CHECK_INTERVAL)
            except asyncio.CancelledError:
                break
            except Exception as e:
                logger.error("Temp Ban Expiry Error", [
                    ("Error Type", type(e).__name__),
                    ("Error", str(e)[:100]),
                ])
                await asyncio.sleep(TEMPBAN_CHECK_INTERVAL)

    # =========================================================================
    # Expiry
    # =========================================================================

    async def process_expired(self, now: Optional[float] = None) -> List[TempBanRecord]:
        """
        Unban every expired temporary ban.

        Returns:
            The rows that were lifted and removed.
        """
        lifted = []
        for ban in self.db.get_expired_temp_bans(now):
            if await self._unban(ban):
                self.db.remove_temp_ban(ban["guild_id"], ban["user_id"])
                lifted.append(ban)

        if lifted:
            logger.tree("Temp Bans Expired", [
                ("Count", str(len(lifted))),
                ("Users", ", ".join(str(b["user_id"]) for b in lifted)[:100]),
            ], emoji="⌛")
        return lifted

    async def _unban(self, ban: TempBanRecord) -> bool:
        """Lift one ban. False means keep the row and retry later."""
        guild = self.bot.get_guild(ban["guild_id"])
        if guild is None:
            return False

        try:
            await guild.unban(discord.Object(id=ban["user_id"]), reason=UNBAN_REASON)
        except discord.NotFound:
            # Already unbanned by hand
            pass
        except discord.HTTPException as e:
            logger.warning("Automatic Unban Failed", [
                ("User ID", str(ban["user_id"])),
                ("Guild", guild.name),
                ("Error", str(e)[:100]),
            ])
            return False

        bot_id = self.bot.user.id if self.bot.user else 0
        self.db.log_moderation_action(ban["guild_id"], bot_id, "unban", ban["user_id"], UNBAN_REASON)
        return True


__all__ = ["TempBanService"]
