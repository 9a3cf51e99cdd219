"""
UAS Bot - Giveaway Cog
======================

/giveaway create|end|list|reroll, /giveawayrecover and
/giveawayshowentrants. All commands are admin only.
"""

from datetime import datetime, timezone
from typing import TYPE_CHECKING, List, Optional

import discord
from discord import app_commands
from discord.ext import commands

from src.core.logger import logger
from src.core.config import EmbedColors, check_admin_permission
from src.core.database import get_db
from src.core.constants import AUTOCOMPLETE_LIMIT, GIVEAWAY_PRIZE_AUTOCOMPLETE_LEN
from src.services.giveaways import (
    INVALID_DATETIME_MESSAGE,
    GiveawayError,
    parse_end_datetime,
    parse_mentions,
)
from src.utils.embeds import build_error_embed
from src.utils.footer import set_footer
from src.utils.interaction import safe_defer, safe_respond

if TYPE_CHECKING:
    from src.bot import UASBot


def parse_message_id(value: str) -> Optional[int]:
    value = value.strip()
    return int(value) if value.isdigit() else None


class GiveawayCog(commands.Cog):
    """Admin giveaway commands backed by bot.giveaway_manager."""

    giveaway = app_commands.Group(name="giveaway", description="Manage giveaways")

    def __init__(self, bot: "UASBot") -> None:
        self.bot = bot
        self.db = get_db()

    @property
    def manager(self):
        return self.bot.giveaway_manager

    async def _fail(self, interaction: discord.Interaction, action: str, error: Exception) -> None:
        logger.error(f"Giveaway {action} Failed", [
            ("User", f"{interaction.user.name} ({interaction.user.id})"),
            ("Error Type", type(error).__name__),
            ("Error", str(error)[:100]),
        ])
        await safe_respond(
            interaction,
            embed=build_error_embed(f"❌ Giveaway {action} Failed", "An unexpected error occurred. Please try again."),
        )

    # =========================================================================
    # /giveaway create
    # =========================================================================

    @giveaway.command(name="create", description="Start a new giveaway")
    @app_commands.describe(
        prize="What the winner gets",
        end_date="End date (YYYY-MM-DD, UTC)",
        end_time="End time (HH:MM, 24-hour, UTC)",
        channel="Channel to post in (defaults to this channel)",
        winners="Number of winners",
        participants="Mention users to add as initial participants",
    )
    async def giveaway_create(
        self,
        interaction: discord.Interaction,
        prize: str,
        end_date: str,
        end_time: str,
        channel: Optional[discord.TextChannel] = None,
        winners: app_commands.Range[int, 1, 20] = 1,
        participants: Optional[str] = None,
    ) -> None:
        if not await check_admin_permission(interaction):
            return

        end_dt = parse_end_datetime(end_date, end_time)
        if end_dt is None:
            await safe_respond(interaction, INVALID_DATETIME_MESSAGE)
            return

        target = channel or interaction.channel
        initial = parse_mentions(participants)

        await safe_defer(interaction)
        try:
            state = await self.manager.create(
                channel=target,
                creator_id=interaction.user.id,
                prize=prize,
                end_time=end_dt.timestamp(),
                winner_count=winners,
                initial_participants=initial,
            )
        except GiveawayError as e:
            await safe_respond(interaction, str(e))
            return
        except Exception as e:
            await self._fail(interaction, "Creation", e)
            return

        await safe_respond(
            interaction,
            f"✅ Giveaway created successfully in {target.mention}!\n"
            f"🎁 Prize: {prize}\n"
            f"⏰ Ends: <t:{int(state.end_time)}:F>\n"
            f"👥 Initial participants: {len(state.participants)}",
        )

    # =========================================================================
    # /giveaway end
    # =========================================================================

    @giveaway.command(name="end", description="End a giveaway now")
    @app_commands.describe(message_id="Message ID of the giveaway")
    async def giveaway_end(self, interaction: discord.Interaction, message_id: str) -> None:
        if not await check_admin_permission(interaction):
            return

        parsed = parse_message_id(message_id)
        if parsed is None:
            await safe_respond(interaction, "❌ Giveaway not found or already ended.")
            return

        await safe_defer(interaction)
        try:
            await self.manager.end_early(parsed)
        except GiveawayError as e:
            await safe_respond(interaction, str(e))
            return
        except Exception as e:
            await self._fail(interaction, "End", e)
            return

        logger.tree("Giveaway Ended Manually", [
            ("Message ID", str(parsed)),
            ("By", f"{interaction.user.name} ({interaction.user.id})"),
        ], emoji="🛑")
        await safe_respond(interaction, "✅ Giveaway ended manually!")

    # =========================================================================
    # /giveaway list
    # =========================================================================

    @giveaway.command(name="list", description="List running giveaways")
    async def giveaway_list(self, interaction: discord.Interaction) -> None:
        if not await check_admin_permission(interaction):
            return
        await safe_respond(interaction, self.manager.list_active(interaction.guild_id))

    # =========================================================================
    # /giveaway reroll
    # =========================================================================

    @giveaway.command(name="reroll", description="Pick new winners for an ended giveaway")
    @app_commands.describe(
        message_id="Message ID of the ended giveaway",
        winners="How many new winners to draw (defaults to the original count)",
    )
    async def giveaway_reroll(
        self,
        interaction: discord.Interaction,
        message_id: str,
        winners: Optional[app_commands.Range[int, 1, 20]] = None,
    ) -> None:
        if not await check_admin_permission(interaction):
            return

        parsed = parse_message_id(message_id)
        if parsed is None:
            await safe_respond(interaction, "❌ Giveaway not found or not yet ended.")
            return

        await safe_defer(interaction)
        try:
            new_winners = await self.manager.reroll(parsed, winners)
        except GiveawayError as e:
            await safe_respond(interaction, str(e))
            return
        except Exception as e:
            await self._fail(interaction, "Reroll", e)
            return

        label = "New winner" if len(new_winners) == 1 else "New winners"
        mentions = ", ".join(f"<@{w}>" for w in new_winners)
        await safe_respond(interaction, f"✅ Giveaway rerolled! {label}: {mentions}")

    # =========================================================================
    # /giveawayrecover
    # =========================================================================

    @app_commands.command(name="giveawayrecover", description="Re-register a giveaway message missing from the database")
    @app_commands.describe(
        message_id="Message ID of the giveaway",
        channel="Channel the giveaway is in (defaults to this channel)",
        end_date="End date if it cannot be read from the message (YYYY-MM-DD)",
        end_time="End time if it cannot be read from the message (HH:MM)",
    )
    async def giveawayrecover(
        self,
        interaction: discord.Interaction,
        message_id: str,
        channel: Optional[discord.TextChannel] = None,
        end_date: Optional[str] = None,
        end_time: Optional[str] = None,
    ) -> None:
        if not await check_admin_permission(interaction):
            return

        parsed = parse_message_id(message_id)
        if parsed is None:
            await safe_respond(
                interaction,
                "❌ Could not find the message. Make sure the message ID and channel are correct.",
            )
            return

        await safe_defer(interaction)
        try:
            recovered = await self.manager.recover(
                channel or interaction.channel, parsed, end_date=end_date, end_time=end_time,
            )
        except GiveawayError as e:
            await safe_respond(interaction, str(e))
            return
        except Exception as e:
            await self._fail(interaction, "Recovery", e)
            return

        ts = int(recovered.end_time)
        embed = discord.Embed(
            title="✅ Giveaway Recovered Successfully!",
            description="The giveaway has been recovered and saved to the database.",
            color=EmbedColors.SUCCESS,
            timestamp=datetime.now(timezone.utc),
        )
        embed.add_field(name="🎁 Prize", value=recovered.prize, inline=True)
        embed.add_field(name="🆔 Message ID", value=str(recovered.message_id), inline=True)
        embed.add_field(name="📅 End Time", value=f"<t:{ts}:F>", inline=False)
        embed.add_field(
            name="📊 Status",
            value="🟢 Active" if recovered.is_active else "🔴 Ended",
            inline=True,
        )
        embed.add_field(
            name="⚠️ Note",
            value="Previous participants will need to re-enter the giveaway as participation data could not be recovered.",
            inline=False,
        )
        set_footer(embed)
        await safe_respond(interaction, embed=embed)

    # =========================================================================
    # /giveawayshowentrants
    # =========================================================================

    async def giveaway_autocomplete(
        self,
        interaction: discord.Interaction,
        current: str,
    ) -> List[app_commands.Choice[str]]:
        """Recent giveaways as "prize (N entries)"."""
        if interaction.guild_id is None:
            return []

        choices = []
        current_lower = current.lower()
        for row in self.db.get_guild_giveaways(interaction.guild_id, limit=AUTOCOMPLETE_LIMIT):
            prize = row["prize"]
            if current_lower and current_lower not in prize.lower() and current not in str(row["message_id"]):
                continue
            if len(prize) > GIVEAWAY_PRIZE_AUTOCOMPLETE_LEN:
                prize = prize[:GIVEAWAY_PRIZE_AUTOCOMPLETE_LEN - 3] + "..."
            count = self.db.count_giveaway_entries(row["id"])
            choices.append(app_commands.Choice(
                name=f"{prize} ({count} entries)",
                value=str(row["message_id"]),
            ))
        return choices[:AUTOCOMPLETE_LIMIT]

    @app_commands.command(name="giveawayshowentrants", description="Show who entered a giveaway")
    @app_commands.describe(giveaway="The giveaway", page="Page number")
    @app_commands.autocomplete(giveaway=giveaway_autocomplete)
    async def giveawayshowentrants(
        self,
        interaction: discord.Interaction,
        giveaway: str,
        page: app_commands.Range[int, 1, 1000] = 1,
    ) -> None:
        if not await check_admin_permission(interaction):
            return

        parsed = parse_message_id(giveaway)
        if parsed is None:
            await safe_respond(interaction, "❌ Giveaway not found.")
            return

        try:
            entrants, pages, total = self.manager.get_entrants(parsed, page)
        except GiveawayError as e:
            await safe_respond(interaction, str(e))
            return

        row = self.db.get_giveaway(parsed)
        embed = discord.Embed(
            title=f"🎟️ Entrants: {row['prize'][:200]}",
            description="\n".join(f"• <@{uid}>" for uid in entrants) or "No entrants yet.",
            color=EmbedColors.GIVEAWAY,
            timestamp=datetime.now(timezone.utc),
        )
        embed.add_field(name="👥 Total", value=str(total), inline=True)
        embed.add_field(name="📊 Status", value=row["status"].title(), inline=True)
        set_footer(embed, text=f"Page {min(page, pages)}/{pages}")
        await safe_respond(interaction, embed=embed)


__all__ = ["GiveawayCog", "parse_message_id"]
