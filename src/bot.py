"""
UAS Bot - Main Bot Class
========================

Discord client for the casino community's admin, moderation and
utility commands.

Features:
- Giveaways with persistent entry buttons and recovery
- Staff shifts with hourly pay and inactivity clock-out
- Casino session control through the casino bot's REST API
- Premium subscriptions, suggestions and bug reports
- Queue-based audit log
"""

from datetime import datetime

import discord
from discord import app_commands
from discord.ext import commands

from src.core.logger import logger
from src.core.config import get_config
from src.core.database import get_db
from src.utils.embeds import build_error_embed
from src.utils.error_handler import ErrorHandler
from src.utils.interaction import safe_respond


# =============================================================================
# UASBot Class
# =============================================================================

class UASBot(commands.Bot):
    """
    Main Discord bot class.

    DESIGN: Holds every stateful service so cogs reach them through
    the bot instance.

    SERVICE INITIALIZATION ORDER:
    1. setup_hook (before on_ready):
       - Service construction
       - Persistent component registration
       - Command and event cog loading
       - Command tree syncing

    2. on_ready:
       - Footer avatar cache
       - Giveaway timers restored from the database
       - Shift, subscription, temp ban and audit loops started
    """

    # =========================================================================
    # Initialization
    # =========================================================================

    def __init__(self) -> None:
        self.config = get_config()

        intents = discord.Intents.default()
        intents.message_content = True
        intents.members = True
        intents.voice_states = True

        super().__init__(
            command_prefix="!",
            intents=intents,
            help_command=None,
        )

        self.db = get_db()
        self.start_time: datetime = datetime.now()

        # Service placeholders
        self.giveaway_manager = None
        self.shift_manager = None
        self.casino_client = None
        self.subscription_service = None
        self.temp_ban_service = None
        self.audit_logger = None
        self.economy_analyzer = None

        # Ready state guard
        self._ready_initialized: bool = False

        logger.info("Bot Instance Created")

    # =========================================================================
    # Setup Hook
    # =========================================================================

    async def setup_hook(self) -> None:
        """Create services, load cogs and sync commands before on_ready."""
        self.db.default_wallet = self.config.default_wallet
        self._create_services()

        from src.services.giveaways import setup_giveaways
        setup_giveaways(self)

        self.tree.on_error = self.on_app_command_error

        from src.commands import COMMAND_COGS
        for cog in COMMAND_COGS:
            try:
                await self.load_extension(cog)
            except Exception as e:
                logger.error("Failed to Load Cog", [
                    ("Cog", cog),
                    ("Error Type", type(e).__name__),
                    ("Error", str(e)[:100]),
                ])

        from src.events import EVENT_COGS
        for cog in EVENT_COGS:
            try:
                await self.load_extension(cog)
                logger.debug(f"Event Cog Loaded: {cog.split('.')[-1]}")
            except Exception as e:
                logger.error("Failed to Load Event Cog", [
                    ("Cog", cog),
                    ("Error Type", type(e).__name__),
                    ("Error", str(e)[:100]),
                ])

        try:
            synced = await self.tree.sync()
            logger.tree("Commands Synced", [("Count", str(len(synced)))], emoji="✅")
        except discord.HTTPException as e:
            logger.error("Command Sync Failed", [
                ("Error Type", type(e).__name__),
                ("Error", str(e)[:100]),
            ])

    def _create_services(self) -> None:
        from src.services import (
            AuditLogger,
            CasinoClient,
            EconomyAnalyzer,
            GiveawayManager,
            ShiftManager,
            SubscriptionService,
            TempBanService,
        )

        self.giveaway_manager = GiveawayManager(self)
        self.shift_manager = ShiftManager(self)
        self.casino_client = CasinoClient.from_config(self.config)
        self.subscription_service = SubscriptionService(self)
        self.temp_ban_service = TempBanService(self)
        self.audit_logger = AuditLogger(self)
        self.economy_analyzer = EconomyAnalyzer()

        logger.tree("Services Created", [
            ("Giveaways", "✓"),
            ("Shifts", "✓"),
            ("Casino API", self.casino_client.base_url),
            ("Subscriptions", "✓"),
            ("Temp Bans", "✓"),
            ("Audit Logger", "✓"),
            ("Economy Analyzer", "✓"),
        ], emoji="🧩")

    # =========================================================================
    # On Ready
    # =========================================================================

    async def on_ready(self) -> None:
        """Start background services once connected."""
        if self._ready_initialized:
            logger.info("Bot Reconnected (skipping re-initialization)")
            return

        self._ready_initialized = True

        if not self.user:
            return

        logger.tree("BOT ONLINE", [
            ("Name", self.user.name),
            ("ID", str(self.user.id)),
            ("Guilds", str(len(self.guilds))),
        ], emoji="🚀")

        from src.utils.footer import init_footer
        await init_footer(self, self.config.footer_text)

        restored = await self.giveaway_manager.load_active()
        await self.shift_manager.start()
        await self.subscription_service.start()
        await self.temp_ban_service.start()
        await self.audit_logger.start()

        logger.tree("UAS READY", [
            ("Giveaways Restored", str(restored)),
            ("Active Shifts", str(len(self.shift_manager.active_shifts))),
            ("Audit Queue", str(self.audit_logger.get_queue_size())),
        ], emoji="🎰")

    # =========================================================================
    # Command Errors
    # =========================================================================

    async def on_app_command_error(
        self,
        interaction: discord.Interaction,
        error: app_commands.AppCommandError,
    ) -> None:
        """Last-resort handler for exceptions escaping a slash command."""
        if isinstance(error, app_commands.CheckFailure):
            await safe_respond(
                interaction,
                embed=build_error_embed("❌ Access Denied", "You don't have permission to use this command."),
            )
            return

        original = getattr(error, "original", error)
        command_name = interaction.command.qualified_name if interaction.command else "unknown"
        ErrorHandler.handle(
            original,
            location=f"command./{command_name}",
            user_id=interaction.user.id,
            guild_id=interaction.guild_id,
        )
        await safe_respond(
            interaction,
            embed=build_error_embed(
                "❌ Command Error",
                "Something went wrong while running this command. Please try again later.",
            ),
        )

    # =========================================================================
    # Shutdown
    # =========================================================================

    async def shutdown(self) -> None:
        """Stop loops and timers, then the HTTP session, the database and the client."""
        logger.info("Initiating Graceful Shutdown")

        for service in (
            self.giveaway_manager,
            self.shift_manager,
            self.subscription_service,
            self.temp_ban_service,
            self.audit_logger,
        ):
            if service is None:
                continue
            try:
                await service.stop()
            except Exception as e:
                logger.error("Service Stop Failed", [
                    ("Service", type(service).__name__),
                    ("Error Type", type(e).__name__),
                    ("Error", str(e)[:100]),
                ])

        if self.casino_client:
            await self.casino_client.close()

        self.db.close()
        await super().close()

        logger.tree("SHUTDOWN COMPLETE", [
            ("Uptime", str(datetime.now() - self.start_time)),
        ], emoji="🛑")

    async def close(self) -> None:
        """Override close to ensure proper shutdown."""
        await self.shutdown()


# =============================================================================
# Module Export
# =============================================================================

__all__ = ["UASBot"]
