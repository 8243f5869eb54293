"""Prefix-command bot wired to the DI container."""

from __future__ import annotations

import asyncio
import logging
import signal
from typing import TYPE_CHECKING

import discord
from discord.ext import commands

from discord_jukebox.domain.shared.messages import DiscordUIMessages, LogTemplates

if TYPE_CHECKING:
    from ...config.container import Container
    from ...config.settings import Settings

logger = logging.getLogger(__name__)

COGS: tuple[str, ...] = ("discord_jukebox.infrastructure.discord.cogs.music_cog",)


def build_intents() -> discord.Intents:
    """Guild text commands need message content; playback needs voice states."""
    intents = discord.Intents.none()
    intents.guilds = True
    intents.guild_messages = True
    intents.message_content = True
    intents.voice_states = True
    return intents


class JukeboxBot(commands.Bot):
    def __init__(self, container: Container, settings: Settings, **kwargs) -> None:
        super().__init__(
            command_prefix=settings.discord.command_prefix,
            intents=build_intents(),
            help_command=None,
            case_insensitive=True,
            **kwargs,
        )

        self.container = container
        self.settings = settings
        self._shutdown_event = asyncio.Event()
        self._shutdown_task: asyncio.Task[None] | None = None
        container.set_bot(self)

    # ── startup ────────────────────────────────────────────────────────

    async def setup_hook(self) -> None:
        """Build services and the keep-alive server before the gateway connects."""
        logger.info(LogTemplates.BOT_SETUP)

        try:
            await self.container.initialize()
        except Exception as e:
            logger.exception(LogTemplates.BOT_CONTAINER_INIT_FAILED, e)
            raise
        logger.info(LogTemplates.BOT_CONTAINER_INITIALIZED)

        await self._load_cogs()
        logger.info(LogTemplates.BOT_SETUP_COMPLETE)

    async def _load_cogs(self) -> None:
        failed = 0
        for cog in COGS:
            try:
                await self.load_extension(cog)
            except Exception as e:
                logger.exception(LogTemplates.BOT_COG_LOAD_FAILED, cog, e)
                failed += 1
            else:
                logger.info(LogTemplates.BOT_COG_LOADED, cog)

        logger.info(LogTemplates.BOT_COGS_LOADED_SUMMARY, len(COGS) - failed, failed)

    async def on_ready(self) -> None:
        logger.info(LogTemplates.BOT_READY, self.user, self.user.id)  # type: ignore[union-attr]
        logger.info(LogTemplates.BOT_CONNECTED_GUILDS, len(self.guilds))

        await self.change_presence(
            activity=discord.Activity(
                type=discord.ActivityType.listening,
                name=f"{self.settings.discord.command_prefix}all",
            )
        )

    # ── commands ───────────────────────────────────────────────────────

    async def on_command_error(self, ctx: commands.Context, error: commands.CommandError) -> None:
        if isinstance(error, commands.CommandNotFound):
            logger.debug(LogTemplates.COMMAND_UNKNOWN, ctx.invoked_with, ctx.author)
            prefix = self.settings.discord.command_prefix
            await ctx.send(DiscordUIMessages.ERROR_UNKNOWN_COMMAND.format(prefix=prefix))
            return

        # The cog already replied.
        if ctx.cog is not None and ctx.cog.has_error_handler():
            return

        logger.error(
            LogTemplates.COMMAND_FAILED, ctx.command, exc_info=getattr(error, "original", error)
        )
        await ctx.send(DiscordUIMessages.ERROR_UNEXPECTED)

    # ── shutdown ───────────────────────────────────────────────────────

    async def _disconnect_voice_clients(self) -> None:
        clients = list(self.voice_clients)
        results = await asyncio.gather(
            *(vc.disconnect(force=True) for vc in clients), return_exceptions=True
        )
        for vc, result in zip(clients, results):
            if isinstance(result, Exception):
                logger.debug(
                    LogTemplates.VOICE_CLEANUP_ERROR, getattr(vc, "guild", None), exc_info=result
                )

    async def close(self) -> None:
        logger.info(LogTemplates.BOT_SHUTTING_DOWN)

        await self._disconnect_voice_clients()

        try:
            await self.container.shutdown()
        except Exception as e:
            logger.warning(LogTemplates.BOT_CONTAINER_SHUTDOWN_ERROR, e)
        else:
            logger.info(LogTemplates.BOT_CONTAINER_SHUTDOWN)

        await super().close()
        self._shutdown_event.set()
        logger.info(LogTemplates.BOT_SHUTDOWN_COMPLETE)

    async def _close_within(self, timeout: float) -> None:
        try:
            async with asyncio.timeout(timeout):
                await self.close()
        except TimeoutError:
            logger.warning(LogTemplates.BOT_SHUTDOWN_TIMEOUT, timeout)

    def _on_signal(self, sig: signal.Signals, timeout: float) -> None:
        if self._shutdown_task is not None:
            return
        logger.info(LogTemplates.BOT_SIGNAL_RECEIVED, sig.name, timeout)
        self._shutdown_task = asyncio.get_running_loop().create_task(self._close_within(timeout))

    async def _serve(self, token: str, shutdown_timeout: float) -> None:
        async with self:
            loop = asyncio.get_running_loop()
            for sig in (signal.SIGINT, signal.SIGTERM):
                loop.add_signal_handler(sig, self._on_signal, sig, shutdown_timeout)
            await self.start(token)

    def run_with_graceful_shutdown(self, token: str, *, shutdown_timeout: float = 30.0) -> None:
        """Run until SIGINT/SIGTERM, then give ``close`` *shutdown_timeout* seconds."""
        asyncio.run(self._serve(token, shutdown_timeout))


def create_bot(container: Container, settings: Settings) -> JukeboxBot:
    return JukeboxBot(container=container, settings=settings)
