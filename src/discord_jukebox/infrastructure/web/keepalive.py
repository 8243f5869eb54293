"""Minimal HTTP server that keeps hosting platforms from idling the bot."""

from __future__ import annotations

import errno
import logging
import math
from typing import TYPE_CHECKING, Any

from aiohttp import web

from discord_jukebox.config.settings import KeepAliveSettings
from discord_jukebox.domain.shared.messages import DiscordUIMessages, LogTemplates

if TYPE_CHECKING:
    import discord

logger = logging.getLogger(__name__)


class KeepAliveServer:
    """Serves ``GET /`` (plain text) and ``GET /health`` (JSON)."""

    def __init__(
        self, settings: KeepAliveSettings | None = None, bot: discord.Client | None = None
    ) -> None:
        self._settings = settings or KeepAliveSettings()
        self._bot = bot
        self._app: web.Application | None = None
        self._runner: web.AppRunner | None = None

    @property
    def is_running(self) -> bool:
        return self._runner is not None

    def create_app(self) -> web.Application:
        app = web.Application()
        app.router.add_get("/", self._handle_root)
        app.router.add_get("/health", self._handle_health)
        self._app = app
        return app

    async def _handle_root(self, request: web.Request) -> web.Response:
        return web.Response(text=DiscordUIMessages.KEEPALIVE_BODY)

    async def _handle_health(self, request: web.Request) -> web.Response:
        return web.json_response(self.health())

    def health(self) -> dict[str, Any]:
        guilds = 0
        latency_ms: int | None = None
        if self._bot is not None:
            guilds = len(self._bot.guilds)
            latency = self._bot.latency
            if math.isfinite(latency):
                latency_ms = round(latency * 1000)

        return {"status": "ok", "guilds": guilds, "latency_ms": latency_ms}

    async def start(self) -> bool:
        """Bind and serve. Returns False if the port is already taken."""
        if self._runner is not None:
            return True

        runner = web.AppRunner(self.create_app())
        await runner.setup()
        site = web.TCPSite(runner, self._settings.host, self._settings.port)
        try:
            await site.start()
        except OSError as e:
            await runner.cleanup()
            if e.errno == errno.EADDRINUSE:
                logger.warning(LogTemplates.KEEPALIVE_PORT_IN_USE, self._settings.port)
                return False
            raise

        self._runner = runner
        logger.info(LogTemplates.KEEPALIVE_STARTED, self._settings.host, self._settings.port)
        return True

    async def stop(self) -> None:
        if self._runner is None:
            return

        await self._runner.cleanup()
        self._runner = None
        logger.info(LogTemplates.KEEPALIVE_STOPPED)
