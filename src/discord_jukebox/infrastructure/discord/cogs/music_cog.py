"""Prefix-command music cog delegating to the playback service."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import discord
from discord.ext import commands

from discord_jukebox.domain.music.value_objects import Volume
from discord_jukebox.domain.shared.exceptions import (
    InvalidTrackUrlError,
    NoActiveQueueError,
    ValidationError,
    VoiceConnectionError,
)
from discord_jukebox.domain.shared.messages import (
    DiscordUIMessages,
    ErrorMessages,
    LogTemplates,
)
from discord_jukebox.utils.reply import format_queue

if TYPE_CHECKING:
    from ....application.services.playback_service import PlaybackApplicationService
    from ....config.container import Container

logger = logging.getLogger(__name__)


class MusicCog(commands.Cog):
    def __init__(self, bot: commands.Bot, container: Container) -> None:
        self.bot = bot
        self.container = container

    @property
    def playback(self) -> PlaybackApplicationService:
        return self.container.playback_service

    @property
    def prefix(self) -> str:
        return self.container.settings.discord.command_prefix

    async def _reply(self, ctx: commands.Context, content: str) -> None:
        await ctx.send(content)

    @staticmethod
    def _author_voice_channel(ctx: commands.Context) -> discord.abc.Connectable | None:
        author = ctx.author
        if isinstance(author, discord.Member) and author.voice and author.voice.channel:
            return author.voice.channel
        return None

    async def cog_check(self, ctx: commands.Context) -> bool:
        if ctx.guild is None:
            raise commands.NoPrivateMessage()
        return True

    async def cog_command_error(self, ctx: commands.Context, error: Exception) -> None:
        if isinstance(error, commands.NoPrivateMessage):
            await self._reply(ctx, DiscordUIMessages.STATE_SERVER_ONLY)
            return

        if isinstance(error, commands.MissingRequiredArgument):
            await self._reply(
                ctx, DiscordUIMessages.ERROR_MISSING_ARGUMENT.format(param_name=error.param.name)
            )
            return

        original = getattr(error, "original", error)
        logger.exception(LogTemplates.COMMAND_FAILED, ctx.command, exc_info=original)
        await self._reply(ctx, DiscordUIMessages.ERROR_UNEXPECTED)

    # ─────────────────────────────────────────────────────────────────
    # Queueing
    # ─────────────────────────────────────────────────────────────────

    @commands.command(name="play", description="Play a video or playlist.")
    async def play(self, ctx: commands.Context, url: str) -> None:
        assert ctx.guild is not None

        voice_channel = self._author_voice_channel(ctx)
        if voice_channel is None:
            await self._reply(ctx, DiscordUIMessages.STATE_NEED_TO_BE_IN_VOICE)
            return

        try:
            batch = await self.playback.resolve_tracks(url)
        except InvalidTrackUrlError:
            await self._reply(ctx, DiscordUIMessages.ERROR_INVALID_URL)
            return

        if batch.playlist_fallback:
            await self._reply(ctx, DiscordUIMessages.ACTION_PLAYLIST_FALLBACK)
        elif batch.from_playlist:
            await self._reply(ctx, DiscordUIMessages.ACTION_PLAYLIST_ADDED.format(count=batch.count))
        else:
            await self._reply(ctx, DiscordUIMessages.ACTION_TRACK_ADDED.format(url=batch.first))

        try:
            await self.playback.enqueue(
                ctx.guild.id,
                batch,
                voice_channel_id=voice_channel.id,
                text_channel_id=ctx.channel.id,
            )
        except VoiceConnectionError:
            await self._reply(ctx, DiscordUIMessages.ERROR_COULD_NOT_JOIN_VOICE)

    @commands.command(name="queue", description="Show the queue.")
    async def queue(self, ctx: commands.Context) -> None:
        assert ctx.guild is not None
        await self._reply(ctx, format_queue(self.playback.get_tracks(ctx.guild.id)))

    @commands.command(name="clear", description="Clear pending tracks.")
    async def clear(self, ctx: commands.Context) -> None:
        assert ctx.guild is not None

        removed = await self.playback.clear(ctx.guild.id)
        if removed == 0:
            await self._reply(ctx, DiscordUIMessages.STATE_NOTHING_TO_CLEAR)
            return

        await self._reply(ctx, DiscordUIMessages.ACTION_CLEARED.format(count=removed))

    # ─────────────────────────────────────────────────────────────────
    # Transport
    # ─────────────────────────────────────────────────────────────────

    @commands.command(name="pause", description="Pause playback.")
    async def pause(self, ctx: commands.Context) -> None:
        assert ctx.guild is not None

        if await self.playback.pause(ctx.guild.id):
            await self._reply(ctx, DiscordUIMessages.ACTION_PAUSED)
        else:
            await self._reply(ctx, DiscordUIMessages.STATE_NOTHING_PLAYING)

    @commands.command(name="resume", description="Resume playback.")
    async def resume(self, ctx: commands.Context) -> None:
        assert ctx.guild is not None

        if await self.playback.resume(ctx.guild.id):
            await self._reply(ctx, DiscordUIMessages.ACTION_RESUMED)
        else:
            await self._reply(ctx, DiscordUIMessages.STATE_NOTHING_PAUSED)

    @commands.command(name="skip", description="Skip the current track.")
    async def skip(self, ctx: commands.Context) -> None:
        assert ctx.guild is not None

        if await self.playback.skip(ctx.guild.id):
            await self._reply(ctx, DiscordUIMessages.ACTION_SKIPPED)
        else:
            await self._reply(ctx, DiscordUIMessages.STATE_NOTHING_PLAYING)

    @commands.command(name="stop", description="Stop and clear the queue.")
    async def stop(self, ctx: commands.Context) -> None:
        assert ctx.guild is not None

        if await self.playback.stop(ctx.guild.id):
            await self._reply(ctx, DiscordUIMessages.ACTION_STOPPED)
        else:
            await self._reply(ctx, DiscordUIMessages.STATE_NOTHING_PLAYING)

    @commands.command(name="volume", description="Set the volume (0-100).")
    async def volume(self, ctx: commands.Context, value: str | None = None) -> None:
        assert ctx.guild is not None

        try:
            volume = Volume.parse(value)
        except ValidationError:
            await self._reply(ctx, DiscordUIMessages.ERROR_VOLUME_USAGE.format(prefix=self.prefix))
            return

        try:
            await self.playback.set_volume(ctx.guild.id, volume)
        except NoActiveQueueError:
            await self._reply(ctx, DiscordUIMessages.STATE_NOTHING_PLAYING)
            return

        await self._reply(ctx, DiscordUIMessages.ACTION_VOLUME_SET.format(percent=volume.percent))

    # ─────────────────────────────────────────────────────────────────
    # Help
    # ─────────────────────────────────────────────────────────────────

    @commands.command(name="all", description="List every command.")
    async def help_all(self, ctx: commands.Context) -> None:
        await self._reply(ctx, DiscordUIMessages.HELP.format(prefix=self.prefix))


async def setup(bot: commands.Bot) -> None:
    container = getattr(bot, "container", None)
    if container is None:
        raise RuntimeError(ErrorMessages.CONTAINER_NOT_FOUND)

    await bot.add_cog(MusicCog(bot, container))
