"""VoiceAdapter backed by discord.py voice clients."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from functools import partial
from typing import TYPE_CHECKING

import discord

from discord_jukebox.application.interfaces.voice_adapter import VoiceAdapter
from discord_jukebox.domain.shared.exceptions import VoiceConnectionError
from discord_jukebox.domain.shared.messages import LogTemplates
from discord_jukebox.infrastructure.audio.ffmpeg_player import FFmpegSourceFactory

if TYPE_CHECKING:
    from ....application.interfaces.audio_backend import AudioStream

logger = logging.getLogger(__name__)

CONNECT_TIMEOUT: float = 10.0

VoiceTarget = discord.VoiceChannel | discord.StageChannel


class DiscordVoiceAdapter(VoiceAdapter):
    """One voice client per guild, looked up through the bot on every call.

    discord.py owns the client objects; nothing is cached here so a client
    dropped by the gateway is never used again.
    """

    def __init__(self, bot: discord.Client, source_factory: FFmpegSourceFactory | None = None) -> None:
        self._bot = bot
        self._source_factory = source_factory or FFmpegSourceFactory()
        self._on_track_end: Callable[[int], Awaitable[None]] | None = None

    def _voice_client(self, guild_id: int) -> discord.VoiceClient | None:
        guild = self._bot.get_guild(guild_id)
        vc = guild.voice_client if guild else None
        return vc if isinstance(vc, discord.VoiceClient) else None

    def _target_channel(self, guild_id: int, channel_id: int) -> VoiceTarget | None:
        guild = self._bot.get_guild(guild_id)
        if guild is None:
            logger.warning(LogTemplates.GUILD_NOT_FOUND, guild_id)
            return None

        channel = guild.get_channel(channel_id)
        if not isinstance(channel, VoiceTarget):
            logger.warning(LogTemplates.CHANNEL_NOT_VOICE, channel_id)
            return None
        return channel

    async def _join(self, guild_id: int, channel_id: int, vc: discord.VoiceClient | None) -> bool:
        """Connect when *vc* is None, otherwise move it. Never raises."""
        channel = self._target_channel(guild_id, channel_id)
        if channel is None:
            return False

        try:
            async with asyncio.timeout(CONNECT_TIMEOUT):
                if vc is None:
                    await channel.connect(self_deaf=True)
                else:
                    await vc.move_to(channel)
        except TimeoutError:
            logger.error(LogTemplates.VOICE_CONNECTION_TIMEOUT, channel_id)
            return False
        except discord.Forbidden:
            logger.error(LogTemplates.VOICE_NO_PERMISSION, channel_id)
            return False
        except discord.ClientException as e:
            logger.error(LogTemplates.VOICE_CLIENT_ERROR, e)
            return False
        except Exception:
            logger.exception(LogTemplates.VOICE_JOIN_FAILED, channel_id)
            return False

        if vc is None:
            logger.info(LogTemplates.VOICE_CONNECTED, channel.name, channel.guild.name)
        else:
            logger.info(LogTemplates.VOICE_MOVED, channel.name)
        return True

    # ── connection ─────────────────────────────────────────────────────

    async def connect(self, guild_id: int, channel_id: int) -> bool:
        return await self._join(guild_id, channel_id, None)

    async def move_to(self, guild_id: int, channel_id: int) -> bool:
        return await self._join(guild_id, channel_id, self._voice_client(guild_id))

    async def ensure_connected(self, guild_id: int, channel_id: int) -> bool:
        vc = self._voice_client(guild_id)

        if vc is not None and not vc.is_connected():
            logger.warning(LogTemplates.VOICE_STALE_CLEANUP, guild_id)
            await self.disconnect(guild_id)
            vc = self._voice_client(guild_id)

        if vc is not None and vc.channel is not None and vc.channel.id == channel_id:
            return True

        return await self._join(guild_id, channel_id, vc)

    async def disconnect(self, guild_id: int) -> bool:
        vc = self._voice_client(guild_id)
        if vc is None:
            return True

        try:
            await vc.disconnect(force=True)
        except Exception:
            logger.exception(LogTemplates.VOICE_CLEANUP_ERROR, guild_id)
            return False

        logger.info(LogTemplates.VOICE_DISCONNECTED, guild_id)
        return True

    def is_connected(self, guild_id: int) -> bool:
        vc = self._voice_client(guild_id)
        return bool(vc and vc.is_connected())

    # ── playback ───────────────────────────────────────────────────────

    async def play(self, guild_id: int, stream: AudioStream, volume: float) -> None:
        vc = self._voice_client(guild_id)
        if vc is None:
            logger.warning(LogTemplates.VOICE_NOT_CONNECTED, guild_id)
            raise VoiceConnectionError(None)

        if vc.is_playing() or vc.is_paused():
            vc.stop()

        source = self._source_factory.create_source(stream, volume)
        try:
            vc.play(source, after=partial(self._after_playback, guild_id))
        except Exception as e:
            logger.error(LogTemplates.PLAYBACK_FAILED_START, e)
            source.cleanup()
            raise

        logger.info(LogTemplates.PLAYBACK_STARTED, stream.title or stream.source_url, guild_id)

    def _after_playback(self, guild_id: int, error: Exception | None = None) -> None:
        # Runs on discord.py's audio thread.
        if error:
            logger.warning(LogTemplates.PLAYBACK_ERROR, guild_id, error)
        else:
            logger.info(LogTemplates.TRACK_ENDED, guild_id)

        asyncio.run_coroutine_threadsafe(self._handle_track_end(guild_id), self._bot.loop)

    async def _handle_track_end(self, guild_id: int) -> None:
        if self._on_track_end is None:
            logger.warning(LogTemplates.PLAYBACK_NO_CALLBACK, guild_id)
            return

        try:
            await self._on_track_end(guild_id)
        except Exception as e:
            logger.error(LogTemplates.PLAYBACK_CALLBACK_ERROR, guild_id, e)

    def set_on_track_end_callback(self, callback: Callable[[int], Awaitable[None]]) -> None:
        self._on_track_end = callback

    # ── transport ──────────────────────────────────────────────────────

    async def stop(self, guild_id: int) -> bool:
        vc = self._voice_client(guild_id)
        if vc is None or not (vc.is_playing() or vc.is_paused()):
            return False

        vc.stop()
        logger.info(LogTemplates.PLAYBACK_STOPPED, guild_id)
        return True

    async def pause(self, guild_id: int) -> bool:
        vc = self._voice_client(guild_id)
        if vc is None or not vc.is_playing():
            return False

        vc.pause()
        logger.info(LogTemplates.PLAYBACK_PAUSED, guild_id)
        return True

    async def resume(self, guild_id: int) -> bool:
        vc = self._voice_client(guild_id)
        if vc is None or not vc.is_paused():
            return False

        vc.resume()
        logger.info(LogTemplates.PLAYBACK_RESUMED, guild_id)
        return True

    def is_playing(self, guild_id: int) -> bool:
        vc = self._voice_client(guild_id)
        return bool(vc and vc.is_playing())

    def is_paused(self, guild_id: int) -> bool:
        vc = self._voice_client(guild_id)
        return bool(vc and vc.is_paused())

    def set_volume(self, guild_id: int, volume: float) -> bool:
        vc = self._voice_client(guild_id)
        source = vc.source if vc else None
        if not isinstance(source, discord.PCMVolumeTransformer):
            return False

        source.volume = min(max(volume, 0.0), 1.0)
        return True
