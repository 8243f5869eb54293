"""Playback Application Service - owns every mutation of the per-guild queue."""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from typing import TYPE_CHECKING

from ...domain.music.value_objects import PlaybackState, Volume
from ...domain.shared.exceptions import (
    InvalidTrackUrlError,
    NoActiveQueueError,
    VoiceConnectionError,
)
from ...domain.shared.messages import DiscordUIMessages, LogTemplates
from ...domain.shared.types import DiscordSnowflake
from .playback_models import TrackBatch

if TYPE_CHECKING:
    from ...domain.music.entities import GuildQueue
    from ...domain.music.repository import QueueRepository
    from ..interfaces.audio_backend import AudioBackend, AudioStream
    from ..interfaces.notifier import TextNotifier
    from ..interfaces.voice_adapter import VoiceAdapter

logger = logging.getLogger(__name__)

DEFAULT_PLAYLIST_LIMIT = 20


class PlaybackApplicationService:
    """Orchestrates the queue across the voice adapter, audio backend and notifier."""

    def __init__(
        self,
        *,
        queue_repository: QueueRepository,
        voice_adapter: VoiceAdapter,
        audio_backend: AudioBackend,
        notifier: TextNotifier,
        default_volume: float = 1.0,
        playlist_limit: int = DEFAULT_PLAYLIST_LIMIT,
    ) -> None:
        self._queue_repo = queue_repository
        self._voice_adapter = voice_adapter
        self._backend = audio_backend
        self._notifier = notifier
        self._default_volume = default_volume
        self._playlist_limit = playlist_limit

        self._guild_locks: dict[DiscordSnowflake, asyncio.Lock] = defaultdict(asyncio.Lock)
        self._streams: dict[DiscordSnowflake, AudioStream] = {}

        # Stopping audio on purpose still fires the voice "after" callback.
        # Suppress the next event per guild so a fresh queue is not advanced.
        self._ignore_next_voice_track_end: set[DiscordSnowflake] = set()

        self._voice_adapter.set_on_track_end_callback(self.handle_track_end)

    def get_queue(self, guild_id: DiscordSnowflake) -> GuildQueue | None:
        return self._queue_repo.get(guild_id)

    def get_tracks(self, guild_id: DiscordSnowflake) -> list[str]:
        queue = self._queue_repo.get(guild_id)
        return list(queue.tracks) if queue else []

    # ── play ───────────────────────────────────────────────────────────

    async def resolve_tracks(self, url: str) -> TrackBatch:
        """Validate a play request and expand playlists.

        A playlist that cannot be expanded falls back to its first video.
        """
        url = url.strip()
        if not url.startswith("http"):
            raise InvalidTrackUrlError(url)

        if not self._backend.is_playlist(url):
            return TrackBatch(urls=[url])

        logger.info(LogTemplates.PLAYLIST_EXPANDING, url)
        try:
            urls = await self._backend.expand_playlist(url, self._playlist_limit)
        except Exception as e:
            logger.warning(LogTemplates.PLAYLIST_FAILED, url, e)
            urls = []

        urls = [u for u in urls if u.startswith("http")][: self._playlist_limit]
        if not urls:
            return TrackBatch(urls=[url.split("&")[0]], from_playlist=True, playlist_fallback=True)

        logger.info(LogTemplates.PLAYLIST_EXPANDED, url, len(urls))
        return TrackBatch(urls=urls, from_playlist=True)

    async def enqueue(
        self,
        guild_id: DiscordSnowflake,
        batch: TrackBatch,
        *,
        voice_channel_id: DiscordSnowflake | None,
        text_channel_id: DiscordSnowflake | None,
    ) -> bool:
        """Append *batch* and start playing if the player is idle.

        Returns True if this call started playback.

        Raises:
            VoiceConnectionError: If the voice channel could not be joined; the
                queue is destroyed in that case.
        """
        if voice_channel_id is None:
            raise VoiceConnectionError(None)

        async with self._guild_locks[guild_id]:
            if not self._queue_repo.exists(guild_id):
                logger.info(LogTemplates.QUEUE_CREATED, guild_id)
            queue = self._queue_repo.get_or_create(guild_id, volume=self._default_volume)
            queue.bind_channels(voice_channel_id, text_channel_id)
            queue.enqueue_many(batch.urls)
            logger.info(LogTemplates.QUEUE_ENQUEUED, batch.count, guild_id)

            if not queue.is_idle:
                return False

            return await self._join_and_play(queue)

    async def _join_and_play(self, queue: GuildQueue) -> bool:
        connected = await self._voice_adapter.ensure_connected(
            queue.guild_id, queue.voice_channel_id
        )
        if not connected:
            channel_id = queue.voice_channel_id
            await self._teardown(queue)
            raise VoiceConnectionError(channel_id)

        return await self._play_next(queue)

    async def _play_next(self, queue: GuildQueue) -> bool:
        """Start the head track, dropping heads that fail until one plays."""
        guild_id = queue.guild_id

        while queue.current is not None:
            url = queue.current
            logger.info(LogTemplates.PLAY, url, guild_id)
            try:
                stream = await self._backend.open_stream(url)
                try:
                    await self._voice_adapter.play(guild_id, stream, queue.volume)
                except Exception:
                    stream.release()
                    raise
            except Exception as e:
                logger.error(LogTemplates.STREAM_FAILED, url, guild_id, e)
                await self._notifier.send(
                    queue.text_channel_id, DiscordUIMessages.ERROR_PLAYBACK.format(error=e)
                )
                queue.drop_current()
                continue

            self._streams[guild_id] = stream
            queue.mark_playing()
            await self._notifier.send(
                queue.text_channel_id, DiscordUIMessages.ACTION_NOW_PLAYING.format(url=url)
            )
            return True

        logger.info(LogTemplates.QUEUE_EXHAUSTED, guild_id)
        await self._teardown(queue)
        return False

    # ── end of track ───────────────────────────────────────────────────

    async def handle_track_end(self, guild_id: DiscordSnowflake) -> None:
        """Shift the list and play the next element, or leave when it is empty."""
        if guild_id in self._ignore_next_voice_track_end:
            self._ignore_next_voice_track_end.discard(guild_id)
            logger.debug(LogTemplates.PLAYBACK_IGNORING_CALLBACK, guild_id)
            return

        self._release_stream(guild_id)

        async with self._guild_locks[guild_id]:
            queue = self._queue_repo.get(guild_id)
            if queue is None:
                return

            queue.mark_idle()
            if queue.advance() is None:
                logger.info(LogTemplates.QUEUE_EXHAUSTED, guild_id)
                await self._teardown(queue)
                return

            await self._play_next(queue)

    # ── transport controls ─────────────────────────────────────────────

    async def pause(self, guild_id: DiscordSnowflake) -> bool:
        async with self._guild_locks[guild_id]:
            queue = self._queue_repo.get(guild_id)
            if queue is None or queue.state != PlaybackState.PLAYING:
                return False

            if not await self._voice_adapter.pause(guild_id):
                return False
            queue.pause()
            return True

    async def resume(self, guild_id: DiscordSnowflake) -> bool:
        async with self._guild_locks[guild_id]:
            queue = self._queue_repo.get(guild_id)
            if queue is None or queue.state != PlaybackState.PAUSED:
                return False

            if not await self._voice_adapter.resume(guild_id):
                return False
            queue.resume()
            return True

    async def skip(self, guild_id: DiscordSnowflake) -> bool:
        """Stop the current audio; the end-of-track callback advances the queue."""
        async with self._guild_locks[guild_id]:
            queue = self._queue_repo.get(guild_id)
            if queue is None or queue.current is None:
                return False

            return await self._voice_adapter.stop(guild_id)

    async def stop(self, guild_id: DiscordSnowflake) -> bool:
        """Clear the list, stop audio, leave voice and destroy the queue."""
        async with self._guild_locks[guild_id]:
            queue = self._queue_repo.get(guild_id)
            if queue is None:
                return False

            queue.clear()
            if self._voice_adapter.is_playing(guild_id) or self._voice_adapter.is_paused(guild_id):
                self._ignore_next_voice_track_end.add(guild_id)
                if not await self._voice_adapter.stop(guild_id):
                    self._ignore_next_voice_track_end.discard(guild_id)

            await self._teardown(queue)
            logger.info(LogTemplates.PLAYBACK_STOPPED, guild_id)
            return True

    async def clear(self, guild_id: DiscordSnowflake) -> int:
        """Drop pending tracks, keeping the one currently playing."""
        async with self._guild_locks[guild_id]:
            queue = self._queue_repo.get(guild_id)
            if queue is None:
                return 0

            removed = queue.clear_pending()
            logger.info(LogTemplates.QUEUE_CLEARED, removed, guild_id)
            return removed

    async def set_volume(self, guild_id: DiscordSnowflake, volume: Volume) -> None:
        """Store *volume* on the queue and apply it to the live resource.

        Raises:
            NoActiveQueueError: If the guild has no queue.
        """
        async with self._guild_locks[guild_id]:
            queue = self._queue_repo.get(guild_id)
            if queue is None:
                raise NoActiveQueueError(guild_id)

            queue.set_volume(volume)
            self._voice_adapter.set_volume(guild_id, volume.value)
            logger.info(LogTemplates.PLAYBACK_VOLUME_SET, volume.value, guild_id)

    # ── cleanup ────────────────────────────────────────────────────────

    def _release_stream(self, guild_id: DiscordSnowflake) -> None:
        stream = self._streams.pop(guild_id, None)
        if stream is not None:
            stream.release()

    async def _teardown(self, queue: GuildQueue) -> None:
        guild_id = queue.guild_id
        self._release_stream(guild_id)
        await self._voice_adapter.disconnect(guild_id)
        self._queue_repo.delete(guild_id)
        logger.info(LogTemplates.QUEUE_DESTROYED, guild_id)

    async def shutdown(self) -> None:
        """Release every live stream; voice clients are closed by the bot."""
        for guild_id in list(self._streams):
            self._release_stream(guild_id)
