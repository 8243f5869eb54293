"""Dependency Injection Container

Manages the application's dependency graph, providing lazy initialization
and lifecycle management for the queue repository, audio backend, Discord
adapters, playback service and keep-alive server.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from ..domain.shared.messages import ErrorMessages, LogTemplates

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from discord.ext.commands import Bot

    from ..application.interfaces.audio_backend import AudioBackend
    from ..application.interfaces.notifier import TextNotifier
    from ..application.interfaces.voice_adapter import VoiceAdapter
    from ..application.services.playback_service import PlaybackApplicationService
    from ..domain.music.repository import QueueRepository
    from ..infrastructure.web.keepalive import KeepAliveServer
    from .settings import Settings


@dataclass
class Container:
    """Dependency injection container.

    Components are lazily initialized when first accessed.
    """

    settings: Settings
    _bot: Bot | None = None

    _queue_repository: QueueRepository | None = None

    # Infrastructure adapters
    _audio_backend: AudioBackend | None = None
    _voice_adapter: VoiceAdapter | None = None
    _notifier: TextNotifier | None = None
    _keepalive_server: KeepAliveServer | None = None

    # Application services
    _playback_service: PlaybackApplicationService | None = None

    def set_bot(self, bot: Bot) -> None:
        """Set the Discord bot instance."""
        self._bot = bot

    @property
    def bot(self) -> Bot:
        """Get the Discord bot instance."""
        if self._bot is None:
            raise RuntimeError(ErrorMessages.BOT_NOT_INITIALIZED)
        return self._bot

    # === Repositories ===

    @property
    def queue_repository(self) -> QueueRepository:
        """Get the in-memory queue repository."""
        if self._queue_repository is None:
            from ..infrastructure.memory.queue_repository import InMemoryQueueRepository

            self._queue_repository = InMemoryQueueRepository()
        return self._queue_repository

    # === Infrastructure Adapters ===

    @property
    def audio_backend(self) -> AudioBackend:
        """Get the audio backend selected by ``AUDIO__BACKEND``."""
        if self._audio_backend is None:
            self._audio_backend = self._create_audio_backend()
            logger.info(LogTemplates.BACKEND_SELECTED, self._audio_backend.name)
        return self._audio_backend

    def _create_audio_backend(self) -> AudioBackend:
        audio = self.settings.audio

        if audio.backend == "cookies":
            from ..infrastructure.audio.ytdlp_backend import CookieYtDlpBackend

            return CookieYtDlpBackend(audio)

        if audio.backend == "subprocess":
            from ..infrastructure.audio.cookies import load_cookie_header
            from ..infrastructure.audio.subprocess_backend import SubprocessAudioBackend

            cookie_header = (
                load_cookie_header(audio.cookie_path) if Path(audio.cookie_path).is_file() else None
            )
            return SubprocessAudioBackend(audio, cookie_header=cookie_header)

        from ..infrastructure.audio.ytdlp_backend import YtDlpStreamBackend

        return YtDlpStreamBackend(audio)

    @property
    def voice_adapter(self) -> VoiceAdapter:
        """Get the voice adapter."""
        if self._voice_adapter is None:
            from ..infrastructure.audio.ffmpeg_player import FFmpegSourceFactory
            from ..infrastructure.discord.adapters.voice_adapter import (
                DiscordVoiceAdapter,
            )

            self._voice_adapter = DiscordVoiceAdapter(
                self.bot, FFmpegSourceFactory(self.settings.audio)
            )
        return self._voice_adapter

    @property
    def notifier(self) -> TextNotifier:
        """Get the text-channel notifier."""
        if self._notifier is None:
            from ..infrastructure.discord.services.text_notifier import DiscordTextNotifier

            self._notifier = DiscordTextNotifier(self.bot)
        return self._notifier

    @property
    def keepalive_server(self) -> KeepAliveServer:
        """Get the keep-alive HTTP server."""
        if self._keepalive_server is None:
            from ..infrastructure.web.keepalive import KeepAliveServer

            self._keepalive_server = KeepAliveServer(self.settings.keepalive, bot=self._bot)
        return self._keepalive_server

    # === Application Services ===

    @property
    def playback_service(self) -> PlaybackApplicationService:
        """Get the playback application service."""
        if self._playback_service is None:
            from ..application.services.playback_service import (
                PlaybackApplicationService,
            )

            self._playback_service = PlaybackApplicationService(
                queue_repository=self.queue_repository,
                voice_adapter=self.voice_adapter,
                audio_backend=self.audio_backend,
                notifier=self.notifier,
                default_volume=self.settings.audio.default_volume,
                playlist_limit=self.settings.audio.playlist_limit,
            )
        return self._playback_service

    # === Lifecycle ===

    async def initialize(self) -> None:
        """Build the playback graph and start the keep-alive server."""
        _ = self.playback_service

        if self.settings.keepalive.enabled:
            await self.keepalive_server.start()

    async def shutdown(self) -> None:
        """Shutdown and cleanup all resources."""
        if self._keepalive_server is not None:
            try:
                await self._keepalive_server.stop()
            except Exception as exc:
                logger.warning(LogTemplates.BOT_CONTAINER_SHUTDOWN_ERROR, exc)

        if self._playback_service is not None:
            await self._playback_service.shutdown()

        if self._audio_backend is not None:
            try:
                await self._audio_backend.close()
            except Exception as exc:
                logger.warning(LogTemplates.BOT_CONTAINER_SHUTDOWN_ERROR, exc)


def create_container(settings: Settings) -> Container:
    """Create a new dependency injection container."""
    return Container(settings)
