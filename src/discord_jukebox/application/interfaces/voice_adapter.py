"""Port for the per-guild voice connection and the audio playing on it."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

from discord_jukebox.domain.shared.types import DiscordSnowflake

if TYPE_CHECKING:
    from .audio_backend import AudioStream

TrackEndCallback = Callable[[DiscordSnowflake], Awaitable[None]]


class VoiceAdapter(ABC):
    """At most one voice connection and one playing stream per guild.

    Connection methods report failure with ``False``; ``play`` raises so the
    playback service can drop the track and move on.
    """

    # Connection

    @abstractmethod
    async def ensure_connected(self, guild_id: DiscordSnowflake, channel_id: DiscordSnowflake) -> bool:
        """Join *channel_id*, moving from another channel if already connected."""

    @abstractmethod
    async def disconnect(self, guild_id: DiscordSnowflake) -> bool: ...

    @abstractmethod
    def is_connected(self, guild_id: DiscordSnowflake) -> bool: ...

    # Playback

    @abstractmethod
    async def play(self, guild_id: DiscordSnowflake, stream: AudioStream, volume: float) -> None:
        """Replace whatever is playing with *stream* at *volume* (0.0-1.0)."""

    @abstractmethod
    def set_on_track_end_callback(self, callback: TrackEndCallback) -> None:
        """Register the coroutine run whenever audio finishes, including after ``stop``."""

    @abstractmethod
    def set_volume(self, guild_id: DiscordSnowflake, volume: float) -> bool: ...

    # Transport

    @abstractmethod
    async def stop(self, guild_id: DiscordSnowflake) -> bool:
        """Stop the audio. False when nothing was playing or paused."""

    @abstractmethod
    async def pause(self, guild_id: DiscordSnowflake) -> bool: ...

    @abstractmethod
    async def resume(self, guild_id: DiscordSnowflake) -> bool: ...

    @abstractmethod
    def is_playing(self, guild_id: DiscordSnowflake) -> bool: ...

    @abstractmethod
    def is_paused(self, guild_id: DiscordSnowflake) -> bool: ...
