"""Core domain entities for the music bounded context."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from discord_jukebox.domain.music.value_objects import PlaybackState, Volume
from discord_jukebox.domain.shared.exceptions import InvalidOperationError
from discord_jukebox.domain.shared.types import (
    DiscordSnowflake,
    TrackUrlStr,
    VolumeScalar,
)


class GuildQueue(BaseModel):
    """Playback state for a single Discord guild.

    ``tracks[0]`` is the track currently playing (or being started); the rest
    are pending. The audio player and the live audio resource belong to the
    voice adapter, keyed by the same guild id.
    """

    model_config = ConfigDict(validate_assignment=True)

    guild_id: DiscordSnowflake
    tracks: list[TrackUrlStr] = Field(default_factory=list)
    voice_channel_id: DiscordSnowflake | None = None
    text_channel_id: DiscordSnowflake | None = None
    volume: VolumeScalar = 1.0
    state: PlaybackState = PlaybackState.IDLE

    @property
    def current(self) -> str | None:
        return self.tracks[0] if self.tracks else None

    @property
    def pending(self) -> list[str]:
        return self.tracks[1:]

    @property
    def is_empty(self) -> bool:
        return not self.tracks

    @property
    def is_idle(self) -> bool:
        return self.state == PlaybackState.IDLE

    def enqueue(self, url: str) -> int:
        """Append a track and return its 1-based position."""
        self.tracks.append(url)
        return len(self.tracks)

    def enqueue_many(self, urls: list[str]) -> int:
        """Append several tracks and return how many were added."""
        self.tracks.extend(urls)
        return len(urls)

    def advance(self) -> str | None:
        """Drop the head track and return the new head, if any."""
        if self.tracks:
            self.tracks.pop(0)
        return self.current

    def drop_current(self) -> str | None:
        """Remove the head track after a failure and return it."""
        if not self.tracks:
            return None
        return self.tracks.pop(0)

    def clear_pending(self) -> int:
        """Remove every track after the head and return the count removed."""
        removed = len(self.tracks) - 1 if self.tracks else 0
        del self.tracks[1:]
        return removed

    def clear(self) -> int:
        count = len(self.tracks)
        self.tracks.clear()
        return count

    def set_volume(self, volume: Volume) -> None:
        self.volume = volume.value

    def bind_channels(self, voice_channel_id: int | None, text_channel_id: int | None) -> None:
        """Remember where to play and where to announce."""
        self.voice_channel_id = voice_channel_id
        self.text_channel_id = text_channel_id

    def transition_to(self, new_state: PlaybackState) -> None:
        if not self.state.can_transition_to(new_state):
            raise InvalidOperationError(
                operation=f"transition to {new_state.value}",
                current_state=self.state.value,
                message=f"Cannot transition from {self.state.value} to {new_state.value}",
            )
        self.state = new_state

    def mark_playing(self) -> None:
        self.transition_to(PlaybackState.PLAYING)

    def pause(self) -> None:
        self.transition_to(PlaybackState.PAUSED)

    def resume(self) -> None:
        self.transition_to(PlaybackState.PLAYING)

    def mark_idle(self) -> None:
        self.transition_to(PlaybackState.IDLE)
