"""Immutable value objects for the music bounded context."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from discord_jukebox.domain.shared.exceptions import ValidationError
from discord_jukebox.domain.shared.messages import ErrorMessages


class PlaybackState(Enum):
    """Playback state with enforced transitions.

    State transitions:
    - IDLE -> PLAYING (start playback)
    - PLAYING -> PAUSED (pause)
    - PAUSED -> PLAYING (resume)
    - PLAYING/PAUSED -> IDLE (track ended, skipped or stopped)
    """

    IDLE = "idle"
    PLAYING = "playing"
    PAUSED = "paused"

    def can_transition_to(self, target: PlaybackState) -> bool:
        """Check if transition to target state is valid."""
        valid_transitions = {
            PlaybackState.IDLE: {PlaybackState.PLAYING, PlaybackState.IDLE},
            PlaybackState.PLAYING: {PlaybackState.PAUSED, PlaybackState.IDLE},
            PlaybackState.PAUSED: {PlaybackState.PLAYING, PlaybackState.IDLE},
        }
        return target in valid_transitions.get(self, set())

    @property
    def is_active(self) -> bool:
        return self in {PlaybackState.PLAYING, PlaybackState.PAUSED}


@dataclass(frozen=True)
class Volume:
    """Playback volume stored as a scalar in [0.0, 1.0].

    Users speak in percent (0-100); the audio transformer wants the scalar.
    """

    value: float

    def __post_init__(self) -> None:
        if not 0.0 <= self.value <= 1.0:
            raise ValidationError(
                ErrorMessages.INVALID_VOLUME_SCALAR.format(value=self.value), field="volume"
            )

    @classmethod
    def from_percent(cls, percent: int) -> Volume:
        if not 0 <= percent <= 100:
            raise ValidationError(
                ErrorMessages.INVALID_VOLUME_PERCENT.format(value=percent), field="volume"
            )
        return cls(percent / 100)

    @classmethod
    def parse(cls, raw: str | None) -> Volume:
        """Parse user input such as ``"75"`` into a volume."""
        try:
            percent = int((raw or "").strip(), 10)
        except ValueError:
            raise ValidationError(
                ErrorMessages.INVALID_VOLUME_PERCENT.format(value=raw), field="volume"
            ) from None
        return cls.from_percent(percent)

    @property
    def percent(self) -> int:
        return round(self.value * 100)

    def __float__(self) -> float:
        return self.value
