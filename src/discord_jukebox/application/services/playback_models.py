"""Data models returned by the playback application service."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from discord_jukebox.domain.shared.types import TrackUrlStr


class TrackBatch(BaseModel):
    """Tracks produced by one ``play`` request, ready to be enqueued."""

    model_config = ConfigDict(frozen=True)

    urls: list[TrackUrlStr] = Field(min_length=1)
    from_playlist: bool = False
    playlist_fallback: bool = False

    @property
    def count(self) -> int:
        return len(self.urls)

    @property
    def first(self) -> str:
        return self.urls[0]
