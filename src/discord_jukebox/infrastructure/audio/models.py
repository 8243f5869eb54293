"""Pydantic models for yt-dlp data transformation and configuration.

These are infrastructure-specific models for parsing external yt-dlp data
and configuring yt-dlp options.
"""

from __future__ import annotations

from typing import Annotated, Any, Final

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator

from discord_jukebox.domain.shared.types import NonEmptyStr, PositiveInt

DEFAULT_RETRIES: Final[int] = 3
DEFAULT_SOCKET_TIMEOUT: Final[int] = 10
DEFAULT_HTTP_CHUNK_SIZE: Final[int] = 1024 * 1024  # 1 MiB

YOUTUBE_WATCH_URL: Final[str] = "https://www.youtube.com/watch?v={id}"


def _str_or_none(v: Any) -> str | None:
    if not isinstance(v, str) or not v.strip():
        return None
    return v


# yt-dlp sends "", None or numbers where a string is expected.
OptionalStr = Annotated[NonEmptyStr | None, BeforeValidator(_str_or_none)]


# ── Pydantic models for yt-dlp data ────────────────────────────────────


class AudioFormatInfo(BaseModel):
    """A single audio format entry from yt-dlp extraction."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    url: OptionalStr = None
    acodec: OptionalStr = None


class YtDlpTrackInfo(BaseModel):
    """Trimmed yt-dlp extraction result for a single video.

    Extra fields from yt-dlp are silently ignored, keeping memory usage low.
    Before-validators coerce garbage from external yt-dlp data gracefully.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    webpage_url: OptionalStr = None
    url: OptionalStr = None
    title: NonEmptyStr = "Unknown Title"
    http_headers: dict[str, str] = Field(default_factory=dict)
    formats: list[AudioFormatInfo] = Field(default_factory=list)

    @field_validator("title", mode="before")
    @classmethod
    def _coerce_title(cls, v: Any) -> str:
        """Fall back to default when yt-dlp sends empty or non-string title."""
        if not isinstance(v, str) or not v.strip():
            return "Unknown Title"
        return v

    @field_validator("http_headers", mode="before")
    @classmethod
    def _coerce_headers(cls, v: Any) -> dict[str, str]:
        if not isinstance(v, dict):
            return {}
        return {str(k): str(val) for k, val in v.items() if val is not None}

    def stream_url(self) -> str | None:
        """Direct media URL, preferring the selected format over the format list."""
        if self.url:
            return self.url
        audio_formats = [f for f in self.formats if f.acodec != "none" and f.url]
        if audio_formats:
            return audio_formats[-1].url
        return None


class PlaylistEntry(BaseModel):
    """One entry of a flat playlist extraction."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: OptionalStr = None
    url: OptionalStr = None
    webpage_url: OptionalStr = None
    ie_key: OptionalStr = None

    def watch_url(self) -> str | None:
        """Playable page URL for this entry, or None if it has none."""
        for candidate in (self.webpage_url, self.url):
            if candidate and candidate.startswith("http"):
                return candidate
        if self.id and self.ie_key == "Youtube":
            return YOUTUBE_WATCH_URL.format(id=self.id)
        return None


# ── yt-dlp option models ───────────────────────────────────────────────


class YtDlpOpts(BaseModel):
    """Typed yt-dlp configuration options passed to YoutubeDL."""

    model_config = ConfigDict(frozen=True)

    quiet: bool = True
    no_warnings: bool = True
    noprogress: bool = True
    noplaylist: bool = True
    forceipv4: bool = True
    retries: PositiveInt = DEFAULT_RETRIES
    socket_timeout: PositiveInt = DEFAULT_SOCKET_TIMEOUT
    http_chunk_size: PositiveInt = DEFAULT_HTTP_CHUNK_SIZE
    format: NonEmptyStr | None = None
    skip_download: bool = True
    extract_flat: NonEmptyStr | bool = False
    playlistend: PositiveInt | None = None
    http_headers: dict[str, str] | None = None

    def to_params(self) -> dict[str, Any]:
        """Options as the ``params`` dict YoutubeDL expects, unset keys dropped."""
        return self.model_dump(exclude_none=True)
