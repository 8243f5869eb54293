"""
FFmpeg Audio Sources

Infrastructure component that turns an AudioStream into a discord.py source.
"""

from __future__ import annotations

import shlex
from dataclasses import dataclass, field

import discord

from discord_jukebox.application.interfaces.audio_backend import AudioStream
from discord_jukebox.config.settings import AudioSettings


@dataclass
class FFmpegConfig:
    """Configuration for FFmpeg audio processing."""

    executable: str = "ffmpeg"

    # Options for remote inputs; pipes get only the output options
    before_options: str = "-reconnect 1 -reconnect_streamed 1 -reconnect_delay_max 5"
    options: str = "-vn"

    extra_headers: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_settings(cls, settings: AudioSettings) -> FFmpegConfig:
        return cls(
            executable=settings.ffmpeg_executable,
            before_options=settings.ffmpeg_options.get("before_options", ""),
            options=settings.ffmpeg_options.get("options", "-vn"),
        )

    def get_before_options(self, headers: dict[str, str] | None = None) -> str:
        """Get FFmpeg before_options string, with request headers if any."""
        merged = {**self.extra_headers, **(headers or {})}
        opts = [self.before_options] if self.before_options else []
        if merged:
            blob = "".join(f"{key}: {value}\r\n" for key, value in merged.items())
            opts.append(f"-headers {shlex.quote(blob)}")
        return " ".join(opts)

    def get_options(self) -> str:
        return self.options


class FFmpegSourceFactory:
    """Builds volume-controllable FFmpeg sources for the voice client."""

    def __init__(
        self, settings: AudioSettings | None = None, config: FFmpegConfig | None = None
    ) -> None:
        self._config = config or FFmpegConfig.from_settings(settings or AudioSettings())

    @property
    def config(self) -> FFmpegConfig:
        return self._config

    def create_source(self, stream: AudioStream, volume: float) -> discord.PCMVolumeTransformer:
        """Create an audio source for *stream* at *volume*.

        Returns:
            A PCMVolumeTransformer wrapping an FFmpegPCMAudio source.
        """
        if stream.is_pipe:
            source = discord.FFmpegPCMAudio(
                stream.pipe,
                executable=self._config.executable,
                pipe=True,
                options=self._config.get_options(),
            )
        else:
            source = discord.FFmpegPCMAudio(
                stream.url,
                executable=self._config.executable,
                before_options=self._config.get_before_options(stream.http_headers),
                options=self._config.get_options(),
            )

        return discord.PCMVolumeTransformer(source, volume=max(0.0, min(1.0, volume)))
