"""Bot configuration read from the environment and an optional ``.env`` file.

Sections (``discord``, ``audio``, ``keepalive``) are frozen models addressed
with a ``__`` delimiter, e.g. ``AUDIO__BACKEND=subprocess``.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    SecretStr,
    field_validator,
    model_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..domain.shared.messages import ErrorMessages

AudioBackendName = Literal["stream", "cookies", "subprocess"]


class DiscordSettings(BaseModel):
    """Discord bot configuration."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    token: SecretStr = Field(
        default=SecretStr(""), validation_alias=AliasChoices("token", "bot_token", "discord_token")
    )
    command_prefix: str = Field(
        default="!",
        min_length=1,
        max_length=5,
        validation_alias=AliasChoices("command_prefix", "prefix"),
    )


class AudioSettings(BaseModel):
    """Audio acquisition and playback configuration."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    backend: AudioBackendName = "stream"
    default_volume: float = Field(default=1.0, ge=0.0, le=1.0)
    playlist_limit: int = Field(default=20, ge=1, le=100)
    ytdlp_format: str = "bestaudio/best"
    cookie_path: str = Field(
        default="./cookies.json",
        validation_alias=AliasChoices("cookie_path", "cookies_path", "cookie_file"),
    )
    ytdlp_binary: str = "yt-dlp"
    ffmpeg_executable: str = "ffmpeg"
    ffmpeg_options: dict[str, str] = Field(
        default_factory=lambda: {
            "before_options": "-reconnect 1 -reconnect_streamed 1 -reconnect_delay_max 5",
            "options": "-vn",
        }
    )


class KeepAliveSettings(BaseModel):
    """Keep-alive HTTP server configuration."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    enabled: bool = True
    host: str = "0.0.0.0"
    port: int = Field(default=8080, ge=1, le=65535)


class Settings(BaseSettings):
    """Root settings.

    Environment variables:
    - ENVIRONMENT, LOG_LEVEL (top-level)
    - DISCORD__TOKEN, DISCORD__COMMAND_PREFIX (nested with ``__``)
    - AUDIO__BACKEND, AUDIO__COOKIE_PATH, AUDIO__PLAYLIST_LIMIT, ...
    - KEEPALIVE__ENABLED, KEEPALIVE__HOST, KEEPALIVE__PORT
    - DISCORD_TOKEN, PREFIX, COOKIE_PATH, PORT (flat names, applied when the
      nested value was left at its default)
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    environment: Literal["development", "production", "test"] = "development"
    log_level: str = "INFO"

    discord: DiscordSettings = Field(default_factory=DiscordSettings)
    audio: AudioSettings = Field(default_factory=AudioSettings)
    keepalive: KeepAliveSettings = Field(default_factory=KeepAliveSettings)

    discord_token: SecretStr | None = None
    prefix: str | None = None
    cookie_path: str | None = None
    port: int | None = None

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(
                ErrorMessages.INVALID_LOG_LEVEL.format(level=v, valid_levels=valid_levels)
            )
        return v_upper

    @model_validator(mode="after")
    def apply_flat_overrides(self) -> Settings:
        """Fold the flat variable names into the nested sections."""
        if self.discord_token is not None and not self.discord.token.get_secret_value():
            self.discord = self.discord.model_copy(update={"token": self.discord_token})
        if self.prefix and self.discord.command_prefix == DiscordSettings().command_prefix:
            self.discord = DiscordSettings(
                token=self.discord.token, command_prefix=self.prefix
            )
        if self.cookie_path and self.audio.cookie_path == AudioSettings().cookie_path:
            self.audio = self.audio.model_copy(update={"cookie_path": self.cookie_path})
        if self.port is not None and self.keepalive.port == KeepAliveSettings().port:
            self.keepalive = KeepAliveSettings(
                enabled=self.keepalive.enabled, host=self.keepalive.host, port=self.port
            )
        return self


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Process-wide settings; environment variables take precedence over ``.env``."""
    return Settings()


def clear_settings_cache() -> None:
    """Forget the cached settings so the next call re-reads the environment."""
    get_settings.cache_clear()
