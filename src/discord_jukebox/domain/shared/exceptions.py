"""Base exception classes for domain-level errors."""

from __future__ import annotations

from discord_jukebox.domain.shared.messages import ErrorMessages


class DomainError(Exception):
    """Base exception for all domain-level errors."""

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class ValidationError(DomainError):
    """Raised when domain validation fails."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message, code="VALIDATION_ERROR")
        self.field = field


class InvalidOperationError(DomainError):
    """Raised when an operation is invalid in the current state."""

    def __init__(self, operation: str, current_state: str, message: str | None = None) -> None:
        msg = message or f"Cannot perform '{operation}' in state '{current_state}'"
        super().__init__(msg, code="INVALID_OPERATION")
        self.operation = operation
        self.current_state = current_state


class InvalidTrackUrlError(ValidationError):
    """Raised when a play request does not carry an http(s) URL."""

    def __init__(self, url: str) -> None:
        super().__init__(ErrorMessages.INVALID_TRACK_URL.format(url=url), field="url")
        self.url = url


class NoActiveQueueError(DomainError):
    """Raised when a command targets a guild that has no queue."""

    def __init__(self, guild_id: int) -> None:
        super().__init__(
            ErrorMessages.NO_ACTIVE_QUEUE.format(guild_id=guild_id), code="NO_ACTIVE_QUEUE"
        )
        self.guild_id = guild_id


class VoiceConnectionError(DomainError):
    """Raised when the bot cannot join the requested voice channel."""

    def __init__(self, channel_id: int | None) -> None:
        super().__init__(
            ErrorMessages.VOICE_CONNECT_FAILED.format(channel_id=channel_id),
            code="VOICE_CONNECTION",
        )
        self.channel_id = channel_id


class StreamOpenError(DomainError):
    """Raised by an audio backend when a URL cannot be turned into audio."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(
            ErrorMessages.STREAM_OPEN_FAILED.format(url=url, reason=reason), code="STREAM_OPEN"
        )
        self.url = url
        self.reason = reason
