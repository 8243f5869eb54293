"""Shared kernel: exceptions, messages and constrained types."""

from discord_jukebox.domain.shared.exceptions import (
    DomainError,
    InvalidOperationError,
    InvalidTrackUrlError,
    NoActiveQueueError,
    StreamOpenError,
    ValidationError,
    VoiceConnectionError,
)
from discord_jukebox.domain.shared.messages import (
    DiscordUIMessages,
    ErrorMessages,
    LogTemplates,
)

__all__ = [
    "DomainError",
    "ValidationError",
    "InvalidOperationError",
    "InvalidTrackUrlError",
    "NoActiveQueueError",
    "StreamOpenError",
    "VoiceConnectionError",
    "DiscordUIMessages",
    "ErrorMessages",
    "LogTemplates",
]
