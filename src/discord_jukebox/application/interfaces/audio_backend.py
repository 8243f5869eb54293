"""Port interface for turning track URLs into playable audio."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import IO


@dataclass
class AudioStream:
    """Something FFmpeg can read: a direct media URL or a byte pipe.

    Exactly one of ``url`` and ``pipe`` is set. ``cleanup`` releases whatever
    the backend allocated (child processes, file handles) and is safe to call
    more than once.
    """

    source_url: str
    url: str | None = None
    pipe: IO[bytes] | None = None
    title: str | None = None
    http_headers: dict[str, str] = field(default_factory=dict)
    cleanup: Callable[[], None] | None = None

    def __post_init__(self) -> None:
        if (self.url is None) == (self.pipe is None):
            raise ValueError("AudioStream needs exactly one of url or pipe")

    @property
    def is_pipe(self) -> bool:
        return self.pipe is not None

    def release(self) -> None:
        if self.cleanup is not None:
            cleanup, self.cleanup = self.cleanup, None
            cleanup()


class AudioBackend(ABC):
    """Interface for audio-acquisition strategies."""

    name: str = "abstract"

    @abstractmethod
    async def open_stream(self, url: str) -> AudioStream:
        """Turn a track URL into a stream FFmpeg can consume.

        Raises:
            StreamOpenError: If nothing playable could be obtained.
        """
        ...

    @abstractmethod
    async def expand_playlist(self, url: str, limit: int) -> list[str]:
        """Return up to *limit* track URLs from a playlist URL."""
        ...

    @abstractmethod
    def is_playlist(self, url: str) -> bool:
        ...

    async def close(self) -> None:
        """Release backend-wide resources."""
        return None
