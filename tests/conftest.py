from unittest.mock import AsyncMock, MagicMock

import pytest

# ============================================================================
# Repository Fixtures
# ============================================================================


@pytest.fixture
def queue_repository():
    """Create an empty in-memory queue repository."""
    from discord_jukebox.infrastructure.memory.queue_repository import InMemoryQueueRepository

    return InMemoryQueueRepository()


# ============================================================================
# Port Fixtures
# ============================================================================


@pytest.fixture
def make_stream():
    """Factory for AudioStream objects with a tracked cleanup callback."""
    from discord_jukebox.application.interfaces.audio_backend import AudioStream

    def _make(url: str = "https://youtu.be/abc", **kwargs) -> AudioStream:
        kwargs.setdefault("url", f"https://media.example/{url.rsplit('/', 1)[-1]}")
        kwargs.setdefault("cleanup", MagicMock())
        return AudioStream(source_url=url, **kwargs)

    return _make


@pytest.fixture
def audio_backend(make_stream):
    """Mock AudioBackend whose open_stream succeeds for any URL."""
    backend = MagicMock()
    backend.name = "stream"
    backend.open_stream = AsyncMock(side_effect=lambda url: make_stream(url))
    backend.expand_playlist = AsyncMock(return_value=[])
    backend.is_playlist = MagicMock(side_effect=lambda url: "list=" in url)
    backend.close = AsyncMock()
    return backend


@pytest.fixture
def voice_adapter():
    """Mock VoiceAdapter (mix of sync and async methods)."""
    adapter = MagicMock()
    adapter.ensure_connected = AsyncMock(return_value=True)
    adapter.disconnect = AsyncMock(return_value=True)
    adapter.play = AsyncMock(return_value=None)
    adapter.stop = AsyncMock(return_value=True)
    adapter.pause = AsyncMock(return_value=True)
    adapter.resume = AsyncMock(return_value=True)
    adapter.set_volume = MagicMock(return_value=True)  # SYNC method
    adapter.is_connected = MagicMock(return_value=True)
    adapter.is_playing = MagicMock(return_value=False)
    adapter.is_paused = MagicMock(return_value=False)
    adapter.set_on_track_end_callback = MagicMock()
    return adapter


@pytest.fixture
def notifier():
    """Mock TextNotifier that records every message."""
    mock = MagicMock()
    mock.send = AsyncMock(return_value=True)
    return mock


@pytest.fixture
def playback_service(queue_repository, voice_adapter, audio_backend, notifier):
    """Playback service wired to the in-memory repository and mocked ports."""
    from discord_jukebox.application.services.playback_service import (
        PlaybackApplicationService,
    )

    return PlaybackApplicationService(
        queue_repository=queue_repository,
        voice_adapter=voice_adapter,
        audio_backend=audio_backend,
        notifier=notifier,
        playlist_limit=20,
    )
