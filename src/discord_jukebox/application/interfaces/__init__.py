"""Application ports - abstract interfaces implemented by infrastructure."""

from discord_jukebox.application.interfaces.audio_backend import AudioBackend, AudioStream
from discord_jukebox.application.interfaces.notifier import TextNotifier
from discord_jukebox.application.interfaces.voice_adapter import VoiceAdapter

__all__ = [
    "AudioBackend",
    "AudioStream",
    "TextNotifier",
    "VoiceAdapter",
]
