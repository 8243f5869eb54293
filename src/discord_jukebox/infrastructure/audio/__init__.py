"""Audio infrastructure - acquisition backends and FFmpeg sources."""

from discord_jukebox.infrastructure.audio.cookies import load_cookie_header
from discord_jukebox.infrastructure.audio.ffmpeg_player import FFmpegConfig, FFmpegSourceFactory
from discord_jukebox.infrastructure.audio.models import PlaylistEntry, YtDlpOpts, YtDlpTrackInfo
from discord_jukebox.infrastructure.audio.subprocess_backend import SubprocessAudioBackend
from discord_jukebox.infrastructure.audio.ytdlp_backend import CookieYtDlpBackend, YtDlpStreamBackend

__all__ = [
    "CookieYtDlpBackend",
    "FFmpegConfig",
    "FFmpegSourceFactory",
    "PlaylistEntry",
    "SubprocessAudioBackend",
    "YtDlpOpts",
    "YtDlpStreamBackend",
    "YtDlpTrackInfo",
    "load_cookie_header",
]
