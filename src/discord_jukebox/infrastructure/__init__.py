"""Infrastructure layer - external systems integration.

This layer contains implementations for:
- Audio (yt-dlp library and CLI backends, FFmpeg sources, cookies)
- Discord (bot, cogs, voice adapter, text notifier)
- Memory (per-guild queue repository)
- Web (keep-alive HTTP server)
"""

from discord_jukebox.infrastructure.discord.adapters.voice_adapter import DiscordVoiceAdapter
from discord_jukebox.infrastructure.discord.bot import create_bot
from discord_jukebox.infrastructure.web.keepalive import KeepAliveServer

__all__ = [
    "create_bot",
    "DiscordVoiceAdapter",
    "KeepAliveServer",
]
