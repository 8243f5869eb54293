"""
Music Bounded Context

Domain logic for the per-guild playback queue.
"""

from discord_jukebox.domain.music.entities import GuildQueue
from discord_jukebox.domain.music.repository import QueueRepository
from discord_jukebox.domain.music.value_objects import PlaybackState, Volume

__all__ = [
    "GuildQueue",
    "QueueRepository",
    "PlaybackState",
    "Volume",
]
