"""
Music Domain Repository Interface

Abstract base class defining the contract for queue storage.
Implementations live in the infrastructure layer.
"""

from abc import ABC, abstractmethod

from discord_jukebox.domain.music.entities import GuildQueue


class QueueRepository(ABC):
    """Abstract repository for guild queues.

    One queue per guild. Queues live only as long as the process; there is no
    persistence contract beyond that.
    """

    @abstractmethod
    def get(self, guild_id: int) -> GuildQueue | None:
        """Retrieve the queue for a guild, or None if there is none."""
        ...

    @abstractmethod
    def get_or_create(self, guild_id: int, *, volume: float = 1.0) -> GuildQueue:
        """Get an existing queue or create one with the given default volume."""
        ...

    @abstractmethod
    def delete(self, guild_id: int) -> bool:
        """Delete a queue; True if one existed."""
        ...

    @abstractmethod
    def exists(self, guild_id: int) -> bool:
        ...

    @abstractmethod
    def count(self) -> int:
        """Number of guilds with a live queue."""
        ...
