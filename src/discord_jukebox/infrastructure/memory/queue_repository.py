"""In-memory implementation of the queue repository."""

from __future__ import annotations

from discord_jukebox.domain.music.entities import GuildQueue
from discord_jukebox.domain.music.repository import QueueRepository


class InMemoryQueueRepository(QueueRepository):
    """Guild queues held in a dict for the lifetime of the process."""

    def __init__(self) -> None:
        self._queues: dict[int, GuildQueue] = {}

    def get(self, guild_id: int) -> GuildQueue | None:
        return self._queues.get(guild_id)

    def get_or_create(self, guild_id: int, *, volume: float = 1.0) -> GuildQueue:
        queue = self._queues.get(guild_id)
        if queue is None:
            queue = GuildQueue(guild_id=guild_id, volume=volume)
            self._queues[guild_id] = queue
        return queue

    def delete(self, guild_id: int) -> bool:
        return self._queues.pop(guild_id, None) is not None

    def exists(self, guild_id: int) -> bool:
        return guild_id in self._queues

    def count(self) -> int:
        return len(self._queues)

    def guild_ids(self) -> list[int]:
        return list(self._queues)
