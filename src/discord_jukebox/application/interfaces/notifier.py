"""Port interface for posting messages to a text channel."""

from __future__ import annotations

from abc import ABC, abstractmethod


class TextNotifier(ABC):
    """Sends plain text to a channel by id."""

    @abstractmethod
    async def send(self, channel_id: int | None, content: str) -> bool:
        """Post *content*; returns False if the channel is unknown or sending failed."""
        ...
