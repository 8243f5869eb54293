"""Utility functions for formatting Discord messages."""

from __future__ import annotations

from typing import Final

from discord_jukebox.domain.shared.messages import DiscordUIMessages

DISCORD_MESSAGE_LIMIT: Final[int] = 2000


def truncate(text: str, max_length: int = 90) -> str:
    if len(text) <= max_length:
        return text
    return text[: max_length - 1] + "…"


def format_queue(tracks: list[str], max_length: int = DISCORD_MESSAGE_LIMIT) -> str:
    """Render the queue as ``1. url`` lines; the first entry is the one playing.

    URLs are never shortened. Lines that would push the message past
    *max_length* are replaced by a "…and N more" footer.
    """
    if not tracks:
        return DiscordUIMessages.STATE_QUEUE_EMPTY

    lines = [DiscordUIMessages.STATE_QUEUE_HEADER]
    length = len(lines[0])

    for i, url in enumerate(tracks, start=1):
        line = f"{i}. {url}"
        remaining = len(tracks) - i
        footer = (
            len(DiscordUIMessages.STATE_QUEUE_MORE.format(count=remaining)) + 1 if remaining else 0
        )
        if length + 1 + len(line) + footer > max_length:
            lines.append(DiscordUIMessages.STATE_QUEUE_MORE.format(count=len(tracks) - i + 1))
            break
        lines.append(line)
        length += 1 + len(line)

    return "\n".join(lines)
