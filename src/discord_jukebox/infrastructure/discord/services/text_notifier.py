"""Posts plain-text announcements to the channel a queue is bound to."""

from __future__ import annotations

import logging

import discord

from discord_jukebox.application.interfaces.notifier import TextNotifier
from discord_jukebox.domain.shared.messages import LogTemplates
from discord_jukebox.utils.reply import DISCORD_MESSAGE_LIMIT, truncate

logger = logging.getLogger(__name__)


class DiscordTextNotifier(TextNotifier):
    def __init__(self, bot: discord.Client) -> None:
        self._bot = bot

    async def _resolve_channel(self, channel_id: int) -> discord.abc.Messageable | None:
        channel = self._bot.get_channel(channel_id)
        if channel is None:
            try:
                channel = await self._bot.fetch_channel(channel_id)
            except discord.HTTPException:
                return None

        return channel if isinstance(channel, discord.abc.Messageable) else None

    async def send(self, channel_id: int | None, content: str) -> bool:
        if channel_id is None:
            return False

        channel = await self._resolve_channel(channel_id)
        if channel is None:
            logger.warning(LogTemplates.NOTIFY_CHANNEL_NOT_FOUND, channel_id)
            return False

        try:
            await channel.send(truncate(content, DISCORD_MESSAGE_LIMIT))
            return True
        except discord.HTTPException as e:
            logger.warning(LogTemplates.NOTIFY_SEND_FAILED, channel_id, e)
            return False
