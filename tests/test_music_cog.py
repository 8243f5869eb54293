"""
Unit Tests for MusicCog

Tests for all prefix commands:
- play, queue, clear, pause, resume, skip, stop, volume, all
- Voice-channel and server-only checks
- Error replies for invalid input
"""

import inspect
from unittest.mock import AsyncMock, MagicMock

import discord
import pytest
from discord.ext import commands

from discord_jukebox.application.services.playback_models import TrackBatch
from discord_jukebox.domain.music.value_objects import Volume
from discord_jukebox.domain.shared.exceptions import (
    InvalidTrackUrlError,
    NoActiveQueueError,
    VoiceConnectionError,
)
from discord_jukebox.domain.shared.messages import DiscordUIMessages
from discord_jukebox.infrastructure.discord.cogs.music_cog import MusicCog, setup

GUILD_ID = 111111111111111111
VOICE_ID = 222222222222222222
TEXT_ID = 333333333333333333
URL = "https://www.youtube.com/watch?v=dQw4w9WgXcQ"

# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def mock_container():
    """Create a mock DI container with an async playback service."""
    container = MagicMock()

    container.playback_service = MagicMock()
    container.playback_service.resolve_tracks = AsyncMock(
        return_value=TrackBatch(urls=[URL])
    )
    container.playback_service.enqueue = AsyncMock(return_value=True)
    container.playback_service.pause = AsyncMock(return_value=True)
    container.playback_service.resume = AsyncMock(return_value=True)
    container.playback_service.skip = AsyncMock(return_value=True)
    container.playback_service.stop = AsyncMock(return_value=True)
    container.playback_service.clear = AsyncMock(return_value=2)
    container.playback_service.set_volume = AsyncMock()
    container.playback_service.get_tracks = MagicMock(return_value=[])  # SYNC method

    container.settings = MagicMock()
    container.settings.discord.command_prefix = "!"
    return container


@pytest.fixture
def cog(mock_container):
    return MusicCog(MagicMock(), mock_container)


@pytest.fixture
def ctx():
    """Create a mock command context for a member sitting in voice."""
    context = MagicMock()
    context.send = AsyncMock()
    context.guild = MagicMock()
    context.guild.id = GUILD_ID
    context.channel = MagicMock()
    context.channel.id = TEXT_ID

    author = MagicMock(spec=discord.Member)
    author.voice = MagicMock()
    author.voice.channel = MagicMock()
    author.voice.channel.id = VOICE_ID
    context.author = author
    return context


def _replies(ctx) -> list[str]:
    return [call.args[0] for call in ctx.send.await_args_list]


# =============================================================================
# play
# =============================================================================


class TestPlayCommand:
    async def test_play_single_track(self, cog, ctx, mock_container):
        """Should confirm the track and enqueue it for the author's channels."""
        await cog.play.callback(cog, ctx, url=URL)

        mock_container.playback_service.resolve_tracks.assert_awaited_once_with(URL)
        mock_container.playback_service.enqueue.assert_awaited_once()
        call = mock_container.playback_service.enqueue.await_args
        assert call.args[0] == GUILD_ID
        assert call.kwargs == {"voice_channel_id": VOICE_ID, "text_channel_id": TEXT_ID}
        assert _replies(ctx) == [DiscordUIMessages.ACTION_TRACK_ADDED.format(url=URL)]

    async def test_play_requires_voice(self, cog, ctx, mock_container):
        ctx.author.voice = None

        await cog.play.callback(cog, ctx, url=URL)

        assert _replies(ctx) == [DiscordUIMessages.STATE_NEED_TO_BE_IN_VOICE]
        mock_container.playback_service.resolve_tracks.assert_not_awaited()

    async def test_play_non_member_author(self, cog, ctx, mock_container):
        ctx.author = MagicMock(spec=discord.User)

        await cog.play.callback(cog, ctx, url=URL)

        assert _replies(ctx) == [DiscordUIMessages.STATE_NEED_TO_BE_IN_VOICE]

    async def test_play_invalid_url(self, cog, ctx, mock_container):
        mock_container.playback_service.resolve_tracks.side_effect = InvalidTrackUrlError("nope")

        await cog.play.callback(cog, ctx, url="nope")

        assert _replies(ctx) == [DiscordUIMessages.ERROR_INVALID_URL]
        mock_container.playback_service.enqueue.assert_not_awaited()

    async def test_play_playlist_reports_count(self, cog, ctx, mock_container):
        mock_container.playback_service.resolve_tracks.return_value = TrackBatch(
            urls=[URL, URL, URL], from_playlist=True
        )

        await cog.play.callback(cog, ctx, url=URL + "&list=PL1")

        assert _replies(ctx) == [DiscordUIMessages.ACTION_PLAYLIST_ADDED.format(count=3)]

    async def test_play_playlist_fallback(self, cog, ctx, mock_container):
        mock_container.playback_service.resolve_tracks.return_value = TrackBatch(
            urls=[URL], from_playlist=True, playlist_fallback=True
        )

        await cog.play.callback(cog, ctx, url=URL + "&list=PL1")

        assert _replies(ctx) == [DiscordUIMessages.ACTION_PLAYLIST_FALLBACK]

    async def test_play_voice_join_failure(self, cog, ctx, mock_container):
        mock_container.playback_service.enqueue.side_effect = VoiceConnectionError(VOICE_ID)

        await cog.play.callback(cog, ctx, url=URL)

        assert _replies(ctx)[-1] == DiscordUIMessages.ERROR_COULD_NOT_JOIN_VOICE

    def test_play_takes_only_the_first_word(self, cog):
        """Trailing words after the URL are ignored rather than glued onto it."""
        param = cog.play.clean_params["url"]

        assert param.kind is inspect.Parameter.POSITIONAL_OR_KEYWORD
        assert param.required


# =============================================================================
# queue / clear
# =============================================================================


class TestQueueCommands:
    async def test_queue_empty(self, cog, ctx):
        await cog.queue.callback(cog, ctx)
        assert _replies(ctx) == [DiscordUIMessages.STATE_QUEUE_EMPTY]

    async def test_queue_lists_tracks(self, cog, ctx, mock_container):
        mock_container.playback_service.get_tracks.return_value = [URL, "https://b.example/2"]

        await cog.queue.callback(cog, ctx)

        reply = _replies(ctx)[0]
        assert f"1. {URL}" in reply
        assert "2. https://b.example/2" in reply

    async def test_clear_reports_count(self, cog, ctx):
        await cog.clear.callback(cog, ctx)
        assert _replies(ctx) == [DiscordUIMessages.ACTION_CLEARED.format(count=2)]

    async def test_clear_nothing_pending(self, cog, ctx, mock_container):
        mock_container.playback_service.clear.return_value = 0

        await cog.clear.callback(cog, ctx)

        assert _replies(ctx) == [DiscordUIMessages.STATE_NOTHING_TO_CLEAR]


# =============================================================================
# Transport
# =============================================================================


class TestTransportCommands:
    @pytest.mark.parametrize(
        ("command", "service_method", "ok_reply", "fail_reply"),
        [
            ("pause", "pause", DiscordUIMessages.ACTION_PAUSED, DiscordUIMessages.STATE_NOTHING_PLAYING),
            ("resume", "resume", DiscordUIMessages.ACTION_RESUMED, DiscordUIMessages.STATE_NOTHING_PAUSED),
            ("skip", "skip", DiscordUIMessages.ACTION_SKIPPED, DiscordUIMessages.STATE_NOTHING_PLAYING),
            ("stop", "stop", DiscordUIMessages.ACTION_STOPPED, DiscordUIMessages.STATE_NOTHING_PLAYING),
        ],
    )
    async def test_transport_replies(
        self, cog, ctx, mock_container, command, service_method, ok_reply, fail_reply
    ):
        cmd = getattr(cog, command)
        method = getattr(mock_container.playback_service, service_method)

        await cmd.callback(cog, ctx)
        method.assert_awaited_once_with(GUILD_ID)

        method.return_value = False
        await cmd.callback(cog, ctx)

        assert _replies(ctx) == [ok_reply, fail_reply]


# =============================================================================
# volume
# =============================================================================


class TestVolumeCommand:
    async def test_volume_sets_value(self, cog, ctx, mock_container):
        await cog.volume.callback(cog, ctx, "40")

        mock_container.playback_service.set_volume.assert_awaited_once_with(
            GUILD_ID, Volume.from_percent(40)
        )
        assert _replies(ctx) == [DiscordUIMessages.ACTION_VOLUME_SET.format(percent=40)]

    @pytest.mark.parametrize("raw", [None, "abc", "101", "-5"])
    async def test_volume_usage_on_bad_input(self, cog, ctx, mock_container, raw):
        await cog.volume.callback(cog, ctx, raw)

        assert _replies(ctx) == [DiscordUIMessages.ERROR_VOLUME_USAGE.format(prefix="!")]
        mock_container.playback_service.set_volume.assert_not_awaited()

    async def test_volume_without_queue(self, cog, ctx, mock_container):
        mock_container.playback_service.set_volume.side_effect = NoActiveQueueError(GUILD_ID)

        await cog.volume.callback(cog, ctx, "40")

        assert _replies(ctx) == [DiscordUIMessages.STATE_NOTHING_PLAYING]


# =============================================================================
# Help / checks / errors
# =============================================================================


class TestHelpAndErrors:
    async def test_all_lists_commands_with_prefix(self, cog, ctx):
        await cog.help_all.callback(cog, ctx)

        reply = _replies(ctx)[0]
        for name in ("play", "pause", "resume", "skip", "stop", "queue", "volume", "clear", "all"):
            assert f"!{name}" in reply

    async def test_cog_check_rejects_dms(self, cog, ctx):
        ctx.guild = None
        with pytest.raises(commands.NoPrivateMessage):
            await cog.cog_check(ctx)

    async def test_cog_check_allows_guild(self, cog, ctx):
        assert await cog.cog_check(ctx) is True

    async def test_error_no_private_message(self, cog, ctx):
        await cog.cog_command_error(ctx, commands.NoPrivateMessage())
        assert _replies(ctx) == [DiscordUIMessages.STATE_SERVER_ONLY]

    async def test_error_missing_argument(self, cog, ctx):
        param = MagicMock()
        param.name = "url"
        await cog.cog_command_error(ctx, commands.MissingRequiredArgument(param))
        assert _replies(ctx) == [DiscordUIMessages.ERROR_MISSING_ARGUMENT.format(param_name="url")]

    async def test_error_unexpected(self, cog, ctx):
        await cog.cog_command_error(ctx, commands.CommandInvokeError(RuntimeError("boom")))
        assert _replies(ctx) == [DiscordUIMessages.ERROR_UNEXPECTED]


class TestSetup:
    async def test_setup_adds_cog(self, mock_container):
        bot = MagicMock()
        bot.container = mock_container
        bot.add_cog = AsyncMock()

        await setup(bot)

        cog = bot.add_cog.await_args.args[0]
        assert isinstance(cog, MusicCog)

    async def test_setup_requires_container(self):
        bot = MagicMock(spec=commands.Bot)
        with pytest.raises(RuntimeError):
            await setup(bot)
