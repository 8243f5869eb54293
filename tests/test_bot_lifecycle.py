"""
Tests for JukeboxBot lifecycle

Covers:
- Initialization (intents, prefix, help command, container wiring)
- setup_hook (container initialization, cog loading)
- Global command error handling
- on_ready presence
- close() cleanup
- create_bot factory
"""

import asyncio
import signal
from unittest.mock import AsyncMock, MagicMock, PropertyMock, patch

import discord
import pytest
from discord.ext import commands

from discord_jukebox.domain.shared.messages import DiscordUIMessages
from discord_jukebox.infrastructure.discord.bot import COGS, JukeboxBot, create_bot


@pytest.fixture
def mock_settings():
    """Create mock settings."""
    settings = MagicMock()
    settings.discord.command_prefix = "!"
    return settings


@pytest.fixture
def mock_container():
    """Create mock container."""
    container = MagicMock()
    container.initialize = AsyncMock()
    container.shutdown = AsyncMock()
    container.set_bot = MagicMock()
    return container


@pytest.fixture
def bot(mock_container, mock_settings):
    return JukeboxBot(container=mock_container, settings=mock_settings)


@pytest.fixture
def ctx():
    context = MagicMock()
    context.send = AsyncMock()
    context.cog = None
    return context


# =============================================================================
# Initialization
# =============================================================================


class TestBotInitialization:
    async def test_init_sets_intents(self, bot):
        """Should request the intents needed for prefix commands and voice."""
        assert bot.intents.message_content is True
        assert bot.intents.voice_states is True
        assert bot.intents.guilds is True
        assert bot.intents.guild_messages is True

    async def test_init_sets_command_prefix(self, mock_container, mock_settings):
        mock_settings.discord.command_prefix = "?"
        bot = JukeboxBot(container=mock_container, settings=mock_settings)

        assert bot.command_prefix == "?"
        assert bot.case_insensitive is True

    async def test_init_disables_default_help(self, bot):
        assert bot.help_command is None

    async def test_init_wires_container(self, bot, mock_container, mock_settings):
        assert bot.container is mock_container
        assert bot.settings is mock_settings
        mock_container.set_bot.assert_called_once_with(bot)

    async def test_init_creates_shutdown_event(self, bot):
        assert isinstance(bot._shutdown_event, asyncio.Event)
        assert not bot._shutdown_event.is_set()


# =============================================================================
# setup_hook
# =============================================================================


class TestSetupHook:
    async def test_setup_hook_initializes_container_and_loads_cogs(self, bot, mock_container):
        with patch.object(bot, "_load_cogs", new_callable=AsyncMock) as mock_load:
            await bot.setup_hook()

        mock_container.initialize.assert_awaited_once()
        mock_load.assert_awaited_once()

    async def test_setup_hook_reraises_container_error(self, bot, mock_container):
        mock_container.initialize.side_effect = PermissionError("port 80")

        with patch.object(bot, "_load_cogs", new_callable=AsyncMock) as mock_load:
            with pytest.raises(PermissionError):
                await bot.setup_hook()

        mock_load.assert_not_awaited()

    async def test_load_cogs_loads_all_cogs(self, bot):
        with patch.object(bot, "load_extension", new_callable=AsyncMock) as mock_load:
            await bot._load_cogs()

        assert [c.args[0] for c in mock_load.await_args_list] == list(COGS)

    async def test_load_cogs_handles_failure(self, bot):
        with patch.object(
            bot, "load_extension", new_callable=AsyncMock, side_effect=RuntimeError("bad cog")
        ):
            await bot._load_cogs()


# =============================================================================
# Command errors
# =============================================================================


class TestCommandErrors:
    async def test_unknown_command_points_to_help(self, bot, ctx):
        await bot.on_command_error(ctx, commands.CommandNotFound('Command "dance" is not found'))

        ctx.send.assert_awaited_once_with(
            DiscordUIMessages.ERROR_UNKNOWN_COMMAND.format(prefix="!")
        )

    async def test_cog_handler_takes_precedence(self, bot, ctx):
        ctx.cog = MagicMock()
        ctx.cog.has_error_handler.return_value = True

        await bot.on_command_error(ctx, commands.CommandInvokeError(RuntimeError("boom")))

        ctx.send.assert_not_awaited()

    async def test_unexpected_error_reply(self, bot, ctx):
        await bot.on_command_error(ctx, commands.CommandInvokeError(RuntimeError("boom")))

        ctx.send.assert_awaited_once_with(DiscordUIMessages.ERROR_UNEXPECTED)


# =============================================================================
# on_ready
# =============================================================================


class TestOnReady:
    async def test_on_ready_sets_presence(self, bot):
        mock_user = MagicMock()
        mock_user.id = 123456789

        with (
            patch.object(type(bot), "user", PropertyMock(return_value=mock_user)),
            patch.object(type(bot), "guilds", PropertyMock(return_value=[MagicMock()])),
            patch.object(bot, "change_presence", new_callable=AsyncMock) as mock_change,
        ):
            await bot.on_ready()

        activity = mock_change.call_args.kwargs["activity"]
        assert activity.type == discord.ActivityType.listening
        assert activity.name == "!all"


# =============================================================================
# close
# =============================================================================


class TestBotClose:
    async def test_close_disconnects_voice_clients(self, bot):
        vc1 = AsyncMock()
        vc2 = AsyncMock()

        with patch.object(type(bot), "voice_clients", PropertyMock(return_value=[vc1, vc2])):
            await bot.close()

        vc1.disconnect.assert_called_once_with(force=True)
        vc2.disconnect.assert_called_once_with(force=True)

    async def test_close_handles_voice_disconnect_error(self, bot):
        vc = AsyncMock()
        vc.disconnect.side_effect = Exception("Disconnect failed")

        with patch.object(type(bot), "voice_clients", PropertyMock(return_value=[vc])):
            await bot.close()

    async def test_close_shuts_down_container(self, bot, mock_container):
        with patch.object(type(bot), "voice_clients", PropertyMock(return_value=[])):
            await bot.close()

        mock_container.shutdown.assert_awaited_once()
        assert bot._shutdown_event.is_set()

    async def test_close_handles_container_shutdown_error(self, bot, mock_container):
        mock_container.shutdown.side_effect = Exception("Shutdown failed")

        with patch.object(type(bot), "voice_clients", PropertyMock(return_value=[])):
            await bot.close()

        assert bot._shutdown_event.is_set()


class TestCreateBot:
    def test_create_bot_returns_jukebox_bot(self, mock_container, mock_settings):
        bot = create_bot(mock_container, mock_settings)

        assert isinstance(bot, JukeboxBot)
        assert bot.container is mock_container


# =============================================================================
# Signal-driven shutdown
# =============================================================================


class TestGracefulShutdown:
    def test_intents_are_minimal(self):
        from discord_jukebox.infrastructure.discord.bot import build_intents

        intents = build_intents()

        assert intents.members is False
        assert intents.presences is False
        assert intents.message_content is True

    async def test_signal_schedules_single_close(self, bot):
        with patch.object(bot, "_close_within", new_callable=AsyncMock) as mock_close:
            bot._on_signal(signal.SIGTERM, 5.0)
            bot._on_signal(signal.SIGINT, 5.0)
            await bot._shutdown_task

        mock_close.assert_awaited_once_with(5.0)

    async def test_close_within_times_out(self, bot):
        async def hang():
            await asyncio.sleep(10)

        with patch.object(bot, "close", side_effect=hang):
            await bot._close_within(0.01)

    async def test_close_within_completes(self, bot):
        with patch.object(bot, "close", new_callable=AsyncMock) as mock_close:
            await bot._close_within(1.0)

        mock_close.assert_awaited_once()
