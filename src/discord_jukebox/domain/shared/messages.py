"""Centralized message constants for error messages, log templates, and user feedback."""

from __future__ import annotations


class ErrorMessages:
    """Error messages for exceptions and validation failures."""

    INVALID_TRACK_URL = "Track URL must start with http: {url}"
    INVALID_VOLUME_PERCENT = "Volume must be between 0 and 100, got {value}"
    INVALID_VOLUME_SCALAR = "Volume must be between 0.0 and 1.0, got {value}"

    NO_ACTIVE_QUEUE = "No active queue for guild {guild_id}"
    VOICE_CONNECT_FAILED = "Could not join voice channel {channel_id}"
    STREAM_OPEN_FAILED = "Could not open a stream for {url}: {reason}"
    NO_STREAM_URL = "No playable audio found for {url}"
    SUBPROCESS_NO_STDOUT = "Decoder process has no stdout"

    INVALID_LOG_LEVEL = "Invalid log level: {level}. Must be one of {valid_levels}"
    DISCORD_TOKEN_REQUIRED = "DISCORD_TOKEN environment variable is required"
    BOT_NOT_INITIALIZED = "Bot not initialized. Call set_bot() first."
    CONTAINER_NOT_FOUND = "Container not found on bot instance"


class LogTemplates:
    """Log message templates.

    Use these with logger.info(), logger.error(), etc. and pass values as
    parameters so formatting is deferred to the logging framework.
    """

    # Voice
    VOICE_CONNECTED = "Connected to voice channel %s in %s"
    VOICE_DISCONNECTED = "Disconnected from voice in guild %s"
    VOICE_MOVED = "Moved to voice channel %s"
    VOICE_CONNECTION_TIMEOUT = "Timeout joining voice channel %s"
    VOICE_JOIN_FAILED = "Failed to join voice channel %s"
    VOICE_NO_PERMISSION = "No permission to connect to channel %s"
    VOICE_CLIENT_ERROR = "Client error connecting: %r"
    VOICE_STALE_CLEANUP = "Found stale voice client in guild %s, cleaning up"
    VOICE_NOT_CONNECTED = "Not connected to voice in guild %s"
    VOICE_CLEANUP_ERROR = "Error during voice cleanup in guild %s"
    GUILD_NOT_FOUND = "Guild %s not found"
    CHANNEL_NOT_VOICE = "Channel %s is not a voice channel"

    # Playback
    PLAYBACK_STARTED = "Started playing '%s' in guild %s"
    PLAYBACK_STOPPED = "Stopped playback in guild %s"
    PLAYBACK_PAUSED = "Paused playback in guild %s"
    PLAYBACK_RESUMED = "Resumed playback in guild %s"
    PLAYBACK_ERROR = "Playback error in guild %s: %s"
    PLAYBACK_FAILED_START = "Failed to start playback: %s"
    PLAYBACK_NO_CALLBACK = "No track end callback set for guild %s"
    PLAYBACK_CALLBACK_ERROR = "Error in track end callback for guild %s: %s"
    PLAYBACK_IGNORING_CALLBACK = "Ignoring voice track-end callback for guild %s"
    PLAYBACK_VOLUME_SET = "Volume set to %.2f in guild %s"
    PLAY = "Playing %s in guild %s"
    STREAM_FAILED = "Stream error for %s in guild %s: %s"
    TRACK_ENDED = "Track ended in guild %s"

    # Queue
    QUEUE_CREATED = "Created queue for guild %s"
    QUEUE_DESTROYED = "Destroyed queue for guild %s"
    QUEUE_ENQUEUED = "Enqueued %d track(s) in guild %s"
    QUEUE_CLEARED = "Cleared %s pending tracks in guild %s"
    QUEUE_EXHAUSTED = "Queue exhausted in guild %s"

    # Playlist
    PLAYLIST_EXPANDING = "Expanding playlist %s"
    PLAYLIST_EXPANDED = "Expanded playlist %s into %d entries"
    PLAYLIST_FAILED = "Playlist expansion failed for %s: %s"

    # Backends
    BACKEND_SELECTED = "Audio backend selected: %s"
    YTDLP_FAILED_EXTRACT_INFO = "Failed to extract info from %s"
    YTDLP_FAILED_EXTRACT_PLAYLIST = "Failed to extract playlist from %s"
    SUBPROCESS_SPAWNED = "Spawned decoder process pid=%s for %s"
    SUBPROCESS_TERMINATED = "Terminated decoder process pid=%s"
    SUBPROCESS_CLEANUP_ERROR = "Error terminating decoder process pid=%s: %r"
    COOKIES_LOADED = "Loaded %d cookies from %s"
    COOKIES_LOAD_FAILED = "Could not load cookies from %s: %s"

    # Keep-alive server
    KEEPALIVE_STARTED = "Keep-alive HTTP server listening on %s:%s"
    KEEPALIVE_PORT_IN_USE = "Port %s already in use, keep-alive server skipped"
    KEEPALIVE_STOPPED = "Keep-alive HTTP server stopped"

    # Notifications
    NOTIFY_CHANNEL_NOT_FOUND = "Text channel %s not found"
    NOTIFY_SEND_FAILED = "Failed to send message to channel %s: %s"

    # Commands
    COMMAND_FAILED = "Command '%s' failed"
    COMMAND_UNKNOWN = "Unknown command '%s' from %s"

    # Application lifecycle
    BOT_STARTING = "Starting Discord Jukebox in {environment} mode"
    BOT_SETUP = "Setting up bot..."
    BOT_SETUP_COMPLETE = "Bot setup complete"
    BOT_STARTING_RUN = "Starting bot..."
    BOT_STOPPED = "Bot stopped successfully"
    BOT_KEYBOARD_INTERRUPT = "Received keyboard interrupt, shutting down..."
    BOT_FATAL_ERROR = "Fatal error: %s"
    BOT_SHUTTING_DOWN = "Shutting down bot..."
    BOT_SHUTDOWN_TIMEOUT = "Graceful shutdown exceeded %.1fs"
    BOT_SIGNAL_RECEIVED = "Received %s, closing within %.0fs"
    BOT_CONTAINER_SHUTDOWN = "Container shutdown complete"
    BOT_CONTAINER_SHUTDOWN_ERROR = "Error during container shutdown: %s"
    BOT_SHUTDOWN_COMPLETE = "Bot shutdown complete"
    BOT_READY = "Bot ready as %s (%s)"
    BOT_CONNECTED_GUILDS = "Connected to %s guilds"
    BOT_COG_LOADED = "Loaded cog: %s"
    BOT_COG_LOAD_FAILED = "Failed to load cog %s: %s"
    BOT_CONTAINER_INITIALIZED = "Container initialized"
    BOT_CONTAINER_INIT_FAILED = "Container initialization failed: %s"
    BOT_COGS_LOADED_SUMMARY = "Cogs loaded: %d ok, %d failed"
    BOT_INVALID_CONFIG = "Invalid configuration: %s"


class DiscordUIMessages:
    """User-facing Discord messages.

    These strings are sent directly to the text channel.
    """

    ACTION_PAUSED = "⏸️ Playback paused."
    ACTION_RESUMED = "▶️ Playback resumed."
    ACTION_SKIPPED = "⏭️ Skipping to the next track."
    ACTION_STOPPED = "⏹️ Playback stopped and queue cleared."
    ACTION_CLEARED = "🗑️ Cleared {count} pending track(s)."
    ACTION_VOLUME_SET = "🔊 Volume set to {percent}%"
    ACTION_TRACK_ADDED = "➕ Added: {url}"
    ACTION_PLAYLIST_ADDED = "➕ Added {count} tracks from the playlist."
    ACTION_PLAYLIST_FALLBACK = "⚠️ Playlist not supported, playing the first video."
    ACTION_NOW_PLAYING = "▶️ Now playing: {url}"

    STATE_QUEUE_EMPTY = "📭 The queue is empty."
    STATE_QUEUE_HEADER = "🎶 Queue:"
    STATE_QUEUE_MORE = "…and {count} more"
    STATE_NOTHING_PLAYING = "Nothing is playing."
    STATE_NOTHING_PAUSED = "Nothing is paused."
    STATE_NOTHING_TO_CLEAR = "There are no pending tracks to clear."
    STATE_NEED_TO_BE_IN_VOICE = "🔊 Join a voice channel first."
    STATE_SERVER_ONLY = "This command can only be used in a server."

    ERROR_INVALID_URL = "❌ Invalid URL."
    ERROR_VOLUME_USAGE = "❌ Usage: {prefix}volume 0-100"
    ERROR_COULD_NOT_JOIN_VOICE = "❌ Could not join the voice channel."
    ERROR_PLAYBACK = "❌ Playback error: {error}"
    ERROR_UNEXPECTED = "❌ Unexpected error."
    ERROR_UNKNOWN_COMMAND = "❓ Unknown command. Type `{prefix}all` for help."
    ERROR_MISSING_ARGUMENT = "❌ Missing argument: {param_name}"

    HELP = (
        "📜 Commands:\n"
        "{prefix}play <URL>       — Play a video or playlist\n"
        "{prefix}pause            — Pause\n"
        "{prefix}resume           — Resume\n"
        "{prefix}skip             — Skip\n"
        "{prefix}stop             — Stop and clear the queue\n"
        "{prefix}queue            — Show the queue\n"
        "{prefix}volume <0-100>   — Volume\n"
        "{prefix}clear            — Clear pending tracks\n"
        "{prefix}all              — Help"
    )

    KEEPALIVE_BODY = "🤖 Bot online"
