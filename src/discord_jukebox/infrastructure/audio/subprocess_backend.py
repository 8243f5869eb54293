"""AudioBackend that pipes a yt-dlp child process into FFmpeg."""

from __future__ import annotations

import asyncio
import logging
import subprocess
from typing import Final

from discord_jukebox.application.interfaces.audio_backend import AudioBackend, AudioStream
from discord_jukebox.config.settings import AudioSettings
from discord_jukebox.domain.shared.exceptions import StreamOpenError
from discord_jukebox.domain.shared.messages import ErrorMessages, LogTemplates
from discord_jukebox.infrastructure.audio.ytdlp_backend import is_playlist_url

logger = logging.getLogger(__name__)

STARTUP_GRACE_SECONDS: Final[float] = 0.3
TERMINATE_TIMEOUT_SECONDS: Final[float] = 2.0
PLAYLIST_TIMEOUT_SECONDS: Final[float] = 30.0


class SubprocessAudioBackend(AudioBackend):
    """Downloads audio with the yt-dlp CLI and hands its stdout to FFmpeg.

    Nothing is resolved in-process; each track owns one child process that is
    terminated when the stream is released.
    """

    name = "subprocess"

    def __init__(
        self, settings: AudioSettings | None = None, *, cookie_header: str | None = None
    ) -> None:
        self._settings = settings or AudioSettings()
        self._cookie_header = cookie_header
        self._processes: dict[int, subprocess.Popen[bytes]] = {}
        self._reapers: set[asyncio.Task[None]] = set()

    def _base_command(self) -> list[str]:
        cmd = [self._settings.ytdlp_binary, "--quiet", "--no-warnings"]
        if self._cookie_header:
            cmd += ["--add-header", f"Cookie:{self._cookie_header}"]
        return cmd

    def build_stream_command(self, url: str) -> list[str]:
        return [
            *self._base_command(),
            "--no-playlist",
            "-f",
            self._settings.ytdlp_format,
            "-o",
            "-",
            url,
        ]

    def build_playlist_command(self, url: str, limit: int) -> list[str]:
        return [
            *self._base_command(),
            "--flat-playlist",
            "--playlist-end",
            str(limit),
            "--print",
            "url",
            url,
        ]

    def _spawn(self, url: str) -> subprocess.Popen[bytes]:
        return subprocess.Popen(
            self.build_stream_command(url),
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
        )

    def _terminate(self, process: subprocess.Popen[bytes]) -> None:
        """Signal the child and close its pipe; waiting for it happens off the loop."""
        self._processes.pop(process.pid, None)
        try:
            if process.poll() is None:
                process.terminate()
                self._schedule_reap(process)
        except Exception as e:
            logger.warning(LogTemplates.SUBPROCESS_CLEANUP_ERROR, process.pid, e)
        finally:
            if process.stdout is not None:
                process.stdout.close()

    def _schedule_reap(self, process: subprocess.Popen[bytes]) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self._reap(process)
            return

        task = loop.create_task(asyncio.to_thread(self._reap, process))
        self._reapers.add(task)
        task.add_done_callback(self._reapers.discard)

    def _reap(self, process: subprocess.Popen[bytes]) -> None:
        # Blocking; runs on a worker thread when called from the event loop.
        try:
            try:
                process.wait(timeout=TERMINATE_TIMEOUT_SECONDS)
            except subprocess.TimeoutExpired:
                process.kill()
                process.wait(timeout=TERMINATE_TIMEOUT_SECONDS)
            logger.debug(LogTemplates.SUBPROCESS_TERMINATED, process.pid)
        except Exception as e:
            logger.warning(LogTemplates.SUBPROCESS_CLEANUP_ERROR, process.pid, e)

    async def open_stream(self, url: str) -> AudioStream:
        try:
            process = self._spawn(url)
        except OSError as e:
            raise StreamOpenError(url, str(e)) from e

        if process.stdout is None:
            self._terminate(process)
            raise StreamOpenError(url, ErrorMessages.SUBPROCESS_NO_STDOUT)

        self._processes[process.pid] = process
        logger.debug(LogTemplates.SUBPROCESS_SPAWNED, process.pid, url)

        # A bad URL makes yt-dlp exit almost immediately.
        await asyncio.sleep(STARTUP_GRACE_SECONDS)
        returncode = process.poll()
        if returncode not in (None, 0):
            self._terminate(process)
            raise StreamOpenError(url, f"yt-dlp exited with code {returncode}")

        return AudioStream(
            source_url=url,
            pipe=process.stdout,
            cleanup=lambda: self._terminate(process),
        )

    async def expand_playlist(self, url: str, limit: int) -> list[str]:
        try:
            process = await asyncio.create_subprocess_exec(
                *self.build_playlist_command(url, limit),
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.DEVNULL,
            )
        except OSError:
            logger.exception(LogTemplates.YTDLP_FAILED_EXTRACT_PLAYLIST, url)
            return []

        try:
            async with asyncio.timeout(PLAYLIST_TIMEOUT_SECONDS):
                stdout, _ = await process.communicate()
        except TimeoutError:
            process.kill()
            await process.wait()
            logger.warning(LogTemplates.YTDLP_FAILED_EXTRACT_PLAYLIST, url)
            return []

        if process.returncode != 0:
            logger.warning(LogTemplates.YTDLP_FAILED_EXTRACT_PLAYLIST, url)
            return []

        lines = stdout.decode("utf-8", errors="replace").splitlines()
        urls = [line.strip() for line in lines if line.strip().startswith("http")]
        return urls[:limit]

    def is_playlist(self, url: str) -> bool:
        return is_playlist_url(url)

    @property
    def active_processes(self) -> int:
        return len(self._processes)

    async def close(self) -> None:
        for process in list(self._processes.values()):
            self._terminate(process)
        if self._reapers:
            await asyncio.gather(*self._reapers, return_exceptions=True)
