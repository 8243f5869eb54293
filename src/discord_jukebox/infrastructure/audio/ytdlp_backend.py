"""AudioBackend implementations that resolve direct media URLs with yt-dlp."""

from __future__ import annotations

import asyncio
import logging
import re
from pathlib import Path
from typing import Any, Final, cast

from yt_dlp import YoutubeDL

from discord_jukebox.application.interfaces.audio_backend import AudioBackend, AudioStream
from discord_jukebox.config.settings import AudioSettings
from discord_jukebox.domain.shared.exceptions import StreamOpenError
from discord_jukebox.domain.shared.messages import ErrorMessages, LogTemplates
from discord_jukebox.infrastructure.audio.cookies import load_cookie_header
from discord_jukebox.infrastructure.audio.models import PlaylistEntry, YtDlpOpts, YtDlpTrackInfo

logger = logging.getLogger(__name__)

PLAYLIST_PATTERNS: Final[list[re.Pattern[str]]] = [
    re.compile(r"[?&]list="),
    re.compile(r"/playlist\?"),
    re.compile(r"/sets/"),
]


def is_playlist_url(url: str) -> bool:
    return any(pattern.search(url) for pattern in PLAYLIST_PATTERNS)


class YtDlpStreamBackend(AudioBackend):
    """Resolves a page URL to a direct audio URL that FFmpeg fetches itself."""

    name = "stream"

    def __init__(
        self, settings: AudioSettings | None = None, *, cookie_header: str | None = None
    ) -> None:
        self._settings = settings or AudioSettings()
        self._cookie_header = cookie_header

        headers = {"Cookie": cookie_header} if cookie_header else None
        self._base_opts = YtDlpOpts(format=self._settings.ytdlp_format, http_headers=headers)

    @property
    def has_cookies(self) -> bool:
        return bool(self._cookie_header)

    def _get_opts(self, **overrides: Any) -> YtDlpOpts:
        if overrides:
            return self._base_opts.model_copy(update=overrides)
        return self._base_opts

    def _get_playlist_opts(self, limit: int) -> YtDlpOpts:
        return self._get_opts(noplaylist=False, extract_flat="in_playlist", playlistend=limit)

    @staticmethod
    def _parse_info(data: dict[str, Any]) -> YtDlpTrackInfo:
        return YtDlpTrackInfo.model_validate(data)

    def _extract_info_sync(self, url: str) -> YtDlpTrackInfo | None:
        with YoutubeDL(params=cast(Any, self._get_opts().to_params())) as ydl:
            data = ydl.extract_info(url, download=False)
            return self._parse_info(dict(data)) if isinstance(data, dict) else None

    def _extract_playlist_sync(self, url: str, limit: int) -> list[PlaylistEntry]:
        with YoutubeDL(params=cast(Any, self._get_playlist_opts(limit).to_params())) as ydl:
            data = ydl.extract_info(url, download=False)

            if not isinstance(data, dict):
                return []

            entries = data.get("entries") or []
            return [PlaylistEntry.model_validate(dict(e)) for e in entries if isinstance(e, dict)]

    def _stream_headers(self, info: YtDlpTrackInfo) -> dict[str, str]:
        headers = dict(info.http_headers)
        if self._cookie_header:
            headers["Cookie"] = self._cookie_header
        return headers

    async def open_stream(self, url: str) -> AudioStream:
        try:
            info = await asyncio.to_thread(self._extract_info_sync, url)
        except Exception as e:
            logger.exception(LogTemplates.YTDLP_FAILED_EXTRACT_INFO, url)
            raise StreamOpenError(url, str(e)) from e

        stream_url = info.stream_url() if info else None
        if info is None or not stream_url:
            raise StreamOpenError(url, ErrorMessages.NO_STREAM_URL.format(url=url))

        return AudioStream(
            source_url=url,
            url=stream_url,
            title=info.title,
            http_headers=self._stream_headers(info),
        )

    async def expand_playlist(self, url: str, limit: int) -> list[str]:
        try:
            entries = await asyncio.to_thread(self._extract_playlist_sync, url, limit)
        except Exception:
            logger.exception(LogTemplates.YTDLP_FAILED_EXTRACT_PLAYLIST, url)
            return []

        urls = [u for u in (entry.watch_url() for entry in entries) if u]
        return urls[:limit]

    def is_playlist(self, url: str) -> bool:
        return is_playlist_url(url)


class CookieYtDlpBackend(YtDlpStreamBackend):
    """yt-dlp backend that authenticates every request with a cookie file."""

    name = "cookies"

    def __init__(self, settings: AudioSettings | None = None, cookie_path: str | Path | None = None) -> None:
        settings = settings or AudioSettings()
        path = cookie_path if cookie_path is not None else settings.cookie_path
        super().__init__(settings, cookie_header=load_cookie_header(path))
