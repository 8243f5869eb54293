"""Cookie file loading for authenticated stream requests."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from discord_jukebox.domain.shared.messages import LogTemplates

logger = logging.getLogger(__name__)


def build_cookie_header(cookies: list[dict[str, Any]]) -> str:
    """Join ``{"name", "value"}`` records into a ``Cookie`` header value."""
    pairs = [
        f"{cookie['name']}={cookie['value']}"
        for cookie in cookies
        if isinstance(cookie, dict) and cookie.get("name")
    ]
    return "; ".join(pairs)


def load_cookie_header(path: str | Path) -> str | None:
    """Read a JSON array of cookies and return the header value.

    A missing or malformed file is logged and yields None so the caller can
    carry on without authentication.
    """
    cookie_path = Path(path)
    try:
        data = json.loads(cookie_path.read_text(encoding="utf-8"))
        if not isinstance(data, list):
            raise ValueError("expected a JSON array of cookies")
        header = build_cookie_header(data)
    except (OSError, ValueError, KeyError) as e:
        logger.warning(LogTemplates.COOKIES_LOAD_FAILED, cookie_path, e)
        return None

    if not header:
        logger.warning(LogTemplates.COOKIES_LOAD_FAILED, cookie_path, "no cookies in file")
        return None

    logger.info(LogTemplates.COOKIES_LOADED, len(header.split("; ")), cookie_path)
    return header
