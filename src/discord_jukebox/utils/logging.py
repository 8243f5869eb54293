"""ANSI-colored console formatter used by ``logging_config.json``."""

from __future__ import annotations

import logging
import os
import sys
from typing import IO, Any

RESET = "\033[0m"
DIM = "\033[2m"

LEVEL_COLORS: dict[int, str] = {
    logging.DEBUG: "\033[36m",
    logging.INFO: "\033[32m",
    logging.WARNING: "\033[33m",
    logging.ERROR: "\033[31m",
    logging.CRITICAL: "\033[1;31m",
}


def _paint(text: str, code: str) -> str:
    return f"{code}{text}{RESET}" if code else text


class ColoredFormatter(logging.Formatter):
    """Color the level name and dim the logger name on a terminal.

    ``NO_COLOR`` disables colors, ``FORCE_COLOR`` enables them for non-TTY
    streams. *stream* is the handler's stream (stderr when omitted) and is
    only used for the TTY check. Every other argument goes to
    :class:`logging.Formatter`, so dictConfig can build it with ``()``.
    """

    def __init__(self, *args: Any, stream: IO[str] | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._stream = stream

    def _use_color(self) -> bool:
        if "NO_COLOR" in os.environ:
            return False
        if "FORCE_COLOR" in os.environ:
            return True
        isatty = getattr(self._stream or sys.stderr, "isatty", None)
        return bool(isatty and isatty())

    def format(self, record: logging.LogRecord) -> str:
        if not self._use_color():
            return super().format(record)

        # Copy so other handlers still see the plain names.
        colored = logging.makeLogRecord(record.__dict__)
        colored.levelname = _paint(record.levelname, LEVEL_COLORS.get(record.levelno, ""))
        colored.name = _paint(record.name, DIM)
        return super().format(colored)
