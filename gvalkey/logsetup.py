"""Logger construction: coloured text on a terminal, JSON lines otherwise."""

from __future__ import annotations

import json
import logging
import sys
import time
from datetime import datetime
from typing import TextIO

_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
}

_RESET = "\x1b[0m"
_FAINT = "\x1b[2m"
_SHORT_LABELS = {
    "DEBUG": ("DBG", "\x1b[2m"),
    "INFO": ("INF", "\x1b[92m"),
    "WARN": ("WRN", "\x1b[93m"),
    "ERROR": ("ERR", "\x1b[91m"),
}


def _level_name(levelno: int) -> str:
    if levelno >= logging.ERROR:
        return "ERROR"
    if levelno >= logging.WARNING:
        return "WARN"
    if levelno >= logging.INFO:
        return "INFO"
    return "DEBUG"


class _JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "time": datetime.fromtimestamp(record.created).astimezone().isoformat(),
            "level": _level_name(record.levelno),
            "msg": record.getMessage(),
        }
        if record.exc_info:
            entry["error"] = self.formatException(record.exc_info)
        return json.dumps(entry)


class _ColourFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        stamp = time.strftime("%Y-%m-%d %H:%M:%S", time.localtime(record.created))
        label, colour = _SHORT_LABELS[_level_name(record.levelno)]
        line = f"{_FAINT}{stamp}{_RESET} {colour}{label}{_RESET} {record.getMessage()}"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def _is_terminal(stream: TextIO) -> bool:
    isatty = getattr(stream, "isatty", None)
    try:
        return bool(isatty and isatty())
    except (OSError, ValueError):
        return False


def new_logger(level: str, stream: TextIO | None = None) -> logging.Logger:
    """Return a logger writing to ``stream`` (standard output by default).

    ``level`` is one of DEBUG, INFO, WARN or ERROR in any case; anything
    else means INFO.
    """
    out = sys.stdout if stream is None else stream
    logger = logging.Logger("gvalkey", _LEVELS.get(level.upper(), logging.INFO))
    handler = logging.StreamHandler(out)
    handler.setFormatter(_ColourFormatter() if _is_terminal(out) else _JSONFormatter())
    logger.addHandler(handler)
    return logger