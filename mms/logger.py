"""Process-wide console logger."""

import logging
import sys
from datetime import datetime

_LEVELS = {
    "trace": 5,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
    "fatal": logging.CRITICAL,
    "panic": logging.CRITICAL,
    "disabled": logging.CRITICAL + 100,
}

_LOGGER = logging.getLogger("mms")


class _ConsoleFormatter(logging.Formatter):
    """Format records as: time LVL file:line > message key=value ..."""

    def format(self, record):
        stamp = datetime.fromtimestamp(record.created).astimezone().isoformat(timespec="seconds")
        line = (
            f"{stamp} {record.levelname[:3]} {record.filename}:{record.lineno} "
            f"> {record.getMessage()}"
        )
        for key, value in (getattr(record, "fields", None) or {}).items():
            line += f" {key}={value}"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def init(level) -> logging.Logger:
    """Configure the shared logger to write to stdout; unknown levels mean info.

    Structured fields may be attached with ``extra={"fields": {...}}``.
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(_ConsoleFormatter())
    _LOGGER.handlers[:] = [handler]
    _LOGGER.setLevel(_LEVELS.get(str(level or "").strip().lower(), logging.INFO))
    _LOGGER.propagate = False
    return _LOGGER


def get() -> logging.Logger:
    """Return the shared logger."""
    return _LOGGER