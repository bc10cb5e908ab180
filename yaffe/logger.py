"""Logging set-up and helpers for failures that are logged instead of raised."""

from __future__ import annotations

import contextlib
import logging
import os
import time
import traceback
from typing import Iterator, Optional, TypeVar, Union

log = logging.getLogger(__name__)

T = TypeVar("T")

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

DEFAULT_LOG_PATH = "./log.txt"

_LEVEL_LABELS = {"WARNING": "WARN"}
_LEVELS = {
    "off": logging.CRITICAL + 10,
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
    "trace": TRACE,
}

_handler: Optional[logging.Handler] = None


class LogFormatter(logging.Formatter):
    """Formats records as ``target: LEVEL [date time]: message``.

    Errors are followed by the stack at the point they were logged.
    """

    def format(self, record: logging.LogRecord) -> str:
        timestamp = time.strftime("%x %X", time.localtime(record.created))
        level = _LEVEL_LABELS.get(record.levelname, record.levelname)
        message = f"{record.name}: {level} [{timestamp}]: {record.getMessage()}"
        if record.levelno >= logging.ERROR:
            if record.exc_info:
                message += "\n" + self.formatException(record.exc_info)
            stack = "".join(traceback.format_stack()).rstrip("\n")
            message += "\nStack (most recent call last):\n" + stack
        return message


def init(path: Union[str, os.PathLike] = DEFAULT_LOG_PATH) -> logging.Handler:
    """Send all log records to ``path`` (appending) at the info level."""
    global _handler
    root = logging.getLogger()
    if _handler is not None:
        root.removeHandler(_handler)
        _handler.close()
    handler = logging.FileHandler(path, mode="a", encoding="utf-8")
    handler.setFormatter(LogFormatter())
    root.addHandler(handler)
    root.setLevel(logging.INFO)
    _handler = handler
    return handler


def set_log_level(level: str) -> None:
    """Set the level from a name: off, error, warn, info, debug or trace."""
    try:
        value = _LEVELS[level.lower()]
    except KeyError:
        log.error("Invalid logging level %r", level)
        raise ValueError(f"invalid logging level {level!r}") from None
    logging.getLogger().setLevel(value)


@contextlib.contextmanager
def suppress_and_log(message: str) -> Iterator[None]:
    """Swallow any exception raised in the block, logging it as a warning."""
    try:
        yield
    except Exception as e:
        log.warning("%r - %s", e, message)


def require(value: Optional[T], message: str) -> T:
    """Return ``value``; if it is ``None`` log an error and raise."""
    if value is None:
        log.error("None - %s", message)
        raise RuntimeError("encountered unexpected error")
    return value