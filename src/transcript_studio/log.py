"""Logging setup for transcript-studio.

All modules log through ``logging.getLogger(__name__)``.  The CLI calls
:func:`setup_logging` once to route records to *stderr* (and optionally a
log file) using a pipe-separated format with ISO 8601 timestamps.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"

# Marks handlers owned by setup_logging so repeated calls reuse them
# instead of stacking duplicates.
_HANDLER_TAG = "_transcript_studio_handler"


def _resolve_level(level: str) -> int:
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {level!r}")
    return numeric_level


def _owned_handler(root: logging.Logger, kind: str) -> logging.Handler | None:
    for handler in root.handlers:
        if getattr(handler, _HANDLER_TAG, None) == kind:
            return handler
    return None


def setup_logging(level: str = "INFO", log_file: str | Path | None = None) -> None:
    """Configure the root logger for transcript-studio.

    Attaches a :class:`logging.StreamHandler` on *stderr* and, when
    *log_file* is given, a :class:`logging.FileHandler` appending to that
    file.  Safe to call repeatedly: existing handlers are re-levelled
    rather than duplicated.

    Args:
        level: A standard logging level name (``"DEBUG"``, ``"INFO"``, ...).
        log_file: Optional path of a UTF-8 log file.

    Raises:
        ValueError: If *level* is not a recognised logging level name.
    """
    numeric_level = _resolve_level(level)

    root = logging.getLogger()
    root.setLevel(numeric_level)
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    stream_handler = _owned_handler(root, "stream")
    if stream_handler is None:
        stream_handler = logging.StreamHandler(sys.stderr)
        stream_handler.setFormatter(formatter)
        setattr(stream_handler, _HANDLER_TAG, "stream")
        root.addHandler(stream_handler)
    stream_handler.setLevel(numeric_level)

    if log_file is None:
        return

    file_handler = _owned_handler(root, "file")
    if file_handler is None:
        file_handler = logging.FileHandler(Path(log_file), encoding="utf-8")
        file_handler.setFormatter(formatter)
        setattr(file_handler, _HANDLER_TAG, "file")
        root.addHandler(file_handler)
    file_handler.setLevel(numeric_level)


def get_logger(name: str) -> logging.Logger:
    """Return the logger called *name* (usually the caller's ``__name__``)."""
    return logging.getLogger(name)
