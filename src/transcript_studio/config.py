"""Configuration loading for transcript-studio.

Reads settings from environment variables (with .env support via
python-dotenv).  Nothing is strictly required: the CLI can be driven
entirely by arguments, and the environment only supplies defaults.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv


class ConfigError(Exception):
    """Raised when a configuration value is present but invalid."""


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables.

    Attributes:
        transcripts_root: Library folder holding one sub-folder per
            transcript, or ``None`` when unset.
        default_speakers: Speaker names used when the caller supplies none,
            in the order given.
        log_level: Logging level name (default ``"INFO"``).
        log_file: Optional file that log records are also written to.
    """

    transcripts_root: Path | None = None
    default_speakers: tuple[str, ...] = ()
    log_level: str = "INFO"
    log_file: Path | None = None


def parse_speaker_list(raw: str) -> tuple[str, ...]:
    """Split a comma-separated speaker list.

    Names are trimmed, blanks dropped and duplicates removed while
    keeping first-appearance order (label matching depends on it).
    """
    names = (part.strip() for part in raw.split(","))
    return tuple(dict.fromkeys(name for name in names if name))


def load_settings() -> Settings:
    """Load and validate settings from environment variables.

    Recognised variables: ``TRANSCRIPTS_ROOT``, ``KNOWN_SPEAKERS``,
    ``LOG_LEVEL`` and ``LOG_FILE``.  A ``.env`` file in the working
    directory is picked up automatically.

    Returns:
        A validated :class:`Settings` instance.

    Raises:
        ConfigError: If ``TRANSCRIPTS_ROOT`` is not an existing directory
            or ``LOG_LEVEL`` is not a logging level name.  The message
            names every offending variable.
    """
    load_dotenv()

    values: dict[str, object] = {}
    problems: list[str] = []

    root = os.environ.get("TRANSCRIPTS_ROOT", "").strip()
    if root:
        root_path = Path(root).expanduser()
        if not root_path.is_dir():
            problems.append(f"TRANSCRIPTS_ROOT is not a directory: {root_path}")
        else:
            values["transcripts_root"] = root_path

    speakers = os.environ.get("KNOWN_SPEAKERS", "")
    if speakers.strip():
        values["default_speakers"] = parse_speaker_list(speakers)

    log_level = os.environ.get("LOG_LEVEL", "").strip()
    if log_level:
        if not isinstance(logging.getLevelName(log_level.upper()), int):
            problems.append(f"LOG_LEVEL is not a valid level: {log_level!r}")
        else:
            values["log_level"] = log_level.upper()

    log_file = os.environ.get("LOG_FILE", "").strip()
    if log_file:
        values["log_file"] = Path(log_file).expanduser()

    if problems:
        raise ConfigError("Invalid configuration: " + "; ".join(problems))

    return Settings(**values)
