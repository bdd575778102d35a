"""Shared fixtures for transcript-studio tests."""

from __future__ import annotations

import logging
from collections.abc import Generator

import pytest

from transcript_studio.models.transcript import Segment, Speaker, Transcript

_ENV_VARS = ("TRANSCRIPTS_ROOT", "KNOWN_SPEAKERS", "LOG_LEVEL", "LOG_FILE")


@pytest.fixture()
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove all transcript-studio environment variables.

    Patches ``load_dotenv`` so a real ``.env`` file cannot re-inject values
    that the test explicitly removed.
    """
    monkeypatch.setattr("transcript_studio.config.load_dotenv", lambda *_a, **_kw: None)
    for key in _ENV_VARS:
        monkeypatch.delenv(key, raising=False)


@pytest.fixture()
def sample_transcript() -> Transcript:
    """A small three-segment transcript with two registered speakers."""
    return Transcript(
        id="abc123",
        title="Sample",
        speakers=[Speaker("Stephen"), Speaker("Stan")],
        segments=[
            Segment("Stephen", "Hello there\nHow are you?"),
            Segment("Stan", "Great, thanks!"),
            Segment("Stephen", "Glad to hear it."),
        ],
    )


@pytest.fixture(autouse=True)
def _reset_root_logger() -> Generator[None, None, None]:
    """Reset the root logger after each test to prevent handler leaks."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    yield
    for handler in root.handlers:
        if handler not in original_handlers:
            handler.close()
    root.handlers = original_handlers
    root.setLevel(original_level)
