"""Error codes and exceptions for transcript-studio.

The parser, editor and search helpers never raise for domain failures;
they return ``False`` / ``-1`` / ``0`` and record an :class:`ErrorCode`
describing why.  The file-system collaborators (importer, exporter,
library manager) raise the exception classes below instead.
"""

from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    """Reason a core parse or edit operation was rejected."""

    INVALID_INDEX = "invalid_index"
    EMPTY_OR_WHITESPACE_INPUT = "empty_or_whitespace_input"
    NO_KNOWN_SPEAKERS = "no_known_speakers"
    NO_SEGMENTS_PRODUCED = "no_segments_produced"
    INVALID_SPLIT_POSITION = "invalid_split_position"
    EMPTY_RESULTING_HALF = "empty_resulting_half"
    SPEAKER_NOT_FOUND = "speaker_not_found"
    SAME_SPEAKER_RENAME = "same_speaker_rename"
    NO_NEXT_SEGMENT_TO_MERGE = "no_next_segment_to_merge"
    EMPTY_REPLACEMENT_PATTERN = "empty_replacement_pattern"


class TranscriptImportError(Exception):
    """Raised when a transcript folder cannot be imported.

    Covers missing folders, missing reference text files, unreadable
    files, and transcripts that the parser rejects.

    Attributes:
        path: The folder or file that caused the failure, if known.
    """

    def __init__(self, message: str, path: str = "") -> None:
        super().__init__(message)
        self.path = path


class MetadataError(TranscriptImportError):
    """Raised when a ``meta.json`` sidecar is unreadable or invalid."""


class TranscriptExportError(Exception):
    """Raised when transcript text or metadata cannot be written.

    Unlike :class:`TranscriptImportError`, the in-memory transcript is
    still intact; the caller may fix the target location and retry.
    """
