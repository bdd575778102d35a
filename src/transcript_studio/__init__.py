"""transcript-studio: speaker-labelled transcript parsing and editing.

Parses plain-text transcripts into speaker segments and provides an
undoable editor, search helpers and folder import/export on top.
"""

from __future__ import annotations

from transcript_studio.editor import TranscriptEditor
from transcript_studio.exceptions import (
    ErrorCode,
    MetadataError,
    TranscriptExportError,
    TranscriptImportError,
)
from transcript_studio.models.metadata import TranscriptMetadata
from transcript_studio.models.transcript import Segment, Speaker, Transcript
from transcript_studio.parser import ParseResult, parse_transcript, parse_transcript_file
from transcript_studio.search import TranscriptSearch

__version__ = "0.1.0"

__all__ = [
    "ErrorCode",
    "MetadataError",
    "ParseResult",
    "Segment",
    "Speaker",
    "Transcript",
    "TranscriptEditor",
    "TranscriptExportError",
    "TranscriptImportError",
    "TranscriptMetadata",
    "TranscriptSearch",
    "parse_transcript",
    "parse_transcript_file",
]
