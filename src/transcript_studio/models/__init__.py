"""Data models for transcript-studio."""

from __future__ import annotations

from transcript_studio.models.metadata import METADATA_FILENAME, TranscriptMetadata
from transcript_studio.models.transcript import Segment, Speaker, Transcript

__all__ = [
    "METADATA_FILENAME",
    "Segment",
    "Speaker",
    "Transcript",
    "TranscriptMetadata",
]
