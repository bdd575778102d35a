"""Tests for CLI console formatting."""

from __future__ import annotations

from pathlib import Path

from transcript_studio.display import (
    format_library,
    format_search_results,
    format_transcript_summary,
)
from transcript_studio.models.transcript import Segment, Transcript


class TestFormatTranscriptSummary:
    def test_summary_lines(self, sample_transcript: Transcript) -> None:
        sample_transcript.folder_path = Path("/data/sample")
        sample_transcript.reference_path = Path("/data/sample/transcript.txt")

        text = format_transcript_summary(sample_transcript)

        assert "  TRANSCRIPT: Sample" in text
        assert "  ID: abc123" in text
        assert "  Reference: transcript.txt" in text
        assert "  Audio: -" in text
        assert "  Speakers: Stephen (2), Stan (1)" in text
        assert "  Segments: 3" in text

    def test_untitled(self) -> None:
        text = format_transcript_summary(Transcript())

        assert "TRANSCRIPT: (untitled)" in text
        assert "Speakers: none" in text


class TestFormatSearchResults:
    def test_no_matches(self, sample_transcript: Transcript) -> None:
        assert format_search_results(sample_transcript, [], "zzz") == 'No segments match "zzz".'

    def test_preview_is_flattened(self, sample_transcript: Transcript) -> None:
        text = format_search_results(sample_transcript, [0], "how")

        assert text.splitlines() == [
            '1 segment(s) match "how":',
            "  [   0] Stephen: Hello there How are you?",
        ]

    def test_long_preview_truncated(self) -> None:
        transcript = Transcript(segments=[Segment("A", "word " * 40)])

        line = format_search_results(transcript, [0], "word").splitlines()[1]

        assert line.endswith("...")
        assert len(line) == len("  [   0] A: ") + 70


class TestFormatLibrary:
    def test_empty(self) -> None:
        text = format_library([])

        assert "TRANSCRIPT LIBRARY" in text
        assert "No transcripts loaded." in text
        assert "Warnings" not in text

    def test_rows_and_warnings(self, sample_transcript: Transcript) -> None:
        text = format_library([sample_transcript], ["Failed to import /x: boom"])

        assert "    0. Sample  (3 segments, 2 speakers)  id=abc123" in text
        assert "  Warnings: 1" in text
        assert "    - Failed to import /x: boom" in text
