"""Console formatting for the transcript-studio CLI.

Each ``format_*`` function returns a multi-line string; the CLI writes it
to stdout.  Keeping rendering here leaves the command handlers free of
layout details.
"""

from __future__ import annotations

from collections.abc import Sequence

from transcript_studio.models.transcript import Transcript

_BANNER_WIDTH = 60
_SEPARATOR = "=" * _BANNER_WIDTH
_PREVIEW_CHARS = 70


def format_transcript_summary(transcript: Transcript) -> str:
    """Header block describing one imported transcript."""
    lines: list[str] = []
    _append_banner(lines, f"TRANSCRIPT: {transcript.title or '(untitled)'}")
    lines.append(f"  ID: {transcript.id or '-'}")
    lines.append(f"  Folder: {transcript.folder_path or '-'}")
    lines.append(f"  Reference: {_name_or_dash(transcript.reference_path)}")
    lines.append(f"  Editable: {_name_or_dash(transcript.editable_path)}")
    lines.append(f"  Audio: {_name_or_dash(transcript.audio_path)}")
    lines.append(f"  Speakers: {_speaker_summary(transcript)}")
    lines.append(f"  Segments: {transcript.segment_count()}")
    lines.append(_SEPARATOR)
    return "\n".join(lines)


def format_search_results(transcript: Transcript, indices: Sequence[int], pattern: str) -> str:
    """One line per matching segment: index, speaker and a text preview."""
    if not indices:
        return f'No segments match "{pattern}".'

    lines = [f'{len(indices)} segment(s) match "{pattern}":']
    for index in indices:
        segment = transcript.segments[index]
        lines.append(f"  [{index:>4}] {segment.speaker_id}: {_preview(segment.text)}")
    return "\n".join(lines)


def format_library(transcripts: Sequence[Transcript], warnings: Sequence[str] = ()) -> str:
    """Table of loaded transcripts followed by any load warnings."""
    lines: list[str] = []
    _append_banner(lines, "TRANSCRIPT LIBRARY")

    if not transcripts:
        lines.append("  No transcripts loaded.")
    for index, transcript in enumerate(transcripts):
        lines.append(
            f"  {index:>3}. {transcript.title}  "
            f"({transcript.segment_count()} segments, {len(transcript.speakers)} speakers)"
            f"  id={transcript.id}"
        )

    if warnings:
        lines.append("")
        lines.append(f"  Warnings: {len(warnings)}")
        for warning in warnings:
            lines.append(f"    - {warning}")

    lines.append(_SEPARATOR)
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _append_banner(lines: list[str], title: str) -> None:
    lines.append(_SEPARATOR)
    lines.append(f"  {title}")
    lines.append(_SEPARATOR)


def _name_or_dash(path: object) -> str:
    return getattr(path, "name", None) or "-"


def _speaker_summary(transcript: Transcript) -> str:
    if not transcript.speakers:
        return "none"
    parts = []
    for speaker in transcript.speakers:
        count = len(transcript.segments_by_speaker(speaker.id))
        parts.append(f"{speaker.display_name} ({count})")
    return ", ".join(parts)


def _preview(text: str) -> str:
    """Flatten *text* onto one line and cut it to a fixed width."""
    flat = " ".join(text.split())
    if len(flat) <= _PREVIEW_CHARS:
        return flat
    return flat[: _PREVIEW_CHARS - 3] + "..."
