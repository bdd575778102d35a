"""Write transcripts back to disk.

Two artefacts are produced:

- the plain-text transcript, one block per segment::

      Stephen: Hello there
      How are you?

      Stan: Great, thanks!

  which :mod:`transcript_studio.parser` reads back (whitespace may be
  normalised on the way);
- the ``meta.json`` sidecar, via
  :class:`~transcript_studio.models.metadata.TranscriptMetadata`.

Every writer raises :class:`~transcript_studio.exceptions.TranscriptExportError`
on failure.
"""

from __future__ import annotations

import logging
import os
from datetime import datetime, timezone
from pathlib import Path

from transcript_studio.exceptions import TranscriptExportError
from transcript_studio.models.metadata import METADATA_FILENAME, TranscriptMetadata
from transcript_studio.models.transcript import Transcript

logger = logging.getLogger(__name__)

DEFAULT_EDITABLE_FILENAME = "editable.txt"
UNKNOWN_SPEAKER = "UNKNOWN"


def build_transcript_text(transcript: Transcript) -> str:
    """Render *transcript* in the plain-text transcript format.

    The first line of each segment is prefixed with ``"<speaker>: "``,
    the remaining lines follow verbatim, and a blank line separates
    segments.  Blank segments are skipped.  The result ends with exactly
    one newline.
    """
    lines: list[str] = []
    for segment in transcript.segments:
        text = segment.text.strip()
        if not text:
            continue
        speaker = segment.speaker_id or UNKNOWN_SPEAKER
        first, *rest = text.split("\n")
        lines.append(f"{speaker}: {first}")
        lines.extend(rest)
        lines.append("")

    while lines and not lines[-1].strip():
        lines.pop()
    return "\n".join(lines) + "\n"


def relative_to_folder(folder: Path | None, path: Path | None) -> str:
    """Express *path* relative to *folder* for the sidecar (``""`` if unset)."""
    if path is None:
        return ""
    if folder is None or not path.is_absolute():
        return path.as_posix()
    return Path(os.path.relpath(path, folder)).as_posix()


def build_metadata(transcript: Transcript) -> TranscriptMetadata:
    """Build the sidecar contents for *transcript*.

    Missing dates default to the current UTC time.
    """
    now = datetime.now(timezone.utc)
    folder = transcript.folder_path
    speakers = transcript.speaker_ids()
    return TranscriptMetadata(
        id=transcript.id,
        title=transcript.title,
        date_imported=transcript.date_imported or now,
        last_edited=transcript.last_edited or now,
        reference_path=relative_to_folder(folder, transcript.reference_path),
        editable_path=relative_to_folder(folder, transcript.editable_path),
        audio_path=relative_to_folder(folder, transcript.audio_path),
        speakers=speakers,
        num_speakers=len(speakers),
    )


def write_text_file(path: Path, text: str) -> None:
    """Write *text* to *path* as UTF-8."""
    try:
        path.write_text(text, encoding="utf-8")
    except OSError as exc:
        raise TranscriptExportError(f"Cannot write text file {path}: {exc}") from exc
    logger.info("Wrote %s (%d chars)", path, len(text))


def _require_folder(transcript: Transcript, what: str) -> Path:
    folder = transcript.folder_path
    if folder is None:
        raise TranscriptExportError(f"Transcript has no folder; cannot export {what}")
    if not folder.is_dir():
        raise TranscriptExportError(f"Transcript folder does not exist: {folder}")
    return folder


def _resolve(folder: Path, path: Path) -> Path:
    return path if path.is_absolute() else folder / path


def export_editable_transcript(transcript: Transcript) -> Path:
    """Save the working copy and stamp ``last_edited``.

    Writes to ``transcript.editable_path`` (relative paths resolve against
    the folder), or to ``editable.txt`` in the folder if none is set, in
    which case that becomes the transcript's editable path.

    Returns:
        The path written.
    """
    folder = _require_folder(transcript, "editable transcript")
    target = _resolve(folder, transcript.editable_path or Path(DEFAULT_EDITABLE_FILENAME))

    write_text_file(target, build_transcript_text(transcript))
    if transcript.editable_path is None:
        transcript.editable_path = target
    transcript.last_edited = datetime.now(timezone.utc)
    return target


def export_reference_transcript(transcript: Transcript) -> Path:
    """Overwrite the reference text.  ``last_edited`` is not touched."""
    folder = _require_folder(transcript, "reference transcript")
    if transcript.reference_path is None:
        raise TranscriptExportError("Transcript has no reference path; nothing to export")

    target = _resolve(folder, transcript.reference_path)
    write_text_file(target, build_transcript_text(transcript))
    return target


def export_to_text_file(transcript: Transcript, path: str | Path) -> Path:
    """Write the transcript text to an arbitrary location."""
    if not str(path).strip():
        raise TranscriptExportError("Target path for text export is empty")
    target = Path(path)
    write_text_file(target, build_transcript_text(transcript))
    return target


def export_metadata(transcript: Transcript) -> Path:
    """Write ``meta.json`` into the transcript folder."""
    folder = _require_folder(transcript, "metadata")
    target = folder / METADATA_FILENAME
    write_text_file(target, build_metadata(transcript).to_json())
    return target


def export_all(transcript: Transcript, *, export_reference: bool = False) -> list[Path]:
    """Editable text, then (optionally) reference text, then ``meta.json``.

    Stops at the first failure.

    Returns:
        The paths written, in order.
    """
    written = [export_editable_transcript(transcript)]
    if export_reference:
        written.append(export_reference_transcript(transcript))
    written.append(export_metadata(transcript))
    return written
