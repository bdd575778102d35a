"""Import a transcript folder from disk.

A transcript folder holds a reference ``.txt`` transcript, optionally an
editable ``.txt`` copy and an audio file, and a ``meta.json`` sidecar::

    interview-01/
        transcript.txt
        editable.txt
        interview.m4a
        meta.json

:func:`import_from_folder` locates those files, parses the reference text
with the caller's speaker names, creates or refreshes ``meta.json`` and
returns the populated :class:`~transcript_studio.models.transcript.Transcript`.
"""

from __future__ import annotations

import hashlib
import json
import logging
from collections.abc import Sequence
from datetime import datetime, timezone
from pathlib import Path

from pydantic import ValidationError

from transcript_studio.exceptions import MetadataError, TranscriptImportError
from transcript_studio.models.metadata import METADATA_FILENAME, TranscriptMetadata
from transcript_studio.models.transcript import Transcript
from transcript_studio.parser import clean_speaker_names, parse_transcript

logger = logging.getLogger(__name__)

REFERENCE_FILENAMES = ("transcript.txt", "ref.txt")
EDITABLE_FILENAMES = ("editable.txt", "edit.txt")
AUDIO_EXTENSIONS = (".m4a", ".mp3", ".wav", ".aac", ".flac")


def _text_files(folder: Path) -> list[str]:
    return sorted(
        entry.name
        for entry in folder.iterdir()
        if entry.is_file() and entry.suffix.lower() == ".txt"
    )


def _pick_named(candidates: Sequence[str], preferred: Sequence[str]) -> str | None:
    for name in candidates:
        if name.lower() in preferred:
            return name
    return None


def find_reference_text_file(folder: Path) -> str | None:
    """``transcript.txt`` / ``ref.txt`` if present, else the first ``.txt`` by name."""
    candidates = _text_files(folder)
    if not candidates:
        return None
    return _pick_named(candidates, REFERENCE_FILENAMES) or candidates[0]


def find_editable_text_file(folder: Path, reference_name: str) -> str | None:
    """``editable.txt`` / ``edit.txt``, else the only other ``.txt``, else ``None``."""
    candidates = [name for name in _text_files(folder) if name != reference_name]
    named = _pick_named(candidates, EDITABLE_FILENAMES)
    if named:
        return named
    if len(candidates) == 1:
        return candidates[0]
    return None


def find_audio_file(folder: Path) -> str | None:
    """First audio file by extension priority (m4a, mp3, wav, aac, flac)."""
    names = sorted(entry.name for entry in folder.iterdir() if entry.is_file())
    for extension in AUDIO_EXTENSIONS:
        for name in names:
            if name.lower().endswith(extension):
                return name
    return None


def generate_transcript_id(title: str, folder: Path | str) -> str:
    """Stable 16-hex-digit id derived from the title and folder path."""
    digest = hashlib.sha1(f"{title}|{folder}".encode("utf-8")).hexdigest()
    return digest[:16]


def load_metadata(path: Path) -> TranscriptMetadata | None:
    """Read a ``meta.json`` sidecar.

    Returns:
        The parsed metadata, or ``None`` if *path* does not exist.

    Raises:
        MetadataError: If the file cannot be read or is not a valid
            metadata object.
    """
    if not path.exists():
        return None
    try:
        raw = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise MetadataError(f"Cannot open {path}: {exc}", path=str(path)) from exc
    try:
        return TranscriptMetadata.model_validate_json(raw)
    except ValidationError as exc:
        raise MetadataError(f"Invalid metadata in {path}: {exc}", path=str(path)) from exc


def load_metadata_speakers(path: Path) -> list[str]:
    """Read only the ``speakers`` list of a ``meta.json`` sidecar.

    Other keys are not validated, so a bad timestamp or count does not
    hide the speaker list.

    Raises:
        MetadataError: If the file cannot be read, is not a JSON object,
            or its ``speakers`` value is not a list.
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise MetadataError(f"Cannot open {path}: {exc}", path=str(path)) from exc
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise MetadataError(f"Invalid JSON in {path}: {exc}", path=str(path)) from exc
    if not isinstance(data, dict):
        raise MetadataError(f"Metadata in {path} is not a JSON object", path=str(path))
    try:
        metadata = TranscriptMetadata.model_validate({"speakers": data.get("speakers", [])})
    except ValidationError as exc:
        raise MetadataError(f"Invalid speakers in {path}: {exc}", path=str(path)) from exc
    return metadata.speakers


def save_metadata(path: Path, metadata: TranscriptMetadata) -> None:
    """Write *metadata* to *path* as indented JSON."""
    try:
        path.write_text(metadata.to_json(), encoding="utf-8")
    except OSError as exc:
        raise MetadataError(f"Cannot write {path}: {exc}", path=str(path)) from exc


def import_from_folder(folder_path: str | Path, speaker_names: Sequence[str]) -> Transcript:
    """Import the transcript stored in *folder_path*.

    The folder name becomes the title.  An existing ``meta.json`` keeps
    its ``id``, ``title`` and ``dateImported``; an unreadable one is
    replaced.  ``lastEdited``, the file paths and the speaker list are
    always refreshed, and the sidecar is written back.

    Args:
        folder_path: Folder containing the transcript files.
        speaker_names: Known speaker names for label detection.

    Returns:
        The populated transcript.

    Raises:
        TranscriptImportError: If no speakers are given, the folder or
            its reference text is missing or unreadable, or the text
            yields no segments.
        MetadataError: If ``meta.json`` cannot be written.
    """
    speakers = clean_speaker_names(speaker_names)
    if not speakers:
        raise TranscriptImportError("No speaker names provided")

    folder = Path(folder_path)
    if not folder.is_dir():
        raise TranscriptImportError(f"Folder does not exist: {folder}", path=str(folder))
    folder = folder.resolve()

    reference_name = find_reference_text_file(folder)
    if reference_name is None:
        raise TranscriptImportError(
            f"No reference .txt file found in folder: {folder}", path=str(folder)
        )
    editable_name = find_editable_text_file(folder, reference_name)
    audio_name = find_audio_file(folder)

    transcript = Transcript(
        title=folder.name,
        folder_path=folder,
        reference_path=folder / reference_name,
        editable_path=folder / editable_name if editable_name else None,
        audio_path=folder / audio_name if audio_name else None,
    )

    try:
        raw_text = transcript.reference_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise TranscriptImportError(
            f"Cannot read transcript text file {transcript.reference_path}: {exc}",
            path=str(transcript.reference_path),
        ) from exc

    result = parse_transcript(raw_text, speakers, transcript)
    if not result.success:
        raise TranscriptImportError(
            f"Failed to parse transcript text in {transcript.reference_path} "
            f"({result.error.value})",
            path=str(transcript.reference_path),
        )

    meta_path = folder / METADATA_FILENAME
    try:
        metadata = load_metadata(meta_path) or TranscriptMetadata()
    except MetadataError as exc:
        logger.warning("Ignoring unreadable metadata, starting fresh: %s", exc)
        metadata = TranscriptMetadata()

    now = datetime.now(timezone.utc)
    if not metadata.id:
        metadata.id = generate_transcript_id(transcript.title, folder)
    if not metadata.title:
        metadata.title = transcript.title
    if metadata.date_imported is None:
        metadata.date_imported = now
    metadata.last_edited = now
    metadata.reference_path = reference_name
    metadata.editable_path = editable_name or ""
    metadata.audio_path = audio_name or ""
    metadata.speakers = list(speakers)
    metadata.num_speakers = len(speakers)

    save_metadata(meta_path, metadata)

    transcript.id = metadata.id
    transcript.title = metadata.title
    transcript.date_imported = metadata.date_imported
    transcript.last_edited = now

    logger.info(
        "Imported %s: %d segment(s), %d speaker(s)",
        folder,
        transcript.segment_count(),
        len(transcript.speakers),
    )
    return transcript
