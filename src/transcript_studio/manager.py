"""In-memory library of transcripts loaded from a root folder.

:class:`TranscriptManager` owns the :class:`Transcript` objects and hands
out at most one live :class:`~transcript_studio.editor.TranscriptEditor`
at a time.  Opening another transcript discards the previous editor and
its undo history.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from transcript_studio.editor import TranscriptEditor
from transcript_studio.exceptions import TranscriptImportError
from transcript_studio.importer import import_from_folder, load_metadata_speakers
from transcript_studio.models.metadata import METADATA_FILENAME
from transcript_studio.models.transcript import Transcript

logger = logging.getLogger(__name__)


class TranscriptManager:
    """Collection of transcripts under one library root.

    Attributes:
        root_dir: Folder whose sub-folders are transcript folders.
        warnings: Problems met by the last :meth:`load_all_from_root`,
            one message per skipped folder.
    """

    def __init__(self, root_dir: str | Path | None = None) -> None:
        self.root_dir = Path(root_dir) if root_dir is not None else None
        self.warnings: list[str] = []
        self._transcripts: list[Transcript] = []
        self._editor: TranscriptEditor | None = None

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load_all_from_root(self) -> int:
        """Replace the collection with every transcript under :attr:`root_dir`.

        A sub-folder is a transcript folder when it holds a ``meta.json``
        listing at least one speaker.  Folders that fail to import are
        skipped and reported in :attr:`warnings`.

        Returns:
            Number of transcripts loaded.

        Raises:
            TranscriptImportError: If the root is unset or missing.
        """
        self.clear()
        if self.root_dir is None:
            raise TranscriptImportError("Library root directory is not set")
        if not self.root_dir.is_dir():
            raise TranscriptImportError(
                f"Library root directory does not exist: {self.root_dir}",
                path=str(self.root_dir),
            )

        for folder in sorted(p for p in self.root_dir.iterdir() if p.is_dir()):
            meta_path = folder / METADATA_FILENAME
            if not meta_path.exists():
                continue
            try:
                speakers = load_metadata_speakers(meta_path)
                if not speakers:
                    logger.debug("Skipping %s: no speakers in metadata", folder)
                    continue
                self._transcripts.append(import_from_folder(folder, speakers))
            except TranscriptImportError as exc:
                self._warn(f"Failed to import {folder}: {exc}")

        if not self._transcripts:
            self._warn(f"No transcripts found in root directory: {self.root_dir}")
        logger.info("Loaded %d transcript(s) from %s", len(self._transcripts), self.root_dir)
        return len(self._transcripts)

    def import_transcript_from_folder(
        self,
        folder_path: str | Path,
        speaker_names: Sequence[str],
    ) -> int:
        """Import one folder and add it to the collection.

        Returns:
            Index of the new transcript.

        Raises:
            TranscriptImportError: Propagated from
                :func:`~transcript_studio.importer.import_from_folder`.
        """
        self._transcripts.append(import_from_folder(folder_path, speaker_names))
        return len(self._transcripts) - 1

    def clear(self) -> None:
        self._transcripts.clear()
        self.warnings.clear()
        self.close_editor()

    # ------------------------------------------------------------------
    # Access
    # ------------------------------------------------------------------

    @property
    def transcripts(self) -> tuple[Transcript, ...]:
        return tuple(self._transcripts)

    def transcript_count(self) -> int:
        return len(self._transcripts)

    def transcript_at(self, index: int) -> Transcript | None:
        if 0 <= index < len(self._transcripts):
            return self._transcripts[index]
        return None

    def index_of_transcript_by_id(self, transcript_id: str) -> int:
        for index, transcript in enumerate(self._transcripts):
            if transcript.id == transcript_id:
                return index
        return -1

    # ------------------------------------------------------------------
    # Editing
    # ------------------------------------------------------------------

    @property
    def editor(self) -> TranscriptEditor | None:
        """The live editor, if a transcript is open."""
        return self._editor

    def open_editor(self, index: int) -> TranscriptEditor | None:
        """Start editing transcript *index* with a fresh history.

        Any previously open editor is discarded first, even when *index*
        is the transcript already open.

        Returns:
            The new editor, or ``None`` if *index* is out of range.
        """
        transcript = self.transcript_at(index)
        if transcript is None:
            return None
        self.close_editor()
        self._editor = TranscriptEditor(transcript)
        logger.debug("Opened editor for transcript %d (%s)", index, transcript.title)
        return self._editor

    def close_editor(self) -> None:
        self._editor = None

    def _warn(self, message: str) -> None:
        logger.warning(message)
        self.warnings.append(message)
