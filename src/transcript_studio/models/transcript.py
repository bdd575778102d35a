"""Document model for speaker-attributed transcripts.

Three plain dataclasses:

- :class:`Speaker` -- a participant with a stable id and display name.
- :class:`Segment` -- a contiguous span of text attributed to one speaker.
- :class:`Transcript` -- the whole document: file locations, the ordered
  speaker list and the ordered segment list.

They are mutable on purpose: :class:`~transcript_studio.editor.TranscriptEditor`
edits a transcript in place and keeps its own value copies for undo.
Segment order is the only carrier of chronology; segments have no
timestamps.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

RGB = tuple[int, int, int]


@dataclass
class Speaker:
    """A named participant in a transcript.

    Attributes:
        id: Stable identifier; segments refer to speakers by this value.
        display_name: Name shown to the user.  Defaults to ``id`` when a
            speaker is registered automatically.
        color: Optional ``(r, g, b)`` display colour, each 0-255.
    """

    id: str
    display_name: str = ""
    color: RGB | None = None

    def __post_init__(self) -> None:
        if not self.display_name:
            self.display_name = self.id

    def is_valid(self) -> bool:
        """Both ``id`` and ``display_name`` are non-empty."""
        return bool(self.id) and bool(self.display_name)

    def to_label(self) -> str:
        """Return the ``"Name:"`` label used in raw transcript text."""
        return f"{self.display_name}:"

    def assign_random_color(self, rng: random.Random | None = None) -> RGB:
        """Pick a random display colour, store it and return it."""
        rng = rng or random.Random()
        self.color = (rng.randrange(256), rng.randrange(256), rng.randrange(256))
        return self.color


@dataclass
class Segment:
    """A contiguous span of transcript text attributed to one speaker.

    Attributes:
        speaker_id: Id of the :class:`Speaker` who said this.
        text: Segment text; may span several lines joined with ``\\n``.
    """

    speaker_id: str
    text: str = ""

    def is_valid(self) -> bool:
        """Speaker id is set and the text is not blank."""
        return bool(self.speaker_id) and bool(self.text.strip())

    def starts_with_label(self) -> bool:
        """Heuristic: the text opens with a ``word:`` token."""
        colon = self.text.find(":")
        if colon < 0:
            return False
        space = self.text.find(" ")
        return space < 0 or colon < space

    def append_text(self, extra: str) -> None:
        """Append *extra*, separated by a newline unless one is already there."""
        if not extra:
            return
        if not self.text.endswith("\n"):
            self.text += "\n"
        self.text += extra

    def clean_text(self) -> str:
        return self.text.strip()

    def export_format(self) -> str:
        """Render as ``"speaker:\\ntext\\n\\n"`` for plain-text dumps."""
        return f"{self.speaker_id}:\n{self.text.strip()}\n\n"


@dataclass
class Transcript:
    """A complete transcript document.

    Attributes:
        id: Stable document id (written to ``meta.json``).
        title: Human-readable title, usually the folder name.
        folder_path: Folder holding the transcript's files.
        reference_path: Original, read-only transcript text.
        editable_path: Working copy that edits are saved to.
        audio_path: Recording that goes with the transcript.
        speakers: Known speakers, unique by ``id``, in insertion order.
        segments: Speaker turns in document order.
        date_imported: When the transcript was first imported.
        last_edited: When the content was last changed.
        last_playback_position_ms: Resume point for audio playback.
    """

    id: str = ""
    title: str = ""
    folder_path: Path | None = None
    reference_path: Path | None = None
    editable_path: Path | None = None
    audio_path: Path | None = None
    speakers: list[Speaker] = field(default_factory=list)
    segments: list[Segment] = field(default_factory=list)
    date_imported: datetime | None = None
    last_edited: datetime | None = None
    last_playback_position_ms: int = 0

    # -- checks ----------------------------------------------------------

    def has_audio(self) -> bool:
        return self.audio_path is not None

    def has_editable(self) -> bool:
        return self.editable_path is not None

    def is_empty(self) -> bool:
        return not self.segments

    # -- speakers --------------------------------------------------------

    def find_speaker_index(self, speaker_id: str) -> int:
        """Return the position of *speaker_id* in :attr:`speakers`, or ``-1``."""
        for index, speaker in enumerate(self.speakers):
            if speaker.id == speaker_id:
                return index
        return -1

    def speaker_from_id(self, speaker_id: str) -> Speaker | None:
        index = self.find_speaker_index(speaker_id)
        return self.speakers[index] if index >= 0 else None

    def speaker_ids(self) -> list[str]:
        return [speaker.id for speaker in self.speakers]

    def add_speaker_if_missing(self, speaker_id: str) -> bool:
        """Register *speaker_id* (display name = id) unless already known.

        Returns:
            ``True`` if a new speaker was appended.
        """
        if self.find_speaker_index(speaker_id) >= 0:
            return False
        self.speakers.append(Speaker(id=speaker_id, display_name=speaker_id))
        return True

    def rename_speaker(self, old_id: str, new_id: str) -> bool:
        """Rename a speaker and re-point every segment that refers to it.

        The speaker's display name follows the new id.  If *new_id* is
        already registered the two speakers are folded together: the old
        entry is dropped so ids stay unique.

        Returns:
            ``False`` if *old_id* is not a known speaker.
        """
        index = self.find_speaker_index(old_id)
        if index < 0:
            return False

        if new_id != old_id and self.find_speaker_index(new_id) >= 0:
            del self.speakers[index]
        else:
            self.speakers[index].id = new_id
            self.speakers[index].display_name = new_id

        for segment in self.segments:
            if segment.speaker_id == old_id:
                segment.speaker_id = new_id
        return True

    # -- segments --------------------------------------------------------

    def segment_count(self) -> int:
        return len(self.segments)

    def add_segment(self, segment: Segment) -> None:
        self.segments.append(segment)

    def segments_by_speaker(self, speaker_id: str) -> list[Segment]:
        return [segment for segment in self.segments if segment.speaker_id == speaker_id]

    def merge_adjacent_same_speaker(self) -> None:
        """Fold runs of consecutive segments by the same speaker into one.

        Texts are joined with :meth:`Segment.append_text`.  Applying this
        twice has the same effect as applying it once.
        """
        if len(self.segments) < 2:
            return

        merged: list[Segment] = []
        current = Segment(self.segments[0].speaker_id, self.segments[0].text)
        for following in self.segments[1:]:
            if following.speaker_id == current.speaker_id:
                current.append_text(following.text)
            else:
                merged.append(current)
                current = Segment(following.speaker_id, following.text)
        merged.append(current)
        self.segments[:] = merged

    def all_text(self) -> str:
        """Concatenate :meth:`Segment.export_format` over all segments."""
        return "".join(segment.export_format() for segment in self.segments).strip() + "\n"

    def clear(self) -> None:
        """Drop content and identity; timestamps and playback position stay."""
        self.speakers.clear()
        self.segments.clear()
        self.id = ""
        self.title = ""
        self.folder_path = None
        self.reference_path = None
        self.editable_path = None
        self.audio_path = None
