"""Undoable editing operations over a live :class:`Transcript`.

:class:`TranscriptEditor` borrows one transcript for its whole lifetime
and mutates it in place.  Every successful edit first pushes a full value
copy of the transcript's ``(speakers, segments)`` onto the undo stack and
clears the redo stack; :meth:`~TranscriptEditor.undo` and
:meth:`~TranscriptEditor.redo` swap whole snapshots, so a restore is exact.
Copying the whole document per edit is O(document size); transcripts are
small enough for this to be fine.

Operations validate before touching anything.  A rejected call returns
``False`` (or ``-1`` / ``0``), sets :attr:`~TranscriptEditor.last_error`,
and leaves both the transcript and the history unchanged.

Only one editor should be live per transcript.  To switch documents,
drop the editor (and its history) and build a new one.
"""

from __future__ import annotations

import copy
import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timezone

from transcript_studio.exceptions import ErrorCode
from transcript_studio.models.transcript import Segment, Speaker, Transcript

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Snapshot:
    speakers: list[Speaker]
    segments: list[Segment]


def replace_occurrences(
    text: str,
    old: str,
    new: str,
    case_sensitive: bool = False,
) -> tuple[str, int]:
    """Replace every non-overlapping occurrence of *old* in *text*.

    Scanning resumes right after each inserted *new*, so replacement text
    is never rescanned (``old="a", new="aa"`` terminates).

    Returns:
        ``(new_text, count)``.  *text* is returned unchanged when *old* is
        empty.
    """
    if not old:
        return text, 0

    pattern = re.compile(re.escape(old), 0 if case_sensitive else re.IGNORECASE)
    count = 0
    pos = 0
    while True:
        match = pattern.search(text, pos)
        if match is None:
            break
        text = text[: match.start()] + new + text[match.end():]
        pos = match.start() + len(new)
        count += 1
    return text, count


def normalize_whitespace(text: str) -> str:
    """Trim every line, keep at most one blank line in a row, trim the result."""
    cleaned: list[str] = []
    last_was_blank = False
    for line in re.split(r"\r?\n", text):
        line = line.strip()
        if line:
            cleaned.append(line)
            last_was_blank = False
        elif not last_was_blank:
            cleaned.append("")
            last_was_blank = True
    return "\n".join(cleaned).strip()


class TranscriptEditor:
    """Atomic, undoable mutations on one transcript.

    All indices are 0-based positions in ``transcript.segments``.

    Attributes:
        last_error: Why the most recent operation was rejected, or
            ``None`` if it succeeded (reset at the start of every call).
    """

    def __init__(self, transcript: Transcript) -> None:
        self._transcript = transcript
        self._undo_stack: list[_Snapshot] = []
        self._redo_stack: list[_Snapshot] = []
        self.last_error: ErrorCode | None = None

    @property
    def transcript(self) -> Transcript:
        return self._transcript

    @property
    def undo_depth(self) -> int:
        return len(self._undo_stack)

    @property
    def redo_depth(self) -> int:
        return len(self._redo_stack)

    # ------------------------------------------------------------------
    # Segment editing
    # ------------------------------------------------------------------

    def set_segment_text(self, index: int, text: str) -> bool:
        """Replace the text of segment *index*."""
        self._reset_error()
        if not self._check_index(index):
            return False

        self._save_snapshot()
        self._transcript.segments[index].text = text
        self._mark_edited("set text of segment %d", index)
        return True

    def append_to_segment(self, index: int, extra: str) -> bool:
        """Append *extra* to segment *index*, newline-separated.

        Rejected (no history entry) when *extra* is empty.
        """
        self._reset_error()
        if not self._check_index(index):
            return False
        if not extra:
            return self._fail(ErrorCode.EMPTY_OR_WHITESPACE_INPUT)

        self._save_snapshot()
        self._transcript.segments[index].append_text(extra)
        self._mark_edited("appended to segment %d", index)
        return True

    def split_segment(self, index: int, position: int) -> int:
        """Split segment *index* at character offset *position*.

        The original segment keeps the trimmed first half; a new segment
        with the same speaker and the trimmed second half is inserted
        right after it.

        Returns:
            Index of the new segment, or ``-1`` if *index* is out of
            range, *position* is at either end of the text, or either
            half would be blank.
        """
        halves = self._split_halves(index, position)
        if halves is None:
            return -1
        first, second = halves

        self._save_snapshot()
        segment = self._transcript.segments[index]
        segment.text = first
        self._transcript.segments.insert(index + 1, Segment(segment.speaker_id, second))
        self._mark_edited("split segment %d at %d", index, position)
        return index + 1

    def split_segment_with_speakers(
        self,
        index: int,
        position: int,
        first_speaker: str,
        second_speaker: str,
    ) -> int:
        """Split like :meth:`split_segment`, then assign a speaker to each half.

        A blank speaker argument keeps the original segment's speaker for
        that half.  Non-blank ids are trimmed and registered if missing.
        The split and the reassignment form a single undo step.

        Returns:
            Index of the new (second) segment, or ``-1`` on rejection.
        """
        halves = self._split_halves(index, position)
        if halves is None:
            return -1
        first, second = halves

        original_speaker = self._transcript.segments[index].speaker_id
        first_id = first_speaker.strip() or original_speaker
        second_id = second_speaker.strip() or original_speaker

        self._save_snapshot()
        segments = self._transcript.segments
        segments[index] = Segment(first_id, first)
        segments.insert(index + 1, Segment(second_id, second))
        self._ensure_speaker(first_id)
        self._ensure_speaker(second_id)
        self._mark_edited(
            "split segment %d at %d as %s / %s", index, position, first_id, second_id
        )
        return index + 1

    def merge_with_next(self, index: int) -> bool:
        """Append segment ``index + 1`` to segment *index* and remove it.

        The merged segment keeps the speaker of segment *index*.
        """
        self._reset_error()
        if not self._check_index(index):
            return False
        if index + 1 >= len(self._transcript.segments):
            return self._fail(ErrorCode.NO_NEXT_SEGMENT_TO_MERGE)

        self._save_snapshot()
        segments = self._transcript.segments
        current = segments[index]
        following = segments.pop(index + 1)
        if current.text and not current.text.endswith("\n"):
            current.text += "\n"
        current.text += following.text
        self._mark_edited("merged segment %d with %d", index, index + 1)
        return True

    def delete_segment(self, index: int) -> bool:
        """Remove segment *index*."""
        self._reset_error()
        if not self._check_index(index):
            return False

        self._save_snapshot()
        del self._transcript.segments[index]
        self._mark_edited("deleted segment %d", index)
        return True

    remove_segment = delete_segment

    def insert_segment(self, index: int, segment: Segment) -> bool:
        """Insert a copy of *segment* at *index* (``0 <= index <= len``).

        The segment's speaker is registered if missing.  A segment with
        a blank speaker id is rejected.
        """
        self._reset_error()
        if not 0 <= index <= len(self._transcript.segments):
            return self._fail(ErrorCode.INVALID_INDEX)
        speaker_id = segment.speaker_id.strip()
        if not speaker_id:
            return self._fail(ErrorCode.EMPTY_OR_WHITESPACE_INPUT)

        self._save_snapshot()
        self._transcript.segments.insert(index, Segment(speaker_id, segment.text))
        self._ensure_speaker(speaker_id)
        self._mark_edited("inserted segment at %d", index)
        return True

    def move_segment(self, from_index: int, to_index: int) -> bool:
        """Move a segment, list-move style.

        The segment is taken out first; when moving forwards the target
        index is then reduced by one to account for the shift.  Moving a
        segment onto itself succeeds without creating a history entry.
        """
        self._reset_error()
        if not self._check_index(from_index) or not self._check_index(to_index):
            return False
        if from_index == to_index:
            return True

        self._save_snapshot()
        segments = self._transcript.segments
        segment = segments.pop(from_index)
        if from_index < to_index:
            to_index -= 1
        segments.insert(to_index, segment)
        self._mark_edited("moved segment %d to %d", from_index, to_index)
        return True

    def swap_segments(self, index_a: int, index_b: int) -> bool:
        """Exchange two segments.  Swapping a segment with itself is a no-op."""
        self._reset_error()
        if not self._check_index(index_a) or not self._check_index(index_b):
            return False
        if index_a == index_b:
            return True

        self._save_snapshot()
        segments = self._transcript.segments
        segments[index_a], segments[index_b] = segments[index_b], segments[index_a]
        self._mark_edited("swapped segments %d and %d", index_a, index_b)
        return True

    def set_segments(self, segments: Iterable[Segment]) -> bool:
        """Replace the whole segment list with copies of *segments*.

        Speakers referenced by the new segments are registered if missing.
        """
        self._reset_error()
        new_segments = [Segment(seg.speaker_id, seg.text) for seg in segments]

        self._save_snapshot()
        self._transcript.segments[:] = new_segments
        for segment in new_segments:
            if segment.speaker_id:
                self._ensure_speaker(segment.speaker_id)
        self._mark_edited("replaced all segments (%d)", len(new_segments))
        return True

    # ------------------------------------------------------------------
    # Speaker editing
    # ------------------------------------------------------------------

    def has_speaker(self, speaker_id: str) -> bool:
        return self._transcript.find_speaker_index(speaker_id) >= 0

    def set_segment_speaker(self, index: int, speaker_id: str) -> bool:
        """Attribute segment *index* to *speaker_id* (trimmed, registered if new)."""
        self._reset_error()
        if not self._check_index(index):
            return False
        speaker_id = speaker_id.strip()
        if not speaker_id:
            return self._fail(ErrorCode.EMPTY_OR_WHITESPACE_INPUT)

        self._save_snapshot()
        self._transcript.segments[index].speaker_id = speaker_id
        self._ensure_speaker(speaker_id)
        self._mark_edited("set speaker of segment %d to %s", index, speaker_id)
        return True

    def rename_speaker_global(self, old_id: str, new_id: str) -> bool:
        """Rename a speaker everywhere as one undo step.

        The speaker's id and display name become *new_id* and every
        segment attributed to *old_id* is re-pointed.  If *new_id* already
        exists the two speakers are folded into one.
        """
        self._reset_error()
        old_id = old_id.strip()
        new_id = new_id.strip()
        if not old_id or not new_id:
            return self._fail(ErrorCode.EMPTY_OR_WHITESPACE_INPUT)
        if old_id == new_id:
            return self._fail(ErrorCode.SAME_SPEAKER_RENAME)
        if not self.has_speaker(old_id):
            return self._fail(ErrorCode.SPEAKER_NOT_FOUND)

        self._save_snapshot()
        self._transcript.rename_speaker(old_id, new_id)
        self._mark_edited("renamed speaker %s to %s", old_id, new_id)
        return True

    # ------------------------------------------------------------------
    # Text operations
    # ------------------------------------------------------------------

    def replace_in_segment(
        self,
        index: int,
        old: str,
        new: str,
        *,
        case_sensitive: bool = False,
    ) -> int:
        """Replace every occurrence of *old* with *new* in one segment.

        Returns:
            Number of replacements.  Zero leaves the history untouched.
        """
        self._reset_error()
        if not self._check_index(index):
            return 0
        if not old:
            self._fail(ErrorCode.EMPTY_REPLACEMENT_PATTERN)
            return 0

        segment = self._transcript.segments[index]
        replaced, count = replace_occurrences(segment.text, old, new, case_sensitive)
        if count == 0:
            return 0

        self._save_snapshot()
        segment.text = replaced
        self._mark_edited("replaced %d occurrence(s) in segment %d", count, index)
        return count

    def replace_all(self, old: str, new: str, *, case_sensitive: bool = False) -> int:
        """Replace *old* with *new* in every segment, in document order.

        Returns:
            Total number of replacements.  Zero leaves the history untouched.
        """
        self._reset_error()
        if not old:
            self._fail(ErrorCode.EMPTY_REPLACEMENT_PATTERN)
            return 0

        results = [
            replace_occurrences(segment.text, old, new, case_sensitive)
            for segment in self._transcript.segments
        ]
        total = sum(count for _text, count in results)
        if total == 0:
            return 0

        self._save_snapshot()
        for segment, (replaced, count) in zip(self._transcript.segments, results):
            if count:
                segment.text = replaced
        self._mark_edited("replaced %d occurrence(s) across the transcript", total)
        return total

    def normalize_whitespace_all(self) -> bool:
        """Tidy whitespace in every segment (see :func:`normalize_whitespace`).

        Returns ``False`` without a history entry when there are no segments.
        """
        self._reset_error()
        if not self._transcript.segments:
            return False

        self._save_snapshot()
        for segment in self._transcript.segments:
            segment.text = normalize_whitespace(segment.text)
        self._mark_edited("normalized whitespace in %d segment(s)", len(self._transcript.segments))
        return True

    # ------------------------------------------------------------------
    # Undo / redo
    # ------------------------------------------------------------------

    def clear_history(self) -> None:
        self._undo_stack.clear()
        self._redo_stack.clear()

    def can_undo(self) -> bool:
        return bool(self._undo_stack)

    def can_redo(self) -> bool:
        return bool(self._redo_stack)

    def undo(self) -> bool:
        """Restore the state before the most recent edit."""
        self._reset_error()
        if not self._undo_stack:
            return False
        snapshot = self._undo_stack.pop()
        self._redo_stack.append(self._capture())
        self._restore(snapshot)
        self._mark_edited("undo (%d step(s) left)", len(self._undo_stack))
        return True

    def redo(self) -> bool:
        """Re-apply the most recently undone edit."""
        self._reset_error()
        if not self._redo_stack:
            return False
        snapshot = self._redo_stack.pop()
        self._undo_stack.append(self._capture())
        self._restore(snapshot)
        self._mark_edited("redo (%d step(s) left)", len(self._redo_stack))
        return True

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _reset_error(self) -> None:
        self.last_error = None

    def _fail(self, code: ErrorCode) -> bool:
        self.last_error = code
        logger.debug("Edit rejected: %s", code.value)
        return False

    def _check_index(self, index: int) -> bool:
        if 0 <= index < len(self._transcript.segments):
            return True
        return self._fail(ErrorCode.INVALID_INDEX)

    def _split_halves(self, index: int, position: int) -> tuple[str, str] | None:
        self._reset_error()
        if not self._check_index(index):
            return None
        text = self._transcript.segments[index].text
        if position <= 0 or position >= len(text):
            self._fail(ErrorCode.INVALID_SPLIT_POSITION)
            return None
        first = text[:position].strip()
        second = text[position:].strip()
        if not first or not second:
            self._fail(ErrorCode.EMPTY_RESULTING_HALF)
            return None
        return first, second

    def _ensure_speaker(self, speaker_id: str) -> None:
        self._transcript.add_speaker_if_missing(speaker_id)

    def _capture(self) -> _Snapshot:
        return _Snapshot(
            speakers=copy.deepcopy(self._transcript.speakers),
            segments=copy.deepcopy(self._transcript.segments),
        )

    def _restore(self, snapshot: _Snapshot) -> None:
        self._transcript.speakers[:] = snapshot.speakers
        self._transcript.segments[:] = snapshot.segments

    def _save_snapshot(self) -> None:
        self._undo_stack.append(self._capture())
        self._redo_stack.clear()

    def _mark_edited(self, message: str, *args: object) -> None:
        self._transcript.last_edited = datetime.now(timezone.utc)
        logger.debug(message, *args)
