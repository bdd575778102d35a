"""Read-only search helpers over a :class:`Transcript`.

All helpers are linear scans that return segment indices in document
order.  Nothing here mutates the transcript, so a search can run at any
time, independent of any live editor.
"""

from __future__ import annotations

from collections.abc import Iterable

from rapidfuzz.fuzz import partial_ratio

from transcript_studio.models.transcript import Transcript

DEFAULT_FUZZY_THRESHOLD = 80.0


def _contains(text: str, pattern: str, case_sensitive: bool) -> bool:
    if case_sensitive:
        return pattern in text
    return pattern.casefold() in text.casefold()


class TranscriptSearch:
    """Substring, speaker and fuzzy filters for one transcript.

    Matching is case-insensitive unless ``case_sensitive=True`` is passed.
    An empty pattern never matches in the pure text searches; in the
    combined filters an empty pattern (or speaker) disables that filter.
    """

    def __init__(self, transcript: Transcript) -> None:
        self._transcript = transcript

    @property
    def transcript(self) -> Transcript:
        return self._transcript

    def find_segments_containing(self, pattern: str, *, case_sensitive: bool = False) -> list[int]:
        if not pattern:
            return []
        return [
            index
            for index, segment in enumerate(self._transcript.segments)
            if _contains(segment.text, pattern, case_sensitive)
        ]

    def find_next(self, pattern: str, start_index: int, *, case_sensitive: bool = False) -> int:
        """Return the first segment after *start_index* containing *pattern*.

        Pass ``-1`` to search from the top.  Returns ``-1`` when nothing
        matches or *pattern* is empty.
        """
        if not pattern:
            return -1
        segments = self._transcript.segments
        for index in range(max(start_index + 1, 0), len(segments)):
            if _contains(segments[index].text, pattern, case_sensitive):
                return index
        return -1

    def find_by_speaker(self, speaker_id: str) -> list[int]:
        """Indices of segments whose speaker id equals *speaker_id* exactly."""
        if not speaker_id:
            return []
        return [
            index
            for index, segment in enumerate(self._transcript.segments)
            if segment.speaker_id == speaker_id
        ]

    def find_by_speaker_and_text(
        self,
        speaker_id: str,
        pattern: str,
        *,
        case_sensitive: bool = False,
    ) -> list[int]:
        return self.find_by_speakers_and_text(
            [speaker_id] if speaker_id else [],
            pattern,
            case_sensitive=case_sensitive,
        )

    def find_by_speakers_and_text(
        self,
        speaker_ids: Iterable[str],
        pattern: str,
        *,
        case_sensitive: bool = False,
    ) -> list[int]:
        """Segments by any of *speaker_ids* whose text contains *pattern*.

        With no speaker ids this is a plain text search; with an empty
        pattern it is a plain speaker filter; with neither it returns
        every index.
        """
        wanted = set(speaker_ids)
        result: list[int] = []
        for index, segment in enumerate(self._transcript.segments):
            if wanted and segment.speaker_id not in wanted:
                continue
            if pattern and not _contains(segment.text, pattern, case_sensitive):
                continue
            result.append(index)
        return result

    def find_similar(
        self,
        pattern: str,
        *,
        threshold: float = DEFAULT_FUZZY_THRESHOLD,
    ) -> list[int]:
        """Segments that approximately contain *pattern*.

        Uses :func:`rapidfuzz.fuzz.partial_ratio` on case-folded text, so a
        misspelt query still finds the passage.  A segment matches when
        its score is at least *threshold* (0-100).
        """
        query = pattern.strip().casefold()
        if not query:
            return []
        return [
            index
            for index, segment in enumerate(self._transcript.segments)
            if partial_ratio(query, segment.text.casefold()) >= threshold
        ]
