"""Label-detection parser for speaker-labelled transcripts.

Turns raw text plus a list of known speaker names into a populated
:class:`~transcript_studio.models.transcript.Transcript`.  A *label* is
``Name:`` for some known name, matched case-insensitively anywhere in a
line, so several turns packed onto one physical line are split apart::

    Stephen: Hi Stan: hello back

yields ``Stephen -> "Hi"`` and ``Stan -> "hello back"``.

Known limitations: a ``Name:`` that appears in ordinary prose is read as
a speaker turn, and when two labels could match at the same position the
name listed first wins.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path

from transcript_studio.exceptions import ErrorCode
from transcript_studio.models.transcript import Segment, Transcript

logger = logging.getLogger(__name__)

_LINE_BREAK_RE = re.compile(r"\r?\n")
_EXCESS_NEWLINES_RE = re.compile(r"\n{3,}")


@dataclass(frozen=True)
class ParseResult:
    """Outcome of :func:`parse_transcript`.

    Attributes:
        transcript: The populated transcript.  On failure it has no
            speakers and no segments.
        error: Why parsing failed, or ``None`` on success.
    """

    transcript: Transcript
    error: ErrorCode | None = None

    @property
    def success(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class _Label:
    speaker: str
    pattern: re.Pattern[str]


def _compile_labels(known_speakers: Iterable[str]) -> list[_Label]:
    return [
        _Label(speaker=name, pattern=re.compile(re.escape(name + ":"), re.IGNORECASE))
        for name in known_speakers
    ]


def clean_speaker_names(known_speakers: Iterable[str]) -> list[str]:
    """Trim names, drop blanks and duplicates, keep the caller's order."""
    names = (name.strip() for name in known_speakers)
    return list(dict.fromkeys(name for name in names if name))


def normalize_segment_text(text: str) -> str:
    """Whitespace cleanup for one flushed segment.

    Trims the outer whitespace, collapses runs of three or more newlines
    to two, then trims every line.
    """
    text = text.strip()
    if not text:
        return text
    text = _EXCESS_NEWLINES_RE.sub("\n\n", text)
    return "\n".join(line.strip() for line in text.split("\n"))


def match_leading_label(line: str, known_speakers: Sequence[str]) -> tuple[str, str] | None:
    """Check whether *line* opens with a known speaker's label.

    Leading whitespace is skipped.  Speakers are tried in list order and
    the first match wins.

    Returns:
        ``(speaker, text_after_label)`` or ``None``.
    """
    return _match_leading(line, _compile_labels(known_speakers))


def _match_leading(line: str, labels: Sequence[_Label]) -> tuple[str, str] | None:
    start = len(line) - len(line.lstrip())
    if start >= len(line):
        return None
    for label in labels:
        match = label.pattern.match(line, start)
        if match:
            return label.speaker, line[match.end():]
    return None


def split_inline_labels(
    text: str,
    known_speakers: Sequence[str],
    initial_speaker: str = "",
) -> list[tuple[str, str]]:
    """Slice *text* into ``(speaker, text)`` runs at every known label.

    Text before the first label belongs to *initial_speaker* and is
    dropped when there is none.  Each later run belongs to the label that
    opens it.  Empty runs are skipped.

    Args:
        text: One line (or the rest of a line after its leading label).
        known_speakers: Speaker names in priority order.
        initial_speaker: Speaker already active when *text* starts.

    Returns:
        The runs in left-to-right order.
    """
    return _split_inline(text, _compile_labels(known_speakers), initial_speaker)


def _split_inline(
    text: str,
    labels: Sequence[_Label],
    initial_speaker: str,
) -> list[tuple[str, str]]:
    runs: list[tuple[str, str]] = []
    if not text:
        return runs

    # (start, priority, end, speaker); priority keeps list order on ties.
    hits: list[tuple[int, int, int, str]] = []
    for priority, label in enumerate(labels):
        for match in label.pattern.finditer(text):
            hits.append((match.start(), priority, match.end(), label.speaker))
    hits.sort()

    active = initial_speaker
    cursor = 0
    for start, _priority, end, speaker in hits:
        # A hit inside a label already consumed is not a new turn.
        if start < cursor:
            continue
        before = text[cursor:start].strip()
        if before and active:
            runs.append((active, before))
        active = speaker
        cursor = end

    tail = text[cursor:].strip()
    if tail and active:
        runs.append((active, tail))
    return runs


def parse_segments(text: str, known_speakers: Sequence[str]) -> list[Segment]:
    """Split raw transcript text into speaker segments.

    Walks the text line by line.  A line opening with a label starts a new
    turn for that speaker; other lines continue the active speaker.  Every
    line is also scanned for inline labels.  Blank lines are kept as
    paragraph breaks inside the active segment.  Text before the first
    label has no speaker and is dropped.

    Adjacent segments by the same speaker are *not* merged here; see
    :meth:`Transcript.merge_adjacent_same_speaker`.
    """
    labels = _compile_labels(known_speakers)
    segments: list[Segment] = []

    current_speaker = ""
    current_text = ""

    def _flush() -> None:
        nonlocal current_text
        normalized = normalize_segment_text(current_text)
        if current_speaker and normalized:
            segments.append(Segment(current_speaker, normalized))
        current_text = ""

    for line_number, line in enumerate(_LINE_BREAK_RE.split(text), start=1):
        if not line.strip():
            if current_text:
                current_text += "\n"
            continue

        base_speaker = current_speaker
        content = line

        leading = _match_leading(line, labels)
        if leading is not None:
            _flush()
            base_speaker, content = leading

        runs = _split_inline(content, labels, base_speaker)

        if not runs:
            # A bare label ("Stan:") or unlabelled text before any speaker.
            if not base_speaker:
                logger.debug("Line %d has no active speaker, dropping: %r", line_number, line)
                continue
            if not current_speaker:
                current_speaker = base_speaker
            if current_speaker == base_speaker:
                if current_text:
                    current_text += "\n"
                current_text += content
            else:
                _flush()
                current_speaker = base_speaker
                current_text = content
            continue

        for speaker, run_text in runs:
            if not current_speaker:
                current_speaker = speaker
                current_text = run_text
            elif speaker.casefold() == current_speaker.casefold():
                if current_text:
                    current_text += "\n"
                current_text += run_text
            else:
                _flush()
                current_speaker = speaker
                current_text = run_text

    _flush()
    return segments


def parse_transcript(
    text: str,
    known_speakers: Iterable[str],
    transcript: Transcript | None = None,
) -> ParseResult:
    """Parse raw transcript text into a populated :class:`Transcript`.

    Any existing speakers and segments of *transcript* are cleared first.
    On success every known speaker is registered (in the given order),
    the parsed segments are appended, and adjacent same-speaker segments
    are merged.  On failure the transcript is left with no speakers and
    no segments.

    Args:
        text: Full contents of a transcript text file.
        known_speakers: Valid speaker names; each appears as ``Name:`` in
            *text*.  Order matters when names overlap.
        transcript: Transcript to populate.  A new one is created when
            omitted.

    Returns:
        A :class:`ParseResult`; ``error`` is one of
        :attr:`ErrorCode.NO_KNOWN_SPEAKERS`,
        :attr:`ErrorCode.EMPTY_OR_WHITESPACE_INPUT` or
        :attr:`ErrorCode.NO_SEGMENTS_PRODUCED` on failure.
    """
    transcript = transcript if transcript is not None else Transcript()
    transcript.speakers.clear()
    transcript.segments.clear()

    speakers = clean_speaker_names(known_speakers)
    if not speakers:
        logger.warning("Cannot parse transcript: no known speakers given")
        return ParseResult(transcript, ErrorCode.NO_KNOWN_SPEAKERS)

    if not text or not text.strip():
        logger.info("Empty transcript, nothing to parse")
        return ParseResult(transcript, ErrorCode.EMPTY_OR_WHITESPACE_INPUT)

    segments = parse_segments(text, speakers)
    if not segments:
        logger.warning(
            "No segments found; none of the labels %s appear in the text",
            ", ".join(f"{name}:" for name in speakers),
        )
        return ParseResult(transcript, ErrorCode.NO_SEGMENTS_PRODUCED)

    for name in speakers:
        transcript.add_speaker_if_missing(name)
    for segment in segments:
        transcript.add_segment(segment)
    transcript.merge_adjacent_same_speaker()

    logger.info(
        "Parsed %d segment(s) across %d speaker(s)",
        transcript.segment_count(),
        len(transcript.speakers),
    )
    return ParseResult(transcript)


def parse_transcript_file(
    file_path: str | Path,
    known_speakers: Iterable[str],
    transcript: Transcript | None = None,
) -> ParseResult:
    """Read a UTF-8 transcript file and delegate to :func:`parse_transcript`.

    Raises:
        FileNotFoundError: If *file_path* does not exist.
    """
    path = Path(file_path)
    if not path.exists():
        raise FileNotFoundError(f"Transcript file not found: {path}")

    text = path.read_text(encoding="utf-8")
    return parse_transcript(text, known_speakers, transcript)
