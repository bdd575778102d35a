"""Tests for the Speaker, Segment and Transcript dataclasses."""

from __future__ import annotations

import random
from pathlib import Path

from transcript_studio.models.transcript import Segment, Speaker, Transcript

# ---------------------------------------------------------------------------
# Speaker
# ---------------------------------------------------------------------------


class TestSpeaker:
    """Speaker identity, labels and colours."""

    def test_display_name_defaults_to_id(self) -> None:
        assert Speaker("Stan").display_name == "Stan"

    def test_explicit_display_name(self) -> None:
        speaker = Speaker("s1", "Stan Smith")

        assert speaker.to_label() == "Stan Smith:"
        assert speaker.is_valid()

    def test_blank_id_is_invalid(self) -> None:
        assert not Speaker("").is_valid()

    def test_random_color_in_range(self) -> None:
        speaker = Speaker("Stan")

        color = speaker.assign_random_color(random.Random(42))

        assert speaker.color == color
        assert len(color) == 3
        assert all(0 <= channel <= 255 for channel in color)

    def test_random_color_is_seedable(self) -> None:
        first = Speaker("a").assign_random_color(random.Random(7))
        second = Speaker("b").assign_random_color(random.Random(7))

        assert first == second


# ---------------------------------------------------------------------------
# Segment
# ---------------------------------------------------------------------------


class TestSegment:
    """Segment validity, text helpers and export format."""

    def test_valid(self) -> None:
        assert Segment("Stan", "hi").is_valid()

    def test_blank_text_invalid(self) -> None:
        assert not Segment("Stan", "  \n ").is_valid()

    def test_blank_speaker_invalid(self) -> None:
        assert not Segment("", "hi").is_valid()

    def test_starts_with_label(self) -> None:
        assert Segment("Stan", "Note: this").starts_with_label()
        assert not Segment("Stan", "a note: this").starts_with_label()
        assert not Segment("Stan", "no colon").starts_with_label()

    def test_append_text_adds_newline(self) -> None:
        segment = Segment("Stan", "one")

        segment.append_text("two")

        assert segment.text == "one\ntwo"

    def test_append_text_reuses_trailing_newline(self) -> None:
        segment = Segment("Stan", "one\n")

        segment.append_text("two")

        assert segment.text == "one\ntwo"

    def test_append_empty_is_noop(self) -> None:
        segment = Segment("Stan", "one")

        segment.append_text("")

        assert segment.text == "one"

    def test_clean_text(self) -> None:
        assert Segment("Stan", "  hi \n").clean_text() == "hi"

    def test_export_format(self) -> None:
        assert Segment("Stan", " hi \n").export_format() == "Stan:\nhi\n\n"


# ---------------------------------------------------------------------------
# Transcript
# ---------------------------------------------------------------------------


class TestTranscriptSpeakers:
    """Speaker registry on the transcript."""

    def test_add_speaker_if_missing(self) -> None:
        transcript = Transcript()

        assert transcript.add_speaker_if_missing("Stan")
        assert not transcript.add_speaker_if_missing("Stan")
        assert transcript.speakers == [Speaker("Stan", "Stan")]

    def test_find_speaker_index(self, sample_transcript: Transcript) -> None:
        assert sample_transcript.find_speaker_index("Stan") == 1
        assert sample_transcript.find_speaker_index("stan") == -1

    def test_speaker_from_id(self, sample_transcript: Transcript) -> None:
        assert sample_transcript.speaker_from_id("Stephen") == Speaker("Stephen")
        assert sample_transcript.speaker_from_id("Nobody") is None

    def test_rename_speaker(self, sample_transcript: Transcript) -> None:
        assert sample_transcript.rename_speaker("Stephen", "Steve")

        assert sample_transcript.speaker_ids() == ["Steve", "Stan"]
        assert [s.speaker_id for s in sample_transcript.segments] == ["Steve", "Stan", "Steve"]

    def test_rename_unknown_speaker(self, sample_transcript: Transcript) -> None:
        assert not sample_transcript.rename_speaker("Nobody", "X")

    def test_rename_onto_existing_folds(self, sample_transcript: Transcript) -> None:
        sample_transcript.rename_speaker("Stephen", "Stan")

        assert sample_transcript.speaker_ids() == ["Stan"]
        assert len(sample_transcript.segments_by_speaker("Stan")) == 3


class TestTranscriptSegments:
    """Segment helpers on the transcript."""

    def test_flags(self, sample_transcript: Transcript) -> None:
        assert not sample_transcript.is_empty()
        assert not sample_transcript.has_audio()
        assert not sample_transcript.has_editable()

        sample_transcript.audio_path = Path("a.mp3")

        assert sample_transcript.has_audio()

    def test_segments_by_speaker(self, sample_transcript: Transcript) -> None:
        texts = [s.text for s in sample_transcript.segments_by_speaker("Stephen")]

        assert texts == ["Hello there\nHow are you?", "Glad to hear it."]

    def test_merge_adjacent_same_speaker(self) -> None:
        transcript = Transcript(
            segments=[
                Segment("A", "1"),
                Segment("A", "2"),
                Segment("B", "3"),
                Segment("A", "4"),
                Segment("A", "5"),
            ]
        )

        transcript.merge_adjacent_same_speaker()

        assert [(s.speaker_id, s.text) for s in transcript.segments] == [
            ("A", "1\n2"),
            ("B", "3"),
            ("A", "4\n5"),
        ]

    def test_merge_is_idempotent(self) -> None:
        transcript = Transcript(segments=[Segment("A", "1"), Segment("A", "2"), Segment("B", "3")])

        transcript.merge_adjacent_same_speaker()
        once = list(transcript.segments)
        transcript.merge_adjacent_same_speaker()

        assert transcript.segments == once

    def test_merge_keeps_list_identity(self) -> None:
        transcript = Transcript(segments=[Segment("A", "1"), Segment("A", "2")])
        segments = transcript.segments

        transcript.merge_adjacent_same_speaker()

        assert transcript.segments is segments
        assert segments == [Segment("A", "1\n2")]

    def test_merge_does_not_alias_inputs(self) -> None:
        first = Segment("A", "1")
        transcript = Transcript(segments=[first, Segment("A", "2")])

        transcript.merge_adjacent_same_speaker()

        assert first.text == "1"

    def test_all_text(self, sample_transcript: Transcript) -> None:
        assert sample_transcript.all_text() == (
            "Stephen:\nHello there\nHow are you?\n\n"
            "Stan:\nGreat, thanks!\n\n"
            "Stephen:\nGlad to hear it.\n"
        )

    def test_clear(self, sample_transcript: Transcript) -> None:
        sample_transcript.last_playback_position_ms = 1200
        sample_transcript.folder_path = Path("/tmp/x")

        sample_transcript.clear()

        assert sample_transcript.is_empty()
        assert sample_transcript.speakers == []
        assert sample_transcript.id == ""
        assert sample_transcript.title == ""
        assert sample_transcript.folder_path is None
        assert sample_transcript.last_playback_position_ms == 1200
