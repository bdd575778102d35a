"""Tests for the meta.json pydantic model."""

from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from transcript_studio.models.metadata import TranscriptMetadata, format_timestamp


class TestTranscriptMetadataParsing:
    """Validation of on-disk JSON."""

    def test_camel_case_keys(self) -> None:
        meta = TranscriptMetadata.model_validate(
            {
                "id": "abc",
                "title": "Weekly sync",
                "dateImported": "2024-05-01T09:30:00Z",
                "lastEdited": "2024-05-02T10:00:00+00:00",
                "referencePath": "transcript.txt",
                "editablePath": "editable.txt",
                "audioPath": "audio.mp3",
                "speakers": ["Stephen", "Stan"],
                "numSpeakers": 2,
            }
        )

        assert meta.id == "abc"
        assert meta.reference_path == "transcript.txt"
        assert meta.audio_path == "audio.mp3"
        assert meta.speakers == ["Stephen", "Stan"]
        assert meta.num_speakers == 2
        assert meta.date_imported == datetime(2024, 5, 1, 9, 30, tzinfo=timezone.utc)

    def test_snake_case_names_accepted(self) -> None:
        meta = TranscriptMetadata(reference_path="a.txt", num_speakers=1)

        assert meta.reference_path == "a.txt"

    def test_empty_timestamps_are_none(self) -> None:
        meta = TranscriptMetadata.model_validate({"dateImported": "", "lastEdited": "  "})

        assert meta.date_imported is None
        assert meta.last_edited is None

    def test_bad_timestamp_raises(self) -> None:
        with pytest.raises(ValidationError):
            TranscriptMetadata.model_validate({"dateImported": "yesterday"})

    def test_non_string_speakers_dropped(self) -> None:
        meta = TranscriptMetadata.model_validate({"speakers": [" Stan ", 3, None, "", "Ava"]})

        assert meta.speakers == ["Stan", "Ava"]

    def test_unknown_keys_survive_round_trip(self) -> None:
        meta = TranscriptMetadata.model_validate({"id": "x", "lastPlaybackPositionMs": 1500})

        assert json.loads(meta.to_json())["lastPlaybackPositionMs"] == 1500

    def test_defaults(self) -> None:
        meta = TranscriptMetadata()

        assert meta.speakers == []
        assert meta.date_imported is None
        assert meta.editable_path == ""


class TestTranscriptMetadataSerialisation:
    """to_json output."""

    def test_uses_camel_case_and_indent(self) -> None:
        meta = TranscriptMetadata(
            id="abc",
            title="T",
            date_imported=datetime(2024, 5, 1, 9, 30, 15, 999, tzinfo=timezone.utc),
            speakers=["Stan"],
            num_speakers=1,
        )

        text = meta.to_json()
        data = json.loads(text)

        assert '\n    "id": "abc"' in text
        assert data["dateImported"] == "2024-05-01T09:30:15Z"
        assert data["numSpeakers"] == 1
        assert "lastEdited" not in data

    def test_round_trip(self) -> None:
        original = TranscriptMetadata(
            id="abc",
            title="T",
            last_edited=datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
            reference_path="transcript.txt",
            speakers=["A", "B"],
            num_speakers=2,
        )

        restored = TranscriptMetadata.model_validate_json(original.to_json())

        assert restored.model_dump() == original.model_dump()


class TestFormatTimestamp:
    def test_aware_converted_to_utc(self) -> None:
        value = datetime(2024, 5, 1, 11, 0, tzinfo=timezone(timedelta(hours=2)))

        assert format_timestamp(value) == "2024-05-01T09:00:00Z"

    def test_naive_kept_without_suffix(self) -> None:
        assert format_timestamp(datetime(2024, 5, 1, 9, 0, 0, 500)) == "2024-05-01T09:00:00"
