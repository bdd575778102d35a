"""Pydantic model for the ``meta.json`` sidecar.

Each transcript folder carries a ``meta.json`` next to its text and audio
files.  :class:`TranscriptMetadata` validates what is read from disk and
renders what is written back, using the camelCase keys of the on-disk
format:

``id``, ``title``, ``dateImported``, ``lastEdited`` (ISO 8601 strings),
``referencePath``, ``editablePath``, ``audioPath`` (relative to the
folder, ``""`` when absent), ``speakers`` (list of ids) and
``numSpeakers``.
"""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

METADATA_FILENAME = "meta.json"


def format_timestamp(value: datetime) -> str:
    """Render *value* as an ISO 8601 string at second precision.

    Aware datetimes are converted to UTC and written with a ``Z`` suffix.
    """
    value = value.replace(microsecond=0)
    if value.tzinfo is None:
        return value.isoformat()
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


class TranscriptMetadata(BaseModel):
    """Contents of a transcript folder's ``meta.json``.

    Keys not listed here are kept as extra fields so a round trip through
    this model never drops data written by other tools.

    Attributes:
        id: Stable transcript id.
        title: Display title.
        date_imported: First import time, or ``None`` if unknown.
        last_edited: Last content change, or ``None`` if unknown.
        reference_path: Reference text file, relative to the folder.
        editable_path: Editable text file, relative to the folder.
        audio_path: Audio file, relative to the folder.
        speakers: Speaker ids in label-matching order.
        num_speakers: ``len(speakers)`` at the time of writing.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str = ""
    title: str = ""
    date_imported: datetime | None = Field(default=None, alias="dateImported")
    last_edited: datetime | None = Field(default=None, alias="lastEdited")
    reference_path: str = Field(default="", alias="referencePath")
    editable_path: str = Field(default="", alias="editablePath")
    audio_path: str = Field(default="", alias="audioPath")
    speakers: list[str] = Field(default_factory=list)
    num_speakers: int = Field(default=0, alias="numSpeakers")

    @field_validator("date_imported", "last_edited", mode="before")
    @classmethod
    def _parse_timestamp(cls, value: datetime | str | None) -> datetime | None:
        """Accept ISO 8601 strings; treat an empty string as missing."""
        if isinstance(value, str):
            if not value.strip():
                return None
            return datetime.fromisoformat(value.strip())
        return value

    @field_validator("speakers", mode="before")
    @classmethod
    def _keep_string_speakers(cls, value: object) -> object:
        """Trim string entries and drop anything that is not a non-empty string."""
        if isinstance(value, list):
            return [item.strip() for item in value if isinstance(item, str) and item.strip()]
        return value

    @field_serializer("date_imported", "last_edited")
    def _serialize_timestamp(self, value: datetime | None) -> str | None:
        return format_timestamp(value) if value is not None else None

    def to_json(self) -> str:
        """Serialise with on-disk key names and 4-space indentation."""
        return self.model_dump_json(by_alias=True, indent=4, exclude_none=True)
