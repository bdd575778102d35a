"""Tests for transcript-studio configuration loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from transcript_studio.config import ConfigError, Settings, load_settings, parse_speaker_list


class TestLoadSettingsDefaults:
    """Nothing is required; an empty environment gives defaults."""

    def test_empty_environment(self, clean_env: None) -> None:
        """No variables set returns the default Settings."""
        settings = load_settings()

        assert settings == Settings()
        assert settings.transcripts_root is None
        assert settings.default_speakers == ()
        assert settings.log_level == "INFO"
        assert settings.log_file is None

    def test_blank_values_are_ignored(
        self, clean_env: None, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Whitespace-only values behave like unset ones."""
        monkeypatch.setenv("TRANSCRIPTS_ROOT", "   ")
        monkeypatch.setenv("KNOWN_SPEAKERS", " , ")
        monkeypatch.setenv("LOG_LEVEL", "")

        assert load_settings() == Settings()


class TestLoadSettingsValues:
    """Each variable is read and converted."""

    def test_transcripts_root(
        self, clean_env: None, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        """TRANSCRIPTS_ROOT pointing at a directory becomes a Path."""
        monkeypatch.setenv("TRANSCRIPTS_ROOT", str(tmp_path))

        assert load_settings().transcripts_root == tmp_path

    def test_known_speakers_keep_order(
        self, clean_env: None, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """KNOWN_SPEAKERS is split on commas and keeps its order."""
        monkeypatch.setenv("KNOWN_SPEAKERS", "Stephen, Stan ,Ava")

        assert load_settings().default_speakers == ("Stephen", "Stan", "Ava")

    def test_log_level_is_uppercased(
        self, clean_env: None, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """LOG_LEVEL=debug is honoured as DEBUG."""
        monkeypatch.setenv("LOG_LEVEL", "debug")

        assert load_settings().log_level == "DEBUG"

    def test_log_file(
        self, clean_env: None, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        """LOG_FILE becomes a Path; the file need not exist yet."""
        monkeypatch.setenv("LOG_FILE", str(tmp_path / "studio.log"))

        assert load_settings().log_file == tmp_path / "studio.log"


class TestLoadSettingsInvalid:
    """Invalid values raise ConfigError naming the variable."""

    def test_missing_root_directory(
        self, clean_env: None, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        monkeypatch.setenv("TRANSCRIPTS_ROOT", str(tmp_path / "nope"))

        with pytest.raises(ConfigError, match="TRANSCRIPTS_ROOT"):
            load_settings()

    def test_root_is_a_file(
        self, clean_env: None, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        file_path = tmp_path / "file.txt"
        file_path.write_text("x", encoding="utf-8")
        monkeypatch.setenv("TRANSCRIPTS_ROOT", str(file_path))

        with pytest.raises(ConfigError, match="not a directory"):
            load_settings()

    def test_bad_log_level(self, clean_env: None, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LOG_LEVEL", "LOUD")

        with pytest.raises(ConfigError, match="LOG_LEVEL"):
            load_settings()

    def test_all_problems_reported(
        self, clean_env: None, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        """Both offending variables appear in one message."""
        monkeypatch.setenv("TRANSCRIPTS_ROOT", str(tmp_path / "nope"))
        monkeypatch.setenv("LOG_LEVEL", "LOUD")

        with pytest.raises(ConfigError) as exc_info:
            load_settings()

        assert "TRANSCRIPTS_ROOT" in str(exc_info.value)
        assert "LOG_LEVEL" in str(exc_info.value)


class TestParseSpeakerList:
    """Comma-separated speaker lists."""

    def test_trims_and_drops_blanks(self) -> None:
        assert parse_speaker_list(" a ,, b ,") == ("a", "b")

    def test_drops_duplicates_keeping_first(self) -> None:
        assert parse_speaker_list("Stan,Stephen,Stan") == ("Stan", "Stephen")

    def test_empty(self) -> None:
        assert parse_speaker_list("") == ()


class TestSettingsImmutability:
    def test_settings_is_frozen(self) -> None:
        settings = Settings()

        with pytest.raises(AttributeError):
            settings.log_level = "DEBUG"  # type: ignore[misc]
