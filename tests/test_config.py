"""Tests for configuration loading."""

from pathlib import Path

import pytest

from speedread.config import Config, get_config, reset_config


@pytest.fixture(autouse=True)
def clean_config():
    """Reset the cached config around each test."""
    reset_config()
    yield
    reset_config()


class TestConfig:
    """Tests for Config."""

    def test_defaults(self, monkeypatch):
        """Test defaults when no variables are set."""
        for name in (
            "SPEEDREAD_DB_PATH",
            "SPEEDREAD_DEFAULT_PACE",
            "SPEEDREAD_DEFAULT_CHUNK_SIZE",
            "SPEEDREAD_QUESTION_COUNT",
            "SPEEDREAD_LOG_LEVEL",
        ):
            monkeypatch.delenv(name, raising=False)

        config = Config.from_env()
        assert config.db_path == Path.home() / ".speedread" / "speedread.db"
        assert config.default_pace_wpm == 300
        assert config.default_chunk_size == 3
        assert config.question_count == 5
        assert config.log_level == "WARNING"

    def test_from_env(self, monkeypatch, tmp_path):
        """Test every variable is read."""
        monkeypatch.setenv("SPEEDREAD_DB_PATH", str(tmp_path / "x.db"))
        monkeypatch.setenv("SPEEDREAD_DEFAULT_PACE", "450")
        monkeypatch.setenv("SPEEDREAD_DEFAULT_CHUNK_SIZE", "5")
        monkeypatch.setenv("SPEEDREAD_QUESTION_COUNT", "3")
        monkeypatch.setenv("SPEEDREAD_LOG_LEVEL", "debug")

        config = Config.from_env()
        assert config.db_path == tmp_path / "x.db"
        assert config.default_pace_wpm == 450
        assert config.default_chunk_size == 5
        assert config.question_count == 3
        assert config.log_level == "DEBUG"
        assert config.validate() == []

    def test_validate_ranges(self, tmp_path):
        """Test out-of-range defaults are reported."""
        config = Config(
            db_path=tmp_path / "x.db",
            default_pace_wpm=50,
            default_chunk_size=10,
            question_count=0,
            log_level="INFO",
        )
        errors = config.validate()
        assert len(errors) == 3
        assert any("pace" in e for e in errors)

    def test_get_config_cached(self, monkeypatch):
        """Test the config is cached until reset."""
        monkeypatch.setenv("SPEEDREAD_DEFAULT_PACE", "500")
        first = get_config()
        monkeypatch.setenv("SPEEDREAD_DEFAULT_PACE", "600")
        assert get_config() is first
        reset_config()
        assert get_config().default_pace_wpm == 600
