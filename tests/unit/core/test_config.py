"""Tests for configuration management."""

from __future__ import annotations

from pathlib import Path

import pytest

from stress_tracker.core.config import (
    GameSettings,
    Settings,
    StorageSettings,
    clear_settings_cache,
    get_settings,
)
from stress_tracker.core.exceptions import ConfigurationError


class TestStorageSettings:
    """Tests for StorageSettings configuration."""

    def test_defaults(self) -> None:
        """Test default storage settings."""
        settings = StorageSettings()

        assert settings.backend == "memory"
        assert settings.quota_bytes is None
        assert settings.database_path.name == "stress_tracker.db"

    def test_env_override(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test storage settings read from the environment."""
        db_path = tmp_path / "custom.db"
        monkeypatch.setenv("STRESS_TRACKER_STORAGE_BACKEND", "sqlite")
        monkeypatch.setenv("STRESS_TRACKER_STORAGE_DATABASE_PATH", str(db_path))
        monkeypatch.setenv("STRESS_TRACKER_STORAGE_QUOTA_BYTES", "2048")

        settings = StorageSettings()

        assert settings.backend == "sqlite"
        assert settings.database_path == db_path
        assert settings.quota_bytes == 2048

    def test_rejects_unknown_backend(self) -> None:
        """Test that only known backends are accepted."""
        with pytest.raises(ValueError):
            StorageSettings(backend="redis")  # type: ignore[arg-type]


class TestGameSettings:
    """Tests for GameSettings configuration."""

    def test_defaults(self) -> None:
        """Test default game settings."""
        settings = GameSettings()

        assert settings.panic_table_path is None
        assert settings.dice_seed is None
        assert settings.nerve_of_steel_modifier == -2

    def test_missing_panic_table_path(self, tmp_path: Path) -> None:
        """Test that a missing panic table file is a configuration error."""
        with pytest.raises(ConfigurationError) as exc_info:
            GameSettings(panic_table_path=tmp_path / "nope.json")

        assert exc_info.value.details["config_key"] == "panic_table_path"

    def test_positive_modifier_rejected(self) -> None:
        """Test that the talent modifier cannot be a penalty."""
        with pytest.raises(ValueError):
            GameSettings(nerve_of_steel_modifier=1)


class TestSettings:
    """Tests for main Settings configuration."""

    def test_default_settings(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test default settings initialization."""
        monkeypatch.chdir(tmp_path)

        settings = Settings()

        assert settings.app_name == "Stress Tracker"
        assert settings.debug is False
        assert settings.log_level == "INFO"
        assert settings.log_json is False
        assert isinstance(settings.storage, StorageSettings)
        assert isinstance(settings.game, GameSettings)

    def test_env_vars(self, mock_env_vars: dict[str, str]) -> None:
        """Test settings loaded from environment variables."""
        settings = Settings()

        assert settings.debug is True
        assert settings.log_level == "DEBUG"
        assert settings.storage.backend == "sqlite"
        assert str(settings.storage.database_path) == mock_env_vars["STRESS_TRACKER_STORAGE_DATABASE_PATH"]
        assert settings.game.dice_seed == 42


class TestGetSettings:
    """Tests for get_settings singleton function."""

    def test_caching(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that settings are cached."""
        monkeypatch.chdir(tmp_path)

        assert get_settings() is get_settings()

    def test_cache_clear(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that clearing the cache reloads settings."""
        monkeypatch.chdir(tmp_path)
        first = get_settings()

        monkeypatch.setenv("STRESS_TRACKER_DEBUG", "true")
        clear_settings_cache()
        second = get_settings()

        assert first is not second
        assert second.debug is True

    def test_invalid_settings_wrapped(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that load failures surface as ConfigurationError."""
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("STRESS_TRACKER_LOG_LEVEL", "LOUD")

        with pytest.raises(ConfigurationError):
            get_settings()
