"""Tests for Settings configuration class."""

from pathlib import Path

import pytest

ENV_VARS = [
    "DATA_DIR",
    "ARTIFACT_DB_PATH",
    "PROFILES_DIR",
    "OUTPUT_DIR",
    "API_BASE_URL",
    "LOG_LEVEL",
    "LOG_FILE",
]


@pytest.fixture
def clean_env(monkeypatch):
    """Remove settings env vars so defaults apply."""
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)


class TestSettingsDefaults:
    """Test that Settings loads sensible defaults."""

    def test_settings_loads_with_defaults(self, clean_env):
        """Settings should load with default values when no env vars are set."""
        from src.config.settings import Settings

        settings = Settings(_env_file=None)

        assert settings.data_dir == Path("./data")
        assert settings.artifact_db_path == Path("./data/artifacts.db")
        assert settings.profiles_dir == Path("./data/profiles")
        assert settings.output_dir == Path("./artifacts")
        assert settings.api_base_url == "http://localhost:3001"
        assert settings.log_level == "INFO"
        assert settings.log_file is None


class TestSettingsFromEnvironment:
    """Test that Settings reads from environment variables."""

    def test_settings_reads_paths_from_env(self, clean_env, monkeypatch):
        """Settings should read path configurations from environment."""
        monkeypatch.setenv("ARTIFACT_DB_PATH", "/custom/artifacts.db")
        monkeypatch.setenv("PROFILES_DIR", "/custom/profiles")

        from src.config.settings import Settings

        settings = Settings(_env_file=None)
        assert settings.artifact_db_path == Path("/custom/artifacts.db")
        assert settings.profiles_dir == Path("/custom/profiles")

    def test_api_base_url_trailing_slash_removed(self, clean_env, monkeypatch):
        """API_BASE_URL should be stored without a trailing slash."""
        monkeypatch.setenv("API_BASE_URL", "https://api.example.com/")

        from src.config.settings import Settings

        settings = Settings(_env_file=None)
        assert settings.api_base_url == "https://api.example.com"

    def test_log_level_is_uppercased(self, clean_env, monkeypatch):
        """LOG_LEVEL should be normalised to upper case."""
        monkeypatch.setenv("LOG_LEVEL", "debug")

        from src.config.settings import Settings

        assert Settings(_env_file=None).log_level == "DEBUG"


class TestSettingsValidation:
    """Test that Settings validates values correctly."""

    def test_settings_rejects_unknown_log_level(self, clean_env, monkeypatch):
        """Settings should only accept known log levels."""
        monkeypatch.setenv("LOG_LEVEL", "chatty")

        from src.config.settings import Settings

        with pytest.raises(ValueError):
            Settings(_env_file=None)

    def test_settings_rejects_non_http_base_url(self, clean_env, monkeypatch):
        """API_BASE_URL must be an http(s) URL."""
        monkeypatch.setenv("API_BASE_URL", "localhost:3001")

        from src.config.settings import Settings

        with pytest.raises(ValueError):
            Settings(_env_file=None)


class TestSettingsSingleton:
    """Test the get_settings/reset_settings helpers."""

    def test_get_settings_returns_same_instance(self, clean_env):
        """get_settings should cache the instance until reset."""
        from src.config.settings import get_settings, reset_settings

        reset_settings()
        first = get_settings()
        assert get_settings() is first

        reset_settings()
        assert get_settings() is not first
        reset_settings()
