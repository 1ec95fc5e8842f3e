"""Tests for config module."""

import pytest

from folio.config import Config


class TestConfigLoad:
    """Tests for configuration loading."""

    def test_default_values(self, clean_env):
        """Should use default values when nothing is set."""
        config = Config.load()

        assert config.spotify_client_id is None
        assert config.spotify_access_token is None
        assert config.now_playing_source == "spotify"
        assert config.poll_interval == 3.0
        assert config.expose_refresh_endpoint is False
        assert config.log_level == "INFO"
        assert config.port == 8000
        assert config.helper_port == 3001

    def test_environment_variables(self, clean_env):
        """Should load from environment variables."""
        clean_env.setenv("FOLIO_SPOTIFY_CLIENT_ID", "abc")
        clean_env.setenv("FOLIO_POLL_INTERVAL", "5")
        clean_env.setenv("FOLIO_NOW_PLAYING_SOURCE", "Aggregator")
        clean_env.setenv("FOLIO_EXPOSE_REFRESH_ENDPOINT", "yes")
        clean_env.setenv("FOLIO_SITE_URL", "https://example.com/")

        config = Config.load()

        assert config.spotify_client_id == "abc"
        assert config.poll_interval == 5.0
        assert config.now_playing_source == "aggregator"
        assert config.expose_refresh_endpoint is True
        assert config.site_url == "https://example.com"

    def test_empty_values_count_as_unset(self, clean_env):
        """Blank variables should fall back to defaults."""
        clean_env.setenv("FOLIO_SPOTIFY_REFRESH_TOKEN", "  ")

        config = Config.load()

        assert config.spotify_refresh_token is None

    def test_config_file(self, clean_env, tmp_path):
        """Should load from config file."""
        config_path = tmp_path / "folio.conf"
        config_path.write_text(
            "# Spotify\n"
            "spotify_client_id = from-file\n"
            "\n"
            "PORT = 9000\n"
        )

        config = Config.load(str(config_path))

        assert config.spotify_client_id == "from-file"
        assert config.port == 9000

    def test_env_overrides_file(self, clean_env, tmp_path):
        """Environment variables should override config file."""
        config_path = tmp_path / "folio.conf"
        config_path.write_text("log_level = WARNING\nport = 9000\n")
        clean_env.setenv("FOLIO_LOG_LEVEL", "ERROR")

        config = Config.load(str(config_path))

        assert config.port == 9000  # From file
        assert config.log_level == "ERROR"  # From env (override)

    def test_missing_file_uses_defaults(self, clean_env, tmp_path):
        """A config file path that does not exist is ignored."""
        config = Config.load(str(tmp_path / "nope.conf"))
        assert config.port == 8000


class TestConfigHelpers:
    """Tests for credential checks and display."""

    @pytest.mark.parametrize("missing", [
        "spotify_client_id",
        "spotify_client_secret",
        "spotify_refresh_token",
    ])
    def test_has_spotify_credentials_requires_all(self, spotify_config, missing):
        setattr(spotify_config, missing, None)
        assert spotify_config.has_spotify_credentials() is False

    def test_has_spotify_credentials(self, spotify_config):
        assert spotify_config.has_spotify_credentials() is True

    def test_describe_masks_secrets(self, spotify_config):
        described = spotify_config.describe()

        assert described["spotify_client_id"] == "client-id"
        assert described["spotify_client_secret"] == "(set)"
        assert described["spotify_refresh_token"] == "(set)"
        assert "client-secret" not in str(described)

    def test_get_log_dir_creates(self, tmp_path):
        """Should create log directory if it doesn't exist."""
        config = Config(log_dir=str(tmp_path / "new_logs"))

        path = config.get_log_dir()
        assert path.exists()
        assert path.is_dir()
