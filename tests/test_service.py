"""Tests for the folio service CLI."""

import logging

from click.testing import CliRunner

from folio.service import cli, setup_logging


class TestCheckCommand:
    """Tests for `folio check`."""

    def test_complete_credentials(self, clean_env):
        clean_env.setenv("FOLIO_SPOTIFY_CLIENT_ID", "id")
        clean_env.setenv("FOLIO_SPOTIFY_CLIENT_SECRET", "very-secret")
        clean_env.setenv("FOLIO_SPOTIFY_REFRESH_TOKEN", "refresh-secret")

        result = CliRunner().invoke(cli, ["check"])

        assert result.exit_code == 0
        assert "Spotify refresh credentials: complete" in result.output
        assert "very-secret" not in result.output
        assert "refresh-secret" not in result.output

    def test_static_token_only(self, clean_env):
        clean_env.setenv("FOLIO_SPOTIFY_ACCESS_TOKEN", "token")

        result = CliRunner().invoke(cli, ["check"])

        assert result.exit_code == 0
        assert "static access token only" in result.output

    def test_missing_credentials(self, clean_env):
        result = CliRunner().invoke(cli, ["check"])

        assert result.exit_code == 1
        assert "Spotify credentials: missing" in result.output

    def test_aggregator_requires_user_id(self, clean_env):
        clean_env.setenv("FOLIO_NOW_PLAYING_SOURCE", "aggregator")

        result = CliRunner().invoke(cli, ["check"])

        assert result.exit_code == 1
        assert "Aggregator user id is not set" in result.output


class TestSetupLogging:
    def test_writes_to_log_dir(self, tmp_path):
        logger = setup_logging(tmp_path / "logs", "debug")
        try:
            assert logger.level == logging.DEBUG
            assert (tmp_path / "logs" / "folio.log").exists()
        finally:
            for handler in list(logger.handlers):
                handler.close()
                logger.removeHandler(handler)
