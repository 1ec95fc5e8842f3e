"""Tests for the token helper CLI."""

import httpx
from click.testing import CliRunner
from unittest.mock import patch

from folio.models import TokenResult
from folio.token_helper import CallbackOutcome, handle_callback, main, token_lines

REDIRECT_URI = "http://localhost:3001/callback"


def mock_client(handler) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler))


class TestHandleCallback:
    """Tests for the local listener's request handling."""

    def test_other_path_is_not_found(self, spotify_config):
        outcome = handle_callback(spotify_config, "/favicon.ico", REDIRECT_URI)

        assert outcome.status == 404
        assert outcome.exit_code is None

    def test_authorization_error(self, spotify_config):
        outcome = handle_callback(spotify_config, "/callback?error=access_denied", REDIRECT_URI)

        assert outcome.status == 400
        assert outcome.exit_code == 1
        assert "access_denied" in outcome.body

    def test_missing_code(self, spotify_config):
        outcome = handle_callback(spotify_config, "/callback", REDIRECT_URI)

        assert outcome.status == 400
        assert outcome.exit_code == 1

    def test_success(self, spotify_config):
        client = mock_client(lambda request: httpx.Response(200, json={
            "access_token": "at",
            "refresh_token": "rt",
            "expires_in": 3600,
        }))

        outcome = handle_callback(spotify_config, "/callback?code=abc", REDIRECT_URI, client=client)

        assert outcome.status == 200
        assert outcome.exit_code == 0
        assert outcome.tokens.access_token == "at"
        assert outcome.tokens.refresh_token == "rt"

    def test_exchange_failure(self, spotify_config):
        client = mock_client(lambda request: httpx.Response(400, text="invalid_grant"))

        outcome = handle_callback(spotify_config, "/callback?code=abc", REDIRECT_URI, client=client)

        assert outcome.status == 500
        assert outcome.exit_code == 1
        assert outcome.message == "Token exchange failed: invalid_grant"

    def test_error_text_is_escaped(self, spotify_config):
        outcome = handle_callback(spotify_config, "/callback?error=<script>", REDIRECT_URI)

        assert "<script>" not in outcome.body


class TestTokenLines:
    def test_with_refresh_token(self):
        lines = token_lines(TokenResult(access_token="at", refresh_token="rt"))
        assert lines == [
            "FOLIO_SPOTIFY_ACCESS_TOKEN=at",
            "FOLIO_SPOTIFY_REFRESH_TOKEN=rt",
        ]

    def test_without_refresh_token(self):
        assert token_lines(TokenResult(access_token="at")) == ["FOLIO_SPOTIFY_ACCESS_TOKEN=at"]


class TestMain:
    """Tests for the folio-token command."""

    def test_missing_client_credentials_exits_1(self, clean_env):
        result = CliRunner().invoke(main, [])

        assert result.exit_code == 1
        assert "client id and client secret are required" in result.output

    def test_prints_tokens_and_exits_0(self, clean_env):
        clean_env.setenv("FOLIO_SPOTIFY_CLIENT_ID", "id")
        clean_env.setenv("FOLIO_SPOTIFY_CLIENT_SECRET", "secret")
        outcome = CallbackOutcome(
            status=200,
            body="",
            exit_code=0,
            tokens=TokenResult(access_token="at", refresh_token="rt", expires_in=3600),
        )

        with patch("folio.token_helper.wait_for_callback", return_value=outcome) as wait:
            result = CliRunner().invoke(main, ["--no-browser"])

        assert result.exit_code == 0
        assert "accounts.spotify.com/authorize" in result.output
        assert "FOLIO_SPOTIFY_ACCESS_TOKEN=at" in result.output
        assert "FOLIO_SPOTIFY_REFRESH_TOKEN=rt" in result.output
        wait.assert_called_once()
        assert wait.call_args[0][1] == 3001
        assert wait.call_args[0][2] == "http://localhost:3001/callback"

    def test_exchange_failure_exits_1(self, clean_env):
        clean_env.setenv("FOLIO_SPOTIFY_CLIENT_ID", "id")
        clean_env.setenv("FOLIO_SPOTIFY_CLIENT_SECRET", "secret")
        outcome = CallbackOutcome(status=500, body="", exit_code=1, message="Token exchange failed: nope")

        with patch("folio.token_helper.wait_for_callback", return_value=outcome):
            result = CliRunner().invoke(main, ["--no-browser"])

        assert result.exit_code == 1
        assert "Token exchange failed: nope" in result.output
