"""Shared fixtures for folio tests."""

import os

import pytest

from folio.config import Config


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every FOLIO_* variable for the duration of a test."""
    for key in list(os.environ):
        if key.startswith("FOLIO_"):
            monkeypatch.delenv(key, raising=False)
    return monkeypatch


@pytest.fixture
def spotify_config() -> Config:
    """Config with a full set of Spotify credentials and a current token."""
    return Config(
        spotify_client_id="client-id",
        spotify_client_secret="client-secret",
        spotify_refresh_token="refresh-token",
        spotify_access_token="old-token",
    )
