"""Configuration loading for folio."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

SECRET_FIELDS = (
    "spotify_client_secret",
    "spotify_refresh_token",
    "spotify_access_token",
)


@dataclass
class Config:
    """folio configuration settings."""
    spotify_client_id: Optional[str] = None
    spotify_client_secret: Optional[str] = None
    spotify_refresh_token: Optional[str] = None
    spotify_access_token: Optional[str] = None
    now_playing_source: str = "spotify"
    aggregator_user_id: Optional[str] = None
    aggregator_url: str = "https://api.lanyard.rest/v1/users"
    site_url: str = ""
    poll_interval: float = 3.0
    expose_refresh_endpoint: bool = False
    log_dir: str = "./logs"
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000
    helper_port: int = 3001

    @classmethod
    def load(cls, config_file: Optional[str] = None) -> "Config":
        """
        Load configuration from environment variables and optional config file.

        Environment variables take precedence over config file.

        Args:
            config_file: Optional path to config file

        Returns:
            Config instance with loaded values
        """
        defaults = cls()

        # Load from config file if provided
        file_config = {}
        if config_file and Path(config_file).exists():
            file_config = cls._parse_config_file(config_file)

        def lookup(key: str):
            value = os.environ.get(
                f"FOLIO_{key.upper()}",
                file_config.get(key, getattr(defaults, key))
            )
            # Empty strings count as unset
            if isinstance(value, str) and not value.strip():
                return getattr(defaults, key)
            return value.strip() if isinstance(value, str) else value

        expose_refresh_endpoint = lookup("expose_refresh_endpoint")
        # Handle string "true"/"false" from env vars
        if isinstance(expose_refresh_endpoint, str):
            expose_refresh_endpoint = expose_refresh_endpoint.lower() in ("true", "1", "yes")

        return cls(
            spotify_client_id=lookup("spotify_client_id"),
            spotify_client_secret=lookup("spotify_client_secret"),
            spotify_refresh_token=lookup("spotify_refresh_token"),
            spotify_access_token=lookup("spotify_access_token"),
            now_playing_source=str(lookup("now_playing_source")).lower(),
            aggregator_user_id=lookup("aggregator_user_id"),
            aggregator_url=str(lookup("aggregator_url")).rstrip("/"),
            site_url=str(lookup("site_url")).rstrip("/"),
            poll_interval=float(lookup("poll_interval")),
            expose_refresh_endpoint=expose_refresh_endpoint,
            log_dir=lookup("log_dir"),
            log_level=lookup("log_level"),
            host=lookup("host"),
            port=int(lookup("port")),
            helper_port=int(lookup("helper_port")),
        )

    @staticmethod
    def _parse_config_file(path: str) -> dict:
        """
        Parse a simple key=value config file.

        Args:
            path: Path to config file

        Returns:
            Dictionary of config values
        """
        config = {}
        with open(path, "r") as f:
            for line in f:
                line = line.strip()
                if not line or line.startswith("#"):
                    continue
                if "=" in line:
                    key, value = line.split("=", 1)
                    config[key.strip().lower()] = value.strip()
        return config

    def has_spotify_credentials(self) -> bool:
        """True when client id, secret and refresh token are all set."""
        return bool(
            self.spotify_client_id
            and self.spotify_client_secret
            and self.spotify_refresh_token
        )

    def describe(self) -> dict:
        """Return settings for display, with secrets masked."""
        out = {}
        for key, value in self.__dict__.items():
            if key in SECRET_FIELDS:
                value = "(set)" if value else "(not set)"
            out[key] = value
        return out

    def get_log_dir(self) -> Path:
        """Get absolute path to log directory."""
        path = Path(self.log_dir).resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path
