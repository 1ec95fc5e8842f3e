"""Now-playing sources: direct Spotify polling and the presence aggregator."""

import logging
from typing import Awaitable, Callable, Optional

import httpx

from .config import Config
from .errors import ConfigurationMissing, NetworkFailure, UpstreamRejected, UpstreamUnauthorized
from .models import (
    AGGREGATOR_ARTIST_LIMIT,
    AGGREGATOR_TITLE_LIMIT,
    NowPlayingView,
    TokenResult,
    TrackSnapshot,
    truncate,
)
from .spotify_auth import refresh_access_token

logger = logging.getLogger("folio.sources")

CURRENTLY_PLAYING_URL = "https://api.spotify.com/v1/me/player/currently-playing"

Refresher = Callable[[], Awaitable[TokenResult]]


class NowPlayingSource:
    """Something that can report the track currently playing."""

    name = "base"
    stopped = False

    def stop(self) -> None:
        """Refuse to start further requests until resumed."""
        self.stopped = True

    def resume(self) -> None:
        self.stopped = False

    async def fetch_current_track(self) -> Optional[TrackSnapshot]:
        """
        Fetch the current track.

        Returns:
            TrackSnapshot, or None when nothing is playing

        Raises:
            NowPlayingError: when the track could not be determined
        """
        raise NotImplementedError

    def display(self, track: TrackSnapshot) -> NowPlayingView:
        """Turn a snapshot into display strings."""
        return NowPlayingView(
            title=track.name,
            artists=track.artist_line,
            album_art_url=track.album_art_url,
        )


class SpotifySource(NowPlayingSource):
    """Polls the Spotify Web API with a bearer token, refreshing on 401.

    A 401 triggers at most one refresh and one retried request per call.
    Once stopped, a call finishes its current request but neither refreshes
    nor retries.
    """

    name = "spotify"

    def __init__(
        self,
        config: Config,
        client: httpx.AsyncClient,
        refresher: Optional[Refresher] = None,
    ):
        """Initialize the source.

        Args:
            config: Configuration; its access token seeds the current token
            client: HTTP client used for every request
            refresher: Coroutine function returning a TokenResult.
                Defaults to the token refresh endpoint.
        """
        self.config = config
        self.client = client
        self.refresher = refresher or (lambda: refresh_access_token(config, client))
        self.access_token: Optional[str] = config.spotify_access_token

    async def refresh(self) -> Optional[str]:
        """Ask for a new access token; it replaces the current one on success."""
        if self.stopped:
            logger.debug("Source stopped, not refreshing the access token")
            return None
        result = await self.refresher()
        if not result.ok:
            logger.warning(f"Could not obtain Spotify access token: {result.error}")
            return None
        self.access_token = result.access_token
        return self.access_token

    async def fetch_current_track(self) -> Optional[TrackSnapshot]:
        token = self.access_token
        if not token:
            token = await self.refresh()
        if not token:
            raise ConfigurationMissing("Spotify access token not configured")
        return await self._fetch(token, attempt=1)

    async def _fetch(self, token: str, attempt: int) -> Optional[TrackSnapshot]:
        try:
            response = await self.client.get(
                CURRENTLY_PLAYING_URL,
                headers={"Authorization": f"Bearer {token}"},
            )
        except httpx.HTTPError as e:
            raise NetworkFailure("Error connecting to Spotify API", detail=str(e)) from e

        if response.status_code == 401 and attempt == 1:
            new_token = await self.refresh()
            if new_token and not self.stopped:
                return await self._fetch(new_token, attempt=2)
            raise UpstreamUnauthorized(
                "Invalid or expired access token", detail=response.text
            )

        if attempt > 1:
            # The retry only counts when it produces a track
            track = None
            if response.is_success and response.status_code != 204:
                track = self._parse(response)
            if track is None:
                raise UpstreamUnauthorized(
                    "Invalid or expired access token",
                    detail=f"retry returned HTTP {response.status_code}",
                )
            return track

        if response.status_code == 204:
            return None

        if not response.is_success:
            raise UpstreamRejected(
                "Failed to fetch currently playing track",
                status_code=response.status_code,
                detail=response.text,
            )

        return self._parse(response)

    @staticmethod
    def _parse(response: httpx.Response) -> Optional[TrackSnapshot]:
        try:
            data = response.json()
        except ValueError as e:
            raise NetworkFailure("Error connecting to Spotify API", detail=response.text) from e

        item = data.get("item") if isinstance(data, dict) else None
        if not item:
            return None
        return TrackSnapshot.from_spotify_item(item, is_playing=data.get("is_playing", True))


class AggregatorSource(NowPlayingSource):
    """Reads listening status from a presence aggregator keyed by user id.

    No token handling: the aggregator owns authentication with the music
    service.
    """

    name = "aggregator"

    def __init__(self, config: Config, client: httpx.AsyncClient):
        self.config = config
        self.client = client
        self.user_id = config.aggregator_user_id

    @property
    def feed_url(self) -> str:
        return f"{self.config.aggregator_url}/{self.user_id}"

    async def fetch_current_track(self) -> Optional[TrackSnapshot]:
        if not self.user_id:
            return None

        try:
            response = await self.client.get(self.feed_url)
        except httpx.HTTPError as e:
            raise NetworkFailure("Error connecting to presence feed", detail=str(e)) from e

        if not response.is_success:
            raise UpstreamRejected(
                "Failed to fetch presence",
                status_code=response.status_code,
                detail=response.text,
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise NetworkFailure("Error connecting to presence feed", detail=response.text) from e

        if not isinstance(payload, dict):
            return None
        # Feeds wrap presence as {"success": true, "data": {...}}
        presence = payload.get("data", payload)
        if not isinstance(presence, dict):
            return None
        return TrackSnapshot.from_presence(presence)

    def display(self, track: TrackSnapshot) -> NowPlayingView:
        return NowPlayingView(
            title=truncate(track.name, AGGREGATOR_TITLE_LIMIT),
            artists=truncate(track.artist_line, AGGREGATOR_ARTIST_LIMIT),
            album_art_url=track.album_art_url,
        )


def build_source(config: Config, client: httpx.AsyncClient) -> NowPlayingSource:
    """
    Select the now-playing source named by configuration.

    Args:
        config: Configuration instance
        client: HTTP client shared by the source

    Returns:
        The configured NowPlayingSource
    """
    if config.now_playing_source == AggregatorSource.name:
        return AggregatorSource(config, client)
    if config.now_playing_source != SpotifySource.name:
        logger.warning(
            f"Unknown now_playing_source '{config.now_playing_source}', using spotify"
        )
    return SpotifySource(config, client)
