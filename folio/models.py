"""Data models for tokens and now-playing tracks."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

ELLIPSIS = "..."
AGGREGATOR_TITLE_LIMIT = 40
AGGREGATOR_ARTIST_LIMIT = 50


@dataclass
class TokenResult:
    """Outcome of a token request. Either a token or an error is set."""
    access_token: Optional[str] = None
    expires_in: Optional[int] = None
    refresh_token: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None and bool(self.access_token)

    def to_dict(self) -> Dict[str, Any]:
        if self.error is not None:
            return {"error": self.error}
        return {"access_token": self.access_token, "expires_in": self.expires_in}


@dataclass
class TrackSnapshot:
    """What is playing at one poll tick. Replaced wholesale every tick."""
    name: str
    artists: List[str] = field(default_factory=list)
    album_art_url: Optional[str] = None
    is_playing: bool = True

    @classmethod
    def from_spotify_item(cls, item: Dict[str, Any], is_playing: bool = True) -> "TrackSnapshot":
        """Build a snapshot from the ``item`` of a currently-playing response."""
        artists = [a.get("name", "") for a in item.get("artists") or []]
        images = (item.get("album") or {}).get("images") or []
        return cls(
            name=item.get("name", ""),
            artists=artists,
            album_art_url=select_album_art(images),
            is_playing=bool(is_playing),
        )

    @classmethod
    def from_presence(cls, presence: Dict[str, Any]) -> Optional["TrackSnapshot"]:
        """Build a snapshot from an aggregator presence payload.

        Returns None when the user is not listening or song/artist are missing.
        """
        if not presence.get("listening_to_spotify"):
            return None
        spotify = presence.get("spotify") or {}
        song = spotify.get("song")
        artist = spotify.get("artist")
        if not song or not artist:
            return None
        return cls(
            name=song,
            artists=[artist],
            album_art_url=spotify.get("album_art") or spotify.get("albumArt"),
        )

    @property
    def artist_line(self) -> str:
        return ", ".join(self.artists)


@dataclass
class NowPlayingView:
    """Display-ready strings for the widget."""
    title: str
    artists: str
    album_art_url: Optional[str] = None

    @property
    def alt_text(self) -> str:
        return f"{self.title} by {self.artists}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "artists": self.artists,
            "album_art_url": self.album_art_url,
        }


def select_album_art(images: List[Dict[str, Any]]) -> Optional[str]:
    """Return the url of the tallest image; the first one wins a tie."""
    best = None
    for image in images:
        if best is None or (image.get("height") or 0) > (best.get("height") or 0):
            best = image
    return best.get("url") if best else None


def truncate(text: str, limit: int) -> str:
    """Cut text to ``limit`` characters, marking the cut with an ellipsis."""
    if len(text) <= limit:
        return text
    return text[:limit] + ELLIPSIS
