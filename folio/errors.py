"""Failure kinds raised by now-playing sources."""

from typing import Optional


class NowPlayingError(Exception):
    """Base error for a poll that could not produce a track.

    ``message`` is the short indicator stored on the widget. ``detail`` holds
    diagnostic text (raw response bodies and the like) meant for logs only.
    """

    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.detail = detail


class ConfigurationMissing(NowPlayingError):
    """A required credential or identifier is absent."""
    pass


class UpstreamRejected(NowPlayingError):
    """Upstream answered with a non-success status."""

    def __init__(self, message: str, status_code: int, detail: Optional[str] = None):
        super().__init__(message, detail)
        self.status_code = status_code


class UpstreamUnauthorized(NowPlayingError):
    """Upstream answered 401 and refresh-and-retry did not recover."""
    pass


class NetworkFailure(NowPlayingError):
    """The request could not be completed."""
    pass
