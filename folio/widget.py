"""Now-playing widget: poll state machine and repeating poll task."""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .errors import NowPlayingError
from .models import NowPlayingView, TrackSnapshot
from .sources import NowPlayingSource

DEFAULT_POLL_INTERVAL = 3.0


class WidgetState(str, Enum):
    LOADING = "loading"
    SHOWING = "showing"
    HIDDEN = "hidden"


@dataclass
class PollState:
    """Current widget state. ``error`` is diagnostic and never rendered."""
    state: WidgetState = WidgetState.LOADING
    track: Optional[TrackSnapshot] = None
    error: Optional[str] = None


class NowPlayingWidget:
    """Owns polling of a now-playing source and the render-or-hide decision.

    ``mount()`` polls once right away and then every ``poll_interval`` seconds
    until ``unmount()``. A tick that comes due while the previous poll is
    still running is skipped, so polls never overlap. Each mount is its own
    generation: a poll only updates the state of the generation it started in.
    """

    def __init__(
        self,
        source: NowPlayingSource,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        logger: Optional[logging.Logger] = None,
    ):
        self.source = source
        self.poll_interval = poll_interval
        self.logger = logger or logging.getLogger("folio.widget")
        self.status = PollState()
        self._ticker: Optional[asyncio.Task] = None
        self._in_flight: Optional[asyncio.Task] = None
        self._generation = 0

    @property
    def mounted(self) -> bool:
        return self._ticker is not None and not self._ticker.done()

    async def poll(self) -> PollState:
        """Run one poll and apply its outcome. Returns the resulting state."""
        generation = self._generation
        try:
            track = await self.source.fetch_current_track()
        except NowPlayingError as e:
            if not self._apply(PollState(state=WidgetState.HIDDEN, error=e.message), generation):
                return self.status
            if e.detail:
                self.logger.warning(f"Now playing ({self.source.name}): {e.message}: {e.detail}")
            else:
                self.logger.warning(f"Now playing ({self.source.name}): {e.message}")
            return self.status

        if track is None:
            self._apply(PollState(state=WidgetState.HIDDEN), generation)
        else:
            self._apply(PollState(state=WidgetState.SHOWING, track=track), generation)
        return self.status

    def _apply(self, new_state: PollState, generation: int) -> bool:
        if generation != self._generation:
            self.logger.debug("Discarding poll result from an earlier mount")
            return False
        if new_state.state != self.status.state:
            self.logger.debug(f"Widget state {self.status.state.value} -> {new_state.state.value}")
        self.status = new_state
        return True

    def mount(self) -> asyncio.Task:
        """Start polling on the running event loop."""
        if self.mounted:
            return self._ticker
        self._generation += 1
        self._in_flight = None
        self.source.resume()
        self._ticker = asyncio.create_task(self._run())
        self.logger.info(
            f"Now playing widget mounted (source: {self.source.name}, "
            f"interval: {self.poll_interval}s)"
        )
        return self._ticker

    async def unmount(self) -> None:
        """Stop polling.

        An in-flight poll may finish its current request but starts no new
        one, and its result is dropped. Returns once that poll has settled.
        """
        self._generation += 1
        self.source.stop()
        ticker, self._ticker = self._ticker, None
        in_flight, self._in_flight = self._in_flight, None
        if ticker is None:
            return
        ticker.cancel()
        try:
            await ticker
        except asyncio.CancelledError:
            pass
        if in_flight is not None:
            await in_flight
        self.logger.info("Now playing widget unmounted")

    async def _run(self) -> None:
        while True:
            if self._in_flight is not None and not self._in_flight.done():
                self.logger.debug("Previous poll still running, skipping tick")
            else:
                self._in_flight = asyncio.create_task(self._guarded_poll())
            await asyncio.sleep(self.poll_interval)

    async def _guarded_poll(self) -> None:
        generation = self._generation
        try:
            await self.poll()
        except Exception as e:
            failed = PollState(state=WidgetState.HIDDEN, error=str(e) or type(e).__name__)
            if not self._apply(failed, generation):
                return
            self.logger.exception(f"Unexpected error while polling now playing: {e}")

    def view(self) -> Optional[NowPlayingView]:
        """Return what to render, or None to render nothing."""
        if self.status.state != WidgetState.SHOWING or self.status.track is None:
            return None
        return self.source.display(self.status.track)
