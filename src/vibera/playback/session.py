"""
DJ session: the single owner of PlaybackState.

The session fetches a setlist, then plays it by catching up on the ticks its
TickClock reports as due. Ticks are applied only inside session calls, so
there is no background writer. The lock serialises the web server's request
threads.
"""

import logging
import threading
import time
from typing import Any, Callable, Dict, Optional

from ..models import PlaybackState, Setlist, SetlistParams, setlist_duration_seconds
from . import simulator
from .clock import TickClock
from .decks import build_decks, crossfader_percent, is_last_track, tracks_remaining, upcoming_queue

logger = logging.getLogger(__name__)


class NoActiveSessionError(RuntimeError):
    """Raised when an intent arrives while no set is loaded."""
    pass


class DJSession:
    """One party: params, setlist, caption, playback state and tick clock."""

    def __init__(
        self,
        source,
        tick_interval: float = 1.0,
        default_volume: float = 0.8,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Args:
            source: SetlistSource (anything with generate_setlist/describe_vibe)
            tick_interval: Seconds per simulator tick
            default_volume: Volume for a fresh session
            clock: Monotonic time source handed to each TickClock
        """
        self.source = source
        self.tick_interval = tick_interval
        self.default_volume = default_volume
        self._clock = clock
        self._lock = threading.Lock()

        self.params: Optional[SetlistParams] = None
        self.setlist: Setlist = ()
        self.caption = ""
        self.state: PlaybackState = simulator.initial_state(volume=default_volume)
        self._ticks: Optional[TickClock] = None

    @classmethod
    def from_config(cls, source, config, clock: Callable[[], float] = time.monotonic) -> "DJSession":
        return cls(
            source,
            tick_interval=config.get("playback", "tick_interval_seconds", 1.0),
            default_volume=config.get("playback", "default_volume", 0.8),
            clock=clock,
        )

    @property
    def is_active(self) -> bool:
        return self.params is not None

    def start(self, params: SetlistParams) -> Dict[str, Any]:
        """
        Load a new set and start playing it.

        The previous tick stream is torn down before the remote calls, so
        nothing ticks while the setlist is being fetched.

        Returns:
            Snapshot of the new session
        """
        with self._lock:
            self._teardown()
            logger.info(f"🎵 Starting set for {params.scene!r}")

            setlist = self.source.generate_setlist(params)
            caption = self.source.describe_vibe(setlist)

            self.params = params
            self.setlist = setlist
            self.caption = caption
            self.state = simulator.initial_state(volume=self.state.volume, playing=True)
            self._ticks = TickClock(self.tick_interval, clock=self._clock)
            self._ticks.start()

            if not setlist:
                logger.warning("Set started with no tracks; playback will idle")
            return self._snapshot()

    def advance(self) -> PlaybackState:
        """Apply every tick that has fallen due."""
        with self._lock:
            self._catch_up()
            return self.state

    def toggle(self) -> PlaybackState:
        """Flip play/pause."""
        with self._lock:
            self._require_active()
            self._catch_up()
            self.state = simulator.toggle(self.state)
            if self.state.playing:
                self._ticks.resume()
            else:
                self._ticks.pause()
            logger.info("▶️  Resumed" if self.state.playing else "⏸️  Paused")
            return self.state

    def set_volume(self, volume: float) -> PlaybackState:
        with self._lock:
            self._require_active()
            self._catch_up()
            self.state = simulator.set_volume(self.state, volume)
            return self.state

    def stop(self) -> None:
        """End the set and discard everything it loaded."""
        with self._lock:
            self._teardown()
            logger.info("⏹️  Set stopped")

    def snapshot(self) -> Dict[str, Any]:
        """JSON-ready view of the session for the UI."""
        with self._lock:
            self._catch_up()
            return self._snapshot()

    def _catch_up(self) -> None:
        if self._ticks is None:
            return
        due = self._ticks.due()
        # A full pass over the set returns to the same state
        cycle = setlist_duration_seconds(self.setlist)
        if cycle and due > cycle:
            due %= cycle
        for _ in range(due):
            self.state = simulator.tick(self.state, self.setlist)

    def _require_active(self) -> None:
        if not self.is_active:
            raise NoActiveSessionError("No set is loaded")

    def _teardown(self) -> None:
        if self._ticks is not None:
            self._ticks.stop()
            self._ticks = None
        self.params = None
        self.setlist = ()
        self.caption = ""
        self.state = simulator.stop(self.state)

    def _snapshot(self) -> Dict[str, Any]:
        if not self.is_active:
            return {"active": False, "state": self.state.to_dict()}

        state, setlist = self.state, self.setlist
        return {
            "active": True,
            "params": self.params.to_dict(),
            "caption": self.caption,
            "state": state.to_dict(),
            "decks": [deck.to_dict() for deck in build_decks(state, setlist)],
            "crossfaderPercent": crossfader_percent(state),
            "queue": upcoming_queue(state, setlist),
            "tracksRemaining": tracks_remaining(state, setlist),
            "isLastTrack": is_last_track(state, setlist),
            "trackCount": len(setlist),
        }
