"""
Fixed-interval tick source.

TickClock does not run a thread. Callers ask it how many ticks have fallen
due since they last asked and apply that many simulator ticks themselves.
Stopping a clock is final; a new session gets a new clock, so an old tick
stream can never reach a new state.
"""

import logging
import time
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class TickClock:
    """Counts whole tick intervals elapsed on an injectable clock."""

    def __init__(self, interval: float = 1.0, clock: Callable[[], float] = time.monotonic):
        """
        Args:
            interval: Seconds per tick
            clock: Monotonic time source (tests pass a fake)
        """
        if interval <= 0:
            raise ValueError(f"Tick interval must be positive, got {interval}")
        self.interval = interval
        self._clock = clock
        self._anchor: Optional[float] = None
        self._stopped = False

    @property
    def running(self) -> bool:
        return self._anchor is not None and not self._stopped

    @property
    def stopped(self) -> bool:
        return self._stopped

    def start(self) -> None:
        """Begin counting from now."""
        if self._stopped:
            raise RuntimeError("TickClock was stopped; create a new one")
        self._anchor = self._clock()

    def due(self) -> int:
        """
        Consume and return the number of ticks due since the last call.

        Partial intervals carry over to the next call.
        """
        if not self.running:
            return 0
        elapsed = self._clock() - self._anchor
        ticks = int(elapsed // self.interval)
        if ticks > 0:
            self._anchor += ticks * self.interval
        return ticks

    def pause(self) -> None:
        """Stop counting; the partial interval in flight is dropped."""
        self._anchor = None

    def resume(self) -> None:
        """Start a fresh interval from now."""
        if not self._stopped:
            self._anchor = self._clock()

    def stop(self) -> None:
        """Tear the tick stream down for good."""
        self._anchor = None
        self._stopped = True
        logger.debug("Tick clock stopped")
