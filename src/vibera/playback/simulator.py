"""
Playback Simulator: the pure state transition behind the two decks.

Each tick advances the current track by one second's worth of progress.
Past 90% the crossfader ramps linearly toward the other deck and reaches it
exactly at rollover, where the next track takes over. The setlist loops.

Decks are assigned by index parity: even indices play on the left deck,
odd indices on the right. Use deck_side() and resting_crossfade() rather
than inline modulo arithmetic so the simulator and the presentation layer
agree.
"""

import logging
from dataclasses import replace
from typing import Optional, Tuple

from ..models import PlaybackState, Setlist, Track

logger = logging.getLogger(__name__)

CROSSFADE_START_PERCENT = 90.0
FULL_PROGRESS = 100.0
# Absorbs float drift so a d-second track rolls over after exactly d ticks
ROLLOVER_EPSILON = 1e-9

LEFT = "LEFT"
RIGHT = "RIGHT"


def deck_side(index: int) -> str:
    """Deck that plays the track at `index` (LEFT for even, RIGHT for odd)."""
    return LEFT if index % 2 == 0 else RIGHT


def resting_crossfade(index: int) -> float:
    """Crossfader value with the deck holding `index` fully open."""
    return -1.0 if deck_side(index) == LEFT else 1.0


def initial_state(volume: float = 0.8, playing: bool = False) -> PlaybackState:
    """Creation defaults: first track, nothing elapsed, fader hard left."""
    return PlaybackState(
        current_track_index=0,
        progress=0.0,
        crossfade=resting_crossfade(0),
        playing=playing,
        volume=volume,
    )


def tick(state: PlaybackState, setlist: Setlist) -> PlaybackState:
    """
    Advance playback by one tick.

    Args:
        state: Current playback state
        setlist: Immutable setlist being played

    Returns:
        New state; the input state is returned unchanged when paused, when
        the setlist is empty, or when the index is out of range
    """
    if not state.playing or not setlist:
        return state

    index = state.current_track_index
    if not (0 <= index < len(setlist)):
        logger.debug(f"Track index {index} out of range for {len(setlist)} tracks; skipping tick")
        return state

    track = setlist[index]
    next_progress = state.progress + FULL_PROGRESS / track.duration_seconds

    next_crossfade = state.crossfade
    if next_progress > CROSSFADE_START_PERCENT:
        side = resting_crossfade(index)
        target = -side
        t = (next_progress - CROSSFADE_START_PERCENT) / (FULL_PROGRESS - CROSSFADE_START_PERCENT)
        next_crossfade = side + (target - side) * t

    if next_progress >= FULL_PROGRESS - ROLLOVER_EPSILON:
        # Snap to the new deck's resting position; the ramp completes here
        next_index = (index + 1) % len(setlist)
        logger.debug(f"Rollover: track {index} -> {next_index}")
        return replace(
            state,
            current_track_index=next_index,
            progress=0.0,
            crossfade=resting_crossfade(next_index),
        )

    return replace(
        state,
        progress=next_progress,
        crossfade=max(-1.0, min(1.0, next_crossfade)),
    )


def toggle(state: PlaybackState) -> PlaybackState:
    """Flip play/pause."""
    return replace(state, playing=not state.playing)


def set_volume(state: PlaybackState, volume: float) -> PlaybackState:
    """Replace the master volume, clamped to [0, 1]."""
    return replace(state, volume=max(0.0, min(1.0, float(volume))))


def stop(state: PlaybackState) -> PlaybackState:
    """Reset to creation defaults, keeping the listener's volume."""
    return initial_state(volume=state.volume, playing=False)


def deck_assignment(
    state: PlaybackState, setlist: Setlist
) -> Tuple[Tuple[Optional[Track], float], Tuple[Optional[Track], float]]:
    """
    Work out what each deck shows.

    The active deck holds the current track at the current progress. The
    other deck holds the neighbour of matching parity: on the left that is
    the track just played (shown finished, at 100), on the right the track
    coming up next (shown unstarted, at 0).

    Returns:
        ((left_track, left_progress), (right_track, right_progress))
    """
    index = state.current_track_index

    def _track_at(i: int) -> Optional[Track]:
        return setlist[i] if 0 <= i < len(setlist) else None

    if deck_side(index) == LEFT:
        left = (_track_at(index), state.progress)
        right = (_track_at(index + 1), 0.0)
    else:
        left = (_track_at(index - 1), FULL_PROGRESS)
        right = (_track_at(index), state.progress)
    return left, right
