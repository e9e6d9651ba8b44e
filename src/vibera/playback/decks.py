"""
Deck presentation: read-only views derived from PlaybackState.

Nothing here mutates state. Everything is computed from the state and the
setlist on each call, so repeated calls with the same inputs agree.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from ..models import PlaybackState, Setlist, Track
from .simulator import LEFT, RIGHT, deck_assignment, deck_side

PLACEHOLDER_TITLE = "Waiting for Track..."
PLACEHOLDER_ARTIST = "AI Curation Engine"
PLACEHOLDER_LABEL = "VIBE-RA"


def format_duration(seconds: Optional[int]) -> str:
    """Format seconds as m:ss, or --:-- when unknown."""
    if seconds is None:
        return "--:--"
    minutes, secs = divmod(int(seconds), 60)
    return f"{minutes}:{secs:02d}"


@dataclass(frozen=True)
class DeckView:
    """One turntable as the UI draws it."""

    side: str
    track: Optional[Track]
    is_playing: bool
    progress: float

    @property
    def number(self) -> str:
        return "01" if self.side == LEFT else "02"

    @property
    def rotation_degrees(self) -> float:
        # One full platter turn per track
        return self.progress * 3.6

    def to_dict(self) -> Dict[str, Any]:
        track = self.track
        return {
            "side": self.side,
            "deckNumber": self.number,
            "track": track.to_dict() if track else None,
            "title": track.title if track else PLACEHOLDER_TITLE,
            "artist": track.artist if track else PLACEHOLDER_ARTIST,
            "label": track.artist if track else PLACEHOLDER_LABEL,
            "bpmLabel": f"{track.bpm:g}" if track else "--",
            "durationLabel": format_duration(track.duration_seconds if track else None),
            "isPlaying": self.is_playing,
            "progress": self.progress,
            "rotation": self.rotation_degrees,
        }


def build_decks(state: PlaybackState, setlist: Setlist) -> List[DeckView]:
    """Left and right deck views for the current state."""
    (left_track, left_progress), (right_track, right_progress) = deck_assignment(state, setlist)
    active = deck_side(state.current_track_index)
    return [
        DeckView(LEFT, left_track, state.playing and active == LEFT, left_progress),
        DeckView(RIGHT, right_track, state.playing and active == RIGHT, right_progress),
    ]


def crossfader_percent(state: PlaybackState) -> float:
    """Knob position along the crossfader track, 0 (left) to 100 (right)."""
    return (state.crossfade + 1) * 50


def upcoming_queue(state: PlaybackState, setlist: Setlist) -> List[Dict[str, Any]]:
    """Tracks after the current one, with their 1-based set position."""
    start = state.current_track_index + 1
    return [
        {"position": start + offset + 1, "track": track.to_dict()}
        for offset, track in enumerate(setlist[start:])
    ]


def tracks_remaining(state: PlaybackState, setlist: Setlist) -> int:
    """Tracks left including the one playing."""
    if not setlist:
        return 0
    return len(setlist) - state.current_track_index


def is_last_track(state: PlaybackState, setlist: Setlist) -> bool:
    return bool(setlist) and state.current_track_index == len(setlist) - 1
