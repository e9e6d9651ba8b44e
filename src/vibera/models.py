"""
Data model for VIBE-RA.

Tracks and setlists are immutable once received from the setlist source.
PlaybackState is the only mutable entity in the core; it is modelled as a
frozen dataclass and every transition returns a new value.
"""

import logging
import math
from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional, Tuple

logger = logging.getLogger(__name__)

# Transition styles understood by the decks
TRANSITION_TYPES = ("crossfade", "beatmatch", "echo-out")
DEFAULT_TRANSITION = "crossfade"

INTENSITIES = ("chill", "mid", "high", "peak")

MIN_DURATION_MINUTES = 15
MAX_DURATION_MINUTES = 240

# Wire (camelCase) name -> attribute name
TRACK_FIELDS = {
    "id": "id",
    "title": "title",
    "artist": "artist",
    "bpm": "bpm",
    "durationSeconds": "duration_seconds",
    "energyLevel": "energy_level",
    "transitionType": "transition_type",
    "genre": "genre",
}


class InvalidParamsError(ValueError):
    """Raised when setup parameters or a track record fail validation."""
    pass


@dataclass(frozen=True)
class Track:
    """Immutable track descriptor produced by the setlist source."""

    id: str
    title: str
    artist: str
    bpm: float
    duration_seconds: int
    energy_level: int
    transition_type: str
    genre: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Track":
        """
        Build a Track from a camelCase wire record.

        Args:
            data: Track object as returned by the LLM (all fields required)

        Returns:
            Validated Track

        Raises:
            InvalidParamsError: If a field is missing or out of range
        """
        if not isinstance(data, dict):
            raise InvalidParamsError(f"Track record must be an object, got {type(data).__name__}")

        missing = [name for name in TRACK_FIELDS if data.get(name) is None]
        if missing:
            raise InvalidParamsError(f"Track record missing fields: {', '.join(missing)}")

        try:
            bpm = float(data["bpm"])
            duration = float(data["durationSeconds"])
            energy = float(data["energyLevel"])
        except (TypeError, ValueError) as e:
            raise InvalidParamsError(f"Track record has non-numeric field: {e}")

        if not math.isfinite(bpm) or bpm <= 0:
            raise InvalidParamsError(f"Track bpm must be positive, got {data['bpm']!r}")
        if not math.isfinite(duration) or round(duration) <= 0:
            raise InvalidParamsError(
                f"Track durationSeconds must be positive, got {data['durationSeconds']!r}"
            )
        if not math.isfinite(energy):
            raise InvalidParamsError(f"Track energyLevel must be finite, got {data['energyLevel']!r}")

        transition = str(data["transitionType"]).strip().lower()
        if transition not in TRANSITION_TYPES:
            logger.debug(f"Unknown transition type {transition!r}; using {DEFAULT_TRANSITION}")
            transition = DEFAULT_TRANSITION

        return cls(
            id=str(data["id"]),
            title=str(data["title"]),
            artist=str(data["artist"]),
            bpm=bpm,
            duration_seconds=int(round(duration)),
            # Energy is a 1-10 scale; clamp rather than reject
            energy_level=max(1, min(10, int(round(energy)))),
            transition_type=transition,
            genre=str(data["genre"]),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the camelCase wire shape."""
        return {wire: getattr(self, attr) for wire, attr in TRACK_FIELDS.items()}


Setlist = Tuple[Track, ...]


def setlist_duration_seconds(setlist: Setlist) -> int:
    """Total running time of a setlist in seconds."""
    return sum(track.duration_seconds for track in setlist)


@dataclass(frozen=True)
class SetlistParams:
    """Party parameters collected by the setup form."""

    scene: str
    music_profile: str
    duration_minutes: int
    intensity: str

    def __post_init__(self):
        if not self.scene or not self.scene.strip():
            raise InvalidParamsError("scene is required")
        if not self.music_profile or not self.music_profile.strip():
            raise InvalidParamsError("musicProfile is required")
        if isinstance(self.duration_minutes, bool) or not isinstance(self.duration_minutes, int):
            raise InvalidParamsError(
                f"durationMinutes must be an integer, got {self.duration_minutes!r}"
            )
        if not (MIN_DURATION_MINUTES <= self.duration_minutes <= MAX_DURATION_MINUTES):
            raise InvalidParamsError(
                f"durationMinutes={self.duration_minutes} out of bounds "
                f"[{MIN_DURATION_MINUTES}, {MAX_DURATION_MINUTES}]"
            )
        if self.intensity not in INTENSITIES:
            raise InvalidParamsError(
                f"intensity must be one of {', '.join(INTENSITIES)}, got {self.intensity!r}"
            )

    @classmethod
    def from_dict(cls, data: Dict[str, Any], defaults: Optional[Dict[str, Any]] = None) -> "SetlistParams":
        """
        Build params from a camelCase request body, filling gaps from defaults.

        Raises:
            InvalidParamsError: If the body is not an object or a value is invalid
        """
        if not isinstance(data, dict):
            raise InvalidParamsError("Request body must be a JSON object")
        defaults = defaults or {}

        def _field(wire_name, default_name):
            # JSON null counts as missing
            value = data.get(wire_name)
            return defaults.get(default_name) if value is None else value

        duration = _field("durationMinutes", "duration_minutes")
        if isinstance(duration, str):
            try:
                duration = int(duration.strip())
            except ValueError:
                raise InvalidParamsError(f"durationMinutes must be an integer, got {duration!r}")
        elif isinstance(duration, float) and duration.is_integer():
            duration = int(duration)

        return cls(
            scene=str(_field("scene", "scene") or "").strip(),
            music_profile=str(_field("musicProfile", "music_profile") or "").strip(),
            duration_minutes=duration,
            intensity=str(_field("intensity", "intensity") or "").strip().lower(),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "scene": self.scene,
            "musicProfile": self.music_profile,
            "durationMinutes": self.duration_minutes,
            "intensity": self.intensity,
        }


@dataclass(frozen=True)
class PlaybackState:
    """Simulator state; owned by the session, read by everything else."""

    current_track_index: int = 0
    progress: float = 0.0  # 0-100, percent of current track elapsed
    crossfade: float = -1.0  # -1 = even-index deck, +1 = odd-index deck
    playing: bool = False
    volume: float = 0.8

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        return {
            "currentTrackIndex": data["current_track_index"],
            "progress": data["progress"],
            "crossfade": data["crossfade"],
            "isPlaying": data["playing"],
            "volume": data["volume"],
        }
