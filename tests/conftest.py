"""Shared fixtures: track builder and a hand-cranked clock."""

import pytest

from vibera.models import Track


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def make_track():
    """Factory for tracks with sensible defaults."""

    def _make(index: int = 0, duration_seconds: int = 180, **overrides):
        fields = {
            "id": f"track-{index}",
            "title": f"Track {index}",
            "artist": f"Artist {index}",
            "bpm": 124.0,
            "duration_seconds": duration_seconds,
            "energy_level": 7,
            "transition_type": "crossfade",
            "genre": "House",
        }
        fields.update(overrides)
        return Track(**fields)

    return _make


@pytest.fixture
def fake_clock():
    return FakeClock()
