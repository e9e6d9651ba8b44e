"""
Playback Module: simulated two-deck playback.

- Pure tick transition (progress, crossfade ramp, rollover)
- Fixed-interval tick clock with injectable time source
- Session owning the state, and read-only deck views
"""

__all__ = ["simulator", "clock", "session", "decks"]
