"""Prompt text for the setlist and caption requests."""

from typing import Iterable

from ..models import SetlistParams, Track, TRANSITION_TYPES

SYSTEM_PROMPT = (
    "You are a world-class professional DJ and club promoter. "
    "When asked for a setlist you answer with JSON only."
)

TRACK_SCHEMA_HINT = (
    '{"tracks": [{"id": string, "title": string, "artist": string, '
    '"bpm": number, "durationSeconds": number, "energyLevel": number (1-10), '
    '"transitionType": one of ' + ", ".join(f'"{t}"' for t in TRANSITION_TYPES) + ", "
    '"genre": string}]}'
)

INTENSITY_DESCRIPTIONS = {
    "chill": "chill and laid-back",
    "mid": "mid-tempo and groovy",
    "high": "high energy",
    "peak": "peak-hour, all-out",
}


def setlist_prompt(params: SetlistParams) -> str:
    vibe = INTENSITY_DESCRIPTIONS.get(params.intensity, params.intensity)
    return (
        f'Create a detailed setlist for a "{params.scene}" event featuring '
        f'"{params.music_profile}" music.\n'
        f"The set should last approximately {params.duration_minutes} minutes.\n"
        f"The overall vibe should be {vibe}.\n"
        "Provide a list of actual popular songs that fit this context, with "
        "estimated BPMs, durations in seconds, energy levels and transition styles.\n"
        f"Respond with a JSON object of this shape: {TRACK_SCHEMA_HINT}. "
        "Every field is required for every track."
    )


def vibe_prompt(tracks: Iterable[Track]) -> str:
    titles = ", ".join(track.title for track in tracks)
    return (
        "Write a 2-sentence hype description for a DJ set containing these songs: "
        f"{titles}. Make it sound like a professional club promoter."
    )
