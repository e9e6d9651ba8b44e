#!/usr/bin/env python3
"""
Generate a Setlist Script

Usage: python src/scripts/generate_set.py --scene Wedding --profile Afrobeat

Asks the configured LLM for one setlist and caption and prints them.
"""

import sys
import argparse
import logging
from pathlib import Path

# Add src/ to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from vibera.config import Config
from vibera.generate.source import SetlistSource
from vibera.models import INTENSITIES, SetlistParams, setlist_duration_seconds
from vibera.playback.decks import format_duration

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Generate an AI DJ setlist")
    parser.add_argument("--scene", help="Event description, e.g. 'Wedding'")
    parser.add_argument("--profile", help="Music DNA, e.g. 'Afrobeat'")
    parser.add_argument("--minutes", type=int, help="Set length (15-240)")
    parser.add_argument("--intensity", choices=INTENSITIES)
    parser.add_argument("--config", help="Path to vibera.toml")
    return parser.parse_args(argv)


def main(argv=None):
    """Main generation entrypoint."""
    args = parse_args(argv)
    try:
        config = Config.load(args.config)
        setup = config["setup"]
        params = SetlistParams(
            scene=args.scene or setup["scene"],
            music_profile=args.profile or setup["music_profile"],
            duration_minutes=args.minutes or setup["duration_minutes"],
            intensity=args.intensity or setup["intensity"],
        )

        logger.info("🎵 Starting setlist generation...")
        source = SetlistSource.from_config(config)
        setlist = source.generate_setlist(params)
        caption = source.describe_vibe(setlist)

        print(f'"{caption}"\n')
        for position, track in enumerate(setlist, start=1):
            print(
                f"{position:02d}  {track.title} - {track.artist}  "
                f"[{track.bpm:g} BPM, {format_duration(track.duration_seconds)}, "
                f"energy {track.energy_level}, {track.transition_type}]"
            )
        logger.info(
            f"✅ {len(setlist)} tracks, "
            f"{format_duration(setlist_duration_seconds(setlist))} total"
        )
        return 0 if setlist else 1

    except KeyboardInterrupt:
        logger.warning("Generation interrupted by user")
        return 130
    except Exception as e:
        logger.error(f"Generation failed: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
