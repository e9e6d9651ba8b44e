# VIBE-RA: browser-based AI DJ demo
# Package: vibera

__version__ = "1.0.4"
__author__ = "VIBE-RA Contributors"
__description__ = "AI-generated party setlists played on two simulated turntables"

# Module structure:
#   - vibera.models    : Track, SetlistParams, PlaybackState
#   - vibera.generate  : LLM setlist source and prompts
#   - vibera.playback  : Tick simulator, tick clock, session, deck views
#   - vibera.web       : Flask server and single-page UI
#   - vibera.config    : Configuration management
