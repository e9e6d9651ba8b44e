"""
Web Module: Flask server for the setup form, decks and mixer.
"""

__all__ = ["app"]
