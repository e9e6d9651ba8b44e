"""
Setlist Generation Module: ask a hosted LLM for a setlist and a caption.

- One setlist request, then one caption request derived from it
- Failures degrade to an empty setlist / fallback caption
"""

__all__ = ["source", "prompts"]
