"""
Reactions - Emoji and GIF reactions to the latest move.

Purely cosmetic: nothing here can change a match or its saved record.
"""

from .gifs import GifLookup, extract_urls, MAX_RESULTS
from .tracker import ReactionTracker, ReactionError, EmojiReaction, GifOverlay

__all__ = [
    "GifLookup",
    "extract_urls",
    "MAX_RESULTS",
    "ReactionTracker",
    "ReactionError",
    "EmojiReaction",
    "GifOverlay",
]
