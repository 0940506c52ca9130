"""
Reaction Tracker - Emoji bursts and GIF overlays on the latest move.

Reactions hang off a board cell but never touch match state: a match can
end, be saved and be reset regardless of what anyone reacted with.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import uuid


class ReactionError(Exception):
    """A reaction could not be attached (e.g. nothing has been played yet)."""


@dataclass(frozen=True)
class EmojiReaction:
    reaction_id: str
    emoji: str


@dataclass(frozen=True)
class GifOverlay:
    """The GIF currently popped up over the board, and who sent it."""
    url: str
    sent_by: str


@dataclass
class ReactionTracker:
    # cell index -> reactions on that cell, oldest first
    emoji: dict[int, list[EmojiReaction]] = field(default_factory=dict)
    overlay: GifOverlay | None = None

    def add_emoji(self, cell_index: int | None, emoji: str) -> EmojiReaction:
        if cell_index is None:
            raise ReactionError("Place a photo before sending a reaction.")
        if not emoji or not emoji.strip():
            raise ReactionError("Pick an emoji to react with.")

        reaction = EmojiReaction(reaction_id=uuid.uuid4().hex, emoji=emoji.strip())
        self.emoji.setdefault(cell_index, []).append(reaction)
        return reaction

    def show_gif(self, cell_index: int | None, url: str, sent_by: str) -> GifOverlay:
        if cell_index is None:
            raise ReactionError("Place a photo before sending a GIF.")
        if not url:
            raise ReactionError("Pick a GIF to send.")

        self.overlay = GifOverlay(url=url, sent_by=sent_by)
        return self.overlay

    def dismiss_gif(self):
        self.overlay = None

    def clear(self):
        self.emoji.clear()
        self.overlay = None
