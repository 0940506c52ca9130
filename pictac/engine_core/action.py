"""
Placement actions and their results.

A placement either gets accepted (and produces a new state) or gets
ignored. Ignored placements are not errors: the host UI already keeps
players from tapping a filled cell, so the engine just leaves the state
alone and reports why through PlacementResult.rejection.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum

from .state import MatchState


class Rejection(str, Enum):
    """Why a placement was ignored."""
    INVALID_INDEX = "INVALID_INDEX"
    CELL_OCCUPIED = "CELL_OCCUPIED"
    MATCH_ENDED = "MATCH_ENDED"
    MISSING_PHOTO = "MISSING_PHOTO"


@dataclass(frozen=True)
class PlacePhoto:
    """Put a photo into a cell for whoever's turn it is."""
    index: int
    photo_ref: str | None


@dataclass(frozen=True)
class PlacementResult:
    """
    Result of applying a placement.

    Contains:
    - Whether the placement was accepted
    - The resulting state (unchanged when rejected)
    - The rejection reason, if any
    - Whether this placement ended the match
    """
    accepted: bool
    state: MatchState
    rejection: Rejection | None = None
    ended_match: bool = False

    @classmethod
    def ignored(cls, state: MatchState, reason: Rejection) -> PlacementResult:
        """Create a result for a placement that changed nothing."""
        return cls(accepted=False, state=state, rejection=reason)

    @classmethod
    def applied(cls, state: MatchState, ended_match: bool = False) -> PlacementResult:
        """Create a result for an accepted placement."""
        return cls(accepted=True, state=state, ended_match=ended_match)
