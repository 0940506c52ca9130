"""
Match Engine - Stateful driver around the reducer.

Usage:
    engine = MatchEngine(on_match_ended=store_result)

    result = engine.place_photo(4, "file:///photos/cat.jpg")
    if not result.accepted:
        ...  # optional: stricter callers can inspect result.rejection

    engine.reset()  # new match, history is untouched

Callbacks:
    on_move_applied(state)                    after every accepted placement
    on_match_ended(winner, moves_count, board) exactly once per match
"""

from __future__ import annotations
from typing import Callable
import logging

from .state import Board, MatchState, Outcome
from .action import PlacementResult
from .reducer import apply_placement

logger = logging.getLogger(__name__)

MoveAppliedCallback = Callable[[MatchState], None]
MatchEndedCallback = Callable[[Outcome, int, Board], None]


class MatchEngine:
    """
    Holds the current MatchState for one match.

    Not safe for concurrent mutation: placements are expected one at a
    time. Callers merging moves from several sources must order them
    before calling place_photo().
    """

    def __init__(
        self,
        on_move_applied: MoveAppliedCallback | None = None,
        on_match_ended: MatchEndedCallback | None = None,
    ):
        self.on_move_applied = on_move_applied
        self.on_match_ended = on_match_ended
        self._state = MatchState.initial()

    @property
    def state(self) -> MatchState:
        return self._state

    def place_photo(self, index: int, photo_ref: str | None) -> PlacementResult:
        """Place a photo for the player whose turn it is."""
        result = apply_placement(self._state, index, photo_ref)
        if not result.accepted:
            logger.debug("Ignored placement at %r: %s", index, result.rejection.value)
            return result

        self._state = result.state
        if self.on_move_applied:
            self.on_move_applied(result.state)

        if result.ended_match:
            logger.info(
                "Match ended: %s after %d moves",
                result.state.winner.value,
                result.state.moves_count,
            )
            if self.on_match_ended:
                self.on_match_ended(
                    result.state.winner,
                    result.state.moves_count,
                    result.state.board,
                )
        return result

    def reset(self) -> MatchState:
        """Start a fresh match. Does not touch persisted history."""
        self._state = MatchState.initial()
        return self._state
