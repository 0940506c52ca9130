"""
Engine Core - Deterministic match state and win/draw detection.

The engine is the runtime that:
1. Holds the MatchState for one match
2. Validates placements (silently ignoring illegal ones)
3. Applies placements via the reducer
4. Detects wins and draws
5. Notifies the host when a move lands and when the match ends
"""

from .state import (
    BOARD_SIZE,
    LINES,
    Board,
    BoardCell,
    MatchState,
    Outcome,
    Player,
    empty_board,
)
from .action import PlacePhoto, PlacementResult, Rejection
from .reducer import apply_placement, winning_line
from .engine import MatchEngine
from .status import PlayerNames, status_line, winner_label, victory_message, share_message

__all__ = [
    "BOARD_SIZE",
    "LINES",
    "Board",
    "BoardCell",
    "MatchState",
    "Outcome",
    "Player",
    "empty_board",
    "PlacePhoto",
    "PlacementResult",
    "Rejection",
    "apply_placement",
    "winning_line",
    "MatchEngine",
    "PlayerNames",
    "status_line",
    "winner_label",
    "victory_message",
    "share_message",
]
