"""
Reducer - Applies placements to match state.

The reducer is the single point of state transition.
All board changes must go through apply_placement().

Design principles:
- Pure function: (state, placement) -> PlacementResult
- Validates before applying
- Never raises on bad input; rejected placements leave state untouched
"""

from __future__ import annotations

from .state import BOARD_SIZE, LINES, BoardCell, MatchState, Outcome, Player
from .action import PlacePhoto, PlacementResult, Rejection


def winning_line(board, player: Player) -> tuple[int, int, int] | None:
    """
    Find a line fully occupied by player.

    Scanning all 8 lines is equivalent to scanning the lines through the
    last move: no other line can have just been completed.
    """
    for line in LINES:
        cells = [board[i] for i in line]
        if all(cell is not None and cell.player == player for cell in cells):
            return line
    return None


def _validate(state: MatchState, placement: PlacePhoto) -> Rejection | None:
    if state.ended:
        return Rejection.MATCH_ENDED
    if not isinstance(placement.index, int) or isinstance(placement.index, bool):
        return Rejection.INVALID_INDEX
    if not 0 <= placement.index < BOARD_SIZE:
        return Rejection.INVALID_INDEX
    if not placement.photo_ref:
        return Rejection.MISSING_PHOTO
    if not state.is_empty_cell(placement.index):
        return Rejection.CELL_OCCUPIED
    return None


def apply_placement(
    state: MatchState,
    index: int,
    photo_ref: str | None,
) -> PlacementResult:
    """
    Place a photo for the current player.

    After the cell is filled:
    1. A completed line for the mover ends the match with them as winner
    2. Otherwise a full board ends the match as a draw
    3. Otherwise the turn passes to the other player
    """
    placement = PlacePhoto(index=index, photo_ref=photo_ref)
    rejection = _validate(state, placement)
    if rejection:
        return PlacementResult.ignored(state, rejection)

    mover = state.turn
    new_state = state.with_cell(index, BoardCell(photo_ref=photo_ref, player=mover))

    if winning_line(new_state.board, mover):
        return PlacementResult.applied(
            new_state.finished(Outcome.for_player(mover)),
            ended_match=True,
        )

    if new_state.is_full:
        return PlacementResult.applied(new_state.finished(Outcome.DRAW), ended_match=True)

    return PlacementResult.applied(new_state.next_turn())
