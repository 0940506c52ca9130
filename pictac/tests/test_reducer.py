"""
Tests for the reducer (state transitions).

Tests:
- Placement application
- Turn alternation
- Win detection on every line
- Draw detection
- Ignored placements
"""

from itertools import combinations

import pytest

from ..engine_core import (
    LINES,
    BoardCell,
    MatchState,
    Outcome,
    Player,
    Rejection,
    apply_placement,
    winning_line,
)
from .conftest import DRAW_MOVES, P1_TOP_ROW, photo, play


def _contains_line(cells) -> bool:
    return any(set(line) <= set(cells) for line in LINES)


def _p1_wins(line) -> list[int]:
    """P1 plays the line; P2 plays two cells off it (two cells never win)."""
    free = [i for i in range(9) if i not in line]
    return [line[0], free[0], line[1], free[1], line[2]]


def _p2_wins(line) -> list[int]:
    """P1 plays three cells off the line that form no line of their own."""
    free = [i for i in range(9) if i not in line]
    p1 = next(c for c in combinations(free, 3) if not _contains_line(c))
    return [p1[0], line[0], p1[1], line[1], p1[2], line[2]]


class TestPlacement:
    """Tests for a single placement."""

    def test_place_in_empty_cell(self):
        """Placing fills the cell for the current player."""
        result = apply_placement(MatchState.initial(), 4, photo(4))

        assert result.accepted
        assert result.rejection is None
        assert result.state.board[4] == BoardCell(photo_ref=photo(4), player=Player.P1)
        assert result.state.last_move == 4
        assert result.state.moves_count == 1

    def test_original_state_untouched(self):
        """The reducer returns a new state and leaves the input alone."""
        state = MatchState.initial()
        apply_placement(state, 0, photo(0))

        assert state.board[0] is None
        assert state.turn is Player.P1
        assert state.moves_count == 0

    def test_turn_flips_after_non_terminal_move(self):
        result = apply_placement(MatchState.initial(), 0, photo(0))
        assert result.state.turn is Player.P2
        assert not result.state.ended
        assert result.state.winner is None


class TestTurnAlternation:
    """The mover of placement i is P1 for even i, P2 for odd i."""

    def test_alternates_for_every_accepted_move(self):
        state = MatchState.initial()
        # First 8 moves of the draw game never end the match
        for i, index in enumerate(DRAW_MOVES[:8]):
            mover = state.turn
            assert mover is (Player.P1 if i % 2 == 0 else Player.P2)
            result = apply_placement(state, index, photo(index))
            assert result.state.board[index].player is mover
            state = result.state
            assert state.turn is mover.opponent

    def test_rejected_move_does_not_flip_turn(self):
        state = play(MatchState.initial(), [0])
        result = apply_placement(state, 0, photo(99))

        assert not result.accepted
        assert result.state.turn is Player.P2


class TestWinDetection:
    """Tests for win detection."""

    def test_top_row_example(self):
        """0,4,1,5,2 gives P1 the top row in 5 moves."""
        state = play(MatchState.initial(), P1_TOP_ROW)

        assert state.ended
        assert state.winner is Outcome.P1
        assert state.moves_count == 5
        assert state.turn is Player.P1  # turn does not flip on the winning move

    @pytest.mark.parametrize("line", LINES)
    def test_p1_wins_every_line(self, line):
        state = play(MatchState.initial(), _p1_wins(line))

        assert state.ended
        assert state.winner is Outcome.P1
        assert winning_line(state.board, Player.P1) == line
        assert winning_line(state.board, Player.P2) is None

    @pytest.mark.parametrize("line", LINES)
    def test_p2_wins_every_line(self, line):
        state = play(MatchState.initial(), _p2_wins(line))

        assert state.ended
        assert state.winner is Outcome.P2
        assert state.moves_count == 6
        assert winning_line(state.board, Player.P1) is None

    def test_win_on_last_cell_is_not_a_draw(self):
        """Completing a line with the ninth photo is a win, not a draw."""
        #   P1 P2 P1
        #   P2 P1 P2
        #   P2 P1 P1  <- P1 closes the 0-4-8 diagonal last
        state = play(MatchState.initial(), [0, 1, 2, 3, 4, 5, 7, 6, 8])

        assert state.is_full
        assert state.winner is Outcome.P1

    def test_ended_match_result_flag(self):
        state = play(MatchState.initial(), P1_TOP_ROW[:-1])
        result = apply_placement(state, 2, photo(2))

        assert result.accepted
        assert result.ended_match


class TestDraw:
    """Tests for draw detection."""

    def test_full_board_without_line_is_draw(self):
        state = play(MatchState.initial(), DRAW_MOVES)

        assert state.ended
        assert state.winner is Outcome.DRAW
        assert state.moves_count == 9
        assert all(winning_line(state.board, p) is None for p in Player)

    def test_not_a_draw_before_board_is_full(self):
        state = play(MatchState.initial(), DRAW_MOVES[:8])
        assert not state.ended
        assert state.winner is None


class TestIgnoredPlacements:
    """Illegal placements are silent no-ops."""

    @pytest.mark.parametrize("index", [-1, 9, 100])
    def test_out_of_range_index(self, index):
        state = MatchState.initial()
        result = apply_placement(state, index, photo(0))

        assert not result.accepted
        assert result.rejection is Rejection.INVALID_INDEX
        assert result.state is state

    def test_non_integer_index(self):
        result = apply_placement(MatchState.initial(), "4", photo(4))
        assert result.rejection is Rejection.INVALID_INDEX

    def test_occupied_cell(self):
        state = play(MatchState.initial(), [4])
        result = apply_placement(state, 4, "file:///other.jpg")

        assert not result.accepted
        assert result.rejection is Rejection.CELL_OCCUPIED
        assert result.state.board[4].photo_ref == photo(4)
        assert result.state.board[4].player is Player.P1

    @pytest.mark.parametrize("photo_ref", [None, ""])
    def test_missing_photo(self, photo_ref):
        result = apply_placement(MatchState.initial(), 0, photo_ref)
        assert result.rejection is Rejection.MISSING_PHOTO

    def test_placement_after_end_is_ignored(self):
        """After the top-row win, a move at 8 changes nothing."""
        state = play(MatchState.initial(), P1_TOP_ROW)
        result = apply_placement(state, 8, photo(8))

        assert not result.accepted
        assert result.rejection is Rejection.MATCH_ENDED
        assert result.state == state
        assert result.state.board[8] is None

    def test_every_placement_after_draw_is_ignored(self):
        state = play(MatchState.initial(), DRAW_MOVES)
        for index in range(9):
            assert apply_placement(state, index, photo(index)).state == state
