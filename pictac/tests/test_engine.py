"""
Tests for MatchEngine (stateful driver and host callbacks).
"""

from ..engine_core import (
    MatchEngine,
    MatchState,
    Outcome,
    Player,
    PlayerNames,
    Rejection,
    status_line,
    share_message,
    victory_message,
    winner_label,
)
from .conftest import DRAW_MOVES, P1_TOP_ROW, photo


class TestMatchEngine:

    def test_initial_state(self, engine):
        state = engine.state
        assert state == MatchState.initial()
        assert state.turn is Player.P1
        assert not state.ended
        assert state.winner is None
        assert all(cell is None for cell in state.board)

    def test_place_photo_updates_state(self, engine):
        result = engine.place_photo(4, photo(4))

        assert result.accepted
        assert engine.state is result.state
        assert engine.state.board[4].player is Player.P1

    def test_rejected_placement_keeps_state(self, engine):
        engine.place_photo(4, photo(4))
        before = engine.state

        result = engine.place_photo(4, photo(0))

        assert not result.accepted
        assert result.rejection is Rejection.CELL_OCCUPIED
        assert engine.state is before

    def test_example_scenario(self, engine):
        """Top-row win for P1, then a move at 8 is a no-op."""
        for index in P1_TOP_ROW:
            engine.place_photo(index, photo(index))

        assert engine.state.winner is Outcome.P1
        assert engine.state.ended
        assert engine.state.moves_count == 5

        result = engine.place_photo(8, photo(8))
        assert not result.accepted
        assert engine.state.board[8] is None

    def test_reset(self, engine):
        for index in P1_TOP_ROW:
            engine.place_photo(index, photo(index))

        state = engine.reset()

        assert state == MatchState.initial()
        assert engine.state.turn is Player.P1
        assert engine.place_photo(0, photo(0)).accepted


class TestCallbacks:

    def test_on_move_applied_fires_for_accepted_moves_only(self):
        seen = []
        engine = MatchEngine(on_move_applied=seen.append)

        engine.place_photo(0, photo(0))
        engine.place_photo(0, photo(0))  # occupied
        engine.place_photo(42, photo(1))  # out of range
        engine.place_photo(1, photo(1))

        assert len(seen) == 2
        assert seen[-1] is engine.state

    def test_on_match_ended_fires_once_on_win(self):
        ended = []
        engine = MatchEngine(on_match_ended=lambda *args: ended.append(args))

        for index in P1_TOP_ROW:
            engine.place_photo(index, photo(index))
        engine.place_photo(8, photo(8))
        engine.place_photo(7, photo(7))

        assert len(ended) == 1
        winner, moves_count, board = ended[0]
        assert winner is Outcome.P1
        assert moves_count == 5
        assert board == engine.state.board

    def test_on_match_ended_fires_on_draw(self):
        ended = []
        engine = MatchEngine(on_match_ended=lambda *args: ended.append(args))

        for index in DRAW_MOVES:
            engine.place_photo(index, photo(index))

        assert ended == [(Outcome.DRAW, 9, engine.state.board)]

    def test_on_match_ended_fires_again_after_reset(self):
        ended = []
        engine = MatchEngine(on_match_ended=lambda *args: ended.append(args))

        for index in P1_TOP_ROW:
            engine.place_photo(index, photo(index))
        engine.reset()
        for index in DRAW_MOVES:
            engine.place_photo(index, photo(index))

        assert [e[0] for e in ended] == [Outcome.P1, Outcome.DRAW]


class TestStatusText:

    names = PlayerNames(p1="Ana", p2="Ben")

    def test_turn(self):
        assert status_line(Player.P1, None, self.names) == "Ana's turn"
        assert status_line(Player.P2, None, self.names) == "Ben's turn"

    def test_win(self):
        assert status_line(Player.P2, Outcome.P2, self.names) == "Ben wins!"

    def test_draw(self):
        assert status_line(Player.P1, Outcome.DRAW, self.names) == "It's a draw!"

    def test_default_names(self):
        assert status_line(Player.P1, None, PlayerNames()) == "You's turn"
        assert status_line(Player.P2, None, PlayerNames()) == "Friend's turn"

    def test_winner_label(self):
        assert winner_label("P1", self.names) == "Ana"
        assert winner_label(Outcome.P2, self.names) == "Ben"
        assert winner_label("Draw", self.names) == "Draw"

    def test_victory_message(self):
        assert victory_message(Outcome.DRAW, self.names) == "We just drew in Pic-Tac-Toe! #PicTacToe"
        assert victory_message(Outcome.P1, self.names).startswith("Ana just won")

    def test_share_message(self):
        assert "#PicTacToe" in share_message()
