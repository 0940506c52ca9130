"""
Text shown around the board: status line, history labels, share messages.

Display names are supplied by the host (profile prefs or whatever the
players typed in); the engine only knows seats.
"""

from __future__ import annotations
from dataclasses import dataclass

from .state import Outcome, Player


@dataclass(frozen=True)
class PlayerNames:
    """Display names for the two seats."""
    p1: str = "You"
    p2: str = "Friend"

    def for_player(self, player: Player) -> str:
        return self.p1 if player is Player.P1 else self.p2


def status_line(turn: Player, winner: Outcome | None, names: PlayerNames) -> str:
    if winner is Outcome.DRAW:
        return "It's a draw!"
    if winner is not None:
        return f"{names.for_player(winner.player)} wins!"
    return f"{names.for_player(turn)}'s turn"


def winner_label(winner: Outcome | str, names: PlayerNames) -> str:
    """Label for a history entry: seats become names, a draw stays 'Draw'."""
    outcome = Outcome(winner)
    if outcome is Outcome.DRAW:
        return outcome.value
    return names.for_player(outcome.player)


def victory_message(winner: Outcome, names: PlayerNames) -> str:
    if winner is Outcome.DRAW:
        return "We just drew in Pic-Tac-Toe! #PicTacToe"
    return f"{names.for_player(winner.player)} just won a Pic-Tac-Toe match! 🏆 #PicTacToe"


def share_message() -> str:
    return "Our Pic-Tac-Toe board - memories unlocked! #PicTacToe"
