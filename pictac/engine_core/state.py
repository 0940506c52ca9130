"""
Match State - The 3x3 photo board and the state machine around it.

Design principles:
- Immutable: all transitions return a new MatchState
- Serializable: the board can be persisted with the storage codec
- Identity-free: players are seats (P1, P2), display names live elsewhere

Board layout (row-major):

    0 1 2
    3 4 5
    6 7 8
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from enum import Enum


BOARD_SIZE = 9

# All lines that win a match: 3 rows, 3 columns, 2 diagonals
LINES: tuple[tuple[int, int, int], ...] = (
    (0, 1, 2),
    (3, 4, 5),
    (6, 7, 8),
    (0, 3, 6),
    (1, 4, 7),
    (2, 5, 8),
    (0, 4, 8),
    (2, 4, 6),
)


class Player(str, Enum):
    """A seat at the board. P1 always moves first."""
    P1 = "P1"
    P2 = "P2"

    @property
    def opponent(self) -> Player:
        return Player.P2 if self is Player.P1 else Player.P1


class Outcome(str, Enum):
    """How a finished match ended."""
    P1 = "P1"
    P2 = "P2"
    DRAW = "Draw"

    @classmethod
    def for_player(cls, player: Player) -> Outcome:
        return cls(player.value)

    @property
    def player(self) -> Player | None:
        """The winning player, or None for a draw."""
        if self is Outcome.DRAW:
            return None
        return Player(self.value)


@dataclass(frozen=True)
class BoardCell:
    """
    An occupied cell.

    The photo reference is opaque (a URI or handle from the media picker);
    the engine never looks inside it.
    """
    photo_ref: str
    player: Player


Board = tuple["BoardCell | None", ...]


def empty_board() -> Board:
    return (None,) * BOARD_SIZE


@dataclass(frozen=True)
class MatchState:
    """
    Complete match state at a point in time.

    Invariants:
    - ended is False exactly when winner is None
    - once ended, no further placement is accepted
    - turn only flips on accepted placements that do not end the match
    """
    board: Board = field(default_factory=empty_board)
    turn: Player = Player.P1
    ended: bool = False
    winner: Outcome | None = None
    last_move: int | None = None

    @classmethod
    def initial(cls) -> MatchState:
        return cls()

    @property
    def moves_count(self) -> int:
        """Number of photos on the board."""
        return sum(1 for cell in self.board if cell is not None)

    @property
    def is_full(self) -> bool:
        return all(cell is not None for cell in self.board)

    def cell(self, index: int) -> BoardCell | None:
        return self.board[index]

    def is_empty_cell(self, index: int) -> bool:
        return self.board[index] is None

    def with_cell(self, index: int, cell: BoardCell) -> MatchState:
        """Return new state with one cell filled."""
        new_board = list(self.board)
        new_board[index] = cell
        return replace(self, board=tuple(new_board), last_move=index)

    def finished(self, outcome: Outcome) -> MatchState:
        """Return new state marked as ended with the given outcome."""
        return replace(self, ended=True, winner=outcome)

    def next_turn(self) -> MatchState:
        """Return new state with the turn handed to the other player."""
        return replace(self, turn=self.turn.opponent)
