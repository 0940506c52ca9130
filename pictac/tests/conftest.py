"""
Pytest fixtures for Pic-Tac-Toe tests.
"""

import pytest

from ..engine_core import MatchEngine, MatchState, apply_placement
from ..storage import MatchStore, PrefsStore


def photo(index: int) -> str:
    """A distinct fake photo reference per cell."""
    return f"file:///photos/cell_{index}.jpg"


def play(state: MatchState, moves: list[int]) -> MatchState:
    """Apply a sequence of placements, asserting each is accepted."""
    for index in moves:
        result = apply_placement(state, index, photo(index))
        assert result.accepted, f"move {index} rejected: {result.rejection}"
        state = result.state
    return state


# P1 takes the top row on move 5
P1_TOP_ROW = [0, 4, 1, 5, 2]

# Full board, no line for either player:
#   P1 P2 P1
#   P1 P2 P2
#   P2 P1 P1
DRAW_MOVES = [0, 1, 2, 4, 3, 5, 7, 6, 8]


class FakeGifLookup:
    """Stands in for GifLookup; records queries and returns canned URLs."""

    def __init__(self, urls=None):
        self.urls = urls if urls is not None else [
            f"https://media.giphy.com/media/{i}/giphy.gif" for i in range(3)
        ]
        self.queries = []

    def search(self, query=None):
        self.queries.append(query)
        return list(self.urls)


@pytest.fixture
def engine() -> MatchEngine:
    return MatchEngine()


@pytest.fixture
def database_url(tmp_path) -> str:
    return f"sqlite:///{tmp_path / 'matches.db'}"


@pytest.fixture
def blocked_database_url(tmp_path) -> str:
    """A SQLite path whose parent is a regular file, so it can never be opened."""
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    return f"sqlite:///{blocker / 'matches.db'}"


@pytest.fixture
def store(database_url):
    """A fresh, initialized match store backed by a temp SQLite file."""
    store = MatchStore.from_url(database_url)
    store.initialize()
    yield store
    store.close()


@pytest.fixture
def prefs(tmp_path) -> PrefsStore:
    return PrefsStore(tmp_path / "prefs.json")


@pytest.fixture
def gifs() -> FakeGifLookup:
    return FakeGifLookup()
