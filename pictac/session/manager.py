"""
Session Manager - Creates and manages live matches.

LIFECYCLE:
1. Host creates a session (display names resolved up front)
2. During the match:
   - Players drop photos into cells
   - Engine validates, detects win/draw, flips turns
   - Players react to the latest move with emoji or GIFs
3. Match ends -> result is appended to the MatchStore exactly once
4. Host can:
   - Reset (same session, fresh board)
   - End the session (dropped from memory)

PERSISTENCE RULES:
- Live match state is in-memory only
- Only finished matches are persisted, via MatchStore
- A failed save never blocks play: the result is kept on the session
  and can be retried with retry_save()
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
import logging
import threading
import time
import uuid

from ..engine_core import (
    Board,
    MatchEngine,
    MatchState,
    Outcome,
    PlacementResult,
    PlayerNames,
    status_line,
)
from ..reactions import EmojiReaction, GifOverlay, ReactionTracker
from ..storage import MatchRecord, MatchStore, MatchStoreError

logger = logging.getLogger(__name__)


class SessionState(Enum):
    """State of a match session."""
    ACTIVE = "active"  # Match in progress
    GAME_OVER = "game_over"  # Match finished, waiting for reset or end
    ENDED = "ended"  # Session closed by the host


class NothingToSaveError(Exception):
    """retry_save() was called but there is no unsaved result."""


@dataclass(frozen=True)
class PendingResult:
    """A finished match that has not made it into the store yet."""
    winner: Outcome
    moves_count: int
    board: Board


@dataclass
class MatchSession:
    """
    One live match plus everything around it.

    Contains:
    - The match engine
    - Display names for the two seats
    - Reactions on the latest move
    - Save status of the finished match
    """
    session_id: str
    store: MatchStore
    names: PlayerNames = field(default_factory=PlayerNames)
    created_at: float = field(default_factory=time.time)

    state: SessionState = SessionState.ACTIVE
    reactions: ReactionTracker = field(default_factory=ReactionTracker)

    # Save status of the current match
    saved_record: MatchRecord | None = None
    save_error: str | None = None
    pending_result: PendingResult | None = None

    # Serializes moves when handlers run on a thread pool
    lock: threading.RLock = field(default_factory=threading.RLock, repr=False, compare=False)

    def __post_init__(self):
        self.engine = MatchEngine(on_match_ended=self._on_match_ended)

    @property
    def match(self) -> MatchState:
        return self.engine.state

    @property
    def status_text(self) -> str:
        return status_line(self.match.turn, self.match.winner, self.names)

    def is_active(self) -> bool:
        return self.state in {SessionState.ACTIVE, SessionState.GAME_OVER}

    def place_photo(self, index: int, photo_ref: str | None) -> PlacementResult:
        with self.lock:
            return self.engine.place_photo(index, photo_ref)

    def reset(self) -> MatchState:
        """Fresh board, same players. Saved history is left alone."""
        with self.lock:
            if self.pending_result:
                logger.warning(
                    "Session %s reset with an unsaved %s result",
                    self.session_id,
                    self.pending_result.winner.value,
                )
            self.reactions.clear()
            self.saved_record = None
            self.save_error = None
            self.pending_result = None
            self.state = SessionState.ACTIVE
            return self.engine.reset()

    def react_with_emoji(self, emoji: str) -> EmojiReaction:
        with self.lock:
            return self.reactions.add_emoji(self.match.last_move, emoji)

    def react_with_gif(self, url: str) -> GifOverlay:
        with self.lock:
            sent_by = self.names.for_player(self.match.turn)
            return self.reactions.show_gif(self.match.last_move, url, sent_by)

    def retry_save(self) -> bool:
        """Try again to persist a result whose first save failed."""
        with self.lock:
            if self.pending_result is None:
                raise NothingToSaveError(f"Session {self.session_id} has no unsaved result")
            return self._save()

    def _on_match_ended(self, winner: Outcome, moves_count: int, board: Board):
        self.state = SessionState.GAME_OVER
        self.pending_result = PendingResult(winner=winner, moves_count=moves_count, board=board)
        self._save()

    def _save(self) -> bool:
        result = self.pending_result
        try:
            self.saved_record = self.store.append(result.winner, result.moves_count, result.board)
        except MatchStoreError as e:
            self.save_error = str(e)
            logger.warning("Failed to save match for session %s: %s", self.session_id, e)
            return False

        self.pending_result = None
        self.save_error = None
        return True


class SessionManager:
    """
    Manages match sessions.

    Responsibilities:
    - Create sessions wired to the shared MatchStore
    - Track active sessions
    - Clean up abandoned sessions

    Sessions are in-memory only.
    """

    def __init__(self, store: MatchStore):
        self.store = store
        self._sessions: dict[str, MatchSession] = {}
        self._lock = threading.Lock()

    def create_session(self, names: PlayerNames | None = None) -> MatchSession:
        session = MatchSession(
            session_id=str(uuid.uuid4()),
            store=self.store,
            names=names or PlayerNames(),
        )
        with self._lock:
            self._sessions[session.session_id] = session
        logger.debug("Created session %s", session.session_id)
        return session

    def get_session(self, session_id: str) -> MatchSession | None:
        return self._sessions.get(session_id)

    def end_session(self, session_id: str) -> bool:
        """Drop a session from memory. Returns False if it did not exist."""
        with self._lock:
            session = self._sessions.pop(session_id, None)
        if not session:
            return False
        if session.pending_result:
            logger.warning("Session %s ended with an unsaved result", session_id)
        session.state = SessionState.ENDED
        session.reactions.clear()
        return True

    def list_active_sessions(self) -> list[str]:
        with self._lock:
            sessions = list(self._sessions.items())
        return [sid for sid, session in sessions if session.is_active()]

    def cleanup_stale_sessions(self, max_age_seconds: int = 3600) -> int:
        """
        End sessions older than max_age_seconds whose match is over.

        Called periodically to free memory.
        """
        current_time = time.time()
        with self._lock:
            sessions = list(self._sessions.items())
        to_remove = [
            session_id
            for session_id, session in sessions
            if current_time - session.created_at > max_age_seconds
            and session.state is SessionState.GAME_OVER
        ]
        for session_id in to_remove:
            self.end_session(session_id)
        return len(to_remove)
