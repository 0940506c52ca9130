"""
Session - Live matches and their link to match history.
"""

from .manager import (
    MatchSession,
    NothingToSaveError,
    PendingResult,
    SessionManager,
    SessionState,
)

__all__ = [
    "MatchSession",
    "NothingToSaveError",
    "PendingResult",
    "SessionManager",
    "SessionState",
]
