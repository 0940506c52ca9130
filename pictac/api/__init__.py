"""
API Module - Mobile app interface.

Exposes the engine via REST API for mobile consumption.
The mobile app:
1. Starts a match
2. Places photos (camera or gallery picks) into cells
3. Reacts to moves with emoji and GIFs
4. Browses and prunes match history
5. Saves the player's profile

Live matches are session-scoped; only finished matches are persisted.
"""

from .schemas import (
    # Requests
    CreateMatchRequest,
    PlacePhotoRequest,
    EmojiReactionRequest,
    GifReactionRequest,
    ProfileRequest,
    # Responses
    MatchResponse,
    MoveResponse,
    HistoryRecord,
    HistoryResponse,
    DeleteResponse,
    GifSearchResponse,
    ProfileResponse,
    ErrorResponse,
    # Enums
    ErrorCode,
    SessionStatus,
)
from .service import APIService

__all__ = [
    "CreateMatchRequest",
    "PlacePhotoRequest",
    "EmojiReactionRequest",
    "GifReactionRequest",
    "ProfileRequest",
    "MatchResponse",
    "MoveResponse",
    "HistoryRecord",
    "HistoryResponse",
    "DeleteResponse",
    "GifSearchResponse",
    "ProfileResponse",
    "ErrorResponse",
    "ErrorCode",
    "SessionStatus",
    "APIService",
]
