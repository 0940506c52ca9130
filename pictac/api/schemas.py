"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the exact contract between the mobile app and the engine.

Error Codes:
- MATCH_NOT_FOUND: Match session does not exist or has ended
- RECORD_NOT_FOUND: History record does not exist
- PROFILE_NOT_FOUND: No profile has been saved yet
- STORAGE_ERROR: Match history could not be read or written
- VALIDATION_ERROR: Request body is malformed
- NO_LAST_MOVE: Reaction sent before any photo was placed
- NOTHING_TO_SAVE: Retry requested but the result is already saved
"""

from enum import Enum
from typing import Optional, Any
from pydantic import BaseModel, Field


# =============================================================================
# Enums
# =============================================================================

class PlayerSeat(str, Enum):
    P1 = "P1"
    P2 = "P2"


class MatchOutcome(str, Enum):
    P1 = "P1"
    P2 = "P2"
    DRAW = "Draw"


class SessionStatus(str, Enum):
    ACTIVE = "active"
    GAME_OVER = "game_over"


class ErrorCode(str, Enum):
    """Structured error codes."""
    MATCH_NOT_FOUND = "MATCH_NOT_FOUND"
    RECORD_NOT_FOUND = "RECORD_NOT_FOUND"
    PROFILE_NOT_FOUND = "PROFILE_NOT_FOUND"
    STORAGE_ERROR = "STORAGE_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NO_LAST_MOVE = "NO_LAST_MOVE"
    NOTHING_TO_SAVE = "NOTHING_TO_SAVE"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# =============================================================================
# Shared Models
# =============================================================================

class CellInfo(BaseModel):
    """An occupied board cell."""
    photo_ref: str
    player: PlayerSeat

    model_config = {"from_attributes": True}


class EmojiReactionInfo(BaseModel):
    reaction_id: str
    emoji: str

    model_config = {"from_attributes": True}


class GifOverlayInfo(BaseModel):
    url: str
    sent_by: str

    model_config = {"from_attributes": True}


class SaveStatus(BaseModel):
    """Whether the finished match made it into history."""
    saved: bool = False
    record_id: Optional[int] = None
    error: Optional[str] = None


class MatchStateInfo(BaseModel):
    """Full board plus turn/winner, ready to render."""
    board: list[Optional[CellInfo]] = Field(min_length=9, max_length=9)
    turn: PlayerSeat
    ended: bool
    winner: Optional[MatchOutcome] = None
    moves_count: int = Field(ge=0, le=9)
    last_move: Optional[int] = None
    status_text: str


# =============================================================================
# Requests
# =============================================================================

class CreateMatchRequest(BaseModel):
    p1_name: Optional[str] = Field(
        default=None, description="Name for P1; defaults to the profile name, then 'You'"
    )
    p2_name: Optional[str] = Field(default=None, description="Name for P2; defaults to 'Friend'")


class PlacePhotoRequest(BaseModel):
    index: int = Field(description="Cell index 0..8, row-major")
    photo_ref: str = Field(description="URI or handle of the photo to place")


class EmojiReactionRequest(BaseModel):
    emoji: str = Field(min_length=1)


class GifReactionRequest(BaseModel):
    url: str = Field(min_length=1)


class ProfileRequest(BaseModel):
    name: str = Field(min_length=1, description="Display name; surrounding spaces are dropped")
    color: Optional[str] = None
    avatar_uri: Optional[str] = None

    model_config = {"str_strip_whitespace": True}


# =============================================================================
# Responses
# =============================================================================

class MatchResponse(BaseModel):
    """A live match session."""
    match_id: str
    status: SessionStatus
    p1_name: str
    p2_name: str
    state: MatchStateInfo
    save: SaveStatus = Field(default_factory=SaveStatus)
    emoji_reactions: dict[int, list[EmojiReactionInfo]] = Field(default_factory=dict)
    gif_overlay: Optional[GifOverlayInfo] = None
    victory_message: Optional[str] = None
    share_message: Optional[str] = None


class MoveResponse(BaseModel):
    """Result of a placement. Rejected placements are not errors."""
    accepted: bool
    rejection: Optional[str] = None
    ended_match: bool = False
    match: MatchResponse


class MatchListResponse(BaseModel):
    matches: list[str]
    count: int


class EndMatchResponse(BaseModel):
    success: bool
    match_id: str


class HistoryRecord(BaseModel):
    """One finished match from history."""
    id: int
    created_at: int = Field(description="Epoch milliseconds")
    winner: MatchOutcome
    winner_label: str
    moves_count: int
    board: list[Optional[CellInfo]]


class HistoryResponse(BaseModel):
    records: list[HistoryRecord]
    count: int
    unreadable_ids: list[int] = Field(
        default_factory=list,
        description="Stored matches that could not be decoded; delete them by id",
    )


class DeleteResponse(BaseModel):
    success: bool
    removed: int = 0


class GifSearchResponse(BaseModel):
    query: str
    urls: list[str]


class ProfileResponse(BaseModel):
    name: str
    color: Optional[str] = None
    avatar_uri: Optional[str] = None


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str
    active_matches: int = 0
    storage_error: Optional[str] = None


class ErrorResponse(BaseModel):
    """Standardized error body."""
    success: bool = False
    error: str
    error_code: ErrorCode
    details: Optional[dict[str, Any]] = None
