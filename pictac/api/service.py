"""
API Service - Business logic layer between API and engine.

The service:
1. Translates API requests to engine and store calls
2. Manages match sessions
3. Resolves display names from profile prefs
4. Formats responses for mobile

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
Lookups that can fail return an ErrorResponse instead of raising.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging

from .schemas import (
    # Requests
    CreateMatchRequest,
    PlacePhotoRequest,
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
    # Shared
    CellInfo,
    EmojiReactionInfo,
    GifOverlayInfo,
    MatchStateInfo,
    SaveStatus,
    # Enums
    ErrorCode,
    SessionStatus,
)
from ..engine_core import (
    Board,
    MatchState,
    PlayerNames,
    share_message,
    victory_message,
    winner_label,
)
from ..reactions import GifLookup, ReactionError
from ..session import MatchSession, NothingToSaveError, SessionManager, SessionState
from ..storage import (
    MatchRecord,
    MatchStore,
    MatchStoreError,
    PrefsStore,
    PrefsStoreError,
    ProfilePrefs,
)

logger = logging.getLogger(__name__)


def _not_found(match_id: str) -> ErrorResponse:
    return ErrorResponse(
        error=f"Match {match_id} not found",
        error_code=ErrorCode.MATCH_NOT_FOUND,
    )


def _storage_error(e: MatchStoreError) -> ErrorResponse:
    return ErrorResponse(error=str(e), error_code=ErrorCode.STORAGE_ERROR)


@dataclass
class APIService:
    """
    Main API service for the mobile app.

    Usage:
        service = APIService(
            store=MatchStore.from_url(url),
            prefs=PrefsStore(path),
            gifs=GifLookup(api_key),
        )
        service.start()

        match = service.create_match(CreateMatchRequest())
        move = service.place_photo(match.match_id, PlacePhotoRequest(index=4, photo_ref=uri))
        history = service.list_history()
    """
    store: MatchStore
    prefs: PrefsStore
    gifs: GifLookup
    session_manager: SessionManager | None = None
    storage_error: str | None = field(default=None, init=False)

    def __post_init__(self):
        if self.session_manager is None:
            self.session_manager = SessionManager(self.store)

    def start(self):
        """
        Make sure history storage exists. Safe to call on every start.

        Unavailable storage is logged and remembered, not raised: matches
        can still be played, and their results wait in the session for
        retry_save().
        """
        try:
            self.store.initialize()
        except MatchStoreError as e:
            self.storage_error = str(e)
            logger.warning("Match history unavailable, playing without saving: %s", e)
        else:
            self.storage_error = None

    def shutdown(self):
        self.store.close()

    # =========================================================================
    # Matches
    # =========================================================================

    def create_match(self, request: CreateMatchRequest) -> MatchResponse:
        names = self._resolve_names(request.p1_name, request.p2_name)
        session = self.session_manager.create_session(names)
        return self._session_to_response(session)

    def get_match(self, match_id: str) -> MatchResponse | ErrorResponse:
        session = self.session_manager.get_session(match_id)
        if not session:
            return _not_found(match_id)
        return self._session_to_response(session)

    def list_matches(self) -> list[str]:
        return self.session_manager.list_active_sessions()

    def end_match(self, match_id: str) -> bool:
        return self.session_manager.end_session(match_id)

    def place_photo(
        self, match_id: str, request: PlacePhotoRequest
    ) -> MoveResponse | ErrorResponse:
        session = self.session_manager.get_session(match_id)
        if not session:
            return _not_found(match_id)

        with session.lock:
            result = session.place_photo(request.index, request.photo_ref)
            return MoveResponse(
                accepted=result.accepted,
                rejection=result.rejection.value if result.rejection else None,
                ended_match=result.ended_match,
                match=self._session_to_response(session),
            )

    def reset_match(self, match_id: str) -> MatchResponse | ErrorResponse:
        session = self.session_manager.get_session(match_id)
        if not session:
            return _not_found(match_id)
        session.reset()
        return self._session_to_response(session)

    def retry_save(self, match_id: str) -> MatchResponse | ErrorResponse:
        session = self.session_manager.get_session(match_id)
        if not session:
            return _not_found(match_id)
        try:
            saved = session.retry_save()
        except NothingToSaveError as e:
            return ErrorResponse(error=str(e), error_code=ErrorCode.NOTHING_TO_SAVE)
        if not saved:
            return ErrorResponse(error=session.save_error, error_code=ErrorCode.STORAGE_ERROR)
        return self._session_to_response(session)

    # =========================================================================
    # Reactions
    # =========================================================================

    def react_with_emoji(self, match_id: str, emoji: str) -> MatchResponse | ErrorResponse:
        session = self.session_manager.get_session(match_id)
        if not session:
            return _not_found(match_id)
        try:
            session.react_with_emoji(emoji)
        except ReactionError as e:
            return self._reaction_error(session, e)
        return self._session_to_response(session)

    def react_with_gif(self, match_id: str, url: str) -> MatchResponse | ErrorResponse:
        session = self.session_manager.get_session(match_id)
        if not session:
            return _not_found(match_id)
        try:
            session.react_with_gif(url)
        except ReactionError as e:
            return self._reaction_error(session, e)
        return self._session_to_response(session)

    def search_gifs(self, query: str | None) -> GifSearchResponse:
        query = (query or "").strip() or "reaction"
        return GifSearchResponse(query=query, urls=self.gifs.search(query))

    # =========================================================================
    # History
    # =========================================================================

    def list_history(self) -> HistoryResponse | ErrorResponse:
        try:
            records, corrupt = self.store.list_readable()
        except MatchStoreError as e:
            return _storage_error(e)
        names = self._resolve_names(None, None)
        items = [self._record_to_response(r, names) for r in records]
        return HistoryResponse(
            records=items,
            count=len(items),
            unreadable_ids=[e.record_id for e in corrupt],
        )

    def get_history_record(self, record_id: int) -> HistoryRecord | ErrorResponse:
        try:
            record = self.store.get(record_id)
        except MatchStoreError as e:
            return _storage_error(e)
        if not record:
            return ErrorResponse(
                error=f"Record {record_id} not found",
                error_code=ErrorCode.RECORD_NOT_FOUND,
            )
        return self._record_to_response(record, self._resolve_names(None, None))

    def delete_history_record(self, record_id: int) -> DeleteResponse | ErrorResponse:
        try:
            removed = self.store.remove_by_id(record_id)
        except MatchStoreError as e:
            return _storage_error(e)
        return DeleteResponse(success=True, removed=int(removed))

    def clear_history(self) -> DeleteResponse | ErrorResponse:
        try:
            removed = self.store.clear()
        except MatchStoreError as e:
            return _storage_error(e)
        return DeleteResponse(success=True, removed=removed)

    # =========================================================================
    # Profile
    # =========================================================================

    def get_profile(self) -> ProfileResponse | None:
        prefs = self.prefs.load()
        if not prefs:
            return None
        return ProfileResponse(name=prefs.name, color=prefs.color, avatar_uri=prefs.avatar_uri)

    def save_profile(self, request: ProfileRequest) -> ProfileResponse | ErrorResponse:
        prefs = ProfilePrefs(
            name=request.name.strip(),
            color=request.color,
            avatar_uri=request.avatar_uri,
        )
        try:
            self.prefs.save(prefs)
        except PrefsStoreError as e:
            return ErrorResponse(error=str(e), error_code=ErrorCode.STORAGE_ERROR)
        return ProfileResponse(name=prefs.name, color=prefs.color, avatar_uri=prefs.avatar_uri)

    def remove_profile(self) -> DeleteResponse | ErrorResponse:
        try:
            self.prefs.remove()
        except PrefsStoreError as e:
            return ErrorResponse(error=str(e), error_code=ErrorCode.STORAGE_ERROR)
        return DeleteResponse(success=True)

    # =========================================================================
    # Helpers
    # =========================================================================

    def _resolve_names(self, p1_name: str | None, p2_name: str | None) -> PlayerNames:
        defaults = PlayerNames()
        if not (p1_name and p1_name.strip()):
            prefs = self.prefs.load()
            p1_name = prefs.name if prefs else defaults.p1
        if not (p2_name and p2_name.strip()):
            p2_name = defaults.p2
        return PlayerNames(p1=p1_name.strip(), p2=p2_name.strip())

    def _reaction_error(self, session: MatchSession, e: ReactionError) -> ErrorResponse:
        code = ErrorCode.NO_LAST_MOVE if session.match.last_move is None else ErrorCode.VALIDATION_ERROR
        return ErrorResponse(error=str(e), error_code=code)

    def _session_to_response(self, session: MatchSession) -> MatchResponse:
        with session.lock:
            return self._build_match_response(session)

    def _build_match_response(self, session: MatchSession) -> MatchResponse:
        match = session.match
        status = (
            SessionStatus.GAME_OVER
            if session.state is SessionState.GAME_OVER
            else SessionStatus.ACTIVE
        )
        save = SaveStatus(
            saved=session.saved_record is not None,
            record_id=session.saved_record.id if session.saved_record else None,
            error=session.save_error,
        )
        overlay = session.reactions.overlay
        return MatchResponse(
            match_id=session.session_id,
            status=status,
            p1_name=session.names.p1,
            p2_name=session.names.p2,
            state=self._state_to_info(match, session.status_text),
            save=save,
            emoji_reactions={
                index: [EmojiReactionInfo.model_validate(r) for r in reactions]
                for index, reactions in session.reactions.emoji.items()
            },
            gif_overlay=GifOverlayInfo.model_validate(overlay) if overlay else None,
            victory_message=(
                victory_message(match.winner, session.names) if match.winner else None
            ),
            share_message=share_message() if match.ended else None,
        )

    def _state_to_info(self, match: MatchState, status_text: str) -> MatchStateInfo:
        return MatchStateInfo(
            board=_board_to_info(match.board),
            turn=match.turn.value,
            ended=match.ended,
            winner=match.winner.value if match.winner else None,
            moves_count=match.moves_count,
            last_move=match.last_move,
            status_text=status_text,
        )

    def _record_to_response(self, record: MatchRecord, names: PlayerNames) -> HistoryRecord:
        return HistoryRecord(
            id=record.id,
            created_at=record.created_at,
            winner=record.winner.value,
            winner_label=winner_label(record.winner, names),
            moves_count=record.moves_count,
            board=_board_to_info(record.board),
        )


def _board_to_info(board: Board) -> list[CellInfo | None]:
    return [
        CellInfo(photo_ref=cell.photo_ref, player=cell.player.value) if cell else None
        for cell in board
    ]
