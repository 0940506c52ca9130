"""
FastAPI Application - REST API for the mobile app.

Endpoints:
    POST   /api/v1/matches                          Start a match
    GET    /api/v1/matches                          List live matches
    GET    /api/v1/matches/{id}                     Get match state
    DELETE /api/v1/matches/{id}                     End a match session
    POST   /api/v1/matches/{id}/moves               Place a photo
    POST   /api/v1/matches/{id}/reset               Fresh board, same players
    POST   /api/v1/matches/{id}/save                Retry a failed history save
    POST   /api/v1/matches/{id}/reactions/emoji     React to the last move
    POST   /api/v1/matches/{id}/reactions/gif       Pop a GIF over the board
    GET    /api/v1/gifs?q=...                       Search reaction GIFs
    GET    /api/v1/history                          Finished matches, newest first
    DELETE /api/v1/history                          Clear history
    GET    /api/v1/history/{id}                     One finished match
    DELETE /api/v1/history/{id}                     Delete one finished match
    GET    /api/v1/profile                          Load profile
    PUT    /api/v1/profile                          Save profile
    DELETE /api/v1/profile                          Remove profile
    GET    /api/v1/health                           Liveness

Handlers are plain functions: the service does blocking disk and network
I/O, so FastAPI runs them on its thread pool.

Run with:
    uvicorn pictac.api.app:create_app --factory
"""

from contextlib import asynccontextmanager
from typing import Annotated, Optional, Union
import logging

from fastapi import FastAPI, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..config import Settings, get_settings
from ..reactions import GifLookup
from ..storage import MatchStore, PrefsStore
from .service import APIService
from .schemas import (
    # Request models
    CreateMatchRequest,
    PlacePhotoRequest,
    EmojiReactionRequest,
    GifReactionRequest,
    ProfileRequest,
    # Response models
    MatchResponse,
    MoveResponse,
    MatchListResponse,
    EndMatchResponse,
    HistoryRecord,
    HistoryResponse,
    DeleteResponse,
    GifSearchResponse,
    ProfileResponse,
    HealthResponse,
    ErrorResponse,
    # Enums
    ErrorCode,
)

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    ErrorCode.MATCH_NOT_FOUND: 404,
    ErrorCode.RECORD_NOT_FOUND: 404,
    ErrorCode.PROFILE_NOT_FOUND: 404,
    ErrorCode.NO_LAST_MOVE: 409,
    ErrorCode.NOTHING_TO_SAVE: 409,
    ErrorCode.STORAGE_ERROR: 503,
    ErrorCode.VALIDATION_ERROR: 400,
    ErrorCode.INTERNAL_ERROR: 500,
}


def build_service(settings: Settings) -> APIService:
    """Wire the service from settings."""
    return APIService(
        store=MatchStore.from_url(settings.database_url),
        prefs=PrefsStore(settings.prefs_path),
        gifs=GifLookup(settings.giphy_api_key, timeout=settings.giphy_timeout),
    )


def create_app(service: APIService | None = None, settings: Settings | None = None) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (built from settings if not provided)
        settings: Optional Settings (read from the environment if not provided)

    Returns:
        FastAPI application instance
    """
    settings = settings or get_settings()
    api_service = service or build_service(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        api_service.start()
        logger.info("Pic-Tac-Toe API started (%s)", settings.env)
        yield
        api_service.shutdown()

    app = FastAPI(
        title="Pic-Tac-Toe API",
        description="""
Photo tic-tac-toe: every move is a photo dropped into a cell.

Placements on a filled cell, out of range, or after the match ended are
**not errors**: the response has `accepted=false` and the reason in
`rejection`. Finished matches are saved to history automatically; if that
save fails, `save.error` is set and `POST /save` retries it.
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        lifespan=lifespan,
    )

    # CORS for mobile app
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.allowed_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(error: ErrorResponse) -> JSONResponse:
        """Turn a service ErrorResponse into an HTTP response."""
        return JSONResponse(
            status_code=ERROR_STATUS.get(error.error_code, 400),
            content=error.model_dump(mode="json"),
        )

    def respond(result):
        if isinstance(result, ErrorResponse):
            return make_error_response(result)
        return result

    error_responses = {
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    }

    # =========================================================================
    # Match Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/matches",
        response_model=MatchResponse,
        tags=["Matches"],
        summary="Start a new match",
    )
    def create_match(body: Optional[CreateMatchRequest] = None) -> MatchResponse:
        """P1 defaults to the saved profile name, P2 to 'Friend'."""
        return api_service.create_match(body or CreateMatchRequest())

    @app.get(
        "/api/v1/matches",
        response_model=MatchListResponse,
        tags=["Matches"],
        summary="List live matches",
    )
    def list_matches() -> MatchListResponse:
        matches = api_service.list_matches()
        return MatchListResponse(matches=matches, count=len(matches))

    @app.get(
        "/api/v1/matches/{match_id}",
        response_model=MatchResponse,
        responses=error_responses,
        tags=["Matches"],
        summary="Get match state",
    )
    def get_match(match_id: str) -> Union[MatchResponse, JSONResponse]:
        return respond(api_service.get_match(match_id))

    @app.delete(
        "/api/v1/matches/{match_id}",
        response_model=EndMatchResponse,
        tags=["Matches"],
        summary="End a match session",
    )
    def end_match(match_id: str) -> EndMatchResponse:
        """Releases the live session. History is not affected."""
        return EndMatchResponse(success=api_service.end_match(match_id), match_id=match_id)

    @app.post(
        "/api/v1/matches/{match_id}/moves",
        response_model=MoveResponse,
        responses=error_responses,
        tags=["Matches"],
        summary="Place a photo in a cell",
    )
    def place_photo(
        match_id: str, body: PlacePhotoRequest
    ) -> Union[MoveResponse, JSONResponse]:
        """
        Place a photo for whoever's turn it is.

        When the move ends the match the result is saved to history.
        """
        return respond(api_service.place_photo(match_id, body))

    @app.post(
        "/api/v1/matches/{match_id}/reset",
        response_model=MatchResponse,
        responses=error_responses,
        tags=["Matches"],
        summary="Reset the board",
    )
    def reset_match(match_id: str) -> Union[MatchResponse, JSONResponse]:
        return respond(api_service.reset_match(match_id))

    @app.post(
        "/api/v1/matches/{match_id}/save",
        response_model=MatchResponse,
        responses=error_responses,
        tags=["Matches"],
        summary="Retry saving a finished match",
    )
    def retry_save(match_id: str) -> Union[MatchResponse, JSONResponse]:
        return respond(api_service.retry_save(match_id))

    # =========================================================================
    # Reaction Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/matches/{match_id}/reactions/emoji",
        response_model=MatchResponse,
        responses=error_responses,
        tags=["Reactions"],
        summary="React to the last move with an emoji",
    )
    def react_with_emoji(
        match_id: str, body: EmojiReactionRequest
    ) -> Union[MatchResponse, JSONResponse]:
        return respond(api_service.react_with_emoji(match_id, body.emoji))

    @app.post(
        "/api/v1/matches/{match_id}/reactions/gif",
        response_model=MatchResponse,
        responses=error_responses,
        tags=["Reactions"],
        summary="Show a GIF over the board",
    )
    def react_with_gif(
        match_id: str, body: GifReactionRequest
    ) -> Union[MatchResponse, JSONResponse]:
        return respond(api_service.react_with_gif(match_id, body.url))

    @app.get(
        "/api/v1/gifs",
        response_model=GifSearchResponse,
        tags=["Reactions"],
        summary="Search reaction GIFs",
    )
    def search_gifs(
        q: Annotated[Optional[str], Query(description="Free-text mood, e.g. 'salty'")] = None,
    ) -> GifSearchResponse:
        """Up to 8 GIF URLs. An empty list means nothing found or GIPHY is unreachable."""
        return api_service.search_gifs(q)

    # =========================================================================
    # History Endpoints
    # =========================================================================

    @app.get(
        "/api/v1/history",
        response_model=HistoryResponse,
        responses=error_responses,
        tags=["History"],
        summary="List finished matches, newest first",
    )
    def list_history() -> Union[HistoryResponse, JSONResponse]:
        return respond(api_service.list_history())

    @app.delete(
        "/api/v1/history",
        response_model=DeleteResponse,
        responses=error_responses,
        tags=["History"],
        summary="Clear match history",
    )
    def clear_history() -> Union[DeleteResponse, JSONResponse]:
        return respond(api_service.clear_history())

    @app.get(
        "/api/v1/history/{record_id}",
        response_model=HistoryRecord,
        responses=error_responses,
        tags=["History"],
        summary="Get one finished match",
    )
    def get_history_record(record_id: int) -> Union[HistoryRecord, JSONResponse]:
        return respond(api_service.get_history_record(record_id))

    @app.delete(
        "/api/v1/history/{record_id}",
        response_model=DeleteResponse,
        responses=error_responses,
        tags=["History"],
        summary="Delete one finished match",
    )
    def delete_history_record(record_id: int) -> Union[DeleteResponse, JSONResponse]:
        """Deleting an id that does not exist succeeds with removed=0."""
        return respond(api_service.delete_history_record(record_id))

    # =========================================================================
    # Profile Endpoints
    # =========================================================================

    @app.get(
        "/api/v1/profile",
        response_model=ProfileResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Profile"],
        summary="Load the local profile",
    )
    def get_profile() -> Union[ProfileResponse, JSONResponse]:
        profile = api_service.get_profile()
        if profile is None:
            return make_error_response(ErrorResponse(
                error="No profile saved",
                error_code=ErrorCode.PROFILE_NOT_FOUND,
            ))
        return profile

    @app.put(
        "/api/v1/profile",
        response_model=ProfileResponse,
        responses={503: {"model": ErrorResponse}},
        tags=["Profile"],
        summary="Save the local profile",
    )
    def save_profile(body: ProfileRequest) -> Union[ProfileResponse, JSONResponse]:
        return respond(api_service.save_profile(body))

    @app.delete(
        "/api/v1/profile",
        response_model=DeleteResponse,
        responses={503: {"model": ErrorResponse}},
        tags=["Profile"],
        summary="Remove the local profile",
    )
    def remove_profile() -> Union[DeleteResponse, JSONResponse]:
        return respond(api_service.remove_profile())

    # =========================================================================
    # Health
    # =========================================================================

    @app.get(
        "/api/v1/health",
        response_model=HealthResponse,
        tags=["System"],
    )
    def health() -> HealthResponse:
        """Liveness. storage_error is set when history could not be opened at startup."""
        return HealthResponse(
            version=__version__,
            active_matches=len(api_service.list_matches()),
            storage_error=api_service.storage_error,
        )

    return app
