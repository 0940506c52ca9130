"""
Tests for API Pydantic schemas.

Validates that:
- Request/response models serialize correctly
- Error codes are properly structured
- The OpenAPI document lists every endpoint with a response model
- Route handlers are plain functions, run on the thread pool
"""

import inspect

import pytest
from fastapi.routing import APIRoute
from pydantic import ValidationError


@pytest.fixture
def app(service):
    from pictac.api.app import create_app
    from pictac.config import Settings

    return create_app(service=service, settings=Settings(env="test"))


@pytest.fixture
def service(store, prefs, gifs):
    from pictac.api.service import APIService

    return APIService(store=store, prefs=prefs, gifs=gifs)


class TestPydanticSchemas:
    """Tests for Pydantic schema validation."""

    def test_match_state_schema(self):
        from pictac.api.schemas import CellInfo, MatchStateInfo, PlayerSeat

        state = MatchStateInfo(
            board=[CellInfo(photo_ref="file:///a.jpg", player=PlayerSeat.P1)] + [None] * 8,
            turn=PlayerSeat.P2,
            ended=False,
            moves_count=1,
            last_move=0,
            status_text="Friend's turn",
        )

        data = state.model_dump(mode="json")
        assert data["board"][0] == {"photo_ref": "file:///a.jpg", "player": "P1"}
        assert data["turn"] == "P2"
        assert data["winner"] is None

    def test_board_must_have_nine_cells(self):
        from pictac.api.schemas import MatchStateInfo

        with pytest.raises(ValidationError):
            MatchStateInfo(
                board=[None] * 8,
                turn="P1",
                ended=False,
                moves_count=0,
                status_text="You's turn",
            )

    def test_history_record_schema(self):
        from pictac.api.schemas import HistoryRecord, MatchOutcome

        record = HistoryRecord(
            id=7,
            created_at=1_700_000_000_000,
            winner="Draw",
            winner_label="Draw",
            moves_count=9,
            board=[None] * 9,
        )

        assert record.winner is MatchOutcome.DRAW
        assert record.model_dump(mode="json")["winner"] == "Draw"

    def test_unknown_winner_rejected(self):
        from pictac.api.schemas import HistoryRecord

        with pytest.raises(ValidationError):
            HistoryRecord(
                id=1, created_at=0, winner="X", winner_label="X", moves_count=5, board=[None] * 9
            )

    def test_from_attributes(self):
        from pictac.api.schemas import EmojiReactionInfo, GifOverlayInfo
        from pictac.reactions import EmojiReaction, GifOverlay

        emoji = EmojiReactionInfo.model_validate(EmojiReaction(reaction_id="abc", emoji="🔥"))
        overlay = GifOverlayInfo.model_validate(GifOverlay(url="https://g/1.gif", sent_by="Ana"))

        assert emoji.emoji == "🔥"
        assert overlay.sent_by == "Ana"

    def test_place_photo_request_requires_fields(self):
        from pictac.api.schemas import PlacePhotoRequest

        with pytest.raises(ValidationError):
            PlacePhotoRequest(index=0)
        with pytest.raises(ValidationError):
            PlacePhotoRequest(photo_ref="file:///a.jpg")

    def test_profile_request_validation(self):
        from pictac.api.schemas import ProfileRequest

        assert ProfileRequest(name="Ana").color is None
        with pytest.raises(ValidationError):
            ProfileRequest(name="")
        with pytest.raises(ValidationError):
            ProfileRequest(name="   ")
        assert ProfileRequest(name=" Ana ").name == "Ana"

    def test_error_response_schema(self):
        from pictac.api.schemas import ErrorCode, ErrorResponse

        error = ErrorResponse(error="Match abc not found", error_code=ErrorCode.MATCH_NOT_FOUND)

        data = error.model_dump(mode="json")
        assert data["success"] is False
        assert data["error_code"] == "MATCH_NOT_FOUND"
        assert data["details"] is None


class TestErrorCodes:
    """Tests for error code enum."""

    def test_all_error_codes_defined(self):
        from pictac.api.schemas import ErrorCode

        expected = {
            "MATCH_NOT_FOUND",
            "RECORD_NOT_FOUND",
            "PROFILE_NOT_FOUND",
            "STORAGE_ERROR",
            "VALIDATION_ERROR",
            "NO_LAST_MOVE",
            "NOTHING_TO_SAVE",
            "INTERNAL_ERROR",
        }
        assert {code.value for code in ErrorCode} == expected

    def test_error_code_values_are_strings(self):
        from pictac.api.schemas import ErrorCode

        for code in ErrorCode:
            assert isinstance(code.value, str)
            # Error codes should be UPPER_SNAKE_CASE
            assert code.value == code.value.upper()

    def test_every_error_code_has_http_status(self):
        from pictac.api.app import ERROR_STATUS
        from pictac.api.schemas import ErrorCode

        assert set(ERROR_STATUS) == set(ErrorCode)


class TestOpenAPISchema:
    """Tests for OpenAPI schema generation."""

    def test_openapi_schema_generates(self, app):
        schema = app.openapi()

        assert "paths" in schema
        assert "components" in schema
        assert "schemas" in schema["components"]

    def test_response_models_in_schema(self, app):
        schemas = app.openapi()["components"]["schemas"]

        for name in [
            "MatchResponse",
            "MoveResponse",
            "HistoryResponse",
            "HistoryRecord",
            "GifSearchResponse",
            "ProfileResponse",
            "ErrorResponse",
        ]:
            assert name in schemas, f"Missing schema: {name}"

    @pytest.mark.parametrize("path, method", [
        ("/api/v1/matches", "post"),
        ("/api/v1/matches/{match_id}", "get"),
        ("/api/v1/matches/{match_id}/moves", "post"),
        ("/api/v1/matches/{match_id}/reset", "post"),
        ("/api/v1/matches/{match_id}/save", "post"),
        ("/api/v1/matches/{match_id}/reactions/emoji", "post"),
        ("/api/v1/matches/{match_id}/reactions/gif", "post"),
        ("/api/v1/gifs", "get"),
        ("/api/v1/history", "get"),
        ("/api/v1/history", "delete"),
        ("/api/v1/history/{record_id}", "get"),
        ("/api/v1/history/{record_id}", "delete"),
        ("/api/v1/profile", "put"),
        ("/api/v1/health", "get"),
    ])
    def test_endpoints_have_response_models(self, app, path, method):
        paths = app.openapi()["paths"]

        assert path in paths
        assert "200" in paths[path][method]["responses"]


class TestRouteHandlers:
    """Handlers touch disk and network, so none may block the event loop."""

    def test_handlers_are_plain_functions(self, app):
        routes = [r for r in app.routes if isinstance(r, APIRoute)]

        assert routes
        for route in routes:
            assert not inspect.iscoroutinefunction(route.endpoint), route.path
