"""
Tests for API Pydantic schemas.

Validates that:
- Request models reject bad input
- Response models serialize enums as plain strings
- Hidden cards omit their identity
- Error codes are properly structured
"""

import pytest
from pydantic import ValidationError


class TestPydanticSchemas:
    """Tests for Pydantic schema validation."""

    def test_new_game_request_layout_optional(self):
        from pairs.api.schemas import NewGameRequest, LayoutName

        assert NewGameRequest().layout is None
        assert NewGameRequest(layout="three_by_three").layout is LayoutName.THREE_BY_THREE

        with pytest.raises(ValidationError):
            NewGameRequest(layout="four_by_four")

    def test_tick_request_bounds(self):
        from pairs.api.schemas import TickRequest

        assert TickRequest(seconds=0).seconds == 0

        with pytest.raises(ValidationError):
            TickRequest(seconds=-0.1)
        with pytest.raises(ValidationError):
            TickRequest(seconds=120)
        with pytest.raises(ValidationError):
            TickRequest()

    def test_game_state_response_schema(self):
        """GameStateResponse carries board, counters and events."""
        from pairs.api.schemas import (
            BoardInfo,
            CardInfo,
            EventInfo,
            GameStateResponse,
            LayoutName,
            PhaseName,
        )

        response = GameStateResponse(
            phase=PhaseName.SINGLE_SELECTED,
            score=150,
            moves=3,
            elapsed_time=12.5,
            input_locked=False,
            games_started=1,
            board=BoardInfo(
                layout=LayoutName.TWO_BY_TWO,
                rows=2,
                cols=2,
                slot_count=4,
                cards=[
                    CardInfo(position=0, is_face_up=True, is_matched=False,
                             card_id=1, face_index=7, is_bonus=False),
                    CardInfo(position=1, is_face_up=False, is_matched=False),
                ],
            ),
            events=[EventInfo(kind="sound", sound="flip")],
        )

        data = response.model_dump(mode="json")
        assert data["phase"] == "single_selected"
        assert data["board"]["layout"] == "two_by_two"
        assert data["board"]["cards"][0]["face_index"] == 7
        assert data["board"]["cards"][1]["card_id"] is None
        assert data["events"][0]["sound"] == "flip"
        assert data["save_error"] is None
        assert data["api_version"] == "v1"

    def test_select_response_schema(self):
        from pairs.api.schemas import (
            GameStateResponse,
            PhaseName,
            SelectionOutcome,
            SelectResponse,
        )

        state = GameStateResponse(
            phase=PhaseName.COMPARING,
            score=0,
            moves=0,
            elapsed_time=1.0,
            input_locked=False,
            games_started=1,
        )
        response = SelectResponse(position=2, outcome="comparing", state=state)

        assert response.outcome is SelectionOutcome.COMPARING
        assert response.model_dump(mode="json")["state"]["phase"] == "comparing"

    def test_error_response_schema(self):
        """ErrorResponse has structured error codes."""
        from pairs.api.schemas import ErrorResponse, ErrorCode

        error = ErrorResponse(
            error="Position 12 is not on a 2x2 board",
            error_code=ErrorCode.INVALID_POSITION,
            details={"position": 12, "slot_count": 4},
        )

        data = error.model_dump(mode="json")
        assert data["error_code"] == "INVALID_POSITION"
        assert data["details"]["slot_count"] == 4
