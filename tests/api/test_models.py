from uuid import UUID, uuid4

import pytest

from chesscore.api.models import CreateGameRequest, MoveRequest, MoveResponse
from chesscore.core.exceptions import InvalidRequestError
from chesscore.core.shared_types import Color, GameResult, PieceType, SelfCheckPolicy

PLAYER = "don't hate the player, hate the name."


@pytest.fixture
def mock_id() -> UUID:
    return uuid4()


# -- Validation - CreateGameRequest --
def test_valid_fen() -> None:
    """Test that CreateGameRequest accepts a valid FEN string."""
    valid_fen = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"
    request = CreateGameRequest(player_name=PLAYER, color=Color.BLACK, starting_fen=valid_fen)
    assert request.starting_fen == valid_fen
    assert request.self_check_policy is None


def test_starting_fen_is_optional() -> None:
    """Should be able to not supply a starting FEN, and validator just returns None."""
    request = CreateGameRequest(player_name=PLAYER, color=Color.BLACK, starting_fen=None)
    assert request.starting_fen is None


@pytest.mark.parametrize(
    "invalid_fen",
    [
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0",  # only 5 space-separated values
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1 extra",  # too many space-separated values
    ],
)
def test_invalid_fen(invalid_fen: str) -> None:
    """Structurally invalid FEN: more or less than 6 space-separated fields."""
    with pytest.raises(InvalidRequestError):
        _ = CreateGameRequest(player_name=PLAYER, color=Color.BLACK, starting_fen=invalid_fen)


def test_self_check_policy_from_string() -> None:
    request = CreateGameRequest.model_validate(
        {"player_name": PLAYER, "color": "white", "self_check_policy": "forfeit"}
    )
    assert request.color == Color.WHITE
    assert request.self_check_policy == SelfCheckPolicy.FORFEIT


# -- Validation - MoveRequest --
@pytest.mark.parametrize("start, end", [("e2", "e4"), ("a1", "h8"), ("h1", "a8")])
def test_valid_square_names(mock_id: UUID, start: str, end: str) -> None:
    """Test that MoveRequest accepts correctly written squares in algebraic notation."""
    request = MoveRequest(game_id=mock_id, player_name=PLAYER, from_square=start, to_square=end)
    assert request.from_square == start
    assert request.to_square == end
    assert request.promote_to is None


@pytest.mark.parametrize("square", ["e9", "i2", "E2", "e", "e22", "22"])
def test_invalid_square_names(mock_id: UUID, square: str) -> None:
    with pytest.raises(InvalidRequestError):
        MoveRequest(game_id=mock_id, player_name=PLAYER, from_square=square, to_square="e4")
    with pytest.raises(InvalidRequestError):
        MoveRequest(game_id=mock_id, player_name=PLAYER, from_square="e2", to_square=square)


def test_promotion_choice(mock_id: UUID) -> None:
    request = MoveRequest.model_validate(
        {
            "game_id": str(mock_id),
            "player_name": PLAYER,
            "from_square": "a7",
            "to_square": "a8",
            "promote_to": "knight",
        }
    )
    assert request.promote_to == PieceType.KNIGHT


# -- Responses --
def test_move_response_serialization(mock_id: UUID) -> None:
    response = MoveResponse(
        game_id=mock_id,
        accepted=True,
        moving_piece=1,
        captured_piece=-1,
        is_check=False,
        is_checkmate=False,
        is_castling=False,
        is_en_passant=True,
        new_game_state=GameResult.IN_PROGRESS,
    )
    dumped = response.model_dump(mode="json")
    assert dumped["new_game_state"] == "in progress"
    assert dumped["captured_piece"] == -1
    assert dumped["game_ended"] is None
