"""Unit tests for chesscore/db/sql_repository.py"""

from uuid import uuid4

from sqlalchemy.orm import Session

from chesscore.chess.fen import STARTING_FEN
from chesscore.chess.game import Game
from chesscore.chess.moves import Move
from chesscore.core.models import GameModel
from chesscore.db.sql_repository import SQLGameRepository


def mock_model() -> GameModel:
    return GameModel(
        current_fen=STARTING_FEN,
        registered_players={"white": "player_white", "black": "player_black"},
        result="in progress",
        position_history={"some position": 2, "another position": 1},
    )


def test_create_game(db_session_repo: Session) -> None:
    """Conversion from a GameModel to DBGame for a new entry to the database."""
    model = mock_model()
    repo = SQLGameRepository(db_session_repo)
    record_in_db, _ = repo.create_game(model)
    assert isinstance(record_in_db, GameModel)
    assert record_in_db == model


def test_get_game_by_id(db_session_repo: Session) -> None:
    """Create a game, then fetch it from db."""
    repo = SQLGameRepository(db_session_repo)
    expected_game, game_id = repo.create_game(mock_model())
    game_found = repo.get_game(game_id)
    assert isinstance(game_found, GameModel)
    assert game_found == expected_game


def test_get_unknown_game(db_session_repo: Session) -> None:
    """
    Should return None if ID does not match anything in database.

    NOTE with an empty database, any id is a valid test case.
    """
    repo = SQLGameRepository(db_session_repo)
    assert repo.get_game(uuid4()) is None

    repo.create_game(mock_model())
    assert repo.get_game(uuid4()) is None


def test_update_game(db_session_repo: Session) -> None:
    """Update an earlier created record: the JSON columns must pick up the changes too."""
    repo = SQLGameRepository(db_session_repo)
    _, game_id = repo.create_game(mock_model())

    updated = mock_model()
    updated.current_fen = "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq e3 0 1"
    updated.position_history["some position"] = 3
    updated.result = "draw"
    updated.termination = "threefold repetition"
    updated.move_count = 12
    updated.draw_offered_by = "black"

    record = repo.update_game(game_id, updated)
    assert record == updated
    assert repo.get_game(game_id) == updated


def test_update_unknown_game(db_session_repo: Session) -> None:
    repo = SQLGameRepository(db_session_repo)
    assert repo.update_game(uuid4(), mock_model()) is None


def test_delete_game(db_session_repo: Session) -> None:
    repo = SQLGameRepository(db_session_repo)
    model, game_id = repo.create_game(mock_model())
    assert repo.delete_game(game_id) == model
    assert repo.get_game(game_id) is None
    assert repo.delete_game(game_id) is None


def test_game_survives_persistence(db_session_repo: Session) -> None:
    """A game stored half-way through is restored with the same repetition counts."""
    game = Game.new_game("player_white", "white")
    game.register_player("player_black")
    for uci in ("g1f3", "g8f6", "f3g1", "f6g8"):
        player = game.turn_holder()
        assert player is not None
        move = Move.from_uci(uci)
        game.make_move(player, move.start, move.end)

    repo = SQLGameRepository(db_session_repo)
    _, game_id = repo.create_game(game.to_model())
    stored = repo.get_game(game_id)
    assert stored is not None

    restored = Game.from_model(stored)
    assert restored.state.repetition_count() == 2
    assert restored.state.to_fen() == game.state.to_fen()
