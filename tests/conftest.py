"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures/variables required for testing multiple layers.
"""

from typing import Callable, Generator

import pytest
from sqlalchemy import StaticPool, create_engine
from sqlalchemy.orm import Session, sessionmaker

from chesscore.chess.game import Game, MoveOutcome
from chesscore.chess.moves import Move
from chesscore.core.shared_types import GameResult, SelfCheckPolicy
from chesscore.db.schema import Base

# Setup an in-memory SQLite database for testing
DATABASE_URL = "sqlite:///:memory:"
engine = create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autoflush=False, bind=engine)

WHITE_PLAYER = "player_white"
BLACK_PLAYER = "player_black"


@pytest.fixture
def db_session_repo() -> Generator[Session, None, None]:
    """Connection to a test database. Tables are removed at teardown to make unit tests of repository independent of each other."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        Base.metadata.drop_all(bind=engine)
        db.close()


@pytest.fixture
def started_game() -> Callable[..., Game]:
    """Call the inner function to get a game with both players registered (optionally from a custom FEN)."""

    def _create_game(
        fen: str | None = None, policy: SelfCheckPolicy = SelfCheckPolicy.STRICT
    ) -> Game:
        game = Game.new_game(WHITE_PLAYER, "white", starting_fen=fen, self_check_policy=policy)
        game.register_player(BLACK_PLAYER)
        assert game.result == GameResult.IN_PROGRESS
        return game

    return _create_game


@pytest.fixture
def play() -> Callable[..., list[MoveOutcome]]:
    """Play a sequence of UCI moves, letting whoever is on turn make the move."""

    def _play(game: Game, *moves_uci: str) -> list[MoveOutcome]:
        outcomes: list[MoveOutcome] = []
        for uci in moves_uci:
            move = Move.from_uci(uci)
            player = game.turn_holder()
            assert player is not None
            outcomes.append(game.make_move(player, move.start, move.end, move.promotion))
        return outcomes

    return _play
