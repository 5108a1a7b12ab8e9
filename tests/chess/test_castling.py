"""unit tests for chesscore/chess/castling.py"""

import pytest

from chesscore.chess.castling import (
    CASTLING_RULES,
    CastlingDirection,
    CastlingRights,
    CastlingSquares,
    castling_direction_for,
)
from chesscore.chess.pieces import Color
from chesscore.chess.square import Square


def sq(name: str) -> Square:
    return Square.from_algebraic(name)


def test_castling_squares_creation() -> None:
    castling_squares = CastlingSquares.from_algebraic("e1", "g1", "h1", "f1")
    assert castling_squares.king_from == sq("e1")
    assert castling_squares.king_to == sq("g1")
    assert castling_squares.rook_from == sq("h1")
    assert castling_squares.rook_to == sq("f1")


def test_king_path_and_squares_between() -> None:
    short = CASTLING_RULES[CastlingDirection.WHITE_KING_SIDE]
    long = CASTLING_RULES[CastlingDirection.BLACK_QUEEN_SIDE]
    assert short.king_path() == [sq("e1"), sq("f1"), sq("g1")]
    assert short.between() == [sq("f1"), sq("g1")]
    assert long.king_path() == [sq("e8"), sq("d8"), sq("c8")]
    assert long.between() == [sq("b8"), sq("c8"), sq("d8")]


def test_castling_direction_lookup() -> None:
    assert castling_direction_for(sq("e1"), sq("c1")) == CastlingDirection.WHITE_QUEEN_SIDE
    assert castling_direction_for(sq("e8"), sq("g8")) == CastlingDirection.BLACK_KING_SIDE
    assert castling_direction_for(sq("e2"), sq("g2")) is None


def test_rights_are_one_way() -> None:
    rights = CastlingRights()
    assert all(rights.can_castle(direction) for direction in CastlingDirection)

    rights.mark_rook_moved(CastlingDirection.WHITE_KING_SIDE)
    assert not rights.can_castle(CastlingDirection.WHITE_KING_SIDE)
    assert rights.can_castle(CastlingDirection.WHITE_QUEEN_SIDE)

    # moving the rook back to h1 changes nothing
    rights.mark_square_touched(sq("h1"))
    assert not rights.can_castle(CastlingDirection.WHITE_KING_SIDE)

    rights.mark_king_moved(Color.BLACK)
    assert not rights.can_castle_any(Color.BLACK)
    assert rights.to_fen() == "Q"


@pytest.mark.parametrize("fen", ["KQkq", "KQ", "Kq", "k", "-"])
def test_rights_fen_roundtrip(fen: str) -> None:
    assert CastlingRights.from_fen(fen).to_fen() == fen
