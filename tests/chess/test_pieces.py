"""Unit tests for chesscore/chess/pieces.py"""

import pytest

from chesscore.chess.pieces import EMPTY, FEN_TO_PIECE, PIECE_TO_FEN, Color, Piece, PieceType


@pytest.mark.parametrize("char", [char.upper() for char in FEN_TO_PIECE.keys()])
def test_creating_white_piece_from_fen(char: str) -> None:
    """Capital letters are used for white pieces"""
    piece = Piece.from_fen(char)
    assert piece.type == FEN_TO_PIECE[char.lower()]
    assert piece.color == Color.WHITE
    assert piece.to_fen() == char


@pytest.mark.parametrize("char", [char.lower() for char in FEN_TO_PIECE.keys()])
def test_creating_black_piece_from_fen(char: str) -> None:
    """Lower case letters are used for black pieces"""
    piece = Piece.from_fen(char)
    assert piece.type == FEN_TO_PIECE[char]
    assert piece.color == Color.BLACK
    assert piece.to_fen() == char


@pytest.mark.parametrize(
    "piece_type, expected_code",
    [
        (PieceType.PAWN, 1),
        (PieceType.KNIGHT, 2),
        (PieceType.BISHOP, 3),
        (PieceType.ROOK, 4),
        (PieceType.QUEEN, 5),
        (PieceType.KING, 6),
    ],
)
def test_signed_codes(piece_type: PieceType, expected_code: int) -> None:
    """Magnitude is the piece type, the sign the color."""
    assert Piece(piece_type, Color.WHITE).code == expected_code
    assert Piece(piece_type, Color.BLACK).code == -expected_code
    assert Piece.from_code(expected_code) == Piece(piece_type, Color.WHITE)
    assert Piece.from_code(-expected_code) == Piece(piece_type, Color.BLACK)


def test_empty_square_code() -> None:
    assert EMPTY.code == 0
    assert Piece.from_code(0) == EMPTY
    assert EMPTY.is_empty()


@pytest.mark.parametrize("color", [Color.WHITE, Color.BLACK])
def test_promotion_keeps_color(color: Color) -> None:
    pawn = Piece(PieceType.PAWN, color)
    queen = pawn.promoted_to(PieceType.QUEEN)
    assert queen == Piece(PieceType.QUEEN, color)
    assert pawn.type == PieceType.PAWN


def test_color_helpers() -> None:
    assert Color.WHITE.opponent == Color.BLACK
    assert Color.BLACK.opponent == Color.WHITE
    assert PIECE_TO_FEN[PieceType.KNIGHT] == "n"
    # white pawns walk towards row 0
    assert Color.WHITE.pawn_direction == -1
    assert Color.BLACK.pawn_direction == 1
