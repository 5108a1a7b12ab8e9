"""Unit tests for chesscore/chess/position.py and chesscore/chess/fen.py"""

import pytest

from chesscore.chess.board import Board
from chesscore.chess.castling import CastlingDirection
from chesscore.chess.fen import STARTING_FEN, is_valid_en_passant, is_valid_fen
from chesscore.chess.pieces import Color
from chesscore.chess.position import GameState
from chesscore.chess.square import Square
from chesscore.core.exceptions import InvalidFENError


def test_starting_position() -> None:
    state = GameState.starting_position()
    assert state.to_fen() == STARTING_FEN
    assert state.color_to_move == Color.WHITE
    assert state.en_passant_square is None
    assert state.half_move_clock == 0
    assert state.full_move_number == 1


def test_initial_position_is_counted_once() -> None:
    state = GameState.starting_position()
    assert state.repetition_count() == 1
    assert state.max_repetition_count() == 1


@pytest.mark.parametrize(
    "fen",
    [
        "r3k2r/8/8/8/8/8/8/R3K2R b Kq - 5 20",
        "4k3/8/8/3pP3/8/8/8/4K3 w - d6 0 3",
        "8/8/8/8/8/k7/8/K7 b - - 99 70",
    ],
)
def test_fen_roundtrip(fen: str) -> None:
    assert GameState.from_fen(fen).to_fen() == fen


def test_fen_fields_parsed() -> None:
    state = GameState.from_fen("r3k2r/8/8/8/8/8/8/R3K2R b Kq e3 5 20")
    assert state.color_to_move == Color.BLACK
    assert state.en_passant_square == Square.from_algebraic("e3")
    assert state.half_move_clock == 5
    assert state.full_move_number == 20
    assert state.castling_rights.can_castle(CastlingDirection.WHITE_KING_SIDE)
    assert not state.castling_rights.can_castle(CastlingDirection.WHITE_QUEEN_SIDE)
    assert not state.castling_rights.can_castle(CastlingDirection.BLACK_KING_SIDE)
    assert state.castling_rights.can_castle(CastlingDirection.BLACK_QUEEN_SIDE)


@pytest.mark.parametrize(
    "fen",
    [
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0",  # 5 parts
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQ1BNR w kq - 0 1",  # white king missing
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKKNR w kq - 0 1",  # two white kings
        "rnbqkbnr/pppppppp/9/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1",  # 9 files
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR x KQkq - 0 1",  # no such color
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkx - 0 1",
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq e4 0 1",  # en passant on 4th rank
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - -1 1",
        "4k3/8/8/8/8/8/8/4R1K1 w - - 0 1",  # black king in check while white is to move
        "4k3/8/8/8/8/8/3p4/4K3 b - - 0 1",  # white king in check while black is to move
    ],
)
def test_invalid_fen(fen: str) -> None:
    assert not is_valid_fen(fen)
    with pytest.raises(InvalidFENError):
        GameState.from_fen(fen)


@pytest.mark.parametrize("square, expected", [("-", True), ("e3", True), ("d6", True), ("e4", False), ("i3", False)])
def test_valid_en_passant(square: str, expected: bool) -> None:
    assert is_valid_en_passant(square) == expected


def test_position_key_ignores_counters() -> None:
    one = GameState.from_fen("4k3/8/8/8/8/8/8/4K3 w - - 0 1")
    other = GameState.from_fen("4k3/8/8/8/8/8/8/4K3 w - - 37 60")
    assert one.position_key() == other.position_key()


@pytest.mark.parametrize(
    "fen, other_fen",
    [
        ("4k3/8/8/8/8/8/8/4K3 w - - 0 1", "4k3/8/8/8/8/8/8/4K3 b - - 0 1"),
        ("r3k3/8/8/8/8/8/8/4K3 w - - 0 1", "4k3/8/8/8/8/8/8/4K3 w - - 0 1"),
        ("r3k3/8/8/8/8/8/8/4K3 w - - 0 1", "r3k3/8/8/8/8/8/8/4K3 w q - 0 1"),
        ("4k3/8/8/3pP3/8/8/8/4K3 w - d6 0 3", "4k3/8/8/3pP3/8/8/8/4K3 w - - 0 3"),
    ],
)
def test_position_key_distinguishes(fen: str, other_fen: str) -> None:
    """Everything except the move counters is part of the key"""
    assert GameState.from_fen(fen).position_key() != GameState.from_fen(other_fen).position_key()


def test_record_position_counts_up() -> None:
    state = GameState.starting_position()
    assert state.record_position() == 2
    assert state.record_position() == 3
    assert state.repetition_count() == 3


def test_copy_is_independent() -> None:
    state = GameState.starting_position()
    copied = state.copy()
    copied.record_position()
    copied.castling_rights.mark_king_moved(Color.WHITE)
    copied.board.remove_piece(Square.from_algebraic("a1"))
    assert state.repetition_count() == 1
    assert state.castling_rights.to_fen() == "KQkq"
    assert state.to_fen() == STARTING_FEN


@pytest.mark.parametrize(
    "placement, to_move, expected",
    [
        ("4k3/8/8/8/8/8/8/4R1K1", Color.WHITE, True),
        ("4k3/8/8/8/8/8/8/4R1K1", Color.BLACK, False),  # the side to move may be in check
        ("4k3/8/8/8/8/8/8/R5K1", Color.WHITE, False),
    ],
)
def test_opponent_in_check(placement: str, to_move: Color, expected: bool) -> None:
    state = GameState(board=Board.from_fen(placement), color_to_move=to_move)
    assert state.opponent_in_check() == expected
