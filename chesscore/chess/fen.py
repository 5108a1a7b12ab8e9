"""
Validation of FEN strings.

FEN, or Forsyth-Edwards Notation, describes a position completely:
<piece placement> <active color> <castling rights> <en passant square> <half move clock> <full move number>
"""

from string import ascii_lowercase

from chesscore.chess.pieces import FEN_TO_PIECE
from chesscore.chess.square import BOARD_SIZE

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"
VALID_CASTLING_ENCODINGS = [
    "-",
    "K",
    "Q",
    "k",
    "q",
    "KQ",
    "Kk",
    "Kq",
    "Qk",
    "Qq",
    "kq",
    "KQk",
    "KQq",
    "Kkq",
    "Qkq",
    "KQkq",
]


def is_valid_fen(fen: str) -> bool:
    """
    Check if given string follows proper FEN notation.
    """
    parts = fen.split(" ")
    if len(parts) != 6:
        return False

    position, color, castling, en_passant, half_move_counter, full_move_counter = parts
    return (
        is_valid_position(position)
        and is_valid_color_code(color)
        and is_valid_castling_rights(castling)
        and is_valid_en_passant(en_passant)
        and is_valid_move_counter(half_move_counter)
        and is_valid_move_counter(full_move_counter)
    )


def is_valid_position(position: str) -> bool:
    """Only check the part of the FEN encoding for the board position."""
    rank_fens = position.split("/")
    if len(rank_fens) != BOARD_SIZE:
        return False

    for rank_fen in rank_fens:
        file_count = 0
        for character in rank_fen:
            if character.isdigit():
                file_count += int(character)
            elif character.lower() in FEN_TO_PIECE:
                file_count += 1
            else:
                return False

        # make sure you are creating a correctly sized board
        if file_count != BOARD_SIZE:
            return False

    # exactly one king per side
    return position.count("K") == 1 and position.count("k") == 1


def is_valid_color_code(color: str) -> bool:
    return color in {"w", "b"}


def is_valid_castling_rights(castling: str) -> bool:
    """A valid castling encoding has either KQkq, KQk, etc. or a '-' if all rights have been revoked."""
    return castling in VALID_CASTLING_ENCODINGS


def is_valid_en_passant(en_passant: str) -> bool:
    """Valid en passant square encoding is a square on the 3rd or 6th rank, or a '-'"""
    if en_passant == "-":
        return True
    return is_valid_square(en_passant) and en_passant[1] in {"3", "6"}


def is_valid_square(square: str) -> bool:
    """Valid square should be a letter for the file + a number for the rank"""
    if len(square) != 2:
        return False

    file_char, rank_char = square[0], square[1]
    if file_char not in ascii_lowercase[:BOARD_SIZE]:
        return False

    if not rank_char.isdigit():
        return False

    return 1 <= int(rank_char) <= BOARD_SIZE


def is_valid_move_counter(counter: str) -> bool:
    return counter.isdigit()
