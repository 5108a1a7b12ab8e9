"""
Defines the types of chess pieces

A piece is encoded on the board as a small signed integer: the magnitude is the piece type (1..6), the sign is the color.
0 means the square is empty.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Self


class PieceType(IntEnum):
    EMPTY = 0
    PAWN = 1
    KNIGHT = 2
    BISHOP = 3
    ROOK = 4
    QUEEN = 5
    KING = 6


class Color(IntEnum):
    NONE = 0
    WHITE = 1
    BLACK = -1

    @property
    def opponent(self) -> "Color":
        return Color(-self.value)

    @property
    def pawn_direction(self) -> int:
        """White moves UP the board (towards row 0), black moves DOWN"""
        return -1 if self == Color.WHITE else 1

    @property
    def home_row(self) -> int:
        return 7 if self == Color.WHITE else 0

    @property
    def pawn_row(self) -> int:
        return 6 if self == Color.WHITE else 1

    @property
    def promotion_row(self) -> int:
        return 0 if self == Color.WHITE else 7


PLAYING_COLORS: tuple[Color, Color] = (Color.WHITE, Color.BLACK)

FEN_TO_PIECE: dict[str, PieceType] = {
    "p": PieceType.PAWN,
    "n": PieceType.KNIGHT,
    "b": PieceType.BISHOP,
    "r": PieceType.ROOK,
    "q": PieceType.QUEEN,
    "k": PieceType.KING,
}

PIECE_TO_FEN: dict[PieceType, str] = {value: key for key, value in FEN_TO_PIECE.items()}

PROMOTION_OPTIONS: tuple[PieceType, ...] = (
    PieceType.QUEEN,
    PieceType.ROOK,
    PieceType.BISHOP,
    PieceType.KNIGHT,
)


@dataclass(frozen=True)
class Piece:
    type: PieceType
    color: Color

    @classmethod
    def from_code(cls, code: int) -> "Piece":
        if code == 0:
            return EMPTY
        color = Color.WHITE if code > 0 else Color.BLACK
        return cls(PieceType(abs(code)), color)

    @property
    def code(self) -> int:
        return int(self.type) * int(self.color)

    @classmethod
    def from_fen(cls, character: str) -> Self:
        # lower case: Black pieces, upper case: White pieces
        color = Color.WHITE if character.isupper() else Color.BLACK
        piece_type = FEN_TO_PIECE[character.lower()]
        return cls(piece_type, color)

    def to_fen(self) -> str:
        return (
            PIECE_TO_FEN[self.type].upper()
            if self.color == Color.WHITE
            else PIECE_TO_FEN[self.type].lower()
        )

    def is_empty(self) -> bool:
        return self.type == PieceType.EMPTY

    def promoted_to(self, new_type: PieceType) -> "Piece":
        return Piece(new_type, self.color)


EMPTY = Piece(PieceType.EMPTY, Color.NONE)
