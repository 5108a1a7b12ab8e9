"""Helpers for implementing Castling rules. Need to be imported by multiple sources"""

from dataclasses import dataclass, fields
from enum import Enum
from typing import Self

from chesscore.chess.pieces import Color
from chesscore.chess.square import Square


class CastlingDirection(Enum):
    """The four castling directions. Values represent their encodings in FEN string."""

    WHITE_KING_SIDE = "K"
    WHITE_QUEEN_SIDE = "Q"
    BLACK_KING_SIDE = "k"
    BLACK_QUEEN_SIDE = "q"

    @property
    def color(self) -> Color:
        return Color.WHITE if self.value.isupper() else Color.BLACK

    @property
    def is_king_side(self) -> bool:
        return self.value.lower() == "k"


CASTLING_ORDER: tuple[CastlingDirection, ...] = (
    CastlingDirection.WHITE_KING_SIDE,
    CastlingDirection.WHITE_QUEEN_SIDE,
    CastlingDirection.BLACK_KING_SIDE,
    CastlingDirection.BLACK_QUEEN_SIDE,
)


@dataclass(frozen=True)
class CastlingSquares:
    """
    Store the squares where king/rook start from/end up in by castling.
    """

    king_from: Square
    king_to: Square
    rook_from: Square
    rook_to: Square

    @classmethod
    def from_algebraic(cls, k_from: str, k_to: str, r_from: str, r_to: str) -> Self:
        """Convenience method: to make mapping shown below (from CastlingDirection) more readable"""
        return cls(
            Square.from_algebraic(k_from),
            Square.from_algebraic(k_to),
            Square.from_algebraic(r_from),
            Square.from_algebraic(r_to),
        )

    def king_path(self) -> list[Square]:
        """start, transit and destination square of the king. None of them may be attacked."""
        step = 1 if self.king_to.col > self.king_from.col else -1
        return [
            Square(self.king_from.row, col)
            for col in range(self.king_from.col, self.king_to.col + step, step)
        ]

    def between(self) -> list[Square]:
        """squares strictly between king and rook. All of them must be empty."""
        low, high = sorted((self.king_from.col, self.rook_from.col))
        return [Square(self.king_from.row, col) for col in range(low + 1, high)]


# The moves (in classical chess) made when castling
CASTLING_RULES: dict[CastlingDirection, CastlingSquares] = {
    CastlingDirection.WHITE_KING_SIDE: CastlingSquares.from_algebraic("e1", "g1", "h1", "f1"),
    CastlingDirection.WHITE_QUEEN_SIDE: CastlingSquares.from_algebraic("e1", "c1", "a1", "d1"),
    CastlingDirection.BLACK_KING_SIDE: CastlingSquares.from_algebraic("e8", "g8", "h8", "f8"),
    CastlingDirection.BLACK_QUEEN_SIDE: CastlingSquares.from_algebraic("e8", "c8", "a8", "d8"),
}


def castling_direction_for(king_from: Square, king_to: Square) -> CastlingDirection | None:
    """Look up which castling move (if any) a king move from/to these squares would be."""
    for direction, rule in CASTLING_RULES.items():
        if rule.king_from == king_from and rule.king_to == king_to:
            return direction
    return None


@dataclass
class CastlingRights:
    """
    Six 'has moved' flags. They only ever flip from False to True:
    once a king or rook has left its square, returning to it does not restore the right to castle.
    """

    white_king_moved: bool = False
    white_short_rook_moved: bool = False
    white_long_rook_moved: bool = False
    black_king_moved: bool = False
    black_short_rook_moved: bool = False
    black_long_rook_moved: bool = False

    def can_castle(self, direction: CastlingDirection) -> bool:
        prefix = "white" if direction.color == Color.WHITE else "black"
        rook_flag = "short" if direction.is_king_side else "long"
        king_moved = getattr(self, f"{prefix}_king_moved")
        rook_moved = getattr(self, f"{prefix}_{rook_flag}_rook_moved")
        return not (king_moved or rook_moved)

    def can_castle_any(self, color: Color) -> bool:
        return any(
            self.can_castle(direction) for direction in CASTLING_ORDER if direction.color == color
        )

    def mark_king_moved(self, color: Color) -> None:
        if color == Color.WHITE:
            self.white_king_moved = True
        else:
            self.black_king_moved = True

    def mark_rook_moved(self, direction: CastlingDirection) -> None:
        prefix = "white" if direction.color == Color.WHITE else "black"
        rook_flag = "short" if direction.is_king_side else "long"
        setattr(self, f"{prefix}_{rook_flag}_rook_moved", True)

    def mark_square_touched(self, square: Square) -> None:
        """A king or rook left (or a rook got captured on) its home square."""
        for direction, rule in CASTLING_RULES.items():
            if square == rule.rook_from:
                self.mark_rook_moved(direction)
            if square == rule.king_from:
                self.mark_king_moved(direction.color)

    # --- FEN ---
    @classmethod
    def from_fen(cls, castle_fen: str) -> Self:
        """
        FEN only tells us which directions are still available.
        Revoked directions are modelled as 'rook moved', and a color without any rights as 'king moved'.
        """
        rights = cls()
        for direction in CASTLING_ORDER:
            if direction.value not in castle_fen:
                rights.mark_rook_moved(direction)
        for color in (Color.WHITE, Color.BLACK):
            if not rights.can_castle_any(color):
                rights.mark_king_moved(color)
        return rights

    def to_fen(self) -> str:
        castling_chars = "".join(
            direction.value for direction in CASTLING_ORDER if self.can_castle(direction)
        )
        return castling_chars or "-"

    def as_flags(self) -> tuple[bool, ...]:
        return tuple(getattr(self, f.name) for f in fields(self))
