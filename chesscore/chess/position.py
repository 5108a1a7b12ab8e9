"""
The GameState aggregate: everything that together defines a position, plus the counters that drive the draw rules.
"""

from collections import Counter
from dataclasses import dataclass, field
from typing import Optional, Self

from chesscore.chess.attacks import is_square_attacked
from chesscore.chess.board import Board
from chesscore.chess.castling import CastlingRights
from chesscore.chess.fen import STARTING_FEN, is_valid_fen
from chesscore.chess.pieces import Color
from chesscore.chess.square import Square
from chesscore.core.exceptions import InvalidFENError


@dataclass
class GameState:
    """
    Board + auxiliary flags.
    ----

    * color_to_move: flips exactly once per accepted move.
    * castling_rights: one-way 'has moved' flags.
    * en_passant_square: the square a pawn just passed over with a double step. Only valid for the very next half-move.
    * half_move_clock: half-moves since the last pawn move or capture (fifty-move rule triggers at 100).
    * full_move_number: starts at 1 and increments after every move black makes.
    * position_history: how often each position (see `position_key`) has occurred. Counts only ever go up.
    """

    board: Board
    color_to_move: Color = Color.WHITE
    castling_rights: CastlingRights = field(default_factory=CastlingRights)
    en_passant_square: Optional[Square] = None
    half_move_clock: int = 0
    full_move_number: int = 1
    position_history: Counter[str] = field(default_factory=Counter)

    @classmethod
    def starting_position(cls) -> Self:
        return cls.from_fen(STARTING_FEN)

    @classmethod
    def from_fen(cls, fen: str) -> Self:
        """Parse the FEN into data. The parsed position counts as its first occurrence."""
        if not is_valid_fen(fen):
            raise InvalidFENError(f"Cannot interpret supplied string as FEN: {fen}")

        (
            placement,
            active_color,
            castling_str,
            en_passant_algebraic,
            half_move_clock,
            full_move_number,
        ) = fen.split(" ")

        state = cls(
            board=Board.from_fen(placement),
            color_to_move=Color.WHITE if active_color == "w" else Color.BLACK,
            castling_rights=CastlingRights.from_fen(castling_str),
            en_passant_square=(
                Square.from_algebraic(en_passant_algebraic)
                if en_passant_algebraic != "-"
                else None
            ),
            half_move_clock=int(half_move_clock),
            full_move_number=int(full_move_number),
        )
        if state.opponent_in_check():
            raise InvalidFENError(f"The side that just moved cannot be in check: {fen}")
        state.record_position()
        return state

    def to_fen(self) -> str:
        """reverse operation: write a FEN from the given data"""
        active_color = "w" if self.color_to_move == Color.WHITE else "b"
        en_passant_algebraic = (
            self.en_passant_square.to_algebraic() if self.en_passant_square is not None else "-"
        )
        return (
            f"{self.board.to_fen()} {active_color} {self.castling_rights.to_fen()} "
            f"{en_passant_algebraic} {self.half_move_clock} {self.full_move_number}"
        )

    def opponent_in_check(self) -> bool:
        """The side NOT to move can never be in check: its king could simply be captured."""
        opponent = self.color_to_move.opponent
        king_square = self.board.king_square(opponent)
        return king_square is not None and is_square_attacked(self.board, self.color_to_move, king_square)

    # --- REPETITION ---
    def position_key(self) -> str:
        """
        Identity of a position for the repetition rule: piece placement, side to move, castling rights, en passant file.
        (The move counters are deliberately left out.)
        """
        active_color = "w" if self.color_to_move == Color.WHITE else "b"
        en_passant_file = (
            self.en_passant_square.to_algebraic()[0] if self.en_passant_square else "-"
        )
        return f"{self.board.to_fen()} {active_color} {self.castling_rights.to_fen()} {en_passant_file}"

    def record_position(self) -> int:
        key = self.position_key()
        self.position_history[key] += 1
        return self.position_history[key]

    def repetition_count(self) -> int:
        """Occurrences of the current position."""
        return self.position_history[self.position_key()]

    def max_repetition_count(self) -> int:
        return max(self.position_history.values(), default=0)

    def copy(self) -> Self:
        return type(self)(
            board=self.board.copy(),
            color_to_move=self.color_to_move,
            castling_rights=CastlingRights(*self.castling_rights.as_flags()),
            en_passant_square=self.en_passant_square,
            half_move_clock=self.half_move_clock,
            full_move_number=self.full_move_number,
            position_history=Counter(self.position_history),
        )
