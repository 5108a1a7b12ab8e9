"""
AttackQuery: is a square attacked by a given side?
---

Attacks are found 'in reverse': starting from the attacked square, look along every line / offset a piece of the given type
could attack from, and check whether such a piece stands there.

The query optionally works 'as if' a piece has moved: the vacated square is treated as empty and the hypothetical
destination as occupied. This way a king never hides behind itself when we test the squares it wants to step onto.
"""

from typing import Callable, Optional

from chesscore.chess.board import Board
from chesscore.chess.pieces import Color, PieceType
from chesscore.chess.square import Square

Vector = tuple[int, int]

DIAGONALS: list[Vector] = [(1, 1), (-1, 1), (1, -1), (-1, -1)]
STRAIGHTS: list[Vector] = [(1, 0), (-1, 0), (0, 1), (0, -1)]
KNIGHT_DELTAS: list[Vector] = [
    (2, 1),
    (2, -1),
    (-2, 1),
    (-2, -1),
    (1, 2),
    (1, -2),
    (-1, 2),
    (-1, -2),
]
KING_DELTAS: list[Vector] = DIAGONALS + STRAIGHTS

# Stands on a hypothetically occupied square so it blocks lines of sight. Not the code of any real piece.
BLOCKER_CODE = 7


class Occupancy:
    """Read-only view on a board with (optionally) one piece lifted from `vacated` and put down on `occupied`."""

    def __init__(
        self,
        board: Board,
        vacated: Optional[Square] = None,
        occupied: Optional[Square] = None,
    ) -> None:
        self.board = board
        self.vacated = vacated
        self.occupied = occupied
        self.occupant = board.code(vacated) if vacated is not None else 0
        if occupied is not None and self.occupant == 0:
            self.occupant = BLOCKER_CODE

    def code(self, square: Square) -> int:
        if square == self.occupied:
            return self.occupant
        if square == self.vacated:
            return 0
        return self.board.code(square)


# --- ATTACK RULES ---
def raycasting_attackers(
    square: Square,
    by_color: Color,
    piece_types: tuple[PieceType, ...],
    view: Occupancy,
    directions: list[Vector],
) -> list[Square]:
    """
    Walk away from the square along each direction until we hit a piece or the edge of the board.
    The first piece found attacks the square if it has the right color and type.
    """
    attacker_codes = {int(piece_type) * int(by_color) for piece_type in piece_types}
    found: list[Square] = []
    for d_row, d_col in directions:
        target_square = square.offset(d_row, d_col)
        while target_square.is_within_bounds():
            code = view.code(target_square)
            if code != 0:
                if code in attacker_codes:
                    found.append(target_square)
                break
            target_square = target_square.offset(d_row, d_col)
    return found


def single_step_attackers(
    square: Square,
    by_color: Color,
    piece_type: PieceType,
    view: Occupancy,
    deltas: list[Vector],
) -> list[Square]:
    """The equivalent for pieces that attack a single step along a direction (pawns, knights, kings)"""
    attacker_code = int(piece_type) * int(by_color)
    found: list[Square] = []
    for d_row, d_col in deltas:
        target_square = square.offset(d_row, d_col)
        if target_square.is_within_bounds() and view.code(target_square) == attacker_code:
            found.append(target_square)
    return found


def pawn_attackers(square: Square, by_color: Color, view: Occupancy) -> list[Square]:
    """
    Pawns take diagonally forward.
    NOTE: To find a WHITE pawn (which moves up the board, towards row 0) attacking this square, look one row DOWN.
    """
    back = -by_color.pawn_direction
    return single_step_attackers(square, by_color, PieceType.PAWN, view, [(back, 1), (back, -1)])


def knight_attackers(square: Square, by_color: Color, view: Occupancy) -> list[Square]:
    return single_step_attackers(square, by_color, PieceType.KNIGHT, view, KNIGHT_DELTAS)


def bishop_attackers(square: Square, by_color: Color, view: Occupancy) -> list[Square]:
    return raycasting_attackers(square, by_color, (PieceType.BISHOP,), view, DIAGONALS)


def rook_attackers(square: Square, by_color: Color, view: Occupancy) -> list[Square]:
    return raycasting_attackers(square, by_color, (PieceType.ROOK,), view, STRAIGHTS)


def queen_attackers(square: Square, by_color: Color, view: Occupancy) -> list[Square]:
    return raycasting_attackers(square, by_color, (PieceType.QUEEN,), view, DIAGONALS + STRAIGHTS)


def king_attackers(square: Square, by_color: Color, view: Occupancy) -> list[Square]:
    return single_step_attackers(square, by_color, PieceType.KING, view, KING_DELTAS)


# --- STRATEGY PATTERN: ATTACKING RULES ---
AttackersFn = Callable[[Square, Color, Occupancy], list[Square]]
ATTACK_RULES: dict[PieceType, AttackersFn] = {
    PieceType.PAWN: pawn_attackers,
    PieceType.KNIGHT: knight_attackers,
    PieceType.BISHOP: bishop_attackers,
    PieceType.ROOK: rook_attackers,
    PieceType.QUEEN: queen_attackers,
    PieceType.KING: king_attackers,
}


def attackers(
    board: Board,
    by_color: Color,
    square: Square,
    vacated: Optional[Square] = None,
    occupied: Optional[Square] = None,
) -> list[Square]:
    """All squares holding a piece of `by_color` that attacks `square`."""
    view = Occupancy(board, vacated, occupied)
    found: list[Square] = []
    for attack_rule in ATTACK_RULES.values():
        found.extend(attack_rule(square, by_color, view))
    return found


def is_square_attacked(
    board: Board,
    by_color: Color,
    square: Square,
    vacated: Optional[Square] = None,
    occupied: Optional[Square] = None,
) -> bool:
    view = Occupancy(board, vacated, occupied)
    return any(attack_rule(square, by_color, view) for attack_rule in ATTACK_RULES.values())


def squares_between(from_square: Square, to_square: Square) -> list[Square]:
    """
    Squares strictly between two squares on the same rank, file or diagonal.
    Empty list when the squares are adjacent or not aligned (ex. a knight's jump).
    """
    d_row = to_square.row - from_square.row
    d_col = to_square.col - from_square.col
    if not (d_row == 0 or d_col == 0 or abs(d_row) == abs(d_col)):
        return []

    step = ((d_row > 0) - (d_row < 0), (d_col > 0) - (d_col < 0))
    squares: list[Square] = []
    square = from_square.offset(*step)
    while square != to_square:
        squares.append(square)
        square = square.offset(*step)
    return squares
