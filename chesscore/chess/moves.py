"""
MoveValidator: geometry / base movement and capturing rules
---

Key idea: Use strategy pattern to define the movement pattern of each piece type.

A move passing these checks is *pseudo-legal*: it obeys the movement pattern of the piece, but might still leave the
mover's own king in check. Legality is checked later (see analysis.py).
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Iterator, Optional, Self

from chesscore.chess.attacks import (
    DIAGONALS,
    KING_DELTAS,
    KNIGHT_DELTAS,
    STRAIGHTS,
    Vector,
    is_square_attacked,
    squares_between,
)
from chesscore.chess.board import Board
from chesscore.chess.castling import CASTLING_RULES, castling_direction_for
from chesscore.chess.pieces import FEN_TO_PIECE, PIECE_TO_FEN, Color, Piece, PieceType
from chesscore.chess.square import Square

if TYPE_CHECKING:
    from chesscore.chess.position import GameState


@dataclass(frozen=True)
class Move:
    """basic definition of a move to be made"""

    start: Square
    end: Square
    promotion: Optional[PieceType] = None

    @classmethod
    def from_uci(cls, uci: str) -> Self:
        """
        Universal Chess Interface:
        ---
        examples:
        * "e2e4": move the piece that was on e2 to e4
        * "e7e8q" : (pawn) moves from e7 to e8 and promotes to a queen (the q)
        * "e1g1": the king castles short
        """
        start = Square.from_algebraic(uci[:2])
        end = Square.from_algebraic(uci[2:4])
        promotion = FEN_TO_PIECE[uci[4]] if len(uci) == 5 else None
        return cls(start, end, promotion)

    def to_uci(self) -> str:
        piece_char = PIECE_TO_FEN[self.promotion] if self.promotion else ""
        return f"{self.start.to_algebraic()}{self.end.to_algebraic()}{piece_char}"

    @property
    def delta(self) -> tuple[int, int]:
        return self.end.row - self.start.row, self.end.col - self.start.col


# --- MOVEMENT RULES ---
def is_path_clear(board: Board, move: Move) -> bool:
    return all(board.is_empty(square) for square in squares_between(move.start, move.end))


def pawn_rule(state: "GameState", move: Move, moving: Piece, target: Piece) -> bool:
    """
    A pawn:
    - moves by a single square forward onto an empty square.
    - can move by two from its home rank, when both squares in front of it are empty
    - takes diagonally
    - takes en passant: diagonally onto the (empty) square the opponent's pawn just skipped
    """
    board = state.board
    forward = moving.color.pawn_direction
    d_row, d_col = move.delta

    if d_col == 0:
        if d_row == forward:
            return target.is_empty()
        if d_row == 2 * forward and move.start.row == moving.color.pawn_row:
            passed_over = move.start.offset(forward, 0)
            return target.is_empty() and board.is_empty(passed_over)
        return False

    if abs(d_col) != 1 or d_row != forward:
        return False

    if target.color == moving.color.opponent:
        return True

    return target.is_empty() and is_en_passant_capture(state, move, moving)


def is_en_passant_capture(state: "GameState", move: Move, moving: Piece) -> bool:
    """Diagonal pawn step onto the live en passant target, with the opponent's pawn standing next to us."""
    if state.en_passant_square is None or move.end != state.en_passant_square:
        return False
    victim_square = Square(move.start.row, move.end.col)
    return state.board.piece(victim_square) == Piece(PieceType.PAWN, moving.color.opponent)


def knight_rule(state: "GameState", move: Move, moving: Piece, target: Piece) -> bool:
    """Knights jump: {|delta_row|, |delta_col|} = {1, 2}"""
    d_row, d_col = move.delta
    return {abs(d_row), abs(d_col)} == {1, 2}


def bishop_rule(state: "GameState", move: Move, moving: Piece, target: Piece) -> bool:
    """Bishops move diagonally: |delta_row| = |delta_col|"""
    d_row, d_col = move.delta
    return abs(d_row) == abs(d_col) != 0 and is_path_clear(state.board, move)


def rook_rule(state: "GameState", move: Move, moving: Piece, target: Piece) -> bool:
    """Rooks move either horizontally or vertically"""
    d_row, d_col = move.delta
    return (d_row == 0) != (d_col == 0) and is_path_clear(state.board, move)


def queen_rule(state: "GameState", move: Move, moving: Piece, target: Piece) -> bool:
    """The Queen combines the rook and the bishop"""
    return bishop_rule(state, move, moving, target) or rook_rule(state, move, moving, target)


def king_rule(state: "GameState", move: Move, moving: Piece, target: Piece) -> bool:
    """
    The king can move by a single square at the time.

    Castling is modelled as a special king move: a shift by two files along the back rank.
    """
    d_row, d_col = move.delta
    if max(abs(d_row), abs(d_col)) == 1:
        return True
    return is_legal_castling(state, move, moving)


def is_legal_castling(state: "GameState", move: Move, moving: Piece) -> bool:
    """
    you are allowed to castle if
    ---
    * neither the king nor the rook on that side has ever moved (the rook must also still be there).
    * all squares between king and rook are empty.
    * none of the squares the king starts on, passes over, or lands on is attacked (so you cannot castle out of check).
    """
    direction = castling_direction_for(move.start, move.end)
    if direction is None or direction.color != moving.color:
        return False

    if not state.castling_rights.can_castle(direction):
        return False

    board = state.board
    rule = CASTLING_RULES[direction]
    if board.piece(rule.rook_from) != Piece(PieceType.ROOK, moving.color):
        return False

    if not all(board.is_empty(square) for square in rule.between()):
        return False

    opponent = moving.color.opponent
    return not any(
        is_square_attacked(board, opponent, square, vacated=rule.king_from, occupied=square)
        for square in rule.king_path()
    )


# -- STRATEGY PATTERN: MOVEMENT RULES ---
MovementRuleFn = Callable[["GameState", Move, Piece, Piece], bool]
MOVEMENT_RULES: dict[PieceType, MovementRuleFn] = {
    PieceType.PAWN: pawn_rule,
    PieceType.KNIGHT: knight_rule,
    PieceType.BISHOP: bishop_rule,
    PieceType.ROOK: rook_rule,
    PieceType.QUEEN: queen_rule,
    PieceType.KING: king_rule,
}


def is_pseudo_legal(state: "GameState", move: Move) -> bool:
    """Does the move follow the movement pattern of the piece standing on the start square?"""
    if not (move.start.is_within_bounds() and move.end.is_within_bounds()):
        return False
    if move.start == move.end:
        return False

    moving = state.board.piece(move.start)
    if moving.is_empty():
        return False

    target = state.board.piece(move.end)
    # never capture your own pieces
    if target.color == moving.color:
        return False

    movement_rule = MOVEMENT_RULES[moving.type]
    return movement_rule(state, move, moving, target)


# --- CANDIDATE DESTINATIONS ---
def _rays(square: Square, board: Board, directions: list[Vector]) -> Iterator[Square]:
    for d_row, d_col in directions:
        target_square = square.offset(d_row, d_col)
        while target_square.is_within_bounds():
            yield target_square
            if not board.is_empty(target_square):
                break
            target_square = target_square.offset(d_row, d_col)


def _steps(square: Square, deltas: list[Vector]) -> Iterator[Square]:
    for d_row, d_col in deltas:
        target_square = square.offset(d_row, d_col)
        if target_square.is_within_bounds():
            yield target_square


def candidate_targets(state: "GameState", square: Square) -> list[Square]:
    """
    Squares the piece on `square` could geometrically reach. Every returned square still has to pass `is_pseudo_legal`.
    Used to enumerate moves without trying all 64 squares for every piece.
    """
    board = state.board
    piece = board.piece(square)
    if piece.type == PieceType.PAWN:
        forward = piece.color.pawn_direction
        deltas = [(forward, 0), (2 * forward, 0), (forward, 1), (forward, -1)]
        return list(_steps(square, deltas))
    if piece.type == PieceType.KNIGHT:
        return list(_steps(square, KNIGHT_DELTAS))
    if piece.type == PieceType.BISHOP:
        return list(_rays(square, board, DIAGONALS))
    if piece.type == PieceType.ROOK:
        return list(_rays(square, board, STRAIGHTS))
    if piece.type == PieceType.QUEEN:
        return list(_rays(square, board, DIAGONALS + STRAIGHTS))
    if piece.type == PieceType.KING:
        return list(_steps(square, KING_DELTAS + [(0, 2), (0, -2)]))
    return []


def pseudo_legal_moves(state: "GameState", color: Color) -> list[Move]:
    moves: list[Move] = []
    for square in state.board.locate_color(color):
        for target_square in candidate_targets(state, square):
            move = Move(square, target_square)
            if is_pseudo_legal(state, move):
                moves.append(move)
    return moves


# --- CLASSIFIERS (only meaningful for pseudo-legal moves) ---
def is_castling_move(board: Board, move: Move) -> bool:
    d_row, d_col = move.delta
    return board.piece(move.start).type == PieceType.KING and d_row == 0 and abs(d_col) == 2


def is_en_passant_move(state: "GameState", move: Move) -> bool:
    moving = state.board.piece(move.start)
    return (
        moving.type == PieceType.PAWN
        and move.start.col != move.end.col
        and state.board.is_empty(move.end)
        and is_en_passant_capture(state, move, moving)
    )


def is_promotion_move(board: Board, move: Move) -> bool:
    """check if the move is a pawn move reaching the final rank"""
    moving = board.piece(move.start)
    return moving.type == PieceType.PAWN and move.end.row == moving.color.promotion_row
