"""
CheckAnalyzer: check, checkmate and stalemate detection, plus the legality filter on top of the MoveValidator.

Every function here is read-only with respect to the GameState it is given. Hypothetical moves are played out on a scratch
copy of the board.
"""

from typing import TYPE_CHECKING, Optional

from chesscore.chess.attacks import KING_DELTAS, attackers, is_square_attacked, squares_between
from chesscore.chess.board import Board
from chesscore.chess.castling import CASTLING_RULES, castling_direction_for
from chesscore.chess.moves import (
    Move,
    is_castling_move,
    is_en_passant_move,
    is_promotion_move,
    is_pseudo_legal,
    pseudo_legal_moves,
)
from chesscore.chess.pieces import PROMOTION_OPTIONS, Color, PieceType
from chesscore.chess.square import Square

if TYPE_CHECKING:
    from chesscore.chess.position import GameState

SLIDING_PIECES = (PieceType.BISHOP, PieceType.ROOK, PieceType.QUEEN)


# --- CHECK ---
def is_in_check(board: Board, color: Color) -> bool:
    """Is the king of `color` attacked? Uses the cached king square."""
    king_square = board.king_square(color)
    if king_square is None:
        return False
    return is_square_attacked(board, color.opponent, king_square)


def checkers(board: Board, color: Color) -> list[Square]:
    """Squares of all opponent pieces giving check to the king of `color`."""
    king_square = board.king_square(color)
    if king_square is None:
        return []
    return attackers(board, color.opponent, king_square)


# --- LEGALITY ---
def board_after(state: "GameState", move: Move) -> Board:
    """Scratch copy of the board with the (pseudo-legal) move played out. The live board is left untouched."""
    board = state.board.copy()
    if is_en_passant_move(state, move):
        board.remove_piece(Square(move.start.row, move.end.col))
    elif is_castling_move(board, move):
        direction = castling_direction_for(move.start, move.end)
        if direction is not None:
            rule = CASTLING_RULES[direction]
            board.move_piece(rule.rook_from, rule.rook_to)
    board.move_piece(move.start, move.end)
    return board


def exposes_own_king(state: "GameState", move: Move) -> bool:
    """Return True if, after the move, the mover's king is attacked."""
    color = state.board.color_at(move.start)
    return is_in_check(board_after(state, move), color)


def is_legal(state: "GameState", move: Move) -> bool:
    """Fully legal: follows the movement pattern and does not leave your king in check."""
    return is_pseudo_legal(state, move) and not exposes_own_king(state, move)


def legal_moves(state: "GameState", color: Color) -> list[Move]:
    """
    List of legal moves for the player with the 'color' pieces.
    A pawn reaching the final rank appears once for every piece type it can promote into.
    """
    moves: list[Move] = []
    for move in pseudo_legal_moves(state, color):
        if exposes_own_king(state, move):
            continue
        if is_promotion_move(state.board, move):
            moves.extend(Move(move.start, move.end, piece_type) for piece_type in PROMOTION_OPTIONS)
        else:
            moves.append(move)
    return moves


def has_legal_move(state: "GameState", color: Color) -> bool:
    return any(
        not exposes_own_king(state, move) for move in pseudo_legal_moves(state, color)
    )


# --- END OF GAME ---
def is_checkmate(
    state: "GameState", color: Color, checking_square: Optional[Square] = None
) -> bool:
    """
    Is the king of `color` mated?
    ----

    The check is averted if any of the following works:
    a. the king steps to an adjacent square that is not attacked (after it has left its current square).
    b. a piece captures the checking piece.
    c. a piece interposes between a sliding checker and the king.

    With two checkers, (b) and (c) can never resolve both checks at once: only (a) remains.
    """
    board = state.board
    king_square = board.king_square(color)
    if king_square is None:
        return False

    checking_squares = checkers(board, color)
    if not checking_squares:
        return False

    if _king_can_escape(board, color, king_square):
        return False

    if len(checking_squares) > 1:
        return True

    checker = checking_square if checking_square is not None else checking_squares[0]
    if _can_capture_checker(state, color, checker):
        return False

    if board.piece(checker).type in SLIDING_PIECES and _can_interpose(
        state, color, checker, king_square
    ):
        return False

    return True


def is_stalemate(state: "GameState", color: Color) -> bool:
    """Not in check, but no legal move to make."""
    return not is_in_check(state.board, color) and not has_legal_move(state, color)


def _king_can_escape(board: Board, color: Color, king_square: Square) -> bool:
    for d_row, d_col in KING_DELTAS:
        target = king_square.offset(d_row, d_col)
        if not target.is_within_bounds() or board.color_at(target) == color:
            continue
        if not is_square_attacked(
            board, color.opponent, target, vacated=king_square, occupied=target
        ):
            return True
    return False


def _defenders(board: Board, color: Color) -> list[Square]:
    """All pieces of the color, except the king."""
    return [
        square for square in board.locate_color(color) if board.piece(square).type != PieceType.KING
    ]


def _can_capture_checker(state: "GameState", color: Color, checker: Square) -> bool:
    targets = [checker]
    # a pawn that just made a double step can also be taken en passant
    ep_square = state.en_passant_square
    if ep_square is not None and state.board.piece(checker).type == PieceType.PAWN:
        if Square(checker.row - color.opponent.pawn_direction, checker.col) == ep_square:
            targets.append(ep_square)

    return any(
        is_legal(state, Move(square, target))
        for square in _defenders(state.board, color)
        for target in targets
    )


def _can_interpose(state: "GameState", color: Color, checker: Square, king_square: Square) -> bool:
    return any(
        is_legal(state, Move(square, blocking_square))
        for blocking_square in squares_between(checker, king_square)
        for square in _defenders(state.board, color)
    )
