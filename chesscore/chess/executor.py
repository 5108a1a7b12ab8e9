"""
MoveExecutor: mutate the GameState for a move that has already been validated.

Precondition for `apply_move`: the move is pseudo-legal and does not expose the mover's king. Nothing is checked again here,
except the promotion choice (which is resolved before anything gets touched).
"""

from dataclasses import dataclass
from typing import Optional

from chesscore.chess.castling import CASTLING_RULES, castling_direction_for
from chesscore.chess.moves import Move, is_castling_move, is_en_passant_move, is_promotion_move
from chesscore.chess.pieces import EMPTY, PROMOTION_OPTIONS, Color, Piece, PieceType
from chesscore.chess.position import GameState
from chesscore.chess.square import Square
from chesscore.core.exceptions import IllegalPromotionError


@dataclass(frozen=True)
class AppliedMove:
    """Snapshot of what a move did to the board."""

    move: Move
    moving_piece: Piece
    captured_piece: Piece
    promoted_to: Optional[PieceType] = None
    is_castling: bool = False
    is_en_passant: bool = False

    @property
    def is_capture(self) -> bool:
        return not self.captured_piece.is_empty()


def resolve_promotion(state: GameState, move: Move, promotion: Optional[PieceType]) -> Optional[PieceType]:
    """
    Which piece type the pawn turns into.
    ---

    * no promotion on this move: a promotion choice is an error.
    * promotion without a choice: defaults to a Queen.
    * King / Pawn (or anything else outside the options) is rejected.
    """
    if not is_promotion_move(state.board, move):
        if promotion is not None:
            raise IllegalPromotionError(
                f"Move {move.to_uci()} does not reach the final rank with a pawn. Cannot promote to {promotion.name.lower()}."
            )
        return None

    if promotion is None:
        return PieceType.QUEEN

    if promotion not in PROMOTION_OPTIONS:
        raise IllegalPromotionError(
            f"Cannot promote to {promotion.name.lower()}. Pick one from {','.join(p.name.lower() for p in PROMOTION_OPTIONS)}"
        )
    return promotion


def apply_move(state: GameState, move: Move, promotion: Optional[PieceType] = None) -> AppliedMove:
    """
    Play the move on the board and update all the flags / counters.
    -----

    1. resolve the promotion choice (may raise, before any mutation)
    2. relocate the piece (+ the rook when castling, + remove the pawn taken en passant)
    3. promotion: replace the pawn on the final rank
    4. revoke castling rights
    5. en passant target for the next half-move
    6. half-move clock / full-move number
    7. flip the turn and count the new position
    """
    promote_to = resolve_promotion(state, move, promotion if promotion is not None else move.promotion)

    board = state.board
    moving_piece = board.piece(move.start)
    castling = is_castling_move(board, move)
    en_passant = is_en_passant_move(state, move)

    # 2. relocate
    captured_piece = EMPTY
    if en_passant:
        captured_piece = board.remove_piece(Square(move.start.row, move.end.col))
    if castling:
        direction = castling_direction_for(move.start, move.end)
        assert direction is not None
        rule = CASTLING_RULES[direction]
        board.move_piece(rule.rook_from, rule.rook_to)
    taken = board.move_piece(move.start, move.end)
    if not taken.is_empty():
        captured_piece = taken

    # 3. promotion
    if promote_to is not None:
        board.place_piece(moving_piece.promoted_to(promote_to), move.end)

    # 4. castling rights: king / rook leaving its home square, or a rook getting captured on its home square
    if moving_piece.type in (PieceType.KING, PieceType.ROOK):
        state.castling_rights.mark_square_touched(move.start)
    if captured_piece.type == PieceType.ROOK:
        state.castling_rights.mark_square_touched(move.end)

    # 5. en passant target: only right after a double step
    d_row, _ = move.delta
    if moving_piece.type == PieceType.PAWN and abs(d_row) == 2:
        state.en_passant_square = move.start.offset(moving_piece.color.pawn_direction, 0)
    else:
        state.en_passant_square = None

    # 6. counters
    if moving_piece.type == PieceType.PAWN or not captured_piece.is_empty():
        state.half_move_clock = 0
    else:
        state.half_move_clock += 1
    if moving_piece.color == Color.BLACK:
        state.full_move_number += 1

    # 7. turn + repetition bookkeeping
    state.color_to_move = moving_piece.color.opponent
    state.record_position()

    return AppliedMove(
        move=move,
        moving_piece=moving_piece,
        captured_piece=captured_piece,
        promoted_to=promote_to,
        is_castling=castling,
        is_en_passant=en_passant,
    )
