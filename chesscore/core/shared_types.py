"""
Type definitions used across layers
"""

from enum import StrEnum


class GameResult(StrEnum):
    NOT_STARTED = "not started"
    IN_PROGRESS = "in progress"
    DRAW = "draw"
    WHITE_WINS = "white wins"
    BLACK_WINS = "black wins"


class Termination(StrEnum):
    """Why a game reached a terminal result."""

    CHECKMATE = "checkmate"
    STALEMATE = "stalemate"
    RESIGNATION = "resignation"
    REPETITION = "threefold repetition"
    FIFTY_MOVE_RULE = "fifty-move rule"
    AGREEMENT = "draw by agreement"
    TIMEOUT = "timeout"
    FORFEIT = "forfeit"


class SelfCheckPolicy(StrEnum):
    """
    What happens when a player submits a move that exposes their own king.

    * strict: the move is rejected and the player may try again.
    * forfeit: the game ends immediately and the opponent wins.
    """

    STRICT = "strict"
    FORFEIT = "forfeit"


# --- NOTE boundary versions of Color / PieceType. The domain uses the integer-coded versions in chesscore/chess/pieces.py


class Color(StrEnum):
    WHITE = "white"
    BLACK = "black"


class PieceType(StrEnum):
    PAWN = "pawn"
    KNIGHT = "knight"
    BISHOP = "bishop"
    ROOK = "rook"
    QUEEN = "queen"
    KING = "king"
