"""
Custom exceptions shared by all layers.

Everything raised on purpose by the domain layer derives from GameError, so the service / API layers can catch a single type.
"""


class GameError(Exception):
    """Top-level exception for anything that goes wrong while handling a game."""


# --- STATE ---
class GameStateError(GameError):
    """Action is not allowed in the current state of the game (ex. moving in a game that already ended)."""


class UnknownPlayerError(GameError):
    """The requesting player is not registered to this game."""


class NotYourTurnError(GameError):
    """Player attempted to act while it is the opponent's turn."""


# --- MOVES ---
class IllegalMoveError(GameError):
    """Base class for every rejected move."""


class InvalidOwnershipError(IllegalMoveError):
    """Selected an empty square, or a square holding an opponent's piece."""


class IllegalGeometryError(IllegalMoveError):
    """The piece cannot move like that."""


class SelfCheckError(IllegalMoveError):
    """The move would leave (or put) your own king in check."""


class IllegalPromotionError(IllegalMoveError):
    """Promotion into a king/pawn, or a promotion choice on a move that does not promote."""


# --- DRAW CLAIMS ---
class IllegalDrawClaimError(GameError):
    """Draw claimed while the repetition count or half-move clock does not allow it."""


# --- PARSING / BOUNDARY ---
class InvalidFENError(GameError):
    """Cannot interpret a string as FEN."""


class InvalidRequestError(GameError):
    """Request data sent over the boundary is malformed."""


class RepositoryError(GameError):
    """Persistence layer could not find / store the requested record."""
