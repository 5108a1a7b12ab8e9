"""Requests and Response models"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, field_validator

from chesscore.core.exceptions import InvalidRequestError
from chesscore.core.shared_types import Color, GameResult, PieceType, SelfCheckPolicy, Termination

PieceColor = str
PlayerName = str


def _is_algebraic_notation(value: str) -> bool:
    if len(value) != 2:
        return False
    file_character, rank_character = value[0], value[1]
    return file_character in "abcdefgh" and rank_character in "12345678"


# --- REQUEST MODELS ---
class CreateGameRequest(BaseModel):
    player_name: str
    color: Color
    starting_fen: Optional[str] = None
    self_check_policy: Optional[SelfCheckPolicy] = None

    @field_validator("starting_fen")
    @classmethod
    def validate_starting_fen(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value

        parts = value.strip().split(" ")
        if len(parts) != 6:
            raise InvalidRequestError("FEN string must contain 6 space-separated parts.")
        return value.strip()


class JoinGameRequest(BaseModel):
    game_id: UUID
    player_name: str


class LegalMovesRequest(BaseModel):
    game_id: UUID
    player_name: str


class MoveRequest(BaseModel):
    game_id: UUID
    player_name: str
    from_square: str
    to_square: str
    promote_to: Optional[PieceType] = None

    @field_validator("from_square", "to_square")
    @classmethod
    def validate_square(cls, value: str) -> str:
        if not _is_algebraic_notation(value):
            raise InvalidRequestError(f"Cannot interpret {value!r} as a valid square name.")
        return value


class PlayerActionRequest(BaseModel):
    """resign / draw claims / draw offers / timeout claims: only need to know who is asking, in which game."""

    game_id: UUID
    player_name: str


class GetGameRequest(BaseModel):
    game_id: UUID


class DeleteGameRequest(BaseModel):
    game_id: UUID


# --- RESPONSE MODELS ---
class GameEndedResponse(BaseModel):
    result: GameResult
    reason: Termination
    winner: Optional[PlayerName]
    move_count: int


class GameResponse(BaseModel):
    game_id: UUID
    players: dict[PieceColor, PlayerName]
    fen_state: str
    board: list[list[int]]
    result: GameResult
    termination: Optional[Termination]
    turn: Optional[PlayerName]
    move_count: int
    draw_offered_by: Optional[PieceColor] = None


class MoveResponse(BaseModel):
    game_id: UUID
    accepted: bool
    moving_piece: int
    captured_piece: int
    promoted_to: Optional[PieceType] = None
    is_check: bool
    is_checkmate: bool
    is_castling: bool
    is_en_passant: bool
    new_game_state: GameResult
    game_ended: Optional[GameEndedResponse] = None


class DrawRuleStatusResponse(BaseModel):
    game_id: UUID
    half_move_clock: int
    max_repetition_count: int


class LegalMovesResponse(BaseModel):
    game_id: UUID
    player_name: str
    color: Color
    legal_moves: list[str]
