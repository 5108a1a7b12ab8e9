"""Orchestration of communication from the API models to the business logic and persistence layers (and the reverse direction)."""

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from threading import Lock
from typing import Callable, Optional
from uuid import UUID

from loguru import logger

from chesscore.api.models import (
    CreateGameRequest,
    DeleteGameRequest,
    DrawRuleStatusResponse,
    GameEndedResponse,
    GameResponse,
    GetGameRequest,
    JoinGameRequest,
    LegalMovesRequest,
    LegalMovesResponse,
    MoveRequest,
    MoveResponse,
    PlayerActionRequest,
)
from chesscore.chess.game import Game, GameEnded, MoveOutcome
from chesscore.chess.pieces import PieceType
from chesscore.chess.square import Square
from chesscore.core.exceptions import RepositoryError
from chesscore.core.models import GameModel
from chesscore.core.shared_types import Color, SelfCheckPolicy
from chesscore.db.repository import GameRepository


@dataclass
class _GameLock:
    lock: Lock = field(default_factory=Lock)
    users: int = 0


class ChessService:
    """
    Orchestration of layers for chess games.
    ----

    Every call that touches a game runs while holding that game's lock: load -> validate/apply -> persist happens as one
    step. Two moves submitted concurrently for the same game therefore resolve to one accepted move, and the other one is
    rejected against the updated state (it is no longer that player's turn).
    Reads take the same lock, so they never observe a half-written record.
    """

    def __init__(
        self,
        repository: GameRepository,
        default_policy: SelfCheckPolicy = SelfCheckPolicy.STRICT,
    ) -> None:
        self.repo = repository
        self.default_policy = default_policy
        self._locks: dict[UUID, _GameLock] = {}
        self._registry_lock = Lock()

    # -- Game lifecycle ---
    def create_new_game(self, request: CreateGameRequest) -> GameResponse:
        """First player requested to create a new game."""
        new_game = Game.new_game(
            player=request.player_name,
            color=request.color.value,
            starting_fen=request.starting_fen,
            self_check_policy=request.self_check_policy or self.default_policy,
        )
        stored_game, game_id = self.repo.create_game(new_game.to_model())
        logger.info(f"Created game {game_id} for {request.player_name} ({request.color})")
        return self._create_game_response(game_id, Game.from_model(stored_game))

    def join_game(self, request: JoinGameRequest) -> GameResponse:
        """Second player requested to join a game."""
        with self._locked(request.game_id):
            game = self._load_game(request.game_id)
            game.register_player(request.player_name)
            self._store_game(request.game_id, game)
            return self._create_game_response(request.game_id, game)

    def get_game_state(self, request: GetGameRequest) -> GameResponse:
        with self._locked(request.game_id):
            game = self._load_game(request.game_id)
            return self._create_game_response(request.game_id, game)

    def draw_rule_status(self, request: GetGameRequest) -> DrawRuleStatusResponse:
        with self._locked(request.game_id):
            status = self._load_game(request.game_id).draw_rule_status()
            return DrawRuleStatusResponse(
                game_id=request.game_id,
                half_move_clock=status.half_move_clock,
                max_repetition_count=status.max_repetition_count,
            )

    def legal_moves(self, request: LegalMovesRequest) -> LegalMovesResponse:
        with self._locked(request.game_id):
            game = self._load_game(request.game_id)
            legal_moves = game.legal_moves(request.player_name)
            color = next(c for c, name in game.players.items() if name == request.player_name)
            return LegalMovesResponse(
                game_id=request.game_id,
                player_name=request.player_name,
                color=Color(color.name.lower()),
                legal_moves=legal_moves,
            )

    def delete_game(self, request: DeleteGameRequest) -> None:
        with self._locked(request.game_id):
            self.repo.delete_game(request.game_id)

    # -- Moves ---
    def make_move(self, request: MoveRequest) -> MoveResponse:
        with self._locked(request.game_id):
            game = self._load_game(request.game_id)
            promotion = PieceType[request.promote_to.name] if request.promote_to else None
            outcome = game.make_move(
                request.player_name,
                Square.from_algebraic(request.from_square),
                Square.from_algebraic(request.to_square),
                promotion,
            )
            self._store_game(request.game_id, game)
            return self._create_move_response(request.game_id, outcome)

    # -- Ending / draw handling ---
    def resign(self, request: PlayerActionRequest) -> GameEndedResponse:
        return self._end_by(request, Game.resign)

    def claim_draw_by_repetition(self, request: PlayerActionRequest) -> GameEndedResponse:
        return self._end_by(request, Game.claim_draw_by_repetition)

    def claim_draw_by_fifty_move_rule(self, request: PlayerActionRequest) -> GameEndedResponse:
        return self._end_by(request, Game.claim_draw_by_fifty_move_rule)

    def claim_timeout(self, request: PlayerActionRequest) -> GameEndedResponse:
        """Host already established the opponent ran out of time."""
        return self._end_by(request, Game.claim_timeout)

    def accept_draw(self, request: PlayerActionRequest) -> GameEndedResponse:
        return self._end_by(request, Game.accept_draw)

    def offer_draw(self, request: PlayerActionRequest) -> GameResponse:
        return self._update_by(request, Game.offer_draw)

    def decline_draw(self, request: PlayerActionRequest) -> GameResponse:
        return self._update_by(request, Game.decline_draw)

    def cancel_draw_offer(self, request: PlayerActionRequest) -> GameResponse:
        return self._update_by(request, Game.cancel_draw_offer)

    # -- Internal helpers --
    @contextmanager
    def _locked(self, game_id: UUID) -> Iterator[None]:
        """Hold the lock of one game. The entry only lives while some call is using (or waiting for) it."""
        with self._registry_lock:
            entry = self._locks.setdefault(game_id, _GameLock())
            entry.users += 1
        try:
            with entry.lock, logger.contextualize(game_id=str(game_id)):
                yield
        finally:
            with self._registry_lock:
                entry.users -= 1
                if entry.users == 0:
                    del self._locks[game_id]

    def _end_by(
        self, request: PlayerActionRequest, action: Callable[[Game, str], GameEnded]
    ) -> GameEndedResponse:
        with self._locked(request.game_id):
            game = self._load_game(request.game_id)
            event = action(game, request.player_name)
            self._store_game(request.game_id, game)
            return self._create_game_ended_response(event)

    def _update_by(
        self, request: PlayerActionRequest, action: Callable[[Game, str], None]
    ) -> GameResponse:
        with self._locked(request.game_id):
            game = self._load_game(request.game_id)
            action(game, request.player_name)
            self._store_game(request.game_id, game)
            return self._create_game_response(request.game_id, game)

    def _load_game(self, game_id: UUID) -> Game:
        """Attempt to find the game in the repository and raise error if it fails."""
        game_model = self.repo.get_game(game_id)
        if game_model is None:
            raise RepositoryError(f"Game with {game_id=} not found.")
        return Game.from_model(game_model)

    def _store_game(self, game_id: UUID, game: Game) -> GameModel:
        stored = self.repo.update_game(game_id, game.to_model())
        if stored is None:
            raise RepositoryError(f"Game with {game_id=} could not be updated.")
        return stored

    def _create_game_response(self, game_id: UUID, game: Game) -> GameResponse:
        model = game.to_model()
        return GameResponse(
            game_id=game_id,
            players=model.registered_players,
            fen_state=model.current_fen,
            board=[list(row) for row in game.board_snapshot()],
            result=game.result,
            termination=game.termination,
            turn=game.turn_holder(),
            move_count=game.move_count,
            draw_offered_by=model.draw_offered_by,
        )

    def _create_move_response(self, game_id: UUID, outcome: MoveOutcome) -> MoveResponse:
        return MoveResponse(
            game_id=game_id,
            accepted=outcome.accepted,
            moving_piece=outcome.moving_piece.code,
            captured_piece=outcome.captured_piece.code,
            promoted_to=_boundary_piece_type(outcome.promoted_to),
            is_check=outcome.is_check,
            is_checkmate=outcome.is_checkmate,
            is_castling=outcome.is_castling,
            is_en_passant=outcome.is_en_passant,
            new_game_state=outcome.new_game_state,
            game_ended=(
                self._create_game_ended_response(outcome.game_ended)
                if outcome.game_ended
                else None
            ),
        )

    def _create_game_ended_response(self, event: GameEnded) -> GameEndedResponse:
        return GameEndedResponse(
            result=event.result,
            reason=event.reason,
            winner=event.winner,
            move_count=event.move_count,
        )


def _boundary_piece_type(piece_type: Optional[PieceType]) -> Optional[str]:
    return piece_type.name.lower() if piece_type is not None else None
