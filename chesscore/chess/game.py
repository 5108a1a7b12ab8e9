"""
The Game class is the entrypoint into the domain layer for the service layer.
It is the state machine of a single match: it sequences the turns, validates and applies moves, detects the end of the game
and serves the resign / draw / timeout entry points.

Terminal results are final. Every rejected request raises before anything is mutated.
"""

from collections import Counter
from dataclasses import dataclass, field
from typing import Callable, Optional, Self

from loguru import logger

from chesscore.chess.analysis import (
    checkers,
    exposes_own_king,
    has_legal_move,
    is_checkmate,
    is_in_check,
    is_legal,
    legal_moves,
)
from chesscore.chess.board import BoardSnapshot
from chesscore.chess.executor import apply_move, resolve_promotion
from chesscore.chess.moves import Move, is_pseudo_legal
from chesscore.chess.pieces import EMPTY, PLAYING_COLORS, Color, Piece, PieceType
from chesscore.chess.position import GameState
from chesscore.chess.square import Square
from chesscore.core.exceptions import (
    GameStateError,
    IllegalDrawClaimError,
    IllegalGeometryError,
    InvalidOwnershipError,
    NotYourTurnError,
    SelfCheckError,
    UnknownPlayerError,
)
from chesscore.core.models import GameModel
from chesscore.core.shared_types import GameResult, SelfCheckPolicy, Termination

REPETITIONS_FOR_DRAW = 3
HALF_MOVES_FOR_DRAW = 100

WINNING_RESULT: dict[Color, GameResult] = {
    Color.WHITE: GameResult.WHITE_WINS,
    Color.BLACK: GameResult.BLACK_WINS,
}


@dataclass(frozen=True)
class GameEnded:
    """Domain event: the only thing collaborators outside the core (payouts, ratings, ...) need to know."""

    result: GameResult
    reason: Termination
    winner: Optional[str]
    move_count: int


@dataclass(frozen=True)
class MoveOutcome:
    """Structured description of what a move request did."""

    accepted: bool
    moving_piece: Piece
    captured_piece: Piece
    is_check: bool
    is_checkmate: bool
    is_castling: bool
    is_en_passant: bool
    new_game_state: GameResult
    promoted_to: Optional[PieceType] = None
    game_ended: Optional[GameEnded] = None


@dataclass(frozen=True)
class DrawRuleStatus:
    half_move_clock: int
    max_repetition_count: int


GameEndedObserver = Callable[[GameEnded], None]


@dataclass
class Game:
    state: GameState
    players: dict[Color, str]
    result: GameResult = GameResult.NOT_STARTED
    self_check_policy: SelfCheckPolicy = SelfCheckPolicy.STRICT
    termination: Optional[Termination] = None
    move_count: int = 0
    draw_offered_by: Optional[Color] = None
    observers: list[GameEndedObserver] = field(default_factory=list, repr=False, compare=False)

    # --- CREATION ---
    @classmethod
    def new_game(
        cls,
        player: str,
        color: str,
        starting_fen: Optional[str] = None,
        self_check_policy: SelfCheckPolicy = SelfCheckPolicy.STRICT,
    ) -> Self:
        """To start a new game with the player using the pieces with the indicated color."""
        if color.upper() not in ("WHITE", "BLACK"):
            raise GameStateError(f"Cannot create new game. Color {color} not in white,black.")

        state = GameState.from_fen(starting_fen) if starting_fen else GameState.starting_position()
        return cls(
            state=state,
            players={Color[color.upper()]: player},
            self_check_policy=self_check_policy,
        )

    @classmethod
    def from_model(cls, model: GameModel) -> Self:
        """Define how to construct a Game from the information the Service layer actually has"""
        if model.result not in {result.value for result in GameResult}:
            raise GameStateError(
                f"Invalid result: {model.result!r}. \nPick one from {','.join(result.value for result in GameResult)}"
            )

        state = GameState.from_fen(model.current_fen)
        if model.position_history:
            state.position_history = Counter(model.position_history)

        return cls(
            state=state,
            players={Color[color.upper()]: name for color, name in model.registered_players.items()},
            result=GameResult(model.result),
            self_check_policy=SelfCheckPolicy(model.self_check_policy),
            termination=Termination(model.termination) if model.termination else None,
            move_count=model.move_count,
            draw_offered_by=Color[model.draw_offered_by.upper()] if model.draw_offered_by else None,
        )

    def to_model(self) -> GameModel:
        """Encode back into a format the Service layer uses"""
        return GameModel(
            current_fen=self.state.to_fen(),
            registered_players={color.name.lower(): name for color, name in self.players.items()},
            result=self.result.value,
            position_history=dict(self.state.position_history),
            termination=self.termination.value if self.termination else None,
            self_check_policy=self.self_check_policy.value,
            move_count=self.move_count,
            draw_offered_by=self.draw_offered_by.name.lower() if self.draw_offered_by else None,
        )

    def register_player(self, player: str) -> None:
        """Registering the 2nd player to an open game. The game starts right away."""
        if self.result != GameResult.NOT_STARTED or len(self.players) != 1:
            raise GameStateError(
                f"Cannot join this game. Game is not accepting new players. result: {self.result}"
            )
        if player in self.players.values():
            raise GameStateError(f"Player {player} is already registered to this game.")

        opponent_color = next(iter(self.players))
        self.players[opponent_color.opponent] = player
        self.result = GameResult.IN_PROGRESS
        logger.info(f"{player} joined as {opponent_color.opponent.name.lower()}. Game started.")

    def subscribe(self, observer: GameEndedObserver) -> None:
        """Observer gets called (synchronously, exactly once) when the game reaches a terminal result."""
        self.observers.append(observer)

    # --- QUERIES ---
    @property
    def is_over(self) -> bool:
        return self.result in (GameResult.DRAW, GameResult.WHITE_WINS, GameResult.BLACK_WINS)

    @property
    def winner(self) -> Optional[str]:
        for color, result in WINNING_RESULT.items():
            if self.result == result:
                return self.players.get(color)
        return None

    def turn_holder(self) -> Optional[str]:
        return self.players.get(self.state.color_to_move)

    def board_snapshot(self) -> BoardSnapshot:
        return self.state.board.snapshot()

    def draw_rule_status(self) -> DrawRuleStatus:
        return DrawRuleStatus(
            half_move_clock=self.state.half_move_clock,
            max_repetition_count=self.state.max_repetition_count(),
        )

    def has_legal_move_pending(self) -> bool:
        """Does the side to move have at least one legal move?"""
        return self.result == GameResult.IN_PROGRESS and has_legal_move(
            self.state, self.state.color_to_move
        )

    def is_legal_move(self, start: Square, end: Square) -> bool:
        """Pure legality predicate for the side to move. Never changes anything."""
        if self.state.board.color_at(start) != self.state.color_to_move:
            return False
        return is_legal(self.state, Move(start, end))

    def legal_moves(self, player: str) -> list[str]:
        """Set of legal moves (UCI encoded) for the player. Only available on your turn."""
        self._assert_in_progress()
        color = self._assert_your_turn(player)
        return [move.to_uci() for move in legal_moves(self.state, color)]

    # --- COMMANDS ---
    def make_move(
        self,
        player: str,
        start: Square,
        end: Square,
        promotion: Optional[PieceType] = None,
    ) -> MoveOutcome:
        """
        Attempt to make a move
        -----

        1. game must be in progress, and it must be your turn
        2. you must move one of your own pieces
        3. the piece must be able to move like that (MoveValidator)
        4. the promotion choice must make sense
        5. your king may not be left in check (reject, or forfeit: see SelfCheckPolicy)
        6. apply the move, then see if the opponent got mated / stalemated
        """
        self._assert_in_progress()
        color = self._assert_your_turn(player)

        move = Move(start, end, promotion)
        if not (start.is_within_bounds() and end.is_within_bounds()):
            raise IllegalGeometryError(f"Square outside of the board: {start} -> {end}")

        moving_piece = self.state.board.piece(start)
        if moving_piece.color != color:
            raise InvalidOwnershipError(
                f"No {color.name.lower()} piece on {start.to_algebraic()} to move."
            )

        if not is_pseudo_legal(self.state, move):
            raise IllegalGeometryError(
                f"Move not allowed: {moving_piece.type.name.lower()} cannot move {move.to_uci()}"
            )

        resolve_promotion(self.state, move, promotion)

        if exposes_own_king(self.state, move):
            if self.self_check_policy == SelfCheckPolicy.STRICT:
                raise SelfCheckError(f"Move {move.to_uci()} leaves your king in check.")
            forfeited = self.forfeit(player)
            return MoveOutcome(
                accepted=False,
                moving_piece=moving_piece,
                captured_piece=EMPTY,
                is_check=False,
                is_checkmate=False,
                is_castling=False,
                is_en_passant=False,
                new_game_state=self.result,
                game_ended=forfeited,
            )

        applied = apply_move(self.state, move, promotion)
        self.move_count += 1
        self.draw_offered_by = None
        logger.debug(f"{player} played {move.to_uci()} (move {self.move_count})")

        opponent = color.opponent
        in_check = is_in_check(self.state.board, opponent)
        mated = False
        game_ended: Optional[GameEnded] = None
        if in_check:
            checking = checkers(self.state.board, opponent)
            mated = is_checkmate(self.state, opponent, checking[0])
            if mated:
                game_ended = self._end_game(WINNING_RESULT[color], Termination.CHECKMATE)
        elif not has_legal_move(self.state, opponent):
            game_ended = self._end_game(GameResult.DRAW, Termination.STALEMATE)

        return MoveOutcome(
            accepted=True,
            moving_piece=applied.moving_piece,
            captured_piece=applied.captured_piece,
            is_check=in_check,
            is_checkmate=mated,
            is_castling=applied.is_castling,
            is_en_passant=applied.is_en_passant,
            new_game_state=self.result,
            promoted_to=applied.promoted_to,
            game_ended=game_ended,
        )

    def resign(self, player: str) -> GameEnded:
        self._assert_in_progress()
        color = self._get_player_color(player)
        return self._end_game(WINNING_RESULT[color.opponent], Termination.RESIGNATION)

    def forfeit(self, player: str, reason: Termination = Termination.FORFEIT) -> GameEnded:
        """Hook for hosts (and the forfeit self-check policy): the player loses right away."""
        self._assert_in_progress()
        color = self._get_player_color(player)
        return self._end_game(WINNING_RESULT[color.opponent], reason)

    def claim_draw_by_repetition(self, player: str) -> GameEnded:
        self._assert_in_progress()
        self._get_player_color(player)
        occurrences = self.state.repetition_count()
        if occurrences < REPETITIONS_FOR_DRAW:
            raise IllegalDrawClaimError(
                f"Current position occurred {occurrences} time(s). Need {REPETITIONS_FOR_DRAW} to claim a draw."
            )
        return self._end_game(GameResult.DRAW, Termination.REPETITION)

    def claim_draw_by_fifty_move_rule(self, player: str) -> GameEnded:
        self._assert_in_progress()
        self._get_player_color(player)
        if self.state.half_move_clock < HALF_MOVES_FOR_DRAW:
            raise IllegalDrawClaimError(
                f"Only {self.state.half_move_clock} half-moves without a pawn move or capture. Need {HALF_MOVES_FOR_DRAW}."
            )
        return self._end_game(GameResult.DRAW, Termination.FIFTY_MOVE_RULE)

    def claim_timeout(self, player: str) -> GameEnded:
        """
        The player waiting for the opponent claims the win on time.
        NOTE: keeping track of deadlines is up to the host. The core only checks that the claimant is not the one to move.
        """
        self._assert_in_progress()
        color = self._get_player_color(player)
        if color == self.state.color_to_move:
            raise NotYourTurnError("Cannot claim a timeout while it is your own turn to move.")
        return self._end_game(WINNING_RESULT[color], Termination.TIMEOUT)

    # --- DRAW OFFERS ---
    def offer_draw(self, player: str) -> None:
        self._assert_in_progress()
        color = self._get_player_color(player)
        if self.draw_offered_by is not None:
            raise GameStateError(f"A draw offer by {self.draw_offered_by.name.lower()} is already pending.")
        self.draw_offered_by = color

    def accept_draw(self, player: str) -> GameEnded:
        self._assert_in_progress()
        color = self._get_player_color(player)
        self._assert_offer_from(color.opponent)
        self.draw_offered_by = None
        return self._end_game(GameResult.DRAW, Termination.AGREEMENT)

    def decline_draw(self, player: str) -> None:
        self._assert_in_progress()
        color = self._get_player_color(player)
        self._assert_offer_from(color.opponent)
        self.draw_offered_by = None

    def cancel_draw_offer(self, player: str) -> None:
        self._assert_in_progress()
        color = self._get_player_color(player)
        self._assert_offer_from(color)
        self.draw_offered_by = None

    # -- PRIVATE HELPERS ---
    def _assert_in_progress(self) -> None:
        if self.result != GameResult.IN_PROGRESS:
            raise GameStateError(f"Game is not in progress. result: {self.result}")

    def _get_player_color(self, player: str) -> Color:
        for color in PLAYING_COLORS:
            if self.players.get(color) == player:
                return color
        raise UnknownPlayerError(f"{player} is not playing in this game.")

    def _assert_your_turn(self, player: str) -> Color:
        """You must wait for your turn before calculating legal moves / making a move."""
        color = self._get_player_color(player)
        if color != self.state.color_to_move:
            raise NotYourTurnError(
                f"It is not your turn. Waiting for player {self.turn_holder()} to make a move first."
            )
        return color

    def _assert_offer_from(self, color: Color) -> None:
        if self.draw_offered_by != color:
            raise GameStateError(f"There is no pending draw offer by {color.name.lower()}.")

    def _end_game(self, result: GameResult, reason: Termination) -> GameEnded:
        self.result = result
        self.termination = reason
        event = GameEnded(result=result, reason=reason, winner=self.winner, move_count=self.move_count)
        logger.info(f"Game over: {result} ({reason}) after {self.move_count} moves")
        for observer in self.observers:
            observer(event)
        return event
