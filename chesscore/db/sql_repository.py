"""Implementation of (Game)Repository using SQLAlchemy"""

from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.orm import Session, scoped_session

from chesscore.core.models import GameModel
from chesscore.db.schema import DBGame


class SQLGameRepository:
    """Data stored using SQL / methods implemented using SQLAlchemy"""

    def __init__(self, db_session: Session | scoped_session[Session]) -> None:
        self.db = db_session

    def get_game(self, game_id: UUID) -> GameModel | None:
        game_db = self._fetch_game(game_id)
        if game_db:
            return self._to_model(game_db)
        return None

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        new_id = uuid4()
        game_db = DBGame(id=new_id)
        self._copy_into(game_db, game)
        self.db.add(game_db)
        self.db.commit()
        self.db.refresh(game_db)
        return self._to_model(game_db), new_id

    def update_game(self, game_id: UUID, game: GameModel) -> GameModel | None:
        game_db = self._fetch_game(game_id)
        if not game_db:
            return None
        self._copy_into(game_db, game)
        self.db.commit()
        self.db.refresh(game_db)
        return self._to_model(game_db)

    def delete_game(self, game_id: UUID) -> GameModel | None:
        game_db = self._fetch_game(game_id)
        if not game_db:
            return None
        game_model = self._to_model(game_db)
        self.db.delete(game_db)
        self.db.commit()
        return game_model

    def _fetch_game(self, game_id: UUID) -> DBGame | None:
        query = select(DBGame).where(DBGame.id == game_id)
        return self.db.scalar(query)

    def _copy_into(self, game_db: DBGame, game: GameModel) -> None:
        # NOTE: assign fresh dicts, so SQLAlchemy notices the change of the JSON columns
        game_db.current_fen = game.current_fen
        game_db.position_history = dict(game.position_history)
        game_db.registered_players = dict(game.registered_players)
        game_db.result = game.result
        game_db.termination = game.termination
        game_db.self_check_policy = game.self_check_policy
        game_db.move_count = game.move_count
        game_db.draw_offered_by = game.draw_offered_by

    def _to_model(self, game_db: DBGame) -> GameModel:
        """Convert SQLAlchemy model to data transfer model."""
        return GameModel(
            current_fen=game_db.current_fen,
            registered_players=dict(game_db.registered_players),
            result=game_db.result,
            position_history=dict(game_db.position_history),
            termination=game_db.termination,
            self_check_policy=game_db.self_check_policy,
            move_count=game_db.move_count,
            draw_offered_by=game_db.draw_offered_by,
        )
