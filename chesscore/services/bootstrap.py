"""Wire settings, logging and persistence into a ready-to-use ChessService."""

from pathlib import Path
from typing import Optional

from loguru import logger

from chesscore.core.config import load_settings
from chesscore.core.logging import setup_logging
from chesscore.db.database import make_scoped_session
from chesscore.db.sql_repository import SQLGameRepository
from chesscore.services.chess_service import ChessService


def create_chess_service(
    config_path: Optional[str | Path] = None, overrides: Optional[list[str]] = None
) -> ChessService:
    settings = load_settings(config_path, overrides)
    setup_logging(settings.log_level, settings.log_file)

    session = make_scoped_session(settings)
    logger.info(f"Using database {settings.database_url} (self-check policy: {settings.self_check_policy})")
    return ChessService(SQLGameRepository(session), default_policy=settings.self_check_policy)
