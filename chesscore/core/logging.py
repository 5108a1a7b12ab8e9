"""Logging configuration (loguru).

Every record carries a `game_id` extra. The service binds it for the duration of each call on a game
(`logger.contextualize`), everything else logs with the placeholder `-`.
"""

import sys
from pathlib import Path
from typing import Optional

from loguru import logger

NO_GAME = "-"

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> "
    "<level>{level: <8}</level> "
    "<magenta>[game {extra[game_id]}]</magenta> "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)


def setup_logging(level: str = "INFO", log_file: Optional[str | Path] = None) -> None:
    """Replace loguru's default sink by the chesscore console sink (and optionally a JSON-lines file).

    The file sink is serialized so a game's history can be filtered on `record.extra.game_id` later on.
    """
    logger.remove()
    logger.configure(extra={"game_id": NO_GAME})

    logger.add(sys.stderr, level=level, format=CONSOLE_FORMAT, colorize=True)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(log_path, level=level, serialize=True, rotation="10 MB", retention=5)

    logger.debug(f"Logging configured at level: {level}")
