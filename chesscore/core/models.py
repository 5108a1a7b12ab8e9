"""
Boundary layer data model(s).

These objects can be used to communicate with the Service.
Both the persistence layer (lower) and the domain layer use the model defined here to send to/receive from the Service.
"""

from dataclasses import dataclass, field
from typing import Optional

# Type aliases to make GameModel easier to read
PieceColor = str
PlayerName = str
PositionKey = str


@dataclass
class GameModel:
    """Transport-safe representation of a chess game used between Service, DB, and Game layers."""

    current_fen: str
    registered_players: dict[PieceColor, PlayerName]
    result: str
    position_history: dict[PositionKey, int] = field(default_factory=dict)
    termination: Optional[str] = None
    self_check_policy: str = "strict"
    move_count: int = 0
    draw_offered_by: Optional[PieceColor] = None
