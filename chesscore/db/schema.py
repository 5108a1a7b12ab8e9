"""Database tables / schema"""

from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from sqlalchemy import JSON
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class DBGame(Base):
    __tablename__ = "games"
    id: Mapped[UUID] = mapped_column(primary_key=True)
    current_fen: Mapped[str]
    position_history: Mapped[dict[str, int]] = mapped_column(JSON, default=dict)
    registered_players: Mapped[dict[str, str]] = mapped_column(JSON)
    result: Mapped[str]
    termination: Mapped[Optional[str]]
    self_check_policy: Mapped[str]
    move_count: Mapped[int] = mapped_column(default=0)
    draw_offered_by: Mapped[Optional[str]]
    created_at: Mapped[datetime] = mapped_column(default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(default=utc_now, onupdate=utc_now)
