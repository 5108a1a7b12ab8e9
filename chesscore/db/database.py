"""Generate database sessions"""

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, scoped_session, sessionmaker

from chesscore.core.config import Settings
from chesscore.db.schema import Base


def make_session_factory(settings: Settings) -> sessionmaker[Session]:
    """Create the engine for the configured database, and make sure all tables exist."""
    engine = create_engine(settings.database_url, echo=settings.sql_echo)
    Base.metadata.create_all(bind=engine)
    return sessionmaker(autoflush=False, bind=engine)


def make_scoped_session(settings: Settings) -> scoped_session[Session]:
    """Thread-local sessions: every thread calling into the service gets its own Session."""
    return scoped_session(make_session_factory(settings))
