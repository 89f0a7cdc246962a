"""Generate database session"""

from typing import Iterator

from sqlalchemy import StaticPool, create_engine
from sqlalchemy.orm import Session, sessionmaker

from src.core.config import SETTINGS, Settings
from src.db.schema import Base


def create_session_factory(settings: Settings = SETTINGS) -> sessionmaker[Session]:
    """Engine + tables for the configured database. In-memory SQLite shares a single connection."""
    engine_options = {}
    if settings.database_url.startswith("sqlite") and ":memory:" in settings.database_url:
        engine_options = {
            "connect_args": {"check_same_thread": False},
            "poolclass": StaticPool,
        }
    engine = create_engine(settings.database_url, echo=settings.echo_sql, **engine_options)

    # Ensure all tables are created
    Base.metadata.create_all(bind=engine)
    return sessionmaker(autoflush=False, bind=engine)


def get_db(session_factory: sessionmaker[Session]) -> Iterator[Session]:
    db = session_factory()
    try:
        yield db
    finally:
        db.close()
