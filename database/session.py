"""
Database session management for Lead Concierge.

Provides engine creation and a transactional session scope.
The conversation engine is synchronous, so the store is too.
"""

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Tuple

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from .models import Base

logger = logging.getLogger(__name__)


def init_db(database_url: str) -> Tuple[Engine, sessionmaker]:
    """
    Create the database engine and tables.

    SQLite file paths get their parent directory created; in-memory
    SQLite shares a single connection so every session sees one database.

    Args:
        database_url: SQLAlchemy connection string

    Returns:
        Tuple of (engine, session factory)
    """
    url = make_url(database_url)
    kwargs = {}

    if url.get_backend_name() == "sqlite":
        kwargs["connect_args"] = {"check_same_thread": False}
        if not url.database or url.database == ":memory:":
            kwargs["poolclass"] = StaticPool
        else:
            Path(url.database).parent.mkdir(parents=True, exist_ok=True)

    engine = create_engine(url, echo=False, **kwargs)
    Base.metadata.create_all(engine)

    session_factory = sessionmaker(bind=engine, expire_on_commit=False)
    logger.info(f"Database initialized ({url.get_backend_name()})")
    return engine, session_factory


@contextmanager
def session_scope(session_factory: sessionmaker) -> Iterator[Session]:
    """Yield a session that commits on success and rolls back on error."""
    session = session_factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
