"""Database base configuration and utilities."""

from collections.abc import Generator
from contextlib import contextmanager

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from travelme.engine.config import Settings


class Base(DeclarativeBase):
    """Base class for the read-only catalog ORM mappings."""

    pass


def get_engine(settings: Settings) -> Engine:
    """Create a SQLAlchemy engine for the catalog store.

    Args:
        settings: Settings containing the database URL.

    Returns:
        Configured SQLAlchemy engine.
    """
    return create_engine(settings.database_url, pool_pre_ping=True)


def get_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Create a session factory for the given engine."""
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@contextmanager
def read_session(session_factory: sessionmaker[Session]) -> Generator[Session, None, None]:
    """Context manager for read-only database sessions.

    The session is always rolled back; the catalog is never written.

    Example:
        >>> engine = get_engine(get_settings())
        >>> with read_session(get_session_factory(engine)) as session:
        ...     session.scalars(select(PlaceRow)).all()
    """
    session = session_factory()
    try:
        yield session
    finally:
        session.rollback()
        session.close()
