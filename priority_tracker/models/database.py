"""Database engine, sessions and schema creation."""

import logging
from collections.abc import Generator
from contextlib import contextmanager

from sqlalchemy import Engine, create_engine, event, text
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from priority_tracker.utils.config import DatabaseConfig, get_config

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Declarative base shared by users, initiatives and priorities."""


# Built on first use so that tests and the CLI can swap the config first
_engine: Engine | None = None
_SessionLocal: sessionmaker | None = None


def _is_sqlite(url: str) -> bool:
    return url.startswith("sqlite")


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_engine_for(database: DatabaseConfig) -> Engine:
    """Build an engine for the configured database.

    SQLite connections are shared across the request threads and enforce
    foreign keys, which SQLite leaves off by default. Other backends get
    ``pool_pre_ping`` so that stale pooled connections are replaced.
    """
    if _is_sqlite(database.url):
        engine = create_engine(
            database.url,
            echo=database.echo,
            connect_args={"check_same_thread": False},
        )
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        return engine
    return create_engine(database.url, echo=database.echo, pool_pre_ping=True)


def get_engine() -> Engine:
    """Get or create the database engine."""
    global _engine
    if _engine is None:
        _engine = create_engine_for(get_config().database)
    return _engine


def get_session_factory() -> sessionmaker:
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=get_engine())
    return _SessionLocal


def init_db() -> None:
    """Create any missing tables. Existing tables and rows are left alone."""
    # Register the mapped classes with Base.metadata
    from priority_tracker.models import initiative, priority, user  # noqa: F401

    engine = get_engine()
    Base.metadata.create_all(bind=engine)
    logger.debug(f"Schema ready on {engine.url.render_as_string(hide_password=True)}")


def ping_database(db: Session) -> None:
    """Run a trivial query; raises ``SQLAlchemyError`` when the database is unreachable."""
    db.execute(text("SELECT 1"))


def get_db() -> Generator[Session, None, None]:
    """Request-scoped session for FastAPI dependencies. Services commit themselves."""
    db = get_session_factory()()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def get_db_session() -> Generator[Session, None, None]:
    """Unit-of-work session for the CLI: commit on success, roll back on error."""
    db = get_session_factory()()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def reset_engine() -> None:
    """Dispose of the current engine so the next use reads the config again."""
    global _engine, _SessionLocal
    if _engine is not None:
        _engine.dispose()
    _engine = None
    _SessionLocal = None
