"""
Database Connection

SQLAlchemy engine, session factory and the FastAPI session dependency.

The engine (and its connection pool) is created on first use, so importing
the application never opens a connection. Each request gets its own session,
which checks a connection out of the pool per query and returns it afterwards.
"""

from typing import Generator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session, declarative_base

from core.config import get_settings
from core.logger import get_logger

logger = get_logger(__name__)

Base = declarative_base()

_engine: Optional[Engine] = None
_session_factory: Optional[sessionmaker] = None


def get_engine() -> Engine:
    """Create the Engine on first use; reuse thereafter."""
    global _engine
    if _engine is None:
        settings = get_settings()
        url = settings.SQLALCHEMY_DATABASE_URL
        kwargs = {"pool_pre_ping": True}
        if not url.startswith("sqlite"):
            kwargs.update(
                pool_size=settings.DB_POOL_SIZE,
                max_overflow=settings.DB_MAX_OVERFLOW,
                pool_timeout=settings.DB_POOL_TIMEOUT,
            )
        _engine = create_engine(url, **kwargs)
        logger.info(f"Database engine created for {_engine.url.render_as_string(hide_password=True)}")
    return _engine


def get_session_factory() -> sessionmaker:
    """Create the sessionmaker on first use; reuse thereafter."""
    global _session_factory
    if _session_factory is None:
        _session_factory = sessionmaker(
            bind=get_engine(),
            autocommit=False,
            autoflush=False,
        )
    return _session_factory


def SessionLocal() -> Session:
    """Return a new Session."""
    return get_session_factory()()


def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency yielding a database session.

    The session is always closed, returning its connection to the pool.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def dispose_engine() -> None:
    """Close all pooled connections; the engine is recreated on next use."""
    global _engine, _session_factory
    if _engine is not None:
        _engine.dispose()
        logger.info("Database connection pool disposed")
    _engine = None
    _session_factory = None
