"""
Database connection and session management for local asset rows.

The URL comes from Settings.database_url (CENTRALSTORAGE_DATABASE_URL).
"""
import logging
from typing import Generator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.exc import DBAPIError, OperationalError
from sqlalchemy.orm import Session, sessionmaker

from centralstorage.core.assets.models import Base
from centralstorage.core.config import Settings, get_settings

logger = logging.getLogger(__name__)

engine: Optional[Engine] = None
SessionLocal: Optional[sessionmaker] = None


def init_db(settings: Optional[Settings] = None) -> sessionmaker:
    """
    Create the engine, the asset tables and the session factory.
    Call this once at application startup.

    Args:
        settings: Settings to read database_url from (default: the environment)

    Returns:
        The session factory

    Raises:
        RuntimeError: If the database cannot be reached
    """
    global engine, SessionLocal

    settings = settings or get_settings()
    url = settings.database_url

    connect_args = {}
    if url.startswith("sqlite"):
        # Sessions may be handed between threads (FastAPI sync endpoints)
        connect_args["check_same_thread"] = False

    try:
        engine = create_engine(url, pool_pre_ping=True, connect_args=connect_args)
        Base.metadata.create_all(engine)
    except (OperationalError, DBAPIError) as e:
        logger.error(f"Database initialization failed: {e}")
        raise RuntimeError(f"Failed to connect to database: {e}") from e

    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    logger.info(f"Database initialized: {url.split('@')[1] if '@' in url else url}")
    return SessionLocal


def get_db() -> Generator[Session, None, None]:
    """
    Get a database session.

    Usage:
        from centralstorage.core.database import get_db

        db = next(get_db())
        repository = AssetRepository(db, client)
    """
    if not SessionLocal:
        raise RuntimeError("Database not initialized. Call init_db() first.")

    db = SessionLocal()
    try:
        yield db
    except (OperationalError, DBAPIError) as e:
        logger.error(f"Database session error: {e}")
        db.rollback()
        raise
    finally:
        db.close()


def close_db() -> None:
    """Dispose of the engine and forget the session factory."""
    global engine, SessionLocal

    if engine is not None:
        engine.dispose()
    engine = None
    SessionLocal = None
