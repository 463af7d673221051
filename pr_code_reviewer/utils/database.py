"""
Database connection and session management utilities
"""

import logging
from collections.abc import Generator
from pathlib import Path

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from ..config import get_database_url

# Global variables
engine = None
SessionLocal = None
Base = declarative_base()


def get_engine() -> Engine:
    """
    Get database engine instance

    Returns:
        SQLAlchemy engine instance
    """
    global engine

    if engine is None:
        database_url = get_database_url()

        engine = create_engine(
            database_url,
            connect_args={"check_same_thread": False} if database_url.startswith("sqlite") else {},
            echo=False,
            pool_pre_ping=True,
            pool_recycle=300,
        )

        if database_url.startswith("sqlite"):
            @event.listens_for(engine, "connect")
            def set_sqlite_pragma(dbapi_connection, connection_record):
                cursor = dbapi_connection.cursor()
                cursor.execute("PRAGMA journal_mode=WAL")
                cursor.execute("PRAGMA synchronous=NORMAL")
                cursor.execute("PRAGMA temp_store=MEMORY")
                cursor.close()

    return engine


def get_session_local() -> sessionmaker:
    """
    Get session local factory

    Returns:
        Session factory instance
    """
    global SessionLocal

    if SessionLocal is None:
        SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=get_engine())

    return SessionLocal


def get_db() -> Generator[Session, None, None]:
    """
    Get database session dependency for FastAPI

    Yields:
        Database session
    """
    db = get_session_local()()
    try:
        yield db
    finally:
        db.close()


def create_tables() -> None:
    """
    Create all database tables
    """
    # Register models with Base before creating tables
    from .. import models  # noqa: F401

    Base.metadata.create_all(bind=get_engine())


def check_database_connection() -> bool:
    """
    Check if database connection is working

    Returns:
        True if connection is successful, False otherwise
    """
    try:
        with get_engine().connect() as connection:
            connection.execute(text("SELECT 1"))
        return True
    except Exception:
        logging.getLogger(__name__).exception("Database connection check failed")
        return False


def get_database_info() -> dict:
    """
    Get database information

    Returns:
        Dictionary with database information
    """
    db_engine = get_engine()
    database_url = get_database_url()

    info = {
        "database_url": database_url,
        "driver": db_engine.driver,
        "connected": str(check_database_connection()),
    }

    if database_url.startswith("sqlite") and ":memory:" not in database_url:
        db_path = Path(database_url.replace("sqlite:///", ""))
        if db_path.exists():
            info["file_size"] = f"{db_path.stat().st_size / 1024 / 1024:.2f} MB"
        else:
            info["file_size"] = "Not created"
        info["file_path"] = str(db_path.absolute())

    return info
