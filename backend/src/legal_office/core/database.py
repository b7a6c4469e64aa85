"""
Database service for the Legal Office backend.

This module provides database operations with proper connection management
and transaction handling. SQLite is the default store; any SQLAlchemy URL
can be configured through ``DATABASE_URL``.
"""

import logging
from typing import Generator
from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.exc import SQLAlchemyError
from contextlib import contextmanager

from legal_office.core.config import get_config

config = get_config()
logger = logging.getLogger(__name__)


def build_engine(database_url: str) -> Engine:
    """Create an engine suited to the configured backend."""
    if database_url.startswith("sqlite"):
        return create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            echo=config.database.db_echo,
        )

    return create_engine(
        database_url,
        pool_size=config.database.db_pool_size,
        max_overflow=config.database.db_max_overflow,
        pool_timeout=config.database.db_pool_timeout,
        pool_pre_ping=True,  # Verify connections before use
        pool_recycle=3600,   # Recycle connections every hour
        echo=config.database.db_echo,
    )


engine = build_engine(config.get_database_url())

# Session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@event.listens_for(Engine, "connect")
def set_sqlite_pragma(dbapi_connection, connection_record):
    """Enforce foreign keys (and their ON DELETE CASCADE clauses) on SQLite."""
    if type(dbapi_connection).__module__.startswith("sqlite3"):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def get_db() -> Generator[Session, None, None]:
    """
    Get database session with proper error handling and cleanup.

    Yields:
        Database session

    Raises:
        SQLAlchemyError: If database connection fails
    """
    db = SessionLocal()
    try:
        yield db
    except SQLAlchemyError as e:
        logger.error(f"Database error: {e}")
        db.rollback()
        raise
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


@contextmanager
def get_db_transaction():
    """
    Get database session with transaction management.

    Yields:
        Database session; committed on success, rolled back on error
    """
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except SQLAlchemyError as e:
        logger.error(f"Database transaction error: {e}")
        db.rollback()
        raise
    except Exception as e:
        logger.error(f"Unexpected error in database transaction: {e}")
        db.rollback()
        raise
    finally:
        db.close()


def create_tables(bind: Engine = None):
    """Create all database tables."""
    try:
        # Import all models to ensure they are registered with SQLAlchemy
        from legal_office.models import Base
        Base.metadata.create_all(bind=bind or engine)
        logger.info("Database tables created successfully")
    except SQLAlchemyError as e:
        logger.error(f"Failed to create database tables: {e}")
        raise


def drop_tables(bind: Engine = None):
    from legal_office.models import Base
    Base.metadata.drop_all(bind=bind or engine)


def check_database_connection() -> bool:
    """
    Check if database connection is working.

    Returns:
        True if connection is successful, False otherwise
    """
    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError as e:
        logger.error(f"Database connection check failed: {e}")
        return False


def initialize_database():
    """Initialize database connection and create tables if needed."""
    if not check_database_connection():
        raise RuntimeError("Database connection failed")

    create_tables()
    logger.info("Database initialized successfully")
