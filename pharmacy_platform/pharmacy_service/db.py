"""
Database connection and session management for the pharmacy service
"""
from sqlalchemy import create_engine, event, text
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from typing import Generator
import logging

from .config import settings
from .geo import haversine_distance

logger = logging.getLogger(__name__)

engine = create_engine(
    settings.DATABASE_URL,
    connect_args={"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {},
)
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
Base = declarative_base()


@event.listens_for(engine, "connect")
def register_sql_functions(dbapi_connection, connection_record):
    """Expose geo_distance(lat1, lon1, lat2, lon2) to SQL on SQLite connections"""
    if engine.dialect.name == "sqlite":
        dbapi_connection.create_function("geo_distance", 4, haversine_distance, deterministic=True)


def init_db() -> None:
    """
    Create all tables, including the unique email indexes.
    Should be called on application startup.
    """
    # Import models to ensure they are registered with Base
    from . import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    logger.info("Database initialized successfully")


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def check_db_connection() -> bool:
    """
    Check if database connection is working.

    Returns:
        bool: True if connection is successful, False otherwise
    """
    try:
        with SessionLocal() as db:
            db.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error("Database connection check failed: %s", e)
        return False
