"""
Database engine and session factory
"""
import logging
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

from app.core.config import settings

logger = logging.getLogger(__name__)

Base = declarative_base()


def create_db_engine(url: str) -> Engine:
    """Create an engine for PostgreSQL, or SQLite when that is what the URL points at"""
    if url.startswith("sqlite"):
        return create_engine(url, connect_args={"check_same_thread": False})
    return create_engine(url, pool_pre_ping=True, connect_args={"connect_timeout": 10})


engine = create_db_engine(settings.database_url)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    """Request-scoped session, closed when the request finishes"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
