from sqlalchemy import create_engine, text
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from typing import Generator
import logging

from .config import settings

logger = logging.getLogger(__name__)


def _engine_options(url: str) -> dict:
    """Pool settings for PostgreSQL; SQLite needs cross-thread access instead."""
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_size": 5,
        "max_overflow": 10,
        "pool_timeout": 30,
        "pool_recycle": 1800,  # Recycle connections after 30 minutes
        "pool_pre_ping": True,
    }


engine = create_engine(settings.get_database_url, **_engine_options(settings.get_database_url))

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


# Database dependency
def get_db() -> Generator[Session, None, None]:
    """Get database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def check_db_connection(db: Session) -> bool:
    """Run a trivial query to confirm the database is reachable."""
    try:
        db.execute(text("SELECT 1"))
        return True
    except Exception as exc:
        logger.error(f"Database connectivity check failed: {exc}")
        return False


# Database initialization
def init_db():
    """Initialize database tables."""
    # Import models so they are registered on the metadata
    from ..models import appointment, user  # noqa: F401

    Base.metadata.create_all(bind=engine)
