"""Engine, session factory and schema bootstrap"""

from typing import Generator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session

from ..config import settings
from ..models.base import Base


def build_engine(url: str, echo: bool = False) -> Engine:
    """
    Create an engine for ``url``

    SQLite gets ``check_same_thread=False`` so FastAPI's threadpool can share
    connections; server databases get a pre-pinged connection pool.
    """
    if url.startswith("sqlite"):
        return create_engine(url, echo=echo, connect_args={"check_same_thread": False})

    return create_engine(
        url,
        echo=echo,
        pool_pre_ping=True,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
    )


engine = build_engine(settings.DATABASE_URL, echo=settings.SQL_ECHO)

# Services flush explicitly before reading back positions and covers
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Request-scoped session dependency; always closed after the request"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind: Optional[Engine] = None) -> None:
    """
    Create the users, collections, items and saved_items tables

    Args:
        bind: Engine to create them on; defaults to the application engine
    """
    # Registers every table on Base.metadata
    from ..models import User, Collection, Item, SavedItem  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)
