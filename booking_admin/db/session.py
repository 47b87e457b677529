"""Database engine and session management."""
from typing import Any, Dict, Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from booking_admin.config.settings import Settings, settings


def build_engine(config: Settings = settings) -> Engine:
    """Create the engine, applying pool settings only where the backend uses a queue pool"""
    options: Dict[str, Any] = {"echo": config.DB_ECHO, "pool_pre_ping": True}
    if config.is_sqlite:
        options["connect_args"] = {"check_same_thread": False}
    else:
        options["pool_size"] = config.DB_POOL_SIZE
        options["max_overflow"] = config.DB_MAX_OVERFLOW
    return create_engine(config.DATABASE_URL, **options)


engine = build_engine()

SessionLocal = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """
    Dependency function that yields a database session.

    Usage in FastAPI endpoints:
        @router.get("/rooms")
        def list_rooms(db: Session = Depends(get_db)):
            ...
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
