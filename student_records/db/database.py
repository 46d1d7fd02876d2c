"""Database configuration and session management."""

import logging
from pathlib import Path
from typing import Any, Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from student_records.models import Base
from config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()

_is_sqlite = settings.database_url.startswith("sqlite")

# Ensure a data directory exists if using a SQLite file
if settings.database_url.startswith("sqlite:///") and ":memory:" not in settings.database_url:
    db_path = settings.database_url.replace("sqlite:///", "")
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)

engine_options: dict[str, Any] = {
    "echo": settings.database_echo,
    "pool_pre_ping": True,
}
if _is_sqlite:
    # Request handlers run in a thread pool; let sessions cross threads
    engine_options["connect_args"] = {"check_same_thread": False}
else:
    engine_options.update(pool_size=5, max_overflow=10, pool_recycle=3600)

engine = create_engine(settings.database_url, **engine_options)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine
)


def get_db() -> Generator[Session, None, None]:
    """Dependency to get database session.

    Yields a database session and ensures it's closed after use.

    Example:
        @app.get("/students")
        def list_students(db: Session = Depends(get_db)):
            return db.query(Student).all()
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db() -> None:
    """Create all tables. Called on application startup."""
    logger.info(f"Creating database tables at {settings.database_url}")
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created successfully")


def drop_db() -> None:
    """Drop all database tables.

    WARNING: This will delete all data!
    """
    logger.warning(f"Dropping all database tables at {settings.database_url}")
    Base.metadata.drop_all(bind=engine)
    logger.warning("All database tables dropped")
