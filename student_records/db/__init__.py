"""Engine, session factory and schema helpers for the students database."""

from .database import SessionLocal, drop_db, engine, get_db, init_db

__all__ = ["engine", "SessionLocal", "get_db", "init_db", "drop_db"]
