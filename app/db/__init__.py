"""Database engine, sessions and schema setup."""

from app.db.init_db import drop_db, init_db, reset_db
from app.db.session import SessionLocal, create_db_engine, create_session_factory, engine

__all__ = [
    "SessionLocal",
    "create_db_engine",
    "create_session_factory",
    "engine",
    "init_db",
    "drop_db",
    "reset_db",
]
