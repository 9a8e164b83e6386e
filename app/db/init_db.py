# app/db/init_db.py
"""Database initialization utilities."""
from typing import Optional

from sqlalchemy import inspect
from sqlalchemy.engine import Engine

from app.config.logging import get_logger
from app.db.base import Base, import_models

logger = get_logger(__name__)


def _default_engine() -> Engine:
    from app.db.session import engine

    return engine


def init_db(bind: Optional[Engine] = None) -> None:
    """
    Create all tables that do not exist yet.

    For production, use migrations instead.
    """
    bind = bind or _default_engine()
    import_models()

    existing_tables = inspect(bind).get_table_names()
    Base.metadata.create_all(bind=bind)
    logger.info(
        "Database initialized",
        extra={"existing_tables": len(existing_tables), "tables": len(Base.metadata.tables)},
    )


def drop_db(bind: Optional[Engine] = None) -> None:
    """
    Drop all database tables.

    WARNING: This will delete all data! Only for development/testing.
    """
    bind = bind or _default_engine()
    import_models()
    Base.metadata.drop_all(bind=bind)
    logger.warning("All database tables dropped")


def reset_db(bind: Optional[Engine] = None) -> None:
    """Drop and recreate all tables."""
    logger.warning("Resetting database...")
    drop_db(bind)
    init_db(bind)
    logger.info("Database reset complete")
