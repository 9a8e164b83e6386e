"""Database engine and session management."""
from typing import Any, Dict, Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from app.config.settings import Settings, settings


def _enable_sqlite_foreign_keys(dbapi_connection: Any, connection_record: Any) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_db_engine(config: Optional[Settings] = None, url: Optional[str] = None) -> Engine:
    """
    Create a database engine.

    Args:
        config: Settings to read the database options from
        url: Database URL overriding config.DATABASE_URL

    Returns:
        Configured SQLAlchemy engine
    """
    config = config or settings
    database_url = url or config.DATABASE_URL

    options: Dict[str, Any] = {
        "echo": config.DB_ECHO,
        "pool_pre_ping": True,
    }
    if database_url.startswith("sqlite"):
        # Debt aggregation reads from worker threads
        options["connect_args"] = {"check_same_thread": False}
    else:
        options["pool_size"] = config.DB_POOL_SIZE
        options["max_overflow"] = config.DB_POOL_OVERFLOW

    engine = create_engine(database_url, **options)

    if database_url.startswith("sqlite"):
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)

    return engine


def create_session_factory(bind: Engine) -> sessionmaker:
    """Session factory used by UnitOfWork."""
    return sessionmaker(
        bind=bind,
        autoflush=False,
        expire_on_commit=False,
    )


# Create database engine from settings
engine = create_db_engine(settings)

# Create SessionLocal class
SessionLocal = create_session_factory(engine)
