import logging

from sqlalchemy import event, text
from sqlalchemy.engine import Engine
from sqlmodel import create_engine, SQLModel, Session

import config

logger = logging.getLogger(__name__)


def build_engine(url: str, **kwargs) -> Engine:
    """Create an engine; SQLite connections get foreign key enforcement"""
    if url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"check_same_thread": False})
    engine = create_engine(url, **kwargs)

    if engine.dialect.name == "sqlite":
        # SQLite ignores ON DELETE CASCADE unless enabled per connection.
        @event.listens_for(engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return engine


# Create engine
engine = build_engine(config.DATABASE_URL, echo=config.DB_ECHO)


def check_connection():
    """Run a trivial query so a bad DATABASE_URL fails at startup"""
    logger.info("Checking database connection...")
    with engine.connect() as connection:
        connection.execute(text("SELECT 1"))
    logger.info("Database connection established.")


def create_db_and_tables():
    """Create all tables in the database"""
    # Register the table models on SQLModel.metadata.
    import models  # noqa: F401

    SQLModel.metadata.create_all(engine)


def get_session():
    """Get database session - used as FastAPI dependency"""
    with Session(engine) as session:
        yield session
