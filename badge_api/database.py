# badge_api/database.py
"""
Database connection, session management, and table creation.
Uses SQLAlchemy; PostgreSQL in production, SQLite for tests and local runs.
All models are auto-imported here so create_tables() creates every table in one call.
"""

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool
from badge_api.config import Settings, settings


def build_engine(config: Settings) -> Engine:
    """Create an engine from an explicit settings object."""
    url = config.database_url
    if url.get_backend_name() == "sqlite":
        kwargs = {"connect_args": {"check_same_thread": False}}
        if not url.database or url.database == ":memory:":
            kwargs["poolclass"] = StaticPool   # One shared in-memory DB
        return create_engine(url, **kwargs)

    timeout_ms = int(config.STORE_TIMEOUT_SECONDS * 1000)
    connect_args = {}
    if url.get_backend_name() == "postgresql":
        # Server cancels any statement still running after the store timeout
        connect_args = {
            "connect_timeout": max(1, int(config.STORE_TIMEOUT_SECONDS)),
            "options": f"-c statement_timeout={timeout_ms}",
        }

    return create_engine(
        url,
        connect_args=connect_args,
        pool_pre_ping=True,          # Auto-reconnect if DB connection drops
        pool_size=config.DB_POOL_SIZE,
        max_overflow=config.DB_MAX_OVERFLOW,
        pool_timeout=config.STORE_TIMEOUT_SECONDS,
        echo=False,                  # Set True to log all SQL queries (debug only)
    )


engine = build_engine(settings)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """FastAPI dependency — yields a DB session and closes it after request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_tables(bind: Engine = None):
    """
    Creates all DB tables on startup. Safe to call multiple times.
    Import all models here so SQLAlchemy knows about them.
    """
    from badge_api.models.user import User           # noqa
    from badge_api.models.movement import Movement   # noqa

    Base.metadata.create_all(bind=bind or engine)
