"""Engine, session factory and declarative base of the section store."""

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

from .core.config import settings

DATABASE_URL = settings.database_url


def is_postgresql(url: str = DATABASE_URL) -> bool:
    """True for PostgreSQL URLs, where row locks (FOR UPDATE) are real."""
    return url.startswith("postgresql")


def build_engine(url: str) -> Engine:
    """Create an engine with database-specific tuning."""
    if url.startswith("sqlite"):
        new_engine = create_engine(
            url,
            connect_args={
                "check_same_thread": False,
                "timeout": settings.sqlite_busy_timeout,
            },
        )

        # SQLite defaults foreign_keys to OFF; enable them on every connection.
        @event.listens_for(new_engine, "connect")
        def _set_sqlite_pragma(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        return new_engine

    return create_engine(
        url,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_timeout=settings.db_pool_timeout,
        pool_recycle=settings.db_pool_recycle,
        pool_pre_ping=True,
    )


engine = build_engine(DATABASE_URL)

# One session per request (get_db) or per background unit of work.
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def init_db(bind: Engine = engine) -> None:
    """Create all tables that do not exist yet."""
    from . import models  # noqa: F401  (registers mappers on Base.metadata)

    Base.metadata.create_all(bind=bind)


def get_db():
    """Request-scoped session. Anything left uncommitted by a failing request is rolled back."""
    db = SessionLocal()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
