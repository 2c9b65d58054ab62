"""Engine, session factory and the FastAPI session dependency."""

from collections.abc import Generator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from bh2e.config import settings


def _is_sqlite(url: str) -> bool:
    return url.startswith("sqlite")


def build_engine(url: str, echo: bool = False, **engine_kwargs) -> Engine:
    """Create an engine; SQLite gets cross-thread access and enforced foreign keys.

    Items are deleted with their actor through ON DELETE CASCADE,
    which SQLite only honours with the foreign_keys pragma on.
    """
    connect_args = {"check_same_thread": False} if _is_sqlite(url) else {}
    db_engine = create_engine(url, connect_args=connect_args, echo=echo, **engine_kwargs)

    if _is_sqlite(url):

        @event.listens_for(db_engine, "connect")
        def _enable_foreign_keys(dbapi_conn, connection_record):
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return db_engine


engine = build_engine(settings.DATABASE_URL, echo=settings.DEBUG)

SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)


def get_db() -> Generator[Session, None, None]:
    """Yield a session for one request and close it afterwards."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
