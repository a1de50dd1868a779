# storefront/data/database.py
from contextlib import contextmanager
from typing import Callable, ContextManager, Iterator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from storefront.utils.settings import DATABASE_URL, DB_ISOLATION_LEVEL

Base = declarative_base()

engine = create_engine(
    DATABASE_URL,
    isolation_level=DB_ISOLATION_LEVEL,
    pool_pre_ping=True,
    future=True,
)


def enable_sqlite_foreign_keys(target: Engine) -> None:
    """SQLite leaves foreign keys unenforced unless every connection asks for them."""

    @event.listens_for(target, "connect")
    def _set_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


if engine.dialect.name == "sqlite":
    enable_sqlite_foreign_keys(engine)

SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False, future=True)

SessionScope = Callable[[], ContextManager[Session]]


def get_db() -> Iterator[Session]:
    """Request scoped session for FastAPI dependencies."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def make_session_scope(factory: sessionmaker) -> SessionScope:
    """
    Builds a transactional scope over ``factory``.

    The scope commits when the block exits normally and rolls back on any
    exception, so a unit of work either lands completely or not at all.
    """

    @contextmanager
    def session_scope() -> Iterator[Session]:
        session = factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    return session_scope


session_scope = make_session_scope(SessionLocal)
