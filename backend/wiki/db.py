import os
from collections.abc import Iterator
from contextlib import contextmanager

from loguru import logger
from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, SQLModel, create_engine

from .constants import DATABASE_URL, DEBUG
from .errors import StorageFailure

# registers the tables on SQLModel.metadata
from .models.article import Article  # noqa: F401
from .models.history import HistoryEntry  # noqa: F401
from .models.user import User  # noqa: F401


def get_engine(url: str = DATABASE_URL, **kwargs) -> Engine:  # type: ignore[no-untyped-def]
    if url.startswith("sqlite:///") and not url.startswith("sqlite:///:memory:"):
        directory = os.path.dirname(url.removeprefix("sqlite:///"))
        if directory and not os.path.exists(directory):
            os.makedirs(directory)
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    return create_engine(url, echo=DEBUG, connect_args=connect_args, **kwargs)


@event.listens_for(Engine, "connect")
def set_sqlite_pragma(dbapi_connection, connection_record):  # type: ignore[no-untyped-def]
    """Enable foreign keys and configure SQLite for better concurrency."""
    if type(dbapi_connection).__module__.split(".")[0] not in ("sqlite3", "pysqlite2"):
        return
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA busy_timeout=30000")
    cursor.close()


def init_db(engine: Engine) -> None:
    """Create missing tables. Existing tables and rows are left untouched."""
    SQLModel.metadata.create_all(engine)
    logger.info("Database schema is up to date")


@contextmanager
def transaction(engine: Engine) -> Iterator[Session]:
    """One session per core operation, committed only if every step succeeded."""
    with Session(engine, expire_on_commit=False) as session:
        try:
            yield session
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"Storage failure: {e}")
            raise StorageFailure(str(e)) from e
        except Exception:
            session.rollback()
            raise
