from __future__ import annotations

import logging
from collections.abc import Generator, Iterator
from contextlib import contextmanager
from typing import Annotated

from fastapi import Depends
from sqlalchemy import event
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, SQLModel, create_engine

from weekgrid.core.config import settings
from weekgrid.core.errors import StorageError

logger = logging.getLogger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(database_url: str, **kwargs) -> Engine:
    connect_args = {}
    if database_url.startswith("sqlite"):
        connect_args = {"check_same_thread": False}
    engine = create_engine(database_url, connect_args=connect_args, **kwargs)
    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    return engine


engine = build_engine(settings.DATABASE_URL)


def init_db(bind: Engine | None = None) -> None:
    """Create database tables in environments without migrations."""
    from weekgrid import models  # noqa: F401  registers tables on the metadata

    SQLModel.metadata.create_all(bind=bind or engine)


def get_session() -> Generator[Session, None, None]:
    with Session(engine) as session:
        yield session


SessionDep = Annotated[Session, Depends(get_session)]


def upsert_statement(session: Session, model):
    """Dialect ``INSERT`` that supports ``on_conflict_do_update``."""
    dialect = session.get_bind().dialect.name
    if dialect == "postgresql":
        return postgresql.insert(model)
    if dialect == "sqlite":
        return sqlite.insert(model)
    raise NotImplementedError(f"Upserts are not supported for the {dialect} dialect")


@contextmanager
def storage_errors(session: Session, action: str) -> Iterator[None]:
    """Roll back and re-raise persistence failures as ``StorageError``."""
    try:
        yield
    except SQLAlchemyError as exc:
        session.rollback()
        logger.error(f"Storage failure while trying to {action}: {exc}", exc_info=True)
        raise StorageError() from exc
