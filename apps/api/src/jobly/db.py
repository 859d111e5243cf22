from collections.abc import Iterator
from functools import lru_cache
from sqlite3 import Connection as SQLiteConnection
from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session

from jobly.config import get_settings


class Base(DeclarativeBase):
    pass


def _unicode_lower(value: str | None) -> str | None:
    if value is None:
        return None
    return value.lower()


def _register_sqlite_functions(dbapi_connection: Any, connection_record: Any) -> None:
    # SQLite's builtin lower() only folds ASCII; title matching lowercases the
    # bind value with str.lower(), so the column side must agree.
    # PostgreSQL needs a UTF-8 database with a non-C collation for the same.
    if isinstance(dbapi_connection, SQLiteConnection):
        dbapi_connection.create_function("lower", 1, _unicode_lower, deterministic=True)


@lru_cache
def get_engine() -> Engine:
    settings = get_settings()
    engine = create_engine(
        settings.database_url,
        echo=settings.db_echo,
        pool_pre_ping=True,
    )
    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _register_sqlite_functions)
    return engine


def get_session() -> Iterator[Session]:
    with Session(get_engine()) as session:
        yield session
