"""
Low-level database helpers (Postgres via psycopg, SQLite for local runs and tests).

SQL in this package is written with ``?`` placeholders; they are converted to
``%s`` for psycopg.
"""
from __future__ import annotations

import sqlite3
from typing import Iterable

import psycopg
from psycopg import errors as pg_errors
from psycopg.rows import dict_row

_SQLITE_PREFIX = "sqlite:///"


def resolve_dialect(url: str) -> str:
    if url.startswith("postgres://") or url.startswith("postgresql://"):
        return "postgres"
    if url.startswith(_SQLITE_PREFIX):
        return "sqlite"
    raise RuntimeError("DATABASE_URL must start with postgresql:// or sqlite:///")


def _convert_qmarks(sql: str) -> str:
    if "?" not in sql:
        return sql
    return sql.replace("?", "%s")


def _sqlite_dict_row(cursor, row):
    return {col[0]: row[idx] for idx, col in enumerate(cursor.description)}


class _CursorWrapper:
    def __init__(self, cursor, dialect: str):
        self._cursor = cursor
        self._dialect = dialect

    def execute(self, sql: str, params: Iterable | None = None):
        if self._dialect == "postgres":
            sql = _convert_qmarks(sql)
        if params is None:
            return self._cursor.execute(sql)
        return self._cursor.execute(sql, params)

    def fetchone(self):
        return self._cursor.fetchone()

    def fetchall(self):
        return self._cursor.fetchall()

    @property
    def rowcount(self):
        return getattr(self._cursor, "rowcount", 0)


class _ConnWrapper:
    def __init__(self, conn, dialect: str):
        self._conn = conn
        self.dialect = dialect

    def cursor(self):
        return _CursorWrapper(self._conn.cursor(), self.dialect)

    def commit(self):
        return self._conn.commit()

    def rollback(self):
        return self._conn.rollback()

    def close(self):
        return self._conn.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        if exc_type is not None:
            self.rollback()
        self.close()
        return False


def connect(url: str) -> _ConnWrapper:
    """
    Open a new connection for ``url``. Rows come back as dicts on both dialects.
    """
    dialect = resolve_dialect(url)
    if dialect == "postgres":
        return _ConnWrapper(psycopg.connect(url, row_factory=dict_row), dialect)
    conn = sqlite3.connect(url[len(_SQLITE_PREFIX):], timeout=30)
    conn.row_factory = _sqlite_dict_row
    return _ConnWrapper(conn, dialect)


def is_unique_violation(exc: Exception) -> bool:
    if isinstance(exc, pg_errors.UniqueViolation):
        return True
    return isinstance(exc, sqlite3.IntegrityError) and "UNIQUE" in str(exc).upper()


class Database:
    """
    Connection factory with an explicit lifecycle.

    ``open()`` checks connectivity and creates the schema; ``close()`` refuses
    any further connections. Each store call opens its own short-lived
    connection, so concurrent requests never share one.
    """

    def __init__(self, url: str):
        self.url = url
        self.dialect = resolve_dialect(url)
        self._open = False

    @property
    def is_open(self) -> bool:
        return self._open

    def open(self) -> None:
        from core.db.schema import init_db

        with connect(self.url) as conn:
            init_db(conn)
        self._open = True

    def close(self) -> None:
        self._open = False

    def connection(self) -> _ConnWrapper:
        if not self._open:
            raise RuntimeError("Database is not open")
        return connect(self.url)

    def ping(self) -> bool:
        with self.connection() as conn:
            cur = conn.cursor()
            cur.execute("SELECT 1")
            return cur.fetchone() is not None


__all__ = ["Database", "connect", "resolve_dialect", "is_unique_violation"]
