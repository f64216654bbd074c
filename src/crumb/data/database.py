"""Async SQLite database access.

Runs stdlib ``sqlite3`` in anyio worker threads. Rows come back as
plain dicts keyed by column name.

Connection URL format::

    sqlite:///path/to/db.sqlite    # SQLite file
    sqlite:///:memory:             # In-memory SQLite

A single connection is shared per ``Database``; calls are serialized
through an ``anyio.Lock`` so the connection is never used from two
worker threads at once.
"""

from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Any

import anyio

from crumb.data._sqlite import AsyncConnection, Params
from crumb.data._sqlite import connect as sqlite_connect
from crumb.data.errors import DataError, QueryError

logger = logging.getLogger("crumb.data")

# Set inside transaction(); query methods reuse the transaction's
# connection (and its already-held lock) while it is set.
_current_conn: ContextVar[AsyncConnection] = ContextVar("crumb_db_conn")


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    """Database connection configuration."""

    url: str
    echo: bool = False


class Database:
    """Async SQLite access with dict rows.

    Usage::

        db = Database("sqlite:///:memory:")

        await db.execute("INSERT INTO users (name) VALUES (?)", "Alice")
        rows = await db.fetch_all("SELECT * FROM users")
        user = await db.fetch_one("SELECT * FROM users WHERE id = ?", 1)
        count = await db.fetch_val("SELECT COUNT(*) FROM users")

        async with db.transaction():
            await db.execute("INSERT INTO users (name) VALUES (?)", "Bob")
            await db.execute("INSERT INTO users (name) VALUES (?)", "Carol")
    """

    __slots__ = ("__weakref__", "_config", "_conn", "_lock", "_path")

    def __init__(self, url: str, /, *, echo: bool = False) -> None:
        self._config = DatabaseConfig(url=url, echo=echo)
        self._path = _parse_sqlite_path(url)
        self._lock: anyio.Lock | None = None  # Created lazily inside the event loop
        self._conn: AsyncConnection | None = None

    @property
    def url(self) -> str:
        return self._config.url

    @property
    def connected(self) -> bool:
        return self._conn is not None

    # -- Connection management --

    @asynccontextmanager
    async def _connection(self) -> AsyncIterator[AsyncConnection]:
        """Yield the connection, holding the lock unless a transaction already does."""
        if self._conn is None:
            await self.connect()

        current = _current_conn.get(None)
        if current is not None and current is self._conn:
            yield current
            return

        if self._lock is None:
            self._lock = anyio.Lock()
        async with self._lock:
            assert self._conn is not None
            yield self._conn

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        """Execute multiple statements atomically.

        Commits on clean exit, rolls back on exception. Nested calls join
        the outer transaction.
        """
        if self._conn is None:
            await self.connect()

        if _current_conn.get(None) is self._conn:
            yield
            return

        if self._lock is None:
            self._lock = anyio.Lock()
        async with self._lock:
            conn = self._conn
            assert conn is not None
            token = _current_conn.set(conn)
            try:
                conn.autocommit = False
                yield
                await conn.commit()
            except BaseException:
                await conn.rollback()
                raise
            finally:
                conn.autocommit = True
                _current_conn.reset(token)

    def _log_query(self, sql: str, params: Any, elapsed: float) -> None:
        if not self._config.echo:
            return
        if params:
            logger.info("%6.1fms  %s  params=%r", elapsed * 1000, sql, params)
        else:
            logger.info("%6.1fms  %s", elapsed * 1000, sql)

    # -- Public query API --

    async def execute(self, sql: str, /, *params: Any) -> int:
        """Execute a statement (INSERT/UPDATE/DELETE) and return rows affected."""
        t0 = time.perf_counter()
        async with self._connection() as conn:
            try:
                return await conn.execute(sql, params)
            except Exception as exc:
                raise QueryError(str(exc)) from exc
            finally:
                self._log_query(sql, params, time.perf_counter() - t0)

    async def execute_script(self, sql: str, /) -> None:
        """Execute several ``;``-separated statements (schema files)."""
        t0 = time.perf_counter()
        async with self._connection() as conn:
            try:
                await conn.executescript(sql)
            except Exception as exc:
                raise QueryError(str(exc)) from exc
            finally:
                self._log_query(sql, (), time.perf_counter() - t0)

    async def execute_many(self, sql: str, params_seq: Sequence[Params], /) -> int:
        """Execute a statement once per parameter set and return rows affected."""
        t0 = time.perf_counter()
        async with self._connection() as conn:
            try:
                return await conn.executemany(sql, params_seq)
            except Exception as exc:
                raise QueryError(str(exc)) from exc
            finally:
                self._log_query(sql, params_seq, time.perf_counter() - t0)

    async def fetch_all(self, sql: str, /, *params: Any) -> list[dict[str, Any]]:
        """Execute a query and return every row as a dict."""
        t0 = time.perf_counter()
        async with self._connection() as conn:
            try:
                return await conn.fetchall(sql, params)
            except Exception as exc:
                raise QueryError(str(exc)) from exc
            finally:
                self._log_query(sql, params, time.perf_counter() - t0)

    async def fetch_one(self, sql: str, /, *params: Any) -> dict[str, Any] | None:
        """Execute a query and return the first row, or ``None``."""
        t0 = time.perf_counter()
        async with self._connection() as conn:
            try:
                return await conn.fetchone(sql, params)
            except Exception as exc:
                raise QueryError(str(exc)) from exc
            finally:
                self._log_query(sql, params, time.perf_counter() - t0)

    async def fetch_val(self, sql: str, /, *params: Any) -> Any:
        """Return the first column of the first row (COUNT, MAX, ...)."""
        row = await self.fetch_one(sql, *params)
        if row is None:
            return None
        return next(iter(row.values()))

    # -- Lifecycle --

    async def connect(self) -> None:
        """Open the connection. Called automatically on first query."""
        if self._conn is not None:
            return
        try:
            self._conn = await sqlite_connect(self._path)
        except Exception as exc:
            msg = f"Cannot open database {self._config.url!r}: {exc}"
            raise DataError(msg) from exc

    async def disconnect(self) -> None:
        """Close the connection."""
        if self._conn is None:
            return
        conn, self._conn = self._conn, None
        await conn.close()

    async def __aenter__(self) -> Database:
        await self.connect()
        return self

    async def __aexit__(self, *_: Any) -> None:
        await self.disconnect()


def _parse_sqlite_path(url: str) -> str:
    """Extract the file path from a sqlite:// URL."""
    # sqlite:///path/to/db  ->  path/to/db
    # sqlite:///:memory:    ->  :memory:
    for prefix in ("sqlite:///", "sqlite://"):
        if url.startswith(prefix):
            return url[len(prefix) :] or ":memory:"
    msg = (
        f"Unsupported database URL scheme: {url!r}. "
        "Supported: sqlite:///path, sqlite:///:memory:"
    )
    raise DataError(msg)
