"""Async SQLite wrapper using stdlib sqlite3 + anyio.

Every blocking sqlite3 call runs in a worker thread via ``anyio.to_thread``.
The connection is opened with ``check_same_thread=False`` because the
thread pool may hand consecutive calls to different threads, and with
``autocommit=True`` so single statements commit on their own;
``Database.transaction()`` flips to manual mode as needed.
"""

import sqlite3
from collections.abc import Callable, Mapping, Sequence
from typing import Any

import anyio.to_thread

Params = Sequence[Any] | Mapping[str, Any]


def _run_sync(func: Callable[..., Any], *args: Any) -> Any:
    return anyio.to_thread.run_sync(func, *args)


def _as_dict(cursor: sqlite3.Cursor, row: tuple[Any, ...]) -> dict[str, Any]:
    columns = [desc[0] for desc in cursor.description]
    return dict(zip(columns, row, strict=True))


class AsyncConnection:
    """Async wrapper around ``sqlite3.Connection`` returning dict rows."""

    __slots__ = ("_conn",)

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    @property
    def autocommit(self) -> bool:
        return bool(self._conn.autocommit)

    @autocommit.setter
    def autocommit(self, value: bool) -> None:
        self._conn.autocommit = value

    async def execute(self, sql: str, params: Params = ()) -> int:
        """Run one statement and return the affected row count."""
        cursor = await _run_sync(lambda: self._conn.execute(sql, params))
        return cursor.rowcount

    async def executemany(self, sql: str, params_seq: Sequence[Params]) -> int:
        cursor = await _run_sync(lambda: self._conn.executemany(sql, params_seq))
        return cursor.rowcount

    async def executescript(self, sql: str) -> None:
        """Execute multiple SQL statements at once.

        ``executescript`` commits any pending transaction before running
        and does not honor ``autocommit`` mode.
        """
        await _run_sync(lambda: self._conn.executescript(sql))

    async def fetchall(self, sql: str, params: Params = ()) -> list[dict[str, Any]]:
        def run() -> list[dict[str, Any]]:
            cursor = self._conn.execute(sql, params)
            return [_as_dict(cursor, row) for row in cursor.fetchall()]

        return await _run_sync(run)

    async def fetchone(self, sql: str, params: Params = ()) -> dict[str, Any] | None:
        def run() -> dict[str, Any] | None:
            cursor = self._conn.execute(sql, params)
            row = cursor.fetchone()
            return None if row is None else _as_dict(cursor, row)

        return await _run_sync(run)

    async def commit(self) -> None:
        await _run_sync(self._conn.commit)

    async def rollback(self) -> None:
        await _run_sync(self._conn.rollback)

    async def close(self) -> None:
        await _run_sync(self._conn.close)


async def connect(path: str) -> AsyncConnection:
    """Open an async SQLite connection with foreign keys enforced."""
    conn = await _run_sync(lambda: sqlite3.connect(path, autocommit=True, check_same_thread=False))
    connection = AsyncConnection(conn)
    await connection.execute("PRAGMA foreign_keys=ON")
    return connection
