"""Async SQLite access for test fixtures.

SQL in, dict rows out::

    from crumb.data import Database

    async with Database("sqlite:///:memory:") as db:
        await db.execute("CREATE TABLE users (id INTEGER PRIMARY KEY, name TEXT)")
        await db.execute("INSERT INTO users (name) VALUES (?)", "Alice")
        rows = await db.fetch_all("SELECT * FROM users")
"""

from crumb.data.database import Database
from crumb.data.errors import DataError, QueryError

__all__ = ["DataError", "Database", "QueryError"]
