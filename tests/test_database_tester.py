"""Tests for crumb.testing.database — fixtures and table assertions."""

import logging

import pytest

from crumb.config import CrumbConfig
from crumb.data import Database
from crumb.errors import ConfigurationError, RowNotFound
from crumb.testing import DatabaseTester, Fixture, quote_identifier

SCHEMA = """
CREATE TABLE users (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    username TEXT NOT NULL,
    email TEXT NOT NULL,
    enabled INTEGER NOT NULL DEFAULT 1
);
CREATE TABLE posts (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id INTEGER NOT NULL REFERENCES users (id),
    title TEXT NOT NULL
);
"""


class UserFixture:
    table = "users"
    records = [
        {"id": 1, "username": "alice", "email": "alice@example.com", "enabled": 1},
        {"id": 2, "username": "bob", "email": "bob@example.com", "enabled": 0},
    ]


POSTS = Fixture("posts", [{"id": 1, "user_id": 1, "title": "Hello"}])


# -- Fixtures --


@pytest.fixture
def schema_file(tmp_path):
    path = tmp_path / "schema.sql"
    path.write_text(SCHEMA)
    return path


@pytest.fixture
async def tester(schema_file):
    tester = DatabaseTester(
        Database("sqlite:///:memory:"),
        schema_file=schema_file,
        fixtures=[UserFixture, POSTS],
    )
    await tester.set_up()
    yield tester
    await tester.db.disconnect()


# =============================================================================
# Setup
# =============================================================================


class TestSetUp:
    async def test_fixtures_inserted(self, tester) -> None:
        assert await tester.get_table_row_count("users") == 2
        assert await tester.get_table_row_count("posts") == 1

    async def test_table_names(self, tester) -> None:
        names = await tester.table_names()
        assert "users" in names
        assert "posts" in names
        assert not any(name.startswith("sqlite_") for name in names)

    async def test_set_up_again_resets_rows(self, tester) -> None:
        await tester.db.execute(
            "INSERT INTO users (username, email) VALUES (?, ?)", "carol", "carol@example.com"
        )
        await tester.db.execute("UPDATE users SET username = ? WHERE id = ?", "changed", 1)

        await tester.set_up()

        await tester.assert_table_row_count(2, "users")
        await tester.assert_table_row_value("alice", "users", 1, "username")

    async def test_schema_imported_once_per_database(self, tester) -> None:
        await tester.db.execute("CREATE TABLE extra (id INTEGER PRIMARY KEY)")
        await tester.set_up()
        assert "extra" in await tester.table_names()

    async def test_truncate_resets_autoincrement(self, schema_file) -> None:
        tester = DatabaseTester(Database("sqlite:///:memory:"), schema_file=schema_file)
        await tester.set_up()
        await tester.db.execute("INSERT INTO users (username, email) VALUES ('a', 'a@x')")
        await tester.db.execute("INSERT INTO users (username, email) VALUES ('b', 'b@x')")

        await tester.truncate_tables()
        await tester.db.execute("INSERT INTO users (username, email) VALUES ('c', 'c@x')")

        await tester.assert_table_row_exists("users", 1)
        await tester.db.disconnect()

    async def test_schema_file_argument_overrides(self, schema_file) -> None:
        tester = DatabaseTester(Database("sqlite:///:memory:"))
        await tester.set_up(schema_file)
        assert tester.schema_file == schema_file
        await tester.assert_table_row_count(0, "users")
        await tester.db.disconnect()

    async def test_drop_tables_removes_existing(self, tmp_path) -> None:
        db = Database(f"sqlite:///{tmp_path / 'old.db'}")
        await db.execute("CREATE TABLE legacy (id INTEGER PRIMARY KEY)")
        tester = DatabaseTester(db, schema_file=tmp_path / "schema.sql")
        (tmp_path / "schema.sql").write_text(SCHEMA)

        await tester.set_up()

        assert "legacy" not in await tester.table_names()
        await db.disconnect()

    async def test_from_config(self, schema_file) -> None:
        config = CrumbConfig(schema_file=schema_file)
        tester = DatabaseTester.from_config(config, fixtures=[UserFixture])
        await tester.set_up()
        await tester.assert_table_row_count(2, "users")
        await tester.db.disconnect()

    async def test_logs_setup_steps(self, schema_file, caplog: pytest.LogCaptureFixture) -> None:
        tester = DatabaseTester(Database("sqlite:///:memory:"), schema_file=schema_file)
        with caplog.at_level(logging.DEBUG, logger="crumb.testing"):
            await tester.set_up()
        assert "Importing schema" in caplog.text
        await tester.db.disconnect()


class TestSchemaErrors:
    async def test_undefined_schema_file(self) -> None:
        tester = DatabaseTester(Database("sqlite:///:memory:"))
        with pytest.raises(ConfigurationError, match="not defined"):
            await tester.set_up()
        await tester.db.disconnect()

    async def test_missing_schema_file(self, tmp_path) -> None:
        tester = DatabaseTester(
            Database("sqlite:///:memory:"), schema_file=tmp_path / "nope.sql"
        )
        with pytest.raises(ConfigurationError, match="File not found"):
            await tester.set_up()
        await tester.db.disconnect()


# =============================================================================
# Fixtures
# =============================================================================


class TestInsertFixtures:
    async def test_insert_fixture_row(self, tester) -> None:
        await tester.insert_fixture("users", {"username": "carol", "email": "carol@example.com"})
        row = await tester.db.fetch_one("SELECT * FROM users WHERE username = ?", "carol")
        assert row is not None
        assert row["enabled"] == 1

    async def test_fixture_instances_and_classes(self, tester) -> None:
        extra = Fixture("posts", [{"user_id": 2, "title": "Second"}])
        await tester.insert_fixtures([extra])
        await tester.assert_table_row_count(2, "posts")

    async def test_quote_identifier(self) -> None:
        assert quote_identifier("users") == '"users"'
        assert quote_identifier('we"ird') == '"we""ird"'


# =============================================================================
# Lookups and assertions
# =============================================================================


class TestLookups:
    async def test_get_table_row_by_id(self, tester) -> None:
        row = await tester.get_table_row_by_id("users", 1)
        assert row == {"id": 1, "username": "alice", "email": "alice@example.com", "enabled": 1}

    async def test_get_table_row_by_id_with_fields(self, tester) -> None:
        row = await tester.get_table_row_by_id("users", 2, ["username"])
        assert row == {"username": "bob"}

    async def test_get_table_row_by_id_missing(self, tester) -> None:
        with pytest.raises(RowNotFound, match="Row not found: 99"):
            await tester.get_table_row_by_id("users", 99)

    async def test_find_table_row_by_id_missing(self, tester) -> None:
        assert await tester.find_table_row_by_id("users", 99) == {}


class TestAssertions:
    async def test_assert_table_row(self, tester) -> None:
        await tester.assert_table_row({"username": "alice", "enabled": 1}, "users", 1)

    async def test_assert_table_row_is_type_strict(self, tester) -> None:
        with pytest.raises(AssertionError):
            await tester.assert_table_row({"enabled": "1"}, "users", 1)

    async def test_assert_table_row_custom_message(self, tester) -> None:
        with pytest.raises(AssertionError, match="alice changed"):
            await tester.assert_table_row({"username": "x"}, "users", 1, message="alice changed")

    async def test_assert_table_row_equals_is_loose(self, tester) -> None:
        await tester.assert_table_row_equals({"enabled": "1", "id": "1"}, "users", 1)
        with pytest.raises(AssertionError):
            await tester.assert_table_row_equals({"enabled": "0"}, "users", 1)

    async def test_assert_table_row_value(self, tester) -> None:
        await tester.assert_table_row_value("bob@example.com", "users", 2, "email")
        with pytest.raises(AssertionError, match="users.email of row 2"):
            await tester.assert_table_row_value("someone@example.com", "users", 2, "email")

    async def test_assert_table_row_count(self, tester) -> None:
        await tester.assert_table_row_count(2, "users")
        with pytest.raises(AssertionError, match="has 2 rows, expected 3"):
            await tester.assert_table_row_count(3, "users")

    async def test_assert_table_row_exists(self, tester) -> None:
        await tester.assert_table_row_exists("users", 1)
        with pytest.raises(AssertionError):
            await tester.assert_table_row_exists("users", 99)

    async def test_assert_table_row_not_exists(self, tester) -> None:
        await tester.assert_table_row_not_exists("users", 99)
        with pytest.raises(AssertionError):
            await tester.assert_table_row_not_exists("users", 1)
