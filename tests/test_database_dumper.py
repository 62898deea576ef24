"""
Unit tests for database_dumper.py
"""

import asyncio
import io
import sqlite3

import pytest

from libsql_shell.connection import DatabaseConnection
from libsql_shell.database_dumper import DatabaseDumper, dump_database
from libsql_shell.errors import MissingConnectionError
from libsql_shell.models import DbCmdConfig, DumpStats


@pytest.fixture
def sqlite_db():
    """An in-memory database behind a connected DatabaseConnection."""
    with DatabaseConnection() as conn:
        yield conn


def dump(connection) -> str:
    out = io.StringIO()
    asyncio.run(DatabaseDumper(connection, out).run())
    return out.getvalue()


class TestListTablesQuery:
    """Tests for the table listing query."""

    def test_excludes_system_tables(self):
        query = DatabaseDumper(None, io.StringIO())._build_list_tables_query()
        assert query == (
            "SELECT name FROM sqlite_master WHERE type='table' "
            "and name not like 'sqlite_%' and name != '_litestream_seq' "
            "and name != '_litestream_lock' and name != 'libsql_wasm_func_table'"
        )


class TestDatabaseDumperInit:
    """Tests for DatabaseDumper initialization."""

    def test_init(self):
        out = io.StringIO()
        dumper = DatabaseDumper("conn", out)

        assert dumper.connection == "conn"
        assert dumper.out_f is out
        assert isinstance(dumper.stats, DumpStats)
        assert dumper.stats.tables == []
        assert dumper.stats.total_rows == 0


class TestRunScripted:
    """Tests for run against scripted statement streams."""

    @pytest.fixture
    def connection(self, scripted_connection, statement):
        def handler(query):
            if query.startswith("SELECT name FROM sqlite_master"):
                return [statement(["name"], [["b"], ["a"]])]
            table = "a" if "'a'" in query else "b"
            if query.startswith("SELECT type, sql"):
                return [statement(["type", "sql"], [
                    ["table", f"CREATE TABLE {table}(x);"],
                    ["index", f"CREATE INDEX {table}_x ON {table}(x);"],
                ])]
            return [statement(["x"], [[1], [2]] if table == "a" else [[3]])]
        return scripted_connection(handler)

    def test_enumeration_order_kept(self, connection):
        assert dump(connection).splitlines() == [
            "PRAGMA foreign_keys=OFF;",
            "CREATE TABLE b(x);",
            "INSERT INTO b VALUES (3);",
            "CREATE INDEX b_x ON b(x);",
            "CREATE TABLE a(x);",
            "INSERT INTO a VALUES (1);",
            "INSERT INTO a VALUES (2);",
            "CREATE INDEX a_x ON a(x);",
        ]

    def test_stats(self, connection):
        stats = asyncio.run(DatabaseDumper(connection, io.StringIO()).run())

        assert stats.total_tables == 2
        assert stats.total_rows == 3
        assert [(t.table, t.rows_dumped) for t in stats.tables] == [("b", 1), ("a", 2)]

    def test_table_list_read_before_first_table(self, connection):
        asyncio.run(DatabaseDumper(connection, io.StringIO()).run())

        assert connection.queries[0].startswith("SELECT name FROM sqlite_master")
        assert len(connection.queries) == 5

    def test_table_list_error(self, scripted_connection, statement):
        out = io.StringIO()
        error = RuntimeError("interrupted")
        connection = scripted_connection(
            lambda query: [statement(["name"], [["a"]], row_error=error)]
        )

        with pytest.raises(RuntimeError, match="interrupted"):
            asyncio.run(DatabaseDumper(connection, out).run())

        assert out.getvalue() == "PRAGMA foreign_keys=OFF;\n"


class TestRunSqlite:
    """End-to-end dumps of an in-memory SQLite database."""

    def test_widgets(self, sqlite_db):
        sqlite_db.connection.executescript(
            "CREATE TABLE widgets(id INTEGER, note TEXT);"
            "INSERT INTO widgets VALUES (1, NULL);"
            "INSERT INTO widgets VALUES (2, 'o''clock');"
        )

        assert dump(sqlite_db).splitlines() == [
            "PRAGMA foreign_keys=OFF;",
            "CREATE TABLE widgets(id INTEGER, note TEXT);",
            "INSERT INTO widgets VALUES (1, NULL);",
            "INSERT INTO widgets VALUES (2, o'clock);",
        ]

    def test_index_and_trigger_after_rows(self, sqlite_db):
        sqlite_db.connection.executescript(
            "CREATE TABLE t(a INTEGER, b REAL);"
            "INSERT INTO t VALUES (1, 2.5);"
            "INSERT INTO t VALUES (2, NULL);"
            "CREATE INDEX t_b ON t(b);"
            "CREATE TRIGGER t_audit AFTER INSERT ON t BEGIN SELECT 1; END;"
        )

        assert dump(sqlite_db).splitlines() == [
            "PRAGMA foreign_keys=OFF;",
            "CREATE TABLE t(a INTEGER, b REAL);",
            "INSERT INTO t VALUES (1, 2.5);",
            "INSERT INTO t VALUES (2, NULL);",
            "CREATE INDEX t_b ON t(b);",
            "CREATE TRIGGER t_audit AFTER INSERT ON t BEGIN SELECT 1; END;",
        ]

    def test_system_tables_only(self, sqlite_db):
        sqlite_db.connection.executescript(
            "CREATE TABLE _litestream_seq(id INTEGER, seq INTEGER);"
            "CREATE TABLE _litestream_lock(id INTEGER);"
            "CREATE TABLE libsql_wasm_func_table(name TEXT, body TEXT);"
            "INSERT INTO _litestream_seq VALUES (1, 1);"
        )

        assert dump(sqlite_db) == "PRAGMA foreign_keys=OFF;\n"

    def test_empty_database(self, sqlite_db):
        assert dump(sqlite_db) == "PRAGMA foreign_keys=OFF;\n"

    def test_blobs(self, sqlite_db):
        sqlite_db.connection.executescript(
            "CREATE TABLE files(data BLOB);"
            "INSERT INTO files VALUES (x'00FFab');"
            "INSERT INTO files VALUES (x'');"
        )

        assert dump(sqlite_db).splitlines()[2:] == [
            "INSERT INTO files VALUES (0x00FFAB);",
            "INSERT INTO files VALUES (0x);",
        ]

    def test_table_name_with_quote(self, sqlite_db):
        sqlite_db.connection.executescript(
            "CREATE TABLE \"it's\"(v INTEGER);"
            "INSERT INTO \"it's\" VALUES (7);"
        )

        assert dump(sqlite_db).splitlines() == [
            "PRAGMA foreign_keys=OFF;",
            "CREATE TABLE \"it's\"(v INTEGER);",
            "INSERT INTO 'it''s' VALUES (7);",
        ]

    def test_autoindex_not_emitted(self, sqlite_db):
        sqlite_db.connection.executescript(
            "CREATE TABLE u(id INTEGER, email TEXT UNIQUE);"
        )

        assert dump(sqlite_db).splitlines() == [
            "PRAGMA foreign_keys=OFF;",
            "CREATE TABLE u(id INTEGER, email TEXT UNIQUE);",
        ]

    def test_dump_replays(self, sqlite_db):
        sqlite_db.connection.executescript(
            "CREATE TABLE parent(id INTEGER PRIMARY KEY);"
            "CREATE TABLE child(id INTEGER, parent_id INTEGER REFERENCES parent(id), w REAL);"
            "INSERT INTO parent VALUES (1);"
            "INSERT INTO child VALUES (10, 1, 0.25);"
            "INSERT INTO child VALUES (11, NULL, -3.0);"
            "CREATE INDEX child_parent ON child(parent_id);"
        )

        script = dump(sqlite_db)

        replica = sqlite3.connect(":memory:")
        try:
            replica.executescript(script)
            assert replica.execute("SELECT * FROM child ORDER BY id").fetchall() == [
                (10, 1, 0.25),
                (11, None, -3.0),
            ]
            assert replica.execute(
                "SELECT name FROM sqlite_master WHERE type='index'"
            ).fetchall() == [("child_parent",)]
        finally:
            replica.close()


class TestDumpDatabase:
    """Tests for the dump command entry point."""

    def test_missing_connection(self):
        with pytest.raises(MissingConnectionError, match="missing db connection"):
            asyncio.run(dump_database(DbCmdConfig(out_f=io.StringIO())))

    def test_missing_config(self):
        with pytest.raises(MissingConnectionError):
            asyncio.run(dump_database(None))

    def test_dumps_to_config_output(self, sqlite_db, caplog):
        import logging
        caplog.set_level(logging.INFO)
        sqlite_db.connection.executescript("CREATE TABLE a(x); INSERT INTO a VALUES (1);")
        out = io.StringIO()

        stats = asyncio.run(dump_database(DbCmdConfig(db=sqlite_db, out_f=out)))

        assert out.getvalue().splitlines()[-1] == "INSERT INTO a VALUES (1);"
        assert stats.total_rows == 1
        assert "DUMP COMPLETE" in caplog.text
        assert "a: 1 rows" in caplog.text
