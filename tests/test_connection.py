"""
Unit tests for DbConn query/exec and transaction handling.
"""
import sqlite3

import pytest

from sqlbridge.database.connection import DbConn, QueryResult
from sqlbridge.database.engines import ClickHouseMeta


@pytest.fixture
def table(sqlite_conn):
    sqlite_conn.exec("CREATE TABLE items (id INTEGER PRIMARY KEY, label TEXT)")
    return sqlite_conn


def count(conn):
    return conn.query("SELECT COUNT(*) AS n FROM items").first()["n"]


class TestQueryResult:
    """Test result set helpers."""

    def test_empty(self):
        result = QueryResult()
        assert result.first() is None
        assert len(result) == 0
        assert list(result) == []

    def test_rows_as_dicts(self, table):
        table.exec("INSERT INTO items (id, label) VALUES (?, ?)", (1, "a"))
        result = table.query("SELECT id, label FROM items WHERE id = ?", (1,))
        assert result.columns == ["id", "label"]
        assert result.first() == {"id": 1, "label": "a"}
        assert len(result) == 1

    def test_iter_batches(self, table):
        """Test that rows arrive in lists of at most the batch size."""
        table.exec("INSERT INTO items (id, label) VALUES (1, 'a'), (2, 'b'), (3, 'c'), (4, 'd'), (5, 'e')")
        batches = list(table.iter_batches("SELECT id FROM items ORDER BY id", 2))
        assert [[row["id"] for row in batch] for batch in batches] == [[1, 2], [3, 4], [5]]

    def test_iter_batches_empty(self, table):
        assert list(table.iter_batches("SELECT id FROM items", 10)) == []

    def test_driver_error_propagates(self, sqlite_conn):
        """Test that driver exceptions are not wrapped."""
        with pytest.raises(sqlite3.OperationalError):
            sqlite_conn.query("SELECT * FROM nope")


class TestExec:
    """Test statement execution and commits."""

    def test_params_omitted_when_none(self, clickhouse_conn_factory):
        conn = clickhouse_conn_factory()
        conn.query("SELECT 1")
        conn.query("SELECT %(x)s", {"x": 1})
        assert conn.connection.executed == [("SELECT 1", None), ("SELECT %(x)s", {"x": 1})]

    def test_exec_commits_outside_transaction(self, clickhouse_conn_factory):
        conn = clickhouse_conn_factory()
        conn.exec("INSERT INTO t VALUES (1)")
        conn.exec("INSERT INTO t VALUES (2)")
        assert conn.connection.commits == 2

    def test_exec_all_returns_rowcount(self, table):
        total = table.exec_all([
            "INSERT INTO items (id, label) VALUES (1, 'a')",
            "INSERT INTO items (id, label) VALUES (2, 'b'), (3, 'c')",
        ])
        assert total == 3
        assert count(table) == 3

    def test_exec_all_atomic_rolls_back(self, table):
        """Test that a failing statement undoes the earlier ones."""
        with pytest.raises(sqlite3.OperationalError):
            table.exec_all([
                "INSERT INTO items (id, label) VALUES (1, 'a')",
                "INSERT INTO missing VALUES (1)",
            ], atomic=True)
        assert count(table) == 0

    def test_exec_script(self, table):
        script = """
            INSERT INTO items (id, label) VALUES (1, 'semi;colon');
            -- second row
            INSERT INTO items (id, label) VALUES (2, 'b');
        """
        assert table.exec_script(script) == 2
        assert table.query("SELECT label FROM items WHERE id = 1").first()["label"] == "semi;colon"


class TestTransaction:
    """Test commit/rollback grouping."""

    def test_commit_once_on_success(self, clickhouse_conn_factory):
        conn = clickhouse_conn_factory()
        with conn.transaction():
            conn.exec("ALTER TABLE t DELETE WHERE id IN (1)")
            conn.exec("INSERT INTO t VALUES (1)")
        assert conn.connection.commits == 1
        assert conn.connection.rollbacks == 0

    def test_rollback_on_error(self, clickhouse_conn_factory):
        conn = clickhouse_conn_factory({"INSERT": RuntimeError("Code: 60")})
        with pytest.raises(RuntimeError):
            with conn.transaction():
                conn.exec("ALTER TABLE t DELETE WHERE id IN (1)")
                conn.exec("INSERT INTO t VALUES (1)")
        assert conn.connection.commits == 0
        assert conn.connection.rollbacks == 1

    def test_nested_transaction_joins_outer(self, clickhouse_conn_factory):
        conn = clickhouse_conn_factory()
        with conn.transaction():
            with conn.transaction():
                conn.exec("INSERT INTO t VALUES (1)")
            conn.exec_all(["INSERT INTO t VALUES (2)"], atomic=True)
        assert conn.connection.commits == 1

    def test_sqlite_rollback(self, table):
        with pytest.raises(ValueError):
            with table.transaction():
                table.exec("INSERT INTO items (id, label) VALUES (1, 'a')")
                raise ValueError("abort")
        assert count(table) == 0


class TestEngineServices:
    """Test dialect/metadata binding and lifecycle."""

    def test_dialect_and_metadata_cached(self, sqlite_conn):
        assert sqlite_conn.get_dialect() is sqlite_conn.get_dialect()
        assert sqlite_conn.get_metadata() is sqlite_conn.get_metadata()
        assert sqlite_conn.get_dialect().conn is sqlite_conn

    def test_context_manager_closes(self, clickhouse_conn_factory):
        conn = clickhouse_conn_factory()
        with conn as entered:
            assert entered is conn
        assert conn.connection.closed is True

    def test_db_type_from_meta(self, clickhouse_conn_factory):
        conn = clickhouse_conn_factory()
        assert isinstance(conn, DbConn)
        assert isinstance(conn.meta, ClickHouseMeta)
        assert conn.db_type == "clickhouse"
