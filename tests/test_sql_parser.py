"""
Unit tests for SQLParser.
"""
import pytest

from sqlbridge.database.dialects.sql_parser import SQLParser


@pytest.fixture
def parser():
    return SQLParser()


class TestSplit:
    """Test statement splitting."""

    def test_multiple_statements_with_lines(self, parser):
        sql = "SELECT 1;\n\nINSERT INTO t\nVALUES (1);\nSELECT 2"
        statements = parser.split(sql)

        assert [s.text for s in statements] == ["SELECT 1", "INSERT INTO t\nVALUES (1)", "SELECT 2"]
        assert [(s.line_start, s.line_end) for s in statements] == [(1, 1), (3, 4), (5, 5)]
        assert [s.is_select for s in statements] == [True, False, True]

    def test_semicolon_inside_string(self, parser):
        statements = parser.split("INSERT INTO t VALUES ('a;b'); SELECT 1;")
        assert len(statements) == 2
        assert statements[0].text == "INSERT INTO t VALUES ('a;b')"

    def test_empty_input(self, parser):
        assert parser.split("") == []
        assert parser.split("   \n  ") == []


class TestClassification:
    """Test result-set detection."""

    @pytest.mark.parametrize("sql", [
        "SELECT * FROM t",
        "select 1",
        "WITH x AS (SELECT 1) SELECT * FROM x",
        "SHOW TABLES",
        "DESCRIBE TABLE events",
        "PRAGMA table_info(t)",
        "-- leading comment\nSELECT 1",
        "(SELECT 1) UNION ALL (SELECT 2)",
    ])
    def test_returns_rows(self, parser, sql):
        assert parser.is_select(sql)

    @pytest.mark.parametrize("sql", [
        "INSERT INTO t VALUES (1)",
        "CREATE TABLE t (x Int32) ENGINE = Memory",
        "ALTER TABLE t DELETE WHERE x = 1",
        "-- only a comment",
    ])
    def test_no_rows(self, parser, sql):
        assert not parser.is_select(sql)

    def test_statement_type(self, parser):
        assert parser.statement_type("DROP TABLE t") == "DROP"
        assert parser.statement_type("insert into t values (1)") == "INSERT"
        assert parser.statement_type("") == "UNKNOWN"
