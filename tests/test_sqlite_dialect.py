"""
Unit tests for SQLite SQL generation, table copy and dump hooks.
"""
import io

import pytest

from sqlbridge.database.dialects import SQLiteDialect
from sqlbridge.database.models import Column, DbCopyTable, DuplicateStrategy, Index, Table
from sqlbridge.errors import ConfigurationError, UnsupportedCapabilityError


@pytest.fixture
def generator():
    return SQLiteDialect().get_sql_generator()


@pytest.fixture
def columns():
    return [
        Column(table_name="users", column_name="id", data_type="INTEGER", is_primary_key=True, auto_increment=True),
        Column(table_name="users", column_name="name", data_type="TEXT"),
        Column(table_name="users", column_name="score", data_type="REAL", nullable=True, default_value="0"),
    ]


class TestTableDDL:
    """Test CREATE TABLE generation."""

    def test_single_key_inline(self, generator, columns):
        statements = generator.gen_table_ddl(Table(table_name="users"), columns, drop_before_create=True)
        assert statements == [
            'DROP TABLE IF EXISTS "users"',
            'CREATE TABLE "users" (\n'
            '  "id" INTEGER PRIMARY KEY AUTOINCREMENT,\n'
            '  "name" TEXT NOT NULL,\n'
            '  "score" REAL DEFAULT 0\n'
            ')',
        ]

    def test_composite_key_as_constraint(self, generator):
        cols = [
            Column(table_name="t", column_name="a", data_type="INTEGER", is_primary_key=True),
            Column(table_name="t", column_name="b", data_type="TEXT", is_primary_key=True),
        ]
        ddl = generator.gen_table_ddl(Table(table_name="t"), cols)[0]
        assert '"a" INTEGER NOT NULL,' in ddl
        assert '  PRIMARY KEY ("a", "b")\n)' in ddl

    def test_index_ddl(self, generator):
        indexes = [
            Index(index_name="idx_name", column_names=["name"], is_unique=True),
            Index(index_name="idx_multi", column_names=["name", "score"]),
            Index(index_name="idx_empty"),
        ]
        assert generator.gen_index_ddl(Table(table_name="users"), indexes) == [
            'CREATE UNIQUE INDEX IF NOT EXISTS "idx_name" ON "users" ("name")',
            'CREATE INDEX IF NOT EXISTS "idx_multi" ON "users" ("name", "score")',
        ]


class TestInsert:
    """Test native conflict clauses."""

    rows = [(1, "ann", 1.5)]

    @pytest.mark.parametrize("strategy, verb", [
        (DuplicateStrategy.NONE, "INSERT INTO"),
        (DuplicateStrategy.IGNORE, "INSERT OR IGNORE INTO"),
        (DuplicateStrategy.UPDATE, "INSERT OR REPLACE INTO"),
    ])
    def test_conflict_clause(self, generator, columns, strategy, verb):
        statements = generator.gen_insert("users", columns, self.rows, strategy)
        assert statements == [f'{verb} "users" ("id", "name", "score") VALUES (1, \'ann\', 1.5)']

    def test_strategies_execute(self, sqlite_conn, generator, columns):
        """Test that generated statements behave as their strategy promises."""
        sqlite_conn.exec_all(generator.gen_table_ddl(Table(table_name="users"), columns))
        sqlite_conn.exec_all(generator.gen_insert("users", columns, [(1, "ann", 1.0)]))

        sqlite_conn.exec_all(generator.gen_insert("users", columns, [(1, "bob", 2.0)], DuplicateStrategy.IGNORE))
        assert sqlite_conn.query("SELECT name FROM users WHERE id = 1").first()["name"] == "ann"

        sqlite_conn.exec_all(generator.gen_insert("users", columns, [(1, "bob", 2.0)], DuplicateStrategy.UPDATE))
        assert sqlite_conn.query("SELECT name FROM users WHERE id = 1").first()["name"] == "bob"

    def test_boolean_literal(self, generator):
        cols = [Column(table_name="t", column_name="active", data_type="BOOLEAN")]
        assert generator.gen_insert("t", cols, [(True,)])[0].endswith("VALUES (1)")

    def test_sized_type_resolves(self, generator):
        cols = [Column(table_name="t", column_name="code", data_type="varchar(10)")]
        assert generator.gen_insert("t", cols, [("it's",)])[0].endswith("VALUES ('it''s')")


class TestCopyTable:
    """Test CREATE TABLE ... AS SELECT copies."""

    @pytest.fixture
    def populated(self, sqlite_conn):
        sqlite_conn.exec("CREATE TABLE items (id INTEGER, label TEXT)")
        sqlite_conn.exec("INSERT INTO items VALUES (1, 'a'), (2, 'b')")
        return sqlite_conn

    def test_copy_with_data(self, populated):
        dialect = populated.get_dialect()
        assert dialect.supports_copy_table()
        target = dialect.copy_table(DbCopyTable(table_name="items", copy_data=True, target_name="items_bak"))
        assert target == "items_bak"
        assert len(populated.query("SELECT * FROM items_bak")) == 2

    def test_copy_structure_only(self, populated):
        target = populated.get_dialect().copy_table(DbCopyTable(table_name="items"))
        assert target.startswith("items_copy_")
        result = populated.query(f'SELECT * FROM "{target}"')
        assert len(result) == 0
        assert result.columns == ["id", "label"]

    def test_copy_requires_connection(self):
        with pytest.raises(ConfigurationError):
            SQLiteDialect().copy_table(DbCopyTable(table_name="items"))

    def test_db_program_unsupported(self):
        with pytest.raises(UnsupportedCapabilityError):
            SQLiteDialect().get_db_program()


class TestDumpHelper:
    """Test dump hooks."""

    def test_sqlite_wraps_inserts_in_transaction(self, columns):
        helper = SQLiteDialect().get_dump_helper()
        out = io.StringIO()
        helper.before_insert(out, "users")
        helper.after_insert(out, "users", columns)
        assert out.getvalue() == "BEGIN TRANSACTION;\nCOMMIT;\n"
        assert helper.before_insert_sql('"main"', "users") == ""


class TestValueRendering:
    """Test SQLite literal rules for bytes and affinity columns."""

    def test_blob_as_hex_literal(self, generator):
        cols = [Column(table_name="t", column_name="data", data_type="BLOB")]
        assert generator.gen_insert("t", cols, [(b"\xff\x00\x80A",)])[0].endswith("VALUES (X'ff008041')")

    def test_undeclared_types_resolve_by_affinity(self, generator):
        cols = [
            Column(table_name="t", column_name="a", data_type="NVARCHAR(50)"),
            Column(table_name="t", column_name="b", data_type="DOUBLE PRECISION"),
            Column(table_name="t", column_name="c", data_type="INT8"),
        ]
        assert generator.gen_insert("t", cols, [("x", 1.5, 7)])[0].endswith("VALUES ('x', 1.5, 7)")

    def test_text_in_numeric_column_stays_text(self, generator):
        """Test that a value not matching the column's affinity is stored as text."""
        cols = [Column(table_name="t", column_name="v", data_type="STRING")]
        assert generator.gen_insert("t", cols, [("hello",), (42,)])[0].endswith("VALUES ('hello'), (42)")


class TestStatements:
    """Test UPDATE/DELETE and database statements."""

    def test_update(self, generator, columns):
        sql = generator.gen_update("users", columns[1:], ["o'neil", None], '"id" = 1')
        assert sql == 'UPDATE "users" SET "name" = \'o\'\'neil\', "score" = NULL WHERE "id" = 1'

    def test_delete(self, generator):
        assert generator.gen_delete("users") == 'DELETE FROM "users"'
        assert generator.gen_delete("users", '"id" > 3') == 'DELETE FROM "users" WHERE "id" > 3'

    def test_database_statements_unsupported(self, generator):
        with pytest.raises(UnsupportedCapabilityError):
            generator.gen_create_database("other")
        with pytest.raises(UnsupportedCapabilityError):
            generator.gen_drop_database("other")

    def test_no_post_transfer_statements(self):
        assert SQLiteDialect().post_transfer_sql("users") == []
