"""
Unit tests for ClickHouse metadata introspection (against a fake DB-API connection).
"""
import pytest

from sqlbridge.database.metadata import fix_column
from sqlbridge.database.models import Column
from sqlbridge.errors import DecodeError

COLUMNS_QUERY = "FROM system.columns"
COLUMN_FIELDS = ["name", "type", "comment", "default_expression", "is_in_primary_key"]


def make_column(data_type, nullable=False):
    return Column(table_name="t", column_name="c", data_type=data_type, nullable=nullable)


class TestFixColumn:
    """Test wrapper normalization."""

    def test_nullable(self):
        column = fix_column(make_column("Nullable(Int32)"))
        assert column.data_type == "Int32"
        assert column.nullable is True

    def test_low_cardinality_keeps_nullability(self):
        column = fix_column(make_column("LowCardinality(String)"))
        assert column.data_type == "String"
        assert column.nullable is False

    def test_nested_wrappers(self):
        column = fix_column(make_column("LowCardinality(Nullable(String))"))
        assert column.data_type == "String"
        assert column.nullable is True

    def test_parameterized_inner_type(self):
        assert fix_column(make_column("Nullable(Decimal(10, 2))")).data_type == "Decimal(10, 2)"

    def test_unknown_wrapper_untouched(self):
        column = fix_column(make_column("Array(Nullable(Int32))"))
        assert column.data_type == "Array(Nullable(Int32))"
        assert column.nullable is False


class TestClickHouseMetadata:
    """Test catalog queries and failure policy."""

    def test_db_server_version(self, clickhouse_conn_factory):
        conn = clickhouse_conn_factory({"version()": (["version"], [("23.8.2.7",)])})
        assert conn.get_metadata().get_db_server().version == "23.8.2.7"

    def test_db_server_version_query_failure(self, clickhouse_conn_factory):
        """Test that a failing version query yields 'unknown'."""
        conn = clickhouse_conn_factory({"version()": RuntimeError("Code: 497. Not enough privileges")})
        assert conn.get_metadata().get_db_server().version == "unknown"

    def test_db_server_empty_result(self, clickhouse_conn_factory):
        conn = clickhouse_conn_factory({"version()": (["version"], [])})
        assert conn.get_metadata().get_db_server().version == "unknown"

    def test_defaults(self, clickhouse_conn_factory):
        metadata = clickhouse_conn_factory().get_metadata()
        assert metadata.get_default_db() == "default"
        assert metadata.get_compatible_db_version() == ""

    def test_db_names_sorted_without_system(self, clickhouse_conn_factory):
        conn = clickhouse_conn_factory({
            "system.databases": (["name"], [("zeta",), ("analytics",), ("system",)]),
        })
        metadata = conn.get_metadata()
        assert metadata.get_db_names() == ["analytics", "zeta"]
        assert metadata.get_schemas() == ["analytics", "zeta"]

    def test_tables(self, clickhouse_conn_factory):
        conn = clickhouse_conn_factory({
            "SELECT name, engine, comment": (
                ["name", "engine", "comment"],
                [("events", "MergeTree", "raw events"), ("users", "ReplacingMergeTree", None)],
            ),
        }, database="analytics")
        tables = conn.get_metadata().get_tables()

        assert [t.table_name for t in tables] == ["events", "users"]
        assert tables[0].comment == "raw events"
        assert tables[1].comment == ""
        assert tables[1].engine == "ReplacingMergeTree"

        sql, params = conn.connection.executed[-1]
        assert params == {"db": "analytics"}

    def test_tables_filtered_by_name(self, clickhouse_conn_factory):
        conn = clickhouse_conn_factory({"SELECT name, engine, comment": (["name", "engine", "comment"], [])})
        conn.get_metadata().get_tables("events", "users")

        sql, params = conn.connection.executed[-1]
        assert "name IN %(names)s" in sql
        assert params == {"db": "default", "names": ("events", "users")}

    def test_columns_normalized(self, clickhouse_conn_factory):
        conn = clickhouse_conn_factory({
            COLUMNS_QUERY: (COLUMN_FIELDS, [
                ("id", "UInt64", "", "", 1),
                ("name", "Nullable(String)", "user's name", "", 0),
                ("code", "LowCardinality(FixedString(3))", "", "'xx'", 0),
            ]),
        })
        columns = conn.get_metadata().get_columns("users", "ignored")

        assert [c.column_name for c in columns] == ["id", "name", "code"]
        assert columns[0].is_primary_key is True
        assert (columns[1].data_type, columns[1].nullable) == ("String", True)
        assert columns[1].comment == "user's name"
        assert columns[2].data_type == "FixedString(3)"
        assert columns[2].char_max_length == 3
        assert columns[2].default_value == "'xx'"

        sql, params = conn.connection.executed[-1]
        assert params == {"db": "default", "table": "users"}

    def test_columns_without_table_names(self, clickhouse_conn_factory):
        conn = clickhouse_conn_factory()
        assert conn.get_metadata().get_columns() == []
        assert conn.connection.executed == []

    def test_columns_decode_error(self, clickhouse_conn_factory):
        """Test that an unexpected value type is reported, not cast."""
        conn = clickhouse_conn_factory({COLUMNS_QUERY: (COLUMN_FIELDS, [("id", 42, "", "", 0)])})
        with pytest.raises(DecodeError) as exc_info:
            conn.get_metadata().get_columns("users")
        assert exc_info.value.key == "type"

    def test_primary_key_first_of_declared(self, clickhouse_conn_factory):
        conn = clickhouse_conn_factory({"SELECT primary_key": (["primary_key"], [("tenant_id, ts",)])})
        assert conn.get_metadata().get_primary_key("events") == "tenant_id"

    def test_primary_key_falls_back_to_first_column(self, clickhouse_conn_factory):
        conn = clickhouse_conn_factory({
            "SELECT primary_key": (["primary_key"], [("",)]),
            COLUMNS_QUERY: (COLUMN_FIELDS, [("ts", "DateTime", "", "", 0), ("msg", "String", "", "", 0)]),
        })
        assert conn.get_metadata().get_primary_key("logs") == "ts"

    def test_primary_key_query_failure_propagates(self, clickhouse_conn_factory):
        conn = clickhouse_conn_factory({"SELECT primary_key": RuntimeError("connection reset")})
        with pytest.raises(RuntimeError):
            conn.get_metadata().get_primary_key("events")

    def test_index_catalog_absent(self, clickhouse_conn_factory):
        """Test that a failing index catalog yields an empty list."""
        conn = clickhouse_conn_factory({"data_skipping_indices": RuntimeError("Code: 60. Table doesn't exist")})
        assert conn.get_metadata().get_table_index("events") == []

    def test_index_catalog(self, clickhouse_conn_factory):
        conn = clickhouse_conn_factory({
            "data_skipping_indices": (["name", "type", "expr"], [("idx_msg", "bloom_filter", "msg")]),
        })
        indexes = conn.get_metadata().get_table_index("events")
        assert len(indexes) == 1
        assert indexes[0].index_name == "idx_msg"
        assert indexes[0].index_type == "bloom_filter"
        assert indexes[0].column_names == ["msg"]

    def test_table_ddl(self, clickhouse_conn_factory):
        create = "CREATE TABLE analytics.events (`id` UInt64) ENGINE = MergeTree ORDER BY id"
        conn = clickhouse_conn_factory({"create_table_query": (["create_table_query"], [(create,)])})
        metadata = conn.get_metadata()

        assert metadata.get_table_ddl("events") == create
        assert metadata.get_table_ddl("events", drop_before_create=True) == \
            f"DROP TABLE IF EXISTS `events`;\n{create}"

    def test_table_ddl_missing(self, clickhouse_conn_factory):
        conn = clickhouse_conn_factory({"create_table_query": (["create_table_query"], [])})
        assert conn.get_metadata().get_table_ddl("nope", drop_before_create=True) == ""
