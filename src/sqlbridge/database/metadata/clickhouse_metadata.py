"""
ClickHouse Metadata - Catalog introspection over the system.* tables
"""

from typing import List

from ...constants import CLICKHOUSE_DEFAULT_DB, UNKNOWN_VERSION
from ..datatypes.base import apply_type_size, base_type_name, split_wrapper
from ..datatypes.clickhouse_types import CLICKHOUSE_TYPES, LOW_CARDINALITY_WRAPPER, NULLABLE_WRAPPER
from ..models import Column, DbServer, Index, Table
from .base import MetadataProvider, RowDecoder

import logging
logger = logging.getLogger(__name__)

# System namespaces hidden from database listings
SYSTEM_DATABASES = ("system", "information_schema", "INFORMATION_SCHEMA")


def fix_column(column: Column) -> Column:
    """
    Normalize ClickHouse wrapper types in place.

    ``Nullable(T)`` becomes ``T`` with ``nullable=True``; ``LowCardinality(T)``
    becomes ``T``. Nested wrappers are unwrapped until none remain; other
    parameterized types (Array, Map, Decimal, ...) are left untouched.
    """
    while True:
        parts = split_wrapper(column.data_type)
        if parts is None:
            break
        wrapper, inner = parts
        if wrapper == NULLABLE_WRAPPER:
            column.nullable = True
        elif wrapper != LOW_CARDINALITY_WRAPPER:
            break
        column.data_type = inner
    return column


class ClickHouseMetadata(MetadataProvider):
    """Metadata provider for ClickHouse."""

    @property
    def database(self) -> str:
        return self.conn.info.get_database(CLICKHOUSE_DEFAULT_DB)

    def get_db_server(self) -> DbServer:
        try:
            result = self.conn.query("SELECT version() AS version")
        except Exception as e:
            logger.debug(f"ClickHouse version query failed: {e}")
            return DbServer(version=UNKNOWN_VERSION)

        row = result.first()
        version = RowDecoder(row).text("version") if row else ""
        return DbServer(version=version or UNKNOWN_VERSION)

    def get_default_db(self) -> str:
        return CLICKHOUSE_DEFAULT_DB

    def get_db_names(self) -> List[str]:
        result = self.conn.query(
            "SELECT name FROM system.databases "
            "WHERE name NOT IN ('system', 'information_schema', 'INFORMATION_SCHEMA') "
            "ORDER BY name"
        )
        names = [RowDecoder(row).text("name") for row in result]
        return sorted(name for name in names if name and name not in SYSTEM_DATABASES)

    def get_tables(self, *table_names: str) -> List[Table]:
        sql = "SELECT name, engine, comment FROM system.tables WHERE database = %(db)s"
        params = {"db": self.database}
        if table_names:
            sql += " AND name IN %(names)s"
            params["names"] = tuple(table_names)
        sql += " ORDER BY name"

        tables = []
        for row in self.conn.query(sql, params):
            decoder = RowDecoder(row)
            tables.append(Table(
                table_name=decoder.text("name"),
                comment=decoder.text("comment"),
                engine=decoder.text("engine"),
            ))
        return tables

    def get_columns(self, *table_names: str) -> List[Column]:
        if not table_names:
            return []

        table_name = table_names[0]
        result = self.conn.query(
            "SELECT name, type, comment, default_expression, is_in_primary_key "
            "FROM system.columns "
            "WHERE database = %(db)s AND table = %(table)s "
            "ORDER BY position",
            {"db": self.database, "table": table_name}
        )

        columns = []
        for row in result:
            decoder = RowDecoder(row)
            column = Column(
                table_name=table_name,
                column_name=decoder.text("name"),
                data_type=decoder.text("type"),
                comment=decoder.text("comment"),
                default_value=decoder.text("default_expression"),
                is_primary_key=decoder.flag("is_in_primary_key"),
            )
            fix_column(column)
            columns.append(apply_type_size(column, CLICKHOUSE_TYPES.find(base_type_name(column.data_type))))
        return columns

    def get_primary_key(self, table_name: str) -> str:
        result = self.conn.query(
            "SELECT primary_key FROM system.tables WHERE database = %(db)s AND name = %(table)s",
            {"db": self.database, "table": table_name}
        )

        row = result.first()
        if row:
            key = RowDecoder(row).text("primary_key")
            if key.strip():
                return key.split(",")[0].strip()

        # No declared key: first column by position
        columns = self.get_columns(table_name)
        return columns[0].column_name if columns else ""

    def get_table_index(self, table_name: str) -> List[Index]:
        try:
            result = self.conn.query(
                "SELECT name, type, expr FROM system.data_skipping_indices "
                "WHERE database = %(db)s AND table = %(table)s",
                {"db": self.database, "table": table_name}
            )
        except Exception as e:
            logger.debug(f"ClickHouse index catalog unavailable for {table_name}: {e}")
            return []

        indexes = []
        for row in result:
            decoder = RowDecoder(row)
            expr = decoder.text("expr")
            indexes.append(Index(
                index_name=decoder.text("name"),
                index_type=decoder.text("type", "INDEX") or "INDEX",
                column_names=[part.strip() for part in expr.split(",") if part.strip()],
            ))
        return indexes

    def get_create_table_sql(self, table_name: str) -> str:
        result = self.conn.query(
            "SELECT create_table_query FROM system.tables WHERE database = %(db)s AND name = %(table)s",
            {"db": self.database, "table": table_name}
        )
        row = result.first()
        return RowDecoder(row).text("create_table_query") if row else ""
