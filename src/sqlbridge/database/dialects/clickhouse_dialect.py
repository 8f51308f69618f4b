"""
ClickHouse Dialect - ClickHouse-specific SQL generation

ClickHouse has no INSERT IGNORE / ON DUPLICATE KEY syntax and no unique
constraints, so the UPDATE duplicate strategy is emulated with a mutation
(ALTER TABLE ... DELETE) followed by the INSERT. ClickHouse mutations are not
transactional: the pair is best-effort even inside ``DbConn.transaction()``.
"""

from typing import Any, List, Sequence

from ...constants import DB_TYPE_CLICKHOUSE
from ..datatypes.base import DataTypeTable, split_wrapper
from ..datatypes.clickhouse_types import (
    CLICKHOUSE_TYPES,
    LOW_CARDINALITY_WRAPPER,
    NON_NULLABLE_TYPES,
    NULLABLE_WRAPPER,
)
from ..models import Column, DuplicateStrategy, Index, Table
from .base import DatabaseDialect, Quoter, SQLGenerator

import logging
logger = logging.getLogger(__name__)

TABLE_ENGINE_CLAUSE = "ENGINE = MergeTree() ORDER BY tuple()"


class ClickHouseSQLGenerator(SQLGenerator):
    """DDL/DML generation for ClickHouse."""

    @property
    def data_types(self) -> DataTypeTable:
        return CLICKHOUSE_TYPES

    def escape_string(self, text: str) -> str:
        """ClickHouse treats backslash as an escape character inside literals."""
        return text.replace("\\", "\\\\").replace("'", "''")

    def blob_literal(self, data: bytes) -> str:
        """ClickHouse has no X'..' literal; decode the hex server-side."""
        return f"unhex('{data.hex().upper()}')"

    def column_type(self, column: Column) -> str:
        """
        Native type text for ``column``, wrapped in Nullable when required.

        Nullable goes inside LowCardinality (``LowCardinality(Nullable(T))``),
        and composite types are never wrapped.
        """
        data_type = column.data_type.strip()
        if not column.nullable or column.is_primary_key:
            return data_type

        wrapper = split_wrapper(data_type)
        if wrapper is None:
            return f"{NULLABLE_WRAPPER}({data_type})"

        name, inner = wrapper
        if name == NULLABLE_WRAPPER:
            return data_type
        if name in NON_NULLABLE_TYPES:
            logger.debug(f"{column.column_name}: {name} cannot be Nullable, keeping {data_type}")
            return data_type
        if name == LOW_CARDINALITY_WRAPPER:
            inner_wrapper = split_wrapper(inner)
            if inner_wrapper is not None and inner_wrapper[0] == NULLABLE_WRAPPER:
                return data_type
            return f"{LOW_CARDINALITY_WRAPPER}({NULLABLE_WRAPPER}({inner}))"
        return f"{NULLABLE_WRAPPER}({data_type})"

    def gen_table_ddl(
        self,
        table: Table,
        columns: Sequence[Column],
        drop_before_create: bool = False
    ) -> List[str]:
        table_name = self.quote(table.table_name)
        statements = []

        if drop_before_create:
            statements.append(f"DROP TABLE IF EXISTS {table_name}")

        column_defs = []
        for column in columns:
            definition = f"  {self.quote(column.column_name)} {self.column_type(column)}"
            if column.comment:
                definition += f" COMMENT {self.quote_comment(column.comment)}"
            column_defs.append(definition)

        ddl = f"CREATE TABLE {table_name} (\n" + ",\n".join(column_defs) + f"\n) {TABLE_ENGINE_CLAUSE}"
        if table.comment:
            ddl += f" COMMENT {self.quote_comment(table.comment)}"

        statements.append(ddl)
        return statements

    def gen_index_ddl(self, table: Table, indexes: Sequence[Index]) -> List[str]:
        if indexes:
            logger.debug(
                f"Skipping {len(indexes)} index(es) on {table.table_name}: "
                f"ClickHouse indexing is part of the table definition"
            )
        return []

    def gen_insert(
        self,
        table_name: str,
        columns: Sequence[Column],
        values: Sequence[Sequence[Any]],
        duplicate_strategy: DuplicateStrategy = DuplicateStrategy.NONE
    ) -> List[str]:
        """
        Generate a batch INSERT.

        NONE and IGNORE produce one plain INSERT. UPDATE produces
        ``ALTER TABLE ... DELETE WHERE key IN (...)`` followed by the INSERT;
        the delete must run first.
        """
        if not values:
            return []

        data_types = self.resolve_types(columns)
        rows = self.format_rows(columns, values, data_types)
        insert = (
            f"INSERT INTO {self.quote(table_name)} ({self.dialect.quoter.join([c.column_name for c in columns])}) "
            f"VALUES {', '.join(rows)}"
        )

        if duplicate_strategy != DuplicateStrategy.UPDATE:
            if duplicate_strategy == DuplicateStrategy.IGNORE:
                logger.debug(f"ClickHouse has no insert-ignore syntax, plain INSERT into {table_name}")
            return [insert]

        key_index = self._key_column_index(columns)
        key_type = data_types[key_index]

        key_values = []
        for row in values:
            literal = self.format_value(row[key_index], key_type)
            if literal not in key_values:
                key_values.append(literal)

        delete = (
            f"ALTER TABLE {self.quote(table_name)} DELETE WHERE "
            f"{self.quote(columns[key_index].column_name)} IN ({', '.join(key_values)})"
        )
        return [delete, insert]

    def gen_update(
        self,
        table_name: str,
        columns: Sequence[Column],
        values: Sequence[Any],
        condition: str = ""
    ) -> str:
        """UPDATE as a mutation: ``ALTER TABLE t UPDATE c = v, ... WHERE cond``."""
        sql = f"ALTER TABLE {self.quote(table_name)} UPDATE {self.format_assignments(columns, values)}"
        if condition:
            sql += f" WHERE {condition}"
        return sql

    def gen_delete(self, table_name: str, condition: str = "") -> str:
        """DELETE as a mutation; the WHERE clause is mandatory, so all rows use ``1 = 1``."""
        return f"ALTER TABLE {self.quote(table_name)} DELETE WHERE {condition or '1 = 1'}"

    @staticmethod
    def _key_column_index(columns: Sequence[Column]) -> int:
        """First primary-key column, else the first column."""
        for i, column in enumerate(columns):
            if column.is_primary_key:
                return i
        return 0


class ClickHouseDialect(DatabaseDialect):
    """Dialect for ClickHouse databases."""

    _QUOTER = Quoter("`", "`")

    @property
    def db_type(self) -> str:
        return DB_TYPE_CLICKHOUSE

    @property
    def quoter(self) -> Quoter:
        return self._QUOTER

    def get_sql_generator(self) -> ClickHouseSQLGenerator:
        return ClickHouseSQLGenerator(self)

    def post_transfer_sql(self, table_name: str) -> List[str]:
        """Merge parts written by the load so ReplacingMergeTree-style engines collapse them."""
        return [f"OPTIMIZE TABLE {self.quote_identifier(table_name)} FINAL"]
