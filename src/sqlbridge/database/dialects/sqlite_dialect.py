"""
SQLite Dialect - SQLite-specific SQL generation
"""

from datetime import datetime
from typing import Any, List, Sequence, TextIO

from ...constants import DB_TYPE_SQLITE
from ...errors import ConfigurationError, InvalidValueError, UnsupportedCapabilityError
from ..datatypes.base import DataTypeTable, EngineDataType
from ..datatypes.sqlite_types import SQLITE_TYPES
from ..models import Column, DbCopyTable, DuplicateStrategy, Index, Table
from .base import DatabaseDialect, Quoter, SQLGenerator
from .dump_helper import DumpHelper

import logging
logger = logging.getLogger(__name__)

INSERT_VERBS = {
    DuplicateStrategy.NONE: "INSERT INTO",
    DuplicateStrategy.IGNORE: "INSERT OR IGNORE INTO",
    DuplicateStrategy.UPDATE: "INSERT OR REPLACE INTO",
}


class SQLiteSQLGenerator(SQLGenerator):
    """DDL/DML generation for SQLite. Comments are not supported by SQLite and are dropped."""

    @property
    def data_types(self) -> DataTypeTable:
        return SQLITE_TYPES

    def format_value(self, value: Any, data_type: EngineDataType) -> str:
        """
        SQLite columns accept any storage class, so text that does not fit a
        numeric or boolean affinity is stored as TEXT rather than rejected.
        """
        try:
            return super().format_value(value, data_type)
        except InvalidValueError:
            if not isinstance(value, str):
                raise
            return f"'{self.escape_string(value)}'"

    def gen_create_database(self, database_name: str) -> str:
        raise UnsupportedCapabilityError(DB_TYPE_SQLITE, "create database")

    def gen_drop_database(self, database_name: str) -> str:
        raise UnsupportedCapabilityError(DB_TYPE_SQLITE, "drop database")

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

        pk_columns = [c for c in columns if c.is_primary_key]
        inline_pk = len(pk_columns) == 1

        column_defs = []
        for column in columns:
            definition = f"  {self.quote(column.column_name)} {column.data_type or 'TEXT'}"
            if column.is_primary_key and inline_pk:
                definition += " PRIMARY KEY"
                if column.auto_increment:
                    definition += " AUTOINCREMENT"
            if not column.nullable and not (column.is_primary_key and inline_pk):
                definition += " NOT NULL"
            if column.default_value:
                definition += f" DEFAULT {column.default_value}"
            column_defs.append(definition)

        if len(pk_columns) > 1:
            column_defs.append(
                f"  PRIMARY KEY ({self.dialect.quoter.join([c.column_name for c in pk_columns])})"
            )

        statements.append(f"CREATE TABLE {table_name} (\n" + ",\n".join(column_defs) + "\n)")
        return statements

    def gen_index_ddl(self, table: Table, indexes: Sequence[Index]) -> List[str]:
        statements = []
        for index in indexes:
            if not index.column_names:
                logger.debug(f"Skipping index {index.index_name}: no columns")
                continue
            unique = "UNIQUE " if index.is_unique else ""
            statements.append(
                f"CREATE {unique}INDEX IF NOT EXISTS {self.quote(index.index_name)} "
                f"ON {self.quote(table.table_name)} ({self.dialect.quoter.join(index.column_names)})"
            )
        return statements

    def gen_insert(
        self,
        table_name: str,
        columns: Sequence[Column],
        values: Sequence[Sequence[Any]],
        duplicate_strategy: DuplicateStrategy = DuplicateStrategy.NONE
    ) -> List[str]:
        """Generate one INSERT using SQLite's native conflict clause."""
        if not values:
            return []

        rows = self.format_rows(columns, values)
        verb = INSERT_VERBS[DuplicateStrategy(duplicate_strategy)]
        return [
            f"{verb} {self.quote(table_name)} ({self.dialect.quoter.join([c.column_name for c in columns])}) "
            f"VALUES {', '.join(rows)}"
        ]


class SQLiteDumpHelper(DumpHelper):
    """Wraps each table's INSERT batches in a transaction."""

    def before_insert(self, writer: TextIO, table_name: str):
        writer.write("BEGIN TRANSACTION;\n")

    def after_insert(self, writer: TextIO, table_name: str, columns: Sequence[Column]):
        writer.write("COMMIT;\n")


class SQLiteDialect(DatabaseDialect):
    """Dialect for SQLite databases."""

    _QUOTER = Quoter('"', '"')

    @property
    def db_type(self) -> str:
        return DB_TYPE_SQLITE

    @property
    def quoter(self) -> Quoter:
        return self._QUOTER

    def get_sql_generator(self) -> SQLiteSQLGenerator:
        return SQLiteSQLGenerator(self)

    def get_dump_helper(self) -> DumpHelper:
        return SQLiteDumpHelper()

    def supports_copy_table(self) -> bool:
        return True

    def copy_table(self, copy: DbCopyTable) -> str:
        """
        Copy a table with CREATE TABLE ... AS SELECT.

        The copy keeps column names and declared affinities but not
        constraints or indexes.
        """
        if self.conn is None:
            raise ConfigurationError("SQLite table copy requires a bound connection.")

        target = copy.target_name or f"{copy.table_name}_copy_{datetime.now():%Y%m%d%H%M%S}"
        sql = f"CREATE TABLE {self.quote_identifier(target)} AS SELECT * FROM {self.quote_identifier(copy.table_name)}"
        if not copy.copy_data:
            sql += " WHERE 0"

        self.conn.exec(sql)
        logger.info(f"Copied SQLite table {copy.table_name} to {target} (data={copy.copy_data})")
        return target
