"""
Base Database Dialect - Abstract base classes for engine-specific SQL generation

Dialects handle engine-specific syntax differences such as:
- Identifier quoting (`backticks` vs "quotes")
- CREATE TABLE clauses (ENGINE = MergeTree() vs inline PRIMARY KEY)
- Duplicate-key handling (INSERT OR REPLACE vs delete-then-insert)
- Boolean literals and string escaping
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, List, Optional, Sequence

from ...errors import InvalidValueError, UnsupportedCapabilityError
from ..datatypes.base import DataTypeTable, EngineDataType, escape_string, hex_literal
from ..models import Column, DbCopyTable, DuplicateStrategy, Index, Table
from .dump_helper import DumpHelper
from .sql_parser import SQLParser

if TYPE_CHECKING:
    from ..connection import DbConn


def always_reserve(identifier: str) -> bool:
    """Reservation predicate quoting every identifier unconditionally."""
    return True


# ==================== Identifier Quoting ====================

@dataclass(frozen=True)
class Quoter:
    """
    Identifier quoting rule of one engine.

    ``quote`` never double-quotes an identifier that is already quoted, and
    escapes an embedded closing quote character by doubling it.
    """
    prefix: str
    suffix: str
    is_reserved: Callable[[str], bool] = always_reserve

    def is_quoted(self, identifier: str) -> bool:
        """True when ``identifier`` is a well-formed quoted identifier."""
        if len(identifier) < 2:
            return False
        if not (identifier.startswith(self.prefix) and identifier.endswith(self.suffix)):
            return False
        inner = identifier[len(self.prefix):len(identifier) - len(self.suffix)]
        return self.suffix not in inner.replace(self.suffix * 2, "")

    def quote(self, identifier: str) -> str:
        """Quote a single identifier (table, column, database name)."""
        if not identifier or self.is_quoted(identifier):
            return identifier
        if not self.is_reserved(identifier):
            return identifier
        escaped = identifier.replace(self.suffix, self.suffix * 2)
        return f"{self.prefix}{escaped}{self.suffix}"

    def quote_all(self, identifiers: Sequence[str]) -> List[str]:
        return [self.quote(name) for name in identifiers]

    def join(self, identifiers: Sequence[str], sep: str = ", ") -> str:
        """Quote and join identifiers, e.g. for a column list."""
        return sep.join(self.quote_all(identifiers))

    def quote_full_name(self, *parts: str) -> str:
        """Quote a qualified name part by part: ``db``.``table``."""
        return ".".join(self.quote(part) for part in parts if part)

    def unquote(self, identifier: str) -> str:
        """Remove quoting added by ``quote``."""
        if not self.is_quoted(identifier):
            return identifier
        inner = identifier[len(self.prefix):len(identifier) - len(self.suffix)]
        return inner.replace(self.suffix * 2, self.suffix)


# ==================== SQL Generation ====================

class SQLGenerator(ABC):
    """
    Generates DDL and DML text for one engine.

    Generation is stateless: output depends only on the call arguments and on
    the engine's immutable type table, so one generator can serve concurrent
    callers.
    """

    TRUE_LITERAL = "1"
    FALSE_LITERAL = "0"

    def __init__(self, dialect: "DatabaseDialect"):
        self.dialect = dialect

    @property
    @abstractmethod
    def data_types(self) -> DataTypeTable:
        """Type table used to resolve column types for literal rendering."""
        pass

    @abstractmethod
    def gen_table_ddl(
        self,
        table: Table,
        columns: Sequence[Column],
        drop_before_create: bool = False
    ) -> List[str]:
        """
        Generate CREATE TABLE DDL.

        Args:
            table: Table descriptor (name and comment)
            columns: Columns in declaration order
            drop_before_create: Emit a DROP TABLE IF EXISTS first

        Returns:
            Ordered, executable statements
        """
        pass

    def gen_index_ddl(self, table: Table, indexes: Sequence[Index]) -> List[str]:
        """
        Generate CREATE INDEX statements.

        Default: no separate statements (index defined inside CREATE TABLE).
        """
        return []

    @abstractmethod
    def gen_insert(
        self,
        table_name: str,
        columns: Sequence[Column],
        values: Sequence[Sequence[Any]],
        duplicate_strategy: DuplicateStrategy = DuplicateStrategy.NONE
    ) -> List[str]:
        """
        Generate INSERT statements for a batch of rows.

        Args:
            table_name: Target table
            columns: Target columns, same order as each row
            values: Row values
            duplicate_strategy: Conflict handling policy

        Returns:
            Ordered statements; callers must execute them in order
        """
        pass

    def gen_update(
        self,
        table_name: str,
        columns: Sequence[Column],
        values: Sequence[Any],
        condition: str = ""
    ) -> str:
        """
        Generate an UPDATE setting each column to the matching value.

        Args:
            table_name: Target table
            columns: Columns to assign
            values: One value per column
            condition: Raw WHERE condition; empty updates every row
        """
        sql = f"UPDATE {self.quote(table_name)} SET {self.format_assignments(columns, values)}"
        if condition:
            sql += f" WHERE {condition}"
        return sql

    def gen_delete(self, table_name: str, condition: str = "") -> str:
        """Generate a DELETE; an empty condition deletes every row."""
        sql = f"DELETE FROM {self.quote(table_name)}"
        if condition:
            sql += f" WHERE {condition}"
        return sql

    def gen_create_database(self, database_name: str) -> str:
        return f"CREATE DATABASE IF NOT EXISTS {self.quote(database_name)}"

    def gen_drop_database(self, database_name: str) -> str:
        return f"DROP DATABASE IF EXISTS {self.quote(database_name)}"

    # ==================== Helpers ====================

    def quote(self, identifier: str) -> str:
        return self.dialect.quoter.quote(identifier)

    def escape_string(self, text: str) -> str:
        """Escape text for a single-quoted literal (``'`` -> ``''``)."""
        return escape_string(text)

    def quote_comment(self, comment: str) -> str:
        """Render a comment as an escaped string literal."""
        return f"'{self.escape_string(comment)}'"

    def blob_literal(self, data: bytes) -> str:
        """Render raw bytes as a literal (``X'..'`` hex by default)."""
        return hex_literal(data)

    def resolve_types(self, columns: Sequence[Column]) -> List[EngineDataType]:
        """Resolve each column's native type, raising MappingError on unknown types."""
        return [self.data_types.resolve(col.data_type) for col in columns]

    def format_value(self, value: Any, data_type: EngineDataType) -> str:
        """Render ``value`` as a literal of ``data_type``."""
        return data_type.portable_type.sql_value(
            value,
            true_literal=self.TRUE_LITERAL,
            false_literal=self.FALSE_LITERAL,
            escape=self.escape_string,
            blob_literal=self.blob_literal,
        )

    def format_assignments(self, columns: Sequence[Column], values: Sequence[Any]) -> str:
        """Render ``col = literal, ...`` for an UPDATE."""
        if len(values) != len(columns):
            raise InvalidValueError(f"Got {len(values)} values for {len(columns)} columns")
        data_types = self.resolve_types(columns)
        return ", ".join(
            f"{self.quote(col.column_name)} = {self.format_value(value, dt)}"
            for col, value, dt in zip(columns, values, data_types)
        )

    def format_rows(
        self,
        columns: Sequence[Column],
        values: Sequence[Sequence[Any]],
        data_types: Optional[List[EngineDataType]] = None
    ) -> List[str]:
        """Render each row as ``(v1, v2, ...)``."""
        data_types = data_types or self.resolve_types(columns)
        rows = []
        for row_number, row in enumerate(values, 1):
            if len(row) != len(columns):
                raise InvalidValueError(
                    f"Row {row_number} has {len(row)} values for {len(columns)} columns"
                )
            literals = [self.format_value(v, dt) for v, dt in zip(row, data_types)]
            rows.append(f"({', '.join(literals)})")
        return rows


# ==================== Dialect ====================

class DatabaseDialect(ABC):
    """
    Abstract base class for database dialects.

    Each dialect knows:
    1. How identifiers are quoted
    2. Which SQL generator produces its DDL/DML
    3. Which optional capabilities (table copy, programs) it supports

    Usage:
        dialect = registry.get_dialect("clickhouse", conn)
        statements = dialect.get_sql_generator().gen_table_ddl(table, columns, True)
    """

    def __init__(self, conn: Optional["DbConn"] = None):
        """
        Initialize the dialect.

        Args:
            conn: Connection this dialect is bound to (None for offline generation)
        """
        self.conn = conn

    @property
    @abstractmethod
    def db_type(self) -> str:
        pass

    @property
    @abstractmethod
    def quoter(self) -> Quoter:
        """Identifier quoting rule."""
        pass

    def quote_identifier(self, identifier: str) -> str:
        return self.quoter.quote(identifier)

    @abstractmethod
    def get_sql_generator(self) -> SQLGenerator:
        pass

    def get_dump_helper(self) -> DumpHelper:
        """Hooks used when dumping a table to a SQL script."""
        return DumpHelper()

    def get_sql_parser(self) -> SQLParser:
        """Parser used to split and classify SQL text."""
        return SQLParser()

    def post_transfer_sql(self, table_name: str) -> List[str]:
        """Statements to run once a bulk load into ``table_name`` has finished."""
        return []

    def get_db_program(self):
        """Engine-side programs (backup/restore tooling)."""
        raise UnsupportedCapabilityError(self.db_type, "database programs")

    # ==================== Capability Checks ====================

    def supports_copy_table(self) -> bool:
        return False

    def copy_table(self, copy: DbCopyTable) -> str:
        """
        Duplicate a table inside the connected database.

        Returns:
            Name of the new table
        """
        raise UnsupportedCapabilityError(self.db_type, "table copy")


