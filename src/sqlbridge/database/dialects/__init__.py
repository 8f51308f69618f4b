"""
Database Dialects - Engine-specific quoting and SQL generation

Dialects are obtained through the registry, bound to one connection:

Usage:
    from sqlbridge.database.registry import create_registry

    registry = create_registry()
    dialect = registry.get_dialect("clickhouse", conn)

    # Generate DDL
    statements = dialect.get_sql_generator().gen_table_ddl(table, columns, drop_before_create=True)

    # Generate inserts (execute in order)
    statements = dialect.get_sql_generator().gen_insert("t1", columns, rows, DuplicateStrategy.UPDATE)
"""

from .base import DatabaseDialect, Quoter, SQLGenerator, always_reserve
from .dump_helper import DumpHelper
from .sql_parser import SQLParser, SQLStatement

from .clickhouse_dialect import ClickHouseDialect, ClickHouseSQLGenerator
from .sqlite_dialect import SQLiteDialect, SQLiteSQLGenerator

__all__ = [
    # Base classes
    "DatabaseDialect",
    "Quoter",
    "SQLGenerator",
    "DumpHelper",
    "SQLParser",
    "SQLStatement",
    "always_reserve",

    # Implementations
    "ClickHouseDialect",
    "ClickHouseSQLGenerator",
    "SQLiteDialect",
    "SQLiteSQLGenerator",
]
