"""
Database layer - Registry, connections, dialects and metadata providers

Usage:
    from sqlbridge.database import create_registry
    from sqlbridge.database.models import ConnectionInfo

    registry = create_registry()
    info = ConnectionInfo(name="local", db_type="sqlite", database="app.db")

    with registry.get_meta(info.db_type).connect(info) as conn:
        for table in conn.get_metadata().get_tables():
            print(table.table_name)
"""

from .connection import DbConn, QueryResult
from .registry import DialectRegistry, Meta, create_registry
from .transfer import convert_columns, dump_table, post_transfer

__all__ = [
    "DbConn",
    "QueryResult",
    "DialectRegistry",
    "Meta",
    "create_registry",
    "convert_columns",
    "dump_table",
    "post_transfer",
]
