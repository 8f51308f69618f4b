"""
Metadata Providers - Catalog introspection per engine

Usage:
    metadata = registry.get_metadata("clickhouse", conn)

    tables = metadata.get_tables()
    columns = metadata.get_columns("events")   # wrappers already normalized
    key = metadata.get_primary_key("events")
"""

from .base import MetadataProvider, RowDecoder
from .clickhouse_metadata import ClickHouseMetadata, fix_column
from .sqlite_metadata import SQLiteMetadata

__all__ = [
    "MetadataProvider",
    "RowDecoder",
    "ClickHouseMetadata",
    "SQLiteMetadata",
    "fix_column",
]
