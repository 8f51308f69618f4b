"""
Data Types - Portable type model, per-engine type tables and converters

Usage:
    from sqlbridge.database.datatypes import CLICKHOUSE_TYPES, CommonType

    data_type = CLICKHOUSE_TYPES.resolve("Nullable(Int32)")
    literal = data_type.portable_type.sql_value(42)
"""

from .base import (
    CommonType,
    CommonTypeConverter,
    DataTypeTable,
    EngineDataType,
    PortableType,
    apply_type_size,
    base_type_name,
    escape_string,
    split_wrapper,
    unwrap_type,
)
from .clickhouse_types import CLICKHOUSE_TYPES, ClickHouseTypeConverter
from .sqlite_types import SQLITE_TYPES, SQLiteTypeConverter

__all__ = [
    # Portable model
    "PortableType",
    "CommonType",
    "EngineDataType",
    "DataTypeTable",
    "CommonTypeConverter",
    "escape_string",
    "split_wrapper",
    "unwrap_type",
    "base_type_name",
    "apply_type_size",

    # Engines
    "CLICKHOUSE_TYPES",
    "ClickHouseTypeConverter",
    "SQLITE_TYPES",
    "SQLiteTypeConverter",
]
