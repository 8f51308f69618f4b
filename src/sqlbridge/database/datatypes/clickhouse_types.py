"""
ClickHouse data types - Native type table and common-type converter

Information loss: unsigned and signed integers share a portable category,
and every composite type (Array, Tuple, Map, ...) compresses into STRING.
"""

from typing import Optional

from ...constants import DB_TYPE_CLICKHOUSE
from ..models import Column
from .base import (
    SIZING_LENGTH,
    SIZING_PRECISION,
    CommonType,
    CommonTypeConverter,
    DataTypeTable,
    EngineDataType,
    PortableType,
)

# Wrapper types carry an inner type: Nullable(T), LowCardinality(T)
NULLABLE_WRAPPER = "Nullable"
LOW_CARDINALITY_WRAPPER = "LowCardinality"
WRAPPER_TYPES = (NULLABLE_WRAPPER, LOW_CARDINALITY_WRAPPER)

# Composite types cannot be wrapped in Nullable
NON_NULLABLE_TYPES = ("Array", "Map", "Tuple", "Nested")

P = PortableType
C = CommonType

# Numeric types
UInt8 = EngineDataType("UInt8", P.INT1, C.UNSIGNED_INT1)
UInt16 = EngineDataType("UInt16", P.INT2, C.UNSIGNED_INT2)
UInt32 = EngineDataType("UInt32", P.INT4, C.UNSIGNED_INT4)
UInt64 = EngineDataType("UInt64", P.INT8, C.UNSIGNED_INT8)
UInt128 = EngineDataType("UInt128", P.INT8, C.UNSIGNED_INT8)
UInt256 = EngineDataType("UInt256", P.INT8, C.UNSIGNED_INT8)
Int8 = EngineDataType("Int8", P.INT1, C.INT1)
Int16 = EngineDataType("Int16", P.INT2, C.INT2)
Int32 = EngineDataType("Int32", P.INT4, C.INT4)
Int64 = EngineDataType("Int64", P.INT8, C.INT8)
Int128 = EngineDataType("Int128", P.INT8, C.INT8)
Int256 = EngineDataType("Int256", P.INT8, C.INT8)

Float32 = EngineDataType("Float32", P.NUMERIC, C.NUMERIC)
Float64 = EngineDataType("Float64", P.NUMERIC, C.NUMERIC)

# String types
String = EngineDataType("String", P.STRING, C.VARCHAR)
FixedString = EngineDataType("FixedString", P.STRING, C.CHAR, sizing=SIZING_LENGTH)

# Date and time types
DateTime = EngineDataType("DateTime", P.DATETIME, C.DATETIME)
DateTime64 = EngineDataType("DateTime64", P.DATETIME, C.DATETIME)
Date = EngineDataType("Date", P.DATE, C.DATE)
Date32 = EngineDataType("Date32", P.DATE, C.DATE)

# Other types
UUID = EngineDataType("UUID", P.STRING, C.VARCHAR)
IPv4 = EngineDataType("IPv4", P.STRING, C.VARCHAR)
IPv6 = EngineDataType("IPv6", P.STRING, C.VARCHAR)
Bool = EngineDataType("Bool", P.BOOL, C.BOOL)
JSON = EngineDataType("JSON", P.STRING, C.JSON)

# Decimal types
Decimal = EngineDataType(
    "Decimal", P.DECIMAL, C.DECIMAL, sizing=SIZING_PRECISION, default_size="38, 10"
)
Decimal32 = EngineDataType("Decimal32", P.DECIMAL, C.DECIMAL)
Decimal64 = EngineDataType("Decimal64", P.DECIMAL, C.DECIMAL)
Decimal128 = EngineDataType("Decimal128", P.DECIMAL, C.DECIMAL)
Decimal256 = EngineDataType("Decimal256", P.DECIMAL, C.DECIMAL)

# Enum types
Enum8 = EngineDataType("Enum8", P.STRING, C.ENUM)
Enum16 = EngineDataType("Enum16", P.STRING, C.ENUM)

# Complex types
Array = EngineDataType("Array", P.STRING, C.TEXT)
Tuple = EngineDataType("Tuple", P.STRING, C.TEXT)
Map = EngineDataType("Map", P.STRING, C.TEXT)
Nested = EngineDataType("Nested", P.STRING, C.TEXT)
AggregateFunction = EngineDataType("AggregateFunction", P.STRING, C.TEXT)
SimpleAggregateFunction = EngineDataType("SimpleAggregateFunction", P.STRING, C.TEXT)

# Special types
LowCardinality = EngineDataType(LOW_CARDINALITY_WRAPPER, P.STRING, C.VARCHAR)
Nullable = EngineDataType(NULLABLE_WRAPPER, P.STRING, C.VARCHAR)

CLICKHOUSE_TYPES = DataTypeTable(
    DB_TYPE_CLICKHOUSE,
    [
        UInt8, UInt16, UInt32, UInt64, UInt128, UInt256,
        Int8, Int16, Int32, Int64, Int128, Int256,
        Float32, Float64,
        String, FixedString,
        DateTime, DateTime64, Date, Date32,
        UUID, IPv4, IPv6, Bool, JSON,
        Decimal, Decimal32, Decimal64, Decimal128, Decimal256,
        Enum8, Enum16,
        Array, Tuple, Map, Nested, AggregateFunction, SimpleAggregateFunction,
        LowCardinality, Nullable,
    ],
    wrappers=WRAPPER_TYPES,
)


def _char(column: Optional[Column]) -> EngineDataType:
    # FixedString is only valid with an explicit length
    if column is not None and column.char_max_length > 0:
        return FixedString
    return String


class ClickHouseTypeConverter(CommonTypeConverter):
    """Maps every logical kind to ClickHouse's preferred native type."""

    db_type = DB_TYPE_CLICKHOUSE

    RULES = {
        C.VARCHAR: String,
        C.CHAR: _char,
        C.TEXT: String,
        C.MEDIUMTEXT: String,
        C.LONGTEXT: String,
        C.INT1: Int8,
        C.INT2: Int16,
        C.INT4: Int32,
        C.INT8: Int64,
        C.UNSIGNED_INT1: UInt8,
        C.UNSIGNED_INT2: UInt16,
        C.UNSIGNED_INT4: UInt32,
        C.UNSIGNED_INT8: UInt64,
        C.DECIMAL: Decimal,
        C.NUMERIC: Float64,
        C.BIT: UInt8,
        C.BOOL: Bool,
        C.DATE: Date,
        C.TIME: DateTime,
        C.DATETIME: DateTime,
        C.TIMESTAMP: DateTime,
        C.BINARY: String,
        C.VARBINARY: String,
        C.BLOB: String,
        C.MEDIUMBLOB: String,
        C.LONGBLOB: String,
        # Enum8 needs its value list, which a generic enum does not carry
        C.ENUM: String,
        C.JSON: String,
    }
