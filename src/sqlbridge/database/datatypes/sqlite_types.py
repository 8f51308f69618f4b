"""
SQLite data types - Declared type names and common-type converter

SQLite stores values by affinity, so the declared names below are the ones the
converter emits and the ones introspection most often reports. Type names are
case-insensitive in SQLite, so the table is too. Any other declared name
resolves through the affinity rules.
"""

from ...constants import DB_TYPE_SQLITE
from .base import (
    SIZING_LENGTH,
    SIZING_PRECISION,
    CommonType,
    CommonTypeConverter,
    DataTypeTable,
    EngineDataType,
    PortableType,
)

P = PortableType
C = CommonType

INTEGER = EngineDataType("INTEGER", P.INT8, C.INT8)
INT = EngineDataType("INT", P.INT4, C.INT4)
TINYINT = EngineDataType("TINYINT", P.INT1, C.INT1)
SMALLINT = EngineDataType("SMALLINT", P.INT2, C.INT2)
MEDIUMINT = EngineDataType("MEDIUMINT", P.INT4, C.INT4)
BIGINT = EngineDataType("BIGINT", P.INT8, C.INT8)
UNSIGNED_BIG_INT = EngineDataType("UNSIGNED BIG INT", P.INT8, C.UNSIGNED_INT8)

REAL = EngineDataType("REAL", P.NUMERIC, C.NUMERIC)
DOUBLE = EngineDataType("DOUBLE", P.NUMERIC, C.NUMERIC)
FLOAT = EngineDataType("FLOAT", P.NUMERIC, C.NUMERIC)
NUMERIC = EngineDataType("NUMERIC", P.DECIMAL, C.DECIMAL)
DECIMAL = EngineDataType("DECIMAL", P.DECIMAL, C.DECIMAL, sizing=SIZING_PRECISION)

TEXT = EngineDataType("TEXT", P.STRING, C.TEXT)
VARCHAR = EngineDataType("VARCHAR", P.STRING, C.VARCHAR, sizing=SIZING_LENGTH)
CHAR = EngineDataType("CHAR", P.STRING, C.CHAR, sizing=SIZING_LENGTH)
CLOB = EngineDataType("CLOB", P.STRING, C.LONGTEXT)
JSON = EngineDataType("JSON", P.STRING, C.JSON)

BLOB = EngineDataType("BLOB", P.BLOB, C.BLOB)

BOOLEAN = EngineDataType("BOOLEAN", P.BOOL, C.BOOL)
DATE = EngineDataType("DATE", P.DATE, C.DATE)
TIME = EngineDataType("TIME", P.TIME, C.TIME)
DATETIME = EngineDataType("DATETIME", P.DATETIME, C.DATETIME)
TIMESTAMP = EngineDataType("TIMESTAMP", P.DATETIME, C.TIMESTAMP)

# ==================== Affinity ====================

_AFFINITY_RULES = (
    (("INT",), INTEGER),
    (("CHAR", "CLOB", "TEXT"), TEXT),
    (("BLOB",), BLOB),
    (("REAL", "FLOA", "DOUB"), REAL),
)


def affinity_type(declared_type: str) -> EngineDataType:
    """
    Resolve a declared type name the table does not list by SQLite's column
    affinity rules: the first matching substring wins, an empty declaration
    has BLOB affinity, and anything else is NUMERIC.
    """
    name = declared_type.strip().upper()
    if not name:
        return BLOB
    for needles, data_type in _AFFINITY_RULES:
        if any(needle in name for needle in needles):
            return data_type
    return NUMERIC


SQLITE_TYPES = DataTypeTable(
    DB_TYPE_SQLITE,
    [
        INTEGER, INT, TINYINT, SMALLINT, MEDIUMINT, BIGINT, UNSIGNED_BIG_INT,
        REAL, DOUBLE, FLOAT, NUMERIC, DECIMAL,
        TEXT, VARCHAR, CHAR, CLOB, JSON,
        BLOB,
        BOOLEAN, DATE, TIME, DATETIME, TIMESTAMP,
    ],
    case_sensitive=False,
    fallback=affinity_type,
)


class SQLiteTypeConverter(CommonTypeConverter):
    """Maps every logical kind to a SQLite declared type."""

    db_type = DB_TYPE_SQLITE

    RULES = {
        C.VARCHAR: VARCHAR,
        C.CHAR: CHAR,
        C.TEXT: TEXT,
        C.MEDIUMTEXT: TEXT,
        C.LONGTEXT: TEXT,
        C.INT1: TINYINT,
        C.INT2: SMALLINT,
        C.INT4: INT,
        C.INT8: BIGINT,
        C.UNSIGNED_INT1: SMALLINT,
        C.UNSIGNED_INT2: INT,
        C.UNSIGNED_INT4: BIGINT,
        C.UNSIGNED_INT8: UNSIGNED_BIG_INT,
        C.DECIMAL: DECIMAL,
        C.NUMERIC: REAL,
        C.BIT: BOOLEAN,
        C.BOOL: BOOLEAN,
        C.DATE: DATE,
        C.TIME: TIME,
        C.DATETIME: DATETIME,
        C.TIMESTAMP: TIMESTAMP,
        C.BINARY: BLOB,
        C.VARBINARY: BLOB,
        C.BLOB: BLOB,
        C.MEDIUMBLOB: BLOB,
        C.LONGBLOB: BLOB,
        C.ENUM: TEXT,
        C.JSON: JSON,
    }
