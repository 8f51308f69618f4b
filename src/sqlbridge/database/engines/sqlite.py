"""
SQLite engine - Meta bundle over the standard-library driver
"""

import sqlite3
from typing import Optional

from ...constants import CONNECTION_TIMEOUT_S, DB_TYPE_SQLITE
from ..connection import DbConn
from ..datatypes.base import DataTypeTable
from ..datatypes.sqlite_types import SQLITE_TYPES, SQLiteTypeConverter
from ..dialects.sqlite_dialect import SQLiteDialect
from ..metadata.sqlite_metadata import SQLiteMetadata
from ..models import ConnectionInfo
from ..registry import Meta

import logging
logger = logging.getLogger(__name__)

MEMORY_DATABASE = ":memory:"


class SQLiteMeta(Meta):
    """Engine bundle for SQLite. ``ConnectionInfo.database`` is the file path."""

    db_type = DB_TYPE_SQLITE

    def __init__(self):
        self._converter = SQLiteTypeConverter()

    def get_db_data_types(self) -> DataTypeTable:
        return SQLITE_TYPES

    def get_common_type_converter(self) -> SQLiteTypeConverter:
        return self._converter

    def get_dialect(self, conn: Optional[DbConn] = None) -> SQLiteDialect:
        return SQLiteDialect(conn)

    def get_metadata(self, conn: DbConn) -> SQLiteMetadata:
        return SQLiteMetadata(conn)

    def open_connection(self, info: ConnectionInfo) -> sqlite3.Connection:
        path = info.database or MEMORY_DATABASE
        if path != MEMORY_DATABASE and not path.startswith("file:"):
            # Open read-write only: a missing file is a configuration error, not a new database
            path = f"file:{path}?mode=rw"
        logger.debug(f"Opening SQLite database {info.database or MEMORY_DATABASE}")
        return sqlite3.connect(path, timeout=CONNECTION_TIMEOUT_S, uri=True, check_same_thread=False)
