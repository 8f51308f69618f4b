"""
Base Metadata Provider - Abstract base class for catalog introspection

Metadata providers read an engine's system catalog through one connection and
return the shared models (Table, Column, Index, DbServer).

Failure policy:
- Primary lookups (databases, tables, columns, stored DDL) propagate driver
  errors unchanged.
- Supplementary lookups (version query, index catalog) degrade to a fallback
  value and log the gap at debug level.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, List, Mapping

from ...errors import DecodeError
from ..models import Column, DbServer, Index, Table

if TYPE_CHECKING:
    from ..connection import DbConn


class RowDecoder:
    """
    Typed access to one catalog row.

    Every accessor either returns a value of the requested type or raises
    DecodeError; NULL (None) yields the accessor's default.
    """

    def __init__(self, row: Mapping[str, Any]):
        self.row = row

    def text(self, key: str, default: str = "") -> str:
        value = self.row.get(key)
        if value is None:
            return default
        if isinstance(value, str):
            return value
        if isinstance(value, (bytes, bytearray)):
            return bytes(value).decode("utf-8")
        raise DecodeError(key, "str", value)

    def integer(self, key: str, default: int = 0) -> int:
        value = self.row.get(key)
        if value is None:
            return default
        if isinstance(value, bool):
            return int(value)
        if isinstance(value, int):
            return value
        raise DecodeError(key, "int", value)

    def flag(self, key: str, default: bool = False) -> bool:
        """Decode a boolean stored as bool or as the integers 0/1."""
        value = self.row.get(key)
        if value is None:
            return default
        if isinstance(value, bool):
            return value
        if isinstance(value, int) and value in (0, 1):
            return value == 1
        raise DecodeError(key, "bool", value)


class MetadataProvider(ABC):
    """
    Abstract base class for engine metadata providers.

    One instance is bound to one DbConn and must not be shared across
    concurrent operations.
    """

    def __init__(self, conn: "DbConn"):
        """
        Initialize the provider.

        Args:
            conn: Connection used to query the catalog
        """
        self.conn = conn

    @abstractmethod
    def get_db_server(self) -> DbServer:
        """
        Query the server version.

        Returns:
            DbServer, with version "unknown" when the version query yields nothing
        """
        pass

    def get_compatible_db_version(self) -> str:
        """Version the engine is wire-compatible with, "" when not applicable."""
        return ""

    @abstractmethod
    def get_default_db(self) -> str:
        pass

    def get_schemas(self) -> List[str]:
        """
        Schema names. Engines without a separate schema level expose their
        databases here.
        """
        return self.get_db_names()

    @abstractmethod
    def get_db_names(self) -> List[str]:
        """User databases, system namespaces excluded, sorted ascending."""
        pass

    @abstractmethod
    def get_tables(self, *table_names: str) -> List[Table]:
        """
        Tables of the configured database.

        Args:
            *table_names: Restrict the result to these tables (all when empty)
        """
        pass

    @abstractmethod
    def get_columns(self, *table_names: str) -> List[Column]:
        """
        Columns of the first named table, in ordinal order.

        Returns an empty list when no table name is given.
        """
        pass

    @abstractmethod
    def get_primary_key(self, table_name: str) -> str:
        """
        Name of the first primary-key column.

        Falls back to the first column by ordinal position when the table
        declares no key.
        """
        pass

    @abstractmethod
    def get_table_index(self, table_name: str) -> List[Index]:
        """Secondary indexes of a table, empty when the catalog is unavailable."""
        pass

    @abstractmethod
    def get_create_table_sql(self, table_name: str) -> str:
        """Stored CREATE statement, "" when the table is unknown."""
        pass

    def get_table_ddl(self, table_name: str, drop_before_create: bool = False) -> str:
        """
        Get the stored CREATE statement of a table.

        Args:
            table_name: Table name
            drop_before_create: Precede the statement with DROP TABLE IF EXISTS

        Returns:
            DDL text, "" when the engine has no stored statement for the table
        """
        ddl = self.get_create_table_sql(table_name)
        if not ddl:
            return ""
        if drop_before_create:
            quoted = self.conn.get_dialect().quote_identifier(table_name)
            return f"DROP TABLE IF EXISTS {quoted};\n{ddl}"
        return ddl
