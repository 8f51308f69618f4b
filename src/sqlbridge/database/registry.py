"""
Dialect Registry - Engine bundles keyed by database type

Each supported engine contributes one Meta bundle (type table, converter,
dialect factory, metadata factory, connection opener). The registry is an
explicit object built once at startup by create_registry() and passed to
whoever needs it; there is no module-level instance.

Usage:
    registry = create_registry()

    conn = registry.get_meta("clickhouse").connect(info)
    dialect = registry.get_dialect("clickhouse", conn)
    tables = registry.get_metadata("clickhouse", conn).get_tables()
"""

import threading
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence

from ..constants import DEFAULT_BATCH_SIZE
from ..errors import (
    ConnectivityError,
    DuplicateRegistrationError,
    SQLBridgeError,
    UnknownEngineError,
)
from ..utils.connection_error_handler import parse_connection_error
from .connection import DbConn
from .datatypes.base import CommonTypeConverter, DataTypeTable, EngineDataType
from .dialects.base import DatabaseDialect
from .metadata.base import MetadataProvider
from .models import ConnectionInfo

import logging
logger = logging.getLogger(__name__)


class Meta(ABC):
    """
    Everything the registry knows about one engine.

    Lives for the process lifetime; holds no per-connection state.
    """

    db_type: str = ""
    batch_size: int = DEFAULT_BATCH_SIZE  # Recommended rows per INSERT during transfer

    @abstractmethod
    def get_db_data_types(self) -> DataTypeTable:
        pass

    @abstractmethod
    def get_common_type_converter(self) -> CommonTypeConverter:
        pass

    @abstractmethod
    def get_dialect(self, conn: Optional[DbConn] = None) -> DatabaseDialect:
        """Create a dialect bound to ``conn`` (None for offline SQL generation)."""
        pass

    @abstractmethod
    def get_metadata(self, conn: DbConn) -> MetadataProvider:
        pass

    @abstractmethod
    def open_connection(self, info: ConnectionInfo) -> Any:
        """Open a DB-API 2.0 connection. Driver exceptions propagate."""
        pass

    def connect(self, info: ConnectionInfo) -> DbConn:
        """
        Open a connection and wrap it.

        Args:
            info: Connection parameters

        Returns:
            DbConn bound to this Meta

        Raises:
            ConnectivityError: If the driver could not open the connection
        """
        try:
            connection = self.open_connection(info)
        except SQLBridgeError:
            raise
        except Exception as e:
            error_info = parse_connection_error(e, self.db_type)
            logger.error(f"Failed to connect to {self.db_type} '{info.name}': {error_info.title} ({e})")
            raise ConnectivityError(error_info.format_short(), error_info) from e

        logger.info(f"Connected to {self.db_type} '{info.name}'")
        return DbConn(info, connection, self)


class DialectRegistry:
    """
    Map from database type to Meta bundle.

    Registration happens at startup and is serialized by a lock. Lookups
    read an immutable snapshot and take no lock.
    """

    def __init__(self):
        self._metas: Dict[str, Meta] = {}
        self._lock = threading.Lock()

    def register(self, db_type: str, meta: Meta):
        """
        Register an engine.

        Raises:
            DuplicateRegistrationError: If ``db_type`` is already registered
            ConfigurationError: If the engine's converter does not cover every CommonType
        """
        key = db_type.lower()
        meta.get_common_type_converter().check_total()

        with self._lock:
            if key in self._metas:
                raise DuplicateRegistrationError(db_type)
            metas = dict(self._metas)
            metas[key] = meta
            self._metas = metas

        logger.info(f"Registered database type: {key}")

    def lookup(self, db_type: str) -> Optional[Meta]:
        """Return the Meta for ``db_type``, or None when not registered."""
        return self._metas.get(db_type.lower())

    def get_meta(self, db_type: str) -> Meta:
        """
        Return the Meta for ``db_type``.

        Raises:
            UnknownEngineError: If ``db_type`` is not registered
        """
        meta = self.lookup(db_type)
        if meta is None:
            logger.warning(f"No dialect for database type: {db_type}")
            raise UnknownEngineError(db_type, self.supported_types())
        return meta

    def get_dialect(self, db_type: str, conn: Optional[DbConn] = None) -> DatabaseDialect:
        return self.get_meta(db_type).get_dialect(conn)

    def get_metadata(self, db_type: str, conn: DbConn) -> MetadataProvider:
        return self.get_meta(db_type).get_metadata(conn)

    def get_data_type(self, db_type: str, native_type: str) -> EngineDataType:
        """
        Resolve a native type of ``db_type`` (wrappers and parameters allowed).

        Raises:
            UnknownEngineError: If ``db_type`` is not registered
            MappingError: If the engine does not declare the type
        """
        return self.get_meta(db_type).get_db_data_types().resolve(native_type)

    def supported_types(self) -> List[str]:
        """Registered database types, in registration order."""
        return list(self._metas.keys())

    def is_supported(self, db_type: str) -> bool:
        return db_type.lower() in self._metas


def create_registry(metas: Optional[Sequence[Meta]] = None) -> DialectRegistry:
    """
    Build a populated registry.

    Args:
        metas: Engines to register, in order. Defaults to the built-in
               engines: ClickHouse, then SQLite.

    Returns:
        A new DialectRegistry
    """
    if metas is None:
        from .engines.clickhouse import ClickHouseMeta
        from .engines.sqlite import SQLiteMeta
        metas = [ClickHouseMeta(), SQLiteMeta()]

    registry = DialectRegistry()
    for meta in metas:
        registry.register(meta.db_type, meta)
    return registry
