"""
Connection Module - Query/exec capability over one DB-API connection.

Provides:
- QueryResult: column names plus rows as dicts
- DbConn: binds a DB-API 2.0 connection to its engine Meta bundle, and hands
  out the engine's Dialect and MetadataProvider for that connection
"""
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, Iterator, List, Mapping, Optional, Sequence, Union
import logging

from .models import ConnectionInfo

if TYPE_CHECKING:
    from .dialects.base import DatabaseDialect
    from .metadata.base import MetadataProvider
    from .registry import Meta

logger = logging.getLogger(__name__)

Params = Optional[Union[Sequence[Any], Mapping[str, Any]]]


@dataclass
class QueryResult:
    """Result set of a query: column names and one dict per row."""
    columns: List[str] = field(default_factory=list)
    rows: List[Dict[str, Any]] = field(default_factory=list)

    def first(self) -> Optional[Dict[str, Any]]:
        """Return the first row, or None for an empty result."""
        return self.rows[0] if self.rows else None

    def __iter__(self) -> Iterator[Dict[str, Any]]:
        return iter(self.rows)

    def __len__(self) -> int:
        return len(self.rows)


class DbConn:
    """
    One live connection to one engine.

    Dialect and MetadataProvider instances are bound to this connection and
    must not be shared across concurrent operations.

    Usage:
        conn = registry.get_meta("sqlite").connect(info)

        result = conn.query("SELECT name FROM sqlite_master WHERE type = ?", ("table",))
        for row in result:
            print(row["name"])

        # Delete-then-insert pairs should run atomically
        with conn.transaction():
            for sql in statements:
                conn.exec(sql)
    """

    def __init__(self, info: ConnectionInfo, connection: Any, meta: "Meta"):
        """
        Initialize the connection wrapper.

        Args:
            info: Connection parameters this connection was opened with
            connection: DB-API 2.0 connection object
            meta: Engine bundle that opened the connection
        """
        self.info = info
        self.connection = connection
        self.meta = meta
        self._dialect: Optional["DatabaseDialect"] = None
        self._metadata: Optional["MetadataProvider"] = None
        self._in_transaction = False

    @property
    def db_type(self) -> str:
        return self.meta.db_type

    # ==================== Query / Exec ====================

    @staticmethod
    def _execute(cursor, sql: str, params: Params):
        # Some drivers reject an empty parameter sequence
        if params is None:
            cursor.execute(sql)
        else:
            cursor.execute(sql, params)

    def query(self, sql: str, params: Params = None) -> QueryResult:
        """
        Execute a query and return all rows.

        Driver exceptions propagate unchanged.
        """
        cursor = self.connection.cursor()
        try:
            self._execute(cursor, sql, params)
            description = cursor.description or []
            columns = [desc[0] for desc in description]
            rows = [dict(zip(columns, row)) for row in cursor.fetchall()]
        finally:
            cursor.close()
        return QueryResult(columns=columns, rows=rows)

    def iter_batches(self, sql: str, batch_size: int, params: Params = None) -> Iterator[List[Dict[str, Any]]]:
        """
        Execute a query and yield its rows in lists of at most ``batch_size``.

        Rows are fetched with ``cursor.fetchmany`` so the result set never has
        to fit in memory. The cursor stays open until the generator finishes
        or is closed.
        """
        cursor = self.connection.cursor()
        try:
            self._execute(cursor, sql, params)
            columns = [desc[0] for desc in cursor.description or []]
            while True:
                rows = cursor.fetchmany(batch_size)
                if not rows:
                    break
                yield [dict(zip(columns, row)) for row in rows]
        finally:
            cursor.close()

    def exec(self, sql: str, params: Params = None) -> int:
        """
        Execute a statement and return the affected row count (-1 if unknown).

        Outside of ``transaction()`` the statement is committed immediately.
        """
        cursor = self.connection.cursor()
        try:
            self._execute(cursor, sql, params)
            rowcount = cursor.rowcount
        finally:
            cursor.close()
        if not self._in_transaction:
            self.connection.commit()
        return rowcount

    def exec_all(self, statements: Sequence[str], atomic: bool = False) -> int:
        """
        Execute statements in order, e.g. the output of a SQL generator.

        Args:
            statements: SQL statements, executed first to last
            atomic: Run them inside ``transaction()``

        Returns:
            Sum of affected row counts that the driver reported
        """
        if atomic and not self._in_transaction:
            with self.transaction():
                return self.exec_all(statements)

        total = 0
        for sql in statements:
            rowcount = self.exec(sql)
            if rowcount > 0:
                total += rowcount
        return total

    def exec_script(self, sql_text: str) -> int:
        """Split a SQL script with the engine's parser and execute each statement."""
        statements = self.get_dialect().get_sql_parser().split(sql_text)
        return self.exec_all([stmt.text for stmt in statements])

    @contextmanager
    def transaction(self):
        """
        Group statements: commit on successful exit, roll back on exception.

        Engines without transactions (ClickHouse) treat commit and rollback as
        no-ops, so the grouping is best-effort there.
        """
        if self._in_transaction:
            yield self
            return

        self._in_transaction = True
        try:
            yield self
            self.connection.commit()
        except Exception:
            logger.debug(f"Rolling back transaction on {self.db_type} '{self.info.name}'")
            self.connection.rollback()
            raise
        finally:
            self._in_transaction = False

    # ==================== Engine services ====================

    def get_dialect(self) -> "DatabaseDialect":
        """Dialect bound to this connection."""
        if self._dialect is None:
            self._dialect = self.meta.get_dialect(self)
        return self._dialect

    def get_metadata(self) -> "MetadataProvider":
        """Metadata provider bound to this connection."""
        if self._metadata is None:
            self._metadata = self.meta.get_metadata(self)
        return self._metadata

    # ==================== Lifecycle ====================

    def close(self):
        """Close the underlying connection."""
        self.connection.close()
        logger.debug(f"Closed {self.db_type} connection '{self.info.name}'")

    def __enter__(self) -> "DbConn":
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
