"""
SQLite Metadata - Catalog introspection over sqlite_master and PRAGMAs
"""

import re
from typing import List

from ...constants import SQLITE_DEFAULT_DB, UNKNOWN_VERSION
from ..datatypes.base import apply_type_size, base_type_name
from ..models import Column, DbServer, Index, Table
from .base import MetadataProvider, RowDecoder

import logging
logger = logging.getLogger(__name__)

# Databases hidden from listings
SYSTEM_DATABASES = ("temp",)

_AUTOINCREMENT_RE = re.compile(r"\bAUTOINCREMENT\b", re.IGNORECASE)

INDEX_TYPES = {"pk": "PRIMARY", "u": "UNIQUE", "c": "INDEX"}


class SQLiteMetadata(MetadataProvider):
    """Metadata provider for SQLite."""

    def _quote(self, identifier: str) -> str:
        return self.conn.get_dialect().quote_identifier(identifier)

    def get_db_server(self) -> DbServer:
        try:
            result = self.conn.query("SELECT sqlite_version() AS version")
        except Exception as e:
            logger.debug(f"SQLite version query failed: {e}")
            return DbServer(version=UNKNOWN_VERSION)

        row = result.first()
        version = RowDecoder(row).text("version") if row else ""
        return DbServer(version=version or UNKNOWN_VERSION)

    def get_default_db(self) -> str:
        return SQLITE_DEFAULT_DB

    def get_db_names(self) -> List[str]:
        """Main database plus attached ones."""
        names = [RowDecoder(row).text("name") for row in self.conn.query("PRAGMA database_list")]
        return sorted(name for name in names if name and name not in SYSTEM_DATABASES)

    def get_tables(self, *table_names: str) -> List[Table]:
        sql = "SELECT name FROM sqlite_master WHERE type = 'table' AND name NOT LIKE 'sqlite_%'"
        params: list = []
        if table_names:
            sql += f" AND name IN ({', '.join('?' for _ in table_names)})"
            params.extend(table_names)
        sql += " ORDER BY name"

        # SQLite stores neither table comments nor engines
        return [
            Table(table_name=RowDecoder(row).text("name"))
            for row in self.conn.query(sql, params)
        ]

    def get_columns(self, *table_names: str) -> List[Column]:
        if not table_names:
            return []

        table_name = table_names[0]
        rows = self.conn.query(f"PRAGMA table_info({self._quote(table_name)})").rows
        pk_count = sum(1 for row in rows if RowDecoder(row).integer("pk") > 0)
        autoincrement = bool(_AUTOINCREMENT_RE.search(self.get_create_table_sql(table_name)))
        data_types = self.conn.meta.get_db_data_types()

        columns = []
        for row in rows:
            decoder = RowDecoder(row)
            is_pk = decoder.integer("pk") > 0
            data_type = decoder.text("type").upper() or "TEXT"
            column = Column(
                table_name=table_name,
                column_name=decoder.text("name"),
                data_type=data_type,
                nullable=not decoder.flag("notnull"),
                is_primary_key=is_pk,
                default_value=decoder.text("dflt_value"),
                auto_increment=is_pk and pk_count == 1 and autoincrement,
            )
            columns.append(apply_type_size(column, data_types.find(base_type_name(data_type))))
        return columns

    def get_primary_key(self, table_name: str) -> str:
        rows = self.conn.query(f"PRAGMA table_info({self._quote(table_name)})").rows
        if not rows:
            return ""

        key_columns = sorted(
            (RowDecoder(row).integer("pk"), RowDecoder(row).text("name"))
            for row in rows
            if RowDecoder(row).integer("pk") > 0
        )
        if key_columns:
            return key_columns[0][1]
        return RowDecoder(rows[0]).text("name")

    def get_table_index(self, table_name: str) -> List[Index]:
        try:
            index_rows = self.conn.query(f"PRAGMA index_list({self._quote(table_name)})").rows
            indexes = []
            for row in index_rows:
                decoder = RowDecoder(row)
                name = decoder.text("name")
                # Indexes backing PRIMARY KEY / UNIQUE constraints cannot be recreated by name
                if name.startswith("sqlite_autoindex_"):
                    continue

                info = self.conn.query(f"PRAGMA index_info({self._quote(name)})").rows
                info.sort(key=lambda r: RowDecoder(r).integer("seqno"))
                indexes.append(Index(
                    index_name=name,
                    index_type=INDEX_TYPES.get(decoder.text("origin"), "INDEX"),
                    column_names=[RowDecoder(r).text("name") for r in info],
                    is_unique=decoder.flag("unique"),
                ))
            return indexes
        except Exception as e:
            logger.debug(f"SQLite index catalog unavailable for {table_name}: {e}")
            return []

    def get_create_table_sql(self, table_name: str) -> str:
        row = self.conn.query(
            "SELECT sql FROM sqlite_master WHERE type = 'table' AND name = ?",
            (table_name,)
        ).first()
        return RowDecoder(row).text("sql") if row else ""
