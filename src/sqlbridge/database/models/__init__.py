"""
Database Models - Dataclasses passed between introspection and SQL generation

All models are re-exported here for convenience:
    from sqlbridge.database.models import Column, Table, Index, ...
"""

from .connection_info import ConnectionInfo
from .column import Column
from .table import Table, Index, DbServer
from .transfer_options import DuplicateStrategy, DbCopyTable

__all__ = [
    "ConnectionInfo",
    "Column",
    "Table",
    "Index",
    "DbServer",
    "DuplicateStrategy",
    "DbCopyTable",
]
