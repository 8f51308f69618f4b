"""
Engines - One Meta bundle per supported database type
"""

from .clickhouse import ClickHouseMeta, build_dsn
from .sqlite import SQLiteMeta

__all__ = ["ClickHouseMeta", "SQLiteMeta", "build_dsn"]
