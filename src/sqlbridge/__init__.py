"""
sqlbridge - Multi-dialect SQL abstraction layer
ClickHouse and SQLite engines
"""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("sqlbridge")
except PackageNotFoundError:
    # Package not installed
    __version__ = "0.1.0"

from .database import DbConn, DialectRegistry, Meta, create_registry

__all__ = ["DbConn", "DialectRegistry", "Meta", "create_registry", "__version__"]
