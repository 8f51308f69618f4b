"""
Centralized constants for sqlbridge.

Eliminates magic numbers scattered across the engine adapters.
Import from here instead of hardcoding values.
"""

# ===========================================================================
# Engine identifiers
# ===========================================================================
DB_TYPE_CLICKHOUSE = "clickhouse"
DB_TYPE_SQLITE = "sqlite"

# ===========================================================================
# Timeouts (seconds)
# ===========================================================================
CONNECTION_TIMEOUT_S = 10       # Driver connect timeout
READ_TIMEOUT_S = 30             # Send/receive timeout for a single query

# ===========================================================================
# Default endpoints
# ===========================================================================
CLICKHOUSE_DEFAULT_PORT = 9000
CLICKHOUSE_DEFAULT_DB = "default"
SQLITE_DEFAULT_DB = "main"

# ===========================================================================
# Data transfer
# ===========================================================================
DEFAULT_BATCH_SIZE = 1000       # Rows per INSERT statement
CLICKHOUSE_BATCH_SIZE = 10_000  # ClickHouse prefers large blocks

# ===========================================================================
# Introspection
# ===========================================================================
UNKNOWN_VERSION = "unknown"     # Sentinel when the version query gives nothing
