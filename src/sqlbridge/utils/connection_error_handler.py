"""
Connection Error Handler - User-facing descriptions of connection failures

Translates driver error text into a short title, a message and a suggestion.
Used by Meta.connect() to build the ConnectivityError it raises.
"""

import re
from dataclasses import dataclass

from ..constants import DB_TYPE_CLICKHOUSE, DB_TYPE_SQLITE


@dataclass
class ConnectionErrorInfo:
    """Structured connection error information."""
    title: str  # Short error title
    message: str  # User-friendly message
    suggestion: str  # What to do to fix it
    original_error: str  # Original error for debugging

    def format_full(self) -> str:
        """Format complete error message for display."""
        parts = [self.title, "", self.message]
        if self.suggestion:
            parts.extend(["", "Suggestion:", self.suggestion])
        return "\n".join(parts)

    def format_short(self) -> str:
        return f"{self.title}: {self.message}"


# Format: (regex_pattern, title, message_template, suggestion)
# {match} in message_template is replaced by regex group(1)

CLICKHOUSE_PATTERNS = [
    # Code: 516 AUTHENTICATION_FAILED
    (
        r"(\w+): authentication failed",
        "Authentication failed",
        "User '{match}' could not log in.",
        "Check the username and password, and that the user may connect from this host."
    ),
    # Code: 81 UNKNOWN_DATABASE
    (
        r"database `?(\w+)`? (?:doesn't|does not) exist",
        "Unknown database",
        "Database '{match}' does not exist.",
        "Check the database name or create it with CREATE DATABASE."
    ),
    # Native port vs HTTP port mix-up
    (
        r"unexpected packet|unknown packet",
        "Protocol mismatch",
        "The server did not answer with the native protocol.",
        "Use the native TCP port (9000, or 9440 with TLS), not the HTTP port (8123)."
    ),
    (
        r"(?:ssl|tls|certificate)",
        "SSL/TLS error",
        "The secure connection could not be established.",
        "Add 'secure=True' to the connection parameters or check the server certificate."
    ),
]

SQLITE_PATTERNS = [
    (
        r"(?:unable to open|no such file)",
        "File not found",
        "The SQLite database file could not be opened.",
        "Check the path of the .db / .sqlite file and its parent directory."
    ),
    (
        r"database is locked",
        "Database locked",
        "The database is in use by another process.",
        "Close other applications using this file, or retry in a moment."
    ),
    (
        r"(?:read-only|readonly)",
        "Read-only database",
        "The database cannot be written.",
        "Check the permissions of the file and its parent directory."
    ),
    (
        r"(?:corrupt|malformed|not a database)",
        "Corrupt database",
        "The file is not a valid SQLite database.",
        "Restore a backup or run 'PRAGMA integrity_check'."
    ),
]

# Generic patterns (for all database types)
GENERIC_PATTERNS = [
    (
        r"(?:timeout|timed out)",
        "Timeout",
        "The connection took too long.",
        "Check the network connection and retry."
    ),
    (
        r"(?:refused)",
        "Connection refused",
        "The server refused the connection.",
        "Check that the database server is running and listening on the configured port."
    ),
    (
        r"(?:name or service not known|nodename nor servname|getaddrinfo failed|host not found)",
        "Host not found",
        "The server name could not be resolved.",
        "Check the host name or IP address."
    ),
    (
        r"(?:unreachable|network)",
        "Network unreachable",
        "The server is not reachable on the network.",
        "Check the network connection and the VPN if required."
    ),
]

PATTERNS_BY_TYPE = {
    DB_TYPE_CLICKHOUSE: CLICKHOUSE_PATTERNS,
    DB_TYPE_SQLITE: SQLITE_PATTERNS,
}


def parse_connection_error(
    error: Exception,
    db_type: str = ""
) -> ConnectionErrorInfo:
    """
    Parse a database connection error and return user-friendly information.

    Args:
        error: The exception that occurred
        db_type: Database type (clickhouse, sqlite); empty tries every pattern

    Returns:
        ConnectionErrorInfo with user-friendly message and suggestion
    """
    original_error = str(error)

    if db_type in PATTERNS_BY_TYPE:
        patterns = PATTERNS_BY_TYPE[db_type] + GENERIC_PATTERNS
    else:
        patterns = CLICKHOUSE_PATTERNS + SQLITE_PATTERNS + GENERIC_PATTERNS

    for pattern, title, message_template, suggestion in patterns:
        match = re.search(pattern, original_error, re.IGNORECASE)
        if match:
            message = message_template
            if "{match}" in message and match.groups():
                message = message.replace("{match}", match.group(1))

            return ConnectionErrorInfo(
                title=title,
                message=message,
                suggestion=suggestion,
                original_error=original_error
            )

    # No pattern matched
    return ConnectionErrorInfo(
        title="Connection error",
        message="An error occurred while connecting to the database.",
        suggestion="Check the connection parameters and retry.",
        original_error=original_error
    )
