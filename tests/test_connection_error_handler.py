"""
Unit tests for connection error translation.
"""
import pytest

from sqlbridge.utils.connection_error_handler import parse_connection_error


class TestParseConnectionError:
    """Test driver message classification."""

    @pytest.mark.parametrize("message, db_type, title", [
        ("Code: 516. DB::Exception: reader: Authentication failed: password is incorrect", "clickhouse",
         "Authentication failed"),
        ("Code: 81. DB::Exception: Database `analytics` doesn't exist", "clickhouse", "Unknown database"),
        ("Unexpected packet from server localhost:8123", "clickhouse", "Protocol mismatch"),
        ("unable to open database file", "sqlite", "File not found"),
        ("database is locked", "sqlite", "Database locked"),
        ("attempt to write a readonly database", "sqlite", "Read-only database"),
        ("file is not a database", "sqlite", "Corrupt database"),
        ("timed out", "clickhouse", "Timeout"),
        ("[Errno 111] Connection refused", "clickhouse", "Connection refused"),
        ("[Errno -2] Name or service not known", "clickhouse", "Host not found"),
    ])
    def test_known_errors(self, message, db_type, title):
        assert parse_connection_error(Exception(message), db_type).title == title

    def test_match_substituted_in_message(self):
        info = parse_connection_error(Exception("Database `analytics` doesn't exist"), "clickhouse")
        assert info.message == "Database 'analytics' does not exist."

    def test_engine_patterns_not_mixed(self):
        """Test that SQLite patterns do not apply to ClickHouse errors."""
        info = parse_connection_error(Exception("database is locked"), "clickhouse")
        assert info.title == "Connection error"

    def test_without_engine_tries_all(self):
        assert parse_connection_error(Exception("database is locked")).title == "Database locked"

    def test_fallback(self):
        info = parse_connection_error(ValueError("something odd"), "sqlite")
        assert info.title == "Connection error"
        assert info.original_error == "something odd"

    def test_formatting(self):
        info = parse_connection_error(Exception("database is locked"), "sqlite")
        assert info.format_short() == "Database locked: The database is in use by another process."
        full = info.format_full()
        assert full.startswith("Database locked\n\n")
        assert "\nSuggestion:\n" in full
