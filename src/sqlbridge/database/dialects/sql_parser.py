"""
SQL Parser - Split SQL text into individual statements and classify them.

Handles:
- Standard semicolon-delimited statements
- Comments (single-line -- and multi-line /* */)
- Strings with embedded semicolons (via sqlparse)
"""

from dataclasses import dataclass
from typing import List

import sqlparse

import logging
logger = logging.getLogger(__name__)

SELECT_KEYWORDS = {"SELECT", "WITH", "SHOW", "DESCRIBE", "DESC", "EXPLAIN", "PRAGMA"}


@dataclass
class SQLStatement:
    """Represents a single SQL statement."""
    text: str           # The SQL text
    line_start: int     # Starting line number (1-based)
    line_end: int       # Ending line number (1-based)
    is_select: bool     # True if the statement returns rows


class SQLParser:
    """Statement splitter shared by every dialect."""

    def split(self, sql_text: str) -> List[SQLStatement]:
        """
        Split SQL text into individual statements.

        Args:
            sql_text: Full SQL text with multiple statements

        Returns:
            List of SQLStatement objects, trailing semicolons removed
        """
        if not sql_text or not sql_text.strip():
            return []

        statements = []
        search_from = 0

        for raw in sqlparse.split(sql_text):
            stmt_text = raw.strip()
            if not stmt_text:
                continue

            # Locate the statement to report its real line span
            offset = sql_text.find(stmt_text, search_from)
            if offset < 0:
                offset = search_from
            line_start = sql_text.count("\n", 0, offset) + 1
            line_end = line_start + stmt_text.count("\n")
            search_from = offset + len(stmt_text)

            text = stmt_text.rstrip(";").rstrip()
            if not text:
                continue

            statements.append(SQLStatement(
                text=text,
                line_start=line_start,
                line_end=line_end,
                is_select=self.is_select(text)
            ))

        logger.debug(f"Split SQL text into {len(statements)} statement(s)")
        return statements

    def statement_type(self, stmt_text: str) -> str:
        """
        Return the statement type reported by sqlparse ("SELECT", "INSERT",
        "CREATE", ...), or "UNKNOWN".
        """
        parsed = sqlparse.parse(stmt_text)
        if not parsed:
            return "UNKNOWN"
        return parsed[0].get_type()

    def is_select(self, stmt_text: str) -> bool:
        """
        Determine if a statement returns a result set.

        True for SELECT, WITH ... SELECT (CTEs) and the read-only
        introspection statements (SHOW, DESCRIBE, EXPLAIN, PRAGMA).
        """
        # Parenthesized set operations start with "("
        cleaned = sqlparse.format(stmt_text, strip_comments=True).upper().lstrip("( \t\r\n")
        if not cleaned:
            return False

        first_word = cleaned.split()[0].rstrip("(")
        if first_word == "WITH":
            # CTE feeding an INSERT/UPDATE/DELETE does not return rows
            return self.statement_type(stmt_text) in ("SELECT", "UNKNOWN")
        return first_word in SELECT_KEYWORDS
