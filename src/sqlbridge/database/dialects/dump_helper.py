"""
Dump Helper - Engine hooks around the INSERT batches of a SQL dump
"""

from typing import Sequence, TextIO

from ..models import Column


class DumpHelper:
    """
    Default hooks: write nothing.

    ``dump_table`` calls ``before_insert`` once per table before the first
    batch, prefixes every INSERT statement with ``before_insert_sql`` and
    calls ``after_insert`` once after the last batch.
    """

    def before_insert(self, writer: TextIO, table_name: str):
        pass

    def before_insert_sql(self, quote_schema: str, table_name: str) -> str:
        """Text prepended to each INSERT statement (empty by default)."""
        return ""

    def after_insert(self, writer: TextIO, table_name: str, columns: Sequence[Column]):
        pass
