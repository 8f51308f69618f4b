"""
Transfer options - Insert conflict policy and table copy request
"""
from dataclasses import dataclass
from enum import IntEnum


class DuplicateStrategy(IntEnum):
    """How an insert handles rows whose key already exists."""
    NONE = 0      # Plain insert, engine default behaviour
    IGNORE = 1    # Conflicting rows are dropped
    UPDATE = 2    # Conflicting rows are overwritten


@dataclass
class DbCopyTable:
    """Request to duplicate a table inside the connected database"""
    table_name: str
    copy_data: bool = False
    target_name: str = ""
