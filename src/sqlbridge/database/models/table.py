"""
Table, Index and DbServer models - Read-only descriptors produced by introspection
"""
from dataclasses import dataclass, field
from typing import List


@dataclass(frozen=True)
class Table:
    """Table descriptor"""
    table_name: str
    comment: str = ""
    engine: str = ""


@dataclass(frozen=True)
class Index:
    """Index descriptor"""
    index_name: str
    index_type: str = "INDEX"
    comment: str = ""
    column_names: List[str] = field(default_factory=list)
    is_unique: bool = False


@dataclass(frozen=True)
class DbServer:
    """Server descriptor returned by the version query"""
    version: str
