"""
Column model - Column descriptor shared by metadata providers and SQL generators
"""
from dataclasses import dataclass, replace


@dataclass
class Column:
    """
    Column descriptor.

    Created by introspection (from the live schema) or by the caller (for DDL
    synthesis). Metadata providers may rewrite ``data_type`` and ``nullable``
    in place while normalizing engine-specific wrapper types.
    """
    table_name: str
    column_name: str
    data_type: str
    comment: str = ""
    nullable: bool = False
    is_primary_key: bool = False
    default_value: str = ""
    auto_increment: bool = False
    char_max_length: int = 0
    num_precision: int = 0
    num_scale: int = 0

    def copy(self, **changes) -> "Column":
        """Return a copy of this column with ``changes`` applied."""
        return replace(self, **changes)
