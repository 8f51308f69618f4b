"""
Portable Type Model - Engine-agnostic type categories and per-engine type tables

Three layers:
- PortableType: the small closed set of storage categories every native type
  compresses into. It owns the literal-formatting rule used by INSERT generation.
- CommonType: the logical kinds a converter must answer for when synthesizing
  DDL for data that did not originate from the target engine.
- DataTypeTable: one engine's native types, declared as data.

The mapping native -> portable is not reversible: several native types share a
category (every ClickHouse composite is a STRING), which is acceptable for
cross-engine comparison but means a round-trip may pick a different native type.
"""

import datetime
import decimal
import math
import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Tuple, Union

from ...errors import ConfigurationError, InvalidValueError, MappingError
from ..models import Column

SIZING_LENGTH = "length"
SIZING_PRECISION = "precision"

_WRAPPER_RE = re.compile(r"^([A-Za-z_][A-Za-z0-9_]*)\s*\((.*)\)$", re.DOTALL)
_INTEGER_RE = re.compile(r"^[+-]?\d+$")
_NUMBER_RE = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")
_SIZE_PARAMS_RE = re.compile(r"\(\s*(\d+)\s*(?:,\s*(\d+)\s*)?\)\s*$")

_TRUE_STRINGS = {"1", "true", "t", "yes", "y"}
_FALSE_STRINGS = {"0", "false", "f", "no", "n"}


def escape_string(text: str) -> str:
    """Escape a string for a single-quoted SQL literal (``'`` -> ``''``)."""
    return text.replace("'", "''")


def hex_literal(data: bytes) -> str:
    """Render raw bytes as a standard SQL hex blob literal: ``X'ff00'``."""
    return f"X'{data.hex()}'"


class PortableType(Enum):
    """Engine-agnostic storage category."""
    INT1 = "int1"
    INT2 = "int2"
    INT4 = "int4"
    INT8 = "int8"
    NUMERIC = "numeric"
    DECIMAL = "decimal"
    STRING = "string"
    BOOL = "bool"
    DATE = "date"
    TIME = "time"
    DATETIME = "datetime"
    BLOB = "blob"

    @property
    def is_integer(self) -> bool:
        return self in (PortableType.INT1, PortableType.INT2, PortableType.INT4, PortableType.INT8)

    @property
    def is_numeric(self) -> bool:
        """Numeric categories render unquoted."""
        return self.is_integer or self in (PortableType.NUMERIC, PortableType.DECIMAL)

    def sql_value(
        self,
        value,
        true_literal: str = "1",
        false_literal: str = "0",
        escape: Callable[[str], str] = escape_string,
        blob_literal: Callable[[bytes], str] = hex_literal,
    ) -> str:
        """
        Render ``value`` as a SQL literal of this category.

        Args:
            value: Python value (None renders as NULL for every category)
            true_literal: Engine's literal for boolean true
            false_literal: Engine's literal for boolean false
            escape: Engine's string-literal escaping rule
            blob_literal: Engine's literal for raw bytes in STRING/BLOB columns

        Returns:
            SQL literal text

        Raises:
            InvalidValueError: If the value cannot be rendered safely
        """
        if value is None:
            return "NULL"
        if self is PortableType.BOOL:
            return true_literal if _as_bool(value) else false_literal
        if self.is_numeric:
            return _as_number(value, integer=self.is_integer)
        if isinstance(value, (bytes, bytearray, memoryview)) and self in (PortableType.STRING, PortableType.BLOB):
            return blob_literal(bytes(value))
        return f"'{escape(_as_text(value))}'"


class CommonType(Enum):
    """Logical kinds every engine converter must map to a native type."""
    VARCHAR = "varchar"
    CHAR = "char"
    TEXT = "text"
    MEDIUMTEXT = "mediumtext"
    LONGTEXT = "longtext"
    INT1 = "int1"
    INT2 = "int2"
    INT4 = "int4"
    INT8 = "int8"
    UNSIGNED_INT1 = "unsigned_int1"
    UNSIGNED_INT2 = "unsigned_int2"
    UNSIGNED_INT4 = "unsigned_int4"
    UNSIGNED_INT8 = "unsigned_int8"
    DECIMAL = "decimal"
    NUMERIC = "numeric"
    BIT = "bit"
    BOOL = "bool"
    DATE = "date"
    TIME = "time"
    DATETIME = "datetime"
    TIMESTAMP = "timestamp"
    BINARY = "binary"
    VARBINARY = "varbinary"
    BLOB = "blob"
    MEDIUMBLOB = "mediumblob"
    LONGBLOB = "longblob"
    ENUM = "enum"
    JSON = "json"


@dataclass(frozen=True)
class EngineDataType:
    """One native type of one engine."""
    name: str
    portable_type: PortableType
    common_type: CommonType
    sizing: Optional[str] = None
    default_size: str = ""

    def render(self, column: Optional[Column] = None) -> str:
        """Render the native type text, adding size parameters known on ``column``."""
        if column is not None:
            if self.sizing == SIZING_LENGTH and column.char_max_length > 0:
                return f"{self.name}({column.char_max_length})"
            if self.sizing == SIZING_PRECISION and column.num_precision > 0:
                return f"{self.name}({column.num_precision}, {column.num_scale})"
        if self.sizing and self.default_size:
            return f"{self.name}({self.default_size})"
        return self.name


# ==================== Wrapper syntax ====================

def split_wrapper(native_type: str) -> Optional[Tuple[str, str]]:
    """
    Split ``Name(Inner)`` into ``("Name", "Inner")``.

    Returns None unless the opening parenthesis after the name is closed by the
    final character.
    """
    match = _WRAPPER_RE.match(native_type.strip())
    if not match:
        return None

    inner = match.group(2)
    depth = 0
    for ch in inner:
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth < 0:
                return None
    if depth != 0:
        return None
    return match.group(1), inner.strip()


def unwrap_type(native_type: str, wrappers: Iterable[str]) -> str:
    """Strip every leading wrapper listed in ``wrappers``, outermost first."""
    wrappers = set(wrappers)
    current = native_type.strip()
    while True:
        parts = split_wrapper(current)
        if parts is None or parts[0] not in wrappers:
            return current
        current = parts[1]


def base_type_name(native_type: str) -> str:
    """Return the type name without parameters: ``Decimal(10, 2)`` -> ``Decimal``."""
    return native_type.split("(", 1)[0].strip()


def apply_type_size(column: Column, data_type: Optional[EngineDataType]) -> Column:
    """
    Copy the size parameters of ``column.data_type`` onto the column's size
    fields: ``VARCHAR(20)`` sets char_max_length, ``Decimal(10, 2)`` sets
    precision and scale. Types without a sizing rule are left alone.
    """
    if data_type is None or data_type.sizing is None:
        return column
    match = _SIZE_PARAMS_RE.search(column.data_type)
    if not match:
        return column
    if data_type.sizing == SIZING_LENGTH:
        column.char_max_length = int(match.group(1))
    else:
        column.num_precision = int(match.group(1))
        column.num_scale = int(match.group(2) or 0)
    return column


# ==================== Type table ====================

class DataTypeTable:
    """
    Registry of one engine's native types.

    Lookups are exact. Engines whose type names are case-insensitive opt in
    with ``case_sensitive=False``. Engines that accept arbitrary declared type
    names pass a ``fallback`` which ``resolve`` consults when the exact lookup
    misses.
    """

    def __init__(
        self,
        db_type: str,
        data_types: Iterable[EngineDataType],
        wrappers: Iterable[str] = (),
        case_sensitive: bool = True,
        fallback: Optional[Callable[[str], EngineDataType]] = None,
    ):
        self.db_type = db_type
        self.wrappers = tuple(wrappers)
        self.case_sensitive = case_sensitive
        self.fallback = fallback
        self._types: Dict[str, EngineDataType] = {}

        for data_type in data_types:
            key = self._key(data_type.name)
            if key in self._types:
                raise ConfigurationError(
                    f"{db_type} declares data type '{data_type.name}' twice."
                )
            self._types[key] = data_type

    def _key(self, name: str) -> str:
        return name if self.case_sensitive else name.upper()

    def find(self, name: str) -> Optional[EngineDataType]:
        """Exact lookup, None when absent."""
        return self._types.get(self._key(name))

    def get(self, name: str) -> EngineDataType:
        """Exact lookup, raising MappingError when absent."""
        data_type = self.find(name)
        if data_type is None:
            raise MappingError(self.db_type, name)
        return data_type

    def resolve(self, native_type: str) -> EngineDataType:
        """
        Resolve a full native type declaration.

        Known wrappers and type parameters are stripped before the exact
        lookup: ``Nullable(Decimal(10, 2))`` resolves to ``Decimal``.

        Raises:
            MappingError: If the base type is not declared by this engine
                and the table has no fallback
        """
        unwrapped = unwrap_type(native_type, self.wrappers)
        data_type = self.find(base_type_name(unwrapped))
        if data_type is None:
            if self.fallback is None:
                raise MappingError(self.db_type, native_type)
            data_type = self.fallback(unwrapped)
        return data_type

    def by_portable_type(self, portable_type: PortableType) -> List[EngineDataType]:
        """All native types compressing into ``portable_type``."""
        return [dt for dt in self._types.values() if dt.portable_type is portable_type]

    def names(self) -> List[str]:
        return [dt.name for dt in self._types.values()]

    def __contains__(self, name: str) -> bool:
        return self.find(name) is not None

    def __iter__(self) -> Iterator[EngineDataType]:
        return iter(self._types.values())

    def __len__(self) -> int:
        return len(self._types)


# ==================== Common-type converter ====================

Rule = Union[EngineDataType, Callable[[Optional[Column]], EngineDataType]]


class CommonTypeConverter:
    """
    Per-engine answer to "which native type represents this logical kind".

    Subclasses declare ``RULES`` with exactly one entry per CommonType. A rule
    is either a fixed EngineDataType or a callable receiving the source column
    (for choices that depend on declared length or precision).
    """

    db_type: str = ""
    RULES: Dict[CommonType, Rule] = {}

    def convert(self, common_type: CommonType, column: Optional[Column] = None) -> EngineDataType:
        """
        Return the native type for ``common_type``.

        Raises:
            ConfigurationError: If the converter has no rule (a wiring defect)
        """
        rule = self.RULES.get(common_type)
        if rule is None:
            raise ConfigurationError(
                f"{self.db_type} converter has no rule for {common_type.name}."
            )
        if isinstance(rule, EngineDataType):
            return rule
        return rule(column)

    def missing_rules(self) -> List[CommonType]:
        """Logical kinds without a rule (empty for a total converter)."""
        return [ct for ct in CommonType if ct not in self.RULES]

    def check_total(self):
        """Raise ConfigurationError unless every CommonType has a rule."""
        missing = self.missing_rules()
        if missing:
            names = ", ".join(ct.name for ct in missing)
            raise ConfigurationError(f"{self.db_type} converter is missing rules for: {names}")


# ==================== Literal helpers ====================

def _as_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float, decimal.Decimal)):
        return value != 0
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
    raise InvalidValueError(f"Cannot render {value!r} as a boolean literal")


def _as_number(value, integer: bool) -> str:
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            raise InvalidValueError(f"Cannot render {value!r} as a numeric literal")
        if integer and value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(value, decimal.Decimal):
        if not value.is_finite():
            raise InvalidValueError(f"Cannot render {value!r} as a numeric literal")
        return str(value)
    if isinstance(value, str):
        text = value.strip()
        pattern = _INTEGER_RE if integer else _NUMBER_RE
        if pattern.match(text):
            return text
    raise InvalidValueError(f"Cannot render {value!r} as a numeric literal")


def _as_text(value) -> str:
    if isinstance(value, datetime.datetime):
        text = value.strftime("%Y-%m-%d %H:%M:%S")
        if value.microsecond:
            text += f".{value.microsecond:06d}"
        return text
    if isinstance(value, (datetime.date, datetime.time)):
        return value.isoformat()
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="replace")
    return str(value)
