"""
Data models and enums for libsql-shell.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, AsyncIterator, Mapping, Optional, TextIO


class RenderMode(Enum):
    """Target grammar for formatted values."""
    DISPLAY = "display"
    SQL_LITERAL = "sql"


class NullableKind(Enum):
    """Payload kinds a nullable value can carry."""
    BOOL = "bool"
    FLOAT64 = "float64"
    BYTE = "byte"
    INT16 = "int16"
    INT32 = "int32"
    INT64 = "int64"
    STRING = "string"
    TIME = "time"


@dataclass(frozen=True)
class NullableValue:
    """A typed payload paired with a validity flag.

    ``kind`` is normally a :class:`NullableKind`; drivers may hand over a plain
    string, which is resolved when the value is formatted.
    """
    kind: Any
    valid: bool
    payload: Any = None


@dataclass(frozen=True)
class EncodedBlob:
    """Binary data carried as base64 text under the ``"base64"`` key."""
    fields: Mapping[str, Any]


@dataclass
class RowResult:
    """One row of a statement, or the error that ended the row stream."""
    values: list[Any] = field(default_factory=list)
    error: Optional[Exception] = None


@dataclass
class StatementResult:
    """Result of a single statement.

    ``columns`` is empty when the statement produced no tabular result.
    """
    columns: list[str] = field(default_factory=list)
    rows: Optional[AsyncIterator[RowResult]] = None
    error: Optional[Exception] = None


@dataclass
class StatementsResult:
    """Results of every statement submitted in one call, in order."""
    statements: Optional[AsyncIterator[StatementResult]] = None


@dataclass
class DbCmdConfig:
    """Context shared by shell commands."""
    db: Any = None
    out_f: Optional[TextIO] = None
    err_f: Optional[TextIO] = None
    without_header: bool = False


@dataclass
class TableStats:
    """Statistics for a single table dump."""
    table: str
    rows_dumped: int = 0
    extra_statements: int = 0


@dataclass
class DumpStats:
    """Overall dump statistics."""
    tables: list[TableStats] = field(default_factory=list)
    total_rows: int = 0

    @property
    def total_tables(self) -> int:
        return len(self.tables)
