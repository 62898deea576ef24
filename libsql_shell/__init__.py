"""
libsql-shell
============
Value formatting, result printing and SQL dumps for SQLite/libSQL databases:
- Driver values rendered as table cells or SQL literal text
- Statement results printed as plain text tables
- `.dump` of schema and data as a replayable SQL script
"""

from .config import ConfigLoader
from .connection import DatabaseConnection, split_statements, to_value
from .database_dumper import DatabaseDumper, dump_database
from .errors import (
    Base64DecodeError,
    FormatError,
    InvalidStatementsResult,
    MissingConnectionError,
    SchemaError,
    ShellError,
    UnableToPrintStatementResult,
    UnsupportedTypeError,
)
from .escaping import escape_single_quotes, needs_escaping
from .formatter import format_bytes, format_row, format_value
from .main import main
from .models import (
    DbCmdConfig,
    DumpStats,
    EncodedBlob,
    NullableKind,
    NullableValue,
    RenderMode,
    RowResult,
    StatementResult,
    StatementsResult,
    TableStats,
)
from .output import print_error, print_statement_result, print_statements_result, print_table
from .table_dumper import TableDumper
from .utils import setup_logging

__version__ = "1.0.0"

__all__ = [
    # Main entry point
    "main",
    # Core classes
    "ConfigLoader",
    "DatabaseConnection",
    "DatabaseDumper",
    "TableDumper",
    # Formatting and escaping
    "escape_single_quotes",
    "format_bytes",
    "format_row",
    "format_value",
    "needs_escaping",
    # Printing and dumping
    "dump_database",
    "print_error",
    "print_statement_result",
    "print_statements_result",
    "print_table",
    # Models
    "DbCmdConfig",
    "DumpStats",
    "EncodedBlob",
    "NullableKind",
    "NullableValue",
    "RenderMode",
    "RowResult",
    "StatementResult",
    "StatementsResult",
    "TableStats",
    # Errors
    "Base64DecodeError",
    "FormatError",
    "InvalidStatementsResult",
    "MissingConnectionError",
    "SchemaError",
    "ShellError",
    "UnableToPrintStatementResult",
    "UnsupportedTypeError",
    # Utilities
    "setup_logging",
    "split_statements",
    "to_value",
]
