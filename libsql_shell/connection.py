"""
Database connection management for libsql-shell.
"""

import asyncio
import logging
import sqlite3
from datetime import datetime
from typing import Any, AsyncIterator, Optional

from .errors import MissingConnectionError
from .formatter import BASE64_FIELD
from .models import (
    EncodedBlob,
    NullableKind,
    NullableValue,
    RowResult,
    StatementResult,
    StatementsResult,
)


def to_value(raw: Any) -> Any:
    """Adapt a driver value to one of the representations the formatter knows.

    Values with no known representation are passed through unchanged and are
    rejected when formatted.
    """
    if isinstance(raw, datetime):
        return NullableValue(NullableKind.TIME, True, raw)
    if isinstance(raw, (bytearray, memoryview)):
        return bytes(raw)
    if isinstance(raw, dict) and BASE64_FIELD in raw:
        return EncodedBlob(raw)
    return raw


def split_statements(sql: str) -> list[str]:
    """Split SQL text into complete statements, keeping their text verbatim."""
    statements = []
    buffer = ""
    for char in sql:
        buffer += char
        if char == ";" and sqlite3.complete_statement(buffer):
            statement = buffer.strip()
            if statement != ";":
                statements.append(statement)
            buffer = ""

    if buffer.strip():
        statements.append(buffer.strip())
    return statements


class DatabaseConnection:
    """Manages SQLite database connections with context manager support."""

    MEMORY_DATABASE = ":memory:"

    def __init__(self, database: str = MEMORY_DATABASE):
        self.database = database
        self.connection: Optional[sqlite3.Connection] = None

    def __enter__(self) -> "DatabaseConnection":
        """Context manager entry - establish connection."""
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit - close connection."""
        self.disconnect()

    def connect(self) -> None:
        """Establish database connection."""
        try:
            self.connection = sqlite3.connect(self.database, isolation_level=None)
            logging.info(f"Connected to {self.database}")
        except sqlite3.Error as e:
            logging.error(f"Failed to connect to database: {e}")
            raise

    def disconnect(self) -> None:
        """Close database connection."""
        if self.connection is not None:
            self.connection.close()
            self.connection = None
            logging.debug("Database connection closed")

    async def execute_statements(self, sql: str) -> StatementsResult:
        """
        Execute one or more statements.

        Statements run lazily, one at a time, as the returned stream is
        consumed. A failing statement ends the stream with its error.
        """
        if self.connection is None:
            raise MissingConnectionError()
        return StatementsResult(statements=self._iter_statements(split_statements(sql)))

    async def _iter_statements(self, statements: list[str]) -> AsyncIterator[StatementResult]:
        for statement in statements:
            logging.debug(f"Executing statement: {statement[:200]}")
            try:
                cursor = self.connection.execute(statement)
            except sqlite3.Error as e:
                yield StatementResult(error=e)
                return

            columns = [column[0] for column in cursor.description or ()]
            yield StatementResult(columns=columns, rows=self._iter_rows(cursor))

    async def _iter_rows(self, cursor: sqlite3.Cursor) -> AsyncIterator[RowResult]:
        try:
            while True:
                try:
                    row = cursor.fetchone()
                except sqlite3.Error as e:
                    yield RowResult(error=e)
                    return

                if row is None:
                    return
                yield RowResult(values=[to_value(value) for value in row])
                await asyncio.sleep(0)
        finally:
            cursor.close()
