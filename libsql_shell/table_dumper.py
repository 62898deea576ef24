"""
Table dumping functionality for libsql-shell.
"""

import logging
from typing import Any, TextIO

from .errors import InvalidStatementsResult, SchemaError, UnableToPrintStatementResult
from .escaping import escape_single_quotes, needs_escaping
from .formatter import format_row
from .models import RenderMode, StatementResult, TableStats


async def first_statement(connection: Any, query: str) -> StatementResult:
    """Run a single query and return its statement result, rows unread."""
    statements_result = await connection.execute_statements(query)
    if statements_result.statements is None:
        raise InvalidStatementsResult()

    async for statement_result in statements_result.statements:
        if statement_result.error is not None:
            raise statement_result.error
        if statement_result.rows is None:
            raise UnableToPrintStatementResult()
        return statement_result
    raise SchemaError(f"query returned no statement result: {query}")


class TableDumper:
    """Writes the schema and rows of individual tables as SQL."""

    TABLE_KIND = "table"
    SCHEMA_COLUMNS = 2

    def __init__(self, connection: Any, out_f: TextIO):
        self.connection = connection
        self.out_f = out_f

    async def dump_table(self, table: str) -> TableStats:
        """
        Dump one table.

        Writes the CREATE TABLE statement, one INSERT per row, then the
        table's other schema statements (indexes, triggers) so they do not
        exist while rows are loaded.

        Args:
            table: Name of the table, unescaped.

        Returns:
            TableStats with dump statistics.
        """
        stats = TableStats(table=table)

        create_statement, extra_statements = await self._get_table_schema(table)
        self._write(create_statement)

        records = await first_statement(self.connection, self._build_select_query(table))
        stats.rows_dumped = await self._dump_records(records, table)

        for statement in extra_statements:
            self._write(statement)
        stats.extra_statements = len(extra_statements)

        return stats

    def _write(self, statement: str) -> None:
        self.out_f.write(statement + "\n")

    def _build_schema_query(self, table: str) -> str:
        return (
            "SELECT type, sql || ';' FROM sqlite_master "
            f"WHERE TBL_NAME='{escape_single_quotes(table)}' AND sql IS NOT NULL"
        )

    def _build_select_query(self, table: str) -> str:
        return f"SELECT * FROM '{escape_single_quotes(table)}'"

    def _insert_target(self, table: str) -> str:
        if needs_escaping(table):
            return f"'{escape_single_quotes(table)}'"
        return table

    async def _get_table_schema(self, table: str) -> tuple[str, list[str]]:
        """Return the CREATE TABLE statement and the table's other statements."""
        schema = await first_statement(self.connection, self._build_schema_query(table))

        create_statements = []
        extra_statements = []
        async for row in schema.rows:
            if row.error is not None:
                raise row.error

            formatted = format_row(row.values, RenderMode.DISPLAY)
            if len(formatted) != self.SCHEMA_COLUMNS:
                raise SchemaError(
                    f"expected {self.SCHEMA_COLUMNS} columns, got {len(formatted)}"
                )

            kind, sql = formatted
            if kind == self.TABLE_KIND:
                create_statements.append(sql)
            else:
                extra_statements.append(sql)

        if len(create_statements) != 1:
            raise SchemaError(
                f"expected 1 CREATE TABLE statement for table '{table}', "
                f"got {len(create_statements)}"
            )

        return create_statements[0], extra_statements

    async def _dump_records(self, records: StatementResult, table: str) -> int:
        """Write one INSERT statement per row, as rows arrive."""
        target = self._insert_target(table)

        rows_dumped = 0
        async for row in records.rows:
            if row.error is not None:
                raise row.error

            values = ", ".join(format_row(row.values, RenderMode.SQL_LITERAL))
            self._write(f"INSERT INTO {target} VALUES ({values});")
            rows_dumped += 1

        logging.debug(f"Wrote {rows_dumped} row(s) for table '{table}'")
        return rows_dumped
