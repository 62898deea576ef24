"""
Printing of statement results as plain text tables.
"""

from typing import Sequence, TextIO

import tabulate

from .errors import InvalidStatementsResult, UnableToPrintStatementResult
from .formatter import format_row
from .models import RenderMode, StatementResult, StatementsResult

TABLE_FORMAT = "plain"

# Cells are shown exactly as formatted, surrounding whitespace included.
tabulate.PRESERVE_WHITESPACE = True


def format_header(name: str) -> str:
    """Auto-format a column name for display, e.g. ``user_id`` -> ``USER ID``."""
    formatted = name.replace("_", " ").strip()
    if not formatted and name:
        formatted = " "
    return formatted.upper()


def render_table(
    out_f: TextIO,
    header: Sequence[str] | None,
    data: Sequence[Sequence[str]]
) -> None:
    """Render rows of pre-formatted cells, left aligned, without borders."""
    if header:
        text = tabulate.tabulate(
            data,
            headers=[format_header(name) for name in header],
            tablefmt=TABLE_FORMAT,
            stralign="left",
            disable_numparse=True,
        )
    else:
        text = tabulate.tabulate(
            data,
            tablefmt=TABLE_FORMAT,
            stralign="left",
            disable_numparse=True,
        )

    if text:
        out_f.write(text + "\n")


async def print_statements_result(
    statements_result: StatementsResult,
    out_f: TextIO,
    without_header: bool = False
) -> None:
    """Print every statement result in order, stopping at the first error."""
    if statements_result.statements is None:
        raise InvalidStatementsResult()

    async for statement_result in statements_result.statements:
        if statement_result.error is not None:
            raise statement_result.error

        await print_statement_result(statement_result, out_f, without_header)


async def print_statement_result(
    statement_result: StatementResult,
    out_f: TextIO,
    without_header: bool = False
) -> None:
    """
    Print the rows of one statement as a table.

    Statements without columns print nothing. A row or formatting error is
    raised before anything of this statement is written.
    """
    if statement_result.rows is None:
        raise UnableToPrintStatementResult()

    if not statement_result.columns:
        return

    data = []
    async for row in statement_result.rows:
        if row.error is not None:
            raise row.error
        data.append(format_row(row.values, RenderMode.DISPLAY))

    header = None if without_header else statement_result.columns
    render_table(out_f, header, data)


def print_table(out_f: TextIO, header: Sequence[str], data: Sequence[Sequence[str]]) -> None:
    """Print an already formatted table with a header."""
    render_table(out_f, header, data)


def print_error(err: Exception, err_f: TextIO) -> None:
    err_f.write(f"Error: {err}\n")
