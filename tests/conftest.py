"""
Shared fixtures: hand-built statement streams and a scripted connection.
"""

import pytest

from libsql_shell.models import RowResult, StatementResult, StatementsResult


async def iterate(items):
    for item in items:
        yield item


def make_statement(columns, rows=(), row_error=None):
    """Build a statement result whose row stream yields ``rows``, then ``row_error``."""
    results = [RowResult(values=list(row)) for row in rows]
    if row_error is not None:
        results.append(RowResult(error=row_error))
    return StatementResult(columns=list(columns), rows=iterate(results))


class ScriptedConnection:
    """Answers queries with statement results built by ``handler(query)``."""

    def __init__(self, handler):
        self.handler = handler
        self.queries = []

    async def execute_statements(self, sql):
        self.queries.append(sql)
        return StatementsResult(statements=iterate(self.handler(sql)))


@pytest.fixture
def statement():
    """Factory for statement results."""
    return make_statement


@pytest.fixture
def scripted_connection():
    """Factory for connections answering from a handler function."""
    return ScriptedConnection


@pytest.fixture
def statements():
    """Factory for a statements result streaming the given statement results."""
    def build(results):
        return StatementsResult(statements=iterate(results))
    return build
