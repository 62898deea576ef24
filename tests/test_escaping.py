"""
Unit tests for escaping.py
"""

import pytest

from libsql_shell.escaping import escape_single_quotes, needs_escaping


class TestNeedsEscaping:
    """Tests for needs_escaping."""

    @pytest.mark.parametrize("identifier", ["users", "order items", 'say"hi"', ""])
    def test_plain_identifiers(self, identifier):
        assert needs_escaping(identifier) is False

    @pytest.mark.parametrize("identifier", ["o'clock", "'", "a''b"])
    def test_single_quote(self, identifier):
        assert needs_escaping(identifier) is True


class TestEscapeSingleQuotes:
    """Tests for escape_single_quotes."""

    def test_no_quotes(self):
        assert escape_single_quotes("users") == "users"

    def test_doubles_quotes(self):
        assert escape_single_quotes("o'clock") == "o''clock"
        assert escape_single_quotes("''") == "''''"

    @pytest.mark.parametrize("text", ["'", "it's", "a'b'c"])
    def test_not_idempotent(self, text):
        once = escape_single_quotes(text)
        assert escape_single_quotes(once) != once
