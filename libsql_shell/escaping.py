"""
Quoting helpers for identifiers and text embedded in generated SQL.
"""


def needs_escaping(identifier: str) -> bool:
    """Return True if the identifier must be quoted when re-emitted."""
    return "'" in identifier


def escape_single_quotes(text: str) -> str:
    """Double every single quote. Applying it twice escapes twice."""
    return text.replace("'", "''")
