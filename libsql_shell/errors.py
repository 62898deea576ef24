"""
Exceptions raised by libsql-shell.
"""


class ShellError(Exception):
    """Base exception for libsql-shell."""

    pass


class InvalidStatementsResult(ShellError):
    """Raised when a statements result carries no statement stream."""

    def __init__(self, message: str = "missing statement result channel"):
        super().__init__(message)


class UnableToPrintStatementResult(ShellError):
    """Raised when a statement result carries no row stream."""

    def __init__(self, message: str = "unable to print statement result"):
        super().__init__(message)


class FormatError(ShellError):
    """Raised when a value cannot be formatted."""

    pass


class UnsupportedTypeError(FormatError):
    """Raised for values that match no known representation."""

    pass


class Base64DecodeError(FormatError):
    """Raised when a base64 blob cannot be decoded."""

    pass


class SchemaError(ShellError):
    """Raised when schema metadata rows have an unexpected shape."""

    pass


class MissingConnectionError(ShellError):
    """Raised when a command runs without a database connection."""

    def __init__(self, message: str = "missing db connection"):
        super().__init__(message)
