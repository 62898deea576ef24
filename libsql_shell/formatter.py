"""
Conversion of driver values into table cells and SQL literal text.
"""

import base64
import binascii
import math
from datetime import datetime
from decimal import Decimal
from typing import Any, Callable, Iterable, Mapping

from .errors import Base64DecodeError, UnsupportedTypeError
from .models import EncodedBlob, NullableKind, NullableValue, RenderMode

NULL_TEXT = {
    RenderMode.DISPLAY: "NULL",
    RenderMode.SQL_LITERAL: "NULL",
}

BASE64_FIELD = "base64"
TIME_FORMAT = "{0.year:04d}-{0.month:02d}-{0.day:02d} {0.hour:02d}:{0.minute:02d}:{0.second:02d}"


def _format_float(value: float) -> str:
    """Shortest round-tripping digits in positional notation."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    return format(Decimal(repr(float(value))).normalize(), "f")


# Checked in order: bool must precede int.
_SCALAR_FORMATTERS: dict[type, Callable[[Any], str]] = {
    bool: lambda v: "true" if v else "false",
    int: lambda v: str(int(v)),
    float: _format_float,
    str: str,
}


def format_bytes(data: bytes) -> str:
    """Render bytes as an uppercase hex blob, e.g. ``0x00FF``."""
    return "0x" + bytes(data).hex().upper()


def _format_scalar(value: Any) -> str:
    # Fast path: exact type lookup
    formatter = _SCALAR_FORMATTERS.get(type(value))
    if formatter:
        return formatter(value)

    for scalar_type, formatter in _SCALAR_FORMATTERS.items():
        if isinstance(value, scalar_type):
            return formatter(value)

    raise UnsupportedTypeError(f"unsupported raw type: {type(value).__name__}")


def _format_time(value: datetime) -> str:
    return TIME_FORMAT.format(value)


# Payload types accepted for each declared kind, and how they render.
_NULLABLE_FORMATTERS: dict[NullableKind, tuple[tuple[type, ...], Callable[[Any], str]]] = {
    NullableKind.BOOL: ((bool,), _SCALAR_FORMATTERS[bool]),
    NullableKind.FLOAT64: ((float, int), lambda v: _format_float(float(v))),
    NullableKind.BYTE: ((int,), _SCALAR_FORMATTERS[int]),
    NullableKind.INT16: ((int,), _SCALAR_FORMATTERS[int]),
    NullableKind.INT32: ((int,), _SCALAR_FORMATTERS[int]),
    NullableKind.INT64: ((int,), _SCALAR_FORMATTERS[int]),
    NullableKind.STRING: ((str,), str),
    NullableKind.TIME: ((datetime,), _format_time),
}


def _format_nullable(value: NullableValue, mode: RenderMode) -> str:
    if not value.valid:
        return NULL_TEXT[mode]

    try:
        kind = NullableKind(value.kind)
    except ValueError:
        raise UnsupportedTypeError(f"unsupported struct type: {value.kind}") from None

    accepted, formatter = _NULLABLE_FORMATTERS[kind]
    payload = value.payload
    # bool is an int subclass; only the bool kind takes it
    if not isinstance(payload, accepted) or (
        isinstance(payload, bool) and kind is not NullableKind.BOOL
    ):
        raise UnsupportedTypeError(
            f"unsupported {kind.value} payload: {type(payload).__name__}"
        )
    return formatter(payload)


def decode_base64(encoded: str) -> bytes:
    """Decode standard-alphabet base64 written without padding.

    Line breaks in the input are ignored.
    """
    encoded = encoded.replace("\r", "").replace("\n", "")
    if "=" in encoded:
        raise Base64DecodeError(
            "unable to decode base64 value: unexpected padding character"
        )
    try:
        return base64.b64decode(encoded + "=" * (-len(encoded) % 4), validate=True)
    except (binascii.Error, ValueError) as e:
        raise Base64DecodeError(f"unable to decode base64 value: {e}") from e


def _format_encoded_blob(fields: Mapping[str, Any]) -> str:
    encoded = fields.get(BASE64_FIELD)
    if encoded is None:
        raise UnsupportedTypeError('unsupported map: no "base64" field')
    if not isinstance(encoded, str):
        raise UnsupportedTypeError('unsupported map. unsupported "base64" field kind')
    return format_bytes(decode_base64(encoded))


def format_value(value: Any, mode: RenderMode = RenderMode.DISPLAY) -> str:
    """
    Format a single driver value.

    Strings are returned verbatim in both modes; quoting text for SQL is left
    to the caller.

    Raises:
        UnsupportedTypeError: The value matches no known representation.
        Base64DecodeError: An encoded blob carries malformed base64.
    """
    if value is None:
        return NULL_TEXT[mode]
    if isinstance(value, NullableValue):
        return _format_nullable(value, mode)
    if isinstance(value, (bytes, bytearray, memoryview)):
        return format_bytes(value)
    if isinstance(value, EncodedBlob):
        return _format_encoded_blob(value.fields)
    if isinstance(value, Mapping):
        return _format_encoded_blob(value)

    try:
        return _format_scalar(value)
    except UnsupportedTypeError:
        raise UnsupportedTypeError(f"unsupported type: {type(value).__name__}") from None


def format_row(values: Iterable[Any], mode: RenderMode = RenderMode.DISPLAY) -> list[str]:
    """Format every value of a row; the first failure aborts the row."""
    return [format_value(value, mode) for value in values]
