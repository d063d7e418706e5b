"""
Value kinds and conversions.

Settings hold one of four scalar kinds. Backing stores are untyped (an INI
file hands everything back as text), so every read converts the raw value
to the kind the caller asked for through coerce(). Each conversion is
explicit; anything outside the table fails with ConversionError.
"""

from datetime import datetime
from enum import Enum
from typing import Any

from ..errors import ConversionError

_TRUE_STRINGS = ("true", "1")
_FALSE_STRINGS = ("false", "0")


class ValueKind(Enum):
    """Supported setting value kinds."""
    TEXT = "text"
    BOOL = "bool"
    NUMBER = "number"
    TIMESTAMP = "timestamp"


def kind_of(value: Any) -> ValueKind:
    """
    Return the kind of a Python value.

    Args:
        value: str, bool, int, float or datetime

    Returns:
        Matching ValueKind

    Raises:
        ConversionError: If the value's type is not supported
    """
    # bool is a subclass of int, check it first
    if isinstance(value, bool):
        return ValueKind.BOOL
    if isinstance(value, str):
        return ValueKind.TEXT
    if isinstance(value, (int, float)):
        return ValueKind.NUMBER
    if isinstance(value, datetime):
        return ValueKind.TIMESTAMP
    raise ConversionError(f"Unsupported setting value type: {type(value).__name__}")


def _as_float(value: Any) -> float:
    try:
        return float(value)
    except OverflowError as e:
        raise ConversionError("Number is too large for a float") from e


def normalize(value: Any) -> Any:
    """Return ``value`` in its canonical stored form (ints widen to float)."""
    kind = kind_of(value)
    if kind is ValueKind.NUMBER:
        return _as_float(value)
    return value


def to_text(value: Any) -> str:
    """
    Convert a supported value to its text representation.

    Booleans become "true"/"false", numbers repr(float), timestamps ISO-8601.
    """
    kind = kind_of(value)
    if kind is ValueKind.BOOL:
        return "true" if value else "false"
    if kind is ValueKind.NUMBER:
        return repr(_as_float(value))
    if kind is ValueKind.TIMESTAMP:
        return value.isoformat()
    return value


def coerce(raw: Any, kind: ValueKind) -> Any:
    """
    Convert a raw stored value to ``kind``.

    Args:
        raw: Value as returned by a backing store
        kind: Requested kind

    Returns:
        Value of the requested kind

    Raises:
        ConversionError: If raw cannot represent a value of that kind
    """
    if kind is ValueKind.TEXT:
        return _to_text_value(raw)
    if kind is ValueKind.BOOL:
        return _to_bool(raw)
    if kind is ValueKind.NUMBER:
        return _to_number(raw)
    if kind is ValueKind.TIMESTAMP:
        return _to_timestamp(raw)
    raise ConversionError(f"Unknown value kind: {kind!r}")


def _to_text_value(raw: Any) -> str:
    if isinstance(raw, str):
        return raw
    return to_text(raw)


def _to_bool(raw: Any) -> bool:
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, int) and raw in (0, 1):
        return bool(raw)
    if isinstance(raw, str):
        lowered = raw.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
    raise ConversionError(f"Cannot read {raw!r} as a boolean")


def _to_number(raw: Any) -> float:
    if isinstance(raw, bool):
        raise ConversionError(f"Cannot read boolean {raw!r} as a number")
    if isinstance(raw, (int, float)):
        return _as_float(raw)
    if isinstance(raw, str):
        try:
            return float(raw.strip())
        except (ValueError, OverflowError) as e:
            raise ConversionError(f"Cannot read {raw!r} as a number") from e
    raise ConversionError(f"Cannot read {type(raw).__name__} as a number")


def _to_timestamp(raw: Any) -> datetime:
    if isinstance(raw, datetime):
        return raw
    if isinstance(raw, str):
        try:
            return datetime.fromisoformat(raw.strip())
        except ValueError as e:
            raise ConversionError(f"Cannot read {raw!r} as a timestamp") from e
    raise ConversionError(f"Cannot read {type(raw).__name__} as a timestamp")
