"""
Scalar -> wire text.

The service only takes text. Field values and where-clause values are
both converted here:
    True  -> "true"
    12    -> "12"
    0.1   -> "0.1"   (never exponent form)
    date  -> "2013-03-26", datetime -> "2013-03-26 18:38:30"
    None  -> ""      (clears the field)
Strings pass through untouched, so a date given as a string is sent
exactly as written.
"""

from collections.abc import Mapping
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Any

from ..errors import ValidationError


def _format_decimal(value: Decimal) -> str:
    if not value.is_finite():
        raise ValidationError(f"Cannot send non-finite number {value!r}")
    return format(value, "f")


def to_text(value: Any) -> str:
    """Textual form of a value as the service expects it."""
    if value is None:
        return ""
    # Enum before str: str-valued enums are str subclasses
    if isinstance(value, Enum):
        return to_text(value.value)
    if isinstance(value, str):
        return value
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return _format_decimal(Decimal(repr(value)))
    if isinstance(value, Decimal):
        return _format_decimal(value)
    # datetime before date: datetime is a date subclass
    if isinstance(value, datetime):
        return value.isoformat(sep=" ")
    if isinstance(value, (date, time)):
        return value.isoformat()
    if isinstance(value, (bytes, bytearray, Mapping, list, tuple, set, frozenset)):
        raise ValidationError(
            f"Values must be scalars, got {type(value).__name__}"
        )
    return str(value)
