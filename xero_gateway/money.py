"""Exact-precision helpers for monetary amounts and rates."""
from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Union

__all__ = ["parse_decimal", "format_decimal", "to_decimal"]

Number = Union[Decimal, int, float, str]


def parse_decimal(text: str) -> Decimal:
    """Return ``Decimal`` for *text* without any float rounding."""
    try:
        value = Decimal(text.strip())
    except (InvalidOperation, AttributeError) as exc:
        raise ValueError(f"invalid decimal: {text!r}") from exc
    if not value.is_finite():
        raise ValueError(f"invalid decimal: {text!r}")
    return value


def format_decimal(value: Number) -> str:
    """Render *value* in fixed-point notation (never ``1E+2``)."""
    if isinstance(value, float):
        # str() keeps the shortest repr, so 100.0 stays "100.0"
        value = Decimal(str(value))
    elif not isinstance(value, Decimal):
        value = Decimal(value)
    return format(value, "f")


def to_decimal(value: Number) -> Decimal:
    """Coerce *value* to ``Decimal``; floats go through ``str()`` first."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise TypeError("expected a number, got bool")
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, str):
        return parse_decimal(value)
    raise TypeError("expected a number, got " + type(value).__name__)
