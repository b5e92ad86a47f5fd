"""
Money Utilities - Safe Decimal operations for monetary values.

Prices are stored in Rupiah. Arithmetic runs on Decimal and values are
converted to JSON numbers only at the API boundary.
"""
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Union

Number = Union[str, int, float, Decimal, None]

MONEY_PRECISION = Decimal("0.01")
INTEGER_PRECISION = Decimal("1")


def to_decimal(value: Number) -> Decimal:
    """
    Convert any value to Decimal safely.

    Returns:
        Decimal representation of the value, or Decimal("0") if None/invalid
    """
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    try:
        if isinstance(value, float):
            # Go through str to avoid binary float artifacts
            return Decimal(str(value))
        return Decimal(value)
    except (InvalidOperation, ValueError, TypeError):
        return Decimal("0")


def round_money(value: Number, to_int: bool = False) -> Decimal:
    """
    Round monetary value to appropriate precision (half up).

    Args:
        value: Value to round
        to_int: If True, round to whole Rupiah
    """
    precision = INTEGER_PRECISION if to_int else MONEY_PRECISION
    return to_decimal(value).quantize(precision, rounding=ROUND_HALF_UP)


def to_float(value: Number) -> float:
    """Convert to float for JSON serialization. Use only at API boundaries."""
    return float(to_decimal(value))


def to_json_number(value: Number) -> int | float:
    """Whole amounts become int, everything else a 2-decimal float."""
    rounded = round_money(value)
    if rounded == rounded.to_integral_value():
        return int(rounded)
    return float(rounded)


def multiply(value: Number, factor: Number) -> Decimal:
    """Safe multiplication of monetary value by a factor."""
    return to_decimal(value) * to_decimal(factor)


def divide(value: Number, divisor: Number) -> Decimal:
    """Safe division; dividing by zero yields 0."""
    d = to_decimal(divisor)
    if d == 0:
        return Decimal("0")
    return to_decimal(value) / d


def percent(value: Number, percent_value: Number) -> Decimal:
    """Calculate percentage of a monetary value."""
    return multiply(value, divide(percent_value, 100))


def format_rupiah(value: Number) -> str:
    """Format as "Rp 1.250.000" (dot thousands separator, no decimals)."""
    amount = int(round_money(value, to_int=True))
    sign = "-" if amount < 0 else ""
    return f"{sign}Rp {abs(amount):,}".replace(",", ".")
