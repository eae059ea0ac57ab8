"""
Exact-decimal helpers for currency and percentage values.

Money is never handled as float: amounts and percentages are Decimals
quantized to two places with half-up rounding (33.335 -> 33.34).
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional, Union

TWO_PLACES = Decimal("0.01")
ZERO = Decimal("0.00")
HUNDRED = Decimal("100")

# Reconciliation slack: differences strictly below one cent are balanced
BALANCE_TOLERANCE = Decimal("0.01")

Number = Union[Decimal, int, str]


def to_decimal(value: Optional[Number]) -> Decimal:
    """Coerce a DB/request value into a Decimal. None becomes 0.00."""
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        # floats only come from SQLite aggregates; go through str to keep the printed value
        return Decimal(str(value))
    return Decimal(value)


def quantize_money(value: Number) -> Decimal:
    return to_decimal(value).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def percent_of(amount: Number, percentage: Number) -> Decimal:
    """amount * percentage / 100, rounded half-up to cents."""
    return quantize_money(to_decimal(amount) * to_decimal(percentage) / HUNDRED)


def sum_money(values: Iterable[Number]) -> Decimal:
    total = ZERO
    for v in values:
        total += to_decimal(v)
    return quantize_money(total)
