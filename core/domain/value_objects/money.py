"""
Money helpers.

CRITICAL: Always use Decimal, never float! Every monetary value is rounded
half-up to 2 decimal places at each computation boundary.
"""
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

TWO_PLACES = Decimal("0.01")
ZERO = Decimal("0.00")


def to_decimal(value: Any, default: Decimal = ZERO) -> Decimal:
    """Coerce a raw value to a finite Decimal, falling back to ``default``."""
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            return default
    if not result.is_finite():
        return default
    return result


def round_money(value: Any) -> Decimal:
    """Round to 2 decimal places using half-up rounding."""
    return to_decimal(value).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def non_negative_money(value: Any) -> Decimal:
    """Round, then floor at zero."""
    return max(round_money(value), ZERO)
