"""Money arithmetic with per-operation rounding to whole cents"""

import math
from decimal import Decimal, ROUND_HALF_UP, localcontext

CENT = Decimal("0.01")
WHOLE = Decimal("1")

# Enough digits to quantize the largest finite float (~1.8e308) to cents
DECIMAL_PRECISION = 400


def _quantize(value: float, exponent: Decimal) -> Decimal:
    with localcontext() as ctx:
        ctx.prec = DECIMAL_PRECISION
        return Decimal(repr(value)).quantize(exponent, rounding=ROUND_HALF_UP)


def round_money(amount: float) -> float:
    """
    Round a monetary value to 2 decimal places.

    Half-up on the cent boundary, symmetric for negatives:
    - 1.005  -> 1.01
    - -1.005 -> -1.01
    - 0.1 + 0.2 -> 0.3

    The float is converted through its shortest repr, so binary noise such as
    0.30000000000000004 never decides the rounding direction.
    NaN and infinities are returned unchanged.
    """
    if not math.isfinite(amount):
        return amount
    rounded = float(_quantize(amount, CENT))
    # Avoid handing out -0.0
    return rounded + 0.0


def round_percentage(value: float) -> int | float:
    """Round a percentage to the nearest whole number, halves away from zero"""
    if not math.isfinite(value):
        return value
    return int(_quantize(value, WHOLE))


def money_add(a: float, b: float) -> float:
    return round_money(a + b)


def money_subtract(a: float, b: float) -> float:
    return round_money(a - b)


def money_multiply(a: float, b: float) -> float:
    """Used for rate x quantity as well as amount x percentage fraction"""
    return round_money(a * b)


def money_equals(a: float, b: float) -> bool:
    """Equal once both sides are rounded to cents"""
    return round_money(a) == round_money(b)


def money_greater_than_or_equal(a: float, b: float) -> bool:
    return round_money(a) >= round_money(b)


def money_less_than(a: float, b: float) -> bool:
    return round_money(a) < round_money(b)
