"""
Fixed-point helpers over decimal.Decimal.

Division and rescaling truncate toward zero at an explicit scale, the
same way exchange decimals behave. Addition, subtraction and
multiplication stay exact.
"""

from decimal import Decimal, DivisionByZero, ROUND_DOWN, localcontext
from typing import Union

ZERO = Decimal(0)
HUNDRED = Decimal(100)

Number = Union[Decimal, int, str]

# Enough digits that intermediate results of wallet-sized values stay exact
_PRECISION = 60


def to_decimal(value: Number) -> Decimal:
    """Convert an int, str or Decimal to Decimal. Floats are rejected."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        raise TypeError("use str or Decimal for fixed-point values, not float")
    return Decimal(value)


def to_scale(value: Decimal, scale: int) -> Decimal:
    """Truncate value to `scale` decimal places."""
    with localcontext() as ctx:
        ctx.prec = _PRECISION
        return value.quantize(Decimal(1).scaleb(-scale), rounding=ROUND_DOWN)


def div(x: Decimal, y: Decimal, scale: int) -> Decimal:
    """Divide x by y, truncating the quotient to `scale` places.

    Raises decimal.DivisionByZero (an ArithmeticError) when y is zero.
    """
    if y == 0:
        raise DivisionByZero("fixed-point division by zero")
    with localcontext() as ctx:
        ctx.prec = _PRECISION
        # Integer division truncates toward zero, so the quotient is exact
        quotient = x.scaleb(scale) // y
        return quotient.scaleb(-scale)


def dmin(*values: Decimal) -> Decimal:
    """Smallest of the given values, ZERO when called with none."""
    if not values:
        return ZERO
    return min(values)
