"""Monetary rounding helpers.

Every monetary figure that is stored or returned goes through ``round_money``
so that cent drift cannot accumulate over a growing transaction log.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Union

CENT = Decimal("0.01")
ZERO = Decimal("0.00")

MoneyLike = Union[Decimal, int, float, str]


def to_decimal(value: MoneyLike) -> Decimal:
    """Convert a number to Decimal without binary float artifacts.

    Floats are converted through their ``str`` form, so ``0.1`` becomes
    ``Decimal("0.1")`` rather than ``Decimal(0.1000000000000000055...)``.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise TypeError("Boolean is not a monetary value")
    if isinstance(value, (int, float)):
        return Decimal(str(value))
    return Decimal(value)


def round_money(value: MoneyLike) -> Decimal:
    """Round a monetary value to cents using round-half-up.

    Args:
        value: Amount to round

    Returns:
        Decimal with exactly two decimal places
    """
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)
