"""
Integer money helpers.

Every amount is a whole number of minor currency units (e.g. yen). No floating
point is used anywhere, so shares and balances always add up exactly.
"""
from decimal import Decimal
from typing import List

from tripsplit.core.exceptions import InvalidAmount

Amount = int


def to_amount(value, field: str = "amount") -> Amount:
    """
    Coerce a value to a non-negative integer amount.

    Accepts ``int`` and integral ``Decimal`` (as returned by ``Numeric``
    columns). Rejects ``bool``, ``float``, fractional decimals and negatives.
    """
    if isinstance(value, bool) or value is None:
        raise InvalidAmount(f"{field} must be an integer, got {value!r}")
    if isinstance(value, Decimal):
        if value != value.to_integral_value():
            raise InvalidAmount(f"{field} must be a whole number of minor units, got {value}")
        value = int(value)
    if not isinstance(value, int):
        raise InvalidAmount(f"{field} must be an integer, got {value!r}")
    if value < 0:
        raise InvalidAmount(f"{field} must not be negative, got {value}")
    return value


def split_evenly(total: Amount, count: int) -> List[Amount]:
    """
    Split ``total`` into ``count`` parts that sum exactly to ``total``.

    Each part gets ``total // count``; the first ``total % count`` parts get
    one extra unit.
    """
    if count <= 0:
        raise ValueError("count must be positive")
    base, leftover = divmod(total, count)
    return [base + 1 if i < leftover else base for i in range(count)]


def percentage_of(total: Amount, percent: int) -> Amount:
    """Floor of ``total * percent / 100``."""
    return total * percent // 100
