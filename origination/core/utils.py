from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

CENT = Decimal("0.01")
ZERO = Decimal("0")


def round_money(value: Decimal) -> Decimal:
    """
    Rounds a monetary amount to cents, half away from zero.
    1.005 -> 1.01, -1.005 -> -1.01
    """
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def round_whole(value: Decimal) -> int:
    """Rounds to the nearest integer, half away from zero."""
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def sum_money(values: Iterable[Decimal]) -> Decimal:
    return round_money(sum(values, ZERO))
