"""Numeric helpers shared by the report views and the demo seed."""

from decimal import ROUND_HALF_UP, Decimal
from typing import Union


def round_half_up(value: Union[Decimal, float, int]) -> int:
    """Round to the nearest integer with ties going up (``2.5 -> 3``)."""
    return int(Decimal(value).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
