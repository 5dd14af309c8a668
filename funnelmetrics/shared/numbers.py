from __future__ import annotations

import math
from decimal import Decimal
from fractions import Fraction
from typing import Union

Number = Union[int, float, Fraction, Decimal]


def round_half_up(value: Number) -> int:
    """Round to the nearest integer, halves toward +infinity.

    Matches the rounding the dashboard has always displayed; ``round()``
    would send 2.5 to 2.
    """
    return math.floor(Fraction(value) + Fraction(1, 2))


def safe_ratio(numerator: int, denominator: int) -> int:
    """``round(numerator / denominator)`` in integer cents, 0 on a zero denominator."""
    if not denominator:
        return 0
    return round_half_up(Fraction(numerator, denominator))


def percent_string(numerator: int, denominator: int) -> str:
    """``numerator / denominator * 100`` as a one-decimal string, ``"0.0"`` on zero."""
    if not denominator:
        return "0.0"
    tenths = round_half_up(Fraction(numerator * 1000, denominator))
    return str(Decimal(tenths).scaleb(-1))


def one_decimal(value: Number) -> float:
    return round_half_up(Fraction(value) * 10) / 10
