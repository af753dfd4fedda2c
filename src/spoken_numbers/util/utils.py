"""Numeric helpers shared by extraction and formatting."""
from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal, localcontext
from fractions import Fraction
from numbers import Real
from typing import Iterator

__all__ = [
    "WHOLE_NUMBER_ACCURACY",
    "decimal_places_no_final_zeros",
    "is_whole",
    "long_pow",
    "round_to_long",
    "split_by_modulus",
    "to_decimal",
]

WHOLE_NUMBER_ACCURACY = 0.0001


def is_whole(value: Real, accuracy: float = WHOLE_NUMBER_ACCURACY) -> bool:
    """True if ``value`` is closer than ``accuracy`` to an integer, or exactly integral.

    With ``accuracy == 0`` only exactly integral values are whole; ``+0`` and
    ``-0`` are always whole.
    """
    if accuracy < 0:
        raise ValueError(f"accuracy must not be negative, got {accuracy}")
    if isinstance(value, float) and not math.isfinite(value):
        return False

    distance = abs(value - round(value))
    return distance == 0 or distance < accuracy


def to_decimal(value: Real) -> Decimal:
    """Exact-as-possible Decimal for ints, floats (by their repr) and Fractions."""
    if isinstance(value, Fraction):
        return Decimal(value.numerator) / Decimal(value.denominator)
    if isinstance(value, float):
        return Decimal(repr(value))
    return Decimal(value)


def decimal_places_no_final_zeros(value: Real, max_places: int) -> int:
    """Number of decimal places (at most ``max_places``) needed to write ``value``
    rounded to ``max_places`` places, once final zeros are dropped.

    >>> decimal_places_no_final_zeros(4.9980, 3)
    3
    >>> decimal_places_no_final_zeros(24.9980, 2)
    0
    """
    if max_places < 0:
        raise ValueError(f"max_places must not be negative, got {max_places}")

    with localcontext() as ctx:
        ctx.prec = max_places + 64
        scaled = to_decimal(value).scaleb(max_places).to_integral_value(rounding=ROUND_HALF_UP)
    digits = abs(int(scaled))

    places = max_places
    while places > 0 and digits % 10 == 0:
        digits //= 10
        places -= 1
    return places


def long_pow(base: int, exponent: int) -> int:
    """Integer power, ``long_pow(0, 0) == 1``."""
    if exponent < 0:
        raise ValueError(f"exponent must not be negative, got {exponent}")

    result = 1
    for _ in range(exponent):
        result *= base
        if result == 0:
            break
    return result


def round_to_long(value: Real) -> int:
    """Round half away from zero: 0.5 -> 1, -0.5 -> -1, 10.6 -> 11."""
    if isinstance(value, Fraction):
        magnitude = math.floor(abs(value) + Fraction(1, 2))
        return magnitude if value >= 0 else -magnitude
    return int(Decimal(value).to_integral_value(rounding=ROUND_HALF_UP))


def split_by_modulus(number: int, modulus: int) -> Iterator[int]:
    """Lazily yield the base-``modulus`` groups of ``number``, least significant first.

    ``split_by_modulus(101220300040, 1000)`` yields 40, 300, 220, 101; zero
    yields nothing.
    """
    if modulus < 2:
        raise ValueError(f"modulus must be at least 2, got {modulus}")
    if number < 0:
        raise ValueError(f"number must not be negative, got {number}")

    def groups() -> Iterator[int]:
        remaining = number
        while remaining > 0:
            remaining, group = divmod(remaining, modulus)
            yield group

    return groups()
