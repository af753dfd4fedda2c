"""Numeric helpers and the duration value type."""

from .duration import Duration, DurationAccumulator, DurationUnit
from .utils import (
    WHOLE_NUMBER_ACCURACY,
    decimal_places_no_final_zeros,
    is_whole,
    long_pow,
    round_to_long,
    split_by_modulus,
    to_decimal,
)

__all__ = [
    "Duration",
    "DurationAccumulator",
    "DurationUnit",
    "WHOLE_NUMBER_ACCURACY",
    "decimal_places_no_final_zeros",
    "is_whole",
    "long_pow",
    "round_to_long",
    "split_by_modulus",
    "to_decimal",
]
