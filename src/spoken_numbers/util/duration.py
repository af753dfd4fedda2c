"""Duration units, an arbitrary-magnitude duration value and the accumulator
used while grouping ``number + unit`` pairs."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from fractions import Fraction
from functools import total_ordering
from numbers import Real
from typing import Union

from spoken_numbers.util.utils import round_to_long

__all__ = [
    "DEFAULT_DAYS_PER_YEAR",
    "NANOS_PER_SECOND",
    "Duration",
    "DurationAccumulator",
    "DurationUnit",
]

NANOS_PER_SECOND = 1_000_000_000
NANOS_PER_MINUTE = 60 * NANOS_PER_SECOND
NANOS_PER_HOUR = 60 * NANOS_PER_MINUTE
NANOS_PER_DAY = 24 * NANOS_PER_HOUR

# One year is this many days, one month is a twelfth of it
DEFAULT_DAYS_PER_YEAR = 365

Count = Union[int, Fraction, Real]


def _exact(value: Count) -> Fraction:
    if isinstance(value, float):
        return Fraction(str(value))
    return Fraction(value)


@total_ordering
class DurationUnit(Enum):
    """Units a duration phrase can be expressed in, smallest first."""

    NANOSECOND = "nanosecond"
    MICROSECOND = "microsecond"
    MILLISECOND = "millisecond"
    SECOND = "second"
    MINUTE = "minute"
    HOUR = "hour"
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"
    DECADE = "decade"
    CENTURY = "century"
    MILLENNIUM = "millennium"

    def nanos(self, days_per_year: Count = DEFAULT_DAYS_PER_YEAR) -> Fraction:
        """Length of one unit in nanoseconds."""
        fixed = _FIXED_NANOS.get(self)
        if fixed is not None:
            return Fraction(fixed)
        if days_per_year <= 0:
            raise ValueError(f"days_per_year must be positive, got {days_per_year}")
        return _exact(days_per_year) * NANOS_PER_DAY * _YEAR_FRACTIONS[self]

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, DurationUnit):
            return NotImplemented
        return self.nanos() < other.nanos()


_FIXED_NANOS = {
    DurationUnit.NANOSECOND: 1,
    DurationUnit.MICROSECOND: 1_000,
    DurationUnit.MILLISECOND: 1_000_000,
    DurationUnit.SECOND: NANOS_PER_SECOND,
    DurationUnit.MINUTE: NANOS_PER_MINUTE,
    DurationUnit.HOUR: NANOS_PER_HOUR,
    DurationUnit.DAY: NANOS_PER_DAY,
    DurationUnit.WEEK: 7 * NANOS_PER_DAY,
}

_YEAR_FRACTIONS = {
    DurationUnit.MONTH: Fraction(1, 12),
    DurationUnit.YEAR: Fraction(1),
    DurationUnit.DECADE: Fraction(10),
    DurationUnit.CENTURY: Fraction(100),
    DurationUnit.MILLENNIUM: Fraction(1000),
}


@dataclass(frozen=True, order=True)
class Duration:
    """A signed duration of ``seconds`` plus ``nanos`` in ``[0, 1e9)``.

    Unlike :class:`datetime.timedelta` it has nanosecond resolution and no
    upper bound, so "three billion years" is representable.
    """

    seconds: int = 0
    nanos: int = 0

    def __post_init__(self) -> None:
        if not isinstance(self.seconds, int) or not isinstance(self.nanos, int):
            raise TypeError("Duration seconds and nanos must be integers")
        if not 0 <= self.nanos < NANOS_PER_SECOND:
            raise ValueError(f"nanos must be in [0, {NANOS_PER_SECOND}), got {self.nanos}")

    @classmethod
    def of(cls, seconds: int = 0, nanos: int = 0) -> "Duration":
        """Build a duration, carrying any nanos overflow (or negative nanos) into seconds."""
        return cls.from_nanos(seconds * NANOS_PER_SECOND + nanos)

    @classmethod
    def from_nanos(cls, total_nanos: Count) -> "Duration":
        """Build a duration from a (possibly fractional) nanosecond count, rounding half away from zero."""
        whole = total_nanos if isinstance(total_nanos, int) else round_to_long(_exact(total_nanos))
        seconds, nanos = divmod(whole, NANOS_PER_SECOND)
        return cls(seconds, nanos)

    @classmethod
    def from_seconds(cls, seconds: Count) -> "Duration":
        return cls.from_nanos(_exact(seconds) * NANOS_PER_SECOND)

    @classmethod
    def from_timedelta(cls, delta: timedelta) -> "Duration":
        return cls.of(delta.days * 86_400 + delta.seconds, delta.microseconds * 1_000)

    @classmethod
    def of_unit(cls, count: Count, unit: DurationUnit, days_per_year: Count = DEFAULT_DAYS_PER_YEAR) -> "Duration":
        return cls.from_nanos(_exact(count) * unit.nanos(days_per_year))

    @property
    def total_nanos(self) -> int:
        return self.seconds * NANOS_PER_SECOND + self.nanos

    def total_seconds(self) -> float:
        return self.seconds + self.nanos / NANOS_PER_SECOND

    def is_zero(self) -> bool:
        return self.seconds == 0 and self.nanos == 0

    def is_negative(self) -> bool:
        return self.seconds < 0

    def to_timedelta(self) -> timedelta:
        """Convert to a timedelta, truncating to microseconds.

        Raises:
            OverflowError: if the duration is outside the timedelta range
        """
        return timedelta(seconds=self.seconds, microseconds=self.nanos // 1_000)

    def __add__(self, other: object) -> "Duration":
        if not isinstance(other, Duration):
            return NotImplemented
        return Duration.from_nanos(self.total_nanos + other.total_nanos)

    def __sub__(self, other: object) -> "Duration":
        if not isinstance(other, Duration):
            return NotImplemented
        return Duration.from_nanos(self.total_nanos - other.total_nanos)

    def __neg__(self) -> "Duration":
        return Duration.from_nanos(-self.total_nanos)

    def __str__(self) -> str:
        sign = "-" if self.total_nanos < 0 else ""
        whole, rest = divmod(abs(self.total_nanos), NANOS_PER_SECOND)
        if rest == 0:
            return f"{sign}{whole}s"
        return f"{sign}{whole}.{rest:09d}".rstrip("0") + "s"


Duration.ZERO = Duration()


class DurationAccumulator:
    """Sums ``count x unit`` contributions exactly.

    The running value is kept as whole seconds plus sub-second nanoseconds in
    ``[0, 1e9)``; the nanoseconds may be fractional until :meth:`result`
    rounds them.
    """

    def __init__(self, days_per_year: Count = DEFAULT_DAYS_PER_YEAR):
        self.days_per_year = days_per_year
        self.seconds = 0
        self.nanos = Fraction(0)
        self.groups = 0

    def add(self, count: Count, unit: DurationUnit) -> None:
        contribution = _exact(count) * unit.nanos(self.days_per_year)
        carry, self.nanos = divmod(self.nanos + contribution, NANOS_PER_SECOND)
        self.seconds += int(carry)
        self.groups += 1

    @property
    def empty(self) -> bool:
        return self.groups == 0

    def result(self) -> Duration:
        return Duration.from_nanos(self.seconds * NANOS_PER_SECOND + self.nanos)
