#!/usr/bin/env python3
"""Unit tests for Duration, DurationUnit and DurationAccumulator."""
from datetime import timedelta
from fractions import Fraction

import pytest

from spoken_numbers.util.duration import (
    NANOS_PER_SECOND,
    Duration,
    DurationAccumulator,
    DurationUnit,
)

DAY = 86_400


class TestDurationUnit:
    """Test cases for unit lengths and ordering."""

    def test_fixed_units(self):
        assert DurationUnit.NANOSECOND.nanos() == 1
        assert DurationUnit.MICROSECOND.nanos() == 1_000
        assert DurationUnit.MILLISECOND.nanos() == 1_000_000
        assert DurationUnit.SECOND.nanos() == NANOS_PER_SECOND
        assert DurationUnit.MINUTE.nanos() == 60 * NANOS_PER_SECOND
        assert DurationUnit.HOUR.nanos() == 3_600 * NANOS_PER_SECOND
        assert DurationUnit.DAY.nanos() == DAY * NANOS_PER_SECOND
        assert DurationUnit.WEEK.nanos() == 7 * DAY * NANOS_PER_SECOND

    def test_calendar_units_use_a_365_day_year(self):
        year = 365 * DAY * NANOS_PER_SECOND
        assert DurationUnit.YEAR.nanos() == year
        assert DurationUnit.MONTH.nanos() == Fraction(year, 12)
        assert DurationUnit.DECADE.nanos() == 10 * year
        assert DurationUnit.CENTURY.nanos() == 100 * year
        assert DurationUnit.MILLENNIUM.nanos() == 1000 * year

    def test_custom_days_per_year(self):
        assert DurationUnit.YEAR.nanos(365.25) == Fraction(36525, 100) * DAY * NANOS_PER_SECOND
        assert DurationUnit.MONTH.nanos(360) == 30 * DAY * NANOS_PER_SECOND
        with pytest.raises(ValueError):
            DurationUnit.YEAR.nanos(0)

    def test_units_are_ordered_by_length(self):
        units = list(DurationUnit)
        assert units == sorted(units)
        assert DurationUnit.MONTH < DurationUnit.YEAR
        assert DurationUnit.MILLENNIUM > DurationUnit.CENTURY

    def test_every_unit_is_positive(self):
        for unit in DurationUnit:
            assert unit.nanos() > 0, f"{unit} should have a positive length"


class TestDuration:
    """Test cases for the Duration value type."""

    def test_normalizes_nanos(self):
        assert Duration.of(1, 1_500_000_000) == Duration(2, 500_000_000)
        assert Duration.of(0, -1) == Duration(-1, 999_999_999)

    def test_rejects_out_of_range_nanos(self):
        with pytest.raises(ValueError):
            Duration(0, NANOS_PER_SECOND)
        with pytest.raises(ValueError):
            Duration(0, -1)

    def test_of_unit_handles_huge_values(self):
        duration = Duration.of_unit(3_000_000_000, DurationUnit.YEAR)
        assert duration.seconds == 3_000_000_000 * 365 * DAY
        assert duration.nanos == 0

    def test_of_unit_rounds_half_up_to_nanos(self):
        assert Duration.of_unit(Fraction(1, 2), DurationUnit.NANOSECOND) == Duration(0, 1)
        assert Duration.of_unit(Fraction(1, 3), DurationUnit.SECOND) == Duration(0, 333_333_333)

    def test_arithmetic(self):
        a = Duration.of(seconds=5)
        b = Duration.of(nanos=750_000_000)
        assert a + b == Duration(5, 750_000_000)
        assert a - b == Duration(4, 250_000_000)
        assert -b == Duration(-1, 250_000_000)
        assert (a - a).is_zero()
        assert Duration.ZERO.is_zero()

    def test_zero_is_a_value_not_absence(self):
        # "no duration" is None, a zero duration is an ordinary truthy result
        assert Duration.ZERO
        assert Duration.of(5) - Duration.of(5)

    def test_ordering(self):
        assert Duration.of(1) < Duration.of(1, 1) < Duration.of(2)
        assert Duration.of(-1) < Duration.ZERO

    def test_timedelta_conversion(self):
        delta = timedelta(days=1, seconds=5, microseconds=7)
        duration = Duration.from_timedelta(delta)
        assert duration == Duration(DAY + 5, 7_000)
        assert duration.to_timedelta() == delta

    def test_timedelta_overflow(self):
        with pytest.raises(OverflowError):
            Duration.of_unit(3_000_000_000, DurationUnit.YEAR).to_timedelta()

    def test_str(self):
        assert str(Duration.of(5)) == "5s"
        assert str(Duration.of(1, 500_000_000)) == "1.5s"
        assert str(-Duration.of(1, 500_000_000)) == "-1.5s"
        assert str(Duration.of(0, 1)) == "0.000000001s"


class TestDurationAccumulator:
    """Test cases for the exact accumulator."""

    def test_empty(self):
        accumulator = DurationAccumulator()
        assert accumulator.empty
        assert accumulator.result() == Duration.ZERO

    def test_sums_groups_exactly(self):
        accumulator = DurationAccumulator()
        accumulator.add(20, DurationUnit.MINUTE)
        accumulator.add(36, DurationUnit.SECOND)
        accumulator.add(Fraction(1, 10), DurationUnit.MILLISECOND)
        assert not accumulator.empty
        assert accumulator.groups == 3
        assert accumulator.result() == Duration(20 * 60 + 36, 100_000)

    def test_fractional_nanos_carry(self):
        accumulator = DurationAccumulator()
        for _ in range(3):
            accumulator.add(Fraction(1, 3), DurationUnit.NANOSECOND)
        assert accumulator.result() == Duration(0, 1)

    def test_months_add_up_to_a_year(self):
        accumulator = DurationAccumulator()
        accumulator.add(12, DurationUnit.MONTH)
        assert accumulator.result() == Duration.of_unit(1, DurationUnit.YEAR)
