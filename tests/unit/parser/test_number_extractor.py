#!/usr/bin/env python3
"""Unit tests for the number-word grammar.

Each case extracts the number at the start of the input and checks its exact
value, flags and how many tokens it consumed.
"""
from fractions import Fraction as F

import pytest

from spoken_numbers.parser.number_extractor import ExtractedNumber, extract_number
from spoken_numbers.parser.token_stream import TokenStream


def _check(extract_number_from, test_cases, **kwargs):
    for input_text, expected, expected_end in test_cases:
        number, stream = extract_number_from(input_text, **kwargs)
        actual = None if number is None else number.value
        assert actual == expected, f"Input '{input_text}' should extract to '{expected}', got '{actual}'"
        assert stream.position == expected_end, f"'{input_text}' should stop at token {expected_end}, stopped at {stream.position}"


class TestCardinals:
    """Whole numbers spelled with words or digits."""

    def test_words_below_thousand(self, extract_number_from):
        test_cases = [
            ("zero", 0, 1),
            ("seven", 7, 1),
            ("thirteen", 13, 1),
            ("twenty three", 23, 2),
            ("twenty-three", 23, 3),
            ("ninety", 90, 1),
            ("three hundred", 300, 2),
            ("a hundred", 100, 2),
            ("one hundred and five", 105, 4),
            ("nine hundred ninety nine", 999, 4),
            ("nineteen hundred and five", 1905, 4),
        ]
        _check(extract_number_from, test_cases)

    def test_magnitudes(self, extract_number_from):
        test_cases = [
            ("a million", 10**6, 2),
            ("a thousand and one", 1001, 4),
            ("two thousand five hundred and six", 2506, 6),
            ("twenty one thousand", 21_000, 3),
            ("five hundred thousand", 500_000, 3),
            ("one million two thousand", 1_002_000, 4),
            ("one million, two hundred thousand and three", 1_200_003, 8),
            ("one thousand million", 10**9, 3),
            ("three billion", 3 * 10**9, 2),
        ]
        _check(extract_number_from, test_cases)

    def test_digit_literals(self, extract_number_from):
        test_cases = [
            ("18", 18, 1),
            ("1,000", 1000, 1),
            ("1.5", F(3, 2), 1),
            ("5 hundred", 500, 2),
            ("5 million", 5 * 10**6, 2),
            ("1.5 million", 1_500_000, 2),
            ("5-3", 5, 1),
        ]
        _check(extract_number_from, test_cases)

    def test_juxtaposed_groups(self, extract_number_from):
        test_cases = [
            ("seventeen twenty eight", 1728, 3),
            ("twenty twenty", 2020, 2),
            ("nineteen eighty four", 1984, 3),
            ("fifteen thousand", 15_000, 2),
        ]
        _check(extract_number_from, test_cases)

    def test_equal_magnitudes_are_separate_numbers(self, extract_number_from):
        _check(extract_number_from, [("one million two million", 10**6, 2)])

    def test_number_is_int_when_integral(self, extract_number_from):
        number, _ = extract_number_from("twenty three")
        assert number.number == 23
        assert isinstance(number.number, int)
        assert number.is_integer


class TestScale:
    """Short scale and long scale magnitude words."""

    def test_short_scale(self, extract_number_from):
        test_cases = [
            ("one billion", 10**9, 2),
            ("one trillion", 10**12, 2),
            ("two milliard", 2, 1),
        ]
        _check(extract_number_from, test_cases, short_scale=True)

    def test_long_scale(self, extract_number_from):
        test_cases = [
            ("one billion", 10**12, 2),
            ("one trillion", 10**18, 2),
            ("two milliard", 2 * 10**9, 2),
            ("one thousand million", 10**9, 3),
            ("one billion, two thousand million", 10**12 + 2 * 10**9, 6),
        ]
        _check(extract_number_from, test_cases, short_scale=False)


class TestOrdinals:
    """Ordinal words and suffixed digit literals."""

    def test_ordinals(self, extract_number_from):
        test_cases = [
            ("first", 1, 1),
            ("third", 3, 1),
            ("twelfth", 12, 1),
            ("twenty first", 21, 2),
            ("twenty second", 22, 2),
            ("one hundred and third", 103, 4),
            ("two hundredth", 200, 2),
            ("two thousandth", 2000, 2),
            ("18th", 18, 2),
            ("1st", 1, 2),
            ("22nd", 22, 2),
        ]
        for input_text, expected, expected_end in test_cases:
            number, stream = extract_number_from(input_text)
            assert number is not None and number.value == expected, (
                f"Input '{input_text}' should extract to '{expected}', got '{number and number.value}'"
            )
            assert number.ordinal, f"'{input_text}' should be an ordinal"
            assert stream.position == expected_end

    def test_ordinals_not_allowed(self, extract_number_from):
        test_cases = [
            ("first", None, 0),
            ("twenty first", 20, 1),
            ("two hundredth", 2, 1),
            ("18th", 18, 1),
        ]
        _check(extract_number_from, test_cases, ordinals_allowed=False)

        number, _ = extract_number_from("18th", ordinals_allowed=False)
        assert not number.ordinal

    def test_ambiguous_second(self, extract_number_from):
        number, stream = extract_number_from("second")
        assert number is None
        assert stream.position == 0

        number, _ = extract_number_from("second", prefer_ordinal=True)
        assert number.value == 2
        assert number.ordinal

        # inside a compound "second" can only be an ordinal
        number, _ = extract_number_from("forty second")
        assert number.value == 42
        assert number.ordinal


class TestFractions:
    """Fraction words, mixed fractions and fractions of magnitudes."""

    def test_fractions(self, extract_number_from):
        test_cases = [
            ("half", F(1, 2), 1),
            ("a quarter", F(1, 4), 2),
            ("a third", F(1, 3), 2),
            ("a hundredth", F(1, 100), 2),
            ("one tenth", F(1, 10), 2),
            ("two tenths", F(2, 10), 2),
            ("three quarters", F(3, 4), 2),
            ("one hundredth", F(1, 100), 2),
            ("one thousandth", F(1, 1000), 2),
            ("one and a half", F(3, 2), 4),
            ("two and three quarters", F(11, 4), 4),
            ("half a million", 500_000, 3),
        ]
        _check(extract_number_from, test_cases)

    def test_fractions_are_not_ordinals(self, extract_number_from):
        number, _ = extract_number_from("one tenth")
        assert not number.ordinal
        assert not number.is_integer
        assert number.number == 0.1

    def test_fraction_denominator_scale(self, extract_number_from):
        _check(extract_number_from, [("one billionth", F(1, 10**9), 2)], short_scale=True)
        _check(extract_number_from, [("one billionth", F(1, 10**12), 2)], short_scale=False)

    def test_singular_denominator_needs_numerator_one(self, extract_number_from):
        _check(extract_number_from, [("two tenth", 2, 1)], ordinals_allowed=False)

    def test_second_is_not_a_denominator(self, extract_number_from):
        _check(extract_number_from, [("one second", 1, 1)])


class TestDecimals:
    """Decimal marker followed by digit words or digits."""

    def test_decimals(self, extract_number_from):
        test_cases = [
            ("point five", F(1, 2), 2),
            ("point three four", F(34, 100), 3),
            ("one point two", F(6, 5), 3),
            ("one point 2", F(6, 5), 3),
            ("one point two five", F(5, 4), 4),
            ("two point five million", 2_500_000, 4),
            ("three point", 3, 1),
        ]
        _check(extract_number_from, test_cases)


class TestSignsAndApproximations:
    """Negative markers and approximate counts."""

    def test_negative(self, extract_number_from):
        test_cases = [
            ("minus five", -5, 2),
            ("negative three quarters", F(-3, 4), 3),
            ("-5", -5, 2),
            ("minus", None, 0),
        ]
        _check(extract_number_from, test_cases)

    def test_negative_ordinal_is_not_a_number(self, extract_number_from):
        _check(extract_number_from, [("minus first", None, 0)])

    def test_approximators(self, extract_number_from):
        test_cases = [
            ("a couple", 2, 2),
            ("a pair", 2, 2),
            ("few", 3, 1),
            ("a few", 3, 2),
        ]
        _check(extract_number_from, test_cases)
        for input_text, _, _ in test_cases:
            number, _ = extract_number_from(input_text)
            assert number.approximate, f"'{input_text}' should be approximate"

        number, _ = extract_number_from("two")
        assert not number.approximate


class TestNoNumber:
    """Inputs that do not start with a number leave the cursor untouched."""

    def test_no_number(self, extract_number_from):
        test_cases = [
            ("hello", None, 0),
            ("and", None, 0),
            ("the", None, 0),
            ("a", None, 0),
            ("a dog", None, 0),
            ("hundred", None, 0),
            ("point", None, 0),
            ("", None, 0),
        ]
        _check(extract_number_from, test_cases)

    def test_cursor_in_the_middle(self, vocabulary):
        stream = TokenStream("I have twenty three apples")
        stream.skip(2)
        number = extract_number(stream, vocabulary=vocabulary)
        assert (number.value, number.start, number.end) == (23, 2, 4)
        assert stream.peek().text == "apples"

        assert extract_number(stream, vocabulary=vocabulary) is None
        assert stream.position == 4


class TestExtractedNumber:
    """The result value object."""

    def test_empty_span_rejected(self):
        with pytest.raises(ValueError):
            ExtractedNumber(F(1), 3, 3)

    def test_float_value(self):
        assert ExtractedNumber(F(5, 4), 0, 1).number == 1.25
