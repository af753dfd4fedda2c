#!/usr/bin/env python3
"""English number and duration phrasing.

The output is the phrasing the extractors read back, so formatting and then
extracting a duration gives the same duration.
"""
from __future__ import annotations

import math
from datetime import timedelta
from decimal import Decimal
from fractions import Fraction
from numbers import Real
from typing import Iterable, Optional, Union

from spoken_numbers.util.duration import NANOS_PER_SECOND, Duration
from spoken_numbers.util.utils import decimal_places_no_final_zeros, is_whole, round_to_long, split_by_modulus
from spoken_numbers.vocabulary import Vocabulary, get_vocabulary

__all__ = ["EnglishFormatter"]

Number = Union[int, float, Fraction, Decimal]

# One spoken word: ("number", value) | ("hundred", 2) | ("magnitude", exponent) | ("text", word)
_Word = tuple[str, Union[int, str]]

_SECONDS_PER_DAY = 86_400


class EnglishFormatter:
    """Turns numbers and durations into English words."""

    def __init__(self, vocabulary: Optional[Vocabulary] = None):
        self.vocabulary = vocabulary or get_vocabulary("en")
        resources = self.vocabulary.formatter
        self.negative_word = resources.get("negative", "minus")
        self.decimal_marker = resources.get("decimal_marker", "point")
        self.hundred_connector = resources.get("hundred_connector", "and")
        self.mixed_connector = resources.get("mixed_fraction_connector", "and")
        self.fraction_article = resources.get("fraction_article", "a")
        self.duration_units = dict(resources.get("duration_units", {}))

    # ------------------------------------------------------------------
    # Numbers
    # ------------------------------------------------------------------

    def pronounce_number(
        self,
        number: Number,
        places: int = 2,
        short_scale: bool = True,
        ordinal: bool = False,
    ) -> str:
        """Spell out ``number``.

        Args:
            number: value to pronounce
            places: maximum decimal places, rounded half up, final zeros dropped
            short_scale: use short scale ("billion" = 1e9) or long scale ("billion" = 1e12)
            ordinal: pronounce an integral value as an ordinal ("twenty first")

        Returns:
            str: e.g. "minus four million, six hundred and nineteen"
        """
        value = _exact(number)
        places = decimal_places_no_final_zeros(value, places)
        scaled = round_to_long(abs(value) * 10 ** places)
        if scaled == 0:
            return self._pronounce_integer(0, short_scale, ordinal)

        integer, decimals = divmod(scaled, 10 ** places)
        text = self._pronounce_integer(integer, short_scale, ordinal and places == 0)
        if places:
            digits = " ".join(self.vocabulary.cardinal_word(int(digit)) for digit in f"{decimals:0{places}d}")
            text = f"{text} {self.decimal_marker} {digits}"
        if value < 0:
            text = f"{self.negative_word} {text}"
        return text

    def nice_number(
        self,
        number: Number,
        speech: bool = True,
        denominators: Iterable[int] = range(1, 21),
    ) -> str:
        """Format ``number`` as a mixed fraction when one of ``denominators`` fits.

        >>> EnglishFormatter().nice_number(5.75)
        'five and three quarters'
        >>> EnglishFormatter().nice_number(5.75, speech=False)
        '5 3/4'
        """
        value = _exact(number)
        mixed = _mixed_fraction(abs(value), denominators)
        if mixed is None:
            return self.pronounce_number(value) if speech else _digits(value, 2)

        whole, numerator, denominator = mixed
        negative = value < 0 and (whole or numerator)
        if not speech:
            if numerator == 0:
                text = str(whole)
            elif whole == 0:
                text = f"{numerator}/{denominator}"
            else:
                text = f"{whole} {numerator}/{denominator}"
            return f"-{text}" if negative else text

        if numerator == 0:
            text = self._pronounce_integer(whole, True, False)
        elif whole == 0:
            text = f"{self._pronounce_integer(numerator, True, False)} {self._denominator_word(denominator, numerator > 1)}"
        else:
            # "five and a half", "two and a quarter", but "one and one third"
            if numerator == 1 and self.vocabulary.fraction_word(denominator) is not None:
                count = self.fraction_article
            else:
                count = self._pronounce_integer(numerator, True, False)
            fraction = f"{count} {self._denominator_word(denominator, numerator > 1)}"
            text = f"{self._pronounce_integer(whole, True, False)} {self.mixed_connector} {fraction}"
        return f"{self.negative_word} {text}" if negative else text

    def _denominator_word(self, denominator: int, plural: bool) -> str:
        word = self.vocabulary.fraction_word(denominator, plural)
        if word is not None:
            return word
        word = self._pronounce_integer(denominator, True, True)
        return word + self.vocabulary.plural_suffix if plural else word

    def _pronounce_integer(self, number: int, short_scale: bool, ordinal: bool) -> str:
        if number == 0:
            return self.vocabulary.cardinal_word(0)

        # Long scale names every 10^6 step, with "thousand" inside each group
        group_exponent = 3 if short_scale else 6
        parts: list[list[_Word]] = []
        groups = list(split_by_modulus(number, 10 ** group_exponent))
        for index in reversed(range(len(groups))):
            group = groups[index]
            if group == 0:
                continue
            exponent = index * group_exponent
            if exponent and self.vocabulary.magnitude_word(exponent, short_scale) is None:
                # beyond the named magnitudes
                return str(number)

            thousands, rest = divmod(group, 1000)
            if thousands:
                part = _below_thousand(thousands, self.hundred_connector) + [("magnitude", 3)]
                if not rest and exponent:
                    part.append(("magnitude", exponent))
                parts.append(part)
            if rest:
                part = _below_thousand(rest, self.hundred_connector)
                if exponent:
                    part.append(("magnitude", exponent))
                parts.append(part)

        if ordinal:
            kind, key = parts[-1][-1]
            parts[-1][-1] = ("ordinal_" + kind, key)

        text_parts = [" ".join(self._word(word, short_scale) for word in part) for part in parts]
        text = text_parts[0]
        for part, text_part in zip(parts[1:], text_parts[1:]):
            # "one thousand and five", but "one thousand, two hundred"
            is_last = part is parts[-1]
            small = len(part) <= 2 and all(kind.endswith("number") for kind, _ in part)
            separator = f" {self.hundred_connector} " if is_last and small else ", "
            text += separator + text_part
        return text

    def _word(self, word: _Word, short_scale: bool) -> str:
        kind, key = word
        vocabulary = self.vocabulary
        if kind == "number":
            return vocabulary.cardinal_word(key)
        if kind == "ordinal_number":
            return vocabulary.ordinal_word(key)
        if kind in ("hundred", "magnitude"):
            return vocabulary.magnitude_word(key, short_scale)
        if kind in ("ordinal_hundred", "ordinal_magnitude"):
            return vocabulary.magnitude_word(key, short_scale, ordinal=True)
        return key

    # ------------------------------------------------------------------
    # Durations
    # ------------------------------------------------------------------

    def nice_duration(self, duration: Union[Duration, timedelta, Real], speech: bool = True) -> str:
        """Format a duration in days, hours, minutes and seconds.

        Sub-second parts are dropped.

        >>> EnglishFormatter().nice_duration(Duration.of(seconds=86_400 + 61))
        'one day one minute one second'
        >>> EnglishFormatter().nice_duration(Duration.of(seconds=86_400 + 61), speech=False)
        '1d 0:01:01'
        """
        if isinstance(duration, timedelta):
            duration = Duration.from_timedelta(duration)
        elif not isinstance(duration, Duration):
            duration = Duration.from_seconds(duration)

        total = abs(duration.total_nanos) // NANOS_PER_SECOND
        days, rest = divmod(total, _SECONDS_PER_DAY)
        hours, rest = divmod(rest, 3600)
        minutes, seconds = divmod(rest, 60)

        if speech:
            spoken = []
            for count, unit in ((days, "day"), (hours, "hour"), (minutes, "minute"), (seconds, "second")):
                if count:
                    spoken.append(f"{self.pronounce_number(count)} {self._unit_word(unit, count)}")
            text = " ".join(spoken) or f"{self.pronounce_number(0)} {self._unit_word('second', 0)}"
            negative = self.negative_word + " "
        else:
            if days:
                text = f"{days}d {hours}:{minutes:02d}:{seconds:02d}"
            elif hours:
                text = f"{hours}:{minutes:02d}:{seconds:02d}"
            else:
                text = f"{minutes}:{seconds:02d}"
            negative = "-"

        if duration.is_negative() and total:
            text = negative + text
        return text

    def _unit_word(self, unit: str, count: int) -> str:
        singular, plural = self.duration_units.get(unit, (unit, unit + self.vocabulary.plural_suffix))
        return singular if count == 1 else plural


def _exact(number: Number) -> Fraction:
    if isinstance(number, float):
        if not math.isfinite(number):
            raise ValueError(f"Cannot pronounce {number}")
        return Fraction(repr(number))
    return Fraction(number)


def _digits(value: Fraction, places: int) -> str:
    """Decimal digits rounded half up, without final zeros."""
    places = decimal_places_no_final_zeros(value, places)
    scaled = round_to_long(abs(value) * 10 ** places)
    integer, decimals = divmod(scaled, 10 ** places)
    text = f"{integer}.{decimals:0{places}d}" if places else str(integer)
    return f"-{text}" if value < 0 and scaled else text


def _mixed_fraction(value: Fraction, denominators: Iterable[int]) -> Optional[tuple[int, int, int]]:
    """(whole, numerator, denominator) for a non-negative ``value``, None if no denominator fits."""
    whole = math.floor(value)
    fraction = value - whole
    for denominator in denominators:
        if denominator < 1:
            raise ValueError(f"Denominators must be positive, got {denominator}")
        if is_whole(fraction * denominator):
            numerator = round_to_long(fraction * denominator)
            if numerator == denominator:
                return whole + 1, 0, 1
            return whole, numerator, denominator
    return None


def _below_thousand(number: int, connector: str) -> list[_Word]:
    words: list[_Word] = []
    hundreds, rest = divmod(number, 100)
    if hundreds:
        words += [("number", hundreds), ("hundred", 2)]
    if rest:
        if hundreds:
            words.append(("text", connector))
        if rest < 20:
            words.append(("number", rest))
        else:
            tens, units = divmod(rest, 10)
            words.append(("number", tens * 10))
            if units:
                words.append(("number", units))
    return words
