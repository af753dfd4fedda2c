#!/usr/bin/env python3
"""Number-word grammar: cardinals, ordinals, fractions, decimals and signs.

The extractor reads from a :class:`TokenStream` and either returns an
:class:`ExtractedNumber` with the cursor moved past it, or returns None with
the cursor untouched. Each grammar rule is an attempt method that is free to
consume tokens; the caller resets the stream when an attempt fails.
"""
from __future__ import annotations

from dataclasses import dataclass
from fractions import Fraction
from typing import Optional

from spoken_numbers.parser.token_stream import TokenStream
from spoken_numbers.vocabulary import NumberClass, Vocabulary, WordEntry, get_vocabulary

__all__ = ["ExtractedNumber", "NumberExtractor", "extract_number"]

_BELOW_HUNDRED = (NumberClass.DIGIT, NumberClass.TEEN, NumberClass.TENS)

# (value, ordinal) pair produced by the sub-rules
_Part = tuple[Fraction, bool]


@dataclass(frozen=True)
class ExtractedNumber:
    """A number found in the token stream, spanning tokens ``[start, end)``."""

    value: Fraction
    start: int
    end: int
    ordinal: bool = False
    approximate: bool = False

    def __post_init__(self) -> None:
        if self.end <= self.start:
            raise ValueError(f"Empty number span [{self.start}, {self.end})")

    @property
    def is_integer(self) -> bool:
        return self.value.denominator == 1

    @property
    def number(self) -> int | float:
        """The value as a plain int when integral, else as a float."""
        if self.is_integer:
            return int(self.value)
        return float(self.value)


class NumberExtractor:
    """Extracts one number at a time from a token stream.

    Args:
        stream: cursor to read from, shared with the caller
        short_scale: "billion" is 1e9 when True and 1e12 when False
        vocabulary: word table, English by default
        prefer_ordinal: read a lone ambiguous word ("second") as an ordinal
    """

    def __init__(
        self,
        stream: TokenStream,
        short_scale: bool = True,
        vocabulary: Optional[Vocabulary] = None,
        prefer_ordinal: bool = False,
    ):
        self.stream = stream
        self.short_scale = short_scale
        self.vocabulary = vocabulary or get_vocabulary()
        self.prefer_ordinal = prefer_ordinal

    def extract_one_number(self) -> Optional[ExtractedNumber]:
        return self.extract_number(ordinals_allowed=True)

    def extract_one_number_no_ordinal(self) -> Optional[ExtractedNumber]:
        return self.extract_number(ordinals_allowed=False)

    def extract_number(self, ordinals_allowed: bool = True) -> Optional[ExtractedNumber]:
        """Extract the number starting at the cursor, or return None and leave the cursor alone."""
        start = self.stream.mark()
        result = self._signed(ordinals_allowed)
        if result is None:
            self.stream.reset(start)
            return None
        value, ordinal, approximate = result
        return ExtractedNumber(value, start, self.stream.position, ordinal, approximate)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _entry(self, offset: int = 0) -> Optional[WordEntry]:
        return self.vocabulary.lookup(self.stream.peek(offset))

    def _exponent(self, entry: Optional[WordEntry]) -> Optional[int]:
        """Exponent of a singular magnitude word ("thousand", "millionth"), None otherwise."""
        if entry is None or entry.plural or entry.number_class is not NumberClass.MAGNITUDE:
            return None
        return entry.exponent(self.short_scale)

    def _is_cardinal_hundred(self, entry: Optional[WordEntry]) -> bool:
        return entry is not None and entry.is_cardinal and entry.number_class is NumberClass.HUNDRED

    def _is_cardinal_magnitude(self, entry: Optional[WordEntry]) -> bool:
        return entry is not None and entry.is_cardinal and self._exponent(entry) is not None

    def _singular_denominator(self, entry: Optional[WordEntry]) -> Optional[int]:
        if entry is None or entry.plural:
            return None
        return self.vocabulary.denominator(entry, self.short_scale)

    # ------------------------------------------------------------------
    # Grammar
    # ------------------------------------------------------------------

    def _signed(self, ordinals_allowed: bool) -> Optional[tuple[Fraction, bool, bool]]:
        stream = self.stream
        entry = self._entry()
        token = stream.peek()

        negative = False
        if entry is not None and entry.negative_marker:
            negative = True
        elif (
            token is not None
            and token.is_symbol
            and token.text == "-"
            and not stream.is_joined(0)
            and stream.peek(1) is not None
            and stream.peek(1).is_number
            and stream.is_joined(1)
        ):
            negative = True

        if not negative:
            return self._unsigned(ordinals_allowed)

        stream.advance()
        result = self._unsigned(ordinals_allowed=False)
        if result is None:
            return None
        value, ordinal, approximate = result
        return -value, ordinal, approximate

    def _unsigned(self, ordinals_allowed: bool) -> Optional[tuple[Fraction, bool, bool]]:
        start = self.stream.mark()

        approximation = self._approximator()
        if approximation is not None:
            return approximation, False, True
        self.stream.reset(start)

        fraction = self._leading_fraction()
        if fraction is not None:
            return fraction, False, False
        self.stream.reset(start)

        decimal = self._decimal_part()
        if decimal is not None:
            return decimal, False, False
        self.stream.reset(start)

        number = self._composite(ordinals_allowed)
        if number is not None:
            value, ordinal = number
            return value, ordinal, False
        return None

    def _approximator(self) -> Optional[Fraction]:
        """[a] couple | pair | few"""
        entry = self._entry()
        if entry is not None and entry.article:
            self.stream.advance()
            entry = self._entry()
        if entry is None or entry.approximator is None:
            return None
        self.stream.advance()
        return Fraction(entry.approximator)

    def _leading_fraction(self) -> Optional[Fraction]:
        """half | quarter | a half | a third | a hundredth | half a million"""
        stream = self.stream
        entry = self._entry()
        if entry is None:
            return None

        if entry.article:
            denominator = self._singular_denominator(self._entry(1))
            if denominator is None:
                return None
            stream.skip(2)
            return Fraction(1, denominator)

        if entry.plural or entry.number_class is not None or entry.fraction_denominator is None:
            return None
        stream.advance()
        value = Fraction(1, entry.fraction_denominator)

        # half a million
        article = self._entry()
        if article is not None and article.article:
            magnitude = self._entry(1)
            if self._is_cardinal_magnitude(magnitude) or self._is_cardinal_hundred(magnitude):
                stream.skip(2)
                value *= 10 ** magnitude.exponent(self.short_scale)
        return value

    def _composite(self, ordinals_allowed: bool) -> Optional[_Part]:
        """Whole number, then a decimal part, a fraction denominator or "and a half"."""
        whole = self._whole_number(ordinals_allowed)
        if whole is None:
            return None
        value, ordinal = whole
        if ordinal or value.denominator != 1:
            return whole

        decimal = self._decimal_part(value)
        if decimal is not None:
            return decimal, False

        fraction = self._fraction_suffix(value)
        if fraction is not None:
            return fraction, False

        mixed = self._mixed_fraction()
        if mixed is not None:
            return value + mixed, False
        return whole

    def _decimal_part(self, whole: Fraction = Fraction(0)) -> Optional[Fraction]:
        """point|dot <digit words or digit literals> [magnitude]"""
        stream = self.stream
        start = stream.mark()
        entry = self._entry()
        if entry is None or not entry.decimal_marker:
            return None
        stream.advance()

        digits = ""
        while not stream.finished:
            token = stream.peek()
            entry = self._entry()
            if entry is not None and entry.is_cardinal and entry.number_class is NumberClass.DIGIT:
                digits += str(entry.value)
            elif token.is_number and token.text.isdigit():
                digits += token.text
            else:
                break
            stream.advance()

        if not digits:
            stream.reset(start)
            return None

        value = whole + Fraction(int(digits), 10 ** len(digits))
        exponent = self._exponent(self._entry())
        if exponent is not None and self._entry().is_cardinal:
            stream.advance()
            value *= 10 ** exponent
        return value

    def _fraction_suffix(self, numerator: Fraction) -> Optional[Fraction]:
        """one tenth | two tenths | three quarters | one billionth"""
        entry = self._entry()
        if entry is None:
            return None
        denominator = self.vocabulary.denominator(entry, self.short_scale)
        if denominator is None:
            return None
        if not entry.plural and numerator != 1:
            return None
        self.stream.advance()
        return numerator / denominator

    def _mixed_fraction(self) -> Optional[Fraction]:
        """and a half | and three quarters"""
        stream = self.stream
        start = stream.mark()
        entry = self._entry()
        if entry is None or not entry.connector:
            return None
        stream.advance()

        after_connector = stream.mark()
        fraction = self._leading_fraction()
        if fraction is None:
            stream.reset(after_connector)
            numerator = self._sub_hundred(ordinals_allowed=False, standalone=False)
            if numerator is not None:
                fraction = self._fraction_suffix(numerator[0])

        if fraction is None or not 0 < fraction < 1:
            stream.reset(start)
            return None
        return fraction

    def _whole_number(self, ordinals_allowed: bool) -> Optional[_Part]:
        """Groups below a thousand joined by decreasing magnitude words."""
        stream = self.stream
        start = stream.mark()

        juxtaposed = self._juxtaposed(ordinals_allowed)
        if juxtaposed is not None:
            return juxtaposed
        stream.reset(start)

        first = self._first_group(ordinals_allowed)
        if first is None:
            return None
        current, ordinal = first

        # (value, exponent) of every magnitude group read so far, exponents decreasing
        pieces: list[tuple[Fraction, int]] = []
        group_start = start
        while not ordinal:
            entry = self._entry()
            exponent = self._exponent(entry)
            if exponent is None:
                break
            # "one thousandth" is a fraction, left for the denominator rule
            if entry.ordinal and (not ordinals_allowed or (not pieces and current == 1)):
                break

            # a larger magnitude scales the smaller groups before it: "two thousand million"
            keep = len(pieces)
            while keep and pieces[keep - 1][1] < exponent:
                keep -= 1
            if keep and pieces[keep - 1][1] == exponent:
                # "one million two million" is two numbers
                stream.reset(group_start)
                current = Fraction(0)
                break
            scaled = (current + sum(value for value, _ in pieces[keep:])) * 10 ** exponent
            del pieces[keep:]
            pieces.append((scaled, exponent))

            stream.advance()
            current = Fraction(0)
            ordinal = entry.ordinal
            if ordinal:
                break

            group_start = stream.mark()
            if self._exponent(self._entry()) is not None:
                continue
            group = self._next_group(ordinals_allowed)
            if group is None:
                stream.reset(group_start)
                break
            current, ordinal = group

        return sum((value for value, _ in pieces), current), ordinal

    def _next_group(self, ordinals_allowed: bool) -> Optional[_Part]:
        """[and | ,] <words below a thousand> after a magnitude word."""
        stream = self.stream
        token = stream.peek()
        entry = self._entry()
        if token is None:
            return None
        if (entry is not None and entry.connector) or (token.is_symbol and token.text == ","):
            stream.advance()
        return self._sub_thousand(ordinals_allowed)

    def _first_group(self, ordinals_allowed: bool) -> Optional[_Part]:
        """A digit literal (maybe "18th" or "5 hundred") or words below a thousand."""
        stream = self.stream
        token = stream.peek()
        if token is None:
            return None
        if not token.is_number:
            return self._sub_thousand(ordinals_allowed)

        stream.advance()
        value = token.value
        if not token.is_integer:
            return value, False

        suffix = self._entry()
        if suffix is not None and suffix.ordinal_suffix and stream.is_joined(0):
            if not ordinals_allowed:
                return value, False
            stream.advance()
            return value, True

        if value < 100 and self._is_cardinal_hundred(self._entry()):
            return self._hundreds(value, ordinals_allowed)
        return value, False

    def _sub_thousand(self, ordinals_allowed: bool) -> Optional[_Part]:
        """a hundred | a million | <below hundred> [hundred [and] <below hundred>]"""
        stream = self.stream
        entry = self._entry()
        if entry is None:
            return None

        if entry.article:
            following = self._entry(1)
            if self._is_cardinal_hundred(following):
                stream.advance()
                return self._hundreds(Fraction(1), ordinals_allowed)
            if self._is_cardinal_magnitude(following):
                stream.advance()
                return Fraction(1), False
            return None

        part = self._sub_hundred(ordinals_allowed, standalone=True)
        if part is None:
            return None
        value, ordinal = part
        if ordinal or value == 0:
            return part

        following = self._entry()
        if following is None or following.plural or following.number_class is not NumberClass.HUNDRED:
            return part
        if following.ordinal:
            # "one hundredth" is a fraction, "two hundredth" an ordinal
            if ordinals_allowed and value != 1:
                stream.advance()
                return value * 100, True
            return part
        return self._hundreds(value, ordinals_allowed)

    def _hundreds(self, value: Fraction, ordinals_allowed: bool) -> _Part:
        """Consume "hundred" and an optional "[and] <below hundred>" tail."""
        stream = self.stream
        stream.advance()
        value *= 100

        tail_start = stream.mark()
        entry = self._entry()
        if entry is not None and entry.connector:
            stream.advance()
        tail = self._sub_hundred(ordinals_allowed, standalone=False)
        if tail is None:
            stream.reset(tail_start)
            return value, False
        return value + tail[0], tail[1]

    def _sub_hundred(self, ordinals_allowed: bool, standalone: bool) -> Optional[_Part]:
        """digit | teen | tens [-] [digit], in cardinal or ordinal form."""
        stream = self.stream
        entry = self._entry()
        if entry is None or entry.plural or entry.number_class not in _BELOW_HUNDRED:
            return None

        if entry.ordinal:
            if not self._ordinal_accepted(entry, ordinals_allowed, standalone):
                return None
            stream.advance()
            return Fraction(entry.value), True

        stream.advance()
        value = Fraction(entry.value)
        if entry.number_class is not NumberClass.TENS:
            return value, False

        units_start = stream.mark()
        token = stream.peek()
        if token is not None and token.is_symbol and token.text == "-" and stream.is_joined(0) and stream.is_joined(1):
            stream.advance()
        units = self._entry()
        if (
            units is not None
            and not units.plural
            and units.number_class is NumberClass.DIGIT
            and units.value != 0
            and (not units.ordinal or self._ordinal_accepted(units, ordinals_allowed, standalone=False))
        ):
            stream.advance()
            return value + units.value, units.ordinal

        stream.reset(units_start)
        return value, False

    def _ordinal_accepted(self, entry: WordEntry, ordinals_allowed: bool, standalone: bool) -> bool:
        if not ordinals_allowed:
            return False
        if entry.ambiguous_ordinal and standalone:
            return self.prefer_ordinal
        return True

    def _juxtaposed(self, ordinals_allowed: bool) -> Optional[_Part]:
        """Two adjacent 10..99 word groups read as one number: "seventeen twenty eight"."""
        stream = self.stream

        def starts_group() -> bool:
            entry = self._entry()
            return (
                entry is not None
                and entry.is_cardinal
                and entry.number_class in (NumberClass.TEEN, NumberClass.TENS)
            )

        if not starts_group():
            return None
        high = self._sub_hundred(ordinals_allowed=False, standalone=False)
        if high is None or not starts_group():
            return None
        low = self._sub_hundred(ordinals_allowed, standalone=False)
        if low is None:
            return None

        following = self._entry()
        if following is not None and following.number_class in (NumberClass.HUNDRED, NumberClass.MAGNITUDE):
            return None
        return high[0] * 100 + low[0], low[1]


def extract_number(
    stream: TokenStream,
    short_scale: bool = True,
    ordinals_allowed: bool = True,
    vocabulary: Optional[Vocabulary] = None,
) -> Optional[ExtractedNumber]:
    """Extract the number at the cursor of ``stream``; None (cursor untouched) when there is none."""
    return NumberExtractor(stream, short_scale=short_scale, vocabulary=vocabulary).extract_number(ordinals_allowed)
